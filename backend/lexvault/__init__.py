"""LexVault - document lifecycle and access control for legal offices."""

__version__ = "0.1.0"
