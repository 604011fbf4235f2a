"""Audit log: append-only recorder and read-only activity API."""
