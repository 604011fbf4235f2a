"""Read-only user directory."""
