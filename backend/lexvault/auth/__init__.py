"""Authentication: token verification and principal resolution."""
