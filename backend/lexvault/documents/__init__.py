"""Document directory and lifecycle state machine."""
