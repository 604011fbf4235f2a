"""Document hand-off between users: assignment state machine, service and API."""
