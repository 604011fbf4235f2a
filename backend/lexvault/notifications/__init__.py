"""In-app notifications and the sender port used by the assignment workflow."""
