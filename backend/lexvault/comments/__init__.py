"""Review comments on documents."""
