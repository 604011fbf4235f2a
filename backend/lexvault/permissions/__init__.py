"""Document permission levels, evaluation and grants."""
