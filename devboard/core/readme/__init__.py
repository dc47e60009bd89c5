"""GitHub profile README generation pipeline."""
