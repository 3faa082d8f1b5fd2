"""Model settings loading."""
