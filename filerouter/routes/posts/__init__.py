"""Post routes."""
