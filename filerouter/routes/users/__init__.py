"""User routes."""
