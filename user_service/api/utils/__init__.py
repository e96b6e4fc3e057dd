"""API utilities package."""
