"""Public Invoice Service API routes."""
