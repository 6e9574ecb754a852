"""Core pagination, settings and error types."""
