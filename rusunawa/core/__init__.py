"""Core utilities: exceptions, logging and HTTP middleware."""
