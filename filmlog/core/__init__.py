"""Core utilities: errors, logging, security, validation and middleware."""
