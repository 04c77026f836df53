"""Core application wiring: configuration, context, errors and middleware."""
