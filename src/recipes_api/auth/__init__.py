"""Session-based authentication.

This package provides:
- Password digests compatible with the stored ``users`` documents
- Session token stores (Redis and in-memory)
- AuthService for sign-in, validation, refresh and sign-out
- FastAPI dependencies that gate mutating endpoints
"""
