"""Recipes API: a FastAPI service for recipes backed by MongoDB and Redis."""

__version__ = "0.1.0"
