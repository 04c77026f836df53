"""Configuration module with YAML and environment variable support."""

from .settings import SessionBackend, Settings, StoreBackend, get_settings


__all__ = [
    "SessionBackend",
    "Settings",
    "StoreBackend",
    "get_settings",
]
