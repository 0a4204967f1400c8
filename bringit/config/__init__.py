"""Configuration package for the grocery backend."""
from .settings import DEFAULT_MONGODB_URI, Settings, get_settings

__all__ = ["DEFAULT_MONGODB_URI", "Settings", "get_settings"]
