"""Database connection package."""
from .connection import (
    ConnectionState,
    DatabaseConnectionError,
    MongoConnection,
    redact_uri,
)

__all__ = [
    "ConnectionState",
    "DatabaseConnectionError",
    "MongoConnection",
    "redact_uri",
]
