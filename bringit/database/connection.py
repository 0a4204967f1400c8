"""MongoDB connection management."""
import asyncio
from enum import Enum
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import structlog
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from bringit.config import Settings
from bringit.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)

DEFAULT_DATABASE_NAME = "rbs-grocery"


class ConnectionState(str, Enum):
    """Lifecycle of the MongoDB connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


class DatabaseConnectionError(Exception):
    """Raised when the database cannot be reached."""

    pass


def redact_uri(uri: str) -> str:
    """Mask the password component of a connection URI for logging."""
    parts = urlsplit(uri)
    if not parts.password:
        return uri
    netloc = parts.netloc.replace(f":{parts.password}@", ":****@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


class MongoConnection:
    """
    Owns a single async MongoDB client.

    The client is only kept once a ``ping`` succeeds, so ``is_connected``
    reflects a verified server rather than a constructed driver object.
    """

    def __init__(
        self,
        uri: str,
        server_selection_timeout_ms: int = 5000,
        socket_timeout_ms: int = 45000,
        client_factory: Callable[..., Any] = AsyncMongoClient,
    ) -> None:
        self.uri = uri
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.socket_timeout_ms = socket_timeout_ms
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self.state = ConnectionState.DISCONNECTED
        self.database_name: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoConnection":
        return cls(
            settings.effective_mongodb_uri,
            server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
            socket_timeout_ms=settings.mongodb_socket_timeout_ms,
        )

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def client(self) -> Any:
        """
        Get the connected client.

        Raises:
            DatabaseConnectionError: If no connection has been established
        """
        if self._client is None:
            raise DatabaseConnectionError("Database not connected")
        return self._client

    async def connect(self) -> None:
        """
        Open the client and verify the server with a ``ping``.

        Raises:
            DatabaseConnectionError: If the server cannot be selected in time
                or the URI is invalid
        """
        self.state = ConnectionState.CONNECTING
        logger.info("database_connecting", uri=redact_uri(self.uri))

        client = None
        try:
            client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                socketTimeoutMS=self.socket_timeout_ms,
            )
            await client.admin.command("ping")
            database = client.get_default_database(default=DEFAULT_DATABASE_NAME)
        except (PyMongoError, ValueError, TypeError) as e:
            # The URI parser raises ValueError/TypeError for malformed input
            await self._discard(client)
            metrics.record_database_connection("failed")
            raise DatabaseConnectionError(str(e)) from e
        except asyncio.CancelledError:
            await self._discard(client)
            raise

        self._client = client
        self.database_name = database.name
        self.state = ConnectionState.CONNECTED
        metrics.record_database_connection("connected")
        logger.info("database_connected", database=self.database_name)

    async def _discard(self, client: Optional[Any]) -> None:
        self.state = ConnectionState.DISCONNECTED
        if client is not None:
            await client.close()

    async def connect_or_log(self) -> bool:
        """
        Attempt to connect; log and swallow any failure.

        Returns:
            bool: Whether the connection succeeded
        """
        try:
            await self.connect()
        except DatabaseConnectionError as e:
            logger.error("database_connection_failed", error=str(e))
            if "ECONNREFUSED" in str(e) or "Connection refused" in str(e):
                logger.info(
                    "database_connection_hint",
                    hint="Start a local MongoDB server or point MONGODB_URI at MongoDB Atlas",
                )
            return False
        return True

    async def ping(self) -> bool:
        """Check the live connection. Never raises."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("database_ping_failed", error=str(e))
            return False
        return True

    async def close(self) -> None:
        """Close the client if one is open."""
        if self._client is None:
            self.state = ConnectionState.DISCONNECTED
            return
        self.state = ConnectionState.DISCONNECTING
        try:
            await self._client.close()
        finally:
            self._client = None
            self.state = ConnectionState.DISCONNECTED
            logger.info("database_connection_closed")

    def describe(self) -> Dict[str, Any]:
        """Connection status summary for health endpoints."""
        return {
            "status": self.state.value,
            "is_connected": self.is_connected,
            "database": self.database_name,
            "uri": redact_uri(self.uri),
        }
