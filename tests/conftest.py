"""
Pytest configuration and fixtures for the grocery backend tests.
"""
import asyncio
from types import SimpleNamespace
from typing import Any, Callable, List, Optional

import pytest
import structlog

from bringit.config import DEFAULT_MONGODB_URI, Settings
from bringit.database import MongoConnection


@pytest.fixture(autouse=True)
def reset_structlog() -> Any:
    """Undo any logging configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Test settings independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        stripe_secret_key=None,
        mongodb_uri=None,
        app_name="bringit-test",
        app_env="test",
        log_level="DEBUG",
        frontend_dev_url=None,
    )


class FakeAdmin:
    """Stands in for ``client.admin``."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.commands: List[str] = []

    async def command(self, name: str) -> dict:
        self.commands.append(name)
        if self.error is not None:
            raise self.error
        return {"ok": 1.0}


class FakeMongoClient:
    """Minimal async MongoDB client double."""

    def __init__(self, uri: str, error: Optional[Exception] = None, **options: Any) -> None:
        self.uri = uri
        self.options = options
        self.admin = FakeAdmin(error)
        self.closed = False

    def get_default_database(self, default: Optional[str] = None) -> SimpleNamespace:
        path = self.uri.rsplit("/", 1)[-1].split("?", 1)[0]
        return SimpleNamespace(name=path or default)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def mongo_clients() -> List[FakeMongoClient]:
    """Every fake client created by ``make_connection``."""
    return []


@pytest.fixture
def make_connection(
    mongo_clients: List[FakeMongoClient],
) -> Callable[..., MongoConnection]:
    """Build a MongoConnection backed by fake clients."""

    def _make(
        uri: str = DEFAULT_MONGODB_URI, error: Optional[Exception] = None
    ) -> MongoConnection:
        def factory(client_uri: str, **options: Any) -> FakeMongoClient:
            client = FakeMongoClient(client_uri, error=error, **options)
            mongo_clients.append(client)
            return client

        return MongoConnection(uri, client_factory=factory)

    return _make


class HangingAdmin:
    """``client.admin`` whose ping never completes, like a blackholed host."""

    def __init__(self, started: asyncio.Event) -> None:
        self.started = started

    async def command(self, name: str) -> dict:
        self.started.set()
        await asyncio.Event().wait()
        return {"ok": 1.0}


@pytest.fixture
def ping_started() -> asyncio.Event:
    """Set once a hanging client has begun its ping."""
    return asyncio.Event()


@pytest.fixture
def hanging_connection(
    mongo_clients: List[FakeMongoClient], ping_started: asyncio.Event
) -> MongoConnection:
    """A MongoConnection stuck in server selection."""

    def factory(client_uri: str, **options: Any) -> FakeMongoClient:
        client = FakeMongoClient(client_uri, **options)
        client.admin = HangingAdmin(ping_started)
        mongo_clients.append(client)
        return client

    return MongoConnection(DEFAULT_MONGODB_URI, client_factory=factory)
