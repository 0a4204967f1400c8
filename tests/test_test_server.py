"""
Integration tests for the minimal smoke-test server.
"""
import asyncio
from typing import Any, Callable, List

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError
from structlog.testing import capture_logs

from bringit.api import create_test_app
from bringit.config import Settings
from bringit.database import MongoConnection


class TestSmokeServer:
    """Test suite for the test server."""

    @pytest.mark.integration
    def test_root_says_hello_when_database_is_down(
        self, settings: Settings, make_connection: Callable[..., MongoConnection]
    ) -> None:
        connection = make_connection(
            error=ServerSelectionTimeoutError("localhost:27017: Connection refused")
        )
        app = create_test_app(settings, connection=connection)

        with TestClient(app) as client:
            response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello"
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.integration
    def test_root_says_hello_when_database_is_up(
        self, settings: Settings, make_connection: Callable[..., MongoConnection]
    ) -> None:
        app = create_test_app(settings, connection=make_connection())

        with TestClient(app) as client:
            response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello"

    @pytest.mark.integration
    def test_default_uri_is_logged_and_attempted(
        self,
        settings: Settings,
        make_connection: Callable[..., MongoConnection],
        mongo_clients: List[Any],
    ) -> None:
        connection = make_connection(uri=settings.effective_mongodb_uri)
        app = create_test_app(settings, connection=connection)

        async def wait_for_connection() -> bool:
            return await app.state.db_task

        with capture_logs() as logs:
            with TestClient(app) as client:
                client.get("/")
                connected = client.portal.call(wait_for_connection)

        connecting = [log for log in logs if log["event"] == "test_server_connecting"]
        assert connecting[0]["uri"] == "mongodb://localhost:27017/rbs-grocery"
        assert mongo_clients[0].uri == "mongodb://localhost:27017/rbs-grocery"
        assert connected is True
        assert any(log["event"] == "database_connected" for log in logs)

    @pytest.mark.integration
    def test_security_headers_present(
        self, settings: Settings, make_connection: Callable[..., MongoConnection]
    ) -> None:
        app = create_test_app(settings, connection=make_connection())

        with TestClient(app) as client:
            response = client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert "Content-Security-Policy" in response.headers

    @pytest.mark.integration
    def test_malformed_uri_is_logged_and_server_keeps_serving(self, settings: Settings) -> None:
        app = create_test_app(
            settings, connection=MongoConnection("mongodb://localhost:notaport/rbs-grocery")
        )

        async def wait_for_connection() -> bool:
            return await app.state.db_task

        with capture_logs() as logs:
            with TestClient(app) as client:
                response = client.get("/")
                connected = client.portal.call(wait_for_connection)

        assert response.text == "Hello"
        assert connected is False
        assert any(log["event"] == "database_connection_failed" for log in logs)

    @pytest.mark.integration
    def test_shutdown_cancels_pending_connection_and_closes_client(
        self,
        settings: Settings,
        hanging_connection: MongoConnection,
        ping_started: asyncio.Event,
        mongo_clients: List[Any],
    ) -> None:
        app = create_test_app(settings, connection=hanging_connection)

        with TestClient(app) as client:
            client.portal.call(ping_started.wait)
            assert client.get("/").text == "Hello"

        assert app.state.db_task.cancelled()
        assert mongo_clients[0].closed
