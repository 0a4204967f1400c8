"""
Unit tests for dependency health checks.
"""
from typing import Callable
from unittest.mock import patch

import pytest
import stripe

from bringit.config import Settings
from bringit.database import MongoConnection
from bringit.monitoring.health import HealthCheck, HealthCheckError


class TestHealthCheck:
    """Test suite for HealthCheck."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unconfigured_dependencies_are_healthy(self, settings: Settings) -> None:
        result = await HealthCheck(None, settings).readiness()

        assert result["status"] == "healthy"
        assert result["checks"]["database"]["status"] == "not_configured"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_configured_but_disconnected_database_is_unhealthy(
        self, settings: Settings, make_connection: Callable[..., MongoConnection]
    ) -> None:
        configured = settings.model_copy(update={"mongodb_uri": "mongodb://db.test:27017/shop"})
        health = HealthCheck(make_connection(), configured)

        with pytest.raises(HealthCheckError):
            await health.check_database()

        result = await health.check_all()
        assert result["status"] == "unhealthy"
        assert result["checks"]["database"]["status"] == "unhealthy"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_stripe_key_is_unhealthy(self, settings: Settings) -> None:
        configured = settings.model_copy(update={"stripe_secret_key": "not-a-key"})

        result = await HealthCheck(None, configured).check_all()

        assert result["status"] == "unhealthy"
        assert "Invalid Stripe secret key format" in result["checks"]["stripe"]["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reachable_stripe_is_healthy(self, settings: Settings) -> None:
        configured = settings.model_copy(update={"stripe_secret_key": "sk_test_123"})

        with patch("bringit.monitoring.health.check_stripe_reachability") as reach:
            result = await HealthCheck(None, configured).check_stripe()

        assert result["status"] == "healthy"
        reach.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unreachable_stripe_is_unhealthy(self, settings: Settings) -> None:
        configured = settings.model_copy(update={"stripe_secret_key": "sk_test_123"})

        with patch(
            "bringit.monitoring.health.check_stripe_reachability",
            side_effect=stripe.APIConnectionError("down"),
        ):
            with pytest.raises(HealthCheckError, match="Stripe health check failed"):
                await HealthCheck(None, configured).check_stripe()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_liveness(self, settings: Settings) -> None:
        assert (await HealthCheck(None, settings).liveness())["status"] == "alive"
