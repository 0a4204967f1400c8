"""
Health checks for liveness/readiness probes.

Checks:
- Database connectivity
- Stripe configuration and reachability
"""
import asyncio
from typing import Any, Dict, Optional

import stripe
import structlog

from bringit.config import Settings, get_settings
from bringit.database import MongoConnection
from bringit.integrations.stripe_client import (
    StripeConfigurationError,
    build_stripe_client,
    check_stripe_reachability,
)

logger = structlog.get_logger(__name__)


class HealthCheckError(Exception):
    """Raised when health check fails."""

    pass


class HealthCheck:
    """
    Health check service for the backend's dependencies.

    A dependency that is not configured is reported as ``not_configured``
    and does not fail readiness: the server runs on sample data without a
    database and without payments.
    """

    def __init__(
        self,
        connection: Optional[MongoConnection] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.connection = connection
        self.settings = settings or get_settings()

    async def check_database(self) -> Dict[str, Any]:
        """
        Check database connectivity.

        Raises:
            HealthCheckError: If the database is configured but unreachable
        """
        if self.connection is None or not self.settings.mongodb_uri:
            return {"status": "not_configured", "service": "database"}

        if not await self.connection.ping():
            raise HealthCheckError("Database health check failed: not connected")

        return {
            "status": "healthy",
            "service": "database",
            "message": "Database connection successful",
        }

    async def check_stripe(self) -> Dict[str, Any]:
        """
        Check Stripe key validity and API reachability.

        Raises:
            HealthCheckError: If the key is malformed, rejected or Stripe is down
        """
        if not self.settings.stripe_key_present:
            return {"status": "not_configured", "service": "stripe"}

        try:
            client = build_stripe_client(self.settings.stripe_secret_key)
            await asyncio.to_thread(check_stripe_reachability, client)
        except (StripeConfigurationError, stripe.StripeError) as e:
            logger.error("stripe_health_check_failed", error=str(e))
            raise HealthCheckError(f"Stripe health check failed: {e}") from e

        return {
            "status": "healthy",
            "service": "stripe",
            "message": "Stripe API connection successful",
        }

    async def check_all(self) -> Dict[str, Any]:
        """Run all health checks."""
        checks: Dict[str, Any] = {}
        all_healthy = True

        for name, check in (("database", self.check_database), ("stripe", self.check_stripe)):
            try:
                checks[name] = await check()
            except HealthCheckError as e:
                checks[name] = {"status": "unhealthy", "service": name, "error": str(e)}
                all_healthy = False

        return {
            "status": "healthy" if all_healthy else "unhealthy",
            "checks": checks,
        }

    async def liveness(self) -> Dict[str, Any]:
        """Application is running; no dependency checks."""
        return {"status": "alive", "message": "Application is running"}

    async def readiness(self) -> Dict[str, Any]:
        result = await self.check_all()
        if self.connection is not None:
            result["connection"] = self.connection.describe()
        return result
