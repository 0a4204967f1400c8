"""
Stripe client construction and reachability checks.

Implements:
- Secret key format validation
- Client construction from settings
- Retried reachability probe for readiness checks
"""
from typing import Any, Optional

import stripe
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger(__name__)

VALID_KEY_PREFIXES = ("sk_test_", "sk_live_", "rk_test_", "rk_live_")

TRANSIENT_ERRORS = (
    stripe.APIConnectionError,
    stripe.APIError,
    stripe.RateLimitError,
)


class StripeConfigurationError(Exception):
    """Raised when the Stripe key is missing, malformed or rejected."""

    pass


def is_test_mode(secret_key: str) -> bool:
    """Check if the key belongs to Stripe test mode."""
    return secret_key.startswith(("sk_test_", "rk_test_"))


def build_stripe_client(secret_key: Optional[str]) -> stripe.StripeClient:
    """
    Construct a Stripe client for the given secret key.

    Args:
        secret_key: Stripe secret or restricted key

    Returns:
        stripe.StripeClient: Configured client

    Raises:
        StripeConfigurationError: If the key is missing or malformed
    """
    if not secret_key:
        raise StripeConfigurationError("STRIPE_SECRET_KEY is missing")
    if not secret_key.startswith(VALID_KEY_PREFIXES):
        raise StripeConfigurationError(
            "Invalid Stripe secret key format. Must start with 'sk_test_' or 'sk_live_'"
        )

    client = stripe.StripeClient(secret_key)
    logger.info("stripe_client_initialized", test_mode=is_test_mode(secret_key))
    return client


@retry(
    retry=retry_if_exception_type(TRANSIENT_ERRORS),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    reraise=True,
)
def _list_one_customer(client: stripe.StripeClient) -> Any:
    return client.customers.list(params={"limit": 1})


def check_stripe_reachability(client: stripe.StripeClient) -> None:
    """
    Make a minimal authenticated API call.

    Transient failures are retried with exponential backoff.

    Raises:
        StripeConfigurationError: If the key is rejected
        stripe.StripeError: If Stripe stays unreachable after retries
    """
    try:
        _list_one_customer(client)
    except stripe.AuthenticationError as e:
        logger.error("stripe_authentication_failed", error=str(e))
        raise StripeConfigurationError(f"Stripe rejected the secret key: {e}") from e
