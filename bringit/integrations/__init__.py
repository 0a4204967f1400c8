"""External service integrations."""
from .stripe_client import (
    StripeConfigurationError,
    build_stripe_client,
    check_stripe_reachability,
    is_test_mode,
)

__all__ = [
    "StripeConfigurationError",
    "build_stripe_client",
    "check_stripe_reachability",
    "is_test_mode",
]
