"""Startup diagnostics."""
from .module_check import ModuleCheckResult, check_modules, check_routes
from .stripe_check import StripeCheckResult, check_stripe

__all__ = [
    "ModuleCheckResult",
    "StripeCheckResult",
    "check_modules",
    "check_routes",
    "check_stripe",
]
