"""Startup diagnostic for the Stripe payment library and secret key."""
import importlib
from dataclasses import dataclass
from typing import Any, Callable, Optional

import structlog
from rich.console import Console
from rich.markup import escape

from bringit.config import Settings

logger = structlog.get_logger(__name__)

console = Console()


@dataclass
class StripeCheckResult:
    """Outcome of a Stripe diagnostic run."""

    module_loaded: bool = False
    key_present: bool = False
    client_initialized: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.client_initialized and self.error is None


def check_stripe(
    secret_key: Optional[str] = None,
    loader: Callable[[str], Any] = importlib.import_module,
    out: Console = console,
) -> StripeCheckResult:
    """
    Load the Stripe library, check the secret key and build a client.

    The key defaults to ``STRIPE_SECRET_KEY`` read from the environment (or
    ``.env``) at call time. A missing key is reported but is not fatal, and
    any exception raised while loading or initializing is caught and
    recorded on the result.

    Args:
        secret_key: Key to check instead of the configured one
        loader: Module loader, ``importlib.import_module`` by default
        out: Console receiving the human-readable report

    Returns:
        StripeCheckResult: What succeeded
    """
    result = StripeCheckResult()
    try:
        out.print("Checking stripe module...")
        stripe_lib = loader("stripe")
        result.module_loaded = True
        out.print("Stripe module loaded.")

        key = secret_key if secret_key is not None else Settings().stripe_secret_key
        result.key_present = bool(key)
        out.print(f"Stripe Key present: {str(result.key_present).lower()}")

        if not key:
            logger.error("stripe_key_missing", variable="STRIPE_SECRET_KEY")
            out.print("[bold red]STRIPE_SECRET_KEY is missing![/bold red]")
        else:
            stripe_lib.StripeClient(key)
            result.client_initialized = True
            out.print("Stripe initialized.")
    except Exception as e:
        result.error = str(e)
        logger.error("stripe_check_failed", error=str(e), error_type=type(e).__name__)
        out.print(f"[bold red]Error:[/bold red] {escape(str(e))}")

    return result
