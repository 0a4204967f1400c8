"""
Tests for the Stripe startup diagnostic.
"""
import io
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from bringit.diagnostics import check_stripe


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


class TestStripeCheck:
    """Test suite for check_stripe."""

    @pytest.mark.unit
    def test_missing_key_reports_false_and_skips_client(self) -> None:
        out, buffer = _console()
        fake_stripe = SimpleNamespace(StripeClient=MagicMock())

        result = check_stripe(secret_key="", loader=lambda name: fake_stripe, out=out)

        output = buffer.getvalue()
        assert result.module_loaded
        assert not result.key_present
        assert not result.client_initialized
        assert result.error is None
        assert "Stripe Key present: false" in output
        assert "STRIPE_SECRET_KEY is missing!" in output
        fake_stripe.StripeClient.assert_not_called()

    @pytest.mark.unit
    def test_missing_key_read_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Any
    ) -> None:
        monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
        monkeypatch.chdir(tmp_path)
        out, buffer = _console()

        result = check_stripe(out=out)

        assert not result.key_present
        assert not result.ok
        assert "Stripe Key present: false" in buffer.getvalue()

    @pytest.mark.unit
    def test_key_from_environment_builds_client(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Any
    ) -> None:
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_from_env")
        monkeypatch.chdir(tmp_path)
        out, buffer = _console()
        fake_stripe = SimpleNamespace(StripeClient=MagicMock())

        result = check_stripe(loader=lambda name: fake_stripe, out=out)

        assert result.key_present
        assert result.client_initialized
        fake_stripe.StripeClient.assert_called_once_with("sk_test_from_env")
        output = buffer.getvalue()
        assert "Stripe Key present: true" in output
        assert "Stripe initialized." in output

    @pytest.mark.unit
    def test_real_library_constructs_client(self) -> None:
        out, buffer = _console()

        result = check_stripe(secret_key="sk_test_diagnostic", out=out)

        assert result.ok
        assert "Stripe module loaded." in buffer.getvalue()

    @pytest.mark.unit
    def test_load_failure_is_caught(self) -> None:
        out, buffer = _console()

        def broken_loader(name: str) -> Any:
            raise ImportError(f"No module named '{name}'")

        result = check_stripe(secret_key="sk_test_x", loader=broken_loader, out=out)

        assert not result.module_loaded
        assert not result.client_initialized
        assert result.error == "No module named 'stripe'"
        assert "Error:" in buffer.getvalue()

    @pytest.mark.unit
    def test_client_construction_failure_is_caught(self) -> None:
        out, _ = _console()
        fake_stripe = SimpleNamespace(StripeClient=MagicMock(side_effect=ValueError("bad key")))

        result = check_stripe(secret_key="sk_test_x", loader=lambda name: fake_stripe, out=out)

        assert result.key_present
        assert not result.client_initialized
        assert result.error == "bad key"
