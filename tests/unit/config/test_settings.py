"""Unit tests for application settings."""

from decimal import Decimal

import pytest
import structlog
from pydantic import ValidationError

from passkeypay.config.logging import add_app_context, configure_logging
from passkeypay.config.settings import Settings, get_settings
from passkeypay.constants.network import USDC_MINT_DEVNET


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


@pytest.mark.unit
class TestSettingsDefaults:
    """Defaults match a devnet deployment."""

    def test_payment_defaults(self) -> None:
        settings = _settings()

        assert settings.solana_network == "devnet"
        assert settings.usdc_mint == USDC_MINT_DEVNET
        assert settings.usdc_decimals == 6
        assert settings.min_usdc_threshold == Decimal("0.1")
        assert settings.compute_unit_limit == 300_000
        assert settings.payment_reset_seconds == 5.0

    def test_store_keys(self) -> None:
        settings = _settings()

        assert settings.checked_wallets_key == "lazorkit_usdc_sponsored_wallets"
        assert settings.session_hint_key == "lazorkit_connected"
        assert settings.transactions_key == "lazorkit_transactions"

    def test_rpc_url_from_environment(self) -> None:
        """The test session points SOLANA_RPC_URL at a local host."""
        assert _settings().solana_rpc_url == "https://rpc.test.local"

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestSettingsValidation:
    def test_log_level_must_be_valid(self) -> None:
        for level in ["DEBUG", "INFO", "WARNING", "ERROR"]:
            assert _settings(log_level=level).log_level == level

        with pytest.raises(ValidationError):
            _settings(log_level="INVALID")

    @pytest.mark.parametrize("field", ["solana_rpc_url", "portal_url", "paymaster_url"])
    def test_urls_must_be_http(self, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _settings(**{field: "ws://localhost:8900"})
        assert "URL must start with http:// or https://" in str(exc_info.value)

    def test_merchant_wallet_must_be_an_address(self, merchant_address: str) -> None:
        assert _settings(merchant_wallet=merchant_address).merchant_wallet == merchant_address

        with pytest.raises(ValidationError):
            _settings(merchant_wallet="not-base58-0OIl")

        with pytest.raises(ValidationError, match="Invalid address length"):
            _settings(merchant_wallet="1111")

    def test_compute_unit_limit_is_bounded(self) -> None:
        with pytest.raises(ValidationError):
            _settings(compute_unit_limit=0)

        with pytest.raises(ValidationError):
            _settings(compute_unit_limit=2_000_000)

    def test_negative_threshold_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _settings(min_usdc_threshold=Decimal("-1"))


@pytest.mark.unit
def test_configure_logging_from_settings() -> None:
    configure_logging(_settings(log_level="WARNING"))

    assert structlog.is_configured()
    structlog.reset_defaults()


@pytest.mark.unit
def test_app_context_is_added_to_events() -> None:
    processor = add_app_context("Passkey Pay", "devnet")

    event = processor(None, "info", {"event": "payment_succeeded"})

    assert event == {"event": "payment_succeeded", "app": "Passkey Pay", "network": "devnet"}


@pytest.mark.unit
def test_app_context_keeps_explicit_values() -> None:
    processor = add_app_context("Passkey Pay", "devnet")

    event = processor(None, "info", {"event": "x", "network": "mainnet"})

    assert event["network"] == "mainnet"
