"""Shared pytest fixtures for Passkey Pay tests.

This module provides fixtures for:
- Test settings isolated from the developer's .env
- A scriptable fake of the passkey session SDK
- RPC client mocks and an in-memory local store
- Test data factories

Usage:
    @pytest.mark.unit
    async def test_something(fake_session, payment_request_factory):
        request = payment_request_factory()
        ...
"""

import os
from collections.abc import Generator
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from solders.pubkey import Pubkey

from passkeypay.config.settings import Settings, get_settings
from passkeypay.core.exceptions import AccountNotFoundError
from passkeypay.models.wallet import TokenAmount
from passkeypay.services.solana.rpc_client import SolanaRPCClient
from passkeypay.services.storage.flags import CheckedWalletRegistry, SessionHint
from passkeypay.services.storage.kv_store import MemoryStore
from tests.factories.payment import (
    PaymentRequestFactory,
    TransactionRecordFactory,
    generate_solana_address,
)
from tests.support.fake_session import FakePasskeySession

# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Point every setting at test values and restore the env afterwards."""
    original_env = os.environ.copy()

    os.environ["PASSKEYPAY_ENV"] = "test"
    os.environ["SOLANA_RPC_URL"] = "https://rpc.test.local"
    os.environ["SOLANA_NETWORK"] = "devnet"
    os.environ.pop("STORAGE_PATH", None)
    get_settings.cache_clear()

    yield

    os.environ.clear()
    os.environ.update(original_env)
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with a short reset window so timer tests stay fast."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        solana_rpc_url="https://rpc.test.local",
        payment_reset_seconds=0.05,
        balance_poll_seconds=0.01,
    )


# =============================================================================
# Addresses
# =============================================================================


@pytest.fixture
def sender_address() -> str:
    return generate_solana_address()


@pytest.fixture
def merchant_address() -> str:
    return generate_solana_address()


# =============================================================================
# Local store
# =============================================================================


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def checked_wallets(memory_store: MemoryStore, settings: Settings) -> CheckedWalletRegistry:
    return CheckedWalletRegistry(memory_store, settings.checked_wallets_key)


@pytest.fixture
def session_hint(memory_store: MemoryStore, settings: Settings) -> SessionHint:
    return SessionHint(memory_store, settings.session_hint_key)


# =============================================================================
# Mock External APIs
# =============================================================================


@pytest.fixture
def mock_rpc() -> AsyncMock:
    """Mock Solana RPC client.

    Defaults: every account exists, 5 USDC, 1 SOL.
    """
    mock = AsyncMock(spec=SolanaRPCClient)
    mock.get_account_info.return_value = {"lamports": 2039280, "owner": "token"}
    mock.get_account.return_value = {"lamports": 2039280, "owner": "token"}
    mock.get_token_account_balance.return_value = TokenAmount(
        amount=5_000_000, decimals=6, ui_amount=Decimal("5")
    )
    mock.get_balance.return_value = 1_000_000_000
    return mock


@pytest.fixture
def rpc_without_accounts(mock_rpc: AsyncMock) -> AsyncMock:
    """RPC mock where no token account exists."""
    mock_rpc.get_account_info.return_value = None

    async def _missing(address: str) -> dict:
        raise AccountNotFoundError(address)

    mock_rpc.get_account.side_effect = _missing
    return mock_rpc


@pytest.fixture
def fake_session(sender_address: str) -> FakePasskeySession:
    """Session already connected to `sender_address`."""
    return FakePasskeySession(wallet_address=sender_address)


@pytest.fixture
def disconnected_session(sender_address: str) -> FakePasskeySession:
    """Session that connects to `sender_address` on demand."""
    return FakePasskeySession(address_on_connect=sender_address)


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def payment_request_factory() -> type[PaymentRequestFactory]:
    return PaymentRequestFactory


@pytest.fixture
def transaction_record_factory() -> type[TransactionRecordFactory]:
    return TransactionRecordFactory


@pytest.fixture
def usdc_mint(settings: Settings) -> Pubkey:
    return Pubkey.from_string(settings.usdc_mint)
