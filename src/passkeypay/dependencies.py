"""Wiring of the payment core around a passkey session."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import structlog

from passkeypay.config.logging import configure_logging
from passkeypay.config.settings import Settings, get_settings
from passkeypay.core.exceptions import ConfigurationError
from passkeypay.models.payment import AssetKind, FeeMode, PaymentRequest, PaymentSnapshot
from passkeypay.services.history.transactions import TransactionHistory
from passkeypay.services.payment.instruction_builder import InstructionBuilder
from passkeypay.services.payment.orchestrator import PaymentOrchestrator
from passkeypay.services.readiness.checker import ReadinessChecker
from passkeypay.services.session.manager import SessionManager
from passkeypay.services.session.protocol import (
    PasskeySession,
    SessionConfig,
    SessionFactory,
)
from passkeypay.services.solana.rpc_client import SolanaRPCClient
from passkeypay.services.storage.flags import CheckedWalletRegistry, SessionHint
from passkeypay.services.storage.kv_store import KeyValueStore, create_store
from passkeypay.services.wallet.balance_monitor import BalanceMonitor

logger = structlog.get_logger(__name__)


@dataclass
class PaymentStack:
    """Every collaborator of one payment surface."""

    settings: Settings
    rpc: SolanaRPCClient
    store: KeyValueStore
    readiness_checker: ReadinessChecker
    builder: InstructionBuilder
    session_manager: SessionManager
    history: TransactionHistory
    orchestrator: PaymentOrchestrator
    balance_monitor: BalanceMonitor

    async def pay_merchant(
        self,
        amount: Decimal,
        asset_kind: AssetKind = AssetKind.STABLE_TOKEN,
        fee_mode: FeeMode = FeeMode.SPONSORED,
        label: str | None = None,
    ) -> PaymentSnapshot | None:
        """Pay the configured merchant wallet.

        Raises:
            ConfigurationError: If MERCHANT_WALLET is not set.
        """
        if self.settings.merchant_wallet is None:
            raise ConfigurationError("Missing required env var: MERCHANT_WALLET")
        request = PaymentRequest(
            amount=amount,
            asset_kind=asset_kind,
            recipient=self.settings.merchant_wallet,
            fee_mode=fee_mode,
            label=label,
        )
        return await self.orchestrator.pay(request)

    async def close(self) -> None:
        """Stop background work and release the RPC client."""
        await self.balance_monitor.stop()
        await self.orchestrator.close()
        await self.rpc.close()


def create_payment_stack(
    session: PasskeySession | SessionFactory,
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    rpc: SolanaRPCClient | None = None,
    configure_logs: bool = True,
) -> PaymentStack:
    """Build the payment core from settings.

    Args:
        session: A connected-or-not SDK session, or a factory building one
            from the configured RPC, portal and paymaster endpoints.
        settings: Defaults to `get_settings()`.
        store: Local store (defaults to the one `storage_path` selects).
        rpc: Shared RPC client (defaults to one on `solana_rpc_url`).
        configure_logs: Configure structlog from settings first.
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings)

    if not isinstance(session, PasskeySession):
        session = session(SessionConfig.from_settings(settings))

    store = store if store is not None else create_store(settings)
    rpc = rpc or SolanaRPCClient(settings.solana_rpc_url)

    checker = ReadinessChecker(
        rpc, CheckedWalletRegistry(store, settings.checked_wallets_key), settings
    )
    builder = InstructionBuilder(rpc, settings)
    session_manager = SessionManager(
        session, SessionHint(store, settings.session_hint_key), checker
    )
    history = TransactionHistory(store, settings.transactions_key)
    orchestrator = PaymentOrchestrator(
        session_manager,
        builder,
        readiness_checker=checker,
        history=history,
        settings=settings,
    )
    monitor = BalanceMonitor(
        session, rpc, checker, poll_interval_seconds=settings.balance_poll_seconds
    )

    logger.info(
        "payment_stack_created",
        rpc_url=settings.solana_rpc_url,
        portal_url=settings.portal_url,
        paymaster_url=settings.paymaster_url,
    )
    return PaymentStack(
        settings=settings,
        rpc=rpc,
        store=store,
        readiness_checker=checker,
        builder=builder,
        session_manager=session_manager,
        history=history,
        orchestrator=orchestrator,
        balance_monitor=monitor,
    )
