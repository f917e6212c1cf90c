"""Background refresh of the connected wallet's balances.

Runs in its own task, independent of any payment attempt. Failures are
logged and never propagate.
"""

from __future__ import annotations

import asyncio
import contextlib

import structlog

from passkeypay.constants.network import SOL_DECIMALS
from passkeypay.models.wallet import WalletBalance
from passkeypay.services.readiness.checker import ReadinessChecker
from passkeypay.services.session.protocol import PasskeySession
from passkeypay.services.solana.accounts import from_base_units
from passkeypay.services.solana.rpc_client import SolanaRPCClient

logger = structlog.get_logger(__name__)


class BalanceMonitor:
    """Polls SOL and USDC balances of the session's wallet."""

    def __init__(
        self,
        session: PasskeySession,
        rpc: SolanaRPCClient,
        readiness_checker: ReadinessChecker,
        poll_interval_seconds: float = 30.0,
    ) -> None:
        self._session = session
        self._rpc = rpc
        self._readiness = readiness_checker
        self._poll_interval = poll_interval_seconds
        self._running = False
        self._task: asyncio.Task[None] | None = None
        self._balance: WalletBalance | None = None

    @property
    def balance(self) -> WalletBalance | None:
        """Latest snapshot, None while disconnected."""
        return self._balance

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the polling loop."""
        if self._running:
            logger.warning("balance_monitor_already_running")
            return

        self._running = True
        self._task = asyncio.create_task(self._monitoring_loop())
        logger.info("balance_monitor_started", poll_interval=self._poll_interval)

    async def stop(self) -> None:
        """Stop the polling loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        logger.info("balance_monitor_stopped")

    async def _monitoring_loop(self) -> None:
        while self._running:
            try:
                await self.refresh()
            except Exception as e:
                logger.error("balance_monitor_error", error=str(e))

            await asyncio.sleep(self._poll_interval)

    async def refresh(self) -> WalletBalance | None:
        """Fetch balances once.

        Raises:
            WalletConnectionError: If the native balance cannot be fetched.
        """
        address = self._session.wallet_address
        if not self._session.is_connected or address is None:
            self._balance = None
            return None

        lamports = await self._rpc.get_balance(address)
        usdc = await self._readiness.get_token_balance(address)

        self._balance = WalletBalance(
            wallet_address=address,
            sol_lamports=lamports,
            sol_balance=from_base_units(lamports, SOL_DECIMALS),
            usdc_balance=usdc,
        )
        logger.debug(
            "wallet_balance_refreshed",
            sol_balance=str(self._balance.sol_balance),
            usdc_balance=str(usdc),
        )
        return self._balance
