"""USDC readiness check for a wallet.

Answers two separate questions, because they need different guidance:
- does the wallet's USDC token account exist (structural)
- does it hold at least the minimum balance (economic)

This check is advisory. It never funds wallets, never sponsors anything,
and never raises to its caller: network faults become a result with
advice NONE and the error text attached.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from passkeypay.config.settings import Settings, get_settings
from passkeypay.constants.payment import NEEDS_FAUCET_VISIT, USDC_ACCOUNT_NOT_FOUND
from passkeypay.core.exceptions import AccountNotFoundError
from passkeypay.models.payment import AdviceCode, ReadinessResult
from passkeypay.services.solana.accounts import derive_token_account
from passkeypay.services.solana.rpc_client import SolanaRPCClient
from passkeypay.services.storage.flags import CheckedWalletRegistry
from passkeypay.utils.formatters import format_address

logger = structlog.get_logger(__name__)


class ReadinessChecker:
    """Checks whether a wallet can pay in USDC.

    The first check for an address looks up account existence; later checks
    reuse the checked-wallet cache and only refresh the balance.
    """

    def __init__(
        self,
        rpc: SolanaRPCClient,
        checked_wallets: CheckedWalletRegistry,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._rpc = rpc
        self._checked = checked_wallets
        self.mint = settings.usdc_mint
        self.min_balance = settings.min_usdc_threshold

    async def get_token_balance(self, wallet_address: str) -> Decimal:
        """Fetch the wallet's USDC balance.

        Returns 0 when the token account is missing or the RPC call fails.
        """
        try:
            token_account = derive_token_account(wallet_address, self.mint)
            balance = await self._rpc.get_token_account_balance(str(token_account))
            return balance.ui_amount
        except Exception as e:
            logger.debug(
                "usdc_balance_unavailable",
                wallet_address=format_address(wallet_address),
                error=str(e),
            )
            return Decimal("0")

    async def has_token_account(self, wallet_address: str) -> bool:
        """Check whether the wallet's USDC token account exists."""
        token_account = derive_token_account(wallet_address, self.mint)
        try:
            await self._rpc.get_account(str(token_account))
        except AccountNotFoundError:
            return False
        return True

    def _funded_result(self, wallet_address: str, balance: Decimal) -> ReadinessResult:
        if balance >= self.min_balance:
            return ReadinessResult(
                wallet_address=wallet_address,
                has_token_account=True,
                balance=balance,
                sufficient=True,
                advice_code=AdviceCode.NONE,
                message=f"Wallet has {balance:.2f} USDC",
            )
        return ReadinessResult(
            wallet_address=wallet_address,
            has_token_account=balance > 0,
            balance=balance,
            sufficient=False,
            advice_code=AdviceCode.NEEDS_FUNDS,
            message="Visit faucet for USDC",
            error=NEEDS_FAUCET_VISIT,
        )

    async def check_readiness(self, wallet_address: str) -> ReadinessResult:
        """Check whether the wallet is ready to make USDC payments.

        Args:
            wallet_address: Owner address (base58).

        Returns:
            ReadinessResult. Never raises.
        """
        log = logger.bind(wallet_address=format_address(wallet_address))

        try:
            if wallet_address in self._checked:
                balance = await self.get_token_balance(wallet_address)
                log.debug("readiness_cache_hit", balance=str(balance))
                return self._funded_result(wallet_address, balance)

            if not await self.has_token_account(wallet_address):
                self._checked.add(wallet_address)
                log.info("readiness_token_account_missing")
                return ReadinessResult(
                    wallet_address=wallet_address,
                    has_token_account=False,
                    balance=Decimal("0"),
                    sufficient=False,
                    advice_code=AdviceCode.NEEDS_ACCOUNT,
                    message="Get USDC from faucet",
                    error=USDC_ACCOUNT_NOT_FOUND,
                )

            balance = await self.get_token_balance(wallet_address)
            self._checked.add(wallet_address)
            result = self._funded_result(wallet_address, balance)
            # The account exists even when it holds nothing
            result = result.model_copy(update={"has_token_account": True})
            log.info(
                "readiness_checked",
                balance=str(balance),
                sufficient=result.sufficient,
            )
            return result

        except Exception as e:
            log.error("readiness_check_failed", error=str(e))
            return ReadinessResult(
                wallet_address=wallet_address,
                advice_code=AdviceCode.NONE,
                message="Failed to check USDC",
                error=str(e) or "Unknown error",
            )

    def forget(self, wallet_address: str) -> None:
        """Drop a wallet from the checked cache (explicit disconnect)."""
        self._checked.remove(wallet_address)
