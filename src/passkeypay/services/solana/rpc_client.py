"""Solana RPC client for account and balance lookups.

This module provides the three reads the payment core needs:
account existence, token account balance and native balance.

The client extends BaseAPIClient to inherit:
- Automatic retry with exponential backoff
- Circuit breaker pattern for failure protection
- Proper resource cleanup
"""

from decimal import Decimal
from typing import Any

import structlog

from passkeypay.config.settings import get_settings
from passkeypay.core.exceptions import (
    AccountNotFoundError,
    CircuitBreakerOpenError,
    ExternalServiceError,
    RpcError,
    WalletConnectionError,
)
from passkeypay.models.wallet import TokenAmount
from passkeypay.services.base import BaseAPIClient
from passkeypay.utils.formatters import format_address

log = structlog.get_logger(__name__)


class SolanaRPCClient(BaseAPIClient):
    """Client for Solana JSON-RPC reads.

    Example:
        client = SolanaRPCClient()
        lamports = await client.get_balance("wallet_address")
        await client.close()
    """

    def __init__(
        self,
        rpc_url: str | None = None,
        commitment: str = "confirmed",
        **kwargs: Any,
    ) -> None:
        """Initialize Solana RPC client.

        Args:
            rpc_url: RPC endpoint (defaults to settings.solana_rpc_url).
            commitment: Commitment level for every read.
            **kwargs: Overrides passed to BaseAPIClient.
        """
        settings = get_settings()
        kwargs.setdefault("timeout", settings.rpc_timeout_seconds)
        kwargs.setdefault("circuit_breaker_threshold", settings.circuit_breaker_threshold)
        kwargs.setdefault("circuit_breaker_cooldown", settings.circuit_breaker_cooldown)
        super().__init__(
            base_url=rpc_url or settings.solana_rpc_url,
            headers={"Content-Type": "application/json"},
            **kwargs,
        )
        self.commitment = commitment
        self._request_id = 0

    async def _call(self, method: str, params: list[Any], address: str) -> Any:
        """Send a JSON-RPC call and return its `result`.

        Raises:
            RpcError: If the node answers with an error object.
            WalletConnectionError: If the node cannot be reached.
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        try:
            response = await self.post("", json=payload)
            data = response.json()
        except (ExternalServiceError, CircuitBreakerOpenError, ValueError) as e:
            log.error(
                "solana_rpc_call_failed",
                method=method,
                wallet_address=format_address(address),
                error=str(e),
            )
            raise WalletConnectionError(
                f"{method} failed: {e}", wallet_address=address
            ) from e

        error = data.get("error")
        if error is not None:
            raise RpcError(
                service=self.base_url,
                code=int(error.get("code", 0)),
                message=str(error.get("message", "unknown error")),
            )
        return data.get("result")

    async def get_account_info(self, address: str) -> dict[str, Any] | None:
        """Get account info, or None if the account does not exist.

        Args:
            address: Account address (base58).
        """
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self.commitment}],
            address,
        )
        value = (result or {}).get("value")
        if value is None:
            log.debug("solana_account_not_found", wallet_address=format_address(address))
            return None
        return value

    async def get_account(self, address: str) -> dict[str, Any]:
        """Get an account that must exist.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """
        account = await self.get_account_info(address)
        if account is None:
            raise AccountNotFoundError(address)
        return account

    async def get_token_account_balance(self, address: str) -> TokenAmount:
        """Get the balance held by an SPL token account.

        Args:
            address: Token account address (not the owner).

        Raises:
            RpcError: If the token account does not exist.
        """
        result = await self._call(
            "getTokenAccountBalance",
            [address, {"commitment": self.commitment}],
            address,
        )
        value = result["value"]
        ui_amount = value.get("uiAmountString")
        if ui_amount is None:
            ui_amount = str(value.get("uiAmount") or 0)

        return TokenAmount(
            amount=int(value["amount"]),
            decimals=int(value["decimals"]),
            ui_amount=Decimal(ui_amount),
        )

    async def get_balance(self, address: str) -> int:
        """Get native balance in lamports."""
        result = await self._call(
            "getBalance",
            [address, {"commitment": self.commitment}],
            address,
        )
        return int(result["value"])
