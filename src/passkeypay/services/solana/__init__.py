"""Solana RPC client and account helpers."""

from passkeypay.services.solana.accounts import (
    derive_token_account,
    from_base_units,
    to_base_units,
)
from passkeypay.services.solana.rpc_client import SolanaRPCClient

__all__ = [
    "SolanaRPCClient",
    "derive_token_account",
    "from_base_units",
    "to_base_units",
]
