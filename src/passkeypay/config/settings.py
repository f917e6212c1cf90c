"""Application settings using pydantic-settings."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

import base58
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from passkeypay.constants.network import SOLANA_NETWORKS, USDC_MINT_DEVNET


class Settings(BaseSettings):
    """Passkey Pay configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Application
    app_name: str = Field(default="Passkey Pay", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Log level"
    )

    # Network
    solana_network: Literal["devnet", "testnet", "mainnet"] = Field(
        default="devnet", description="Solana cluster used for explorer links"
    )
    solana_rpc_url: str = Field(
        default=SOLANA_NETWORKS["devnet"],
        description="Solana RPC endpoint URL",
    )
    rpc_timeout_seconds: float = Field(default=5.0, gt=0, le=60)

    # Passkey SDK / paymaster
    portal_url: str = Field(
        default="https://portal.lazor.sh",
        description="Passkey portal URL",
    )
    paymaster_url: str = Field(
        default="https://kora.devnet.lazorkit.com",
        description="Paymaster endpoint sponsoring fees",
    )
    merchant_wallet: str | None = Field(
        default=None, description="Address receiving payments"
    )

    # Stable token
    usdc_mint: str = Field(default=USDC_MINT_DEVNET, description="USDC mint address")
    usdc_decimals: int = Field(default=6, ge=0, le=18)
    min_usdc_threshold: Decimal = Field(
        default=Decimal("0.1"),
        ge=0,
        description="Balance at or above which a wallet is considered funded",
    )

    # Payment submission
    compute_unit_limit: int = Field(
        default=300_000,
        ge=1,
        le=1_400_000,
        description="Compute budget ceiling sent with every payment",
    )
    payment_reset_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Seconds a terminal payment state stays visible",
    )
    balance_poll_seconds: float = Field(default=30.0, gt=0)

    # Local store
    storage_path: str | None = Field(
        default=None, description="JSON file backing the local store (memory if unset)"
    )
    checked_wallets_key: str = Field(default="lazorkit_usdc_sponsored_wallets")
    session_hint_key: str = Field(default="lazorkit_connected")
    transactions_key: str = Field(default="lazorkit_transactions")

    # Circuit Breaker
    circuit_breaker_threshold: int = Field(
        default=5, ge=1, description="Failures before circuit opens"
    )
    circuit_breaker_cooldown: int = Field(
        default=30, ge=1, description="Seconds before half-open"
    )

    @field_validator("solana_rpc_url", "portal_url", "paymaster_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate endpoint URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @field_validator("usdc_mint", "merchant_wallet")
    @classmethod
    def validate_address(cls, v: str | None) -> str | None:
        """Validate address is 32-byte base58."""
        if v is None:
            return v
        try:
            decoded = base58.b58decode(v)
        except ValueError as e:
            raise ValueError(f"Invalid base58 address: {e}") from e
        if len(decoded) != 32:
            raise ValueError("Invalid address length")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
