"""Wallet balance and transaction history models."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class TokenAmount(BaseModel):
    """Token balance as reported by getTokenAccountBalance."""

    amount: int = Field(..., ge=0, description="Raw base units")
    decimals: int = Field(..., ge=0, le=18)
    ui_amount: Decimal = Field(..., ge=0, description="Human-readable amount")


class WalletBalance(BaseModel):
    """Latest known balances of the connected wallet."""

    wallet_address: str
    sol_lamports: int = Field(default=0, ge=0)
    sol_balance: Decimal = Field(default=Decimal("0"), ge=0)
    usdc_balance: Decimal = Field(default=Decimal("0"), ge=0)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TransactionStatus(str, Enum):
    """Status of a recorded payment."""

    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class TransactionRecord(BaseModel):
    """A payment kept in local history."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    product: str
    amount: Decimal = Field(..., ge=0)
    currency: str = Field(..., description="SOL or USDC")
    signature: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    status: TransactionStatus = TransactionStatus.COMPLETED
    merchant_wallet: str
