"""Payment data models.

This module contains models for:
- Asset kinds and fee modes a payment can use
- Wallet readiness results (advisory)
- Payment requests and the payment state machine
- Snapshots exposed to the presentation layer

SECURITY: No key material is ever held in these models.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

import base58
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from passkeypay.core.exceptions import PaymentErrorKind


def validate_wallet_address(v: str) -> str:
    """Validate address is valid base58 encoding of 32 bytes."""
    try:
        decoded = base58.b58decode(v)
    except ValueError as e:
        raise ValueError(f"Invalid base58 address: {e}") from e
    if len(decoded) != 32:
        raise ValueError("Invalid address length")
    return v


class AssetKind(str, Enum):
    """Asset moved by a payment."""

    NATIVE = "native"  # SOL
    STABLE_TOKEN = "stable_token"  # USDC


class FeeMode(str, Enum):
    """Who pays the network fee.

    Values are the fee modes understood by the passkey SDK.
    """

    SPONSORED = "paymaster"
    PAYER_FUNDED = "user"


class AdviceCode(str, Enum):
    """Funding guidance derived from a readiness check."""

    NONE = "none"
    NEEDS_ACCOUNT = "needs_account"
    NEEDS_FUNDS = "needs_funds"


class ReadinessResult(BaseModel):
    """Whether a wallet can currently complete a stable-token payment.

    Advisory only: submission is never blocked on `sufficient`.
    """

    model_config = ConfigDict(frozen=True)

    wallet_address: str
    has_token_account: bool = False
    balance: Decimal = Field(default=Decimal("0"), ge=0)
    sufficient: bool = False
    advice_code: AdviceCode = AdviceCode.NONE
    message: str = ""
    error: str | None = None
    checked_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PaymentRequest(BaseModel):
    """A single payment attempt. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., gt=0, description="Amount in display units")
    asset_kind: AssetKind = AssetKind.STABLE_TOKEN
    recipient: str = Field(..., description="Merchant wallet address (base58)")
    fee_mode: FeeMode = FeeMode.SPONSORED
    label: str | None = Field(None, description="Product or purpose shown in history")

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: object) -> object:
        """Convert floats through str so 0.1 stays 0.1."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("recipient")
    @classmethod
    def validate_recipient(cls, v: str) -> str:
        """Validate recipient is a wallet address."""
        return validate_wallet_address(v)


class PaymentState(str, Enum):
    """Payment lifecycle state."""

    IDLE = "idle"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


# Valid state transitions
PAYMENT_TRANSITIONS: dict[PaymentState, list[PaymentState]] = {
    PaymentState.IDLE: [PaymentState.CONNECTING],
    PaymentState.CONNECTING: [PaymentState.AUTHENTICATING, PaymentState.ERROR],
    PaymentState.AUTHENTICATING: [PaymentState.PROCESSING, PaymentState.ERROR],
    PaymentState.PROCESSING: [PaymentState.SUCCESS, PaymentState.ERROR],
    PaymentState.SUCCESS: [PaymentState.IDLE, PaymentState.CONNECTING],
    PaymentState.ERROR: [PaymentState.IDLE, PaymentState.CONNECTING],
}

TERMINAL_STATES = frozenset({PaymentState.SUCCESS, PaymentState.ERROR})


class PaymentSnapshot(BaseModel):
    """What the presentation layer renders for the current attempt."""

    model_config = ConfigDict(frozen=True)

    state: PaymentState = PaymentState.IDLE
    signature: str | None = None
    error: str | None = None
    error_kind: PaymentErrorKind | None = None
    readiness: ReadinessResult | None = None

    @computed_field
    @property
    def can_pay(self) -> bool:
        """The pay trigger is only enabled while idle."""
        return self.state == PaymentState.IDLE

    @computed_field
    @property
    def is_terminal(self) -> bool:
        """Check if the attempt has finished."""
        return self.state in TERMINAL_STATES


class FundingLink(BaseModel):
    """External link shown in funding guidance."""

    text: str
    url: str


class FundingInstructions(BaseModel):
    """Manual steps to fund a wallet with devnet USDC."""

    title: str
    steps: list[str]
    wallet: str
    links: list[FundingLink] = Field(default_factory=list)
