"""Interface of the passkey/session SDK.

The SDK turns a biometric approval into a signed, paymaster-sponsored
transaction. This package only talks to it through `PasskeySession`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from solders.instruction import Instruction

from passkeypay.config.settings import Settings
from passkeypay.models.payment import FeeMode


class SessionConfig(BaseModel):
    """Endpoints the passkey SDK is constructed with."""

    model_config = ConfigDict(frozen=True)

    rpc_url: str
    portal_url: str
    paymaster_url: str

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionConfig:
        return cls(
            rpc_url=settings.solana_rpc_url,
            portal_url=settings.portal_url,
            paymaster_url=settings.paymaster_url,
        )


class TransactionOptions(BaseModel):
    """Fee abstraction parameters sent with a submission."""

    model_config = ConfigDict(frozen=True)

    fee_token: str = Field(..., description="Asset the fee is accounted against")
    compute_unit_limit: int = Field(..., ge=1)


class SignAndSendRequest(BaseModel):
    """One atomic submission: every instruction or none."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    instructions: tuple[Instruction, ...] = Field(..., min_length=1)
    transaction_options: TransactionOptions


@runtime_checkable
class PasskeySession(Protocol):
    """Session SDK as consumed by the payment core."""

    @property
    def is_connected(self) -> bool: ...

    @property
    def is_connecting(self) -> bool: ...

    @property
    def wallet_address(self) -> str | None: ...

    async def connect(self, fee_mode: FeeMode) -> None: ...

    async def disconnect(self) -> None: ...

    async def sign_and_send_transaction(self, request: SignAndSendRequest) -> str:
        """Sign with the passkey, submit, and return the signature."""
        ...


SessionFactory = Callable[[SessionConfig], PasskeySession]
