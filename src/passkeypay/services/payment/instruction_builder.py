"""Build the instructions for a SOL or USDC payment.

A USDC payment is one or two instructions:
1. Create the recipient's associated token account (only if missing)
2. Transfer base units from sender to recipient token account

A SOL payment is a single system transfer; native accounts need no setup.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal

import structlog
from solders.instruction import Instruction
from solders.system_program import TransferParams as SystemTransferParams
from solders.system_program import transfer as system_transfer
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import create_associated_token_account, transfer
from spl.token.models import TransferParams

from passkeypay.config.settings import Settings, get_settings
from passkeypay.constants.network import SOL_DECIMALS
from passkeypay.core.exceptions import ValidationError, WalletNotConnectedError
from passkeypay.models.payment import AssetKind
from passkeypay.services.solana.accounts import (
    derive_token_account,
    to_base_units,
    to_pubkey,
)
from passkeypay.services.solana.rpc_client import SolanaRPCClient
from passkeypay.utils.formatters import format_address

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InstructionSet:
    """Ordered instructions submitted together or not at all.

    Attributes:
        instructions: Setup instructions first, the transfer last.
        creates_recipient_account: Whether a token account creation is included.
        base_units: Integer amount moved by the transfer.
    """

    instructions: tuple[Instruction, ...]
    creates_recipient_account: bool = False
    base_units: int = 0

    def __post_init__(self) -> None:
        if not self.instructions:
            raise ValueError("InstructionSet cannot be empty")

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    @property
    def transfer(self) -> Instruction:
        """The value-transfer instruction (always last)."""
        return self.instructions[-1]


class InstructionBuilder:
    """Builds payment instructions for a sender/recipient pair."""

    def __init__(
        self,
        rpc: SolanaRPCClient,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._rpc = rpc
        self.mint = to_pubkey(settings.usdc_mint)
        self.decimals = settings.usdc_decimals

    async def build_instructions(
        self,
        sender: str | None,
        recipient: str,
        asset_kind: AssetKind,
        amount: Decimal,
    ) -> InstructionSet:
        """Build the instruction set for one payment.

        Raises:
            WalletNotConnectedError: If there is no sender address.
            ValidationError: If the amount truncates to zero base units.
            WalletConnectionError: If the recipient lookup cannot reach the RPC.
        """
        if not sender:
            raise WalletNotConnectedError()

        if asset_kind == AssetKind.NATIVE:
            return self._build_sol_transfer(sender, recipient, amount)
        return await self._build_usdc_transfer(sender, recipient, amount)

    def _build_sol_transfer(
        self, sender: str, recipient: str, amount: Decimal
    ) -> InstructionSet:
        lamports = self._base_units(amount, SOL_DECIMALS)
        instruction = system_transfer(
            SystemTransferParams(
                from_pubkey=to_pubkey(sender),
                to_pubkey=to_pubkey(recipient),
                lamports=lamports,
            )
        )
        logger.debug("sol_transfer_built", lamports=lamports)
        return InstructionSet(instructions=(instruction,), base_units=lamports)

    async def _build_usdc_transfer(
        self, sender: str, recipient: str, amount: Decimal
    ) -> InstructionSet:
        base_units = self._base_units(amount, self.decimals)
        owner = to_pubkey(sender)
        destination = to_pubkey(recipient)

        source_account = derive_token_account(owner, self.mint)
        destination_account = derive_token_account(destination, self.mint)

        instructions: list[Instruction] = []

        # Point-in-time lookup; the chain rejects a duplicate creation anyway
        recipient_ready = await self._rpc.get_account_info(str(destination_account))
        if recipient_ready is None:
            logger.info(
                "recipient_token_account_missing",
                recipient=format_address(recipient),
            )
            instructions.append(
                create_associated_token_account(
                    payer=owner,
                    owner=destination,
                    mint=self.mint,
                    token_program_id=TOKEN_PROGRAM_ID,
                )
            )

        instructions.append(
            transfer(
                TransferParams(
                    program_id=TOKEN_PROGRAM_ID,
                    source=source_account,
                    dest=destination_account,
                    owner=owner,
                    amount=base_units,
                )
            )
        )

        logger.debug(
            "usdc_transfer_built",
            base_units=base_units,
            instruction_count=len(instructions),
        )
        return InstructionSet(
            instructions=tuple(instructions),
            creates_recipient_account=recipient_ready is None,
            base_units=base_units,
        )

    @staticmethod
    def _base_units(amount: Decimal, decimals: int) -> int:
        units = to_base_units(amount, decimals)
        if units <= 0:
            raise ValidationError(
                f"Amount {amount} is below the smallest unit (10^-{decimals})"
            )
        return units
