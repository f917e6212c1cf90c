"""Associated token account derivation and base unit conversion."""

from decimal import ROUND_DOWN, Decimal, localcontext

from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import get_associated_token_address


def to_pubkey(address: str | Pubkey) -> Pubkey:
    """Parse a base58 address into a Pubkey."""
    if isinstance(address, Pubkey):
        return address
    return Pubkey.from_string(address)


def derive_token_account(owner: str | Pubkey, mint: str | Pubkey) -> Pubkey:
    """Derive the associated token account of `owner` for `mint`.

    Works for off-curve owners (smart wallets are PDAs).
    """
    return get_associated_token_address(
        to_pubkey(owner), to_pubkey(mint), token_program_id=TOKEN_PROGRAM_ID
    )


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Convert a display amount to integer base units, truncating toward zero.

    Example:
        to_base_units(Decimal("0.1234567"), 6) == 123456
    """
    amount = Decimal(amount)
    with localcontext() as ctx:
        # Enough precision to scale every digit exactly before truncating
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + max(decimals, 0))
        ctx.rounding = ROUND_DOWN
        scaled = amount.scaleb(decimals)
        return int(scaled.to_integral_value())


def from_base_units(units: int, decimals: int) -> Decimal:
    """Convert integer base units back to a display amount."""
    value = Decimal(units)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        return value.scaleb(-decimals)
