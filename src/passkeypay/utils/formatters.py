"""Formatting helpers for addresses, amounts and explorer links."""

from decimal import Decimal

from passkeypay.constants.network import EXPLORER_TX_URL


def format_address(address: str, chars: int = 4) -> str:
    """Shorten an address for display.

    Example:
        format_address("9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")
        # "9WzD...AWWM"
    """
    if not address:
        return ""
    return f"{address[:chars]}...{address[-chars:]}"


def format_amount(amount: Decimal | float, decimals: int = 4) -> str:
    return f"{Decimal(str(amount)):.{decimals}f}"


def format_currency(amount: Decimal | float, currency: str = "SOL") -> str:
    return f"{format_amount(amount)} {currency}"


def get_explorer_url(signature: str, network: str = "devnet") -> str:
    """Solana Explorer link for a transaction signature."""
    url = EXPLORER_TX_URL.format(signature=signature)
    if network == "mainnet":
        return url
    return f"{url}?cluster={network}"
