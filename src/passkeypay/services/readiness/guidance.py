"""User guidance derived from readiness results."""

from passkeypay.constants.payment import (
    FAUCET_URL,
    NEEDS_FAUCET_VISIT,
    USDC_ACCOUNT_NOT_FOUND,
)
from passkeypay.models.payment import (
    FundingInstructions,
    FundingLink,
    ReadinessResult,
)


def get_status_message(result: ReadinessResult) -> str:
    """Convert a readiness result into a single UI line."""
    if result.sufficient:
        return result.message or "Wallet funded"

    if result.error == USDC_ACCOUNT_NOT_FOUND:
        return "Get USDC from faucet"

    if result.error == NEEDS_FAUCET_VISIT:
        return result.message or "Visit USDC faucet"

    return result.message or "Checking USDC..."


def get_manual_funding_instructions(wallet_address: str) -> FundingInstructions:
    """Steps for funding a wallet with devnet USDC by hand."""
    return FundingInstructions(
        title="Get Free USDC (Devnet)",
        steps=[
            "Visit Circle USDC Faucet",
            "Select Solana devnet",
            "Paste your wallet address",
            "Request USDC (free)",
            "Wait ~10 seconds",
            "Refresh and start paying!",
        ],
        wallet=wallet_address,
        links=[FundingLink(text="Circle USDC Faucet", url=FAUCET_URL)],
    )
