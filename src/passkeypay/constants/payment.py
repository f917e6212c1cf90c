"""Payment constants: fee tokens, advice codes and fixed user messages."""

from passkeypay.models.payment import AssetKind

FEE_TOKENS: dict[AssetKind, str] = {
    AssetKind.STABLE_TOKEN: "USDC",
    AssetKind.NATIVE: "SOL",
}

# Machine codes carried in ReadinessResult.error
USDC_ACCOUNT_NOT_FOUND = "USDC_ACCOUNT_NOT_FOUND"
NEEDS_FAUCET_VISIT = "NEEDS_FAUCET_VISIT"

# Fixed user-facing error messages
MSG_ACCOUNT_NOT_READY = "USDC account not found. Get USDC from faucet first."
MSG_INSUFFICIENT_FUNDS = "Insufficient {symbol} balance"
MSG_SESSION_UNAVAILABLE = "Wallet connection failed"
MSG_PAYMENT_FAILED = "Payment failed"

# Substrings matched against submission failures
ACCOUNT_NOT_FOUND_MARKERS = ("TokenAccountNotFound", "AccountNotFound")
INSUFFICIENT_FUNDS_MARKER = "insufficient"
# SPL token program custom error 0x1 is InsufficientFunds
SPL_INSUFFICIENT_FUNDS_PATTERN = r"custom program error: 0x1\b"

FAUCET_URL = "https://faucet.circle.com/"
