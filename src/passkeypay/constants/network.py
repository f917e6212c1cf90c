"""Solana network constants.

Values here are protocol facts, not deployment choices; deployment
choices live in `passkeypay.config.settings`.
"""

SOLANA_NETWORKS: dict[str, str] = {
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
}

EXPLORER_TX_URL = "https://explorer.solana.com/tx/{signature}"

# Official USDC mint on Solana devnet
USDC_MINT_DEVNET = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"

SOL_DECIMALS = 9
