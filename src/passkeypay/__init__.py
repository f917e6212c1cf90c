"""Passkey Pay - gasless stable-token payments orchestrated over Solana."""

__version__ = "1.0.0"
