"""Local transaction history."""

from passkeypay.services.history.transactions import TransactionHistory

__all__ = ["TransactionHistory"]
