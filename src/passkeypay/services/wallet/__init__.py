"""Connected wallet balance tracking."""

from passkeypay.services.wallet.balance_monitor import BalanceMonitor

__all__ = ["BalanceMonitor"]
