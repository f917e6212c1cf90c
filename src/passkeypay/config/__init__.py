"""Configuration module for Passkey Pay.

Usage:
    from passkeypay.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.solana_rpc_url)

Note:
    We intentionally don't export a module-level `settings` instance
    because that would read the environment at import time.
    Use `get_settings()` to get the cached instance at runtime.
"""

from passkeypay.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
