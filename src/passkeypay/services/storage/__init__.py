"""Local key-value store used for cache entries and flags."""

from passkeypay.services.storage.flags import CheckedWalletRegistry, SessionHint
from passkeypay.services.storage.kv_store import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    create_store,
)

__all__ = [
    "CheckedWalletRegistry",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SessionHint",
    "create_store",
]
