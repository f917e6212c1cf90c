"""Flags kept in the local store: checked wallets and session presence."""

from __future__ import annotations

import json

import structlog

from passkeypay.services.storage.kv_store import KeyValueStore

logger = structlog.get_logger(__name__)


class CheckedWalletRegistry:
    """Set of wallet addresses whose token account was already looked up.

    Append-only during a session; entries never expire and are only
    removed by `remove` (explicit disconnect) or `clear`.
    Store failures degrade to "not checked" and are never raised.
    """

    def __init__(self, store: KeyValueStore, key: str) -> None:
        self._store = store
        self._key = key

    def _read(self) -> set[str]:
        try:
            raw = self._store.get(self._key)
            return set(json.loads(raw)) if raw else set()
        except (OSError, ValueError, TypeError) as e:
            logger.warning("checked_wallets_read_failed", error=str(e))
            return set()

    def _write(self, wallets: set[str]) -> None:
        try:
            self._store.set(self._key, json.dumps(sorted(wallets)))
        except (OSError, TypeError) as e:
            logger.error("checked_wallets_write_failed", error=str(e))

    def __contains__(self, wallet_address: str) -> bool:
        return wallet_address in self._read()

    def __len__(self) -> int:
        return len(self._read())

    def add(self, wallet_address: str) -> None:
        wallets = self._read()
        if wallet_address not in wallets:
            wallets.add(wallet_address)
            self._write(wallets)

    def remove(self, wallet_address: str) -> None:
        wallets = self._read()
        if wallet_address in wallets:
            wallets.discard(wallet_address)
            self._write(wallets)

    def clear(self) -> None:
        self._store.delete(self._key)


class SessionHint:
    """Process-wide "a session existed" flag.

    Only decides whether a silent reconnect is worth attempting; session
    validity is always re-established through the passkey SDK.
    """

    def __init__(self, store: KeyValueStore, key: str) -> None:
        self._store = store
        self._key = key

    def is_set(self) -> bool:
        return self._store.get(self._key) == "true"

    def set(self) -> None:
        self._store.set(self._key, "true")

    def clear(self) -> None:
        self._store.delete(self._key)
