"""Transaction history persisted in the local store (newest first)."""

from __future__ import annotations

from decimal import Decimal

import structlog
from pydantic import TypeAdapter, ValidationError

from passkeypay.models.wallet import TransactionRecord, TransactionStatus
from passkeypay.services.storage.kv_store import KeyValueStore

logger = structlog.get_logger(__name__)

_records_adapter = TypeAdapter(list[TransactionRecord])


class TransactionHistory:
    """Completed payments kept for display and simple analytics.

    History is a convenience view; the chain is the record of truth.
    """

    def __init__(self, store: KeyValueStore, key: str) -> None:
        self._store = store
        self._key = key
        self._transactions = self._load()

    def _load(self) -> list[TransactionRecord]:
        raw = self._store.get(self._key)
        if not raw:
            return []
        try:
            return _records_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error("transaction_history_load_failed", error=str(e))
            return []

    def _save(self) -> None:
        try:
            self._store.set(self._key, _records_adapter.dump_json(self._transactions).decode())
        except OSError as e:
            logger.error("transaction_history_save_failed", error=str(e))

    @property
    def transactions(self) -> list[TransactionRecord]:
        """All transactions, newest first."""
        return list(self._transactions)

    def add(self, transaction: TransactionRecord) -> None:
        self._transactions.insert(0, transaction)
        self._save()
        logger.info(
            "transaction_added",
            transaction_id=transaction.id,
            total=len(self._transactions),
        )

    def clear(self) -> None:
        self._transactions = []
        self._store.delete(self._key)
        logger.info("transactions_cleared")

    def get_by_id(self, transaction_id: str) -> TransactionRecord | None:
        return next((tx for tx in self._transactions if tx.id == transaction_id), None)

    def total_volume(self) -> Decimal:
        return sum((tx.amount for tx in self._transactions), Decimal("0"))

    def average_transaction(self) -> Decimal:
        if not self._transactions:
            return Decimal("0")
        return self.total_volume() / len(self._transactions)

    def count_by_status(self, status: TransactionStatus) -> int:
        return sum(1 for tx in self._transactions if tx.status == status)
