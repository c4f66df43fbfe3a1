"""Data access layer for the ledger and profile, backed by a key-value table"""

import json
from datetime import date
from typing import Any, Dict, List, Optional, Protocol
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from alert_ledger.infrastructure.database.models import KeyValueEntry
from alert_ledger.domain.exceptions import StorageError, TransactionNotFoundError
from alert_ledger.domain.models import Profile, Transaction

TRANSACTIONS_KEY = "income-transactions"
PROFILE_KEY = "user-name"


class KeyValueStore(Protocol):
    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, value: str) -> None: ...


class SqlKeyValueStore:
    """Key-value store on the kv_entry table"""

    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str) -> Optional[str]:
        try:
            entry = self.db.get(KeyValueEntry, key)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load '{key}': {e}") from e
        return entry.value if entry is not None else None

    def save(self, key: str, value: str) -> None:
        """Insert or replace a value. Flushed, not committed; the caller commits."""
        try:
            entry = self.db.get(KeyValueEntry, key)
            if entry is None:
                self.db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save '{key}': {e}") from e


def transaction_to_dict(txn: Transaction) -> Dict[str, Any]:
    return {
        "id": txn.transaction_id,
        "date": txn.date.isoformat(),
        "amount": txn.amount,
        "description": txn.description,
        "bank": txn.bank,
        "raw_text": txn.raw_text,
    }


def transaction_from_dict(data: Dict[str, Any]) -> Transaction:
    return Transaction(
        transaction_id=data["id"],
        date=date.fromisoformat(data["date"]),
        amount=float(data["amount"]),
        description=data["description"],
        bank=data["bank"],
        raw_text=data.get("raw_text", ""),
    )


class TransactionLedgerRepository:
    """Income ledger stored as one JSON list, newest first"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def list_transactions(self) -> List[Transaction]:
        raw = self.store.load(TRANSACTIONS_KEY)
        if not raw:
            return []
        try:
            return [transaction_from_dict(item) for item in json.loads(raw)]
        except (KeyError, ValueError, TypeError) as e:
            raise StorageError(f"Stored ledger is corrupt: {e}") from e

    def _save(self, transactions: List[Transaction]) -> None:
        self.store.save(TRANSACTIONS_KEY, json.dumps([transaction_to_dict(t) for t in transactions]))

    def add(self, transaction: Transaction) -> List[Transaction]:
        """Prepend a new transaction and persist the ledger"""
        updated = [transaction, *self.list_transactions()]
        self._save(updated)
        return updated

    def delete(self, transaction_id: str) -> List[Transaction]:
        current = self.list_transactions()
        remaining = [t for t in current if t.transaction_id != transaction_id]
        if len(remaining) == len(current):
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        self._save(remaining)
        return remaining


class ProfileRepository:
    """Display name used for sender/receiver detection"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_profile(self) -> Optional[Profile]:
        name = self.store.load(PROFILE_KEY)
        if not name or not name.strip():
            return None
        return Profile(display_name=name)

    def save_profile(self, display_name: str) -> Profile:
        name = display_name.strip()
        self.store.save(PROFILE_KEY, name)
        return Profile(display_name=name)
