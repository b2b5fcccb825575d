"""
Wallet-local bookkeeping: transaction history, typed preferences and the
address book. None of this is mirrored from the ledger.
"""

from __future__ import annotations
import json
import logging
from typing import Any, List, Optional

from .database import LedgerStore
from .models import AddressBookEntry, TransactionRecord, now_ms
from ..runtime.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

_PREFERENCE_TYPES = ("str", "int", "float", "bool", "json")


class WalletStorageService:
    """Bookkeeping tables of the ledger store."""

    def __init__(self, store: LedgerStore):
        self.store = store

    # Transaction history

    def record_transaction(self, record: TransactionRecord) -> int:
        return self.store.insert("transaction_records", record.to_row())

    def get_transaction(self, tx_hash: str) -> Optional[TransactionRecord]:
        row = self.store.query_one("transaction_records", "tx_hash = ?", [tx_hash])
        return TransactionRecord.from_row(row) if row else None

    def transaction_history(self, limit: int = 50, address: Optional[str] = None,
                            transaction_type: Optional[str] = None) -> List[TransactionRecord]:
        """
        Recent transactions, newest first.

        Args:
            limit: Maximum number of records
            address: Only records sent from or to this address
            transaction_type: Only records of this type (e.g. ``add_credits``)
        """
        clauses = []
        args: List[Any] = []
        if address is not None:
            clauses.append("(from_address = ? OR to_address = ?)")
            args.extend([address, address])
        if transaction_type is not None:
            clauses.append("transaction_type = ?")
            args.append(transaction_type)
        rows = self.store.query(
            "transaction_records",
            where=" AND ".join(clauses) or None,
            args=args,
            order_by="timestamp DESC, id DESC",
            limit=limit,
        )
        return [TransactionRecord.from_row(row) for row in rows]

    def update_transaction_status(self, tx_hash: str, status: str) -> bool:
        return self.store.update(
            "transaction_records", {"status": status}, "tx_hash = ?", [tx_hash]
        ) > 0

    # Preferences

    def set_preference(self, key: str, value: Any) -> None:
        """Store a preference; the Python type is recorded for round-tripping."""
        if isinstance(value, bool):
            value_type, encoded = "bool", "true" if value else "false"
        elif isinstance(value, int):
            value_type, encoded = "int", str(value)
        elif isinstance(value, float):
            value_type, encoded = "float", repr(value)
        elif isinstance(value, str):
            value_type, encoded = "str", value
        else:
            try:
                value_type, encoded = "json", json.dumps(value)
            except TypeError as e:
                raise ValidationError(f"Unsupported preference value for {key}: {e}")

        row = {"key": key, "value": encoded, "value_type": value_type, "updated_at": now_ms()}
        with self.store.transaction():
            if self.store.query_one("user_preferences", "key = ?", [key]):
                self.store.update("user_preferences", row, "key = ?", [key])
            else:
                self.store.insert("user_preferences", row)

    def get_preference(self, key: str, default: Any = None) -> Any:
        row = self.store.query_one("user_preferences", "key = ?", [key])
        if row is None:
            return default
        value_type, value = row["value_type"], row["value"]
        if value_type not in _PREFERENCE_TYPES:
            raise StorageError(f"Unknown preference type {value_type} for {key}")
        if value_type == "bool":
            return value == "true"
        if value_type == "int":
            return int(value)
        if value_type == "float":
            return float(value)
        if value_type == "json":
            return json.loads(value)
        return value

    def delete_preference(self, key: str) -> None:
        self.store.delete("user_preferences", "key = ?", [key])

    # Address book

    def add_address(self, entry: AddressBookEntry) -> int:
        return self.store.insert("address_book", entry.to_row())

    def address_book(self, favorites_only: bool = False) -> List[AddressBookEntry]:
        rows = self.store.query(
            "address_book",
            where="is_favorite = 1" if favorites_only else None,
            order_by="is_favorite DESC, name ASC",
        )
        return [AddressBookEntry.from_row(row) for row in rows]

    def update_address(self, entry: AddressBookEntry) -> None:
        if entry.id is None:
            raise ValidationError("Address book entry has no id")
        entry.updated_at = now_ms()
        row = entry.to_row()
        row.pop("id", None)
        row.pop("created_at", None)
        self.store.update("address_book", row, "id = ?", [entry.id])

    def delete_address(self, entry_id: int) -> None:
        self.store.delete("address_book", "id = ?", [entry_id])


__all__ = ["WalletStorageService"]
