"""
Tests for the SQLite ledger store and its row models.
"""

import pytest

from accumulate_wallet.runtime.errors import StorageError
from accumulate_wallet.storage.database import LedgerStore, TABLES
from accumulate_wallet.storage.models import (
    AccountType,
    Identity,
    Key,
    KeyBook,
    TokenAccount,
    TokenAccountKind,
    WalletAccount,
)


def _identity(store, name="alice"):
    return store.insert("identities", Identity(name=name, url=f"acc://{name}.acme").to_row())


class TestLedgerStoreCrud:
    """Test generic insert / query / update / delete."""

    def test_schema_created(self, store):
        for table in TABLES:
            assert store.count(table) == 0

    def test_insert_and_query(self, store):
        row_id = _identity(store)
        rows = store.query("identities", where="url = ?", args=["acc://alice.acme"])
        assert len(rows) == 1
        assert rows[0]["id"] == row_id
        assert Identity.from_row(rows[0]).name == "alice"

    def test_query_one_missing(self, store):
        assert store.query_one("identities", "url = ?", ["acc://nobody.acme"]) is None

    def test_order_and_limit(self, store):
        for name in ("carol", "alice", "bob"):
            _identity(store, name)
        rows = store.query("identities", order_by="name ASC", limit=2)
        assert [r["name"] for r in rows] == ["alice", "bob"]

    def test_update_and_delete(self, store):
        row_id = _identity(store)
        assert store.update("identities", {"account_count": 3}, "id = ?", [row_id]) == 1
        assert store.query_one("identities", "id = ?", [row_id])["account_count"] == 3
        assert store.delete("identities", "id = ?", [row_id]) == 1
        assert store.count("identities") == 0

    def test_unknown_table(self, store):
        with pytest.raises(StorageError):
            store.insert("nope", {"a": 1})

    def test_invalid_column(self, store):
        with pytest.raises(StorageError):
            store.insert("identities", {"name; DROP TABLE keys": "x"})

    def test_invalid_order_by(self, store):
        with pytest.raises(StorageError):
            store.query("identities", order_by="name; DROP TABLE keys")

    def test_unique_violation(self, store):
        _identity(store)
        with pytest.raises(StorageError):
            _identity(store)

    def test_foreign_keys_enforced(self, store):
        """A key book cannot reference a missing identity."""
        with pytest.raises(StorageError):
            store.insert("key_books", KeyBook(identity_id=999, name="book", url="acc://x.acme/book").to_row())

    def test_health_check(self, store):
        assert store.health_check()

    def test_file_backed_store(self, tmp_path):
        path = tmp_path / "nested" / "wallet.db"
        with LedgerStore(path) as first:
            _identity(first)
        with LedgerStore(path) as second:
            assert second.count("identities") == 1


class TestLedgerStoreTransactions:
    """Test transaction commit, rollback and nesting."""

    def test_commit(self, store):
        with store.transaction():
            _identity(store)
        assert store.count("identities") == 1

    def test_rollback_on_error(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                _identity(store)
                raise RuntimeError("abort")
        assert store.count("identities") == 0

    def test_nested_joins_outer(self, store):
        """An error in the outer block also undoes the inner block's work."""
        with pytest.raises(RuntimeError):
            with store.transaction():
                with store.transaction():
                    _identity(store, "inner")
                _identity(store, "outer")
                raise RuntimeError("abort")
        assert store.count("identities") == 0


class TestRowModels:
    """Test model to_row / from_row conversions."""

    def test_identity_metadata_roundtrip(self, store):
        identity = Identity(name="alice", url="acc://alice.acme", metadata={"autoCreated": True})
        row = identity.to_row()
        assert "id" not in row
        assert row["is_active"] == 1
        row_id = store.insert("identities", row)
        restored = Identity.from_row(store.query_one("identities", "id = ?", [row_id]))
        assert restored.metadata == {"autoCreated": True}
        assert restored.is_active is True

    def test_key_flags(self):
        key = Key(key_page_id=1, name="k", public_key="aa", public_key_hash="bb",
                  has_private_key=True, is_default=True)
        row = key.to_row()
        assert row["has_private_key"] == 1 and row["is_default"] == 1
        assert Key.from_row(row).has_private_key is True

    def test_enum_columns(self):
        account = TokenAccount(address="acc://x/ACME", kind=TokenAccountKind.LITE)
        assert account.to_row()["kind"] == "lite"
        assert TokenAccount.from_row(account.to_row()).kind == TokenAccountKind.LITE

        listing = WalletAccount(name="n", address="acc://x", account_type=AccountType.ADI)
        assert listing.to_row()["account_type"] == "adi"
        assert WalletAccount.from_row(listing.to_row()).account_type == AccountType.ADI
