"""
Tests for transaction history, preferences and the address book.
"""

import pytest

from accumulate_wallet.runtime.errors import ValidationError
from accumulate_wallet.storage.models import AddressBookEntry, TransactionRecord


def _record(tx_hash, timestamp, tx_type="send_tokens", to="acc://bob.acme/tokens"):
    return TransactionRecord(
        tx_hash=tx_hash,
        from_address="acc://alice.acme/tokens",
        to_address=to,
        amount="1.5",
        token_type="acc://ACME",
        transaction_type=tx_type,
        timestamp=timestamp,
    )


class TestTransactionHistory:
    """Test transaction record storage."""

    def test_record_and_get(self, wallet_storage):
        wallet_storage.record_transaction(_record("h1", 1))
        record = wallet_storage.get_transaction("h1")
        assert record.amount == "1.5"
        assert record.status == "pending"
        assert wallet_storage.get_transaction("missing") is None

    def test_history_newest_first(self, wallet_storage):
        wallet_storage.record_transaction(_record("h1", 1))
        wallet_storage.record_transaction(_record("h2", 3))
        wallet_storage.record_transaction(_record("h3", 2))
        assert [r.tx_hash for r in wallet_storage.transaction_history()] == ["h2", "h3", "h1"]
        assert len(wallet_storage.transaction_history(limit=1)) == 1

    def test_history_filters(self, wallet_storage):
        wallet_storage.record_transaction(_record("h1", 1, tx_type="add_credits"))
        wallet_storage.record_transaction(_record("h2", 2, to="acc://carol.acme/tokens"))
        credits = wallet_storage.transaction_history(transaction_type="add_credits")
        assert [r.tx_hash for r in credits] == ["h1"]
        carol = wallet_storage.transaction_history(address="acc://carol.acme/tokens")
        assert [r.tx_hash for r in carol] == ["h2"]

    def test_update_status(self, wallet_storage):
        wallet_storage.record_transaction(_record("h1", 1))
        assert wallet_storage.update_transaction_status("h1", "confirmed")
        assert wallet_storage.get_transaction("h1").status == "confirmed"
        assert not wallet_storage.update_transaction_status("missing", "confirmed")


class TestPreferences:
    """Test typed preference round trips."""

    @pytest.mark.parametrize("value", ["dark", 7, 2.5, True, False, {"a": [1, 2]}])
    def test_roundtrip(self, wallet_storage, value):
        wallet_storage.set_preference("pref", value)
        assert wallet_storage.get_preference("pref") == value
        assert type(wallet_storage.get_preference("pref")) is type(value)

    def test_overwrite_and_delete(self, wallet_storage):
        wallet_storage.set_preference("theme", "dark")
        wallet_storage.set_preference("theme", "light")
        assert wallet_storage.get_preference("theme") == "light"
        wallet_storage.delete_preference("theme")
        assert wallet_storage.get_preference("theme", "default") == "default"

    def test_unsupported_value(self, wallet_storage):
        with pytest.raises(ValidationError):
            wallet_storage.set_preference("bad", object())


class TestAddressBook:
    """Test address book CRUD."""

    def test_crud(self, wallet_storage):
        bob_id = wallet_storage.add_address(AddressBookEntry(name="Bob", address="acc://bob.acme"))
        wallet_storage.add_address(AddressBookEntry(name="Amy", address="acc://amy.acme", is_favorite=True))

        entries = wallet_storage.address_book()
        assert [e.name for e in entries] == ["Amy", "Bob"]
        assert [e.name for e in wallet_storage.address_book(favorites_only=True)] == ["Amy"]

        bob = next(e for e in entries if e.id == bob_id)
        bob.notes = "friend"
        wallet_storage.update_address(bob)
        assert next(e for e in wallet_storage.address_book() if e.id == bob_id).notes == "friend"

        wallet_storage.delete_address(bob_id)
        assert len(wallet_storage.address_book()) == 1

    def test_update_requires_id(self, wallet_storage):
        with pytest.raises(ValidationError):
            wallet_storage.update_address(AddressBookEntry(name="x", address="acc://x.acme"))
