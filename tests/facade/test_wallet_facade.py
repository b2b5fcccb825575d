"""
Tests for the AccumulateWallet facade.

The ledger client is a mock; the local mirror and key store are real
in-memory instances.
"""

from unittest.mock import Mock

import pytest

from accumulate_wallet import AccumulateWallet, Failure, Success, WalletConfig
from accumulate_wallet.client.ledger_client import LedgerClient
from accumulate_wallet.runtime.errors import ErrorCode, NetworkError, TimeoutError, ValidationError
from accumulate_wallet.storage.secure_store import MemorySecureStorage

ACCEPTED = {"result": {"txid": "txid-123", "hash": "hash-456"}}
REJECTED = {"result": [{"failed": True, "error": {"message": "insufficient credits"}}]}


@pytest.fixture
def identity(wallet, funded_lite):
    """An identity created through the wallet, as its outcome data."""
    outcome = wallet.create_identity("alice", funded_lite["tokenAccount"])
    assert outcome.ok
    return outcome.data


class TestConstruction:
    """Tests for wiring and factories."""

    def test_for_network(self, mock_client):
        wallet = AccumulateWallet.mainnet(client=mock_client)
        assert wallet.config.is_mainnet
        assert wallet.config.endpoint == "https://mainnet.accumulatenetwork.io/v2"
        wallet.close()
        mock_client.close.assert_not_called()

    def test_keystore_requires_password(self, tmp_path, mock_client):
        config = WalletConfig(keystore_path=tmp_path / "keys.json")
        with pytest.raises(ValidationError) as exc:
            AccumulateWallet(config, client=mock_client)
        assert "password" in str(exc.value)

    def test_encrypted_keystore(self, tmp_path, mock_client):
        config = WalletConfig(keystore_path=tmp_path / "keys.json", database_path=tmp_path / "w.db")
        with AccumulateWallet(config, client=mock_client, keystore_password="pw") as wallet:
            lite = wallet.create_lite_account("Main").data
        with AccumulateWallet(config, client=mock_client, keystore_password="pw") as wallet:
            assert wallet.keys.has_key(lite["liteIdentity"])
            assert wallet.accounts.get_token_account(lite["tokenAccount"]) is not None

    def test_builds_own_client(self):
        with AccumulateWallet(WalletConfig(), secure_storage=MemorySecureStorage()) as wallet:
            assert isinstance(wallet.client, LedgerClient)


class TestLiteAccounts:
    """Tests for lite account creation and import."""

    def test_create_lite_account(self, wallet, funded_lite):
        assert funded_lite["tokenAccount"] == funded_lite["liteIdentity"] + "/ACME"
        assert wallet.keys.has_key(funded_lite["liteIdentity"])
        listed = wallet.accounts_for_dropdown("lite_account")
        assert listed[0]["address"] == funded_lite["tokenAccount"]

    def test_create_lite_account_has_no_transaction(self, wallet):
        outcome = wallet.create_lite_account()
        assert isinstance(outcome, Success)
        assert outcome.transaction_id is None

    def test_import_twice(self, wallet, keypair):
        first = wallet.import_lite_account(keypair.private_key_hex(), "Imported")
        second = wallet.import_lite_account(keypair.private_key_hex())
        assert first.data["alreadyImported"] is False
        assert second.data["alreadyImported"] is True
        assert first.data["liteIdentity"] == keypair.derive_lite_identity_url()

    def test_import_invalid_key(self, wallet):
        outcome = wallet.import_lite_account("not-a-key")
        assert isinstance(outcome, Failure)
        assert outcome.code == ErrorCode.INVALID_KEY


class TestCreateIdentity:
    """Tests for identity creation and its rollback."""

    def test_success(self, wallet, mock_client, identity, funded_lite):
        assert identity["identityUrl"] == "acc://alice.acme"
        assert wallet.keys.retrieve_key(identity["keyPageUrl"]) is not None
        assert wallet.signing_key_page("acc://alice.acme/tokens") == "acc://alice.acme/book0/1"

        envelope = mock_client.execute_direct.call_args.args[0]
        assert envelope["transaction"]["header"]["principal"] == funded_lite["tokenAccount"]
        assert envelope["transaction"]["body"]["type"] == "createIdentity"
        assert envelope["signatures"][0]["signer"] == funded_lite["liteIdentity"]

    def test_transaction_id(self, wallet, funded_lite):
        outcome = wallet.create_identity("bob", funded_lite["tokenAccount"])
        assert outcome.transaction_id == "txid-123"
        assert outcome.hash == "hash-456"

    def test_rejection_rolls_back(self, wallet, mock_client, funded_lite):
        """A rejected creation leaves no identity rows and no page key."""
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_identity("alice", funded_lite["tokenAccount"])

        assert isinstance(outcome, Failure)
        assert outcome.message == "insufficient credits"
        assert outcome.code == ErrorCode.INSUFFICIENT_CREDITS
        assert wallet.identities.get_identity_by_url("acc://alice.acme") is None
        assert wallet.store.count("key_pages") == 0
        assert wallet.keys.retrieve_key("acc://alice.acme/book0/1") is None
        assert wallet.keys.has_key(funded_lite["liteIdentity"])

    def test_transport_error_rolls_back(self, wallet, mock_client, funded_lite):
        mock_client.execute_direct.side_effect = TimeoutError("slow")
        outcome = wallet.create_identity("alice", funded_lite["tokenAccount"])
        assert outcome.code == ErrorCode.TIMEOUT
        assert wallet.identities.is_identity_name_available("alice")

    def test_name_taken_locally(self, wallet, identity, funded_lite, mock_client):
        mock_client.execute_direct.reset_mock()
        outcome = wallet.create_identity("alice", funded_lite["tokenAccount"])
        assert outcome.code == ErrorCode.NAME_UNAVAILABLE
        mock_client.execute_direct.assert_not_called()

    def test_invalid_name(self, wallet, funded_lite):
        outcome = wallet.create_identity("bad name", funded_lite["tokenAccount"])
        assert outcome.code == ErrorCode.INVALID_NAME

    def test_missing_sponsor_key(self, wallet, other_keypair):
        outcome = wallet.create_identity("alice", other_keypair.derive_lite_token_account_url())
        assert outcome.code == ErrorCode.KEY_NOT_FOUND
        assert wallet.identities.get_identity_by_url("acc://alice.acme") is None


class TestKeyAuthorities:
    """Tests for key book and key page creation."""

    def test_create_key_book(self, wallet, identity, mock_client):
        outcome = wallet.create_key_book("book1", "acc://alice.acme", identity["keyPageUrl"])
        assert outcome.ok
        assert outcome.data["keyPageUrl"] == "acc://alice.acme/book1/1"
        assert wallet.identities.get_key_book_by_url("acc://alice.acme/book1") is not None
        assert wallet.identities.get_identity_by_url("acc://alice.acme").key_book_count == 2
        assert wallet.keys.retrieve_key("acc://alice.acme/book1/1") is not None
        mock_client.get_signer_version.assert_called_with(identity["keyPageUrl"])

    def test_create_key_book_rejected(self, wallet, identity, mock_client):
        mock_client.execute_direct.return_value = {"error": {"message": "unauthorized"}}
        outcome = wallet.create_key_book("book1", "acc://alice.acme", identity["keyPageUrl"])
        assert not outcome.ok
        assert wallet.identities.get_key_book_by_url("acc://alice.acme/book1") is None
        assert wallet.keys.retrieve_key("acc://alice.acme/book1/1") is None

    def test_create_key_page(self, wallet, identity):
        outcome = wallet.create_key_page("2", "acc://alice.acme/book0", identity["keyPageUrl"])
        assert outcome.ok
        page = wallet.identities.get_key_page_by_url("acc://alice.acme/book0/2")
        assert page is not None
        assert wallet.identities.default_key(page.id).has_private_key

    def test_create_key_page_repairs_missing_book(self, wallet, identity):
        outcome = wallet.create_key_page("1", "acc://alice.acme/other", identity["keyPageUrl"])
        assert outcome.ok
        book = wallet.identities.get_key_book_by_url("acc://alice.acme/other")
        assert book.public_key_hash == "placeholder"

    def test_create_key_page_rejected(self, wallet, identity, mock_client):
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_key_page("2", "acc://alice.acme/book0", identity["keyPageUrl"])
        assert not outcome.ok
        assert wallet.identities.get_key_page_by_url("acc://alice.acme/book0/2") is None

    def test_create_key_page_rejected_removes_repaired_book(self, wallet, identity, mock_client):
        """A placeholder book inserted for the page goes away with it."""
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_key_page("1", "acc://alice.acme/ghostbook", identity["keyPageUrl"])
        assert not outcome.ok
        assert wallet.identities.get_key_book_by_url("acc://alice.acme/ghostbook") is None
        assert wallet.identities.get_key_book_by_url("acc://alice.acme/book0") is not None
        assert wallet.store.count("key_books") == 1

    def test_create_key_page_rejected_removes_repaired_identity(self, wallet, keypair, mock_client):
        wallet.keys.store_key("acc://carol.acme/book0/1", keypair.private_key_hex())
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_key_page("1", "acc://carol.acme/ghostbook", "acc://carol.acme/book0/1")
        assert not outcome.ok
        assert wallet.identities.get_identity_by_url("acc://carol.acme") is None
        assert wallet.store.count("key_books") == 0
        assert wallet.store.count("key_pages") == 0

    def test_create_key_book_rejected_removes_repaired_identity(self, wallet, keypair, mock_client):
        wallet.keys.store_key("acc://erin.acme/book0/1", keypair.private_key_hex())
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_key_book("book1", "acc://erin.acme", "acc://erin.acme/book0/1")
        assert not outcome.ok
        assert wallet.identities.get_identity_by_url("acc://erin.acme") is None
        assert wallet.identities.is_identity_name_available("erin")


class TestAccounts:
    """Tests for token and data account creation."""

    def test_adi_token_account(self, wallet, identity):
        outcome = wallet.create_adi_token_account("tokens", "acc://alice.acme", identity["keyPageUrl"])
        assert outcome.ok
        account = wallet.accounts.get_token_account("acc://alice.acme/tokens")
        assert account.key_page_id == identity["keyPageId"]

    def test_adi_token_account_rejected(self, wallet, identity, mock_client):
        mock_client.execute_direct.return_value = REJECTED
        wallet.create_adi_token_account("tokens", "acc://alice.acme", identity["keyPageUrl"])
        assert wallet.accounts.get_token_account("acc://alice.acme/tokens") is None
        assert wallet.identities.get_identity_by_url("acc://alice.acme").account_count == 0

    def test_data_account_missing_parent(self, wallet, keypair):
        """The parent identity row is created when the data account arrives first."""
        wallet.keys.store_key("acc://dave.acme/book0/1", keypair.private_key_hex())
        outcome = wallet.create_data_account("notes", "acc://dave.acme", "acc://dave.acme/book0/1")
        assert outcome.ok
        assert outcome.data["accountUrl"] == "acc://dave.acme/notes"
        identity = wallet.identities.get_identity_by_url("acc://dave.acme")
        assert identity.metadata == {"autoCreated": True}
        assert wallet.data_accounts_for_dropdown()[0]["url"] == "acc://dave.acme/notes"

    def test_data_account_rejected(self, wallet, identity, mock_client):
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_data_account("notes", "acc://alice.acme", identity["keyPageUrl"])
        assert not outcome.ok
        assert wallet.accounts.get_data_account("acc://alice.acme/notes") is None

    def test_data_account_rejected_removes_repaired_identity(self, wallet, keypair, funded_lite,
                                                             mock_client):
        """The placeholder identity does not block a later creation under the same name."""
        wallet.keys.store_key("acc://ghost.acme/book0/1", keypair.private_key_hex())
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_data_account("notes", "acc://ghost.acme", "acc://ghost.acme/book0/1")
        assert not outcome.ok
        assert wallet.identities.get_identity_by_url("acc://ghost.acme") is None

        mock_client.execute_direct.return_value = ACCEPTED
        assert wallet.create_identity("ghost", funded_lite["tokenAccount"]).ok

    def test_data_account_transport_error_removes_repaired_identity(self, wallet, keypair, mock_client):
        wallet.keys.store_key("acc://ghost.acme/book0/1", keypair.private_key_hex())
        mock_client.execute_direct.side_effect = NetworkError("down")
        outcome = wallet.create_data_account("notes", "acc://ghost.acme", "acc://ghost.acme/book0/1")
        assert outcome.code == ErrorCode.NETWORK_ERROR
        assert wallet.identities.get_identity_by_url("acc://ghost.acme") is None

    def test_adi_token_account_rejected_removes_repaired_identity(self, wallet, keypair, mock_client):
        wallet.keys.store_key("acc://frank.acme/book0/1", keypair.private_key_hex())
        mock_client.execute_direct.return_value = REJECTED
        outcome = wallet.create_adi_token_account("tokens", "acc://frank.acme", "acc://frank.acme/book0/1")
        assert not outcome.ok
        assert wallet.accounts.get_token_account("acc://frank.acme/tokens") is None
        assert wallet.identities.get_identity_by_url("acc://frank.acme") is None

    def test_rejection_keeps_existing_parent(self, wallet, identity, mock_client):
        mock_client.execute_direct.return_value = REJECTED
        wallet.create_data_account("notes", "acc://alice.acme", identity["keyPageUrl"])
        assert wallet.identities.get_identity_by_url("acc://alice.acme") is not None

    def test_invalid_request_url(self, wallet):
        outcome = wallet.create_data_account("notes", "alice.acme", "acc://alice.acme/book0/1")
        assert outcome.code == ErrorCode.INVALID_INPUT
        assert outcome.message.startswith("Invalid request: ")
        assert outcome.details["errors"]


class TestTokens:
    """Tests for custom tokens, minting, burning and sending."""

    def test_create_custom_token(self, wallet, identity):
        outcome = wallet.create_custom_token("bt", "BT", "acc://alice.acme", identity["keyPageUrl"], precision=2)
        assert outcome.ok
        assert outcome.data["tokenUrl"] == "acc://alice.acme/bt"
        assert wallet.accounts.token_precision("acc://alice.acme/bt") == 2
        assert wallet.tokens_for_dropdown()[1]["symbol"] == "BT"

    def test_symbol_taken(self, wallet, identity, mock_client):
        wallet.create_custom_token("bt", "BT", "acc://alice.acme", identity["keyPageUrl"])
        outcome = wallet.create_custom_token("bt2", "BT", "acc://alice.acme", identity["keyPageUrl"])
        assert outcome.code == ErrorCode.NAME_UNAVAILABLE
        assert outcome.message == "Token symbol already exists"

    def test_name_taken(self, wallet, identity, mock_client):
        assert wallet.create_custom_token("shared", "AAA", "acc://alice.acme", identity["keyPageUrl"]).ok
        mock_client.execute_direct.reset_mock()
        outcome = wallet.create_custom_token("shared", "BBB", "acc://alice.acme", identity["keyPageUrl"])
        assert outcome.code == ErrorCode.NAME_UNAVAILABLE
        assert outcome.message == "Token name already exists"
        mock_client.execute_direct.assert_not_called()
        assert wallet.accounts.is_token_symbol_available("BBB")

    @pytest.mark.parametrize("symbol", ["ac", "TOOLONGSYMBOL1", ""])
    def test_invalid_symbol(self, wallet, identity, symbol):
        outcome = wallet.create_custom_token("bt", symbol, "acc://alice.acme", identity["keyPageUrl"])
        assert outcome.code == ErrorCode.INVALID_SYMBOL

    def test_custom_token_rejected(self, wallet, identity, mock_client):
        mock_client.execute_direct.return_value = REJECTED
        wallet.create_custom_token("bt", "BT", "acc://alice.acme", identity["keyPageUrl"])
        assert wallet.accounts.is_token_symbol_available("BT")

    def test_mint_uses_token_precision(self, wallet, identity, mock_client, funded_lite):
        wallet.create_custom_token("bt", "BT", "acc://alice.acme", identity["keyPageUrl"], precision=2)
        outcome = wallet.mint_tokens("acc://alice.acme/bt", funded_lite["tokenAccount"], "1.5",
                                     identity["keyPageUrl"])
        assert outcome.ok
        body = mock_client.execute_direct.call_args.args[0]["transaction"]["body"]
        assert body["to"] == [{"url": funded_lite["tokenAccount"], "amount": "150"}]

    def test_burn_excess_precision(self, wallet, identity):
        outcome = wallet.burn_tokens("acc://alice.acme/tokens", "0.123456789", identity["keyPageUrl"])
        assert outcome.code == ErrorCode.INVALID_AMOUNT

    def test_send_tokens_from_lite(self, wallet, funded_lite, mock_client):
        outcome = wallet.send_tokens(funded_lite["tokenAccount"], "acc://bob.acme/tokens", "2", memo="rent")
        assert outcome.ok
        transaction = mock_client.execute_direct.call_args.args[0]["transaction"]
        assert transaction["body"]["to"] == [{"url": "acc://bob.acme/tokens", "amount": "200000000"}]
        assert transaction["header"]["memo"] == "rent"


class TestCredits:
    """Tests for credit purchase and fee reads."""

    def test_purchase_credits(self, wallet, funded_lite, mock_client):
        outcome = wallet.purchase_credits(funded_lite["liteIdentity"], funded_lite["tokenAccount"], 100)
        assert outcome.ok
        assert outcome.data["creditAmount"] == 100
        assert outcome.data["acmeAmount"] == 2_000_000
        assert outcome.data["oracleValue"] == 500_000
        assert len(wallet.recent_credit_transactions()) == 1

    def test_purchase_zero(self, wallet, funded_lite):
        outcome = wallet.purchase_credits(funded_lite["liteIdentity"], funded_lite["tokenAccount"], 0)
        assert outcome.code == ErrorCode.INVALID_AMOUNT

    def test_calculate_credit_cost(self, wallet):
        outcome = wallet.calculate_credit_cost(100)
        assert outcome.data["acmeCost"] == 2_000_000
        assert outcome.transaction_id is None

    def test_oracle_network_error(self, wallet, mock_client):
        mock_client.value_from_oracle.side_effect = NetworkError("down")
        outcome = wallet.query_oracle_value()
        assert outcome.code == ErrorCode.NETWORK_ERROR

    def test_network_fees(self, wallet, mock_client):
        mock_client.network_globals.return_value = {"feeSchedule": {"createKeyBook": 5}}
        assert wallet.network_fees().data["createKeyBook"] == 5

    def test_identity_creation_cost(self, wallet, mock_client):
        mock_client.network_globals.return_value = {"feeSchedule": {"createIdentitySliding": [9_000, 8_000]}}
        outcome = wallet.identity_creation_cost("ab")
        assert outcome.data["credits"] == 8_000
        assert outcome.data["oracleValue"] == 500_000

    def test_credit_balance(self, wallet, mock_client):
        mock_client.get_credit_balance.return_value = 42
        assert wallet.credit_balance("acc://alice.acme/book0/1").data["credits"] == 42


class TestDataAndQueries:
    """Tests for data writes, queries and pending signatures."""

    def test_write_data(self, wallet, identity, mock_client):
        outcome = wallet.write_data("acc://alice.acme/notes", ["hello"], identity["keyPageUrl"])
        assert outcome.ok
        body = mock_client.execute_direct.call_args.args[0]["transaction"]["body"]
        assert body["entry"]["data"] == ["68656c6c6f"]

    def test_write_data_requires_entries(self, wallet, identity):
        outcome = wallet.write_data("acc://alice.acme/notes", [], identity["keyPageUrl"])
        assert outcome.code == ErrorCode.INVALID_INPUT

    def test_query_data(self, wallet, mock_client):
        mock_client.query_data.return_value = {"data": {"entry": {"data": ["00"]}}}
        outcome = wallet.query_data("acc://alice.acme/notes", entry_hash="ab")
        assert outcome.data == {"data": {"entry": {"data": ["00"]}}}
        mock_client.query_data.assert_called_once_with("acc://alice.acme/notes", "ab")

    def test_query_data_entries(self, wallet, mock_client):
        mock_client.query_data_set.return_value = {"items": []}
        assert wallet.query_data_entries("acc://alice.acme/notes", 0, 10).data == {"items": []}

    def test_query_balance(self, wallet, funded_lite, mock_client):
        mock_client.get_balance.return_value = 150_000_000
        outcome = wallet.query_balance(funded_lite["tokenAccount"])
        assert outcome.data["formatted"] == "1.5"

    def test_sign_pending(self, wallet, identity, mock_client):
        mock_client.query_tx.return_value = {"transaction": {"header": {}, "body": {}}}
        assert wallet.sign_pending("ab" * 32, identity["keyPageUrl"]).ok

    def test_faucet(self, wallet, mock_client, funded_lite):
        mock_client.faucet.return_value = {"result": {"txid": "faucet-tx"}}
        assert wallet.request_faucet(funded_lite["tokenAccount"]).transaction_id == "faucet-tx"

    def test_faucet_mainnet(self, mock_client):
        with AccumulateWallet.mainnet(client=mock_client) as wallet:
            outcome = wallet.request_faucet("acc://" + "ab" * 24 + "/ACME")
        assert not outcome.ok
        mock_client.faucet.assert_not_called()


class TestListings:
    """Tests for picker listings and statistics."""

    def test_statistics(self, wallet, identity, funded_lite):
        wallet.purchase_credits(identity["keyPageUrl"], funded_lite["tokenAccount"], 10)
        stats = wallet.statistics()
        assert stats["identities"] == 1
        assert stats["keyPages"] == 1
        assert stats["liteAccounts"] == 1
        assert stats["storedKeys"]["privateKeys"] == 2
        assert stats["creditTransactions"] == 1

    def test_dropdowns(self, wallet, identity, funded_lite):
        assert [i.url for i in wallet.identities_for_dropdown()] == ["acc://alice.acme"]
        assert [p.url for p in wallet.key_pages_for_dropdown()] == [identity["keyPageUrl"]]
        credit_urls = [a["url"] for a in wallet.credit_accounts_for_dropdown()]
        assert credit_urls == [funded_lite["liteIdentity"], identity["keyPageUrl"]]
        assert wallet.identity_hierarchy()[0]["identity"].name == "alice"


class TestBalancesAndPending:
    """Tests for wallet balance totals and pending signature discovery."""

    def test_total_wallet_balance(self, wallet, identity, funded_lite, mock_client):
        wallet.create_adi_token_account("tokens", "acc://alice.acme", identity["keyPageUrl"])
        balances = {funded_lite["tokenAccount"]: 150_000_000, "acc://alice.acme/tokens": 50_000_000}
        mock_client.get_balance.side_effect = lambda url: balances.get(url, 0)

        outcome = wallet.total_wallet_balance()
        assert outcome.ok
        assert outcome.data["totalBalance"] == 200_000_000
        assert outcome.data["formatted"] == "2 ACME"
        assert {a["address"] for a in outcome.data["accounts"]} == set(balances)
        assert outcome.data["errors"] == []

    def test_balance_summary_shares(self, wallet, identity, funded_lite, mock_client):
        wallet.create_adi_token_account("tokens", "acc://alice.acme", identity["keyPageUrl"])
        balances = {funded_lite["tokenAccount"]: 300, "acc://alice.acme/tokens": 100}
        mock_client.get_balance.side_effect = lambda url: balances.get(url, 0)

        summary = wallet.balance_summary().data
        assert summary["accountCount"] == 2
        shares = {a["address"]: a["percentage"] for a in summary["accounts"]}
        assert shares == {funded_lite["tokenAccount"]: 75.0, "acc://alice.acme/tokens": 25.0}
        assert summary["hasErrors"] is False

    def test_balance_network_error_is_collected(self, wallet, funded_lite, mock_client):
        mock_client.get_balance.side_effect = NetworkError("down")
        outcome = wallet.total_wallet_balance()
        assert outcome.ok
        assert outcome.data["totalBalance"] == 0
        assert len(outcome.data["errors"]) == 1

    def test_pending_signatures_default_paths(self, wallet, identity, mock_client):
        mock_client.query_pending.return_value = [{"txid": "acc://ab@bob.acme", "type": "sendTokens"}]
        outcome = wallet.pending_signatures()
        assert outcome.data["count"] == 1
        assert outcome.data["transactions"] == [{"txId": "acc://ab@bob.acme", "type": "sendTokens"}]
        assert outcome.data["bySigningPath"][0]["signer"] == identity["keyPageUrl"]
        mock_client.query_pending.assert_called_once_with(identity["keyPageUrl"])

    def test_pending_count(self, wallet, mock_client):
        mock_client.query_pending.return_value = [{"txid": "a"}, {"txid": "b"}]
        outcome = wallet.pending_count("acc://alice.acme/book0/1")
        assert outcome.data == {"signer": "acc://alice.acme/book0/1", "count": 2}

    def test_has_pending_transactions(self, wallet, identity, mock_client):
        mock_client.query_pending.return_value = []
        assert wallet.has_pending_transactions().data["hasPending"] is False
        mock_client.query_pending.return_value = [{"txid": "a"}]
        assert wallet.has_pending_transactions().data["hasPending"] is True
