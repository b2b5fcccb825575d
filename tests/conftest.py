"""
Shared fixtures: in-memory stores, deterministic keys and a mocked ledger client.

No test talks to a network node.
"""

from unittest.mock import Mock

import pytest

from accumulate_wallet.client.ledger_client import LedgerClient
from accumulate_wallet.config import WalletConfig
from accumulate_wallet.crypto.ed25519 import Ed25519KeyPair
from accumulate_wallet.facade import AccumulateWallet
from accumulate_wallet.keys.key_management import KeyManagementService
from accumulate_wallet.registry.accounts import AccountRegistry
from accumulate_wallet.registry.identity import IdentityRegistry
from accumulate_wallet.storage.database import LedgerStore
from accumulate_wallet.storage.secure_keys import SecureKeysService
from accumulate_wallet.storage.secure_store import MemorySecureStorage
from accumulate_wallet.storage.wallet_storage import WalletStorageService

ACCEPTED = {"result": {"txid": "txid-123", "hash": "hash-456"}}
TEST_ORACLE = 500_000


@pytest.fixture
def store():
    ledger_store = LedgerStore(":memory:")
    yield ledger_store
    ledger_store.close()


@pytest.fixture
def secure_storage():
    return MemorySecureStorage()


@pytest.fixture
def secure_keys(secure_storage):
    return SecureKeysService(secure_storage)


@pytest.fixture
def key_service(secure_keys):
    return KeyManagementService(secure_keys)


@pytest.fixture
def keypair():
    """Deterministic Ed25519 key pair."""
    return Ed25519KeyPair.from_seed("accumulate-wallet-tests")


@pytest.fixture
def other_keypair():
    return Ed25519KeyPair.from_seed("accumulate-wallet-tests-2")


@pytest.fixture
def identities(store):
    return IdentityRegistry(store)


@pytest.fixture
def accounts(store, identities):
    return AccountRegistry(store, identities)


@pytest.fixture
def wallet_storage(store):
    return WalletStorageService(store)


@pytest.fixture
def mock_client():
    """Ledger client mock that accepts every submission."""
    client = Mock(spec=LedgerClient)
    client.endpoint = "https://testnet.accumulatenetwork.io/v2"
    client.get_signer_version.return_value = 1
    client.value_from_oracle.return_value = TEST_ORACLE
    client.execute_direct.return_value = ACCEPTED
    client.network_globals.return_value = {}
    return client


@pytest.fixture
def wallet(mock_client):
    w = AccumulateWallet(WalletConfig(), client=mock_client, secure_storage=MemorySecureStorage())
    yield w
    w.close()


@pytest.fixture
def funded_lite(wallet):
    """A lite account registered in the wallet, returned as its outcome data."""
    outcome = wallet.create_lite_account("Main")
    assert outcome.ok
    return outcome.data
