"""
Local persistence for the wallet.

Secure key/value storage for secrets and a SQLite ledger store for the
local mirror of identities and accounts.
"""

from .secure_store import SecureStorage, MemorySecureStorage, EncryptedFileStorage
from .secure_keys import SecureKeysService
from .database import LedgerStore
from .wallet_storage import WalletStorageService
from .models import (
    AccountType,
    TokenAccountKind,
    Identity,
    KeyBook,
    KeyPage,
    Key,
    TokenAccount,
    DataAccount,
    CustomToken,
    WalletAccount,
    TransactionRecord,
    AddressBookEntry,
)

__all__ = [
    "SecureStorage",
    "MemorySecureStorage",
    "EncryptedFileStorage",
    "SecureKeysService",
    "LedgerStore",
    "WalletStorageService",
    "AccountType",
    "TokenAccountKind",
    "Identity",
    "KeyBook",
    "KeyPage",
    "Key",
    "TokenAccount",
    "DataAccount",
    "CustomToken",
    "WalletAccount",
    "TransactionRecord",
    "AddressBookEntry",
]
