"""
Accumulate Wallet Core

Local ledger mirror, secure key store, key management, identity and account
registry, ledger client, transaction signing and credit economics for an
Accumulate wallet.
"""

# Facade and configuration
from .facade import AccumulateWallet
from .config import WalletConfig, configure_logging

# Outcomes and errors
from .client.responses import Success, Failure, TxOutcome, parse_response
from .runtime.errors import (
    ErrorCode,
    WalletError,
    ValidationError,
    MissingKeyError,
    KeyGenerationError,
    NetworkError,
    ProtocolRejectionError,
    LocalConsistencyError,
)
from .runtime.url import AccountUrl

# Services
from .client.ledger_client import LedgerClient
from .keys.key_management import KeyManagementService
from .registry.identity import IdentityRegistry
from .registry.accounts import AccountRegistry
from .tx.signing import TransactionSigningService, SubmissionState
from .credits.economics import CreditEconomicsService, credits_to_token_amount, format_token_amount, parse_token_amount
from .credits.fees import FeeSchedule
from .activity import BalanceAggregationService, PendingTransactionService
from .storage.database import LedgerStore
from .storage.secure_store import SecureStorage, MemorySecureStorage, EncryptedFileStorage

__version__ = "0.1.0"
__all__ = [
    "AccumulateWallet",
    "WalletConfig",
    "configure_logging",
    "Success",
    "Failure",
    "TxOutcome",
    "parse_response",
    "ErrorCode",
    "WalletError",
    "ValidationError",
    "MissingKeyError",
    "KeyGenerationError",
    "NetworkError",
    "ProtocolRejectionError",
    "LocalConsistencyError",
    "AccountUrl",
    "LedgerClient",
    "KeyManagementService",
    "IdentityRegistry",
    "AccountRegistry",
    "TransactionSigningService",
    "SubmissionState",
    "CreditEconomicsService",
    "credits_to_token_amount",
    "format_token_amount",
    "parse_token_amount",
    "FeeSchedule",
    "BalanceAggregationService",
    "PendingTransactionService",
    "LedgerStore",
    "SecureStorage",
    "MemorySecureStorage",
    "EncryptedFileStorage",
    "__version__",
]
