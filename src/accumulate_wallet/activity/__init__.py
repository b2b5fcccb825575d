"""
Wallet-wide views over the network: balances and pending signatures.
"""

from .balances import BalanceAggregationService, BalanceAggregation, AccountBalance
from .pending import PendingTransactionService, PendingSignatures, PendingBucket, PendingTransaction

__all__ = [
    "BalanceAggregationService",
    "BalanceAggregation",
    "AccountBalance",
    "PendingTransactionService",
    "PendingSignatures",
    "PendingBucket",
    "PendingTransaction",
]
