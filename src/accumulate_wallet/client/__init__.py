"""
Ledger client adapter and response normalization.
"""

from .ledger_client import LedgerClient, DEFAULT_TIMEOUT
from .responses import Success, Failure, TxOutcome, parse_response

__all__ = [
    "LedgerClient",
    "DEFAULT_TIMEOUT",
    "Success",
    "Failure",
    "TxOutcome",
    "parse_response",
]
