"""
Identity and account registry over the local ledger mirror.
"""

from .identity import IdentityRegistry, CompleteIdentity, ParentRepairs, PLACEHOLDER_KEY_HASH
from .accounts import AccountRegistry, ACME_PRECISION
from . import validation

__all__ = [
    "IdentityRegistry",
    "CompleteIdentity",
    "ParentRepairs",
    "AccountRegistry",
    "PLACEHOLDER_KEY_HASH",
    "ACME_PRECISION",
    "validation",
]
