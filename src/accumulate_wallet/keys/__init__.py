"""
Key management for the wallet.
"""

from .key_management import KeyManagementService, KeyPairData, LiteAccountKeys, SignerLookup

__all__ = [
    "KeyManagementService",
    "KeyPairData",
    "LiteAccountKeys",
    "SignerLookup",
]
