"""
Signers for lite identities and key pages.
"""

from .signer import Signer, SignerError
from .ed25519 import LiteIdentitySigner, LITE_SIGNER_VERSION
from .keypage import KeyPageSigner

__all__ = [
    "Signer",
    "SignerError",
    "LiteIdentitySigner",
    "LITE_SIGNER_VERSION",
    "KeyPageSigner",
]
