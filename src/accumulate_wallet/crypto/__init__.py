"""
Cryptographic primitives for the wallet core.

Ed25519 key pairs and lite address derivation.
"""

from .ed25519 import (
    Ed25519KeyPair,
    derive_lite_identity_url,
    public_key_hash,
    verify_signature,
    is_valid_private_key,
    is_valid_public_key,
)

__all__ = [
    "Ed25519KeyPair",
    "derive_lite_identity_url",
    "public_key_hash",
    "verify_signature",
    "is_valid_private_key",
    "is_valid_public_key",
]
