r"""
Ed25519 key material for the wallet.

Thin wrapper over ``cryptography``'s raw Ed25519 keys plus the lite address
derivation used by the Accumulate network.
"""

from __future__ import annotations
import hashlib
import logging
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..runtime.errors import KeyGenerationError, ValidationError, ErrorCode

logger = logging.getLogger(__name__)

PRIVATE_KEY_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64


def public_key_hash(public_key: bytes) -> bytes:
    """SHA-256 of a raw public key (the network-visible key fingerprint)."""
    return hashlib.sha256(public_key).digest()


def derive_lite_identity_url(key_hash: Union[bytes, str]) -> str:
    """
    Derive the base lite identity URL from a public key hash.

    The first 20 bytes of the hash are hex encoded and followed by a 4-byte
    checksum: the last 4 bytes of SHA-256 over that hex string.

    Args:
        key_hash: SHA-256 hash of the public key (bytes or hex)

    Returns:
        Lite identity URL in format acc://[40_hex_chars][8_checksum]

    Raises:
        ValidationError: If the hash is shorter than 20 bytes or not hex
    """
    if isinstance(key_hash, str):
        try:
            key_hash = bytes.fromhex(key_hash)
        except ValueError as e:
            raise ValidationError(f"Invalid key hash hex: {e}", ErrorCode.INVALID_KEY)
    if len(key_hash) < 20:
        raise ValidationError(
            f"Key hash must be at least 20 bytes, got {len(key_hash)}", ErrorCode.INVALID_KEY
        )

    key_str = key_hash[:20].hex()
    checksum = hashlib.sha256(key_str.encode("utf-8")).digest()[28:].hex()
    return f"acc://{key_str}{checksum}"


class Ed25519KeyPair:
    """
    Ed25519 key pair containing both private and public keys.
    """

    def __init__(self, private_key: CryptoEd25519PrivateKey):
        self._private_key = private_key
        self._private_bytes = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        self._public_key = private_key.public_key()
        self._public_bytes = self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @classmethod
    def generate(cls) -> Ed25519KeyPair:
        """
        Generate a new random key pair.

        Raises:
            KeyGenerationError: If the crypto backend cannot produce a key
        """
        try:
            return cls(CryptoEd25519PrivateKey.generate())
        except Exception as e:
            raise KeyGenerationError(f"Failed to generate Ed25519 key: {e}", cause=e)

    @classmethod
    def from_private_bytes(cls, key_bytes: bytes) -> Ed25519KeyPair:
        """Create key pair from a 32-byte private key seed."""
        if len(key_bytes) != PRIVATE_KEY_SIZE:
            raise ValidationError(
                f"Ed25519 private key must be {PRIVATE_KEY_SIZE} bytes, got {len(key_bytes)}",
                ErrorCode.INVALID_KEY,
            )
        return cls(CryptoEd25519PrivateKey.from_private_bytes(key_bytes))

    @classmethod
    def from_private_hex(cls, hex_string: str) -> Ed25519KeyPair:
        """Create key pair from private key hex string."""
        try:
            key_bytes = bytes.fromhex(hex_string.strip())
        except ValueError as e:
            raise ValidationError(f"Invalid private key hex: {e}", ErrorCode.INVALID_KEY)
        return cls.from_private_bytes(key_bytes)

    @classmethod
    def from_seed(cls, seed: Union[str, bytes]) -> Ed25519KeyPair:
        """Deterministic key pair from SHA-256 of an arbitrary seed."""
        if isinstance(seed, str):
            seed = seed.encode('utf-8')
        return cls.from_private_bytes(hashlib.sha256(seed).digest())

    def sign(self, message: bytes) -> bytes:
        """Sign a message and return signature bytes."""
        return self._private_key.sign(message)

    def verify(self, message: bytes, signature: bytes) -> bool:
        """
        Verify a signature against a message.

        Args:
            message: Message that was signed
            signature: 64-byte Ed25519 signature

        Returns:
            True if signature is valid
        """
        return verify_signature(self._public_bytes, signature, message)

    def public_key_bytes(self) -> bytes:
        return self._public_bytes

    def private_key_bytes(self) -> bytes:
        return self._private_bytes

    def public_key_hex(self) -> str:
        return self._public_bytes.hex()

    def private_key_hex(self) -> str:
        return self._private_bytes.hex()

    def public_key_hash(self) -> bytes:
        return public_key_hash(self._public_bytes)

    def public_key_hash_hex(self) -> str:
        return self.public_key_hash().hex()

    def derive_lite_identity_url(self) -> str:
        """Base lite identity URL for this key."""
        return derive_lite_identity_url(self.public_key_hash())

    def derive_lite_token_account_url(self, token: str = "ACME") -> str:
        """
        Derive Lite Token Account URL.

        Args:
            token: Token symbol (default: "ACME")
        """
        return f"{self.derive_lite_identity_url()}/{token}"

    def __str__(self) -> str:
        return f"Ed25519KeyPair(public={self.public_key_hex()})"

    def __repr__(self) -> str:
        # Never expose the private half
        return self.__str__()


def verify_signature(public_key: bytes, signature: bytes, message: bytes) -> bool:
    """Verify an Ed25519 signature. Returns True if valid, False otherwise."""
    if len(public_key) != PUBLIC_KEY_SIZE or len(signature) != SIGNATURE_SIZE:
        return False
    try:
        CryptoEd25519PublicKey.from_public_bytes(public_key).verify(signature, message)
        return True
    except (InvalidSignature, ValueError):
        return False


def is_valid_private_key(hex_string: str) -> bool:
    """A private key is 32 bytes of hex that the curve accepts."""
    try:
        Ed25519KeyPair.from_private_hex(hex_string)
        return True
    except (ValidationError, ValueError):
        return False


def is_valid_public_key(hex_string: str) -> bool:
    """64 hex characters."""
    if not isinstance(hex_string, str) or len(hex_string) != PUBLIC_KEY_SIZE * 2:
        return False
    try:
        bytes.fromhex(hex_string)
        return True
    except ValueError:
        return False


__all__ = [
    "Ed25519KeyPair",
    "derive_lite_identity_url",
    "public_key_hash",
    "verify_signature",
    "is_valid_private_key",
    "is_valid_public_key",
]
