r"""
Base signer interface.

A signer is a capability bound to an account URL and a private key (and for
key pages a version) that produces detached signatures over transaction
digests and the matching protocol signature object.
"""

from __future__ import annotations
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..crypto.ed25519 import Ed25519KeyPair, verify_signature
from ..runtime.errors import WalletError, ErrorCode


class SignerError(WalletError):
    """Base exception for signer operations."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_KEY, details, cause)


class Signer(ABC):
    """
    Base signer.

    Subclasses decide which URL signs and which version the signature
    claims; key handling is shared.
    """

    signature_type = "ed25519"

    def __init__(self, keypair: Ed25519KeyPair):
        self.keypair = keypair

    @abstractmethod
    def get_signer_url(self) -> str:
        """
        Get the signer's URL.

        Returns:
            Account URL the network resolves the signing authority from
        """

    @abstractmethod
    def get_signer_version(self) -> int:
        """Version of the signing authority the signature claims."""

    def sign(self, digest: bytes) -> bytes:
        """
        Sign a digest.

        Args:
            digest: 32-byte hash to sign

        Returns:
            64-byte Ed25519 signature
        """
        return self.keypair.sign(digest)

    def verify(self, signature: bytes, digest: bytes) -> bool:
        return verify_signature(self.get_public_key(), signature, digest)

    def get_public_key(self) -> bytes:
        return self.keypair.public_key_bytes()

    def get_public_key_hash(self) -> bytes:
        return self.keypair.public_key_hash()

    def to_signature(self, digest: bytes, timestamp: Optional[int] = None) -> Dict[str, Any]:
        """
        Sign a digest and build the protocol signature object.

        Args:
            digest: Transaction hash
            timestamp: Signature timestamp in microseconds (defaults to now)

        Returns:
            Signature dict for the transaction envelope
        """
        if timestamp is None:
            timestamp = int(time.time() * 1_000_000)
        return {
            "type": self.signature_type,
            "publicKey": self.get_public_key().hex(),
            "signature": self.sign(digest).hex(),
            "signer": self.get_signer_url(),
            "signerVersion": self.get_signer_version(),
            "timestamp": timestamp,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_signer_url()}, v{self.get_signer_version()})"


__all__ = ["Signer", "SignerError"]
