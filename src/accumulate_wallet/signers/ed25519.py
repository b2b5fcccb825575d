"""
Lite identity signer.

Lite identities have no key page: the identity itself is the authority, and
its version is always 1.
"""

from __future__ import annotations
import logging

from ..crypto.ed25519 import Ed25519KeyPair
from ..runtime.url import AccountUrl
from .signer import Signer, SignerError

logger = logging.getLogger(__name__)

LITE_SIGNER_VERSION = 1


class LiteIdentitySigner(Signer):
    """Signer bound to a base lite identity URL."""

    def __init__(self, lite_identity_url: str, keypair: Ed25519KeyPair):
        """
        Args:
            lite_identity_url: Base lite identity (no token suffix)
            keypair: Key whose hash derives the identity

        Raises:
            SignerError: If the URL is not a base lite identity
        """
        try:
            parsed = AccountUrl(lite_identity_url)
        except ValueError as e:
            raise SignerError(f"Invalid lite identity URL: {lite_identity_url}", cause=e)
        if not parsed.is_lite or not parsed.is_root():
            raise SignerError(f"Lite signer needs a base lite identity, got {lite_identity_url}")

        super().__init__(keypair)
        self.url = str(parsed)

        derived = keypair.derive_lite_identity_url()
        if derived.lower() != self.url.lower():
            # Keys imported under another address still sign; the network decides
            logger.warning(f"Key does not derive {self.url} (derives {derived})")

    def get_signer_url(self) -> str:
        return self.url

    def get_signer_version(self) -> int:
        return LITE_SIGNER_VERSION


__all__ = ["LiteIdentitySigner", "LITE_SIGNER_VERSION"]
