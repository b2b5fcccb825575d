r"""
KeyPage signer implementation.

A key page signature must claim the page's current on-chain version. The
version is fixed when the signer is built, so a signer should be built right
after the version is fetched and used for a single submission.
"""

from __future__ import annotations
import logging

from ..crypto.ed25519 import Ed25519KeyPair
from ..runtime.url import AccountUrl
from .signer import Signer, SignerError

logger = logging.getLogger(__name__)


class KeyPageSigner(Signer):
    """Signer bound to a key page URL and version."""

    def __init__(self, page_url: str, keypair: Ed25519KeyPair, version: int = 1):
        """
        Initialize KeyPage signer.

        Args:
            page_url: URL of the KeyPage (``acc://name.acme/book/1``)
            keypair: Key held on the page
            version: Version number of the KeyPage as last fetched

        Raises:
            SignerError: If the URL is not an identity sub-account or the
                version is not positive
        """
        try:
            parsed = AccountUrl(page_url)
        except ValueError as e:
            raise SignerError(f"Invalid key page URL: {page_url}", cause=e)
        if parsed.is_root():
            raise SignerError(f"Key page URL must include the book path: {page_url}")
        if version < 1:
            raise SignerError(f"Key page version must be positive, got {version}")

        super().__init__(keypair)
        self.page_url = str(parsed)
        self.version = version

    def get_signer_url(self) -> str:
        return self.page_url

    def get_signer_version(self) -> int:
        return self.version

    def with_version(self, version: int) -> KeyPageSigner:
        """New signer for the same page and key with another version."""
        logger.debug(f"Rebinding {self.page_url} signer from v{self.version} to v{version}")
        return KeyPageSigner(self.page_url, self.keypair, version)


__all__ = ["KeyPageSigner"]
