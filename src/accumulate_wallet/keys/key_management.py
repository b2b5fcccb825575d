r"""
Key management service.

Generates Ed25519 key pairs, derives lite addresses, stores private keys in
the secure key store and builds signers from stored keys.

Storage convention: a lite account's key is stored under its *base* lite
identity URL, never under the ``/<TOKEN>`` account form. Key page keys are
stored under the exact key page URL.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from ..crypto.ed25519 import Ed25519KeyPair, derive_lite_identity_url, is_valid_private_key
from ..runtime.errors import ValidationError, ErrorCode
from ..runtime.url import AccountUrl, normalize_signer_url, is_lite_url
from ..signers.ed25519 import LiteIdentitySigner
from ..signers.keypage import KeyPageSigner
from ..storage.secure_keys import SecureKeysService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPairData:
    """Hex-encoded key pair plus the public key hash."""

    public_key: str
    private_key: str
    public_key_hash: str

    @classmethod
    def from_keypair(cls, keypair: Ed25519KeyPair) -> KeyPairData:
        return cls(
            public_key=keypair.public_key_hex(),
            private_key=keypair.private_key_hex(),
            public_key_hash=keypair.public_key_hash_hex(),
        )

    def to_keypair(self) -> Ed25519KeyPair:
        return Ed25519KeyPair.from_private_hex(self.private_key)

    def __repr__(self) -> str:
        return f"KeyPairData(public_key={self.public_key!r}, public_key_hash={self.public_key_hash!r})"


@dataclass(frozen=True)
class LiteAccountKeys:
    """A freshly generated lite account: its key and both address forms."""

    keys: KeyPairData
    lite_identity: str
    token_account: str


@dataclass(frozen=True)
class SignerLookup:
    """
    Outcome of a lite signer lookup.

    ``resolved_form`` is ``"base"`` when the key was found under the
    normalized lite identity and ``"raw"`` when only the caller's original
    string matched.
    """

    signer: LiteIdentitySigner
    resolved_form: str
    storage_address: str


class KeyManagementService:
    """
    Key generation, storage and signer construction.

    Lookups are soft-fail: absence of a stored key returns None. Generation
    failures raise :class:`KeyGenerationError`.
    """

    def __init__(self, secure_keys: SecureKeysService):
        self.secure_keys = secure_keys

    # Generation and derivation

    def generate_key_pair(self) -> KeyPairData:
        """
        Produce a fresh Ed25519 key pair.

        Raises:
            KeyGenerationError: If the crypto backend fails
        """
        keypair = Ed25519KeyPair.generate()
        data = KeyPairData.from_keypair(keypair)
        logger.debug(f"Generated key pair with hash {data.public_key_hash[:16]}...")
        return data

    @staticmethod
    def derive_lite_address(public_key_hash: Union[str, bytes]) -> str:
        """Base lite identity URL for a public key hash. Pure function."""
        return derive_lite_identity_url(public_key_hash)

    def generate_lite_account(self, token: str = "ACME", store: bool = True) -> LiteAccountKeys:
        """
        Generate a key and derive its lite identity and token account.

        Args:
            token: Token symbol of the lite token account
            store: Persist the private key under the lite identity
        """
        keys = self.generate_key_pair()
        lite_identity = self.derive_lite_address(keys.public_key_hash)
        account = LiteAccountKeys(
            keys=keys,
            lite_identity=lite_identity,
            token_account=f"{lite_identity}/{token}",
        )
        if store:
            self.store_key(lite_identity, keys.private_key)
            self.secure_keys.store_public_key(lite_identity, keys.public_key)
        return account

    def import_private_key(self, private_key_hex: str, store: bool = True) -> LiteAccountKeys:
        """
        Import an existing private key and derive its lite addresses.

        Raises:
            ValidationError: If the hex is not a valid 32-byte Ed25519 key
        """
        if not is_valid_private_key(private_key_hex):
            raise ValidationError("Private key must be 32 bytes of hex", ErrorCode.INVALID_KEY)
        keys = KeyPairData.from_keypair(Ed25519KeyPair.from_private_hex(private_key_hex))
        lite_identity = self.derive_lite_address(keys.public_key_hash)
        if store:
            self.store_key(lite_identity, keys.private_key)
            self.secure_keys.store_public_key(lite_identity, keys.public_key)
        logger.info(f"Imported key for {lite_identity}")
        return LiteAccountKeys(keys=keys, lite_identity=lite_identity, token_account=f"{lite_identity}/ACME")

    # Storage

    @staticmethod
    def storage_address(address: str) -> str:
        """Canonical storage key: lite URLs reduce to their base identity."""
        try:
            if AccountUrl(address).is_lite:
                return normalize_signer_url(address)
        except ValueError:
            pass
        return address

    def store_key(self, address: str, private_key_hex: str) -> None:
        """
        Store a private key for an address.

        Raises:
            ValidationError: If the key is not valid hex for a 32-byte key
        """
        if not is_valid_private_key(private_key_hex):
            raise ValidationError("Private key must be 32 bytes of hex", ErrorCode.INVALID_KEY)
        canonical = self.storage_address(address)
        if canonical != address:
            logger.debug(f"Storing key for {address} under {canonical}")
        self.secure_keys.store_private_key(canonical, private_key_hex)

    def retrieve_key(self, address: str) -> Optional[str]:
        """Private key hex stored under exactly this address, or None."""
        return self.secure_keys.get_private_key(address)

    def has_key(self, address: str) -> bool:
        return self.secure_keys.has_private_key(self.storage_address(address))

    def delete_key(self, address: str) -> None:
        self.secure_keys.delete_account_keys(self.storage_address(address))

    # Signers

    def _load_keypair(self, address: str) -> Optional[Ed25519KeyPair]:
        private_key = self.retrieve_key(address)
        if private_key is None:
            return None
        return Ed25519KeyPair.from_private_hex(private_key)

    def lookup_lite_signer(self, address: str) -> Optional[SignerLookup]:
        """
        Find a lite signer for either address form.

        The normalized base identity is tried first. If nothing is stored
        there, the caller's original string is tried as a logged fallback.
        """
        base = normalize_signer_url(address)
        if not is_lite_url(base):
            logger.warning(f"{address} is not a lite address")
            return None

        keypair = self._load_keypair(base)
        if keypair is not None:
            return SignerLookup(LiteIdentitySigner(base, keypair), "base", base)

        if base != address:
            logger.warning(f"No key under lite identity {base}; falling back to {address}")
            keypair = self._load_keypair(address)
            if keypair is not None:
                logger.warning(f"Resolved lite signer via raw address {address}")
                return SignerLookup(LiteIdentitySigner(base, keypair), "raw", address)

        logger.debug(f"No private key stored for {address}")
        return None

    def create_lite_signer(self, address: str) -> Optional[LiteIdentitySigner]:
        """
        Signer for a lite identity or lite token account.

        Returns:
            Signer bound to the base lite identity, or None if no key is stored
        """
        lookup = self.lookup_lite_signer(address)
        return lookup.signer if lookup else None

    def create_identity_signer(self, key_page_url: str, version: int) -> Optional[KeyPageSigner]:
        """
        Signer for a key page.

        Args:
            key_page_url: Exact key page URL the key is stored under
            version: Page version fetched from the network just now

        Returns:
            Signer bound to the page and version, or None if no key is stored
        """
        keypair = self._load_keypair(key_page_url)
        if keypair is None:
            logger.debug(f"No private key stored for key page {key_page_url}")
            return None
        return KeyPageSigner(key_page_url, keypair, version)

    def key_statistics(self) -> Dict[str, int]:
        return self.secure_keys.key_statistics()


__all__ = [
    "KeyManagementService",
    "KeyPairData",
    "LiteAccountKeys",
    "SignerLookup",
]
