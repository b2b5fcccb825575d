"""
Prefixed key material service on top of a SecureStorage backend.

Every secret lives under a prefixed storage key so a single flat store can
hold private keys, public keys, mnemonics, seeds and authentication data for
many accounts at once.
"""

from __future__ import annotations
import base64
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Dict, List, Optional, Any

from cryptography.fernet import InvalidToken

from .secure_store import SecureStorage, EncryptedFileStorage
from ..runtime.errors import SecureStorageError

logger = logging.getLogger(__name__)

PRIVATE_KEY_PREFIX = "priv_key_"
PUBLIC_KEY_PREFIX = "pub_key_"
MNEMONIC_PREFIX = "mnemonic_"
SEED_PREFIX = "seed_"
PIN_PREFIX = "pin_"
BIOMETRIC_PREFIX = "bio_"
MASTER_PASSPHRASE_KEY = "master_passphrase"

PIN_SALT = "accumulate_salt"
BACKUP_VERSION = "1.0"


def hash_pin(pin: str) -> str:
    """sha256(pin + salt) as hex."""
    return hashlib.sha256((pin + PIN_SALT).encode('utf-8')).hexdigest()


class SecureKeysService:
    """
    Accessors for per-address key material.

    Lookups are soft-fail: a missing entry returns None rather than raising.
    """

    def __init__(self, storage: SecureStorage):
        self.storage = storage

    # Private / public keys

    def store_private_key(self, address: str, private_key_hex: str) -> None:
        self.storage.write(PRIVATE_KEY_PREFIX + address, private_key_hex)
        logger.debug(f"Stored private key for {address}")

    def get_private_key(self, address: str) -> Optional[str]:
        return self.storage.read(PRIVATE_KEY_PREFIX + address)

    def has_private_key(self, address: str) -> bool:
        return self.storage.contains(PRIVATE_KEY_PREFIX + address)

    def delete_private_key(self, address: str) -> None:
        self.storage.delete(PRIVATE_KEY_PREFIX + address)

    def store_public_key(self, address: str, public_key_hex: str) -> None:
        self.storage.write(PUBLIC_KEY_PREFIX + address, public_key_hex)

    def get_public_key(self, address: str) -> Optional[str]:
        return self.storage.read(PUBLIC_KEY_PREFIX + address)

    def delete_public_key(self, address: str) -> None:
        self.storage.delete(PUBLIC_KEY_PREFIX + address)

    def addresses_with_keys(self) -> List[str]:
        """Addresses that have a private key stored, sorted."""
        return sorted(
            key[len(PRIVATE_KEY_PREFIX):]
            for key in self.storage.read_all()
            if key.startswith(PRIVATE_KEY_PREFIX)
        )

    def delete_account_keys(self, address: str) -> None:
        """Remove every secret stored for an address."""
        for prefix in (PRIVATE_KEY_PREFIX, PUBLIC_KEY_PREFIX, MNEMONIC_PREFIX, SEED_PREFIX):
            self.storage.delete(prefix + address)
        logger.debug(f"Deleted key material for {address}")

    # Mnemonics and seeds

    def store_mnemonic(self, wallet_id: str, mnemonic: str) -> None:
        self.storage.write(MNEMONIC_PREFIX + wallet_id, mnemonic)

    def get_mnemonic(self, wallet_id: str) -> Optional[str]:
        return self.storage.read(MNEMONIC_PREFIX + wallet_id)

    def has_mnemonic(self, wallet_id: str) -> bool:
        return self.storage.contains(MNEMONIC_PREFIX + wallet_id)

    def delete_mnemonic(self, wallet_id: str) -> None:
        self.storage.delete(MNEMONIC_PREFIX + wallet_id)

    def store_seed(self, wallet_id: str, seed: bytes) -> None:
        self.storage.write(SEED_PREFIX + wallet_id, base64.b64encode(seed).decode('ascii'))

    def get_seed(self, wallet_id: str) -> Optional[bytes]:
        value = self.storage.read(SEED_PREFIX + wallet_id)
        if value is None:
            return None
        return base64.b64decode(value)

    def delete_seed(self, wallet_id: str) -> None:
        self.storage.delete(SEED_PREFIX + wallet_id)

    # Derived keys, stored as "{purpose}_key_{address}"

    @staticmethod
    def _derived_key(purpose: str, address: str) -> str:
        return f"{purpose}_key_{address}"

    def store_derived_key(self, purpose: str, address: str, key: str) -> None:
        self.storage.write(self._derived_key(purpose, address), key)

    def get_derived_key(self, purpose: str, address: str) -> Optional[str]:
        return self.storage.read(self._derived_key(purpose, address))

    def delete_derived_key(self, purpose: str, address: str) -> None:
        self.storage.delete(self._derived_key(purpose, address))

    # Authentication data

    def store_pin(self, pin: str) -> None:
        self.storage.write(PIN_PREFIX + "hash", hash_pin(pin))

    def verify_pin(self, pin: str) -> bool:
        stored = self.storage.read(PIN_PREFIX + "hash")
        if stored is None:
            return False
        return hmac.compare_digest(stored, hash_pin(pin))

    def has_pin(self) -> bool:
        return self.storage.contains(PIN_PREFIX + "hash")

    def delete_pin(self) -> None:
        self.storage.delete(PIN_PREFIX + "hash")

    def set_biometric_enabled(self, enabled: bool) -> None:
        self.storage.write(BIOMETRIC_PREFIX + "enabled", "true" if enabled else "false")

    def is_biometric_enabled(self) -> bool:
        return self.storage.read(BIOMETRIC_PREFIX + "enabled") == "true"

    def store_biometric_token(self, token: str) -> None:
        self.storage.write(BIOMETRIC_PREFIX + "token", token)

    def get_biometric_token(self) -> Optional[str]:
        return self.storage.read(BIOMETRIC_PREFIX + "token")

    def delete_biometric_data(self) -> None:
        self.storage.delete(BIOMETRIC_PREFIX + "enabled")
        self.storage.delete(BIOMETRIC_PREFIX + "token")

    def set_master_passphrase(self, passphrase: str) -> None:
        self.storage.write(MASTER_PASSPHRASE_KEY, passphrase)

    def get_master_passphrase(self) -> Optional[str]:
        return self.storage.read(MASTER_PASSPHRASE_KEY)

    # Maintenance

    def clear_all(self) -> None:
        """Remove all stored keys and authentication data."""
        self.storage.delete_all()
        logger.warning("Cleared all secure data")

    def key_statistics(self) -> Dict[str, int]:
        """Count stored entries by kind."""
        stats = {"privateKeys": 0, "publicKeys": 0, "mnemonics": 0, "seeds": 0, "other": 0}
        for key in self.storage.read_all():
            if key.startswith(PRIVATE_KEY_PREFIX):
                stats["privateKeys"] += 1
            elif key.startswith(PUBLIC_KEY_PREFIX):
                stats["publicKeys"] += 1
            elif key.startswith(MNEMONIC_PREFIX):
                stats["mnemonics"] += 1
            elif key.startswith(SEED_PREFIX):
                stats["seeds"] += 1
            else:
                stats["other"] += 1
        return stats

    def health_check(self) -> bool:
        """Write, read back and delete a sentinel value."""
        sentinel_key = "__health_check__"
        sentinel_value = str(time.time())
        try:
            self.storage.write(sentinel_key, sentinel_value)
            ok = self.storage.read(sentinel_key) == sentinel_value
            self.storage.delete(sentinel_key)
            return ok
        except SecureStorageError as e:
            logger.error(f"Secure storage health check failed: {e}")
            return False

    def export_backup(self, password: str) -> str:
        """
        Export every entry as a password-encrypted backup string.

        The payload is a JSON envelope with the PBKDF2 salt and a Fernet token
        over ``{"version", "timestamp", "keys"}``.
        """
        salt = os.urandom(16)
        fernet = EncryptedFileStorage._derive_fernet(password, salt)
        payload = json.dumps({
            "version": BACKUP_VERSION,
            "timestamp": int(time.time()),
            "keys": self.storage.read_all(),
        })
        envelope = {
            "salt": base64.b64encode(salt).decode('ascii'),
            "data": fernet.encrypt(payload.encode('utf-8')).decode('ascii'),
        }
        return base64.b64encode(json.dumps(envelope).encode('utf-8')).decode('ascii')

    def import_backup(self, backup: str, password: str) -> int:
        """
        Restore entries from :meth:`export_backup` output.

        Returns:
            Number of entries written

        Raises:
            SecureStorageError: If the backup is malformed or the password is wrong
        """
        try:
            envelope = json.loads(base64.b64decode(backup))
            salt = base64.b64decode(envelope["salt"])
            fernet = EncryptedFileStorage._derive_fernet(password, salt)
            payload: Dict[str, Any] = json.loads(fernet.decrypt(envelope["data"].encode('ascii')))
        except InvalidToken as e:
            raise SecureStorageError("Backup password is incorrect", cause=e)
        except (ValueError, KeyError, TypeError) as e:
            raise SecureStorageError(f"Malformed backup: {e}", cause=e)

        keys = payload.get("keys", {})
        for key, value in keys.items():
            self.storage.write(key, value)
        logger.info(f"Imported {len(keys)} secure entries from backup")
        return len(keys)


__all__ = [
    "SecureKeysService",
    "hash_pin",
    "PRIVATE_KEY_PREFIX",
    "PUBLIC_KEY_PREFIX",
]
