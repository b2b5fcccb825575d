"""
Secure key/value storage backends.

The wallet keeps private keys, mnemonics and PIN hashes in a string-keyed,
string-valued store. Two backends are provided: an in-memory store and an
encrypted JSON file (Fernet over a PBKDF2-HMAC-SHA256 derived key).
"""

from __future__ import annotations
import base64
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..runtime.errors import SecureStorageError

logger = logging.getLogger(__name__)


class SecureStorage(ABC):
    """
    Abstract secure storage interface.

    Absence of a key is a normal outcome: ``read`` returns None.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if nothing is stored under the key
        """

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Write a value, replacing any existing one.

        Raises:
            SecureStorageError: If the backend cannot persist the value
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a value. Deleting a missing key is a no-op."""

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every stored value."""

    @abstractmethod
    def read_all(self) -> Dict[str, str]:
        """Return a copy of every stored key/value pair."""

    def contains(self, key: str) -> bool:
        return self.read(key) is not None


class MemorySecureStorage(SecureStorage):
    """In-memory secure storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise SecureStorageError(f"Secure storage values must be strings, got {type(value).__name__}")
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def delete_all(self) -> None:
        self._values.clear()

    def read_all(self) -> Dict[str, str]:
        return dict(self._values)


class EncryptedFileStorage(SecureStorage):
    """
    Password-encrypted secure storage persisted as a JSON file.

    Each value is encrypted individually with Fernet (AES-128-CBC with
    HMAC-SHA256). The Fernet key is derived from the password using PBKDF2
    with 480,000 iterations and a random 16-byte salt stored beside the data.

    File layout::

        {"version": 1, "salt": "<b64>", "values": {"<key>": "<fernet token>"}}
    """

    PBKDF2_ITERATIONS = 480000
    FILE_VERSION = 1

    def __init__(self, path: Union[str, Path], password: str):
        """
        Open or create an encrypted store.

        Args:
            path: JSON file location (created on first write)
            password: Encryption password

        Raises:
            SecureStorageError: If the file exists but cannot be parsed
        """
        self.path = Path(path)
        self._tokens: Dict[str, str] = {}

        if self.path.exists():
            self._load()
        else:
            self.salt = os.urandom(16)

        self._fernet = self._derive_fernet(password, self.salt)
        if self._tokens:
            # Fail fast on a wrong password rather than on first read
            sample_key = next(iter(self._tokens))
            self._decrypt(sample_key, self._tokens[sample_key])

    @classmethod
    def _derive_fernet(cls, password: str, salt: bytes) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=cls.PBKDF2_ITERATIONS,
        )
        key = base64.urlsafe_b64encode(kdf.derive(password.encode('utf-8')))
        return Fernet(key)

    def _load(self) -> None:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SecureStorageError(f"Failed to load secure storage: {e}", cause=e)

        version = data.get("version")
        if version != self.FILE_VERSION:
            raise SecureStorageError(f"Incompatible secure storage version: {version}")

        self.salt = base64.b64decode(data["salt"])
        self._tokens = dict(data.get("values", {}))
        logger.debug(f"Loaded {len(self._tokens)} secure entries from {self.path}")

    def _save(self) -> None:
        data = {
            "version": self.FILE_VERSION,
            "salt": base64.b64encode(self.salt).decode('ascii'),
            "values": self._tokens,
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise SecureStorageError(f"Failed to save secure storage: {e}", cause=e)

    def _decrypt(self, key: str, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode('ascii')).decode('utf-8')
        except InvalidToken as e:
            raise SecureStorageError(
                f"Cannot decrypt entry '{key}': wrong password or corrupted data", cause=e
            )

    def read(self, key: str) -> Optional[str]:
        token = self._tokens.get(key)
        if token is None:
            return None
        return self._decrypt(key, token)

    def write(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise SecureStorageError(f"Secure storage values must be strings, got {type(value).__name__}")
        self._tokens[key] = self._fernet.encrypt(value.encode('utf-8')).decode('ascii')
        self._save()

    def delete(self, key: str) -> None:
        if self._tokens.pop(key, None) is not None:
            self._save()

    def delete_all(self) -> None:
        self._tokens.clear()
        self._save()

    def read_all(self) -> Dict[str, str]:
        return {key: self._decrypt(key, token) for key, token in self._tokens.items()}

    def change_password(self, old_password: str, new_password: str) -> None:
        """
        Re-encrypt every value under a new password and a fresh salt.

        Raises:
            SecureStorageError: If the old password is incorrect
        """
        old_fernet = self._derive_fernet(old_password, self.salt)
        try:
            plain = {
                key: old_fernet.decrypt(token.encode('ascii'))
                for key, token in self._tokens.items()
            }
        except InvalidToken as e:
            raise SecureStorageError("Old password is incorrect", cause=e)

        self.salt = os.urandom(16)
        self._fernet = self._derive_fernet(new_password, self.salt)
        self._tokens = {
            key: self._fernet.encrypt(value).decode('ascii')
            for key, value in plain.items()
        }
        self._save()
        logger.info(f"Re-encrypted {len(self._tokens)} secure entries")


__all__ = [
    "SecureStorage",
    "MemorySecureStorage",
    "EncryptedFileStorage",
]
