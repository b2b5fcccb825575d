"""
Identity registry.

CRUD and hierarchy traversal over identities, key books, key pages and keys
in the local ledger mirror. Lookups by URL are exact and case-sensitive and
return None when nothing matches. Deletes are soft (``is_active = 0``).

Out-of-order writes (a key page stored before its book, a data account before
its identity) are repaired by :meth:`IdentityRegistry.ensure_identity` and
:meth:`IdentityRegistry.ensure_key_book`, which insert a minimal parent row
inferred from the child URL and log a warning.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..runtime.errors import LocalConsistencyError, ValidationError, ErrorCode
from ..runtime.url import AccountUrl, identity_url, name_from_identity_url
from ..storage.database import LedgerStore
from ..storage.models import Identity, KeyBook, KeyPage, Key
from .validation import require_identity_name, is_valid_identity_name

logger = logging.getLogger(__name__)

DEFAULT_KEY_BOOK_NAME = "book0"
DEFAULT_KEY_PAGE_NAME = "1"
DEFAULT_KEY_NAME = "default"
PLACEHOLDER_KEY_HASH = "placeholder"


@dataclass(frozen=True)
class CompleteIdentity:
    """Row ids and URLs produced by :meth:`IdentityRegistry.create_complete_identity`."""

    identity_id: int
    identity_url: str
    key_book_id: int
    key_book_url: str
    key_page_id: int
    key_page_url: str
    key_id: int
    public_key_hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identityId": self.identity_id,
            "identityUrl": self.identity_url,
            "keyBookId": self.key_book_id,
            "keyBookUrl": self.key_book_url,
            "keyPageId": self.key_page_id,
            "keyPageUrl": self.key_page_url,
            "keyId": self.key_id,
            "publicKeyHash": self.public_key_hash,
        }


@dataclass
class ParentRepairs:
    """Parent rows inserted by the ``ensure_*`` methods while a child row was stored."""

    identity_ids: List[int] = field(default_factory=list)
    key_book_ids: List[int] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.identity_ids or self.key_book_ids)


class IdentityRegistry:
    """Local registry of identities and their key authorities."""

    def __init__(self, store: LedgerStore):
        self.store = store

    # Identities

    def create_identity(self, name: str, url: str, sponsor_address: Optional[str] = None,
                        metadata: Optional[Dict[str, Any]] = None) -> int:
        """
        Insert an identity row.

        Returns:
            The new identity id

        Raises:
            StorageError: If an identity with this URL already exists
        """
        identity = Identity(name=name, url=url, sponsor_address=sponsor_address, metadata=metadata)
        identity_id = self.store.insert("identities", identity.to_row())
        logger.debug(f"Stored identity {url} as {identity_id}")
        return identity_id

    def get_identity(self, identity_id: int) -> Optional[Identity]:
        row = self.store.query_one("identities", "id = ? AND is_active = 1", [identity_id])
        return Identity.from_row(row) if row else None

    def get_identity_by_url(self, url: str) -> Optional[Identity]:
        row = self.store.query_one("identities", "url = ? AND is_active = 1", [url])
        return Identity.from_row(row) if row else None

    def get_identity_by_name(self, name: str) -> Optional[Identity]:
        row = self.store.query_one("identities", "name = ? AND is_active = 1", [name])
        return Identity.from_row(row) if row else None

    def list_identities(self) -> List[Identity]:
        rows = self.store.query("identities", "is_active = 1", order_by="created_at DESC")
        return [Identity.from_row(row) for row in rows]

    def delete_identity(self, identity_id: int) -> None:
        self.store.update("identities", {"is_active": 0}, "id = ?", [identity_id])
        logger.debug(f"Deactivated identity {identity_id}")

    def purge_identity(self, identity_id: int) -> None:
        """
        Hard-delete an identity together with its books, pages and keys.

        Used to compensate a creation the network rejected, so the local
        mirror keeps no row for an identity that does not exist on-chain.
        """
        with self.store.transaction():
            for book in self.store.query("key_books", "identity_id = ?", [identity_id]):
                self._purge_key_book_rows(book["id"])
            self.store.delete("identities", "id = ?", [identity_id])
        logger.debug(f"Purged identity {identity_id}")

    def update_account_count(self, identity_id: int, count: int) -> None:
        self.store.update("identities", {"account_count": count}, "id = ?", [identity_id])

    def update_key_book_count(self, identity_id: int, count: int) -> None:
        self.store.update("identities", {"key_book_count": count}, "id = ?", [identity_id])

    def is_identity_name_available(self, name: str) -> bool:
        """Local-only check; the network may still reject the name."""
        return self.get_identity_by_name(name) is None and self.get_identity_by_url(identity_url(name)) is None

    @staticmethod
    def is_valid_identity_name(name: str) -> bool:
        return is_valid_identity_name(name)

    def ensure_identity(self, url: str, repairs: Optional[ParentRepairs] = None) -> Identity:
        """
        Return the identity for a URL, inserting a minimal row if missing.

        Args:
            url: Identity URL or any URL under it
            repairs: Collects the id of an inserted row so it can be purged

        Raises:
            ValidationError: If no identity authority can be inferred
        """
        try:
            root = AccountUrl(url).root()
        except ValueError as e:
            raise ValidationError(f"Cannot infer identity from {url}", ErrorCode.INVALID_URL, cause=e)
        if root.is_lite:
            raise ValidationError(f"Lite account {url} has no identity", ErrorCode.INVALID_URL)

        existing = self.get_identity_by_url(str(root))
        if existing is not None:
            return existing

        name = name_from_identity_url(str(root))
        logger.warning(f"Identity {root} not found locally; creating placeholder row")
        identity_id = self.create_identity(name, str(root), metadata={"autoCreated": True})
        if repairs is not None:
            repairs.identity_ids.append(identity_id)
        return self.get_identity(identity_id)

    # Key books

    def create_key_book(self, identity_id: int, name: str, url: str,
                        public_key_hash: Optional[str] = None) -> int:
        """
        Insert a key book under an existing identity.

        Raises:
            LocalConsistencyError: If the identity is missing or deleted
        """
        if self.get_identity(identity_id) is None:
            raise LocalConsistencyError(f"Parent identity {identity_id} not found",
                                        details={"keyBookUrl": url})
        book = KeyBook(identity_id=identity_id, name=name, url=url, public_key_hash=public_key_hash)
        book_id = self.store.insert("key_books", book.to_row())
        logger.debug(f"Stored key book {url} as {book_id}")
        return book_id

    def get_key_book(self, key_book_id: int) -> Optional[KeyBook]:
        row = self.store.query_one("key_books", "id = ? AND is_active = 1", [key_book_id])
        return KeyBook.from_row(row) if row else None

    def get_key_book_by_url(self, url: str) -> Optional[KeyBook]:
        row = self.store.query_one("key_books", "url = ? AND is_active = 1", [url])
        return KeyBook.from_row(row) if row else None

    def key_books_for_identity(self, identity_id: int) -> List[KeyBook]:
        rows = self.store.query("key_books", "identity_id = ? AND is_active = 1", [identity_id],
                                order_by="created_at ASC")
        return [KeyBook.from_row(row) for row in rows]

    def delete_key_book(self, key_book_id: int) -> None:
        self.store.update("key_books", {"is_active": 0}, "id = ?", [key_book_id])

    def purge_key_book(self, key_book_id: int) -> None:
        """Hard-delete a key book with its pages and keys."""
        with self.store.transaction():
            self._purge_key_book_rows(key_book_id)

    def _purge_key_book_rows(self, key_book_id: int) -> None:
        for page in self.store.query("key_pages", "key_book_id = ?", [key_book_id]):
            self.store.delete("keys", "key_page_id = ?", [page["id"]])
        self.store.delete("key_pages", "key_book_id = ?", [key_book_id])
        self.store.delete("key_books", "id = ?", [key_book_id])

    def ensure_key_book(self, url: str, repairs: Optional[ParentRepairs] = None) -> KeyBook:
        """
        Return the key book for a URL, inserting a placeholder if missing.

        The parent identity is inferred from the book URL and repaired the
        same way. The inserted book carries the placeholder key hash.
        """
        existing = self.get_key_book_by_url(url)
        if existing is not None:
            return existing

        identity = self.ensure_identity(url, repairs)
        try:
            name = AccountUrl(url).last_segment
        except ValueError as e:
            raise ValidationError(f"Invalid key book URL: {url}", ErrorCode.INVALID_URL, cause=e)
        logger.warning(f"Key book {url} not found locally; creating placeholder row")
        book_id = self.create_key_book(identity.id, name, url, PLACEHOLDER_KEY_HASH)
        if repairs is not None:
            repairs.key_book_ids.append(book_id)
        return self.get_key_book(book_id)

    # Key pages

    def create_key_page(self, key_book_id: int, name: str, url: str, keys_required: int = 1,
                        keys_required_of: int = 1, version: int = 1) -> int:
        """
        Insert a key page under an existing key book.

        Raises:
            LocalConsistencyError: If the key book is missing or deleted
        """
        if self.get_key_book(key_book_id) is None:
            raise LocalConsistencyError(f"Parent key book {key_book_id} not found",
                                        details={"keyPageUrl": url})
        page = KeyPage(key_book_id=key_book_id, name=name, url=url, version=version,
                       keys_required=keys_required, keys_required_of=keys_required_of)
        page_id = self.store.insert("key_pages", page.to_row())
        logger.debug(f"Stored key page {url} as {page_id}")
        return page_id

    def get_key_page(self, key_page_id: int) -> Optional[KeyPage]:
        row = self.store.query_one("key_pages", "id = ? AND is_active = 1", [key_page_id])
        return KeyPage.from_row(row) if row else None

    def get_key_page_by_url(self, url: str) -> Optional[KeyPage]:
        row = self.store.query_one("key_pages", "url = ? AND is_active = 1", [url])
        return KeyPage.from_row(row) if row else None

    def key_pages_for_book(self, key_book_id: int) -> List[KeyPage]:
        rows = self.store.query("key_pages", "key_book_id = ? AND is_active = 1", [key_book_id],
                                order_by="name ASC")
        return [KeyPage.from_row(row) for row in rows]

    def list_key_pages(self) -> List[KeyPage]:
        rows = self.store.query("key_pages", "is_active = 1", order_by="url ASC")
        return [KeyPage.from_row(row) for row in rows]

    def record_key_page_version(self, key_page_id: int, version: int) -> None:
        """Remember the last version seen on the network. Informational only."""
        self.store.update("key_pages", {"version": version}, "id = ?", [key_page_id])

    def delete_key_page(self, key_page_id: int) -> None:
        self.store.update("key_pages", {"is_active": 0}, "id = ?", [key_page_id])

    def purge_repairs(self, repairs: ParentRepairs) -> None:
        """Remove parent rows recorded in ``repairs``, books before identities."""
        with self.store.transaction():
            for book_id in repairs.key_book_ids:
                self._purge_key_book_rows(book_id)
            for identity_id in repairs.identity_ids:
                self.purge_identity(identity_id)
        logger.debug(f"Purged repaired parents {repairs}")

    def purge_key_page(self, key_page_id: int) -> None:
        with self.store.transaction():
            self.store.delete("keys", "key_page_id = ?", [key_page_id])
            self.store.delete("key_pages", "id = ?", [key_page_id])

    # Keys

    def add_key(self, key_page_id: int, name: str, public_key: str, public_key_hash: str,
                has_private_key: bool = False, is_default: bool = False) -> int:
        """
        Record a public key on a key page.

        A new default key clears the default flag on the page's other keys.

        Raises:
            LocalConsistencyError: If the key page is missing or deleted
        """
        if self.get_key_page(key_page_id) is None:
            raise LocalConsistencyError(f"Parent key page {key_page_id} not found")
        key = Key(key_page_id=key_page_id, name=name, public_key=public_key,
                  public_key_hash=public_key_hash, has_private_key=has_private_key,
                  is_default=is_default)
        with self.store.transaction():
            if is_default:
                self.store.update("keys", {"is_default": 0}, "key_page_id = ?", [key_page_id])
            key_id = self.store.insert("keys", key.to_row())
        return key_id

    def keys_for_page(self, key_page_id: int) -> List[Key]:
        rows = self.store.query("keys", "key_page_id = ? AND is_active = 1", [key_page_id],
                                order_by="is_default DESC, created_at ASC")
        return [Key.from_row(row) for row in rows]

    def default_key(self, key_page_id: int) -> Optional[Key]:
        keys = self.keys_for_page(key_page_id)
        return keys[0] if keys else None

    def get_key_by_public_key_hash(self, public_key_hash: str) -> Optional[Key]:
        row = self.store.query_one("keys", "public_key_hash = ? AND is_active = 1", [public_key_hash])
        return Key.from_row(row) if row else None

    def delete_key(self, key_id: int) -> None:
        self.store.update("keys", {"is_active": 0}, "id = ?", [key_id])

    # Composite operations

    def create_complete_identity(
        self,
        name: str,
        sponsor_address: Optional[str],
        public_key: str,
        public_key_hash: str,
        key_book_name: str = DEFAULT_KEY_BOOK_NAME,
        key_page_name: str = DEFAULT_KEY_PAGE_NAME,
        key_name: str = DEFAULT_KEY_NAME,
        has_private_key: bool = True,
    ) -> CompleteIdentity:
        """
        Store an identity with its first key book, key page and default key.

        All four rows are written in one local transaction.

        Args:
            name: Identity name (without ``acc://`` and ``.acme``)
            sponsor_address: Account paying for the creation
            public_key: Hex public key of the book's first key
            public_key_hash: Hex SHA-256 of the public key

        Raises:
            ValidationError: If the name is malformed
            StorageError: If any of the URLs already exists locally
        """
        require_identity_name(name)
        id_url = identity_url(name)
        book_url = f"{id_url}/{key_book_name}"
        page_url = f"{book_url}/{key_page_name}"

        with self.store.transaction():
            identity_id = self.create_identity(name, id_url, sponsor_address)
            book_id = self.create_key_book(identity_id, key_book_name, book_url, public_key_hash)
            page_id = self.create_key_page(book_id, key_page_name, page_url)
            key_id = self.add_key(page_id, key_name, public_key, public_key_hash,
                                  has_private_key=has_private_key, is_default=True)

        logger.info(f"Stored identity hierarchy for {id_url}")
        return CompleteIdentity(
            identity_id=identity_id,
            identity_url=id_url,
            key_book_id=book_id,
            key_book_url=book_url,
            key_page_id=page_id,
            key_page_url=page_url,
            key_id=key_id,
            public_key_hash=public_key_hash,
        )

    def identity_hierarchy(self) -> List[Dict[str, Any]]:
        """Identities with their key books and each book's key pages."""
        hierarchy = []
        for identity in self.list_identities():
            books = []
            for book in self.key_books_for_identity(identity.id):
                books.append({"keyBook": book, "keyPages": self.key_pages_for_book(book.id)})
            hierarchy.append({"identity": identity, "keyBooks": books})
        return hierarchy

    def statistics(self) -> Dict[str, int]:
        return {
            "identities": self.store.count("identities", "is_active = 1"),
            "keyBooks": self.store.count("key_books", "is_active = 1"),
            "keyPages": self.store.count("key_pages", "is_active = 1"),
            "keys": self.store.count("keys", "is_active = 1"),
        }


__all__ = [
    "IdentityRegistry",
    "CompleteIdentity",
    "ParentRepairs",
    "DEFAULT_KEY_BOOK_NAME",
    "DEFAULT_KEY_PAGE_NAME",
    "PLACEHOLDER_KEY_HASH",
]
