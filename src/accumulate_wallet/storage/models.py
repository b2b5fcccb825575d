"""
Row models for the local ledger mirror.

Each model maps one table row. ``to_row`` produces the column dict used for
inserts (``id`` is omitted while unset); ``from_row`` accepts a ``sqlite3.Row``
or plain mapping. Metadata is stored as JSON text and booleans as 0/1.
"""

from __future__ import annotations
import json
import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Mapping, Optional


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def _encode_metadata(metadata: Optional[Dict[str, Any]]) -> Optional[str]:
    if metadata is None:
        return None
    return json.dumps(metadata, sort_keys=True)


def _decode_metadata(value: Optional[str]) -> Optional[Dict[str, Any]]:
    if value is None or value == "":
        return None
    return json.loads(value)


def _row_dict(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: row[key] for key in row.keys()}


class AccountType(str, Enum):
    """Kinds of rows in the unified wallet account registry."""

    LITE = "lite_account"
    ADI = "adi"
    TOKEN = "token_account"
    DATA = "data_account"


class TokenAccountKind(str, Enum):
    LITE = "lite"
    IDENTITY = "identity"


@dataclass
class Identity:
    """Identity (ADI) row, root of a key book / account hierarchy."""

    name: str
    url: str
    id: Optional[int] = None
    sponsor_address: Optional[str] = None
    key_book_count: int = 1
    account_count: int = 0
    created_at: int = field(default_factory=now_ms)
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["is_active"] = int(self.is_active)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Identity:
        data = _row_dict(row)
        data["is_active"] = bool(data.get("is_active", 1))
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class KeyBook:
    identity_id: int
    name: str
    url: str
    id: Optional[int] = None
    public_key_hash: Optional[str] = None
    created_at: int = field(default_factory=now_ms)
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["is_active"] = int(self.is_active)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> KeyBook:
        data = _row_dict(row)
        data["is_active"] = bool(data.get("is_active", 1))
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class KeyPage:
    """
    Key page row.

    ``version`` is the last value seen on the network. It is informational
    only: signing always re-queries the page's version first.
    """

    key_book_id: int
    name: str
    url: str
    id: Optional[int] = None
    version: int = 1
    keys_required: int = 1
    keys_required_of: int = 1
    created_at: int = field(default_factory=now_ms)
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["is_active"] = int(self.is_active)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> KeyPage:
        data = _row_dict(row)
        data["is_active"] = bool(data.get("is_active", 1))
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class Key:
    """
    Public key entry on a key page.

    The private half is never stored in this table; ``has_private_key`` only
    records whether the secure key store holds it.
    """

    key_page_id: int
    name: str
    public_key: str
    public_key_hash: str
    id: Optional[int] = None
    has_private_key: bool = False
    is_default: bool = False
    created_at: int = field(default_factory=now_ms)
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["has_private_key"] = int(self.has_private_key)
        row["is_default"] = int(self.is_default)
        row["is_active"] = int(self.is_active)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Key:
        data = _row_dict(row)
        data["has_private_key"] = bool(data.get("has_private_key", 0))
        data["is_default"] = bool(data.get("is_default", 0))
        data["is_active"] = bool(data.get("is_active", 1))
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class TokenAccount:
    address: str
    kind: TokenAccountKind
    token_url: str = "acc://ACME"
    id: Optional[int] = None
    parent_identity_id: Optional[int] = None
    key_book_id: Optional[int] = None
    key_page_id: Optional[int] = None
    created_at: int = field(default_factory=now_ms)
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["kind"] = TokenAccountKind(self.kind).value
        row["is_active"] = int(self.is_active)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> TokenAccount:
        data = _row_dict(row)
        data["kind"] = TokenAccountKind(data["kind"])
        data["is_active"] = bool(data.get("is_active", 1))
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class DataAccount:
    """Data account row. Always owned by an identity."""

    name: str
    url: str
    parent_identity_id: int
    id: Optional[int] = None
    created_at: int = field(default_factory=now_ms)
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["is_active"] = int(self.is_active)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> DataAccount:
        data = _row_dict(row)
        data["is_active"] = bool(data.get("is_active", 1))
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class CustomToken:
    name: str
    symbol: str
    url: str
    id: Optional[int] = None
    precision: int = 8
    creator_identity_id: Optional[int] = None
    created_at: int = field(default_factory=now_ms)
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> CustomToken:
        data = _row_dict(row)
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class WalletAccount:
    """Unified listing row used to populate account pickers."""

    name: str
    address: str
    account_type: AccountType
    id: Optional[int] = None
    parent_identity_id: Optional[int] = None
    token_url: Optional[str] = None
    key_book_id: Optional[int] = None
    key_page_id: Optional[int] = None
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["account_type"] = AccountType(self.account_type).value
        row["is_active"] = int(self.is_active)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> WalletAccount:
        data = _row_dict(row)
        data["account_type"] = AccountType(data["account_type"])
        data["is_active"] = bool(data.get("is_active", 1))
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class TransactionRecord:
    tx_hash: str
    from_address: str
    to_address: str
    amount: str
    token_type: str
    transaction_type: str
    id: Optional[int] = None
    timestamp: int = field(default_factory=now_ms)
    status: str = "pending"
    memo: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["metadata"] = _encode_metadata(self.metadata)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> TransactionRecord:
        data = _row_dict(row)
        data["metadata"] = _decode_metadata(data.get("metadata"))
        return cls(**data)


@dataclass
class AddressBookEntry:
    name: str
    address: str
    id: Optional[int] = None
    notes: Optional[str] = None
    is_favorite: bool = False
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["is_favorite"] = int(self.is_favorite)
        if self.id is None:
            row.pop("id")
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> AddressBookEntry:
        data = _row_dict(row)
        data["is_favorite"] = bool(data.get("is_favorite", 0))
        return cls(**data)


__all__ = [
    "now_ms",
    "AccountType",
    "TokenAccountKind",
    "Identity",
    "KeyBook",
    "KeyPage",
    "Key",
    "TokenAccount",
    "DataAccount",
    "CustomToken",
    "WalletAccount",
    "TransactionRecord",
    "AddressBookEntry",
]
