"""
SQLite-backed ledger store.

A generic table store (insert / query / update / delete with a WHERE
predicate) over the wallet's local mirror of on-chain identities and
accounts, plus wallet-local bookkeeping tables.

Characteristics:
  - Single connection in autocommit mode, guarded by a re-entrant lock.
  - Explicit IMMEDIATE transactions through :meth:`LedgerStore.transaction`.
  - Foreign keys enforced, so child rows cannot reference missing parents.
"""

from __future__ import annotations
import logging
import re
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from ..runtime.errors import StorageError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_SQL_SCHEMA = """
CREATE TABLE IF NOT EXISTS identities (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    sponsor_address TEXT,
    key_book_count INTEGER NOT NULL DEFAULT 1,
    account_count INTEGER NOT NULL DEFAULT 0,
    created_at INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS key_books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    identity_id INTEGER NOT NULL REFERENCES identities(id),
    name TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    public_key_hash TEXT,
    created_at INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS key_pages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key_book_id INTEGER NOT NULL REFERENCES key_books(id),
    name TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    version INTEGER NOT NULL DEFAULT 1,
    keys_required INTEGER NOT NULL DEFAULT 1,
    keys_required_of INTEGER NOT NULL DEFAULT 1,
    created_at INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS keys (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key_page_id INTEGER NOT NULL REFERENCES key_pages(id),
    name TEXT NOT NULL,
    public_key TEXT NOT NULL,
    public_key_hash TEXT NOT NULL,
    has_private_key INTEGER NOT NULL DEFAULT 0,
    is_default INTEGER NOT NULL DEFAULT 0,
    created_at INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS token_accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    address TEXT NOT NULL UNIQUE,
    kind TEXT NOT NULL,
    token_url TEXT NOT NULL,
    parent_identity_id INTEGER REFERENCES identities(id),
    key_book_id INTEGER REFERENCES key_books(id),
    key_page_id INTEGER REFERENCES key_pages(id),
    created_at INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS data_accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    parent_identity_id INTEGER NOT NULL REFERENCES identities(id),
    created_at INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS custom_tokens (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    symbol TEXT NOT NULL UNIQUE,
    url TEXT NOT NULL UNIQUE,
    precision INTEGER NOT NULL DEFAULT 8,
    creator_identity_id INTEGER REFERENCES identities(id),
    created_at INTEGER NOT NULL,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS wallet_accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    address TEXT NOT NULL UNIQUE,
    account_type TEXT NOT NULL,
    parent_identity_id INTEGER REFERENCES identities(id),
    token_url TEXT,
    key_book_id INTEGER REFERENCES key_books(id),
    key_page_id INTEGER REFERENCES key_pages(id),
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS transaction_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tx_hash TEXT NOT NULL UNIQUE,
    from_address TEXT NOT NULL,
    to_address TEXT NOT NULL,
    amount TEXT NOT NULL,
    token_type TEXT NOT NULL,
    transaction_type TEXT NOT NULL,
    timestamp INTEGER NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    memo TEXT,
    metadata TEXT
);

CREATE TABLE IF NOT EXISTS user_preferences (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT NOT NULL,
    value_type TEXT NOT NULL,
    updated_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS address_book (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    address TEXT NOT NULL,
    notes TEXT,
    is_favorite INTEGER NOT NULL DEFAULT 0,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_key_books_identity ON key_books(identity_id);
CREATE INDEX IF NOT EXISTS idx_key_pages_book ON key_pages(key_book_id);
CREATE INDEX IF NOT EXISTS idx_keys_page ON keys(key_page_id);
CREATE INDEX IF NOT EXISTS idx_token_accounts_identity ON token_accounts(parent_identity_id);
CREATE INDEX IF NOT EXISTS idx_data_accounts_identity ON data_accounts(parent_identity_id);
CREATE INDEX IF NOT EXISTS idx_accounts_type ON wallet_accounts(account_type);
CREATE INDEX IF NOT EXISTS idx_transactions_from ON transaction_records(from_address);
CREATE INDEX IF NOT EXISTS idx_transactions_to ON transaction_records(to_address);
CREATE INDEX IF NOT EXISTS idx_transactions_timestamp ON transaction_records(timestamp);
CREATE INDEX IF NOT EXISTS idx_addressbook_address ON address_book(address);
"""

TABLES = frozenset({
    "identities",
    "key_books",
    "key_pages",
    "keys",
    "token_accounts",
    "data_accounts",
    "custom_tokens",
    "wallet_accounts",
    "transaction_records",
    "user_preferences",
    "address_book",
})

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ORDER_BY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\s+(ASC|DESC))?(\s*,\s*[A-Za-z_][A-Za-z0-9_]*(\s+(ASC|DESC))?)*$", re.IGNORECASE)


class LedgerStore:
    """
    Generic table store over SQLite.

    Usage:
        store = LedgerStore(":memory:")
        row_id = store.insert("identities", identity.to_row())
        rows = store.query("identities", where="url = ?", args=[url])
    """

    def __init__(self, path: Union[str, Path] = ":memory:"):
        """
        Open (and if needed create) the store.

        Args:
            path: SQLite file path, or ":memory:" for an ephemeral store

        Raises:
            StorageError: If the database cannot be opened or migrated
        """
        self.path = str(path)
        self._lock = threading.RLock()
        self._depth = 0
        try:
            if self.path != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path, check_same_thread=False, isolation_level=None)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON;")
            self._conn.executescript(_SQL_SCHEMA)
            self._conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION};")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open ledger store at {self.path}: {e}", cause=e)
        logger.debug(f"Opened ledger store at {self.path}")

    # Guards

    @staticmethod
    def _check_table(table: str) -> None:
        if table not in TABLES:
            raise StorageError(f"Unknown table: {table}")

    @staticmethod
    def _check_columns(columns: Sequence[str]) -> None:
        for column in columns:
            if not _IDENTIFIER.match(column):
                raise StorageError(f"Invalid column name: {column}")

    def _execute(self, sql: str, args: Sequence[Any] = ()) -> sqlite3.Cursor:
        with self._lock:
            try:
                return self._conn.execute(sql, tuple(args))
            except sqlite3.IntegrityError as e:
                raise StorageError(f"Constraint violation: {e}", details={"sql": sql}, cause=e)
            except sqlite3.Error as e:
                raise StorageError(f"Ledger store error: {e}", details={"sql": sql}, cause=e)

    # Transactions

    @contextmanager
    def transaction(self) -> Iterator[LedgerStore]:
        """
        Run a block in an IMMEDIATE transaction.

        Nested calls join the outermost transaction. Any exception rolls the
        whole transaction back and propagates.
        """
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            self._conn.execute("BEGIN IMMEDIATE;")
            self._depth = 1
            try:
                yield self
            except BaseException:
                self._conn.execute("ROLLBACK;")
                raise
            else:
                self._conn.execute("COMMIT;")
            finally:
                self._depth = 0

    # CRUD

    def insert(self, table: str, row: Dict[str, Any]) -> int:
        """
        Insert a row.

        Returns:
            The new row id

        Raises:
            StorageError: On unknown table, bad column or constraint violation
        """
        self._check_table(table)
        columns = list(row.keys())
        self._check_columns(columns)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        cursor = self._execute(sql, [row[c] for c in columns])
        logger.debug(f"Inserted {table} row {cursor.lastrowid}")
        return int(cursor.lastrowid)

    def query(
        self,
        table: str,
        where: Optional[str] = None,
        args: Sequence[Any] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[sqlite3.Row]:
        """
        Select rows.

        Args:
            table: Table name
            where: SQL predicate with ``?`` placeholders
            args: Values bound to the placeholders
            order_by: Column list, e.g. ``"created_at DESC"``
            limit: Maximum number of rows

        Returns:
            Matching rows (possibly empty)
        """
        self._check_table(table)
        sql = f"SELECT * FROM {table}"
        if where:
            sql += f" WHERE {where}"
        if order_by:
            if not _ORDER_BY.match(order_by):
                raise StorageError(f"Invalid order by clause: {order_by}")
            sql += f" ORDER BY {order_by}"
        if limit is not None:
            sql += " LIMIT ?"
            args = list(args) + [int(limit)]
        return self._execute(sql, args).fetchall()

    def query_one(self, table: str, where: str, args: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        rows = self.query(table, where=where, args=args, limit=1)
        return rows[0] if rows else None

    def update(self, table: str, values: Dict[str, Any], where: str, args: Sequence[Any] = ()) -> int:
        """
        Update matching rows.

        Returns:
            Number of rows changed
        """
        self._check_table(table)
        columns = list(values.keys())
        self._check_columns(columns)
        assignments = ", ".join(f"{c} = ?" for c in columns)
        sql = f"UPDATE {table} SET {assignments} WHERE {where}"
        cursor = self._execute(sql, [values[c] for c in columns] + list(args))
        return cursor.rowcount

    def delete(self, table: str, where: str, args: Sequence[Any] = ()) -> int:
        """
        Delete matching rows.

        Returns:
            Number of rows removed
        """
        self._check_table(table)
        cursor = self._execute(f"DELETE FROM {table} WHERE {where}", args)
        logger.debug(f"Deleted {cursor.rowcount} {table} row(s)")
        return cursor.rowcount

    def count(self, table: str, where: Optional[str] = None, args: Sequence[Any] = ()) -> int:
        self._check_table(table)
        sql = f"SELECT COUNT(*) AS count FROM {table}"
        if where:
            sql += f" WHERE {where}"
        return int(self._execute(sql, args).fetchone()["count"])

    def health_check(self) -> bool:
        try:
            return self._execute("SELECT 1").fetchone()[0] == 1
        except StorageError as e:
            logger.error(f"Ledger store health check failed: {e}")
            return False

    def close(self) -> None:
        """Close the underlying SQLite connection."""
        with self._lock:
            self._conn.close()
        logger.debug(f"Closed ledger store at {self.path}")

    def __enter__(self) -> LedgerStore:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["LedgerStore", "TABLES", "SCHEMA_VERSION"]
