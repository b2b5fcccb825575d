"""
Account registry.

Token accounts, data accounts and custom tokens in the local ledger mirror,
plus the unified ``wallet_accounts`` listing that feeds account pickers.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Union

from ..runtime.errors import LocalConsistencyError, ValidationError, ErrorCode
from ..runtime.url import AccountUrl, ACME_TOKEN_URL, normalize_signer_url
from ..storage.database import LedgerStore
from ..storage.models import (
    AccountType,
    CustomToken,
    DataAccount,
    TokenAccount,
    TokenAccountKind,
    WalletAccount,
    now_ms,
)
from .identity import IdentityRegistry, ParentRepairs
from .validation import require_token_symbol, require_token_name, require_precision

logger = logging.getLogger(__name__)

ACME_PRECISION = 8


class AccountRegistry:
    """
    Local registry of accounts and tokens.

    Args:
        store: Ledger store shared with the identity registry
        identities: Identity registry used to resolve and repair parents
    """

    def __init__(self, store: LedgerStore, identities: Optional[IdentityRegistry] = None):
        self.store = store
        self.identities = identities or IdentityRegistry(store)

    def _require_identity(self, identity_id: Optional[int], child_url: str) -> None:
        if identity_id is not None and self.identities.get_identity(identity_id) is None:
            raise LocalConsistencyError(f"Parent identity {identity_id} not found",
                                        details={"url": child_url})

    # Wallet accounts

    def register_wallet_account(
        self,
        name: str,
        address: str,
        account_type: Union[AccountType, str],
        parent_identity_id: Optional[int] = None,
        token_url: Optional[str] = None,
        key_book_id: Optional[int] = None,
        key_page_id: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Add an account to the unified listing.

        Re-registering an address that is already listed reactivates and
        updates the existing row.

        Returns:
            The wallet account id
        """
        account = WalletAccount(
            name=name,
            address=address,
            account_type=AccountType(account_type),
            parent_identity_id=parent_identity_id,
            token_url=token_url,
            key_book_id=key_book_id,
            key_page_id=key_page_id,
            metadata=metadata,
        )
        existing = self.store.query_one("wallet_accounts", "address = ?", [address])
        if existing is not None:
            row = account.to_row()
            row.pop("created_at")
            self.store.update("wallet_accounts", row, "id = ?", [existing["id"]])
            return existing["id"]
        return self.store.insert("wallet_accounts", account.to_row())

    def get_wallet_account(self, address: str) -> Optional[WalletAccount]:
        row = self.store.query_one("wallet_accounts", "address = ? AND is_active = 1", [address])
        return WalletAccount.from_row(row) if row else None

    def list_wallet_accounts(self, account_type: Optional[Union[AccountType, str]] = None) -> List[WalletAccount]:
        if account_type is None:
            rows = self.store.query("wallet_accounts", "is_active = 1", order_by="created_at DESC")
        else:
            rows = self.store.query("wallet_accounts", "account_type = ? AND is_active = 1",
                                    [AccountType(account_type).value], order_by="created_at DESC")
        return [WalletAccount.from_row(row) for row in rows]

    def deactivate_wallet_account(self, address: str) -> bool:
        """Soft-delete a listed account. Returns False if it was not listed."""
        changed = self.store.update("wallet_accounts", {"is_active": 0, "updated_at": now_ms()},
                                    "address = ? AND is_active = 1", [address])
        return changed > 0

    def remove_wallet_account(self, address: str) -> None:
        self.store.delete("wallet_accounts", "address = ?", [address])

    # Token accounts

    def create_lite_token_account(self, address: str, name: Optional[str] = None,
                                  token_url: str = ACME_TOKEN_URL,
                                  metadata: Optional[Dict[str, Any]] = None) -> int:
        """
        Store a lite token account.

        Lite accounts exist as soon as their key exists, so this is written
        before any network call.

        Raises:
            ValidationError: If the address is not a lite address
        """
        try:
            parsed = AccountUrl(address)
        except ValueError as e:
            raise ValidationError(f"Invalid lite address: {address}", ErrorCode.INVALID_URL, cause=e)
        if not parsed.is_lite:
            raise ValidationError(f"Not a lite address: {address}", ErrorCode.INVALID_URL)

        account = TokenAccount(address=address, kind=TokenAccountKind.LITE, token_url=token_url,
                               metadata=metadata)
        with self.store.transaction():
            account_id = self.store.insert("token_accounts", account.to_row())
            self.register_wallet_account(
                name or f"Lite {normalize_signer_url(address)[6:14]}",
                address,
                AccountType.LITE,
                token_url=token_url,
                metadata={"liteIdentity": normalize_signer_url(address)},
            )
        logger.debug(f"Stored lite token account {address}")
        return account_id

    def create_identity_token_account(
        self,
        name: str,
        address: str,
        parent_identity_id: int,
        token_url: str = ACME_TOKEN_URL,
        key_book_id: Optional[int] = None,
        key_page_id: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Store a token account owned by an identity.

        Raises:
            LocalConsistencyError: If the parent identity is missing
        """
        self._require_identity(parent_identity_id, address)
        account = TokenAccount(
            address=address,
            kind=TokenAccountKind.IDENTITY,
            token_url=token_url,
            parent_identity_id=parent_identity_id,
            key_book_id=key_book_id,
            key_page_id=key_page_id,
            metadata=metadata,
        )
        with self.store.transaction():
            account_id = self.store.insert("token_accounts", account.to_row())
            self.register_wallet_account(
                name,
                address,
                AccountType.TOKEN,
                parent_identity_id=parent_identity_id,
                token_url=token_url,
                key_book_id=key_book_id,
                key_page_id=key_page_id,
            )
            self._refresh_account_count(parent_identity_id)
        logger.debug(f"Stored identity token account {address}")
        return account_id

    def get_token_account(self, address: str) -> Optional[TokenAccount]:
        row = self.store.query_one("token_accounts", "address = ? AND is_active = 1", [address])
        return TokenAccount.from_row(row) if row else None

    def token_accounts_by_kind(self, kind: Union[TokenAccountKind, str]) -> List[TokenAccount]:
        rows = self.store.query("token_accounts", "kind = ? AND is_active = 1",
                                [TokenAccountKind(kind).value], order_by="created_at DESC")
        return [TokenAccount.from_row(row) for row in rows]

    def token_accounts_for_identity(self, identity_id: int) -> List[TokenAccount]:
        rows = self.store.query("token_accounts", "parent_identity_id = ? AND is_active = 1",
                                [identity_id], order_by="created_at DESC")
        return [TokenAccount.from_row(row) for row in rows]

    def token_accounts_for_token(self, token_url: str) -> List[TokenAccount]:
        rows = self.store.query("token_accounts", "token_url = ? AND is_active = 1",
                                [token_url], order_by="created_at DESC")
        return [TokenAccount.from_row(row) for row in rows]

    def delete_token_account(self, address: str) -> None:
        with self.store.transaction():
            self.store.update("token_accounts", {"is_active": 0}, "address = ?", [address])
            self.deactivate_wallet_account(address)

    def purge_token_account(self, address: str) -> None:
        """Hard-delete a token account, used to undo a rejected creation."""
        row = self.store.query_one("token_accounts", "address = ?", [address])
        with self.store.transaction():
            self.store.delete("token_accounts", "address = ?", [address])
            self.remove_wallet_account(address)
            if row is not None and row["parent_identity_id"] is not None:
                self._refresh_account_count(row["parent_identity_id"])

    # Data accounts

    def create_data_account(self, name: str, url: str, parent_identity_id: Optional[int] = None,
                            repairs: Optional[ParentRepairs] = None) -> int:
        """
        Store a data account.

        When ``parent_identity_id`` is omitted the parent is resolved from the
        URL, and a missing identity row is created with a warning and noted in
        ``repairs``.

        Raises:
            LocalConsistencyError: If an explicit parent id does not exist
        """
        if parent_identity_id is None:
            parent_identity_id = self.identities.ensure_identity(url, repairs).id
        else:
            self._require_identity(parent_identity_id, url)

        account = DataAccount(name=name, url=url, parent_identity_id=parent_identity_id)
        with self.store.transaction():
            account_id = self.store.insert("data_accounts", account.to_row())
            self.register_wallet_account(name, url, AccountType.DATA, parent_identity_id=parent_identity_id)
            self._refresh_account_count(parent_identity_id)
        logger.debug(f"Stored data account {url}")
        return account_id

    def get_data_account(self, url: str) -> Optional[DataAccount]:
        row = self.store.query_one("data_accounts", "url = ? AND is_active = 1", [url])
        return DataAccount.from_row(row) if row else None

    def list_data_accounts(self) -> List[DataAccount]:
        rows = self.store.query("data_accounts", "is_active = 1", order_by="id DESC")
        return [DataAccount.from_row(row) for row in rows]

    def data_accounts_for_identity(self, identity_id: int) -> List[DataAccount]:
        rows = self.store.query("data_accounts", "parent_identity_id = ? AND is_active = 1",
                                [identity_id], order_by="id DESC")
        return [DataAccount.from_row(row) for row in rows]

    def delete_data_account(self, data_account_id: int) -> None:
        row = self.store.query_one("data_accounts", "id = ?", [data_account_id])
        with self.store.transaction():
            self.store.update("data_accounts", {"is_active": 0}, "id = ?", [data_account_id])
            if row is not None:
                self.deactivate_wallet_account(row["url"])

    def purge_data_account(self, url: str) -> None:
        row = self.store.query_one("data_accounts", "url = ?", [url])
        with self.store.transaction():
            self.store.delete("data_accounts", "url = ?", [url])
            self.remove_wallet_account(url)
            if row is not None:
                self._refresh_account_count(row["parent_identity_id"])

    def data_accounts_for_dropdown(self) -> List[Dict[str, Any]]:
        return [
            {"url": account.url, "name": account.name, "displayName": f"{account.name} ({account.url})"}
            for account in self.list_data_accounts()
        ]

    # Custom tokens

    def create_custom_token(self, name: str, symbol: str, url: str, precision: int = 8,
                            creator_identity_id: Optional[int] = None) -> int:
        """
        Store a custom token.

        Raises:
            ValidationError: On malformed name, symbol or precision, or when
                the symbol, name or URL is already taken locally
        """
        name = require_token_name(name)
        require_token_symbol(symbol)
        require_precision(precision)
        if not self.is_token_symbol_available(symbol):
            raise ValidationError(f"Token symbol {symbol} already exists", ErrorCode.NAME_UNAVAILABLE)
        if not self.is_token_name_available(name):
            raise ValidationError(f"Token name {name} already exists", ErrorCode.NAME_UNAVAILABLE)
        if not self.is_token_url_available(url):
            raise ValidationError(f"Token URL {url} already exists", ErrorCode.NAME_UNAVAILABLE)
        self._require_identity(creator_identity_id, url)

        token = CustomToken(name=name, symbol=symbol, url=url, precision=precision,
                            creator_identity_id=creator_identity_id)
        token_id = self.store.insert("custom_tokens", token.to_row())
        logger.debug(f"Stored custom token {symbol} at {url}")
        return token_id

    def get_custom_token_by_url(self, url: str) -> Optional[CustomToken]:
        row = self.store.query_one("custom_tokens", "url = ?", [url])
        return CustomToken.from_row(row) if row else None

    def get_custom_token_by_symbol(self, symbol: str) -> Optional[CustomToken]:
        row = self.store.query_one("custom_tokens", "symbol = ?", [symbol])
        return CustomToken.from_row(row) if row else None

    def list_custom_tokens(self) -> List[CustomToken]:
        return [CustomToken.from_row(row) for row in self.store.query("custom_tokens", order_by="id DESC")]

    def custom_tokens_by_creator(self, identity_id: int) -> List[CustomToken]:
        rows = self.store.query("custom_tokens", "creator_identity_id = ?", [identity_id], order_by="id DESC")
        return [CustomToken.from_row(row) for row in rows]

    def delete_custom_token(self, token_id: int) -> None:
        """Hard delete; custom tokens are wallet-local bookkeeping."""
        self.store.delete("custom_tokens", "id = ?", [token_id])

    def purge_custom_token(self, url: str) -> None:
        self.store.delete("custom_tokens", "url = ?", [url])

    def is_token_symbol_available(self, symbol: str) -> bool:
        return symbol != "ACME" and self.get_custom_token_by_symbol(symbol) is None

    def is_token_name_available(self, name: str) -> bool:
        return self.store.count("custom_tokens", "name = ?", [name.strip()]) == 0

    def is_token_url_available(self, url: str) -> bool:
        return url != ACME_TOKEN_URL and self.get_custom_token_by_url(url) is None

    def token_precision(self, token_url: str) -> int:
        """Precision of ACME or a known custom token; ACME precision otherwise."""
        if token_url == ACME_TOKEN_URL:
            return ACME_PRECISION
        token = self.get_custom_token_by_url(token_url)
        return token.precision if token else ACME_PRECISION

    # Listings

    def accounts_for_dropdown(self, account_type: Optional[Union[AccountType, str]] = None) -> List[Dict[str, Any]]:
        return [
            {
                "type": "account",
                "data": account,
                "displayName": f"{account.name} ({account.account_type.value})",
                "address": account.address,
            }
            for account in self.list_wallet_accounts(account_type)
        ]

    def tokens_for_dropdown(self) -> List[Dict[str, Any]]:
        """ACME first, then custom tokens newest first."""
        tokens = [{
            "type": "token",
            "name": "ACME",
            "symbol": "ACME",
            "url": ACME_TOKEN_URL,
            "precision": ACME_PRECISION,
            "isCustom": False,
        }]
        for token in self.list_custom_tokens():
            tokens.append({
                "type": "token",
                "name": token.name,
                "symbol": token.symbol,
                "url": token.url,
                "precision": token.precision,
                "isCustom": True,
            })
        return tokens

    def credit_accounts_for_dropdown(self) -> List[Dict[str, Any]]:
        """Accounts that can receive credits: lite accounts and key pages."""
        accounts = []
        for account in self.list_wallet_accounts(AccountType.LITE):
            lite_identity = normalize_signer_url(account.address)
            accounts.append({
                "url": lite_identity,
                "type": "lite_account",
                "name": account.name,
                "displayName": f"{account.name} (Lite)",
            })
        for page in self.identities.list_key_pages():
            accounts.append({
                "url": page.url,
                "type": "key_page",
                "name": page.name,
                "displayName": f"Key Page {page.name} ({page.url})",
            })
        return accounts

    # Statistics

    def _refresh_account_count(self, identity_id: int) -> None:
        count = (
            self.store.count("token_accounts", "parent_identity_id = ? AND is_active = 1", [identity_id])
            + self.store.count("data_accounts", "parent_identity_id = ? AND is_active = 1", [identity_id])
        )
        self.identities.update_account_count(identity_id, count)

    def statistics(self) -> Dict[str, int]:
        return {
            "customTokens": self.store.count("custom_tokens"),
            "dataAccounts": self.store.count("data_accounts", "is_active = 1"),
            "liteAccounts": self.store.count("wallet_accounts", "account_type = ? AND is_active = 1",
                                             [AccountType.LITE.value]),
            "adiTokenAccounts": self.store.count("wallet_accounts", "account_type = ? AND is_active = 1",
                                                 [AccountType.TOKEN.value]),
        }


__all__ = ["AccountRegistry", "ACME_PRECISION"]
