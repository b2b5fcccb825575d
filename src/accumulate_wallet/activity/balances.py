"""
Wallet balance aggregation.

Sums the ACME held by every active lite and identity token account in the
local registry. Each account is queried on the network; an account that
cannot be read is reported in ``errors`` and the others are still summed.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..client.ledger_client import LedgerClient
from ..credits.economics import format_acme
from ..registry.accounts import AccountRegistry
from ..runtime.errors import WalletError
from ..runtime.url import ACME_TOKEN_URL
from ..storage.models import AccountType, now_ms

logger = logging.getLogger(__name__)

TRACKED_ACCOUNT_TYPES = (AccountType.LITE, AccountType.TOKEN)


@dataclass(frozen=True)
class AccountBalance:
    address: str
    name: str
    account_type: AccountType
    balance: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "name": self.name,
            "accountType": self.account_type.value,
            "balance": self.balance,
            "formatted": format_acme(self.balance),
        }


@dataclass(frozen=True)
class BalanceAggregation:
    """
    Result of one aggregation pass.

    Attributes:
        total: Sum of all balances in ACME base units
        accounts: Accounts holding a non-zero balance
        errors: One message per account that could not be queried
        updated_at: Time of the pass in milliseconds
    """

    total: int
    accounts: List[AccountBalance] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    updated_at: int = field(default_factory=now_ms)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalBalance": self.total,
            "formatted": format_acme(self.total),
            "accounts": [account.to_dict() for account in self.accounts],
            "errors": list(self.errors),
            "updatedAt": self.updated_at,
        }


class BalanceAggregationService:
    """Totals and per-account shares of the ACME held by the wallet."""

    def __init__(self, client: LedgerClient, accounts: AccountRegistry):
        self.client = client
        self.accounts = accounts

    def total_wallet_balance(self) -> BalanceAggregation:
        """
        Query every tracked ACME account and sum the balances.

        Transport and node errors for single accounts are collected rather
        than raised.
        """
        balances: List[AccountBalance] = []
        errors: List[str] = []
        for account in self.accounts.list_wallet_accounts():
            if account.account_type not in TRACKED_ACCOUNT_TYPES:
                continue
            if (account.token_url or ACME_TOKEN_URL) != ACME_TOKEN_URL:
                continue
            try:
                balance = self.client.get_balance(account.address)
            except WalletError as e:
                logger.warning(f"Cannot read balance of {account.address}: {e.message}")
                errors.append(f"Error querying {account.address}: {e.message}")
                continue
            if balance > 0:
                balances.append(AccountBalance(account.address, account.name, account.account_type, balance))

        total = sum(b.balance for b in balances)
        logger.debug(f"Wallet balance {format_acme(total)} over {len(balances)} accounts")
        return BalanceAggregation(total, balances, errors)

    def balance_summary(self) -> Dict[str, Any]:
        """Fresh totals plus each account's share of the total in percent."""
        aggregation = self.total_wallet_balance()
        shares = []
        for account in aggregation.accounts:
            share = account.to_dict()
            share["percentage"] = account.balance * 100 / aggregation.total
            shares.append(share)
        return {
            "totalBalance": aggregation.total,
            "formatted": format_acme(aggregation.total),
            "accountCount": len(aggregation.accounts),
            "accounts": shares,
            "hasErrors": aggregation.has_errors,
            "updatedAt": aggregation.updated_at,
        }


__all__ = ["BalanceAggregationService", "BalanceAggregation", "AccountBalance"]
