"""
Discovery of pending transactions that need this wallet's signature.

A signing path names the signer whose pending queue is read. It is either a
key page URL or a delegation chain written ``a -> b -> c``, in which case the
last hop is the signer and the hop before it is recorded as ``prior_hop``.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..client.ledger_client import LedgerClient
from ..registry.identity import IdentityRegistry
from ..runtime.errors import WalletError

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " -> "


@dataclass(frozen=True)
class PendingTransaction:
    txid: Optional[str] = None
    hash: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> PendingTransaction:
        return cls(item.get("txid"), item.get("hash"), item.get("type"))

    def to_dict(self) -> Dict[str, str]:
        return {k: v for k, v in (("txId", self.txid), ("hash", self.hash), ("type", self.type))
                if v is not None}


@dataclass(frozen=True)
class PendingBucket:
    """Pending transactions found on one signing path."""

    signing_path: str
    signer: str
    prior_hop: str
    transactions: List[PendingTransaction]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signingPath": self.signing_path,
            "signer": self.signer,
            "priorHop": self.prior_hop,
            "transactions": [tx.to_dict() for tx in self.transactions],
        }


@dataclass(frozen=True)
class PendingSignatures:
    count: int
    buckets: List[PendingBucket] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def flatten(self) -> List[Dict[str, str]]:
        return [tx.to_dict() for bucket in self.buckets for tx in bucket.transactions]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "bySigningPath": [bucket.to_dict() for bucket in self.buckets],
            "errors": list(self.errors),
        }


class PendingTransactionService:
    """Reads the pending queues of the wallet's signers."""

    def __init__(self, client: LedgerClient, identities: IdentityRegistry):
        self.client = client
        self.identities = identities

    def signing_paths(self) -> List[str]:
        """Key pages in the local mirror whose default key has a stored private key."""
        paths = []
        for page in self.identities.list_key_pages():
            key = self.identities.default_key(page.id)
            if key is not None and key.has_private_key:
                paths.append(page.url)
        return paths

    def find_pending(self, signing_paths: Optional[List[str]] = None) -> PendingSignatures:
        """
        Pending transactions for every signing path, grouped by path.

        Args:
            signing_paths: Paths to read; the wallet's own key pages when omitted

        Paths that cannot be read are listed in ``errors`` and skipped.
        """
        paths = self.signing_paths() if signing_paths is None else signing_paths
        buckets: List[PendingBucket] = []
        errors: List[str] = []
        for path in paths:
            hops = path.split(PATH_SEPARATOR)
            signer = hops[-1]
            try:
                items = self.client.query_pending(signer)
            except WalletError as e:
                logger.warning(f"Cannot read pending transactions for {signer}: {e.message}")
                errors.append(f"Error querying {signer}: {e.message}")
                continue
            if items:
                prior_hop = hops[-2] if len(hops) > 1 else signer
                buckets.append(PendingBucket(path, signer, prior_hop,
                                             [PendingTransaction.from_item(i) for i in items]))

        count = sum(len(bucket.transactions) for bucket in buckets)
        logger.debug(f"{count} pending transactions over {len(paths)} signing paths")
        return PendingSignatures(count, buckets, errors)

    def pending_count(self, signer_url: str) -> int:
        """Number of transactions waiting for ``signer_url``; 0 when it cannot be read."""
        try:
            return len(self.client.query_pending(signer_url))
        except WalletError as e:
            logger.warning(f"Cannot read pending transactions for {signer_url}: {e.message}")
            return 0

    def has_pending(self, signing_paths: Optional[List[str]] = None) -> bool:
        paths = self.signing_paths() if signing_paths is None else signing_paths
        return any(self.pending_count(path.split(PATH_SEPARATOR)[-1]) > 0 for path in paths)


__all__ = [
    "PendingTransactionService",
    "PendingSignatures",
    "PendingBucket",
    "PendingTransaction",
]
