"""
Canonical JSON and transaction envelopes.

The transaction hash is SHA-256 over the canonical JSON encoding of the
transaction (keys sorted, no whitespace), so the same transaction always
hashes the same way.
"""

from __future__ import annotations
import hashlib
import json
import time
from typing import Any, Dict, Optional

from ..signers.signer import Signer


def dumps_canonical(obj: Any) -> str:
    """
    Encode an object as canonical JSON.

    Args:
        obj: JSON-compatible value

    Returns:
        JSON text with sorted keys and no extra whitespace
    """
    return json.dumps(obj, separators=(',', ':'), ensure_ascii=False, sort_keys=True)


def transaction_hash(transaction: Dict[str, Any]) -> bytes:
    return hashlib.sha256(dumps_canonical(transaction).encode('utf-8')).digest()


def build_transaction(principal: str, body: Dict[str, Any], initiator: bytes,
                      memo: Optional[str] = None, timestamp: Optional[int] = None) -> Dict[str, Any]:
    """
    Assemble an unsigned transaction.

    Args:
        principal: Account the transaction acts on
        body: Transaction body from :class:`TxBody`
        initiator: Public key hash of the initiating key
        memo: Optional memo
        timestamp: Microseconds since the epoch (defaults to now)
    """
    if timestamp is None:
        timestamp = int(time.time() * 1_000_000)
    header: Dict[str, Any] = {
        "principal": principal,
        "initiator": initiator.hex(),
        "timestamp": timestamp,
    }
    if memo:
        header["memo"] = memo
    return {"header": header, "body": body}


def sign_transaction(transaction: Dict[str, Any], signer: Signer) -> Dict[str, Any]:
    """Sign an assembled transaction and wrap it in an envelope."""
    digest = transaction_hash(transaction)
    signature = signer.to_signature(digest, transaction["header"].get("timestamp"))
    return {"transaction": transaction, "signatures": [signature]}


def build_envelope(principal: str, body: Dict[str, Any], signer: Signer,
                   memo: Optional[str] = None, timestamp: Optional[int] = None) -> Dict[str, Any]:
    """
    Build and sign a transaction envelope in one step.

    Returns:
        ``{"transaction": ..., "signatures": [...]}`` ready for submission
    """
    transaction = build_transaction(principal, body, signer.get_public_key_hash(), memo, timestamp)
    return sign_transaction(transaction, signer)


__all__ = [
    "dumps_canonical",
    "transaction_hash",
    "build_transaction",
    "sign_transaction",
    "build_envelope",
]
