"""
Transaction body factories.

Each factory returns the JSON body of one transaction type. Amounts are
integer base units rendered as decimal strings; key hashes are hex.

Example:
    ```python
    body = TxBody.create_identity("acc://my-adi.acme", "acc://my-adi.acme/book0", key_hash)
    body = TxBody.add_credits("acc://my-adi.acme/book0/1", 10_000_000_000, oracle)
    ```
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Union

from ..runtime.url import ACME_TOKEN_URL


def _hex(value: Union[str, bytes]) -> str:
    return value.hex() if isinstance(value, bytes) else value


class TxBody:
    """Factory for transaction bodies."""

    @staticmethod
    def create_identity(url: str, key_book_url: str, public_key_hash: Union[str, bytes]) -> Dict[str, Any]:
        return {
            "type": "createIdentity",
            "url": url,
            "keyBookUrl": key_book_url,
            "keyHash": _hex(public_key_hash),
        }

    @staticmethod
    def create_key_book(url: str, public_key_hash: Union[str, bytes]) -> Dict[str, Any]:
        return {
            "type": "createKeyBook",
            "url": url,
            "publicKeyHash": _hex(public_key_hash),
        }

    @staticmethod
    def create_key_page(key_hashes: List[Union[str, bytes]]) -> Dict[str, Any]:
        """CreateKeyPage body with one entry per key hash."""
        return {
            "type": "createKeyPage",
            "keys": [{"keyHash": _hex(key_hash)} for key_hash in key_hashes],
        }

    @staticmethod
    def create_token_account(url: str, token_url: str = ACME_TOKEN_URL) -> Dict[str, Any]:
        return {
            "type": "createTokenAccount",
            "url": url,
            "tokenUrl": token_url,
        }

    @staticmethod
    def create_data_account(url: str) -> Dict[str, Any]:
        return {
            "type": "createDataAccount",
            "url": url,
        }

    @staticmethod
    def write_data(entries: List[Union[str, bytes]], scratch: bool = False,
                   write_to_state: bool = False) -> Dict[str, Any]:
        """
        WriteData body with a double-hash entry.

        Args:
            entries: Entry parts; ``str`` parts are UTF-8 encoded, ``bytes``
                parts are used as is
        """
        parts = [e.encode("utf-8").hex() if isinstance(e, str) else e.hex() for e in entries]
        body: Dict[str, Any] = {
            "type": "writeData",
            "entry": {"type": "doubleHash", "data": parts},
        }
        if scratch:
            body["scratch"] = True
        if write_to_state:
            body["writeToState"] = True
        return body

    @staticmethod
    def create_token(url: str, symbol: str, precision: int,
                     supply_limit: Optional[int] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": "createToken",
            "url": url,
            "symbol": symbol,
            "precision": precision,
        }
        if supply_limit is not None:
            body["supplyLimit"] = str(supply_limit)
        return body

    @staticmethod
    def issue_tokens(to_url: str, amount: int) -> Dict[str, Any]:
        return {
            "type": "issueTokens",
            "to": [{"url": to_url, "amount": str(amount)}],
        }

    @staticmethod
    def burn_tokens(amount: int) -> Dict[str, Any]:
        return {
            "type": "burnTokens",
            "amount": str(amount),
        }

    @staticmethod
    def add_credits(recipient: str, amount: int, oracle: int) -> Dict[str, Any]:
        """
        AddCredits body.

        Args:
            recipient: Lite identity or key page receiving the credits
            amount: ACME spent, in base units
            oracle: Oracle price the amount was computed with
        """
        return {
            "type": "addCredits",
            "recipient": recipient,
            "amount": str(amount),
            "oracle": oracle,
        }

    @staticmethod
    def send_tokens(recipients: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "type": "sendTokens",
            "to": [{"url": r["url"], "amount": str(r["amount"])} for r in recipients],
        }

    @staticmethod
    def send_tokens_single(to_url: str, amount: int) -> Dict[str, Any]:
        return TxBody.send_tokens([{"url": to_url, "amount": amount}])


__all__ = ["TxBody"]
