"""
Submission response normalization.

Every response the network returns for a submission maps to exactly one
:class:`TxOutcome`: :class:`Success` carrying the transaction id, or
:class:`Failure` carrying a readable message. Rules are applied in order:

1. A list of results (at ``result`` or ``result.result``) with any entry
   marked ``failed`` or with a status code other than ``ok`` (or ``0``) fails
   with that entry's message. Entries under ``result.result`` must carry a
   status code; one without a code counts as failed.
2. Otherwise a transaction id is read from ``txid``, ``transactionId`` or
   ``transactionHash`` and a hash from ``hash``, ``transactionHash`` or
   ``simpleHash``.
3. Without a result, a top-level ``error.message`` becomes the failure.
4. Anything else fails as an unknown response format.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..runtime.errors import ErrorCode, WalletError, error_from_response

logger = logging.getLogger(__name__)

TX_ID_FIELDS = ("txid", "transactionId", "transactionHash")
HASH_FIELDS = ("hash", "transactionHash", "simpleHash")
UNKNOWN_FORMAT_MESSAGE = "Unknown response format"
DEFAULT_FAILURE_MESSAGE = "Transaction failed"


@dataclass(frozen=True)
class Success:
    """
    The operation succeeded.

    ``transaction_id`` is set whenever the network accepted a transaction;
    local-only operations and queries leave it None.
    """

    transaction_id: Optional[str]
    hash: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """The submission did not produce an accepted transaction."""

    message: str
    code: ErrorCode = ErrorCode.TRANSACTION_FAILED
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_error(cls, error: WalletError) -> Failure:
        return cls(message=error.message, code=error.code, details=dict(error.details))


TxOutcome = Union[Success, Failure]


def _classify(message: str) -> ErrorCode:
    error = error_from_response({"error": {"message": message}})
    return error.code if error is not None else ErrorCode.TRANSACTION_FAILED


def _first(mapping: Dict[str, Any], names: tuple) -> Optional[str]:
    for name in names:
        value = mapping.get(name)
        if value is not None and value != "":
            return str(value)
    return None


def _entry_message(entry: Dict[str, Any]) -> str:
    error = entry.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if entry.get("message"):
        return str(entry["message"])
    return DEFAULT_FAILURE_MESSAGE


def _entry_failed(entry: Any, require_code: bool = False) -> bool:
    """
    Whether one result entry reports a failure.

    With ``require_code`` an entry that carries no status code counts as
    failed; per-message results nested under ``result.result`` always carry
    one when they succeed.
    """
    if not isinstance(entry, dict):
        return False
    if entry.get("failed") is True:
        return True
    code = entry.get("code")
    if code is None:
        return require_code
    if isinstance(code, str):
        return code != "ok"
    return code != 0


def _scan_results(entries: List[Any], require_code: bool = False) -> Optional[Failure]:
    for index, entry in enumerate(entries):
        if _entry_failed(entry, require_code):
            message = _entry_message(entry)
            logger.debug(f"Result entry {index} failed: {message}")
            return Failure(message, _classify(message), {"index": index})
    return None


def _failure(message: str, code: Optional[ErrorCode] = None) -> Failure:
    return Failure(message, code if code is not None else _classify(message))


def parse_response(response: Any) -> TxOutcome:
    """
    Normalize a submission response.

    Args:
        response: Decoded JSON-RPC response (``{"result": ...}`` or
            ``{"error": ...}``)

    Returns:
        Success or Failure; never raises
    """
    if not isinstance(response, dict):
        logger.warning(f"Unexpected response type {type(response).__name__}")
        return Failure(UNKNOWN_FORMAT_MESSAGE, ErrorCode.UNKNOWN_RESPONSE_FORMAT)

    result = response.get("result")

    if isinstance(result, list):
        failure = _scan_results(result)
        if failure is not None:
            return failure
        for entry in result:
            if isinstance(entry, dict):
                tx_id = _first(entry, TX_ID_FIELDS)
                if tx_id is not None:
                    return Success(tx_id, _first(entry, HASH_FIELDS), entry)

    elif isinstance(result, dict):
        nested = result.get("result")
        if isinstance(nested, list):
            failure = _scan_results(nested, require_code=True)
            if failure is not None:
                return failure
        if _entry_failed(result) and result.get("message"):
            return _failure(str(result["message"]))

        tx_id = _first(result, TX_ID_FIELDS)
        if tx_id is not None:
            logger.debug(f"Transaction accepted, txid {tx_id}")
            return Success(tx_id, _first(result, HASH_FIELDS), dict(result))

    error = response.get("error")
    if error is not None:
        if isinstance(error, dict):
            message = str(error.get("message") or error)
        else:
            message = str(error)
        logger.debug(f"Submission error: {message}")
        return _failure(message)

    logger.warning(f"{UNKNOWN_FORMAT_MESSAGE}: {sorted(response.keys())}")
    return Failure(UNKNOWN_FORMAT_MESSAGE, ErrorCode.UNKNOWN_RESPONSE_FORMAT)


__all__ = [
    "Success",
    "Failure",
    "TxOutcome",
    "parse_response",
    "UNKNOWN_FORMAT_MESSAGE",
]
