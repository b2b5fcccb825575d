"""
Wallet Error Model

Error taxonomy for the wallet core. Every failure the wallet can report falls
into one of five families: validation, missing key, network, protocol
rejection and local consistency. Each family has its own exception type so
callers can pick a remedy (fix the input, import a key, retry later, read the
network's message, repair the local mirror).
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Wallet error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    NOT_FOUND = 4

    # Validation errors (100-199)
    INVALID_INPUT = 100
    INVALID_URL = 101
    INVALID_AMOUNT = 102
    INVALID_NAME = 103
    INVALID_SYMBOL = 104
    NAME_UNAVAILABLE = 105

    # Network errors (200-299)
    NETWORK_ERROR = 200
    CONNECTION_FAILED = 201
    TIMEOUT = 202
    INVALID_RESPONSE = 203

    # Key errors (300-399)
    KEY_NOT_FOUND = 300
    KEY_GENERATION_FAILED = 301
    INVALID_KEY = 302

    # Protocol rejection (400-499)
    TRANSACTION_FAILED = 400
    INSUFFICIENT_CREDITS = 401
    STALE_SIGNER_VERSION = 402
    UNKNOWN_RESPONSE_FORMAT = 403

    # Local consistency (500-599)
    PARENT_NOT_FOUND = 500
    STORAGE_ERROR = 501
    SECURE_STORAGE_ERROR = 502


class WalletError(Exception):
    """
    Root of the wallet error tree.

    Args:
        message: Human-readable description
        code: Machine-readable :class:`ErrorCode`
        details: Structured context such as the offending URL
        cause: Lower-level exception this one wraps
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = dict(details) if details else {}
        self.cause = cause

    def __str__(self) -> str:
        text = f"[{self.code.name}] {self.message}"
        if self.details:
            text += f" | Details: {self.details}"
        if self.cause is not None:
            text += f" | Caused by: {self.cause}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict for logs and outcome payloads."""
        payload: Dict[str, Any] = {"code": int(self.code), "message": self.message}
        if self.details:
            payload["details"] = self.details
        if self.cause is not None:
            payload["cause"] = str(self.cause)
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WalletError:
        """Rebuild an error from :meth:`to_dict` output; unknown codes become UNKNOWN."""
        try:
            code = ErrorCode(data.get("code", ErrorCode.UNKNOWN))
        except ValueError:
            code = ErrorCode.UNKNOWN
        return cls(data.get("message", "Unknown error"), code, data.get("details"))


class ValidationError(WalletError):
    """Malformed input caught before any network call."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_INPUT,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class InvalidURLError(ValidationError):
    """Invalid account URL."""

    def __init__(self, message: str = "Invalid URL",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_URL, details, cause)


class MissingKeyError(WalletError):
    """No private key is stored for a required signer."""

    def __init__(self, message: str = "Private key not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.KEY_NOT_FOUND, details, cause)


class KeyGenerationError(WalletError):
    """Key generation failed (entropy or crypto library failure)."""

    def __init__(self, message: str = "Key generation failed",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.KEY_GENERATION_FAILED, details, cause)


class NetworkError(WalletError):
    """Transport failures: connection errors, non-2xx responses, bad payloads."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)


class ConnectionError(NetworkError):
    """Connection failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.CONNECTION_FAILED


class TimeoutError(NetworkError):
    """A single bounded network call ran past its timeout."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.TIMEOUT


class ProtocolRejectionError(WalletError):
    """The network accepted the call but rejected the transaction."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.TRANSACTION_FAILED,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class InsufficientCreditsError(ProtocolRejectionError):
    """Insufficient credits for transaction."""

    def __init__(self, message: str = "Insufficient credits",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INSUFFICIENT_CREDITS, details, cause)


class LocalConsistencyError(WalletError):
    """A parent row referenced by a child cannot be found or repaired."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.PARENT_NOT_FOUND,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class StorageError(LocalConsistencyError):
    """Ledger store failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.STORAGE_ERROR, details, cause)


class SecureStorageError(WalletError):
    """Secure key store failures (corrupt file, wrong password)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SECURE_STORAGE_ERROR, details, cause)


def error_from_response(response: Dict[str, Any]) -> Optional[WalletError]:
    """
    Map the ``error`` member of a JSON-RPC response to a wallet error.

    Returns None when the response carries no error. Rejections are sorted by
    message into insufficient credits, stale signer version, not found and a
    generic transaction failure.
    """
    if not isinstance(response, dict) or "error" not in response or response["error"] is None:
        return None

    raw = response["error"]
    if not isinstance(raw, dict):
        return ProtocolRejectionError(raw if isinstance(raw, str) else str(raw))

    message = str(raw.get("message") or "Unknown error")
    details = raw.get("data")
    if details is not None and not isinstance(details, dict):
        details = {"data": details}

    lowered = message.lower()
    if "insufficient credit" in lowered:
        return InsufficientCreditsError(message, details)
    if "version" in lowered and ("signer" in lowered or "stale" in lowered or "mismatch" in lowered):
        return ProtocolRejectionError(message, ErrorCode.STALE_SIGNER_VERSION, details)
    if "not found" in lowered or "does not exist" in lowered:
        return ProtocolRejectionError(message, ErrorCode.NOT_FOUND, details)
    return ProtocolRejectionError(message, ErrorCode.TRANSACTION_FAILED, details)


__all__ = [
    "ErrorCode",
    "WalletError",
    "ValidationError",
    "InvalidURLError",
    "MissingKeyError",
    "KeyGenerationError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "ProtocolRejectionError",
    "InsufficientCreditsError",
    "LocalConsistencyError",
    "StorageError",
    "SecureStorageError",
    "error_from_response",
]
