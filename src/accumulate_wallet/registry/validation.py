"""
Input validation rules for names, symbols, URLs and amounts.

Predicates return bool; the ``require_*`` helpers raise
:class:`ValidationError` with a user-facing message.
"""

from __future__ import annotations
import re
from decimal import Decimal, InvalidOperation

from ..runtime.errors import ValidationError, ErrorCode

IDENTITY_NAME_MAX = 64
USERNAME_MAX = 50
TOKEN_NAME_MAX = 64
MEMO_MAX = 256
MAX_PRECISION = 18

_NAME = re.compile(r"^[a-zA-Z0-9-]+$")
_TOKEN_SYMBOL = re.compile(r"^[A-Z0-9]{2,8}$")
_TOKEN_NAME = re.compile(r"^[a-zA-Z0-9\s\-_\.]+$")
_DATA_ACCOUNT_URL = re.compile(r"^acc://[a-zA-Z0-9\-\.\/]+$")
_HEX64 = re.compile(r"^[0-9a-fA-F]{64}$")


def _is_name(name: str, max_length: int) -> bool:
    return (
        isinstance(name, str)
        and bool(_NAME.fullmatch(name))
        and len(name) <= max_length
        and not name.startswith('-')
        and not name.endswith('-')
    )


def is_valid_identity_name(name: str) -> bool:
    """Letters, digits and hyphens, at most 64 characters, no edge hyphen."""
    return _is_name(name, IDENTITY_NAME_MAX)


def is_valid_username(name: str) -> bool:
    return _is_name(name, USERNAME_MAX)


def is_valid_token_symbol(symbol: str) -> bool:
    """2 to 8 uppercase letters or digits."""
    return isinstance(symbol, str) and bool(_TOKEN_SYMBOL.fullmatch(symbol))


def is_valid_token_name(name: str) -> bool:
    if not isinstance(name, str):
        return False
    trimmed = name.strip()
    return bool(trimmed) and len(trimmed) <= TOKEN_NAME_MAX and bool(_TOKEN_NAME.fullmatch(trimmed))


def is_valid_data_account_url(url: str) -> bool:
    return isinstance(url, str) and len(url) > 6 and bool(_DATA_ACCOUNT_URL.fullmatch(url))


def is_valid_tx_hash(value: str) -> bool:
    return isinstance(value, str) and bool(_HEX64.fullmatch(value))


def is_valid_public_key_hex(value: str) -> bool:
    return isinstance(value, str) and bool(_HEX64.fullmatch(value))


def is_valid_memo(memo: str) -> bool:
    return memo is None or (isinstance(memo, str) and len(memo) <= MEMO_MAX)


def is_valid_precision(precision: int) -> bool:
    return isinstance(precision, int) and not isinstance(precision, bool) and 0 <= precision <= MAX_PRECISION


def is_valid_amount(amount: str) -> bool:
    """Positive decimal number in plain notation."""
    if not isinstance(amount, str) or not re.fullmatch(r"^\d+(\.\d+)?$", amount.strip()):
        return False
    try:
        return Decimal(amount.strip()) > 0
    except InvalidOperation:
        return False


def require_identity_name(name: str) -> str:
    if not is_valid_identity_name(name):
        raise ValidationError(
            "Invalid identity name format: use letters, numbers and hyphens "
            f"(max {IDENTITY_NAME_MAX}, no leading or trailing hyphen)",
            ErrorCode.INVALID_NAME,
            {"name": name},
        )
    return name


def require_token_symbol(symbol: str) -> str:
    if not is_valid_token_symbol(symbol):
        raise ValidationError(
            "Invalid token symbol format: 2-8 uppercase letters or digits",
            ErrorCode.INVALID_SYMBOL,
            {"symbol": symbol},
        )
    return symbol


def require_token_name(name: str) -> str:
    if not is_valid_token_name(name):
        raise ValidationError("Invalid token name format", ErrorCode.INVALID_NAME, {"name": name})
    return name.strip()


def require_precision(precision: int) -> int:
    if not is_valid_precision(precision):
        raise ValidationError(
            f"Precision must be an integer between 0 and {MAX_PRECISION}",
            ErrorCode.INVALID_AMOUNT,
            {"precision": precision},
        )
    return precision


def require_memo(memo: str) -> str:
    if not is_valid_memo(memo):
        raise ValidationError(f"Memo exceeds {MEMO_MAX} characters", ErrorCode.INVALID_INPUT)
    return memo


__all__ = [
    "is_valid_identity_name",
    "is_valid_username",
    "is_valid_token_symbol",
    "is_valid_token_name",
    "is_valid_data_account_url",
    "is_valid_tx_hash",
    "is_valid_public_key_hex",
    "is_valid_memo",
    "is_valid_precision",
    "is_valid_amount",
    "require_identity_name",
    "require_token_symbol",
    "require_token_name",
    "require_precision",
    "require_memo",
]
