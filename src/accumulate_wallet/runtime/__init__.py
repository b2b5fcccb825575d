"""Runtime helpers for the Accumulate wallet core"""

from .url import AccountUrl, normalize_signer_url, identity_url
from .errors import WalletError, ErrorCode

__all__ = [
    "AccountUrl",
    "normalize_signer_url",
    "identity_url",
    "WalletError",
    "ErrorCode",
]
