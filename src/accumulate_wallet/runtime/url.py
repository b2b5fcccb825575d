"""
AccountUrl Pydantic custom type and address-form helpers for Accumulate URLs.

Lite addresses come in two textual forms: the base lite identity
(``acc://<48 hex>``), which is the signer, and the token-account form
(``acc://<48 hex>/ACME`` or another token symbol). Hierarchical identity
addresses look like ``acc://<name>.acme[/<path>]``.
"""

from __future__ import annotations
import logging
import re
from typing import Any, Optional

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

logger = logging.getLogger(__name__)

SCHEME = "acc://"
IDENTITY_TLD = ".acme"
ACME_TOKEN_URL = "acc://ACME"

# Lite identity: 20-byte key hash plus 4-byte checksum, hex encoded
_LITE_AUTHORITY = re.compile(r"^[0-9a-fA-F]{48}$")
_TOKEN_SUFFIX = re.compile(r"^[A-Za-z0-9]{2,8}$")


class AccountUrl:
    """Custom Pydantic type for Accumulate account URLs."""

    def __init__(self, url: str):
        if not isinstance(url, str):
            raise ValueError("AccountUrl must be a string")
        if not url or url == SCHEME:
            raise ValueError("AccountUrl cannot be empty or just protocol")
        if not url.startswith(SCHEME):
            raise ValueError("AccountUrl must use 'acc://' protocol")
        if any(c.isspace() for c in url):
            raise ValueError("AccountUrl cannot contain whitespace")

        self.url = url.rstrip('/')

    def __str__(self) -> str:
        return self.url

    def __repr__(self) -> str:
        return f"AccountUrl('{self.url}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, AccountUrl):
            return self.url == other.url
        elif isinstance(other, str):
            return self.url == other
        return False

    def __hash__(self) -> int:
        return hash(self.url)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the AccountUrl."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any) -> "AccountUrl":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(value)
        raise ValueError(f"Invalid AccountUrl: {value}")

    @property
    def authority(self) -> str:
        """Authority portion (``name.acme`` or the lite hex string)."""
        return self.url[len(SCHEME):].split('/')[0]

    @property
    def path(self) -> str:
        """Path portion without the leading slash."""
        remainder = self.url[len(SCHEME):]
        if '/' in remainder:
            return remainder.split('/', 1)[1]
        return ""

    @property
    def last_segment(self) -> str:
        return self.url.rsplit('/', 1)[-1] if self.path else self.authority

    @property
    def is_lite(self) -> bool:
        """Check if this URL lives under a lite identity."""
        return bool(_LITE_AUTHORITY.match(self.authority))

    @property
    def is_identity(self) -> bool:
        """Check if this URL lives under a hierarchical ``.acme`` identity."""
        return self.authority.endswith(IDENTITY_TLD)

    @property
    def token_suffix(self) -> Optional[str]:
        """Token symbol suffix of a lite token account, if any."""
        if not self.is_lite:
            return None
        path = self.path
        if path and '/' not in path and _TOKEN_SUFFIX.match(path):
            return path
        return None

    def lite_base(self) -> "AccountUrl":
        """Base lite identity for a lite URL (drops any token suffix)."""
        if not self.is_lite:
            raise ValueError(f"Not a lite URL: {self.url}")
        return AccountUrl(SCHEME + self.authority)

    def root(self) -> "AccountUrl":
        """Get the root identity URL."""
        return AccountUrl(SCHEME + self.authority)

    def join(self, *parts: str) -> "AccountUrl":
        """Join additional path components to this URL."""
        base = self.url
        for part in parts:
            part = str(part).strip('/')
            if part:
                base += '/' + part
        return AccountUrl(base)

    def parent(self) -> "AccountUrl":
        """Get the parent URL by removing the last path component."""
        if not self.path:
            raise ValueError("URL has no parent")
        return AccountUrl(self.url.rsplit('/', 1)[0])

    def is_root(self) -> bool:
        return not self.path

    @classmethod
    def parse(cls, url_str: str) -> "AccountUrl":
        """Parse a URL string, adding the ``acc://`` scheme when missing."""
        if not isinstance(url_str, str):
            raise ValueError("URL must be a string")
        url_str = url_str.strip()
        if url_str.startswith(SCHEME):
            return cls(url_str)
        if url_str.startswith("//"):
            return cls("acc:" + url_str)
        if url_str and "://" not in url_str:
            return cls(SCHEME + url_str)
        raise ValueError(f"Invalid URL format: {url_str}")


def normalize_signer_url(url: str) -> str:
    """
    Reduce an account URL to the form used as a signer.

    Lite token accounts (``acc://<lite>/<TOKEN>``) reduce to their lite
    identity. Identity URLs ending in ``/ACME`` drop the suffix. Anything else
    is returned unchanged.

    Args:
        url: Account URL in either form

    Returns:
        The signer form of the URL
    """
    try:
        parsed = AccountUrl(url)
    except ValueError:
        return url
    if parsed.token_suffix is not None:
        return str(parsed.lite_base())
    if parsed.url.endswith('/ACME'):
        return parsed.url[:-len('/ACME')]
    return parsed.url


def identity_url(name: str) -> str:
    """``acc://{name}.acme`` for a bare identity name."""
    if name.startswith(SCHEME):
        return name
    if name.endswith(IDENTITY_TLD):
        return SCHEME + name
    return f"{SCHEME}{name}{IDENTITY_TLD}"


def name_from_identity_url(url: str) -> str:
    """Bare identity name of ``acc://name.acme[/...]``."""
    authority = AccountUrl.parse(url).authority
    if authority.endswith(IDENTITY_TLD):
        return authority[:-len(IDENTITY_TLD)]
    return authority


def is_valid_accumulate_url(url: str) -> bool:
    """Loose check used by the UI: ``acc://`` scheme and a ``.acme`` identity."""
    return isinstance(url, str) and url.startswith(SCHEME) and IDENTITY_TLD in url


def is_lite_url(url: str) -> bool:
    try:
        return AccountUrl(url).is_lite
    except ValueError:
        return False


__all__ = [
    "AccountUrl",
    "ACME_TOKEN_URL",
    "normalize_signer_url",
    "identity_url",
    "name_from_identity_url",
    "is_valid_accumulate_url",
    "is_lite_url",
]
