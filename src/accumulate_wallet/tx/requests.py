"""
Request models for the wallet's state-changing operations.

Each request validates its URLs, computes the URLs of the accounts it
creates, and knows the principal it is sent to, the account that signs it
and how to render its transaction body.
"""

from __future__ import annotations
from abc import abstractmethod
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any, Dict

from ..runtime.url import AccountUrl, ACME_TOKEN_URL, identity_url
from .bodies import TxBody

DEFAULT_KEY_BOOK_NAME = "book0"


def _check_url(value: Any) -> str:
    return str(AccountUrl(value))


class WalletRequest(BaseModel):
    """
    Base for every request.

    Subclasses provide ``principal``, ``signer_url`` and ``to_body()``; the
    base cannot be instantiated.
    """
    memo: Optional[str] = Field(None, max_length=256)
    metadata: Optional[Dict[str, Any]] = None

    model_config = {"populate_by_name": True}

    @property
    @abstractmethod
    def principal(self) -> str:
        """Account the transaction acts on."""

    @property
    @abstractmethod
    def signer_url(self) -> str:
        """Lite account or key page that signs."""

    @abstractmethod
    def to_body(self) -> Dict[str, Any]:
        """Transaction body for this request."""


class CreateIdentityRequest(WalletRequest):
    """Create an identity paid for by a lite account."""
    name: str
    sponsor_address: str = Field(..., alias="sponsorAddress")
    public_key_hash: str = Field(..., alias="publicKeyHash")
    key_book_name: str = Field(DEFAULT_KEY_BOOK_NAME, alias="keyBookName")

    @field_validator("sponsor_address")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def identity_url(self) -> str:
        return identity_url(self.name)

    @property
    def key_book_url(self) -> str:
        return f"{self.identity_url}/{self.key_book_name}"

    @property
    def key_page_url(self) -> str:
        return f"{self.key_book_url}/1"

    @property
    def principal(self) -> str:
        return self.sponsor_address

    @property
    def signer_url(self) -> str:
        return self.sponsor_address

    def to_body(self) -> Dict[str, Any]:
        return TxBody.create_identity(self.identity_url, self.key_book_url, self.public_key_hash)


class CreateADITokenAccountRequest(WalletRequest):
    """ACME (or other token) account at ``<identity>/<name>``."""
    name: str
    identity_url: str = Field(..., alias="identityUrl")
    key_page_url: str = Field(..., alias="keyPageUrl")
    token_url: str = Field(ACME_TOKEN_URL, alias="tokenUrl")

    @field_validator("identity_url", "key_page_url", "token_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def account_url(self) -> str:
        return f"{self.identity_url}/{self.name}"

    @property
    def principal(self) -> str:
        return self.identity_url

    @property
    def signer_url(self) -> str:
        return self.key_page_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.create_token_account(self.account_url, self.token_url)


class CreateDataAccountRequest(WalletRequest):
    """Data account at ``<identity>/<name>``."""
    name: str
    identity_url: str = Field(..., alias="identityUrl")
    key_page_url: str = Field(..., alias="keyPageUrl")

    @field_validator("identity_url", "key_page_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def account_url(self) -> str:
        return f"{self.identity_url}/{self.name}"

    @property
    def principal(self) -> str:
        return self.identity_url

    @property
    def signer_url(self) -> str:
        return self.key_page_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.create_data_account(self.account_url)


class CreateKeyBookRequest(WalletRequest):
    """Key book at ``<identity>/<name>``; the network adds its first page."""
    name: str
    identity_url: str = Field(..., alias="identityUrl")
    public_key_hash: str = Field(..., alias="publicKeyHash")
    key_page_url: str = Field(..., alias="keyPageUrl")

    @field_validator("identity_url", "key_page_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def key_book_url(self) -> str:
        return f"{self.identity_url}/{self.name}"

    @property
    def principal(self) -> str:
        return self.identity_url

    @property
    def signer_url(self) -> str:
        return self.key_page_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.create_key_book(self.key_book_url, self.public_key_hash)


class CreateKeyPageRequest(WalletRequest):
    """Key page at ``<book>/<name>`` holding the given key hashes."""
    name: str
    key_book_url: str = Field(..., alias="keyBookUrl")
    public_key_hashes: List[str] = Field(..., alias="publicKeyHashes", min_length=1)
    signer_key_page_url: str = Field(..., alias="signerKeyPageUrl")
    keys_required: int = Field(1, alias="keysRequired", ge=1)

    @field_validator("key_book_url", "signer_key_page_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def key_page_url(self) -> str:
        return f"{self.key_book_url}/{self.name}"

    @property
    def principal(self) -> str:
        return self.key_book_url

    @property
    def signer_url(self) -> str:
        return self.signer_key_page_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.create_key_page(self.public_key_hashes)


class CreateCustomTokenRequest(WalletRequest):
    """Token issuer at ``<identity>/<name>``."""
    name: str
    symbol: str
    identity_url: str = Field(..., alias="identityUrl")
    key_page_url: str = Field(..., alias="keyPageUrl")
    precision: int = Field(8, ge=0, le=18)
    supply_limit: Optional[int] = Field(None, alias="supplyLimit", ge=0)

    @field_validator("identity_url", "key_page_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def token_url(self) -> str:
        return f"{self.identity_url}/{self.name}"

    @property
    def principal(self) -> str:
        return self.identity_url

    @property
    def signer_url(self) -> str:
        return self.key_page_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.create_token(self.token_url, self.symbol, self.precision, self.supply_limit)


class MintTokensRequest(WalletRequest):
    """Issue tokens from a custom token to a recipient. Amount in base units."""
    token_url: str = Field(..., alias="tokenUrl")
    recipient_url: str = Field(..., alias="recipientUrl")
    amount: int = Field(..., gt=0)
    key_page_url: str = Field(..., alias="keyPageUrl")

    @field_validator("token_url", "recipient_url", "key_page_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def principal(self) -> str:
        return self.token_url

    @property
    def signer_url(self) -> str:
        return self.key_page_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.issue_tokens(self.recipient_url, self.amount)


class BurnTokensRequest(WalletRequest):
    """Burn tokens from a token account. Amount in base units."""
    token_account_url: str = Field(..., alias="tokenAccountUrl")
    amount: int = Field(..., gt=0)
    key_page_url: str = Field(..., alias="keyPageUrl")

    @field_validator("token_account_url", "key_page_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def principal(self) -> str:
        return self.token_account_url

    @property
    def signer_url(self) -> str:
        return self.key_page_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.burn_tokens(self.amount)


class PurchaseCreditsRequest(WalletRequest):
    """
    Convert ACME from a paying token account into credits.

    ``acme_amount`` is in base units and must already be computed from the
    oracle price passed alongside it.
    """
    recipient_url: str = Field(..., alias="recipientUrl")
    payer_url: str = Field(..., alias="payerUrl")
    credit_amount: int = Field(..., alias="creditAmount", gt=0)
    acme_amount: int = Field(..., alias="acmeAmountRequired", gt=0)
    oracle: int = Field(..., gt=0)

    @field_validator("recipient_url", "payer_url")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def principal(self) -> str:
        return self.payer_url

    @property
    def signer_url(self) -> str:
        return self.payer_url

    def to_body(self) -> Dict[str, Any]:
        return TxBody.add_credits(self.recipient_url, self.acme_amount, self.oracle)


class WriteDataRequest(WalletRequest):
    """Write one entry to a data account. String parts are UTF-8 encoded."""
    data_account_url: str = Field(..., alias="dataAccountUrl")
    data_entries: List[str] = Field(..., alias="dataEntries", min_length=1)
    signer: str = Field(..., alias="signerUrl")
    scratch: bool = False
    write_to_state: bool = Field(False, alias="writeToState")

    @field_validator("data_account_url", "signer")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def principal(self) -> str:
        return self.data_account_url

    @property
    def signer_url(self) -> str:
        return self.signer

    def to_body(self) -> Dict[str, Any]:
        return TxBody.write_data(self.data_entries, scratch=self.scratch, write_to_state=self.write_to_state)


class TokenRecipient(BaseModel):
    """Token recipient with URL and amount in base units."""
    url: str
    amount: int = Field(..., gt=0)

    model_config = {"populate_by_name": True}


class SendTokensRequest(WalletRequest):
    """Send tokens to one or more recipients."""
    from_account_url: str = Field(..., alias="fromAccountUrl")
    recipients: List[TokenRecipient] = Field(..., min_length=1)
    signer: str = Field(..., alias="signerUrl")

    @field_validator("from_account_url", "signer")
    @classmethod
    def validate_urls(cls, v: Any) -> str:
        return _check_url(v)

    @property
    def principal(self) -> str:
        return self.from_account_url

    @property
    def signer_url(self) -> str:
        return self.signer

    def to_body(self) -> Dict[str, Any]:
        return TxBody.send_tokens([r.model_dump() for r in self.recipients])


__all__ = [
    "WalletRequest",
    "CreateIdentityRequest",
    "CreateADITokenAccountRequest",
    "CreateDataAccountRequest",
    "CreateKeyBookRequest",
    "CreateKeyPageRequest",
    "CreateCustomTokenRequest",
    "MintTokensRequest",
    "BurnTokensRequest",
    "PurchaseCreditsRequest",
    "WriteDataRequest",
    "TokenRecipient",
    "SendTokensRequest",
]
