"""
Credit economics.

Credits are bought by spending ACME at the network's oracle price:

    acme_base_units = credits * 100 * 10**8 // oracle

The division floors, matching the network's own conversion exactly. The
oracle price is read fresh for every calculation and never cached.

Example:
    ```python
    credits = CreditEconomicsService(client, signing, wallet_storage)
    cost = credits.calculate_credit_cost(1_000)
    result = credits.purchase_credits("acc://my-adi.acme/book0/1", "acc://<lite>/ACME", 1_000)
    ```
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..client.ledger_client import LedgerClient
from ..client.responses import Success, TxOutcome
from ..registry.accounts import ACME_PRECISION
from ..runtime.errors import ErrorCode, StorageError, ValidationError
from ..runtime.url import ACME_TOKEN_URL
from ..storage.models import TransactionRecord
from ..storage.wallet_storage import WalletStorageService
from ..tx.requests import PurchaseCreditsRequest
from ..tx.signing import SubmissionResult, TransactionSigningService

logger = logging.getLogger(__name__)

CREDIT_SCALE = 100
MAX_PRECISION = 18
DEFAULT_PURCHASE_MEMO = "Credit purchase via Accumulate Lite Wallet"
ADD_CREDITS_TYPE = "add_credits"

_AMOUNT = re.compile(r"(\d*)(?:\.(\d*))?")


def credits_to_token_amount(credits: int, oracle: int) -> int:
    """
    ACME base units needed to buy ``credits`` at ``oracle``.

    Raises:
        ValidationError: If the oracle is not positive or credits are negative
    """
    if oracle <= 0:
        raise ValidationError("Oracle value must be positive", ErrorCode.INVALID_AMOUNT,
                              details={"oracle": oracle})
    if credits < 0:
        raise ValidationError("Credit amount cannot be negative", ErrorCode.INVALID_AMOUNT,
                              details={"credits": credits})
    return (credits * CREDIT_SCALE * 10 ** ACME_PRECISION) // oracle


def _check_precision(precision: int) -> None:
    if not 0 <= precision <= MAX_PRECISION:
        raise ValidationError(f"Precision must be between 0 and {MAX_PRECISION}",
                              ErrorCode.INVALID_AMOUNT, details={"precision": precision})


def format_token_amount(base_units: int, precision: int) -> str:
    """
    Render base units as a decimal string with trailing zeros trimmed.

    ``format_token_amount(150000000, 8) == "1.5"``
    """
    _check_precision(precision)
    if base_units < 0:
        raise ValidationError("Token amount cannot be negative", ErrorCode.INVALID_AMOUNT,
                              details={"amount": base_units})
    if precision == 0:
        return str(base_units)
    whole, fraction = divmod(base_units, 10 ** precision)
    fraction_text = str(fraction).rjust(precision, "0").rstrip("0")
    return f"{whole}.{fraction_text}" if fraction_text else str(whole)


def parse_token_amount(text: str, precision: int) -> int:
    """
    Parse a decimal string into base units.

    Fractional digits beyond ``precision`` are accepted only when they are all
    zeros; anything else is rejected rather than rounded.

    Raises:
        ValidationError: On malformed input or excess precision
    """
    _check_precision(precision)
    value = (text or "").strip()
    match = _AMOUNT.fullmatch(value)
    if not value or match is None or value == ".":
        raise ValidationError(f"Invalid token amount: {text!r}", ErrorCode.INVALID_AMOUNT)

    whole, fraction = match.group(1) or "0", match.group(2) or ""
    excess = fraction[precision:]
    if excess.strip("0"):
        raise ValidationError(
            f"Amount {text!r} has more than {precision} decimal places",
            ErrorCode.INVALID_AMOUNT,
            details={"precision": precision},
        )
    fraction = fraction[:precision].ljust(precision, "0")
    return int(whole) * 10 ** precision + (int(fraction) if fraction else 0)


def format_acme(base_units: int) -> str:
    return f"{format_token_amount(base_units, ACME_PRECISION)} ACME"


@dataclass(frozen=True)
class CreditCost:
    """ACME cost of a number of credits at one oracle price."""

    credits: int
    acme_amount: int
    oracle: int

    @property
    def acme_tokens(self) -> Decimal:
        return Decimal(self.acme_amount) / (10 ** ACME_PRECISION)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "creditAmount": self.credits,
            "acmeCost": self.acme_amount,
            "acmeTokens": str(self.acme_tokens),
            "acmeCostFormatted": format_acme(self.acme_amount),
            "oracleValue": self.oracle,
        }


@dataclass
class CreditPurchase:
    """A credit purchase and the submission that carried it."""

    submission: SubmissionResult
    credits: int
    acme_amount: int
    oracle: int

    @property
    def outcome(self) -> TxOutcome:
        return self.submission.outcome

    @property
    def ok(self) -> bool:
        return self.submission.ok


class CreditEconomicsService:
    """
    Oracle reads, cost calculation and credit purchases.

    Args:
        client: Ledger client for oracle reads
        signing: Signing service used to submit addCredits
        wallet_storage: Transaction history; purchases are recorded there
    """

    def __init__(self, client: LedgerClient, signing: TransactionSigningService,
                 wallet_storage: Optional[WalletStorageService] = None):
        self.client = client
        self.signing = signing
        self.wallet_storage = wallet_storage

    def get_oracle_value(self) -> int:
        oracle = self.client.value_from_oracle()
        logger.debug(f"Oracle value: {oracle}")
        return oracle

    credits_to_token_amount = staticmethod(credits_to_token_amount)
    format_token_amount = staticmethod(format_token_amount)
    parse_token_amount = staticmethod(parse_token_amount)
    format_acme = staticmethod(format_acme)

    def calculate_credit_cost(self, credits: int, oracle: Optional[int] = None) -> CreditCost:
        """
        ACME cost of ``credits``, reading the oracle when none is given.

        Raises:
            ValidationError: For negative credits
            NetworkError: If the oracle read fails
        """
        if credits < 0:
            raise ValidationError("Credit amount cannot be negative", ErrorCode.INVALID_AMOUNT,
                                  details={"credits": credits})
        if oracle is None:
            oracle = self.get_oracle_value()
        return CreditCost(credits, credits_to_token_amount(credits, oracle), oracle)

    def purchase_credits(self, recipient_url: str, payer_url: str, credits: int,
                         memo: Optional[str] = None, oracle: Optional[int] = None) -> CreditPurchase:
        """
        Buy credits for a lite identity or key page.

        The payer is a lite token account (or identity token account) holding
        ACME; it signs the transaction itself.

        Args:
            recipient_url: Lite identity or key page receiving the credits
            payer_url: Token account the ACME is taken from
            credits: Credits to buy
            memo: Transaction memo (a default is used when omitted)
            oracle: Oracle price to use instead of reading it

        Raises:
            ValidationError: For a non-positive amount or invalid URLs
            NetworkError: On transport failures
        """
        if credits <= 0:
            raise ValidationError("Credit amount must be greater than 0", ErrorCode.INVALID_AMOUNT,
                                  details={"credits": credits})
        if not recipient_url or not payer_url:
            raise ValidationError("Recipient and payer accounts are required")

        if oracle is None:
            oracle = self.get_oracle_value()
        acme_amount = credits_to_token_amount(credits, oracle)
        logger.info(f"Purchasing {credits} credits for {recipient_url} "
                    f"({format_acme(acme_amount)} from {payer_url})")

        try:
            request = PurchaseCreditsRequest(
                recipient_url=recipient_url,
                payer_url=payer_url,
                credit_amount=credits,
                acme_amount=acme_amount,
                oracle=oracle,
                memo=memo or DEFAULT_PURCHASE_MEMO,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid credit purchase: {e.errors()[0]['msg']}", cause=e)

        submission = self.signing.submit_request(request)
        purchase = CreditPurchase(submission, credits, acme_amount, oracle)
        if isinstance(submission.outcome, Success):
            self._record_purchase(submission.outcome, request)
        return purchase

    def _record_purchase(self, outcome: Success, request: PurchaseCreditsRequest) -> None:
        if self.wallet_storage is None:
            return
        record = TransactionRecord(
            tx_hash=outcome.transaction_id,
            from_address=request.payer_url,
            to_address=request.recipient_url,
            amount=str(request.acme_amount),
            token_type=ACME_TOKEN_URL,
            transaction_type=ADD_CREDITS_TYPE,
            memo=f"Credit purchase: {request.credit_amount} credits",
            metadata={"credits": request.credit_amount, "oracle": request.oracle},
        )
        try:
            self.wallet_storage.record_transaction(record)
        except StorageError as e:
            logger.warning(f"Could not store credit purchase record {outcome.transaction_id}: {e}")

    def recent_credit_transactions(self, limit: int = 20) -> List[TransactionRecord]:
        if self.wallet_storage is None:
            return []
        return self.wallet_storage.transaction_history(limit=limit, transaction_type=ADD_CREDITS_TYPE)


__all__ = [
    "CreditEconomicsService",
    "CreditCost",
    "CreditPurchase",
    "credits_to_token_amount",
    "format_token_amount",
    "parse_token_amount",
    "format_acme",
    "ACME_PRECISION",
    "DEFAULT_PURCHASE_MEMO",
]
