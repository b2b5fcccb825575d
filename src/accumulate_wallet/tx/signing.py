"""
Transaction signing and submission.

Each submission runs one pass of a small state machine::

    BUILD -> VERSION_FETCH (key pages only) -> SIGN -> SUBMIT -> PARSE
          -> SUCCEEDED | FAILED

Nothing is retried. A key page's version is read from the network right
before signing and is never reused for another submission. A signature that
claims a stale version is rejected by the network and comes back as a normal
FAILED outcome.

Transport errors (timeouts, unreachable node) propagate to the caller.
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..client.ledger_client import LedgerClient
from ..client.responses import Failure, Success, TxOutcome, parse_response
from ..keys.key_management import KeyManagementService
from ..runtime.errors import ErrorCode, MissingKeyError, ValidationError
from ..runtime.url import AccountUrl, IDENTITY_TLD, normalize_signer_url
from ..signers.signer import Signer
from .envelope import build_envelope
from .requests import WalletRequest

logger = logging.getLogger(__name__)

DEFAULT_KEY_PAGE_PATH = "book/1"


class SubmissionState(str, Enum):
    BUILD = "build"
    VERSION_FETCH = "version-fetch"
    SIGN = "sign"
    SUBMIT = "submit"
    PARSE = "parse"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ResolvedSigner:
    """
    A signer ready for one submission.

    ``form`` records how the key was found: ``"base"`` or ``"raw"`` for lite
    identities (see :class:`SignerLookup`) and ``"key_page"`` for key pages.
    """

    signer: Signer
    form: str

    @property
    def url(self) -> str:
        return self.signer.get_signer_url()

    @property
    def version(self) -> int:
        return self.signer.get_signer_version()


@dataclass
class SubmissionResult:
    """Outcome of one submission plus the states it passed through."""

    outcome: TxOutcome
    states: List[SubmissionState] = field(default_factory=list)
    signer_url: Optional[str] = None
    signer_version: Optional[int] = None
    resolved_signer_form: Optional[str] = None
    envelope: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.outcome.ok

    @property
    def transaction_id(self) -> Optional[str]:
        return self.outcome.transaction_id if isinstance(self.outcome, Success) else None

    @property
    def final_state(self) -> SubmissionState:
        return self.states[-1]


def is_identity_signer(url: str) -> bool:
    """Identity (``.acme``) accounts sign with key pages; everything else is lite."""
    return IDENTITY_TLD in url


class TransactionSigningService:
    """
    Builds, signs and submits transactions.

    Args:
        client: Ledger client used for version reads and submission
        keys: Key management service holding the private keys
        key_page_resolver: Optional callable mapping an identity account URL
            to the key page that signs for it. When it returns None the page
            defaults to ``<identity>/book/1``.
    """

    def __init__(self, client: LedgerClient, keys: KeyManagementService,
                 key_page_resolver: Optional[Callable[[str], Optional[str]]] = None):
        self.client = client
        self.keys = keys
        self.key_page_resolver = key_page_resolver

    # Signer resolution

    def key_page_for(self, account_url: str) -> str:
        """
        Key page that signs for an identity account.

        A URL that already names a key page (``<identity>/<book>/<n>``) is
        used as is.
        """
        parsed = AccountUrl(normalize_signer_url(account_url))
        segments = parsed.path.split('/') if parsed.path else []
        if len(segments) == 2 and segments[1].isdigit():
            return str(parsed)
        if self.key_page_resolver is not None:
            resolved = self.key_page_resolver(account_url)
            if resolved:
                return resolved
        return str(parsed.root().join(DEFAULT_KEY_PAGE_PATH))

    def resolve_signer(self, signer_url: str) -> Optional[ResolvedSigner]:
        """
        Build a signer for an account, fetching the key page version fresh.

        Returns:
            The signer, or None when no private key is stored for it
        """
        if not is_identity_signer(signer_url):
            lookup = self.keys.lookup_lite_signer(signer_url)
            if lookup is None:
                return None
            return ResolvedSigner(lookup.signer, lookup.resolved_form)

        page_url = self.key_page_for(signer_url)
        version = self.client.get_signer_version(page_url)
        logger.debug(f"Key page {page_url} is at version {version}")
        signer = self.keys.create_identity_signer(page_url, version)
        if signer is None:
            return None
        return ResolvedSigner(signer, "key_page")

    # Submission

    def submit(self, principal: str, body: Dict[str, Any], signer_url: str,
               memo: Optional[str] = None) -> SubmissionResult:
        """
        Sign and submit one transaction.

        Args:
            principal: Account the transaction acts on
            body: Transaction body
            signer_url: Lite account or identity account / key page that signs
            memo: Optional memo

        Returns:
            SubmissionResult whose outcome is Success or Failure

        Raises:
            NetworkError: On transport failures during version fetch or submit
        """
        result = SubmissionResult(outcome=Failure("Not submitted"), states=[SubmissionState.BUILD])
        logger.debug(f"Building {body.get('type')} for {principal}")

        if is_identity_signer(signer_url):
            result.states.append(SubmissionState.VERSION_FETCH)
        result.states.append(SubmissionState.SIGN)
        resolved = self.resolve_signer(signer_url)

        if resolved is None:
            error = MissingKeyError(f"No private key stored for signer {signer_url}",
                                    details={"signer": signer_url})
            logger.warning(error.message)
            return self._fail(result, Failure.from_error(error))

        result.signer_url = resolved.url
        result.signer_version = resolved.version
        result.resolved_signer_form = resolved.form
        envelope = build_envelope(principal, body, resolved.signer, memo)
        result.envelope = envelope

        result.states.append(SubmissionState.SUBMIT)
        response = self.client.execute_direct(envelope)

        result.states.append(SubmissionState.PARSE)
        return self._finish(result, parse_response(response))

    def submit_request(self, request: WalletRequest) -> SubmissionResult:
        """Submit a request model with its own principal, signer and memo."""
        return self.submit(request.principal, request.to_body(), request.signer_url, request.memo)

    def sign_existing(self, transaction_hash: str, signer_url: str) -> SubmissionResult:
        """
        Add a signature to a pending transaction and submit it.

        Args:
            transaction_hash: Hex hash of the pending transaction
            signer_url: Key page (or identity account) that signs
        """
        result = SubmissionResult(outcome=Failure("Not submitted"), states=[SubmissionState.BUILD])
        try:
            digest = bytes.fromhex(transaction_hash)
        except ValueError as e:
            error = ValidationError(f"Invalid transaction hash: {transaction_hash}", cause=e)
            return self._fail(result, Failure.from_error(error))

        pending = self.client.query_tx(f"acc://{transaction_hash}@unknown")
        raw_transaction = pending.get("transaction")
        if raw_transaction is None:
            return self._fail(result, Failure("Transaction not found", ErrorCode.NOT_FOUND))

        if is_identity_signer(signer_url):
            result.states.append(SubmissionState.VERSION_FETCH)
        result.states.append(SubmissionState.SIGN)
        resolved = self.resolve_signer(signer_url)
        if resolved is None:
            error = MissingKeyError(f"No private key stored for signer {signer_url}")
            return self._fail(result, Failure.from_error(error))

        timestamp = int(time.time() * 1_000_000)
        signature = resolved.signer.to_signature(digest, timestamp)
        signature["transactionHash"] = transaction_hash
        envelope = {"transaction": [raw_transaction], "signatures": [signature]}
        result.signer_url = resolved.url
        result.signer_version = resolved.version
        result.resolved_signer_form = resolved.form
        result.envelope = envelope

        result.states.append(SubmissionState.SUBMIT)
        response = self.client.execute_direct(envelope)
        result.states.append(SubmissionState.PARSE)
        return self._finish(result, parse_response(response))

    @staticmethod
    def _fail(result: SubmissionResult, failure: Failure) -> SubmissionResult:
        result.outcome = failure
        result.states.append(SubmissionState.FAILED)
        logger.debug(f"Submission failed: {failure.message}")
        return result

    @staticmethod
    def _finish(result: SubmissionResult, outcome: TxOutcome) -> SubmissionResult:
        result.outcome = outcome
        if outcome.ok:
            result.states.append(SubmissionState.SUCCEEDED)
            logger.info(f"Transaction accepted: {outcome.transaction_id}")
        else:
            result.states.append(SubmissionState.FAILED)
            logger.info(f"Transaction rejected: {outcome.message}")
        return result


__all__ = [
    "TransactionSigningService",
    "SubmissionState",
    "SubmissionResult",
    "ResolvedSigner",
    "is_identity_signer",
]
