"""
Accumulate wallet facade.

The :class:`AccumulateWallet` is the entry point for applications. It wires
the ledger client, the local ledger mirror, the secure key store and the
services built on them, and exposes task-level operations.

Every operation returns a :class:`TxOutcome`. Validation errors, missing keys,
protocol rejections and transport failures come back as :class:`Failure`
values instead of exceptions; transport failures are logged at error level.

Creation operations write their local rows first and submit second. When the
network rejects the submission (or the submission raises), the local rows,
any parent rows inserted for them and any private key stored for the new
account are removed again.

Example:
    ```python
    from accumulate_wallet import AccumulateWallet

    with AccumulateWallet.testnet(database_path="wallet.db") as wallet:
        lite = wallet.create_lite_account("Main")
        outcome = wallet.create_identity("my-adi", lite.data["tokenAccount"])
        if not outcome.ok:
            print(outcome.message)
    ```
"""

from __future__ import annotations
import functools
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from .activity.balances import BalanceAggregationService
from .activity.pending import PendingTransactionService
from .client.ledger_client import LedgerClient
from .client.responses import Failure, Success, TxOutcome, parse_response
from .config import WalletConfig
from .credits.economics import CreditEconomicsService, parse_token_amount
from .credits.fees import FeeSchedule, preview_fee
from .keys.key_management import KeyManagementService
from .registry.accounts import AccountRegistry
from .registry.identity import (
    DEFAULT_KEY_BOOK_NAME,
    DEFAULT_KEY_NAME,
    DEFAULT_KEY_PAGE_NAME,
    IdentityRegistry,
    ParentRepairs,
)
from .registry.validation import require_identity_name, require_token_name, require_token_symbol
from .runtime.errors import ErrorCode, NetworkError, ValidationError, WalletError
from .runtime.url import ACME_TOKEN_URL, AccountUrl
from .storage.database import LedgerStore
from .storage.secure_keys import SecureKeysService
from .storage.secure_store import EncryptedFileStorage, MemorySecureStorage, SecureStorage
from .storage.wallet_storage import WalletStorageService
from .tx.requests import (
    BurnTokensRequest,
    CreateADITokenAccountRequest,
    CreateCustomTokenRequest,
    CreateDataAccountRequest,
    CreateIdentityRequest,
    CreateKeyBookRequest,
    CreateKeyPageRequest,
    MintTokensRequest,
    SendTokensRequest,
    TokenRecipient,
    WriteDataRequest,
)
from .tx.signing import SubmissionResult, TransactionSigningService

logger = logging.getLogger(__name__)

T = TypeVar("T")


def wallet_operation(func: Callable[..., TxOutcome]) -> Callable[..., TxOutcome]:
    """Convert wallet and request-model errors raised by an operation into failures."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> TxOutcome:
        try:
            return func(self, *args, **kwargs)
        except NetworkError as e:
            logger.error(f"{func.__name__}: network error: {e}")
            return Failure.from_error(e)
        except WalletError as e:
            logger.warning(f"{func.__name__}: {e}")
            return Failure.from_error(e)
        except PydanticValidationError as e:
            errors = [{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                      for err in e.errors()]
            logger.warning(f"{func.__name__}: invalid request: {errors}")
            return Failure(f"Invalid request: {errors[0]['field']}: {errors[0]['message']}",
                           ErrorCode.INVALID_INPUT, {"errors": errors})

    return wrapper


def _with_data(outcome: TxOutcome, data: Dict[str, Any]) -> TxOutcome:
    if isinstance(outcome, Success):
        return replace(outcome, data={**(outcome.data or {}), **data})
    return outcome


class AccumulateWallet:
    """
    Wallet core: local mirror, key store and ledger access behind one object.

    Args:
        config: Wallet configuration (testnet defaults when omitted)
        client: Ledger client to use instead of one built from the config
        secure_storage: Secret storage backend; defaults to an encrypted file
            when ``config.keystore_path`` is set, else in-memory storage
        keystore_password: Password for the encrypted key store file
    """

    def __init__(
        self,
        config: Optional[WalletConfig] = None,
        client: Optional[LedgerClient] = None,
        secure_storage: Optional[SecureStorage] = None,
        keystore_password: Optional[str] = None,
    ):
        self.config = config or WalletConfig()
        self.client = client or LedgerClient(self.config.endpoint, timeout=self.config.timeout,
                                             user_agent=self.config.user_agent)
        self._owns_client = client is None

        if secure_storage is None:
            if self.config.keystore_path is not None:
                if not keystore_password:
                    raise ValidationError("A password is required for the key store file")
                secure_storage = EncryptedFileStorage(self.config.keystore_path, keystore_password)
            else:
                secure_storage = MemorySecureStorage()

        self.store = LedgerStore(self.config.database_path)
        self.secure_keys = SecureKeysService(secure_storage)
        self.keys = KeyManagementService(self.secure_keys)
        self.identities = IdentityRegistry(self.store)
        self.accounts = AccountRegistry(self.store, self.identities)
        self.wallet_storage = WalletStorageService(self.store)
        self.signing = TransactionSigningService(self.client, self.keys,
                                                 key_page_resolver=self.signing_key_page)
        self.credits = CreditEconomicsService(self.client, self.signing, self.wallet_storage)
        self.balances = BalanceAggregationService(self.client, self.accounts)
        self.pending = PendingTransactionService(self.client, self.identities)
        logger.debug(f"Wallet ready on {self.config.network} ({self.client.endpoint})")

    # Construction

    @classmethod
    def for_network(cls, network: str, client: Optional[LedgerClient] = None,
                    secure_storage: Optional[SecureStorage] = None,
                    keystore_password: Optional[str] = None, **overrides: Any) -> AccumulateWallet:
        """Wallet for a well-known network; ``overrides`` replace config fields."""
        return cls(WalletConfig.for_network(network, **overrides), client=client,
                   secure_storage=secure_storage, keystore_password=keystore_password)

    @classmethod
    def mainnet(cls, **kwargs: Any) -> AccumulateWallet:
        return cls.for_network("mainnet", **kwargs)

    @classmethod
    def testnet(cls, **kwargs: Any) -> AccumulateWallet:
        return cls.for_network("testnet", **kwargs)

    @classmethod
    def kermit(cls, **kwargs: Any) -> AccumulateWallet:
        return cls.for_network("kermit", **kwargs)

    @classmethod
    def devnet(cls, **kwargs: Any) -> AccumulateWallet:
        return cls.for_network("devnet", **kwargs)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
        self.store.close()

    def __enter__(self) -> AccumulateWallet:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Signer resolution

    def signing_key_page(self, account_url: str) -> Optional[str]:
        """First key page of the first key book of the account's identity, if known locally."""
        try:
            root = AccountUrl(account_url).root()
        except ValueError:
            return None
        identity = self.identities.get_identity_by_url(str(root))
        if identity is None:
            return None
        for book in self.identities.key_books_for_identity(identity.id):
            pages = self.identities.key_pages_for_book(book.id)
            if pages:
                return pages[0].url
        return None

    # Saga

    def _create_with_rollback(self, label: str, mirror: Callable[[ParentRepairs], T],
                              compensate: Callable[[T], None],
                              submit: Callable[[], SubmissionResult]) -> Tuple[TxOutcome, T]:
        """
        Write local rows, submit, and undo the rows if the network says no.

        Parent rows that ``mirror`` had to insert are recorded in the
        :class:`ParentRepairs` it receives and are removed together with the
        child rows.

        Args:
            label: Operation name for logs
            mirror: Writes the speculative local rows and returns a handle
            compensate: Removes what ``mirror`` wrote for the new account
            submit: Signs and submits the transaction

        Returns:
            The outcome and the handle returned by ``mirror``
        """
        repairs = ParentRepairs()
        try:
            mirrored = mirror(repairs)
        except WalletError:
            if repairs:
                self._compensate(label, self.identities.purge_repairs, repairs)
            raise
        try:
            submission = submit()
        except Exception:
            logger.warning(f"{label}: submission raised, removing local rows")
            self._undo(label, compensate, mirrored, repairs)
            raise
        if not submission.ok:
            logger.info(f"{label}: rejected ({submission.outcome.message}), removing local rows")
            self._undo(label, compensate, mirrored, repairs)
        return submission.outcome, mirrored

    def _undo(self, label: str, compensate: Callable[[T], None], mirrored: T,
              repairs: ParentRepairs) -> None:
        self._compensate(label, compensate, mirrored)
        if repairs:
            self._compensate(label, self.identities.purge_repairs, repairs)

    @staticmethod
    def _compensate(label: str, compensate: Callable[[T], None], mirrored: T) -> None:
        try:
            compensate(mirrored)
        except WalletError:
            logger.exception(f"{label}: could not remove speculative local rows")

    # Lite accounts

    @wallet_operation
    def create_lite_account(self, name: Optional[str] = None) -> TxOutcome:
        """
        Generate a key and register its lite ACME token account locally.

        Lite accounts need no creation transaction; the returned Success has
        no transaction id.
        """
        lite = self.keys.generate_lite_account()
        try:
            self.accounts.create_lite_token_account(lite.token_account, name)
        except WalletError:
            self.keys.delete_key(lite.lite_identity)
            raise
        logger.info(f"Created lite account {lite.token_account}")
        return Success(None, data={
            "liteIdentity": lite.lite_identity,
            "tokenAccount": lite.token_account,
            "publicKey": lite.keys.public_key,
            "publicKeyHash": lite.keys.public_key_hash,
        })

    @wallet_operation
    def import_lite_account(self, private_key_hex: str, name: Optional[str] = None) -> TxOutcome:
        """Import a private key and register its lite ACME token account."""
        lite = self.keys.import_private_key(private_key_hex)
        existing = self.accounts.get_token_account(lite.token_account)
        if existing is None:
            self.accounts.create_lite_token_account(lite.token_account, name,
                                                    metadata={"imported": True})
        return Success(None, data={
            "liteIdentity": lite.lite_identity,
            "tokenAccount": lite.token_account,
            "publicKeyHash": lite.keys.public_key_hash,
            "alreadyImported": existing is not None,
        })

    # Identities and key authorities

    @wallet_operation
    def create_identity(self, name: str, sponsor_address: str,
                        key_book_name: str = DEFAULT_KEY_BOOK_NAME) -> TxOutcome:
        """
        Create an identity with its first key book, key page and key.

        A fresh key pair is generated for the new key page. The sponsor (a
        lite account) pays and signs.

        Args:
            name: Identity name without ``acc://`` or ``.acme``
            sponsor_address: Lite account paying for the creation
            key_book_name: Name of the first key book
        """
        require_identity_name(name)
        if not self.identities.is_identity_name_available(name):
            return Failure("Identity name already exists locally", ErrorCode.NAME_UNAVAILABLE,
                           {"name": name})

        keys = self.keys.generate_key_pair()
        request = CreateIdentityRequest(name=name, sponsor_address=sponsor_address,
                                        public_key_hash=keys.public_key_hash,
                                        key_book_name=key_book_name)

        def mirror(_repairs):
            complete = self.identities.create_complete_identity(
                name, request.sponsor_address, keys.public_key, keys.public_key_hash,
                key_book_name=key_book_name,
            )
            self.keys.store_key(complete.key_page_url, keys.private_key)
            return complete

        def compensate(complete):
            self.identities.purge_identity(complete.identity_id)
            self.keys.delete_key(complete.key_page_url)

        outcome, complete = self._create_with_rollback("create_identity", mirror, compensate,
                                                       lambda: self.signing.submit_request(request))
        return _with_data(outcome, complete.to_dict())

    @wallet_operation
    def create_key_book(self, name: str, identity_url: str, key_page_url: str) -> TxOutcome:
        """
        Create a key book under an identity.

        The network creates the book's first page with a freshly generated key;
        the page and key are mirrored locally as ``<book>/1``.

        Args:
            name: Key book name
            identity_url: Identity that owns the book
            key_page_url: Existing key page that signs
        """
        keys = self.keys.generate_key_pair()
        request = CreateKeyBookRequest(name=name, identity_url=identity_url,
                                       public_key_hash=keys.public_key_hash,
                                       key_page_url=key_page_url)
        page_url = f"{request.key_book_url}/{DEFAULT_KEY_PAGE_NAME}"

        def mirror(repairs):
            identity = self.identities.ensure_identity(request.identity_url, repairs)
            with self.store.transaction():
                book_id = self.identities.create_key_book(identity.id, name, request.key_book_url,
                                                          keys.public_key_hash)
                page_id = self.identities.create_key_page(book_id, DEFAULT_KEY_PAGE_NAME, page_url)
                self.identities.add_key(page_id, DEFAULT_KEY_NAME, keys.public_key,
                                        keys.public_key_hash, has_private_key=True, is_default=True)
                self.identities.update_key_book_count(
                    identity.id, len(self.identities.key_books_for_identity(identity.id)))
            self.keys.store_key(page_url, keys.private_key)
            return book_id

        def compensate(book_id):
            self.identities.purge_key_book(book_id)
            self.keys.delete_key(page_url)

        outcome, _ = self._create_with_rollback("create_key_book", mirror, compensate,
                                             lambda: self.signing.submit_request(request))
        return _with_data(outcome, {"keyBookUrl": request.key_book_url, "keyPageUrl": page_url,
                                    "publicKeyHash": keys.public_key_hash})

    @wallet_operation
    def create_key_page(self, name: str, key_book_url: str, signer_key_page_url: str,
                        additional_key_hashes: Optional[List[str]] = None) -> TxOutcome:
        """
        Add a key page to a key book.

        A fresh key is generated for the page and stored as its default key;
        ``additional_key_hashes`` are added to the page on the network only.
        A key book missing locally is repaired with a placeholder row.
        """
        keys = self.keys.generate_key_pair()
        key_hashes = [keys.public_key_hash] + list(additional_key_hashes or [])
        request = CreateKeyPageRequest(name=name, key_book_url=key_book_url,
                                       public_key_hashes=key_hashes,
                                       signer_key_page_url=signer_key_page_url)
        page_url = request.key_page_url

        def mirror(repairs):
            book = self.identities.ensure_key_book(request.key_book_url, repairs)
            with self.store.transaction():
                page_id = self.identities.create_key_page(book.id, name, page_url,
                                                          keys_required=request.keys_required,
                                                          keys_required_of=len(key_hashes))
                self.identities.add_key(page_id, DEFAULT_KEY_NAME, keys.public_key,
                                        keys.public_key_hash, has_private_key=True, is_default=True)
            self.keys.store_key(page_url, keys.private_key)
            return page_id

        def compensate(page_id):
            self.identities.purge_key_page(page_id)
            self.keys.delete_key(page_url)

        outcome, _ = self._create_with_rollback("create_key_page", mirror, compensate,
                                             lambda: self.signing.submit_request(request))
        return _with_data(outcome, {"keyPageUrl": page_url, "publicKeyHash": keys.public_key_hash})

    # Accounts

    @wallet_operation
    def create_adi_token_account(self, name: str, identity_url: str, key_page_url: str) -> TxOutcome:
        """Create an ACME token account under an identity."""
        request = CreateADITokenAccountRequest(name=name, identity_url=identity_url,
                                               key_page_url=key_page_url, token_url=ACME_TOKEN_URL)

        def mirror(repairs):
            identity = self.identities.ensure_identity(request.identity_url, repairs)
            page = self.identities.get_key_page_by_url(request.key_page_url)
            self.accounts.create_identity_token_account(
                name, request.account_url, identity.id, ACME_TOKEN_URL,
                key_book_id=page.key_book_id if page else None,
                key_page_id=page.id if page else None,
            )
            return request.account_url

        outcome, _ = self._create_with_rollback("create_adi_token_account", mirror,
                                             self.accounts.purge_token_account,
                                             lambda: self.signing.submit_request(request))
        return _with_data(outcome, {"accountUrl": request.account_url})

    @wallet_operation
    def create_data_account(self, name: str, identity_url: str, key_page_url: str) -> TxOutcome:
        """Create a data account under an identity."""
        request = CreateDataAccountRequest(name=name, identity_url=identity_url,
                                           key_page_url=key_page_url)

        def mirror(repairs):
            self.accounts.create_data_account(name, request.account_url, repairs=repairs)
            return request.account_url

        outcome, _ = self._create_with_rollback("create_data_account", mirror,
                                             self.accounts.purge_data_account,
                                             lambda: self.signing.submit_request(request))
        return _with_data(outcome, {"accountUrl": request.account_url})

    # Tokens

    @wallet_operation
    def create_custom_token(self, name: str, symbol: str, identity_url: str, key_page_url: str,
                            precision: int = 8, supply_limit: Optional[int] = None) -> TxOutcome:
        """
        Create a token issuer at ``<identity>/<name>``.

        The name and symbol are validated and the symbol must be free locally
        before anything is submitted.
        """
        name = require_token_name(name)
        require_token_symbol(symbol)
        if not self.accounts.is_token_symbol_available(symbol):
            return Failure("Token symbol already exists", ErrorCode.NAME_UNAVAILABLE, {"symbol": symbol})
        if not self.accounts.is_token_name_available(name):
            return Failure("Token name already exists", ErrorCode.NAME_UNAVAILABLE, {"name": name})

        request = CreateCustomTokenRequest(name=name, symbol=symbol, identity_url=identity_url,
                                           key_page_url=key_page_url, precision=precision,
                                           supply_limit=supply_limit)

        def mirror(_repairs):
            identity = self.identities.get_identity_by_url(request.identity_url)
            self.accounts.create_custom_token(name, symbol, request.token_url, precision,
                                              creator_identity_id=identity.id if identity else None)
            return request.token_url

        outcome, _ = self._create_with_rollback("create_custom_token", mirror,
                                             self.accounts.purge_custom_token,
                                             lambda: self.signing.submit_request(request))
        return _with_data(outcome, {"tokenUrl": request.token_url})

    @wallet_operation
    def mint_tokens(self, token_url: str, recipient_url: str, amount: Union[str, int],
                    key_page_url: str, precision: Optional[int] = None) -> TxOutcome:
        """
        Issue tokens to a recipient.

        Args:
            amount: Decimal amount in whole tokens, e.g. ``"12.5"``
            precision: Token precision; looked up locally when omitted
        """
        if precision is None:
            precision = self.accounts.token_precision(token_url)
        base_units = parse_token_amount(str(amount), precision)
        request = MintTokensRequest(token_url=token_url, recipient_url=recipient_url,
                                    amount=base_units, key_page_url=key_page_url)
        return self.signing.submit_request(request).outcome

    @wallet_operation
    def burn_tokens(self, token_account_url: str, amount: Union[str, int], key_page_url: str,
                    precision: Optional[int] = None) -> TxOutcome:
        """Burn tokens held by a token account. ``amount`` is in whole tokens."""
        if precision is None:
            account = self.accounts.get_token_account(token_account_url)
            precision = self.accounts.token_precision(account.token_url if account else ACME_TOKEN_URL)
        base_units = parse_token_amount(str(amount), precision)
        request = BurnTokensRequest(token_account_url=token_account_url, amount=base_units,
                                    key_page_url=key_page_url)
        return self.signing.submit_request(request).outcome

    @wallet_operation
    def send_tokens(self, from_account_url: str, to_url: str, amount: Union[str, int],
                    signer_url: Optional[str] = None, memo: Optional[str] = None,
                    precision: Optional[int] = None) -> TxOutcome:
        """
        Send tokens to one recipient.

        The sending account signs unless ``signer_url`` names another signer.
        """
        if precision is None:
            account = self.accounts.get_token_account(from_account_url)
            precision = self.accounts.token_precision(account.token_url if account else ACME_TOKEN_URL)
        base_units = parse_token_amount(str(amount), precision)
        request = SendTokensRequest(from_account_url=from_account_url,
                                    recipients=[TokenRecipient(url=to_url, amount=base_units)],
                                    signer=signer_url or from_account_url, memo=memo)
        return self.signing.submit_request(request).outcome

    # Credits

    @wallet_operation
    def purchase_credits(self, recipient_url: str, payer_url: str, credits: int,
                         memo: Optional[str] = None) -> TxOutcome:
        """Buy credits for a lite identity or key page with ACME from ``payer_url``."""
        purchase = self.credits.purchase_credits(recipient_url, payer_url, credits, memo)
        return _with_data(purchase.outcome, {
            "creditAmount": purchase.credits,
            "acmeAmount": purchase.acme_amount,
            "oracleValue": purchase.oracle,
        })

    @wallet_operation
    def calculate_credit_cost(self, credits: int) -> TxOutcome:
        return Success(None, data=self.credits.calculate_credit_cost(credits).to_dict())

    @wallet_operation
    def query_oracle_value(self) -> TxOutcome:
        return Success(None, data={"oracleValue": self.credits.get_oracle_value()})

    @wallet_operation
    def network_fees(self) -> TxOutcome:
        """Creation fees in credits as published by the network."""
        schedule = FeeSchedule.from_globals(self.client.network_globals())
        return Success(None, data=schedule.to_dict())

    @wallet_operation
    def identity_creation_cost(self, name: str) -> TxOutcome:
        """Credits and ACME needed to create an identity, sliding fee included."""
        schedule = FeeSchedule.from_globals(self.client.network_globals())
        preview = preview_fee("createIdentity", self.credits.get_oracle_value(), schedule,
                              name=name, mainnet=self.config.is_mainnet)
        return Success(None, data=preview.to_dict())

    @wallet_operation
    def credit_balance(self, account_url: str) -> TxOutcome:
        return Success(None, data={"url": account_url,
                                   "credits": self.client.get_credit_balance(account_url)})

    # Data

    @wallet_operation
    def write_data(self, data_account_url: str, entries: List[str], signer_url: str,
                   memo: Optional[str] = None, scratch: bool = False,
                   write_to_state: bool = False) -> TxOutcome:
        request = WriteDataRequest(data_account_url=data_account_url, data_entries=entries,
                                   signer=signer_url, memo=memo, scratch=scratch,
                                   write_to_state=write_to_state)
        return self.signing.submit_request(request).outcome

    @wallet_operation
    def query_data(self, data_account_url: str, entry_hash: Optional[str] = None) -> TxOutcome:
        """Latest data entry of an account, or the entry with the given hash."""
        return Success(None, data=self.client.query_data(data_account_url, entry_hash))

    @wallet_operation
    def query_data_entries(self, data_account_url: str, start: int = 0,
                           count: Optional[int] = None) -> TxOutcome:
        return Success(None, data=self.client.query_data_set(data_account_url, start, count))

    # Queries and pending transactions

    @wallet_operation
    def query_balance(self, account_url: str) -> TxOutcome:
        account = self.accounts.get_token_account(account_url)
        token_url = account.token_url if account else ACME_TOKEN_URL
        balance = self.client.get_balance(account_url)
        return Success(None, data={
            "url": account_url,
            "balance": balance,
            "tokenUrl": token_url,
            "formatted": self.credits.format_token_amount(balance, self.accounts.token_precision(token_url)),
        })

    @wallet_operation
    def sign_pending(self, transaction_hash: str, signer_url: str) -> TxOutcome:
        """Add this wallet's signature to a pending multi-signature transaction."""
        return self.signing.sign_existing(transaction_hash, signer_url).outcome

    @wallet_operation
    def pending_signatures(self, signing_paths: Optional[List[str]] = None) -> TxOutcome:
        """
        Pending transactions waiting for one of this wallet's signers.

        Args:
            signing_paths: Key page URLs or ``a -> b`` delegation chains to
                read; every local key page with a stored key when omitted
        """
        pending = self.pending.find_pending(signing_paths)
        data = pending.to_dict()
        data["transactions"] = pending.flatten()
        return Success(None, data=data)

    @wallet_operation
    def pending_count(self, signer_url: str) -> TxOutcome:
        return Success(None, data={"signer": signer_url,
                                   "count": self.pending.pending_count(signer_url)})

    @wallet_operation
    def has_pending_transactions(self, signing_paths: Optional[List[str]] = None) -> TxOutcome:
        return Success(None, data={"hasPending": self.pending.has_pending(signing_paths)})

    # Balances

    @wallet_operation
    def total_wallet_balance(self) -> TxOutcome:
        """Sum of the ACME held by every lite and identity token account."""
        return Success(None, data=self.balances.total_wallet_balance().to_dict())

    @wallet_operation
    def balance_summary(self) -> TxOutcome:
        return Success(None, data=self.balances.balance_summary())

    @wallet_operation
    def request_faucet(self, lite_account_url: str) -> TxOutcome:
        """Ask a test network faucet for ACME."""
        if self.config.is_mainnet:
            return Failure("The faucet is not available on mainnet", ErrorCode.INVALID_INPUT)
        return parse_response(self.client.faucet(lite_account_url))

    # Listings

    def identities_for_dropdown(self):
        return self.identities.list_identities()

    def key_pages_for_dropdown(self):
        return self.identities.list_key_pages()

    def accounts_for_dropdown(self, account_type: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.accounts.accounts_for_dropdown(account_type)

    def tokens_for_dropdown(self) -> List[Dict[str, Any]]:
        return self.accounts.tokens_for_dropdown()

    def data_accounts_for_dropdown(self) -> List[Dict[str, Any]]:
        return self.accounts.data_accounts_for_dropdown()

    def credit_accounts_for_dropdown(self) -> List[Dict[str, Any]]:
        return self.accounts.credit_accounts_for_dropdown()

    def identity_hierarchy(self) -> List[Dict[str, Any]]:
        return self.identities.identity_hierarchy()

    def recent_credit_transactions(self, limit: int = 20):
        return self.credits.recent_credit_transactions(limit)

    def statistics(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {}
        stats.update(self.identities.statistics())
        stats.update(self.accounts.statistics())
        stats["storedKeys"] = self.keys.key_statistics()
        stats["creditTransactions"] = len(self.recent_credit_transactions(limit=1000))
        return stats


__all__ = ["AccumulateWallet", "wallet_operation"]
