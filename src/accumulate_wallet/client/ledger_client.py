"""
Ledger client adapter.

JSON-RPC 2.0 client for the Accumulate v2 API. Queries return the ``result``
object and raise a mapped :class:`WalletError` when the node answers with an
error. Submissions return the whole response so the caller can normalize it
with :func:`parse_response`.

Every call is one bounded HTTP request: there are no retries, and a timeout
surfaces as :class:`TimeoutError`.
"""

from __future__ import annotations
import json
import logging
import random
from typing import Any, Dict, List, Optional

import requests

from ..runtime.errors import (
    NetworkError,
    TimeoutError,
    ConnectionError,
    ProtocolRejectionError,
    ErrorCode,
    error_from_response,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0
DEFAULT_KEY_PAGE_VERSION = 1

# Account types the network allows credits to be added to
CREDIT_RECIPIENT_TYPES = frozenset({"liteTokenAccount", "liteIdentity", "keyPage", "lite_account"})


class LedgerClient:
    """
    Accumulate v2 JSON-RPC client.

    Example:
        ```python
        client = LedgerClient("https://testnet.accumulatenetwork.io")
        account = client.query_url("acc://my-adi.acme")
        oracle = client.value_from_oracle()
        ```
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the client.

        Args:
            endpoint: Base endpoint URL (``/v2`` is appended if missing)
            timeout: Upper bound for each request in seconds
            session: Optional requests.Session for connection pooling
            user_agent: Optional User-Agent header
        """
        endpoint = endpoint.rstrip('/')
        if not endpoint.endswith('/v2'):
            if endpoint.endswith('/v3'):
                endpoint = endpoint[:-len('/v3')]
            endpoint = endpoint + '/v2'

        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._headers = {"Content-Type": "application/json"}
        if user_agent:
            self._headers["User-Agent"] = user_agent

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def timeout(self) -> float:
        return self._timeout

    def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> LedgerClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Low-level RPC

    def _post(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send one JSON-RPC request and return the decoded response body.

        Raises:
            TimeoutError: If the request exceeds the timeout
            ConnectionError: If the node cannot be reached
            NetworkError: On non-200 status or a body that is not JSON
        """
        request_data: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "id": random.randint(1, 1_000_000),
        }
        if params is not None:
            request_data["params"] = params

        logger.debug(f"RPC {method} -> {self._endpoint}")
        try:
            response = self._session.post(
                self._endpoint,
                json=request_data,
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as e:
            raise TimeoutError(f"{method} timed out after {self._timeout}s", cause=e)
        except requests.exceptions.ConnectionError as e:
            raise ConnectionError(f"Cannot reach {self._endpoint}", cause=e)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"HTTP request failed: {e}", cause=e)

        if response.status_code != 200:
            raise NetworkError(
                f"HTTP {response.status_code}: {response.reason}",
                details={"status": response.status_code, "method": method},
            )

        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            error = NetworkError(f"Invalid JSON response: {e}", cause=e)
            error.code = ErrorCode.INVALID_RESPONSE
            raise error

        if not isinstance(body, dict):
            error = NetworkError(f"Unexpected response body for {method}")
            error.code = ErrorCode.INVALID_RESPONSE
            raise error
        return body

    def _call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a JSON-RPC call and return its result.

        Raises:
            WalletError: The mapped node error, or a transport error
        """
        body = self._post(method, params)
        error = error_from_response(body)
        if error is not None:
            logger.debug(f"RPC {method} failed: {error.message}")
            raise error
        return body.get("result")

    def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Raw JSON-RPC call for methods without a typed wrapper."""
        return self._call(method, params)

    # Submission

    def execute_direct(self, envelope: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit a signed envelope.

        Returns:
            The full response (``result`` and/or ``error``), unparsed
        """
        return self._post("execute-direct", {"envelope": envelope})

    def execute(self, envelope: Dict[str, Any]) -> Dict[str, Any]:
        return self._post("execute", {"envelope": envelope})

    def faucet(self, url: str) -> Dict[str, Any]:
        """
        Request test tokens for an account. Testnet and devnet only.

        Returns:
            The full response, unparsed
        """
        return self._post("faucet", {"url": url})

    # Queries

    def query_url(self, url: str, expand: Optional[bool] = None) -> Dict[str, Any]:
        """
        Query an account by URL.

        Returns:
            The query result (``type``, ``data``, ...)
        """
        params: Dict[str, Any] = {"url": url}
        if expand is not None:
            params["expand"] = expand
        return self._call("query", params) or {}

    def query_tx(self, txid: str, wait: Optional[int] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"txid": txid}
        if wait is not None:
            params["wait"] = wait
        return self._call("query-tx", params) or {}

    def query_data(self, url: str, entry_hash: Optional[str] = None) -> Dict[str, Any]:
        """
        Query a data entry, the latest one unless ``entry_hash`` is given.
        """
        params: Dict[str, Any] = {"url": url}
        if entry_hash is not None:
            params["entryHash"] = entry_hash
        return self._call("query-data", params) or {}

    def query_data_set(self, url: str, start: int = 0, count: Optional[int] = None,
                       expand: Optional[bool] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"url": url, "start": start}
        if count is not None:
            params["count"] = count
        if expand is not None:
            params["expand"] = expand
        return self._call("query-data-set", params) or {}

    def query_directory(self, url: str, start: int = 0, count: Optional[int] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"url": url, "start": start}
        if count is not None:
            params["count"] = count
        return self._call("query-directory", params) or {}

    def query_pending(self, signer_url: str) -> List[Dict[str, Any]]:
        """
        Transactions waiting for a signature from ``signer_url``.

        Returns:
            One dict per pending transaction with ``txid``, ``hash`` and
            ``type`` where the node reports them
        """
        result = self.query_url(f"{signer_url}#pending")
        pending = []
        for item in result.get("items") or []:
            if isinstance(item, str):
                pending.append({"txid": item})
            elif isinstance(item, dict):
                pending.append({key: str(item[key]) for key in ("txid", "hash", "type")
                                if item.get(key) is not None})
        return pending

    def describe(self) -> Dict[str, Any]:
        """Network description, including the current oracle price."""
        return self._call("describe", {}) or {}

    def status(self) -> Dict[str, Any]:
        return self._call("status", {}) or {}

    # Derived reads

    def value_from_oracle(self) -> int:
        """
        Current ACME oracle price.

        Raises:
            ProtocolRejectionError: If the node does not publish an oracle price
        """
        described = self.describe()
        try:
            price = described["values"]["oracle"]["price"]
        except (KeyError, TypeError):
            raise ProtocolRejectionError("Oracle price missing from describe response",
                                         ErrorCode.INVALID_RESPONSE)
        return int(price)

    def network_globals(self) -> Dict[str, Any]:
        """Network globals (fee schedule and similar), empty when unpublished."""
        values = self.describe().get("values") or {}
        return values.get("globals") or {}

    def get_signer_version(self, page_url: str) -> int:
        """
        Current version of a key page, read fresh from the network.

        Defaults to 1 when the page reports no version.
        """
        result = self.query_url(page_url)
        data = result.get("data") or {}
        version = data.get("version")
        if version is None:
            logger.debug(f"No version reported for {page_url}; using {DEFAULT_KEY_PAGE_VERSION}")
            return DEFAULT_KEY_PAGE_VERSION
        return int(version)

    def get_balance(self, url: str) -> int:
        """Token balance of an account in base units (0 when unreported)."""
        data = self.query_url(url).get("data") or {}
        return int(data.get("balance") or 0)

    def get_credit_balance(self, url: str) -> Optional[int]:
        """Credit balance of a lite identity or key page, or None when unreported."""
        data = self.query_url(url).get("data") or {}
        value = data.get("creditBalance", data.get("credits"))
        return int(value) if value is not None else None

    def get_account_type(self, url: str) -> Optional[str]:
        return self.query_url(url).get("type")

    def can_receive_credits(self, url: str) -> bool:
        """Whether the account is a lite account or key page."""
        return self.get_account_type(url) in CREDIT_RECIPIENT_TYPES


__all__ = [
    "LedgerClient",
    "DEFAULT_TIMEOUT",
    "DEFAULT_KEY_PAGE_VERSION",
    "CREDIT_RECIPIENT_TYPES",
]
