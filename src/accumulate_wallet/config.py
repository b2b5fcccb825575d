"""
Wallet configuration.

Example:
    ```python
    config = WalletConfig.for_network("testnet", database_path="wallet.db")
    config = WalletConfig.from_env()
    configure_logging(config.log_level)
    ```
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .client.ledger_client import DEFAULT_TIMEOUT
from .runtime.errors import ValidationError

# Well-known endpoints
MAINNET_ENDPOINT = "https://mainnet.accumulatenetwork.io/v2"
TESTNET_ENDPOINT = "https://testnet.accumulatenetwork.io/v2"
KERMIT_ENDPOINT = "https://kermit.accumulatenetwork.io/v2"
DEVNET_ENDPOINT = "http://127.0.0.1:26660/v2"

NETWORK_ENDPOINTS = {
    "mainnet": MAINNET_ENDPOINT,
    "testnet": TESTNET_ENDPOINT,
    "kermit": KERMIT_ENDPOINT,
    "devnet": DEVNET_ENDPOINT,
}

ENV_PREFIX = "ACC_WALLET_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class WalletConfig:
    """
    Settings for one wallet instance.

    Attributes:
        endpoint: Ledger API endpoint
        network: Network name; mainnet changes the identity fee cutoff
        timeout: Upper bound in seconds for every network call
        database_path: SQLite file for the local ledger mirror
        keystore_path: Encrypted key store file; keys stay in memory when unset
        log_level: Level passed to :func:`configure_logging`
        user_agent: Optional User-Agent header
    """

    endpoint: str = TESTNET_ENDPOINT
    network: str = "testnet"
    timeout: float = DEFAULT_TIMEOUT
    database_path: Union[str, Path] = ":memory:"
    keystore_path: Optional[Union[str, Path]] = None
    log_level: str = "WARNING"
    user_agent: Optional[str] = None

    def __post_init__(self):
        if self.network not in NETWORK_ENDPOINTS:
            raise ValidationError(f"Unknown network: {self.network}",
                                  details={"known": sorted(NETWORK_ENDPOINTS)})
        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive", details={"timeout": self.timeout})
        if not self.endpoint:
            raise ValidationError("Endpoint is required")

    @property
    def is_mainnet(self) -> bool:
        return self.network == "mainnet"

    @classmethod
    def for_network(cls, network: str, **overrides: Any) -> WalletConfig:
        """
        Config for a well-known network.

        Args:
            network: ``mainnet``, ``testnet``, ``kermit`` or ``devnet``
            **overrides: Field values to replace
        """
        endpoint = NETWORK_ENDPOINTS.get(network)
        if endpoint is None:
            raise ValidationError(f"Unknown network: {network}",
                                  details={"known": sorted(NETWORK_ENDPOINTS)})
        overrides.setdefault("endpoint", endpoint)
        return cls(network=network, **overrides)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> WalletConfig:
        """
        Config from ``ACC_WALLET_*`` environment variables.

        ``ACC_WALLET_NETWORK`` picks the base network (testnet when unset);
        the other variables override single fields.
        """
        env = os.environ if environ is None else environ
        network = env.get(f"{ENV_PREFIX}NETWORK", "testnet")
        overrides: Dict[str, Any] = {}
        if env.get(f"{ENV_PREFIX}ENDPOINT"):
            overrides["endpoint"] = env[f"{ENV_PREFIX}ENDPOINT"]
        if env.get(f"{ENV_PREFIX}TIMEOUT"):
            raw = env[f"{ENV_PREFIX}TIMEOUT"]
            try:
                overrides["timeout"] = float(raw)
            except ValueError as e:
                raise ValidationError(f"Invalid {ENV_PREFIX}TIMEOUT: {raw}", cause=e)
        if env.get(f"{ENV_PREFIX}DB"):
            overrides["database_path"] = env[f"{ENV_PREFIX}DB"]
        if env.get(f"{ENV_PREFIX}KEYSTORE"):
            overrides["keystore_path"] = env[f"{ENV_PREFIX}KEYSTORE"]
        if env.get(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"].upper()
        return cls.for_network(network, **overrides)

    def with_overrides(self, **overrides: Any) -> WalletConfig:
        return replace(self, **overrides)


def configure_logging(level: Union[int, str] = logging.INFO,
                      handler: Optional[logging.Handler] = None) -> logging.Logger:
    """
    Attach a handler to the package logger.

    Calling it again replaces the level but does not stack handlers.

    Returns:
        The ``accumulate_wallet`` logger
    """
    package_logger = logging.getLogger("accumulate_wallet")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValidationError(f"Unknown log level: {level}")
        level = resolved
    package_logger.setLevel(level)
    if handler is None and not package_logger.handlers:
        handler = logging.StreamHandler()
    if handler is not None:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    return package_logger


__all__ = [
    "WalletConfig",
    "configure_logging",
    "NETWORK_ENDPOINTS",
    "MAINNET_ENDPOINT",
    "TESTNET_ENDPOINT",
    "KERMIT_ENDPOINT",
    "DEVNET_ENDPOINT",
]
