"""
Fee schedule for account creation, in credits.

The network publishes its schedule under ``describe().values.globals.feeSchedule``;
any entry it leaves out falls back to the defaults below. Identity names
shorter than the network cutoff pay a sliding fee instead of the base fee.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..runtime.errors import ValidationError, ErrorCode
from .economics import credits_to_token_amount

logger = logging.getLogger(__name__)

MAINNET_SLIDING_CUTOFF = 8
DEFAULT_SLIDING_CUTOFF = 13

# Operation name -> FeeSchedule attribute
OPERATIONS = {
    "createIdentity": "create_identity",
    "createKeyBook": "create_key_book",
    "createKeyPage": "create_key_page",
    "createTokenAccount": "create_token_account",
    "createDataAccount": "create_data_account",
    "createToken": "create_token",
}


@dataclass
class FeeSchedule:
    """Creation fees in credits."""

    create_identity: int = 2_500_000
    create_key_book: int = 100_000
    create_key_page: int = 100_000
    create_token_account: int = 25_000
    create_data_account: int = 25_000
    create_token: int = 100_000

    # Identity fee by name length (index 0 is a one-character name)
    identity_sliding: List[int] = field(default_factory=list)

    @classmethod
    def from_globals(cls, network_globals: Optional[Dict[str, Any]]) -> FeeSchedule:
        """
        Build a schedule from network globals, keeping defaults for gaps.

        Args:
            network_globals: ``values.globals`` from a describe call, or None
        """
        schedule = cls()
        published = (network_globals or {}).get("feeSchedule") or {}
        for operation, attr in OPERATIONS.items():
            value = published.get(operation)
            if value is not None:
                setattr(schedule, attr, int(value))
        sliding = published.get("createIdentitySliding")
        if sliding:
            schedule.identity_sliding = [int(v) for v in sliding]
        return schedule

    def fee_for(self, operation: str) -> int:
        attr = OPERATIONS.get(operation)
        if attr is None:
            raise ValidationError(f"Unknown operation: {operation}",
                                  details={"operation": operation, "known": sorted(OPERATIONS)})
        return getattr(self, attr)

    def identity_fee(self, name: str, mainnet: bool = False) -> int:
        """
        Credits needed to create an identity with the given name.

        Short names pay the sliding fee for their length when the network
        publishes one; all other names pay the base identity fee.
        """
        cutoff = MAINNET_SLIDING_CUTOFF if mainnet else DEFAULT_SLIDING_CUTOFF
        length = len(name)
        if 0 < length < cutoff and length <= len(self.identity_sliding):
            return self.identity_sliding[length - 1]
        return self.create_identity

    def to_dict(self) -> Dict[str, int]:
        return {op: getattr(self, attr) for op, attr in OPERATIONS.items()}


@dataclass(frozen=True)
class FeePreview:
    operation: str
    credits: int
    acme_amount: int
    oracle: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "credits": self.credits,
            "acmeAmount": self.acme_amount,
            "oracleValue": self.oracle,
        }


def preview_fee(operation: str, oracle: int, schedule: Optional[FeeSchedule] = None,
                name: Optional[str] = None, mainnet: bool = False) -> FeePreview:
    """
    Price one creation operation in credits and ACME base units.

    Args:
        operation: Operation name such as ``"createIdentity"``
        oracle: Oracle price used for the conversion
        schedule: Fee schedule (defaults when omitted)
        name: Identity name, used for the sliding identity fee
        mainnet: Whether the mainnet sliding cutoff applies

    Raises:
        ValidationError: For an unknown operation or a non-positive oracle
    """
    schedule = schedule or FeeSchedule()
    if operation == "createIdentity" and name:
        credits = schedule.identity_fee(name, mainnet)
    else:
        credits = schedule.fee_for(operation)
    if oracle <= 0:
        raise ValidationError("Oracle value must be positive", ErrorCode.INVALID_AMOUNT,
                              details={"oracle": oracle})
    return FeePreview(operation, credits, credits_to_token_amount(credits, oracle), oracle)


__all__ = [
    "FeeSchedule",
    "FeePreview",
    "preview_fee",
    "OPERATIONS",
    "MAINNET_SLIDING_CUTOFF",
    "DEFAULT_SLIDING_CUTOFF",
]
