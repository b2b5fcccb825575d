"""
Credit pricing, purchases and creation fees.
"""

from .economics import (
    CreditEconomicsService,
    CreditCost,
    CreditPurchase,
    credits_to_token_amount,
    format_token_amount,
    parse_token_amount,
    format_acme,
)
from .fees import FeeSchedule, FeePreview, preview_fee

__all__ = [
    "CreditEconomicsService",
    "CreditCost",
    "CreditPurchase",
    "credits_to_token_amount",
    "format_token_amount",
    "parse_token_amount",
    "format_acme",
    "FeeSchedule",
    "FeePreview",
    "preview_fee",
]
