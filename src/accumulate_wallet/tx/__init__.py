"""
Transaction bodies, request models, envelopes and the submission pipeline.
"""

from .bodies import TxBody
from .envelope import build_envelope, dumps_canonical, transaction_hash
from .requests import (
    WalletRequest,
    CreateIdentityRequest,
    CreateADITokenAccountRequest,
    CreateDataAccountRequest,
    CreateKeyBookRequest,
    CreateKeyPageRequest,
    CreateCustomTokenRequest,
    MintTokensRequest,
    BurnTokensRequest,
    PurchaseCreditsRequest,
    WriteDataRequest,
    SendTokensRequest,
    TokenRecipient,
)
from .signing import TransactionSigningService, SubmissionState, SubmissionResult, ResolvedSigner

__all__ = [
    "TxBody",
    "build_envelope",
    "dumps_canonical",
    "transaction_hash",
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
    "SendTokensRequest",
    "TokenRecipient",
    "TransactionSigningService",
    "SubmissionState",
    "SubmissionResult",
    "ResolvedSigner",
]
