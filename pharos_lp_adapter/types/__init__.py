"""
Type definitions for the Pharos LP adapter
"""

from .tokens import (
    PharosToken,
    TokenRegistry,
    CanonicalPair,
    canonical_order,
    to_base_units,
    DEFAULT_DECIMALS,
)
from .position import MintParams
from .result import (
    PollKind,
    ReceiptPoll,
    ConfirmationStatus,
    ConfirmationOutcome,
    receipt_status,
)

__all__ = [
    # Tokens
    "PharosToken",
    "TokenRegistry",
    "CanonicalPair",
    "canonical_order",
    "to_base_units",
    "DEFAULT_DECIMALS",
    # Position
    "MintParams",
    # Results
    "PollKind",
    "ReceiptPoll",
    "ConfirmationStatus",
    "ConfirmationOutcome",
    "receipt_status",
]
