"""
Result type definitions for receipt polling and confirmation
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class PollKind(Enum):
    """Outcome of a single receipt poll"""
    RECEIPT = "receipt"
    TRANSIENT = "transient"   # Retry after a delay
    FATAL = "fatal"           # Give up immediately


@dataclass(frozen=True)
class ReceiptPoll:
    """
    Tagged result of one receipt poll

    Attributes:
        kind: Which variant this is
        receipt: The receipt (RECEIPT only)
        error: Error description (TRANSIENT / FATAL)
        rpc_code: JSON-RPC error code when the node supplied one
    """
    kind: PollKind
    receipt: Optional[Mapping[str, Any]] = None
    error: Optional[str] = None
    rpc_code: Optional[int] = None

    @classmethod
    def found(cls, receipt: Mapping[str, Any]) -> "ReceiptPoll":
        return cls(kind=PollKind.RECEIPT, receipt=receipt)

    @classmethod
    def transient(cls, error: str, rpc_code: Optional[int] = None) -> "ReceiptPoll":
        return cls(kind=PollKind.TRANSIENT, error=error, rpc_code=rpc_code)

    @classmethod
    def fatal(cls, error: str, rpc_code: Optional[int] = None) -> "ReceiptPoll":
        return cls(kind=PollKind.FATAL, error=error, rpc_code=rpc_code)

    @property
    def succeeded(self) -> bool:
        """Receipt present and status flag is 1"""
        return self.kind == PollKind.RECEIPT and receipt_status(self.receipt) == 1


def receipt_status(receipt: Optional[Mapping[str, Any]]) -> Optional[int]:
    """Status flag of a receipt (1 = success, 0 = reverted)"""
    if receipt is None:
        return None
    status = receipt.get("status")
    return int(status) if status is not None else None


class ConfirmationStatus(Enum):
    """Terminal state of a confirmation attempt"""
    CONFIRMED = "confirmed"
    REVERTED = "reverted"
    FAILED = "failed"            # Fatal RPC error, not retried
    UNCONFIRMED = "unconfirmed"  # Retries exhausted, outcome unknown


@dataclass(frozen=True)
class ConfirmationOutcome:
    """
    Confirmation result for a broadcast transaction

    Attributes:
        status: Terminal state
        tx_hash: Transaction hash
        receipt: Receipt when one was obtained (CONFIRMED or REVERTED)
        error: Error message for non-confirmed outcomes
        attempts: Number of polls made
    """
    status: ConfirmationStatus
    tx_hash: str
    receipt: Optional[Mapping[str, Any]] = None
    error: Optional[str] = None
    attempts: int = 0

    @property
    def is_confirmed(self) -> bool:
        return self.status == ConfirmationStatus.CONFIRMED

    @property
    def is_reverted(self) -> bool:
        return self.status == ConfirmationStatus.REVERTED

    @property
    def is_unknown(self) -> bool:
        """Transaction may still land later"""
        return self.status == ConfirmationStatus.UNCONFIRMED

    def __str__(self) -> str:
        if self.is_confirmed:
            return f"ConfirmationOutcome(CONFIRMED, {self.tx_hash[:18]}...)"
        return f"ConfirmationOutcome({self.status.value}, error={self.error})"
