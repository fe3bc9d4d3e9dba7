"""
Retry Classification Helper Module

Classifies RPC failures seen while waiting for receipts as transient
(retry after a fixed delay) or fatal (stop immediately). Includes
structured logging with correlation IDs and actor labels for transaction
tracing.
"""

import asyncio
import contextvars
import logging
import uuid
from enum import Enum
from typing import Any, Optional

from web3.exceptions import TimeExhausted, Web3RPCError

from ..errors import RpcError
from ..types import ReceiptPoll

# Context variable for correlation ID (task-local under asyncio)
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for transaction tracing."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> contextvars.Token:
    """Set the correlation ID in context. Returns token for reset."""
    return _correlation_id.set(correlation_id)


class CorrelationContext:
    """
    Context manager for correlation ID scoping.

    Usage:
        with CorrelationContext("lp") as cid:
            tx_hash = await builder.add_liquidity("PHRS", "USDT", "1", "1")
    """

    def __init__(self, prefix: Optional[str] = None):
        """
        Initialize correlation context.

        Args:
            prefix: Optional prefix for the correlation ID (e.g., "lp", "approve")
        """
        self.correlation_id = generate_correlation_id()
        if prefix:
            self.correlation_id = f"{prefix}_{self.correlation_id}"
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)


class ActorLogger(logging.LoggerAdapter):
    """
    Logger adapter that tags every line with the acting wallet

    Lines render as "System | <actor> | [<cid>] message"; actor and
    correlation_id are also passed as extra fields for structured handlers.
    """

    def __init__(self, logger: logging.Logger, actor: str):
        super().__init__(logger, {"actor": actor})
        self.actor = actor

    def process(self, msg, kwargs):
        cid = get_correlation_id()
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("actor", self.actor)
        extra.setdefault("correlation_id", cid)
        kwargs["extra"] = extra
        prefix = f"System | {self.actor} | "
        if cid:
            prefix += f"[{cid}] "
        return f"{prefix}{msg}", kwargs


def get_actor_logger(name: str, actor: str) -> ActorLogger:
    """Actor-tagged adapter over logging.getLogger(name)"""
    return ActorLogger(logging.getLogger(name), actor)


class RpcErrorKind(Enum):
    """Receipt-lookup error class"""
    TRANSIENT = "transient"
    FATAL = "fatal"


# Provider signal that the receipt cannot be looked up yet
TRANSIENT_RPC_CODES = frozenset({-32008})

# Message fragments for the same condition when no code is attached
TRANSIENT_MESSAGE_PATTERNS = [
    "eth_gettransactionreceipt",
]


def extract_rpc_code(error: Exception) -> Optional[int]:
    """
    Pull a JSON-RPC error code out of the shapes web3 raises

    Args:
        error: Exception from a provider call

    Returns:
        Integer error code or None
    """
    if isinstance(error, RpcError):
        return error.rpc_code

    if isinstance(error, Web3RPCError):
        response = getattr(error, "rpc_response", None) or {}
        payload = response.get("error") if isinstance(response, dict) else None
        if isinstance(payload, dict):
            return _as_int(payload.get("code"))

    # Older providers raise ValueError({'code': ..., 'message': ...})
    if error.args and isinstance(error.args[0], dict):
        return _as_int(error.args[0].get("code"))

    return _as_int(getattr(error, "code", None))


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def classify_rpc_error(error: Exception) -> RpcErrorKind:
    """
    Classify a receipt-lookup failure.

    Transient:
    - JSON-RPC code -32008
    - message mentioning eth_getTransactionReceipt
    - the per-attempt wait timing out

    Everything else (signature errors, malformed hashes, node rejections)
    is fatal.

    Args:
        error: The exception to classify

    Returns:
        RpcErrorKind
    """
    if isinstance(error, RpcError):
        return RpcErrorKind.TRANSIENT if error.recoverable else RpcErrorKind.FATAL

    if isinstance(error, (TimeExhausted, asyncio.TimeoutError, TimeoutError)):
        return RpcErrorKind.TRANSIENT

    if extract_rpc_code(error) in TRANSIENT_RPC_CODES:
        return RpcErrorKind.TRANSIENT

    error_str = str(error).lower()
    if any(pattern in error_str for pattern in TRANSIENT_MESSAGE_PATTERNS):
        return RpcErrorKind.TRANSIENT

    return RpcErrorKind.FATAL


def poll_from_error(error: Exception) -> ReceiptPoll:
    """Convert a receipt-lookup exception into a tagged poll result"""
    message = str(error) or error.__class__.__name__
    rpc_code = extract_rpc_code(error)
    if classify_rpc_error(error) == RpcErrorKind.TRANSIENT:
        return ReceiptPoll.transient(message, rpc_code=rpc_code)
    return ReceiptPoll.fatal(message, rpc_code=rpc_code)
