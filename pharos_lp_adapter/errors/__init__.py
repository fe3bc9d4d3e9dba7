"""
Error definitions for the Pharos LP adapter
"""

from .exceptions import (
    ErrorCode,
    PharosAdapterError,
    RpcError,
    InvalidTokenError,
    ApprovalError,
    GasEstimationError,
    TransactionError,
    SignerError,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "PharosAdapterError",
    "RpcError",
    "InvalidTokenError",
    "ApprovalError",
    "GasEstimationError",
    "TransactionError",
    "SignerError",
    "ConfigurationError",
]
