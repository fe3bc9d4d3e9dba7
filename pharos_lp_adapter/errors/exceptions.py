"""
Exception definitions for the Pharos LP adapter
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for liquidity transactions

    1xxx - RPC errors
    2xxx - Transaction errors
    4xxx - Token / input errors
    6xxx - Signer errors
    9xxx - Configuration errors
    """
    # RPC errors
    RPC_TRANSIENT = "1001"
    RPC_FATAL = "1002"
    RPC_TIMEOUT = "1003"

    # Transaction errors
    TX_GAS_ESTIMATION_FAILED = "2001"
    TX_SEND_FAILED = "2002"
    TX_REVERTED = "2003"
    TX_UNCONFIRMED = "2004"
    TX_APPROVAL_FAILED = "2005"

    # Token / input errors
    TOKEN_UNKNOWN = "4001"
    AMOUNT_INVALID = "4002"

    # Signer errors
    SIGNER_NOT_CONFIGURED = "6001"
    SIGNER_FAILED = "6002"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class PharosAdapterError(Exception):
    """
    Base exception for all adapter errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class RpcError(PharosAdapterError):
    """
    RPC-related errors

    Raised when:
    - The node cannot serve a receipt yet (transient, retried)
    - A per-attempt wait runs out (transient, retried)
    - The node rejects the request outright (fatal)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_TRANSIENT,
        recoverable: bool = True,
        original_error: Optional[Exception] = None,
        rpc_code: Optional[int] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details={"rpc_code": rpc_code} if rpc_code is not None else None,
        )
        self.rpc_code = rpc_code

    @classmethod
    def transient(cls, message: str, rpc_code: Optional[int] = None, error: Exception = None) -> "RpcError":
        return cls(
            message,
            ErrorCode.RPC_TRANSIENT,
            recoverable=True,
            original_error=error,
            rpc_code=rpc_code,
        )

    @classmethod
    def timeout(cls, tx_hash: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"Timed out after {timeout_seconds}s waiting for receipt of {tx_hash}",
            ErrorCode.RPC_TIMEOUT,
            recoverable=True,
        )

    @classmethod
    def fatal(cls, message: str, rpc_code: Optional[int] = None, error: Exception = None) -> "RpcError":
        return cls(
            message,
            ErrorCode.RPC_FATAL,
            recoverable=False,
            original_error=error,
            rpc_code=rpc_code,
        )


class InvalidTokenError(PharosAdapterError):
    """
    Invalid caller input - not recoverable

    Raised when:
    - A token symbol is not in the registry
    - An amount string cannot be converted to base units
    """

    def __init__(
        self,
        message: str,
        symbol: Optional[str] = None,
        code: ErrorCode = ErrorCode.TOKEN_UNKNOWN,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"symbol": symbol},
        )
        self.symbol = symbol

    @classmethod
    def unknown_symbol(cls, symbol: str) -> "InvalidTokenError":
        return cls(f"Unknown token symbol: {symbol}", symbol=symbol)

    @classmethod
    def invalid_amount(cls, amount: object, reason: str) -> "InvalidTokenError":
        return cls(
            f"Invalid amount {amount!r}: {reason}",
            code=ErrorCode.AMOUNT_INVALID,
        )


class ApprovalError(PharosAdapterError):
    """Token approval could not be established"""

    def __init__(self, message: str, token: Optional[str] = None, spender: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.TX_APPROVAL_FAILED,
            recoverable=False,
            details={"token": token, "spender": spender},
        )
        self.token = token
        self.spender = spender


class GasEstimationError(PharosAdapterError):
    """
    Gas estimation failed - recoverable

    Callers fall back to a fixed gas limit instead of aborting.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(
            message,
            ErrorCode.TX_GAS_ESTIMATION_FAILED,
            recoverable=True,
            original_error=original_error,
        )

    @classmethod
    def from_error(cls, error: Exception) -> "GasEstimationError":
        return cls(f"Gas estimation failed: {error}", original_error=error)


class TransactionError(PharosAdapterError):
    """
    Transaction execution errors

    Raised when:
    - Broadcasting fails
    - The receipt reports a revert
    - The outcome could not be determined within the retry budget
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        tx_hash: Optional[str] = None,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            original_error=original_error,
            details={"tx_hash": tx_hash},
        )
        self.tx_hash = tx_hash

    @classmethod
    def send_failed(cls, error: Exception) -> "TransactionError":
        return cls(
            f"Failed to send transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            original_error=error,
        )

    @classmethod
    def reverted(cls, tx_hash: str) -> "TransactionError":
        return cls(
            f"Transaction {tx_hash} failed or reverted",
            ErrorCode.TX_REVERTED,
            tx_hash=tx_hash,
        )

    @classmethod
    def unconfirmed(cls, tx_hash: str, attempts: int) -> "TransactionError":
        # Still may land later, hence recoverable
        return cls(
            f"Transaction {tx_hash} unconfirmed after {attempts} attempts",
            ErrorCode.TX_UNCONFIRMED,
            tx_hash=tx_hash,
            recoverable=True,
        )


class SignerError(PharosAdapterError):
    """
    Signing-related errors

    Raised when:
    - No private key or keystore is configured
    - Signing operation fails
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SIGNER_FAILED,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def not_configured(cls) -> "SignerError":
        return cls(
            "No signer configured. Provide a private key or keystore.",
            ErrorCode.SIGNER_NOT_CONFIGURED,
        )

    @classmethod
    def failed(cls, reason: str) -> "SignerError":
        return cls(f"Signing failed: {reason}", ErrorCode.SIGNER_FAILED)


class ConfigurationError(PharosAdapterError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
