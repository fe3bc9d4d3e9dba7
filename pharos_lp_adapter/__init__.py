"""
Pharos LP Adapter

Submits full-range liquidity positions to the Pharos concentrated-liquidity
position manager and tracks them to on-chain confirmation.

Usage:
    import asyncio
    from pharos_lp_adapter import PharosLPClient

    client = PharosLPClient.from_env()
    tx_hash = asyncio.run(client.add_liquidity("PHRS", "USDT", "0.1", "2.5"))
"""

from .client import PharosLPClient
from .config import config, get_config, reload_config, setup_logging
from .errors import (
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
from .infra import EVMSigner, ChainGateway, Web3ChainGateway, create_web3
from .modules import ApprovalManager, ConfirmationTracker, LiquidityModule
from .types import (
    TokenRegistry,
    CanonicalPair,
    canonical_order,
    to_base_units,
    ConfirmationOutcome,
    ConfirmationStatus,
    ReceiptPoll,
)

__version__ = "0.1.0"

__all__ = [
    "PharosLPClient",
    # Config
    "config",
    "get_config",
    "reload_config",
    "setup_logging",
    # Errors
    "ErrorCode",
    "PharosAdapterError",
    "RpcError",
    "InvalidTokenError",
    "ApprovalError",
    "GasEstimationError",
    "TransactionError",
    "SignerError",
    "ConfigurationError",
    # Infra
    "EVMSigner",
    "ChainGateway",
    "Web3ChainGateway",
    "create_web3",
    # Modules
    "ApprovalManager",
    "ConfirmationTracker",
    "LiquidityModule",
    # Types
    "TokenRegistry",
    "CanonicalPair",
    "canonical_order",
    "to_base_units",
    "ConfirmationOutcome",
    "ConfirmationStatus",
    "ReceiptPoll",
]
