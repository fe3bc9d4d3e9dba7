"""
Infrastructure layer for the Pharos LP adapter

Provides:
- EVMSigner: Local transaction signing using eth-account
- ChainGateway / Web3ChainGateway: async RPC primitives over AsyncWeb3
- Retry classification, correlation IDs and actor-tagged logging
"""

from .evm_signer import (
    EVMSigner,
    create_web3,
    create_evm_signer,
)
from .gateway import ChainGateway, Web3ChainGateway
from .retry import (
    RpcErrorKind,
    classify_rpc_error,
    poll_from_error,
    CorrelationContext,
    ActorLogger,
    get_actor_logger,
)

__all__ = [
    "EVMSigner",
    "create_web3",
    "create_evm_signer",
    "ChainGateway",
    "Web3ChainGateway",
    "RpcErrorKind",
    "classify_rpc_error",
    "poll_from_error",
    "CorrelationContext",
    "ActorLogger",
    "get_actor_logger",
]
