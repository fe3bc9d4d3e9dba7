"""
Shared test doubles for the unit tests

Builds an in-memory ChainGateway, a deterministic signer and
zero-delay transaction settings so async flows run without a node.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

from web3 import Web3

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pharos_lp_adapter.config import LiquidityConfig, TokenConfig, TxConfig
from pharos_lp_adapter.infra.evm_signer import EVMSigner
from pharos_lp_adapter.types import ReceiptPoll, TokenRegistry

TEST_PRIVATE_KEY = "0x" + "11" * 32

WPHRS = Web3.to_checksum_address("0x76aaaDA469D23216bE5f7C596fA25F282Ff9b364")
USDT = Web3.to_checksum_address("0xD4071393f8716661958F766DF660033b3d35fD29")
USDC = Web3.to_checksum_address("0x72df0bcd7276f2dFbAc900D1CE63c272C4BCcCED")
ROUTER = Web3.to_checksum_address("0xF8a1D4FF0f9b9Af7CE58E1fc1833688F3BFd6115")

TX_HASH = "0x" + "ab" * 32

ONE = 10**18


def make_signer(name: str = "TestWallet") -> EVMSigner:
    return EVMSigner.from_private_key(TEST_PRIVATE_KEY, name=name)


def make_registry() -> TokenRegistry:
    return TokenRegistry.from_config(TokenConfig(
        wphrs=WPHRS,
        usdt=USDT,
        usdc=USDC,
        router=ROUTER,
        decimals=18,
    ))


def make_tx_config(max_attempts: int = 5) -> TxConfig:
    """Transaction settings with no waiting between attempts"""
    return TxConfig(
        confirmation_timeout=1.0,
        max_attempts=max_attempts,
        retry_delay=0,
        required_confirmations=1,
        receipt_poll_interval=0,
        priority_fee_gwei=1.0,
    )


def make_lp_config() -> LiquidityConfig:
    return LiquidityConfig(
        deadline_seconds=1800,
        default_gas_limit=500_000,
        gas_limit_multiplier=1.2,
        approval_gas_limit=100_000,
    )


def success_receipt(block_number: int = 100) -> dict:
    return {"status": 1, "blockNumber": block_number, "transactionHash": TX_HASH}


def reverted_receipt(block_number: int = 100) -> dict:
    return {"status": 0, "blockNumber": block_number, "transactionHash": TX_HASH}


def make_gateway(
    allowance=2**256 - 1,
    estimate=200_000,
    tx_hash=TX_HASH,
    polls=None,
) -> Mock:
    """
    Mock ChainGateway

    Args:
        allowance: Value (or side_effect list/exception) for read_allowance
        estimate: Value (or exception) for estimate_gas
        tx_hash: Value (or side_effect list/exception) for broadcast
        polls: side_effect for poll_receipt (defaults to a successful receipt every time)
    """
    gateway = Mock()
    gateway.read_allowance = _async(allowance)
    gateway.estimate_gas = _async(estimate)
    gateway.broadcast = _async(tx_hash)
    if polls is None:
        gateway.poll_receipt = AsyncMock(return_value=ReceiptPoll.found(success_receipt()))
    else:
        gateway.poll_receipt = AsyncMock(side_effect=polls)
    return gateway


def _async(value) -> AsyncMock:
    if isinstance(value, (list, BaseException)) or (
        isinstance(value, type) and issubclass(value, BaseException)
    ):
        return AsyncMock(side_effect=value)
    return AsyncMock(return_value=value)
