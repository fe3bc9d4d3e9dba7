"""
Chain Gateway

Narrow async interface over the RPC primitives the liquidity flow needs:
allowance reads, gas estimation, broadcasting and receipt polling.
Web3ChainGateway implements it on AsyncWeb3.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from web3 import AsyncWeb3
from web3.exceptions import TransactionNotFound

from ..errors import RpcError, GasEstimationError, TransactionError
from ..protocols.router import ERC20_ABI
from ..types import ReceiptPoll
from ..config import config as global_config, TxConfig
from .evm_signer import EVMSigner
from .retry import poll_from_error

logger = logging.getLogger(__name__)

TxRequest = Dict[str, Any]


class ChainGateway(Protocol):
    """RPC primitives consumed by the approval, confirmation and liquidity modules"""

    async def read_allowance(self, owner: str, spender: str, token: str) -> int:
        ...

    async def estimate_gas(self, tx_request: TxRequest) -> int:
        ...

    async def broadcast(self, tx_request: TxRequest, signer: EVMSigner) -> str:
        ...

    async def poll_receipt(self, tx_hash: str, confirmations: int, timeout: float) -> ReceiptPoll:
        ...


class Web3ChainGateway:
    """
    ChainGateway backed by AsyncWeb3

    Holds no per-invocation state; nonces are read from the node's pending
    count on every broadcast.

    Usage:
        web3 = create_web3(config.rpc.url)
        gateway = Web3ChainGateway(web3, chain_id=688688)
        allowance = await gateway.read_allowance(owner, router, usdt)
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        chain_id: Optional[int] = None,
        tx_config: Optional[TxConfig] = None,
    ):
        """
        Args:
            web3: Connected AsyncWeb3 instance
            chain_id: Chain ID to stamp on transactions (queried from the node if None)
            tx_config: Transaction settings (uses global config if None)
        """
        self._web3 = web3
        self._chain_id = chain_id
        self._tx_config = tx_config or global_config.tx

    @property
    def web3(self) -> AsyncWeb3:
        return self._web3

    async def read_allowance(self, owner: str, spender: str, token: str) -> int:
        """
        Current ERC20 allowance of owner for spender

        Raises:
            RpcError: If the call fails
        """
        contract = self._web3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token),
            abi=ERC20_ABI,
        )
        try:
            allowance = await contract.functions.allowance(
                AsyncWeb3.to_checksum_address(owner),
                AsyncWeb3.to_checksum_address(spender),
            ).call()
        except Exception as e:
            raise RpcError.fatal(f"Failed to read allowance on {token}: {e}", error=e) from e
        return int(allowance)

    async def estimate_gas(self, tx_request: TxRequest) -> int:
        """
        Estimate gas for a transaction request

        Raises:
            GasEstimationError: If the node cannot estimate
        """
        try:
            return int(await self._web3.eth.estimate_gas(tx_request))
        except Exception as e:
            raise GasEstimationError.from_error(e) from e

    async def broadcast(self, tx_request: TxRequest, signer: EVMSigner) -> str:
        """
        Fill in nonce, chain ID, gas and fees, sign locally and send

        Args:
            tx_request: Transaction fields (to, data, value, optionally gas)
            signer: Signing identity

        Returns:
            Transaction hash (0x-prefixed hex)

        Raises:
            TransactionError: If any step before the node accepts the tx fails
        """
        tx = dict(tx_request)
        tx["from"] = signer.address

        try:
            if "nonce" not in tx:
                tx["nonce"] = await self._web3.eth.get_transaction_count(signer.address, "pending")
            if "chainId" not in tx:
                tx["chainId"] = self._chain_id if self._chain_id is not None else await self._web3.eth.chain_id
            if "gas" not in tx:
                tx["gas"] = await self.estimate_gas(tx)
            await self._add_gas_price(tx)

            raw_tx, _ = signer.sign_transaction(tx)
            tx_hash = await self._web3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            logger.error(f"Broadcast failed for {signer.address}: {e}")
            raise TransactionError.send_failed(e) from e

        return AsyncWeb3.to_hex(tx_hash)

    async def poll_receipt(self, tx_hash: str, confirmations: int, timeout: float) -> ReceiptPoll:
        """
        Wait for a receipt at the requested confirmation depth

        Args:
            tx_hash: Transaction hash
            confirmations: Blocks required including the inclusion block
            timeout: Seconds before this attempt is abandoned

        Returns:
            ReceiptPoll: RECEIPT, or TRANSIENT / FATAL per error classification
        """
        try:
            receipt = await asyncio.wait_for(
                self._wait_for_receipt(tx_hash, confirmations),
                timeout,
            )
        except (asyncio.TimeoutError, TimeoutError):
            return poll_from_error(RpcError.timeout(tx_hash, timeout))
        except Exception as e:
            return poll_from_error(e)

        return ReceiptPoll.found(receipt)

    async def _wait_for_receipt(self, tx_hash: str, confirmations: int) -> Mapping[str, Any]:
        while True:
            try:
                receipt = await self._web3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None

            if receipt is not None:
                if confirmations <= 1:
                    return receipt
                current_block = await self._web3.eth.block_number
                if current_block - receipt["blockNumber"] + 1 >= confirmations:
                    return receipt

            await asyncio.sleep(self._tx_config.receipt_poll_interval)

    async def _add_gas_price(self, tx: TxRequest):
        """
        Add fee fields unless the caller already set them

        EIP-1559 fields when the latest block has a base fee, legacy
        gasPrice otherwise.
        """
        if "gasPrice" in tx or "maxFeePerGas" in tx:
            return

        latest_block = await self._web3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas")
        if base_fee is None:
            tx["gasPrice"] = await self._web3.eth.gas_price
            return

        max_priority_fee = AsyncWeb3.to_wei(self._tx_config.priority_fee_gwei, "gwei")
        tx["maxFeePerGas"] = int(base_fee * 2) + max_priority_fee
        tx["maxPriorityFeePerGas"] = max_priority_fee
