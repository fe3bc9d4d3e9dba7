"""
Calldata encoding for the position manager and ERC20 approvals
"""

from typing import List

from eth_abi import encode
from web3 import Web3

from ...types.position import MintParams
from .api import (
    MINT_PARAMS_TYPE,
    MINT_SIGNATURE,
    REFUND_ETH_SIGNATURE,
    MULTICALL_SIGNATURE,
    APPROVE_SIGNATURE,
)


def function_selector(signature: str) -> bytes:
    """First four bytes of keccak256(signature)"""
    return bytes(Web3.keccak(text=signature)[:4])


class RouterEncoder:
    """
    Encodes position manager calls

    mint and refundETH are batched through multicall(bytes[]) so any
    native value left over after the mint is refunded in the same
    transaction.
    """

    @staticmethod
    def encode_mint(params: MintParams) -> bytes:
        """Encode mint(MintParams)"""
        values = list(params.as_tuple())
        values[0] = Web3.to_checksum_address(values[0])
        values[1] = Web3.to_checksum_address(values[1])
        values[9] = Web3.to_checksum_address(values[9])
        return function_selector(MINT_SIGNATURE) + encode([MINT_PARAMS_TYPE], [tuple(values)])

    @staticmethod
    def encode_refund_eth() -> bytes:
        """Encode refundETH()"""
        return function_selector(REFUND_ETH_SIGNATURE)

    @staticmethod
    def encode_multicall(calls: List[bytes]) -> bytes:
        """Encode multicall(bytes[])"""
        return function_selector(MULTICALL_SIGNATURE) + encode(["bytes[]"], [list(calls)])

    @classmethod
    def encode_mint_with_refund(cls, params: MintParams) -> bytes:
        """multicall([mint(params), refundETH()])"""
        return cls.encode_multicall([cls.encode_mint(params), cls.encode_refund_eth()])


def encode_approve(spender: str, amount: int) -> bytes:
    """Encode ERC20 approve(spender, amount)"""
    return function_selector(APPROVE_SIGNATURE) + encode(
        ["address", "uint256"],
        [Web3.to_checksum_address(spender), amount],
    )
