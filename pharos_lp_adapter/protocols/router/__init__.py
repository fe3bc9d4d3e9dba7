"""
Pharos position manager ("router") protocol support

Usage:
    from pharos_lp_adapter.protocols.router import RouterEncoder, FEE_TIER

    data = RouterEncoder.encode_mint_with_refund(mint_params)
"""

from .api import (
    FEE_TIER,
    FULL_RANGE_TICK_LOWER,
    FULL_RANGE_TICK_UPPER,
    MAX_UINT256,
    ERC20_ABI,
)
from .encoder import RouterEncoder, encode_approve, function_selector

__all__ = [
    "RouterEncoder",
    "encode_approve",
    "function_selector",
    "FEE_TIER",
    "FULL_RANGE_TICK_LOWER",
    "FULL_RANGE_TICK_UPPER",
    "MAX_UINT256",
    "ERC20_ABI",
]
