"""
Position Manager Constants

Fixed pool parameters and function signatures for the Pharos
concentrated-liquidity position manager ("router").
"""

from ...types.tokens import MAX_UINT256

# Fee tier (in hundredths of a bip): 0.05%
FEE_TIER = 500

# Full-range tick bounds (largest multiple of the 0.05% tick spacing inside MIN/MAX_TICK)
FULL_RANGE_TICK_LOWER = -887220
FULL_RANGE_TICK_UPPER = 887220

# =========================================================================
# Function signatures
# =========================================================================

MINT_PARAMS_TYPE = "(address,address,uint24,int24,int24,uint256,uint256,uint256,uint256,address,uint256)"

MINT_SIGNATURE = f"mint({MINT_PARAMS_TYPE})"
REFUND_ETH_SIGNATURE = "refundETH()"
MULTICALL_SIGNATURE = "multicall(bytes[])"
APPROVE_SIGNATURE = "approve(address,uint256)"

# Standard ERC20 ABI (reads go through web3 contract objects)
ERC20_ABI = [
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"}
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"}
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function"
    }
]
