"""
Functional modules for PharosLPClient

Provides:
- ConfirmationTracker: receipt polling with bounded retries
- ApprovalManager: idempotent ERC20 allowance assurance
- LiquidityModule: full-range position builder (add_liquidity)
"""

from .confirmation import ConfirmationTracker
from .approval import ApprovalManager
from .liquidity import LiquidityModule, apply_gas_buffer

__all__ = [
    "ConfirmationTracker",
    "ApprovalManager",
    "LiquidityModule",
    "apply_gas_buffer",
]
