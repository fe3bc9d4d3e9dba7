"""
Position parameter definitions
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MintParams:
    """
    Arguments of the position manager's mint() call

    Attributes:
        token0: Lower-sorting token address
        token1: Higher-sorting token address
        fee: Fee tier in hundredths of a bip (500 = 0.05%)
        tick_lower: Lower tick bound
        tick_upper: Upper tick bound
        amount0_desired: token0 amount in base units
        amount1_desired: token1 amount in base units
        amount0_min: Minimum token0 accepted
        amount1_min: Minimum token1 accepted
        recipient: Position NFT recipient
        deadline: Unix timestamp after which the mint reverts
    """
    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    amount0_desired: int
    amount1_desired: int
    amount0_min: int
    amount1_min: int
    recipient: str
    deadline: int

    def as_tuple(self) -> tuple:
        """Field values in ABI struct order"""
        return (
            self.token0,
            self.token1,
            self.fee,
            self.tick_lower,
            self.tick_upper,
            self.amount0_desired,
            self.amount1_desired,
            self.amount0_min,
            self.amount1_min,
            self.recipient,
            self.deadline,
        )
