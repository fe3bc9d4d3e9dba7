"""
Pharos Token Registry

Maps the fixed set of tradable symbols to canonical on-chain addresses and
provides the canonical (token0, token1) ordering required by the position
manager.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Tuple, Union

from web3 import Web3

from ..errors import ConfigurationError, InvalidTokenError

# Every token in scope uses the same exponent
DEFAULT_DECIMALS = 18

MAX_UINT256 = 2**256 - 1

Amount = Union[str, int, Decimal]


class PharosToken(Enum):
    """Supported token symbols"""
    PHRS = "PHRS"   # Native, deposited as WPHRS
    USDT = "USDT"
    USDC = "USDC"

    @classmethod
    def parse(cls, symbol: str) -> "PharosToken":
        """Parse a symbol case-insensitively"""
        try:
            return cls(str(symbol).strip().upper())
        except ValueError:
            raise InvalidTokenError.unknown_symbol(symbol) from None


def address_value(address: str) -> int:
    """Numeric value of a hex address"""
    return int(address, 16)


@dataclass(frozen=True)
class CanonicalPair:
    """
    Token pair ordered by address value (token0 < token1)

    Always build through canonical_order(); never assume input order.
    """
    token0: str
    token1: str

    def __post_init__(self):
        if address_value(self.token0) >= address_value(self.token1):
            raise ValueError(f"token0 {self.token0} must sort below token1 {self.token1}")

    def assign(self, token_a: str, amount_a: int, amount_b: int) -> Tuple[int, int]:
        """
        Map amounts given in caller order to (amount0, amount1)

        Args:
            token_a: Address the caller passed first
            amount_a: Amount for token_a
            amount_b: Amount for the other token

        Returns:
            (amount0_desired, amount1_desired)
        """
        if token_a.lower() == self.token0.lower():
            return amount_a, amount_b
        return amount_b, amount_a


def canonical_order(token_a: str, token_b: str) -> CanonicalPair:
    """
    Order two token addresses the way the AMM does

    Args:
        token_a: First token address
        token_b: Second token address

    Returns:
        CanonicalPair with the numerically lower address as token0

    Raises:
        InvalidTokenError: If both addresses are the same token
    """
    if address_value(token_a) == address_value(token_b):
        raise InvalidTokenError(f"Cannot pair a token with itself: {token_a}")
    if address_value(token_a) < address_value(token_b):
        return CanonicalPair(token_a, token_b)
    return CanonicalPair(token_b, token_a)


def to_base_units(amount: Amount, decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Convert a human-readable amount to base units

    Args:
        amount: Decimal string (e.g. "1.5"), int or Decimal
        decimals: Token decimals

    Returns:
        Integer amount in smallest units

    Raises:
        InvalidTokenError: On non-numeric, negative, over-precise or
            out-of-range (above uint256) amounts
    """
    if isinstance(amount, float):
        amount = repr(amount)
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise InvalidTokenError.invalid_amount(amount, "not a number") from None

    if not value.is_finite():
        raise InvalidTokenError.invalid_amount(amount, "not a finite number")
    if value < 0:
        raise InvalidTokenError.invalid_amount(amount, "negative")

    with localcontext() as ctx:
        ctx.prec = 100
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise InvalidTokenError.invalid_amount(amount, f"more than {decimals} decimals")
        if scaled > MAX_UINT256:
            raise InvalidTokenError.invalid_amount(amount, "exceeds uint256")
        return int(scaled)


@dataclass(frozen=True)
class TokenRegistry:
    """
    Canonical addresses for the supported tokens and the router

    Immutable; safe to share between concurrent invocations.
    """
    wphrs: str
    usdt: str
    usdc: str
    router: str
    decimals: int = DEFAULT_DECIMALS

    def __post_init__(self):
        for name in ("wphrs", "usdt", "usdc", "router"):
            value = getattr(self, name)
            if not value:
                raise ConfigurationError.missing(f"{name} address")
            try:
                object.__setattr__(self, name, Web3.to_checksum_address(value))
            except (TypeError, ValueError) as e:
                raise ConfigurationError.invalid(f"{name} address", str(e)) from e

    @classmethod
    def from_config(cls, token_config) -> "TokenRegistry":
        return cls(
            wphrs=token_config.wphrs,
            usdt=token_config.usdt,
            usdc=token_config.usdc,
            router=token_config.router,
            decimals=token_config.decimals,
        )

    def resolve(self, symbol: str) -> str:
        """
        Resolve a symbol to its canonical address

        Raises:
            InvalidTokenError: If the symbol is not supported
        """
        token = PharosToken.parse(symbol)
        return {
            PharosToken.PHRS: self.wphrs,
            PharosToken.USDT: self.usdt,
            PharosToken.USDC: self.usdc,
        }[token]

    def is_wrapped_native(self, address: str) -> bool:
        return address.lower() == self.wphrs.lower()
