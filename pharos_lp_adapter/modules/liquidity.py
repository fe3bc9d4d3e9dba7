"""
Liquidity Module

Builds and submits full-range liquidity positions on the Pharos position
manager: resolves symbols, orders the pair, secures approvals, batches
mint + refundETH into one multicall, pads gas and waits for confirmation.
"""

import logging
import time
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from web3 import AsyncWeb3

from ..config import config as global_config, LiquidityConfig, TxConfig
from ..errors import GasEstimationError, InvalidTokenError
from ..infra.evm_signer import EVMSigner
from ..infra.gateway import ChainGateway
from ..infra.retry import CorrelationContext, get_actor_logger
from ..protocols.router import (
    RouterEncoder,
    FEE_TIER,
    FULL_RANGE_TICK_LOWER,
    FULL_RANGE_TICK_UPPER,
)
from ..types import (
    CanonicalPair,
    MintParams,
    TokenRegistry,
    canonical_order,
    to_base_units,
)
from ..types.tokens import Amount
from .approval import ApprovalManager
from .confirmation import ConfirmationTracker


def apply_gas_buffer(gas: int, multiplier: float) -> int:
    """Scale a gas limit by a safety multiplier (exact decimal math)"""
    return int(Decimal(int(gas)) * Decimal(str(multiplier)))


class LiquidityModule:
    """
    Liquidity Position Builder

    One call to add_liquidity() runs the whole flow sequentially for one
    signer. No state is kept between calls; registry, gateway and signer
    are shared read-only.

    Usage:
        module = LiquidityModule(gateway, signer, registry)
        tx_hash = await module.add_liquidity("PHRS", "USDT", "1.5", "3.0")
        if tx_hash is None:
            ...  # not added, or outcome unknown
    """

    def __init__(
        self,
        gateway: ChainGateway,
        signer: EVMSigner,
        registry: TokenRegistry,
        tracker: Optional[ConfirmationTracker] = None,
        approvals: Optional[ApprovalManager] = None,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
        lp_config: Optional[LiquidityConfig] = None,
        tx_config: Optional[TxConfig] = None,
    ):
        """
        Args:
            gateway: Chain gateway
            signer: Signing identity (also the position recipient)
            registry: Token and router addresses
            tracker: Confirmation tracker (built on gateway if None)
            approvals: Approval manager (built on gateway if None)
            logger: Actor-tagged logger (tagged with the signer's name if None)
            lp_config: Liquidity settings (uses global config if None)
            tx_config: Transaction settings (uses global config if None)
        """
        self._gateway = gateway
        self._signer = signer
        self._registry = registry
        self._lp_config = lp_config or global_config.liquidity
        self._tx_config = tx_config or global_config.tx
        self._log = logger or get_actor_logger(__name__, signer.name)
        self._tracker = tracker or ConfirmationTracker(gateway, logger=self._log, tx_config=self._tx_config)
        self._approvals = approvals or ApprovalManager(
            gateway,
            signer,
            self._tracker,
            logger=self._log,
            lp_config=self._lp_config,
        )

    @property
    def owner(self) -> str:
        """Signer wallet address"""
        return self._signer.address

    @property
    def router(self) -> str:
        return self._registry.router

    async def add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a: Amount,
        amount_b: Amount,
    ) -> Optional[str]:
        """
        Add full-range liquidity for a token pair

        Args:
            token_a: Symbol of the first token (PHRS, USDT, USDC)
            token_b: Symbol of the second token
            amount_a: Human-readable amount of token_a (e.g. "1.5")
            amount_b: Human-readable amount of token_b

        Returns:
            Transaction hash when the mint is confirmed, otherwise None.
            Never raises.
        """
        with CorrelationContext("lp"):
            return await self._add_liquidity(token_a, token_b, amount_a, amount_b)

    async def _add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a: Amount,
        amount_b: Amount,
    ) -> Optional[str]:
        try:
            try:
                address_a = self._registry.resolve(token_a)
                address_b = self._registry.resolve(token_b)
            except InvalidTokenError as e:
                self._log.error(f"Invalid token pair: {token_a}-{token_b} ({e.message})")
                return None

            pair = canonical_order(address_a, address_b)
            raw_a = to_base_units(amount_a, self._registry.decimals)
            raw_b = to_base_units(amount_b, self._registry.decimals)
            amount0, amount1 = pair.assign(address_a, raw_a, raw_b)

            approved0 = await self._approvals.ensure_approval(pair.token0, self.router, amount0)
            approved1 = approved0 and await self._approvals.ensure_approval(pair.token1, self.router, amount1)
            if not (approved0 and approved1):
                self._log.error(f"Token approval failed for {token_a}-{token_b}")
                return None

            params = self.build_mint_params(pair, amount0, amount1)
            tx_request = self.build_transaction(params)
            tx_request["gas"] = await self._gas_limit(tx_request)

            self._log.info(f"Sending liquidity transaction for {amount_a} {token_a} + {amount_b} {token_b}")
            tx_hash = await self._gateway.broadcast(tx_request, self._signer)
            self._log.info(f"Transaction sent: {tx_hash}")

            outcome = await self._tracker.track(
                tx_hash,
                self._tx_config.required_confirmations,
            )
            if not outcome.is_confirmed:
                if outcome.is_reverted:
                    self._log.error(f"Failed to confirm liquidity transaction: {tx_hash} (reverted on-chain)")
                elif outcome.is_unknown:
                    self._log.error(f"Failed to confirm liquidity transaction: {tx_hash} (outcome unknown, may still land)")
                else:
                    self._log.error(f"Failed to confirm liquidity transaction: {tx_hash}")
                return None

            self._log.info(f"Liquidity added successfully: {tx_hash}")
            return tx_hash

        except Exception as e:
            self._log.error(f"Error adding liquidity: {e}")
            return None

    def build_mint_params(self, pair: CanonicalPair, amount0: int, amount1: int) -> MintParams:
        """Full-range mint parameters with zero minimums and a fresh deadline"""
        return MintParams(
            token0=pair.token0,
            token1=pair.token1,
            fee=FEE_TIER,
            tick_lower=FULL_RANGE_TICK_LOWER,
            tick_upper=FULL_RANGE_TICK_UPPER,
            amount0_desired=amount0,
            amount1_desired=amount1,
            amount0_min=0,
            amount1_min=0,
            recipient=self._signer.address,
            deadline=int(time.time()) + self._lp_config.deadline_seconds,
        )

    def native_value(self, params: MintParams) -> int:
        """Native value to attach: the WPHRS leg's amount, or 0"""
        if self._registry.is_wrapped_native(params.token0):
            return params.amount0_desired
        if self._registry.is_wrapped_native(params.token1):
            return params.amount1_desired
        return 0

    def build_transaction(self, params: MintParams) -> Dict[str, Any]:
        """multicall([mint, refundETH]) request addressed to the router"""
        return {
            "from": self._signer.address,
            "to": AsyncWeb3.to_checksum_address(self.router),
            "data": AsyncWeb3.to_hex(RouterEncoder.encode_mint_with_refund(params)),
            "value": self.native_value(params),
        }

    async def _gas_limit(self, tx_request: Dict[str, Any]) -> int:
        try:
            estimated = await self._gateway.estimate_gas(tx_request)
        except Exception as e:
            error = e if isinstance(e, GasEstimationError) else GasEstimationError.from_error(e)
            estimated = self._lp_config.default_gas_limit
            self._log.warning(f"{error.message}, falling back to {estimated}")
        return apply_gas_buffer(estimated, self._lp_config.gas_limit_multiplier)
