"""
Approval Manager

Ensures the signer's ERC20 allowance for a spender covers a required
amount before a transfer-dependent call.
"""

import logging
from typing import Optional, Union

from web3 import AsyncWeb3

from ..config import config as global_config, LiquidityConfig
from ..errors import ApprovalError, GasEstimationError
from ..infra.evm_signer import EVMSigner
from ..infra.gateway import ChainGateway
from ..protocols.router import MAX_UINT256, encode_approve
from .confirmation import ConfirmationTracker


class ApprovalManager:
    """
    Idempotent allowance assurance

    Approves the maximum amount when the current allowance is short, so
    later calls for the same token and spender are no-ops.
    """

    def __init__(
        self,
        gateway: ChainGateway,
        signer: EVMSigner,
        tracker: ConfirmationTracker,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
        lp_config: Optional[LiquidityConfig] = None,
    ):
        self._gateway = gateway
        self._signer = signer
        self._tracker = tracker
        self._log = logger or logging.getLogger(__name__)
        self._lp_config = lp_config or global_config.liquidity

    async def ensure_approval(self, token: str, spender: str, required_amount: int) -> bool:
        """
        Make sure spender may transfer at least required_amount of token

        Args:
            token: ERC20 token address
            spender: Address that will pull the tokens
            required_amount: Amount in base units

        Returns:
            True if the allowance is (now) sufficient; False on any failure.
            Callers must not proceed with the dependent transfer on False.
        """
        try:
            allowance = await self._gateway.read_allowance(self._signer.address, spender, token)
            if allowance >= required_amount:
                self._log.info(f"Token already approved for {spender}")
                return True

            self._log.info(f"Approving token {token} for {spender}")
            tx_request = {
                "to": AsyncWeb3.to_checksum_address(token),
                "data": AsyncWeb3.to_hex(encode_approve(spender, MAX_UINT256)),
                "value": 0,
                "from": self._signer.address,
            }
            tx_request["gas"] = await self._approval_gas(tx_request)

            tx_hash = await self._gateway.broadcast(tx_request, self._signer)
            receipt = await self._tracker.await_confirmation(tx_hash, 1)
            if receipt is None:
                raise ApprovalError(
                    f"Approval transaction {tx_hash} was not confirmed",
                    token=token,
                    spender=spender,
                )

            self._log.info(f"Approval successful for {token}")
            return True

        except Exception as e:
            self._log.error(f"Approval failed: {e}")
            return False

    async def _approval_gas(self, tx_request: dict) -> int:
        try:
            return await self._gateway.estimate_gas(tx_request)
        except Exception as e:
            error = e if isinstance(e, GasEstimationError) else GasEstimationError.from_error(e)
            fallback = self._lp_config.approval_gas_limit
            self._log.warning(f"{error.message}, using {fallback}")
            return fallback
