"""
PharosLPClient - Unified entry point for liquidity provisioning

Wires a signer, an AsyncWeb3 gateway and the confirmation / approval /
liquidity modules from configuration.
"""

from __future__ import annotations

import os
from typing import Optional

from .config import Config, config as global_config
from .errors import ConfigurationError
from .infra import (
    ChainGateway,
    EVMSigner,
    Web3ChainGateway,
    create_evm_signer,
    create_web3,
    get_actor_logger,
)
from .modules import ApprovalManager, ConfirmationTracker, LiquidityModule
from .types import TokenRegistry
from .types.tokens import Amount


class PharosLPClient:
    """
    Pharos liquidity client

    Exposes a single operation, add_liquidity(); the collaborators are
    available read-only for inspection.

    Usage:
        client = PharosLPClient.from_env()
        tx_hash = await client.add_liquidity("PHRS", "USDT", "0.1", "2.5")

        # Or with an explicit signer and gateway
        client = PharosLPClient(signer, gateway=my_gateway)
    """

    def __init__(
        self,
        signer: EVMSigner,
        gateway: Optional[ChainGateway] = None,
        registry: Optional[TokenRegistry] = None,
        config: Optional[Config] = None,
    ):
        """
        Initialize PharosLPClient

        Args:
            signer: Signing identity
            gateway: Chain gateway (AsyncWeb3 gateway from config.rpc if None)
            registry: Token registry (from config.tokens if None)
            config: Configuration (global config if None)

        Raises:
            ConfigurationError: If no gateway is given and no RPC URL is
                configured, or a registry address is malformed
        """
        self._config = config or global_config
        self._signer = signer

        if gateway is None:
            if not self._config.rpc.url:
                raise ConfigurationError.missing("PHAROS_RPC_URL")
            web3 = create_web3(
                self._config.rpc.url,
                timeout=self._config.rpc.timeout_seconds,
                poa=self._config.rpc.poa,
            )
            gateway = Web3ChainGateway(web3, chain_id=self._config.rpc.chain_id, tx_config=self._config.tx)
        self._gateway = gateway
        self._registry = registry or TokenRegistry.from_config(self._config.tokens)

        self._logger = get_actor_logger("pharos_lp_adapter", signer.name)
        self._tracker = ConfirmationTracker(self._gateway, logger=self._logger, tx_config=self._config.tx)
        self._approvals = ApprovalManager(
            self._gateway,
            signer,
            self._tracker,
            logger=self._logger,
            lp_config=self._config.liquidity,
        )
        self._lp = LiquidityModule(
            self._gateway,
            signer,
            self._registry,
            tracker=self._tracker,
            approvals=self._approvals,
            logger=self._logger,
            lp_config=self._config.liquidity,
            tx_config=self._config.tx,
        )

    @classmethod
    def from_env(cls, config: Optional[Config] = None) -> "PharosLPClient":
        """
        Build a client from environment configuration

        The private key is read from the variable named by
        config.signer.private_key_env, or a keystore when
        EVM_KEYSTORE_PATH and EVM_KEYSTORE_PASSWORD are set.

        Raises:
            SignerError: If no key is configured
        """
        config = config or global_config
        signer = create_evm_signer(
            keystore_path=config.signer.keystore_path or None,
            keystore_password=os.getenv("EVM_KEYSTORE_PASSWORD"),
            env_var=config.signer.private_key_env,
            name=config.signer.wallet_name,
        )
        return cls(signer, config=config)

    @property
    def signer(self) -> EVMSigner:
        return self._signer

    @property
    def gateway(self) -> ChainGateway:
        return self._gateway

    @property
    def registry(self) -> TokenRegistry:
        return self._registry

    @property
    def address(self) -> str:
        """Owner wallet address"""
        return self._signer.address

    async def add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a: Amount,
        amount_b: Amount,
    ) -> Optional[str]:
        """
        Add full-range liquidity for a token pair

        Returns:
            Transaction hash once confirmed, otherwise None
        """
        return await self._lp.add_liquidity(token_a, token_b, amount_a, amount_b)

    def __repr__(self) -> str:
        return f"PharosLPClient(address={self.address[:10]}...)"
