"""
EVM Transaction Signer using eth-account

Provides local signing for Pharos transactions and the AsyncWeb3 factory.
Only supports local private key signing (no remote signer).
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Dict, Any, Tuple

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3
from web3.middleware import ExtraDataToPOAMiddleware

from ..errors import SignerError

logger = logging.getLogger(__name__)


class EVMSigner:
    """
    Local EVM signer

    Holds a LocalAccount and signs transaction dicts. Never mutated after
    construction, so one instance can back many concurrent invocations.

    Usage:
        # From private key
        signer = EVMSigner.from_private_key("0x...")

        # From environment variable
        signer = EVMSigner.from_env()

        raw_tx, tx_hash = signer.sign_transaction(tx_dict)
    """

    def __init__(self, account: LocalAccount, name: Optional[str] = None):
        """
        Initialize with eth_account LocalAccount

        Args:
            account: LocalAccount from eth_account
            name: Label used in log lines (defaults to a short address)
        """
        self._account = account
        self._name = name or f"{account.address[:6]}...{account.address[-4:]}"

    @property
    def address(self) -> str:
        """Get wallet address (checksummed)"""
        return self._account.address

    @property
    def name(self) -> str:
        """Wallet label for logs"""
        return self._name

    def sign_transaction(self, tx_dict: Dict[str, Any]) -> Tuple[bytes, str]:
        """
        Sign a transaction

        Args:
            tx_dict: Transaction dictionary with to, data, value, gas, fee fields, nonce, chainId

        Returns:
            (raw_tx_bytes, tx_hash_hex)

        Raises:
            SignerError: If the account rejects the transaction
        """
        try:
            signed = self._account.sign_transaction(tx_dict)
        except Exception as e:
            raise SignerError.failed(str(e)) from e
        return signed.raw_transaction, AsyncWeb3.to_hex(signed.hash)

    @classmethod
    def from_private_key(cls, private_key: str, name: Optional[str] = None) -> "EVMSigner":
        """
        Create signer from private key

        Args:
            private_key: Hex-encoded private key (with or without 0x prefix)
            name: Optional wallet label

        Returns:
            EVMSigner instance
        """
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key

        account = Account.from_key(private_key)
        return cls(account, name=name)

    @classmethod
    def from_env(cls, env_var: str = "EVM_PRIVATE_KEY", name: Optional[str] = None) -> "EVMSigner":
        """
        Create signer from environment variable

        Raises:
            SignerError: If environment variable is not set
        """
        private_key = os.getenv(env_var, "")
        if not private_key:
            raise SignerError.not_configured()

        return cls.from_private_key(private_key, name=name)

    @classmethod
    def from_keystore(
        cls,
        keystore_path: str,
        password: str,
        name: Optional[str] = None,
    ) -> "EVMSigner":
        """
        Create signer from encrypted keystore file

        Args:
            keystore_path: Path to keystore JSON file
            password: Password to decrypt keystore
            name: Optional wallet label
        """
        with open(keystore_path, "r") as f:
            keystore = f.read()

        private_key = Account.decrypt(keystore, password)
        account = Account.from_key(private_key)
        return cls(account, name=name)

    def __repr__(self) -> str:
        return f"EVMSigner(address={self.address})"


def create_web3(
    rpc_url: str,
    timeout: float = 30,
    poa: bool = False,
) -> AsyncWeb3:
    """
    Create AsyncWeb3 instance for the chain

    Args:
        rpc_url: RPC endpoint URL
        timeout: Request timeout in seconds
        poa: Inject the extraData middleware for PoA-style headers

    Returns:
        Configured AsyncWeb3 instance
    """
    web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
        rpc_url,
        request_kwargs={"timeout": timeout},
    ))

    if poa:
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    logger.debug(f"Created AsyncWeb3 for {rpc_url} (poa={poa})")
    return web3


def create_evm_signer(
    private_key: Optional[str] = None,
    keystore_path: Optional[str] = None,
    keystore_password: Optional[str] = None,
    env_var: str = "EVM_PRIVATE_KEY",
    name: Optional[str] = None,
) -> EVMSigner:
    """
    Create EVM signer based on configuration

    Priority:
    1. private_key: Use provided private key
    2. keystore_path + keystore_password: Load from keystore file
    3. env_var environment variable

    Raises:
        SignerError: If no valid signer configuration found
    """
    if private_key is not None:
        return EVMSigner.from_private_key(private_key, name=name)

    if keystore_path and keystore_password is not None:
        return EVMSigner.from_keystore(keystore_path, keystore_password, name=name)

    env_key = os.getenv(env_var, "")
    if env_key:
        return EVMSigner.from_private_key(env_key, name=name)

    raise SignerError.not_configured()
