"""
Transaction Confirmation Tracker

Polls for a broadcast transaction's receipt with bounded retries and
reduces the result to one of CONFIRMED, REVERTED, FAILED or UNCONFIRMED.

State machine:
    Pending -> {Polling -> Pending}* -> {Confirmed | Reverted | Fatal | Exhausted}
"""

import asyncio
import logging
from typing import Any, Mapping, Optional, Union

from ..config import config as global_config, TxConfig
from ..errors import TransactionError
from ..infra.gateway import ChainGateway
from ..infra.retry import poll_from_error
from ..types import ConfirmationOutcome, ConfirmationStatus, PollKind


class ConfirmationTracker:
    """
    Waits for on-chain finality of a submitted transaction

    A reverted receipt is terminal: the revert is deterministic, so it is
    reported immediately instead of being polled again.
    """

    def __init__(
        self,
        gateway: ChainGateway,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
        tx_config: Optional[TxConfig] = None,
    ):
        """
        Args:
            gateway: Chain gateway used for receipt polls
            logger: Actor-tagged logger (module logger if None)
            tx_config: Timeout / retry settings (uses global config if None)
        """
        self._gateway = gateway
        self._log = logger or logging.getLogger(__name__)
        self._tx_config = tx_config or global_config.tx

    async def track(
        self,
        tx_hash: str,
        required_confirmations: int = 1,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ) -> ConfirmationOutcome:
        """
        Poll until the transaction reaches a terminal state

        Args:
            tx_hash: Transaction hash
            required_confirmations: Confirmation depth to wait for
            max_attempts: Poll attempts before giving up (default from config, 5)
            retry_delay: Fixed seconds between attempts (default from config, 5.0)

        Returns:
            ConfirmationOutcome
        """
        max_attempts = max_attempts if max_attempts is not None else self._tx_config.max_attempts
        retry_delay = retry_delay if retry_delay is not None else self._tx_config.retry_delay
        timeout = self._tx_config.confirmation_timeout
        last_error: Optional[str] = None

        for attempt in range(1, max_attempts + 1):
            try:
                poll = await self._gateway.poll_receipt(tx_hash, required_confirmations, timeout)
            except Exception as e:
                poll = poll_from_error(e)

            if poll.kind == PollKind.RECEIPT:
                if poll.succeeded:
                    return ConfirmationOutcome(
                        status=ConfirmationStatus.CONFIRMED,
                        tx_hash=tx_hash,
                        receipt=poll.receipt,
                        attempts=attempt,
                    )
                error = TransactionError.reverted(tx_hash)
                self._log.error(f"Transaction reverted on-chain: {error.message}")
                return ConfirmationOutcome(
                    status=ConfirmationStatus.REVERTED,
                    tx_hash=tx_hash,
                    receipt=poll.receipt,
                    error=error.message,
                    attempts=attempt,
                )

            if poll.kind == PollKind.FATAL:
                self._log.error(f"Transaction error: {poll.error}")
                return ConfirmationOutcome(
                    status=ConfirmationStatus.FAILED,
                    tx_hash=tx_hash,
                    error=poll.error,
                    attempts=attempt,
                )

            last_error = poll.error
            self._log.warning(f"Retry {attempt}/{max_attempts} for tx {tx_hash}: {poll.error}")
            if attempt < max_attempts:
                await asyncio.sleep(retry_delay)

        self._log.error(f"Max retries reached for tx {tx_hash}")
        error_msg = TransactionError.unconfirmed(tx_hash, max_attempts).message
        if last_error:
            error_msg += f". Last error: {last_error}"
        return ConfirmationOutcome(
            status=ConfirmationStatus.UNCONFIRMED,
            tx_hash=tx_hash,
            error=error_msg,
            attempts=max_attempts,
        )

    async def await_confirmation(
        self,
        tx_hash: str,
        required_confirmations: int = 1,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ) -> Optional[Mapping[str, Any]]:
        """
        Receipt of a successful transaction, or None

        None means reverted, fatally failed, or outcome unknown; the
        transaction may still land later in the last case.
        """
        outcome = await self.track(tx_hash, required_confirmations, max_attempts, retry_delay)
        return outcome.receipt if outcome.is_confirmed else None
