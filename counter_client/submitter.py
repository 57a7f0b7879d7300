"""Sequential transaction submission with per-attempt outcomes."""

import logging
import time
from typing import Callable, Iterable, List, Tuple

from .errors import CallError, InvalidInputError, ReadError
from .keystore import KeyStore
from .models import Confirmation, Failure, Success, SubmissionOutcome, TransactionRequest
from .rpc import RpcClient

logger = logging.getLogger(__name__)


class TransactionSubmitter:
    """Signs and sends requests from one key store, one at a time.

    Every send goes through this object so the key store's nonce counter
    only ever advances in submission order.
    """

    def __init__(self, rpc: RpcClient, keystore: KeyStore, chain_id: int) -> None:
        self._rpc = rpc
        self._keystore = keystore
        self._chain_id = chain_id

    def sync_nonce(self) -> int:
        nonce = self._rpc.get_transaction_count(self._keystore.address(), "pending")
        self._keystore.sync_nonce(nonce)
        logger.info("nonce synced address=%s nonce=%s", self._keystore.address(), nonce)
        return nonce

    def submit_batch(
        self,
        count: int,
        build_call: Callable[[], TransactionRequest],
        fee: int,
        gas_limit: int,
    ) -> Tuple[SubmissionOutcome, ...]:
        if count < 0:
            raise InvalidInputError("count must be non-negative.")

        outcomes: List[SubmissionOutcome] = []
        for index in range(count):
            outcomes.append(self._submit_one(index, build_call, fee, gas_limit))

        sent = sum(1 for outcome in outcomes if outcome.ok)
        logger.info("batch finished sent=%s failed=%s", sent, count - sent)
        return tuple(outcomes)

    def confirm(
        self,
        outcomes: Iterable[SubmissionOutcome],
        timeout: float,
        poll_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> Tuple[Confirmation, ...]:
        """Poll receipts for every accepted tx; ``timeout`` bounds the whole batch."""
        deadline = clock() + timeout
        confirmations = []
        for outcome in outcomes:
            if not outcome.ok:
                continue
            remaining = deadline - clock()
            if remaining <= 0:
                logger.warning("idx=%s tx_hash=%s no receipt before deadline", outcome.index, outcome.tx_hash)
                confirmations.append(Confirmation(tx_hash=outcome.tx_hash, status=None))
                continue
            try:
                confirmation = self._rpc.wait_for_receipt(outcome.tx_hash, remaining, poll_interval)
            except ReadError as exc:
                logger.warning("idx=%s tx_hash=%s receipt poll failed: %s", outcome.index, outcome.tx_hash, exc)
                confirmations.append(Confirmation(tx_hash=outcome.tx_hash, status=None))
                continue
            if confirmation.status is None:
                logger.warning("idx=%s tx_hash=%s no receipt after %ss", outcome.index, outcome.tx_hash, timeout)
            elif not confirmation.confirmed:
                logger.warning(
                    "idx=%s tx_hash=%s reverted block=%s",
                    outcome.index, outcome.tx_hash, confirmation.block_number,
                )
            else:
                logger.info(
                    "idx=%s tx_hash=%s mined block=%s",
                    outcome.index, outcome.tx_hash, confirmation.block_number,
                )
            confirmations.append(confirmation)
        return tuple(confirmations)

    def _submit_one(
        self,
        index: int,
        build_call: Callable[[], TransactionRequest],
        fee: int,
        gas_limit: int,
    ) -> SubmissionOutcome:
        # A broken call builder fails only its own attempt.
        try:
            request = build_call().with_fee(gas_limit, fee)
        except Exception as exc:
            logger.warning("idx=%s building call failed: %s", index, exc)
            return Failure(index=index, reason=f"building call failed: {exc}")

        reserved = None
        if request.nonce is None:
            reserved = self._keystore.reserve_nonce()
            request = request.with_nonce(reserved)

        try:
            signed = self._keystore.sign(request, self._chain_id)
            tx_hash = self._rpc.send_transaction(signed)
        except CallError as exc:
            logger.warning("idx=%s nonce=%s tx failed with err: %s", index, request.nonce, exc)
            if reserved is not None:
                self._recover_nonce(reserved)
            return Failure(index=index, reason=str(exc))

        logger.info("idx=%s nonce=%s tx_hash=%s", index, request.nonce, tx_hash)
        return Success(index=index, tx_hash=tx_hash)

    def _recover_nonce(self, reserved: int) -> None:
        try:
            self.sync_nonce()
        except ReadError as exc:
            rolled_back = self._keystore.rollback_nonce(reserved)
            logger.warning("nonce resync failed (%s); rolled_back=%s", exc, rolled_back)
