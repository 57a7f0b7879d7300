r"""
This script sends a batch of inc() transactions to a deployed Lock contract
and reports the contract's counter before and after the batch.
It reads the private key, RPC URL and contract address from the environment
(or a .env file), signs every transaction locally, and logs one line per
submission.

Setup:
1. Create a virtual environment:
   python -m venv venv

2. Activate the virtual environment:
   - On Windows: venv\Scripts\activate
   - On macOS/Linux: source venv/bin/activate

3. Install the package:
   pip install -e .

4. Create a .env file in the working directory with the following content:
   PRIVATE_KEY=<your_private_key>
   L2_RPC_URL=<l2_rpc_url>
   CONCTRACT_ADDR=<lock_contract_address>

5. Run the script:
   counter-client [--count N] [--fee-multiplier M] [--confirm-mode receipts|sleep]

CLI Parameters:
--rpc: RPC URL for the L2 network (overrides L2_RPC_URL)
--contract: Lock contract address (overrides CONCTRACT_ADDR)
--count: Number of inc() transactions to send
--fee-multiplier: Multiplier applied to the latest base fee
--gas-limit: Gas limit per transaction
--confirm-mode: Poll receipts, or sleep --settle-seconds before the final read
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from .bindings import LockContract
from .config import Settings, load_settings
from .errors import ConfigError, CounterClientError, InvalidInputError
from .fees import fetch_max_fee
from .keystore import KeyStore
from .log import LOGGER_NAME, init_logging
from .models import Confirmation, SubmissionOutcome
from .observer import CounterObserver
from .rpc import RpcClient
from .submitter import TransactionSubmitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunReport:
    counter_before: int
    counter_after: int
    outcomes: Tuple[SubmissionOutcome, ...]
    confirmations: Tuple[Confirmation, ...] = ()

    @property
    def delta(self) -> int:
        return self.counter_after - self.counter_before

    @property
    def sent(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)


def run(
    settings: Settings,
    rpc: Optional[RpcClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunReport:
    try:
        keystore = KeyStore.from_private_key(settings.private_key)
    except InvalidInputError as exc:
        raise ConfigError(f"PRIVATE_KEY is unusable: {exc}") from None

    rpc = rpc or RpcClient(settings.rpc_url)
    rpc.connect()
    chain_id = rpc.get_chain_id()
    logger.info("Using RPC URL: %s chain_id=%s", rpc.url, chain_id)
    logger.info("Account address: %s", keystore.address())
    logger.info("Contract address: %s", settings.contract_address)

    contract = LockContract(rpc.w3, settings.contract_address)
    submitter = TransactionSubmitter(rpc, keystore, chain_id)
    submitter.sync_nonce()

    observer = CounterObserver(rpc, contract)
    before = observer.record_before()

    max_fee = fetch_max_fee(rpc, settings.fee_multiplier, sleep=sleep)
    outcomes = submitter.submit_batch(
        settings.tx_count, contract.inc_request, max_fee, settings.gas_limit
    )

    confirmations: Tuple[Confirmation, ...] = ()
    if not any(outcome.ok for outcome in outcomes):
        logger.warning("no transaction was accepted; skipping confirmation wait")
    elif settings.confirm_mode == "receipts":
        confirmations = submitter.confirm(outcomes, settings.confirm_timeout)
    else:
        logger.info("waiting %ss for pending transactions", settings.settle_seconds)
        sleep(settings.settle_seconds)

    after = observer.record_after()
    report = RunReport(
        counter_before=before,
        counter_after=after,
        outcomes=outcomes,
        confirmations=confirmations,
    )
    logger.info(
        "counter delta=%s sent=%s failed=%s",
        report.delta, report.sent, len(outcomes) - report.sent,
    )
    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    with init_logging():
        try:
            settings = load_settings(argv)
        except ConfigError as exc:
            logger.error("configuration error: %s", exc)
            return 2
        logging.getLogger(LOGGER_NAME).setLevel(settings.log_level)

        try:
            run(settings)
        except ConfigError as exc:
            logger.error("configuration error: %s", exc)
            return 2
        except CounterClientError as exc:
            logger.error("%s: %s", type(exc).__name__, exc)
            return 1
    return 0
