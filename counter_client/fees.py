"""Gas price ceiling derived from the latest block's base fee."""

import logging
import time
from typing import Callable

from .errors import InvalidInputError

logger = logging.getLogger(__name__)


def estimate_max_fee(base_fee: int, multiplier: int) -> int:
    if base_fee < 0:
        raise InvalidInputError("Base fee must be non-negative.")
    if base_fee == 0:
        raise InvalidInputError("Base fee is zero; the chain has no usable block yet.")
    if multiplier <= 0:
        raise InvalidInputError("Fee multiplier must be positive.")
    return base_fee * multiplier


def fetch_max_fee(
    rpc,
    multiplier: int,
    attempts: int = 5,
    poll_interval: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Read the latest block until its base fee is usable, then apply ``multiplier``.

    The last ``InvalidInputError`` is re-raised once ``attempts`` blocks have
    been read without a usable base fee.
    """
    if attempts <= 0:
        raise InvalidInputError("attempts must be positive.")

    attempt = 1
    while True:
        block = rpc.get_latest_block()
        try:
            max_fee = estimate_max_fee(block.base_fee_per_gas, multiplier)
        except InvalidInputError as exc:
            if attempt >= attempts:
                raise
            logger.warning(
                "fee estimate unavailable block=%s attempt=%s/%s reason=%s",
                block.number, attempt, attempts, exc,
            )
            attempt += 1
            sleep(poll_interval)
            continue
        logger.info(
            "fee estimate block=%s base_fee=%s multiplier=%s max_fee=%s",
            block.number, block.base_fee_per_gas, multiplier, max_fee,
        )
        return max_fee
