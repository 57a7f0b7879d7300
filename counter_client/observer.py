"""Read-only view of the contract's counter."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


def read_counter(rpc, contract) -> int:
    return int(rpc.call(contract, "counter"))


class CounterObserver:
    def __init__(self, rpc, contract) -> None:
        self._rpc = rpc
        self._contract = contract
        self.before: Optional[int] = None
        self.after: Optional[int] = None

    def record_before(self) -> int:
        self.before = read_counter(self._rpc, self._contract)
        logger.info("counter start value: %s", self.before)
        return self.before

    def record_after(self) -> int:
        self.after = read_counter(self._rpc, self._contract)
        logger.info("counter finish value: %s", self.after)
        return self.after

    @property
    def delta(self) -> Optional[int]:
        if self.before is None or self.after is None:
            return None
        return self.after - self.before
