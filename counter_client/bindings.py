"""Typed access to the Lock contract, built from its JSON ABI by web3.py."""

import json
from functools import lru_cache
from importlib.resources import files
from typing import Any, List, Mapping, Union

from web3 import Web3

from .models import Address, TransactionRequest, Withdrawal


@lru_cache(maxsize=None)
def _load_abi_text(name: str) -> str:
    return files("counter_client").joinpath("abi").joinpath(f"{name}.json").read_text()


def load_abi(name: str) -> List[dict]:
    return json.loads(_load_abi_text(name))


class LockContract:
    """Call builders for ``counter``, ``inc``, ``owner``, ``unlockTime`` and ``withdraw``."""

    def __init__(self, w3: Web3, address: Address) -> None:
        self.address = address
        self.contract = w3.eth.contract(address=address.checksum, abi=load_abi("Lock"))

    @property
    def functions(self):
        return self.contract.functions

    def counter(self):
        return self.contract.functions.counter()

    def inc(self):
        return self.contract.functions.inc()

    def owner(self):
        return self.contract.functions.owner()

    def unlock_time(self):
        return self.contract.functions.unlockTime()

    def withdraw(self):
        return self.contract.functions.withdraw()

    def build_request(self, fn) -> TransactionRequest:
        return TransactionRequest(to=self.address, data=fn._encode_transaction_data())

    def inc_request(self) -> TransactionRequest:
        return self.build_request(self.inc())

    def withdrawals(
        self,
        from_block: Union[int, str] = 0,
        to_block: Union[int, str] = "latest",
    ) -> List[Withdrawal]:
        events = self.contract.events.Withdrawal().get_logs(from_block=from_block, to_block=to_block)
        return [decode_withdrawal(event) for event in events]


def decode_withdrawal(event: Mapping[str, Any]) -> Withdrawal:
    args = event["args"]
    return Withdrawal(
        amount=int(args["amount"]),
        when=int(args["when"]),
        tx_hash=Web3.to_hex(event["transactionHash"]),
        block_number=int(event["blockNumber"]),
    )
