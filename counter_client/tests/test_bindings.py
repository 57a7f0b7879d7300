"""The Lock ABI and the call builders web3 derives from it."""

import unittest

from eth_utils import function_signature_to_4byte_selector
from web3 import Web3

from counter_client.bindings import LockContract, decode_withdrawal, load_abi
from counter_client.models import Address

from .fakes import LOCK_ADDRESS


class LockAbiTests(unittest.TestCase):
    def test_abi_lists_expected_members(self) -> None:
        abi = load_abi("Lock")
        functions = {entry["name"] for entry in abi if entry["type"] == "function"}
        events = {entry["name"] for entry in abi if entry["type"] == "event"}

        self.assertEqual(functions, {"counter", "inc", "owner", "unlockTime", "withdraw"})
        self.assertEqual(events, {"Withdrawal"})

    def test_load_abi_returns_fresh_copy(self) -> None:
        first = load_abi("Lock")
        first.clear()
        self.assertTrue(load_abi("Lock"))


class LockContractTests(unittest.TestCase):
    def setUp(self) -> None:
        self.contract = LockContract(Web3(), Address.parse(LOCK_ADDRESS))

    def test_selectors(self) -> None:
        expected = {
            "counter": "0x61bc221a",
            "inc": "0x371303c0",
            "owner": "0x8da5cb5b",
            "unlockTime": "0x251c1aa3",
            "withdraw": "0x3ccfd60b",
        }
        for name, selector in expected.items():
            self.assertEqual(Web3.to_hex(function_signature_to_4byte_selector(f"{name}()")), selector)

        builders = (
            self.contract.counter(),
            self.contract.inc(),
            self.contract.owner(),
            self.contract.unlock_time(),
            self.contract.withdraw(),
        )
        encoded = [self.contract.build_request(fn).data for fn in builders]
        self.assertEqual(encoded, list(expected.values()))

    def test_inc_request_targets_contract(self) -> None:
        request = self.contract.inc_request()

        self.assertEqual(request.to, Address.parse(LOCK_ADDRESS))
        self.assertEqual(request.data, "0x371303c0")
        self.assertIsNone(request.nonce)
        self.assertEqual(request.value, 0)

    def test_decode_withdrawal(self) -> None:
        event = {
            "args": {"amount": 5 * 10**18, "when": 1_700_000_000},
            "transactionHash": bytes.fromhex("ab" * 32),
            "blockNumber": 12,
        }

        withdrawal = decode_withdrawal(event)

        self.assertEqual(withdrawal.amount, 5 * 10**18)
        self.assertEqual(withdrawal.when, 1_700_000_000)
        self.assertEqual(withdrawal.tx_hash, "0x" + "ab" * 32)
        self.assertEqual(withdrawal.block_number, 12)


if __name__ == "__main__":
    unittest.main()
