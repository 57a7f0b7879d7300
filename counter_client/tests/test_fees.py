"""Fee ceiling arithmetic and the fresh-block retry."""

import unittest

from counter_client.errors import InvalidInputError
from counter_client.fees import estimate_max_fee, fetch_max_fee

from .fakes import FakeRpc


class EstimateMaxFeeTests(unittest.TestCase):
    def test_multiplies_base_fee(self) -> None:
        self.assertEqual(estimate_max_fee(7, 2), 14)
        self.assertEqual(estimate_max_fee(1_000_000_007, 3), 3_000_000_021)
        self.assertEqual(estimate_max_fee(2**120, 1), 2**120)

    def test_zero_base_fee_rejected_for_any_multiplier(self) -> None:
        for multiplier in (0, 1, 2, 1000):
            with self.assertRaises(InvalidInputError):
                estimate_max_fee(0, multiplier)

    def test_invalid_input_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            estimate_max_fee(0, 2)

    def test_non_positive_multiplier_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            estimate_max_fee(10, 0)
        with self.assertRaises(InvalidInputError):
            estimate_max_fee(10, -1)

    def test_negative_base_fee_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            estimate_max_fee(-5, 2)


class FetchMaxFeeTests(unittest.TestCase):
    def test_retries_until_block_has_base_fee(self) -> None:
        rpc = FakeRpc(base_fees=(0, 0, 50))
        sleeps = []

        fee = fetch_max_fee(rpc, 2, attempts=5, poll_interval=0.5, sleep=sleeps.append)

        self.assertEqual(fee, 100)
        self.assertEqual(rpc.blocks_read, 3)
        self.assertEqual(sleeps, [0.5, 0.5])

    def test_gives_up_after_attempts(self) -> None:
        rpc = FakeRpc(base_fees=(0,))
        sleeps = []

        with self.assertRaises(InvalidInputError):
            fetch_max_fee(rpc, 2, attempts=3, poll_interval=1.0, sleep=sleeps.append)

        self.assertEqual(rpc.blocks_read, 3)
        self.assertEqual(len(sleeps), 2)

    def test_attempts_must_be_positive(self) -> None:
        with self.assertRaises(InvalidInputError):
            fetch_max_fee(FakeRpc(), 2, attempts=0)


if __name__ == "__main__":
    unittest.main()
