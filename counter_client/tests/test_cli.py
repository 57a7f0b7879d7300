"""End-to-end runs of the CLI flow against the in-memory node."""

import io
import logging
import os
import unittest
from unittest import mock

from counter_client import cli
from counter_client.config import Settings
from counter_client.errors import ConfigError, ReadError, RpcConnectionError
from counter_client.log import LOGGER_NAME, init_logging
from counter_client.models import Address

from .fakes import DEV_PRIVATE_KEY, LOCK_ADDRESS, FakeRpc


def _settings(**overrides) -> Settings:
    values = dict(
        private_key=DEV_PRIVATE_KEY,
        rpc_url="http://fake-node:8545",
        contract_address=Address.parse(LOCK_ADDRESS),
    )
    values.update(overrides)
    return Settings(**values)


class RunTests(unittest.TestCase):
    def test_counter_advances_by_accepted_count(self) -> None:
        rpc = FakeRpc(counter=100, fail_at={1})
        sleeps = []

        report = cli.run(_settings(tx_count=3), rpc=rpc, sleep=sleeps.append)

        self.assertEqual([outcome.ok for outcome in report.outcomes], [True, False, True])
        self.assertEqual(report.counter_before, 100)
        self.assertEqual(report.counter_after, 102)
        self.assertEqual(report.delta, 2)
        self.assertEqual(len(report.confirmations), 2)
        self.assertEqual(sleeps, [])

    def test_default_batch_of_ten(self) -> None:
        report = cli.run(_settings(), rpc=FakeRpc(nonce=4), sleep=lambda _: None)

        self.assertEqual(len(report.outcomes), 10)
        self.assertEqual(report.delta, 10)
        self.assertEqual(report.sent, 10)

    def test_fee_uses_multiplier(self) -> None:
        rpc = FakeRpc(base_fees=(25,))
        cli.run(_settings(tx_count=1, fee_multiplier=3), rpc=rpc, sleep=lambda _: None)
        self.assertEqual(rpc.sent[0].request.gas_price, 75)
        self.assertEqual(rpc.sent[0].request.gas_limit, 3_000_000)

    def test_sleep_mode_waits_fixed_delay(self) -> None:
        sleeps = []
        report = cli.run(_settings(confirm_mode="sleep", settle_seconds=10.0), rpc=FakeRpc(), sleep=sleeps.append)

        self.assertEqual(sleeps, [10.0])
        self.assertEqual(report.confirmations, ())

    def test_no_wait_when_every_send_fails(self) -> None:
        sleeps = []
        report = cli.run(
            _settings(tx_count=3, confirm_mode="sleep"),
            rpc=FakeRpc(fail_at={0, 1, 2}),
            sleep=sleeps.append,
        )

        self.assertEqual(report.sent, 0)
        self.assertEqual(report.delta, 0)
        self.assertEqual(sleeps, [])

    def test_receipt_poll_error_still_reads_final_counter(self) -> None:
        rpc = FakeRpc(counter=5, receipt_errors={0, 1})

        with self.assertLogs("counter_client.observer", level="INFO") as captured:
            report = cli.run(_settings(tx_count=2), rpc=rpc, sleep=lambda _: None)

        self.assertEqual(report.counter_after, 7)
        self.assertEqual(report.delta, 2)
        self.assertEqual([c.status for c in report.confirmations], [None, None])
        self.assertIn("counter finish value: 7", "\n".join(captured.output))

    def test_read_error_propagates(self) -> None:
        rpc = FakeRpc()
        rpc.read_error = "counter() call failed"
        with self.assertRaises(ReadError):
            cli.run(_settings(), rpc=rpc, sleep=lambda _: None)
        self.assertEqual(rpc.send_attempts, 0)

    def test_unreachable_node(self) -> None:
        with self.assertRaises(RpcConnectionError):
            cli.run(_settings(), rpc=FakeRpc(connected=False))

    def test_bad_key_fails_before_network(self) -> None:
        rpc = mock.MagicMock()
        with self.assertRaises(ConfigError):
            cli.run(_settings(private_key="0x" + "g" * 64), rpc=rpc)
        rpc.connect.assert_not_called()


class MainTests(unittest.TestCase):
    def test_missing_env_exits_with_config_status(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True), mock.patch("counter_client.config.load_dotenv"):
            self.assertEqual(cli.main([]), 2)

    def test_connection_failure_exits_non_zero(self) -> None:
        env = {
            "PRIVATE_KEY": DEV_PRIVATE_KEY,
            "L2_RPC_URL": "http://fake-node:8545",
            "CONCTRACT_ADDR": LOCK_ADDRESS,
        }
        with mock.patch.dict(os.environ, env, clear=True), mock.patch(
            "counter_client.config.load_dotenv"
        ), mock.patch.object(cli, "run", side_effect=RpcConnectionError("Failed to connect")):
            self.assertEqual(cli.main([]), 1)


class LoggingTests(unittest.TestCase):
    def test_handle_removes_handler(self) -> None:
        stream = io.StringIO()
        logger = logging.getLogger(LOGGER_NAME)
        before = list(logger.handlers)

        with init_logging("INFO", stream=stream):
            logger.getChild("test").info("counter start value: %s", 1)

        self.assertIn("[INFO]", stream.getvalue())
        self.assertIn("counter start value: 1", stream.getvalue())
        self.assertEqual(logger.handlers, before)


if __name__ == "__main__":
    unittest.main()
