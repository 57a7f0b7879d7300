"""Settings loaded from the environment (and a .env file), overridable by flags."""

import argparse
import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigError, InvalidInputError
from .keystore import normalize_private_key
from .models import Address

CONFIRM_MODES = ("receipts", "sleep")


@dataclass(frozen=True)
class Settings:
    private_key: str = field(repr=False)
    rpc_url: str
    contract_address: Address
    tx_count: int = 10
    fee_multiplier: int = 2
    gas_limit: int = 3_000_000
    confirm_mode: str = "receipts"
    confirm_timeout: float = 120.0
    settle_seconds: float = 10.0
    log_level: str = "INFO"


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="counter-client",
        description="Send a batch of inc() transactions to a Lock contract and report the counter.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument('--rpc', type=str, default=environ.get('L2_RPC_URL'), help='RPC URL for the L2 network')
    parser.add_argument(
        '--contract',
        type=str,
        default=environ.get('CONCTRACT_ADDR') or environ.get('CONTRACT_ADDR'),
        help='Address of the deployed Lock contract',
    )
    parser.add_argument('--count', type=str, default=environ.get('TX_COUNT', '10'), help='Transactions per batch')
    parser.add_argument(
        '--fee-multiplier',
        type=str,
        default=environ.get('FEE_MULTIPLIER', '2'),
        help='Multiplier applied to the latest base fee',
    )
    parser.add_argument(
        '--gas-limit', type=str, default=environ.get('GAS_LIMIT', '3000000'), help='Gas limit per transaction'
    )
    parser.add_argument(
        '--confirm-mode',
        type=str,
        default=environ.get('CONFIRM_MODE', 'receipts'),
        help='Wait for receipts, or sleep a fixed time before the final read',
    )
    parser.add_argument(
        '--confirm-timeout',
        type=str,
        default=environ.get('CONFIRM_TIMEOUT', '120'),
        help='Seconds to wait for all receipts of a batch',
    )
    parser.add_argument(
        '--settle-seconds',
        type=str,
        default=environ.get('SETTLE_SECONDS', '10'),
        help='Fixed wait used by --confirm-mode sleep',
    )
    parser.add_argument('--log-level', type=str, default=environ.get('LOG_LEVEL', 'INFO'), help='Logging level')
    return parser


def load_settings(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> Settings:
    if environ is None:
        if use_dotenv:
            load_dotenv()
        environ = os.environ

    args = build_parser(environ).parse_args(argv)

    private_key = _require(environ.get('PRIVATE_KEY'), 'PRIVATE_KEY')
    try:
        normalize_private_key(private_key)
    except InvalidInputError as exc:
        raise ConfigError(f"Environment variable PRIVATE_KEY is malformed: {exc}") from None

    rpc_url = _require(args.rpc, 'L2_RPC_URL')
    parsed = urlparse(rpc_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"L2_RPC_URL must be an http(s) URL, got {rpc_url!r}")

    contract = _require(args.contract, 'CONCTRACT_ADDR')
    try:
        contract_address = Address.parse(contract)
    except InvalidInputError as exc:
        raise ConfigError(f"CONCTRACT_ADDR is malformed: {exc}") from None

    confirm_mode = args.confirm_mode.strip().lower()
    if confirm_mode not in CONFIRM_MODES:
        raise ConfigError(f"CONFIRM_MODE must be one of {', '.join(CONFIRM_MODES)}")

    log_level = args.log_level.strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown LOG_LEVEL {args.log_level!r}")

    return Settings(
        private_key=private_key.strip(),
        rpc_url=rpc_url,
        contract_address=contract_address,
        tx_count=_parse_int(args.count, 'TX_COUNT', minimum=0),
        fee_multiplier=_parse_int(args.fee_multiplier, 'FEE_MULTIPLIER', minimum=1),
        gas_limit=_parse_int(args.gas_limit, 'GAS_LIMIT', minimum=21_000),
        confirm_mode=confirm_mode,
        confirm_timeout=_parse_float(args.confirm_timeout, 'CONFIRM_TIMEOUT'),
        settle_seconds=_parse_float(args.settle_seconds, 'SETTLE_SECONDS'),
        log_level=log_level,
    )


def _require(value: Optional[str], name: str) -> str:
    if not value or not value.strip():
        raise ConfigError(f"Environment variable {name} not set")
    return value


def _parse_int(value: str, name: str, minimum: int) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {number}")
    return number


def _parse_float(value: str, name: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if number < 0:
        raise ConfigError(f"{name} must be non-negative, got {number}")
    return number
