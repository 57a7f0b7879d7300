"""Thin adapter over a web3.py HTTP connection to an EVM node."""

import logging
from typing import Any, Optional

from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from .errors import CallError, ReadError, RpcConnectionError
from .models import Address, BlockHeader, Confirmation, SignedTransaction

logger = logging.getLogger(__name__)

# Node-side rejections surface as ValueError on older web3 releases and
# transport failures from requests derive from OSError.
_RPC_ERRORS = (Web3Exception, ValueError, OSError)


class RpcClient:
    def __init__(self, url: str, request_timeout: float = 30.0, w3: Optional[Web3] = None) -> None:
        self._url = url
        self._w3 = w3 or Web3(Web3.HTTPProvider(url, request_kwargs={"timeout": request_timeout}))

    @property
    def url(self) -> str:
        return self._url

    @property
    def w3(self) -> Web3:
        return self._w3

    def connect(self) -> None:
        try:
            connected = self._w3.is_connected()
        except _RPC_ERRORS as exc:
            raise RpcConnectionError(f"Failed to connect to {self._url}: {exc}") from exc
        if not connected:
            raise RpcConnectionError(f"Failed to connect to {self._url}")
        logger.debug("connected url=%s", self._url)

    def get_chain_id(self) -> int:
        try:
            return int(self._w3.eth.chain_id)
        except _RPC_ERRORS as exc:
            raise ReadError(f"eth_chainId failed: {exc}") from exc

    def get_latest_block(self) -> BlockHeader:
        try:
            block = self._w3.eth.get_block("latest")
        except _RPC_ERRORS as exc:
            raise ReadError(f"eth_getBlockByNumber failed: {exc}") from exc
        # Pre-London chains omit baseFeePerGas.
        base_fee = block.get("baseFeePerGas") or 0
        return BlockHeader(number=int(block["number"]), base_fee_per_gas=int(base_fee))

    def get_transaction_count(self, address: Address, block: str = "pending") -> int:
        try:
            return int(self._w3.eth.get_transaction_count(address.checksum, block))
        except _RPC_ERRORS as exc:
            raise ReadError(f"eth_getTransactionCount failed: {exc}") from exc

    def call(self, contract: Any, method: str, *args: Any) -> Any:
        """Run a read-only contract method against the latest state."""
        try:
            return getattr(contract.functions, method)(*args).call()
        except _RPC_ERRORS as exc:
            raise ReadError(f"{method}() call failed: {exc}") from exc

    def send_transaction(self, signed: SignedTransaction) -> str:
        try:
            tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except _RPC_ERRORS as exc:
            raise CallError(str(exc)) from exc
        return Web3.to_hex(tx_hash)

    def wait_for_receipt(self, tx_hash: str, timeout: float, poll_interval: float = 1.0) -> Confirmation:
        try:
            receipt = self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout, poll_latency=poll_interval
            )
        except TimeExhausted:
            return Confirmation(tx_hash=tx_hash, status=None)
        except _RPC_ERRORS as exc:
            raise ReadError(f"eth_getTransactionReceipt failed: {exc}") from exc
        return Confirmation(
            tx_hash=tx_hash,
            status=int(receipt["status"]),
            block_number=int(receipt["blockNumber"]),
        )
