"""Signing key custody and nonce assignment for a single account."""

import string
import threading
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from .errors import CallError, InvalidInputError
from .models import Address, SignedTransaction, TransactionRequest


def remove_0x_prefix(value: str) -> str:
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value


def normalize_private_key(private_key: str) -> str:
    """Return the key as 0x-prefixed hex, rejecting anything but 32 bytes of hex."""
    raw = remove_0x_prefix(private_key.strip())
    if len(raw) != 64 or any(ch not in string.hexdigits for ch in raw):
        raise InvalidInputError("Private key must be 32 bytes of hex.")
    return "0x" + raw


class KeyStore:
    """Holds one private key and hands out monotonically increasing nonces."""

    def __init__(self, account: LocalAccount) -> None:
        self._account = account
        self._address = Address.parse(account.address)
        self._lock = threading.Lock()
        self._next_nonce: Optional[int] = None

    @staticmethod
    def from_private_key(private_key: str) -> "KeyStore":
        key = normalize_private_key(private_key)
        try:
            account = Account.from_key(key)
        except ValueError as exc:
            raise InvalidInputError(f"Private key rejected: {exc}") from None
        return KeyStore(account)

    def __repr__(self) -> str:
        return f"KeyStore(address={self._address.checksum})"

    def address(self) -> Address:
        return self._address

    def sync_nonce(self, value: int) -> None:
        if value < 0:
            raise InvalidInputError("Nonce must be non-negative.")
        with self._lock:
            self._next_nonce = value

    def reserve_nonce(self) -> int:
        with self._lock:
            if self._next_nonce is None:
                raise RuntimeError("Nonce counter has not been synced.")
            nonce = self._next_nonce
            self._next_nonce += 1
            return nonce

    def rollback_nonce(self, nonce: int) -> bool:
        """Return ``nonce`` to the pool if it is still the most recent one handed out."""
        with self._lock:
            if self._next_nonce is not None and self._next_nonce == nonce + 1:
                self._next_nonce = nonce
                return True
            return False

    def pending_nonce(self) -> Optional[int]:
        with self._lock:
            return self._next_nonce

    def sign(self, request: TransactionRequest, chain_id: int) -> SignedTransaction:
        try:
            signed = self._account.sign_transaction(request.to_tx_dict(chain_id))
        except (TypeError, ValueError) as exc:
            raise CallError(f"signing failed: {exc}") from exc
        return SignedTransaction(
            request=request,
            raw_transaction=bytes(signed.raw_transaction),
            tx_hash=Web3.to_hex(signed.hash),
        )
