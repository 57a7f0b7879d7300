"""Value types shared by the RPC client, key store and submitter."""

from dataclasses import dataclass, replace
from typing import Optional, Union

from eth_utils import is_hex_address, to_canonical_address, to_checksum_address

from .errors import InvalidInputError


@dataclass(frozen=True)
class Address:
    """20-byte account or contract address."""

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != 20:
            raise InvalidInputError("Address must be exactly 20 bytes.")

    @staticmethod
    def parse(text: str) -> "Address":
        candidate = text.strip()
        if not candidate.lower().startswith("0x"):
            candidate = "0x" + candidate
        if not is_hex_address(candidate):
            raise InvalidInputError(f"Not a hex address: {text!r}")
        return Address(to_canonical_address(candidate))

    @property
    def checksum(self) -> str:
        return to_checksum_address(self.value)

    def __str__(self) -> str:
        return self.checksum


@dataclass(frozen=True)
class TransactionRequest:
    to: Address
    data: str
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None
    nonce: Optional[int] = None
    value: int = 0

    @property
    def selector(self) -> str:
        return self.data[:10]

    def with_fee(self, gas_limit: int, gas_price: int) -> "TransactionRequest":
        return replace(self, gas_limit=gas_limit, gas_price=gas_price)

    def with_nonce(self, nonce: int) -> "TransactionRequest":
        return replace(self, nonce=nonce)

    def to_tx_dict(self, chain_id: int) -> dict:
        """Render the request in the shape eth-account signs."""
        if self.gas_limit is None or self.gas_price is None or self.nonce is None:
            raise InvalidInputError("Request needs gas limit, gas price and nonce before signing.")
        return {
            "to": self.to.checksum,
            "data": self.data,
            "value": self.value,
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "nonce": self.nonce,
            "chainId": chain_id,
        }


@dataclass(frozen=True)
class SignedTransaction:
    request: TransactionRequest
    raw_transaction: bytes
    tx_hash: str


@dataclass(frozen=True)
class Success:
    index: int
    tx_hash: str

    ok = True


@dataclass(frozen=True)
class Failure:
    index: int
    reason: str

    ok = False


SubmissionOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class BlockHeader:
    number: int
    base_fee_per_gas: int


@dataclass(frozen=True)
class Confirmation:
    """Receipt summary; ``status`` is None when no receipt arrived in time."""

    tx_hash: str
    status: Optional[int]
    block_number: Optional[int] = None

    @property
    def confirmed(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class Withdrawal:
    amount: int
    when: int
    tx_hash: str
    block_number: int
