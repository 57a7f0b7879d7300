from .bindings import LockContract, load_abi
from .errors import (
    CallError,
    ConfigError,
    CounterClientError,
    InvalidInputError,
    ReadError,
    RpcConnectionError,
)
from .fees import estimate_max_fee, fetch_max_fee
from .keystore import KeyStore
from .models import (
    Address,
    BlockHeader,
    Confirmation,
    Failure,
    SignedTransaction,
    SubmissionOutcome,
    Success,
    TransactionRequest,
    Withdrawal,
)
from .observer import CounterObserver, read_counter
from .rpc import RpcClient
from .submitter import TransactionSubmitter

__all__ = [
    "Address",
    "BlockHeader",
    "CallError",
    "ConfigError",
    "Confirmation",
    "CounterClientError",
    "CounterObserver",
    "Failure",
    "InvalidInputError",
    "KeyStore",
    "LockContract",
    "ReadError",
    "RpcClient",
    "RpcConnectionError",
    "SignedTransaction",
    "SubmissionOutcome",
    "Success",
    "TransactionRequest",
    "TransactionSubmitter",
    "Withdrawal",
    "estimate_max_fee",
    "fetch_max_fee",
    "load_abi",
    "read_counter",
]
