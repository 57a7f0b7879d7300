"""Error taxonomy for the counter client."""


class CounterClientError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(CounterClientError):
    """Raised when an environment variable or flag is missing or malformed."""


class RpcConnectionError(CounterClientError):
    """Raised when the RPC endpoint cannot be reached."""


class ReadError(CounterClientError):
    """Raised when a read-only RPC request fails."""


class CallError(CounterClientError):
    """Raised when a single transaction cannot be signed or sent."""


class InvalidInputError(CounterClientError, ValueError):
    """Raised when an operation receives arguments it cannot act on."""
