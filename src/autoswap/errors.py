"""Exceptions raised by the swap pipeline.

Each error carries the human-readable ``reason`` that ends up in the
Failure result delivered to the caller.
"""


class SwapError(Exception):
    """Base exception for a failed swap step."""

    default_reason = "swap failed"

    def __init__(self, reason: str = None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class DependencyError(SwapError):
    """Raised when collaborator bindings are missing or invalid."""

    default_reason = "dependencies not initialized"


class HealthCheckError(SwapError):
    """Raised when the RPC endpoint is unreachable or unhealthy."""

    default_reason = "RPC endpoint unhealthy"


class IdentityError(SwapError):
    """Raised when an address cannot be turned into an account key."""

    default_reason = "invalid wallet address"


class EncodingError(SwapError):
    """Raised when the secret key cannot be encoded."""

    default_reason = "failed to encode secret key"


class AgentConstructionError(SwapError):
    """Raised when the trading agent cannot be created."""

    default_reason = "failed to initialize trading agent"


class BalanceQueryError(SwapError):
    """Raised when the wallet balance cannot be read."""

    default_reason = "failed to get wallet balance"


class InsufficientBalanceError(SwapError):
    """Raised when the balance is too small to trade after the reserve."""

    default_reason = "insufficient balance after reserve"


class TradeExecutionError(SwapError):
    """Raised when the trade itself fails."""

    default_reason = "trade execution failed"


class CredentialError(SwapError):
    """Raised when a wallet credential document is malformed."""

    default_reason = "invalid wallet credential"


class ChannelClosedError(RuntimeError):
    """Raised when a result is delivered to a channel more than once."""

    pass
