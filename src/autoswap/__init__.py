"""Autoswap - automated single-shot SOL swaps through a trading agent."""

from autoswap.bindings import CollaboratorBindings, SwapContext
from autoswap.channels import CallbackChannel, FutureChannel, ResultChannel
from autoswap.health import check_rpc_health
from autoswap.models import SwapRequest, SwapResult, WalletCredential
from autoswap.orchestrator import SwapOrchestrator, execute_swap_wrapper

__version__ = "0.1.0"

__all__ = [
    "CallbackChannel",
    "CollaboratorBindings",
    "FutureChannel",
    "ResultChannel",
    "SwapContext",
    "SwapOrchestrator",
    "SwapRequest",
    "SwapResult",
    "WalletCredential",
    "check_rpc_health",
    "execute_swap_wrapper",
]
