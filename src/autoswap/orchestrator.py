"""Swap orchestration: health check, sizing, trade and result delivery.

Pipeline for one request, each step gated on the previous one:

1. Dependencies bound
2. RPC health probe (single getHealth call, no retry)
3. Wallet account key
4. Secret key encoding
5. Trading agent construction
6. Balance (agent accessor first, RPC connection as fallback)
7. Swap amount (5% of balance, keeping a reserve)
8. Destination account key
9. Trade dispatch
10. Result delivery

Every request ends with exactly one SwapResult delivered to its channel.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional

from autoswap.amount import compute_swap_amount, format_amount
from autoswap.bindings import CollaboratorBindings, SwapContext
from autoswap.errors import (
    AgentConstructionError,
    BalanceQueryError,
    CredentialError,
    EncodingError,
    HealthCheckError,
    IdentityError,
    SwapError,
    TradeExecutionError,
)
from autoswap.health import check_rpc_health
from autoswap.models import NATIVE_MINT, SwapRequest, SwapResult, WalletCredential

logger = logging.getLogger(__name__)

# Immediate acknowledgments returned before the trade settles
PROCESSING = "processing"
SWAP_INITIATED = "Swap initiated"
SWAP_REJECTED = "Error"


class SwapOrchestrator:
    """Runs swap requests against a SwapContext.

    Requests share nothing but the read-only context, so any number of
    them can run concurrently on one event loop.
    """

    def __init__(
        self,
        context: SwapContext,
        health_check: Optional[Callable[[str], Awaitable[bool]]] = None,
    ):
        self.context = context
        self.settings = context.settings
        self._health_check = health_check
        self._tasks: set[asyncio.Task] = set()

    def submit(self, request: SwapRequest) -> str:
        """Schedule ``request`` on the running loop and acknowledge it.

        The return value only means "accepted for processing"; the outcome
        arrives on ``request.result_channel``. Must be called from within a
        running event loop.
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.run(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return PROCESSING

    async def wait_idle(self) -> None:
        """Wait for every submitted request to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def run(self, request: SwapRequest) -> SwapResult:
        """Run the full pipeline and deliver its result exactly once."""
        result: Optional[SwapResult] = None
        try:
            result = await self._execute(request)
        except SwapError as e:
            logger.warning(f"Swap to {request.destination_asset} failed: {e.reason}")
            result = SwapResult.failed(e.reason)
        except Exception as e:
            logger.exception(f"Unexpected error in swap to {request.destination_asset}")
            result = SwapResult.failed(str(e) or e.__class__.__name__)
        finally:
            if result is None:
                result = SwapResult.failed("swap cancelled")
            self._deliver(request, result)
            _wipe_quietly(request.credential)
        return result

    def _deliver(self, request: SwapRequest, result: SwapResult) -> None:
        try:
            request.result_channel.deliver(result)
        except Exception as e:
            logger.error(f"Failed to deliver swap result: {e}")

    async def _execute(self, request: SwapRequest) -> SwapResult:
        bindings = self.context.bindings
        settings = self.settings
        rpc_url = settings.sol_rpc_url

        if not await self._probe_health(rpc_url):
            raise HealthCheckError()

        logger.info("Creating connection...")
        connection = bindings.connection_factory(rpc_url, settings.rpc_commitment)
        agent = None
        try:
            wallet_key = self._account_key(bindings, request.credential.public_address, "invalid wallet address")
            logger.info(f"Wallet: {wallet_key}")

            agent = self._create_agent(bindings, request.credential)
            logger.info("Trading agent initialized")

            balance = await self._get_balance(bindings, agent, connection, wallet_key)
            logger.info(f"Retrieved SOL balance: {balance}")

            amount = compute_swap_amount(balance, settings.swap_fraction, settings.sol_reserve)
            amount_str = format_amount(amount)
            logger.info(f"Swap amount: {amount_str}")

            output_key = self._account_key(bindings, request.destination_asset, "invalid destination asset")
            input_key = bindings.public_key_factory(NATIVE_MINT)

            logger.info(f"Executing trade SOL -> {request.destination_asset}")
            try:
                signature = await agent.trade(output_key, amount_str, input_key, settings.slippage_bps)
            except SwapError:
                raise
            except Exception as e:
                raise TradeExecutionError(str(e) or e.__class__.__name__)

            logger.info(f"Trade signature: {signature}")
            return SwapResult.succeeded(str(signature), Decimal(amount_str), request.destination_asset)

        finally:
            await _close_quietly(agent)
            await _close_quietly(connection)

    async def _probe_health(self, rpc_url: str) -> bool:
        try:
            if self._health_check is not None:
                return bool(await self._health_check(rpc_url))
            return await check_rpc_health(rpc_url, timeout=self.settings.health_check_timeout)
        except Exception as e:
            logger.warning(f"RPC health probe error: {e}")
            return False

    @staticmethod
    def _account_key(bindings: CollaboratorBindings, address: str, reason: str) -> Any:
        try:
            return bindings.public_key_factory(address)
        except Exception as e:
            logger.warning(f"{reason}: {address!r} ({e})")
            raise IdentityError(reason)

    def _create_agent(self, bindings: CollaboratorBindings, credential: WalletCredential) -> Any:
        try:
            encoded = bindings.encode(bytes(credential.secret_key))
        except Exception as e:
            raise EncodingError(f"failed to encode secret key: {e}")

        config = {
            "jupiter_fee_bps": self.settings.jupiter_fee_bps,
            "jupiter_api_url": self.settings.jupiter_api_url,
            "commitment": self.settings.rpc_commitment,
            "timeout": self.settings.jupiter_timeout,
        }
        try:
            return bindings.agent_factory(encoded, self.settings.sol_rpc_url, config)
        except Exception as e:
            raise AgentConstructionError(f"failed to initialize trading agent: {e}")

    @staticmethod
    async def _get_balance(
        bindings: CollaboratorBindings,
        agent: Any,
        connection: Any,
        wallet_key: Any,
    ) -> Decimal:
        """Balance in SOL, from the agent if it offers one, else from RPC."""
        try:
            agent_balance = getattr(agent, "get_balance", None)
            if callable(agent_balance):
                return Decimal(str(await agent_balance()))

            lamports = await connection.get_balance(wallet_key)
            return Decimal(lamports) / Decimal(bindings.lamports_per_sol)
        except Exception as e:
            logger.warning(f"Balance query failed: {e}")
            raise BalanceQueryError()


def _wipe_quietly(credential: Any) -> None:
    try:
        credential.wipe()
    except Exception as e:
        logger.error(f"Failed to wipe credential: {e}")


async def _close_quietly(resource: Any) -> None:
    close = getattr(resource, "close", None)
    if not callable(close):
        return
    try:
        outcome = close()
        if asyncio.iscoroutine(outcome):
            await outcome
    except Exception as e:
        logger.debug(f"Error closing {resource!r}: {e}")


def execute_swap_wrapper(
    orchestrator: SwapOrchestrator,
    keypair_json: str,
    output_mint: str,
    channel: Any,
) -> str:
    """Parse a host credential document and start a swap.

    Returns "Swap initiated" once the request is scheduled, or "Error"
    after delivering a Failure to ``channel`` if the document is invalid.
    """
    logger.info(f"execute_swap_wrapper: {output_mint}")
    credential = None
    try:
        credential = WalletCredential.from_json(keypair_json)
        orchestrator.submit(SwapRequest(credential, output_mint, channel))
    except Exception as e:
        reason = e.reason if isinstance(e, CredentialError) else str(e) or e.__class__.__name__
        logger.warning(f"Rejected swap request: {reason}")
        if credential is not None:
            _wipe_quietly(credential)
        try:
            channel.deliver(SwapResult.failed(reason))
        except Exception as deliver_error:
            logger.error(f"Failed to deliver swap result: {deliver_error}")
        return SWAP_REJECTED

    return SWAP_INITIATED
