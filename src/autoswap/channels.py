"""One-shot result channels.

A channel accepts exactly one SwapResult. The orchestrator writes to it
once per request; a second write raises ChannelClosedError.
"""

import asyncio
import logging
from typing import Callable, Optional

from autoswap.errors import ChannelClosedError
from autoswap.models import SwapResult

logger = logging.getLogger(__name__)


class ResultChannel:
    """Base class for one-shot result delivery."""

    def __init__(self, token: Optional[str] = None):
        self.token = token
        self._result: Optional[SwapResult] = None

    @property
    def delivered(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[SwapResult]:
        return self._result

    def deliver(self, result: SwapResult) -> None:
        """Deliver the result. Raises ChannelClosedError on a second call."""
        if self._result is not None:
            raise ChannelClosedError(f"Result already delivered to channel {self.token!r}")
        self._result = result
        self._send(result)

    def _send(self, result: SwapResult) -> None:
        pass


class CallbackChannel(ResultChannel):
    """Posts the result as a JSON string to a host callback.

    Example:
        channel = CallbackChannel(bridge.post_message, token="swap-1")
    """

    def __init__(self, callback: Callable[[str], None], token: Optional[str] = None):
        super().__init__(token)
        self.callback = callback

    def _send(self, result: SwapResult) -> None:
        self.callback(result.to_json())


class FutureChannel(ResultChannel):
    """Resolves an asyncio future with the result."""

    def __init__(self, token: Optional[str] = None, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__(token)
        self._future = (loop or asyncio.get_running_loop()).create_future()

    def _send(self, result: SwapResult) -> None:
        if not self._future.done():
            self._future.set_result(result)

    async def wait(self, timeout: Optional[float] = None) -> SwapResult:
        """Wait for the result to be delivered."""
        return await asyncio.wait_for(asyncio.shield(self._future), timeout=timeout)
