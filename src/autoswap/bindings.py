"""Collaborator bindings and the swap context.

The wallet, agent and codec libraries are handed in once at startup.
Their required symbols are extracted and validated into a
CollaboratorBindings object held by a SwapContext, which is then passed
to the orchestrator.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from autoswap.config import Settings, get_settings
from autoswap.errors import DependencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollaboratorBindings:
    """Symbols extracted from the wallet, agent and codec bundles."""

    connection_factory: Callable
    public_key_factory: Callable
    lamports_per_sol: int
    agent_factory: Callable
    encode: Callable

    @classmethod
    def from_libraries(cls, wallet_lib: Any, agent_lib: Any, codec_lib: Any) -> "CollaboratorBindings":
        """Extract and validate the required symbols.

        Raises:
            DependencyError: If a library or one of its members is missing
        """
        if wallet_lib is None or agent_lib is None or codec_lib is None:
            raise DependencyError("Missing library")

        bindings = cls(
            connection_factory=getattr(wallet_lib, "Connection", None),
            public_key_factory=getattr(wallet_lib, "PublicKey", None),
            lamports_per_sol=getattr(wallet_lib, "LAMPORTS_PER_SOL", None),
            agent_factory=getattr(agent_lib, "TradingAgent", None),
            encode=getattr(codec_lib, "encode", None),
        )
        bindings.validate()
        return bindings

    def validate(self) -> None:
        """Check every symbol is present and usable."""
        for name in ("connection_factory", "public_key_factory", "agent_factory", "encode"):
            if not callable(getattr(self, name)):
                raise DependencyError(f"Dependency validation failed: {name}")

        lamports = self.lamports_per_sol
        if isinstance(lamports, bool) or not isinstance(lamports, int) or lamports <= 0:
            raise DependencyError("Dependency validation failed: lamports_per_sol")


class SwapContext:
    """Validated collaborators plus settings, shared by all swap requests.

    Initialize once, then hand the context to a SwapOrchestrator:

        context = SwapContext()
        if not context.initialize(wallet, agent, codec):
            ...
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._bindings: Optional[CollaboratorBindings] = None

    @property
    def is_initialized(self) -> bool:
        return self._bindings is not None

    @property
    def bindings(self) -> CollaboratorBindings:
        """Return the bindings, failing fast if initialization did not succeed."""
        if self._bindings is None:
            raise DependencyError()
        return self._bindings

    def initialize(self, wallet_lib: Any, agent_lib: Any, codec_lib: Any) -> bool:
        """Bind the three collaborator libraries.

        Never raises. On failure the context is left uninitialized, even if
        an earlier call had succeeded.

        Returns:
            True if every required symbol resolved
        """
        logger.info("Starting dependency initialization")
        try:
            bindings = CollaboratorBindings.from_libraries(wallet_lib, agent_lib, codec_lib)
        except Exception as e:
            self._bindings = None
            logger.error(f"Error initializing dependencies: {e}")
            return False

        self._bindings = bindings
        logger.info("Dependencies initialized successfully")
        return True

    @classmethod
    def with_defaults(cls, settings: Optional[Settings] = None) -> "SwapContext":
        """Create a context bound to the built-in Solana collaborators."""
        from autoswap.collaborators import agent, codec, wallet

        context = cls(settings)
        if not context.initialize(wallet, agent, codec):
            raise DependencyError("Default collaborators failed to initialize")
        return context
