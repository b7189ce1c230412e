"""Pytest configuration and fixtures."""

import asyncio
import os
import re
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"

from autoswap.bindings import SwapContext
from autoswap.config import Settings, get_settings
from autoswap.models import WalletCredential

USER_ADDRESS = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
SIGNATURE = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
RPC_URL = "https://rpc.test"

LAMPORTS_PER_SOL = 1_000_000_000


class FakeKey(str):
    """Account key handed out by the fake wallet bundle."""


def fake_public_key(address: str) -> FakeKey:
    if not isinstance(address, str) or not re.match(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$", address):
        raise ValueError(f"Invalid public key input: {address!r}")
    return FakeKey(address)


class FakeWallet:
    """Wallet bundle whose connections report a fixed lamport balance."""

    LAMPORTS_PER_SOL = LAMPORTS_PER_SOL

    def __init__(self, lamports: int = LAMPORTS_PER_SOL, error: Optional[Exception] = None):
        self.lamports = lamports
        self.error = error
        self.connections = []
        self.balance_calls = []
        self.PublicKey = fake_public_key

        wallet = self

        class Connection:
            def __init__(self, endpoint, commitment):
                self.endpoint = endpoint
                self.commitment = commitment
                self.closed = False
                wallet.connections.append(self)

            async def get_balance(self, key):
                wallet.balance_calls.append(key)
                if wallet.error:
                    raise wallet.error
                return wallet.lamports

            async def close(self):
                self.closed = True

        self.Connection = Connection


class FakeAgentLib:
    """Agent bundle recording every agent it builds and every trade.

    ``balance`` gives the agents a get_balance accessor; leave it None to
    force the RPC fallback.
    """

    def __init__(
        self,
        balance: Optional[Decimal] = None,
        balance_error: Optional[Exception] = None,
        trade_result: str = SIGNATURE,
        trade_error: Optional[Exception] = None,
        construct_error: Optional[Exception] = None,
        trade_delay: float = 0,
    ):
        self.balance = balance
        self.balance_error = balance_error
        self.trade_result = trade_result
        self.trade_error = trade_error
        self.construct_error = construct_error
        self.trade_delay = trade_delay
        self.agents = []

        lib = self

        class TradingAgent:
            def __init__(self, private_key, rpc_url, config):
                if lib.construct_error:
                    raise lib.construct_error
                self.private_key = private_key
                self.rpc_url = rpc_url
                self.config = config
                self.trade_calls = []
                self.closed = False
                lib.agents.append(self)

            async def trade(self, output_mint, input_amount, input_mint, slippage_bps):
                self.trade_calls.append((output_mint, input_amount, input_mint, slippage_bps))
                await asyncio.sleep(lib.trade_delay)
                if lib.trade_error:
                    raise lib.trade_error
                return lib.trade_result

            async def close(self):
                self.closed = True

        if balance is not None or balance_error is not None:

            async def get_balance(self):
                if lib.balance_error:
                    raise lib.balance_error
                return lib.balance

            TradingAgent.get_balance = get_balance

        self.TradingAgent = TradingAgent

    @property
    def trade_calls(self) -> list:
        return [call for agent in self.agents for call in agent.trade_calls]


class RecordingChannel:
    """Channel that keeps every delivery, duplicates included."""

    def __init__(self):
        self.results = []

    def deliver(self, result):
        self.results.append(result)

    @property
    def result(self):
        assert len(self.results) == 1, f"expected one delivery, got {len(self.results)}"
        return self.results[0]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset cached settings between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, sol_rpc_url=RPC_URL, environment="test")


@pytest.fixture
def wallet_lib() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def agent_lib() -> FakeAgentLib:
    return FakeAgentLib()


@pytest.fixture
def codec_lib():
    return SimpleNamespace(encode=lambda data: bytes(data).hex())


@pytest.fixture
def context(settings, wallet_lib, agent_lib, codec_lib) -> SwapContext:
    ctx = SwapContext(settings)
    assert ctx.initialize(wallet_lib, agent_lib, codec_lib)
    return ctx


@pytest.fixture
def credential() -> WalletCredential:
    return WalletCredential(public_address=USER_ADDRESS, secret_key=bytearray(range(1, 65)))
