"""Solana wallet/RPC bundle built on solana-py and solders."""

import logging

from solana.constants import LAMPORTS_PER_SOL
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

logger = logging.getLogger(__name__)

__all__ = ["Connection", "PublicKey", "LAMPORTS_PER_SOL"]


def PublicKey(address: str) -> Pubkey:
    """Build an account key from a base58 address.

    Raises:
        ValueError: If the address is not a valid Solana public key
    """
    if not isinstance(address, str) or not address.strip():
        raise ValueError("Address is required")
    return Pubkey.from_string(address.strip())


class Connection:
    """Async RPC connection bound to an endpoint and commitment level."""

    def __init__(self, endpoint: str, commitment: str = "confirmed", timeout: float = 30.0):
        self.endpoint = endpoint
        self.commitment = Commitment(commitment)
        self._client = AsyncClient(endpoint, commitment=self.commitment, timeout=timeout)

    @property
    def client(self) -> AsyncClient:
        return self._client

    async def get_balance(self, pubkey: Pubkey) -> int:
        """Get the balance of ``pubkey`` in lamports."""
        response = await self._client.get_balance(pubkey, commitment=self.commitment)
        return response.value

    async def get_token_decimals(self, mint: Pubkey) -> int:
        """Get the decimals of an SPL token mint."""
        response = await self._client.get_token_supply(mint, commitment=self.commitment)
        return response.value.decimals

    async def close(self) -> None:
        await self._client.close()
