"""Trading agent that swaps through the Jupiter aggregator.

API docs: https://station.jup.ag/docs/apis/swap-api

Flow for a trade:
1. GET /quote for the input/output mints and amount
2. POST /swap to receive a serialized versioned transaction
3. Sign it with the wallet keypair and send it over RPC
4. Wait for confirmation and return the signature
"""

import base64
import logging
from decimal import Decimal
from typing import Optional, Union

import httpx
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from autoswap.collaborators.codec import decode
from autoswap.collaborators.wallet import LAMPORTS_PER_SOL, Connection
from autoswap.errors import TradeExecutionError
from autoswap.models import NATIVE_MINT

logger = logging.getLogger(__name__)

JUPITER_API_V6 = "https://quote-api.jup.ag/v6"

NATIVE_DECIMALS = 9


class TradingAgent:
    """Wallet-bound agent that executes Jupiter swaps.

    Args:
        private_key: Base58 encoded 64-byte secret key
        rpc_url: Solana RPC endpoint
        config: Optional settings; ``jupiter_fee_bps`` (platform fee),
            ``jupiter_api_url``, ``commitment`` and ``timeout``
    """

    def __init__(self, private_key: str, rpc_url: str, config: Optional[dict] = None):
        self.config = dict(config or {})
        secret = decode(private_key)
        if len(secret) != 64:
            raise ValueError("Secret key must be 64 bytes")
        self.keypair = Keypair.from_bytes(secret)
        self.rpc_url = rpc_url
        self.fee_bps = int(self.config.get("jupiter_fee_bps", 0))
        self.base_url = self.config.get("jupiter_api_url", JUPITER_API_V6)
        self.timeout = float(self.config.get("timeout", 30.0))
        self.connection = Connection(
            rpc_url,
            self.config.get("commitment", "confirmed"),
            timeout=self.timeout,
        )

    @property
    def wallet_address(self) -> Pubkey:
        return self.keypair.pubkey()

    async def get_balance(self) -> Decimal:
        """Get the wallet's SOL balance in whole SOL."""
        lamports = await self.connection.get_balance(self.wallet_address)
        return Decimal(lamports) / Decimal(LAMPORTS_PER_SOL)

    async def _to_base_units(self, mint: Pubkey, amount: Decimal) -> int:
        if str(mint) == NATIVE_MINT:
            decimals = NATIVE_DECIMALS
        else:
            decimals = await self.connection.get_token_decimals(mint)
        return int(amount * (10 ** decimals))

    async def trade(
        self,
        output_mint: Union[Pubkey, str],
        input_amount: Union[str, Decimal],
        input_mint: Union[Pubkey, str, None] = None,
        slippage_bps: int = 50,
    ) -> str:
        """Swap ``input_amount`` of ``input_mint`` into ``output_mint``.

        Args:
            output_mint: Mint to receive
            input_amount: Amount in human-readable units (e.g. "0.050000000")
            input_mint: Mint to spend (defaults to native SOL)
            slippage_bps: Max slippage in basis points

        Returns:
            Transaction signature

        Raises:
            TradeExecutionError: If any step of the swap fails
        """
        input_mint = Pubkey.from_string(str(input_mint or NATIVE_MINT))
        output_mint = Pubkey.from_string(str(output_mint))

        try:
            amount = Decimal(str(input_amount))
        except ArithmeticError:
            raise TradeExecutionError(f"Invalid trade amount: {input_amount}")

        amount_raw = await self._to_base_units(input_mint, amount)
        if amount_raw <= 0:
            raise TradeExecutionError(f"Trade amount too small: {input_amount}")

        logger.info(f"Trading {amount} of {input_mint} -> {output_mint} (slippage {slippage_bps} bps)")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            quote = await self._get_quote(client, input_mint, output_mint, amount_raw, slippage_bps)
            swap_data = await self._get_swap_transaction(client, quote)

        return await self._sign_and_send(
            swap_data["swapTransaction"],
            swap_data.get("lastValidBlockHeight"),
        )

    async def _get_quote(
        self,
        client: httpx.AsyncClient,
        input_mint: Pubkey,
        output_mint: Pubkey,
        amount_raw: int,
        slippage_bps: int,
    ) -> dict:
        params = {
            "inputMint": str(input_mint),
            "outputMint": str(output_mint),
            "amount": str(amount_raw),
            "slippageBps": str(slippage_bps),
            "onlyDirectRoutes": "false",
        }
        if self.fee_bps:
            params["platformFeeBps"] = str(self.fee_bps)

        response = await client.get(f"{self.base_url}/quote", params=params)
        if response.status_code != 200:
            raise TradeExecutionError(f"Jupiter quote error: {response.status_code} - {response.text}")

        quote = response.json()
        if int(quote.get("outAmount") or 0) <= 0:
            raise TradeExecutionError("No route found for swap")
        return quote

    async def _get_swap_transaction(self, client: httpx.AsyncClient, quote: dict) -> dict:
        response = await client.post(
            f"{self.base_url}/swap",
            json={
                "quoteResponse": quote,
                "userPublicKey": str(self.wallet_address),
                "wrapAndUnwrapSol": True,
                "dynamicComputeUnitLimit": True,
                "prioritizationFeeLamports": "auto",
            },
        )
        if response.status_code != 200:
            raise TradeExecutionError(f"Jupiter swap error: {response.status_code} - {response.text}")

        swap_data = response.json()
        if not swap_data.get("swapTransaction"):
            raise TradeExecutionError("No swap transaction returned")
        return swap_data

    async def _sign_and_send(self, swap_transaction: str, last_valid_block_height: Optional[int]) -> str:
        unsigned = VersionedTransaction.from_bytes(base64.b64decode(swap_transaction))
        signed = VersionedTransaction(unsigned.message, [self.keypair])

        client = self.connection.client
        response = await client.send_raw_transaction(
            bytes(signed),
            opts=TxOpts(skip_preflight=False, preflight_commitment=self.connection.commitment),
        )
        signature = response.value
        logger.info(f"Swap transaction sent: {signature}")

        await client.confirm_transaction(
            signature,
            commitment=self.connection.commitment,
            last_valid_block_height=last_valid_block_height,
        )
        return str(signature)

    async def close(self) -> None:
        await self.connection.close()
