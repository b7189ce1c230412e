"""Command-line entry point: run one swap and print its result.

Usage:
    autoswap --keypair wallet.json EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from autoswap.bindings import SwapContext
from autoswap.channels import FutureChannel
from autoswap.config import Settings, get_settings
from autoswap.errors import DependencyError
from autoswap.orchestrator import SWAP_INITIATED, SwapOrchestrator, execute_swap_wrapper

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Swap a share of a wallet's SOL into another token"
    )
    parser.add_argument("output_mint", help="Mint address of the token to buy")
    parser.add_argument(
        "--keypair",
        required=True,
        type=Path,
        help='Credential JSON file: {"publicKey": ..., "secretKey": {...}}',
    )
    parser.add_argument("--rpc-url", help="Override the Solana RPC endpoint")
    return parser.parse_args(argv)


async def run_swap(settings: Settings, keypair_json: str, output_mint: str) -> dict:
    """Run one swap with the default collaborators and return the result dict."""
    context = SwapContext.with_defaults(settings)
    orchestrator = SwapOrchestrator(context)
    channel = FutureChannel(token="cli")

    status = execute_swap_wrapper(orchestrator, keypair_json, output_mint, channel)
    logger.info(f"Swap status: {status}")
    if status == SWAP_INITIATED:
        await orchestrator.wait_idle()

    result = await channel.wait()
    return result.to_dict()


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    settings = get_settings()
    if args.rpc_url:
        settings = settings.model_copy(update={"sol_rpc_url": args.rpc_url})

    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug(f"Settings: {json.dumps(settings.get_safe_dict())}")

    try:
        keypair_json = args.keypair.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read keypair file: {e}")
        sys.exit(1)

    try:
        result = asyncio.run(run_swap(settings, keypair_json, args.output_mint))
    except DependencyError as e:
        logger.error(f"Dependency error: {e.reason}")
        sys.exit(1)

    print(json.dumps(result, indent=2))
    sys.exit(0 if result["success"] else 1)


if __name__ == "__main__":
    main()
