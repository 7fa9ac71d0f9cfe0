"""Command line entry point - performs one swap.

Usage:
    solswap --from So11111111111111111111111111111111111111112 \\
            --to 4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R --amount 0.0001

RPC URL, swap API URL and the private key come from settings (env / .env).
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import Optional

from solswap.config import Settings, get_settings
from solswap.errors import SwapError
from solswap.routing.base import SwapRequest
from solswap.swap.executor import SwapResult, create_swap_executor
from solswap.swap.options import SwapOptions

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Swap tokens through Solana Tracker")
    parser.add_argument("--from", dest="from_token", required=True, help="Mint to swap from")
    parser.add_argument("--to", dest="to_token", required=True, help="Mint to swap to")
    parser.add_argument("--amount", required=True, help="Amount of the source token")
    parser.add_argument(
        "--slippage",
        default=str(settings.default_slippage),
        help=f"Slippage tolerance in percent (default: {settings.default_slippage})",
    )
    parser.add_argument(
        "--priority-fee",
        default=None if settings.priority_fee is None else str(settings.priority_fee),
        help="Priority fee in SOL",
    )
    parser.add_argument(
        "--force-legacy",
        action="store_true",
        default=settings.force_legacy,
        help="Request a legacy transaction",
    )
    parser.add_argument(
        "--skip-confirmation",
        action="store_true",
        default=settings.skip_confirmation_check,
        help="Return as soon as the transaction is sent",
    )
    return parser.parse_args(argv)


async def run_swap(args: argparse.Namespace, settings: Settings) -> SwapResult:
    """Fetch, sign, send and confirm one swap."""
    options = replace(
        SwapOptions.from_settings(settings),
        skip_confirmation_check=args.skip_confirmation,
    )

    async with create_swap_executor(settings) as executor:
        request = SwapRequest(
            from_token=args.from_token,
            to_token=args.to_token,
            from_amount=args.amount,
            slippage=args.slippage,
            payer=str(executor.signer.pubkey),
            priority_fee=args.priority_fee,
            force_legacy=args.force_legacy,
        )
        return await executor.swap(request, options)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    settings = get_settings()

    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug(f"Settings: {settings.get_safe_dict()}")

    try:
        result = asyncio.run(run_swap(args, settings))
    except (SwapError, ValueError) as e:
        logger.error(f"Swap failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        return 130

    print(f"Transaction ID: {result.signature}")
    print(f"Transaction URL: {result.explorer_url}")
    print(f"Swap completed in {result.elapsed_seconds:.2f} seconds ({result.state.value})")
    print(f"Confirmation time: {result.confirmation_seconds:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
