"""Quoting services for swap instructions."""

from solswap.routing.base import QuoteProvider, SwapQuote, SwapRequest
from solswap.routing.solana_tracker import SolanaTrackerProvider, create_solana_tracker_provider

__all__ = [
    "QuoteProvider",
    "SwapQuote",
    "SwapRequest",
    "SolanaTrackerProvider",
    "create_solana_tracker_provider",
]
