"""Solana Tracker swap API integration.

API: GET {base_url}/swap?from=..&to=..&fromAmount=..&slippage=..&payer=..
Response: {"txn": "<base64 transaction>", "forceLegacy": bool}
"""

import logging
from typing import Optional

import httpx

from solswap.errors import DecodeError, NetworkError
from solswap.routing.base import QuoteProvider, SwapQuote, SwapRequest

logger = logging.getLogger(__name__)

SOLANA_TRACKER_API = "https://swap-v2.solanatracker.io"

# Well-known mints
SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


class SolanaTrackerProvider(QuoteProvider):
    """Quoting client for the Solana Tracker swap API.

    Each call issues exactly one GET request; there are no retries.
    """

    def __init__(
        self,
        base_url: str = SOLANA_TRACKER_API,
        timeout: float = 30.0,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the provider.

        Args:
            base_url: Swap API base URL
            timeout: Request timeout in seconds
            api_key: Optional API key sent as x-api-key
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key
        self._transport = transport

    @property
    def name(self) -> str:
        return "SolanaTracker"

    def _get_headers(self) -> dict:
        """Get API headers."""
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    async def get_swap_instructions(self, request: SwapRequest) -> SwapQuote:
        """Fetch the swap transaction from Solana Tracker."""
        params = request.to_params()
        logger.debug(
            f"Requesting swap: {params['fromAmount']} {request.from_token} -> {request.to_token} "
            f"(slippage: {params['slippage']}%)"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/swap",
                    headers=self._get_headers(),
                    params=params,
                )
        except httpx.HTTPError as e:
            raise NetworkError(f"Error fetching swap instructions: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Swap API error: {response.status_code} - {response.text}")
            raise NetworkError(
                f"Swap API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"Error decoding swap response: {e}") from e

        if not isinstance(data, dict):
            raise DecodeError("Error decoding swap response: expected a JSON object")

        txn = data.get("txn")
        if not isinstance(txn, str) or not txn:
            raise DecodeError("Swap response is missing the transaction payload")

        # The response flag is not authoritative; echo what was requested
        return SwapQuote(txn=txn, force_legacy=request.force_legacy, raw=data)


def create_solana_tracker_provider(
    base_url: str = SOLANA_TRACKER_API, timeout: float = 30.0
) -> SolanaTrackerProvider:
    """Create a Solana Tracker provider instance."""
    return SolanaTrackerProvider(base_url=base_url, timeout=timeout)
