"""Swap execution: quote -> sign -> send -> confirm.

The only stateful part is submit_and_confirm:

    SENT -> POLLING -> CONFIRMED | FAILED | TIMED_OUT

A failed send is terminal; only the status poll is retried.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from solders.message import MessageV0

from solswap.config import Settings, get_settings
from solswap.errors import (
    ConfirmationError,
    ConfirmationTimeoutError,
    NetworkError,
    SubmissionError,
    SwapError,
)
from solswap.node.base import Commitment, NodeClient, SendOptions, SignatureStatus
from solswap.routing.base import QuoteProvider, SwapQuote, SwapRequest
from solswap.signing.base import TransactionSigner
from solswap.swap.builder import SignedTransaction, decode_transaction, sign_transaction
from solswap.swap.options import SwapOptions

logger = logging.getLogger(__name__)

EXPLORER_TX_URL = "https://solscan.io/tx/{signature}"


class SubmissionState(str, Enum):
    """States of the submit-and-confirm loop."""
    SENT = "sent"
    POLLING = "polling"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class SubmissionTrace:
    """Progress of one submit-and-confirm run."""
    signature: Optional[str] = None
    state: Optional[SubmissionState] = None
    polls: int = 0
    sends: int = 0
    sent_at: Optional[float] = None

    def transition(self, state: SubmissionState) -> None:
        previous = self.state.value if self.state else None
        logger.debug(f"Transaction {self.signature}: {previous} -> {state.value}")
        self.state = state


@dataclass
class SwapResult:
    """Result of a completed swap."""
    signature: str
    state: SubmissionState
    polls: int
    sends: int
    elapsed_seconds: float
    confirmation_seconds: float

    @property
    def confirmed(self) -> bool:
        return self.state == SubmissionState.CONFIRMED

    @property
    def explorer_url(self) -> str:
        return EXPLORER_TX_URL.format(signature=self.signature)


class SwapExecutor:
    """Fetches, signs, submits and confirms swap transactions."""

    def __init__(
        self,
        provider: QuoteProvider,
        node: NodeClient,
        signer: TransactionSigner,
    ):
        self.provider = provider
        self.node = node
        self.signer = signer

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self) -> None:
        await self.node.close()

    async def fetch_quote(self, request: SwapRequest) -> SwapQuote:
        """Fetch swap instructions for a request.

        Raises:
            NetworkError: If the quoting call fails
            DecodeError: If the response is malformed
        """
        logger.info(
            f"Fetching swap from {self.provider.name}: "
            f"{request.from_amount} {request.from_token} -> {request.to_token}"
        )
        return await self.provider.get_swap_instructions(request)

    async def build_and_sign(self, quote: SwapQuote) -> SignedTransaction:
        """Decode the quote, attach the latest finalized blockhash and sign.

        Raises:
            DecodeError: If the payload is malformed
            SigningError: If the local key does not cover the required signers
            NetworkError: If the blockhash cannot be fetched
        """
        transaction = decode_transaction(quote.txn)

        if quote.force_legacy and isinstance(transaction.message, MessageV0):
            logger.warning("Legacy transaction requested but quote returned a versioned one")

        latest = await self.node.get_latest_blockhash(Commitment.FINALIZED)
        return sign_transaction(transaction, latest, self.signer)

    async def submit_and_confirm(
        self,
        signed: SignedTransaction,
        options: SwapOptions,
        trace: Optional[SubmissionTrace] = None,
    ) -> str:
        """Send a signed transaction and poll until it reaches the commitment.

        Args:
            signed: Signed transaction
            options: Send and confirmation options
            trace: Optional trace updated with state, polls and sends

        Returns:
            Transaction signature

        Raises:
            SubmissionError: If the node rejects the transaction
            NetworkError: If the node cannot be reached
            ConfirmationError: If the transaction failed on-chain
            ConfirmationTimeoutError: If confirmation retries are exhausted
                or the blockhash expired
        """
        trace = trace if trace is not None else SubmissionTrace()

        try:
            signature = await self.node.send_transaction(signed.transaction, options.send_options)
        except SwapError:
            trace.transition(SubmissionState.FAILED)
            raise

        trace.signature = signature
        trace.sends = 1
        trace.sent_at = time.monotonic()
        trace.transition(SubmissionState.SENT)
        last_sent = trace.sent_at
        logger.info(f"Transaction sent: {signature}")

        if options.skip_confirmation_check:
            trace.transition(SubmissionState.CONFIRMED)
            return signature

        trace.transition(SubmissionState.POLLING)

        for attempt in range(1, options.confirmation_retries + 1):
            try:
                status = await self._get_status(signature, options)
            except SwapError:
                trace.transition(SubmissionState.FAILED)
                raise
            trace.polls = attempt

            if status is not None:
                if status.failed:
                    trace.transition(SubmissionState.FAILED)
                    logger.error(f"Transaction {signature} failed: {status.err}")
                    raise ConfirmationError(signature, status.err)

                if status.satisfies(options.commitment):
                    trace.transition(SubmissionState.CONFIRMED)
                    logger.info(
                        f"Transaction {signature} reached {status.confirmation_status.value} "
                        f"after {attempt} poll(s)"
                    )
                    return signature

            if attempt == options.confirmation_retries:
                break

            if (
                options.resend_interval is not None
                and time.monotonic() - last_sent >= options.resend_interval
            ):
                try:
                    await self._resend(signed, options, trace)
                except NetworkError:
                    trace.transition(SubmissionState.FAILED)
                    raise
                last_sent = time.monotonic()

            await asyncio.sleep(options.confirmation_check_interval)

        trace.transition(SubmissionState.TIMED_OUT)
        logger.warning(f"Transaction {signature} not confirmed after {trace.polls} poll(s)")
        raise ConfirmationTimeoutError(signature, trace.polls)

    async def _get_status(self, signature: str, options: SwapOptions) -> Optional[SignatureStatus]:
        """Query the signature status, bounded by confirmation_retry_timeout.

        A query that does not answer in time counts as no status yet.
        """
        if options.confirmation_retry_timeout is None:
            return await self.node.get_signature_status(signature)

        try:
            return await asyncio.wait_for(
                self.node.get_signature_status(signature),
                timeout=options.confirmation_retry_timeout,
            )
        except asyncio.TimeoutError:
            logger.debug(
                f"Status query for {signature} exceeded {options.confirmation_retry_timeout}s"
            )
            return None

    async def _resend(
        self,
        signed: SignedTransaction,
        options: SwapOptions,
        trace: SubmissionTrace,
    ) -> None:
        """Resubmit the same signed transaction unless its blockhash expired."""
        block_height = await self.node.get_block_height()
        expiry = signed.last_valid_block_height - options.last_valid_block_height_buffer

        if block_height > expiry:
            trace.transition(SubmissionState.TIMED_OUT)
            raise ConfirmationTimeoutError(
                trace.signature,
                trace.polls,
                reason=f"blockhash expired (block height {block_height} > {expiry})",
            )

        resend_opts = SendOptions(
            skip_preflight=True,
            max_retries=options.send_options.max_retries,
            preflight_commitment=options.send_options.preflight_commitment,
        )
        try:
            await self.node.send_transaction(signed.transaction, resend_opts)
        except SubmissionError as e:
            # Duplicates of an already accepted transaction may be rejected
            logger.warning(f"Resend of {trace.signature} rejected: {e}")
            return

        trace.sends += 1
        logger.debug(f"Resent {trace.signature} (send #{trace.sends}, block height {block_height})")

    async def perform_swap(self, quote: SwapQuote, options: SwapOptions) -> SwapResult:
        """Sign, send and confirm the transaction of a quote."""
        started = time.monotonic()
        signed = await self.build_and_sign(quote)

        trace = SubmissionTrace(signature=signed.signature)
        try:
            await self.submit_and_confirm(signed, options, trace)
        except SwapError:
            logger.error(
                f"Swap failed in state {trace.state.value if trace.state else 'unsent'} "
                f"after {time.monotonic() - started:.2f}s"
            )
            raise

        finished = time.monotonic()
        result = SwapResult(
            signature=trace.signature,
            state=trace.state,
            polls=trace.polls,
            sends=trace.sends,
            elapsed_seconds=finished - started,
            confirmation_seconds=finished - trace.sent_at,
        )
        logger.info(
            f"Swap completed in {result.elapsed_seconds:.2f}s "
            f"(confirmation {result.confirmation_seconds:.2f}s): {result.explorer_url}"
        )
        return result

    async def swap(self, request: SwapRequest, options: SwapOptions) -> SwapResult:
        """Fetch a quote for the request and perform the swap."""
        quote = await self.fetch_quote(request)
        return await self.perform_swap(quote, options)


def create_swap_executor(settings: Optional[Settings] = None) -> SwapExecutor:
    """Create an executor wired from application settings."""
    from solswap.node.solana_rpc import SolanaRpcNodeClient
    from solswap.routing.solana_tracker import create_solana_tracker_provider
    from solswap.signing.factory import get_signer

    settings = settings or get_settings()
    signer = get_signer(settings)
    return SwapExecutor(
        provider=create_solana_tracker_provider(
            base_url=settings.swap_api_url,
            timeout=settings.http_timeout,
        ),
        node=SolanaRpcNodeClient(settings.rpc_url),
        signer=signer,
    )
