"""Solana JSON-RPC node client backed by solana-py."""

import logging
from typing import Optional

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from solders.transaction_status import TransactionConfirmationStatus

from solswap.errors import NetworkError, SubmissionError
from solswap.node.base import (
    Commitment,
    LatestBlockhash,
    NodeClient,
    SendOptions,
    SignatureStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

# Transport level failures surfaced by solana-py
_TRANSPORT_ERRORS = (SolanaRpcException, httpx.HTTPError)


def _to_commitment(status: Optional[TransactionConfirmationStatus]) -> Optional[Commitment]:
    """Map a solders confirmation status onto Commitment."""
    if status is None:
        return None
    if status == TransactionConfirmationStatus.Finalized:
        return Commitment.FINALIZED
    if status == TransactionConfirmationStatus.Confirmed:
        return Commitment.CONFIRMED
    return Commitment.PROCESSED


class SolanaRpcNodeClient(NodeClient):
    """Node client talking to a Solana RPC endpoint."""

    def __init__(self, rpc_url: str = DEFAULT_RPC_URL, timeout: float = 10.0):
        self.rpc_url = rpc_url
        self._client = AsyncClient(rpc_url, timeout=timeout)

    async def get_latest_blockhash(
        self, commitment: Commitment = Commitment.FINALIZED
    ) -> LatestBlockhash:
        try:
            resp = await self._client.get_latest_blockhash(commitment=commitment.value)
        except (RPCException, *_TRANSPORT_ERRORS) as e:
            raise NetworkError(f"Error getting recent blockhash: {e}") from e

        value = resp.value
        logger.debug(
            f"Latest blockhash {value.blockhash} (valid until block {value.last_valid_block_height})"
        )
        return LatestBlockhash(
            blockhash=value.blockhash,
            last_valid_block_height=value.last_valid_block_height,
        )

    async def send_transaction(self, transaction: VersionedTransaction, opts: SendOptions) -> str:
        tx_opts = TxOpts(
            skip_preflight=opts.skip_preflight,
            preflight_commitment=opts.preflight_commitment.value,
            max_retries=opts.max_retries,
        )
        try:
            resp = await self._client.send_raw_transaction(bytes(transaction), opts=tx_opts)
        except RPCException as e:
            raise SubmissionError(f"Error sending transaction: {e}") from e
        except _TRANSPORT_ERRORS as e:
            raise NetworkError(f"Error sending transaction: {e}") from e

        return str(resp.value)

    async def get_signature_status(self, signature: str) -> Optional[SignatureStatus]:
        try:
            resp = await self._client.get_signature_statuses([Signature.from_string(signature)])
        except (RPCException, *_TRANSPORT_ERRORS) as e:
            raise NetworkError(f"Error getting signature status: {e}") from e

        if not resp.value or resp.value[0] is None:
            return None

        status = resp.value[0]
        return SignatureStatus(
            confirmation_status=_to_commitment(status.confirmation_status),
            err=status.err,
            slot=status.slot,
            confirmations=status.confirmations,
        )

    async def get_block_height(self, commitment: Commitment = Commitment.CONFIRMED) -> int:
        try:
            resp = await self._client.get_block_height(commitment=commitment.value)
        except (RPCException, *_TRANSPORT_ERRORS) as e:
            raise NetworkError(f"Error getting block height: {e}") from e
        return resp.value

    async def close(self) -> None:
        await self._client.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rpc_url={self.rpc_url!r})"
