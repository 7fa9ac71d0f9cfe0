"""Pytest configuration and fixtures."""

import asyncio
import base64
import os
import time
from typing import Optional

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction

# Set test environment
os.environ.pop("PRIVATE_KEY", None)
os.environ["DEBUG"] = "true"

from solswap.node.base import (
    Commitment,
    LatestBlockhash,
    NodeClient,
    SendOptions,
    SignatureStatus,
)
from solswap.routing.base import SwapQuote
from solswap.signing.local import LocalSigner


def make_payload(payer: Pubkey, legacy: bool = False, co_signer: Optional[Pubkey] = None) -> str:
    """Base64 unsigned transfer transaction paid by ``payer``.

    With ``co_signer`` the lamports come from that account, making it a
    second required signer.
    """
    source = co_signer or payer
    ix = transfer(TransferParams(from_pubkey=source, to_pubkey=Pubkey.new_unique(), lamports=1_000))
    if legacy:
        message = Message.new_with_blockhash([ix], payer, Hash.default())
    else:
        message = MessageV0.try_compile(payer, [ix], [], Hash.default())
    signers = message.header.num_required_signatures
    tx = VersionedTransaction.populate(message, [Signature.default()] * signers)
    return base64.b64encode(bytes(tx)).decode()


class FakeNode(NodeClient):
    """In-memory node returning scripted signature statuses.

    ``statuses`` is consumed one entry per poll; the last entry repeats.
    """

    def __init__(
        self,
        statuses: Optional[list] = None,
        send_error: Optional[Exception] = None,
        resend_error: Optional[Exception] = None,
        block_height: int = 1_000,
        last_valid_block_height: int = 2_000,
        status_delay: float = 0.0,
    ):
        self.statuses = list(statuses or [])
        self.send_error = send_error
        self.resend_error = resend_error
        self.block_height = block_height
        self.blockhash = Hash.new_unique()
        self.last_valid_block_height = last_valid_block_height
        self.status_delay = status_delay
        self.sent: list[SendOptions] = []
        self.poll_times: list[float] = []
        self.blockhash_commitments: list[Commitment] = []
        self.block_height_calls = 0
        self.closed = False

    @property
    def status_calls(self) -> int:
        return len(self.poll_times)

    async def get_latest_blockhash(self, commitment=Commitment.FINALIZED):
        self.blockhash_commitments.append(commitment)
        return LatestBlockhash(self.blockhash, self.last_valid_block_height)

    async def send_transaction(self, transaction, opts):
        if self.send_error is not None and not self.sent:
            raise self.send_error
        if self.resend_error is not None and self.sent:
            raise self.resend_error
        self.sent.append(opts)
        return str(transaction.signatures[0])

    async def get_signature_status(self, signature):
        self.poll_times.append(time.monotonic())
        if self.status_delay:
            await asyncio.sleep(self.status_delay)
        if not self.statuses:
            return None
        index = min(len(self.poll_times), len(self.statuses)) - 1
        return self.statuses[index]

    async def get_block_height(self, commitment=Commitment.CONFIRMED):
        self.block_height_calls += 1
        return self.block_height

    async def close(self):
        self.closed = True


def status(level: Optional[str] = None, err=None) -> SignatureStatus:
    """Shorthand for a SignatureStatus."""
    return SignatureStatus(
        confirmation_status=Commitment(level) if level else None,
        err=err,
        slot=1,
    )


@pytest.fixture
def keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def signer(keypair) -> LocalSigner:
    return LocalSigner(keypair)


@pytest.fixture
def quote(keypair) -> SwapQuote:
    return SwapQuote(txn=make_payload(keypair.pubkey()))
