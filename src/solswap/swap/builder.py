"""Turning a quote payload into a signed transaction.

decode_transaction: base64 payload -> VersionedTransaction
with_blockhash: message rebuilt around a fresh blockhash
sign_transaction: fill every required signer slot with the local signer
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Union

from solders.hash import Hash
from solders.message import Message, MessageV0, to_bytes_versioned
from solders.transaction import VersionedTransaction

from solswap.errors import DecodeError, SigningError
from solswap.node.base import LatestBlockhash
from solswap.signing.base import TransactionSigner

logger = logging.getLogger(__name__)

AnyMessage = Union[Message, MessageV0]


@dataclass(frozen=True)
class SignedTransaction:
    """A signed transaction ready to be submitted."""

    transaction: VersionedTransaction
    last_valid_block_height: int

    @property
    def signature(self) -> str:
        """Fee payer signature, which identifies the transaction."""
        return str(self.transaction.signatures[0])

    @property
    def is_legacy(self) -> bool:
        return isinstance(self.transaction.message, Message)


def decode_transaction(payload: str) -> VersionedTransaction:
    """Decode a base64 payload into a transaction.

    Both legacy and v0 messages are accepted.

    Raises:
        DecodeError: If the payload is not valid base64 or not a transaction
    """
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Error decoding transaction: {e}") from e

    if not raw:
        raise DecodeError("Error decoding transaction: empty payload")

    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:
        # solders surfaces bincode failures with its own exception types
        raise DecodeError(f"Error deserializing transaction: {e}") from e


def with_blockhash(message: AnyMessage, blockhash: Hash) -> AnyMessage:
    """Return a copy of the message with a new recent blockhash."""
    if isinstance(message, MessageV0):
        return MessageV0(
            message.header,
            message.account_keys,
            blockhash,
            message.instructions,
            message.address_table_lookups,
        )

    header = message.header
    return Message.new_with_compiled_instructions(
        header.num_required_signatures,
        header.num_readonly_signed_accounts,
        header.num_readonly_unsigned_accounts,
        message.account_keys,
        blockhash,
        message.instructions,
    )


def sign_transaction(
    transaction: VersionedTransaction,
    latest: LatestBlockhash,
    signer: TransactionSigner,
) -> SignedTransaction:
    """Attach a fresh blockhash and sign.

    Replacing the blockhash invalidates any existing signature, so the
    signer must hold the key for every required signer slot.

    Raises:
        SigningError: If a required signer is not the local key
    """
    message = with_blockhash(transaction.message, latest.blockhash)
    required = message.header.num_required_signatures
    signer_keys = list(message.account_keys[:required])

    if not signer_keys:
        raise SigningError("Transaction has no required signers")

    missing = [key for key in signer_keys if not signer.can_sign(key)]
    if missing:
        raise SigningError(
            f"Signer key {missing[0]} not found (local key is {signer.pubkey})"
        )

    signature = signer.sign_message(to_bytes_versioned(message))
    signed = VersionedTransaction.populate(message, [signature] * required)

    logger.debug(
        f"Signed transaction {signature} "
        f"(blockhash {latest.blockhash}, valid until block {latest.last_valid_block_height})"
    )
    return SignedTransaction(
        transaction=signed,
        last_valid_block_height=latest.last_valid_block_height,
    )
