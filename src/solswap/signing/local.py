"""Local signing backend.

Uses an in-memory keypair. Suitable for:
- Development/testing
- Hot wallet with small amounts

WARNING: The private key is held in memory for the lifetime of the signer.
"""

import json
import logging

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from solswap.errors import SigningError
from solswap.signing.base import SignerType, TransactionSigner

logger = logging.getLogger(__name__)

KEYPAIR_LENGTH = 64


class LocalSigner(TransactionSigner):
    """Signer holding one Solana keypair."""

    def __init__(self, keypair: Keypair):
        super().__init__(SignerType.LOCAL)
        self._keypair = keypair

    @classmethod
    def from_secret(cls, secret: str) -> "LocalSigner":
        """Load a keypair from a secret string.

        Accepts either a base58 encoded 64-byte secret key or the JSON
        byte-array format written by ``solana-keygen``.

        Raises:
            SigningError: If the secret cannot be decoded
        """
        secret = secret.strip()
        try:
            if secret.startswith("["):
                raw = bytes(json.loads(secret))
            else:
                raw = base58.b58decode(secret)
        except (ValueError, TypeError) as e:
            raise SigningError(f"Failed to decode private key: {e}") from e

        if len(raw) != KEYPAIR_LENGTH:
            raise SigningError(
                f"Private key must be {KEYPAIR_LENGTH} bytes, got {len(raw)}"
            )

        try:
            keypair = Keypair.from_bytes(raw)
        except ValueError as e:
            raise SigningError(f"Invalid private key: {e}") from e

        logger.info(f"Loaded local signer for {keypair.pubkey()}")
        return cls(keypair)

    @property
    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    def sign_message(self, message: bytes) -> Signature:
        return self._keypair.sign_message(message)
