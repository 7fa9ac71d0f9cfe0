"""Base interface for transaction signing.

Signing flow:
1. Rebuild the message with a fresh blockhash
2. Check every required signer slot holds the signer's public key
3. Signer returns a signature over the serialized message
4. Place the signature in the signer slot

The new blockhash invalidates any existing signature, so a message that
needs another account's signature cannot be signed locally.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from solders.pubkey import Pubkey
from solders.signature import Signature

logger = logging.getLogger(__name__)


class SignerType(str, Enum):
    """Type of signing backend."""
    LOCAL = "local"           # Private key in memory (hot wallet)


class TransactionSigner(ABC):
    """Abstract base class for signing backends.

    Implementations should NEVER expose raw private keys.
    """

    def __init__(self, signer_type: SignerType):
        self.signer_type = signer_type

    @property
    @abstractmethod
    def pubkey(self) -> Pubkey:
        """Public key the signer signs for."""
        pass

    @abstractmethod
    def sign_message(self, message: bytes) -> Signature:
        """Sign serialized message bytes.

        Args:
            message: Serialized transaction message

        Returns:
            ed25519 signature
        """
        pass

    def can_sign(self, key: Pubkey) -> bool:
        """Check if this signer holds the key for a signer slot."""
        return key == self.pubkey

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.signer_type.value}, pubkey={self.pubkey})"
