"""Abstract network node interface.

The executor only needs four capabilities from a node:
1. Latest blockhash (with its last valid block height)
2. Submit a signed transaction
3. Query a signature's status
4. Current block height
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from solders.hash import Hash
from solders.transaction import VersionedTransaction

logger = logging.getLogger(__name__)


class Commitment(str, Enum):
    """Commitment levels, ordered processed < confirmed < finalized."""
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @property
    def rank(self) -> int:
        return _COMMITMENT_RANK[self]

    def satisfies(self, required: "Commitment") -> bool:
        """Check if this level is at or above the required level."""
        return self.rank >= required.rank

    @classmethod
    def parse(cls, value) -> "Commitment":
        """Parse a commitment from its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValueError(
                f"Unknown commitment {value!r}, expected one of: "
                f"{', '.join(c.value for c in cls)}"
            ) from e


_COMMITMENT_RANK = {
    Commitment.PROCESSED: 0,
    Commitment.CONFIRMED: 1,
    Commitment.FINALIZED: 2,
}


@dataclass(frozen=True)
class SendOptions:
    """Options applied when submitting a transaction to the node.

    Attributes:
        skip_preflight: Skip node-side simulation before acceptance
        max_retries: Node-level rebroadcast attempts (None = node default)
        preflight_commitment: Commitment used for the preflight simulation
    """
    skip_preflight: bool = False
    max_retries: Optional[int] = None
    preflight_commitment: Commitment = Commitment.FINALIZED

    def __post_init__(self):
        if self.max_retries is not None and self.max_retries < 0:
            raise ValueError("max_retries must not be negative")


@dataclass(frozen=True)
class LatestBlockhash:
    """A recent blockhash and the last block height at which it is valid."""
    blockhash: Hash
    last_valid_block_height: int


@dataclass(frozen=True)
class SignatureStatus:
    """Status of a submitted transaction.

    Attributes:
        confirmation_status: Highest commitment reached (None if unknown)
        err: Transaction-level error reported by the node, if any
        slot: Slot the transaction was processed in
        confirmations: Number of confirmations (None once rooted)
    """
    confirmation_status: Optional[Commitment] = None
    err: Optional[Any] = None
    slot: Optional[int] = None
    confirmations: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.err is not None

    def satisfies(self, required: Commitment) -> bool:
        """Check if the reported level meets the required commitment."""
        if self.confirmation_status is None:
            return False
        return self.confirmation_status.satisfies(required)


class NodeClient(ABC):
    """Abstract base class for network node clients."""

    @abstractmethod
    async def get_latest_blockhash(
        self, commitment: Commitment = Commitment.FINALIZED
    ) -> LatestBlockhash:
        """Fetch the latest blockhash at the given commitment.

        Raises:
            NetworkError: If the node cannot be reached
        """
        pass

    @abstractmethod
    async def send_transaction(self, transaction: VersionedTransaction, opts: SendOptions) -> str:
        """Submit a signed transaction.

        Returns:
            The transaction signature (base58)

        Raises:
            SubmissionError: If the node rejects the transaction
            NetworkError: If the node cannot be reached
        """
        pass

    @abstractmethod
    async def get_signature_status(self, signature: str) -> Optional[SignatureStatus]:
        """Query the status of a signature.

        Returns:
            SignatureStatus, or None if the node has no status yet

        Raises:
            NetworkError: If the node cannot be reached
        """
        pass

    @abstractmethod
    async def get_block_height(self, commitment: Commitment = Commitment.CONFIRMED) -> int:
        """Get the current block height."""
        pass

    async def close(self) -> None:
        """Release any underlying connections."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
