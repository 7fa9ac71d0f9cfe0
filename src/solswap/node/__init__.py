"""Network node clients."""

from solswap.node.base import (
    Commitment,
    LatestBlockhash,
    NodeClient,
    SendOptions,
    SignatureStatus,
)
from solswap.node.solana_rpc import SolanaRpcNodeClient

__all__ = [
    "Commitment",
    "LatestBlockhash",
    "NodeClient",
    "SendOptions",
    "SignatureStatus",
    "SolanaRpcNodeClient",
]
