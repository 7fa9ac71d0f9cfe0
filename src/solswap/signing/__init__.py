"""Transaction signing services.

Provides:
- LocalSigner: keypair held in memory (hot wallet)
"""

from solswap.signing.base import SignerType, TransactionSigner
from solswap.signing.factory import get_signer
from solswap.signing.local import LocalSigner

__all__ = [
    "SignerType",
    "TransactionSigner",
    "LocalSigner",
    "get_signer",
]
