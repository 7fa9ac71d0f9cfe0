"""Swap execution module.

Provides:
- SwapExecutor: fetch quote, build and sign, submit and confirm
- SwapOptions: send and confirmation settings
"""

from solswap.swap.builder import SignedTransaction, decode_transaction, sign_transaction
from solswap.swap.executor import (
    SubmissionState,
    SubmissionTrace,
    SwapExecutor,
    SwapResult,
    create_swap_executor,
)
from solswap.swap.options import SwapOptions

__all__ = [
    # Executor
    "SwapExecutor",
    "SwapResult",
    "SubmissionState",
    "SubmissionTrace",
    "create_swap_executor",
    # Options
    "SwapOptions",
    # Builder
    "SignedTransaction",
    "decode_transaction",
    "sign_transaction",
]
