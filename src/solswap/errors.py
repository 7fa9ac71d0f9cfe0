"""Exceptions raised along the swap call chain.

Every error carries the originating exception as ``__cause__`` when one exists.
"""

from typing import Any, Optional


class SwapError(Exception):
    """Base class for all swap errors."""
    pass


class NetworkError(SwapError):
    """Quote fetch or node communication failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(SwapError):
    """Malformed JSON, base64 or binary transaction."""
    pass


class SigningError(SwapError):
    """No local key matches a required signer."""
    pass


class SubmissionError(SwapError):
    """The node rejected the transaction."""
    pass


class ConfirmationError(SwapError):
    """Transaction executed but was reported as failed on-chain."""

    def __init__(self, signature: str, error: Any):
        super().__init__(f"Transaction {signature} failed: {error}")
        self.signature = signature
        self.error = error


class ConfirmationTimeoutError(SwapError, TimeoutError):
    """Confirmation retries exhausted or blockhash expired."""

    def __init__(self, signature: str, attempts: int, reason: str = "retries exhausted"):
        super().__init__(
            f"Transaction {signature} confirmation timed out after {attempts} poll(s): {reason}"
        )
        self.signature = signature
        self.attempts = attempts
        self.reason = reason
