"""Options controlling transaction sending and confirmation."""

from dataclasses import dataclass, field
from typing import Optional

from solswap.config import Settings
from solswap.node.base import Commitment, SendOptions


@dataclass(frozen=True)
class SwapOptions:
    """Send and confirmation settings for one swap.

    All durations are in seconds.

    Attributes:
        send_options: Options passed to the node when submitting
        confirmation_retries: Maximum number of status polls
        confirmation_retry_timeout: Maximum wait for a single status query
            (None = wait for the node)
        last_valid_block_height_buffer: Blocks of slack before the
            blockhash is treated as expired when resending
        commitment: Commitment the transaction must reach to succeed
        resend_interval: Minimum time between resubmissions while polling
            (None = never resend)
        confirmation_check_interval: Sleep between status polls
        skip_confirmation_check: Return right after a successful send
    """

    send_options: SendOptions = field(default_factory=SendOptions)
    confirmation_retries: int = 30
    confirmation_retry_timeout: Optional[float] = 1.0
    last_valid_block_height_buffer: int = 150
    commitment: Commitment = Commitment.FINALIZED
    resend_interval: Optional[float] = None
    confirmation_check_interval: float = 1.0
    skip_confirmation_check: bool = False

    def __post_init__(self):
        object.__setattr__(self, "commitment", Commitment.parse(self.commitment))

        if self.confirmation_retries < 0:
            raise ValueError("confirmation_retries must not be negative")
        if self.confirmation_check_interval < 0:
            raise ValueError("confirmation_check_interval must not be negative")
        if self.last_valid_block_height_buffer < 0:
            raise ValueError("last_valid_block_height_buffer must not be negative")
        if self.confirmation_retry_timeout is not None and self.confirmation_retry_timeout <= 0:
            raise ValueError("confirmation_retry_timeout must be positive")
        if self.resend_interval is not None and self.resend_interval <= 0:
            raise ValueError("resend_interval must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SwapOptions":
        """Build options from application settings."""
        return cls(
            send_options=SendOptions(
                skip_preflight=settings.skip_preflight,
                max_retries=settings.max_retries,
            ),
            confirmation_retries=settings.confirmation_retries,
            confirmation_retry_timeout=settings.confirmation_retry_timeout,
            last_valid_block_height_buffer=settings.last_valid_block_height_buffer,
            commitment=Commitment.parse(settings.commitment),
            resend_interval=settings.resend_interval,
            confirmation_check_interval=settings.confirmation_check_interval,
            skip_confirmation_check=settings.skip_confirmation_check,
        )
