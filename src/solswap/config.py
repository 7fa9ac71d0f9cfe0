"""Application configuration using pydantic-settings.

Values come from environment variables or a local ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Endpoints
    # ======================
    swap_api_url: str = Field(
        default="https://swap-v2.solanatracker.io",
        description="Solana Tracker swap API base URL",
    )
    rpc_url: str = Field(
        default="https://solana-rpc.publicnode.com",
        description="Solana RPC URL",
    )
    http_timeout: float = Field(default=30.0, description="Quote request timeout in seconds")

    # ======================
    # Wallet
    # ======================
    private_key: Optional[str] = Field(
        default=None, description="Base58 encoded Solana secret key used for signing"
    )

    # ======================
    # Swap defaults
    # ======================
    default_slippage: float = Field(default=30, description="Default slippage tolerance (percent)")
    priority_fee: Optional[float] = Field(
        default=None, description="Priority fee in SOL (recommended while the network is congested)"
    )
    force_legacy: bool = Field(default=False, description="Request legacy transactions")

    # ======================
    # Send / confirmation
    # ======================
    skip_preflight: bool = Field(default=True, description="Skip node-side preflight simulation")
    max_retries: Optional[int] = Field(
        default=5, description="Node-level rebroadcast attempts (None = node default)"
    )
    confirmation_retries: int = Field(default=50, description="Number of status polls")
    confirmation_retry_timeout: float = Field(
        default=1.0, description="Maximum wait for a single status query (seconds)"
    )
    last_valid_block_height_buffer: int = Field(
        default=200, description="Blocks of slack before the blockhash expires"
    )
    commitment: str = Field(
        default="finalized", description="Required commitment (processed, confirmed, finalized)"
    )
    resend_interval: Optional[float] = Field(
        default=None, description="Seconds between resubmissions while polling (None = disabled)"
    )
    confirmation_check_interval: float = Field(
        default=0.1, description="Seconds between status polls"
    )
    skip_confirmation_check: bool = Field(
        default=False, description="Return right after sending without confirming"
    )

    # ======================
    # Environment
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @property
    def has_wallet(self) -> bool:
        """Check if a signing key is configured."""
        return bool(self.private_key and self.private_key.strip())

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "swap_api_url": self.swap_api_url,
            "rpc_url": self.rpc_url,
            "private_key": "***" if self.has_wallet else "(not set)",
            "debug": self.debug,
            "swap": {
                "slippage": self.default_slippage,
                "priority_fee": self.priority_fee,
                "force_legacy": self.force_legacy,
            },
            "confirmation": {
                "skip_preflight": self.skip_preflight,
                "max_retries": self.max_retries,
                "retries": self.confirmation_retries,
                "retry_timeout": self.confirmation_retry_timeout,
                "block_height_buffer": self.last_valid_block_height_buffer,
                "commitment": self.commitment,
                "resend_interval": self.resend_interval,
                "check_interval": self.confirmation_check_interval,
                "skip_check": self.skip_confirmation_check,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
