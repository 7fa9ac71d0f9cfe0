"""Signer factory.

Creates the signing backend from configuration.
"""

import logging
from typing import Optional

from solswap.config import Settings, get_settings
from solswap.errors import SigningError
from solswap.signing.base import TransactionSigner
from solswap.signing.local import LocalSigner

logger = logging.getLogger(__name__)


def get_signer(settings: Optional[Settings] = None) -> TransactionSigner:
    """Create the configured signer.

    Raises:
        SigningError: If no private key is configured or it is invalid
    """
    settings = settings or get_settings()

    if not settings.has_wallet:
        raise SigningError("PRIVATE_KEY not configured")

    logger.info("Initializing local signer")
    return LocalSigner.from_secret(settings.private_key)
