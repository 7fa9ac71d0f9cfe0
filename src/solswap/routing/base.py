"""Swap request/quote model and the quoting provider interface."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

logger = logging.getLogger(__name__)

Amount = Union[Decimal, float, int, str]


def to_decimal(value: Amount) -> Decimal:
    """Convert a user supplied amount to Decimal without float noise."""
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result


def format_amount(value: Decimal) -> str:
    """Render a Decimal in plain (non-scientific) notation."""
    return format(value, "f")


@dataclass(frozen=True)
class SwapRequest:
    """Parameters of a single swap.

    Attributes:
        from_token: Mint address of the token to swap from
        to_token: Mint address of the token to swap to
        from_amount: Amount of from_token, in human-readable units
        slippage: Maximum tolerated price slippage (percent)
        payer: Address of the wallet paying for the swap
        priority_fee: Optional priority fee in SOL
        force_legacy: Request a legacy (non-versioned) transaction
    """

    from_token: str
    to_token: str
    from_amount: Decimal
    slippage: Decimal
    payer: str
    priority_fee: Optional[Decimal] = None
    force_legacy: bool = False

    def __post_init__(self):
        for name in ("from_token", "to_token", "payer"):
            if not getattr(self, name):
                raise ValueError(f"{name} is required")

        # Frozen dataclass: normalize numeric fields in place
        object.__setattr__(self, "from_amount", to_decimal(self.from_amount))
        object.__setattr__(self, "slippage", to_decimal(self.slippage))
        if self.priority_fee is not None:
            object.__setattr__(self, "priority_fee", to_decimal(self.priority_fee))

        if self.from_amount <= 0:
            raise ValueError("from_amount must be positive")
        if self.slippage < 0:
            raise ValueError("slippage must not be negative")
        if self.priority_fee is not None and self.priority_fee < 0:
            raise ValueError("priority_fee must not be negative")

    def to_params(self) -> dict[str, str]:
        """Query parameters for the quoting service.

        Unset optional fields are omitted.
        """
        params = {
            "from": self.from_token,
            "to": self.to_token,
            "fromAmount": format_amount(self.from_amount),
            "slippage": format_amount(self.slippage),
            "payer": self.payer,
            "forceLegacy": "true" if self.force_legacy else "false",
        }
        if self.priority_fee is not None:
            params["priorityFee"] = format_amount(self.priority_fee)
        return params


@dataclass(frozen=True)
class SwapQuote:
    """Swap instructions returned by a quoting service.

    ``txn`` is the base64-encoded unsigned transaction.
    """

    txn: str
    force_legacy: bool = False
    raw: dict = field(default_factory=dict, compare=False, repr=False)


class QuoteProvider(ABC):
    """Abstract base class for quoting services."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @abstractmethod
    async def get_swap_instructions(self, request: SwapRequest) -> SwapQuote:
        """
        Fetch the transaction payload for a swap.

        Args:
            request: The swap to quote

        Returns:
            SwapQuote with the unsigned transaction

        Raises:
            NetworkError: If the request cannot complete
            DecodeError: If the response body is malformed
        """
        pass
