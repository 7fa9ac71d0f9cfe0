"""Tests for the routing module."""

import json
from decimal import Decimal

import httpx
import pytest

from solswap.errors import DecodeError, NetworkError
from solswap.routing.base import SwapQuote, SwapRequest
from solswap.routing.solana_tracker import SOL_MINT, USDC_MINT, SolanaTrackerProvider

PAYER = "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"


def make_request(**overrides) -> SwapRequest:
    fields = dict(
        from_token=SOL_MINT,
        to_token=USDC_MINT,
        from_amount=Decimal("0.0001"),
        slippage=Decimal("30"),
        payer=PAYER,
    )
    fields.update(overrides)
    return SwapRequest(**fields)


def make_provider(handler) -> SolanaTrackerProvider:
    return SolanaTrackerProvider(
        base_url="https://swap.test/",
        transport=httpx.MockTransport(handler),
    )


class TestSwapRequest:
    """Tests for SwapRequest."""

    def test_params_without_priority_fee(self):
        """Test that unset priority fee is omitted."""
        params = make_request().to_params()

        assert params == {
            "from": SOL_MINT,
            "to": USDC_MINT,
            "fromAmount": "0.0001",
            "slippage": "30",
            "payer": PAYER,
            "forceLegacy": "false",
        }

    def test_params_with_priority_fee_and_legacy(self):
        """Test optional fields are rendered when set."""
        params = make_request(priority_fee=Decimal("0.00005"), force_legacy=True).to_params()

        assert params["priorityFee"] == "0.00005"
        assert params["forceLegacy"] == "true"

    def test_float_amounts_have_no_float_noise(self):
        """Test floats are converted through their string form."""
        request = make_request(from_amount=0.1, slippage=0.5, priority_fee=1e-7)

        assert request.from_amount == Decimal("0.1")
        assert request.to_params()["priorityFee"] == "0.0000001"

    def test_request_is_immutable(self):
        """Test that a request cannot be modified."""
        request = make_request()

        with pytest.raises(AttributeError):
            request.payer = "other"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"from_token": ""},
            {"payer": ""},
            {"from_amount": Decimal("0")},
            {"slippage": Decimal("-1")},
            {"priority_fee": Decimal("-0.1")},
            {"from_amount": "not-a-number"},
            {"from_amount": "nan"},
            {"from_amount": "inf"},
            {"slippage": "Infinity"},
            {"priority_fee": Decimal("NaN")},
        ],
    )
    def test_invalid_request_rejected(self, overrides):
        """Test validation of request fields."""
        with pytest.raises(ValueError):
            make_request(**overrides)


class TestSolanaTrackerProvider:
    """Tests for SolanaTrackerProvider."""

    @pytest.mark.asyncio
    async def test_get_swap_instructions(self):
        """Test the request shape and the parsed quote."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"txn": "AQID", "forceLegacy": True})

        provider = make_provider(handler)
        quote = await provider.get_swap_instructions(make_request(priority_fee=Decimal("0.00005")))

        assert quote == SwapQuote(txn="AQID", force_legacy=False)
        assert quote.raw["forceLegacy"] is True

        assert len(seen) == 1
        sent = seen[0]
        assert sent.method == "GET"
        assert sent.url.path == "/swap"
        for key, value in [
            ("from", SOL_MINT),
            ("to", USDC_MINT),
            ("fromAmount", "0.0001"),
            ("slippage", "30"),
            ("payer", PAYER),
            ("forceLegacy", "false"),
            ("priorityFee", "0.00005"),
        ]:
            assert sent.url.params.get_list(key) == [value]

    @pytest.mark.asyncio
    async def test_priority_fee_not_sent_when_unset(self):
        """Test that priorityFee is absent from the query string."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"txn": "AQID"})

        await make_provider(handler).get_swap_instructions(make_request())

        assert "priorityFee" not in seen[0].url.params

    @pytest.mark.asyncio
    async def test_force_legacy_echoes_request(self):
        """Test that the quote echoes the requested legacy flag."""
        provider = make_provider(lambda r: httpx.Response(200, json={"txn": "AQID", "forceLegacy": False}))

        quote = await provider.get_swap_instructions(make_request(force_legacy=True))

        assert quote.force_legacy is True

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        """Test non-200 responses raise NetworkError."""
        provider = make_provider(lambda r: httpx.Response(500, text="boom"))

        with pytest.raises(NetworkError) as exc_info:
            await provider.get_swap_instructions(make_request())

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test connection failures raise NetworkError with the cause attached."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            await make_provider(handler).get_swap_instructions(make_request())

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            "not json",
            json.dumps(["txn"]),
            json.dumps({"forceLegacy": False}),
            json.dumps({"txn": 42}),
        ],
    )
    async def test_malformed_body(self, body):
        """Test malformed responses raise DecodeError."""
        provider = make_provider(lambda r: httpx.Response(200, text=body))

        with pytest.raises(DecodeError):
            await provider.get_swap_instructions(make_request())
