"""
Test suite for payment execution and settlement polling.
"""

import pytest

from lnadapter.eclair.payments import pay_invoice, send_payment, track_payment
from lnadapter.node.interface import (
    PaymentFailedError,
    PaymentTimeoutError,
    TransportError,
)

from conftest import make_sent_info


FAST = {"interval": 0.01, "timeout": 0.5}


def sent_info_calls(gateway):
    return [c for c in gateway.call.await_args_list if c.args[1] == "getsentinfo"]


class TestSendPayment:
    """Tests for dispatching a payment."""

    @pytest.mark.asyncio
    async def test_amount_override_in_msat(self, gateway, node):
        gateway.call.return_value = "invId"

        payment_id = await send_payment(gateway, node, "lnbc100xyz", 1000)

        assert payment_id == "invId"
        gateway.call.assert_awaited_once_with(
            node,
            "payinvoice",
            {"invoice": "lnbc100xyz", "blocking": False, "amountMsat": 1_000_000},
        )

    @pytest.mark.asyncio
    async def test_amount_omitted_when_not_given(self, gateway, node):
        gateway.call.return_value = "invId"

        await send_payment(gateway, node, "lnbc100xyz")

        params = gateway.call.await_args.args[2]
        assert "amountMsat" not in params

    @pytest.mark.asyncio
    async def test_dispatch_failure_propagates(self, gateway, node):
        gateway.call.side_effect = TransportError("insufficient funds")

        with pytest.raises(TransportError, match="insufficient funds"):
            await pay_invoice(gateway, node, "lnbc100xyz", **FAST)

        assert gateway.call.await_count == 1


class TestTrackPayment:
    """Tests for the settlement poll loop."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("v8", [False, True])
    async def test_settles_after_failures_without_detail(self, gateway, node, v8):
        """Not found, failed (no list), failed (empty list), then sent."""
        gateway.call.side_effect = [
            "invId",
            [],
            make_sent_info("failed", v8=v8),
            make_sent_info("failed", failures=[], v8=v8),
            make_sent_info("sent", v8=v8),
        ]

        result = await pay_invoice(gateway, node, "lnbc100xyz", **FAST)

        assert result.preimage == "pre-image"
        assert result.amount == 100000
        assert result.destination == "abcdef"
        assert len(sent_info_calls(gateway)) == 4
        gateway.call.assert_awaited_with(node, "getsentinfo", {"id": "invId"})

    @pytest.mark.asyncio
    async def test_failure_message_stops_polling(self, gateway, node):
        gateway.call.side_effect = [
            "invId",
            [],
            make_sent_info("failed", failures=[{"failureMessage": "sent-error"}]),
            make_sent_info("sent"),
        ]

        with pytest.raises(PaymentFailedError, match="sent-error") as exc_info:
            await pay_invoice(gateway, node, "lnbc100xyz", **FAST)

        assert exc_info.value.payment_id == "invId"
        assert len(sent_info_calls(gateway)) == 2

    @pytest.mark.asyncio
    async def test_ignores_other_payments(self, gateway, node):
        gateway.call.side_effect = [
            make_sent_info("sent", payment_id="other"),
            make_sent_info("pending"),
            make_sent_info("sent"),
        ]

        result = await track_payment(gateway, node, "invId", **FAST)

        assert result.preimage == "pre-image"
        assert gateway.call.await_count == 3

    @pytest.mark.asyncio
    async def test_timeout_when_never_found(self, gateway, node):
        gateway.call.return_value = []

        with pytest.raises(PaymentTimeoutError) as exc_info:
            await track_payment(gateway, node, "invId", interval=0.01, timeout=0.05)

        assert exc_info.value.payment_id == "invId"
        assert gateway.call.await_count >= 2

    @pytest.mark.asyncio
    async def test_timeout_while_failed_without_detail(self, gateway, node):
        gateway.call.return_value = make_sent_info("failed", failures=[])

        with pytest.raises(PaymentTimeoutError, match="failed_no_detail"):
            await track_payment(gateway, node, "invId", interval=0.01, timeout=0.05)

    @pytest.mark.asyncio
    async def test_recovers_from_polling_errors(self, gateway, node):
        gateway.call.side_effect = [
            TransportError("temporarily unavailable"),
            make_sent_info("sent"),
        ]

        result = await track_payment(gateway, node, "invId", **FAST)

        assert result.destination == "abcdef"

    @pytest.mark.asyncio
    async def test_last_polling_error_raised_at_deadline(self, gateway, node):
        gateway.call.side_effect = TransportError("connection refused")

        with pytest.raises(TransportError, match="connection refused"):
            await track_payment(gateway, node, "invId", interval=0.01, timeout=0.05)

    @pytest.mark.asyncio
    async def test_earlier_polling_error_raised_at_deadline(self, gateway, node):
        gateway.call.side_effect = (
            [TransportError("connection refused")] + [make_sent_info("pending")] * 100
        )

        with pytest.raises(TransportError, match="connection refused"):
            await track_payment(gateway, node, "invId", interval=0.01, timeout=0.05)

        assert gateway.call.await_count >= 2

    @pytest.mark.asyncio
    async def test_missing_request_data(self, gateway, node):
        gateway.call.return_value = [
            {"id": "invId", "status": {"type": "sent", "paymentPreimage": "pre"}},
        ]

        result = await track_payment(gateway, node, "invId", **FAST)

        assert result.preimage == "pre"
        assert result.amount == 0
        assert result.destination == ""
