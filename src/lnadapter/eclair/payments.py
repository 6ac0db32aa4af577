"""
Payment execution and settlement tracking.

Eclair's payinvoice returns as soon as the payment is dispatched, with an
id that must be polled through getsentinfo until the payment settles.
"""

import asyncio
from typing import Optional

import structlog

from lnadapter.core.models import PayResult
from lnadapter.core.node import NodeDescriptor
from lnadapter.core.units import sats_to_msat
from lnadapter.eclair.normalizer import (
    PaymentOutcome,
    classify_payment,
    find_sent_payment,
    resolve_payment_request,
)
from lnadapter.node.interface import (
    PaymentFailedError,
    PaymentTimeoutError,
    RequestGateway,
)

logger = structlog.get_logger(__name__)


def _request_amount(request: dict) -> int:
    try:
        return int(request.get("amount") or 0)
    except (TypeError, ValueError):
        return 0


async def send_payment(
    gateway: RequestGateway,
    node: NodeDescriptor,
    invoice: str,
    amount_sats: Optional[int] = None,
) -> str:
    """
    Dispatch a payment without waiting for it to settle.

    Args:
        gateway: Request gateway for the node
        node: Paying node
        invoice: Encoded payment request
        amount_sats: Amount overriding the one encoded in the invoice

    Returns:
        The payment id assigned by the node
    """
    params = {"invoice": invoice, "blocking": False}
    if amount_sats is not None:
        params["amountMsat"] = sats_to_msat(amount_sats)

    payment_id = await gateway.call(node, "payinvoice", params)
    logger.info("payment_sent", node=node.name, payment_id=payment_id)
    return str(payment_id)


async def track_payment(
    gateway: RequestGateway,
    node: NodeDescriptor,
    payment_id: str,
    interval: float = 1.0,
    timeout: float = 60.0,
) -> PayResult:
    """
    Poll a sent payment until it settles.

    A payment reported as failed without a failure message is treated as
    still in flight; only a failure carrying a message is final. Transport
    errors while polling are retried until the deadline; the most recent one
    is kept even after later polls succeed.

    Args:
        gateway: Request gateway for the node
        node: Paying node
        payment_id: Id returned by payinvoice
        interval: Seconds between polls
        timeout: Seconds before giving up

    Returns:
        Preimage, amount and destination of the settled payment

    Raises:
        PaymentFailedError: If the node reports a failure message
        PaymentTimeoutError: If the payment is unsettled at the deadline
            and no transport error was seen
        TransportError: The most recent polling error, if any poll failed
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    last_error: Optional[Exception] = None
    last_state = "not_found"

    while True:
        try:
            records = await gateway.call(node, "getsentinfo", {"id": payment_id})
        except Exception as e:
            logger.debug("payment_poll_error", node=node.name, payment_id=payment_id, error=str(e))
            last_error = e
            records = None

        record = find_sent_payment(records, payment_id)
        if record is not None:
            status = classify_payment(record)
            last_state = status.outcome.value

            if status.outcome == PaymentOutcome.SENT:
                request = resolve_payment_request(record)
                result = PayResult(
                    preimage=status.preimage,
                    amount=_request_amount(request),
                    destination=str(request.get("nodeId") or ""),
                )
                logger.info(
                    "payment_settled",
                    node=node.name,
                    payment_id=payment_id,
                    amount=result.amount,
                )
                return result

            if status.outcome == PaymentOutcome.FAILED_WITH_DETAIL:
                logger.warning(
                    "payment_failed",
                    node=node.name,
                    payment_id=payment_id,
                    error=status.failure_message,
                )
                raise PaymentFailedError(status.failure_message, payment_id=payment_id)

        if loop.time() >= deadline:
            if last_error is not None:
                raise last_error
            logger.warning("payment_timeout", node=node.name, payment_id=payment_id, state=last_state)
            raise PaymentTimeoutError(
                f"Payment {payment_id} did not settle within {timeout}s (last state: {last_state})",
                payment_id=payment_id,
            )

        logger.debug("payment_pending", node=node.name, payment_id=payment_id, state=last_state)
        await asyncio.sleep(interval)


async def pay_invoice(
    gateway: RequestGateway,
    node: NodeDescriptor,
    invoice: str,
    amount_sats: Optional[int] = None,
    interval: float = 1.0,
    timeout: float = 60.0,
) -> PayResult:
    """Pay an invoice and wait for its settlement."""
    payment_id = await send_payment(gateway, node, invoice, amount_sats)
    return await track_payment(gateway, node, payment_id, interval, timeout)
