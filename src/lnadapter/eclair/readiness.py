"""
Node readiness gate.
"""

import structlog

from lnadapter.core.node import NodeDescriptor
from lnadapter.core.polling import wait_for
from lnadapter.node.interface import RequestGateway

logger = structlog.get_logger(__name__)


async def wait_until_online(
    gateway: RequestGateway,
    node: NodeDescriptor,
    interval: float = 3,
    timeout: float = 30,
) -> None:
    """
    Wait until a node answers a status request.

    Raises:
        The last error from the node if it is still unreachable at the deadline
    """
    await wait_for(lambda: gateway.call(node, "getinfo"), interval, timeout)
    logger.info("node_online", node=node.name)
