"""
Peer connection management.
"""

from typing import List

import structlog

from lnadapter.core.node import NodeDescriptor
from lnadapter.eclair.normalizer import peer_pubkeys
from lnadapter.node.interface import RequestGateway

logger = structlog.get_logger(__name__)


async def connect_peers(
    gateway: RequestGateway,
    node: NodeDescriptor,
    rpc_urls: List[str],
) -> List[str]:
    """
    Connect a node to every target it is not already connected to.

    The current peer list is fetched once. Connect requests are issued one
    at a time, in the order given; a failure for one target is logged and
    does not stop the remaining attempts.

    Args:
        gateway: Request gateway for the node
        node: Node to connect from
        rpc_urls: Targets in pubkey@host:port form

    Returns:
        The URIs a connect request was issued for
    """
    connected = set(peer_pubkeys(await gateway.call(node, "peers")))

    attempted = []
    for uri in rpc_urls:
        pubkey = uri.split("@")[0]
        if pubkey in connected:
            logger.debug("peer_already_connected", node=node.name, pubkey=pubkey)
            continue

        connected.add(pubkey)
        attempted.append(uri)
        try:
            await gateway.call(node, "connect", {"uri": uri})
            logger.info("peer_connected", node=node.name, uri=uri)
        except Exception as e:
            logger.warning("peer_connect_failed", node=node.name, uri=uri, error=str(e))

    return attempted
