"""
Node Integration Layer.

Provides abstracted access to Lightning nodes and the bitcoind backends
some of them delegate their wallet to.
"""

from typing import Optional

from lnadapter.config import AdapterConfig
from lnadapter.core.node import Implementation, NodeDescriptor
from lnadapter.node.interface import (
    ConfigurationError,
    LightningNodeInterface,
    RequestGateway,
)


def create_service(
    node: NodeDescriptor,
    config: Optional[AdapterConfig] = None,
    gateway: Optional[RequestGateway] = None,
) -> LightningNodeInterface:
    """
    Create the adapter for a node's implementation family.

    Raises:
        ConfigurationError: If the implementation is not supported
    """
    if node.implementation.lower() == Implementation.ECLAIR:
        from lnadapter.eclair.service import EclairService
        return EclairService(gateway=gateway, config=config)

    raise ConfigurationError(
        f"create_service: unsupported implementation '{node.implementation}' for node {node.name}"
    )


__all__ = [
    "LightningNodeInterface",
    "create_service",
]
