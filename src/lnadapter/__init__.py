"""
Lightning Node Adapter

A stable domain API over Lightning node implementations whose control APIs
drift between releases. Used by network-simulation tooling to query node
status, manage peers and channels, and create and settle payments.
"""

__version__ = "0.1.0"

from lnadapter.core.models import (
    BalancesInfo,
    Channel,
    ChannelStatus,
    NodeInfo,
    PayResult,
    Peer,
)
from lnadapter.core.node import BackendDescriptor, NodeDescriptor
from lnadapter.eclair.service import EclairService
from lnadapter.node import create_service

__all__ = [
    "BackendDescriptor",
    "BalancesInfo",
    "Channel",
    "ChannelStatus",
    "EclairService",
    "NodeDescriptor",
    "NodeInfo",
    "PayResult",
    "Peer",
    "create_service",
]
