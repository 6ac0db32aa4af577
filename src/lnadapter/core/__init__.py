"""
Core domain types shared by every node adapter.
"""

from lnadapter.core.models import (
    BalancesInfo,
    Channel,
    ChannelStatus,
    NewAddress,
    NodeInfo,
    OpenChannelResult,
    PayResult,
    Peer,
)
from lnadapter.core.node import BackendDescriptor, Implementation, NodeDescriptor

__all__ = [
    "BackendDescriptor",
    "BalancesInfo",
    "Channel",
    "ChannelStatus",
    "Implementation",
    "NewAddress",
    "NodeDescriptor",
    "NodeInfo",
    "OpenChannelResult",
    "PayResult",
    "Peer",
]
