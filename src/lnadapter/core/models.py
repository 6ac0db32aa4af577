"""
Canonical domain records.

Version-independent representations returned by every adapter. All amounts
are satoshis; balances are carried as decimal strings.
"""

from dataclasses import dataclass
from enum import Enum


class ChannelStatus(str, Enum):
    """Lifecycle state of a channel."""
    OPENING = "Opening"           # Funding negotiated or awaiting confirmation
    OPEN = "Open"                 # Normal operation
    CLOSING = "Closing"           # Mutual or forced close in progress
    OFFLINE = "Offline"           # Counterparty not reachable
    CLOSED = "Closed"             # Channel fully closed
    ERROR = "Error"               # Node reported an error state
    UNKNOWN = "Unknown"           # State not recognized by the adapter


@dataclass
class NodeInfo:
    """Status of a Lightning node."""
    pubkey: str
    alias: str = ""
    rpc_url: str = ""
    address: str = ""
    synced_to_chain: bool = False
    block_height: int = -1
    num_active_channels: int = 0
    num_pending_channels: int = 0
    num_inactive_channels: int = 0

    def to_dict(self) -> dict:
        return {
            "pubkey": self.pubkey,
            "alias": self.alias,
            "rpc_url": self.rpc_url,
            "address": self.address,
            "synced_to_chain": self.synced_to_chain,
            "block_height": self.block_height,
            "num_active_channels": self.num_active_channels,
            "num_pending_channels": self.num_pending_channels,
            "num_inactive_channels": self.num_inactive_channels,
        }


@dataclass
class BalancesInfo:
    """On-chain wallet balances in satoshis."""
    confirmed: str = "0"
    unconfirmed: str = "0"
    total: str = "0"

    def to_dict(self) -> dict:
        return {
            "confirmed": self.confirmed,
            "unconfirmed": self.unconfirmed,
            "total": self.total,
        }


@dataclass
class Channel:
    """
    A payment channel.

    Attributes:
        channel_id: Node-assigned channel identifier
        pubkey: Counterparty public key
        capacity: Funding amount in sats
        local_balance: Our side of the commitment in sats
        remote_balance: Counterparty side of the commitment in sats
        status: Lifecycle state
        is_private: True when the channel is not announced
    """
    channel_id: str
    pubkey: str
    capacity: str
    local_balance: str
    remote_balance: str
    status: ChannelStatus = ChannelStatus.UNKNOWN
    is_private: bool = False

    def __post_init__(self):
        if isinstance(self.status, str) and not isinstance(self.status, ChannelStatus):
            self.status = ChannelStatus(self.status)

    @property
    def pending(self) -> bool:
        """True while the channel is neither open nor closed."""
        return self.status not in (ChannelStatus.OPEN, ChannelStatus.CLOSED)

    @property
    def unique_id(self) -> str:
        """Short identifier derived from the channel id."""
        return self.channel_id[-12:]

    def to_dict(self) -> dict:
        return {
            "channel_id": self.channel_id,
            "unique_id": self.unique_id,
            "pubkey": self.pubkey,
            "capacity": self.capacity,
            "local_balance": self.local_balance,
            "remote_balance": self.remote_balance,
            "status": self.status.value,
            "pending": self.pending,
            "is_private": self.is_private,
        }


@dataclass
class Peer:
    """A peer known to the node."""
    pubkey: str
    address: str = ""
    state: str = ""
    channels: int = 0

    @property
    def connected(self) -> bool:
        return self.state.upper() == "CONNECTED"

    def to_dict(self) -> dict:
        return {
            "pubkey": self.pubkey,
            "address": self.address,
            "state": self.state,
            "connected": self.connected,
            "channels": self.channels,
        }


@dataclass
class NewAddress:
    """A freshly issued on-chain address."""
    address: str

    def to_dict(self) -> dict:
        return {"address": self.address}


@dataclass
class OpenChannelResult:
    """Funding outpoint of a newly opened channel."""
    txid: str
    index: int = 0

    def to_dict(self) -> dict:
        return {"txid": self.txid, "index": self.index}


@dataclass
class PayResult:
    """Outcome of a settled payment."""
    preimage: str
    amount: int
    destination: str

    def to_dict(self) -> dict:
        return {
            "preimage": self.preimage,
            "amount": self.amount,
            "destination": self.destination,
        }
