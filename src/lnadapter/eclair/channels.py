"""
Channel aggregation.

Reduces raw Eclair channel records to canonical Channel views.
"""

from typing import Any, Dict, List

import structlog

from lnadapter.core.models import Channel, ChannelStatus
from lnadapter.core.units import msat_to_sats
from lnadapter.eclair.normalizer import (
    is_announced,
    resolve_commitments,
    resolve_is_initiator,
)
from lnadapter.node.interface import MalformedChannelError

logger = structlog.get_logger(__name__)


CHANNEL_STATE_MAP: Dict[str, ChannelStatus] = {
    "WAIT_FOR_INIT_INTERNAL": ChannelStatus.OPENING,
    "WAIT_FOR_OPEN_CHANNEL": ChannelStatus.OPENING,
    "WAIT_FOR_ACCEPT_CHANNEL": ChannelStatus.OPENING,
    "WAIT_FOR_FUNDING_INTERNAL": ChannelStatus.OPENING,
    "WAIT_FOR_FUNDING_CREATED": ChannelStatus.OPENING,
    "WAIT_FOR_FUNDING_SIGNED": ChannelStatus.OPENING,
    "WAIT_FOR_FUNDING_CONFIRMED": ChannelStatus.OPENING,
    "WAIT_FOR_FUNDING_LOCKED": ChannelStatus.OPENING,
    "WAIT_FOR_CHANNEL_READY": ChannelStatus.OPENING,
    "WAIT_FOR_DUAL_FUNDING_CONFIRMED": ChannelStatus.OPENING,
    "WAIT_FOR_DUAL_FUNDING_READY": ChannelStatus.OPENING,
    "NORMAL": ChannelStatus.OPEN,
    "SHUTDOWN": ChannelStatus.CLOSING,
    "NEGOTIATING": ChannelStatus.CLOSING,
    "CLOSING": ChannelStatus.CLOSING,
    "CLOSED": ChannelStatus.CLOSED,
    "OFFLINE": ChannelStatus.OFFLINE,
    "SYNCING": ChannelStatus.OFFLINE,
    "WAIT_FOR_REMOTE_PUBLISH_FUTURE_COMMITMENT": ChannelStatus.ERROR,
    "ERR_FUNDING_LOST": ChannelStatus.ERROR,
    "ERR_INFORMATION_LEAK": ChannelStatus.ERROR,
}


def map_channel_state(state: Any) -> ChannelStatus:
    """Map an Eclair channel state to a lifecycle status."""
    return CHANNEL_STATE_MAP.get(str(state or "").upper(), ChannelStatus.UNKNOWN)


def aggregate_channel(raw: Any) -> Channel:
    """
    Build a Channel from a raw Eclair channel record.

    The local commitment's toLocal/toRemote split (msat) is expressed from
    the funder's perspective; when the local node is not the funder the two
    sides are swapped.

    Args:
        raw: Entry of the "channels" response

    Returns:
        Canonical channel

    Raises:
        MalformedChannelError: If the record lacks commitment amounts
    """
    if not isinstance(raw, dict):
        raise MalformedChannelError(f"Channel record is not an object: {raw!r}")

    data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
    view = resolve_commitments(data.get("commitments"))

    if view.to_local is None or view.to_remote is None or view.funding_sats is None:
        raise MalformedChannelError(
            f"Channel {raw.get('channelId')} is missing commitment amounts"
        )

    try:
        to_local = msat_to_sats(view.to_local)
        to_remote = msat_to_sats(view.to_remote)
        capacity = int(view.funding_sats)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise MalformedChannelError(f"Channel {raw.get('channelId')} has invalid amounts: {e}") from e

    if resolve_is_initiator(view.local_params):
        local_balance, remote_balance = to_local, to_remote
    else:
        local_balance, remote_balance = to_remote, to_local

    return Channel(
        channel_id=str(raw.get("channelId") or ""),
        pubkey=str(raw.get("nodeId") or ""),
        capacity=str(capacity),
        local_balance=str(local_balance),
        remote_balance=str(remote_balance),
        status=map_channel_state(raw.get("state")),
        is_private=not is_announced(view.channel_flags),
    )


def aggregate_channels(raw_channels: Any) -> List[Channel]:
    """Aggregate a channels response, skipping records that cannot be mapped."""
    if not isinstance(raw_channels, list):
        logger.warning("channels_response_invalid", type=type(raw_channels).__name__)
        return []

    channels = []
    for raw in raw_channels:
        try:
            channels.append(aggregate_channel(raw))
        except MalformedChannelError as e:
            logger.warning("channel_skipped", error=str(e))
    return channels
