"""
Eclair response normalization.

Eclair renames and restructures fields between releases without reporting
a schema version. Each ambiguous attribute gets its own resolver that
prefers the newer field when present and falls back to the older one.
Every function here is total: missing or mistyped fields yield defaults,
never exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from lnadapter.core.models import NodeInfo, Peer


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _is_defined(record: dict, key: str) -> bool:
    return record.get(key) is not None


def resolve_field(record: Any, newer: str, older: str, default: Any = None) -> Any:
    """
    Resolve an attribute that moved from ``older`` to ``newer``.

    A key that is absent or null counts as undefined.

    Args:
        record: Raw response record
        newer: Key used by current releases
        older: Key used by earlier releases
        default: Value when neither key is defined

    Returns:
        The newer value if defined, else the older value, else ``default``
    """
    record = _as_dict(record)
    if _is_defined(record, newer):
        return record[newer]
    if _is_defined(record, older):
        return record[older]
    return default


def resolve_is_initiator(local_params: Any) -> bool:
    """Whether the local node funded the channel (isInitiator, formerly isFunder)."""
    return bool(resolve_field(local_params, "isInitiator", "isFunder", False))


def resolve_payment_request(sent_info: Any) -> dict:
    """Decoded invoice of a sent payment (invoice, formerly paymentRequest)."""
    return _as_dict(resolve_field(sent_info, "invoice", "paymentRequest", {}))


@dataclass
class CommitmentView:
    """Flat view of a channel's commitment data."""
    local_params: dict
    to_local: Optional[Any]
    to_remote: Optional[Any]
    funding_sats: Optional[Any]
    channel_flags: Any


def resolve_commitments(commitments: Any) -> CommitmentView:
    """
    Flatten channel commitment data across releases.

    Releases up to 0.8 carry localParams, channelFlags, localCommit and
    commitInput directly on the commitments object. Later releases move the
    parameters under ``params`` and the commitment itself into the first
    entry of ``active``, with the funding amount under ``fundingTx``.
    """
    commitments = _as_dict(commitments)
    params = _as_dict(commitments.get("params"))

    active = commitments.get("active")
    current = _as_dict(active[0]) if isinstance(active, list) and active else {}

    local_params = _as_dict(params.get("localParams") or commitments.get("localParams"))
    local_commit = _as_dict(current.get("localCommit") or commitments.get("localCommit"))
    spec = _as_dict(local_commit.get("spec"))

    funding = _as_dict(current.get("fundingTx") or commitments.get("commitInput"))

    flags = params.get("channelFlags")
    if flags is None:
        flags = commitments.get("channelFlags")

    return CommitmentView(
        local_params=local_params,
        to_local=spec.get("toLocal"),
        to_remote=spec.get("toRemote"),
        funding_sats=funding.get("amountSatoshis"),
        channel_flags=flags,
    )


def is_announced(channel_flags: Any) -> bool:
    """
    Whether channel flags announce the channel publicly.

    Older releases send the raw flags byte (bit 0 = announce), newer ones an
    object with an announceChannel member. Missing flags count as public.
    """
    if isinstance(channel_flags, dict):
        return bool(channel_flags.get("announceChannel", True))
    if isinstance(channel_flags, bool):
        return channel_flags
    if isinstance(channel_flags, int):
        return bool(channel_flags & 1)
    return True


class PaymentOutcome(str, Enum):
    """Settlement state of a sent payment as reported by one poll."""
    PENDING = "pending"
    SENT = "sent"
    FAILED_NO_DETAIL = "failed_no_detail"
    FAILED_WITH_DETAIL = "failed_with_detail"


@dataclass
class PaymentStatus:
    """Normalized status of a sent payment."""
    outcome: PaymentOutcome
    preimage: str = ""
    failure_message: Optional[str] = None


def _first_failure_message(failures: Any) -> Optional[str]:
    if not isinstance(failures, list):
        return None
    for failure in failures:
        message = _as_dict(failure).get("failureMessage")
        if message:
            return str(message)
    return None


def classify_payment(sent_info: Any) -> PaymentStatus:
    """
    Classify a sent-payment record.

    A failed status whose failure list is absent or empty (or carries no
    message) is not final: the node may still be retrying routes. Only a
    failure with a message is definitive.
    """
    status = _as_dict(_as_dict(sent_info).get("status"))
    status_type = str(status.get("type") or "").lower()

    if status_type == "sent":
        return PaymentStatus(
            outcome=PaymentOutcome.SENT,
            preimage=str(status.get("paymentPreimage") or ""),
        )

    if status_type == "failed":
        message = _first_failure_message(status.get("failures"))
        if message:
            return PaymentStatus(
                outcome=PaymentOutcome.FAILED_WITH_DETAIL,
                failure_message=message,
            )
        return PaymentStatus(outcome=PaymentOutcome.FAILED_NO_DETAIL)

    return PaymentStatus(outcome=PaymentOutcome.PENDING)


def find_sent_payment(records: Any, payment_id: str) -> Optional[dict]:
    """Find the sent-payment record with the given id."""
    if not isinstance(records, list):
        return None
    for record in records:
        if isinstance(record, dict) and record.get("id") == payment_id:
            return record
    return None


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_info(raw: Any) -> NodeInfo:
    """Map a getinfo response to NodeInfo."""
    raw = _as_dict(raw)
    pubkey = str(raw.get("nodeId") or "")

    addresses = raw.get("publicAddresses")
    address = str(addresses[0]) if isinstance(addresses, list) and addresses else ""

    block_height = _to_int(raw.get("blockHeight"), -1)

    return NodeInfo(
        pubkey=pubkey,
        alias=str(raw.get("alias") or ""),
        rpc_url=f"{pubkey}@{address}" if address else "",
        address=address,
        synced_to_chain=block_height >= 0,
        block_height=block_height,
    )


def normalize_peer(raw: Any) -> Peer:
    """Map a peers entry to Peer; disconnected peers omit their address."""
    raw = _as_dict(raw)
    return Peer(
        pubkey=str(raw.get("nodeId") or ""),
        address=str(raw.get("address") or ""),
        state=str(raw.get("state") or ""),
        channels=_to_int(raw.get("channels"), 0),
    )


def peer_pubkeys(raw_peers: Any) -> List[str]:
    """
    Public keys of the peers in a peers response.

    Entries may be peer records or bare ``pubkey@host:port`` URIs.
    """
    if not isinstance(raw_peers, list):
        return []
    keys = []
    for entry in raw_peers:
        if isinstance(entry, dict):
            key = entry.get("nodeId")
        elif isinstance(entry, str):
            key = entry.split("@")[0]
        else:
            key = None
        if key:
            keys.append(str(key))
    return keys
