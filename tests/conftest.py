"""
Pytest configuration and shared fixtures for the test suite.
"""

from typing import Any, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from lnadapter.config import AdapterConfig
from lnadapter.core.node import BackendDescriptor, Implementation, NodeDescriptor
from lnadapter.eclair.service import EclairService
from lnadapter.node.interface import BackendWalletProvider, RequestGateway


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> AdapterConfig:
    """Create a test configuration with fast polling."""
    return AdapterConfig(
        eclair_password="test-password",
        bitcoind_rpc_user="testuser",
        bitcoind_rpc_password="testpass",
        payment_poll_interval_seconds=0.01,
        payment_timeout_seconds=0.5,
        online_interval_seconds=0.01,
        online_timeout_seconds=0.05,
        log_level="DEBUG",
    )


# ============================================================================
# Descriptor Fixtures
# ============================================================================

@pytest.fixture
def node() -> NodeDescriptor:
    """An Eclair node named carol."""
    return NodeDescriptor(
        name="carol",
        implementation=Implementation.ECLAIR,
        version="0.8.0",
        host="127.0.0.1",
        rest_port=8283,
        p2p_port=9937,
        id=2,
        backend_name="backend1",
    )


@pytest.fixture
def backend() -> BackendDescriptor:
    """The bitcoind backend of the test network."""
    return BackendDescriptor(name="backend1", host="127.0.0.1", rpc_port=18443)


# ============================================================================
# Test Data Generators
# ============================================================================

def make_channel(
    is_funder: Optional[bool] = None,
    is_initiator: Optional[bool] = None,
    to_local: int = 100_000_000,
    to_remote: int = 50_000_000,
    amount_sats: int = 150_000,
    state: str = "NORMAL",
    channel_flags: Any = 1,
    node_id: str = "abcdef",
    channel_id: str = "65sdfd7",
) -> dict:
    """Build a raw channel record in the flat (<= 0.8) layout."""
    local_params = {}
    if is_funder is not None:
        local_params["isFunder"] = is_funder
    if is_initiator is not None:
        local_params["isInitiator"] = is_initiator

    return {
        "nodeId": node_id,
        "channelId": channel_id,
        "state": state,
        "data": {
            "commitments": {
                "channelFlags": channel_flags,
                "localParams": local_params,
                "localCommit": {
                    "spec": {
                        "toLocal": to_local,
                        "toRemote": to_remote,
                    },
                },
                "commitInput": {
                    "amountSatoshis": amount_sats,
                },
            },
        },
    }


def make_sent_info(
    status_type: str,
    failures: Any = None,
    v8: bool = True,
    payment_id: str = "invId",
    amount: int = 100_000,
    node_id: str = "abcdef",
) -> List[dict]:
    """Build a getsentinfo response with a single payment record."""
    pay_req = {"nodeId": node_id, "amount": amount}
    status = {"type": status_type, "paymentPreimage": "pre-image"}
    if failures is not None:
        status["failures"] = failures

    record = {"id": payment_id, "status": status}
    if v8:
        record["invoice"] = pay_req
    else:
        record["paymentRequest"] = pay_req
    return [record]


# ============================================================================
# Mock Collaborators
# ============================================================================

@pytest.fixture
def gateway() -> MagicMock:
    """Request gateway whose call() is an AsyncMock."""
    mock = MagicMock(spec=RequestGateway)
    mock.call = AsyncMock()
    return mock


@pytest.fixture
def wallet_provider() -> MagicMock:
    """Backend wallet provider whose get_wallet_info() is an AsyncMock."""
    mock = MagicMock(spec=BackendWalletProvider)
    mock.get_wallet_info = AsyncMock()
    return mock


@pytest.fixture
def service(gateway, wallet_provider, test_config) -> EclairService:
    """Eclair service wired to mock collaborators."""
    return EclairService(
        gateway=gateway,
        wallet_provider=wallet_provider,
        config=test_config,
    )
