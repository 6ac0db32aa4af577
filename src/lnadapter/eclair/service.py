"""
Eclair node adapter.

Implements the LightningNodeInterface on top of the Eclair REST API.
"""

from typing import Any, List, Optional

import structlog

from lnadapter.config import AdapterConfig, get_config
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
from lnadapter.core.node import BackendDescriptor, NodeDescriptor
from lnadapter.core.units import base_to_sats, sats_to_msat
from lnadapter.eclair import payments, peers, readiness
from lnadapter.eclair.channels import aggregate_channels
from lnadapter.eclair.normalizer import normalize_info, normalize_peer
from lnadapter.node.bitcoind import BitcoindWalletProvider
from lnadapter.node.eclair_api import EclairGateway
from lnadapter.node.interface import (
    BackendWalletProvider,
    ConfigurationError,
    LightningNodeInterface,
    RequestGateway,
    TransportError,
)

logger = structlog.get_logger(__name__)


class EclairService(LightningNodeInterface):
    """
    Eclair adapter.

    Eclair delegates its on-chain wallet to bitcoind, so balances are read
    from the node's backend rather than from the node itself.
    """

    def __init__(
        self,
        gateway: Optional[RequestGateway] = None,
        wallet_provider: Optional[BackendWalletProvider] = None,
        config: Optional[AdapterConfig] = None,
    ):
        """
        Initialize the Eclair adapter.

        Args:
            gateway: Request gateway. Defaults to the Eclair REST gateway.
            wallet_provider: Backend wallet provider. Defaults to bitcoind JSON-RPC.
            config: Adapter configuration. Uses global config if not provided.
        """
        self.config = config or get_config()
        self.gateway = gateway or EclairGateway(self.config)
        self.wallet_provider = wallet_provider or BitcoindWalletProvider(self.config)

    async def get_info(self, node: NodeDescriptor) -> NodeInfo:
        """Get node info."""
        info = normalize_info(await self.gateway.call(node, "getinfo"))
        logger.debug("node_info", node=node.name, block_height=info.block_height)
        return info

    async def get_balances(
        self,
        node: NodeDescriptor,
        backend: Optional[BackendDescriptor] = None,
    ) -> BalancesInfo:
        """Get wallet balances from the node's bitcoind backend."""
        if backend is None:
            raise ConfigurationError("EclairService getBalances: backend was not specified")

        info = await self.wallet_provider.get_wallet_info(backend)
        confirmed = base_to_sats(info.get("balance") or 0)
        unconfirmed = base_to_sats(info.get("unconfirmed_balance") or 0)
        immature = base_to_sats(info.get("immature_balance") or 0)

        return BalancesInfo(
            confirmed=str(confirmed),
            unconfirmed=str(unconfirmed),
            total=str(confirmed + unconfirmed + immature),
        )

    async def get_new_address(self, node: NodeDescriptor) -> NewAddress:
        """Get a new on-chain address."""
        address = await self.gateway.call(node, "getnewaddress")
        return NewAddress(address=str(address))

    async def get_channels(self, node: NodeDescriptor) -> List[Channel]:
        """Get open and pending channels."""
        raw = await self.gateway.call(node, "channels")
        channels = [c for c in aggregate_channels(raw) if c.status != ChannelStatus.CLOSED]
        logger.debug("channels_fetched", node=node.name, count=len(channels))
        return channels

    async def get_peers(self, node: NodeDescriptor) -> List[Peer]:
        """Get connected and known peers."""
        raw = await self.gateway.call(node, "peers")
        if not isinstance(raw, list):
            return []
        return [normalize_peer(p) for p in raw if isinstance(p, dict)]

    async def connect_peers(self, node: NodeDescriptor, rpc_urls: List[str]) -> None:
        """Connect to peers, ignoring individual failures."""
        await peers.connect_peers(self.gateway, node, rpc_urls)

    async def open_channel(
        self,
        from_node: NodeDescriptor,
        to_rpc_url: str,
        amount_sats: int,
        is_private: bool = False,
    ) -> OpenChannelResult:
        """Open a channel, connecting to the counterparty first if needed."""
        await self.connect_peers(from_node, [to_rpc_url])

        to_pubkey = to_rpc_url.split("@")[0]
        params = {
            "nodeId": to_pubkey,
            "fundingSatoshis": int(amount_sats),
            "channelFlags": 0 if is_private else 1,
        }
        txid = await self.gateway.call(from_node, "open", params)
        logger.info(
            "channel_opened",
            node=from_node.name,
            pubkey=to_pubkey,
            amount=int(amount_sats),
            private=is_private,
        )
        return OpenChannelResult(txid=txid, index=0)

    async def close_channel(self, node: NodeDescriptor, channel_id: str) -> Any:
        """Close a channel."""
        result = await self.gateway.call(node, "close", {"channelId": channel_id})
        logger.info("channel_closed", node=node.name, channel_id=channel_id)
        return result

    async def create_invoice(
        self,
        node: NodeDescriptor,
        amount_sats: int,
        memo: Optional[str] = None,
    ) -> str:
        """Create an invoice."""
        params = {
            "description": memo if memo is not None else f"Payment to {node.name}",
            "amountMsat": sats_to_msat(amount_sats),
        }
        response = await self.gateway.call(node, "createinvoice", params)
        serialized = response.get("serialized") if isinstance(response, dict) else None
        if not serialized:
            raise TransportError(f"Unexpected createinvoice response from {node.name}: {response!r}")
        return serialized

    async def pay_invoice(
        self,
        node: NodeDescriptor,
        invoice: str,
        amount_sats: Optional[int] = None,
    ) -> PayResult:
        """Pay an invoice and wait for it to settle."""
        return await payments.pay_invoice(
            self.gateway,
            node,
            invoice,
            amount_sats,
            interval=self.config.payment_poll_interval_seconds,
            timeout=self.config.payment_timeout_seconds,
        )

    async def wait_until_online(
        self,
        node: NodeDescriptor,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Wait until the node responds to status requests."""
        if interval is None:
            interval = self.config.online_interval_seconds
        if timeout is None:
            timeout = self.config.online_timeout_seconds
        await readiness.wait_until_online(self.gateway, node, interval, timeout)
