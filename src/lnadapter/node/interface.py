"""
Abstract interfaces for Lightning node integration.

Defines the contract every node adapter implements, the transport and
backend-wallet collaborators adapters depend on, and the error taxonomy
shared by all of them.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from lnadapter.core.models import (
    BalancesInfo,
    Channel,
    NewAddress,
    NodeInfo,
    OpenChannelResult,
    PayResult,
    Peer,
)
from lnadapter.core.node import BackendDescriptor, NodeDescriptor


class RequestGateway(ABC):
    """Executes a single control-API request against a node."""

    @abstractmethod
    async def call(
        self,
        node: NodeDescriptor,
        method: str,
        params: Optional[dict] = None,
    ) -> Any:
        """
        Call a node API method.

        Args:
            node: Target node
            method: API method name, e.g. "getinfo"
            params: Request parameters

        Returns:
            Decoded response body

        Raises:
            TransportError: On network or protocol failure
        """
        pass


class BackendWalletProvider(ABC):
    """Reports on-chain wallet balances held by a bitcoind backend."""

    @abstractmethod
    async def get_wallet_info(self, backend: BackendDescriptor) -> dict:
        """
        Get wallet info from a backend.

        Returns:
            Dict with balance, unconfirmed_balance and immature_balance in BTC
        """
        pass


class LightningNodeInterface(ABC):
    """
    Abstract interface for Lightning node access.

    Every operation is a standalone request sequence: adapters keep no state
    between calls, so one instance may serve many nodes concurrently.
    """

    @abstractmethod
    async def get_info(self, node: NodeDescriptor) -> NodeInfo:
        """Get node identity and chain sync status."""
        pass

    @abstractmethod
    async def get_balances(
        self,
        node: NodeDescriptor,
        backend: Optional[BackendDescriptor] = None,
    ) -> BalancesInfo:
        """
        Get on-chain wallet balances.

        Raises:
            ConfigurationError: If the node family needs a backend and none is given
        """
        pass

    @abstractmethod
    async def get_new_address(self, node: NodeDescriptor) -> NewAddress:
        """Issue a new on-chain deposit address."""
        pass

    @abstractmethod
    async def get_channels(self, node: NodeDescriptor) -> List[Channel]:
        """List the node's channels, skipping closed and malformed records."""
        pass

    @abstractmethod
    async def get_peers(self, node: NodeDescriptor) -> List[Peer]:
        """List the node's peers."""
        pass

    @abstractmethod
    async def connect_peers(self, node: NodeDescriptor, rpc_urls: List[str]) -> None:
        """
        Connect to every peer not already connected.

        Individual connection failures are logged and never raised.
        """
        pass

    @abstractmethod
    async def open_channel(
        self,
        from_node: NodeDescriptor,
        to_rpc_url: str,
        amount_sats: int,
        is_private: bool = False,
    ) -> OpenChannelResult:
        """
        Open a channel to a remote node.

        Args:
            from_node: Funding node
            to_rpc_url: Counterparty URI in pubkey@host:port form
            amount_sats: Channel capacity
            is_private: Open an unannounced channel

        Returns:
            Funding transaction id and output index
        """
        pass

    @abstractmethod
    async def close_channel(self, node: NodeDescriptor, channel_id: str) -> Any:
        """Close a channel and return the node's closing response."""
        pass

    @abstractmethod
    async def create_invoice(
        self,
        node: NodeDescriptor,
        amount_sats: int,
        memo: Optional[str] = None,
    ) -> str:
        """Create an invoice and return its encoded payment request."""
        pass

    @abstractmethod
    async def pay_invoice(
        self,
        node: NodeDescriptor,
        invoice: str,
        amount_sats: Optional[int] = None,
    ) -> PayResult:
        """
        Pay an invoice and wait for it to settle.

        Raises:
            PaymentFailedError: If the node reports a definitive failure
            PaymentTimeoutError: If the payment never settles
        """
        pass

    @abstractmethod
    async def wait_until_online(
        self,
        node: NodeDescriptor,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Poll the node until it responds.

        Interval and timeout default to the configured readiness settings.

        Raises:
            The last connection error if the node is still offline at the deadline
        """
        pass


class LightningAdapterError(Exception):
    """Base class for adapter errors."""
    pass


class ConfigurationError(LightningAdapterError):
    """Raised when an operation is missing a required precondition."""
    pass


class TransportError(LightningAdapterError):
    """Raised when a request to a node or backend fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PaymentFailedError(LightningAdapterError):
    """Raised when the node reports a payment as definitively failed."""

    def __init__(self, message: str, payment_id: Optional[str] = None):
        super().__init__(message)
        self.payment_id = payment_id


class PaymentTimeoutError(LightningAdapterError):
    """Raised when a payment does not settle before its deadline."""

    def __init__(self, message: str, payment_id: Optional[str] = None):
        super().__init__(message)
        self.payment_id = payment_id


class MalformedChannelError(LightningAdapterError):
    """Raised when a raw channel record cannot be mapped."""
    pass
