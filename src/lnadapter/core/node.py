"""
Node descriptors.

Describe the Lightning node and bitcoind backend an operation targets.
Descriptors are owned by the caller and never mutated by the adapter.
"""

from dataclasses import dataclass
from typing import Optional


class Implementation:
    """Known Lightning implementation families."""
    ECLAIR = "eclair"
    LND = "LND"
    CLIGHTNING = "c-lightning"


@dataclass(frozen=True)
class NodeDescriptor:
    """
    A running Lightning node as seen by the simulation tool.

    Attributes:
        name: Human-readable node name (e.g. "alice")
        implementation: Implementation family (see Implementation)
        version: Implementation release, e.g. "0.8.0"
        host: Host the REST API listens on
        rest_port: REST API port
        p2p_port: Lightning peer-to-peer port
        id: Numeric id inside the simulated network
        backend_name: Name of the bitcoind backend the node uses
    """
    name: str
    implementation: str = Implementation.ECLAIR
    version: str = ""
    host: str = "127.0.0.1"
    rest_port: int = 8080
    p2p_port: int = 9735
    id: int = 0
    backend_name: Optional[str] = None

    @property
    def rest_url(self) -> str:
        """Base URL of the node's REST API."""
        return f"http://{self.host}:{self.rest_port}"


@dataclass(frozen=True)
class BackendDescriptor:
    """A bitcoind backend that reports wallet balances for some node families."""
    name: str
    host: str = "127.0.0.1"
    rpc_port: int = 18443
    rpc_user: Optional[str] = None
    rpc_password: Optional[str] = None

    @property
    def rpc_url(self) -> str:
        """JSON-RPC endpoint URL."""
        return f"http://{self.host}:{self.rpc_port}/"
