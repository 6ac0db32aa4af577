"""
Bitcoind wallet provider.

Reads on-chain wallet balances from a bitcoind backend over JSON-RPC, for
node families that delegate their wallet to the backend.
"""

import uuid
from typing import Any, List, Optional

import httpx
import structlog

from lnadapter.config import AdapterConfig, get_config
from lnadapter.core.node import BackendDescriptor
from lnadapter.node.interface import BackendWalletProvider, TransportError

logger = structlog.get_logger(__name__)


class BitcoindWalletProvider(BackendWalletProvider):
    """Bitcoind JSON-RPC wallet provider."""

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or get_config()
        self._transport = transport

    def _auth(self, backend: BackendDescriptor) -> tuple:
        return (
            backend.rpc_user or self.config.bitcoind_rpc_user,
            backend.rpc_password or self.config.bitcoind_rpc_password,
        )

    async def _rpc(
        self,
        backend: BackendDescriptor,
        method: str,
        params: Optional[List[Any]] = None,
    ) -> Any:
        """Make a JSON-RPC request."""
        payload = {
            "jsonrpc": "1.0",
            "id": str(uuid.uuid4()),
            "method": method,
            "params": params or [],
        }

        try:
            async with httpx.AsyncClient(
                auth=self._auth(backend),
                timeout=self.config.request_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(backend.rpc_url, json=payload)
        except httpx.RequestError as e:
            logger.error("bitcoind_request_error", backend=backend.name, method=method, error=str(e))
            raise TransportError(f"Bitcoind request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            raise TransportError(
                f"Bitcoind API error: {response.text or response.status_code}",
                status_code=response.status_code,
            )

        # bitcoind reports RPC errors with HTTP 500 and a JSON body
        error = data.get("error") if isinstance(data, dict) else None
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            logger.error("bitcoind_rpc_failed", backend=backend.name, method=method, error=message)
            raise TransportError(message, status_code=response.status_code)

        if response.status_code != 200:
            raise TransportError(
                f"Bitcoind API error: {response.text}",
                status_code=response.status_code,
            )

        return data.get("result") if isinstance(data, dict) else data

    async def get_wallet_info(self, backend: BackendDescriptor) -> dict:
        """Get wallet info from the backend."""
        info = await self._rpc(backend, "getwalletinfo")
        logger.debug("wallet_info_fetched", backend=backend.name)
        return info or {}
