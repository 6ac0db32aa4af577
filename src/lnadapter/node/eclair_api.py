"""
Eclair REST API gateway.

Executes control-API calls against an Eclair node over HTTP.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from lnadapter.config import AdapterConfig, get_config
from lnadapter.core.node import NodeDescriptor
from lnadapter.node.interface import RequestGateway, TransportError

logger = structlog.get_logger(__name__)


def encode_params(params: Optional[dict]) -> Dict[str, str]:
    """
    Encode request parameters as Eclair form fields.

    None values are dropped, booleans become "true"/"false" and lists are
    joined with commas.
    """
    form: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            form[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            form[key] = ",".join(str(v) for v in value)
        else:
            form[key] = str(value)
    return form


class EclairGateway(RequestGateway):
    """
    Eclair REST gateway.

    Eclair accepts form-encoded POST requests on /{method} authenticated
    with HTTP basic auth using an empty user name and the API password.
    A fresh HTTP client is opened per call, so the gateway holds no
    connection state between operations.
    """

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway.

        Args:
            config: Adapter configuration. Uses global config if not provided.
            transport: Optional httpx transport, used to stub the network
        """
        self.config = config or get_config()
        self._transport = transport

    def _client(self, node: NodeDescriptor) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=node.rest_url,
            auth=("", self.config.eclair_password),
            timeout=self.config.request_timeout_seconds,
            transport=self._transport,
        )

    async def call(
        self,
        node: NodeDescriptor,
        method: str,
        params: Optional[dict] = None,
    ) -> Any:
        """Make an API request."""
        try:
            async with self._client(node) as client:
                response = await client.post(f"/{method}", data=encode_params(params))
        except httpx.RequestError as e:
            logger.error("eclair_request_error", node=node.name, method=method, error=str(e))
            raise TransportError(f"Eclair request failed: {e}") from e

        if response.status_code != 200:
            error_msg = self._error_message(response)
            logger.error(
                "eclair_request_failed",
                node=node.name,
                method=method,
                status=response.status_code,
                error=error_msg,
            )
            raise TransportError(error_msg, status_code=response.status_code)

        logger.debug("eclair_request", node=node.name, method=method)
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.text
