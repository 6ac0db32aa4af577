"""
Test suite for the HTTP collaborators: Eclair REST gateway and bitcoind provider.
"""

import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest

from lnadapter.core.node import BackendDescriptor
from lnadapter.node.bitcoind import BitcoindWalletProvider
from lnadapter.node.eclair_api import EclairGateway, encode_params
from lnadapter.node.interface import TransportError


def basic_auth(user: str, password: str) -> str:
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return f"Basic {token}"


# ============================================================================
# Test Eclair Gateway
# ============================================================================

class TestEncodeParams:
    """Tests for Eclair form encoding."""

    def test_encoding(self):
        form = encode_params({
            "invoice": "lnbc1",
            "blocking": False,
            "announce": True,
            "amountMsat": 1000,
            "nodeIds": ["a", "b"],
            "skip": None,
        })
        assert form == {
            "invoice": "lnbc1",
            "blocking": "false",
            "announce": "true",
            "amountMsat": "1000",
            "nodeIds": "a,b",
        }

    def test_no_params(self):
        assert encode_params(None) == {}


class TestEclairGateway:
    """Tests for EclairGateway.call."""

    @pytest.mark.asyncio
    async def test_posts_form_with_basic_auth(self, node, test_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = parse_qs(request.content.decode())
            return httpx.Response(200, json="invId")

        gateway = EclairGateway(test_config, transport=httpx.MockTransport(handler))

        result = await gateway.call(node, "payinvoice", {"invoice": "lnbc1", "blocking": False})

        assert result == "invId"
        assert seen["method"] == "POST"
        assert seen["url"] == "http://127.0.0.1:8283/payinvoice"
        assert seen["auth"] == basic_auth("", "test-password")
        assert seen["body"] == {"invoice": ["lnbc1"], "blocking": ["false"]}

    @pytest.mark.asyncio
    async def test_returns_decoded_json(self, node, test_config):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"nodeId": "abc", "blockHeight": 5})
        )
        gateway = EclairGateway(test_config, transport=transport)

        assert await gateway.call(node, "getinfo") == {"nodeId": "abc", "blockHeight": 5}

    @pytest.mark.asyncio
    async def test_error_body_raises_transport_error(self, node, test_config):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(400, json={"error": "insufficient funds"})
        )
        gateway = EclairGateway(test_config, transport=transport)

        with pytest.raises(TransportError, match="insufficient funds") as exc_info:
            await gateway.call(node, "open", {"nodeId": "abc"})

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_plain_text_error(self, node, test_config):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(401, text="The supplied authentication is invalid")
        )
        gateway = EclairGateway(test_config, transport=transport)

        with pytest.raises(TransportError, match="authentication is invalid"):
            await gateway.call(node, "getinfo")

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self, node, test_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        gateway = EclairGateway(test_config, transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError, match="connection refused"):
            await gateway.call(node, "getinfo")


# ============================================================================
# Test Bitcoind Wallet Provider
# ============================================================================

class TestBitcoindWalletProvider:
    """Tests for BitcoindWalletProvider.get_wallet_info."""

    @pytest.mark.asyncio
    async def test_get_wallet_info(self, backend, test_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={
                "result": {"balance": 0.00001, "unconfirmed_balance": 0, "immature_balance": 0},
                "error": None,
                "id": seen["payload"]["id"],
            })

        provider = BitcoindWalletProvider(test_config, transport=httpx.MockTransport(handler))

        info = await provider.get_wallet_info(backend)

        assert info["balance"] == 0.00001
        assert seen["url"] == "http://127.0.0.1:18443/"
        assert seen["auth"] == basic_auth("testuser", "testpass")
        assert seen["payload"]["method"] == "getwalletinfo"
        assert seen["payload"]["params"] == []

    @pytest.mark.asyncio
    async def test_backend_credentials_take_precedence(self, test_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"result": {"balance": 1}, "error": None})

        backend = BackendDescriptor(name="b", rpc_port=18444, rpc_user="u", rpc_password="p")
        provider = BitcoindWalletProvider(test_config, transport=httpx.MockTransport(handler))

        await provider.get_wallet_info(backend)

        assert seen["auth"] == basic_auth("u", "p")

    @pytest.mark.asyncio
    async def test_rpc_error(self, backend, test_config):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(500, json={
                "result": None,
                "error": {"code": -18, "message": "Requested wallet does not exist"},
            })
        )
        provider = BitcoindWalletProvider(test_config, transport=transport)

        with pytest.raises(TransportError, match="Requested wallet does not exist") as exc_info:
            await provider.get_wallet_info(backend)

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self, backend, test_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = BitcoindWalletProvider(test_config, transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError, match="connection refused"):
            await provider.get_wallet_info(backend)
