"""
Tests for the async CN client.

Uses httpx.MockTransport in place of the Coordinating Node.
"""

from pathlib import Path
from typing import Callable, List

import httpx
import pytest

from d1_client import list_nodes
from d1_client.client import AsyncCNClient
from d1_client.exceptions import (
    D1ConfigurationError,
    D1ConnectionError,
    D1ParseError,
    D1ResponseError,
    D1ValidationError,
)
from d1_client.models import D1Node

NODE_LIST_XML = (Path(__file__).parent / "mocks" / "nodeList.xml").read_text(encoding="utf-8")


def mock_http_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient backed by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def xml_response(body: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        text=body,
        headers={"Content-Type": "application/xml"},
    )


class TestListNodes:
    """Tests for AsyncCNClient.list_nodes."""

    @pytest.mark.asyncio
    async def test_list_nodes(self):
        """Return every node in document order."""
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return xml_response(NODE_LIST_XML)

        async with AsyncCNClient("PROD", http_client=mock_http_client(handler)) as client:
            nodes = await client.list_nodes()

        assert len(nodes) == 4
        assert all(isinstance(n, D1Node) for n in nodes)
        assert [n.identifier for n in nodes] == [
            "urn:node:CN",
            "urn:node:KNB",
            "urn:node:PISCO",
            "urn:node:mnTestGOA",
        ]

        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert str(requests[0].url) == "https://cn.dataone.org/cn/v2/node"
        assert requests[0].headers["Accept"] == "application/xml"

    @pytest.mark.asyncio
    async def test_api_version(self):
        """The API version is part of the request URL."""
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return xml_response("<nodeList/>")

        async with AsyncCNClient("STAGING", version=1, http_client=mock_http_client(handler)) as client:
            assert await client.list_nodes() == []

        assert urls == ["https://cn-stage.test.dataone.org/cn/v1/node"]

    @pytest.mark.asyncio
    async def test_base_url_override(self):
        """An explicit base URL skips environment resolution."""
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return xml_response("<nodeList/>")

        client = AsyncCNClient(
            cn=None,
            base_url="http://localhost:8080/cn/v2/",
            http_client=mock_http_client(handler),
        )
        await client.list_nodes()

        assert urls == ["http://localhost:8080/cn/v2/node"]

    @pytest.mark.asyncio
    async def test_unknown_environment(self):
        """Unknown environment fails before any request."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return xml_response(NODE_LIST_XML)

        with pytest.raises(D1ConfigurationError) as exc_info:
            AsyncCNClient("nope", http_client=mock_http_client(handler))

        assert "nope" in str(exc_info.value)
        assert requests == []

    @pytest.mark.asyncio
    async def test_list_nodes_function_unknown_environment(self):
        """Module-level list_nodes rejects unknown environments."""
        with pytest.raises(D1ConfigurationError, match="Unrecognized CN environment: foo"):
            await list_nodes("foo")

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        """Malformed XML raises D1ParseError."""
        def handler(request: httpx.Request) -> httpx.Response:
            return xml_response("<nodeList><node></nodeList>")

        async with AsyncCNClient("PROD", http_client=mock_http_client(handler)) as client:
            with pytest.raises(D1ParseError):
                await client.list_nodes()

    @pytest.mark.asyncio
    async def test_invalid_node_aborts_listing(self):
        """An invalid node fails the whole listing."""
        body = NODE_LIST_XML.replace('state="down"', 'state="sideways"')

        def handler(request: httpx.Request) -> httpx.Response:
            return xml_response(body)

        async with AsyncCNClient("PROD", http_client=mock_http_client(handler)) as client:
            with pytest.raises(D1ValidationError) as exc_info:
                await client.list_nodes()

        assert exc_info.value.field == "state"

    @pytest.mark.asyncio
    async def test_error_status(self):
        """Non-success status raises D1ResponseError."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="Service Unavailable")

        async with AsyncCNClient("PROD", http_client=mock_http_client(handler)) as client:
            with pytest.raises(D1ResponseError) as exc_info:
                await client.list_nodes()

        assert exc_info.value.code == 503
        assert exc_info.value.url == "https://cn.dataone.org/cn/v2/node"

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Transport failure raises D1ConnectionError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        async with AsyncCNClient("PROD", http_client=mock_http_client(handler)) as client:
            with pytest.raises(D1ConnectionError):
                await client.list_nodes()

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Timeout raises D1ConnectionError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("Timed out", request=request)

        async with AsyncCNClient("PROD", http_client=mock_http_client(handler)) as client:
            with pytest.raises(D1ConnectionError, match="timed out"):
                await client.list_nodes()


class TestResponseEncoding:
    """Tests for response body decoding."""

    @pytest.mark.asyncio
    async def test_xml_declaration_decides_encoding(self):
        """The prolog encoding wins over a conflicting Content-Type charset."""
        body = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>'
            "<nodeList><node><name>Université de Montréal</name></node></nodeList>"
        ).encode("iso-8859-1")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=body,
                headers={"Content-Type": "application/xml; charset=utf-8"},
            )

        async with AsyncCNClient("PROD", http_client=mock_http_client(handler)) as client:
            nodes = await client.list_nodes()

        assert nodes[0].name == "Université de Montréal"


class TestClientLifecycle:
    """Tests for HTTP client ownership."""

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        """An injected HTTP client is left open."""
        http_client = mock_http_client(lambda request: xml_response("<nodeList/>"))

        async with AsyncCNClient("PROD", http_client=http_client) as client:
            await client.list_nodes()

        assert not http_client.is_closed
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        """A client created on demand is closed on exit."""
        client = AsyncCNClient("PROD", timeout=5.0)
        http_client = client._get_http_client()

        assert http_client.timeout.read == 5.0

        await client.close()
        assert http_client.is_closed
