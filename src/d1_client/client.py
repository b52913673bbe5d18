"""
Async DataONE Client

Asynchronous client for the Coordinating Node registry API.
"""

import logging
from typing import List, Mapping, Optional

import httpx

from d1_client.environments import DEFAULT_API_VERSION, get_base_url
from d1_client.exceptions import D1ConnectionError, D1ResponseError
from d1_client.models import D1Node
from d1_client.xml_parser import XMLParser

logger = logging.getLogger("d1.client")

XML_HEADERS = {"Accept": "application/xml"}


class AsyncCNClient:
    """
    Asynchronous client for a DataONE Coordinating Node.

    The environment is resolved when the client is created, so an unknown
    environment fails before any request is made.

    Example:
        async with AsyncCNClient("PROD") as client:
            nodes = await client.list_nodes()
            for node in nodes:
                print(node.identifier, node.base_url)
    """

    def __init__(
        self,
        cn: str = "PROD",
        version: int = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        base_url: str = None,
        environments: Optional[Mapping[str, str]] = None,
        http_client: httpx.AsyncClient = None,
    ):
        """
        Initialize async CN client.

        Args:
            cn: Environment key, e.g. "PROD" or "STAGING"
            version: DataONE API version (default: 2)
            timeout: Request timeout in seconds
            base_url: Versioned service URL; overrides cn and version
            environments: Environment table to resolve cn against
            http_client: Pre-configured httpx client. Not closed by this client.

        Raises:
            D1ConfigurationError: If cn is not a known environment
        """
        self.cn = cn
        self.base_url = (base_url or get_base_url(cn, version, environments)).rstrip("/")
        self.timeout = timeout

        self._http_client = http_client
        self._owns_http_client = http_client is None

    async def __aenter__(self) -> "AsyncCNClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_http_client(self) -> httpx.AsyncClient:
        """Return the HTTP client, creating one on first use."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
            self._owns_http_client = True
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_xml(self, path: str) -> bytes:
        """GET an XML resource and return the raw body.

        The body is left undecoded so the XML declaration decides the encoding.
        """
        url = f"{self.base_url}{path}"
        logger.info(f"GET {url}")

        try:
            response = await self._get_http_client().get(url, headers=XML_HEADERS)
        except httpx.TimeoutException as e:
            raise D1ConnectionError(f"Request to {url} timed out: {e}")
        except httpx.TransportError as e:
            raise D1ConnectionError(f"Request to {url} failed: {e}")

        if not response.is_success:
            raise D1ResponseError(response.status_code, url)

        return response.content

    async def list_nodes(self) -> List[D1Node]:
        """
        List the nodes registered with the Coordinating Node.

        Returns:
            Decoded nodes, in document order

        Raises:
            D1ConnectionError: If the request fails
            D1ResponseError: If the service returns an error status
            D1ParseError: If the response is not well-formed XML
            D1ValidationError: If any node has an invalid type or state
        """
        xml = await self._get_xml("/node")
        nodes = XMLParser.parse_node_list(xml)
        logger.info(f"Retrieved {len(nodes)} nodes from {self.cn or self.base_url}")
        return nodes


async def list_nodes(cn: str, version: int = DEFAULT_API_VERSION, timeout: float = 30.0) -> List[D1Node]:
    """
    List the nodes registered in a CN environment.

    Args:
        cn: Environment key, e.g. "PROD"
        version: DataONE API version
        timeout: Request timeout in seconds

    Returns:
        Decoded nodes, in document order
    """
    async with AsyncCNClient(cn, version=version, timeout=timeout) as client:
        return await client.list_nodes()
