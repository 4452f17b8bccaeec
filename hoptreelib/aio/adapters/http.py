"""Async HTTP fetcher for remote trees.

Each node lives at base_url + identifier and answers with a JSON object.
Every request carries the session token obtained once from the session
endpoint. Built on a shared httpx.AsyncClient with a fixed timeout.
"""

from typing import Any, Dict, Optional

import httpx

from ...config import CrawlConfig
from ...errors import BootstrapError, DecodeError, FetchError
from ...logging import get_logger
from ..core import AsyncNodeFetcher, NodeDescriptor
from ..core.node import normalize_keys

logger = get_logger(__name__)


class HttpNodeFetcher(AsyncNodeFetcher):
    """Fetch node descriptors over HTTP.

    Args:
        config: Crawl configuration (URLs, timeout, sentinel, header name)
        client: Optional pre-built httpx.AsyncClient. When given, the
            caller owns it and close() leaves it open.
    """

    def __init__(
        self,
        config: Optional[CrawlConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or CrawlConfig()
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                limits=httpx.Limits(
                    max_connections=self.config.max_concurrent,
                    max_keepalive_connections=1,
                ),
            )
        self._client = client
        self._requests = 0
        self._failures = 0

    async def get_session(self) -> str:
        """Obtain a session token from the session endpoint.

        Returns:
            The opaque session token

        Raises:
            BootstrapError: If the request fails or the response carries no token
        """
        url = self.config.session_url
        try:
            response = await self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise BootstrapError(f"session request to {url} failed: {e}") from e

        if response.status_code != 200:
            raise BootstrapError(
                f"session request to {url} returned status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise BootstrapError(f"session response is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise BootstrapError("session response is not a JSON object")

        token = normalize_keys(payload).get("session")
        if not isinstance(token, str) or not token:
            raise BootstrapError("session response carries no session token")

        logger.debug("session_obtained", url=url)
        return token

    async def fetch(self, node_id: str, session: str) -> NodeDescriptor:
        """Fetch and decode one node.

        Raises:
            FetchError: On transport failure or a non-200 status
            DecodeError: If the body is not a JSON object of the expected shape
        """
        url = self.config.node_url(node_id)
        self._requests += 1
        try:
            response = await self._client.get(
                url, headers={self.config.session_header: session}
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._failures += 1
            raise FetchError(node_id, f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            self._failures += 1
            raise FetchError(node_id, f"bad response status code {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            self._failures += 1
            raise DecodeError(node_id, f"invalid JSON: {e}") from e

        try:
            return NodeDescriptor.from_payload(payload, self.config.sentinel, node_id)
        except DecodeError:
            self._failures += 1
            raise

    async def get_stats(self) -> Dict[str, Any]:
        return {
            'requests': self._requests,
            'failures': self._failures,
            'timeout': self.config.timeout,
        }

    async def close(self):
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    def __repr__(self) -> str:
        return f"HttpNodeFetcher(base_url={self.config.base_url!r})"
