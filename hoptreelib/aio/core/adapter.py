"""Async node fetcher abstraction.

Defines how the crawler reaches a remote data source. The crawler treats
fetching as opaque: give it an identifier and a session token, get back a
NodeDescriptor or an exception.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from .node import NodeDescriptor


class AsyncNodeFetcher(ABC):
    """Abstract base class for async node fetchers.

    Fetchers bridge between the generic crawl logic and a specific
    transport. They hold no traversal state; admission control and lineage
    belong to the crawler.
    """

    @abstractmethod
    async def fetch(self, node_id: str, session: str) -> NodeDescriptor:
        """Fetch and decode one node.

        Args:
            node_id: Identifier of the node to fetch
            session: Opaque session token attached to the request

        Returns:
            Decoded NodeDescriptor

        Raises:
            FetchError: On transport failure, non-success status or an
                undecodable payload
        """
        pass

    async def get_stats(self) -> Dict[str, Any]:
        """Get fetcher statistics.

        Returns:
            Dictionary of statistics (request counts, etc.)
        """
        return {}

    async def close(self):
        """Clean up fetcher resources.

        Override if the fetcher holds connections.
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
