"""Test fixtures for HopTreeLib consumers.

These fetchers stand in for the HTTP transport so crawl behavior can be
verified without a network: a static in-memory tree with controllable
latency and failures, and a wrapper that records how many fetches ran at
the same time.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Set

from ..config import NO_SECRET
from ..errors import FetchError
from ..aio.core import AsyncNodeFetcher, NodeDescriptor


class StaticTreeFetcher(AsyncNodeFetcher):
    """Serve node descriptors from an in-memory mapping of raw payloads.

    Payloads go through NodeDescriptor.from_payload, so they may use any
    field-name casing and either form of the children field.

    Example:
        fetcher = StaticTreeFetcher({
            'start': {'secret': 'no', 'next': ['a', 'b']},
            'a': {'secret': 'X'},
            'b': {'secret': 'Y'},
        })
    """

    def __init__(
        self,
        payloads: Mapping[str, Any],
        *,
        delays: Optional[Mapping[str, float]] = None,
        failures: Optional[Set[str]] = None,
        sentinel: str = NO_SECRET,
        expected_session: Optional[str] = None,
    ):
        """Initialize static fetcher.

        Args:
            payloads: Raw payload per node identifier
            delays: Seconds to sleep before answering, per identifier
            failures: Identifiers whose fetch raises FetchError
            sentinel: Fragment value meaning "no secret present"
            expected_session: If set, any other session token is rejected
        """
        self.payloads = dict(payloads)
        self.delays = dict(delays or {})
        self.failures = set(failures or ())
        self.sentinel = sentinel
        self.expected_session = expected_session
        self.calls: List[str] = []
        self.completed: List[str] = []
        self.closed = False

    async def fetch(self, node_id: str, session: str) -> NodeDescriptor:
        self.calls.append(node_id)
        await asyncio.sleep(self.delays.get(node_id, 0))

        if self.expected_session is not None and session != self.expected_session:
            raise FetchError(node_id, "bad response status code 403")
        if node_id in self.failures:
            raise FetchError(node_id, "simulated failure")
        if node_id not in self.payloads:
            raise FetchError(node_id, "bad response status code 404")

        descriptor = NodeDescriptor.from_payload(self.payloads[node_id], self.sentinel, node_id)
        self.completed.append(node_id)
        return descriptor

    async def get_stats(self) -> Dict[str, Any]:
        return {
            'calls': len(self.calls),
            'completed': len(self.completed),
        }

    async def close(self):
        self.closed = True


class InstrumentedFetcher(AsyncNodeFetcher):
    """Wrap another fetcher and track how many fetches overlap.

    Attributes:
        active: Fetches currently running
        peak: Highest value active has reached
        calls: Identifiers in the order their fetch started
    """

    def __init__(self, base_fetcher: AsyncNodeFetcher):
        self.base_fetcher = base_fetcher
        self.active = 0
        self.peak = 0
        self.calls: List[str] = []

    async def fetch(self, node_id: str, session: str) -> NodeDescriptor:
        self.calls.append(node_id)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            return await self.base_fetcher.fetch(node_id, session)
        finally:
            self.active -= 1

    async def get_stats(self) -> Dict[str, Any]:
        stats = await self.base_fetcher.get_stats()
        stats.update({'peak': self.peak, 'active': self.active})
        return stats

    async def close(self):
        await self.base_fetcher.close()


def build_wide_tree(
    fanout: int,
    depth: int,
    root_id: str = 'start',
    sentinel: str = NO_SECRET,
) -> Dict[str, Dict[str, Any]]:
    """Build payloads for a complete tree whose leaves carry their own id.

    Leaves sit at the given depth and carry their identifier as fragment,
    so the expected output is the concatenation of leaf ids in pre-order.

    Args:
        fanout: Children per inner node
        depth: Depth of the leaves (root is depth 0)
        root_id: Identifier of the root node
        sentinel: Fragment value for inner nodes

    Returns:
        Mapping of identifier to raw payload
    """
    payloads: Dict[str, Dict[str, Any]] = {}

    def build(node_id: str, level: int) -> None:
        if level == depth:
            payloads[node_id] = {'id': node_id, 'depth': level, 'secret': node_id}
            return
        children = [f"{node_id}.{i}" for i in range(fanout)]
        payloads[node_id] = {
            'id': node_id,
            'depth': level,
            'secret': sentinel,
            'next': children,
        }
        for child in children:
            build(child, level + 1)

    build(root_id, 0)
    return payloads
