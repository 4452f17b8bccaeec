"""Result aggregation and ordered reconstruction.

The crawler records every fetched node under the bucket of the parent that
scheduled it. Siblings are fetched concurrently and land in their bucket in
arrival order, so reconstruction sorts each bucket by the listed position
before walking it.
"""

from typing import Dict, Iterator, List, Optional

from ...config import NO_SECRET, ROOT_KEY
from .node import CollectedEntry


class AggregationMap:
    """Append-only mapping from parent identifier to its collected children.

    Populated by a single writer (the crawl loop) and read once afterwards.
    """

    def __init__(self):
        self._buckets: Dict[str, List[CollectedEntry]] = {}
        self._size = 0

    def record(self, parent_id: str, entry: CollectedEntry) -> None:
        """Append an entry to the bucket of its parent."""
        self._buckets.setdefault(parent_id, []).append(entry)
        self._size += 1

    def bucket(self, parent_id: str) -> List[CollectedEntry]:
        """Get the children recorded under a parent, in listed order.

        A missing bucket is not an error; it means no children were
        recorded (the normal case for leaves).

        Returns:
            New list sorted by order_index (stable)
        """
        return sorted(self._buckets.get(parent_id, ()), key=lambda e: e.order_index)

    def parents(self) -> Iterator[str]:
        """Iterate over every parent identifier with a bucket."""
        return iter(self._buckets)

    def __contains__(self, parent_id: object) -> bool:
        return parent_id in self._buckets

    def __len__(self) -> int:
        """Total number of recorded entries across all buckets."""
        return self._size

    def __repr__(self) -> str:
        return f"AggregationMap(parents={len(self._buckets)}, entries={self._size})"


def reconstruct(
    aggregation: AggregationMap,
    root_key: str = ROOT_KEY,
    sentinel: str = NO_SECRET,
) -> str:
    """Concatenate fragments in depth-first pre-order.

    Starts at root_key, visits each bucket in listed order, emits every
    non-sentinel fragment and descends into the entry's own bucket before
    moving on to its next sibling. Uses an explicit stack so deep trees do
    not hit the recursion limit.

    Args:
        aggregation: Completed aggregation map
        root_key: Bucket key the walk starts from
        sentinel: Fragment value that contributes nothing

    Returns:
        The reconstructed output
    """
    parts: List[str] = []
    stack = list(reversed(aggregation.bucket(root_key)))

    while stack:
        entry = stack.pop()
        if entry.fragment != sentinel:
            parts.append(entry.fragment)
        stack.extend(reversed(aggregation.bucket(entry.child_id)))

    return "".join(parts)


class FragmentReconstructor:
    """Collector that turns a completed AggregationMap into output text.

    Keeps the result of the last walk so callers can inspect it after the
    crawl has finished.
    """

    def __init__(self, root_key: str = ROOT_KEY, sentinel: str = NO_SECRET):
        """Initialize reconstructor.

        Args:
            root_key: Bucket key the walk starts from
            sentinel: Fragment value that contributes nothing
        """
        self.root_key = root_key
        self.sentinel = sentinel
        self.reset()

    def reset(self):
        """Forget the previous result."""
        self.output: Optional[str] = None

    def collect(self, aggregation: AggregationMap) -> str:
        """Walk an aggregation map and store the output.

        Args:
            aggregation: Completed aggregation map

        Returns:
            Reconstructed output
        """
        self.output = reconstruct(aggregation, self.root_key, self.sentinel)
        return self.output

    def get_result(self) -> str:
        """Get the last reconstructed output.

        Raises:
            RuntimeError: If collect() has not been called since reset()
        """
        if self.output is None:
            raise RuntimeError("No aggregation map has been collected")
        return self.output
