"""Core abstractions for async tree crawling.

This module defines the node data model, the fetcher interface, result
aggregation and the crawl engine itself.
"""

from .node import (
    NodeDescriptor,
    CollectedEntry,
    FetchJob,
    FetchOutcome,
)
from .adapter import AsyncNodeFetcher
from .collector import (
    AggregationMap,
    FragmentReconstructor,
    reconstruct,
)
from .traverser import AsyncTreeCrawler

__all__ = [
    # Data model
    'NodeDescriptor',
    'CollectedEntry',
    'FetchJob',
    'FetchOutcome',
    # Fetcher
    'AsyncNodeFetcher',
    # Aggregation
    'AggregationMap',
    'FragmentReconstructor',
    'reconstruct',
    # Engine
    'AsyncTreeCrawler',
]
