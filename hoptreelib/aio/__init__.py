"""Asynchronous implementation of HopTreeLib.

This package contains the asyncio crawl engine, the HTTP fetcher and the
high-level entry points built on them.
"""

# Core abstractions
from .core import (
    NodeDescriptor,
    CollectedEntry,
    FetchJob,
    FetchOutcome,
    AsyncNodeFetcher,
    AggregationMap,
    FragmentReconstructor,
    reconstruct,
    AsyncTreeCrawler,
)

# Fetchers
from .adapters import HttpNodeFetcher

# High-level API
from .api import (
    traverse_remote_tree,
    crawl_secret,
)

__all__ = [
    # Data model
    'NodeDescriptor',
    'CollectedEntry',
    'FetchJob',
    'FetchOutcome',
    # Fetchers
    'AsyncNodeFetcher',
    'HttpNodeFetcher',
    # Aggregation
    'AggregationMap',
    'FragmentReconstructor',
    'reconstruct',
    # Engine
    'AsyncTreeCrawler',
    # High-level API
    'traverse_remote_tree',
    'crawl_secret',
]
