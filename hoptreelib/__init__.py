"""HopTreeLib - Concurrent crawler for remotely discovered trees.

HopTreeLib walks a tree whose shape is only known by fetching it: every node
response names the children to fetch next. Nodes are fetched concurrently
under a fixed cap, and the fragments they carry are reassembled in
depth-first discovery order.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from hoptreelib.aio import crawl_secret
    output = asyncio.run(crawl_secret())
━━━━━━━━━━━━━━━━━━━━━━━━━━

Or from the command line: ``hoptree`` / ``python -m hoptreelib``.
"""

__version__ = "0.1.0"

from . import aio
from .config import CrawlConfig
from .errors import (
    CrawlError,
    ConfigurationError,
    BootstrapError,
    FetchError,
    DecodeError,
    ProtocolViolationError,
)

__all__ = [
    "__version__",
    "aio",
    "CrawlConfig",
    "CrawlError",
    "ConfigurationError",
    "BootstrapError",
    "FetchError",
    "DecodeError",
    "ProtocolViolationError",
]
