"""High-level async API for HopTreeLib.

This module provides the one-call entry points: bootstrap a session, crawl
the remote tree and return its reconstructed output.
"""

from typing import Optional

from ..config import CrawlConfig, DEFAULT_MAX_CONCURRENT, NO_SECRET
from ..logging import get_logger
from .adapters import HttpNodeFetcher
from .core import AsyncNodeFetcher, AsyncTreeCrawler

logger = get_logger(__name__)


async def traverse_remote_tree(
    fetcher: AsyncNodeFetcher,
    root_id: str,
    session: str,
    *,
    max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    sentinel: str = NO_SECRET,
) -> str:
    """Crawl a tree with any fetcher and return its output.

    Args:
        fetcher: Source of node descriptors
        root_id: Identifier of the root node
        session: Session token attached to every fetch
        max_concurrent: Maximum simultaneously in-flight fetches
        sentinel: Fragment value meaning "no secret present"

    Returns:
        Fragments concatenated in discovery order

    Example:
        >>> output = await traverse_remote_tree(fetcher, 'start', token)
    """
    config = CrawlConfig(root_id=root_id, max_concurrent=max_concurrent, sentinel=sentinel)
    crawler = AsyncTreeCrawler(fetcher, config)
    return await crawler.traverse(root_id, session)


async def crawl_secret(
    config: Optional[CrawlConfig] = None,
    *,
    fetcher: Optional[HttpNodeFetcher] = None,
    session: Optional[str] = None,
) -> str:
    """Bootstrap a session and crawl the remote tree over HTTP.

    Args:
        config: Crawl configuration (defaults to CrawlConfig())
        fetcher: Optional HTTP fetcher to reuse; when omitted one is created
            from config and closed afterwards
        session: Optional session token; when omitted one is requested
            from the session endpoint

    Returns:
        The reconstructed output

    Raises:
        BootstrapError: If no session token could be obtained
        FetchError: If any node could not be fetched or decoded
        ProtocolViolationError: If a non-first response carries a message
    """
    config = config or CrawlConfig()
    config.validate()

    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = HttpNodeFetcher(config)

    try:
        if session is None:
            session = await fetcher.get_session()
        crawler = AsyncTreeCrawler(fetcher, config)
        output = await crawler.traverse(config.root_id, session)
        logger.debug("crawl_stats", **crawler.get_stats())
        return output
    finally:
        if owns_fetcher:
            await fetcher.close()
