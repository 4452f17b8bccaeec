#!/usr/bin/env python3
"""
Crawl an in-memory tree to see how HopTreeLib reassembles fragments.

This example demonstrates:
- Plugging a custom fetcher into the crawler
- Out-of-order completion with in-order output
- Crawl statistics
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from hoptreelib.aio import AsyncTreeCrawler
from hoptreelib.config import CrawlConfig
from hoptreelib.testing import StaticTreeFetcher


TREE = {
    'start': {'message': 'find the secret', 'secret': 'no', 'next': ['a', 'b', 'c']},
    'a': {'depth': 1, 'secret': 'no', 'next': ['a1', 'a2']},
    'a1': {'depth': 2, 'secret': 'Hel'},
    'a2': {'depth': 2, 'secret': 'lo, '},
    'b': {'depth': 1, 'secret': 'no', 'next': 'b1'},
    'b1': {'depth': 2, 'secret': 'tree'},
    'c': {'depth': 1, 'SECRET': '!'},
}

# Later siblings answer first
DELAYS = {'a': 0.05, 'a1': 0.03, 'b': 0.02}


async def main():
    fetcher = StaticTreeFetcher(TREE, delays=DELAYS)
    crawler = AsyncTreeCrawler(fetcher, CrawlConfig(max_concurrent=2))

    output = await crawler.traverse('start', session='local')

    print(f"Completion order: {', '.join(fetcher.completed)}")
    print(f"Output:           {output}")
    print(f"Stats:            {crawler.get_stats()}")


if __name__ == "__main__":
    asyncio.run(main())
