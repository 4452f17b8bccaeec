"""
Command line entry point for HopTreeLib.

Bootstraps a session, crawls the remote tree from its well-known root and
writes the reconstructed output to stdout. Diagnostics go to stderr.

Usage:
    hoptree                          # Crawl with the built-in defaults
    hoptree --max-concurrent 32      # Raise the admission cap
    hoptree -v                       # Log crawl progress to stderr
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from . import __version__
from .aio.api import crawl_secret
from .config import (
    CrawlConfig,
    DEFAULT_BASE_URL,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_ROOT_ID,
    DEFAULT_TIMEOUT,
    LogFormat,
)
from .errors import CrawlError
from .logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoptree",
        description="Crawl a remote tree and print its reassembled secret",
    )
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL,
                        help=f"Base URL node identifiers are appended to (default: {DEFAULT_BASE_URL})")
    parser.add_argument("--root", default=DEFAULT_ROOT_ID,
                        help=f"Identifier of the root node (default: {DEFAULT_ROOT_ID})")
    parser.add_argument("--max-concurrent", type=int, default=DEFAULT_MAX_CONCURRENT,
                        help=f"Maximum simultaneous fetches (default: {DEFAULT_MAX_CONCURRENT})")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT})")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress to stderr (-vv for every fetch)")
    parser.add_argument("--log-format", choices=[f.value for f in LogFormat],
                        default=LogFormat.CONSOLE.value, help="Log rendering")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _log_level(verbosity: int) -> str:
    if verbosity >= 2:
        return "DEBUG"
    if verbosity == 1:
        return "INFO"
    return "WARNING"


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(
        json_output=args.log_format == LogFormat.JSON.value,
        level=_log_level(args.verbose),
    )

    config = CrawlConfig(
        base_url=args.base_url,
        root_id=args.root,
        max_concurrent=args.max_concurrent,
        timeout=args.timeout,
    )

    try:
        output = asyncio.run(crawl_secret(config))
    except CrawlError as e:
        print(f"Error [{e.stage}]: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130

    sys.stdout.write(output)
    if sys.stdout.isatty():
        sys.stdout.write("\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
