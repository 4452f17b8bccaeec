"""
Error taxonomy for HopTreeLib.

Every failure during a crawl is fatal. The exceptions below identify which
stage failed so the caller can print a useful diagnostic.
"""

from typing import Optional


class CrawlError(Exception):
    """Base class for all crawl failures."""

    stage = "crawl"


class ConfigurationError(CrawlError):
    """The crawl configuration is unusable."""

    stage = "config"


class BootstrapError(CrawlError):
    """The session token could not be obtained."""

    stage = "bootstrap"


class FetchError(CrawlError):
    """
    Fetching a single node failed.

    Covers transport errors, non-success response statuses and payloads
    that cannot be decoded into a node descriptor.
    """

    stage = "fetch"

    def __init__(self, node_id: Optional[str], reason: str):
        self.node_id = node_id
        self.reason = reason
        if node_id is None:
            super().__init__(reason)
        else:
            super().__init__(f"failed to fetch node '{node_id}': {reason}")


class DecodeError(FetchError):
    """A payload could not be decoded into a node descriptor."""


class ProtocolViolationError(CrawlError):
    """A diagnostic message appeared on a response other than the first."""

    stage = "protocol"

    def __init__(self, node_id: str, message: str):
        self.node_id = node_id
        self.message = message
        super().__init__(f"unexpected message on node '{node_id}': {message}")
