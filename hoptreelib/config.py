"""Configuration system for HopTreeLib.

This module defines the fixed constants of a crawl and the dataclass that
groups them, including where the remote tree lives, how many fetches may be
in flight at once and which fragment value marks "no secret here".
"""

from dataclasses import dataclass
from enum import Enum

from .errors import ConfigurationError


DEFAULT_BASE_URL = "http://challenge.curbside.com/"
DEFAULT_SESSION_PATH = "get-session"
DEFAULT_ROOT_ID = "start"

# Synthetic bucket key the root node is recorded under
ROOT_KEY = "ROOT"

# Fragment value meaning "no output here, descend further"
NO_SECRET = "no"

DEFAULT_MAX_CONCURRENT = 16
DEFAULT_TIMEOUT = 10.0  # seconds, per request
SESSION_HEADER = "session"


class LogFormat(Enum):
    """How log records are rendered on stderr."""
    CONSOLE = "console"
    JSON = "json"


@dataclass
class CrawlConfig:
    """Complete configuration for a single crawl.

    Attributes:
        base_url: Prefix every node identifier is appended to
        session_path: Path (relative to base_url) of the session endpoint
        root_id: Identifier of the first node to fetch
        max_concurrent: Admission cap on simultaneously in-flight fetches
        timeout: Per-request timeout in seconds
        sentinel: Fragment value meaning "no secret present"
        root_key: Bucket key the root node is recorded under
        session_header: Request header carrying the session token
    """

    base_url: str = DEFAULT_BASE_URL
    session_path: str = DEFAULT_SESSION_PATH
    root_id: str = DEFAULT_ROOT_ID
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    timeout: float = DEFAULT_TIMEOUT
    sentinel: str = NO_SECRET
    root_key: str = ROOT_KEY
    session_header: str = SESSION_HEADER

    @property
    def session_url(self) -> str:
        return self.base_url + self.session_path

    def node_url(self, node_id: str) -> str:
        """Build the URL for a node identifier."""
        return self.base_url + node_id

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ConfigurationError: If a value cannot produce a working crawl
        """
        if self.max_concurrent < 1:
            raise ConfigurationError(
                f"max_concurrent must be at least 1, got {self.max_concurrent}"
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if not self.root_id:
            raise ConfigurationError("root_id must not be empty")
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
