"""Async fetchers for concrete transports."""

from .http import HttpNodeFetcher

__all__ = [
    'HttpNodeFetcher',
]
