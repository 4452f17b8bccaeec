"""Testing utilities for HopTreeLib consumers."""

from .fixtures import InstrumentedFetcher, StaticTreeFetcher, build_wide_tree

__all__ = ['InstrumentedFetcher', 'StaticTreeFetcher', 'build_wide_tree']
