"""Exception types that cross the lazyrepos core boundary."""

from __future__ import annotations


class LazyReposError(Exception):
    """Base class for fatal lazyrepos errors."""


class DiscoveryError(LazyReposError):
    """Raised when the repository set cannot be determined at all."""
