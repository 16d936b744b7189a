"""Shared helpers for draft-release."""

from __future__ import annotations

from draft_release.util.caching import CachingAsyncIterable, collect, first
from draft_release.util.pagination import PagedSource

__all__ = ["CachingAsyncIterable", "PagedSource", "collect", "first"]
