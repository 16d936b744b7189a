"""Replayable caching wrapper over one-shot async iterators.

Paginated API listings can only be consumed once. Wrapping them in a
CachingAsyncIterable lets several lookups walk the same listing without
requesting any page twice: each iteration replays what has already been
fetched and only pulls from the source when the cache runs out.

Example:
    releases = CachingAsyncIterable(list_releases())

    async for release in releases:  # fetches page 1
        if release.draft:
            break

    async for release in releases:  # replays page 1, then fetches page 2
        ...
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator
from typing import Generic, TypeVar

T = TypeVar("T")


class CachingAsyncIterable(Generic[T]):
    """Cache items pulled from a single-use async iterator.

    Each call to ``__aiter__`` returns an independent cursor. Cursors read the
    shared buffer by index; pulling from the source is serialized by a lock,
    so concurrent cursors never fetch the same item twice or drop one.
    """

    def __init__(self, source: AsyncIterator[T]) -> None:
        self._source = source
        self._cache: list[T] = []
        self._exhausted = False
        self._lock = asyncio.Lock()

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        index = 0
        while True:
            if index < len(self._cache):
                yield self._cache[index]
                index += 1
                continue
            if self._exhausted:
                return
            if not await self._pull(index):
                return
            yield self._cache[index]
            index += 1

    async def _pull(self, index: int) -> bool:
        """Make sure the item at ``index`` is cached, fetching it if needed.

        Returns False once the source is exhausted. Errors raised by the
        source propagate and leave the source retryable.
        """
        async with self._lock:
            # Another cursor may have filled this slot while we waited
            if index < len(self._cache):
                return True
            if self._exhausted:
                return False
            try:
                item = await anext(self._source)
            except StopAsyncIteration:
                self._exhausted = True
                return False
            self._cache.append(item)
            return True

    @property
    def is_exhausted(self) -> bool:
        return self._exhausted

    @property
    def cached_count(self) -> int:
        return len(self._cache)

    @property
    def cached_values(self) -> list[T]:
        return list(self._cache)


async def collect(source: AsyncIterable[T], limit: int | None = None) -> list[T]:
    """Collect items from an async iterable, stopping after ``limit`` items."""
    results: list[T] = []
    if limit is not None and limit <= 0:
        return results
    async for item in source:
        results.append(item)
        if limit is not None and len(results) >= limit:
            break
    return results


async def first(source: AsyncIterable[T]) -> T | None:
    """Return the first item of an async iterable, or None if it is empty."""
    async for item in source:
        return item
    return None
