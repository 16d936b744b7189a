"""Resumable async iteration over cursor-paginated listings.

PagedSource advances its cursor only after a page has been fetched. If a
fetch raises, the next ``anext`` requests the same page again.
"""

from __future__ import annotations

from collections import deque
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")

# Fetch the page at a cursor (None for the first page). Returns the page's
# items and the cursor of the next page, or None when this is the last one.
PageFetcher = Callable[[str | None], Awaitable[tuple[list[T], str | None]]]


class PagedSource(Generic[T]):
    """Single-use async iterator that fetches pages on demand."""

    def __init__(self, fetch_page: PageFetcher[T]) -> None:
        self._fetch_page = fetch_page
        self._cursor: str | None = None
        self._buffer: deque[T] = deque()
        self._done = False

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if self._done:
                raise StopAsyncIteration
            items, next_cursor = await self._fetch_page(self._cursor)
            self._buffer.extend(items)
            if next_cursor is None or not items:
                self._done = True
            else:
                self._cursor = next_cursor
        return self._buffer.popleft()
