"""Lazy, cached listing of GitHub releases.

GitHub lists draft releases first (newest id first), then published
releases (newest publish date first). Lookups stop paging as soon as
they have an answer, and give up after a bounded number of releases.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from functools import partial

from draft_release.context import Context
from draft_release.forge.models import Release
from draft_release.util.caching import CachingAsyncIterable
from draft_release.util.pagination import PagedSource

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 30
DEFAULT_MAX_PAGES = 5


class Releases:
    """Releases of one repository, fetched page by page and cached.

    All lookups share the same cache, so running several of them costs
    no more requests than the longest one.
    """

    def __init__(self, source: CachingAsyncIterable[Release], max_releases: int) -> None:
        self._source = source
        self.max_releases = max_releases

    def __aiter__(self) -> AsyncIterator[Release]:
        return aiter(self._source)

    async def find_last_draft(self, target_commitish: str) -> Release | None:
        """Find the newest draft release targeting ``target_commitish``.

        Drafts sort first, so the search ends at the first published release.
        It is not bounded by ``max_releases`` since few drafts are expected.
        """
        async for release in self._source:
            if not release.draft:
                return None
            if not release.prerelease and release.target_commitish == target_commitish:
                return release
        return None

    async def find_last(self, target_commitish: str) -> Release | None:
        """Find the newest published, non-prerelease release for a branch."""
        return await self.find(
            lambda release: (
                not release.draft
                and not release.prerelease
                and release.target_commitish == target_commitish
            )
        )

    async def find(self, predicate: Callable[[Release], bool]) -> Release | None:
        """Return the first release matching ``predicate``.

        Gives up after ``max_releases`` releases have been checked.
        """
        count = 0
        async for release in self._source:
            if predicate(release):
                return release
            count += 1
            if count >= self.max_releases:
                logger.debug("No matching release in the last %d releases", count)
                return None
        return None

    @property
    def cached_count(self) -> int:
        return self._source.cached_count


def fetch_releases(
    ctx: Context,
    per_page: int | None = None,
    max_pages: int | None = None,
) -> Releases:
    """Create a lazy release listing; no request is made until it is iterated."""
    page_size = per_page or DEFAULT_PER_PAGE
    max_releases = page_size * (max_pages or DEFAULT_MAX_PAGES)
    source = PagedSource(partial(_fetch_releases_page, ctx, page_size))
    return Releases(CachingAsyncIterable(source), max_releases)


async def _fetch_releases_page(
    ctx: Context, per_page: int, page_url: str | None
) -> tuple[list[Release], str | None]:
    page = await ctx.forge.list_releases_page(
        ctx.owner, ctx.repo, per_page=per_page, page_url=page_url
    )
    logger.debug("Fetched %d releases from %s", len(page.items), ctx.slug)
    return [Release.from_api(item) for item in page.items], page.next_url
