"""Lazy, cached listing of Git tags, newest commit first."""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator, Callable
from functools import partial

from draft_release.context import Context
from draft_release.forge.models import Tag
from draft_release.util.caching import CachingAsyncIterable
from draft_release.util.pagination import PagedSource

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 30
DEFAULT_MAX_PAGES = 5

SEMVER_TAG_PATTERN = re.compile(r"^v\d+\.\d+\.\d+$")

# See: https://docs.github.com/en/graphql/reference/objects#ref
TAGS_QUERY = """
query(
  $owner: String!
  $repo: String!
  $perPage: Int!
  $cursor: String
) {
  repository(owner: $owner, name: $repo) {
    refs(
      refPrefix: "refs/tags/"
      orderBy: { field: TAG_COMMIT_DATE, direction: DESC }
      first: $perPage
      after: $cursor
    ) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        name
        target {
          ... on Commit {
            oid
          }
          ... on Tag {
            target {
              ... on Commit {
                oid
              }
            }
          }
        }
      }
    }
  }
}
"""


class Tags:
    def __init__(self, source: CachingAsyncIterable[Tag], max_tags: int) -> None:
        self._source = source
        self.max_tags = max_tags

    def __aiter__(self) -> AsyncIterator[Tag]:
        return aiter(self._source)

    async def find_first_semver_tag(self) -> Tag | None:
        """Find the newest tag shaped like ``v1.2.3``."""
        return await self.find(lambda tag: SEMVER_TAG_PATTERN.match(tag.name) is not None)

    async def find(self, predicate: Callable[[Tag], bool]) -> Tag | None:
        """Return the first tag matching ``predicate``, checking at most ``max_tags``."""
        count = 0
        async for tag in self._source:
            if predicate(tag):
                return tag
            count += 1
            if count >= self.max_tags:
                return None
        return None


def fetch_tags(ctx: Context, per_page: int | None = None, max_pages: int | None = None) -> Tags:
    page_size = per_page or DEFAULT_PER_PAGE
    max_tags = page_size * (max_pages or DEFAULT_MAX_PAGES)
    source = PagedSource(partial(_fetch_tags_page, ctx, page_size))
    return Tags(CachingAsyncIterable(source), max_tags)


async def _fetch_tags_page(
    ctx: Context, per_page: int, cursor: str | None
) -> tuple[list[Tag], str | None]:
    data = await ctx.forge.graphql(
        TAGS_QUERY,
        {"owner": ctx.owner, "repo": ctx.repo, "perPage": per_page, "cursor": cursor},
    )
    refs = data["repository"]["refs"]
    logger.debug("Fetched %d tags from %s", len(refs["nodes"]), ctx.slug)
    next_cursor = refs["pageInfo"]["endCursor"] if refs["pageInfo"]["hasNextPage"] else None
    return [Tag.from_node(node) for node in refs["nodes"]], next_cursor
