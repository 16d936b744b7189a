"""Lazy, cached commit history of a branch, from HEAD backwards."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from functools import partial

from draft_release.context import Context
from draft_release.exceptions import BranchNotFoundError
from draft_release.forge.models import Commit
from draft_release.util.caching import CachingAsyncIterable, collect
from draft_release.util.pagination import PagedSource

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 30

# See: https://docs.github.com/en/graphql/reference/objects#commit
COMMIT_HISTORY_QUERY = """
query(
  $owner: String!
  $repo: String!
  $branch: String!
  $perPage: Int!
  $cursor: String
) {
  repository(owner: $owner, name: $repo) {
    ref(qualifiedName: $branch) {
      target {
        ... on Commit {
          history(first: $perPage, after: $cursor) {
            pageInfo {
              hasNextPage
              endCursor
            }
            nodes {
              oid
              committedDate
              message
            }
          }
        }
      }
    }
  }
}
"""


class Commits:
    def __init__(self, source: CachingAsyncIterable[Commit]) -> None:
        self._source = source

    def __aiter__(self) -> AsyncIterator[Commit]:
        return aiter(self._source)

    async def collect(self, limit: int | None = None) -> list[Commit]:
        return await collect(self._source, limit)

    @property
    def is_exhausted(self) -> bool:
        return self._source.is_exhausted

    @property
    def cached_count(self) -> int:
        return self._source.cached_count

    @property
    def cached_values(self) -> list[Commit]:
        return self._source.cached_values


def fetch_commits(ctx: Context, per_page: int | None = None) -> Commits:
    fetch_page = partial(_fetch_commits_page, ctx, per_page or DEFAULT_PER_PAGE)
    return Commits(CachingAsyncIterable(PagedSource(fetch_page)))


async def _fetch_commits_page(
    ctx: Context, per_page: int, cursor: str | None
) -> tuple[list[Commit], str | None]:
    data = await ctx.forge.graphql(
        COMMIT_HISTORY_QUERY,
        {
            "owner": ctx.owner,
            "repo": ctx.repo,
            "branch": ctx.branch,
            "perPage": per_page,
            "cursor": cursor,
        },
    )
    ref = data["repository"]["ref"]
    if ref is None:
        raise BranchNotFoundError(ctx.branch, ctx.owner, ctx.repo)

    history = ref["target"]["history"]
    logger.debug("Fetched %d commits of %s", len(history["nodes"]), ctx.branch)
    next_cursor = history["pageInfo"]["endCursor"] if history["pageInfo"]["hasNextPage"] else None
    return [Commit.from_node(node) for node in history["nodes"]], next_cursor
