"""Lazy listing of pull requests via the GraphQL API.

Incoming pull requests are those merged into a base branch; outgoing pull
requests are those still open from a head branch. Results are ordered by
last update, newest first.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime
from functools import partial

from draft_release.context import Context
from draft_release.forge.models import PullRequest
from draft_release.util.caching import CachingAsyncIterable, collect, first
from draft_release.util.pagination import PagedSource

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 30

# See: https://docs.github.com/en/graphql/reference/objects#pullrequest
PULL_REQUESTS_QUERY = """
query(
  $owner: String!
  $repo: String!
  $baseRefName: String
  $headRefName: String
  $state: PullRequestState!
  $perPage: Int!
  $cursor: String
) {
  repository(owner: $owner, name: $repo) {
    pullRequests(
      baseRefName: $baseRefName
      headRefName: $headRefName
      states: [$state]
      orderBy: { field: UPDATED_AT, direction: DESC }
      first: $perPage
      after: $cursor
    ) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        title
        number
        baseRefName
        headRefName
        state
        mergedAt
      }
    }
  }
}
"""


@dataclass(frozen=True, slots=True)
class IncomingPullRequests:
    """Pull requests merged into ``base_ref_name``, optionally since a date."""

    base_ref_name: str
    merged_since: datetime | None = None
    per_page: int | None = None


@dataclass(frozen=True, slots=True)
class OutgoingPullRequests:
    """Open pull requests from ``head_ref_name`` to any base branch."""

    head_ref_name: str
    per_page: int | None = None


PullRequestQuery = IncomingPullRequests | OutgoingPullRequests


class PullRequests:
    """Pull requests from one query, fetched page by page and cached."""

    def __init__(self, source: CachingAsyncIterable[PullRequest]) -> None:
        self._source = source

    def __aiter__(self) -> AsyncIterator[PullRequest]:
        return aiter(self._source)

    async def collect(self, limit: int | None = None) -> list[PullRequest]:
        return await collect(self._source, limit)

    async def first(self) -> PullRequest | None:
        return await first(self._source)


def fetch_pull_requests(ctx: Context, query: PullRequestQuery) -> PullRequests:
    """Create a lazy pull request listing; no request is made until it is iterated."""
    match query:
        case IncomingPullRequests(base_ref_name=base, merged_since=since, per_page=per_page):
            fetch_page = partial(
                _fetch_pull_requests_page,
                ctx,
                base_ref_name=base,
                head_ref_name=None,
                state="MERGED",
                merged_since=since,
                per_page=per_page or DEFAULT_PER_PAGE,
            )
        case OutgoingPullRequests(head_ref_name=head, per_page=per_page):
            fetch_page = partial(
                _fetch_pull_requests_page,
                ctx,
                base_ref_name=None,
                head_ref_name=head,
                state="OPEN",
                merged_since=None,
                per_page=per_page or DEFAULT_PER_PAGE,
            )
    return PullRequests(CachingAsyncIterable(PagedSource(fetch_page)))


async def _fetch_pull_requests_page(
    ctx: Context,
    cursor: str | None,
    *,
    base_ref_name: str | None,
    head_ref_name: str | None,
    state: str,
    merged_since: datetime | None,
    per_page: int,
) -> tuple[list[PullRequest], str | None]:
    data = await ctx.forge.graphql(
        PULL_REQUESTS_QUERY,
        {
            "owner": ctx.owner,
            "repo": ctx.repo,
            "baseRefName": base_ref_name,
            "headRefName": head_ref_name,
            "state": state,
            "perPage": per_page,
            "cursor": cursor,
        },
    )
    connection = data["repository"]["pullRequests"]
    nodes = connection["nodes"]
    page_info = connection["pageInfo"]
    logger.debug("Fetched %d %s pull requests from %s", len(nodes), state.lower(), ctx.slug)

    pull_requests: list[PullRequest] = []
    for node in nodes:
        pull_request = PullRequest.from_node(node)
        if (
            merged_since is not None
            and pull_request.merged_at is not None
            and pull_request.merged_at < merged_since
        ):
            # Ordered by update time, and a pull request is never updated
            # before it is merged, so everything after this was merged
            # before the cutoff too.
            return pull_requests, None
        pull_requests.append(pull_request)

    return pull_requests, page_info["endCursor"] if page_info["hasNextPage"] else None
