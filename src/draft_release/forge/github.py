"""GitHub REST and GraphQL client.

This is the only module that talks HTTP. Errors reported by the API are
translated into ForgeError subclasses and raised immediately; connection
errors from httpx propagate as they are. Nothing here retries.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from draft_release.exceptions import (
    ForgeAuthError,
    ForgeNotFoundError,
    ForgeRequestError,
    GraphQLError,
    RateLimitError,
)
from draft_release.forge.client import ReleasesPage

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


def graphql_url_for(api_url: str) -> str:
    """Derive the GraphQL endpoint from a REST API base URL.

    GitHub Enterprise serves REST from ``/api/v3`` and GraphQL from ``/api/graphql``.
    """
    api_url = api_url.rstrip("/")
    if api_url.endswith("/api/v3"):
        return api_url.removesuffix("/v3") + "/graphql"
    return f"{api_url}/graphql"


class GitHubClient:
    """Async GitHub client implementing the ForgeClient protocol.

    Use as an async context manager so the connection pool is closed::

        async with GitHubClient(token) as client:
            page = await client.list_releases_page("owner", "repo", per_page=30)
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        graphql_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._graphql_url = graphql_url or graphql_url_for(self._api_url)
        self._client = httpx.AsyncClient(
            base_url=self._api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and translate HTTP errors to domain exceptions."""
        logger.debug("%s %s", method, url)
        response = await self._client.request(method, url, json=json, params=params)
        if response.status_code >= 400:
            raise _error_for(response)
        return response

    # Releases (REST)

    async def list_releases_page(
        self,
        owner: str,
        repo: str,
        *,
        per_page: int,
        page_url: str | None = None,
    ) -> ReleasesPage:
        if page_url is None:
            response = await self._request(
                "GET", f"/repos/{owner}/{repo}/releases", params={"per_page": per_page}
            )
        else:
            # The next link already carries per_page and the page cursor
            response = await self._request("GET", page_url)

        next_link = response.links.get("next")
        return ReleasesPage(
            items=response.json(),
            next_url=next_link.get("url") if next_link else None,
        )

    async def create_release(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]:
        response = await self._request("POST", f"/repos/{owner}/{repo}/releases", json=fields)
        return response.json()

    async def update_release(
        self, owner: str, repo: str, release_id: int, **fields: Any
    ) -> dict[str, Any]:
        response = await self._request(
            "PATCH", f"/repos/{owner}/{repo}/releases/{release_id}", json=fields
        )
        return response.json()

    async def generate_release_notes(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]:
        response = await self._request(
            "POST", f"/repos/{owner}/{repo}/releases/generate-notes", json=fields
        )
        return response.json()

    # GraphQL

    async def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        response = await self._request(
            "POST", self._graphql_url, json={"query": query, "variables": variables}
        )
        payload = response.json()
        if payload.get("errors"):
            raise GraphQLError(payload["errors"])
        return payload.get("data") or {}


def _error_for(response: httpx.Response) -> ForgeRequestError:
    status = response.status_code
    url = str(response.request.url)
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        message = str(body["message"])
    else:
        message = response.text[:500] or response.reason_phrase

    if status == 429 or (status == 403 and response.headers.get("x-ratelimit-remaining") == "0"):
        return RateLimitError(message, status_code=status, url=url)
    if status in (401, 403):
        return ForgeAuthError(message, status_code=status, url=url)
    if status == 404:
        return ForgeNotFoundError(message, status_code=status, url=url)
    return ForgeRequestError(message, status_code=status, url=url)
