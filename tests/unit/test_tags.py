"""Tests for the tag and commit history listings."""

from __future__ import annotations

import pytest

from draft_release.data.commits import fetch_commits
from draft_release.data.tags import fetch_tags
from draft_release.exceptions import BranchNotFoundError


class TestTags:
    """Tests for fetch_tags()."""

    async def test_first_semver_tag(self, forge, make_context):
        """Non-version tags are skipped."""
        forge.add_tag("nightly", "aaa111")
        forge.add_tag("v2.0.0-rc.1", "bbb222")
        forge.add_tag("v1.4.2", "ccc333", annotated=True)
        forge.add_tag("v1.4.1", "ddd444")

        tag = await fetch_tags(make_context()).find_first_semver_tag()

        assert tag is not None
        assert tag.name == "v1.4.2"
        assert tag.commit_oid == "ccc333"

    async def test_lightweight_tag_oid(self, forge, make_context):
        """Lightweight tags point straight at the commit."""
        forge.add_tag("v1.0.0", "abc123")

        tag = await fetch_tags(make_context()).find_first_semver_tag()

        assert tag is not None
        assert tag.commit_oid == "abc123"

    async def test_no_semver_tag(self, forge, make_context):
        """No matching tag gives None."""
        forge.add_tag("latest", "aaa111")

        assert await fetch_tags(make_context()).find_first_semver_tag() is None

    async def test_search_is_bounded(self, forge, make_context):
        """The search gives up after max_pages pages."""
        for i in range(7):
            forge.add_tag(f"build-{i}", f"oid{i}")
        forge.add_tag("v1.0.0", "abc123")

        tags = fetch_tags(make_context(), per_page=2, max_pages=3)

        assert await tags.find_first_semver_tag() is None
        assert len(forge.graphql_calls) == 3

    async def test_failed_page_is_retried(self, forge, make_context):
        """A tag on a page that failed to load is found on the next search."""
        forge.add_tag("build-1", "oid1")
        forge.add_tag("v1.2.0", "abc123")
        forge.fail_once("graphql", 2)

        tags = fetch_tags(make_context(), per_page=1)
        with pytest.raises(ConnectionError):
            await tags.find_first_semver_tag()

        tag = await tags.find_first_semver_tag()

        assert tag is not None
        assert tag.name == "v1.2.0"
        assert len(forge.graphql_calls) == 3


class TestCommits:
    """Tests for fetch_commits()."""

    async def test_history(self, forge, make_context):
        """Commits are listed newest first across pages."""
        forge.add_commit("main", "c3" * 20, "feat: three", "2024-06-03T00:00:00Z")
        forge.add_commit("main", "c2" * 20, "fix: two", "2024-06-02T00:00:00Z")
        forge.add_commit("main", "c1" * 20, "chore: one", "2024-06-01T00:00:00Z")

        commits = fetch_commits(make_context(), per_page=2)
        result = await commits.collect()

        assert [c.message for c in result] == ["feat: three", "fix: two", "chore: one"]
        assert result[0].short_oid == "c3c3c3c3"
        assert result[0].committed_date.year == 2024
        assert commits.is_exhausted
        assert len(forge.graphql_calls) == 2

    async def test_partial_history(self, forge, make_context):
        """Collecting with a limit leaves the rest unfetched."""
        for i in range(5):
            forge.add_commit("main", f"{i:040d}", f"fix: {i}", "2024-06-01T00:00:00Z")

        commits = fetch_commits(make_context(), per_page=2)
        await commits.collect(limit=1)

        assert commits.cached_count == 1
        assert not commits.is_exhausted
        assert [c.message for c in commits.cached_values] == ["fix: 0"]

    async def test_missing_branch(self, forge, make_context):
        """A branch that does not exist raises BranchNotFoundError."""
        forge.add_commit("main", "a" * 40, "init", "2024-06-01T00:00:00Z")

        with pytest.raises(BranchNotFoundError, match="Branch 'gone' not found in repository octo/widgets"):
            await fetch_commits(make_context("gone")).collect()

    async def test_failed_page_is_retried(self, forge, make_context):
        """History stays complete when a page request fails once."""
        for i in range(3):
            forge.add_commit("main", f"{i:040d}", f"fix: {i}", "2024-06-01T00:00:00Z")
        forge.fail_once("graphql", 1)

        commits = fetch_commits(make_context(), per_page=2)
        with pytest.raises(ConnectionError):
            await commits.collect()
        assert not commits.is_exhausted

        result = await commits.collect()

        assert [c.message for c in result] == ["fix: 0", "fix: 1", "fix: 2"]
        assert [call["cursor"] for call in forge.graphql_calls] == [None, None, "2"]
