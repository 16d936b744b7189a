"""End-to-end tests for perform_action() against the fake forge."""

from __future__ import annotations

from dataclasses import replace

import pytest

from draft_release.core.action import (
    CreatedReleaseResult,
    NoUpdateResult,
    UpdatedReleaseResult,
    VersionInferenceResult,
    perform_action,
)
from draft_release.core.version import BumpType, Version
from draft_release.exceptions import InvalidVersionError
from draft_release.forge.dry_run import DryRunForge


class TestReleaseBranch:
    """Tests for full release management on a release branch."""

    async def test_first_release_created(self, forge, make_context):
        """Without any release, the default tag is the first draft."""
        forge.add_pull_request("feat: add new feature")

        result = await perform_action(make_context(), "v0.1.0")

        assert isinstance(result, CreatedReleaseResult)
        assert result.action == "created"
        assert result.version.core == "0.1.0"
        assert result.version_increment == BumpType.MINOR
        assert result.last_release is None
        assert result.last_version is None
        assert result.pull_request_titles == ("feat: add new feature",)
        assert forge.create_calls[0]["tag_name"] == "v0.1.0"
        assert forge.create_calls[0]["draft"] is True
        assert forge.update_calls == []

    async def test_existing_draft_updated(self, forge, make_context):
        """An existing draft is renamed to the next version with fresh notes."""
        draft = forge.add_release(draft=True, name="v0.5.1")
        forge.add_release("v0.5.0")
        forge.add_pull_request("fix: small fix")
        forge.add_pull_request("feat!: breaking API change")

        result = await perform_action(make_context(), "v0.1.0")

        assert isinstance(result, UpdatedReleaseResult)
        assert result.action == "updated"
        assert result.version_increment == BumpType.MAJOR
        assert result.version.core == "1.0.0"
        assert result.last_version == Version("0.5.0")
        assert result.last_draft is not None
        assert result.last_draft.id == draft["id"]
        assert result.release.body == forge.notes_body

        assert forge.notes_calls[0]["tag_name"] == "v1.0.0"
        assert forge.notes_calls[0]["previous_tag_name"] == "v0.5.0"
        update = forge.update_calls[0]
        assert update["release_id"] == draft["id"]
        assert update["name"] == "v1.0.0"
        assert update["tag_name"] == "v1.0.0"
        assert forge.create_calls == []

    async def test_nothing_merged(self, forge, make_context):
        """No merged pull requests since the last release means no action."""
        forge.add_release(draft=True, name="v1.0.1")
        forge.add_release("v1.0.0", published_at="2024-07-01T00:00:00Z")
        forge.add_pull_request("fix: already released", merged_at="2024-06-01T00:00:00Z")

        result = await perform_action(make_context(), "v0.1.0")

        assert isinstance(result, NoUpdateResult)
        assert result.action == "none"
        assert result.last_release is not None
        assert result.last_release.tag_name == "v1.0.0"
        assert result.last_draft is not None
        assert result.last_version == Version("1.0.0")
        assert not forge.mutated

    async def test_only_merged_since_last_release(self, forge, make_context):
        """Pull requests merged before the last release do not count."""
        forge.add_release("v1.0.0", published_at="2024-06-01T00:00:00Z")
        forge.add_pull_request("fix: new", merged_at="2024-06-10T00:00:00Z")
        forge.add_pull_request("feat!: old breaking", merged_at="2024-05-01T00:00:00Z")

        result = await perform_action(make_context(), "v0.1.0")

        assert isinstance(result, CreatedReleaseResult)
        assert result.version_increment == BumpType.PATCH
        assert result.version.core == "1.0.1"
        assert result.pull_request_titles == ("fix: new",)

    async def test_non_conventional_titles(self, forge, make_context):
        """Pull requests without impact keep the version and still refresh the draft."""
        forge.add_release("v1.0.0")
        forge.add_pull_request("Update README")

        result = await perform_action(make_context(), "v0.1.0")

        assert isinstance(result, CreatedReleaseResult)
        assert result.version_increment == BumpType.NONE
        assert result.version.core == "1.0.0"

    async def test_build_metadata(self, forge, make_context):
        """Run number and attempt become build metadata, not part of the tag."""
        forge.add_pull_request("fix: a")

        result = await perform_action(make_context(run_number="42", run_attempt="1"), "v0.1.0")

        assert isinstance(result, CreatedReleaseResult)
        assert str(result.version) == "0.1.0+42.1"
        assert forge.create_calls[0]["tag_name"] == "v0.1.0"

    async def test_draft_on_other_branch_ignored(self, forge, make_context):
        """A draft targeting another branch is not updated."""
        forge.add_release(draft=True, target="develop")
        forge.add_pull_request("fix: a")

        result = await perform_action(make_context(), "v0.1.0")

        assert isinstance(result, CreatedReleaseResult)
        assert forge.update_calls == []

    async def test_invalid_default_tag(self, forge, make_context):
        """An invalid default tag is reported when it is needed."""
        forge.add_pull_request("fix: a")

        with pytest.raises(InvalidVersionError):
            await perform_action(make_context(), "not-a-version")

    async def test_dry_run_does_not_mutate(self, forge, make_context):
        """Through DryRunForge, the decision is made but nothing is written."""
        forge.add_release("v1.0.0")
        forge.add_pull_request("feat: a")
        dry_run = DryRunForge(forge)

        result = await perform_action(replace(make_context(), forge=dry_run), "v0.1.0")

        assert isinstance(result, CreatedReleaseResult)
        assert result.version.core == "1.1.0"
        assert not forge.mutated
        assert [name for name, _ in dry_run.mutations] == ["create_release"]


class TestFeatureBranch:
    """Tests for version inference on a feature branch."""

    async def test_version_inferred(self, forge, make_context):
        """The feature pull request's own title drives the increment."""
        forge.add_release("v1.0.0")
        forge.add_pull_request("feat: my feature", head="my-feature", state="OPEN")

        result = await perform_action(make_context("my-feature", ("main",)), "v0.1.0")

        assert isinstance(result, VersionInferenceResult)
        assert result.action == "version"
        assert result.version_increment == BumpType.MINOR
        assert result.version.core == "1.1.0"
        assert result.version.prerelease == ("branch", "my-feature")
        assert result.last_version == Version("1.0.0")
        assert result.pull_request_titles == ("feat: my feature",)
        assert not forge.mutated

    async def test_includes_merged_into_target(self, forge, make_context):
        """Pull requests merged into the target since its last release count too."""
        forge.add_release("v1.0.0", target="develop")
        forge.add_pull_request("feat!: drop python 3.10", base="develop", head="other")
        forge.add_pull_request("fix: tweak", head="fix/tweak", base="develop", state="OPEN")

        result = await perform_action(make_context("fix/tweak", ("main",)), "v0.1.0")

        assert isinstance(result, VersionInferenceResult)
        assert result.version_increment == BumpType.MAJOR
        assert str(result.version) == "2.0.0-branch.fix.tweak"
        assert result.pull_request_titles == ("fix: tweak", "feat!: drop python 3.10")

    async def test_no_open_pull_request(self, forge, make_context):
        """Without an open pull request there is no target branch to infer from."""
        forge.add_release("v1.0.0")

        result = await perform_action(make_context("my-feature", ("main",)), "v0.1.0")

        assert isinstance(result, NoUpdateResult)
        assert result.last_release is None
        assert result.last_version is None
        assert forge.list_calls == []

    async def test_no_release_on_target(self, forge, make_context):
        """Without a release on the target, the default tag is used."""
        forge.add_pull_request("feat: first", head="my-feature", state="OPEN")

        result = await perform_action(
            make_context("my-feature", ("main",), run_number="7", run_attempt="2"), "v0.1.0"
        )

        assert isinstance(result, VersionInferenceResult)
        assert str(result.version) == "0.1.0-branch.my-feature+7.2"
