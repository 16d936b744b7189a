"""Configuration loading from the GitHub Actions environment.

Action inputs arrive as ``INPUT_<NAME>`` environment variables (the name
upper-cased, dashes kept), alongside the standard ``GITHUB_*`` variables:

- GITHUB_TOKEN: API token
- GITHUB_REPOSITORY: Repository in "owner/repo" format
- GITHUB_REF / GITHUB_REF_NAME: Branch that triggered the run
- GITHUB_RUN_NUMBER / GITHUB_RUN_ATTEMPT: Build metadata for versions
- GITHUB_API_URL / GITHUB_GRAPHQL_URL: API endpoints (GitHub Enterprise)

Everything is read once here; the rest of the package only sees the
resulting config and Context objects.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from draft_release.config.models import DraftReleaseConfig, GitHubConfig, split_list
from draft_release.context import Context
from draft_release.exceptions import ConfigError, ConfigValidationError
from draft_release.forge.client import ForgeClient


def get_input(environ: Mapping[str, str], name: str) -> str | None:
    """Read an action input, returning None when it is unset or blank."""
    key = f"INPUT_{name.upper()}"
    value = environ.get(key, environ.get(key.replace("-", "_"), ""))
    return value.strip() or None


def load_config(environ: Mapping[str, str] | None = None) -> DraftReleaseConfig:
    """Build the configuration from action inputs and environment variables.

    Raises:
        ConfigValidationError: If a value is invalid
    """
    env = os.environ if environ is None else environ

    github: dict[str, Any] = {
        "token": env.get("GITHUB_TOKEN") or None,
        "repository": env.get("GITHUB_REPOSITORY") or None,
    }
    if env.get("GITHUB_API_URL"):
        github["api_url"] = env["GITHUB_API_URL"]
    if env.get("GITHUB_GRAPHQL_URL"):
        github["graphql_url"] = env["GITHUB_GRAPHQL_URL"]

    values: dict[str, Any] = {"github": github}
    if default_tag := get_input(env, "default-tag"):
        values["default_tag"] = default_tag
    if release_branches := get_input(env, "release-branches"):
        values["release_branches"] = split_list(release_branches)
    if target_branch := get_input(env, "target-branch"):
        values["target_branch"] = target_branch

    try:
        return DraftReleaseConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}") from e


def require_token(config: GitHubConfig) -> str:
    if config.token is None:
        raise ConfigError("GITHUB_TOKEN environment variable is not set")
    return config.token.get_secret_value()


def split_repository(repository: str | None) -> tuple[str, str]:
    """Split ``owner/repo`` into its parts.

    Raises:
        ConfigError: If the repository is missing or malformed
    """
    if not repository:
        raise ConfigError("GITHUB_REPOSITORY environment variable is not set")
    owner, _, repo = repository.partition("/")
    if not owner or not repo or "/" in repo:
        raise ConfigError(
            f"Invalid GITHUB_REPOSITORY format: {repository}. Expected format: owner/repo"
        )
    return owner, repo


def resolve_branch(environ: Mapping[str, str], target_branch: str | None = None) -> str:
    """Determine the branch to act on.

    An explicit target branch wins; otherwise the branch is taken from
    GITHUB_REF (``refs/heads/<branch>``) and then GITHUB_REF_NAME.

    Raises:
        ConfigError: If no branch can be determined
    """
    if target_branch:
        return target_branch

    ref = environ.get("GITHUB_REF")
    if not ref:
        raise ConfigError("GITHUB_REF environment variable is not set")
    if ref.startswith("refs/heads/"):
        return ref.removeprefix("refs/heads/")

    # Tags and other refs: fall back to the short name
    ref_name = environ.get("GITHUB_REF_NAME")
    if ref_name:
        return ref_name

    raise ConfigError(f"Unable to determine branch from GITHUB_REF: {ref}")


def create_context(
    config: DraftReleaseConfig,
    forge: ForgeClient,
    environ: Mapping[str, str] | None = None,
) -> Context:
    """Build the invocation Context.

    When no release branches are configured, the current branch is the
    only release branch.
    """
    env = os.environ if environ is None else environ
    owner, repo = split_repository(config.github.repository)
    branch = resolve_branch(env, config.target_branch)

    return Context(
        forge=forge,
        owner=owner,
        repo=repo,
        branch=branch,
        release_branches=config.release_branches or (branch,),
        run_number=env.get("GITHUB_RUN_NUMBER") or None,
        run_attempt=env.get("GITHUB_RUN_ATTEMPT") or None,
    )
