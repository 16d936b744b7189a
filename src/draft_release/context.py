"""Invocation context passed to every fetcher and to the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass

from draft_release.forge.client import ForgeClient


@dataclass(frozen=True, slots=True)
class Context:
    """Everything one run needs to know about the repository and branch.

    Attributes:
        forge: Client for the GitHub API
        owner: Repository owner
        repo: Repository name
        branch: Branch the run is for
        release_branches: Branches that receive draft releases
        run_number: Workflow run number, used as build metadata
        run_attempt: Workflow run attempt, used as build metadata
    """

    forge: ForgeClient
    owner: str
    repo: str
    branch: str
    release_branches: tuple[str, ...]
    run_number: str | None = None
    run_attempt: str | None = None

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def is_release_branch(self) -> bool:
        return self.branch in self.release_branches

    @property
    def build_metadata(self) -> tuple[str, ...]:
        if self.run_number and self.run_attempt:
            return (self.run_number, self.run_attempt)
        return ()
