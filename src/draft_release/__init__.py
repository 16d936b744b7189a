"""draft-release: keep a draft GitHub release in sync with merged pull requests."""

from __future__ import annotations

__version__ = "0.1.0"
