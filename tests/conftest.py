"""Shared fixtures for tag-track tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from tag_track.config.models import TagTrackConfig
from tag_track.core.references import RawCommit, RawTag, ReferenceIterator
from tag_track.exceptions import MissingGitTags

SCOPED_TAG_PATTERN = r"^(?<scope>[a-z]+)/v(?<version>.+)$"


def history(*entries: tuple[str, str]) -> list[RawCommit]:
    """Build a commit history, most recent first, from (sha, message) pairs."""
    return [RawCommit(sha=sha, message=message) for sha, message in entries]


class InMemorySource:
    """Source serving a fixed history, recording page requests and created tags."""

    def __init__(
        self,
        config: TagTrackConfig,
        commits: Sequence[RawCommit],
        tags: Sequence[RawTag],
        *,
        per_page: int = 100,
    ) -> None:
        self.config = config
        self.commits = list(commits)
        self.raw_tags = list(tags)
        self.per_page = per_page
        self.pages_requested: list[int] = []
        self.created_tags: list[tuple[str, str, str]] = []

    def fetch_commits(self, sha: str, page: int, per_page: int) -> list[RawCommit]:
        self.pages_requested.append(page)
        start = [c.sha for c in self.commits].index(sha) + (page - 1) * per_page
        return self.commits[start : start + per_page]

    def get_reference_iterator(self, sha: str) -> ReferenceIterator:
        if not self.raw_tags:
            raise MissingGitTags("No tags found")
        return ReferenceIterator(
            sha,
            self.raw_tags,
            self.fetch_commits,
            tag_pattern=self.config.tag_pattern,
            commit_pattern=self.config.commit_pattern,
            version_scopes=self.config.version_scopes,
            per_page=self.per_page,
        )

    def get_latest_commit_sha(self) -> str:
        return self.commits[0].sha

    def create_tag(self, name: str, message: str, commit_sha: str) -> None:
        self.created_tags.append((name, message, commit_sha))


@pytest.fixture
def config() -> TagTrackConfig:
    """Default configuration."""
    return TagTrackConfig()


@pytest.fixture
def scoped_config() -> TagTrackConfig:
    """Configuration tracking the scopes 'api' and 'web'."""
    return TagTrackConfig(
        tag_pattern=SCOPED_TAG_PATTERN,
        version_scopes=["api", "web"],
        tag_format="{scope}/v{version}",
    )


@pytest.fixture
def released_history() -> list[RawCommit]:
    """A fix and a feature on top of the commit tagged v1.2.3."""
    return history(
        ("c4", "feat: add export"),
        ("c3", "fix: handle empty input"),
        ("c2", "chore: release 1.2.3"),
        ("c1", "feat!: old breaking change"),
    )


@pytest.fixture
def released_source(config: TagTrackConfig, released_history: list[RawCommit]) -> InMemorySource:
    return InMemorySource(config, released_history, [RawTag("v1.2.3", "c2")])
