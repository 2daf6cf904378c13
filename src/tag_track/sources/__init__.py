"""Sources of commit history and tags."""

from __future__ import annotations

from tag_track.sources.base import Source
from tag_track.sources.git import GitSource
from tag_track.sources.github import GITHUB_API_URL, GithubSource

__all__ = [
    "GITHUB_API_URL",
    "GitSource",
    "GithubSource",
    "Source",
]
