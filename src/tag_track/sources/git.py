"""Git source backed by the local repository history.

Uses the ``git`` executable, which must be installed and on PATH.
Commits are read in pages with ``git log --skip/--max-count`` so that
only the part of history needed to resolve every scope is read.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from tag_track.core.references import DEFAULT_PER_PAGE, RawCommit, RawTag, ReferenceIterator
from tag_track.exceptions import (
    GenericCommandFailed,
    MissingGit,
    MissingGitTags,
    NotGitWorkingTree,
    SourceNotFetched,
)

if TYPE_CHECKING:
    from tag_track.config.models import TagTrackConfig

logger = logging.getLogger(__name__)

# NUL separates fields, RS separates records
_FIELD_SEP = "\x00"
_RECORD_SEP = "\x1e"

_TAG_FORMAT = "%(refname:strip=2)%00%(objectname)%00%(*objectname)"
_LOG_FORMAT = "%H%x00%B%x1e"


class GitSource:
    """Source reading commits and tags from a local git repository."""

    def __init__(
        self,
        config: TagTrackConfig,
        path: Path | None = None,
        *,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self.config = config
        self.path = path or Path.cwd()
        self.per_page = per_page
        self._tags: list[RawTag] | None = None

    def _run(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            MissingGit: If git is not installed
            GenericCommandFailed: If git exits with an error
        """
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=True,
            )
        except FileNotFoundError as e:
            raise MissingGit(
                "git executable not found", hint="install git and add it to PATH"
            ) from e
        except subprocess.CalledProcessError as e:
            raise GenericCommandFailed(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return result.stdout

    def verify(self) -> None:
        """Check that git is available and ``path`` is inside a working tree.

        Raises:
            MissingGit: If git is not installed
            NotGitWorkingTree: If ``path`` is not inside a git working tree
        """
        self._run("--version")
        try:
            self._run("rev-parse", "--is-inside-work-tree")
        except GenericCommandFailed as e:
            raise NotGitWorkingTree(f"{self.path} is not inside a git working tree") from e

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def fetch_tags(self) -> list[RawTag]:
        """Read every tag of the repository, peeling annotated tags to their commit."""
        output = self._run("for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags")

        tags: list[RawTag] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            name, objectname, peeled = (line.split(_FIELD_SEP) + ["", ""])[:3]
            tags.append(RawTag(name=name, commit_sha=peeled or objectname))

        logger.debug("Found %d tags", len(tags))
        self._tags = tags
        return tags

    @property
    def tags(self) -> list[RawTag]:
        """Tags read by fetch_tags().

        Raises:
            SourceNotFetched: If fetch_tags() has not been called
        """
        if self._tags is None:
            raise SourceNotFetched("Tags requested before the git source was fetched")
        return self._tags

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def fetch_commits(self, sha: str, page: int, per_page: int) -> list[RawCommit]:
        """Read one page of commits reachable from ``sha``, most recent first."""
        output = self._run(
            "log",
            f"--format={_LOG_FORMAT}",
            f"--skip={(page - 1) * per_page}",
            f"--max-count={per_page}",
            sha,
            "--",
        )

        commits: list[RawCommit] = []
        for record in output.split(_RECORD_SEP):
            record = record.lstrip("\n")
            if not record:
                continue
            commit_sha, _, message = record.partition(_FIELD_SEP)
            commits.append(RawCommit(sha=commit_sha.strip(), message=message.rstrip("\n")))
        return commits

    # ------------------------------------------------------------------
    # Source operations
    # ------------------------------------------------------------------

    def get_reference_iterator(self, sha: str) -> ReferenceIterator:
        if self._tags is None:
            self.fetch_tags()
        if not self.tags:
            raise MissingGitTags(
                "No tags found in the repository",
                hint="create an initial version tag, for example v0.1.0",
            )

        return ReferenceIterator(
            sha,
            self.tags,
            self.fetch_commits,
            tag_pattern=self.config.tag_pattern,
            commit_pattern=self.config.commit_pattern,
            version_scopes=self.config.version_scopes,
            per_page=self.per_page,
        )

    def get_latest_commit_sha(self) -> str:
        return self._run("rev-parse", "HEAD").strip()

    def create_tag(self, name: str, message: str, commit_sha: str) -> None:
        self._run("tag", "-a", name, "-m", message, commit_sha)
