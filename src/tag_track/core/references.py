"""Correlation of commit history with version tags.

The ReferenceIterator walks commits lazily from a starting commit, most
recent first, pulling pages of commits from a source only when its
buffer runs out. Each commit is matched against the tags pointing at
it, and every tag found resolves its version scope. Iteration stops
once every tracked scope is resolved, or when history runs out.

Only references that matter for a version calculation are produced:

- commits that don't match the commit pattern (so they can be reported)
- commits whose scope is still unresolved, with any tags found on them
- tag-only references for tags on commits that are otherwise irrelevant
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import NamedTuple, Protocol

from tag_track.core.parsing import (
    CommitDetails,
    TagDetails,
    compile_pattern,
    parse_commit_details,
    parse_tag_details,
)
from tag_track.core.version import Version

logger = logging.getLogger(__name__)

# Key of the single implicit scope used for unscoped versioning
UNSCOPED = ""

DEFAULT_PER_PAGE = 100


class RawCommit(NamedTuple):
    """A commit as supplied by a source."""

    sha: str
    message: str


class RawTag(NamedTuple):
    """A tag as supplied by a source."""

    name: str
    commit_sha: str


class CommitPager(Protocol):
    """Fetches one page of commits, most recent first, starting at ``sha``.

    Pages are numbered from 1. An empty page means history is exhausted.
    """

    def __call__(self, sha: str, page: int, per_page: int) -> Sequence[RawCommit]: ...


@dataclass(frozen=True, slots=True)
class Commit:
    """A commit and, when its message matches the commit pattern, its details."""

    sha: str
    message: str
    details: CommitDetails | None = None

    @classmethod
    def from_message(cls, sha: str, message: str, pattern: str | re.Pattern[str]) -> Commit:
        return cls(sha=sha, message=message, details=parse_commit_details(message, pattern))

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()


@dataclass(frozen=True, slots=True)
class Tag:
    """A tag and, when its name matches the tag pattern, its details."""

    name: str
    commit_sha: str
    details: TagDetails | None = None

    @classmethod
    def from_name(cls, name: str, commit_sha: str, pattern: str | re.Pattern[str]) -> Tag:
        return cls(name=name, commit_sha=commit_sha, details=parse_tag_details(name, pattern))


@dataclass(frozen=True, slots=True)
class Reference:
    """One step of history worth reporting: an optional commit and its tags."""

    commit: Commit | None
    tags: tuple[Tag, ...] = ()


def scope_key(scope: str | None, *, scoped: bool) -> str:
    """Map a commit or tag scope to the version scope it belongs to.

    Without scoped versioning everything belongs to the implicit scope.
    """
    if not scoped:
        return UNSCOPED
    return scope or UNSCOPED


class ReferenceIterator(Iterator[Reference]):
    """Single-pass iterator over the references relevant to a version bump.

    Args:
        sha: Commit to start walking history from
        tags: Every tag known to the source
        fetch_page: Callable supplying pages of commits
        tag_pattern: Pattern used to parse tag names
        commit_pattern: Pattern used to parse commit messages
        version_scopes: Scopes that must each be resolved by a tag; empty
            means unscoped versioning
        per_page: Number of commits requested per page

    Raises:
        InvalidRegexPattern: If either pattern does not compile
    """

    def __init__(
        self,
        sha: str,
        tags: Iterable[RawTag],
        fetch_page: CommitPager,
        *,
        tag_pattern: str | re.Pattern[str],
        commit_pattern: str | re.Pattern[str],
        version_scopes: Iterable[str] = (),
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self._sha = sha
        self._fetch_page = fetch_page
        self._per_page = per_page
        self._tag_pattern = compile_pattern(tag_pattern)
        self._commit_pattern = compile_pattern(commit_pattern)

        self._tags_by_sha: dict[str, list[RawTag]] = {}
        for tag in tags:
            self._tags_by_sha.setdefault(tag.commit_sha, []).append(tag)

        scopes = list(version_scopes)
        self._scoped = bool(scopes)
        self._unresolved: set[str] = set(scopes) if scopes else {UNSCOPED}

        self._buffer: Sequence[RawCommit] = ()
        self._position = 0
        self._page = 1
        self._history_exhausted = False
        self._finished = False

    @property
    def finished(self) -> bool:
        """True once every tracked scope has been resolved by a tag."""
        return self._finished and not self._unresolved

    @property
    def unresolved_scopes(self) -> frozenset[str]:
        return frozenset(self._unresolved)

    @property
    def scoped(self) -> bool:
        return self._scoped

    def __iter__(self) -> ReferenceIterator:
        return self

    def __next__(self) -> Reference:
        # Loops only past commits of resolved scopes that carry no tags
        while not self._finished:
            raw = self._next_raw_commit()
            if raw is None:
                self._finished = True
                if self._unresolved:
                    logger.debug(
                        "History exhausted with unresolved scopes: %s",
                        sorted(self._unresolved),
                    )
                break

            commit = Commit.from_message(raw.sha, raw.message, self._commit_pattern)
            found = self._find_tags(commit.sha)
            tags = tuple(found.values())

            for scope, tag in found.items():
                self._unresolved.discard(scope)
                logger.debug("Scope %r resolved by tag %s", scope, tag.name)

            if tags and not self._unresolved:
                self._finished = True

            if commit.details is None:
                logger.debug("Commit %s does not match the commit pattern", commit.short_sha)
                return Reference(commit=commit, tags=tags)

            if scope_key(commit.details.scope, scoped=self._scoped) in self._unresolved:
                return Reference(commit=commit, tags=tags)

            if not tags:
                logger.debug("Skipping commit %s: scope already resolved", commit.short_sha)
                continue

            return Reference(commit=None, tags=tags)

        raise StopIteration

    def _next_raw_commit(self) -> RawCommit | None:
        if self._position >= len(self._buffer):
            if self._history_exhausted:
                return None
            self._load_page()
            if not self._buffer:
                return None

        raw = self._buffer[self._position]
        self._position += 1
        return raw

    def _load_page(self) -> None:
        logger.debug("Fetching commits page %d from %s", self._page, self._sha)
        try:
            page = self._fetch_page(self._sha, self._page, self._per_page)
        except Exception:
            self._finished = True
            raise

        self._page += 1
        self._buffer = page
        self._position = 0
        # A short page is the last one
        if len(page) < self._per_page:
            self._history_exhausted = True

    def _find_tags(self, sha: str) -> dict[str, Tag]:
        """Return the highest-version tag per unresolved scope pointing at ``sha``.

        Tags that don't match the tag pattern or whose scope is resolved
        or untracked are ignored. On equal versions the first tag seen
        is kept.
        """
        found: dict[str, Tag] = {}
        versions: dict[str, Version] = {}

        for raw in self._tags_by_sha.get(sha, ()):
            details = parse_tag_details(raw.name, self._tag_pattern)
            if details is None:
                logger.debug("Ignoring tag %s: does not match the tag pattern", raw.name)
                continue

            scope = scope_key(details.scope, scoped=self._scoped)
            if scope not in self._unresolved:
                logger.debug("Ignoring tag %s: scope %r is resolved or untracked", raw.name, scope)
                continue

            if scope not in versions or details.version > versions[scope]:
                found[scope] = Tag(name=raw.name, commit_sha=raw.commit_sha, details=details)
                versions[scope] = details.version

        return found
