"""Source capability shared by every backing store.

A source supplies commits and tags. The git source reads the local
history through the ``git`` executable and suits local development;
the GitHub source uses the REST API and suits CI, where history is
often shallow or missing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tag_track.core.references import ReferenceIterator


@runtime_checkable
class Source(Protocol):
    """Operations the version calculation needs from a backing store."""

    def get_reference_iterator(self, sha: str) -> ReferenceIterator:
        """Return an iterator over the references relevant for a bump from ``sha``.

        Raises:
            MissingGitTags: If the repository has no tags at all
        """
        ...

    def get_latest_commit_sha(self) -> str:
        """Return the commit a bump is calculated for when none is given."""
        ...

    def create_tag(self, name: str, message: str, commit_sha: str) -> None:
        """Create an annotated tag pointing at ``commit_sha``."""
        ...
