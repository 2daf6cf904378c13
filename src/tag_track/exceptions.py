"""Exception hierarchy for tag-track.

All errors raised by tag-track derive from TagTrackError so the CLI
can report them uniformly. Per-commit and per-tag parse failures are
not raised during iteration; they surface as missing details instead.
"""

from __future__ import annotations


class TagTrackError(Exception):
    """Base class for all tag-track errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(TagTrackError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """An explicitly requested configuration file does not exist."""


class ConfigValidationError(ConfigError):
    """Configuration could not be parsed or failed validation."""


# =============================================================================
# Patterns
# =============================================================================


class PatternError(TagTrackError):
    """Base class for commit and tag pattern errors."""


class InvalidRegexPattern(PatternError):
    """A configured pattern is not a valid regular expression."""


class InvalidCommitPattern(PatternError):
    """A commit message does not conform to the commit pattern."""


class InvalidTagPattern(PatternError):
    """A tag name does not conform to the tag pattern or has no valid version."""


# =============================================================================
# Sources
# =============================================================================


class SourceError(TagTrackError):
    """Base class for errors raised while talking to a source."""


class MissingGitTags(SourceError):
    """The source has no tags at all."""


class SourceNotFetched(SourceError):
    """Derived source state was requested before the source was fetched."""


class AuthenticationRequired(SourceError):
    """A mutating remote call needs credentials that were not provided."""


class MissingGit(SourceError):
    """The git executable is not available."""


class NotGitWorkingTree(SourceError):
    """The current directory is not inside a git working tree."""


class GenericCommandFailed(SourceError):
    """A git command could not be run or exited with an error."""

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}: {self.stderr.strip()}"
        return self.message


class GithubRestError(SourceError):
    """The GitHub REST API returned an error or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"GitHub API error {self.status_code}: {self.message}"
        return f"GitHub API error: {self.message}"


class TagCreationFailed(SourceError):
    """Creating a tag failed; ``created`` lists the tags made before the failure."""

    def __init__(self, message: str, *, created: list[str] | None = None) -> None:
        super().__init__(message)
        self.created = list(created or [])
