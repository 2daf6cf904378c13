"""GitHub source backed by the GitHub REST API.

Useful in CI, where the local history is usually shallow. Requests are
paginated with 100 items per page. Without a token requests are
anonymous and subject to lower rate limits; creating tags always
requires a token.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import httpx

from tag_track.core.references import DEFAULT_PER_PAGE, RawCommit, RawTag, ReferenceIterator
from tag_track.exceptions import (
    AuthenticationRequired,
    GithubRestError,
    MissingGitTags,
    SourceError,
    SourceNotFetched,
)

if TYPE_CHECKING:
    from tag_track.config.models import TagTrackConfig

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "tag-track"
DEFAULT_TIMEOUT = 30.0

# Set by GitHub Actions to the commit that triggered the workflow
GITHUB_SHA_ENV = "GITHUB_SHA"


class GithubSource:
    """Source reading commits and tags from a GitHub repository.

    Args:
        config: Configuration
        repo_id: Repository in the form ``owner/name``
        api_url: REST API base URL (GitHub Enterprise uses its own)
        token: Token used to authorize requests
        client: HTTP client to use; one is created when omitted
        per_page: Items requested per page
    """

    def __init__(
        self,
        config: TagTrackConfig,
        repo_id: str,
        *,
        api_url: str = GITHUB_API_URL,
        token: str | None = None,
        client: httpx.Client | None = None,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self.config = config
        self.repo_id = repo_id
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.per_page = per_page
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=DEFAULT_TIMEOUT)
        self._tags: list[RawTag] | None = None

    def __enter__(self) -> GithubSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        expected_status: int | None = None,
    ) -> Any:
        """Send a request for the repository and return the decoded JSON body.

        Raises:
            GithubRestError: On transport errors, unexpected statuses or bodies
        """
        url = f"{self.api_url}/repos/{self.repo_id}{path}"
        logger.debug("%s %s %s", method, url, params or "")

        try:
            response = self._client.request(
                method, url, params=params, json=json, headers=self._headers()
            )
        except httpx.HTTPError as e:
            raise GithubRestError(f"{method} {url} failed: {e}") from e

        failed = response.is_error or (
            expected_status is not None and response.status_code != expected_status
        )
        if failed:
            raise GithubRestError(response.text, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise GithubRestError(
                f"Invalid JSON in response to {method} {url}",
                status_code=response.status_code,
            ) from e

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def fetch_tags(self) -> list[RawTag]:
        """Read every tag of the repository, following pagination."""
        tags: list[RawTag] = []
        page = 1

        while True:
            items = self._request(
                "GET", "/tags", params={"page": page, "per_page": self.per_page}
            )
            try:
                tags.extend(
                    RawTag(name=item["name"], commit_sha=item["commit"]["sha"]) for item in items
                )
            except (KeyError, TypeError) as e:
                raise GithubRestError(f"Unexpected tags response: {e!r}") from e

            if len(items) < self.per_page:
                break
            page += 1

        logger.debug("Found %d tags in %s", len(tags), self.repo_id)
        self._tags = tags
        return tags

    @property
    def tags(self) -> list[RawTag]:
        """Tags read by fetch_tags().

        Raises:
            SourceNotFetched: If fetch_tags() has not been called
        """
        if self._tags is None:
            raise SourceNotFetched("Tags requested before the GitHub source was fetched")
        return self._tags

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def fetch_commits(self, sha: str, page: int, per_page: int) -> list[RawCommit]:
        """Read one page of commits reachable from ``sha``, most recent first."""
        items = self._request(
            "GET",
            "/commits",
            params={"sha": sha, "page": page, "per_page": per_page},
        )
        try:
            return [
                RawCommit(sha=item["sha"], message=item["commit"]["message"]) for item in items
            ]
        except (KeyError, TypeError) as e:
            raise GithubRestError(f"Unexpected commits response: {e!r}") from e

    # ------------------------------------------------------------------
    # Source operations
    # ------------------------------------------------------------------

    def get_reference_iterator(self, sha: str) -> ReferenceIterator:
        if self._tags is None:
            self.fetch_tags()
        if not self.tags:
            raise MissingGitTags(f"No tags found for repository {self.repo_id}")

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
        sha = os.environ.get(GITHUB_SHA_ENV)
        if not sha:
            raise SourceError(
                f"{GITHUB_SHA_ENV} is not set",
                hint="pass the commit explicitly with --commit-sha",
            )
        return sha

    def create_tag(self, name: str, message: str, commit_sha: str) -> None:
        """Create an annotated tag object and the ref pointing at it.

        Raises:
            AuthenticationRequired: If no token was provided
            GithubRestError: If the API rejects either request
        """
        if not self.token:
            raise AuthenticationRequired(
                "Creating tags on GitHub requires a token",
                hint="pass one with --github-token",
            )

        tag_object = self._request(
            "POST",
            "/git/tags",
            json={"tag": name, "message": message, "object": commit_sha, "type": "commit"},
            expected_status=201,
        )
        # The ref must point at the tag object for the tag to be annotated
        target = tag_object.get("sha", commit_sha) if isinstance(tag_object, dict) else commit_sha

        self._request(
            "POST",
            "/git/refs",
            json={"ref": f"refs/tags/{name}", "sha": target},
            expected_status=201,
        )
