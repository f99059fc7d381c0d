"""GitHub REST API client.

API docs: https://docs.github.com/en/rest
Rate limit: 60 requests/hour unauthenticated, 5,000 requests/hour with a token.

Requests per analysis: 1 profile + 1 repo list + 1 events, then for each of
the first DETAIL_REPO_LIMIT repos one root listing plus one README fetch when
a README is listed. Worst case 3 + 2 * 6 = 15.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import time
from typing import Any, Optional, Sequence

import httpx
from pydantic import ValidationError

from ..errors import ProfileNotFoundError, RateLimitedError, ReadinessError, UpstreamError
from ..models import (
    DETAIL_REPO_LIMIT,
    ActivityEvent,
    GitHubProfile,
    ProfileBundle,
    ReadmeInfo,
    RepoDetail,
    RepoSummary,
)

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"
USER_AGENT = "github-readiness-mcp"

PAGE_SIZE = 100
README_NAMES = {"readme.md", "readme"}

_RATE_LIMIT_MARKERS = ("rate limit", "quota exhausted")


def _retry_after(response: httpx.Response) -> Optional[int]:
    """Seconds until the quota resets, from Retry-After or X-RateLimit-Reset."""
    retry_after = response.headers.get("retry-after")
    if retry_after and retry_after.isdigit():
        return int(retry_after)

    reset = response.headers.get("x-ratelimit-reset")
    if reset and reset.isdigit():
        return max(0, int(reset) - int(time.time()))
    return None


def classify_response(response: httpx.Response, username: str) -> ReadinessError:
    """Map a failed GitHub response to one of the three user-facing errors."""
    status = response.status_code
    message = response.text.lower()

    if status in (403, 429) or any(marker in message for marker in _RATE_LIMIT_MARKERS):
        return RateLimitedError(_retry_after(response))
    if status == 404:
        return ProfileNotFoundError(username)
    return UpstreamError(f"GitHub returned {status} for {response.request.url}")


def aggregate_languages(repos: Sequence[RepoSummary]) -> dict[str, int]:
    """Count repositories per primary language, keyed by first appearance."""
    languages: dict[str, int] = {}
    for repo in repos:
        if repo.language:
            languages[repo.language] = languages.get(repo.language, 0) + 1
    return languages


class GitHubClient:
    """Fetches and enriches everything the scoring engine needs for one user.

    Holds one pooled ``httpx.AsyncClient``. Build it once per process, share it
    across requests and close it on shutdown.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = API_BASE,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": API_VERSION,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.authenticated = bool(token)
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(self, path: str, username: str, params: Optional[dict] = None) -> Any:
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"GitHub request failed for {path}: {exc}") from exc

        if not response.is_success:
            raise classify_response(response, username)

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"GitHub returned invalid JSON for {path}") from exc

    # ─── Required data ────────────────────────────────────────────────────

    async def fetch_profile(self, username: str) -> GitHubProfile:
        data = await self._get_json(f"/users/{username}", username)
        try:
            return GitHubProfile.model_validate(data)
        except ValidationError as exc:
            raise UpstreamError(f"Unexpected profile payload for {username}") from exc

    async def fetch_repos(self, username: str) -> list[RepoSummary]:
        """Public repositories, most recently updated first (first page only)."""
        data = await self._get_json(
            f"/users/{username}/repos",
            username,
            params={"per_page": PAGE_SIZE, "sort": "updated"},
        )
        try:
            return [RepoSummary.model_validate(item) for item in data]
        except (TypeError, ValidationError) as exc:
            raise UpstreamError(f"Unexpected repository payload for {username}") from exc

    # ─── Best-effort data ─────────────────────────────────────────────────

    async def fetch_events(self, username: str) -> list[ActivityEvent]:
        """Recent public events. Failures yield an empty list."""
        try:
            data = await self._get_json(
                f"/users/{username}/events/public",
                username,
                params={"per_page": PAGE_SIZE},
            )
            return [ActivityEvent.model_validate(item) for item in data]
        except (ReadinessError, TypeError, ValidationError) as exc:
            logger.warning("Failed to fetch events for %s: %s", username, exc)
            return []

    async def _check_root_files(self, owner: str, repo: str) -> tuple[bool, bool]:
        """Return (has_gitignore, has_readme) from one root directory listing."""
        try:
            data = await self._get_json(f"/repos/{owner}/{repo}/contents/", owner)
            names = {str(entry.get("name", "")).lower() for entry in data}
        except (ReadinessError, TypeError, AttributeError) as exc:
            logger.warning("Failed to list root files of %s/%s: %s", owner, repo, exc)
            return False, False
        return ".gitignore" in names, bool(names & README_NAMES)

    async def _fetch_readme(self, owner: str, repo: str) -> ReadmeInfo:
        try:
            data = await self._get_json(f"/repos/{owner}/{repo}/readme", owner)
            content = base64.b64decode(data.get("content", "")).decode("utf-8", errors="replace")
        except (ReadinessError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Failed to fetch README of %s/%s: %s", owner, repo, exc)
            return ReadmeInfo()
        return ReadmeInfo(exists=True, length=len(content))

    async def enrich_repo(self, owner: str, repo: RepoSummary) -> RepoDetail:
        """Add README and .gitignore checks to a repository summary.

        The README body is only fetched when the root listing shows one.
        """
        has_gitignore, has_readme = await self._check_root_files(owner, repo.name)
        readme = await self._fetch_readme(owner, repo.name) if has_readme else ReadmeInfo()
        return RepoDetail(
            **repo.model_dump(),
            readme=readme,
            has_gitignore=has_gitignore,
        )

    # ─── Bundle ───────────────────────────────────────────────────────────

    async def fetch_profile_bundle(self, username: str) -> ProfileBundle:
        """Fetch everything needed to score ``username``.

        Raises:
            ProfileNotFoundError: the user does not exist.
            RateLimitedError: the API quota is exhausted.
            UpstreamError: any other failure fetching the profile or repos.
        """
        profile, repos, events = await asyncio.gather(
            self.fetch_profile(username),
            self.fetch_repos(username),
            self.fetch_events(username),
        )

        top_repos = repos[:DETAIL_REPO_LIMIT]
        repo_details = await asyncio.gather(*(self.enrich_repo(profile.login, r) for r in top_repos))

        logger.info(
            "Fetched %s: %d repos, %d enriched, %d events",
            profile.login,
            len(repos),
            len(repo_details),
            len(events),
        )
        return ProfileBundle(
            profile=profile,
            repos=repos,
            repo_details=list(repo_details),
            events=events,
            languages=aggregate_languages(repos),
        )
