"""Shared fixtures: model factories and a fixed evaluation instant."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from github_readiness.core.clients.github import aggregate_languages
from github_readiness.core.models import (
    ActivityEvent,
    GitHubProfile,
    ProfileBundle,
    ReadmeInfo,
    RepoDetail,
    RepoSummary,
)

NOW = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Evaluation instant shared by the scoring tests."""
    return NOW


@pytest.fixture
def make_detail() -> Callable[..., RepoDetail]:
    """Build an enriched repository; defaults describe a clean repo."""

    def _make(
        name: str = "project",
        description: Optional[str] = "A small project",
        readme_length: Optional[int] = 600,
        gitignore: bool = True,
        stars: int = 0,
        forks: int = 0,
        language: Optional[str] = "Python",
    ) -> RepoDetail:
        readme = ReadmeInfo() if readme_length is None else ReadmeInfo(exists=True, length=readme_length)
        return RepoDetail(
            name=name,
            description=description,
            stargazers_count=stars,
            forks_count=forks,
            language=language,
            html_url=f"https://github.com/octocat/{name}",
            readme=readme,
            has_gitignore=gitignore,
        )

    return _make


@pytest.fixture
def make_repo() -> Callable[..., RepoSummary]:
    """Build a repository summary."""

    def _make(name: str = "project", stars: int = 0, forks: int = 0, language: Optional[str] = "Python") -> RepoSummary:
        return RepoSummary(name=name, stargazers_count=stars, forks_count=forks, language=language)

    return _make


@pytest.fixture
def push_on_days() -> Callable[..., list[ActivityEvent]]:
    """Push events at 10:00 UTC on each of the given days before NOW."""

    def _make(*days_ago: int) -> list[ActivityEvent]:
        base = NOW.replace(hour=10)
        return [ActivityEvent(type="PushEvent", created_at=base - timedelta(days=d)) for d in days_ago]

    return _make


@pytest.fixture
def make_bundle() -> Callable[..., ProfileBundle]:
    """Build a bundle. Repos default to the details, languages to the repos."""

    def _make(
        details: Optional[list[RepoDetail]] = None,
        repos: Optional[list[RepoSummary]] = None,
        events: Optional[list[ActivityEvent]] = None,
        languages: Optional[dict[str, int]] = None,
    ) -> ProfileBundle:
        details = details or []
        repos = list(details) if repos is None else repos
        return ProfileBundle(
            profile=GitHubProfile(login="octocat", name="The Octocat"),
            repos=repos,
            repo_details=details,
            events=events or [],
            languages=aggregate_languages(repos) if languages is None else languages,
        )

    return _make
