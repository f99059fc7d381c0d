"""Pydantic data models — the shared business objects.

Input models accept raw GitHub REST payloads as-is. Output models serialize
with camelCase keys, which is the JSON contract consumed by the dashboard.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import InvalidBundleError

PUSH_EVENT = "PushEvent"
DETAIL_REPO_LIMIT = 6


# ─── Input: raw GitHub data ──────────────────────────────────────────────────


class GitHubProfile(BaseModel):
    """Public profile of a GitHub user."""

    model_config = ConfigDict(frozen=True)

    login: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    created_at: Optional[datetime] = None
    html_url: Optional[str] = None


class RepoSummary(BaseModel):
    """A repository as returned by the user repo listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    stargazers_count: int = Field(default=0, ge=0)
    forks_count: int = Field(default=0, ge=0)
    language: Optional[str] = None
    html_url: Optional[str] = None
    fork: bool = False

    @property
    def has_description(self) -> bool:
        return bool(self.description and self.description.strip())


class ReadmeInfo(BaseModel):
    """README presence and decoded length in characters."""

    model_config = ConfigDict(frozen=True)

    exists: bool = False
    length: int = Field(default=0, ge=0)


class RepoDetail(RepoSummary):
    """A repository enriched with README and .gitignore checks."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    readme: ReadmeInfo
    has_gitignore: bool


class ActivityEvent(BaseModel):
    """A public activity event. Only the type tag and timestamp matter here."""

    model_config = ConfigDict(frozen=True)

    type: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_push(self) -> bool:
        return self.type == PUSH_EVENT


class ProfileBundle(BaseModel):
    """Everything fetched for one user, ready to be scored.

    ``repo_details`` covers the first few entries of ``repos`` (most recently
    updated first). ``languages`` counts primary languages over the full
    ``repos`` list, keyed in order of first appearance.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    profile: GitHubProfile
    repos: list[RepoSummary]
    repo_details: list[RepoDetail]
    events: list[ActivityEvent]
    languages: dict[str, int]

    @classmethod
    def from_raw(cls, data: Mapping[str, Any]) -> ProfileBundle:
        """Validate a plain mapping into a bundle.

        Every array is required and unknown keys are rejected, so a bundle
        keyed in camelCase (``repoDetails``, ``hasGitignore``) fails instead
        of scoring as empty. Raises InvalidBundleError when the shape is
        wrong or when ``repo_details`` does not cover the first
        DETAIL_REPO_LIMIT entries of ``repos``.
        """
        try:
            bundle = cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidBundleError(f"Malformed profile bundle: {exc.error_count()} error(s)\n{exc}") from exc

        expected = min(DETAIL_REPO_LIMIT, len(bundle.repos))
        if len(bundle.repo_details) != expected:
            raise InvalidBundleError(
                f"Malformed profile bundle: expected {expected} repo_details for "
                f"{len(bundle.repos)} repos, got {len(bundle.repo_details)}"
            )
        return bundle


# ─── Output: analysis ────────────────────────────────────────────────────────


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Impact(str, Enum):
    """How much a recommendation is expected to move the score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DimensionScore(_CamelModel):
    """Score for one dimension with the counters it was derived from."""

    score: int = Field(ge=0, le=100, description="Dimension score from 0 to 100")
    details: dict[str, int] = Field(default_factory=dict, description="Dimension-specific counters")


class Dimensions(_CamelModel):
    """The four weighted scoring dimensions."""

    documentation: DimensionScore
    consistency: DimensionScore
    impact: DimensionScore
    best_practices: DimensionScore


class LanguageCount(_CamelModel):
    name: str
    count: int


class Recommendation(_CamelModel):
    """An actionable suggestion tagged with its expected impact."""

    title: str
    description: str
    impact: Impact


class AnalysisResult(_CamelModel):
    """Recruiter-readiness analysis for one profile."""

    total_score: int = Field(ge=0, le=100, description="Weighted composite score")
    dimensions: Dimensions
    top_languages: list[LanguageCount] = Field(default_factory=list, max_length=6)
    longest_streak: int = Field(ge=0, description="Longest run of consecutive days with a push")
    total_repos: int = Field(ge=0)
    strengths: list[str] = Field(min_length=1)
    red_flags: list[str] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list, max_length=3)


class AnalysisResponse(_CamelModel):
    """Payload returned to clients: the user card plus the analysis."""

    user: GitHubProfile
    analysis: AnalysisResult
