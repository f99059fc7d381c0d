"""Recruiter-readiness scoring engine.

Turns a fetched ProfileBundle into four dimension scores, a weighted total,
activity streaks and evidence. Pure and synchronous: no I/O, no shared state.

Dimension weights:
    Documentation quality  30%
    Consistency            25%
    Project impact         25%
    Best practices         20%
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Sequence, Union

from .evidence import generate_recommendations, generate_red_flags, generate_strengths
from .models import (
    ActivityEvent,
    AnalysisResult,
    DimensionScore,
    Dimensions,
    LanguageCount,
    ProfileBundle,
    RepoDetail,
    RepoSummary,
)

logger = logging.getLogger(__name__)

WEIGHTS = {
    "documentation": 0.30,
    "consistency": 0.25,
    "impact": 0.25,
    "best_practices": 0.20,
}

DETAILED_README_CHARS = 500
CONSISTENCY_WINDOW = timedelta(days=30)
FULL_CONSISTENCY_DAYS = 15
TOP_LANGUAGES_LIMIT = 6


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def _as_utc(moment: datetime) -> datetime:
    # naive instants are read as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _utc_date(moment: datetime) -> date:
    return moment.astimezone(timezone.utc).date()


# ─── Dimension scorers ───────────────────────────────────────────────────────


def score_documentation(repo_details: Sequence[RepoDetail]) -> DimensionScore:
    """Score README coverage over the enriched repositories.

    70% of the score rewards having a README at all, 30% rewards READMEs
    longer than 500 characters.
    """
    if not repo_details:
        return DimensionScore(score=0, details={})

    checked = len(repo_details)
    with_readme = sum(1 for r in repo_details if r.readme.exists)
    with_detailed = sum(1 for r in repo_details if r.readme.length > DETAILED_README_CHARS)

    raw = (with_readme / checked) * 70 + (with_detailed / checked) * 30

    return DimensionScore(
        score=_clamp(_round_half_up(raw)),
        details={
            "reposChecked": checked,
            "withReadme": with_readme,
            "withDetailedReadme": with_detailed,
        },
    )


def score_consistency(events: Sequence[ActivityEvent], now: datetime) -> DimensionScore:
    """Score push activity over the 30 days before ``now``.

    15 or more distinct active days (UTC) earn the full score. A naive
    ``now`` is read as UTC.
    """
    cutoff = _as_utc(now) - CONSISTENCY_WINDOW
    recent_pushes = [e for e in events if e.is_push and e.created_at >= cutoff]
    active_days = len({_utc_date(e.created_at) for e in recent_pushes})

    raw = (active_days / FULL_CONSISTENCY_DAYS) * 100

    return DimensionScore(
        score=_clamp(_round_half_up(raw)),
        details={
            "pushEventsLast30Days": len(recent_pushes),
            "activeDays": active_days,
        },
    )


def score_impact(repos: Sequence[RepoSummary]) -> DimensionScore:
    """Score community reach over every public repository.

    Log2 scaling gives diminishing returns, so a single viral project does not
    dominate. Caps: stars 40, forks 30, repo count 30.
    """
    total_stars = sum(r.stargazers_count for r in repos)
    total_forks = sum(r.forks_count for r in repos)
    repo_count = len(repos)

    star_score = min(40.0, math.log2(total_stars + 1) * 5)
    fork_score = min(30.0, math.log2(total_forks + 1) * 5)
    repo_score = min(30.0, math.log2(repo_count + 1) * 6)

    return DimensionScore(
        score=_clamp(_round_half_up(star_score + fork_score + repo_score)),
        details={
            "totalStars": total_stars,
            "totalForks": total_forks,
            "totalRepos": repo_count,
        },
    )


def score_best_practices(repo_details: Sequence[RepoDetail]) -> DimensionScore:
    """Score .gitignore and description hygiene, weighted 50/50."""
    if not repo_details:
        return DimensionScore(score=0, details={})

    checked = len(repo_details)
    with_gitignore = sum(1 for r in repo_details if r.has_gitignore)
    with_description = sum(1 for r in repo_details if r.has_description)

    raw = (with_gitignore / checked) * 50 + (with_description / checked) * 50

    return DimensionScore(
        score=_clamp(_round_half_up(raw)),
        details={
            "reposChecked": checked,
            "withGitignore": with_gitignore,
            "withDescription": with_description,
        },
    )


# ─── Streaks and languages ───────────────────────────────────────────────────


def push_dates(events: Sequence[ActivityEvent]) -> list[date]:
    """Distinct UTC dates with at least one push, ascending."""
    return sorted({_utc_date(e.created_at) for e in events if e.is_push})


def longest_streak(dates: Sequence[date]) -> int:
    """Length of the longest run of consecutive days in sorted distinct dates."""
    if not dates:
        return 0

    longest = 1
    current = 1
    for prev, curr in zip(dates, dates[1:]):
        if curr - prev == timedelta(days=1):
            current += 1
        else:
            current = 1
        longest = max(longest, current)
    return longest


def top_languages(languages: Mapping[str, int], limit: int = TOP_LANGUAGES_LIMIT) -> list[LanguageCount]:
    """Most used languages by repo count.

    Ties keep the histogram's insertion order (sorted() is stable).
    """
    ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)
    return [LanguageCount(name=name, count=count) for name, count in ranked[:limit]]


def compute_total(dimensions: Dimensions) -> int:
    """Weighted composite of the four dimension scores."""
    weighted = (
        dimensions.documentation.score * WEIGHTS["documentation"]
        + dimensions.consistency.score * WEIGHTS["consistency"]
        + dimensions.impact.score * WEIGHTS["impact"]
        + dimensions.best_practices.score * WEIGHTS["best_practices"]
    )
    return _clamp(_round_half_up(weighted))


# ─── Orchestration ───────────────────────────────────────────────────────────


def calculate_score(
    bundle: Union[ProfileBundle, Mapping[str, Any]],
    now: Optional[datetime] = None,
) -> AnalysisResult:
    """Compute the full readiness analysis for one profile bundle.

    Args:
        bundle: A ProfileBundle, or a plain mapping with the same shape.
        now: Evaluation instant for the 30-day activity window. Defaults to
            the current UTC time, captured once per call.

    Raises:
        InvalidBundleError: if a mapping does not have the bundle's shape.
    """
    if not isinstance(bundle, ProfileBundle):
        bundle = ProfileBundle.from_raw(bundle)
    now = datetime.now(timezone.utc) if now is None else _as_utc(now)

    dimensions = Dimensions(
        documentation=score_documentation(bundle.repo_details),
        consistency=score_consistency(bundle.events, now),
        impact=score_impact(bundle.repos),
        best_practices=score_best_practices(bundle.repo_details),
    )
    total = compute_total(dimensions)

    result = AnalysisResult(
        total_score=total,
        dimensions=dimensions,
        top_languages=top_languages(bundle.languages),
        longest_streak=longest_streak(push_dates(bundle.events)),
        total_repos=len(bundle.repos),
        strengths=generate_strengths(dimensions, bundle),
        red_flags=generate_red_flags(dimensions, bundle),
        recommendations=generate_recommendations(dimensions, bundle),
    )

    logger.debug(
        "Scored %s: total=%d documentation=%d consistency=%d impact=%d best_practices=%d",
        bundle.profile.login,
        total,
        dimensions.documentation.score,
        dimensions.consistency.score,
        dimensions.impact.score,
        dimensions.best_practices.score,
    )
    return result
