"""Rule-based evidence: strengths, red flags and recommendations.

Each generator walks an ordered table of independent rules. A rule looks at
the dimension scores and the bundle and returns one item or None, so rule
order is the output order.
"""

from __future__ import annotations

from typing import Callable, Optional

from .models import Dimensions, Impact, ProfileBundle, Recommendation, RepoDetail

MAX_RECOMMENDATIONS = 3

FALLBACK_STRENGTH = "Keep building! Every new project strengthens your portfolio."

FALLBACK_RECOMMENDATION = Recommendation(
    title="Diversify your tech stack",
    description="Start a small project in a new language or framework to signal adaptability and curiosity to employers.",
    impact=Impact.LOW,
)

StrengthRule = Callable[[Dimensions, ProfileBundle], Optional[str]]
RedFlagRule = Callable[[Dimensions, ProfileBundle], Optional[str]]
RecommendationRule = Callable[[Dimensions, ProfileBundle], Optional[Recommendation]]


def _missing_readme(bundle: ProfileBundle) -> list[RepoDetail]:
    return [r for r in bundle.repo_details if not r.readme.exists]


def _missing_description(bundle: ProfileBundle) -> list[RepoDetail]:
    return [r for r in bundle.repo_details if not r.has_description]


def _missing_gitignore(bundle: ProfileBundle) -> list[RepoDetail]:
    return [r for r in bundle.repo_details if not r.has_gitignore]


def _names(repos: list[RepoDetail]) -> str:
    return ", ".join(r.name for r in repos)


# ─── Strengths ───────────────────────────────────────────────────────────────


def _strong_documentation(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    if dimensions.documentation.score >= 70:
        return "Strong README documentation across repositories."
    return None


def _consistent_activity(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    if dimensions.consistency.score >= 70:
        return "Consistent coding activity over the past 30 days."
    return None


def _starred_projects(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    stars = dimensions.impact.details.get("totalStars", 0)
    if stars >= 10:
        return f"Projects have earned {stars} stars — visible community interest."
    return None


def _language_diversity(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    count = len(bundle.languages)
    if count >= 3:
        return f"Great language diversity — {count} languages used."
    return None


def _good_practices(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    if dimensions.best_practices.score >= 70:
        return "Good use of .gitignore and repo descriptions."
    return None


def _portfolio_size(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    count = len(bundle.repos)
    if count >= 10:
        return f"Solid portfolio size with {count} public repositories."
    return None


STRENGTH_RULES: tuple[StrengthRule, ...] = (
    _strong_documentation,
    _consistent_activity,
    _starred_projects,
    _language_diversity,
    _good_practices,
    _portfolio_size,
)


def generate_strengths(dimensions: Dimensions, bundle: ProfileBundle) -> list[str]:
    """Positive findings in rule order. Never empty."""
    strengths = [s for s in (rule(dimensions, bundle) for rule in STRENGTH_RULES) if s]
    return strengths or [FALLBACK_STRENGTH]


# ─── Red flags ───────────────────────────────────────────────────────────────


def _readme_gaps(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    missing = _missing_readme(bundle)
    if missing:
        return f"{len(missing)} repo(s) missing README files: {_names(missing)}."
    return None


def _description_gaps(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    missing = _missing_description(bundle)
    if missing:
        return f"{len(missing)} repo(s) missing descriptions: {_names(missing)}."
    return None


def _low_activity(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    if dimensions.consistency.details.get("activeDays", 0) < 5:
        return "Low commit activity in the last 30 days — recruiters look for consistency."
    return None


def _gitignore_gaps(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    missing = _missing_gitignore(bundle)
    if missing:
        return f"{len(missing)} repo(s) missing .gitignore files."
    return None


def _narrow_stack(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[str]:
    if len(bundle.languages) < 2:
        return "Limited language diversity — consider exploring new technologies."
    return None


RED_FLAG_RULES: tuple[RedFlagRule, ...] = (
    _readme_gaps,
    _description_gaps,
    _low_activity,
    _gitignore_gaps,
    _narrow_stack,
)


def generate_red_flags(dimensions: Dimensions, bundle: ProfileBundle) -> list[str]:
    """Detected deficiencies in rule order. An empty list means a clean profile."""
    return [f for f in (rule(dimensions, bundle) for rule in RED_FLAG_RULES) if f]


# ─── Recommendations ─────────────────────────────────────────────────────────


def _add_readme(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[Recommendation]:
    missing = _missing_readme(bundle)
    if not missing:
        return None
    return Recommendation(
        title="Add README documentation",
        description=(
            f'Add a detailed README to "{missing[0].name}" to boost your documentation score. '
            "Include project purpose, setup instructions, and screenshots."
        ),
        impact=Impact.HIGH,
    )


def _commit_more_often(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[Recommendation]:
    if dimensions.consistency.details.get("activeDays", 0) >= 10:
        return None
    return Recommendation(
        title="Increase commit frequency",
        description="Try to commit code at least 3-4 days per week. Even small updates signal active development to recruiters.",
        impact=Impact.HIGH,
    )


def _add_description(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[Recommendation]:
    missing = _missing_description(bundle)
    if not missing:
        return None
    return Recommendation(
        title="Add repository descriptions",
        description=(
            f'Add a clear, concise description to "{missing[0].name}" — '
            "recruiters scan descriptions to quickly understand your work."
        ),
        impact=Impact.MEDIUM,
    )


def _add_gitignore(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[Recommendation]:
    missing = _missing_gitignore(bundle)
    if not missing:
        return None
    return Recommendation(
        title="Add .gitignore files",
        description=f'Add a .gitignore to "{missing[0].name}" to show you follow professional development practices.',
        impact=Impact.MEDIUM,
    )


def _pin_top_projects(dimensions: Dimensions, bundle: ProfileBundle) -> Optional[Recommendation]:
    if dimensions.impact.details.get("totalStars", 0) <= 0:
        return None
    return Recommendation(
        title="Pin your top projects",
        description="Pin your 2-3 best repositories to your GitHub profile so recruiters see your strongest work first.",
        impact=Impact.MEDIUM,
    )


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    _add_readme,
    _commit_more_often,
    _add_description,
    _add_gitignore,
    _pin_top_projects,
)


def generate_recommendations(dimensions: Dimensions, bundle: ProfileBundle) -> list[Recommendation]:
    """Up to three suggestions in rule order, not re-sorted by impact.

    Every rule is evaluated; the low-impact fallback is appended only when
    fewer than three were collected.
    """
    recs = [r for r in (rule(dimensions, bundle) for rule in RECOMMENDATION_RULES) if r]
    if len(recs) < MAX_RECOMMENDATIONS:
        recs.append(FALLBACK_RECOMMENDATION)
    return recs[:MAX_RECOMMENDATIONS]
