"""Evidence rule tests: strengths, red flags and recommendations."""

import pytest

from github_readiness.core.evidence import (
    FALLBACK_RECOMMENDATION,
    FALLBACK_STRENGTH,
    RECOMMENDATION_RULES,
    RED_FLAG_RULES,
    STRENGTH_RULES,
    generate_recommendations,
    generate_red_flags,
    generate_strengths,
)
from github_readiness.core.models import DimensionScore, Dimensions, Impact


def _dims(
    documentation: int = 0,
    consistency: int = 0,
    active_days: int = 0,
    impact: int = 0,
    stars: int = 0,
    best_practices: int = 0,
) -> Dimensions:
    return Dimensions(
        documentation=DimensionScore(score=documentation),
        consistency=DimensionScore(score=consistency, details={"pushEventsLast30Days": active_days, "activeDays": active_days}),
        impact=DimensionScore(score=impact, details={"totalStars": stars, "totalForks": 0, "totalRepos": 0}),
        best_practices=DimensionScore(score=best_practices),
    )


@pytest.fixture
def clean_bundle(make_detail, make_bundle):
    """Two clean repos in two languages."""
    return make_bundle(details=[make_detail(name="api", language="Go"), make_detail(name="web", language="TypeScript")])


class TestStrengths:
    """Strength rules and fallback."""

    def test_fallback_when_nothing_fires(self, make_bundle) -> None:
        assert generate_strengths(_dims(), make_bundle()) == [FALLBACK_STRENGTH]

    def test_all_rules_fire_in_order(self, make_repo, make_bundle) -> None:
        repos = [make_repo(name=f"r{i}", language=lang) for i, lang in enumerate(["Go", "Rust", "C"] * 4)]
        dims = _dims(documentation=70, consistency=70, stars=10, best_practices=70)

        strengths = generate_strengths(dims, make_bundle(repos=repos))

        assert strengths == [
            "Strong README documentation across repositories.",
            "Consistent coding activity over the past 30 days.",
            "Projects have earned 10 stars — visible community interest.",
            "Great language diversity — 3 languages used.",
            "Good use of .gitignore and repo descriptions.",
            "Solid portfolio size with 12 public repositories.",
        ]

    def test_thresholds_are_inclusive(self, make_bundle) -> None:
        assert "Strong README documentation across repositories." in generate_strengths(_dims(documentation=70), make_bundle())
        assert generate_strengths(_dims(documentation=69), make_bundle()) == [FALLBACK_STRENGTH]

    def test_star_callout_interpolates_count(self, make_bundle) -> None:
        strengths = generate_strengths(_dims(stars=128), make_bundle())
        assert strengths == ["Projects have earned 128 stars — visible community interest."]

    def test_each_rule_returns_at_most_one_string(self, make_bundle) -> None:
        dims = _dims(documentation=100, consistency=100, stars=999, best_practices=100)
        bundle = make_bundle()
        results = [rule(dims, bundle) for rule in STRENGTH_RULES]
        assert all(r is None or isinstance(r, str) for r in results)
        assert len(generate_strengths(dims, bundle)) == sum(r is not None for r in results)


class TestRedFlags:
    """Red flag rules."""

    def test_clean_profile_has_no_flags(self, clean_bundle) -> None:
        assert generate_red_flags(_dims(active_days=5), clean_bundle) == []

    def test_missing_readmes_are_named(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(
            details=[
                make_detail(name="alpha", readme_length=None, language="Go"),
                make_detail(name="beta", language="C"),
                make_detail(name="gamma", readme_length=None, language="C"),
            ]
        )
        assert generate_red_flags(_dims(active_days=5), bundle) == [
            "2 repo(s) missing README files: alpha, gamma.",
        ]

    def test_blank_description_counts_as_missing(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(
            details=[
                make_detail(name="alpha", description="  ", language="Go"),
                make_detail(name="beta", description=None, language="C"),
            ]
        )
        assert generate_red_flags(_dims(active_days=9), bundle) == [
            "2 repo(s) missing descriptions: alpha, beta.",
        ]

    def test_gitignore_flag_reports_count(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(
            details=[make_detail(name="a", gitignore=False, language="Go"), make_detail(name="b", language="C")]
        )
        assert generate_red_flags(_dims(active_days=5), bundle) == ["1 repo(s) missing .gitignore files."]

    def test_low_activity_below_five_days(self, clean_bundle) -> None:
        flags = generate_red_flags(_dims(active_days=4), clean_bundle)
        assert flags == ["Low commit activity in the last 30 days — recruiters look for consistency."]

    def test_single_language_is_flagged(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(details=[make_detail(name="a"), make_detail(name="b")])
        flags = generate_red_flags(_dims(active_days=5), bundle)
        assert flags == ["Limited language diversity — consider exploring new technologies."]

    def test_all_rules_fire_in_order(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(details=[make_detail(name="bare", description=None, readme_length=None, gitignore=False)])
        flags = generate_red_flags(_dims(active_days=0), bundle)
        assert len(flags) == len(RED_FLAG_RULES)
        assert flags[0].startswith("1 repo(s) missing README files")
        assert flags[1].startswith("1 repo(s) missing descriptions")
        assert flags[2].startswith("Low commit activity")
        assert flags[3] == "1 repo(s) missing .gitignore files."
        assert flags[4].startswith("Limited language diversity")


class TestRecommendations:
    """Recommendation rules, fallback and truncation."""

    def test_fallback_only_when_nothing_fires(self, clean_bundle) -> None:
        recs = generate_recommendations(_dims(active_days=10), clean_bundle)
        assert recs == [FALLBACK_RECOMMENDATION]

    def test_truncates_to_first_three_in_rule_order(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(
            details=[make_detail(name="bare", description=None, readme_length=None, gitignore=False, stars=4)]
        )
        recs = generate_recommendations(_dims(active_days=0, stars=4), bundle)

        assert [r.title for r in recs] == [
            "Add README documentation",
            "Increase commit frequency",
            "Add repository descriptions",
        ]
        assert [r.impact for r in recs] == [Impact.HIGH, Impact.HIGH, Impact.MEDIUM]

    def test_no_fallback_when_three_collected(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(details=[make_detail(name="docs-less", readme_length=None)])
        recs = generate_recommendations(_dims(active_days=3, stars=1), bundle)
        assert [r.title for r in recs] == [
            "Add README documentation",
            "Increase commit frequency",
            "Pin your top projects",
        ]

    def test_fallback_appended_after_two(self, clean_bundle) -> None:
        recs = generate_recommendations(_dims(active_days=2, stars=5), clean_bundle)
        assert [r.title for r in recs] == [
            "Increase commit frequency",
            "Pin your top projects",
            "Diversify your tech stack",
        ]
        assert recs[-1].impact is Impact.LOW

    def test_names_first_offending_repo(self, make_detail, make_bundle) -> None:
        bundle = make_bundle(
            details=[
                make_detail(name="ok"),
                make_detail(name="first", description=None, gitignore=False),
                make_detail(name="second", description=None, gitignore=False),
            ]
        )
        recs = generate_recommendations(_dims(active_days=12), bundle)
        assert '"first"' in recs[0].description
        assert '"first"' in recs[1].description
        assert all('"second"' not in r.description for r in recs)

    def test_commit_rule_threshold(self, clean_bundle) -> None:
        titles_9 = [r.title for r in generate_recommendations(_dims(active_days=9), clean_bundle)]
        titles_10 = [r.title for r in generate_recommendations(_dims(active_days=10), clean_bundle)]
        assert "Increase commit frequency" in titles_9
        assert "Increase commit frequency" not in titles_10

    @pytest.mark.parametrize("active_days", [0, 4, 9, 10, 30])
    @pytest.mark.parametrize("stars", [0, 3])
    def test_length_between_one_and_three(self, make_detail, make_bundle, active_days, stars) -> None:
        bundle = make_bundle(details=[make_detail(name="x", readme_length=None), make_detail(name="y", gitignore=False)])
        recs = generate_recommendations(_dims(active_days=active_days, stars=stars), bundle)
        assert 1 <= len(recs) <= 3

    def test_rules_are_independent(self, clean_bundle) -> None:
        """Each rule can be evaluated alone and yields None on a clean profile."""
        dims = _dims(active_days=20)
        assert [rule(dims, clean_bundle) for rule in RECOMMENDATION_RULES] == [None] * len(RECOMMENDATION_RULES)
