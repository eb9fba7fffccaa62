"""Tests for hoarder scoring."""

import pytest

from browsing_insights.insights.lifecycle import TabLifecycleCalculator
from browsing_insights.insights.models import EXCLUDED, HIGH, LOW, MEDIUM, NOT_HOARDER, DomainContext
from browsing_insights.insights.scorer import HoarderScorer, is_severe_hoarder_pattern


@pytest.fixture
def tab(now, make_visit):
    def _tab(days_ago=10, visits=1, engagement=0.05, pinned=False, url="https://example.com/page"):
        group = [
            make_visit(url=url, days_ago=days_ago - i * 0.5, engagement=engagement, pinned=pinned)
            for i in range(visits)
        ]
        return TabLifecycleCalculator(now).calculate(group)
    return _tab


def general(**kwargs):
    return DomainContext(domain_type="general", **kwargs)


def test_abandoned_tab_scores_high(tab):
    result = HoarderScorer().calculate(tab(), general())

    assert result.total_score == 100
    assert result.is_hoarder
    assert result.confidence_level == HIGH
    assert {k: f.points for k, f in result.score_breakdown.items()} == {
        "tab_age": 40,
        "inactivity": 30,
        "visit_pattern": 20,
        "engagement": 10,
        "domain_context": 0,
    }
    assert result.reason == (
        "Tab open for 10.0 days (7+ days) • No activity for 10.0 days (2+ days) • Opened once and forgotten"
    )
    assert result.whitelist_override is None


def test_medium_confidence(tab):
    result = HoarderScorer().calculate(tab(days_ago=2, engagement=0.5), general())
    assert result.total_score == 60
    assert result.confidence_level == MEDIUM
    assert result.is_hoarder


def test_low_and_not_hoarder(tab):
    low = HoarderScorer().calculate(tab(days_ago=1.5, engagement=0.5), general())
    assert low.total_score == 45
    assert low.confidence_level == LOW
    assert not low.is_hoarder
    assert low.reason == "Not a hoarder tab"

    fresh = HoarderScorer().calculate(tab(days_ago=0.2, engagement=0.5), general())
    assert fresh.total_score == 0
    assert fresh.confidence_level == NOT_HOARDER


def test_pinned_tab_always_excluded(tab):
    result = HoarderScorer().calculate(tab(days_ago=60, pinned=True), general(should_apply_strict_rules=True))
    assert result.total_score == 0
    assert not result.is_hoarder
    assert result.confidence_level == EXCLUDED
    assert result.reason == "Excluded: Pinned tab"
    assert result.score_breakdown == {}


def test_strong_whitelist_excluded(tab):
    context = general(is_whitelisted=True, whitelist_reason="work_tool")
    result = HoarderScorer().calculate(tab(days_ago=30), context)
    assert result.confidence_level == EXCLUDED
    assert result.reason == "Excluded: Strong whitelist (work_tool)"


def test_conditional_whitelist_excludes_mild_pattern(tab):
    context = general(is_whitelisted=True, whitelist_reason="reference", is_conditional_whitelist=True)
    result = HoarderScorer().calculate(tab(days_ago=4), context)
    assert result.confidence_level == EXCLUDED
    assert result.reason == "Excluded: Conditional whitelist (reference, not severe pattern)"


def test_conditional_whitelist_overridden_by_severe_pattern(tab):
    context = DomainContext(
        domain_type="content_site",
        is_whitelisted=True,
        whitelist_reason="entertainment_routine",
        is_conditional_whitelist=True,
        should_apply_strict_rules=True,
    )
    t = tab(days_ago=10, engagement=0.05, url="https://youtube.com/watch")
    assert is_severe_hoarder_pattern(t)

    result = HoarderScorer().calculate(t, context)
    assert result.is_hoarder
    assert result.total_score == 115
    assert result.whitelist_override.whitelist_type == "entertainment_routine"
    assert result.whitelist_override.overridden
    assert "Severe hoarder pattern" in result.whitelist_override.override_reason


def test_severe_pattern_requires_all_conditions(tab):
    assert not is_severe_hoarder_pattern(tab(days_ago=6))
    assert not is_severe_hoarder_pattern(tab(visits=2))
    assert not is_severe_hoarder_pattern(tab(engagement=0.1))


def test_lenient_rules_excluded(tab):
    result = HoarderScorer().calculate(tab(), general(should_apply_lenient_rules=True))
    assert result.confidence_level == EXCLUDED
    assert result.reason == "Excluded: Productivity tool with recent activity"


def test_content_site_single_visit_bonus(tab):
    result = HoarderScorer().calculate(tab(days_ago=2, engagement=0.5), DomainContext(domain_type="content_site"))
    assert result.score_breakdown["domain_context"].points == 15
    assert result.total_score == 75


def test_custom_thresholds(tab):
    scorer = HoarderScorer(hoarder_threshold=40, high_confidence_threshold=60, low_confidence_threshold=20)
    result = scorer.calculate(tab(days_ago=2, engagement=0.5), general())
    assert result.is_hoarder
    assert result.confidence_level == HIGH
