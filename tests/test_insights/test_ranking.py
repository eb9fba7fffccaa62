"""Tests for value ranking."""

from datetime import datetime

import pytest

from browsing_insights.insights.models import HoarderTabResult
from browsing_insights.insights.ranking import ValueRanker, age_weight, classify_content_type


def _result(url, domain, score=60, age=5.0):
    when = datetime(2024, 3, 1)
    return HoarderTabResult(
        page_visit_id=url,
        url=url,
        title="",
        domain=domain,
        visited_at=when,
        last_activity_at=when,
        tab_age_days=age,
        days_since_last_activity=age,
        visit_count=1,
        total_duration_seconds=0.0,
        engagement_rate=0.0,
        hoarder_score=score,
        confidence_level="medium",
        reason="",
        score_breakdown={},
        is_likely_still_open=False,
        is_single_visit=True,
        suggested_action="save_to_reading_list",
    )


@pytest.mark.parametrize("age, expected", [
    (None, 1.0), (0.5, 0.5), (1.0, 0.7), (2.0, 0.7), (3.0, 1.0), (5.0, 1.3), (8.0, 1.5),
])
def test_age_weight(age, expected):
    assert age_weight(age) == expected


@pytest.mark.parametrize("domain, url, expected", [
    ("docs.python.org", "https://docs.python.org/3/", "documentation"),
    ("stackoverflow.com", "https://stackoverflow.com/q/1", "documentation"),
    ("medium.com", "https://medium.com/@a/post", "article"),
    ("example.com", "https://example.com/blog/hello", "article"),
    ("github.com", "https://github.com/o/r/pull/1", "code_review"),
    ("gitlab.com", "https://gitlab.com/o/r/-/merge_requests/2", "code_review"),
    ("github.com", "https://github.com/o/r/issues/1", "issue_tracker"),
    ("twitter.com", "https://twitter.com/someone", "social_media"),
    ("x.com", "https://x.com/someone", "social_media"),
    ("google.com", "https://google.com/search?q=x", "search_results"),
    ("mail.google.com", "https://mail.google.com/", "unknown"),
    ("news.ycombinator.com", "https://news.ycombinator.com/", "news_feed"),
    ("github.com", "https://github.com/o/r", "unknown"),
])
def test_classify_content_type(domain, url, expected):
    assert classify_content_type(domain, url) == expected


def test_social_media_matches_hosts_not_substrings():
    assert classify_content_type("box.com", "https://box.com/f/1") == "unknown"


def test_documentation_outranks_fresh_social_media():
    social = _result("https://twitter.com/someone", "twitter.com", age=2.0)
    docs = _result("https://docs.python.org/3/", "docs.python.org", age=8.0)

    ranked = ValueRanker().rank([social, docs])

    assert [t.domain for t in ranked] == ["docs.python.org", "twitter.com"]
    assert ranked[0].value_rank == 135.0
    assert ranked[1].value_rank == 25.2
    breakdown = ranked[0].value_breakdown
    assert breakdown.age_weight == 1.5
    assert breakdown.content_weight == 1.5
    assert breakdown.content_type == "documentation"
    assert breakdown.final_value == 135.0


def test_ties_keep_incoming_order():
    first = _result("https://a.com/1", "a.com")
    second = _result("https://b.com/1", "b.com")
    ranked = ValueRanker().rank([first, second])
    assert [t.url for t in ranked] == ["https://a.com/1", "https://b.com/1"]


def test_rank_does_not_mutate_input():
    tab = _result("https://a.com/1", "a.com")
    ValueRanker().rank([tab])
    assert tab.value_rank is None


def test_rank_empty():
    assert ValueRanker().rank([]) == []
