"""Tests for serial opener classification and insight text."""

import logging
from datetime import datetime, timedelta

import pytest

from browsing_insights.insights.models import SerialOpener
from browsing_insights.insights.serial_openers import (
    SerialOpenerInsightGenerator,
    classify_time_pattern,
    efficiency_score,
    infer_purpose,
    insight_text,
    normalize_url,
    suggestion_text,
)
from browsing_insights.insights.thresholds import AdaptiveThresholdCalculator

FIRST = datetime(2024, 3, 11, 9, 0)


def _opener(domain="mail.google.com", visit_count=10, span_hours=3.0, engagement=30.0, title="Inbox"):
    return SerialOpener(
        normalized_url=f"https://{domain}/inbox",
        url=f"https://{domain}/inbox",
        title=title,
        domain=domain,
        visit_count=visit_count,
        total_engagement_seconds=engagement,
        avg_engagement_per_visit=engagement / visit_count,
        first_visit_at=FIRST,
        last_visit_at=FIRST + timedelta(hours=span_hours),
    )


def test_normalize_url():
    assert normalize_url("https://www.Example.com/path/?q=1#top") == "https://example.com/path"
    assert normalize_url("http://example.com") == "http://example.com"


def test_generate_insights_compulsive_email():
    generator = SerialOpenerInsightGenerator(AdaptiveThresholdCalculator(7))
    result = generator.generate_insights(_opener())

    assert result.avg_hours_between_visits == 0.3
    assert result.avg_engagement_per_visit == 3.0
    assert result.visits_per_day == 1.4
    assert result.behavior_type == "compulsive_checking"
    assert result.engagement_type == "quick_glance"
    assert result.inferred_purpose == "email"
    assert result.efficiency_score == 37.5
    assert result.behavioral_insight == (
        "You check your email 1.4 times per day with 3.0s per visit. "
        "This constant inbox checking is disrupting your focus."
    )
    assert "instead of checking 1.4 times per day" in result.actionable_suggestion
    assert result.peak_hours == []
    assert result.time_pattern is None


def test_generate_insights_regular_reference():
    generator = SerialOpenerInsightGenerator(AdaptiveThresholdCalculator(7))
    result = generator.generate_insights(_opener(domain="example.com", visit_count=7, span_hours=14.0, engagement=35.0))
    assert result.avg_hours_between_visits == 2.0
    assert result.behavior_type == "regular_reference"
    assert result.engagement_type == "brief_check"
    assert result.behavioral_insight == "You come back to this regularly (1.0 times per day)."
    assert result.actionable_suggestion == "Consider bookmarking this instead of reopening it 7 times."


def test_generate_insights_time_patterns(make_visit):
    visits = [make_visit(visited_at=FIRST + timedelta(hours=h)) for h in (0, 0, 1, 2, 24)]
    generator = SerialOpenerInsightGenerator(AdaptiveThresholdCalculator(7))
    result = generator.generate_insights(_opener(visit_count=5, span_hours=24.0), visits)
    assert result.peak_hours[0] == 9
    assert set(result.peak_hours) == {9, 10, 11}
    assert result.most_active_day == "Monday"
    assert result.time_pattern == "work_hours"


def test_efficiency_score():
    assert efficiency_score(0, 0) == 0.0
    assert efficiency_score(15, 3) == 50.0


@pytest.mark.parametrize("domain, title, category, expected", [
    ("github.com", "Fix parser - Pull Request #12", None, "code_review"),
    ("github.com", "Issues - org/repo", None, "issue_tracking"),
    ("github.com", "org/repo", None, "code_development"),
    ("notion.so", "Sprint tracker", None, "task_tracking"),
    ("youtube.com", "Music", None, "video_content"),
    ("example.com", "", "work_docs", "work"),
    ("example.com", "", "learning_course", "learning"),
    ("example.com", "", "news", "news"),
    ("example.com", "", None, "unknown"),
])
def test_infer_purpose(domain, title, category, expected):
    assert infer_purpose(domain, title, category) == expected


@pytest.mark.parametrize("hours, expected", [
    ([], "unknown"),
    ([9, 10, 17], "work_hours"),
    ([23, 10], "late_night"),
    ([7, 12], "early_morning"),
    ([18, 12], "evening"),
])
def test_classify_time_pattern(hours, expected):
    assert classify_time_pattern(hours) == expected


def test_missing_template_variable_falls_back(caplog):
    with caplog.at_level(logging.WARNING):
        text = insight_text("compulsive_checking", "email", {"visit_count": 4})
    assert text == "You visit this resource 4 times."
    assert "Missing template variable" in caplog.text


def test_suggestion_default():
    assert suggestion_text("shopping", {"visit_count": 5}) == (
        "Consider bookmarking this instead of reopening it 5 times."
    )
