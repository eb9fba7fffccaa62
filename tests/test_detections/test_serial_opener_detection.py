"""Tests for serial opener detection and period comparison."""

from datetime import timedelta

import pytest

from browsing_insights.detections.serial_opener import SerialOpenerDetector
from browsing_insights.history.memory import InMemoryHistoryStore
from browsing_insights.insights.date_range import DateRange

PR = "https://github.com/org/repo/pull/1"
STATUS = "https://status.example.com/"


@pytest.fixture
def store(now, make_visit):
    visits = []
    # Six quick checks of the same PR, one with a different spelling of the URL.
    for k in range(1, 6):
        visits.append(make_visit(url=PR, visited_at=now - timedelta(hours=k), active=5.0,
                                 title="Fix parser - Pull Request #1"))
    visits.append(make_visit(url="https://www.github.com/org/repo/pull/1/?tab=checks",
                             visited_at=now - timedelta(hours=6), active=5.0))
    # Ten one-second glances at a dashboard.
    for k in range(10):
        visits.append(make_visit(url="https://app.example.com/dash", visited_at=now - timedelta(days=1, minutes=10 * k),
                                 active=1.0))
    # Too few visits for the period.
    for k in range(3):
        visits.append(make_visit(url="https://example.com/rare", visited_at=now - timedelta(days=k)))
    # Too much engagement.
    for k in range(5):
        visits.append(make_visit(url="https://example.com/read", visited_at=now - timedelta(days=k), active=60.0))
    # Previous period only.
    for k in range(5):
        visits.append(make_visit(url=STATUS, visited_at=now - timedelta(days=10, hours=k), duration=2.0))
    return InMemoryHistoryStore(visits)


@pytest.fixture
def week(now):
    return DateRange.preset("week", now)


def test_detect(store, week):
    openers = SerialOpenerDetector(store).detect("user-1", week)

    assert [o.normalized_url for o in openers] == ["https://app.example.com/dash", PR]
    dash, pr = openers
    assert dash.visit_count == 10
    assert dash.total_engagement_seconds == 10.0
    assert pr.visit_count == 6
    assert pr.total_engagement_seconds == 30.0
    assert pr.avg_engagement_per_visit == 5.0
    assert pr.inferred_purpose == "code_review"
    assert pr.engagement_type == "brief_check"
    assert pr.behavioral_insight


def test_compare(store, week):
    result = SerialOpenerDetector(store).compare("user-1", week)
    assert [c["status"] for c in result["by_resource"]] == ["new", "new", "resolved"]
    assert result["by_resource"][2]["url"] == "https://status.example.com"
    assert result["overall"]["total_serial_openers"]["current"] == 2
    assert result["overall"]["total_serial_openers"]["previous"] == 1


def test_insights_response(store, now):
    response = SerialOpenerDetector(store).insights("user-1", now, period="week", include_comparison=True)

    assert response["period"] == "week"
    assert response["count"] == 2
    assert response["date_range"] == {"start": "2024-03-08", "end": "2024-03-15", "days": 8.0}
    assert response["criteria"] == {
        "min_visits_per_day": 0.43,
        "effective_min_visits": 3,
        "max_total_engagement_seconds": 137,
    }
    assert response["comparison"]["previous_period"] == {
        "start": "2024-02-29",
        "end": "2024-03-07",
        "count": 1,
    }


def test_insights_without_comparison(store, now):
    response = SerialOpenerDetector(store).insights("user-1", now, start_date="2024-03-14", end_date="2024-03-15")
    assert response["period"] == "custom"
    assert "comparison" not in response


def test_no_visits(week):
    assert SerialOpenerDetector(InMemoryHistoryStore()).detect("user-1", week) == []
