"""Tests for the module-level detection operations."""

from datetime import timedelta

from browsing_insights.config import DetectionConfig
from browsing_insights.detections import (
    compare_serial_openers,
    detect_hoarder_tabs,
    detect_research_sessions,
    detect_routine,
    detect_serial_openers,
    rank_by_value,
)
from browsing_insights.history.memory import InMemoryHistoryStore
from browsing_insights.insights.date_range import DateRange


def test_detect_hoarder_tabs(now, make_visit):
    store = InMemoryHistoryStore([
        make_visit(url="https://twitter.com/someone", days_ago=2, engagement=0.5),
        make_visit(url="https://docs.python.org/3/", days_ago=8, engagement=0.5),
    ])

    by_score = detect_hoarder_tabs(store, "user-1", now)
    assert [t.domain for t in by_score] == ["docs.python.org", "twitter.com"]
    assert all(t.value_rank is None for t in by_score)

    ranked = rank_by_value(by_score)
    assert [t.domain for t in ranked] == ["docs.python.org", "twitter.com"]
    assert ranked[0].value_rank > ranked[1].value_rank

    assert detect_hoarder_tabs(store, "user-1", now, limit=1, sort_by="age")[0].domain == "docs.python.org"
    assert detect_hoarder_tabs(store, "user-1", now, lookback_days=5)[0].domain == "twitter.com"


def test_detect_routine(now, make_visit):
    store = InMemoryHistoryStore([
        make_visit(url="https://github.com/", visited_at=now - timedelta(days=i, hours=3), duration=200)
        for i in range(25)
    ])
    result = detect_routine(store, "user-1", "github.com", now)
    assert result.is_routine
    assert result.routine_type == "work_tool"

    strict = detect_routine(store, "user-1", "github.com", now, config=DetectionConfig(routine_threshold=101))
    assert not strict.is_routine

    short = detect_routine(store, "user-1", "github.com", now, lookback_days=2)
    assert short.visit_count == 2


def test_detect_research_sessions(now, make_visit):
    store = InMemoryHistoryStore([
        make_visit(visited_at=now + timedelta(minutes=m)) for m in (0, 5, 10, 25)
    ])
    sessions = detect_research_sessions(store, "user-1")
    assert len(sessions) == 1
    assert sessions[0].tab_count == 3
    assert detect_research_sessions(store, "user-1", min_tabs=4) == []


def test_serial_openers_and_comparison(now, make_visit):
    store = InMemoryHistoryStore([
        make_visit(url="https://example.com/inbox", visited_at=now - timedelta(hours=h), active=2.0)
        for h in range(8)
    ])
    week = DateRange.preset("week", now)
    current = detect_serial_openers(store, "user-1", week)
    previous = detect_serial_openers(store, "user-1", week.previous())

    assert [o.visit_count for o in current] == [8]
    assert previous == []

    comparison = compare_serial_openers(current, previous)
    assert comparison["by_resource"][0]["status"] == "new"
