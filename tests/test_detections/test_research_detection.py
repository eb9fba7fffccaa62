"""Tests for research session detection over a history store."""

from datetime import datetime, timedelta

import pytest

from browsing_insights.config import DetectionConfig
from browsing_insights.detections.research import ResearchSessionDetector
from browsing_insights.history.memory import InMemoryHistoryStore
from browsing_insights.history.sqlite import SQLiteHistoryStore

START = datetime(2024, 3, 5, 14, 30)


def _burst(make_visit, start, minutes, url="https://docs.python.org/3/"):
    return [make_visit(url=url, visited_at=start + timedelta(minutes=m)) for m in minutes]


@pytest.fixture
def visits(make_visit):
    return (
        _burst(make_visit, START, (0, 5, 10, 12))
        + _burst(make_visit, START + timedelta(hours=3), (0, 4, 11), url="https://github.com/o/r")
        + _burst(make_visit, START + timedelta(days=1), (0, 1, 2))
    )


def test_detect(visits):
    store = InMemoryHistoryStore(visits)
    sessions = ResearchSessionDetector(store).detect("user-1")
    assert [s.tab_count for s in sessions] == [4, 3]
    assert [s.primary_domain for s in sessions] == ["docs.python.org", "github.com"]


def test_detect_with_overrides(visits):
    store = InMemoryHistoryStore(visits)
    detector = ResearchSessionDetector(store)
    assert len(detector.detect("user-1", min_tabs=4)) == 1
    assert len(detector.detect("user-1", min_duration=timedelta(minutes=1))) == 3


def test_zero_overrides_are_honored(visits):
    detector = ResearchSessionDetector(InMemoryHistoryStore(visits))
    assert [s.tab_count for s in detector.detect("user-1", min_duration=timedelta(0))] == [4, 3, 3]
    assert detector.detect("user-1", time_window=timedelta(0)) == []


def test_config_defaults(visits):
    store = InMemoryHistoryStore(visits)
    config = DetectionConfig(session_min_duration_minutes=12.0)
    assert len(ResearchSessionDetector(store, config).detect("user-1")) == 1


def test_saved_sessions_are_skipped(visits, tmp_path):
    with SQLiteHistoryStore(tmp_path / "history.db") as store:
        store.add_visits(visits)
        detector = ResearchSessionDetector(store)

        first = detector.detect("user-1")[0]
        session_id = detector.save("user-1", first)

        assert session_id
        remaining = detector.detect("user-1")
        assert [s.primary_domain for s in remaining] == ["github.com"]
