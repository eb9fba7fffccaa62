"""Tests for research session segmentation."""

from datetime import datetime, timedelta

import pytest

from browsing_insights.insights.sessions import ResearchSessionSegmenter, session_name

START = datetime(2024, 3, 5, 14, 30)


def _at(make_visit, minutes, url="https://github.com/a", engagement=None):
    return make_visit(url=url, visited_at=START + timedelta(minutes=minutes), engagement=engagement)


def test_anchor_window_example(make_visit):
    visits = [_at(make_visit, m) for m in (0, 5, 10, 25)]
    sessions = ResearchSessionSegmenter().segment(visits)

    assert len(sessions) == 1
    session = sessions[0]
    assert session.tab_count == 3
    assert session.total_duration_seconds == 600
    assert session.session_start == START
    assert session.session_end == START + timedelta(minutes=10)
    assert session.page_visit_ids == [v.visit_id for v in visits[:3]]
    assert session.status == "detected"


def test_window_measured_from_anchor_not_previous_visit(make_visit):
    # Gaps of 6 minutes never exceed the window, but the drift from the anchor does.
    visits = [_at(make_visit, m) for m in (0, 6, 12, 18, 24, 30)]
    groups = ResearchSessionSegmenter().group(visits)
    assert [len(g) for g in groups] == [3, 3]


def test_short_sessions_discarded(make_visit):
    visits = [_at(make_visit, m) for m in (0, 2, 4, 6)]
    assert ResearchSessionSegmenter().segment(visits) == []


def test_too_few_tabs(make_visit):
    visits = [_at(make_visit, m) for m in (0, 12)]
    assert ResearchSessionSegmenter().segment(visits) == []
    assert ResearchSessionSegmenter(min_tabs=2, min_duration=timedelta(minutes=5)).segment(visits)


def test_primary_domain_and_aggregates(make_visit):
    visits = [
        _at(make_visit, 0, url="https://docs.python.org/3/", engagement=0.2),
        _at(make_visit, 4, url="https://stackoverflow.com/q/1"),
        _at(make_visit, 8, url="https://stackoverflow.com/q/2", engagement=0.6),
        _at(make_visit, 12, url="https://docs.python.org/3/library"),
    ]
    session = ResearchSessionSegmenter().segment(visits)[0]

    # Tie between docs.python.org and stackoverflow.com goes to the first seen.
    assert session.primary_domain == "docs.python.org"
    assert session.domains == ["docs.python.org", "stackoverflow.com"]
    assert session.avg_engagement_rate == pytest.approx(0.4)
    assert session.session_name == "Docs - Mar 05, 02:30PM"


def test_session_name_fallback():
    assert session_name(None, START) == "Research - Mar 05, 02:30PM"
    assert session_name("github.com", START) == "Github - Mar 05, 02:30PM"


def test_empty_input():
    assert ResearchSessionSegmenter().segment([]) == []
