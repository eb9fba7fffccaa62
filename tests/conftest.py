"""Shared fixtures: a fixed clock and a visit factory."""

from datetime import datetime, timedelta
from itertools import count

import pytest

from browsing_insights.history.models import Visit, VisitMetadata

NOW = datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_visit():
    ids = count(1)

    def _make(
        url="https://example.com/page",
        visited_at=None,
        days_ago=None,
        user_id="user-1",
        title="Example",
        domain=None,
        duration=None,
        active=None,
        engagement=None,
        pinned=False,
        preview=None,
        category=None,
        visit_id=None,
    ):
        if visited_at is None:
            visited_at = NOW - timedelta(days=days_ago or 0)
        if domain is None:
            domain = url.split("/")[2].split(":")[0].removeprefix("www.")
        return Visit(
            visit_id=visit_id or f"v{next(ids)}",
            user_id=user_id,
            url=url,
            title=title,
            domain=domain,
            visited_at=visited_at,
            duration_seconds=duration,
            active_duration_seconds=active,
            engagement_rate=engagement,
            metadata=VisitMetadata(pinned=pinned, preview=preview),
            category=category,
        )

    return _make
