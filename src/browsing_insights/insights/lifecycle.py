"""Tab age and activity metrics for one logical tab."""

from __future__ import annotations

from datetime import datetime, timedelta

from browsing_insights.history.models import TabClosure, Visit
from browsing_insights.insights.models import CLOSED, UNKNOWN, TabMetadata

SECONDS_PER_DAY = 86400.0
RECENT_VISIT_WINDOW = timedelta(hours=24)
SIGNIFICANT_DURATION_SECONDS = 5 * 60


class TabLifecycleCalculator:
    """Compute TabMetadata from all visits to one URL.

    A closure record with a ``closed_at`` on the most recent visit is the only
    evidence that a tab is closed. Without one the status is ``unknown``; it is
    never inferred to be open.
    """

    def __init__(self, now: datetime):
        self.now = now

    def calculate(
        self,
        visits: list[Visit],
        closures: dict[str, TabClosure] | None = None,
    ) -> TabMetadata | None:
        if not visits:
            return None

        ordered = sorted(visits, key=lambda v: v.visited_at)
        first_visit = ordered[0]
        last_visit = ordered[-1]

        closure = (closures or {}).get(last_visit.visit_id)
        is_closed = closure is not None and closure.closed_at is not None
        closed_at = closure.closed_at if is_closed else None

        opened_at = first_visit.opened_at or first_visit.visited_at

        if is_closed:
            tab_age_days = _days_between(opened_at, closed_at)
            inactive_days = _days_between(closed_at, self.now)
        else:
            tab_age_days = _days_between(opened_at, self.now)
            inactive_days = _days_between(last_visit.visited_at, self.now)

        return TabMetadata(
            url=first_visit.url,
            title=last_visit.title,
            domain=first_visit.domain,
            visit_count=len(ordered),
            opened_at=opened_at,
            first_visited_at=first_visit.visited_at,
            last_visited_at=last_visit.visited_at,
            tab_age_days=tab_age_days,
            days_since_last_activity=inactive_days,
            tab_status=CLOSED if is_closed else UNKNOWN,
            closed_at=closed_at,
            actual_tab_duration_seconds=closure.total_time_seconds if is_closed else None,
            total_duration_seconds=sum(v.duration_seconds or 0 for v in ordered),
            total_engagement_seconds=sum(_engaged_seconds(v) for v in ordered),
            average_engagement_rate=_average_engagement_rate(ordered),
            is_likely_still_open=False if is_closed else self._likely_still_open(last_visit),
            is_single_visit=len(ordered) == 1,
            is_pinned=any(v.metadata.pinned for v in ordered),
            most_recent_visit=last_visit,
        )

    def _likely_still_open(self, last_visit: Visit) -> bool:
        if last_visit.duration_seconds is None:
            return False
        visited_recently = self.now - last_visit.visited_at < RECENT_VISIT_WINDOW
        return visited_recently and last_visit.duration_seconds > SIGNIFICANT_DURATION_SECONDS


def _days_between(start: datetime, end: datetime) -> float:
    return round((end - start).total_seconds() / SECONDS_PER_DAY, 1)


def _engaged_seconds(visit: Visit) -> float:
    # Active time never exceeds the visit's total time when that is known.
    active = visit.active_duration_seconds or 0
    if visit.duration_seconds is None:
        return active
    return min(active, visit.duration_seconds)


def _average_engagement_rate(visits: list[Visit]) -> float:
    rates = [v.engagement_rate for v in visits if v.engagement_rate is not None]
    if not rates:
        return 0.0
    return sum(rates) / len(rates)
