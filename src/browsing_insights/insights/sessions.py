"""Segment a visit stream into research sessions."""

from __future__ import annotations

from collections import Counter
from datetime import timedelta

from browsing_insights.history.models import Visit
from browsing_insights.insights.models import ResearchSessionCandidate

DEFAULT_MIN_TABS = 3
DEFAULT_TIME_WINDOW = timedelta(minutes=15)
DEFAULT_MIN_DURATION = timedelta(minutes=10)


class ResearchSessionSegmenter:
    """Greedy single-pass grouping of visits into bursts.

    A visit joins the open group while it falls within ``time_window`` of the
    group's *first* visit (the anchor), not of the previous visit. Evenly
    spaced visits therefore split once they drift a full window away from the
    anchor, regardless of how small the individual gaps are.
    """

    def __init__(
        self,
        min_tabs: int = DEFAULT_MIN_TABS,
        time_window: timedelta = DEFAULT_TIME_WINDOW,
        min_duration: timedelta = DEFAULT_MIN_DURATION,
    ):
        self.min_tabs = min_tabs
        self.time_window = time_window
        self.min_duration = min_duration

    def segment(self, visits: list[Visit]) -> list[ResearchSessionCandidate]:
        """Visits must be ordered ascending by ``visited_at``."""
        return [
            build_session(group)
            for group in self.group(visits)
            if self.is_valid(group)
        ]

    def group(self, visits: list[Visit]) -> list[list[Visit]]:
        groups: list[list[Visit]] = []
        current: list[Visit] = []

        for visit in visits:
            if not current:
                current = [visit]
            elif visit.visited_at - current[0].visited_at <= self.time_window:
                current.append(visit)
            else:
                if len(current) >= self.min_tabs:
                    groups.append(current)
                current = [visit]

        if len(current) >= self.min_tabs:
            groups.append(current)
        return groups

    def is_valid(self, group: list[Visit]) -> bool:
        if len(group) < self.min_tabs:
            return False
        return group[-1].visited_at - group[0].visited_at >= self.min_duration


def build_session(group: list[Visit]) -> ResearchSessionCandidate:
    start = group[0].visited_at
    end = group[-1].visited_at

    domains = list(dict.fromkeys(v.domain for v in group if v.domain))
    # most_common keeps first-seen order among ties.
    counts = Counter(v.domain for v in group if v.domain)
    primary_domain = counts.most_common(1)[0][0] if counts else None

    rates = [v.engagement_rate for v in group if v.engagement_rate is not None]

    return ResearchSessionCandidate(
        session_name=session_name(primary_domain, start),
        session_start=start,
        session_end=end,
        tab_count=len(group),
        primary_domain=primary_domain,
        domains=domains,
        total_duration_seconds=(end - start).total_seconds(),
        avg_engagement_rate=sum(rates) / len(rates) if rates else 0.0,
        page_visit_ids=[v.visit_id for v in group],
    )


def session_name(domain: str | None, start) -> str:
    """e.g. ``"Github - Mar 05, 02:30PM"``."""
    label = domain.split(".")[0].capitalize() if domain else "Research"
    return f"{label} - {start.strftime('%b %d, %I:%M%p')}"
