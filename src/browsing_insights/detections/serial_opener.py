"""Serial-opener detection with period-over-period comparison."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from browsing_insights.history.models import Visit
from browsing_insights.insights.comparison import ComparisonCalculator
from browsing_insights.insights.date_range import DateRange
from browsing_insights.insights.models import SerialOpener
from browsing_insights.insights.serial_openers import SerialOpenerInsightGenerator, normalize_url
from browsing_insights.insights.thresholds import AdaptiveThresholdCalculator

if TYPE_CHECKING:
    from browsing_insights.history.base import BaseHistoryStore

logger = logging.getLogger(__name__)


class SerialOpenerDetector:
    """Find resources reopened often within a period but barely engaged with."""

    def __init__(self, store: "BaseHistoryStore"):
        self.store = store

    def detect(
        self,
        user_id: str,
        date_range: DateRange,
        calculator: AdaptiveThresholdCalculator | None = None,
    ) -> list[SerialOpener]:
        calculator = calculator or AdaptiveThresholdCalculator(days_in_period=date_range.days)
        min_visits = calculator.min_serial_opener_visits()
        max_engagement = calculator.max_serial_opener_engagement_seconds()
        generator = SerialOpenerInsightGenerator(calculator)

        visits = self.store.fetch_visits(user_id, start=date_range.start, end=date_range.end)
        groups: dict[str, list[Visit]] = {}
        for visit in visits:
            groups.setdefault(normalize_url(visit.url), []).append(visit)

        openers = []
        for normalized, group in groups.items():
            engagement = sum(_engagement_seconds(v) for v in group)
            if len(group) < min_visits or engagement >= max_engagement:
                continue
            if not calculator.qualifies_as_serial_opener(len(group), date_range.days):
                continue
            openers.append(generator.generate_insights(_aggregate(normalized, group, engagement), group))

        openers.sort(key=lambda o: (-o.visit_count, o.normalized_url))
        logger.debug("Found %s serial openers for user %s in %s", len(openers), user_id, date_range.period)
        return openers

    def insights(
        self,
        user_id: str,
        now: datetime,
        period: str | None = None,
        start_date=None,
        end_date=None,
        include_comparison: bool = False,
    ) -> dict:
        """Serial openers for a period, their criteria, and optionally a comparison."""
        date_range = DateRange.parse(now, period=period, start_date=start_date, end_date=end_date)
        calculator = AdaptiveThresholdCalculator(days_in_period=date_range.days)
        openers = self.detect(user_id, date_range, calculator)

        response = {
            "period": date_range.period,
            "date_range": {
                "start": date_range.start.date().isoformat(),
                "end": date_range.end.date().isoformat(),
                "days": round(date_range.days, 1),
            },
            "serial_openers": openers,
            "count": len(openers),
            "criteria": {
                "min_visits_per_day": calculator.min_visits_per_day_threshold,
                "effective_min_visits": calculator.min_serial_opener_visits(),
                "max_total_engagement_seconds": calculator.max_serial_opener_engagement_seconds(),
            },
        }

        if include_comparison:
            previous_range = date_range.previous()
            previous = self.detect(user_id, previous_range, calculator)
            comparison = ComparisonCalculator().calculate(openers, previous)
            comparison["previous_period"] = {
                "start": previous_range.start.date().isoformat(),
                "end": previous_range.end.date().isoformat(),
                "count": len(previous),
            }
            response["comparison"] = comparison

        return response

    def compare(self, user_id: str, date_range: DateRange) -> dict:
        """Compare ``date_range`` against the equal-length period before it."""
        calculator = AdaptiveThresholdCalculator(days_in_period=date_range.days)
        current = self.detect(user_id, date_range, calculator)
        previous = self.detect(user_id, date_range.previous(), calculator)
        return ComparisonCalculator().calculate(current, previous)


def _engagement_seconds(visit: Visit) -> float:
    if visit.active_duration_seconds is not None:
        return visit.active_duration_seconds
    return visit.duration_seconds or 0.0


def _aggregate(normalized_url: str, visits: list[Visit], engagement: float) -> SerialOpener:
    first, last = visits[0], visits[-1]
    return SerialOpener(
        normalized_url=normalized_url,
        url=last.url,
        title=last.title,
        domain=last.domain,
        visit_count=len(visits),
        total_engagement_seconds=engagement,
        avg_engagement_per_visit=engagement / len(visits),
        first_visit_at=first.visited_at,
        last_visit_at=last.visited_at,
        category=last.category,
    )
