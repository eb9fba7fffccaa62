"""Detect habitual domains from a user's visit pattern."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from browsing_insights.history.models import Visit
from browsing_insights.insights.models import RoutineDetectionResult
from browsing_insights.whitelist.models import (
    ENTERTAINMENT_ROUTINE,
    REFERENCE,
    ROUTINE_SITE,
    WORK_TOOL,
)

if TYPE_CHECKING:
    from browsing_insights.history.base import BaseHistoryStore

ROUTINE_THRESHOLD = 70
DEFAULT_LOOKBACK_DAYS = 30


class RoutineDetector:
    """Score a domain 0-100 on frequency, day spread, time-of-day and visit length.

    Domains scoring at or above ``routine_threshold`` are routine and get a
    routine type that feeds the personal whitelist.
    """

    def __init__(self, store: "BaseHistoryStore | None" = None, routine_threshold: int = ROUTINE_THRESHOLD):
        self.store = store
        self.routine_threshold = routine_threshold

    def detect(
        self,
        user_id: str,
        domain: str,
        now: datetime,
        lookback_days: float = DEFAULT_LOOKBACK_DAYS,
    ) -> RoutineDetectionResult:
        if self.store is None:
            raise RuntimeError("RoutineDetector.detect needs a history store; use score_visits instead")
        visits = self.store.fetch_visits(
            user_id,
            domain=domain,
            start=now - timedelta(days=lookback_days),
            end=now,
        )
        return self.score_visits(visits)

    def score_visits(self, visits: list[Visit]) -> RoutineDetectionResult:
        if not visits:
            return RoutineDetectionResult(is_routine=False, routine_type=None, score=0)

        visit_count = len(visits)
        days_active = len({v.visited_at.date() for v in visits})
        avg_duration = _average_duration(visits)

        breakdown = {
            "visit_frequency": _frequency_score(visit_count),
            "consistency": _consistency_score(days_active),
            "time_pattern": _time_pattern_score(visits),
            "engagement_pattern": _engagement_pattern_score(avg_duration, visit_count),
        }
        total = sum(breakdown.values())
        is_routine = total >= self.routine_threshold

        return RoutineDetectionResult(
            is_routine=is_routine,
            routine_type=_classify_routine_type(visit_count, avg_duration, days_active) if is_routine else None,
            score=total,
            breakdown=breakdown,
            visit_count=visit_count,
            days_active=days_active,
        )


def _frequency_score(visit_count: int) -> int:
    if visit_count <= 2:
        return 0
    if visit_count <= 5:
        return 10
    if visit_count <= 10:
        return 20
    if visit_count <= 20:
        return 30
    return 40


def _consistency_score(days_active: int) -> int:
    # All visits on one day is a binge, not a routine.
    if days_active <= 1:
        return 0
    if days_active >= 20:
        return 30
    if days_active >= 10:
        return 25
    if days_active >= 5:
        return 20
    if days_active >= 3:
        return 15
    return 10


def _time_pattern_score(visits: list[Visit]) -> int:
    by_hour = Counter(v.visited_at.hour for v in visits)
    concentration = max(by_hour.values()) / len(visits)
    if concentration >= 0.6:
        return 20
    if concentration >= 0.4:
        return 15
    if concentration >= 0.3:
        return 10
    return 5


def _engagement_pattern_score(avg_duration: float | None, visit_count: int) -> int:
    if avg_duration is None:
        return 5
    if avg_duration < 300 and visit_count >= 10:
        return 10
    if avg_duration < 600:
        return 7
    return 3


def _classify_routine_type(visit_count: int, avg_duration: float | None, days_active: int) -> str:
    avg = avg_duration or 0.0
    if visit_count >= 15 and avg < 600 and days_active >= 10:
        return WORK_TOOL
    if visit_count >= 20 and avg < 300:
        return REFERENCE
    if 8 <= visit_count < 20:
        return ENTERTAINMENT_ROUTINE
    return ROUTINE_SITE


def _average_duration(visits: list[Visit]) -> float | None:
    durations = [v.duration_seconds for v in visits if v.duration_seconds is not None]
    if not durations:
        return None
    return sum(durations) / len(durations)
