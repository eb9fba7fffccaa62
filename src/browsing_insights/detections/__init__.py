"""Externally exposed detection operations over a history store."""

from __future__ import annotations

from datetime import datetime, timedelta

from browsing_insights.config import DetectionConfig
from browsing_insights.detections.hoarder import HoarderDetector
from browsing_insights.detections.research import ResearchSessionDetector
from browsing_insights.detections.serial_opener import SerialOpenerDetector
from browsing_insights.detections.whitelist_refresh import RefreshSummary, WhitelistRefresher
from browsing_insights.history.base import BaseHistoryStore
from browsing_insights.insights.comparison import ComparisonCalculator
from browsing_insights.insights.date_range import DateRange
from browsing_insights.insights.models import (
    HoarderTabResult,
    ResearchSessionCandidate,
    RoutineDetectionResult,
    SerialOpener,
)
from browsing_insights.insights.ranking import ValueRanker
from browsing_insights.insights.routine import RoutineDetector

__all__ = [
    "HoarderDetector",
    "ResearchSessionDetector",
    "SerialOpenerDetector",
    "WhitelistRefresher",
    "RefreshSummary",
    "detect_hoarder_tabs",
    "detect_research_sessions",
    "detect_routine",
    "rank_by_value",
    "detect_serial_openers",
    "compare_serial_openers",
]


def detect_hoarder_tabs(
    store: BaseHistoryStore,
    user_id: str,
    now: datetime,
    lookback_days: float | None = None,
    config: DetectionConfig | None = None,
    **filters,
) -> list[HoarderTabResult]:
    """Flagged tabs for a user.

    ``filters`` accepts ``min_score``, ``age_min``, ``domain``,
    ``exclude_domains``, ``limit`` and ``sort_by`` (``hoarder_score``,
    ``value_rank`` or ``age``).
    """
    return HoarderDetector(store, config).detect(user_id, now, lookback_days=lookback_days, **filters)


def detect_research_sessions(
    store: BaseHistoryStore,
    user_id: str,
    min_tabs: int | None = None,
    time_window: timedelta | None = None,
    min_duration: timedelta | None = None,
    config: DetectionConfig | None = None,
) -> list[ResearchSessionCandidate]:
    return ResearchSessionDetector(store, config).detect(
        user_id,
        min_tabs=min_tabs,
        time_window=time_window,
        min_duration=min_duration,
    )


def detect_routine(
    store: BaseHistoryStore,
    user_id: str,
    domain: str,
    now: datetime,
    lookback_days: float | None = None,
    config: DetectionConfig | None = None,
) -> RoutineDetectionResult:
    config = config or DetectionConfig()
    detector = RoutineDetector(store, routine_threshold=config.routine_threshold)
    lookback = config.routine_lookback_days if lookback_days is None else lookback_days
    return detector.detect(user_id, domain, now, lookback_days=lookback)


def rank_by_value(tabs: list[HoarderTabResult]) -> list[HoarderTabResult]:
    return ValueRanker().rank(tabs)


def detect_serial_openers(
    store: BaseHistoryStore,
    user_id: str,
    date_range: DateRange,
) -> list[SerialOpener]:
    return SerialOpenerDetector(store).detect(user_id, date_range)


def compare_serial_openers(current: list[SerialOpener], previous: list[SerialOpener]) -> dict:
    return ComparisonCalculator().calculate(current, previous)
