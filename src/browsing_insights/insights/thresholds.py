"""Adaptive thresholds for behavior classification.

Thresholds are defined for a 7-day baseline and scale linearly with the
analysis period, so "compulsive checking" means the same thing whether the
window is one day or ninety.
"""

from __future__ import annotations

from browsing_insights.exceptions import InsightsValidationError

BASE_PERIOD_DAYS = 7.0
# Below 12 hours behavioral patterns are not meaningful.
MIN_PERIOD_DAYS = 0.5

# Period-independent floor; not derived from the weekly baseline.
SERIAL_OPENER_MIN_VISITS_PER_DAY = 0.43
SERIAL_OPENER_BASE_MIN_VISITS = 3
SERIAL_OPENER_ABSOLUTE_MIN_VISITS = 2
SERIAL_OPENER_MAX_ENGAGEMENT_SECONDS = 2 * 60

# Visits per week.
BEHAVIOR_VISITS_PER_WEEK = {
    "compulsive": 50,
    "frequent": 20,
    "regular": 10,
}

# Seconds per visit.
QUICK_GLANCE_SECONDS = 5
BRIEF_CHECK_SECONDS = 15
SCAN_SECONDS = 60

# Hours between visits; fixed regardless of period.
COMPULSIVE_HOURS_BETWEEN = 0.5
FREQUENT_HOURS_BETWEEN = 2.0
REGULAR_HOURS_BETWEEN = 8.0

COMPULSIVE_CHECKING = "compulsive_checking"
FREQUENT_MONITORING = "frequent_monitoring"
REGULAR_REFERENCE = "regular_reference"
PERIODIC_REVISIT = "periodic_revisit"

QUICK_GLANCE = "quick_glance"
BRIEF_CHECK = "brief_check"
SCAN = "scan"
SHALLOW_WORK = "shallow_work"


class AdaptiveThresholdCalculator:
    """Derive frequency and engagement thresholds for an analysis period."""

    def __init__(self, days_in_period: float):
        self.days_in_period = float(days_in_period)
        if self.days_in_period <= 0:
            raise InsightsValidationError("days_in_period must be positive")
        if self.days_in_period < MIN_PERIOD_DAYS:
            raise InsightsValidationError(
                f"days_in_period must be at least {MIN_PERIOD_DAYS} days for meaningful analysis "
                f"(got {self.days_in_period})"
            )
        self.scale_factor = self.days_in_period / BASE_PERIOD_DAYS

    def min_visits_for_behavior(self, tier: str) -> int:
        """Minimum visit count for ``compulsive``, ``frequent`` or ``regular``."""
        try:
            base_visits = BEHAVIOR_VISITS_PER_WEEK[tier]
        except KeyError:
            raise InsightsValidationError(f"Unknown behavior type: {tier!r}") from None
        return self._scale(base_visits)

    def classify_behavior_by_visits(self, visit_count: int) -> str:
        if visit_count < 0:
            raise InsightsValidationError("visit_count must be non-negative")
        if visit_count >= self.min_visits_for_behavior("compulsive"):
            return COMPULSIVE_CHECKING
        if visit_count >= self.min_visits_for_behavior("frequent"):
            return FREQUENT_MONITORING
        if visit_count >= self.min_visits_for_behavior("regular"):
            return REGULAR_REFERENCE
        return PERIODIC_REVISIT

    def classify_behavior_by_frequency(self, avg_hours_between: float | None) -> str:
        if avg_hours_between is None:
            return PERIODIC_REVISIT
        if avg_hours_between < 0:
            raise InsightsValidationError("avg_hours_between must be non-negative")
        if avg_hours_between < COMPULSIVE_HOURS_BETWEEN:
            return COMPULSIVE_CHECKING
        if avg_hours_between < FREQUENT_HOURS_BETWEEN:
            return FREQUENT_MONITORING
        if avg_hours_between < REGULAR_HOURS_BETWEEN:
            return REGULAR_REFERENCE
        return PERIODIC_REVISIT

    def classify_engagement_type(self, avg_seconds_per_visit: float | None) -> str:
        if avg_seconds_per_visit is None:
            return QUICK_GLANCE
        if avg_seconds_per_visit < 0:
            raise InsightsValidationError("avg_seconds_per_visit must be non-negative")
        if avg_seconds_per_visit < QUICK_GLANCE_SECONDS:
            return QUICK_GLANCE
        if avg_seconds_per_visit < BRIEF_CHECK_SECONDS:
            return BRIEF_CHECK
        if avg_seconds_per_visit < SCAN_SECONDS:
            return SCAN
        return SHALLOW_WORK

    def min_serial_opener_visits(self) -> int:
        return max(self._scale(SERIAL_OPENER_BASE_MIN_VISITS), SERIAL_OPENER_ABSOLUTE_MIN_VISITS)

    def max_serial_opener_engagement_seconds(self) -> int:
        return self._scale(SERIAL_OPENER_MAX_ENGAGEMENT_SECONDS)

    def qualifies_as_serial_opener(self, visit_count: int, days: float | None = None) -> bool:
        """True when the visits-per-day rate reaches the fixed 0.43 floor."""
        if visit_count < 0:
            raise InsightsValidationError("visit_count must be non-negative")
        period_days = self.days_in_period if days is None else days
        if period_days <= 0:
            raise InsightsValidationError("days must be positive")
        return visit_count / period_days >= SERIAL_OPENER_MIN_VISITS_PER_DAY

    @property
    def min_visits_per_day_threshold(self) -> float:
        return SERIAL_OPENER_MIN_VISITS_PER_DAY

    def _scale(self, base_value: float) -> int:
        return _round_half_up(base_value * self.scale_factor)


def _round_half_up(value: float) -> int:
    # round() uses banker's rounding; thresholds round .5 away from zero.
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
