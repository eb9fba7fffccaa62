"""Analysis periods: presets, custom ranges and the preceding period."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

import dateutil.parser

from browsing_insights.exceptions import InsightsValidationError

VALID_PERIODS = ("today", "week", "month")
MAX_CUSTOM_RANGE_DAYS = 90


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime
    period: str
    is_custom: bool = False

    @property
    def days(self) -> float:
        return round((self.end - self.start).total_seconds() / 86400.0, 2)

    def previous(self) -> "DateRange":
        """Range of equal length ending one second before this one starts."""
        duration = self.end - self.start
        return DateRange(
            start=_start_of_day(self.start - duration),
            end=self.start - timedelta(seconds=1),
            period=f"previous_{self.period}",
            is_custom=self.is_custom,
        )

    @classmethod
    def parse(
        cls,
        now: datetime,
        period: str | None = None,
        start_date: str | date | None = None,
        end_date: str | date | None = None,
    ) -> "DateRange":
        """Custom start/end take precedence; unknown presets fall back to ``week``."""
        if start_date and end_date:
            return cls.custom(start_date, end_date)
        return cls.preset(period, now)

    @classmethod
    def preset(cls, period: str | None, now: datetime) -> "DateRange":
        period = period if period in VALID_PERIODS else "week"
        if period == "today":
            start = _start_of_day(now)
        elif period == "month":
            start = _start_of_day(now - timedelta(days=30))
        else:
            start = _start_of_day(now - timedelta(days=7))
        return cls(start=start, end=_end_of_day(now), period=period)

    @classmethod
    def custom(cls, start_date: str | date, end_date: str | date) -> "DateRange":
        start = _start_of_day(_parse_date(start_date))
        end = _end_of_day(_parse_date(end_date))
        if start > end:
            raise InsightsValidationError("start_date must be before end_date")
        if round((end - start).total_seconds() / 86400.0) > MAX_CUSTOM_RANGE_DAYS:
            raise InsightsValidationError(f"Date range cannot exceed {MAX_CUSTOM_RANGE_DAYS} days")
        return cls(start=start, end=end, period="custom", is_custom=True)


def _parse_date(value: str | date) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    try:
        return dateutil.parser.parse(str(value))
    except (ValueError, OverflowError) as e:
        raise InsightsValidationError(f"Failed to parse date: {value!r}") from e


def _start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=23, minute=59, second=59, microsecond=999999)
