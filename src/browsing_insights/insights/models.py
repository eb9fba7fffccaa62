"""Derived records produced by the insight calculators and detectors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from browsing_insights.history.models import LinkPreview, Visit

CLOSED = "closed"
UNKNOWN = "unknown"

EXCLUDED = "excluded"
NOT_HOARDER = "not_hoarder"
LOW = "low"
MEDIUM = "medium"
HIGH = "high"


@dataclass
class TabMetadata:
    """Lifecycle metrics for one logical tab (all visits sharing a URL)."""

    url: str
    title: str
    domain: str
    visit_count: int
    opened_at: datetime
    first_visited_at: datetime
    last_visited_at: datetime
    tab_age_days: float
    days_since_last_activity: float
    tab_status: str  # "closed" | "unknown"
    closed_at: datetime | None
    actual_tab_duration_seconds: float | None
    total_duration_seconds: float
    total_engagement_seconds: float
    average_engagement_rate: float
    is_likely_still_open: bool
    is_single_visit: bool
    is_pinned: bool
    most_recent_visit: Visit


@dataclass
class DomainContext:
    """How hoarder rules apply to a domain for one user."""

    domain_type: str
    is_whitelisted: bool = False
    whitelist_reason: str | None = None
    is_conditional_whitelist: bool = False
    should_apply_strict_rules: bool = False
    should_apply_lenient_rules: bool = False
    context_notes: str = ""


@dataclass
class RoutineDetectionResult:
    is_routine: bool
    routine_type: str | None
    score: int
    breakdown: dict[str, int] = field(default_factory=dict)
    visit_count: int = 0
    days_active: int = 0


@dataclass
class FactorScore:
    """Points contributed by one scoring factor and why."""

    points: int
    reason: str


@dataclass
class WhitelistOverride:
    whitelist_type: str | None
    override_reason: str
    overridden: bool = True


@dataclass
class ScoreResult:
    total_score: int
    is_hoarder: bool
    confidence_level: str
    score_breakdown: dict[str, FactorScore]
    reason: str
    whitelist_override: WhitelistOverride | None = None


@dataclass
class ValueBreakdown:
    base_score: float
    age_weight: float
    content_weight: float
    content_type: str
    final_value: float


@dataclass
class HoarderTabResult:
    """A flagged tab, ready for an external consumer."""

    page_visit_id: str
    url: str
    title: str
    domain: str
    visited_at: datetime
    last_activity_at: datetime
    tab_age_days: float
    days_since_last_activity: float
    visit_count: int
    total_duration_seconds: float
    engagement_rate: float
    hoarder_score: int
    confidence_level: str
    reason: str
    score_breakdown: dict[str, FactorScore]
    is_likely_still_open: bool
    is_single_visit: bool
    suggested_action: str
    preview: LinkPreview | None = None
    whitelist_override: WhitelistOverride | None = None
    value_rank: float | None = None
    value_breakdown: ValueBreakdown | None = None


@dataclass
class ResearchSessionCandidate:
    session_name: str
    session_start: datetime
    session_end: datetime
    tab_count: int
    primary_domain: str | None
    domains: list[str]
    total_duration_seconds: float
    avg_engagement_rate: float
    page_visit_ids: list[str]
    status: str = "detected"


@dataclass
class SerialOpener:
    """A resource reopened many times with little cumulative engagement."""

    normalized_url: str
    url: str
    title: str
    domain: str
    visit_count: int
    total_engagement_seconds: float
    avg_engagement_per_visit: float
    first_visit_at: datetime
    last_visit_at: datetime
    category: str | None = None
    time_span_hours: float = 0.0
    avg_hours_between_visits: float | None = None
    visits_per_day: float = 0.0
    behavior_type: str = ""
    engagement_type: str = ""
    inferred_purpose: str = ""
    efficiency_score: float = 0.0
    behavioral_insight: str = ""
    actionable_suggestion: str = ""
    peak_hours: list[int] = field(default_factory=list)
    most_active_day: str | None = None
    time_pattern: str | None = None
    suggested_action: str = "save_to_reading_list"
