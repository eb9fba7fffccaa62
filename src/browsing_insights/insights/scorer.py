"""Multi-factor hoarder-tab scoring.

Tab age is the primary signal; inactivity, visit pattern, engagement and
domain context add to it. Every point awarded is recorded in the score
breakdown together with a human-readable reason.
"""

from __future__ import annotations

from browsing_insights.insights.domain_context import CONTENT_SITE
from browsing_insights.insights.models import (
    EXCLUDED,
    HIGH,
    LOW,
    MEDIUM,
    NOT_HOARDER,
    DomainContext,
    FactorScore,
    ScoreResult,
    TabMetadata,
    WhitelistOverride,
)

HOARDER_THRESHOLD = 60
HIGH_CONFIDENCE_THRESHOLD = 80
LOW_CONFIDENCE_THRESHOLD = 40

WEIGHTS = {
    "tab_age_7_days": 40,
    "tab_age_3_days": 25,
    "tab_age_1_day": 10,
    "inactive_2_days": 30,
    "inactive_1_day": 15,
    "single_visit": 20,
    "content_site": 15,
    "low_engagement": 10,
    "strict_bonus": 15,
}

# Severe pattern that overrides a conditional whitelist.
SEVERE_MIN_AGE_DAYS = 7.0
LOW_ENGAGEMENT_RATE = 0.1

REASON_SEPARATOR = " • "


class HoarderScorer:
    """Score one tab given its lifecycle metrics and domain context."""

    def __init__(
        self,
        hoarder_threshold: int = HOARDER_THRESHOLD,
        high_confidence_threshold: int = HIGH_CONFIDENCE_THRESHOLD,
        low_confidence_threshold: int = LOW_CONFIDENCE_THRESHOLD,
    ):
        self.hoarder_threshold = hoarder_threshold
        self.high_confidence_threshold = high_confidence_threshold
        self.low_confidence_threshold = low_confidence_threshold

    def calculate(self, tab: TabMetadata, context: DomainContext) -> ScoreResult:
        exclusion = self.exclusion_reason(tab, context)
        if exclusion is not None:
            return ScoreResult(
                total_score=0,
                is_hoarder=False,
                confidence_level=EXCLUDED,
                score_breakdown={},
                reason=exclusion,
            )

        breakdown = {
            "tab_age": _tab_age_factor(tab),
            "inactivity": _inactivity_factor(tab),
            "visit_pattern": _visit_pattern_factor(tab),
            "engagement": _engagement_factor(tab),
            "domain_context": _domain_context_factor(tab, context),
        }
        score = max(sum(f.points for f in breakdown.values()), 0)

        override = None
        if context.is_whitelisted and context.is_conditional_whitelist:
            # Only reachable when the severe pattern matched.
            override = WhitelistOverride(
                whitelist_type=context.whitelist_reason,
                override_reason="Severe hoarder pattern (7+ days, single visit, low engagement)",
            )

        return ScoreResult(
            total_score=score,
            is_hoarder=score >= self.hoarder_threshold,
            confidence_level=self.confidence_level(score),
            score_breakdown=breakdown,
            reason=self._reason(score, breakdown),
            whitelist_override=override,
        )

    def exclusion_reason(self, tab: TabMetadata, context: DomainContext) -> str | None:
        """Why this tab must not be flagged, or None when it should be scored."""
        if tab.is_pinned:
            return "Excluded: Pinned tab"
        if context.is_whitelisted:
            if not context.is_conditional_whitelist:
                return f"Excluded: Strong whitelist ({context.whitelist_reason})"
            if not is_severe_hoarder_pattern(tab):
                return f"Excluded: Conditional whitelist ({context.whitelist_reason}, not severe pattern)"
        if context.should_apply_lenient_rules:
            return "Excluded: Productivity tool with recent activity"
        return None

    def confidence_level(self, score: int) -> str:
        if score >= self.high_confidence_threshold:
            return HIGH
        if score >= self.hoarder_threshold:
            return MEDIUM
        if score >= self.low_confidence_threshold:
            return LOW
        return NOT_HOARDER

    def _reason(self, score: int, breakdown: dict[str, FactorScore]) -> str:
        if score < self.hoarder_threshold:
            return "Not a hoarder tab"
        # sorted() is stable, so equal points keep factor order.
        top = sorted(breakdown.values(), key=lambda f: -f.points)[:3]
        return REASON_SEPARATOR.join(f.reason for f in top if f.points > 0)


def is_severe_hoarder_pattern(tab: TabMetadata) -> bool:
    return (
        tab.tab_age_days >= SEVERE_MIN_AGE_DAYS
        and tab.is_single_visit
        and tab.average_engagement_rate < LOW_ENGAGEMENT_RATE
    )


def _tab_age_factor(tab: TabMetadata) -> FactorScore:
    age = tab.tab_age_days
    if age >= 7.0:
        return FactorScore(WEIGHTS["tab_age_7_days"], f"Tab open for {age:.1f} days (7+ days)")
    if age >= 3.0:
        return FactorScore(WEIGHTS["tab_age_3_days"], f"Tab open for {age:.1f} days (3-7 days)")
    if age >= 1.0:
        return FactorScore(WEIGHTS["tab_age_1_day"], f"Tab open for {age:.1f} days (1-3 days)")
    return FactorScore(0, "Tab recently opened (< 1 day)")


def _inactivity_factor(tab: TabMetadata) -> FactorScore:
    inactive = tab.days_since_last_activity
    if inactive >= 2.0:
        return FactorScore(WEIGHTS["inactive_2_days"], f"No activity for {inactive:.1f} days (2+ days)")
    if inactive >= 1.0:
        return FactorScore(WEIGHTS["inactive_1_day"], f"No activity for {inactive:.1f} days (1-2 days)")
    return FactorScore(0, "Recent activity (< 1 day)")


def _visit_pattern_factor(tab: TabMetadata) -> FactorScore:
    if tab.is_single_visit and tab.tab_age_days >= 1.0:
        return FactorScore(WEIGHTS["single_visit"], "Opened once and forgotten")
    if tab.visit_count >= 5:
        return FactorScore(0, "Frequently revisited (5+ visits)")
    return FactorScore(0, f"{tab.visit_count} visits")


def _engagement_factor(tab: TabMetadata) -> FactorScore:
    rate = tab.average_engagement_rate
    if rate < LOW_ENGAGEMENT_RATE and not tab.is_likely_still_open:
        return FactorScore(WEIGHTS["low_engagement"], f"Low engagement ({rate * 100:.1f}%)")
    return FactorScore(0, f"Engagement: {rate * 100:.1f}%")


def _domain_context_factor(tab: TabMetadata, context: DomainContext) -> FactorScore:
    if context.should_apply_strict_rules:
        return FactorScore(
            WEIGHTS["strict_bonus"],
            f"Content/doc site with hoarder pattern ({context.domain_type})",
        )
    if context.domain_type == CONTENT_SITE and tab.is_single_visit:
        return FactorScore(WEIGHTS["content_site"], "Content site (articles/blogs typically read later)")
    return FactorScore(0, f"Domain type: {context.domain_type}")
