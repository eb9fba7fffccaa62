"""Behavioral classification and insight text for serial openers.

Rule-based throughout: a resource's visit frequency and per-visit engagement
map to behavior and engagement tiers, its domain and title to a purpose, and
the pair selects an insight template.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import replace
from urllib.parse import urlparse

from browsing_insights.history.models import Visit
from browsing_insights.insights.models import SerialOpener
from browsing_insights.insights.thresholds import (
    COMPULSIVE_CHECKING,
    FREQUENT_MONITORING,
    PERIODIC_REVISIT,
    REGULAR_REFERENCE,
    AdaptiveThresholdCalculator,
)

logger = logging.getLogger(__name__)

# Seconds lost to opening and closing a tab, per visit.
TAB_OVERHEAD_SECONDS = 5.0

DOMAIN_PATTERNS = {
    "notion.so": ("documentation", {
        r"issue|tracker|ticket": "task_tracking",
        r"meeting|notes": "note_taking",
        r"doc|documentation": "reference",
    }),
    "notion.site": ("documentation", {}),
    "github.com": ("code_development", {
        r"pull|pr": "code_review",
        r"issues": "issue_tracking",
        r"repositories|repos": "repo_browsing",
    }),
    "mail.google.com": ("email", {}),
    "gmail.com": ("email", {}),
    "x.com": ("social_media", {}),
    "twitter.com": ("social_media", {}),
    "linkedin.com": ("social_media", {}),
    "facebook.com": ("social_media", {}),
    "youtube.com": ("video_content", {}),
    "slack.com": ("communication", {}),
    "discord.com": ("communication", {}),
}

INSIGHT_TEMPLATES = {
    COMPULSIVE_CHECKING: {
        "task_tracking": "You're checking this task tracker {visits_per_day} times per day, spending only "
                         "{avg_seconds}s each time. This suggests anxious waiting for updates rather than active work.",
        "email": "You check your email {visits_per_day} times per day with {avg_seconds}s per visit. "
                 "This constant inbox checking is disrupting your focus.",
        "social_media": "Checking {domain} {visits_per_day} times per day indicates compulsive behavior. "
                        "This is fragmenting your attention.",
        "code_review": "You've checked this PR {visit_count} times ({visits_per_day}/day). "
                       "You're likely anxiously waiting for reviews or CI results.",
        "communication": "You check {domain} {visits_per_day} times per day. Enable notifications "
                         "instead of constant manual checking.",
        "default": "You check this {visits_per_day} times per day, spending only {avg_seconds}s each time. "
                   "This frequent checking pattern is inefficient.",
    },
    FREQUENT_MONITORING: {
        "task_tracking": "You check this task tracker {visits_per_day} times per day for quick status updates.",
        "code_review": "You monitor this PR frequently ({visits_per_day}/day) for updates.",
        "default": "You check this {visits_per_day} times per day for monitoring purposes.",
    },
    REGULAR_REFERENCE: {
        "documentation": "You reference this {visits_per_day} times per day. Consider pinning or bookmarking.",
        "default": "You come back to this regularly ({visits_per_day} times per day).",
    },
    PERIODIC_REVISIT: {
        "default": "You revisit this occasionally ({visit_count} times total).",
    },
}

SUGGESTION_TEMPLATES = {
    "task_tracking": "Enable Notion notifications or Slack integration for task updates. "
                     "Stop manually checking every {avg_hours_between} hours.",
    "email": "Turn on desktop notifications. Schedule specific email check times (e.g., 9am, 1pm, 4pm) "
             "instead of checking {visits_per_day} times per day.",
    "social_media": "Set specific times to check social media (e.g., lunch, end of day). "
                    "Consider app blockers during focus work hours.",
    "code_review": "Enable GitHub email/Slack notifications for PR reviews, comments, and CI status. "
                   "You will know immediately when action is needed.",
    "communication": "Enable desktop notifications for {domain}. Stop the constant manual checking.",
    "documentation": "Pin this tab or add to bookmarks bar for quick access. {visit_count} reopenings is inefficient.",
    "video_content": "If you keep coming back, add to a Watch Later playlist instead of reopening {visit_count} times.",
    "default": "Consider bookmarking this instead of reopening it {visit_count} times.",
}


def normalize_url(url: str) -> str:
    """Scheme, host without ``www.`` and path without trailing slash."""
    parsed = urlparse(url or "")
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    path = parsed.path.rstrip("/")
    scheme = parsed.scheme or "https"
    return f"{scheme}://{host}{path}"


class SerialOpenerInsightGenerator:
    """Enrich raw serial-opener aggregates with classifications and text."""

    def __init__(self, calculator: AdaptiveThresholdCalculator):
        self.calculator = calculator

    def generate_insights(self, opener: SerialOpener, visits: list[Visit] | None = None) -> SerialOpener:
        time_span_hours = (opener.last_visit_at - opener.first_visit_at).total_seconds() / 3600.0
        avg_hours_between = time_span_hours / opener.visit_count
        avg_seconds = opener.total_engagement_seconds / opener.visit_count
        visits_per_day = opener.visit_count / self.calculator.days_in_period

        behavior_type = self.calculator.classify_behavior_by_frequency(avg_hours_between)
        engagement_type = self.calculator.classify_engagement_type(avg_seconds)
        purpose = infer_purpose(opener.domain, opener.title, opener.category)

        template_vars = {
            "visits_per_day": round(visits_per_day, 1),
            "avg_seconds": round(avg_seconds, 1),
            "visit_count": opener.visit_count,
            "avg_hours_between": round(avg_hours_between, 2),
            "domain": opener.domain,
        }

        peak_hours: list[int] = []
        most_active_day = None
        time_pattern = None
        if visits:
            by_hour = Counter(v.visited_at.hour for v in visits)
            peak_hours = [hour for hour, _ in by_hour.most_common(3)]
            most_active_day = Counter(v.visited_at.strftime("%A") for v in visits).most_common(1)[0][0]
            time_pattern = classify_time_pattern(peak_hours)

        return replace(
            opener,
            time_span_hours=round(time_span_hours, 1),
            avg_hours_between_visits=round(avg_hours_between, 2),
            avg_engagement_per_visit=avg_seconds,
            visits_per_day=round(visits_per_day, 1),
            behavior_type=behavior_type,
            engagement_type=engagement_type,
            inferred_purpose=purpose,
            efficiency_score=round(efficiency_score(opener.total_engagement_seconds, opener.visit_count), 1),
            behavioral_insight=insight_text(behavior_type, purpose, template_vars),
            actionable_suggestion=suggestion_text(purpose, template_vars),
            peak_hours=peak_hours,
            most_active_day=most_active_day,
            time_pattern=time_pattern,
        )


def efficiency_score(total_engagement_seconds: float, visit_count: int) -> float:
    """Share of time spent engaged rather than opening and closing the tab."""
    total_time = total_engagement_seconds + visit_count * TAB_OVERHEAD_SECONDS
    if total_time == 0:
        return 0.0
    return total_engagement_seconds / total_time * 100.0


def infer_purpose(domain: str | None, title: str | None, category: str | None) -> str:
    pattern = DOMAIN_PATTERNS.get((domain or "").lower())
    if pattern:
        purpose, keywords = pattern
        for regex, keyword_purpose in keywords.items():
            if title and re.search(regex, title, re.IGNORECASE):
                return keyword_purpose
        return purpose
    return _category_to_purpose(category)


def _category_to_purpose(category: str | None) -> str:
    category = category or ""
    if "work_" in category:
        return "work"
    if "learning_" in category:
        return "learning"
    if "entertainment_" in category:
        return "entertainment"
    if category in ("social_media", "news", "shopping", "reference"):
        return category
    return "unknown"


def classify_time_pattern(peak_hours: list[int]) -> str:
    if not peak_hours:
        return "unknown"
    if all(9 <= h <= 17 for h in peak_hours):
        return "work_hours"
    if any(h >= 22 or h <= 6 for h in peak_hours):
        return "late_night"
    if any(6 <= h <= 9 for h in peak_hours):
        return "early_morning"
    if any(17 <= h <= 22 for h in peak_hours):
        return "evening"
    return "afternoon"


def insight_text(behavior_type: str, purpose: str, template_vars: dict) -> str:
    templates = INSIGHT_TEMPLATES.get(behavior_type, {})
    template = templates.get(purpose) or templates.get("default") or "You visit this resource {visit_count} times."
    try:
        return template.format(**template_vars)
    except KeyError as e:
        logger.warning("Missing template variable: %s", e)
        return f"You visit this resource {template_vars.get('visit_count')} times."


def suggestion_text(purpose: str, template_vars: dict) -> str:
    template = SUGGESTION_TEMPLATES.get(purpose) or SUGGESTION_TEMPLATES["default"]
    try:
        return template.format(**template_vars)
    except KeyError as e:
        logger.warning("Missing suggestion variable: %s", e)
        return "Consider using notifications or bookmarks to reduce reopening overhead."
