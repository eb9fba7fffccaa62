"""Hoarder-tab detection over a user's recent history."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from browsing_insights.config import DetectionConfig
from browsing_insights.history.models import Visit
from browsing_insights.insights.domain_context import DomainContextAnalyzer
from browsing_insights.insights.lifecycle import TabLifecycleCalculator
from browsing_insights.insights.models import HIGH, MEDIUM, HoarderTabResult, ScoreResult, TabMetadata
from browsing_insights.insights.ranking import ValueRanker
from browsing_insights.insights.scorer import HoarderScorer
from browsing_insights.whitelist.registry import find_entry

if TYPE_CHECKING:
    from browsing_insights.history.base import BaseHistoryStore

logger = logging.getLogger(__name__)


class HoarderDetector:
    """Find tabs that were opened and abandoned.

    Visits in the lookback window are grouped by URL; each group is turned
    into tab metadata, given domain context (including the user's personal
    whitelist) and scored. Only tabs scoring as hoarders are returned.
    """

    def __init__(self, store: "BaseHistoryStore", config: DetectionConfig | None = None):
        self.store = store
        self.config = config or DetectionConfig()
        self.scorer = HoarderScorer(
            hoarder_threshold=self.config.hoarder_threshold,
            high_confidence_threshold=self.config.high_confidence_threshold,
            low_confidence_threshold=self.config.low_confidence_threshold,
        )

    def detect(
        self,
        user_id: str,
        now: datetime,
        lookback_days: float | None = None,
        min_score: float | None = None,
        age_min: float | None = None,
        domain: str | None = None,
        exclude_domains: list[str] | None = None,
        limit: int | None = None,
        sort_by: str = "hoarder_score",
    ) -> list[HoarderTabResult]:
        lookback = self.config.lookback_days if lookback_days is None else lookback_days
        visits = self.store.fetch_visits(user_id, start=now - timedelta(days=lookback), end=now)
        if not visits:
            return []

        closures = self.store.fetch_closures([v.visit_id for v in visits])
        saved = self.store.fetch_saved_visit_ids(user_id)
        # A tab known to be closed, or already saved for later, is not being hoarded.
        candidates = [
            v for v in visits
            if v.visit_id not in saved
            and not (v.visit_id in closures and closures[v.visit_id].closed_at is not None)
        ]

        whitelist = self.store.fetch_whitelist(user_id, active_only=True)
        lifecycle = TabLifecycleCalculator(now)

        groups = _group_by_url(candidates)
        tabs = []
        for url, group in groups.items():
            tab = lifecycle.calculate(group, closures)
            if tab is None:
                continue
            context = DomainContextAnalyzer(
                domain=tab.domain,
                url=url,
                tab_metadata=tab,
                whitelist_entry=find_entry(whitelist, tab.domain),
            ).analyze()
            score = self.scorer.calculate(tab, context)
            if score.is_hoarder:
                tabs.append(build_result(tab, score))

        logger.debug(
            "Scored %s tabs for user %s, %s flagged as hoarders",
            len(groups), user_id, len(tabs),
        )

        tabs = apply_filters(tabs, min_score, age_min, domain, exclude_domains)
        tabs = apply_sorting(tabs, sort_by)
        if limit is not None:
            tabs = tabs[:limit]
        return tabs


def build_result(tab: TabMetadata, score: ScoreResult) -> HoarderTabResult:
    most_recent = tab.most_recent_visit
    preview = most_recent.metadata.preview
    return HoarderTabResult(
        page_visit_id=most_recent.visit_id,
        url=tab.url,
        title=tab.title,
        domain=tab.domain,
        visited_at=tab.first_visited_at,
        last_activity_at=tab.last_visited_at,
        tab_age_days=tab.tab_age_days,
        days_since_last_activity=tab.days_since_last_activity,
        visit_count=tab.visit_count,
        total_duration_seconds=tab.total_duration_seconds,
        engagement_rate=tab.average_engagement_rate,
        hoarder_score=score.total_score,
        confidence_level=score.confidence_level,
        reason=score.reason,
        score_breakdown=score.score_breakdown,
        is_likely_still_open=tab.is_likely_still_open,
        is_single_visit=tab.is_single_visit,
        suggested_action=suggest_action(score.confidence_level),
        preview=preview if preview is not None and preview.has_useful_data() else None,
        whitelist_override=score.whitelist_override,
    )


def suggest_action(confidence_level: str) -> str:
    if confidence_level == HIGH:
        return "save_to_reading_list_or_close"
    if confidence_level == MEDIUM:
        return "save_to_reading_list"
    return "review"


def apply_filters(
    tabs: list[HoarderTabResult],
    min_score: float | None = None,
    age_min: float | None = None,
    domain: str | None = None,
    exclude_domains: list[str] | None = None,
) -> list[HoarderTabResult]:
    if min_score is not None:
        tabs = [t for t in tabs if t.hoarder_score >= min_score]
    if age_min is not None:
        tabs = [t for t in tabs if t.tab_age_days >= age_min]
    if domain is not None:
        tabs = [t for t in tabs if t.domain == domain]
    if exclude_domains:
        excluded = set(exclude_domains)
        tabs = [t for t in tabs if t.domain not in excluded]
    return tabs


def apply_sorting(tabs: list[HoarderTabResult], sort_by: str | None) -> list[HoarderTabResult]:
    """Unknown ``sort_by`` values fall back to hoarder score."""
    if sort_by == "value_rank":
        return ValueRanker().rank(tabs)
    if sort_by == "age":
        return sorted(tabs, key=lambda t: -t.tab_age_days)
    return sorted(tabs, key=lambda t: -t.hoarder_score)


def _group_by_url(visits: list[Visit]) -> dict[str, list[Visit]]:
    groups: dict[str, list[Visit]] = {}
    for visit in visits:
        groups.setdefault(visit.url, []).append(visit)
    # URL order keeps equal-score results deterministic across runs.
    return dict(sorted(groups.items()))
