"""Periodic refresh of personal whitelists from routine detection.

Meant to be run by an external scheduler (daily is typical). Re-running with
the same history and clock leaves the whitelist unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from browsing_insights.config import DetectionConfig
from browsing_insights.insights.routine import DEFAULT_LOOKBACK_DAYS, RoutineDetector
from browsing_insights.whitelist.registry import PersonalWhitelist

if TYPE_CHECKING:
    from browsing_insights.history.base import BaseHistoryStore

logger = logging.getLogger(__name__)


@dataclass
class RefreshSummary:
    whitelisted: list[str] = field(default_factory=list)
    deactivated: list[str] = field(default_factory=list)
    verified: list[str] = field(default_factory=list)


class WhitelistRefresher:
    """Add routine domains to a user's whitelist and retire stale ones.

    Manual entries are never deactivated or re-verified here.
    """

    def __init__(
        self,
        store: "BaseHistoryStore",
        detector: RoutineDetector | None = None,
        top_domains: int = 20,
        stale_days: int = 7,
        lookback_days: float = DEFAULT_LOOKBACK_DAYS,
    ):
        self.store = store
        self.whitelist = PersonalWhitelist(store)
        self.detector = detector or RoutineDetector(store)
        self.top_domains = top_domains
        self.stale_days = stale_days
        self.lookback_days = lookback_days

    @classmethod
    def from_config(cls, store: "BaseHistoryStore", config: DetectionConfig) -> "WhitelistRefresher":
        return cls(
            store,
            detector=RoutineDetector(store, routine_threshold=config.routine_threshold),
            top_domains=config.whitelist_top_domains,
            stale_days=config.whitelist_stale_days,
            lookback_days=config.routine_lookback_days,
        )

    def refresh(self, user_id: str, now: datetime) -> RefreshSummary:
        logger.info("Refreshing personal whitelist for user %s", user_id)
        summary = RefreshSummary()

        counts = self.store.domain_visit_counts(user_id, since=now - timedelta(days=self.lookback_days))
        domains = list(counts)[: self.top_domains]
        logger.info("Analyzing %s domains for user %s", len(domains), user_id)

        for domain in domains:
            self._analyze_domain(user_id, domain, now, summary)

        self._cleanup_stale_entries(user_id, now, summary)

        logger.info("Personal whitelist refresh complete for user %s", user_id)
        return summary

    def _analyze_domain(self, user_id: str, domain: str, now: datetime, summary: RefreshSummary) -> None:
        result = self.detector.detect(user_id, domain, now, lookback_days=self.lookback_days)

        existing = self.whitelist.find(user_id, domain)
        if existing is not None and existing.domain != domain:
            # Covered by a parent domain entry; leave it to that entry's verification.
            existing = None

        if result.is_routine:
            if existing is not None and existing.is_manual:
                return
            self.whitelist.add_or_update(user_id, domain, result.routine_type, now, score=result.score)
            summary.whitelisted.append(domain)
            logger.info(
                "Added %s to whitelist for user %s (score: %s, type: %s)",
                domain, user_id, result.score, result.routine_type,
            )
        elif existing is not None and not existing.is_manual:
            self.whitelist.deactivate(user_id, domain)
            summary.deactivated.append(domain)
            logger.info("Deactivated %s for user %s (no longer routine)", domain, user_id)

    def _cleanup_stale_entries(self, user_id: str, now: datetime, summary: RefreshSummary) -> None:
        stale_cutoff = now - timedelta(days=self.stale_days)
        for entry in self.whitelist.entries(user_id):
            if entry.is_manual:
                continue
            if entry.last_verified_at is not None and entry.last_verified_at >= stale_cutoff:
                continue

            result = self.detector.detect(user_id, entry.domain, now, lookback_days=self.lookback_days)
            if result.is_routine:
                self.whitelist.verify(entry, now, score=result.score)
                summary.verified.append(entry.domain)
            else:
                self.whitelist.deactivate(user_id, entry.domain)
                summary.deactivated.append(entry.domain)
                logger.info("Removed stale entry %s for user %s", entry.domain, user_id)
