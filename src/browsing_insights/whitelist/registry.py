"""Per-user whitelist lookup and mutation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from browsing_insights.whitelist.models import WhitelistEntry

if TYPE_CHECKING:
    from browsing_insights.history.base import BaseHistoryStore

logger = logging.getLogger(__name__)


class PersonalWhitelist:
    """Whitelist entries for users, persisted through a history store."""

    def __init__(self, store: "BaseHistoryStore"):
        self.store = store

    def entries(self, user_id: str, active_only: bool = True) -> list[WhitelistEntry]:
        return self.store.fetch_whitelist(user_id, active_only=active_only)

    def find(self, user_id: str, domain: str) -> WhitelistEntry | None:
        """Active entry for ``domain``, or for a parent domain it belongs to.

        An entry for ``youtube.com`` also covers ``music.youtube.com``.
        """
        return find_entry(self.store.fetch_whitelist(user_id, active_only=True), domain)

    def is_whitelisted(self, user_id: str, domain: str) -> bool:
        return self.find(user_id, domain) is not None

    def add_or_update(
        self,
        user_id: str,
        domain: str,
        reason: str,
        now: datetime,
        score: int | None = None,
    ) -> WhitelistEntry:
        """Upsert the single entry for (user, domain) and mark it active."""
        existing = next(
            (e for e in self.store.fetch_whitelist(user_id, active_only=False) if e.domain == domain),
            None,
        )
        entry = WhitelistEntry(
            user_id=user_id,
            domain=domain,
            reason=reason,
            routine_score=score,
            detected_at=existing.detected_at if existing and existing.detected_at else now,
            last_verified_at=now,
            is_active=True,
        )
        self.store.upsert_whitelist_entry(entry)
        logger.debug("Whitelisted %s for user %s (%s)", domain, user_id, reason)
        return entry

    def verify(self, entry: WhitelistEntry, now: datetime, score: int | None = None) -> WhitelistEntry:
        entry.last_verified_at = now
        if score is not None:
            entry.routine_score = score
        return self.store.upsert_whitelist_entry(entry)

    def deactivate(self, user_id: str, domain: str) -> bool:
        """Soft-delete; the row is kept for history."""
        return self.store.deactivate_whitelist_entry(user_id, domain)


def find_entry(entries: list[WhitelistEntry], domain: str) -> WhitelistEntry | None:
    """Exact active match first, then the first parent domain covering ``domain``."""
    active = [e for e in entries if e.is_active]
    for entry in active:
        if entry.domain == domain:
            return entry
    for entry in active:
        if domain.endswith(f".{entry.domain}"):
            return entry
    return None
