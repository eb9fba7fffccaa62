"""Abstract base class for history store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from browsing_insights.history.models import TabClosure, Visit
from browsing_insights.whitelist.models import WhitelistEntry


class BaseHistoryStore(ABC):
    """Read access to visit history plus whitelist and session persistence."""

    @abstractmethod
    def fetch_visits(
        self,
        user_id: str,
        domain: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Visit]:
        """Visits for a user, ordered ascending by ``visited_at``."""
        ...

    @abstractmethod
    def fetch_closures(self, visit_ids: list[str]) -> dict[str, TabClosure]:
        """Closure records keyed by visit id; visits without one are absent."""
        ...

    @abstractmethod
    def fetch_session_visit_ids(self, user_id: str) -> set[str]:
        """Visit ids already attached to a research session."""
        ...

    @abstractmethod
    def attach_session(self, user_id: str, session_name: str, visit_ids: list[str]) -> str:
        """Persist a research session and return its id."""
        ...

    @abstractmethod
    def fetch_whitelist(self, user_id: str, active_only: bool = True) -> list[WhitelistEntry]:
        """Whitelist entries for a user, ordered by domain."""
        ...

    @abstractmethod
    def upsert_whitelist_entry(self, entry: WhitelistEntry) -> WhitelistEntry:
        """Insert or replace the entry keyed by (user_id, domain)."""
        ...

    @abstractmethod
    def deactivate_whitelist_entry(self, user_id: str, domain: str) -> bool:
        """Soft-delete an entry. Returns False when no active entry matched."""
        ...

    def domain_visit_counts(self, user_id: str, since: datetime | None = None) -> dict[str, int]:
        """Visit counts per domain, most visited first."""
        counts: dict[str, int] = {}
        for visit in self.fetch_visits(user_id, start=since):
            counts[visit.domain] = counts.get(visit.domain, 0) + 1
        return dict(sorted(counts.items(), key=lambda item: -item[1]))

    def fetch_saved_visit_ids(self, user_id: str) -> set[str]:
        """Visit ids the user has already saved to a reading list.

        Stores without a reading list have nothing saved.
        """
        return set()
