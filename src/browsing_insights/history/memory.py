"""In-process history store backed by plain lists and dicts."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime

from browsing_insights.history.base import BaseHistoryStore
from browsing_insights.history.models import TabClosure, Visit
from browsing_insights.whitelist.models import WhitelistEntry


class InMemoryHistoryStore(BaseHistoryStore):
    """Holds a snapshot of one or more users' history in memory."""

    def __init__(
        self,
        visits: list[Visit] | None = None,
        closures: list[TabClosure] | None = None,
    ) -> None:
        self._visits: list[Visit] = list(visits or [])
        self._closures: dict[str, TabClosure] = {c.visit_id: c for c in closures or []}
        self._whitelist: dict[tuple[str, str], WhitelistEntry] = {}
        self._sessions: dict[str, tuple[str, str, list[str]]] = {}
        self._saved: dict[str, set[str]] = {}

    def add_visits(self, visits: list[Visit]) -> None:
        self._visits.extend(visits)

    def add_closures(self, closures: list[TabClosure]) -> None:
        for closure in closures:
            self._closures[closure.visit_id] = closure

    def fetch_visits(
        self,
        user_id: str,
        domain: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Visit]:
        matched = [
            v for v in self._visits
            if v.user_id == user_id
            and (domain is None or v.domain == domain)
            and (start is None or v.visited_at >= start)
            and (end is None or v.visited_at <= end)
        ]
        matched.sort(key=lambda v: v.visited_at)
        return matched

    def fetch_closures(self, visit_ids: list[str]) -> dict[str, TabClosure]:
        return {vid: self._closures[vid] for vid in visit_ids if vid in self._closures}

    def fetch_session_visit_ids(self, user_id: str) -> set[str]:
        ids: set[str] = set()
        for owner, _name, visit_ids in self._sessions.values():
            if owner == user_id:
                ids.update(visit_ids)
        return ids

    def attach_session(self, user_id: str, session_name: str, visit_ids: list[str]) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = (user_id, session_name, list(visit_ids))
        return session_id

    def mark_saved(self, user_id: str, visit_ids: list[str]) -> None:
        self._saved.setdefault(user_id, set()).update(visit_ids)

    def fetch_saved_visit_ids(self, user_id: str) -> set[str]:
        return set(self._saved.get(user_id, ()))

    def fetch_whitelist(self, user_id: str, active_only: bool = True) -> list[WhitelistEntry]:
        entries = [
            replace(e) for (owner, _domain), e in self._whitelist.items()
            if owner == user_id and (e.is_active or not active_only)
        ]
        entries.sort(key=lambda e: e.domain)
        return entries

    def upsert_whitelist_entry(self, entry: WhitelistEntry) -> WhitelistEntry:
        self._whitelist[(entry.user_id, entry.domain)] = replace(entry)
        return entry

    def deactivate_whitelist_entry(self, user_id: str, domain: str) -> bool:
        entry = self._whitelist.get((user_id, domain))
        if entry is None or not entry.is_active:
            return False
        entry.is_active = False
        return True
