"""SQLite-backed history store."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

from browsing_insights.exceptions import HistoryReadError, HistoryWriteError
from browsing_insights.history.base import BaseHistoryStore
from browsing_insights.history.models import TabClosure, Visit, VisitMetadata
from browsing_insights.history.parser import parse_metadata, parse_timestamp
from browsing_insights.whitelist.models import WhitelistEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS page_visits (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    url TEXT NOT NULL,
    title TEXT NOT NULL DEFAULT '',
    domain TEXT NOT NULL,
    visited_at TEXT NOT NULL,
    duration_seconds REAL,
    active_duration_seconds REAL,
    engagement_rate REAL,
    opened_at TEXT,
    metadata TEXT,
    category TEXT
);
CREATE INDEX IF NOT EXISTS idx_page_visits_user_time ON page_visits(user_id, visited_at);
CREATE INDEX IF NOT EXISTS idx_page_visits_user_domain ON page_visits(user_id, domain);

CREATE TABLE IF NOT EXISTS tab_closures (
    page_visit_id TEXT PRIMARY KEY,
    total_time_seconds REAL NOT NULL DEFAULT 0,
    active_time_seconds REAL NOT NULL DEFAULT 0,
    scroll_depth_percent REAL,
    closed_at TEXT
);

CREATE TABLE IF NOT EXISTS personal_whitelists (
    user_id TEXT NOT NULL,
    domain TEXT NOT NULL,
    whitelist_reason TEXT NOT NULL,
    routine_score INTEGER,
    detected_at TEXT,
    last_verified_at TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    PRIMARY KEY (user_id, domain)
);

CREATE TABLE IF NOT EXISTS research_sessions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    session_name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS reading_list_items (
    user_id TEXT NOT NULL,
    page_visit_id TEXT NOT NULL,
    PRIMARY KEY (user_id, page_visit_id)
);

CREATE TABLE IF NOT EXISTS research_session_tabs (
    research_session_id TEXT NOT NULL,
    page_visit_id TEXT NOT NULL,
    PRIMARY KEY (research_session_id, page_visit_id)
);
"""


class SQLiteHistoryStore(BaseHistoryStore):
    """History store persisted in a single SQLite database file."""

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self.db_path = str(db_path)
        try:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise HistoryReadError(f"Cannot open history database at {self.db_path}: {e}") from e

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SQLiteHistoryStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def add_visits(self, visits: list[Visit]) -> None:
        rows = [
            (
                v.visit_id,
                v.user_id,
                v.url,
                v.title,
                v.domain,
                _to_db(v.visited_at),
                v.duration_seconds,
                v.active_duration_seconds,
                v.engagement_rate,
                _to_db(v.opened_at),
                _dump_metadata(v.metadata),
                v.category,
            )
            for v in visits
        ]
        self._write(
            "INSERT OR REPLACE INTO page_visits VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            rows,
        )

    def add_closures(self, closures: list[TabClosure]) -> None:
        rows = [
            (
                c.visit_id,
                c.total_time_seconds,
                c.active_time_seconds,
                c.scroll_depth_percent,
                _to_db(c.closed_at),
            )
            for c in closures
        ]
        self._write("INSERT OR REPLACE INTO tab_closures VALUES (?, ?, ?, ?, ?)", rows)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_visits(
        self,
        user_id: str,
        domain: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Visit]:
        clauses = ["user_id = ?"]
        params: list = [user_id]
        if domain is not None:
            clauses.append("domain = ?")
            params.append(domain)
        if start is not None:
            clauses.append("visited_at >= ?")
            params.append(_to_db(start))
        if end is not None:
            clauses.append("visited_at <= ?")
            params.append(_to_db(end))

        rows = self._read(
            f"SELECT * FROM page_visits WHERE {' AND '.join(clauses)} ORDER BY visited_at, id",
            params,
        )
        visits = [self._row_to_visit(row) for row in rows]
        visits.sort(key=lambda v: v.visited_at)
        return visits

    def fetch_closures(self, visit_ids: list[str]) -> dict[str, TabClosure]:
        if not visit_ids:
            return {}
        closures: dict[str, TabClosure] = {}
        # SQLite caps bound parameters; query in chunks.
        for i in range(0, len(visit_ids), 500):
            chunk = visit_ids[i:i + 500]
            placeholders = ", ".join("?" for _ in chunk)
            rows = self._read(
                f"SELECT * FROM tab_closures WHERE page_visit_id IN ({placeholders})",
                chunk,
            )
            for row in rows:
                closures[row["page_visit_id"]] = TabClosure(
                    visit_id=row["page_visit_id"],
                    total_time_seconds=row["total_time_seconds"] or 0.0,
                    active_time_seconds=row["active_time_seconds"] or 0.0,
                    scroll_depth_percent=row["scroll_depth_percent"],
                    closed_at=parse_timestamp(row["closed_at"]),
                )
        return closures

    def fetch_session_visit_ids(self, user_id: str) -> set[str]:
        rows = self._read(
            """
            SELECT t.page_visit_id AS page_visit_id
            FROM research_session_tabs t
            JOIN research_sessions s ON s.id = t.research_session_id
            WHERE s.user_id = ?
            """,
            (user_id,),
        )
        return {row["page_visit_id"] for row in rows}

    def fetch_saved_visit_ids(self, user_id: str) -> set[str]:
        rows = self._read("SELECT page_visit_id FROM reading_list_items WHERE user_id = ?", (user_id,))
        return {row["page_visit_id"] for row in rows}

    def fetch_whitelist(self, user_id: str, active_only: bool = True) -> list[WhitelistEntry]:
        sql = "SELECT * FROM personal_whitelists WHERE user_id = ?"
        if active_only:
            sql += " AND is_active = 1"
        rows = self._read(sql + " ORDER BY domain", (user_id,))
        return [
            WhitelistEntry(
                user_id=row["user_id"],
                domain=row["domain"],
                reason=row["whitelist_reason"],
                routine_score=row["routine_score"],
                detected_at=parse_timestamp(row["detected_at"]),
                last_verified_at=parse_timestamp(row["last_verified_at"]),
                is_active=bool(row["is_active"]),
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def attach_session(self, user_id: str, session_name: str, visit_ids: list[str]) -> str:
        session_id = uuid.uuid4().hex
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO research_sessions VALUES (?, ?, ?)",
                    (session_id, user_id, session_name),
                )
                self._conn.executemany(
                    "INSERT OR IGNORE INTO research_session_tabs VALUES (?, ?)",
                    [(session_id, vid) for vid in visit_ids],
                )
        except sqlite3.Error as e:
            raise HistoryWriteError(f"Failed saving research session: {e}") from e
        return session_id

    def mark_saved(self, user_id: str, visit_ids: list[str]) -> None:
        self._write(
            "INSERT OR IGNORE INTO reading_list_items VALUES (?, ?)",
            [(user_id, vid) for vid in visit_ids],
        )

    def upsert_whitelist_entry(self, entry: WhitelistEntry) -> WhitelistEntry:
        self._write(
            "INSERT OR REPLACE INTO personal_whitelists VALUES (?, ?, ?, ?, ?, ?, ?)",
            [(
                entry.user_id,
                entry.domain,
                entry.reason,
                entry.routine_score,
                _to_db(entry.detected_at),
                _to_db(entry.last_verified_at),
                1 if entry.is_active else 0,
            )],
        )
        return entry

    def deactivate_whitelist_entry(self, user_id: str, domain: str) -> bool:
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "UPDATE personal_whitelists SET is_active = 0 "
                    "WHERE user_id = ? AND domain = ? AND is_active = 1",
                    (user_id, domain),
                )
        except sqlite3.Error as e:
            raise HistoryWriteError(f"Failed deactivating whitelist entry {domain}: {e}") from e
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read(self, sql: str, params) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise HistoryReadError(f"Failed querying history database: {e}") from e

    def _write(self, sql: str, rows: list[tuple]) -> None:
        try:
            with self._conn:
                self._conn.executemany(sql, rows)
        except sqlite3.Error as e:
            raise HistoryWriteError(f"Failed writing history database: {e}") from e

    @staticmethod
    def _row_to_visit(row: sqlite3.Row) -> Visit:
        metadata = VisitMetadata()
        if row["metadata"]:
            try:
                metadata = parse_metadata(json.loads(row["metadata"]))
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed metadata on visit %s", row["id"])
        return Visit(
            visit_id=row["id"],
            user_id=row["user_id"],
            url=row["url"],
            title=row["title"] or "",
            domain=row["domain"],
            visited_at=parse_timestamp(row["visited_at"]),
            duration_seconds=row["duration_seconds"],
            active_duration_seconds=row["active_duration_seconds"],
            engagement_rate=row["engagement_rate"],
            opened_at=parse_timestamp(row["opened_at"]),
            metadata=metadata,
            category=row["category"],
        )


def _dump_metadata(metadata: VisitMetadata) -> str | None:
    data: dict = {}
    if metadata.pinned:
        data["pinned"] = True
    if metadata.preview is not None:
        preview = metadata.preview.to_dict()
        if "site_name" in preview:
            preview["siteName"] = preview.pop("site_name")
        data["preview"] = preview
    return json.dumps(data) if data else None


def _to_db(value: datetime | None) -> str | None:
    """Fixed-width ISO text so that SQL comparisons order chronologically.

    Aware values are stored in UTC; naive values are stored as given.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="microseconds")
