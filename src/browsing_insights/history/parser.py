"""Parse raw ingestion rows into normalized visit and closure records."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse

import dateutil.parser

from browsing_insights.history.models import LinkPreview, TabClosure, Visit, VisitMetadata


def parse_visit(
    raw: dict,
    excluded_domains: list[str] | None = None,
    max_url_length: int = 2000,
    max_title_length: int = 300,
) -> Visit | None:
    """Normalize one raw visit row; returns None for filtered/invalid rows."""
    url = (raw.get("url") or "").strip()
    if not url:
        return None
    if len(url) > max_url_length:
        url = url[:max_url_length]

    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        return None

    domain = normalize_domain(raw.get("domain") or parsed.netloc)
    if not domain:
        return None

    if is_excluded_domain(domain, excluded_domains or []):
        return None

    visit_id = str(raw.get("id") or raw.get("visit_id") or "").strip()
    user_id = str(raw.get("user_id") or "").strip()
    visited_at = parse_timestamp(raw.get("visited_at"))
    if not visit_id or not user_id or visited_at is None:
        return None

    engagement_rate = _optional_float(raw.get("engagement_rate"))
    if engagement_rate is not None and not 0.0 <= engagement_rate <= 1.0:
        return None

    duration = _optional_float(raw.get("duration_seconds"))
    active_duration = _optional_float(raw.get("active_duration_seconds"))
    if (duration is not None and duration < 0) or (active_duration is not None and active_duration < 0):
        return None
    if duration is not None and active_duration is not None and active_duration > duration:
        active_duration = duration

    title = (raw.get("title") or "").strip()
    if len(title) > max_title_length:
        title = title[:max_title_length]

    return Visit(
        visit_id=visit_id,
        user_id=user_id,
        url=url,
        title=title,
        domain=domain,
        visited_at=visited_at,
        duration_seconds=duration,
        active_duration_seconds=active_duration,
        engagement_rate=engagement_rate,
        opened_at=parse_timestamp(raw.get("opened_at")),
        metadata=parse_metadata(raw.get("metadata")),
        category=raw.get("category") or None,
    )


def parse_closure(raw: dict) -> TabClosure | None:
    """Normalize one raw tab-closure row."""
    visit_id = str(raw.get("page_visit_id") or raw.get("visit_id") or "").strip()
    if not visit_id:
        return None
    total = _optional_float(raw.get("total_time_seconds")) or 0.0
    active = _optional_float(raw.get("active_time_seconds")) or 0.0
    if total < 0 or active < 0:
        return None
    return TabClosure(
        visit_id=visit_id,
        total_time_seconds=total,
        active_time_seconds=min(active, total),
        scroll_depth_percent=_optional_float(raw.get("scroll_depth_percent")),
        closed_at=parse_timestamp(raw.get("closed_at")),
    )


def parse_metadata(raw: dict | None) -> VisitMetadata:
    """Turn the free-form metadata map into a typed struct.

    Both ``"pinned"`` and ``":pinned"`` keys are honored; the extension has
    shipped both spellings.
    """
    if not isinstance(raw, dict):
        return VisitMetadata()

    pinned = raw.get("pinned") is True or raw.get(":pinned") is True

    preview = None
    raw_preview = raw.get("preview")
    if isinstance(raw_preview, dict):
        preview = LinkPreview(
            image=raw_preview.get("image") or None,
            favicon=raw_preview.get("favicon") or None,
            description=raw_preview.get("description") or None,
            site_name=raw_preview.get("siteName") or raw_preview.get("site_name") or None,
            author=raw_preview.get("author") or None,
        )

    return VisitMetadata(pinned=pinned, preview=preview)


def parse_timestamp(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return dateutil.parser.isoparse(str(value).strip())
    except (ValueError, OverflowError):
        return None


def normalize_domain(netloc: str) -> str:
    domain = (netloc or "").strip().lower()
    if ":" in domain:
        domain = domain.split(":", 1)[0]
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def is_excluded_domain(domain: str, excluded_domains: list[str]) -> bool:
    for blocked in excluded_domains:
        b = blocked.strip().lower()
        if not b:
            continue
        if domain == b or domain.endswith(f".{b}"):
            return True
    return False


def _optional_float(value) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
