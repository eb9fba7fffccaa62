"""Data models for the browsing history module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class LinkPreview:
    """Link-preview card fields captured by the browser extension."""

    image: str | None = None
    favicon: str | None = None
    description: str | None = None
    site_name: str | None = None
    author: str | None = None

    def has_useful_data(self) -> bool:
        return bool(self.image or self.favicon or self.description)

    def to_dict(self) -> dict:
        data = {
            "image": self.image,
            "favicon": self.favicon,
            "description": self.description,
            "site_name": self.site_name,
            "author": self.author,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class VisitMetadata:
    """Enrichment attached to a visit after ingestion."""

    pinned: bool = False
    preview: LinkPreview | None = None


@dataclass
class Visit:
    """One navigation event."""

    visit_id: str
    user_id: str
    url: str
    title: str
    domain: str
    visited_at: datetime
    duration_seconds: float | None = None
    active_duration_seconds: float | None = None
    engagement_rate: float | None = None  # 0.0-1.0
    opened_at: datetime | None = None  # tab-open time, when the extension reported it
    metadata: VisitMetadata = field(default_factory=VisitMetadata)
    category: str | None = None


@dataclass
class TabClosure:
    """Closure record reported by the client when a tab closes."""

    visit_id: str
    total_time_seconds: float = 0.0
    active_time_seconds: float = 0.0
    scroll_depth_percent: float | None = None
    closed_at: datetime | None = None
