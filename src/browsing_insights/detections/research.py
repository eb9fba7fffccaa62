"""Research-session detection over a user's full history."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from browsing_insights.config import DetectionConfig
from browsing_insights.insights.models import ResearchSessionCandidate
from browsing_insights.insights.sessions import ResearchSessionSegmenter

if TYPE_CHECKING:
    from browsing_insights.history.base import BaseHistoryStore

logger = logging.getLogger(__name__)


class ResearchSessionDetector:
    """Find bursts of tabs not yet attached to a saved research session."""

    def __init__(self, store: "BaseHistoryStore", config: DetectionConfig | None = None):
        self.store = store
        self.config = config or DetectionConfig()

    def detect(
        self,
        user_id: str,
        min_tabs: int | None = None,
        time_window: timedelta | None = None,
        min_duration: timedelta | None = None,
    ) -> list[ResearchSessionCandidate]:
        if time_window is None:
            time_window = timedelta(minutes=self.config.session_time_window_minutes)
        if min_duration is None:
            min_duration = timedelta(minutes=self.config.session_min_duration_minutes)
        segmenter = ResearchSessionSegmenter(
            min_tabs=self.config.session_min_tabs if min_tabs is None else min_tabs,
            time_window=time_window,
            min_duration=min_duration,
        )

        attached = self.store.fetch_session_visit_ids(user_id)
        visits = [v for v in self.store.fetch_visits(user_id) if v.visit_id not in attached]

        sessions = segmenter.segment(visits)
        logger.debug("Detected %s research sessions for user %s", len(sessions), user_id)
        return sessions

    def save(self, user_id: str, session: ResearchSessionCandidate) -> str:
        """Attach a detected session so later runs skip its visits."""
        return self.store.attach_session(user_id, session.session_name, session.page_visit_ids)
