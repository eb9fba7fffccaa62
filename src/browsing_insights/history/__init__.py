"""Browsing history data access: visits, tab closures and stores."""

from browsing_insights.history.base import BaseHistoryStore
from browsing_insights.history.memory import InMemoryHistoryStore
from browsing_insights.history.models import LinkPreview, TabClosure, Visit, VisitMetadata
from browsing_insights.history.parser import parse_closure, parse_visit
from browsing_insights.history.sqlite import SQLiteHistoryStore

__all__ = [
    "BaseHistoryStore",
    "InMemoryHistoryStore",
    "SQLiteHistoryStore",
    "parse_visit",
    "parse_closure",
    "Visit",
    "VisitMetadata",
    "LinkPreview",
    "TabClosure",
]
