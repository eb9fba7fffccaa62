"""Personal whitelists: routine domains excluded from hoarder detection."""

from browsing_insights.whitelist.models import (
    CONDITIONAL_REASONS,
    REASONS,
    STRONG_REASONS,
    WhitelistEntry,
)
from browsing_insights.whitelist.registry import PersonalWhitelist

__all__ = [
    "WhitelistEntry",
    "PersonalWhitelist",
    "REASONS",
    "STRONG_REASONS",
    "CONDITIONAL_REASONS",
]
