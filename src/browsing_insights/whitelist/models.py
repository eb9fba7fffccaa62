"""Data models for the personal whitelist module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from browsing_insights.exceptions import WhitelistError

WORK_TOOL = "work_tool"
ENTERTAINMENT_ROUTINE = "entertainment_routine"
REFERENCE = "reference"
MANUAL = "manual"
ROUTINE_SITE = "routine_site"

REASONS = (WORK_TOOL, ENTERTAINMENT_ROUTINE, REFERENCE, MANUAL, ROUTINE_SITE)

# Never flag, no matter what.
STRONG_REASONS = frozenset({WORK_TOOL, MANUAL})
# Usually exclude, but a severe hoarder pattern overrides.
CONDITIONAL_REASONS = frozenset({ENTERTAINMENT_ROUTINE, REFERENCE, ROUTINE_SITE})


@dataclass
class WhitelistEntry:
    """A domain excluded from hoarder detection for one user."""

    user_id: str
    domain: str
    reason: str
    routine_score: int | None = None
    detected_at: datetime | None = None
    last_verified_at: datetime | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.reason not in REASONS:
            raise WhitelistError(f"Unknown whitelist reason: {self.reason!r}")

    @property
    def is_strong(self) -> bool:
        return self.reason in STRONG_REASONS

    @property
    def is_conditional(self) -> bool:
        return self.reason in CONDITIONAL_REASONS

    @property
    def is_manual(self) -> bool:
        return self.reason == MANUAL
