"""Detection thresholds, overridable from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from browsing_insights.exceptions import ConfigError

ENV_PREFIX = "BROWSING_INSIGHTS_"


@dataclass(frozen=True)
class DetectionConfig:
    """Named thresholds shared by the detectors.

    Every field can be overridden with ``BROWSING_INSIGHTS_<FIELD_NAME>``,
    e.g. ``BROWSING_INSIGHTS_HOARDER_THRESHOLD=65``.
    """

    hoarder_threshold: int = 60
    high_confidence_threshold: int = 80
    low_confidence_threshold: int = 40
    routine_threshold: int = 70
    lookback_days: int = 30
    routine_lookback_days: int = 30
    session_min_tabs: int = 3
    session_time_window_minutes: float = 15.0
    session_min_duration_minutes: float = 10.0
    whitelist_top_domains: int = 20
    whitelist_stale_days: int = 7

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "DetectionConfig":
        """Load overrides from environment variables."""
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None or raw.strip() == "":
                continue
            caster = int if f.type in ("int", int) else float
            try:
                overrides[f.name] = caster(raw.strip())
            except ValueError as e:
                raise ConfigError(
                    f"{ENV_PREFIX}{f.name.upper()} must be a number (got {raw!r})"
                ) from e
        return cls(**overrides)
