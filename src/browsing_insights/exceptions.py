"""Unified exception hierarchy for browsing-insights."""


class InsightsError(Exception):
    """Base exception for all browsing-insights errors."""


class InsightsValidationError(InsightsError, ValueError):
    """Clearly-invalid numeric or range input to an analysis call."""


class ConfigError(InsightsError):
    """Malformed configuration value."""


# History store
class HistoryStoreError(InsightsError):
    """Base exception for history store operations."""


class HistoryReadError(HistoryStoreError):
    """Failed to read visits, closures or whitelist entries."""


class HistoryWriteError(HistoryStoreError):
    """Failed to persist whitelist entries or research sessions."""


# Whitelist
class WhitelistError(InsightsError):
    """Invalid whitelist entry or reason."""
