"""Behavioral scoring: thresholds, tab lifecycle, routines, hoarder scoring, ranking, sessions."""

from browsing_insights.insights.comparison import ComparisonCalculator
from browsing_insights.insights.date_range import DateRange
from browsing_insights.insights.domain_context import DomainContextAnalyzer
from browsing_insights.insights.lifecycle import TabLifecycleCalculator
from browsing_insights.insights.models import (
    DomainContext,
    FactorScore,
    HoarderTabResult,
    ResearchSessionCandidate,
    RoutineDetectionResult,
    ScoreResult,
    SerialOpener,
    TabMetadata,
    ValueBreakdown,
    WhitelistOverride,
)
from browsing_insights.insights.ranking import ValueRanker
from browsing_insights.insights.routine import RoutineDetector
from browsing_insights.insights.scorer import HoarderScorer
from browsing_insights.insights.serial_openers import SerialOpenerInsightGenerator
from browsing_insights.insights.sessions import ResearchSessionSegmenter
from browsing_insights.insights.thresholds import AdaptiveThresholdCalculator

__all__ = [
    "AdaptiveThresholdCalculator",
    "TabLifecycleCalculator",
    "DomainContextAnalyzer",
    "RoutineDetector",
    "HoarderScorer",
    "ValueRanker",
    "ResearchSessionSegmenter",
    "SerialOpenerInsightGenerator",
    "ComparisonCalculator",
    "DateRange",
    "TabMetadata",
    "DomainContext",
    "RoutineDetectionResult",
    "FactorScore",
    "ScoreResult",
    "WhitelistOverride",
    "HoarderTabResult",
    "ValueBreakdown",
    "ResearchSessionCandidate",
    "SerialOpener",
]
