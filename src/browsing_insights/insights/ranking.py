"""Re-rank hoarder tabs by estimated user value.

A ten-day-old unread tutorial and a two-day-old search result can have
similar hoarder scores; multiplying by age and content-type weights surfaces
the forgotten gems ahead of the noise.
"""

from __future__ import annotations

import re
from dataclasses import replace

from browsing_insights.insights.models import HoarderTabResult, ValueBreakdown

CONTENT_TYPE_WEIGHTS = {
    # Content meant to be consumed
    "article": 1.5,
    "documentation": 1.5,
    "tutorial": 1.5,
    "blog_post": 1.4,
    # Work-related
    "code_review": 1.2,
    "issue_tracker": 1.1,
    "project_page": 1.0,
    # Ephemeral
    "search_results": 0.7,
    "social_media": 0.6,
    "news_feed": 0.6,
    "unknown": 1.0,
}

# (minimum age in days, multiplier), oldest tier first.
AGE_WEIGHTS = (
    (7.0, 1.5),
    (5.0, 1.3),
    (3.0, 1.0),
    (1.0, 0.7),
)
FRESH_TAB_WEIGHT = 0.5

_DOC_DOMAIN = re.compile(r"docs\.|developer\.|api\.")
_ARTICLE_DOMAIN = re.compile(r"medium\.com|dev\.to|substack\.com|blog\.|article")
_ARTICLE_PATH = re.compile(r"/blog/|/article/|/post/|/tutorial/")
_REVIEW_PATH = re.compile(r"/(pull|merge_requests)/")

SOCIAL_MEDIA = ("twitter.com", "x.com", "facebook.com", "instagram.com", "linkedin.com", "tiktok.com", "reddit.com")
SEARCH_ENGINES = ("google.com", "bing.com", "duckduckgo.com")
NEWS_MARKERS = ("news", "hackernews", "nytimes.com", "cnn.com", "bbc.com")


def age_weight(age_days: float | None) -> float:
    if age_days is None:
        return 1.0
    for min_age, multiplier in AGE_WEIGHTS:
        if age_days >= min_age:
            return multiplier
    return FRESH_TAB_WEIGHT


def classify_content_type(domain: str, url: str) -> str:
    """Infer content type from domain and URL patterns; first match wins."""
    domain = domain or ""
    url = url or ""
    if _DOC_DOMAIN.search(domain) or "stackoverflow.com" in domain or "readthedocs.io" in domain:
        return "documentation"
    if _ARTICLE_DOMAIN.search(domain) or _ARTICLE_PATH.search(url):
        return "article"
    is_code_host = "github.com" in domain or "gitlab.com" in domain
    if is_code_host and _REVIEW_PATH.search(url):
        return "code_review"
    if is_code_host and "/issues/" in url:
        return "issue_tracker"
    if any(_host_matches(domain, s) for s in SOCIAL_MEDIA):
        return "social_media"
    if any(e in domain for e in SEARCH_ENGINES) and "mail." not in domain:
        return "search_results"
    if any(n in domain for n in NEWS_MARKERS) or "reddit.com/r/" in url:
        return "news_feed"
    return "unknown"


def content_type_weight(domain: str, url: str) -> float:
    return CONTENT_TYPE_WEIGHTS.get(classify_content_type(domain, url), 1.0)


class ValueRanker:
    """Annotate hoarder tabs with ``value_rank`` and sort by it, descending."""

    def rank(self, tabs: list[HoarderTabResult]) -> list[HoarderTabResult]:
        ranked = [self._annotate(tab) for tab in tabs]
        # Stable sort: equal values keep their incoming order.
        ranked.sort(key=lambda tab: -tab.value_rank)
        return ranked

    def _annotate(self, tab: HoarderTabResult) -> HoarderTabResult:
        base = tab.hoarder_score or 0
        a_weight = age_weight(tab.tab_age_days)
        content_type = classify_content_type(tab.domain, tab.url)
        c_weight = CONTENT_TYPE_WEIGHTS.get(content_type, 1.0)
        value = round(base * a_weight * c_weight, 2)
        return replace(
            tab,
            value_rank=value,
            value_breakdown=ValueBreakdown(
                base_score=base,
                age_weight=a_weight,
                content_weight=c_weight,
                content_type=content_type,
                final_value=value,
            ),
        )


def _host_matches(domain: str, host: str) -> bool:
    return domain == host or domain.endswith(f".{host}")
