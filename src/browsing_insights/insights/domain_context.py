"""Context-aware domain classification for hoarder detection.

Separates productivity tools, content sites and active work so that the
scorer can exclude the former and be strict with single-visit content.
"""

from __future__ import annotations

import re

from browsing_insights.insights.models import DomainContext, TabMetadata
from browsing_insights.whitelist.models import WhitelistEntry

# Never flagged (email, calendars).
UNIVERSAL_WHITELIST = (
    "mail.google.com",
    "gmail.com",
    "calendar.google.com",
    "outlook.com",
    "outlook.live.com",
)

# Local development, API testing, staging. Leading "." matches any *.tld.
DEVELOPMENT_DOMAINS = (
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    ".local",
    ".test",
    ".dev",
    "postman.co",
    "app.insomnia.rest",
    "httpie.io",
)

# Trailing "." matches a host prefix, e.g. "courses." -> courses.example.org.
EDUCATIONAL_SITES = (
    "courses.",
    "learn.",
    "academy.",
    "udemy.com",
    "coursera.org",
    "edx.org",
    "pluralsight.com",
    "egghead.io",
    "frontendmasters.com",
    "udacity.com",
    "skillshare.com",
    "datacamp.com",
    "codecademy.com",
)

PRODUCTIVITY_TOOLS = (
    "mail.google.com",
    "gmail.com",
    "outlook.com",
    "calendar.google.com",
    "notion.so",
    "slack.com",
    "discord.com",
    "teams.microsoft.com",
    "todoist.com",
    "trello.com",
    "asana.com",
    "linear.app",
    "figma.com",
    "miro.com",
)

CONTENT_SITES = (
    "medium.com",
    "dev.to",
    "substack.com",
    "news.ycombinator.com",
    "reddit.com",
    "twitter.com",
    "x.com",
    "youtube.com",
    "vimeo.com",
    "instagram.com",
)

CODE_PLATFORMS = ("github.com", "gitlab.com", "bitbucket.org")

DOCUMENTATION_SITES = (
    "stackoverflow.com",
    "docs.",
    "developer.",
    "api.",
    "readthedocs.io",
)

_ACTIVE_WORK_PATTERNS = (
    re.compile(r"/(pull|issues|commits|compare)/"),
    re.compile(r"/projects/\d+/(merge_requests|issues)"),
    re.compile(r"/-/(merge_requests|issues)/"),
)

DEVELOPMENT = "development"
EDUCATIONAL = "educational"
PRODUCTIVITY_TOOL = "productivity_tool"
CONTENT_SITE = "content_site"
CODE_PLATFORM = "code_platform"
DOCUMENTATION = "documentation"
GENERAL = "general"


def matches_domain(domain: str, pattern: str) -> bool:
    """Match exact host, subdomain, ``prefix.`` or ``.suffix`` patterns."""
    if pattern.startswith("."):
        return domain.endswith(pattern)
    if pattern.endswith("."):
        return domain.startswith(pattern)
    return domain == pattern or domain.endswith(f".{pattern}")


def _matches_any(domain: str, patterns: tuple[str, ...]) -> bool:
    return any(matches_domain(domain, p) for p in patterns)


class DomainContextAnalyzer:
    """Build a DomainContext for one tab.

    Args:
        whitelist_entry: The user's active personal whitelist entry covering
            this domain, if any (see ``PersonalWhitelist.find``).
    """

    def __init__(
        self,
        domain: str,
        url: str,
        tab_metadata: TabMetadata,
        whitelist_entry: WhitelistEntry | None = None,
    ):
        self.domain = domain
        self.url = url or ""
        self.tab = tab_metadata
        self.whitelist_entry = whitelist_entry

    def analyze(self) -> DomainContext:
        is_whitelisted, reason, is_conditional = self._check_whitelist()
        return DomainContext(
            domain_type=self.classify_domain(),
            is_whitelisted=is_whitelisted,
            whitelist_reason=reason,
            is_conditional_whitelist=is_conditional,
            should_apply_strict_rules=self._strict_rules(),
            should_apply_lenient_rules=self._lenient_rules(),
            context_notes=self._context_notes(),
        )

    def classify_domain(self) -> str:
        if self.is_development:
            return DEVELOPMENT
        if self.is_educational:
            return EDUCATIONAL
        if self.is_productivity_tool:
            return PRODUCTIVITY_TOOL
        if self.is_content_site:
            return CONTENT_SITE
        if self.is_code_platform:
            return CODE_PLATFORM
        if self.is_documentation:
            return DOCUMENTATION
        return GENERAL

    @property
    def is_development(self) -> bool:
        return _matches_any(self.domain, DEVELOPMENT_DOMAINS)

    @property
    def is_educational(self) -> bool:
        return _matches_any(self.domain, EDUCATIONAL_SITES) or "linkedin.com/learning" in self.url

    @property
    def is_productivity_tool(self) -> bool:
        return _matches_any(self.domain, PRODUCTIVITY_TOOLS)

    @property
    def is_content_site(self) -> bool:
        return _matches_any(self.domain, CONTENT_SITES)

    @property
    def is_code_platform(self) -> bool:
        return _matches_any(self.domain, CODE_PLATFORMS)

    @property
    def is_documentation(self) -> bool:
        return _matches_any(self.domain, DOCUMENTATION_SITES)

    def _looks_like_active_work(self) -> bool:
        return any(p.search(self.url) for p in _ACTIVE_WORK_PATTERNS)

    def _looks_like_random_repo(self) -> bool:
        return self.is_code_platform and not self._looks_like_active_work() and self.tab.is_single_visit

    def _recent_activity(self) -> bool:
        return self.tab.days_since_last_activity < 1.0

    def _frequent_revisits(self) -> bool:
        return self.tab.visit_count >= 3

    def _strict_rules(self) -> bool:
        if self.is_content_site and self.tab.is_single_visit:
            return True
        if self.is_documentation and self.tab.is_single_visit:
            return True
        return self._looks_like_random_repo()

    def _lenient_rules(self) -> bool:
        if self.is_development or self.is_educational:
            return True
        if self.is_productivity_tool and self._recent_activity():
            return True
        if self.is_code_platform and self._looks_like_active_work():
            return True
        return self.is_documentation and self._frequent_revisits()

    def _check_whitelist(self) -> tuple[bool, str | None, bool]:
        if self.is_development:
            return True, "development_domain", False
        if _matches_any(self.domain, UNIVERSAL_WHITELIST):
            return True, "universal_whitelist", False
        if self.whitelist_entry is not None:
            return True, self.whitelist_entry.reason, self.whitelist_entry.is_conditional
        return False, None, False

    def _context_notes(self) -> str:
        notes = []
        if self.is_development:
            notes.append("Development/testing environment - never flagged as hoarder")
        if self.is_educational:
            notes.append("Educational platform - likely active learning material")
        if self.is_productivity_tool:
            if self._recent_activity():
                notes.append("Productivity tool with recent activity - likely intentional")
            else:
                notes.append("Productivity tool with no recent activity - possible forgotten tab")
        if self.is_content_site and self.tab.is_single_visit:
            notes.append('Content site visited once - classic "read later" pattern')
        if self.is_documentation:
            if self._frequent_revisits():
                notes.append("Frequently revisited documentation - likely a reference")
            else:
                notes.append("Documentation visited once - possible unread article")
        if self.is_code_platform:
            if self._looks_like_active_work():
                notes.append("Active work (PR/issue) - should not be flagged")
            elif self._looks_like_random_repo():
                notes.append("Random repository visit - potential hoarder")
        return "; ".join(notes)
