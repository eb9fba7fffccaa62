"""Period-over-period comparison of serial openers."""

from __future__ import annotations

from browsing_insights.insights.models import SerialOpener

SIGNIFICANT_CHANGE_THRESHOLD = 20.0

BEHAVIOR_SEVERITY = {
    "compulsive_checking": 4,
    "frequent_monitoring": 3,
    "regular_reference": 2,
    "periodic_revisit": 1,
}


def percent_change(current: float, previous: float) -> float:
    if current == 0 and previous == 0:
        return 0.0
    if previous == 0:
        return 100.0
    if current == 0:
        return -100.0
    return round((current - previous) / previous * 100.0, 1)


def trend(current: float, previous: float) -> str:
    percent = percent_change(current, previous)
    if percent > SIGNIFICANT_CHANGE_THRESHOLD:
        return "increasing"
    if percent < -SIGNIFICANT_CHANGE_THRESHOLD:
        return "decreasing"
    return "stable"


def behavior_severity(behavior_type: str | None) -> int:
    return BEHAVIOR_SEVERITY.get(behavior_type or "", 0)


def change_direction(previous_behavior: str | None, current_behavior: str | None) -> str:
    before, after = behavior_severity(previous_behavior), behavior_severity(current_behavior)
    if after > before:
        return "worsened"
    if after < before:
        return "improved"
    return "unchanged"


class ComparisonCalculator:
    """Diff current-period serial openers against the previous period."""

    def calculate(self, current: list[SerialOpener], previous: list[SerialOpener]) -> dict:
        current_map = _by_url(current)
        previous_map = _by_url(previous)

        overall = self._overall(current, previous)
        changes = self._behavioral_changes(current_map, previous_map)
        return {
            "overall": overall,
            "by_resource": self._resource_comparisons(current_map, previous_map),
            "behavioral_changes": changes,
            "summary": self._summary(overall, changes),
        }

    def _overall(self, current: list[SerialOpener], previous: list[SerialOpener]) -> dict:
        return {
            "total_serial_openers": _metric(len(current), len(previous)),
            "total_visits": _metric(
                sum(o.visit_count for o in current),
                sum(o.visit_count for o in previous),
            ),
            "total_engagement_seconds": _metric(
                sum(o.total_engagement_seconds for o in current),
                sum(o.total_engagement_seconds for o in previous),
            ),
        }

    def _resource_comparisons(self, current_map: dict, previous_map: dict) -> list[dict]:
        comparisons = []
        for url in list(dict.fromkeys([*current_map, *previous_map])):
            cur = current_map.get(url)
            prev = previous_map.get(url)
            if cur and prev:
                if cur.visit_count == prev.visit_count and cur.behavior_type == prev.behavior_type:
                    continue
                comparisons.append({
                    "url": url,
                    "title": cur.title,
                    "domain": cur.domain,
                    "status": "continued",
                    "visit_count_change": cur.visit_count - prev.visit_count,
                    "visit_count_percent_change": percent_change(cur.visit_count, prev.visit_count),
                    "engagement_change": cur.total_engagement_seconds - prev.total_engagement_seconds,
                    "behavior_type_current": cur.behavior_type,
                    "behavior_type_previous": prev.behavior_type,
                    "behavior_changed": cur.behavior_type != prev.behavior_type,
                })
            elif cur:
                comparisons.append({
                    "url": url,
                    "title": cur.title,
                    "domain": cur.domain,
                    "status": "new",
                    "visit_count": cur.visit_count,
                    "visit_count_change": cur.visit_count,
                    "visit_count_percent_change": 100.0,
                    "behavior_type": cur.behavior_type,
                    "insight": "New pattern emerged this period",
                })
            else:
                comparisons.append({
                    "url": url,
                    "title": prev.title,
                    "domain": prev.domain,
                    "status": "resolved",
                    "previous_visit_count": prev.visit_count,
                    "visit_count_change": -prev.visit_count,
                    "visit_count_percent_change": -100.0,
                    "insight": "No longer a serial opener - pattern improved!",
                })
        comparisons.sort(key=lambda c: -abs(c["visit_count_change"]))
        return comparisons

    def _behavioral_changes(self, current_map: dict, previous_map: dict) -> list[dict]:
        changes = []
        for url, cur in current_map.items():
            prev = previous_map.get(url)
            if prev is None or cur.behavior_type == prev.behavior_type:
                continue
            changes.append({
                "url": url,
                "title": cur.title,
                "domain": cur.domain,
                "from": prev.behavior_type,
                "to": cur.behavior_type,
                "direction": change_direction(prev.behavior_type, cur.behavior_type),
                "visit_count_change": cur.visit_count - prev.visit_count,
            })
        changes.sort(key=lambda c: -behavior_severity(c["to"]))
        return changes

    def _summary(self, overall: dict, changes: list[dict]) -> str:
        visits = overall["total_visits"]
        if visits["trend"] == "increasing":
            messages = [f"Serial opener activity increased by {abs(visits['percent_change']):.0f}%"]
        elif visits["trend"] == "decreasing":
            messages = [f"Serial opener activity decreased by {abs(visits['percent_change']):.0f}% - improvement!"]
        else:
            messages = ["Serial opener activity remained stable"]

        worsened = sum(1 for c in changes if c["direction"] == "worsened")
        improved = sum(1 for c in changes if c["direction"] == "improved")
        if worsened:
            messages.append(f"{worsened} resources worsened")
        if improved:
            messages.append(f"{improved} resources improved")
        return ". ".join(messages)


def _by_url(openers: list[SerialOpener]) -> dict[str, SerialOpener]:
    return {(o.normalized_url or o.url): o for o in openers}


def _metric(current: float, previous: float) -> dict:
    return {
        "current": current,
        "previous": previous,
        "change": current - previous,
        "percent_change": percent_change(current, previous),
        "trend": trend(current, previous),
    }
