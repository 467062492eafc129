"""Issue model and aggregation.

Compliance gaps and website findings are both reduced to severity-tagged
issues. The aggregator orders them Red, Amber, Green and folds them into an
immutable RAG tally used by the response and the advice generator.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """RAG severity of an outstanding issue."""

    RED = "red"  # Blocking gap
    AMBER = "amber"  # Moderate gap
    GREEN = "green"  # Minor hygiene


SEVERITY_ORDER = {
    Severity.RED: 0,
    Severity.AMBER: 1,
    Severity.GREEN: 2,
}


@dataclass(frozen=True)
class Issue:
    """One unmet signal."""

    key: str
    label: str
    severity: Severity

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class RagTally:
    """Count of issues per severity."""

    red: int = 0
    amber: int = 0
    green: int = 0

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> "RagTally":
        severities = [issue.severity for issue in issues]
        return cls(
            red=severities.count(Severity.RED),
            amber=severities.count(Severity.AMBER),
            green=severities.count(Severity.GREEN),
        )

    @property
    def total(self) -> int:
        return self.red + self.amber + self.green

    def to_dict(self) -> dict:
        return {"red": self.red, "amber": self.amber, "green": self.green}


@dataclass(frozen=True)
class AggregatedIssues:
    """Ordered issues with their tally."""

    issues: tuple[Issue, ...]
    rag: RagTally

    def keys_with(self, severity: Severity) -> list[str]:
        return [issue.key for issue in self.issues if issue.severity == severity]

    def to_list(self) -> list[dict]:
        return [issue.to_dict() for issue in self.issues]


def aggregate_issues(*sources: Iterable[Issue]) -> AggregatedIssues:
    """
    Merge issue lists into one severity-ordered list.

    Sources are concatenated in the order given, then stably sorted by
    severity, so declaration order is kept within each severity.

    Raises:
        ValueError: If the same issue key appears twice
    """
    merged = [issue for source in sources for issue in source]

    seen: set[str] = set()
    for issue in merged:
        if issue.key in seen:
            raise ValueError(f"Duplicate issue key: {issue.key}")
        seen.add(issue.key)

    ordered = tuple(sorted(merged, key=lambda issue: SEVERITY_ORDER[issue.severity]))
    return AggregatedIssues(issues=ordered, rag=RagTally.from_issues(ordered))
