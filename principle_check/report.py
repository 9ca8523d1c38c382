"""Findings and the ordered Report produced by one Checker run.

Rendering:
    report.render_text()   -> plain text, one line per finding, grouped by rule
    report.to_dict()       -> {"summary": ..., "findings": [...]} for JSON output
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Finding:
    """A single reported rule violation."""

    rule: str
    subject: str
    message: str
    severity: Severity = Severity.WARNING

    def to_dict(self) -> dict[str, str]:
        return {
            "rule":     self.rule,
            "subject":  self.subject,
            "message":  self.message,
            "severity": self.severity.value,
        }

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.subject}: {self.message}"


@dataclass(frozen=True)
class Report:
    """Ordered findings of one run. Order is fixed by the Checker."""

    findings: tuple[Finding, ...] = ()

    def __len__(self) -> int:
        return len(self.findings)

    def __iter__(self) -> Iterator[Finding]:
        return iter(self.findings)

    @property
    def is_empty(self) -> bool:
        return not self.findings

    @property
    def has_warnings(self) -> bool:
        return any(f.severity is Severity.WARNING for f in self.findings)

    @property
    def exit_code(self) -> int:
        """0 when nothing needs attention, 1 when any warning was reported."""
        return 1 if self.has_warnings else 0

    def for_rule(self, rule: str) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.rule == rule)

    def rules(self) -> list[str]:
        """Rule names in the order they first appear."""
        names: list[str] = []
        for f in self.findings:
            if f.rule not in names:
                names.append(f.rule)
        return names

    def summary(self) -> dict[str, Any]:
        by_severity = {s.value: 0 for s in Severity}
        by_rule: dict[str, int] = {}

        for f in self.findings:
            by_severity[f.severity.value] += 1
            by_rule[f.rule] = by_rule.get(f.rule, 0) + 1

        return {
            "total":       len(self.findings),
            "by_severity": by_severity,
            "by_rule":     by_rule,
        }

    def to_records(self) -> list[dict[str, str]]:
        return [f.to_dict() for f in self.findings]

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary":  self.summary(),
            "findings": self.to_records(),
        }

    def render_text(self) -> str:
        if self.is_empty:
            return "No findings."

        lines: list[str] = []
        for rule in self.rules():
            lines.append(f"{rule}:")
            lines.extend(f"  {finding}" for finding in self.for_rule(rule))
        counts = self.summary()["by_severity"]
        lines.append(
            f"{len(self.findings)} finding(s): "
            f"{counts['warning']} warning(s), {counts['info']} info"
        )
        return "\n".join(lines)
