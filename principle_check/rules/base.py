"""Rule contract and the name heuristics shared by the rules.

Every rule is a pure function of a frozen Model: it reads entities, never
mutates them, performs no I/O and keeps no state between calls. The Checker
relies on this to run rules in any order or in parallel.
"""

import re
from abc import ABC, abstractmethod

from principle_check.model import Model
from principle_check.report import Finding, Severity

# Splits "HTTPClientGetUsers" -> HTTP, Client, Get, Users and "get_users" -> get, users.
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def split_words(name: str) -> list[str]:
    """Split a PascalCase, camelCase or snake_case identifier into words."""
    return _WORD_PATTERN.findall(name)


class Rule(ABC):
    """One design guideline, evaluated over a frozen model."""

    name: str = ""
    title: str = ""
    description: str = ""

    def __init__(self, severity: Severity = Severity.WARNING) -> None:
        self.severity = severity

    @abstractmethod
    def evaluate(self, model: Model) -> list[Finding]:
        """Return the findings for *model*, in a deterministic order."""

    def finding(self, subject: str, message: str, severity: Severity | None = None) -> Finding:
        return Finding(
            rule=self.name,
            subject=subject,
            message=message,
            severity=severity or self.severity,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(severity={self.severity.value!r})"
