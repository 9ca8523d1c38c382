"""Single Responsibility: one class, one reason to change.

Methods are grouped into responsibility clusters by the first noun in their
name (``GetUsers`` -> "user", ``Authenticate`` -> "authenticate"). A class is
flagged when its methods span several clusters and no single interface it
implements ties them together. Property accessors are not clustered.
"""

from principle_check.config import DEFAULT_VERBS
from principle_check.model import ClassEntity, MethodSignature, Model
from principle_check.report import Finding, Severity
from principle_check.rules.base import Rule, split_words


class SingleResponsibilityRule(Rule):
    name = "SRP"
    title = "Single Responsibility Principle"
    description = "A class should have only one reason to change."

    def __init__(
        self,
        severity: Severity = Severity.WARNING,
        min_clusters: int = 2,
        min_cluster_size: int = 1,
        verbs: tuple[str, ...] = DEFAULT_VERBS,
    ) -> None:
        super().__init__(severity)
        self.min_clusters = min_clusters
        self.min_cluster_size = min_cluster_size
        self.verbs = frozenset(v.lower() for v in verbs)

    def evaluate(self, model: Model) -> list[Finding]:
        findings: list[Finding] = []
        for entity in model.classes:
            if len(entity.methods) <= 1:
                continue

            clusters = self.clusters(entity.methods)
            large = {k: v for k, v in clusters.items() if len(v) >= self.min_cluster_size}
            if len(large) < self.min_clusters:
                continue

            clustered = {m for names in large.values() for m in names}
            if _has_unifying_interface(model, entity, clustered):
                continue

            groups = "; ".join(f"{key}: {', '.join(names)}" for key, names in large.items())
            findings.append(self.finding(
                entity.name,
                f"methods span {len(large)} responsibilities ({groups}); "
                "consider splitting the class",
            ))
        return findings

    def clusters(self, methods: tuple[MethodSignature, ...]) -> dict[str, list[str]]:
        """Group method names by responsibility key, keeping declaration order."""
        clusters: dict[str, list[str]] = {}
        for method in methods:
            if method.is_accessor:
                continue
            clusters.setdefault(self.responsibility(method.name), []).append(method.name)
        return clusters

    def responsibility(self, method_name: str) -> str:
        words = [w.lower() for w in split_words(method_name)] or [method_name.lower()]
        key = next((w for w in words if w not in self.verbs), words[0])
        if len(key) > 3 and key.endswith("s") and not key.endswith("ss"):
            key = key[:-1]
        return key


def _has_unifying_interface(model: Model, entity: ClassEntity, method_names: set[str]) -> bool:
    for iface in model.interfaces_of(entity.name):
        if method_names <= set(iface.method_names):
            return True
    return False
