"""Dependency Inversion: depend on abstractions, not on concrete classes you construct.

Only ``directly-instantiated`` edges are candidates. The target must be a
concrete class in the model; interfaces, abstract classes and types the model
does not describe (framework or primitive types) are never flagged.
"""

from principle_check.model import DependencyEdge, DependencyKind, Model
from principle_check.report import Finding, Severity
from principle_check.rules.base import Rule


class DependencyInversionRule(Rule):
    name = "DIP"
    title = "Dependency Inversion Principle"
    description = "High-level modules should depend on abstractions, not on concrete implementations."

    def __init__(self, severity: Severity = Severity.WARNING, consumers_only: bool = False) -> None:
        super().__init__(severity)
        self.consumers_only = consumers_only

    def evaluate(self, model: Model) -> list[Finding]:
        findings: list[Finding] = []
        for edge in model.dependency_edges:
            if not self._is_candidate(model, edge):
                continue
            findings.append(self.finding(
                edge.from_class,
                f"directly instantiates concrete class {edge.to_type}; "
                "inject an abstraction through the constructor instead",
            ))
        return findings

    def _is_candidate(self, model: Model, edge: DependencyEdge) -> bool:
        if edge.kind != DependencyKind.DIRECTLY_INSTANTIATED:
            return False
        if not model.is_class(edge.to_type) or model.class_by_name(edge.to_type).is_abstract:
            return False

        source = model.class_by_name(edge.from_class)
        if not source.public_methods:
            return False
        if self.consumers_only and not model.edges_to(source.name):
            return False
        return True
