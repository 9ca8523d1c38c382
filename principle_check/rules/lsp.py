"""Liskov Substitution: an override must not add side effects the base does not declare.

The classic case is ``Square`` overriding the ``Width`` setter of
``Rectangle`` so that it also writes ``Height``. Side effects come from each
method's declared ``also_mutates`` set; nothing is inferred.
"""

from loguru import logger

from principle_check.model import Model, NotFoundError
from principle_check.report import Finding, Severity
from principle_check.rules.base import Rule


class LiskovSubstitutionRule(Rule):
    name = "LSP"
    title = "Liskov Substitution Principle"
    description = "Subtypes must be usable wherever their base type is expected."

    def evaluate(self, model: Model) -> list[Finding]:
        findings: list[Finding] = []
        for entity in model.classes:
            if entity.base_class is None:
                continue
            for method in entity.methods:
                subject = f"{entity.name}.{method.name}"
                try:
                    base = model.overridden_method(entity.name, method.name, method.kind)
                except NotFoundError as exc:
                    logger.warning("LSP: cannot resolve base of {}: {}", subject, exc)
                    findings.append(self.finding(
                        subject, f"base class could not be resolved: {exc}", Severity.WARNING,
                    ))
                    break
                if base is None:
                    continue

                extra = sorted(method.also_mutates - base.also_mutates)
                if extra:
                    findings.append(self.finding(
                        subject,
                        f"override also mutates {', '.join(extra)}, which the base "
                        "declaration does not; callers of the base type cannot rely "
                        "on its contract",
                    ))
        return findings
