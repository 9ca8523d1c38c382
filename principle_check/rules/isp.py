"""Interface Segregation: no class should be forced to implement methods it does not use."""

from loguru import logger

from principle_check.model import Model, NotFoundError
from principle_check.report import Finding, Severity
from principle_check.rules.base import Rule


class InterfaceSegregationRule(Rule):
    name = "ISP"
    title = "Interface Segregation Principle"
    description = "Clients should not be forced to depend on methods they do not use."

    def evaluate(self, model: Model) -> list[Finding]:
        findings: list[Finding] = []
        for entity in model.classes:
            for iface_name in entity.interfaces:
                try:
                    iface = model.interface_by_name(iface_name)
                except NotFoundError as exc:
                    logger.warning("ISP: {} implements an unresolved interface: {}", entity.name, exc)
                    findings.append(self.finding(
                        entity.name, f"interface could not be resolved: {exc}", Severity.WARNING,
                    ))
                    continue

                for declared in iface.methods:
                    method = entity.method(declared.name, declared.kind)
                    if method is not None and method.throws_not_implemented:
                        findings.append(self.finding(
                            f"{entity.name}.{declared.name}",
                            f"forced to implement {iface.name}.{declared.name} but only "
                            "throws 'not implemented'; split the interface",
                        ))
        return findings
