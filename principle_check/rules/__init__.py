"""The five design-principle rules and their registry.

RULE_ORDER is also the presentation order of findings in a Report.
"""

from principle_check.config import Config
from principle_check.rules.base import Rule, split_words
from principle_check.rules.dip import DependencyInversionRule
from principle_check.rules.isp import InterfaceSegregationRule
from principle_check.rules.lsp import LiskovSubstitutionRule
from principle_check.rules.ocp import OpenClosedRule
from principle_check.rules.srp import SingleResponsibilityRule

RULE_ORDER = ("SRP", "OCP", "LSP", "ISP", "DIP")

RULES: dict[str, type[Rule]] = {
    "SRP": SingleResponsibilityRule,
    "OCP": OpenClosedRule,
    "LSP": LiskovSubstitutionRule,
    "ISP": InterfaceSegregationRule,
    "DIP": DependencyInversionRule,
}


def build_rules(config: Config | None = None) -> list[Rule]:
    """Instantiate the enabled rules with their configured heuristics, in priority order."""
    config = config or Config()
    rules: list[Rule] = []

    for name in RULE_ORDER:
        if name not in config.enabled_rules:
            continue
        severity = config.severity_for(name)
        if name == "SRP":
            rules.append(SingleResponsibilityRule(
                severity,
                min_clusters=config.srp.min_clusters,
                min_cluster_size=config.srp.min_cluster_size,
                verbs=config.srp.verbs,
            ))
        elif name == "OCP":
            rules.append(OpenClosedRule(severity, min_prefix_words=config.ocp.min_prefix_words))
        elif name == "DIP":
            rules.append(DependencyInversionRule(severity, consumers_only=config.dip.consumers_only))
        else:
            rules.append(RULES[name](severity))

    return rules


__all__ = [
    "RULE_ORDER",
    "RULES",
    "Rule",
    "build_rules",
    "split_words",
    "SingleResponsibilityRule",
    "OpenClosedRule",
    "LiskovSubstitutionRule",
    "InterfaceSegregationRule",
    "DependencyInversionRule",
]
