"""Checker - runs every registered rule over a model and aggregates a Report.

Usage:
    report = Checker().run(model)
    report = Checker(build_rules(config), parallel=True).run(model)
    report = check(model, config)

Findings are ordered by rule priority (SRP, OCP, LSP, ISP, DIP, then any
other rule in registration order) and, within a rule, in the order the rule
produced them. This holds whether rules ran sequentially or in parallel.
"""

from concurrent.futures import ThreadPoolExecutor

from loguru import logger

from principle_check.config import Config
from principle_check.model import Model
from principle_check.report import Finding, Report, Severity
from principle_check.rules import RULE_ORDER, Rule, build_rules


class Checker:
    """Orchestrates rule evaluation with per-rule failure isolation."""

    def __init__(
        self,
        rules: list[Rule] | None = None,
        *,
        parallel: bool = False,
        max_workers: int | None = None,
    ) -> None:
        self.rules = _priority_sorted(rules if rules is not None else build_rules())
        self.parallel = parallel
        self.max_workers = max_workers

    def run(self, model: Model) -> Report:
        """Evaluate all rules over *model*, freezing it first if needed.

        Raises:
            ValidationError: if the model cannot be frozen. No rule runs.
        """
        if not model.is_frozen:
            model.freeze()

        logger.debug(
            "Checking {} classes, {} interfaces with rules {}",
            len(model.classes), len(model.interfaces), ", ".join(r.name for r in self.rules),
        )

        if self.parallel and len(self.rules) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = [pool.submit(self._evaluate, rule, model) for rule in self.rules]
                results = [f.result() for f in futures]
        else:
            results = [self._evaluate(rule, model) for rule in self.rules]

        findings: list[Finding] = []
        for rule, rule_findings in zip(self.rules, results):
            logger.debug("{}: {} finding(s)", rule.name, len(rule_findings))
            findings.extend(rule_findings)

        return Report(tuple(findings))

    @staticmethod
    def _evaluate(rule: Rule, model: Model) -> list[Finding]:
        try:
            return list(rule.evaluate(model))
        except Exception as exc:
            logger.exception("Rule {} failed", rule.name)
            return [Finding(
                rule=rule.name,
                subject=rule.name,
                message=f"rule failed and was skipped: {type(exc).__name__}: {exc}",
                severity=Severity.WARNING,
            )]


def check(model: Model, config: Config | None = None) -> Report:
    """Run the configured rules over *model* and return the Report."""
    config = config or Config()
    return Checker(build_rules(config), parallel=config.parallel).run(model)


def _priority_sorted(rules: list[Rule]) -> list[Rule]:
    def key(indexed: tuple[int, Rule]) -> tuple[int, int]:
        index, rule = indexed
        if rule.name in RULE_ORDER:
            return RULE_ORDER.index(rule.name), index
        return len(RULE_ORDER), index

    return [rule for _, rule in sorted(enumerate(rules), key=key)]
