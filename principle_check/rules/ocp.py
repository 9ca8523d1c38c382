"""Open/Closed: extend behaviour through extension points, not new variant methods.

``CalculateTotalCost`` next to ``CalculateTotalCostWithDiscountForLoyalCustomers``
on a class with nothing to override means every new customer type edits the
class again.
"""

from principle_check.model import ClassEntity, Model
from principle_check.report import Finding, Severity
from principle_check.rules.base import Rule, split_words


class OpenClosedRule(Rule):
    name = "OCP"
    title = "Open/Closed Principle"
    description = "Classes should be open for extension but closed for modification."

    def __init__(self, severity: Severity = Severity.WARNING, min_prefix_words: int = 2) -> None:
        super().__init__(severity)
        self.min_prefix_words = min_prefix_words

    def evaluate(self, model: Model) -> list[Finding]:
        findings: list[Finding] = []
        for entity in model.classes:
            if entity.is_extensible:
                continue
            families = self.variant_families(entity)
            if not families:
                continue
            described = "; ".join(
                f"{base} -> {', '.join(variants)}" for base, variants in families.items()
            )
            findings.append(self.finding(
                entity.name,
                f"variant behaviour added as new methods ({described}) on a class "
                "with no abstract, virtual or interface extension point",
            ))
        return findings

    def variant_families(self, entity: ClassEntity) -> dict[str, list[str]]:
        """Map each family stem to the methods that vary it.

        A method whose whole name starts another's is the stem of that family
        (``CalculateCost -> CalculateCostForVip``). Remaining methods that share
        their first ``min_prefix_words`` words and continue past them are
        siblings, keyed by their common prefix with a trailing ``*``.
        """
        names = list(dict.fromkeys(m.name for m in entity.methods))
        words = {name: split_words(name) for name in names}
        lowered = {name: [w.lower() for w in words[name]] for name in names}

        families: dict[str, list[str]] = {}
        covered: set[str] = set()
        for base in names:
            prefix = lowered[base]
            if len(prefix) < self.min_prefix_words:
                continue
            for other in names:
                candidate = lowered[other]
                if len(candidate) > len(prefix) and candidate[:len(prefix)] == prefix:
                    families.setdefault(base, []).append(other)
                    covered.update((base, other))

        siblings: dict[tuple[str, ...], list[str]] = {}
        for name in names:
            if name in covered or len(lowered[name]) <= self.min_prefix_words:
                continue
            siblings.setdefault(tuple(lowered[name][:self.min_prefix_words]), []).append(name)
        for members in siblings.values():
            if len(members) < 2:
                continue
            shared = _shared_length([lowered[m] for m in members])
            families["".join(words[members[0]][:shared]) + "*"] = members
        return families


def _shared_length(word_lists: list[list[str]]) -> int:
    shared = 0
    for column in zip(*word_lists):
        if len(set(column)) > 1:
            break
        shared += 1
    return shared
