"""Configuration loading and validation.

Usage:
    config = load("principle-check.yaml")    # raises ConfigError on bad config
    name = config.resolve_rule("srp")        # returns "SRP"
    generate_template("principle-check.yaml")  # writes example file to disk

The configuration only tunes the heuristics and selects rules; every value
has a default, so running without a config file is the common case.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from principle_check.report import Severity

DEFAULT_PATH = "principle-check.yaml"

RULE_NAMES = ("SRP", "OCP", "LSP", "ISP", "DIP")

#: Leading words that name an action rather than a responsibility.
DEFAULT_VERBS = (
    "get", "set", "add", "remove", "create", "update", "delete", "find",
    "load", "save", "fetch", "build", "make", "calculate", "compute",
    "is", "has", "can", "check", "validate", "process", "handle", "to",
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


class UnknownRuleError(ConfigError):
    """Raised when a rule name is not one of the known rules."""


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------

@dataclass
class SrpSettings:
    min_clusters: int = 2
    min_cluster_size: int = 1
    verbs: tuple[str, ...] = DEFAULT_VERBS


@dataclass
class OcpSettings:
    min_prefix_words: int = 2


@dataclass
class DipSettings:
    consumers_only: bool = False


@dataclass
class Config:
    enabled_rules: list[str] = field(default_factory=lambda: list(RULE_NAMES))
    severities: dict[str, Severity] = field(default_factory=dict)
    srp: SrpSettings = field(default_factory=SrpSettings)
    ocp: OcpSettings = field(default_factory=OcpSettings)
    dip: DipSettings = field(default_factory=DipSettings)
    parallel: bool = False

    def resolve_rule(self, name: str) -> str:
        """Return the canonical rule name for *name* (case-insensitive)."""
        upper = name.strip().upper()
        if upper in RULE_NAMES:
            return upper
        raise UnknownRuleError(
            f"Rule '{name}' not found. Available rules: {', '.join(RULE_NAMES)}"
        )

    def severity_for(self, rule: str) -> Severity:
        return self.severities.get(rule, Severity.WARNING)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str | None = None) -> Config:
    """Load and validate configuration from a YAML file.

    With no path, ``principle-check.yaml`` in the current directory is read
    when present and defaults are used otherwise. An explicit path must exist.

    Environment variables PRINCIPLE_CHECK_RULES and PRINCIPLE_CHECK_PARALLEL
    override file values.

    Raises:
        ConfigError: if the file is missing, malformed, or holds invalid values.
    """
    raw: dict = {}

    if config_path is None:
        default = Path(DEFAULT_PATH)
        if default.exists():
            raw = _read_yaml(default)
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(
                f"Config file not found: '{config_path}'\n"
                "Run `principle-check init` to generate a template."
            )
        raw = _read_yaml(path)

    config = _from_mapping(raw)
    _apply_env(config)
    _validate(config)
    return config


def _read_yaml(path: Path) -> dict:
    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{path}': {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{path}' must be a YAML mapping at the top level.")
    return raw


def _from_mapping(raw: dict) -> Config:
    rules   = _section(raw, "rules")
    srp     = _section(raw, "srp")
    ocp     = _section(raw, "ocp")
    dip     = _section(raw, "dip")
    checker = _section(raw, "checker")

    errors: list[str] = []
    config = Config()

    if "enabled" in rules:
        config.enabled_rules = _resolve_names(config, rules["enabled"] or [], errors)

    for name, value in _section(rules, "severity").items():
        try:
            rule = config.resolve_rule(str(name))
            config.severities[rule] = Severity(str(value).lower())
        except UnknownRuleError as exc:
            errors.append(f"  - rules.severity: {exc}")
        except ValueError:
            errors.append(
                f"  - rules.severity.{name}: '{value}' is not one of "
                f"{', '.join(s.value for s in Severity)}"
            )

    config.srp = SrpSettings(
        min_clusters=srp.get("min_clusters", SrpSettings.min_clusters),
        min_cluster_size=srp.get("min_cluster_size", SrpSettings.min_cluster_size),
        verbs=tuple(str(v).lower() for v in srp.get("verbs", DEFAULT_VERBS)),
    )
    config.ocp = OcpSettings(
        min_prefix_words=ocp.get("min_prefix_words", OcpSettings.min_prefix_words),
    )
    config.dip = DipSettings(consumers_only=dip.get("consumers_only", False))
    config.parallel = checker.get("parallel", False)

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))
    return config


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping.")
    return value


def _resolve_names(config: Config, names, errors: list[str]) -> list[str]:
    if isinstance(names, str):
        names = names.split(",")
    resolved: list[str] = []
    for name in names:
        try:
            rule = config.resolve_rule(str(name))
        except UnknownRuleError as exc:
            errors.append(f"  - rules.enabled: {exc}")
            continue
        if rule not in resolved:
            resolved.append(rule)
    return resolved


def _apply_env(config: Config) -> None:
    env_rules = os.environ.get("PRINCIPLE_CHECK_RULES")
    if env_rules:
        errors: list[str] = []
        config.enabled_rules = _resolve_names(config, env_rules, errors)
        if errors:
            raise ConfigError(
                "Invalid PRINCIPLE_CHECK_RULES:\n" + "\n".join(errors)
            )

    env_parallel = os.environ.get("PRINCIPLE_CHECK_PARALLEL")
    if env_parallel:
        config.parallel = env_parallel.strip().lower() in ("1", "true", "yes", "on")


def _validate(config: Config) -> None:
    """Raise ConfigError if a threshold is out of range or a switch is not a boolean."""
    errors: list[str] = []

    for label, value in (
        ("srp.min_clusters", config.srp.min_clusters),
        ("srp.min_cluster_size", config.srp.min_cluster_size),
        ("ocp.min_prefix_words", config.ocp.min_prefix_words),
    ):
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            errors.append(f"  - '{label}' must be a positive integer (got {value!r})")

    if isinstance(config.srp.min_clusters, int) and config.srp.min_clusters == 1:
        errors.append("  - 'srp.min_clusters' must be at least 2 to separate responsibilities")

    for label, value in (
        ("dip.consumers_only", config.dip.consumers_only),
        ("checker.parallel", config.parallel),
    ):
        if not isinstance(value, bool):
            errors.append(f"  - '{label}' must be true or false (got {value!r})")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
rules:
  enabled: [SRP, OCP, LSP, ISP, DIP]
  severity:                 # info | warning (default warning)
    SRP: warning
    OCP: warning

srp:
  min_clusters: 2           # distinct responsibilities before a class is flagged
  min_cluster_size: 1       # methods a responsibility needs to count

ocp:
  min_prefix_words: 2       # CalculateTotalCost / CalculateTotalCostWithDiscount

dip:
  consumers_only: false     # only flag classes that other classes depend on

checker:
  parallel: false
"""


def generate_template(output_path: str = DEFAULT_PATH) -> None:
    """Write a template principle-check.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
