"""CLI entry point - command definitions using Click.

Commands:
    check     Evaluate a model file against the five principles
    init      Generate a template config file
    rules     List the available rules in priority order
    schema    Print the JSON schema of the model file format

Exit codes of ``check``: 0 no warnings, 1 at least one warning finding,
2 malformed input or configuration.
"""

import json
import sys
from datetime import datetime, timezone
from typing import Any

import click
from loguru import logger

from principle_check import __version__

EXIT_MALFORMED = 2


# ---------------------------------------------------------------------------
# Helpers shared by all commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Load config from --config (or the default file). Exits on error."""
    from principle_check.config import ConfigError, load

    try:
        return load(ctx.obj["config_path"])
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(EXIT_MALFORMED)


def _emit(text: str, ctx: click.Context) -> None:
    """Write text to stdout or to the file specified by --output."""
    output_path: str | None = ctx.obj["output_path"]
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        click.echo(f"Report written to '{output_path}'", err=True)
    else:
        click.echo(text)


def _emit_json(data: Any, ctx: click.Context) -> None:
    indent = 2 if ctx.obj["pretty"] else None
    _emit(json.dumps(data, indent=indent, ensure_ascii=False), ctx)


def _handle_model_errors(func):
    """Decorator that turns model and config errors into exit code 2."""
    import functools

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from principle_check.config import ConfigError
        from principle_check.model import NotFoundError, StateError, ValidationError

        try:
            return func(*args, **kwargs)
        except ValidationError as exc:
            click.echo(f"Invalid model: {exc}", err=True)
            sys.exit(EXIT_MALFORMED)
        except StateError as exc:
            click.echo(f"State error: {exc}", err=True)
            sys.exit(EXIT_MALFORMED)
        except NotFoundError as exc:
            click.echo(f"Not found: {exc}", err=True)
            sys.exit(EXIT_MALFORMED)
        except ConfigError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(EXIT_MALFORMED)

    return wrapper


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan> - <level>{message}</level>",
    )
    logger.enable("principle_check")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help="Path to the configuration file (default: ./principle-check.yaml if present).")
@click.option("--output", "output_path", default=None,
              help="Write the report to a file instead of stdout.")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print JSON output.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="principle-check")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, output_path: str | None,
        pretty: bool, verbose: bool) -> None:
    """Check a structural code model against SRP, OCP, LSP, ISP and DIP."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["output_path"] = output_path
    ctx.obj["pretty"] = pretty
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

@cli.command("check")
@click.argument("model_file")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", show_default=True, help="Report format.")
@click.option("--rule", "rule_names", multiple=True,
              help="Only run this rule (repeatable), e.g. --rule srp --rule dip.")
@click.option("--parallel", is_flag=True, default=False,
              help="Evaluate rules on a thread pool.")
@click.pass_context
@_handle_model_errors
def check_command(ctx: click.Context, model_file: str, output_format: str,
                  rule_names: tuple[str, ...], parallel: bool) -> None:
    """Evaluate MODEL_FILE (JSON or YAML) and report principle violations."""
    from principle_check.checker import Checker
    from principle_check.loader import load_model
    from principle_check.rules import build_rules

    config = _load_config(ctx)
    if rule_names:
        config.enabled_rules = [config.resolve_rule(name) for name in rule_names]
    if parallel:
        config.parallel = True

    model = load_model(model_file)
    logger.info("Running {} on {}", ", ".join(config.enabled_rules), model_file)

    checker = Checker(build_rules(config), parallel=config.parallel)
    report = checker.run(model)

    if output_format == "json":
        _emit_json({
            "report_type":  "principle_check",
            "model":        model_file,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            **report.to_dict(),
        }, ctx)
    else:
        _emit(report.render_text(), ctx)

    sys.exit(report.exit_code)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="principle-check.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template principle-check.yaml file."""
    from principle_check.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it to enable rules or tune the SRP/OCP heuristics.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# rules
# ---------------------------------------------------------------------------

@cli.command("rules")
def rules_command() -> None:
    """List the available rules in report order."""
    from principle_check.rules import RULE_ORDER, RULES

    for name in RULE_ORDER:
        rule = RULES[name]
        click.echo(f"{name}  {rule.title} - {rule.description}")


# ---------------------------------------------------------------------------
# schema
# ---------------------------------------------------------------------------

@cli.command("schema")
@click.pass_context
def schema_command(ctx: click.Context) -> None:
    """Print the JSON schema describing model files."""
    from principle_check.loader import MODEL_SCHEMA

    _emit_json(MODEL_SCHEMA, ctx)
