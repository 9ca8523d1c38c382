"""Tests for principle_check/cli.py"""

import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner
from loguru import logger

from principle_check import __version__
from principle_check.cli import cli


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def reset_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)
    logger.disable("principle_check")


def write_json(tmp_path: Path, data: dict, name: str = "model.json") -> str:
    p = tmp_path / name
    p.write_text(json.dumps(data), encoding="utf-8")
    return str(p)


# ---------------------------------------------------------------------------
# check - exit codes
# ---------------------------------------------------------------------------

def test_check_clean_model_exits_zero(runner, tmp_path, good_user_repository):
    path = write_json(tmp_path, good_user_repository)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", path])
    assert result.exit_code == 0
    assert "No findings." in result.output


def test_check_with_findings_exits_one(runner, tmp_path, animal_model):
    path = write_json(tmp_path, animal_model)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", path])
    assert result.exit_code == 1
    assert "ISP:" in result.output
    assert "Dog.Swim" in result.output
    assert "Dog.Fly" in result.output


def test_check_malformed_model_exits_two(runner, tmp_path):
    path = write_json(tmp_path, {"classes": {"Dog": {"interfaces": ["IAnimal"]}}})
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", path])
    assert result.exit_code == 2
    assert "Invalid model" in result.output
    assert "IAnimal" in result.output


def test_check_missing_model_file_exits_two(runner, tmp_path):
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", "missing.yaml"])
    assert result.exit_code == 2
    assert "not found" in result.output


def test_check_undecodable_model_file_exits_two(runner, tmp_path):
    model = tmp_path / "model.json"
    model.write_bytes(b"\xff\xfe{}")
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", str(model)])
    assert result.exit_code == 2
    assert "Failed to read" in result.output


def test_check_directory_as_model_exits_two(runner, tmp_path):
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", str(tmp_path)])
    assert result.exit_code == 2
    assert "Failed to read" in result.output


def test_check_bad_config_exits_two(runner, tmp_path, animal_model):
    path = write_json(tmp_path, animal_model)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["--config", "nope.yaml", "check", path])
    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_check_unknown_rule_option_exits_two(runner, tmp_path, animal_model):
    path = write_json(tmp_path, animal_model)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", path, "--rule", "kiss"])
    assert result.exit_code == 2
    assert "KISS" in result.output or "kiss" in result.output


# ---------------------------------------------------------------------------
# check - options
# ---------------------------------------------------------------------------

def test_check_json_output(runner, tmp_path, database_model):
    path = write_json(tmp_path, database_model)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["--pretty", "check", path, "--format", "json"])
    assert result.exit_code == 1

    data = json.loads(result.output)
    assert data["report_type"] == "principle_check"
    assert data["model"] == path
    assert "generated_at" in data
    assert data["summary"]["total"] == 1
    assert data["findings"] == [{
        "rule": "DIP",
        "subject": "UserRepository",
        "message": data["findings"][0]["message"],
        "severity": "warning",
    }]


def test_check_rule_filter(runner, tmp_path, bad_user_repository):
    path = write_json(tmp_path, bad_user_repository)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", path, "--rule", "isp", "--rule", "dip"])
    assert result.exit_code == 0
    assert "No findings." in result.output


def test_check_parallel_flag(runner, tmp_path, animal_model):
    path = write_json(tmp_path, animal_model)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        sequential = runner.invoke(cli, ["check", path])
        parallel = runner.invoke(cli, ["check", path, "--parallel"])
    assert parallel.exit_code == sequential.exit_code == 1
    assert parallel.output == sequential.output


def test_check_output_file(runner, tmp_path, animal_model):
    path = write_json(tmp_path, animal_model)
    out = tmp_path / "report.txt"
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["--output", str(out), "check", path])
    assert result.exit_code == 1
    assert "Report written to" in result.output
    assert "Dog.Swim" in out.read_text(encoding="utf-8")


def test_check_uses_config_file(runner, tmp_path, animal_model):
    path = write_json(tmp_path, animal_model)
    config = tmp_path / "custom.yaml"
    config.write_text("rules:\n  severity:\n    ISP: info\n", encoding="utf-8")
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["--config", str(config), "check", path])
    # info findings alone do not fail the run
    assert result.exit_code == 0
    assert "[info] Dog.Swim" in result.output


def test_check_yaml_model(runner, tmp_path):
    model = tmp_path / "model.yaml"
    model.write_text(
        "classes:\n"
        "  Order:\n"
        "    methods: [CalculateTotalCost, CalculateTotalCostWithDiscountForLoyalCustomers]\n",
        encoding="utf-8",
    )
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["check", str(model)])
    assert result.exit_code == 1
    assert "OCP:" in result.output


def test_check_verbose_logs(runner, tmp_path, good_user_repository, reset_logging):
    path = write_json(tmp_path, good_user_repository)
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["--verbose", "check", path])
    assert result.exit_code == 0


# ---------------------------------------------------------------------------
# init / rules / schema / --version
# ---------------------------------------------------------------------------

def test_init_writes_template(runner, tmp_path):
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert Path("principle-check.yaml").exists()

        again = runner.invoke(cli, ["init"])
        assert again.exit_code == 1
        assert "already exists" in again.output


def test_rules_lists_in_priority_order(runner):
    result = runner.invoke(cli, ["rules"])
    assert result.exit_code == 0
    names = [line.split()[0] for line in result.output.splitlines()]
    assert names == ["SRP", "OCP", "LSP", "ISP", "DIP"]


def test_schema_prints_json(runner):
    result = runner.invoke(cli, ["schema"])
    assert result.exit_code == 0
    schema = json.loads(result.output)
    assert set(schema["properties"]) == {"classes", "interfaces"}


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
