"""Tests for the Typer CLI (no language model involved)."""

import json

import pytest
from typer.testing import CliRunner

from contract_agent.adapters.cli.main import app

runner = CliRunner()


@pytest.fixture
def env(tmp_path):
    return {"DB_PATH": str(tmp_path / "cli.db"), "LOG_LEVEL": "WARNING"}


class TestCli:

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "contract-agent v" in result.output

    def test_init_then_seed(self, env):
        assert runner.invoke(app, ["init"], env=env).exit_code == 0

        result = runner.invoke(app, ["seed"], env=env)

        assert result.exit_code == 0
        assert "demo contracts" in result.output

    def test_exec_view_operation(self, env):
        result = runner.invoke(app, ["exec", "setPageSize", json.dumps({"pageSize": 20})], env=env)

        assert result.exit_code == 0
        assert "setPageSize" in result.output

    def test_exec_failure_sets_exit_code(self, env):
        result = runner.invoke(app, ["exec", "dropTable"], env=env)

        assert result.exit_code == 1
        assert "unknown operation" in result.output

    def test_bad_date_is_rejected(self, env):
        result = runner.invoke(app, ["contracts", "--date", "tomorrow"], env=env)

        assert result.exit_code == 2
