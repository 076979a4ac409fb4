"""
Tests for the self-check scenario and the CLI around it.
"""

import json

from typer.testing import CliRunner

from cli.main import app
from eventual.selfcheck import STEPS, run_selfcheck

runner = CliRunner()


def test_selfcheck_passes():
    report = run_selfcheck()

    assert report.passed
    assert [check.name for check in report.checks] == STEPS
    assert report.checks[0].actual == [5, 10, 925]
    assert report.checks[-1].actual == 25
    assert report.elapsed == 10
    assert report.turns > 0
    assert report.error is None


def test_selfcheck_reports_broken_chain(monkeypatch):
    import eventual.selfcheck as selfcheck

    def broken(fn, scheduler=None):
        def lifted(*args, **kwargs):
            raise RuntimeError("lifting failed")
        return lifted

    monkeypatch.setattr(selfcheck, "promised", broken)
    report = run_selfcheck()

    assert not report.passed
    assert "lifting failed" in report.error
    by_name = {check.name: check for check in report.checks}
    assert by_name["defer"].passed
    assert not by_name["promised"].passed


def test_cli_check_json(restore_root_logger):
    result = runner.invoke(app, ["check", "--json"])

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["passed"] is True
    assert [check["name"] for check in output["checks"]] == STEPS


def test_cli_check_table(restore_root_logger):
    result = runner.invoke(app, ["check"])

    assert result.exit_code == 0
    assert "All checks passed" in result.stdout


def test_cli_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.stdout
