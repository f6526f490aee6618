"""Tests for the lint command and CLI wiring."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from mdlint import __version__
from mdlint.cli import cli
from mdlint.commands.lint import run_explain, run_lint, run_rules
from mdlint.rules import get_rule_ids


@pytest.fixture
def workdir(tmp_path: Path, fixtures_path: Path, monkeypatch: pytest.MonkeyPatch, wide_terminal: None) -> Path:
    """A working directory holding copies of the fixtures and no config."""
    for name in ("sample.md", "clean.md"):
        shutil.copy(fixtures_path / name, tmp_path / name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_clean_file(workdir: Path, capsys: pytest.CaptureFixture[str]):
    exit_code = run_lint([Path("clean.md")])

    assert exit_code == 0
    assert "No errors or warnings" in capsys.readouterr().err


def test_warnings_pass_by_default(workdir: Path, capsys: pytest.CaptureFixture[str]):
    exit_code = run_lint([Path("sample.md")])

    err = capsys.readouterr().err
    assert exit_code == 0
    assert "WARN: sample.md:9:5 [no-space-in-code] Spaces inside code span elements" in err
    assert "[no-reversed-links] Link syntax reversed, change to '[Text](Url)'." in err
    assert "Lint Summary" in err


def test_fail_on_warning(workdir: Path):
    assert run_lint([Path("sample.md")], fail_on="warning") == 1
    assert run_lint([Path("clean.md")], fail_on="warning") == 0


def test_error_severity_from_config(workdir: Path, capsys: pytest.CaptureFixture[str]):
    config = _write(workdir / "strict.toml", '[rules.header-increment]\nseverity = "error"\n')

    exit_code = run_lint([Path("sample.md")], config_path=config)

    assert exit_code == 1
    assert "ERROR: sample.md:3:1 [header-increment]" in capsys.readouterr().err


def test_config_discovered_from_working_directory(workdir: Path):
    _write(workdir / ".mdlint.toml", '[rules.no-empty-links]\nseverity = "error"\n')

    assert run_lint([Path("sample.md")]) == 1


def test_disable(workdir: Path, capsys: pytest.CaptureFixture[str]):
    run_lint([Path("sample.md")], output_json=True, disabled=("no-space-in-code", "ul-style"))

    output = json.loads(capsys.readouterr().out)
    rules = {v["rule"] for v in output["files"][0]["violations"]}
    assert "no-space-in-code" not in rules
    assert "ul-style" not in rules
    assert "ul-indent" in rules


def test_disable_unknown_rule(workdir: Path, capsys: pytest.CaptureFixture[str]):
    assert run_lint([Path("sample.md")], disabled=("no-tabs",)) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_invalid_config(workdir: Path):
    config = _write(workdir / "bad.toml", "[rules.ul-indent]\nindent = 'two'\n")

    assert run_lint([Path("sample.md")], config_path=config) == 2


def test_unreadable_document(workdir: Path, capsys: pytest.CaptureFixture[str]):
    (workdir / "broken.md").write_bytes(b"# Title\n\n\xff\xfe\n")

    assert run_lint([Path("broken.md")]) == 2
    assert "Cannot lint broken.md" in capsys.readouterr().err


def test_json_output(workdir: Path, capsys: pytest.CaptureFixture[str]):
    exit_code = run_lint([Path("sample.md"), Path("clean.md")], output_json=True)

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert [f["path"] for f in output["files"]] == ["sample.md", "clean.md"]
    assert output["files"][1]["violations"] == []
    assert output["summary"]["files"] == 2
    assert output["summary"]["warnings"] == len(output["files"][0]["violations"])
    assert output["summary"]["rule_failures"] == 0

    first = output["files"][0]["violations"][0]
    assert first == {
        "rule": "header-increment",
        "severity": "warning",
        "start": 10,
        "end": 27,
        "message": "Header level jumps from h1 to h3; expected h2 or lower.",
        "line": 3,
        "column": 1,
        "end_line": 3,
        "end_column": 18,
    }


def test_rules_table(wide_terminal: None, capsys: pytest.CaptureFixture[str]):
    assert run_rules() == 0

    out = capsys.readouterr().out
    for name in get_rule_ids():
        assert name in out
    assert "indent=2" in out


def test_explain(wide_terminal: None, capsys: pytest.CaptureFixture[str]):
    assert run_explain("no-reversed-links") == 0
    assert "Reversed link syntax" in capsys.readouterr().out

    assert run_explain("nope") == 1
    assert "Unknown rule: nope" in capsys.readouterr().out


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_lint_json(workdir: Path):
    result = CliRunner().invoke(cli, ["lint", "sample.md", "--json", "--fail-on", "warning"])

    assert result.exit_code == 1
    output = json.loads(result.output)
    assert output["summary"]["warnings"] > 0


def test_cli_lint_disable_all_violating_rules(workdir: Path):
    args = ["lint", "sample.md"]
    for name in get_rule_ids():
        args += ["--disable", name]

    result = CliRunner().invoke(cli, args + ["--fail-on", "warning"])

    assert result.exit_code == 0


def test_cli_lint_requires_existing_file(workdir: Path):
    result = CliRunner().invoke(cli, ["lint", "missing.md"])

    assert result.exit_code == 2


def test_cli_explain(wide_terminal: None):
    result = CliRunner().invoke(cli, ["--verbose", "explain", "ul-indent"])

    assert result.exit_code == 0
    assert "Unordered list indentation" in result.output
