"""Lint command implementation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..document import Document
from ..engine import (
    SEVERITY_ORDER,
    ConfigureFn,
    Engine,
    LintReport,
    RuleSetup,
    Severity,
    Violation,
    find_config,
    load_settings,
)
from ..errors import ConfigurationError, DocumentError
from ..rules import RULES, default_rules, explain, get_rule_ids

LEVEL_STYLES = {
    Severity.ERROR: ("ERROR", "bold red"),
    Severity.WARNING: ("WARN", "yellow"),
    Severity.INFO: ("INFO", "dim"),
}


def build_engine(config_path: Path | None = None, disabled: tuple[str, ...] = ()) -> Engine:
    """Create an engine with the built-in rules and the project configuration.

    Args:
        config_path: Explicit config file; when None the nearest one above the
            working directory is used, if any
        disabled: Rule names to switch off on top of the configuration

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if config_path is None:
        config_path = find_config(Path.cwd())
    settings = load_settings(config_path) if config_path is not None else {}

    for name in disabled:
        settings[name] = _then_disable(settings.get(name))

    return Engine(default_rules(), settings)


def _then_disable(configure: ConfigureFn | None) -> ConfigureFn:
    def disable(setup: RuleSetup) -> None:
        if configure is not None:
            configure(setup)
        setup.disable()

    return disable


def run_lint(
    paths: list[Path],
    config_path: Path | None = None,
    fail_on: str = "error",
    output_json: bool = False,
    disabled: tuple[str, ...] = (),
) -> int:
    """Lint markdown files.

    Args:
        paths: Files to lint
        config_path: Optional TOML config file
        fail_on: Exit with error if this level or higher found ("error" or "warning")
        output_json: Output results as JSON instead of human-readable
        disabled: Rule names to disable for this run

    Returns:
        Exit code (0 = clean, 1 = findings or rule failures, 2 = configuration or input error)
    """
    console = Console(stderr=True)

    try:
        engine = build_engine(config_path, disabled)
    except ConfigurationError as e:
        console.print(f"Configuration error: {escape(str(e))}", style="bold red")
        return 2

    results: list[tuple[Path, Document, LintReport]] = []
    for path in paths:
        try:
            document = Document.parse(path.read_text(encoding="utf-8"), path=path)
        except (OSError, UnicodeDecodeError, DocumentError) as e:
            console.print(escape(f"Cannot lint {path}: {e}"), style="bold red")
            return 2
        results.append((path, document, engine.run(document)))

    counts = {s.value: 0 for s in Severity}
    failures = 0
    for _, _, report in results:
        for level, count in report.counts().items():
            counts[level] += count
        failures += len(report.failures)

    if output_json:
        _output_json(results, counts, failures)
    else:
        _print_human_output(console, results, counts, failures, len(engine.rules))

    if failures:
        return 1
    threshold = SEVERITY_ORDER[Severity.parse(fail_on)]
    if any(count and SEVERITY_ORDER[Severity(level)] <= threshold for level, count in counts.items()):
        return 1
    return 0


def violation_to_dict(document: Document, violation: Violation) -> dict[str, Any]:
    """JSON-serializable violation with 1-based line/column positions."""
    line, column = document.position(violation.start)
    end_line, end_column = document.position(violation.end)
    return {
        **violation.to_dict(),
        "line": line,
        "column": column,
        "end_line": end_line,
        "end_column": end_column,
    }


def _output_json(
    results: list[tuple[Path, Document, LintReport]],
    counts: dict[str, int],
    failures: int,
) -> None:
    output = {
        "files": [
            {
                "path": str(path),
                "violations": [violation_to_dict(document, v) for v in report.violations],
                "failures": [f.to_dict() for f in report.failures],
            }
            for path, document, report in results
        ],
        "summary": {
            "files": len(results),
            "errors": counts["error"],
            "warnings": counts["warning"],
            "info": counts["info"],
            "rule_failures": failures,
        },
    }
    print(json.dumps(output, indent=2))


def _print_human_output(
    console: Console,
    results: list[tuple[Path, Document, LintReport]],
    counts: dict[str, int],
    failures: int,
    rule_count: int,
) -> None:
    for path, document, report in results:
        for violation in report.violations:
            prefix, style = LEVEL_STYLES[violation.severity]
            line, column = document.position(violation.start)
            console.print(
                escape(f"{prefix}: {path}:{line}:{column} [{violation.rule}] {violation.message}"),
                style=style,
            )
        for failure in report.failures:
            console.print(escape(f"FAILED: {path} - {failure}"), style="bold magenta")

    console.print()

    table = Table(title="Lint Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")

    table.add_row("Files", str(len(results)))
    table.add_row("Rules", str(rule_count))
    table.add_row("Errors", str(counts["error"]))
    table.add_row("Warnings", str(counts["warning"]))
    table.add_row("Info", str(counts["info"]))
    table.add_row("Rule failures", str(failures))

    console.print(table)

    console.print()
    if counts["error"] > 0:
        console.print(f"❌ {counts['error']} error(s)", style="bold red")
    if counts["warning"] > 0:
        console.print(f"⚠️  {counts['warning']} warning(s)", style="yellow")
    if counts["info"] > 0:
        console.print(f"ℹ️  {counts['info']} info(s)", style="dim")
    if failures:
        console.print(f"💥 {failures} rule failure(s)", style="bold magenta")

    if counts["error"] == 0 and counts["warning"] == 0 and not failures:
        console.print("✅ No errors or warnings", style="bold green")


def run_rules() -> int:
    """Print a table of the built-in rules."""
    console = Console()

    table = Table(title="Rules")
    table.add_column("Name", style="cyan")
    table.add_column("Severity")
    table.add_column("Tags", style="dim")
    table.add_column("Parameters")
    table.add_column("Description")

    for name in get_rule_ids():
        cls = RULES[name]
        params = ", ".join(f"{k}={_param_repr(v)}" for k, v in cls.defaults.items())
        table.add_row(
            name,
            cls.descriptor.severity.value,
            ", ".join(cls.descriptor.tags),
            params or "-",
            cls.descriptor.description,
        )

    console.print(table)
    return 0


def _param_repr(value: Any) -> str:
    return str(getattr(value, "value", value))


def run_explain(rule_id: str) -> int:
    """Explain a specific lint rule.

    Args:
        rule_id: Rule ID to explain

    Returns:
        Exit code (0 = success, 1 = rule not found)
    """
    console = Console()

    explanation = explain(rule_id)
    if explanation is None:
        console.print(f"Unknown rule: {escape(rule_id)}", style="bold red")
        console.print()
        console.print("Known rules:", style="bold")
        for rid in get_rule_ids():
            console.print(f"  - {rid}")
        return 1

    from rich.markdown import Markdown

    console.print(Markdown(explanation))
    return 0
