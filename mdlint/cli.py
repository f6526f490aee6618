"""CLI entrypoint for mdlint."""

import logging
import sys
from pathlib import Path

import click

from . import __version__


def _configure_logging(verbose: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(__version__, prog_name="mdlint")
@click.option("--verbose", is_flag=True, help="Log rule execution and configuration details")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """mdlint - Rule-based linter for markdown documents.

    Checks list style, code blocks, code spans, links and headers.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@cli.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML config file (defaults to the nearest .mdlint.toml or pyproject.toml)",
)
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning"]),
    default="error",
    help="Exit with error if this level or higher found",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON",
)
@click.option(
    "--disable",
    "disabled",
    multiple=True,
    metavar="RULE",
    help="Disable a rule for this run (repeatable)",
)
def lint(
    files: tuple[Path, ...],
    config_path: Path | None,
    fail_on: str,
    output_json: bool,
    disabled: tuple[str, ...],
) -> None:
    """Lint markdown files.

    \b
    Exit codes:
      0  no findings at or above --fail-on
      1  findings at or above --fail-on, or a rule crashed
      2  invalid configuration or unreadable input

    Examples:

        mdlint lint README.md docs/guide.md

        mdlint lint --fail-on warning --disable ul-indent README.md

        mdlint lint --json README.md
    """
    from .commands.lint import run_lint

    exit_code = run_lint(
        list(files),
        config_path=config_path,
        fail_on=fail_on,
        output_json=output_json,
        disabled=disabled,
    )
    sys.exit(exit_code)


@cli.command("rules")
def rules_cmd() -> None:
    """List the built-in rules."""
    from .commands.lint import run_rules

    sys.exit(run_rules())


@cli.command()
@click.argument("rule_id")
def explain(rule_id: str) -> None:
    """Explain a lint rule.

    Examples:

        mdlint explain ul-style

        mdlint explain no-reversed-links
    """
    from .commands.lint import run_explain

    sys.exit(run_explain(rule_id))


@cli.command("lsp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML config file (defaults to the one found from the workspace root)",
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "tcp"]),
    default="stdio",
    show_default=True,
    help="Transport method (stdio for editors, tcp for debugging)",
)
def lsp(config_path: Path | None, transport: str) -> None:
    """Start the LSP server for live diagnostics.

    Markdown documents are linted when opened, changed or saved.

    For VSCode, configure the extension to use:

        mdlint lsp --transport stdio

    For debugging with a TCP connection:

        mdlint lsp --transport tcp
    """
    from .lsp import start_server

    start_server(config_path=config_path, transport=transport)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
