"""CLI interface for svglint using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from svglint import __description__, __version__
from svglint.config import LogLevel, load_config
from svglint.document import DocumentError
from svglint.linting import LintState, lint_file

app = typer.Typer(
    name="svglint",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}

STATE_COLORS = {
    LintState.SUCCESS: "green",
    LintState.WARNING: "yellow",
    LintState.ERROR: "red",
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"svglint version {__version__}")
        raise typer.Exit()


def _setup_logging(level: str) -> None:
    """Send svglint logs to stderr through rich."""
    package_logger = logging.getLogger("svglint")
    package_logger.setLevel(LOG_LEVELS.get(level, logging.INFO))
    if not package_logger.handlers:
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """svglint - Lint SVG files against declarative structural rules."""


def _print_table(results: list[tuple[Path, object]]) -> None:
    for path, outcome in results:
        if isinstance(outcome, Exception):
            console.print(f"[red]{escape(str(path))}: FAILED TO LINT[/red] {escape(str(outcome))}")
            continue

        color = STATE_COLORS.get(outcome.state, "white")
        console.print(f"[{color}]{escape(str(path))}: {outcome.state.value.upper()}[/{color}]")
        if not outcome.diagnostics:
            continue

        table = Table()
        table.add_column("Rule", style="cyan")
        table.add_column("Severity", style="white")
        table.add_column("Message", style="white")
        table.add_column("Location", style="dim")
        for diagnostic in outcome.diagnostics:
            severity_color = "yellow" if diagnostic.severity.value == "warning" else "red"
            table.add_row(
                escape(diagnostic.rule or ""),
                f"[{severity_color}]{diagnostic.severity.value.upper()}[/{severity_color}]",
                escape(diagnostic.message),
                escape(diagnostic.location or ""),
            )
        console.print(table)


def _print_json(results: list[tuple[Path, object]]) -> None:
    output = []
    for path, outcome in results:
        if isinstance(outcome, Exception):
            output.append({"name": str(path), "state": "failed", "exit_code": 1, "error": str(outcome)})
        else:
            output.append(outcome.to_dict())
    print(jsonlib.dumps(output, indent=2))


@app.command()
def lint(
    paths: Annotated[
        list[Path],
        typer.Argument(help="SVG files to lint")
    ],
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .svglint.json)")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Enable debug logging")
    ] = False,
) -> None:
    """Lint SVG files against the configured rules."""
    valid_formats = ["table", "json"]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    try:
        svglint_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _setup_logging(LogLevel.DEBUG.value if debug else svglint_config.logging.level)

    results = []
    for path in paths:
        try:
            results.append((path, lint_file(path, svglint_config)))
        except (FileNotFoundError, DocumentError) as e:
            results.append((path, e))

    if format == "json":
        _print_json(results)
    else:
        _print_table(results)

    failed = any(isinstance(outcome, Exception) or outcome.exit_code for _, outcome in results)
    raise typer.Exit(1 if failed else 0)
