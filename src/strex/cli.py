"""CLI entry point for strex -- extract string literals from C# sources."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import StrexConfig, load_config
from .errors import ConfigError, OutputWriteError

app = typer.Typer(
    name="strex",
    help="Extract string literals from C# source code files.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _load_config_or_exit(config_path: Path | None, start: Path) -> StrexConfig:
    """Load the config file (explicit or discovered) or exit with an error."""
    try:
        return load_config(config_path, start=start)
    except ConfigError as exc:
        err_console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def extract(
    directory: Path = typer.Option(..., "--directory", "-d", help="Directory containing C# source files."),
    output: Path = typer.Option(..., "--output", "-o", help="Output JSON file path."),
    ext: Optional[List[str]] = typer.Option(None, "--ext", help="File extension to scan (repeatable)."),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", "-j", help="Files scanned in parallel."),
    hole_literals: Optional[bool] = typer.Option(
        None, "--include-hole-literals/--no-hole-literals",
        help="Also report literals nested inside interpolation holes.",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to strex.toml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log lexical anomalies and debug output."),
) -> None:
    """Scan a directory tree and write every file's string literals as JSON."""
    from .log import setup_logging
    from .orchestrator import run
    from .report import write_report

    setup_logging(verbose)

    root = directory.resolve()
    if not root.is_dir():
        err_console.print(f"[red]Error:[/red] Directory '{root}' does not exist.")
        raise typer.Exit(code=1)

    cfg = _load_config_or_exit(config_path, root)

    # CLI flags override config values (only when explicitly provided).
    updates: dict = {}
    if ext:
        updates["extensions"] = ext
    if concurrency is not None:
        updates["concurrency"] = concurrency
    if hole_literals is not None:
        updates["hole_literals"] = hole_literals
    if updates:
        try:
            cfg = StrexConfig.model_validate({**cfg.model_dump(), **updates})
        except ValidationError as exc:
            err_console.print(f"[red]Error:[/red] {exc.errors()[0]['msg']}")
            raise typer.Exit(code=1)

    console.print(f"[bold]Scanning directory:[/bold] {root}")
    report = run(root, cfg, console=console)

    console.print(
        f"  Found string literals in {len(report.files)} of {report.scanned} file(s) "
        f"({report.literal_count} literal(s))."
    )
    if report.failed:
        console.print(f"  [yellow]{len(report.failed)} file(s) could not be read:[/yellow]")
        for path in report.failed[:15]:
            console.print(f"    {path}")
        if len(report.failed) > 15:
            console.print(f"    ... and {len(report.failed) - 15} more")

    try:
        written = write_report(report, output, indent=cfg.indent, ensure_ascii=cfg.ensure_ascii)
    except OutputWriteError as exc:
        err_console.print(f"[red]Error writing output:[/red] {exc.message}")
        raise typer.Exit(code=1)

    console.print(f"[green]Results written to:[/green] {written.resolve()}")


@app.command()
def show(
    file: Path = typer.Argument(..., help="C# source file to scan."),
    hole_literals: Optional[bool] = typer.Option(
        None, "--include-hole-literals/--no-hole-literals",
        help="Also list literals nested inside interpolation holes.",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to strex.toml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log lexical anomalies."),
) -> None:
    """Print the string literals of a single file."""
    from .errors import UnitReadError
    from .extractor import read_source_unit
    from .lexer import Scanner
    from .log import setup_logging

    setup_logging(verbose)

    path = file.resolve()
    cfg = _load_config_or_exit(config_path, path.parent)
    if hole_literals is None:
        hole_literals = cfg.hole_literals

    try:
        unit = read_source_unit(path.parent, path.name, cfg.encoding)
    except UnitReadError as exc:
        err_console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)

    scanner = Scanner(unit.text, hole_literals=hole_literals)
    table = Table(title=str(file), show_lines=False)
    table.add_column("Line", justify="right", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("Text", overflow="fold")

    count = 0
    for literal in scanner.literals():
        kind = literal.kind.value if literal.terminated else f"{literal.kind.value} (unterminated)"
        table.add_row(str(literal.line), kind, repr(literal.text))
        count += 1

    if count == 0:
        console.print("[dim]No string literals found.[/dim]")
        return
    console.print(table)
    if scanner.anomalies:
        console.print(f"[yellow]{len(scanner.anomalies)} lexical anomaly(ies) recovered.[/yellow]")


@app.command()
def config(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to strex.toml."),
) -> None:
    """Show the effective configuration."""
    cfg = _load_config_or_exit(config_path, Path.cwd())

    console.print("[bold]strex config:[/bold]")
    for field_name in StrexConfig.model_fields:
        console.print(f"  {field_name} = {getattr(cfg, field_name)!r}")


if __name__ == "__main__":
    app()
