"""CLI command: guardscan scan [ROOT...] — scan whole workspace folders."""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from guardscan.cli import load_config
from guardscan.scanner.models import Severity
from guardscan.workspace.models import FileScanResult
from guardscan.workspace.orchestrator import WorkspaceScanner

console = Console(stderr=True)

SEVERITY_COLORS = {
    Severity.LOW: "blue",
    Severity.MEDIUM: "yellow",
    Severity.HIGH: "red",
    Severity.CRITICAL: "bold red",
}


@click.command()
@click.argument("roots", nargs=-1, type=click.Path(exists=True, file_okay=False))
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="Glob patterns to exclude, on top of the defaults.",
)
@click.option(
    "--max-size",
    type=click.IntRange(min=1),
    default=None,
    help="Skip files larger than this many bytes.",
)
@click.pass_context
def scan(
    ctx: click.Context,
    roots: tuple[str, ...],
    exclude: tuple[str, ...],
    max_size: int | None,
) -> None:
    """Scan workspace folders for vulnerabilities, secrets and quality issues."""
    config = load_config(ctx)
    if exclude:
        config.exclude_patterns = (*config.exclude_patterns, *exclude)
    if max_size is not None:
        config.max_file_size = max_size

    roots = roots or (".",)
    try:
        scanner = WorkspaceScanner(roots, config=config)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    console.print(
        f"[bold]guardscan[/bold] scanning "
        f"[cyan]{', '.join(roots)}[/cyan]\n"
    )

    start = time.time()
    try:
        results = asyncio.run(scanner.scan_workspace())
    except KeyboardInterrupt:
        console.print("\n[dim]Scan interrupted.[/dim]")
        sys.exit(130)
    duration = time.time() - start

    if not results:
        console.print("[green]No findings.[/green]")
        console.print(f"\nScanned in {duration:.2f}s")
        return

    results.sort(key=lambda r: (-r.severity.rank, r.file_path))
    console.print(results_table(results, [Path(r).resolve() for r in roots]))
    console.print(f"\nScanned in {duration:.2f}s")
    console.print(f"Files with findings: {len(results)}")

    overall = scanner.overall_severity()
    if overall >= Severity.HIGH:
        console.print(f"\n[red]Overall severity: {overall.value}[/red]")
        sys.exit(1)


def results_table(results: list[FileScanResult], roots: list[Path]) -> Table:
    table = Table(title="Findings", show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    table.add_column("File", style="cyan")
    table.add_column("Vulns", justify="right")
    table.add_column("Secrets", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("Top finding", max_width=60)

    for result in results:
        color = SEVERITY_COLORS[result.severity]
        top = max(result.findings, key=lambda f: f.severity.rank)
        table.add_row(
            f"[{color}]{result.severity.value}[/{color}]",
            shorten_path(result.file_path, roots),
            str(len(result.vulnerabilities)),
            str(len(result.secrets)),
            str(len(result.quality_issues)),
            top.description[:60],
        )
    return table


def shorten_path(file_path: str, roots: list[Path]) -> str:
    """Shorten file path relative to the workspace root that holds it."""
    path = Path(file_path)
    for root in roots:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            continue
    return file_path
