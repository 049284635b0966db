"""CLI command: guardscan check FILE — run one domain scanner over a file."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from guardscan.cli import load_config
from guardscan.cli.scan import SEVERITY_COLORS
from guardscan.scanner.analyzers import SCANNERS, create_scanner
from guardscan.scanner.models import QualityResult, Severity
from guardscan.scanner.rules.loader import load_rule_files

console = Console(stderr=True)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--domain",
    "-d",
    type=click.Choice(list(SCANNERS)),
    default="security",
    show_default=True,
    help="Which rule catalog to run.",
)
@click.option(
    "--context",
    "-x",
    default=None,
    help="Context hint such as mysql, dockerfile or react.",
)
@click.pass_context
def check(
    ctx: click.Context, file: str, domain: str, context: str | None
) -> None:
    """Scan a single file with one domain scanner."""
    config = load_config(ctx)
    try:
        custom = load_rule_files(config.rules_files)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    scanner = create_scanner(domain, config.cache_size, custom.get(domain, ()))
    text = Path(file).read_text(encoding="utf-8", errors="replace")
    result = scanner.scan(text, context)

    label = f" ({context})" if context else ""
    console.print(
        f"[bold]guardscan[/bold] {domain}{label} check of [cyan]{file}[/cyan]\n"
    )

    if result.is_empty:
        console.print("[green]No findings.[/green]")
    else:
        table = Table(title="Findings", show_lines=False)
        table.add_column("Severity", style="bold", width=10)
        table.add_column("Line", justify="right")
        table.add_column("Type")
        table.add_column("Description", max_width=70)
        for finding in result.findings:
            color = SEVERITY_COLORS[finding.severity]
            table.add_row(
                f"[{color}]{finding.severity.value}[/{color}]",
                str(finding.line) if finding.line else "-",
                finding.type,
                finding.description,
            )
        console.print(table)

    if isinstance(result, QualityResult):
        console.print(
            f"\nMaintainability: {result.maintainability_score}/100  "
            f"Complexity: {result.complexity_score}  "
            f"Technical debt: {result.technical_debt}"
        )

    if result.severity is Severity.CRITICAL:
        console.print("\n[red]Critical finding(s) detected[/red]")
        sys.exit(1)
