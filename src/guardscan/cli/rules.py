"""CLI command: guardscan rules — list the rule catalog."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from guardscan.cli import load_config
from guardscan.cli.scan import SEVERITY_COLORS
from guardscan.scanner.analyzers import SCANNERS, create_scanner
from guardscan.scanner.rules.loader import load_rule_files

console = Console()


@click.command()
@click.option(
    "--domain",
    "-d",
    type=click.Choice(list(SCANNERS)),
    default=None,
    help="Only list rules for this domain.",
)
@click.pass_context
def rules(ctx: click.Context, domain: str | None) -> None:
    """List built-in and custom rules."""
    config = load_config(ctx)
    try:
        custom = load_rule_files(config.rules_files)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    domains = [domain] if domain else list(SCANNERS)
    table = Table(title="Rules", show_lines=False)
    table.add_column("Domain", style="cyan")
    table.add_column("Rule")
    table.add_column("Severity", style="bold")
    table.add_column("Category")
    table.add_column("Message", max_width=60)

    total = 0
    for name in domains:
        scanner = create_scanner(name, extra_rules=custom.get(name, ()))
        for rule in scanner.rules:
            color = SEVERITY_COLORS[rule.severity]
            table.add_row(
                name,
                rule.rule_id,
                f"[{color}]{rule.severity.value}[/{color}]",
                rule.category,
                rule.message,
            )
            total += 1

    console.print(table)
    console.print(f"{total} rule(s)")
