"""CLI command: guardscan watch [ROOT...] — keep results fresh as files change."""

from __future__ import annotations

import asyncio
import signal
import sys
import threading
from pathlib import Path

import click
from rich.console import Console

from guardscan.cli import load_config
from guardscan.cli.scan import SEVERITY_COLORS, shorten_path
from guardscan.scanner.models import Severity
from guardscan.workspace.models import FileScanResult
from guardscan.workspace.orchestrator import WorkspaceScanner
from guardscan.workspace.watcher import start_watching

console = Console(stderr=True)

POLL_INTERVAL = 0.5


@click.command()
@click.argument("roots", nargs=-1, type=click.Path(exists=True, file_okay=False))
@click.pass_context
def watch(ctx: click.Context, roots: tuple[str, ...]) -> None:
    """Scan the workspace, then re-scan files as they change."""
    config = load_config(ctx)
    roots = roots or (".",)
    resolved = [Path(r).resolve() for r in roots]
    stop = threading.Event()

    def on_update(path: str, result: FileScanResult | None) -> None:
        short = shorten_path(path, resolved)
        if result is None:
            console.print(f"  [dim]{short}[/dim] clean")
            return
        color = SEVERITY_COLORS[result.severity]
        console.print(
            f"  [{color}]{result.severity.value}[/{color}] {short} "
            f"({len(result.findings)} finding(s))"
        )

    try:
        scanner = WorkspaceScanner(roots, config=config, on_update=on_update)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    console.print(
        f"[bold]guardscan[/bold] watching [cyan]{', '.join(roots)}[/cyan]"
    )
    console.print(
        f"  Auto analysis: {'on' if config.auto_analysis else 'off'}, "
        f"on save: {'on' if config.analysis_on_save else 'off'}"
    )
    console.print("  Press Ctrl+C to stop.\n")

    def _signal_handler(signum: int, frame: object) -> None:
        console.print("\n[dim]Stopping...[/dim]")
        scanner.cancel()
        stop.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    asyncio.run(_watch(scanner, stop))

    overall = scanner.overall_severity()
    console.print(
        f"\n{len(scanner.get_results())} file(s) with findings, "
        f"overall severity [bold]{overall.value}[/bold]"
    )
    if overall >= Severity.HIGH:
        sys.exit(1)


async def _watch(scanner: WorkspaceScanner, stop: threading.Event) -> None:
    results = await scanner.scan_workspace()
    console.print(f"Initial scan: {len(results)} file(s) with findings")
    if stop.is_set():
        return

    observer = start_watching(scanner, scanner.roots, asyncio.get_running_loop())
    try:
        while not stop.is_set():
            await asyncio.sleep(POLL_INTERVAL)
    finally:
        observer.stop()
        await asyncio.to_thread(observer.join)
