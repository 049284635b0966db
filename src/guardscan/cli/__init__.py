"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from guardscan import __version__
from guardscan.config import GuardConfig


@click.group()
@click.version_option(version=__version__, prog_name="guardscan")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML settings file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """guardscan — pattern-based security, secret and quality scanning."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_config(ctx: click.Context) -> GuardConfig:
    """Load settings for a command, reporting bad files as usage errors."""
    try:
        config = GuardConfig.load(ctx.obj.get("config_path"))
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    config.verbose = bool(ctx.obj.get("verbose"))
    return config


def _register_commands() -> None:
    from guardscan.cli.check import check  # noqa: F811
    from guardscan.cli.rules import rules  # noqa: F811
    from guardscan.cli.scan import scan  # noqa: F811
    from guardscan.cli.watch import watch  # noqa: F811

    main.add_command(scan)
    main.add_command(check)
    main.add_command(watch)
    main.add_command(rules)


_register_commands()
