"""Root CLI group for hnstories with global flags and command registration."""

from __future__ import annotations

import click

from hnstories import __version__
from hnstories.commands import register_commands
from hnstories.commands._base import HnGroup
from hnstories.commands._context import AppContext
from hnstories.config.settings import HnSettings


@click.group(cls=HnGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="hnstories")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Print story IDs only.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-persist", is_flag=True, help="Keep the search term in memory only.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_persist: bool,
    config_path: str | None,
) -> None:
    """hnstories — search and prune Hacker News stories."""
    settings = HnSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_persist=no_persist,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
