"""Entry point: the ``friendgraph`` root group and its global options."""

from __future__ import annotations

import click

from friendgraph import __version__
from friendgraph.commands import register_commands
from friendgraph.commands._context import AppContext
from friendgraph.config.settings import FriendgraphSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="friendgraph")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only IDs or a status line.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing details.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this friendgraph.toml instead of searching for one.",
)
@click.option(
    "--data",
    "data_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Network data file (overrides network.data_file).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    data_file: str | None,
) -> None:
    """friendgraph — social network graph CLI."""
    ctx.obj = AppContext(
        FriendgraphSettings.from_cli(
            config_path=config_path,
            data_file=data_file,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
