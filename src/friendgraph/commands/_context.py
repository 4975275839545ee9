"""AppContext — per-invocation state shared by every command.

The root group builds one instance from the resolved settings and stores it
on ``ctx.obj``; subcommands receive it through ``@click.pass_obj``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from friendgraph.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from friendgraph.config.settings import FriendgraphSettings
    from friendgraph.infrastructure.store import NetworkStore
    from friendgraph.services.result import ServiceResult


class AppContext:
    """Settings, the lazily opened store, and result emission."""

    def __init__(self, settings: FriendgraphSettings) -> None:
        from friendgraph.config.logging import configure_logging

        self.settings = settings
        self._store: NetworkStore | None = None
        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )
        if settings.verbose:
            from friendgraph.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def store(self) -> NetworkStore:
        """The network store; plugins are loaded the first time it is needed.

        Commands that never touch the network (``--help``, ``--examples``)
        leave the data file unread.
        """
        if self._store is None:
            from friendgraph.infrastructure.store import NetworkStore

            store = NetworkStore(self.settings)
            store.init_event_bus()
            self._store = store
        return self._store

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Successful output goes to stdout with any warnings on stderr (human
        and quiet modes only; JSON carries them in the payload). Failures go
        to stderr and end the process with exit code 1.
        """
        settings = self.output_settings
        text = format_result(result, settings=settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if settings.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
