"""structlog setup for the friendgraph CLI.

Both structlog loggers and stdlib ``logging.getLogger`` records end up on
one stderr handler. ``--log-json`` switches the renderer to JSON lines;
``--verbose`` lowers the ``friendgraph`` logger to DEBUG so traversal and
telemetry events become visible. ``--quiet`` raises it to ERROR.
"""

from __future__ import annotations

import logging
import sys

import structlog

APP_LOGGER = "friendgraph"


def _level_for(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _pre_chain(log_json: bool) -> list[structlog.types.Processor]:
    """Processors shared by structlog events and foreign stdlib records."""
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if log_json:
        chain += [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
        ]
    else:
        chain.append(structlog.processors.TimeStamper(fmt="%H:%M:%S"))
    chain.append(structlog.processors.UnicodeDecoder())
    return chain


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route all log output through a single structlog-formatted stderr handler.

    Safe to call repeatedly: the root handler list is replaced each time.
    """
    pre_chain = _pre_chain(log_json)
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(APP_LOGGER).setLevel(_level_for(verbose=verbose, quiet=quiet))
