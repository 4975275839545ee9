"""Traversal observers wired into engine queries by the service layer.

The engine never writes diagnostics itself; it reports BFS progress to an
optional observer. :class:`LoggingObserver` turns those callbacks into
structlog debug events and span counters.
"""

from __future__ import annotations

import structlog

from friendgraph.services.telemetry import get_current_span


class LoggingObserver:
    """Log each visited and discovered node for one traversal."""

    def __init__(self, op: str) -> None:
        self._log = structlog.get_logger("friendgraph.traversal").bind(op=op)
        self.visited = 0
        self.discovered = 0

    def visit(self, node: int, depth: int) -> None:
        self.visited += 1
        self._log.debug("traversal.visit", node=node, depth=depth)
        span = get_current_span()
        if span:
            span.increment("visited")

    def discover(self, node: int, depth: int, parent: int) -> None:
        self.discovered += 1
        self._log.debug("traversal.discover", node=node, depth=depth, parent=parent)
        span = get_current_span()
        if span:
            span.increment("discovered")
