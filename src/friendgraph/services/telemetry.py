"""Span-based timing for service calls, switched on by ``--verbose``.

``@traced`` opens a root span around a service method; ``trace_span`` opens
children inside it (``bfs``, ``dfs``, ``parse``). Traversal observers bump
counters on whichever span is current. When a traced method returns a
ServiceResult, the finished tree lands in ``meta["telemetry"]``.

While disabled, the cost per call is one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from friendgraph.services.result import ServiceResult

log = structlog.get_logger("friendgraph.telemetry")

_verbose_enabled: ContextVar[bool] = ContextVar("_verbose_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    """A timed region with nested child regions and key/value annotations."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    ended: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds, or 0.0 while the span is still open."""
        return 0.0 if self.ended is None else (self.ended - self.started) * 1000

    def child(self, name: str) -> Span:
        span = Span(name=name, parent=self)
        self.children.append(span)
        return span

    def close(self) -> None:
        if self.ended is None:
            self.ended = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def increment(self, key: str, amount: int = 1) -> None:
        self.annotations[key] = self.annotations.get(key, 0) + amount

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    """Make *span* current for the block, closing it on exit."""
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.close()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Open a child of the current span; yields None outside a traced call."""
    parent = _current_span.get() if _verbose_enabled.get() else None
    if parent is None:
        yield None
        return
    with _activate(parent.child(name)) as span:
        yield span


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the returned result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _verbose_enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        try:
            with _activate(root):
                result = func(*args, **kwargs)
        except Exception:
            log.debug("span.failed", span_name=root.name, duration_ms=root.duration_ms)
            raise

        log.debug(
            "span.complete",
            span_name=root.name,
            duration_ms=round(root.duration_ms, 2),
            children=len(root.children),
        )
        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn tracing on for the current context (called by AppContext)."""
    _verbose_enabled.set(True)


def disable_telemetry() -> None:
    _verbose_enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, or None when tracing is off."""
    if not _verbose_enabled.get():
        return None
    return _current_span.get()
