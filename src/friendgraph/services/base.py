"""BaseService — shared foundation for friendgraph services.

Every service receives a :class:`NetworkStore` at construction time. The
store provides the graph engine and persistence of the data file.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from friendgraph.domain.types import ErrorCode
from friendgraph.services.result import ServiceResult

if TYPE_CHECKING:
    from friendgraph.infrastructure.graph.engine import NetworkEngine
    from friendgraph.infrastructure.store import NetworkStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class NetworkService(BaseService):
            def connect(self, name_a: str, name_b: str) -> ServiceResult:
                outcome = self._engine.connect(name_a, name_b)
                ...
    """

    def __init__(self, store: NetworkStore) -> None:
        self._store = store

    @property
    def _engine(self) -> NetworkEngine:
        return self._store.engine

    def _load_failure(self, op: str) -> ServiceResult | None:
        """Force the engine to load; return an IO_ERROR result if it cannot."""
        try:
            self._store.engine  # noqa: B018
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load %s: %s", self._store.path, exc)
            return ServiceResult.fail(
                op,
                ErrorCode.IO_ERROR,
                f"Cannot load network from {self._store.path}: {exc}",
                path=str(self._store.path),
            )
        return None

    def _resolve(self, op: str, name: str) -> int | ServiceResult:
        """Resolve *name* to an ID, or return a NOT_FOUND result."""
        user_id = self._engine.get_id(name)
        if user_id is None:
            return ServiceResult.fail(
                op, ErrorCode.NOT_FOUND, f"User not found: {name}", name=name
            )
        return user_id

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if event bus not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._store.event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")

    def _persist(self, warnings: list[str]) -> str | None:
        """Save the data file when autosave is on. Returns the written path.

        Write failures are reported as warnings; the in-memory change stands.
        """
        if not self._store.settings.network.autosave:
            return None
        try:
            path = self._store.save()
        except (OSError, ValueError) as exc:
            logger.warning("Failed to save %s: %s", self._store.path, exc)
            warnings.append(f"Could not save {self._store.path}: {exc}")
            return None
        self._dispatch_event(
            "post_save",
            {"path": str(path), "users": self._engine.num_users()},
            warnings,
        )
        return str(path)
