"""NetworkStore — one graph engine plus the data file it belongs to.

The store is the single dependency injected into every service. It owns
the :class:`NetworkEngine`, loads it lazily from the flat-file data on
first access, and writes it back on :meth:`save`.

INVARIANT: The data file is the durable copy. The engine is rebuilt from
it on every process start; nothing else is persisted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from friendgraph.domain.records import parse_users, render_users
from friendgraph.infrastructure.graph.engine import NetworkEngine

if TYPE_CHECKING:
    from friendgraph.config.settings import FriendgraphSettings
    from friendgraph.domain.user import UserRecord

logger = logging.getLogger(__name__)


def read_records(path: Path) -> list[UserRecord]:
    """Read and parse a flat-file user list."""
    return parse_users(path.read_text(encoding="utf-8"))


def write_records(path: Path, records: list[UserRecord]) -> None:
    """Render *records* and write them to *path*.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_users(records), encoding="utf-8")


class NetworkStore:
    """Repository owning the network engine and its backing file.

    Constructed lazily by the CLI context from :class:`FriendgraphSettings`.
    Services receive the store via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: FriendgraphSettings) -> None:
        self._settings = settings
        self._engine: NetworkEngine | None = None
        self._event_bus: Any | None = None

    @property
    def root(self) -> Path:
        """The workspace root directory."""
        return self._settings.workspace_root

    @property
    def path(self) -> Path:
        """Absolute path of the data file."""
        data_file = self._settings.data_file or Path(self._settings.network.data_file)
        return data_file if data_file.is_absolute() else self.root / data_file

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    @property
    def settings(self) -> FriendgraphSettings:
        return self._settings

    @property
    def engine(self) -> NetworkEngine:
        """The graph engine, loaded from the data file on first access.

        A missing data file yields an empty network.

        Raises:
            RecordFormatError: The data file is malformed.
            InvalidArgumentError: The data file breaks an engine invariant.
        """
        if self._engine is None:
            self._engine = self._load()
        return self._engine

    def _load(self) -> NetworkEngine:
        unique = self._settings.network.unique_names
        if not self.exists:
            logger.debug("No data file at %s, starting empty", self.path)
            return NetworkEngine(unique_names=unique)
        records = read_records(self.path)
        logger.debug("Read %d users from %s", len(records), self.path)
        return NetworkEngine.from_records(records, unique_names=unique)

    def replace(self, engine: NetworkEngine) -> None:
        """Swap in a new engine (used by import)."""
        self._engine = engine

    def reload(self) -> None:
        """Drop the cached engine so the next access re-reads the file."""
        self._engine = None

    def save(self) -> Path:
        """Write every user back to the data file and return its path."""
        records = self.engine.dump_records()
        write_records(self.path, records)
        logger.debug("Wrote %d users to %s", len(records), self.path)
        return self.path

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    @property
    def event_bus(self) -> Any | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self) -> None:
        """Create a PluginManager, load entry-point plugins, wire the EventBus."""
        from friendgraph.plugins.event_bus import EventBus
        from friendgraph.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load()
        self._event_bus = EventBus(pm)
