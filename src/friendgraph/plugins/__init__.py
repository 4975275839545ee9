"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from friendgraph.plugins.event_bus import EventBus
from friendgraph.plugins.hookspecs import hookimpl
from friendgraph.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager", "hookimpl"]
