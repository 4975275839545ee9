"""PluginManager — a thin wrapper over :class:`pluggy.PluginManager`.

Third-party packages publish plugins under the ``friendgraph.plugins``
entry-point group; tests and embedding code register instances directly.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from friendgraph.plugins.hookspecs import PROJECT_NAME, FriendgraphHookSpec

ENTRY_POINT_GROUP = "friendgraph.plugins"
_IMPL_MARKER = f"{PROJECT_NAME}_impl"

logger = logging.getLogger(__name__)


class PluginManager:
    """Owns the pluggy manager and the friendgraph hook specifications."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FriendgraphHookSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """True once :meth:`discover_and_load` has run."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover_and_load(self) -> list[str]:
        """Register entry-point plugins; return every registered plugin name."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d entry-point plugin(s) from %s", count, ENTRY_POINT_GROUP)
        self._instantiate_class_plugins()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register an already constructed plugin object."""
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin %s", plugin_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [name for name, _plugin in self._pm.list_name_plugin()]

    def _instantiate_class_plugins(self) -> None:
        """Swap plugin classes registered via entry points for instances.

        Hook methods on a bare class would be called without ``self``.
        A class that cannot be constructed is dropped with a warning.
        """
        for name, plugin in list(self._pm.list_name_plugin()):
            if not (inspect.isclass(plugin) and self._has_hook_impls(plugin)):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Could not instantiate plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether any public attribute of *cls* carries the ``@hookimpl`` marker."""
        return any(
            getattr(member, _IMPL_MARKER, None) is not None
            for attr, member in inspect.getmembers(cls, callable)
            if not attr.startswith("_")
        )
