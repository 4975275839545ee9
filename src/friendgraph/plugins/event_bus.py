"""Synchronous event dispatch via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from friendgraph.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Dispatch lifecycle hooks to every registered plugin, in-process."""

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Call *hook_name* with *payload* as keyword arguments.

        Unknown hook names are ignored. Exceptions from plugins propagate
        to the caller, which records them as warnings.
        """
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            logger.debug("No hook named %s", hook_name)
            return
        hook_fn(**payload)
