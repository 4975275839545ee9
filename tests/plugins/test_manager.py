"""Tests for PluginManager — discovery, registration, and hook relay."""

from __future__ import annotations

from friendgraph.plugins import hookimpl
from friendgraph.plugins.manager import PluginManager


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def post_connect(self, source_id: int, target_id: int) -> None:
        pass


class _NotAPlugin:
    def post_connect(self, source_id: int, target_id: int) -> None:
        pass


class TestPluginManager:
    """Tests for the PluginManager class."""

    def test_hook_relay_accessible(self):
        pm = PluginManager()
        for name in ("post_add_user", "post_connect", "post_disconnect", "post_save"):
            assert hasattr(pm.hook, name)
        assert hasattr(pm.hook, "post_import")

    def test_register_plugin(self):
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self):
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self):
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_is_loaded_false_before_discover(self):
        pm = PluginManager()
        assert pm.is_loaded is False

    def test_discover_marks_loaded(self):
        pm = PluginManager()
        names = pm.discover_and_load()
        assert pm.is_loaded is True
        assert isinstance(names, list)

    def test_get_plugins_returns_registered(self):
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="test")
        assert plugin in pm.get_plugins()


class TestNormalizePluginInstances:
    def test_class_registration_is_instantiated(self):
        pm = PluginManager()
        pm._pm.register(_DummyPlugin, name="cls")
        pm._instantiate_class_plugins()
        (plugin,) = pm.get_plugins()
        assert isinstance(plugin, _DummyPlugin)
        assert pm.list_plugin_names() == ["cls"]

    def test_has_hook_impls(self):
        assert PluginManager._has_hook_impls(_DummyPlugin) is True
        assert PluginManager._has_hook_impls(_NotAPlugin) is False
