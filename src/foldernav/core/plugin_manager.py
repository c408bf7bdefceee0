from __future__ import annotations

import importlib
import logging
import pkgutil
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Dict, Iterable, List, Optional

from .plugin_base import BasePlugin, PluginManifest, PluginState
from .services import CoreServices

_logger = logging.getLogger("FolderNav.PluginManager")

INPUT_CHANGED = "host.input_changed"


@dataclass
class PluginRecord:
    manifest: PluginManifest
    instance: Optional[BasePlugin]
    module: ModuleType
    state: PluginState = PluginState.LOADED
    error: Optional[str] = None
    has_initialized: bool = False

    @property
    def is_running(self) -> bool:
        return self.instance is not None and self.state == PluginState.STARTED


class PluginManager:
    """Finds ``<namespace>.<name>.plugin`` modules, runs their lifecycle and dispatches commands.

    Plugins that declare the ``input-listener`` capability receive the host's
    ``host.input_changed`` events while they are started.
    """

    def __init__(
        self,
        services: CoreServices,
        namespace: str = "foldernav.plugins",
        extra_search_paths: Optional[Iterable[str]] = None,
    ) -> None:
        self._services = services
        self._namespace = namespace
        self._search_paths: List[str] = list(extra_search_paths or [])
        self._records: Dict[str, PluginRecord] = {}
        services.event_bus.subscribe(INPUT_CHANGED, self._on_input_changed)

    @property
    def services(self) -> CoreServices:
        return self._services

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------
    def discover(self) -> Dict[str, PluginRecord]:
        try:
            namespace = importlib.import_module(self._namespace)
        except ModuleNotFoundError:
            _logger.warning("Plugin namespace '%s' is not importable", self._namespace)
            return self._records

        known = {record.module.__name__ for record in self._records.values()}
        paths = list(getattr(namespace, "__path__", [])) + self._search_paths
        for info in pkgutil.iter_modules(paths):
            module_name = f"{self._namespace}.{info.name}.plugin"
            if module_name in known:
                continue
            record = self._load(module_name)
            if record is None:
                continue
            identifier = record.manifest.identifier
            if identifier in self._records:
                _logger.warning("Plugin identifier '%s' is taken, ignoring %s", identifier, module_name)
                continue
            self._records[identifier] = record
            known.add(module_name)
        return self._records

    def _load(self, module_name: str) -> Optional[PluginRecord]:
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError:
            _logger.debug("No plugin module at '%s'", module_name)
            return None
        plugin_class = getattr(module, "Plugin", None)
        if not (isinstance(plugin_class, type) and issubclass(plugin_class, BasePlugin)):
            _logger.warning("'%s' has no BasePlugin subclass named 'Plugin'", module_name)
            return None
        instance: Optional[BasePlugin] = None
        try:
            instance = plugin_class(self._services)
            manifest = instance.manifest
        except Exception as exc:
            _logger.exception("Could not instantiate plugin from '%s'", module_name)
            placeholder = PluginManifest(
                identifier=module_name, name=module_name, description="Failed to load plugin"
            )
            return PluginRecord(placeholder, instance, module, PluginState.FAILED, str(exc))
        _logger.info("Loaded plugin '%s' %s", manifest.identifier, manifest.version)
        return PluginRecord(manifest=manifest, instance=instance, module=module)

    def iter_plugins(self) -> Iterable[PluginRecord]:
        return self._records.values()

    def get(self, identifier: str) -> Optional[PluginRecord]:
        return self._records.get(identifier)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, identifier: str) -> PluginState:
        record = self._record(identifier)
        try:
            plugin = self._instance(record)
            if not record.has_initialized:
                plugin.initialize()
                record.has_initialized = True
            plugin.start()
        except Exception as exc:
            self._fail(record, exc, "start")
            self._services.send_notification(
                f"Plugin '{record.manifest.name}' konnte nicht gestartet werden: {exc}",
                level="error",
                source=identifier,
            )
        else:
            record.state, record.error = PluginState.STARTED, None
        return record.state

    def stop(self, identifier: str) -> PluginState:
        record = self._record(identifier)
        try:
            self._instance(record).stop()
        except Exception as exc:
            self._fail(record, exc, "stop")
        else:
            record.state = PluginState.STOPPED
        return record.state

    def shutdown(self) -> None:
        self._services.event_bus.unsubscribe(INPUT_CHANGED, self._on_input_changed)
        for identifier, record in self._records.items():
            if record.instance is None:
                continue
            try:
                record.instance.shutdown()
            except Exception:
                _logger.exception("Plugin '%s' failed to shut down", identifier)

    # ------------------------------------------------------------------
    # Commands and host callbacks
    # ------------------------------------------------------------------
    def run_command(self, identifier: str, command: str) -> bool:
        """Run a manifest command on a plugin.

        Raises ``KeyError`` for an unknown plugin or command; returns ``False``
        without running anything when the plugin is not started.
        """
        record = self._record(identifier)
        if command not in record.manifest.command_ids():
            raise KeyError(f"Plugin '{identifier}' has no command '{command}'")
        if not record.is_running:
            _logger.debug("'%s' ignored: plugin '%s' is %s", command, identifier, record.state.value)
            return False
        _logger.debug("Running '%s' on plugin '%s'", command, identifier)
        return bool(record.instance.run_command(command))  # type: ignore[union-attr]

    def _on_input_changed(self, _event: str, data: Dict[str, Any]) -> None:
        uri = data.get("uri")
        listeners = [
            record.instance
            for record in self._records.values()
            if record.is_running and "input-listener" in record.manifest.capabilities
        ]
        for plugin in listeners:
            plugin.input_changed(uri if isinstance(uri, str) else None)  # type: ignore[union-attr]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _record(self, identifier: str) -> PluginRecord:
        record = self._records.get(identifier)
        if record is None:
            raise KeyError(f"Plugin '{identifier}' not found")
        return record

    @staticmethod
    def _instance(record: PluginRecord) -> BasePlugin:
        if record.instance is None:
            raise RuntimeError("Plugin instance is not available")
        return record.instance

    @staticmethod
    def _fail(record: PluginRecord, exc: Exception, action: str) -> None:
        record.state, record.error = PluginState.FAILED, str(exc)
        _logger.exception("Plugin '%s' failed to %s", record.manifest.identifier, action)
