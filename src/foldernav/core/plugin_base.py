from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from PySide6.QtWidgets import QWidget
    from .services import CoreServices
    from .config import PluginConfig
else:  # pragma: no cover - annotations only
    QWidget = Any  # type: ignore[assignment]


@dataclass(frozen=True)
class PluginCommand:
    """A host-facing command a plugin registers (menu entry, key binding)."""

    identifier: str
    title: str


@dataclass(frozen=True)
class PluginManifest:
    """Describes metadata required for every FolderNav plugin."""

    identifier: str
    name: str
    description: str
    version: str = "0.1.0"
    author: Optional[str] = None
    url: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    capabilities: Tuple[str, ...] = field(default_factory=tuple)
    commands: Tuple[PluginCommand, ...] = field(default_factory=tuple)

    def command_ids(self) -> Tuple[str, ...]:
        return tuple(command.identifier for command in self.commands)


class PluginState(enum.Enum):
    """Lifecycle states reported by the plugin manager."""

    LOADED = "loaded"
    STARTED = "started"
    STOPPED = "stopped"
    FAILED = "failed"


class BasePlugin(ABC):
    """Base contract every plugin must implement."""

    def __init__(self, services: "CoreServices") -> None:
        self._services = services

    @property
    @abstractmethod
    def manifest(self) -> PluginManifest:
        """Return plugin metadata."""

    @abstractmethod
    def create_view(self) -> "QWidget":
        """Return the widget to embed in the dashboard."""

    def initialize(self) -> None:
        """Perform one-time setup after instantiation."""

    @abstractmethod
    def start(self) -> None:
        """Begin the plugin's active work."""

    def stop(self) -> None:
        """Stop the plugin and release transient resources."""

    def shutdown(self) -> None:
        """Called when the application is closing."""

    def run_command(self, command: str) -> bool:
        """Execute one of the commands listed in the manifest.

        Returns ``True`` when the command had an effect.
        """
        raise NotImplementedError(f"{type(self).__name__} does not handle '{command}'")

    def input_changed(self, uri: Optional[str]) -> None:
        """Host callback: the item being played changed."""

    @property
    def services(self) -> "CoreServices":
        return self._services

    @property
    def config(self) -> "PluginConfig":
        return self._services.get_plugin_config(self.manifest.identifier)
