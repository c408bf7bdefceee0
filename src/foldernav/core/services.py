from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .config import ConfigStore, PluginConfig
from .events import EventBus
from .host import MediaHost

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DASHBOARD_BUCKET = "__dashboard__"


@dataclass(frozen=True)
class Notification:
    """User-facing message shown in the dashboard status line."""

    message: str
    level: str = "info"
    source: Optional[str] = None


NotificationCallback = Callable[[Notification], None]


class NotificationCenter:
    """Fans notifications out to the UI; a failing listener is logged and skipped."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: List[NotificationCallback] = []

    def subscribe(self, callback: NotificationCallback) -> None:
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def unsubscribe(self, callback: NotificationCallback) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def publish(self, notification: Notification) -> None:
        with self._lock:
            listeners = tuple(self._listeners)
        for listener in listeners:
            try:
                listener(notification)
            except Exception:
                logging.getLogger("FolderNav.NotificationCenter").exception(
                    "Listener failed for notification from %s", notification.source
                )


def default_data_dir(app_name: str) -> Path:
    """``%APPDATA%\\<app>`` on Windows, ``$XDG_CONFIG_HOME/<app>`` elsewhere."""
    if os.name == "nt":
        root = os.getenv("APPDATA") or str(Path.home() / "AppData" / "Roaming")
    else:
        root = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(root) / app_name.lower()


def configure_logger(app_name: str) -> logging.Logger:
    """Attach one stream handler to the application logger (idempotent)."""
    logger = logging.getLogger(app_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger


class CoreServices:
    """What every plugin gets: logging, notifications, settings, events and the media host."""

    def __init__(
        self,
        app_name: str = "FolderNav",
        data_dir: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
        host: Optional[MediaHost] = None,
    ) -> None:
        self.app_name = app_name
        self.data_dir = data_dir or default_data_dir(app_name)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logger or configure_logger(app_name)
        self._config_store = ConfigStore(self.data_dir / "config.json")
        self.notifications = NotificationCenter()
        self.event_bus = EventBus()
        self.host = host

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def config_store(self) -> ConfigStore:
        return self._config_store

    def get_logger(self, name: str) -> logging.Logger:
        return self._logger.getChild(name)

    def require_host(self) -> MediaHost:
        if self.host is None:
            raise RuntimeError("No media host is attached to the core services")
        return self.host

    def send_notification(
        self, message: str, level: str = "info", *, source: Optional[str] = None
    ) -> None:
        """Publish ``message`` to the UI and log it at ``level``."""
        self.notifications.publish(Notification(message=message, level=level, source=source))
        numeric = logging.getLevelName(level.upper())
        self._logger.log(numeric if isinstance(numeric, int) else logging.INFO, "%s", message)

    def get_plugin_config(self, identifier: str) -> PluginConfig:
        return self._config_store.get_plugin(identifier)

    def get_app_config(self) -> PluginConfig:
        """Settings bucket of the dashboard window itself."""
        return self._config_store.get_plugin(DASHBOARD_BUCKET)
