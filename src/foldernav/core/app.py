from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from PySide6.QtCore import Qt  # type: ignore[import-not-found]
from PySide6.QtGui import QKeySequence, QShortcut  # type: ignore[import-not-found]
from PySide6.QtWidgets import (  # type: ignore[import-not-found]
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from .plugin_base import PluginState
from .plugin_manager import PluginManager, PluginRecord
from .qt_host import QtMediaHost
from .services import CoreServices, Notification

MEDIA_KEY_COMMANDS = {
    Qt.Key_MediaNext: "media_next",  # type: ignore[attr-defined]
    Qt.Key_MediaPrevious: "media_previous",  # type: ignore[attr-defined]
}


@dataclass
class PluginView:
    widget: QWidget


class PluginListItem(QListWidgetItem):
    def __init__(self, record: PluginRecord) -> None:
        super().__init__(record.manifest.name)
        self.identifier = record.manifest.identifier
        self.setData(Qt.UserRole, self.identifier)  # type: ignore[attr-defined]
        self.refresh(record)

    def refresh(self, record: PluginRecord) -> None:
        status = record.state.value
        tooltip = f"{record.manifest.description}\nStatus: {status}"
        if record.error:
            tooltip += f"\n{record.error}"
        self.setToolTip(tooltip)


class DashboardWindow(QMainWindow):
    def __init__(
        self,
        services: CoreServices,
        manager: PluginManager,
        host: Optional[QtMediaHost] = None,
    ) -> None:
        super().__init__()
        self._services = services
        self._manager = manager
        self._host = host
        self._views: Dict[str, PluginView] = {}
        self._command_buttons: List[QPushButton] = []
        self._app_settings = self._services.get_app_config()

        self.setWindowTitle("FolderNav")
        self.resize(720, 360)

        container = QWidget()
        root_layout = QHBoxLayout(container)
        root_layout.setContentsMargins(12, 12, 12, 12)
        root_layout.setSpacing(12)

        # Sidebar with plugins
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.setSpacing(6)

        title = QLabel("Plugins")
        title.setObjectName("SidebarTitle")
        sidebar_layout.addWidget(title)

        self.plugin_list = QListWidget()
        self.plugin_list.setSelectionMode(QListWidget.SelectionMode.SingleSelection)
        self.plugin_list.currentItemChanged.connect(self._on_plugin_selected)
        sidebar_layout.addWidget(self.plugin_list, stretch=1)

        actions_layout = QHBoxLayout()
        self.start_button = QPushButton("Start")
        self.start_button.clicked.connect(self._start_selected)
        actions_layout.addWidget(self.start_button)

        self.stop_button = QPushButton("Stop")
        self.stop_button.clicked.connect(self._stop_selected)
        actions_layout.addWidget(self.stop_button)
        sidebar_layout.addLayout(actions_layout)

        self.open_button = QPushButton("Datei öffnen…")
        self.open_button.clicked.connect(self._open_file_dialog)
        self.open_button.setEnabled(self._host is not None)
        sidebar_layout.addWidget(self.open_button)

        self.command_layout = QVBoxLayout()
        sidebar_layout.addLayout(self.command_layout)

        self.status_label = QLabel("Bereit")
        self.status_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)  # type: ignore[attr-defined]
        sidebar_layout.addWidget(self.status_label)

        root_layout.addWidget(sidebar, stretch=0)

        # Central stacked view
        self.view_stack = QStackedWidget()
        placeholder = QLabel("Plugin auswählen, um das Interface zu laden.")
        placeholder.setAlignment(Qt.AlignCenter)  # type: ignore[attr-defined]
        self.view_stack.addWidget(placeholder)
        root_layout.addWidget(self.view_stack, stretch=1)

        self.setCentralWidget(container)

        self._services.notifications.subscribe(self._on_notification)
        self._install_media_keys()

        self._populate_plugins()
        if not self._restore_dashboard_state() and self.plugin_list.count() > 0:
            self.plugin_list.setCurrentRow(0)
            self._start_selected()

    # ------------------------------------------------------------------
    # UI helpers
    # ------------------------------------------------------------------
    def _populate_plugins(self) -> None:
        self.plugin_list.clear()
        records = self._manager.discover()
        for record in records.values():
            self.plugin_list.addItem(PluginListItem(record))

    def _install_media_keys(self) -> None:
        for key, command in MEDIA_KEY_COMMANDS.items():
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.setContext(Qt.ApplicationShortcut)  # type: ignore[attr-defined]
            shortcut.activated.connect(lambda command=command: self._run_on_started(command))

    def _current_identifier(self) -> Optional[str]:
        current = self.plugin_list.currentItem()
        if current:
            return current.data(Qt.UserRole)  # type: ignore[attr-defined]
        return None

    def _current_record(self) -> Optional[PluginRecord]:
        identifier = self._current_identifier()
        if not identifier:
            return None
        return self._manager.get(identifier)

    def _ensure_view(self, identifier: str) -> QWidget:
        view = self._views.get(identifier)
        if view and view.widget:
            return view.widget

        record = self._manager.get(identifier)
        if not record or record.instance is None:
            placeholder = QLabel("Plugin konnte nicht initialisiert werden.")
            placeholder.setAlignment(Qt.AlignCenter)  # type: ignore[attr-defined]
            return placeholder

        widget = record.instance.create_view()
        self._views[identifier] = PluginView(widget=widget)
        self.view_stack.addWidget(widget)
        return widget

    def _rebuild_command_buttons(self, record: Optional[PluginRecord]) -> None:
        for button in self._command_buttons:
            self.command_layout.removeWidget(button)
            button.deleteLater()
        self._command_buttons = []
        if not record:
            return
        enabled = record.state == PluginState.STARTED
        for command in record.manifest.commands:
            button = QPushButton(command.title)
            button.setEnabled(enabled)
            button.clicked.connect(
                lambda _checked=False, ident=record.manifest.identifier, cmd=command.identifier: self._run_command(ident, cmd)
            )
            self.command_layout.addWidget(button)
            self._command_buttons.append(button)

    def _update_buttons(self, record: Optional[PluginRecord]) -> None:
        if not record:
            self.start_button.setEnabled(False)
            self.stop_button.setEnabled(False)
        else:
            self.start_button.setEnabled(record.state != PluginState.STARTED)
            self.stop_button.setEnabled(record.state == PluginState.STARTED)
        self._rebuild_command_buttons(record)

    def _update_app_settings(self, **kwargs: Any) -> None:
        payload: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if self._app_settings.get(key, None) != value:
                payload[key] = value
        if payload:
            self._app_settings.update(payload)

    def _restore_dashboard_state(self) -> bool:
        restored = False
        started_plugins = self._app_settings.get("started_plugins", [])
        if isinstance(started_plugins, list):
            for identifier in started_plugins:
                if not isinstance(identifier, str):
                    continue
                record = self._manager.get(identifier)
                if not record or record.state == PluginState.STARTED:
                    continue
                if self._manager.start(identifier) == PluginState.STARTED:
                    restored = True

        selected = self._app_settings.get("selected_plugin")
        if isinstance(selected, str) and self._select_plugin(selected):
            restored = True

        self._persist_started_plugins()
        return restored

    def _select_plugin(self, identifier: str) -> bool:
        for index in range(self.plugin_list.count()):
            item = self.plugin_list.item(index)
            if item and item.data(Qt.UserRole) == identifier:  # type: ignore[attr-defined]
                self.plugin_list.setCurrentRow(index)
                return True
        return False

    def _persist_started_plugins(self) -> None:
        started = [
            record.manifest.identifier
            for record in self._manager.iter_plugins()
            if record.state == PluginState.STARTED
        ]
        self._update_app_settings(started_plugins=started)

    def _on_plugin_selected(self, current: Optional[QListWidgetItem]) -> None:
        record = self._current_record()
        self._update_buttons(record)
        if record and record.state == PluginState.STARTED:
            self.view_stack.setCurrentWidget(self._ensure_view(record.manifest.identifier))
        else:
            self.view_stack.setCurrentIndex(0)
        self._update_app_settings(selected_plugin=self._current_identifier())

    def _start_selected(self) -> None:
        record = self._current_record()
        if not record:
            return
        state = self._manager.start(record.manifest.identifier)
        self._refresh_record(record.manifest.identifier)
        if state == PluginState.STARTED:
            self.view_stack.setCurrentWidget(self._ensure_view(record.manifest.identifier))
            self._set_status(f"{record.manifest.name} gestartet", level="success")
        else:
            self.view_stack.setCurrentIndex(0)
            self._show_error(record)
        self._update_buttons(self._current_record())
        self._persist_started_plugins()

    def _stop_selected(self) -> None:
        record = self._current_record()
        if not record:
            return
        self._manager.stop(record.manifest.identifier)
        self._refresh_record(record.manifest.identifier)
        self.view_stack.setCurrentIndex(0)
        self._set_status(f"{record.manifest.name} gestoppt")
        self._update_buttons(self._current_record())
        self._persist_started_plugins()

    def _open_file_dialog(self) -> None:
        if self._host is None:
            return
        path, _ = QFileDialog.getOpenFileName(self, "Datei öffnen")
        if path:
            self._host.open(path)
            self._set_status(f"Geöffnet: {path}")

    def _run_command(self, identifier: str, command: str) -> None:
        try:
            self._manager.run_command(identifier, command)
        except Exception as exc:  # pragma: no cover - UI feedback only
            self._services.logger.exception("Command '%s' failed for plugin %s", command, identifier)
            QMessageBox.critical(self, "Fehler", f"Befehl fehlgeschlagen: {exc}")

    def _run_on_started(self, command: str) -> None:
        for record in self._manager.iter_plugins():
            if record.state == PluginState.STARTED and command in record.manifest.command_ids():
                self._run_command(record.manifest.identifier, command)

    def _refresh_record(self, identifier: str) -> None:
        record = self._manager.get(identifier)
        if not record:
            return
        for index in range(self.plugin_list.count()):
            item = self.plugin_list.item(index)
            if isinstance(item, PluginListItem) and item.identifier == identifier:
                item.refresh(record)
                break

    def _show_error(self, record: PluginRecord) -> None:
        if record.error:
            QMessageBox.critical(self, record.manifest.name, record.error)

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._persist_started_plugins()
        self._services.notifications.unsubscribe(self._on_notification)
        self._manager.shutdown()
        if self._host is not None:
            self._host.stop()
        super().closeEvent(event)

    # ------------------------------------------------------------------
    # Status & notifications
    # ------------------------------------------------------------------
    def _set_status(
        self,
        message: str,
        *,
        level: str = "info",
        source: Optional[str] = None,
    ) -> None:
        color_map = {
            "info": "#d0d0d0",
            "success": "#2e8b57",
            "warning": "#d19a00",
            "error": "#b22222",
        }
        color = color_map.get(level.lower(), color_map["info"])
        if source:
            message = f"[{source}] {message}"
        self.status_label.setText(message)
        self.status_label.setStyleSheet(f"color: {color};")

    def _on_notification(self, notification: Notification) -> None:
        self._set_status(
            notification.message,
            level=notification.level,
            source=notification.source,
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv if argv is None else argv)
    app = QApplication(args)
    services = CoreServices()
    host = QtMediaHost(services.event_bus)
    services.host = host.media_host()
    manager = PluginManager(services=services)
    window = DashboardWindow(services=services, manager=manager, host=host)
    window.show()
    if len(args) > 1:
        host.open(args[1])
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
