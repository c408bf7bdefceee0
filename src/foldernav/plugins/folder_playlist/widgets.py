from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from PySide6.QtCore import Qt  # type: ignore[import-not-found]
from PySide6.QtWidgets import (  # type: ignore[import-not-found]
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

if TYPE_CHECKING:  # pragma: no cover
    from .plugin import Plugin


class FolderPlaylistView(QWidget):
    """Control strip: folder, current position and the navigation commands."""

    def __init__(self, plugin: "Plugin", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._plugin = plugin

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self.folder_label = QLabel()
        self.folder_label.setObjectName("FolderLabel")
        self.folder_label.setWordWrap(True)
        layout.addWidget(self.folder_label)

        self.position_label = QLabel()
        self.position_label.setAlignment(Qt.AlignCenter)  # type: ignore[attr-defined]
        layout.addWidget(self.position_label)

        buttons = QHBoxLayout()
        self.previous_button = QPushButton("⏮ Zurück")
        self.previous_button.clicked.connect(lambda: self._plugin.run_command("previous"))
        buttons.addWidget(self.previous_button)

        self.load_button = QPushButton("Ordner laden")
        self.load_button.clicked.connect(lambda: self._plugin.run_command("activate"))
        buttons.addWidget(self.load_button)

        self.next_button = QPushButton("Weiter ⏭")
        self.next_button.clicked.connect(lambda: self._plugin.run_command("next"))
        buttons.addWidget(self.next_button)
        layout.addLayout(buttons)
        layout.addStretch(1)

        self.refresh()

    def refresh(self) -> None:
        session = self._plugin.session
        state = session.state if session is not None else None
        if session is None:
            self.folder_label.setText("Kein Ordner geladen")
            self.position_label.setText("")
        else:
            self.folder_label.setText(session.folder or "")
            current = state.current
            if current is None:
                self.position_label.setText("Keine weiteren Mediendateien")
            else:
                index = (state.current_index or 0) + 1
                self.position_label.setText(f"{index}/{len(state)} · {current.name}")
        has_entries = bool(state is not None and not state.is_empty)
        self.previous_button.setEnabled(has_entries)
        self.next_button.setEnabled(has_entries)
