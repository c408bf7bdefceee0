from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from ...core.plugin_base import BasePlugin, PluginCommand, PluginManifest
from .errors import EmptyPlaylist, FolderPlaylistError
from .media_filter import build_extension_set
from .models import MediaEntry
from .session import Activation, FolderPlaylistSession

DEFAULT_SETTINGS: Dict[str, Any] = {
    "case_sensitive_sort": True,
    "extra_extensions": [],
}


class Plugin(BasePlugin):
    """Loads every media file next to the open item into the host playlist.

    Commands:
    - activate: capture the open item, rebuild the playlist from its folder, jump into it
    - next / previous: move through the folder with wrap-around
    - media_next / media_previous: the same, bound to media keys
    - deactivate: drop the folder playlist

    The open item itself is never part of the folder playlist, so activation
    usually falls back to the first sibling and playback switches to it: the
    file the user opened stops and the alphabetically first other media file
    in its folder starts.
    """

    def __init__(self, services):  # type: ignore[override]
        super().__init__(services)
        self._manifest = PluginManifest(
            identifier="foldernav.folder_playlist",
            name="Folder Playlist Loader & Navigation",
            description="Lädt alle Mediendateien aus dem Ordner der geöffneten Datei und navigiert darin.",
            version="1.2.0",
            author="FolderNav Team",
            tags=("playlist", "folder", "navigation"),
            capabilities=("input-listener",),
            commands=(
                PluginCommand("activate", "Load Folder Playlist"),
                PluginCommand("next", "Play Next in Folder"),
                PluginCommand("previous", "Play Previous in Folder"),
                PluginCommand("media_next", "Play Next (Media Key)"),
                PluginCommand("media_previous", "Play Previous (Media Key)"),
                PluginCommand("deactivate", "Unload Folder Playlist"),
            ),
        )
        self._logger = services.get_logger("FolderPlaylist")
        self._session: Optional[FolderPlaylistSession] = None
        self._widget = None  # type: Optional[Any]
        self._handlers: Dict[str, Callable[[], bool]] = {
            "activate": self.activate,
            "next": self.next,
            "previous": self.previous,
            "media_next": self.next,
            "media_previous": self.previous,
            "deactivate": self.deactivate,
        }

    @property
    def manifest(self) -> PluginManifest:  # type: ignore[override]
        return self._manifest

    @property
    def session(self) -> Optional[FolderPlaylistSession]:
        return self._session

    def create_view(self):  # type: ignore[override]
        if self._widget is None:
            from .widgets import FolderPlaylistView

            self._widget = FolderPlaylistView(self)
        return self._widget

    def initialize(self) -> None:  # type: ignore[override]
        self.config.setdefaults(DEFAULT_SETTINGS)

    def start(self) -> None:  # type: ignore[override]
        self.services.require_host()
        self._logger.debug("[Folder Playlist] Ready")

    def stop(self) -> None:  # type: ignore[override]
        self.deactivate()

    def shutdown(self) -> None:  # type: ignore[override]
        self.deactivate()

    def run_command(self, command: str) -> bool:  # type: ignore[override]
        handler = self._handlers.get(command)
        if handler is None:
            raise KeyError(f"Unknown command '{command}'")
        return handler()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def activate(self) -> bool:
        self._logger.debug("[Folder Playlist] Activated")
        config = self.config
        session = FolderPlaylistSession(
            self.services.require_host(),
            self._logger,
            extensions=build_extension_set(config.get("extra_extensions", [])),
            case_sensitive=bool(config.get("case_sensitive_sort", True)),
        )
        try:
            activation = session.activate()
        except FolderPlaylistError as exc:
            self._report(exc)
            return False

        previous, self._session = self._session, session
        if previous is not None:
            previous.close()
        self._announce(activation)
        return True

    def next(self) -> bool:
        return self._navigate("next")

    def previous(self) -> bool:
        return self._navigate("previous")

    def deactivate(self) -> bool:
        session, self._session = self._session, None
        if session is None:
            return False
        session.close()
        self._logger.debug("[Folder Playlist] Deactivated")
        self.services.event_bus.emit("folder_playlist.deactivated", {})
        self._refresh_view()
        return True

    def input_changed(self, uri: Optional[str]) -> None:  # type: ignore[override]
        session = self._session
        if session is not None:
            session.note_input_changed(uri)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _navigate(self, direction: str) -> bool:
        session = self._session
        try:
            if session is None:
                raise EmptyPlaylist()
            entry: MediaEntry = session.next() if direction == "next" else session.previous()
        except FolderPlaylistError as exc:
            self._report(exc)
            return False
        self.services.event_bus.emit(
            "folder_playlist.navigated",
            {
                "uri": session.host_id(entry),
                "index": session.state.current_index,
                "direction": direction,
            },
        )
        self._refresh_view()
        return True

    def _announce(self, activation: Activation) -> None:
        state = activation.state
        if state.is_empty:
            self.services.send_notification(
                f"Keine weiteren Mediendateien in {activation.folder}",
                level="info",
                source=self.manifest.identifier,
            )
        self.services.event_bus.emit(
            "folder_playlist.activated",
            {
                "folder": activation.folder,
                "count": len(state),
                "index": state.current_index,
                "resolution": state.resolution.value if state.resolution else None,
            },
        )
        self._refresh_view()

    def _report(self, exc: FolderPlaylistError) -> None:
        self.services.send_notification(
            f"Ordner-Playlist: {exc}",
            level=exc.level,
            source=self.manifest.identifier,
        )

    def _refresh_view(self) -> None:
        if self._widget is not None:
            self._widget.refresh()


__all__ = ["Plugin"]
