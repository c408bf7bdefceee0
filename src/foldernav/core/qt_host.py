"""Media host backed by Qt Multimedia."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from PySide6.QtCore import QObject, QUrl  # type: ignore[import-not-found]
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer  # type: ignore[import-not-found]

from .events import EventBus
from .host import DirectoryLister, MediaHost

_logger = logging.getLogger("FolderNav.QtMediaHost")


def to_qurl(identifier: str) -> QUrl:
    if "://" in identifier or identifier.startswith("file:"):
        return QUrl(identifier)
    return QUrl.fromLocalFile(identifier)


class QtMediaHost(QObject):
    """Plays one source at a time and keeps the queue plugins hand it.

    Source changes are published as ``host.input_changed`` on the event bus.
    """

    def __init__(self, event_bus: Optional[EventBus] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._event_bus = event_bus
        self._queue: List[str] = []
        self._player = QMediaPlayer(self)
        self._audio_output = QAudioOutput(self)
        self._player.setAudioOutput(self._audio_output)
        self._player.sourceChanged.connect(self._on_source_changed)
        self._player.errorOccurred.connect(self._on_error)

    @property
    def player(self) -> QMediaPlayer:
        return self._player

    @property
    def queue(self) -> List[str]:
        return list(self._queue)

    def media_host(self, directory_lister: Optional[DirectoryLister] = None) -> MediaHost:
        return MediaHost(anchor_provider=self, playback_sink=self, directory_lister=directory_lister)

    def open(self, identifier: str) -> None:
        """Open a file (path or URI) as the current item, as a user would."""
        self._queue = []
        self.play(identifier)

    # AnchorProvider
    def current_item(self) -> Optional[str]:
        source = self._player.source()
        if source.isEmpty():
            return None
        return source.toString()

    # PlaybackSink
    def replace_playlist(self, uris: Sequence[str]) -> None:
        current = self.current_item()
        self._queue = [current] if current else []
        self._queue.extend(uri for uri in uris if uri != current)
        _logger.debug("Playlist replaced with %d item(s)", len(self._queue))

    def play(self, uri: str) -> None:
        self._player.setSource(to_qurl(uri))
        self._player.play()

    def stop(self) -> None:
        self._player.stop()

    def _on_source_changed(self, url: QUrl) -> None:
        uri = None if url.isEmpty() else url.toString()
        if self._event_bus is not None:
            self._event_bus.emit("host.input_changed", {"uri": uri})

    def _on_error(self, _error, message: str) -> None:
        _logger.warning("Playback error: %s", message)
