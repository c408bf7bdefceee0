"""Host object model exposed to plugins.

A host (the Qt player in :mod:`foldernav.core.qt_host`, a test double, or any
other player) hands plugins a :class:`MediaHost` through
``CoreServices.host``. Plugins never talk to the player any other way.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence


_logger = logging.getLogger("FolderNav.Host")


class AnchorProvider(Protocol):
    def current_item(self) -> Optional[str]:
        """Return the identifier (URI) of the open item, or ``None``."""


class DirectoryLister(Protocol):
    def list_files(self, folder: str) -> List[str]:
        """Return the names of the regular files in ``folder``.

        Raises ``OSError`` when the folder cannot be read.
        """


class PathCodec(Protocol):
    def decode(self, uri: str) -> str:
        """Turn an identifier into a plain filesystem path."""

    def encode(self, path: str) -> str:
        """Turn a plain filesystem path into an identifier."""

    def folder_of(self, path: str) -> str:
        """Return the folder prefix of ``path``, trailing separator included."""


class PlaybackSink(Protocol):
    def replace_playlist(self, uris: Sequence[str]) -> None:
        """Replace the queued items, keeping the one that is playing."""

    def play(self, uri: str) -> None:
        """Make ``uri`` the active playback target."""


@dataclass
class MediaHost:
    """Bundle of host capabilities handed to plugins."""

    anchor_provider: AnchorProvider
    playback_sink: PlaybackSink
    directory_lister: Optional[DirectoryLister] = None
    path_codec: Optional[PathCodec] = None

    def __post_init__(self) -> None:
        if self.directory_lister is None:
            self.directory_lister = LocalDirectoryLister()


class LocalDirectoryLister:
    """Directory lister backed by the local filesystem."""

    def list_files(self, folder: str) -> List[str]:
        names: List[str] = []
        with os.scandir(folder or os.curdir) as entries:
            for entry in entries:
                try:
                    if entry.is_file():
                        names.append(entry.name)
                except OSError:
                    _logger.debug("Skipping unreadable entry %s", entry.path)
        return names
