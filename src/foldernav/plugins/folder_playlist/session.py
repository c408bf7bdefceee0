"""Per-activation context wiring the folder playlist to a media host.

A session owns exactly one ``PlaylistState``/``AnchorReference`` pair. Every
public method takes the session lock, so a rescan triggered from one host
callback and a navigation key press from another are applied one at a time.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import AbstractSet, Callable, Optional, Set

from ...core.host import MediaHost, PathCodec
from .errors import EmptyPlaylist, NoActiveItem, UnreadableFolder
from .models import AnchorReference, Direction, MediaEntry, PlaylistState, Resolution, final_segment
from .navigation import advance, jump_to_anchor
from .paths import FileUriCodec, has_scheme
from .snapshot import build_snapshot


@dataclass(frozen=True)
class Activation:
    folder: str
    anchor: AnchorReference
    state: PlaylistState
    target: Optional[str]


class FolderPlaylistSession:
    def __init__(
        self,
        host: MediaHost,
        logger: Optional[logging.Logger] = None,
        *,
        extensions: Optional[AbstractSet[str]] = None,
        case_sensitive: bool = True,
    ) -> None:
        self._host = host
        self._logger = logger or logging.getLogger("FolderNav.FolderPlaylist")
        self._extensions = extensions
        self._case_sensitive = case_sensitive
        self._codec: PathCodec = host.path_codec or FileUriCodec()
        self._lock = threading.RLock()
        self._state = PlaylistState()
        self._anchor: Optional[AnchorReference] = None
        self._folder: Optional[str] = None
        self._to_host_id: Callable[[str], str] = lambda path: path
        self._last_played: Optional[str] = None
        self._processed: Set[str] = set()

    @property
    def state(self) -> PlaylistState:
        with self._lock:
            return self._state

    @property
    def anchor(self) -> Optional[AnchorReference]:
        with self._lock:
            return self._anchor

    @property
    def folder(self) -> Optional[str]:
        with self._lock:
            return self._folder

    @property
    def last_played(self) -> Optional[str]:
        with self._lock:
            return self._last_played

    def host_id(self, entry: MediaEntry) -> str:
        """Identifier the host knows ``entry`` by."""
        return self._to_host_id(entry.path)

    def activate(self) -> Activation:
        """Capture the open item, rebuild the folder playlist and jump into it.

        Raises ``NoActiveItem``, ``MalformedPath`` or ``UnreadableFolder``
        before anything is changed; on failure the previous playlist and the
        host's playback stay as they were.
        """
        with self._lock:
            uri = self._host.anchor_provider.current_item()
            if not uri:
                raise NoActiveItem()
            path = self._codec.decode(uri)
            anchor = AnchorReference(uri=uri, name=final_segment(path))
            self._logger.debug("Captured initial file name: %s", anchor.name)
            self._logger.debug("Captured initial file URI: %s", anchor.uri)

            folder = self._codec.folder_of(path)
            try:
                names = self._host.directory_lister.list_files(folder)  # type: ignore[union-attr]
            except OSError as exc:
                raise UnreadableFolder(folder, exc.strerror or str(exc)) from exc

            snapshot = build_snapshot(
                path,
                names,
                extensions=self._extensions,
                case_sensitive=self._case_sensitive,
            )
            state, target = jump_to_anchor(snapshot, anchor)
            to_host_id = self._codec.encode if has_scheme(uri) else (lambda value: value)

            if state.is_empty:
                self._logger.debug("No media files found in folder: %s", folder)
            else:
                self._logger.debug("Loading playlist from folder: %s", folder)
                self._host.playback_sink.replace_playlist([to_host_id(p) for p in state.paths()])
                if state.resolution is Resolution.DEFAULT:
                    self._logger.debug("Initial media not found in playlist; defaulting to first item")
                elif state.resolution is not None:
                    self._logger.debug("Initial media matched by %s", state.resolution.value)
                if target is not None:
                    self._logger.debug("Jumping to initial media: %s", target.path)
                    self._host.playback_sink.play(to_host_id(target.path))

            self._state = state
            self._anchor = anchor
            self._folder = folder
            self._to_host_id = to_host_id
            self._processed = {uri}
            self._last_played = to_host_id(target.path) if target is not None else uri
            return Activation(
                folder=folder,
                anchor=anchor,
                state=state,
                target=to_host_id(target.path) if target is not None else None,
            )

    def navigate(self, direction: Direction) -> MediaEntry:
        """Move to the next/previous sibling with wrap-around and play it.

        Raises ``EmptyPlaylist`` when there is nothing to play.
        """
        with self._lock:
            self._logger.debug("%s() command received", direction.value)
            state, entry = advance(self._state, direction)
            if entry is None:
                self._logger.debug("Playlist is empty")
                raise EmptyPlaylist()
            self._logger.debug("Jumping to %s item: %s", direction.value, entry.path)
            self._host.playback_sink.play(self._to_host_id(entry.path))
            self._state = state
            self._last_played = self._to_host_id(entry.path)
            return entry

    def next(self) -> MediaEntry:
        return self.navigate(Direction.NEXT)

    def previous(self) -> MediaEntry:
        return self.navigate(Direction.PREVIOUS)

    def note_input_changed(self, uri: Optional[str]) -> bool:
        """Record a host "now playing" change; ``True`` the first time an item is seen."""
        if not uri:
            return False
        with self._lock:
            if uri in self._processed:
                return False
            self._processed.add(uri)
            self._last_played = uri
        self._logger.debug("Now playing: %s", uri)
        return True

    def close(self) -> None:
        with self._lock:
            self._state = PlaylistState()
            self._anchor = None
            self._folder = None
            self._processed.clear()
            self._last_played = None
