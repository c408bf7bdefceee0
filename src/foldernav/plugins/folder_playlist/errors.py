from __future__ import annotations


class FolderPlaylistError(Exception):
    """Base class for failures reported at the plugin's command boundary.

    ``level`` is the notification level the plugin reports the failure with.
    """

    level = "warning"


class NoActiveItem(FolderPlaylistError):
    def __init__(self) -> None:
        super().__init__("No input item is open")


class UnreadableFolder(FolderPlaylistError):
    def __init__(self, folder: str, reason: str = "") -> None:
        self.folder = folder
        message = f"Could not read folder: {folder}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class MalformedPath(FolderPlaylistError, ValueError):
    def __init__(self, value: str, reason: str = "") -> None:
        self.value = value
        message = f"Malformed path: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EmptyPlaylist(FolderPlaylistError):
    """Nothing to navigate: the folder held no other media files."""

    level = "info"

    def __init__(self) -> None:
        super().__init__("Playlist is empty")
