from __future__ import annotations

import os
from typing import Dict, List, Optional, Sequence

import pytest

# Qt widgets and Qt Multimedia must not need a display during tests.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from foldernav.core.host import MediaHost  # noqa: E402


class FakePlayer:
    """Anchor provider + playback sink recording what the plugin asked for."""

    def __init__(self, current: Optional[str] = None) -> None:
        self.current = current
        self.playlist: List[str] = []
        self.played: List[str] = []
        self.replace_calls = 0

    def current_item(self) -> Optional[str]:
        return self.current

    def replace_playlist(self, uris: Sequence[str]) -> None:
        self.replace_calls += 1
        self.playlist = list(uris)

    def play(self, uri: str) -> None:
        self.played.append(uri)
        self.current = uri


class FakeLister:
    def __init__(self, folders: Optional[Dict[str, List[str]]] = None) -> None:
        self.folders = folders or {}
        self.requests: List[str] = []

    def list_files(self, folder: str) -> List[str]:
        self.requests.append(folder)
        if folder not in self.folders:
            raise PermissionError(13, "Permission denied", folder)
        return list(self.folders[folder])


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def lister() -> FakeLister:
    return FakeLister()


@pytest.fixture
def media_host(player: FakePlayer, lister: FakeLister) -> MediaHost:
    return MediaHost(anchor_provider=player, playback_sink=player, directory_lister=lister)
