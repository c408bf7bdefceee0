from __future__ import annotations

from pathlib import Path

import pytest  # type: ignore[import-not-found]

pytest.importorskip("PySide6.QtMultimedia")

from PySide6.QtCore import QUrl  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from foldernav.core.events import EventBus  # noqa: E402
from foldernav.core.host import LocalDirectoryLister  # noqa: E402
from foldernav.core.qt_host import QtMediaHost, to_qurl  # noqa: E402


@pytest.fixture
def qapp() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def test_to_qurl_accepts_paths_and_uris():
    assert to_qurl("/music/a b.mp3").toString() == "file:///music/a b.mp3"
    assert to_qurl("file:///music/a%20b.mp3").toLocalFile() == "/music/a b.mp3"


def test_host_without_source_has_no_item(qapp):
    host = QtMediaHost()
    assert host.current_item() is None
    assert host.queue == []


def test_source_change_is_published(qapp, tmp_path: Path):
    bus = EventBus()
    received = []
    bus.subscribe("host.input_changed", lambda _event, data: received.append(data["uri"]))
    host = QtMediaHost(bus)

    target = tmp_path / "a.mp3"
    host.player.setSource(QUrl.fromLocalFile(str(target)))

    assert host.current_item() == QUrl.fromLocalFile(str(target)).toString()
    assert received[-1] == host.current_item()


def test_replace_playlist_keeps_current_first(qapp, tmp_path: Path):
    host = QtMediaHost()
    current = QUrl.fromLocalFile(str(tmp_path / "b.mp3"))
    host.player.setSource(current)

    others = [QUrl.fromLocalFile(str(tmp_path / name)).toString() for name in ("a.mp3", "c.mp3")]
    host.replace_playlist(others)

    assert host.queue == [current.toString(), *others]


def test_media_host_wires_itself(qapp):
    host = QtMediaHost()
    media_host = host.media_host()
    assert media_host.anchor_provider is host
    assert media_host.playback_sink is host
    assert isinstance(media_host.directory_lister, LocalDirectoryLister)
