from __future__ import annotations

import os
import sys
import threading

import pytest

from foldernav.core.host import LocalDirectoryLister, MediaHost
from foldernav.plugins.folder_playlist.errors import (
    EmptyPlaylist,
    MalformedPath,
    NoActiveItem,
    UnreadableFolder,
)
from foldernav.plugins.folder_playlist.models import Resolution
from foldernav.plugins.folder_playlist.session import FolderPlaylistSession


def test_activate_rebuilds_playlist_and_jumps(player, lister, media_host):
    player.current = "file:///music/b%20side.mp3"
    lister.folders["/music/"] = ["c.mp3", "b side.mp3", "a.mp3", "cover.jpg"]
    session = FolderPlaylistSession(media_host)

    activation = session.activate()

    assert lister.requests == ["/music/"]
    assert activation.folder == "/music/"
    assert activation.anchor.uri == "file:///music/b%20side.mp3"
    assert activation.anchor.name == "b side.mp3"
    assert player.playlist == ["file:///music/a.mp3", "file:///music/c.mp3"]
    assert activation.state.current_index == 0
    assert activation.state.resolution is Resolution.DEFAULT
    assert player.played == ["file:///music/a.mp3"]
    assert activation.target == "file:///music/a.mp3"


def test_plain_path_anchor_keeps_plain_identifiers(player, lister, media_host):
    player.current = "/videos/e02.mkv"
    lister.folders["/videos/"] = ["e01.mkv", "e02.mkv", "e03.mkv"]
    session = FolderPlaylistSession(media_host)
    session.activate()

    assert player.playlist == ["/videos/e01.mkv", "/videos/e03.mkv"]
    assert session.next().path == "/videos/e03.mkv"
    assert player.played[-1] == "/videos/e03.mkv"


def test_navigation_wraps_and_plays(player, lister, media_host):
    player.current = "/m/x.mp3"
    lister.folders["/m/"] = ["a.mp3", "b.mp3", "c.mp3", "x.mp3"]
    session = FolderPlaylistSession(media_host)
    session.activate()
    assert session.state.current_index == 0

    assert session.next().name == "b.mp3"
    assert session.next().name == "c.mp3"
    assert session.next().name == "a.mp3"
    assert session.previous().name == "c.mp3"
    assert player.played == ["/m/a.mp3", "/m/b.mp3", "/m/c.mp3", "/m/a.mp3", "/m/c.mp3"]
    assert session.last_played == "/m/c.mp3"
    assert lister.requests == ["/m/"]


def test_empty_folder_leaves_host_untouched(player, lister, media_host):
    player.current = "/v/only.mp4"
    lister.folders["/v/"] = ["only.mp4", "readme.txt"]
    session = FolderPlaylistSession(media_host)

    activation = session.activate()

    assert activation.state.is_empty
    assert activation.target is None
    assert player.replace_calls == 0
    assert player.played == []
    with pytest.raises(EmptyPlaylist):
        session.next()


def test_no_active_item(player, media_host):
    session = FolderPlaylistSession(media_host)
    with pytest.raises(NoActiveItem):
        session.activate()


def test_unreadable_folder(player, media_host):
    player.current = "/locked/a.mp3"
    session = FolderPlaylistSession(media_host)
    with pytest.raises(UnreadableFolder) as info:
        session.activate()
    assert info.value.folder == "/locked/"
    assert "Permission denied" in str(info.value)


def test_malformed_anchor(player, media_host):
    player.current = "http://radio.example/stream"
    session = FolderPlaylistSession(media_host)
    with pytest.raises(MalformedPath):
        session.activate()


def test_failed_activation_keeps_previous_state(player, lister, media_host):
    player.current = "/m/a.mp3"
    lister.folders["/m/"] = ["a.mp3", "b.mp3", "c.mp3"]
    session = FolderPlaylistSession(media_host)
    session.activate()
    before = session.state
    played_before = list(player.played)

    player.current = "/gone/z.mp3"
    with pytest.raises(UnreadableFolder):
        session.activate()

    assert session.state is before
    assert session.folder == "/m/"
    assert player.played == played_before


def test_rescan_replaces_state_wholesale(player, lister, media_host):
    player.current = "/m/a.mp3"
    lister.folders["/m/"] = ["a.mp3", "b.mp3"]
    session = FolderPlaylistSession(media_host)
    session.activate()
    session.next()

    lister.folders["/m/"] = ["a.mp3", "b.mp3", "c.mp3"]
    player.current = "/m/a.mp3"
    activation = session.activate()
    assert [e.name for e in activation.state.entries] == ["b.mp3", "c.mp3"]
    assert session.state.current_index == 0


def test_input_changed_is_recorded_once(player, lister, media_host):
    player.current = "/m/a.mp3"
    lister.folders["/m/"] = ["a.mp3", "b.mp3"]
    session = FolderPlaylistSession(media_host)
    session.activate()

    assert session.note_input_changed("/m/a.mp3") is False
    assert session.note_input_changed("/m/other.mp3") is True
    assert session.note_input_changed("/m/other.mp3") is False
    assert session.note_input_changed(None) is False
    assert session.last_played == "/m/other.mp3"


def test_close_discards_state(player, lister, media_host):
    player.current = "/m/a.mp3"
    lister.folders["/m/"] = ["a.mp3", "b.mp3"]
    session = FolderPlaylistSession(media_host)
    session.activate()
    session.close()
    assert session.state.is_empty
    assert session.anchor is None
    assert session.folder is None


def test_concurrent_navigation_is_serialised(player, lister, media_host):
    player.current = "/m/z.mp3"
    lister.folders["/m/"] = [f"{i:02d}.mp3" for i in range(7)]
    session = FolderPlaylistSession(media_host)
    session.activate()

    threads = [threading.Thread(target=session.next) for _ in range(14)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    # 14 steps on 7 entries from index 0 lands on index 0 again
    assert session.state.current_index == 0
    assert len(player.played) == 15


def test_case_insensitive_session(player, lister, media_host):
    player.current = "/m/x.mp3"
    lister.folders["/m/"] = ["b.mp3", "A.mp3", "a.mp3"]
    session = FolderPlaylistSession(media_host, case_sensitive=False)
    session.activate()
    assert [e.name for e in session.state.entries] == ["A.mp3", "a.mp3", "b.mp3"]


def test_local_directory_lister_reads_real_folder(tmp_path):
    (tmp_path / "b.mp3").write_bytes(b"")
    (tmp_path / "a.mkv").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "sub.mp3").mkdir()

    names = LocalDirectoryLister().list_files(str(tmp_path))
    assert sorted(names) == ["a.mkv", "b.mp3", "notes.txt"]

    class Player:
        current = (tmp_path / "b.mp3").as_uri()
        played = []

        def current_item(self):
            return self.current

        def replace_playlist(self, uris):
            self.playlist = list(uris)

        def play(self, uri):
            self.played.append(uri)

    fake = Player()
    session = FolderPlaylistSession(MediaHost(anchor_provider=fake, playback_sink=fake))
    session.activate()
    assert fake.playlist == [(tmp_path / "a.mkv").as_uri()]


def test_local_directory_lister_missing_folder(tmp_path):
    with pytest.raises(OSError):
        LocalDirectoryLister().list_files(str(tmp_path / "missing"))


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="needs raw byte file names")
def test_undecodable_sibling_name_is_loaded(tmp_path, player):
    (tmp_path / "a.mp3").write_bytes(b"")
    (tmp_path / "b.mp3").write_bytes(b"")
    try:
        with open(os.path.join(os.fsencode(tmp_path), b"\xff.mp3"), "wb"):
            pass
    except OSError:
        pytest.skip("filesystem rejects non UTF-8 names")

    player.current = (tmp_path / "a.mp3").as_uri()
    session = FolderPlaylistSession(MediaHost(anchor_provider=player, playback_sink=player))
    activation = session.activate()

    assert len(activation.state) == 2
    assert player.playlist[0] == (tmp_path / "b.mp3").as_uri()
    assert player.playlist[1].endswith("/%FF.mp3")
    assert player.played == [(tmp_path / "b.mp3").as_uri()]
    assert session.next().path == os.path.join(str(tmp_path), os.fsdecode(b"\xff.mp3"))
