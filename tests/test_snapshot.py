from foldernav.plugins.folder_playlist.models import MediaEntry
from foldernav.plugins.folder_playlist.snapshot import build_snapshot, folder_prefix


def names(state):
    return [entry.name for entry in state.entries]


def test_folder_prefix_keeps_separator_convention():
    assert folder_prefix("/music/a.mp3") == "/music/"
    assert folder_prefix("C:\\Music\\a.mp3") == "C:\\Music\\"
    assert folder_prefix("file:///music/a.mp3") == "file:///music/"
    assert folder_prefix("a.mp3") == ""


def test_filters_excludes_anchor_and_sorts():
    state = build_snapshot("/music/a.mp3", ["b.mp4", "a.mp3", "c.txt"])
    assert state.paths() == ("/music/b.mp4",)
    assert state.current_index is None
    assert state.resolution is None


def test_bare_anchor_name_is_excluded():
    state = build_snapshot("a.mp3", ["b.mp4", "a.mp3", "c.txt"])
    assert names(state) == ["b.mp4"]


def test_empty_listing_gives_empty_state():
    state = build_snapshot("/music/a.mp3", [])
    assert state.is_empty
    assert state.current_index is None


def test_only_anchor_gives_empty_state():
    assert build_snapshot("/v/only.mp4", ["only.mp4"]).is_empty


def test_no_media_gives_empty_state():
    assert build_snapshot("/v/a.mkv", ["x.txt", "y.nfo", "cover.jpg"]).is_empty


def test_duplicates_are_dropped():
    state = build_snapshot("/m/a.mp3", ["b.mp3", "b.mp3", "c.mp3"])
    assert state.paths() == ("/m/b.mp3", "/m/c.mp3")
    assert len(set(state.paths())) == len(state.paths())


def test_windows_join_convention():
    state = build_snapshot("D:\\Shows\\e01.mkv", ["e02.mkv", "e01.mkv"])
    assert state.entries == (MediaEntry("D:\\Shows\\e02.mkv"),)
    assert state.entries[0].name == "e02.mkv"


def test_sort_is_case_sensitive_by_default():
    state = build_snapshot("/m/x.mp3", ["b.mp3", "A.mp3", "a.mp3", "B.mp3"])
    assert names(state) == ["A.mp3", "B.mp3", "a.mp3", "b.mp3"]


def test_case_insensitive_sort_is_still_total():
    state = build_snapshot("/m/x.mp3", ["b.mp3", "a.mp3", "B.mp3", "A.mp3"], case_sensitive=False)
    assert names(state) == ["A.mp3", "a.mp3", "B.mp3", "b.mp3"]


def test_order_does_not_depend_on_listing_order():
    listing = ["e10.mkv", "e02.mkv", "e01.mkv", "notes.txt"]
    first = build_snapshot("/s/e05.mkv", listing)
    second = build_snapshot("/s/e05.mkv", list(reversed(listing)))
    assert first == second


def test_custom_extensions():
    state = build_snapshot("/m/a.mp3", ["b.xyz", "c.mp3"], extensions=frozenset({"xyz"}))
    assert names(state) == ["b.xyz"]
