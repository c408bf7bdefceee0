"""Build the sorted sibling playlist for an anchor from a folder listing."""
from __future__ import annotations

from typing import AbstractSet, Callable, Dict, Iterable, Optional, Tuple

from .media_filter import MEDIA_EXTENSIONS, is_media
from .models import SEPARATORS, MediaEntry, PlaylistState


def folder_prefix(identifier: str) -> str:
    """Everything up to and including the last separator; ``""`` for bare names."""
    cut = max(identifier.rfind(sep) for sep in SEPARATORS)
    return identifier[:cut + 1]


def _sort_key(case_sensitive: bool) -> Callable[[MediaEntry], Tuple[str, ...]]:
    if case_sensitive:
        return lambda entry: (entry.name, entry.path)
    return lambda entry: (entry.name.casefold(), entry.name, entry.path)


def build_snapshot(
    anchor_path: str,
    sibling_names: Iterable[str],
    *,
    extensions: Optional[AbstractSet[str]] = None,
    case_sensitive: bool = True,
) -> PlaylistState:
    """Return an unresolved playlist of the anchor's media siblings.

    Names are joined onto the anchor's own folder prefix, so whatever
    separator or scheme the anchor uses is reused verbatim. The anchor itself
    and duplicate names are left out.
    """
    allowed = MEDIA_EXTENSIONS if extensions is None else extensions
    prefix = folder_prefix(anchor_path)
    unique: Dict[str, MediaEntry] = {}
    for name in sibling_names:
        if not name or not is_media(name, allowed):
            continue
        path = prefix + name
        if path == anchor_path or path in unique:
            continue
        unique[path] = MediaEntry(path)
    entries = tuple(sorted(unique.values(), key=_sort_key(case_sensitive)))
    return PlaylistState(entries=entries)
