"""Anchor resolution and wrap-around navigation over a PlaylistState.

Both operations are pure: they return a new state and never touch the host.
Wrap-around is unconditional; the host's repeat/loop mode plays no part.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from .models import AnchorReference, Direction, MediaEntry, PlaylistState, Resolution


def resolve_anchor(state: PlaylistState, anchor: AnchorReference) -> PlaylistState:
    """Seed ``current_index`` from the anchor.

    Exact identifier match wins over a file name match; when neither is found
    the first entry is used. An empty playlist stays unresolved.
    """
    for index, entry in enumerate(state.entries):
        if entry.path == anchor.uri:
            return replace(state, current_index=index, resolution=Resolution.URI)
    for index, entry in enumerate(state.entries):
        if entry.name == anchor.name:
            return replace(state, current_index=index, resolution=Resolution.NAME)
    if state.entries:
        return replace(state, current_index=0, resolution=Resolution.DEFAULT)
    return replace(state, current_index=None, resolution=None)


def advance(state: PlaylistState, direction: Direction) -> Tuple[PlaylistState, Optional[MediaEntry]]:
    count = len(state.entries)
    if count == 0:
        return state, None
    if state.current_index is None:
        # unresolved sits just before the first entry going forward, just after the last going back
        current = -1 if direction is Direction.NEXT else count
    else:
        current = state.current_index
    if direction is Direction.NEXT:
        new_index = (current + 1) % count
    else:
        new_index = (current - 1 + count) % count
    return replace(state, current_index=new_index), state.entries[new_index]


def jump_to_anchor(
    state: PlaylistState, anchor: AnchorReference
) -> Tuple[PlaylistState, Optional[MediaEntry]]:
    resolved = resolve_anchor(state, anchor)
    return resolved, resolved.current
