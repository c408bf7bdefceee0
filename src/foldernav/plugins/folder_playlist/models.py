from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple

SEPARATORS = ("/", "\\")


def final_segment(identifier: str) -> str:
    """Return the text after the last ``/`` or ``\\`` of ``identifier``."""
    cut = max(identifier.rfind(sep) for sep in SEPARATORS)
    return identifier[cut + 1:]


class Direction(enum.Enum):
    NEXT = "next"
    PREVIOUS = "previous"


class Resolution(enum.Enum):
    """How the current index of a playlist was seeded from the anchor."""

    URI = "uri"
    NAME = "name"
    DEFAULT = "default"


@dataclass(frozen=True)
class MediaEntry:
    path: str
    name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", final_segment(self.path))


@dataclass(frozen=True)
class AnchorReference:
    """The item that was open when the plugin was activated."""

    uri: str
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", final_segment(self.uri))


@dataclass(frozen=True)
class PlaylistState:
    """Ordered sibling entries plus the navigation cursor.

    ``current_index`` is ``None`` until the anchor has been resolved.
    """

    entries: Tuple[MediaEntry, ...] = ()
    current_index: Optional[int] = None
    resolution: Optional[Resolution] = None

    def __post_init__(self) -> None:
        if self.current_index is not None and not 0 <= self.current_index < len(self.entries):
            raise ValueError(
                f"current_index {self.current_index} out of range for {len(self.entries)} entries"
            )
        if len({entry.path for entry in self.entries}) != len(self.entries):
            raise ValueError("entries must not repeat a path")

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def is_resolved(self) -> bool:
        return self.current_index is not None

    @property
    def current(self) -> Optional[MediaEntry]:
        if self.current_index is None:
            return None
        return self.entries[self.current_index]

    def paths(self) -> Tuple[str, ...]:
        return tuple(entry.path for entry in self.entries)
