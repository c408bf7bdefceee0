"""Classify file names as media or non-media by their suffix."""
from __future__ import annotations

from typing import AbstractSet, FrozenSet, Iterable, Optional

VIDEO_EXTENSIONS = frozenset({
    "avi", "mkv", "mp4", "wmv", "flv", "mpeg", "mpg", "mov", "rm", "vob",
    "asf", "divx", "m4v", "ogg", "ogm", "ogv", "qt", "rmvb", "webm", "3gp",
    "3g2", "drc", "f4v", "f4p", "f4a", "f4b", "gifv", "mng", "mts", "m2ts",
    "ts", "mxf", "nsv", "roq", "svi", "viv",
})

AUDIO_EXTENSIONS = frozenset({
    "mp3", "wav", "flac", "aac", "ogg", "wma", "alac", "ape", "ac3", "opus",
    "aiff", "aif", "amr", "au", "mka", "dts", "m4a", "m4b", "m4p", "mpc",
    "mpp", "mp+", "oga", "spx", "tta", "voc", "ra", "mid", "midi",
})

MEDIA_EXTENSIONS: FrozenSet[str] = VIDEO_EXTENSIONS | AUDIO_EXTENSIONS


def _normalise(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


def build_extension_set(extra: Optional[Iterable[str]] = None) -> FrozenSet[str]:
    """Return the known media extensions plus ``extra`` (dots and case ignored)."""
    if not extra:
        return MEDIA_EXTENSIONS
    added = {_normalise(ext) for ext in extra if isinstance(ext, str) and _normalise(ext)}
    return MEDIA_EXTENSIONS | frozenset(added)


def suffix_of(name: str) -> str:
    """Lower-cased text after the last dot of ``name``; empty when there is none."""
    _, dot, tail = name.rpartition(".")
    if not dot:
        return ""
    return tail.lower()


def is_media(name: str, extensions: AbstractSet[str] = MEDIA_EXTENSIONS) -> bool:
    suffix = suffix_of(name)
    return bool(suffix) and suffix in extensions
