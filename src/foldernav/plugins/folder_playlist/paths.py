"""Conversion between ``file://`` URIs and plain filesystem paths."""
from __future__ import annotations

import os
import re
from urllib.parse import quote, unquote_to_bytes, urlsplit

from .errors import MalformedPath
from .snapshot import folder_prefix

_SCHEME = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_DRIVE = re.compile(r"^/?([A-Za-z]):[/\\]")


def _quote(path: str, safe: str = "/") -> str:
    # surrogate-escaped names from os.scandir quote back to their original bytes
    try:
        raw = os.fsencode(path)
    except UnicodeEncodeError as exc:
        raise MalformedPath(path, "not representable in the filesystem encoding") from exc
    return quote(raw, safe=safe)


def has_scheme(identifier: str) -> bool:
    """True for ``scheme:`` identifiers; single letters are drive letters."""
    match = _SCHEME.match(identifier)
    return bool(match) and len(match.group(1)) > 1


class FileUriCodec:
    """Path codec for local files.

    Identifiers without a scheme are plain paths and pass through unchanged.
    Only the ``file`` scheme can be decoded; anything else is malformed for
    the purpose of listing a folder.
    """

    def decode(self, uri: str) -> str:
        if not uri or "\x00" in uri:
            raise MalformedPath(uri, "empty or contains NUL")
        if not has_scheme(uri):
            return uri
        parts = urlsplit(uri)
        if parts.scheme.lower() != "file":
            raise MalformedPath(uri, f"unsupported scheme '{parts.scheme}'")
        try:
            path = os.fsdecode(unquote_to_bytes(parts.path))
        except UnicodeDecodeError as exc:
            raise MalformedPath(uri, "invalid percent-encoding") from exc
        if not path or "\x00" in path:
            raise MalformedPath(uri, "no usable path component")
        if parts.netloc and parts.netloc.lower() != "localhost":
            return f"//{parts.netloc}{path}"
        drive = _DRIVE.match(path)
        if drive and path.startswith("/"):
            return path[1:]
        return path

    def encode(self, path: str) -> str:
        if not path:
            raise MalformedPath(path, "empty")
        if has_scheme(path):
            return path
        if _DRIVE.match(path):
            return "file:///" + _quote(path.lstrip("/").replace("\\", "/"), safe="/:")
        if path.startswith("//"):
            return "file:" + _quote(path)
        if not path.startswith("/"):
            raise MalformedPath(path, "not an absolute path")
        return "file://" + _quote(path)

    def folder_of(self, path: str) -> str:
        folder = folder_prefix(path)
        if not folder:
            raise MalformedPath(path, "no folder component")
        return folder
