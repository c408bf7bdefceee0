"""Settings persistence for the dashboard and its plugins.

Settings live in one JSON document with one bucket per plugin identifier.
Identifiers are matched case-insensitively.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, MutableMapping, Optional

_logger = logging.getLogger("FolderNav.ConfigStore")

Bucket = Dict[str, Any]


class ConfigStore:
    """Thread-safe JSON settings store; ``path=None`` keeps everything in memory."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._lock = threading.RLock()
        self._buckets: Dict[str, Bucket] = self._read()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def _read(self) -> Dict[str, Bucket]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            _logger.warning("Ignoring unreadable settings file %s: %s", self._path, exc)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(key).lower(): dict(value) for key, value in raw.items() if isinstance(value, dict)}

    def save(self) -> None:
        if self._path is None:
            return
        with self._lock:
            payload = json.dumps(self._buckets, indent=2, sort_keys=True)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload, encoding="utf-8")

    def get_plugin(self, identifier: str) -> "PluginConfig":
        return PluginConfig(self, identifier.lower())

    def read(self, identifier: str) -> Bucket:
        """Copy of the bucket stored for ``identifier``."""
        with self._lock:
            return dict(self._buckets.get(identifier.lower(), {}))

    def update_plugin(self, identifier: str, values: Bucket) -> None:
        with self._lock:
            self._buckets.setdefault(identifier.lower(), {}).update(values)
            self.save()

    def write_plugin(self, identifier: str, values: Bucket) -> None:
        with self._lock:
            self._buckets[identifier.lower()] = dict(values)
            self.save()

    def get_snapshot(self) -> Dict[str, Bucket]:
        with self._lock:
            return json.loads(json.dumps(self._buckets))


class PluginConfig(MutableMapping[str, Any]):
    """Live mapping over one settings bucket; every write is persisted."""

    def __init__(self, store: ConfigStore, identifier: str) -> None:
        self._store = store
        self._identifier = identifier

    def __getitem__(self, key: str) -> Any:
        return self._store.read(self._identifier)[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._store.update_plugin(self._identifier, {key: value})

    def __delitem__(self, key: str) -> None:
        bucket = self._store.read(self._identifier)
        del bucket[key]
        self._store.write_plugin(self._identifier, bucket)

    def __iter__(self) -> Iterator[str]:
        return iter(self._store.read(self._identifier))

    def __len__(self) -> int:
        return len(self._store.read(self._identifier))

    def update(self, other: Optional[Bucket] = None, **kwargs: Any) -> None:  # type: ignore[override]
        payload = dict(other or {}, **kwargs)
        if payload:
            self._store.update_plugin(self._identifier, payload)

    def setdefaults(self, defaults: Bucket) -> None:
        """Write the keys from ``defaults`` that the bucket does not hold yet."""
        current = self._store.read(self._identifier)
        self.update({key: value for key, value in defaults.items() if key not in current})

    def clear(self) -> None:  # type: ignore[override]
        self._store.write_plugin(self._identifier, {})

    def as_dict(self) -> Bucket:
        return self._store.read(self._identifier)
