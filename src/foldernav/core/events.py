"""Event bus shared by the host and its plugins.

The Qt host announces ``host.input_changed`` ``{uri}``; the folder playlist
announces ``folder_playlist.activated``, ``folder_playlist.navigated`` and
``folder_playlist.deactivated``. Neither side holds a reference to the other.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

EventCallback = Callable[[str, Dict[str, Any]], None]

_logger = logging.getLogger("FolderNav.EventBus")


class EventBus:
    """Thread-safe pub/sub keyed by event name."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._callbacks: Dict[str, List[EventCallback]] = {}

    def subscribe(self, event_name: str, callback: EventCallback) -> None:
        """Register ``callback(event_name, data)``; subscribing twice is a no-op."""
        with self._lock:
            callbacks = self._callbacks.setdefault(event_name, [])
            if callback not in callbacks:
                callbacks.append(callback)

    def unsubscribe(self, event_name: str, callback: EventCallback) -> None:
        with self._lock:
            callbacks = self._callbacks.get(event_name, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def emit(self, event_name: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Deliver ``data`` to every subscriber of ``event_name``.

        Subscribers run on the emitting thread, outside the lock. One that
        raises is logged and the rest still receive the event.
        """
        payload = data if data is not None else {}
        with self._lock:
            callbacks = tuple(self._callbacks.get(event_name, ()))
        for callback in callbacks:
            try:
                callback(event_name, payload)
            except Exception:
                _logger.exception("Subscriber for '%s' failed", event_name)
