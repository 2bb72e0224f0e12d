from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def parse_path(path: Optional[str]) -> List[str]:
    """Split a ``/``-delimited path into its non-empty segments."""
    if not path:
        return []
    return [segment for segment in str(path).split("/") if segment]


def _list_index(segment: str) -> Optional[int]:
    if not segment.isdigit():
        return None
    return int(segment)


class ReactiveStore:
    """
    Observable JSON document addressed by ``/``-delimited paths.

    The root is always an object. Listeners are zero-argument callables,
    notified synchronously after every ``set`` in subscription order.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(data) if isinstance(data, Mapping) else {}
        # dict keeps insertion order and deduplicates repeated subscriptions.
        self._listeners: Dict[Listener, None] = {}

    def get(self, path: Optional[str]) -> Any:
        cursor: Any = self._data
        for segment in parse_path(path):
            if isinstance(cursor, dict):
                if segment not in cursor:
                    return None
                cursor = cursor[segment]
                continue
            if isinstance(cursor, list):
                index = _list_index(segment)
                if index is None or index >= len(cursor):
                    return None
                cursor = cursor[index]
                continue
            return None
        return cursor

    def set(self, path: Optional[str], value: Any) -> None:
        segments = parse_path(path)
        if not segments:
            if isinstance(value, dict):
                self._data = value
            else:
                logger.debug("Ignoring non-object root replacement: %r", type(value).__name__)
        else:
            self._assign(segments, value)
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners[listener] = None

        def unsubscribe() -> None:
            self._listeners.pop(listener, None)

        return unsubscribe

    def snapshot(self) -> Dict[str, Any]:
        return deepcopy(self._data)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _assign(self, segments: List[str], value: Any) -> None:
        cursor: Any = self._data
        for position, segment in enumerate(segments[:-1]):
            next_segment = segments[position + 1]
            cursor = self._descend(cursor, segment, next_segment)
        self._put(cursor, segments[-1], value)

    @staticmethod
    def _descend(container: Any, segment: str, next_segment: str) -> Any:
        if isinstance(container, list):
            index = _list_index(segment)
            if index is not None:
                while len(container) <= index:
                    container.append(None)
                child = container[index]
                if not isinstance(child, (dict, list)):
                    child = {}
                    container[index] = child
                elif isinstance(child, list) and _list_index(next_segment) is None:
                    child = {}
                    container[index] = child
                return child
        child = container.get(segment)
        if not isinstance(child, (dict, list)):
            child = {}
            container[segment] = child
        elif isinstance(child, list) and _list_index(next_segment) is None:
            child = {}
            container[segment] = child
        return child

    @staticmethod
    def _put(container: Any, segment: str, value: Any) -> None:
        if isinstance(container, list):
            index = _list_index(segment)
            if index is not None:
                while len(container) <= index:
                    container.append(None)
                container[index] = value
                return
        container[segment] = value

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("ReactiveStore listener failed.")

