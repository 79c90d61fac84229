# SPDX-License-Identifier: MIT

from enum import Enum
from typing import Any, Callable, TypeAlias

from chronolane.service.error_handler import handle_data_error


class TimelineEvent(Enum):
    CENTER_CHANGED = "center_changed"
    VISIBLE_RANGE_CHANGED = "visible_range_changed"
    ROWS_CHANGED = "rows_changed"
    CURRENT_DATE_CHANGED = "current_date_changed"
    VERTICAL_OFFSET_CHANGED = "vertical_offset_changed"


Listener: TypeAlias = Callable[[Any], None]


class EventEmitter:
    """Named change notifications for the rendering layer."""

    def __init__(self) -> None:
        self._listeners: dict[TimelineEvent, list[Listener]] = {}

    def subscribe(self, event: TimelineEvent, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.setdefault(event, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(event, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def emit(self, event: TimelineEvent, payload: Any) -> None:
        # A failing listener is logged and does not stop the others
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(payload)
            except Exception as e:
                handle_data_error(f"{event.value} listener", e)

    def listener_count(self, event: TimelineEvent) -> int:
        return len(self._listeners.get(event, []))

    def clear(self) -> None:
        self._listeners.clear()
