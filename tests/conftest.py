# SPDX-License-Identifier: MIT

"""Shared fixtures for the timeline layout tests."""

from typing import Any, Callable, Optional

import pendulum
import pytest

from chronolane.configuration import TimelineConfiguration, get_default_configuration
from chronolane.template.timeline_item import get_timeline_item_template
from chronolane.time import date_to_str

TIMELINE_START = pendulum.date(2024, 1, 1)


class ManualHandle:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic clock: timers only fire when the test advances time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[ManualHandle] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [handle for handle in self._handles if not handle.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [handle for handle in self.pending if handle.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._handles.remove(handle)
            self.now = max(self.now, handle.when)
            handle.callback()
        self.now = target


class FakeScroller:
    """Records vertical animations instead of running them."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, int, Callable[[], None]]] = []

    def animate_to(
        self, offset: float, duration_ms: int, on_complete: Callable[[], None]
    ) -> None:
        self.calls.append((offset, duration_ms, on_complete))


def day(offset: int) -> str:
    """'YYYY-MM-DD' of the day at offset from the test timeline start."""
    return date_to_str(TIMELINE_START.add(days=offset))


def make_item(
    start: int,
    end: int,
    kind: str = "stage",
    entity_id: Optional[str] = None,
    label: Optional[str] = None,
) -> Any:
    item = get_timeline_item_template()
    item["entity_id"] = entity_id if entity_id is not None else f"{kind}-{start}-{end}"
    item["kind"] = kind
    item["start_date"] = TIMELINE_START.add(days=start)
    item["end_date"] = TIMELINE_START.add(days=end)
    item["start_day_index"] = start
    item["end_day_index"] = end
    item["label"] = label
    return item


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def scroller() -> FakeScroller:
    return FakeScroller()


@pytest.fixture
def configuration() -> TimelineConfiguration:
    return get_default_configuration()


@pytest.fixture
def staircase_stages() -> list[dict[str, Any]]:
    """Ten overlapping stages over 200 days, one per row once packed."""
    return [
        {
            "id": f"s{k}",
            "kind": "stage",
            "label": f"Stage {k}",
            "start_date": day(k * 20),
            "end_date": day(min(k * 20 + 30, 199)),
            "element_ids": [],
        }
        for k in range(10)
    ]
