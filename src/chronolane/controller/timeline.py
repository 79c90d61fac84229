# SPDX-License-Identifier: MIT

import logging
from typing import Any, Callable, Optional, Protocol, Sequence

import pendulum

from chronolane.configuration import TimelineConfiguration
from chronolane.controller.events import EventEmitter, TimelineEvent
from chronolane.controller.timer import AsyncioScheduler, CancellableTimer, Scheduler
from chronolane.model.day import DayRecord
from chronolane.model.scroll_state import ScrollState, VerticalScrollState
from chronolane.model.timeline_item import RowAssignment
from chronolane.model.visible_range import EMPTY_RANGE, VisibleRange
from chronolane.service.auto_scroll import compute_scroll_state
from chronolane.service.day import assign_current_stages
from chronolane.service.error_handler import clamp_index
from chronolane.service.layout_cache import LayoutCache
from chronolane.service.performance import PerformanceMonitor
from chronolane.service.viewport import (
    center_day_index,
    scroll_offset_for_day,
    visible_range,
    visible_row_range,
)
from chronolane.time import date_to_str, days_between, to_date, today_local

logger = logging.getLogger(__name__)


class VerticalScroller(Protocol):
    """The host's vertical scroll view."""

    def animate_to(
        self, offset: float, duration_ms: int, on_complete: Callable[[], None]
    ) -> None: ...


class TimelineController:
    """
    Owns the scroll-driven state of one timeline.

    Horizontal scroll events are coalesced by a throttle timer: at most one
    windowing update per scroll_throttle_ms, always with the latest offset.
    Each update recomputes the centre day and visible range first, then, if
    the centre moved, (re)arms a debounce timer that runs the auto-scroll
    decision once the centre has settled.

    Vertical scrolling goes IDLE -> AUTO_SCROLLING -> IDLE for programmatic
    moves and IDLE -> USER_SCROLLING -> IDLE for manual ones. Offsets reported
    while auto-scrolling are not treated as manual input.
    """

    def __init__(
        self,
        configuration: TimelineConfiguration,
        viewport_width: float,
        viewport_height: Optional[float] = None,
        scheduler: Optional[Scheduler] = None,
        scroller: Optional[VerticalScroller] = None,
        cache: Optional[LayoutCache] = None,
        leading_padding: float = 0.0,
        monitor: Optional[PerformanceMonitor] = None,
    ) -> None:
        self.configuration = configuration
        self.viewport_width = viewport_width
        self.viewport_height = (
            viewport_height
            if viewport_height is not None
            else configuration["timeline_height"] - configuration["dates_height"]
        )
        self.leading_padding = leading_padding
        self.events = EventEmitter()

        self._scheduler: Scheduler = (
            scheduler if scheduler is not None else AsyncioScheduler()
        )
        self._scroller = scroller
        if monitor is None:
            monitor = cache.monitor if cache is not None else PerformanceMonitor()
        self.monitor = monitor
        self._cache = cache if cache is not None else LayoutCache(monitor)

        self.days: list[DayRecord] = []
        self.rows: RowAssignment = []
        self.center_index = 0
        self.visible_range: VisibleRange = EMPTY_RANGE
        self.vertical_offset = 0.0
        self.user_scroll_offset: Optional[float] = None
        self.vertical_state = VerticalScrollState.IDLE
        self.last_scroll_state: Optional[ScrollState] = None
        self.window_update_count = 0

        self._current_offset = 0.0
        self._pending_offset = 0.0
        self._last_tick_time: Optional[float] = None
        self._animation_id = 0
        self._throttle_timer = CancellableTimer(self._scheduler)
        self._debounce_timer = CancellableTimer(self._scheduler)
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def is_auto_scrolling(self) -> bool:
        return self.vertical_state is VerticalScrollState.AUTO_SCROLLING

    @property
    def scroll_offset(self) -> float:
        return self._current_offset

    @property
    def has_pending_update(self) -> bool:
        return self._throttle_timer.is_active

    @property
    def has_pending_auto_scroll(self) -> bool:
        return self._debounce_timer.is_active

    @property
    def current_date(self) -> Optional[pendulum.Date]:
        if not self.days:
            return None
        return self.days[clamp_index(self.center_index, 0, len(self.days) - 1)]["date"]

    @property
    def visible_row_range(self) -> VisibleRange:
        return visible_row_range(
            self.vertical_offset,
            self.viewport_height,
            self.configuration["row_height"],
            self.configuration["row_margin"],
            self.configuration["buffer_rows"],
            len(self.rows),
        )

    def update_data(
        self,
        start_date: Any,
        end_date: Any,
        elements: Sequence[dict[str, Any]],
        completed_elements: Sequence[dict[str, Any]],
        capacities: Sequence[dict[str, Any]],
        stages: Sequence[dict[str, Any]],
        capacity_ceiling: int,
    ) -> None:
        """Refresh days and rows through the cache, then the window."""
        if self._disposed:
            return

        days = self._cache.get_days(
            start_date,
            end_date,
            elements,
            completed_elements,
            capacities,
            stages,
            capacity_ceiling,
        )
        if days:
            rows = self._cache.get_rows(start_date, end_date, days, stages, elements)
        else:
            # Keep the current empty assignment so no change is reported
            rows = self.rows if not self.rows else []

        rows_changed = rows is not self.rows
        if days is not self.days or rows_changed:
            assign_current_stages(days, rows)
        self.days = days
        self.rows = rows

        if rows_changed:
            self.events.emit(TimelineEvent.ROWS_CHANGED, rows)
        self._update_window(self._current_offset)

    def clear_cache(self) -> None:
        self._cache.clear()

    def set_viewport_size(
        self, width: float, height: Optional[float] = None
    ) -> None:
        if self._disposed:
            return
        self.viewport_width = width
        if height is not None:
            self.viewport_height = height
        self._update_window(self._current_offset)

    def handle_horizontal_scroll(self, offset: float) -> None:
        """
        Record a horizontal scroll position.

        The pending throttle timer, if any, is cancelled and rescheduled for
        the same deadline, so bursts of events collapse into one update.
        """
        if self._disposed:
            return

        self._pending_offset = offset
        interval = self.configuration["scroll_throttle_ms"] / 1000
        now = self._scheduler.time()

        if self._throttle_timer.deadline is not None:
            deadline = self._throttle_timer.deadline
        elif self._last_tick_time is None:
            deadline = now
        else:
            deadline = max(now, self._last_tick_time + interval)

        self._throttle_timer.schedule(deadline - now, self._on_throttle_tick)

    def scroll_to_day(self, day_index: int) -> float:
        """Scroll horizontally to a day and return the offset used."""
        offset = scroll_offset_for_day(
            day_index,
            len(self.days),
            self.configuration["day_width"],
            self.configuration["day_margin"],
        )
        self.handle_horizontal_scroll(offset)
        return offset

    def index_of_date(self, date: Any) -> int:
        """Day index of a date, clamped into the day sequence (-1 if empty)."""
        if not self.days:
            return -1
        index = days_between(self.days[0]["date"], to_date(date))
        return clamp_index(index, 0, len(self.days) - 1)

    def today_index(self) -> int:
        return self.index_of_date(today_local())

    def default_date_index(self, default_date: Any = None) -> int:
        """Index to open the timeline on: default_date if usable, else today."""
        if default_date is not None:
            try:
                return self.index_of_date(default_date)
            except ValueError:
                logger.warning("Ignoring unusable default date %r", default_date)
        return self.today_index()

    def handle_vertical_scroll(self, offset: float) -> None:
        """Record a vertical scroll position reported by the host."""
        if self._disposed:
            return

        self._set_vertical_offset(offset)
        if self.vertical_state is VerticalScrollState.AUTO_SCROLLING:
            return

        self.vertical_state = VerticalScrollState.USER_SCROLLING
        self.user_scroll_offset = offset

    def handle_vertical_scroll_end(self) -> None:
        if self.vertical_state is VerticalScrollState.USER_SCROLLING:
            self.vertical_state = VerticalScrollState.IDLE

    def perform_auto_scroll(
        self, center_index: int, current_offset: float, previous_offset: float
    ) -> Optional[ScrollState]:
        """Run the auto-scroll decision and start the move if it is enabled."""
        if self._disposed or not self.rows:
            return None

        state = compute_scroll_state(
            current_offset,
            previous_offset,
            center_index,
            self.rows,
            self.configuration["row_height"],
            self.configuration["row_margin"],
            self.user_scroll_offset,
            self.viewport_height,
            total_days=len(self.days),
        )
        self.last_scroll_state = state

        if state.enable_auto_scroll and state.destination_offset is not None:
            self._start_auto_scroll(state.destination_offset)
        return state

    def dispose(self) -> None:
        """Cancel both timers and drop listeners. Safe to call repeatedly."""
        if self._disposed:
            return
        self._disposed = True
        self._throttle_timer.cancel()
        self._debounce_timer.cancel()
        self.events.clear()
        logger.debug("Timeline controller disposed")

    def _on_throttle_tick(self) -> None:
        if self._disposed:
            return

        self._last_tick_time = self._scheduler.time()
        previous_offset = self._current_offset
        self._current_offset = self._pending_offset
        self.window_update_count += 1

        self.monitor.start_operation("scroll_update")
        try:
            center_changed = self._update_window(self._current_offset)
        finally:
            duration = self.monitor.end_operation("scroll_update")
        self.monitor.track_rebuild()
        if duration is not None:
            self.monitor.record_frame_time(duration)

        if not center_changed:
            return

        center_index = self.center_index
        current_offset = self._current_offset
        self._debounce_timer.schedule(
            self.configuration["auto_scroll_debounce_ms"] / 1000,
            lambda: self._on_debounce(center_index, current_offset, previous_offset),
        )

    def _on_debounce(
        self, center_index: int, current_offset: float, previous_offset: float
    ) -> None:
        if self._disposed:
            return
        self.perform_auto_scroll(center_index, current_offset, previous_offset)

    def _update_window(self, offset: float) -> bool:
        """Recompute centre and visible range. Returns True if the centre moved."""
        total_days = len(self.days)
        center = center_day_index(
            offset,
            self.viewport_width,
            self.configuration["day_width"],
            self.configuration["day_margin"],
            total_days,
            self.leading_padding,
        )
        new_range = visible_range(
            center,
            self.viewport_width,
            self.configuration["day_width"],
            self.configuration["day_margin"],
            self.configuration["buffer_days"],
            total_days,
        )

        center_changed = center != self.center_index
        if center_changed:
            self.center_index = center
            self.events.emit(TimelineEvent.CENTER_CHANGED, center)
            current_date = self.current_date
            if current_date is not None:
                self.events.emit(
                    TimelineEvent.CURRENT_DATE_CHANGED, date_to_str(current_date)
                )

        if new_range != self.visible_range:
            self.visible_range = new_range
            self.events.emit(TimelineEvent.VISIBLE_RANGE_CHANGED, new_range)

        return center_changed

    def _set_vertical_offset(self, offset: float) -> None:
        if offset != self.vertical_offset:
            self.vertical_offset = offset
            self.events.emit(TimelineEvent.VERTICAL_OFFSET_CHANGED, offset)

    def _start_auto_scroll(self, destination: float) -> None:
        self._animation_id += 1
        animation_id = self._animation_id
        self.vertical_state = VerticalScrollState.AUTO_SCROLLING
        self.user_scroll_offset = None
        logger.debug("Auto-scrolling rows to %.1f", destination)

        if self._scroller is None:
            self._set_vertical_offset(destination)
            self._finish_auto_scroll(animation_id)
            return

        self._scroller.animate_to(
            destination,
            self.configuration["animation_duration_ms"],
            lambda: self._finish_auto_scroll(animation_id),
        )

    def _finish_auto_scroll(self, animation_id: int) -> None:
        # A newer animation owns the state until it completes
        if animation_id != self._animation_id:
            return
        if self.vertical_state is VerticalScrollState.AUTO_SCROLLING:
            self.vertical_state = VerticalScrollState.IDLE
