# SPDX-License-Identifier: MIT

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Frame times kept for the rolling average
FRAME_WINDOW = 60
DEFAULT_FPS = 60.0


@dataclass(frozen=True)
class PerformanceMetrics:
    """
    Snapshot of a PerformanceMonitor.

    render_time is the sum of the last recorded duration of every operation,
    in seconds. average_fps comes from the rolling frame times and defaults
    to 60 when none were recorded.
    """

    render_time: float
    rendered_count: int
    rebuild_count: int
    average_fps: float

    def __str__(self) -> str:
        return (
            f"render time {self.render_time * 1000:.1f}ms, "
            f"{self.rendered_count} item(s) rendered, "
            f"{self.rebuild_count} rebuild(s), "
            f"{self.average_fps:.1f} fps"
        )


class PerformanceMonitor:
    """
    Times named operations and counts window rebuilds.

    Durations come from the injected clock (time.perf_counter by default).
    A disabled monitor records nothing and end_operation returns None.
    """

    def __init__(
        self,
        enabled: bool = True,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.enabled = enabled
        self._clock = clock
        self._start_times: dict[str, float] = {}
        self._durations: dict[str, float] = {}
        self._frame_times: list[float] = []
        self._rebuild_count = 0
        self._rendered_count = 0

    def start_operation(self, name: str) -> None:
        if not self.enabled:
            return
        self._start_times[name] = self._clock()
        logger.debug("Started %s", name)

    def end_operation(self, name: str) -> Optional[float]:
        """Record and return the duration of a started operation, in seconds."""
        if not self.enabled:
            return None

        started = self._start_times.pop(name, None)
        if started is None:
            logger.warning("Operation %s ended without being started", name)
            return None

        duration = self._clock() - started
        self._durations[name] = duration
        logger.debug("Completed %s in %.1fms", name, duration * 1000)
        return duration

    def operation_duration(self, name: str) -> Optional[float]:
        return self._durations.get(name)

    def track_rebuild(self) -> None:
        if not self.enabled:
            return
        self._rebuild_count += 1
        if self._rebuild_count % 10 == 0:
            logger.debug("%d rebuilds so far", self._rebuild_count)

    def track_rendered(self, count: int) -> None:
        if self.enabled:
            self._rendered_count += count

    def record_frame_time(self, seconds: float) -> None:
        if not self.enabled:
            return
        self._frame_times.append(seconds)
        if len(self._frame_times) > FRAME_WINDOW:
            del self._frame_times[0]

    def get_metrics(self) -> PerformanceMetrics:
        average_fps = DEFAULT_FPS
        if self._frame_times:
            average_frame = sum(self._frame_times) / len(self._frame_times)
            if average_frame > 0:
                average_fps = 1 / average_frame

        return PerformanceMetrics(
            render_time=sum(self._durations.values()),
            rendered_count=self._rendered_count,
            rebuild_count=self._rebuild_count,
            average_fps=average_fps,
        )

    def reset(self) -> None:
        self._start_times.clear()
        self._durations.clear()
        self._frame_times.clear()
        self._rebuild_count = 0
        self._rendered_count = 0
        logger.debug("Metrics reset")

    def log_metrics(self) -> None:
        if not self.enabled:
            return
        logger.info("Timeline metrics: %s", self.get_metrics())
        for name, duration in self._durations.items():
            logger.info("  %s: %.1fms", name, duration * 1000)
