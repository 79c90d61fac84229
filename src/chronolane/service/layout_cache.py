# SPDX-License-Identifier: MIT

import logging
from typing import Any, Optional, Sequence, TypeAlias

import pendulum

from chronolane.model.day import DayRecord
from chronolane.model.timeline_item import RowAssignment
from chronolane.service.day import aggregate_days
from chronolane.service.error_handler import (
    handle_data_error,
    validate_date_range,
    with_error_handling,
)
from chronolane.service.performance import PerformanceMonitor
from chronolane.service.row import pack_rows
from chronolane.time import to_date

logger = logging.getLogger(__name__)

Fingerprint: TypeAlias = tuple[pendulum.Date, pendulum.Date, int, int, int, int, int]


class LayoutCache:
    """
    Memoizes the day sequence and the row assignment.

    The day sequence is keyed by a structural fingerprint (date range, input
    list lengths and capacity ceiling). Editing a record in place without
    changing any list length does not invalidate it; call clear() for that.

    The row assignment is kept until clear() is called or the day sequence
    is recomputed.

    Failures never reach the caller: they are logged and an empty result is
    returned.
    """

    def __init__(self, monitor: Optional[PerformanceMonitor] = None) -> None:
        self.monitor = monitor if monitor is not None else PerformanceMonitor()
        self._cached_days: Optional[list[DayRecord]] = None
        self._cached_rows: Optional[RowAssignment] = None
        self._last_fingerprint: Optional[Fingerprint] = None

    @property
    def has_days(self) -> bool:
        return self._cached_days is not None

    @property
    def has_rows(self) -> bool:
        return self._cached_rows is not None

    def get_days(
        self,
        start_date: Any,
        end_date: Any,
        elements: Sequence[dict[str, Any]],
        completed_elements: Sequence[dict[str, Any]],
        capacities: Sequence[dict[str, Any]],
        stages: Sequence[dict[str, Any]],
        capacity_ceiling: int,
    ) -> list[DayRecord]:
        try:
            start = to_date(start_date)
            end = to_date(end_date)
            validate_date_range(start, end)
        except ValueError as e:
            handle_data_error("validate_date_range", e)
            return []

        fingerprint: Fingerprint = (
            start,
            end,
            len(elements),
            len(completed_elements),
            len(capacities),
            len(stages),
            capacity_ceiling,
        )

        if self._cached_days is not None and fingerprint == self._last_fingerprint:
            return self._cached_days

        logger.debug("Day cache miss, aggregating %s..%s", start, end)
        self._last_fingerprint = fingerprint
        self._cached_rows = None
        self.monitor.start_operation("format_days")
        try:
            self._cached_days = with_error_handling(
                "aggregate_days",
                lambda: aggregate_days(
                    start,
                    end,
                    elements,
                    completed_elements,
                    capacities,
                    stages,
                    capacity_ceiling,
                ),
                [],
            )
        finally:
            self.monitor.end_operation("format_days")
        return self._cached_days

    def get_rows(
        self,
        start_date: Any,
        end_date: Any,
        days: Sequence[DayRecord],
        stages: Sequence[dict[str, Any]],
        elements: Sequence[dict[str, Any]],
    ) -> RowAssignment:
        if self._cached_rows is not None:
            return self._cached_rows

        logger.debug("Row cache miss, packing %d stage(s)", len(stages))
        self.monitor.start_operation("format_stage_rows")
        try:
            self._cached_rows = with_error_handling(
                "pack_rows",
                lambda: pack_rows(start_date, end_date, days, stages, elements),
                [],
            )
        finally:
            self.monitor.end_operation("format_stage_rows")
        return self._cached_rows

    def clear(self) -> None:
        self._cached_days = None
        self._cached_rows = None
        self._last_fingerprint = None
