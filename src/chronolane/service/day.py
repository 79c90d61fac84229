# SPDX-License-Identifier: MIT

from typing import Any, Sequence

from chronolane.model.capacity import Capacity
from chronolane.model.day import AlertLevel, DayRecord
from chronolane.model.entity_kind import (
    COMPLETED_STATUSES,
    PENDING_STATUSES,
    EntityKind,
)
from chronolane.model.timeline_item import RowAssignment
from chronolane.service.error_handler import safe_list_access, validate_date_range
from chronolane.template.day import get_day_template
from chronolane.time import date_key, date_to_str, days_between, to_date

# Kind -> (total counter, completed counter)
_KIND_COUNTERS = {
    EntityKind.ACTIVITY: ("activity_total", "activity_completed"),
    EntityKind.DELIVERABLE: ("deliverable_total", "deliverable_completed"),
    EntityKind.TASK: ("task_total", "task_completed"),
}

WARNING_THRESHOLD_PERCENT = 80
CRITICAL_THRESHOLD_PERCENT = 100


def aggregate_days(
    start_date: Any,
    end_date: Any,
    elements: Sequence[dict[str, Any]],
    completed_elements: Sequence[dict[str, Any]],
    capacities: Sequence[dict[str, Any]],
    stages: Sequence[dict[str, Any]],
    capacity_ceiling: int,
) -> list[DayRecord]:
    """
    Fold raw element, completion and capacity records into one DayRecord per
    calendar day in [start_date, end_date].

    The inputs are indexed by their normalized 'YYYY-MM-DD' key once, so the
    whole pass is linear in days + records.

    Args:
        start_date: First day of the timeline
        end_date: Last day of the timeline (inclusive)
        elements: Raw elements, each counted on its "date"
        completed_elements: Elements completed elsewhere, only their ids are recorded
        capacities: At most one capacity record per day (the last one wins)
        stages: Stages of the timeline. They do not contribute to day
            counters; current stages are patched in by assign_current_stages
        capacity_ceiling: Capacity ceiling copied onto every day

    Returns:
        The day sequence, one record per calendar day with no gaps

    Raises:
        DateRangeError: If end_date is before start_date
    """
    start = to_date(start_date)
    end = to_date(end_date)
    validate_date_range(start, end)

    elements_by_date = _index_by_date(elements)
    completed_by_date = _index_by_date(completed_elements)
    capacities_by_date: dict[str, dict[str, Any]] = {}
    for capacity in capacities:
        if not isinstance(capacity, dict):
            continue
        key = date_key(capacity.get("date"))
        if key is not None:
            capacities_by_date[key] = capacity

    days: list[DayRecord] = []
    for index in range(days_between(start, end) + 1):
        date = start.add(days=index)
        key = date_to_str(date)
        day = get_day_template(date, capacity_ceiling)

        day_elements = elements_by_date.get(key)
        if day_elements is not None:
            _count_elements(day, day_elements)

        for completed in completed_by_date.get(key, []):
            completed_id = completed.get("id")
            if completed_id is not None and completed_id not in day["assigned_ids"]:
                day["assigned_ids"].append(completed_id)

        day_capacity = capacities_by_date.get(key)
        if day_capacity is not None:
            _apply_capacity(day, day_capacity, capacity_ceiling)

        days.append(day)

    return days


def alert_level_for(capacity_effective: float, busy_effective: float) -> int:
    """
    Alert level from the busy/capacity ratio: critical above 100%, warning
    above 80%, none otherwise (and none when there is no capacity).
    """
    if capacity_effective <= 0:
        return AlertLevel.NONE
    progress = busy_effective / capacity_effective * 100
    if progress > CRITICAL_THRESHOLD_PERCENT:
        return AlertLevel.CRITICAL
    if progress > WARNING_THRESHOLD_PERCENT:
        return AlertLevel.WARNING
    return AlertLevel.NONE


def assign_current_stages(
    days: list[DayRecord], rows: RowAssignment
) -> list[DayRecord]:
    """Point each day at the first-row item whose span covers it."""
    first_row = safe_list_access(rows, 0, [])
    for index, day in enumerate(days):
        for item in first_row:
            if item["start_day_index"] <= index <= item["end_day_index"]:
                day["current_stage"] = item
                break

    return days


def _index_by_date(
    records: Sequence[dict[str, Any]],
) -> dict[str, list[dict[str, Any]]]:
    by_date: dict[str, list[dict[str, Any]]] = {}
    for record in records:
        if not isinstance(record, dict):
            continue
        key = date_key(record.get("date"))
        if key is not None:
            by_date.setdefault(key, []).append(record)
    return by_date


def _count_elements(day: DayRecord, elements: list[dict[str, Any]]) -> None:
    seen_ids: set[str] = set()

    for element in elements:
        element_id = element.get("id")
        if element_id is None or element_id in seen_ids:
            continue
        seen_ids.add(element_id)
        if element_id not in day["assigned_ids"]:
            day["assigned_ids"].append(element_id)

        status = element.get("status")
        counters = _KIND_COUNTERS.get(element.get("kind"))  # type: ignore[arg-type]
        if counters is not None:
            total_key, completed_key = counters
            day[total_key] += 1  # type: ignore[literal-required]
            if status in COMPLETED_STATUSES:
                day[completed_key] += 1  # type: ignore[literal-required]

        if status in COMPLETED_STATUSES:
            day["element_completed_count"] += 1
        elif status in PENDING_STATUSES:
            day["element_pending_count"] += 1


def _apply_capacity(
    day: DayRecord, capacity: Capacity | dict[str, Any], capacity_ceiling: int
) -> None:
    day["capacity_effective"] = _number_or_zero(capacity.get("capacity_effective"))
    day["busy_effective"] = _number_or_zero(capacity.get("busy_effective"))
    day["completed_effective"] = _number_or_zero(capacity.get("completed_effective"))
    day["weather_icon"] = capacity.get("weather_icon")
    day["capacity_max"] = capacity_ceiling
    day["alert_level"] = alert_level_for(
        day["capacity_effective"], day["busy_effective"]
    )


def _number_or_zero(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value
