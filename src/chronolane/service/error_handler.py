# SPDX-License-Identifier: MIT

import logging
from typing import Any, Callable, Optional, Sequence, TypeVar

import pendulum

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DateRangeError(ValueError):
    def __init__(self, start: pendulum.Date, end: pendulum.Date) -> None:
        super().__init__(
            f"End date must not be before start date: start={start}, end={end}"
        )
        self.start = start
        self.end = end


def handle_data_error(context: str, error: BaseException) -> None:
    """Report a data error on the logging channel. Never raises."""
    logger.error(
        "Timeline error [%s]: %s",
        context,
        error,
        exc_info=(type(error), error, error.__traceback__),
    )


def with_error_handling(context: str, operation: Callable[[], T], fallback: T) -> T:
    """
    Run an operation and return its result.

    Any exception raised by the operation is reported through
    handle_data_error and the fallback is returned instead.
    """
    try:
        return operation()
    except Exception as e:
        handle_data_error(context, e)
        return fallback


def validate_date_range(start: pendulum.Date, end: pendulum.Date) -> pendulum.Date:
    if end < start:
        raise DateRangeError(start, end)
    return end


def clamp_index(index: int, minimum: int, maximum: int) -> int:
    if maximum < minimum:
        return minimum
    return max(minimum, min(index, maximum))


def clamp_scroll_offset(offset: float, max_offset: float) -> float:
    return max(0.0, min(offset, max(0.0, max_offset)))


def safe_list_access(items: Sequence[T], index: int, fallback: T) -> T:
    if index < 0 or index >= len(items):
        return fallback
    return items[index]


def is_valid_list(items: Optional[Sequence[Any]]) -> bool:
    return items is not None and len(items) > 0


def _has_value(record: dict[str, Any], key: str) -> bool:
    value = record.get(key)
    return value is not None and value != ""


def validate_elements(elements: Optional[Sequence[Any]]) -> list[dict[str, Any]]:
    """Keep only elements carrying an id and a date."""
    if elements is None:
        return []
    valid = [
        element
        for element in elements
        if isinstance(element, dict)
        and _has_value(element, "id")
        and _has_value(element, "date")
    ]
    if len(valid) != len(elements):
        logger.debug("Dropped %d malformed element(s)", len(elements) - len(valid))
    return valid


def validate_stages(stages: Optional[Sequence[Any]]) -> list[dict[str, Any]]:
    """Keep only stages carrying dates and a kind."""
    if stages is None:
        return []
    valid = [
        stage
        for stage in stages
        if isinstance(stage, dict)
        and _has_value(stage, "start_date")
        and _has_value(stage, "end_date")
        and _has_value(stage, "kind")
    ]
    if len(valid) != len(stages):
        logger.debug("Dropped %d malformed stage(s)", len(stages) - len(valid))
    return valid


def validate_days(days: Optional[Sequence[Any]]) -> list[dict[str, Any]]:
    if days is None:
        return []
    return [
        day
        for day in days
        if isinstance(day, dict)
        and isinstance(day.get("date"), pendulum.Date)
        and "capacity_max" in day
    ]
