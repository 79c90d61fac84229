# SPDX-License-Identifier: MIT

"""
Pure windowing calculations.

Nothing here holds state: the same inputs always give the same result, so
these functions can be called on every throttled scroll tick.
"""

import math

from chronolane.model.visible_range import VisibleRange
from chronolane.service.error_handler import clamp_index, clamp_scroll_offset


def round_half_away(value: float) -> int:
    """Round to nearest, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def day_step(day_width: float, day_margin: float) -> float:
    step = day_width - day_margin
    if step <= 0:
        raise ValueError(
            f"day_width ({day_width}) must be greater than day_margin ({day_margin})"
        )
    return step


def center_day_index(
    scroll_offset: float,
    viewport_width: float,
    day_width: float,
    day_margin: float,
    total_days: int,
    leading_padding: float = 0.0,
) -> int:
    """
    Index of the day under the horizontal centre of the viewport.

    centre = scroll_offset + viewport_width / 2 - leading_padding, divided by
    the day step (day_width - day_margin), rounded and clamped into
    [0, total_days - 1]. The offset may be negative during overscroll.

    Returns 0 for an empty timeline.
    """
    if total_days <= 0:
        return 0

    center_position = scroll_offset + viewport_width / 2 - leading_padding
    index = round_half_away(center_position / day_step(day_width, day_margin))
    return clamp_index(index, 0, total_days - 1)


def visible_range(
    center_index: int,
    viewport_width: float,
    day_width: float,
    day_margin: float,
    buffer_days: int,
    total_days: int,
) -> VisibleRange:
    """
    Day indices to materialize around the centre: the days that fit in the
    viewport plus buffer_days on each side, clamped into [0, total_days].
    """
    visible_day_count = math.ceil(viewport_width / day_step(day_width, day_margin))
    half = visible_day_count // 2
    total = max(total_days, 0)

    start = clamp_index(center_index - half - buffer_days, 0, total)
    end = clamp_index(center_index + half + buffer_days, 0, total)
    return VisibleRange(start, end)


def row_extent(row_height: float, row_margin: float) -> float:
    """Vertical space taken by one row including its margins."""
    return row_height + 2 * row_margin


def visible_row_range(
    vertical_offset: float,
    viewport_height: float,
    row_height: float,
    row_margin: float,
    buffer_rows: int,
    total_rows: int,
) -> VisibleRange:
    """Row indices to materialize for a vertical scroll position."""
    if total_rows <= 0:
        return VisibleRange(0, 0)

    extent = row_extent(row_height, row_margin)
    first_visible = math.floor(max(vertical_offset, 0.0) / extent)
    visible_count = math.ceil(viewport_height / extent)

    start = clamp_index(first_visible - buffer_rows, 0, total_rows)
    end = clamp_index(first_visible + visible_count + buffer_rows, 0, total_rows)
    return VisibleRange(start, end)


def max_scroll_offset(total_days: int, day_width: float, day_margin: float) -> float:
    return max(total_days, 0) * day_step(day_width, day_margin)


def scroll_offset_for_day(
    day_index: int, total_days: int, day_width: float, day_margin: float
) -> float:
    """Horizontal offset that brings a day to the scroll origin, clamped."""
    if total_days <= 0:
        return 0.0
    safe_index = clamp_index(day_index, 0, total_days - 1)
    offset = safe_index * day_step(day_width, day_margin)
    return clamp_scroll_offset(
        offset, max_scroll_offset(total_days, day_width, day_margin)
    )


def total_rows_height(total_rows: int, row_height: float, row_margin: float) -> float:
    return max(total_rows, 0) * row_extent(row_height, row_margin)


def max_vertical_offset(
    total_rows: int, row_height: float, row_margin: float, viewport_height: float
) -> float:
    return max(0.0, total_rows_height(total_rows, row_height, row_margin) - viewport_height)
