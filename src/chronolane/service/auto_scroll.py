# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from chronolane.model.scroll_state import ScrollState
from chronolane.model.timeline_item import RowAssignment
from chronolane.service.error_handler import clamp_index, clamp_scroll_offset
from chronolane.service.viewport import (
    max_vertical_offset,
    row_extent,
    total_rows_height,
)

logger = logging.getLogger(__name__)

# Days looked behind (rightward scroll) or ahead (leftward scroll) of the centre
LOOKAROUND_DAYS = 4


def find_higher_row_index(rows: RowAssignment, day_index: int) -> int:
    """
    First row, top-down, holding an item whose span contains day_index.

    Items in a row are in ascending start order, so a row is abandoned as
    soon as an item starts after day_index. Returns -1 when nothing matches.
    """
    for row_index, row in enumerate(rows):
        for item in row:
            if item["start_day_index"] <= day_index <= item["end_day_index"]:
                return row_index
            if day_index < item["start_day_index"]:
                break
    return -1


def find_lower_row_index(rows: RowAssignment, day_index: int) -> int:
    """
    Last row, bottom-up, holding an item whose span contains day_index.
    Returns -1 when nothing matches.
    """
    for row_index in range(len(rows) - 1, -1, -1):
        for item in reversed(rows[row_index]):
            if item["start_day_index"] <= day_index <= item["end_day_index"]:
                return row_index
            if day_index > item["end_day_index"]:
                break
    return -1


def find_nearest_row_index(
    rows: RowAssignment, day_index: int, scrolling_leftward: bool
) -> int:
    """
    Fallback when no row covers day_index: the row holding the closest item
    ahead of it (rightward) or behind it (leftward). Ties go to the upper row.
    """
    best_row = -1
    best_distance: Optional[int] = None

    for row_index, row in enumerate(rows):
        for item in row:
            if scrolling_leftward:
                if item["end_day_index"] >= day_index:
                    continue
                distance = day_index - item["end_day_index"]
            else:
                if item["start_day_index"] <= day_index:
                    continue
                distance = item["start_day_index"] - day_index
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_row = row_index

    return best_row


def find_target_row_index(
    rows: RowAssignment,
    center_index: int,
    scrolling_leftward: bool,
    total_days: Optional[int] = None,
) -> Optional[int]:
    if not rows:
        return None

    reference = (
        center_index + LOOKAROUND_DAYS
        if scrolling_leftward
        else center_index - LOOKAROUND_DAYS
    )
    upper = total_days - 1 if total_days is not None and total_days > 0 else reference
    reference = clamp_index(reference, 0, max(upper, 0))

    find_exact = find_lower_row_index if scrolling_leftward else find_higher_row_index
    row_index = find_exact(rows, reference)
    if row_index == -1:
        row_index = find_exact(rows, center_index)
    if row_index == -1:
        row_index = find_nearest_row_index(rows, center_index, scrolling_leftward)
    if row_index == -1:
        return None

    return clamp_index(row_index, 0, len(rows) - 1)


def compute_scroll_state(
    current_offset: float,
    previous_offset: float,
    center_index: int,
    rows: RowAssignment,
    row_height: float,
    row_margin: float,
    user_scroll_offset: Optional[float],
    viewport_height: float,
    total_days: Optional[int] = None,
) -> ScrollState:
    """
    Decide whether and where the row list should scroll vertically.

    Args:
        current_offset: Horizontal scroll offset of this tick
        previous_offset: Horizontal scroll offset of the previous tick
        center_index: Day index under the centre of the viewport
        rows: The packed rows
        row_height: Height of a row
        row_margin: Margin above and below a row
        user_scroll_offset: Vertical offset the user scrolled to by hand since
            the last auto-scroll, or None
        viewport_height: Height of the rows viewport
        total_days: Length of the day sequence, bounds the look-around index

    Returns:
        The scroll state. Auto-scroll is only enabled when there is a target
        row and the user has either not scrolled by hand or is still above it.
    """
    scrolling_leftward = current_offset < previous_offset

    target_row_index = find_target_row_index(
        rows, center_index, scrolling_leftward, total_days
    )
    if target_row_index is None:
        return ScrollState(
            center_date_index=center_index,
            target_vertical_offset=None,
            enable_auto_scroll=False,
            scrolling_leftward=scrolling_leftward,
        )

    target_offset = target_row_index * row_extent(row_height, row_margin)
    enable_auto_scroll = user_scroll_offset is None or user_scroll_offset < target_offset

    destination: Optional[float] = None
    if enable_auto_scroll:
        destination = scroll_destination(
            target_offset, len(rows), row_height, row_margin, viewport_height
        )

    logger.debug(
        "Scroll state: center=%d row=%d target=%.1f auto=%s",
        center_index,
        target_row_index,
        target_offset,
        enable_auto_scroll,
    )

    return ScrollState(
        center_date_index=center_index,
        target_vertical_offset=target_offset,
        enable_auto_scroll=enable_auto_scroll,
        scrolling_leftward=scrolling_leftward,
        target_row_index=target_row_index,
        destination_offset=destination,
    )


def scroll_destination(
    target_offset: float,
    total_rows: int,
    row_height: float,
    row_margin: float,
    viewport_height: float,
) -> float:
    """
    Final vertical offset for an auto-scroll to target_offset.

    When less than half a viewport of rows remains below the target, snap to
    the bottom of the list instead of stopping just short of it.
    """
    max_offset = max_vertical_offset(total_rows, row_height, row_margin, viewport_height)
    remaining = total_rows_height(total_rows, row_height, row_margin) - target_offset
    if remaining < viewport_height / 2:
        return max_offset
    return clamp_scroll_offset(target_offset, max_offset)
