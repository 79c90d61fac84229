# SPDX-License-Identifier: MIT

import logging
from typing import Any, Optional, Sequence

import pendulum

from chronolane.model.day import DayRecord
from chronolane.model.entity_kind import is_stage_kind
from chronolane.model.timeline_item import RowAssignment, TimelineItem
from chronolane.service.error_handler import (
    clamp_index,
    is_valid_list,
    validate_date_range,
    validate_days,
    validate_elements,
    validate_stages,
)
from chronolane.template.timeline_item import get_timeline_item_template
from chronolane.time import date_key, to_date

logger = logging.getLogger(__name__)

# Keys copied into TimelineItem fields; everything else lands in metadata
_ITEM_KEYS = frozenset(
    {
        "id",
        "kind",
        "start_date",
        "end_date",
        "label",
        "progress",
        "color",
        "parent_stage_id",
        "element_ids",
    }
)


class RowPlacer:
    """
    Greedy lane assignment for timeline items.

    Each item goes into the first row, scanning from last_stage_row_index
    downwards, where every existing item ends strictly before the new item
    starts (existing end + 1 <= new start). An item starting the day after
    another one ends may share its row; items sharing a day never do.

    Placing a stage moves last_stage_row_index to the stage's row, so later
    items are never drawn above a stage that came before them.
    """

    def __init__(self) -> None:
        self.rows: RowAssignment = []
        self.last_stage_row_index = 0

    def place(self, item: TimelineItem) -> int:
        """Place an index-resolved item and return the row it landed in."""
        is_stage = is_stage_kind(item["kind"])

        if not self.rows:
            self.rows.append([item])
            if is_stage:
                self.last_stage_row_index = 0
            return 0

        self.last_stage_row_index = clamp_index(
            self.last_stage_row_index, 0, len(self.rows) - 1
        )

        for row_index in range(self.last_stage_row_index, len(self.rows)):
            if not row_overlaps(self.rows[row_index], item["start_day_index"]):
                self.rows[row_index].append(item)
                if is_stage:
                    self.last_stage_row_index = row_index
                return row_index

        self.rows.append([item])
        row_index = len(self.rows) - 1
        if is_stage:
            self.last_stage_row_index = row_index
        return row_index


def row_overlaps(row: list[TimelineItem], start_day_index: int) -> bool:
    return any(existing["end_day_index"] + 1 > start_day_index for existing in row)


def pack_rows(
    start_date: Any,
    end_date: Any,
    days: Sequence[DayRecord],
    stages: Sequence[dict[str, Any]],
    elements: Sequence[dict[str, Any]],
) -> RowAssignment:
    """
    Lay stages and their elements out into non-overlapping rows.

    Args:
        start_date: First day of the timeline, items starting earlier are clamped to it
        end_date: Last day of the timeline
        days: The day sequence produced by aggregate_days
        stages: Raw stages, in display order
        elements: Raw elements, attached to stages through "element_ids"

    Returns:
        The rows, each an ordered list of items with resolved day indices.
        Items whose dates fall outside the day sequence are left out.
    """
    start = to_date(start_date)
    validate_date_range(start, to_date(end_date))

    if not is_valid_list(validate_days(days)):
        logger.debug("No usable days, nothing to pack")
        return []

    merged = merge_stages_and_elements(
        validate_stages(stages), validate_elements(elements)
    )
    resolved = resolve_day_indices(merged, days, start)

    placer = RowPlacer()
    for item in resolved:
        placer.place(item)

    return placer.rows


def merge_stages_and_elements(
    stages: Sequence[dict[str, Any]], elements: Sequence[dict[str, Any]]
) -> list[TimelineItem]:
    """
    Flatten stages into one list: each stage followed by its member
    elements (deduplicated, sorted by start date), each member tagged with
    the stage's color and id.
    """
    elements_by_id: dict[str, dict[str, Any]] = {}
    for element in elements:
        element_id = element.get("id")
        if isinstance(element_id, str) and element_id != "":
            elements_by_id[element_id] = element

    merged: list[TimelineItem] = []
    for stage in stages:
        stage_item = build_timeline_item(stage)
        merged.append(stage_item)

        member_ids = stage.get("element_ids") or []
        seen_ids: set[str] = set()
        stage_elements: list[TimelineItem] = []
        for element_id in member_ids:
            if not isinstance(element_id, str) or element_id in seen_ids:
                continue
            element = elements_by_id.get(element_id)
            if element is None:
                continue
            seen_ids.add(element_id)
            stage_elements.append(
                build_timeline_item(
                    element,
                    parent_stage_id=stage_item["entity_id"],
                    color=stage_item["color"],
                )
            )

        # Python's sort is stable; undated members keep their order at the end
        stage_elements.sort(
            key=lambda item: (item["start_date"] is None, item["start_date"] or "")
        )
        merged.extend(stage_elements)

    return merged


def build_timeline_item(
    record: dict[str, Any],
    parent_stage_id: Optional[str] = None,
    color: Optional[str] = None,
) -> TimelineItem:
    """
    Normalize a raw stage or element record.

    Elements without explicit start/end dates span their single "date".
    Unparsable dates become None and the item is dropped at index resolution.
    """
    item = get_timeline_item_template()
    item["entity_id"] = record.get("id")
    item["kind"] = record.get("kind")
    item["start_date"] = _date_or_none(record.get("start_date") or record.get("date"))
    item["end_date"] = _date_or_none(record.get("end_date") or record.get("date"))
    item["label"] = record.get("label")
    item["progress"] = record.get("progress")
    item["parent_stage_id"] = (
        parent_stage_id if parent_stage_id is not None else record.get("parent_stage_id")
    )
    item["color"] = color if color is not None else record.get("color")
    item["metadata"] = {
        key: value for key, value in record.items() if key not in _ITEM_KEYS
    }
    return item


def resolve_day_indices(
    items: Sequence[TimelineItem],
    days: Sequence[DayRecord],
    start_date: pendulum.Date,
) -> list[TimelineItem]:
    """
    Resolve start/end day indices against the day sequence.

    Start dates before the timeline start are clamped to it. Items whose
    start or end cannot be found in the day sequence, or whose span would be
    reversed, are skipped.
    """
    index_by_date: dict[str, int] = {}
    for index, day in enumerate(days):
        key = date_key(day.get("date"))
        if key is not None:
            index_by_date.setdefault(key, index)

    resolved: list[TimelineItem] = []
    for item in items:
        item_start = item["start_date"]
        item_end = item["end_date"]
        if item_start is None or item_end is None:
            continue

        if item_start < start_date:
            item_start = start_date

        start_index = index_by_date.get(date_key(item_start) or "")
        end_index = index_by_date.get(date_key(item_end) or "")
        if start_index is None or end_index is None or start_index > end_index:
            logger.debug(
                "Skipping %s %s: span outside the timeline",
                item["kind"],
                item["entity_id"],
            )
            continue

        resolved_item: TimelineItem = {
            **item,
            "start_day_index": start_index,
            "end_day_index": end_index,
        }
        resolved.append(resolved_item)

    return resolved


def _date_or_none(value: Any) -> Optional[pendulum.Date]:
    if value is None:
        return None
    try:
        return to_date(value)
    except ValueError:
        return None
