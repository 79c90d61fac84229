# SPDX-License-Identifier: MIT

from chronolane.model.timeline_item import UNRESOLVED_DAY_INDEX, TimelineItem


def get_timeline_item_template() -> TimelineItem:
    return {
        "entity_id": None,
        "kind": None,
        "start_date": None,
        "end_date": None,
        "start_day_index": UNRESOLVED_DAY_INDEX,
        "end_day_index": UNRESOLVED_DAY_INDEX,
        "label": None,
        "progress": None,
        "parent_stage_id": None,
        "color": None,
        "metadata": {},
    }
