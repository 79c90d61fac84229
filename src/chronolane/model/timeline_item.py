# SPDX-License-Identifier: MIT

from typing import Any, Optional, TypeAlias, TypedDict

import pendulum

from chronolane.model.entity_id import EntityId

UNRESOLVED_DAY_INDEX = -1


class TimelineItem(TypedDict):
    entity_id: Optional[EntityId]
    kind: Optional[str]
    start_date: Optional[pendulum.Date]
    end_date: Optional[pendulum.Date]
    start_day_index: int
    end_day_index: int
    label: Optional[str]
    progress: Optional[float]
    parent_stage_id: Optional[EntityId]
    color: Optional[str]
    metadata: dict[str, Any]


RowAssignment: TypeAlias = list[list[TimelineItem]]
