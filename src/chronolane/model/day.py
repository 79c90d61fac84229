# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from chronolane.model.entity_id import EntityId
from chronolane.model.timeline_item import TimelineItem


class AlertLevel:
    NONE = 0
    WARNING = 1
    CRITICAL = 2


class DayRecord(TypedDict):
    date: pendulum.Date
    capacity_max: int
    activity_total: int
    activity_completed: int
    deliverable_total: int
    deliverable_completed: int
    task_total: int
    task_completed: int
    element_completed_count: int
    element_pending_count: int
    assigned_ids: list[EntityId]
    current_stage: Optional[TimelineItem]
    capacity_effective: float
    busy_effective: float
    completed_effective: float
    weather_icon: Optional[str]
    alert_level: int
