# SPDX-License-Identifier: MIT

import pendulum

from chronolane.model.day import AlertLevel, DayRecord


def get_day_template(date: pendulum.Date, capacity_max: int) -> DayRecord:
    return {
        "date": date,
        "capacity_max": capacity_max,
        "activity_total": 0,
        "activity_completed": 0,
        "deliverable_total": 0,
        "deliverable_completed": 0,
        "task_total": 0,
        "task_completed": 0,
        "element_completed_count": 0,
        "element_pending_count": 0,
        "assigned_ids": [],
        "current_stage": None,
        "capacity_effective": 0,
        "busy_effective": 0,
        "completed_effective": 0,
        "weather_icon": None,
        "alert_level": AlertLevel.NONE,
    }
