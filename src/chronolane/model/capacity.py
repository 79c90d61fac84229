# SPDX-License-Identifier: MIT

from typing import NotRequired, Optional, TypedDict


class Capacity(TypedDict):
    date: str
    capacity_effective: NotRequired[Optional[float]]
    busy_effective: NotRequired[Optional[float]]
    completed_effective: NotRequired[Optional[float]]
    weather_icon: NotRequired[Optional[str]]
