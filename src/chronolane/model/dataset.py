# SPDX-License-Identifier: MIT

from typing import TypedDict

from chronolane.model.capacity import Capacity
from chronolane.model.element import CompletedElement, Element
from chronolane.model.stage import Stage


class TimelineDataset(TypedDict):
    start_date: str
    end_date: str
    capacity_ceiling: int
    elements: list[Element]
    completed_elements: list[CompletedElement]
    capacities: list[Capacity]
    stages: list[Stage]
