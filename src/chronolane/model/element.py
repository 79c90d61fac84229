# SPDX-License-Identifier: MIT

from typing import NotRequired, Optional, TypedDict

from chronolane.model.entity_id import EntityId


class Element(TypedDict):
    id: EntityId
    kind: str
    date: str
    status: NotRequired[Optional[str]]
    start_date: NotRequired[Optional[str]]
    end_date: NotRequired[Optional[str]]
    label: NotRequired[Optional[str]]
    progress: NotRequired[Optional[float]]
    color: NotRequired[Optional[str]]


class CompletedElement(TypedDict):
    id: EntityId
    date: str
