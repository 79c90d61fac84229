# SPDX-License-Identifier: MIT

from typing import NotRequired, Optional, TypedDict

from chronolane.model.entity_id import EntityId


class Stage(TypedDict):
    id: EntityId
    kind: str
    start_date: str
    end_date: str
    label: NotRequired[Optional[str]]
    progress: NotRequired[Optional[float]]
    color: NotRequired[Optional[str]]
    project_id: NotRequired[Optional[str]]
    # Explicit membership list: ids of the elements grouped under this stage
    element_ids: NotRequired[Optional[list[EntityId]]]
