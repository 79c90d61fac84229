# SPDX-License-Identifier: MIT

from typing import Optional


class EntityKind:
    # Container kinds
    MILESTONE = "milestone"
    CYCLE = "cycle"
    SEQUENCE = "sequence"
    STAGE = "stage"

    # Leaf kinds
    ACTIVITY = "activity"
    DELIVERABLE = "deliverable"
    TASK = "task"


class ElementStatus:
    PENDING = "pending"
    IN_PROGRESS = "inprogress"
    VALIDATED = "validated"
    FINISHED = "finished"


STAGE_KINDS = frozenset(
    {EntityKind.MILESTONE, EntityKind.CYCLE, EntityKind.SEQUENCE, EntityKind.STAGE}
)

COMPLETED_STATUSES = frozenset({ElementStatus.VALIDATED, ElementStatus.FINISHED})
PENDING_STATUSES = frozenset({ElementStatus.PENDING, ElementStatus.IN_PROGRESS})


def is_stage_kind(kind: Optional[str]) -> bool:
    return kind in STAGE_KINDS


