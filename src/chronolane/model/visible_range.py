# SPDX-License-Identifier: MIT

from dataclasses import dataclass


@dataclass(frozen=True)
class VisibleRange:
    """
    Inclusive span of indices (days or rows) that should be materialized.

    start <= end is expected but not enforced here; the windowing functions
    clamp their results.
    """

    start: int
    end: int

    def contains(self, index: int) -> bool:
        return self.start <= index <= self.end

    def overlaps(self, start_index: int, end_index: int) -> bool:
        return not (end_index < self.start or start_index > self.end)

    @property
    def length(self) -> int:
        return self.end - self.start + 1


EMPTY_RANGE = VisibleRange(0, 0)
