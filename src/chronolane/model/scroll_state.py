# SPDX-License-Identifier: MIT

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VerticalScrollState(Enum):
    IDLE = "idle"
    AUTO_SCROLLING = "auto_scrolling"
    USER_SCROLLING = "user_scrolling"


@dataclass(frozen=True)
class ScrollState:
    center_date_index: int
    target_vertical_offset: Optional[float]
    enable_auto_scroll: bool
    scrolling_leftward: bool
    target_row_index: Optional[int] = None
    # Where the vertical scroll should land once bottom snapping is applied
    destination_offset: Optional[float] = None
