# SPDX-License-Identifier: MIT

from typing import Optional, Sequence

from rich.console import Console, Group
from rich.padding import Padding
from rich.text import Text

from chronolane.color import (
    ALERT_LEVEL_COLORS,
    CENTER_DAY_COLOR,
    DEFAULT_STAGE_COLOR,
    format_color,
    text_color_for,
)
from chronolane.model.day import AlertLevel, DayRecord
from chronolane.model.timeline_item import RowAssignment, TimelineItem
from chronolane.model.visible_range import VisibleRange
from chronolane.time import date_to_display_str, date_to_str


def header(title: str, sub_header: Optional[str] = None) -> None:
    """Print the application header.

    Args:
        title: Name of what is being displayed
        sub_header: Optional line displayed under the title
    """
    console = Console()
    console.print(Padding("[dark_orange]chronolane[/dark_orange]", (1, 0, 0, 1)))
    console.print(Padding(f"[sandy_brown]{title}[/sandy_brown]", (0, 1)))
    if sub_header is not None:
        console.print(Padding(f"[plum1]{sub_header}[/plum1]", (0, 1)))


def window_day_indices(days: Sequence[DayRecord], window: VisibleRange) -> range:
    """Day indices of the window that exist in the day sequence."""
    if not days:
        return range(0)
    last = min(window.end, len(days) - 1)
    return range(max(window.start, 0), last + 1)


def build_day_header(
    days: Sequence[DayRecord],
    day_indices: range,
    center_index: int,
    today_index: Optional[int],
    slot_width: int,
    left_column_width: int,
) -> list[Text]:
    """
    Build the date header: month/day labels, alert markers and per-day
    element counts.

    Today is marked with a hollow circle, days over capacity with a filled
    circle colored by alert level.
    """
    labels = Text(" " * left_column_width)
    weekdays = Text(" " * left_column_width)
    alerts = Text(" " * left_column_width)
    counts = Text("elems"[:left_column_width].ljust(left_column_width), style="dim")

    for index in day_indices:
        day = days[index]
        date = day["date"]
        style = CENTER_DAY_COLOR if index == center_index else ""
        if index % 2 == 1:
            style = f"{style} on grey23".strip()

        labels.append(date.format("DD").center(slot_width), style=style)
        weekdays.append(date.format("dd").center(slot_width), style=style)

        if today_index is not None and index == today_index:
            alerts.append("○".center(slot_width), style=style)
        elif day["alert_level"] != AlertLevel.NONE:
            alert_style = f"{ALERT_LEVEL_COLORS[day['alert_level']]} {style}".strip()
            alerts.append("●".center(slot_width), style=alert_style)
        else:
            alerts.append(" " * slot_width, style=style)

        assigned = len(day["assigned_ids"])
        counts.append(
            (str(assigned) if assigned else "·").center(slot_width),
            style=f"dim {style}".strip(),
        )

    return [labels, weekdays, alerts, counts]


def _item_at(row: Sequence[TimelineItem], day_index: int) -> Optional[TimelineItem]:
    for item in row:
        if item["start_day_index"] <= day_index <= item["end_day_index"]:
            return item
        if item["start_day_index"] > day_index:
            break
    return None


def _item_label(item: TimelineItem) -> str:
    label = item["label"] or item["entity_id"] or item["kind"] or ""
    if item["progress"] is not None:
        label = f"{label} {round(item['progress'])}%"
    return label


def build_row(
    row: Sequence[TimelineItem],
    row_index: int,
    day_indices: range,
    slot_width: int,
    left_column_width: int,
) -> Text:
    """
    Build one packed row: each item is drawn as a bar over the days it spans
    within the window, labelled with its name and progress.
    """
    text = Text(f"{row_index}".ljust(left_column_width), style="dim")

    run_item: Optional[TimelineItem] = None
    run_length = 0

    def flush() -> None:
        if run_length == 0:
            return
        width = run_length * slot_width
        if run_item is None:
            text.append(" " * width)
            return
        color = format_color(run_item["color"]) or DEFAULT_STAGE_COLOR
        label = _item_label(run_item)
        if len(label) > width:
            label = label[: max(width - 1, 0)] + "…" if width > 1 else label[:width]
        text.append(
            label.ljust(width), style=f"{text_color_for(color)} on {color}"
        )

    for day_index in day_indices:
        item = _item_at(row, day_index)
        if item is not run_item:
            flush()
            run_item = item
            run_length = 0
        run_length += 1
    flush()

    return text


def timeline_view(
    days: Sequence[DayRecord],
    rows: RowAssignment,
    center_index: int,
    day_window: VisibleRange,
    row_window: VisibleRange,
    today_index: Optional[int] = None,
    title: str = "timeline",
    slot_width: int = 4,
    left_column_width: int = 6,
) -> None:
    """
    Display the materialized part of a timeline: the days of the day window
    and the rows of the row window.

    Args:
        days: The full day sequence
        rows: The full row assignment
        center_index: Day index under the centre of the viewport
        day_window: Visible range of day indices
        row_window: Visible range of row indices
        today_index: Day index of today, if it falls on the timeline
        title: Name printed in the header
        slot_width: Characters per day
        left_column_width: Width of the row number column
    """
    console = Console()

    if not days:
        header(title)
        console.print("\n[dim]No days to display[/dim]\n")
        return

    day_indices = window_day_indices(days, day_window)
    center_date = days[center_index]["date"]
    header(title, f"Centered on {date_to_display_str(center_date)}")

    first = days[day_indices.start]["date"] if day_indices else center_date
    last = days[day_indices.stop - 1]["date"] if day_indices else center_date
    console.print(
        f"\n[bold]{date_to_str(first)} to {date_to_str(last)}[/bold]"
        f" ({len(days)} days, {len(rows)} rows)\n"
    )

    chart_elements: list[Text] = build_day_header(
        days, day_indices, center_index, today_index, slot_width, left_column_width
    )
    chart_elements.append(
        Text("─" * (left_column_width + len(day_indices) * slot_width), style="dim")
    )

    if not rows:
        chart_elements.append(Text("No stages to display", style="dim"))
    for row_index in range(row_window.start, min(row_window.end, len(rows) - 1) + 1):
        chart_elements.append(
            build_row(
                rows[row_index], row_index, day_indices, slot_width, left_column_width
            )
        )

    console.print(Padding(Group(*chart_elements), (0, 0, 1, 0)))
