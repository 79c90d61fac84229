# SPDX-License-Identifier: MIT

from typing import Optional

from chronolane.model.day import AlertLevel

# Rich colors for the day header alert markers
ALERT_LEVEL_COLORS = {
    AlertLevel.NONE: "bright_black",
    AlertLevel.WARNING: "yellow",
    AlertLevel.CRITICAL: "red",
}

# Stages without a usable color
DEFAULT_STAGE_COLOR = "#ffffff"

CENTER_DAY_COLOR = "bold plum1"


def format_color(color: Optional[str]) -> Optional[str]:
    """Turn a stored hex color into a Rich '#rrggbb' color.

    Accepts 'rrggbb' and 'aarrggbb', with or without a leading '#'. The alpha
    channel is dropped since terminals have no use for it.

    Returns:
        The Rich color, or None when the value is empty or not hex
    """
    if color is None or color == "":
        return None

    cleaned = color.replace("#", "")
    if len(cleaned) == 8:
        cleaned = cleaned[2:]
    if len(cleaned) != 6:
        return None

    try:
        int(cleaned, 16)
    except ValueError:
        return None
    return f"#{cleaned.lower()}"


def text_color_for(background: str) -> str:
    """Black or white, whichever reads better on a '#rrggbb' background."""
    red = int(background[1:3], 16)
    green = int(background[3:5], 16)
    blue = int(background[5:7], 16)
    luminance = (0.299 * red + 0.587 * green + 0.114 * blue) / 255
    return "black" if luminance > 0.5 else "white"
