# SPDX-License-Identifier: MIT

import pytest

from chronolane.model.visible_range import VisibleRange
from chronolane.service.viewport import (
    center_day_index,
    day_step,
    max_scroll_offset,
    max_vertical_offset,
    round_half_away,
    scroll_offset_for_day,
    total_rows_height,
    visible_range,
    visible_row_range,
)

TOTAL_DAYS = 200
DAY_WIDTH = 45.0
DAY_MARGIN = 5.0
VIEWPORT_WIDTH = 800.0


def center(offset, total_days=TOTAL_DAYS, leading_padding=VIEWPORT_WIDTH / 2):
    return center_day_index(
        offset, VIEWPORT_WIDTH, DAY_WIDTH, DAY_MARGIN, total_days, leading_padding
    )


class TestCenterDayIndex:
    def test_scroll_origin_is_the_first_day(self):
        assert center(0.0) == 0

    def test_maximum_offset_is_the_last_day(self):
        max_offset = max_scroll_offset(TOTAL_DAYS, DAY_WIDTH, DAY_MARGIN)

        assert max_offset == 8000.0
        assert center(max_offset) == TOTAL_DAYS - 1
        assert center(scroll_offset_for_day(199, TOTAL_DAYS, DAY_WIDTH, DAY_MARGIN)) == 199

    def test_without_padding_the_origin_centres_half_a_viewport_in(self):
        assert center(0.0, leading_padding=0.0) == 10

    def test_halves_round_away_from_zero(self):
        assert center(420.0) == 11
        assert center(419.0) == 10

    def test_overscroll_is_clamped(self):
        assert center(-500.0) == 0
        assert center(10**6) == TOTAL_DAYS - 1

    def test_empty_timeline(self):
        assert center(1234.0, total_days=0) == 0


@pytest.mark.parametrize(
    "value,expected",
    [(2.5, 3), (-2.5, -3), (0.49, 0), (-0.5, -1), (10.0, 10)],
)
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected


def test_day_step_rejects_margins_wider_than_days():
    assert day_step(DAY_WIDTH, DAY_MARGIN) == 40.0
    with pytest.raises(ValueError):
        day_step(45.0, 45.0)


class TestVisibleRange:
    def test_middle_of_the_timeline(self):
        window = visible_range(100, VIEWPORT_WIDTH, DAY_WIDTH, DAY_MARGIN, 5, TOTAL_DAYS)

        assert window == VisibleRange(85, 115)
        assert window.length == 31
        assert window.contains(100)
        assert not window.contains(116)

    def test_clamped_at_both_ends(self):
        assert visible_range(0, VIEWPORT_WIDTH, DAY_WIDTH, DAY_MARGIN, 5, TOTAL_DAYS) == VisibleRange(0, 15)
        assert visible_range(199, VIEWPORT_WIDTH, DAY_WIDTH, DAY_MARGIN, 5, TOTAL_DAYS) == VisibleRange(184, 200)

    def test_empty_timeline(self):
        assert visible_range(0, VIEWPORT_WIDTH, DAY_WIDTH, DAY_MARGIN, 5, 0) == VisibleRange(0, 0)


def test_visible_range_overlaps():
    window = VisibleRange(10, 20)

    assert window.overlaps(0, 10)
    assert window.overlaps(15, 30)
    assert window.overlaps(0, 40)
    assert not window.overlaps(0, 9)
    assert not window.overlaps(21, 25)


class TestVisibleRowRange:
    def test_top_of_the_list(self):
        assert visible_row_range(0.0, 235.0, 30.0, 3.0, 2, 20) == VisibleRange(0, 9)

    def test_scrolled_down(self):
        assert visible_row_range(360.0, 235.0, 30.0, 3.0, 2, 20) == VisibleRange(8, 19)

    def test_clamped_to_the_row_count(self):
        assert visible_row_range(700.0, 235.0, 30.0, 3.0, 2, 20) == VisibleRange(17, 20)

    def test_no_rows(self):
        assert visible_row_range(100.0, 235.0, 30.0, 3.0, 2, 0) == VisibleRange(0, 0)


def test_scroll_offset_for_day_is_clamped():
    assert scroll_offset_for_day(10, TOTAL_DAYS, DAY_WIDTH, DAY_MARGIN) == 400.0
    assert scroll_offset_for_day(-5, TOTAL_DAYS, DAY_WIDTH, DAY_MARGIN) == 0.0
    assert scroll_offset_for_day(500, TOTAL_DAYS, DAY_WIDTH, DAY_MARGIN) == 7960.0
    assert scroll_offset_for_day(3, 0, DAY_WIDTH, DAY_MARGIN) == 0.0


def test_vertical_extents():
    assert total_rows_height(10, 30.0, 3.0) == 360.0
    assert max_vertical_offset(10, 30.0, 3.0, 235.0) == 125.0
    assert max_vertical_offset(2, 30.0, 3.0, 235.0) == 0.0
