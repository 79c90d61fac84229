# SPDX-License-Identifier: MIT

import logging

import pytest
from conftest import day

from chronolane.controller.timeline import TimelineController
from chronolane.service.layout_cache import LayoutCache
from chronolane.service.performance import PerformanceMetrics, PerformanceMonitor


class StepClock:
    """Advances by a fixed step on every reading."""

    def __init__(self, step: float) -> None:
        self.step = step
        self.now = 0.0

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture
def monitor():
    return PerformanceMonitor(clock=StepClock(0.002))


def test_operation_is_timed(monitor):
    monitor.start_operation("format_days")
    duration = monitor.end_operation("format_days")

    assert duration == pytest.approx(0.002)
    assert monitor.operation_duration("format_days") == pytest.approx(0.002)
    assert monitor.get_metrics().render_time == pytest.approx(0.002)


def test_ending_an_unknown_operation(monitor, caplog):
    with caplog.at_level(logging.WARNING, logger="chronolane.service.performance"):
        assert monitor.end_operation("never_started") is None

    assert "never_started ended without being started" in caplog.text
    assert monitor.operation_duration("never_started") is None


def test_disabled_monitor_records_nothing():
    monitor = PerformanceMonitor(enabled=False, clock=StepClock(1.0))

    monitor.start_operation("scroll_update")
    assert monitor.end_operation("scroll_update") is None
    monitor.track_rebuild()
    monitor.record_frame_time(0.5)

    assert monitor.get_metrics() == PerformanceMetrics(0, 0, 0, 60.0)


def test_metrics_aggregate_counters_and_frames(monitor):
    assert monitor.get_metrics().average_fps == 60.0

    for _ in range(3):
        monitor.track_rebuild()
    monitor.track_rendered(12)
    monitor.record_frame_time(0.01)
    monitor.record_frame_time(0.03)

    metrics = monitor.get_metrics()
    assert metrics.rebuild_count == 3
    assert metrics.rendered_count == 12
    assert metrics.average_fps == pytest.approx(50.0)


def test_frame_average_only_keeps_recent_frames(monitor):
    monitor.record_frame_time(1.0)
    for _ in range(60):
        monitor.record_frame_time(0.02)

    assert monitor.get_metrics().average_fps == pytest.approx(50.0)


def test_reset_clears_everything(monitor):
    monitor.start_operation("format_stage_rows")
    monitor.end_operation("format_stage_rows")
    monitor.start_operation("pending")
    monitor.track_rebuild()
    monitor.track_rendered(4)
    monitor.record_frame_time(0.5)

    monitor.reset()

    assert monitor.get_metrics() == PerformanceMetrics(0, 0, 0, 60.0)
    assert monitor.operation_duration("format_stage_rows") is None
    assert monitor.end_operation("pending") is None


def test_log_metrics(monitor, caplog):
    monitor.start_operation("format_days")
    monitor.end_operation("format_days")
    monitor.track_rebuild()

    with caplog.at_level(logging.INFO, logger="chronolane.service.performance"):
        monitor.log_metrics()

    assert "Timeline metrics: render time 2.0ms" in caplog.text
    assert "1 rebuild(s)" in caplog.text
    assert "format_days: 2.0ms" in caplog.text


def test_layout_cache_times_recomputations_only(monitor):
    cache = LayoutCache(monitor)
    stages = [{"id": "s1", "kind": "stage", "start_date": day(1), "end_date": day(5)}]

    days = cache.get_days(day(0), day(30), [], [], [], stages, 8)
    cache.get_rows(day(0), day(30), days, stages, [])
    monitor.reset()
    cache.get_days(day(0), day(30), [], [], [], stages, 8)
    cache.get_rows(day(0), day(30), days, stages, [])

    assert monitor.operation_duration("format_days") is None
    assert monitor.operation_duration("format_stage_rows") is None

    cache.clear()
    days = cache.get_days(day(0), day(30), [], [], [], stages, 8)
    cache.get_rows(day(0), day(30), days, stages, [])

    assert monitor.operation_duration("format_days") == pytest.approx(0.002)
    assert monitor.operation_duration("format_stage_rows") == pytest.approx(0.002)


def test_controller_shares_its_monitor_and_times_scroll_updates(
    configuration, scheduler, staircase_stages, monitor
):
    controller = TimelineController(
        configuration, 800.0, scheduler=scheduler, leading_padding=400.0, monitor=monitor
    )
    controller.update_data(day(0), day(199), [], [], [], staircase_stages, 10)

    assert monitor.operation_duration("format_days") is not None
    assert monitor.operation_duration("format_stage_rows") is not None

    for i in range(20):
        controller.handle_horizontal_scroll(i * 40.0)
    scheduler.advance(1.0)

    metrics = monitor.get_metrics()
    assert metrics.rebuild_count == controller.window_update_count == 1
    assert monitor.operation_duration("scroll_update") == pytest.approx(0.002)
    assert metrics.average_fps == pytest.approx(500.0)
    controller.dispose()


def test_controller_uses_the_cache_monitor(configuration, scheduler, monitor):
    controller = TimelineController(configuration, 800.0, scheduler=scheduler, cache=LayoutCache(monitor))

    assert controller.monitor is monitor
