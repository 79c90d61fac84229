# SPDX-License-Identifier: MIT

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from yaml import YAMLError

from chronolane.configuration import TimelineConfiguration, load_configuration
from chronolane.controller.timeline import TimelineController
from chronolane.model.dataset import TimelineDataset
from chronolane.repository.dataset import load_dataset
from chronolane.time import days_between, today_local
from chronolane.view.timeline import timeline_view

# Wait between checks for the controller's pending timers
_POLL_INTERVAL = 0.005


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )


async def settle_controller(
    dataset: TimelineDataset,
    configuration: TimelineConfiguration,
    width: float,
    height: Optional[float],
    date: Optional[str],
) -> TimelineController:
    """
    Feed a dataset through a controller, scroll to the requested day and
    wait until the throttled window update and the auto-scroll have run.
    """
    controller = TimelineController(
        configuration,
        viewport_width=width,
        viewport_height=height,
        leading_padding=width / 2,
    )
    controller.update_data(
        dataset["start_date"],
        dataset["end_date"],
        dataset["elements"],
        dataset["completed_elements"],
        dataset["capacities"],
        dataset["stages"],
        dataset["capacity_ceiling"],
    )
    controller.scroll_to_day(controller.default_date_index(date))

    while controller.has_pending_update or controller.has_pending_auto_scroll:
        await asyncio.sleep(_POLL_INTERVAL)

    return controller


def render(
    dataset_path: Annotated[
        Path, typer.Argument(help="YAML dataset with stages, elements and capacities")
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file to use"),
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Day to centre on (YYYY-MM-DD), default today"),
    ] = None,
    width: Annotated[
        float, typer.Option("--width", "-w", help="Viewport width in pixels")
    ] = 800.0,
    height: Annotated[
        Optional[float],
        typer.Option("--height", help="Rows viewport height in pixels"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Render the visible window of a timeline dataset."""
    configure_logging(verbose)
    console = Console()

    try:
        dataset = load_dataset(dataset_path)
    except FileNotFoundError:
        console.print(f"[red]Error: Dataset '{dataset_path}' not found[/red]")
        raise typer.Exit(1)
    except (YAMLError, ValueError) as e:
        console.print(f"[red]Error: Could not read dataset '{dataset_path}': {e}[/red]")
        raise typer.Exit(1)

    configuration = load_configuration(config_path)["configuration"]

    controller = asyncio.run(
        settle_controller(dataset, configuration, width, height, date)
    )
    try:
        today_index: Optional[int] = None
        if controller.days:
            offset = days_between(controller.days[0]["date"], today_local())
            if 0 <= offset < len(controller.days):
                today_index = offset

        timeline_view(
            controller.days,
            controller.rows,
            controller.center_index,
            controller.visible_range,
            controller.visible_row_range,
            today_index=today_index,
            title=dataset_path.name,
        )
        row_window = controller.visible_row_range
        controller.monitor.track_rendered(
            sum(len(row) for row in controller.rows[row_window.start : row_window.end + 1])
        )
        controller.monitor.log_metrics()
    finally:
        controller.dispose()
