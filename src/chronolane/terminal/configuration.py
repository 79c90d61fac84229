# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from chronolane import configuration
from chronolane.configuration import (
    PARAMETER_CONSTRAINTS,
    ValidationIssue,
    format_range,
    load_configuration,
)
from chronolane.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

ConfigPathOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Configuration file (defaults to the user configuration path)",
    ),
]


def _issues_table(title: str, issues: list[ValidationIssue], style: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Problem", style=style)
    for issue in issues:
        table.add_row(issue["parameter"], repr(issue["value"]), issue["message"])
    return table


@app.command("show, s")
def show(config_path: ConfigPathOption = None) -> None:
    """Display the effective timeline configuration."""
    result = load_configuration(config_path)
    config = result["configuration"]

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Range", style="dim")

    for name, constraints in PARAMETER_CONSTRAINTS.items():
        table.add_row(
            name,
            str(config[name]),  # type: ignore[literal-required]
            format_range(constraints) or "",
        )

    console.print(table)
    console.print()
    console.print(
        f"Configuration file: {config_path or configuration.APP_CONFIG_PATH}"
    )


@app.command("validate, v")
def validate(config_path: ConfigPathOption = None) -> None:
    """Check a configuration file and report every replaced value."""
    result = load_configuration(config_path)

    console = Console()
    if not result["errors"] and not result["warnings"]:
        console.print("[green]Configuration is valid[/green]")
        return

    if result["errors"]:
        console.print(_issues_table("Errors", result["errors"], "red"))
    if result["warnings"]:
        console.print(_issues_table("Warnings", result["warnings"], "yellow"))

    console.print("\nInvalid values were replaced by their defaults.")
    if result["errors"]:
        raise typer.Exit(1)
