# SPDX-License-Identifier: MIT

import typer

from chronolane.terminal import configuration
from chronolane.terminal.custom_typer import AliasedTyperGroup
from chronolane.terminal.render import render

app = typer.Typer(
    cls=AliasedTyperGroup,
    help="Chronolane - Timeline layout in the CLI",
    no_args_is_help=True,
)
app.add_typer(configuration.app, name="config, c")
app.command(name="render, r")(render)


def run() -> None:
    app()
