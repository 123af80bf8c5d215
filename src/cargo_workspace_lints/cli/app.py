# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from . import workspace_lints
from .typer_ext import create_typer

app = create_typer(
    name="cargo",
    help="Enforce that all packages in a cargo workspace use workspace lints.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cargo-workspace-lints {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """Run as ``cargo workspace-lints``; cargo passes the subcommand name first."""


workspace_lints.register(app)

__all__ = ["app"]
