# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option declarations and option bundle for the workspace-lints command."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

PATH_ARGUMENT = Annotated[
    Path | None,
    typer.Argument(
        metavar="[PATH]",
        help="Workspace directory or Cargo.toml to lint. Defaults to the current directory.",
        show_default=False,
    ),
]
MANIFEST_PATH_OPTION = Annotated[
    Path | None,
    typer.Option("--manifest-path", help="Path to the workspace Cargo.toml.", show_default=False),
]
CARGO_PATH_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--cargo-path",
        help="cargo executable to run. Defaults to $CARGO, then `cargo` on PATH.",
        show_default=False,
    ),
]
FILTER_PLATFORM_OPTION = Annotated[
    str | None,
    typer.Option("--filter-platform", help="Only include dependencies for the given target triple."),
]
EXCLUDE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-e", help="Package name glob to skip (repeatable)."),
]
QUIET_OPTION = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Suppress the success message."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="List every package with its status."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...]:
    """Return stripped, non-empty CLI values preserving order."""

    if not values:
        return ()
    return tuple(stripped for entry in values if (stripped := entry.strip()))


@dataclass(slots=True)
class WorkspaceLintsCLIOptions:
    """Capture CLI inputs supplied to the workspace-lints command."""

    path: Path | None
    manifest_path: Path | None
    cargo_path: Path | None
    filter_platform: str | None
    exclude: tuple[str, ...]
    quiet: bool
    verbose: bool
    emoji: bool


def build_workspace_lints_options(
    *,
    path: Path | None,
    manifest_path: Path | None,
    cargo_path: Path | None,
    filter_platform: str | None,
    exclude: Sequence[str] | None,
    quiet: bool,
    verbose: bool,
    emoji: bool,
) -> WorkspaceLintsCLIOptions:
    """Validate raw Typer values and bundle them into options.

    Raises:
        typer.BadParameter: If mutually exclusive flags are combined.
    """

    if quiet and verbose:
        raise typer.BadParameter("--quiet and --verbose cannot be used together.")
    if path is not None and manifest_path is not None:
        raise typer.BadParameter("Provide either PATH or --manifest-path, not both.")
    return WorkspaceLintsCLIOptions(
        path=path.expanduser() if path is not None else None,
        manifest_path=manifest_path.expanduser() if manifest_path is not None else None,
        cargo_path=cargo_path,
        filter_platform=filter_platform.strip() if filter_platform else None,
        exclude=normalize_cli_values(exclude),
        quiet=quiet,
        verbose=verbose,
        emoji=emoji,
    )


__all__ = [
    "CARGO_PATH_OPTION",
    "EMOJI_OPTION",
    "EXCLUDE_OPTION",
    "FILTER_PLATFORM_OPTION",
    "MANIFEST_PATH_OPTION",
    "PATH_ARGUMENT",
    "QUIET_OPTION",
    "VERBOSE_OPTION",
    "WorkspaceLintsCLIOptions",
    "build_workspace_lints_options",
    "normalize_cli_values",
]
