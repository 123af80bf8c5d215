# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command checking that workspace members inherit ``workspace.lints``."""

from __future__ import annotations

import typer

from ..constants import EXIT_LOAD_ERROR
from ..errors import MetadataLoadError
from ..metadata import build_metadata_command
from ..reporting import ReportOptions, exit_code_for, render_report
from ..validation import PackageStatus, ValidationReport, validate_workspace
from ..workspace import WorkspaceInfo, load_workspace
from ._workspace_lints_cli_models import (
    CARGO_PATH_OPTION,
    EMOJI_OPTION,
    EXCLUDE_OPTION,
    FILTER_PLATFORM_OPTION,
    MANIFEST_PATH_OPTION,
    PATH_ARGUMENT,
    QUIET_OPTION,
    VERBOSE_OPTION,
    WorkspaceLintsCLIOptions,
    build_workspace_lints_options,
)
from .shared import CLIError, CLILogger, build_cli_logger, configure_verbose_logging


def load_workspace_for(options: WorkspaceLintsCLIOptions, *, logger: CLILogger) -> WorkspaceInfo:
    """Load the workspace targeted by ``options``.

    Raises:
        CLIError: If metadata or a manifest cannot be loaded.
    """

    command = build_metadata_command(
        options.path,
        manifest_path=options.manifest_path,
        cargo_path=options.cargo_path,
        filter_platform=options.filter_platform,
    )
    logger.debug(f"command={' '.join(command.command_line())} cwd={command.cwd or '.'}")
    try:
        return load_workspace(command)
    except MetadataLoadError as exc:
        raise CLIError(str(exc), exit_code=EXIT_LOAD_ERROR) from exc


def emit_report(report: ValidationReport, options: WorkspaceLintsCLIOptions, *, logger: CLILogger) -> None:
    """Print the validation report to stdout."""

    if report.results and all(result.status is PackageStatus.SKIPPED for result in report.results):
        logger.warn("Every workspace member was skipped by configuration")
    report_options = ReportOptions(quiet=options.quiet, verbose=options.verbose, emoji=options.emoji)
    for line in render_report(report, report_options):
        logger.echo(line)


def workspace_lints(
    path: PATH_ARGUMENT = None,
    manifest_path: MANIFEST_PATH_OPTION = None,
    cargo_path: CARGO_PATH_OPTION = None,
    filter_platform: FILTER_PLATFORM_OPTION = None,
    exclude: EXCLUDE_OPTION = None,
    quiet: QUIET_OPTION = False,
    verbose: VERBOSE_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Check that every workspace package sets ``lints.workspace = true``."""

    options = build_workspace_lints_options(
        path=path,
        manifest_path=manifest_path,
        cargo_path=cargo_path,
        filter_platform=filter_platform,
        exclude=exclude,
        quiet=quiet,
        verbose=verbose,
        emoji=emoji,
    )
    logger = build_cli_logger(emoji=options.emoji, debug=options.verbose)
    if options.verbose:
        configure_verbose_logging()
    try:
        workspace = load_workspace_for(options, logger=logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger.debug(f"workspace={workspace.root} members={len(workspace.members)}")
    report = validate_workspace(workspace, exclude=options.exclude)
    emit_report(report, options, logger=logger)
    raise typer.Exit(code=exit_code_for(report))


def register(app: typer.Typer) -> None:
    """Register the ``workspace-lints`` command on ``app``."""

    app.command(
        "workspace-lints",
        help="Check that every workspace package sets `lints.workspace = true`.",
    )(workspace_lints)


__all__ = ["emit_report", "load_workspace_for", "register", "workspace_lints"]
