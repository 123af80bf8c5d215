# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render validation results as a plain-text report."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import EXIT_FAILURES, EXIT_OK
from .validation import PackageResult, ValidationReport


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Presentation switches for :func:`render_report`."""

    quiet: bool = False
    verbose: bool = False
    emoji: bool = True


def _describe(result: PackageResult) -> str:
    package = result.package
    return f"Package {package.label} ({package.path})"


def _status_lines(report: ValidationReport) -> list[str]:
    return [f"{result.status.value}: {_describe(result)}" for result in report.results]


def _failure_lines(report: ValidationReport, prefix: str) -> list[str]:
    lines = [f"{prefix}Failing packages:"]
    for result in report.failures:
        finding = result.finding
        lines.append(f"* {_describe(result)}:")
        if finding is None:
            continue
        lines.append(f"    {finding.message}")
        if finding.local_tables:
            lines.append(f"    defines its own lints: {', '.join(finding.local_tables)}")
    return lines


def render_report(report: ValidationReport, options: ReportOptions | None = None) -> list[str]:
    """Return the report lines for ``report``.

    The output depends only on ``report`` and ``options``, so repeated runs on
    an unchanged workspace print identical text.

    Args:
        report: Validation results to render.
        options: Presentation switches; defaults to :class:`ReportOptions`.

    Returns:
        list[str]: Lines to print to stdout, without trailing newlines.
    """

    options = options or ReportOptions()
    prefix_fail = "❌ " if options.emoji else ""
    if report.workspace_error is not None:
        return [f"{prefix_fail}Failed to validate:", f"* {report.workspace_error.message}"]

    lines: list[str] = _status_lines(report) if options.verbose else []
    if report.failures:
        lines.extend(_failure_lines(report, prefix_fail))
    elif not options.quiet:
        prefix_ok = "✅ " if options.emoji else ""
        lines.append(f"{prefix_ok}All packages pass!")
    return lines


def exit_code_for(report: ValidationReport) -> int:
    """Return the process exit status for ``report``."""
    return EXIT_OK if report.ok else EXIT_FAILURES


__all__ = ["ReportOptions", "exit_code_for", "render_report"]
