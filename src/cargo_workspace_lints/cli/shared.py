# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.text import Text

from ..constants import EXIT_LOAD_ERROR
from ..logging import fail as core_fail
from ..logging import warn as core_warn

_PACKAGE_LOGGER = "cargo_workspace_lints"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = EXIT_LOAD_ERROR) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def fail(self, message: str) -> None:
        """Log a failure message to stderr."""
        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message to stderr."""
        core_warn(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""
        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug message on stderr when debug logging is enabled.

        Args:
            message: Debug payload rendered with simple ``key=value`` highlighting.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            text.append(raw_value, style="bold blue" if key in {"command", "cmd"} else "bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated stderr Rich console.
    """

    console = Console(no_color=no_color, highlight=False, stderr=True, soft_wrap=True)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


def configure_verbose_logging() -> logging.Handler:
    """Stream the package's debug records to the current ``sys.stderr``.

    Repeated calls reuse one handler and retarget it, so each CLI invocation
    writes to whatever ``sys.stderr`` is at that moment.

    Returns:
        logging.Handler: Handler attached to the package logger.
    """

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    handler = getattr(package_logger, "_workspace_lints_handler", None)
    if handler is None:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter("[debug] %(message)s"))
        package_logger.addHandler(handler)
        package_logger.propagate = False
        setattr(package_logger, "_workspace_lints_handler", handler)
    else:
        handler.setStream(sys.stderr)
    package_logger.setLevel(logging.DEBUG)
    return handler


__all__ = ["CLIError", "CLILogger", "build_cli_logger", "configure_verbose_logging"]
