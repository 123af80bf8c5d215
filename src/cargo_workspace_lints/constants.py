# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Constants shared across the workspace lint checker."""

from __future__ import annotations

from typing import Final

EXIT_OK: Final[int] = 0
EXIT_FAILURES: Final[int] = 1
EXIT_LOAD_ERROR: Final[int] = 2

MANIFEST_NAME: Final[str] = "Cargo.toml"
CARGO_ENV_VAR: Final[str] = "CARGO"
DEFAULT_CARGO: Final[str] = "cargo"
METADATA_FORMAT_VERSION: Final[str] = "1"

# Key used under ``[workspace.metadata]`` and ``[package.metadata]``.
SETTINGS_KEY: Final[str] = "workspace-lints"

__all__ = [
    "CARGO_ENV_VAR",
    "DEFAULT_CARGO",
    "EXIT_FAILURES",
    "EXIT_LOAD_ERROR",
    "EXIT_OK",
    "MANIFEST_NAME",
    "METADATA_FORMAT_VERSION",
    "SETTINGS_KEY",
]
