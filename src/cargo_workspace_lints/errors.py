# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exceptions raised while loading workspace metadata and manifests."""

from __future__ import annotations

from pathlib import Path


class WorkspaceLintsError(RuntimeError):
    """Base class for fatal errors raised by the workspace lint checker."""


class MetadataLoadError(WorkspaceLintsError):
    """Raised when workspace metadata cannot be obtained or read."""


class ManifestParseError(MetadataLoadError):
    """Raised when a manifest is not valid TOML."""

    def __init__(self, path: Path | None, detail: str) -> None:
        """Initialise the error with the offending manifest and parser detail.

        Args:
            path: Manifest that failed to parse, when known.
            detail: Parser message describing the failure.
        """

        location = f" at `{path}`" if path is not None else ""
        super().__init__(f"Error parsing manifest{location}:\n    {detail}")
        self.path = path
        self.detail = detail


class SettingsError(ManifestParseError):
    """Raised when a ``workspace-lints`` metadata table has invalid settings."""


class WorkspaceLintsUndefinedError(MetadataLoadError):
    """Raised when cargo refuses to inherit lints the workspace root never defines."""


__all__ = [
    "ManifestParseError",
    "MetadataLoadError",
    "SettingsError",
    "WorkspaceLintsUndefinedError",
    "WorkspaceLintsError",
]
