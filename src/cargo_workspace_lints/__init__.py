# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Check that every package in a cargo workspace inherits ``workspace.lints``."""

from __future__ import annotations

from typing import Final

from .errors import ManifestParseError, MetadataLoadError, SettingsError, WorkspaceLintsError
from .validation import ValidationReport, validate_workspace
from .workspace import MemberPackage, WorkspaceInfo, load_workspace

__version__: Final[str] = "0.1.0"

__all__ = [
    "ManifestParseError",
    "MemberPackage",
    "MetadataLoadError",
    "SettingsError",
    "ValidationReport",
    "WorkspaceInfo",
    "WorkspaceLintsError",
    "__version__",
    "load_workspace",
    "validate_workspace",
]
