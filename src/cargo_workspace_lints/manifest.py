# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read ``Cargo.toml`` manifests and their ``workspace-lints`` settings tables."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import MANIFEST_NAME, SETTINGS_KEY
from .errors import ManifestParseError, MetadataLoadError, SettingsError

Manifest = dict[str, Any]


class WorkspaceLintsSettings(BaseModel):
    """Options read from ``[workspace.metadata.workspace-lints]``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    exclude: tuple[str, ...] = ()

    def excludes(self, package_name: str) -> bool:
        """Return ``True`` when ``package_name`` matches an exclude pattern."""
        return any(fnmatchcase(package_name, pattern) for pattern in self.exclude)


class PackageLintsSettings(BaseModel):
    """Options read from ``[package.metadata.workspace-lints]``."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    skip: bool = False
    allow_local_lints: bool = Field(default=False, alias="allow-local-lints")


def read_manifest(path: Path) -> Manifest:
    """Load and decode the TOML manifest at ``path``.

    Args:
        path: Location of a ``Cargo.toml`` file.

    Returns:
        Manifest: Decoded manifest table.

    Raises:
        MetadataLoadError: If the file cannot be read.
        ManifestParseError: If the file is not valid TOML.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataLoadError(f"Disk I/O Error reading `{path}`:\n    {exc}") from exc
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestParseError(path, str(exc)) from exc


def _table(payload: Mapping[str, Any], *keys: str) -> Mapping[str, Any] | None:
    current: Any = payload
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current if isinstance(current, Mapping) else None


def has_workspace_table(manifest: Mapping[str, Any]) -> bool:
    """Return ``True`` when ``manifest`` declares a ``[workspace]`` table."""
    return _table(manifest, "workspace") is not None


def defines_workspace_lints(manifest: Mapping[str, Any]) -> bool:
    """Return ``True`` when ``manifest`` declares ``[workspace.lints]``."""
    return _table(manifest, "workspace", "lints") is not None


def lints_table(manifest: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the package-level ``[lints]`` table, or an empty mapping."""
    return _table(manifest, "lints") or {}


def find_workspace_manifest(start: Path) -> Path | None:
    """Return the nearest manifest at or above ``start`` that declares ``[workspace]``.

    Args:
        start: Manifest file or directory to search upwards from.

    Returns:
        Path | None: Workspace root manifest, or ``None`` when there is none.

    Raises:
        ManifestParseError: If a manifest on the way up is not valid TOML.
    """

    start = start.absolute()
    directory = start.parent if start.name == MANIFEST_NAME else start
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / MANIFEST_NAME
        if candidate.is_file() and has_workspace_table(read_manifest(candidate)):
            return candidate
    return None


def workspace_settings(manifest: Mapping[str, Any], path: Path) -> WorkspaceLintsSettings:
    """Return the workspace settings declared in the root manifest.

    Raises:
        SettingsError: If the settings table is malformed.
    """

    raw = _table(manifest, "workspace", "metadata", SETTINGS_KEY) or {}
    try:
        return WorkspaceLintsSettings.model_validate(dict(raw))
    except ValidationError as exc:
        raise SettingsError(path, f"invalid [workspace.metadata.{SETTINGS_KEY}]: {exc}") from exc


def package_settings(manifest: Mapping[str, Any], path: Path) -> PackageLintsSettings:
    """Return the package settings declared in a member manifest.

    Raises:
        SettingsError: If the settings table is malformed.
    """

    raw = _table(manifest, "package", "metadata", SETTINGS_KEY) or {}
    try:
        return PackageLintsSettings.model_validate(dict(raw))
    except ValidationError as exc:
        raise SettingsError(path, f"invalid [package.metadata.{SETTINGS_KEY}]: {exc}") from exc


__all__ = [
    "Manifest",
    "PackageLintsSettings",
    "WorkspaceLintsSettings",
    "defines_workspace_lints",
    "find_workspace_manifest",
    "has_workspace_table",
    "lints_table",
    "package_settings",
    "read_manifest",
    "workspace_settings",
]
