# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Snapshot of a cargo workspace and its member packages."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .constants import MANIFEST_NAME
from .errors import WorkspaceLintsUndefinedError
from .manifest import (
    PackageLintsSettings,
    WorkspaceLintsSettings,
    defines_workspace_lints,
    find_workspace_manifest,
    has_workspace_table,
    lints_table,
    package_settings,
    read_manifest,
    workspace_settings,
)
from .metadata import CargoPackage, CommandRunner, MetadataCommand

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MemberPackage:
    """A workspace member as read from its manifest."""

    name: str
    version: str
    path: Path
    inherits_workspace_lints: bool
    lints: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    settings: PackageLintsSettings = field(default_factory=PackageLintsSettings)

    @property
    def label(self) -> str:
        """Return ``name version`` for display."""
        return f"{self.name} {self.version}"

    @property
    def local_lint_tables(self) -> tuple[str, ...]:
        """Return the lint tool tables declared directly by the package."""
        return tuple(sorted(key for key in self.lints if key != "workspace"))


@dataclass(frozen=True, slots=True)
class WorkspaceInfo:
    """Workspace root details plus its members in metadata order."""

    root: Path
    defines_lints: bool
    members: tuple[MemberPackage, ...] = ()
    has_workspace_table: bool = True
    settings: WorkspaceLintsSettings = field(default_factory=WorkspaceLintsSettings)


def member_from_package(package: CargoPackage) -> MemberPackage:
    """Build a :class:`MemberPackage` by reading ``package``'s manifest.

    Raises:
        MetadataLoadError: If the manifest cannot be read.
        ManifestParseError: If the manifest or its settings are malformed.
    """

    manifest = read_manifest(package.manifest_path)
    lints = lints_table(manifest)
    return MemberPackage(
        name=package.name,
        version=package.version,
        path=package.manifest_path,
        inherits_workspace_lints=lints.get("workspace") is True,
        lints=MappingProxyType(dict(lints)),
        settings=package_settings(manifest, package.manifest_path),
    )


def load_workspace(
    command: MetadataCommand | None = None,
    *,
    runner: CommandRunner | None = None,
) -> WorkspaceInfo:
    """Load the workspace described by ``command``.

    Args:
        command: Metadata query to run; defaults to the current directory.
        runner: Subprocess runner forwarded to :meth:`MetadataCommand.exec`.

    Returns:
        WorkspaceInfo: Read-only snapshot of the workspace.

    Raises:
        MetadataLoadError: If metadata or a manifest cannot be loaded.
        ManifestParseError: If a manifest cannot be parsed.
    """

    command = command or MetadataCommand()
    try:
        metadata = command.exec(runner)
    except WorkspaceLintsUndefinedError:
        fallback = _workspace_without_lints(command)
        if fallback is None:
            raise
        return fallback
    root = metadata.workspace_root
    root_manifest_path = root / MANIFEST_NAME
    root_manifest = read_manifest(root_manifest_path)
    members = tuple(member_from_package(package) for package in metadata.members())
    LOGGER.debug("loaded %d workspace members from %s", len(members), root)
    return WorkspaceInfo(
        root=root,
        defines_lints=defines_workspace_lints(root_manifest),
        members=members,
        has_workspace_table=has_workspace_table(root_manifest),
        settings=workspace_settings(root_manifest, root_manifest_path),
    )


def _workspace_without_lints(command: MetadataCommand) -> WorkspaceInfo | None:
    """Return a member-less snapshot when the root declares ``[workspace]`` without ``lints``.

    cargo refuses to load a workspace whose members inherit lints the root
    never defines, so the root manifest is inspected directly.
    """

    start = command.manifest_path or command.cwd or Path.cwd()
    root_manifest_path = find_workspace_manifest(start)
    if root_manifest_path is None:
        return None
    root_manifest = read_manifest(root_manifest_path)
    if defines_workspace_lints(root_manifest):
        return None
    LOGGER.debug("cargo rejected %s: workspace.lints is not defined", root_manifest_path)
    return WorkspaceInfo(
        root=root_manifest_path.parent,
        defines_lints=False,
        has_workspace_table=True,
        settings=workspace_settings(root_manifest, root_manifest_path),
    )


__all__ = ["MemberPackage", "WorkspaceInfo", "load_workspace", "member_from_package"]
