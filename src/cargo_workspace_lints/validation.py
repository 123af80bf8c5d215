# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Check workspace members for ``lints.workspace = true``."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, Final

from .constants import MANIFEST_NAME
from .workspace import MemberPackage, WorkspaceInfo

_BARE_KEY_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_-]+")


class PackageStatus(str, Enum):
    """Outcome of checking a single package."""

    PASS = "PASS"
    FAIL = "FAIL"
    SKIPPED = "SKIP"
    OVERRIDE = "OVERRIDE"


class InheritanceProblem(str, Enum):
    """Why a package failed the inheritance check."""

    MISSING = "missing"
    WRONG_VALUE = "wrong_value"


@dataclass(frozen=True, slots=True)
class NoWorkspaceLints:
    """The workspace root manifest has no ``[workspace.lints]`` table."""

    root: Path

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_NAME

    @property
    def message(self) -> str:
        return f"Workspace {self.root}: no `workspace.lints` table defined in {self.manifest_path}"


@dataclass(frozen=True, slots=True)
class PackageMissingInheritance:
    """A package does not set ``lints.workspace = true``."""

    kind: InheritanceProblem
    found: Any = None
    local_tables: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        if self.kind is InheritanceProblem.MISSING:
            return "No `workspace.lints` field found"
        return f"workspace.lints = {format_toml_value(self.found)}, expected `true`"


@dataclass(frozen=True, slots=True)
class PackageResult:
    """Status of one member package, with the finding when it failed."""

    package: MemberPackage
    status: PackageStatus
    finding: PackageMissingInheritance | None = None


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Collected results for a whole workspace."""

    workspace: WorkspaceInfo
    results: tuple[PackageResult, ...] = ()
    workspace_error: NoWorkspaceLints | None = None

    @property
    def failures(self) -> tuple[PackageResult, ...]:
        return tuple(result for result in self.results if result.status is PackageStatus.FAIL)

    @property
    def ok(self) -> bool:
        return self.workspace_error is None and not self.failures


def format_toml_value(value: Any) -> str:
    """Render ``value`` the way it would be written in TOML."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, Mapping):
        inner = ", ".join(f"{_format_toml_key(key)} = {format_toml_value(item)}" for key, item in value.items())
        return f"{{ {inner} }}" if inner else "{}"
    if isinstance(value, list | tuple):
        return "[" + ", ".join(format_toml_value(item) for item in value) + "]"
    return str(value)


def _format_toml_key(key: str) -> str:
    return key if _BARE_KEY_RE.fullmatch(key) else json.dumps(key)


def validate_package(
    package: MemberPackage,
    *,
    excluded: bool = False,
) -> PackageResult:
    """Check a single package.

    Args:
        package: Member package to inspect.
        excluded: ``True`` when workspace configuration excludes the package.

    Returns:
        PackageResult: Outcome for ``package``.
    """

    if excluded or package.settings.skip:
        return PackageResult(package, PackageStatus.SKIPPED)
    if package.inherits_workspace_lints:
        return PackageResult(package, PackageStatus.PASS)
    local_tables = package.local_lint_tables
    if local_tables and package.settings.allow_local_lints:
        return PackageResult(package, PackageStatus.OVERRIDE)
    if "workspace" in package.lints:
        finding = PackageMissingInheritance(
            InheritanceProblem.WRONG_VALUE,
            found=package.lints["workspace"],
            local_tables=local_tables,
        )
    else:
        finding = PackageMissingInheritance(InheritanceProblem.MISSING, local_tables=local_tables)
    return PackageResult(package, PackageStatus.FAIL, finding)


def validate_workspace(
    workspace: WorkspaceInfo,
    *,
    exclude: Iterable[str] = (),
) -> ValidationReport:
    """Check every member of ``workspace``.

    A workspace whose root declares ``[workspace]`` without ``lints`` fails as
    a whole and its members are not checked. Otherwise every member is
    checked and all results are kept, in member order.

    Args:
        workspace: Loaded workspace snapshot.
        exclude: Extra package-name glob patterns to skip, on top of the
            patterns configured in the root manifest.

    Returns:
        ValidationReport: Results for the workspace.
    """

    if workspace.has_workspace_table and not workspace.defines_lints:
        return ValidationReport(workspace, workspace_error=NoWorkspaceLints(workspace.root))

    settings = workspace.settings
    extra = tuple(exclude)
    if extra:
        settings = settings.model_copy(update={"exclude": settings.exclude + extra})
    results = tuple(
        validate_package(package, excluded=settings.excludes(package.name))
        for package in workspace.members
    )
    return ValidationReport(workspace, results)


__all__ = [
    "InheritanceProblem",
    "NoWorkspaceLints",
    "PackageMissingInheritance",
    "PackageResult",
    "PackageStatus",
    "ValidationReport",
    "format_toml_value",
    "validate_package",
    "validate_workspace",
]
