# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Query ``cargo metadata`` and model the JSON document it produces."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, ValidationError

from .constants import CARGO_ENV_VAR, DEFAULT_CARGO, MANIFEST_NAME, METADATA_FORMAT_VERSION
from .errors import ManifestParseError, MetadataLoadError, WorkspaceLintsUndefinedError
from .manifest import read_manifest
from .process_utils import SubprocessExecutionError, run_command

if TYPE_CHECKING:
    from subprocess import CompletedProcess  # nosec B404

LOGGER = logging.getLogger(__name__)

_MANIFEST_PARSE_MARKER: Final[str] = "failed to parse manifest"
_LINTS_UNDEFINED_MARKER: Final[str] = "`workspace.lints` was not defined"
# ` --> a/Cargo.toml:1:9` source spans and backticked paths in cargo diagnostics.
_SPAN_RE: Final[re.Pattern[str]] = re.compile(r"-->\s+(\S+?):\d+:\d+")
_QUOTED_RE: Final[re.Pattern[str]] = re.compile(r"`([^`\n]+)`")

CommandRunner = Callable[..., "CompletedProcess[str]"]


class CargoPackage(BaseModel):
    """Subset of a ``packages[]`` entry emitted by ``cargo metadata``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str
    version: str
    manifest_path: Path


class CargoMetadata(BaseModel):
    """Subset of the ``cargo metadata --format-version 1`` document."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    packages: tuple[CargoPackage, ...] = ()
    workspace_members: tuple[str, ...] = ()
    workspace_root: Path

    def members(self) -> list[CargoPackage]:
        """Return workspace member packages in ``workspace_members`` order.

        Returns:
            list[CargoPackage]: Packages belonging to the workspace. Packages
            listed in ``packages`` but not in ``workspace_members`` are dropped.
        """

        by_id = {package.id: package for package in self.packages}
        return [by_id[member_id] for member_id in self.workspace_members if member_id in by_id]


@dataclass(slots=True)
class MetadataCommand:
    """Builder for a ``cargo metadata`` invocation."""

    manifest_path: Path | None = None
    cwd: Path | None = None
    cargo_path: Path | None = None
    filter_platform: str | None = None
    no_deps: bool = True
    other_options: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=lambda: os.environ)

    def cargo_executable(self) -> str:
        """Return the cargo executable to run.

        Returns:
            str: ``cargo_path`` when given, else ``$CARGO``, else ``cargo``.
        """

        if self.cargo_path is not None:
            return str(self.cargo_path)
        return self.env.get(CARGO_ENV_VAR) or DEFAULT_CARGO

    def command_line(self) -> list[str]:
        """Return the full argument list for the metadata query."""

        args = [self.cargo_executable(), "metadata", "--format-version", METADATA_FORMAT_VERSION]
        if self.no_deps:
            args.append("--no-deps")
        if self.manifest_path is not None:
            args.extend(["--manifest-path", str(self.manifest_path)])
        if self.filter_platform:
            args.extend(["--filter-platform", self.filter_platform])
        args.extend(self.other_options)
        return args

    def exec(self, runner: CommandRunner | None = None) -> CargoMetadata:
        """Run the metadata query and parse its output.

        Args:
            runner: Callable compatible with :func:`run_command`; defaults to it.

        Returns:
            CargoMetadata: Parsed metadata document.

        Raises:
            ManifestParseError: If cargo reports a manifest it cannot parse.
            MetadataLoadError: If cargo cannot be run or its output is unusable.
        """

        run = runner or run_command
        args = self.command_line()
        LOGGER.debug("running %s (cwd=%s)", " ".join(args), self.cwd or ".")
        try:
            completed = run(args, cwd=self.cwd, check=True, capture_output=True)
        except SubprocessExecutionError as exc:
            raise _translate_failure(exc.stderr or "", base=self.cwd or Path.cwd()) from exc
        except OSError as exc:
            raise MetadataLoadError(f"Unable to run cargo:\n    {exc}") from exc
        return parse_metadata(completed.stdout)


def parse_metadata(payload: str) -> CargoMetadata:
    """Return the metadata model decoded from ``payload``.

    Args:
        payload: JSON text printed by ``cargo metadata``.

    Returns:
        CargoMetadata: Validated metadata document.

    Raises:
        MetadataLoadError: If ``payload`` is not a valid metadata document.
    """

    try:
        return CargoMetadata.model_validate_json(payload)
    except ValidationError as exc:
        raise MetadataLoadError(f"Error reading Cargo manifest data:\n    {exc}") from exc


def _translate_failure(stderr: str, *, base: Path) -> MetadataLoadError:
    """Map cargo's stderr onto the matching load error.

    Manifests named in the diagnostics are re-read with ``tomllib`` so a
    syntax error is reported against the file that actually holds it.

    Args:
        stderr: Diagnostics printed by cargo.
        base: Directory cargo ran in; relative paths resolve against it.

    Returns:
        MetadataLoadError: Error to raise in place of the subprocess failure.
    """

    detail = stderr.strip() or "<no output>"
    if _LINTS_UNDEFINED_MARKER in detail:
        return WorkspaceLintsUndefinedError(f"Error reading Cargo manifest data:\n    {detail}")
    manifests = _manifests_from_stderr(detail, base)
    for manifest in manifests:
        try:
            read_manifest(manifest)
        except ManifestParseError as exc:
            return exc
        except MetadataLoadError:
            continue
    if _MANIFEST_PARSE_MARKER in detail:
        named = [Path(raw) for raw in _QUOTED_RE.findall(detail) if raw.endswith(MANIFEST_NAME)]
        return ManifestParseError((manifests or named or [None])[0], detail)
    return MetadataLoadError(f"Error reading Cargo manifest data:\n    {detail}")


def _manifests_from_stderr(stderr: str, base: Path) -> list[Path]:
    """Return existing manifests referenced by cargo diagnostics, in order."""

    raw_paths = [match.group(1) for match in _SPAN_RE.finditer(stderr)]
    raw_paths.extend(match.group(1) for match in _QUOTED_RE.finditer(stderr))
    manifests: list[Path] = []
    for raw in raw_paths:
        candidate = Path(raw)
        if not candidate.is_absolute():
            candidate = base / candidate
        if candidate.is_dir():
            candidate = candidate / MANIFEST_NAME
        if candidate.name == MANIFEST_NAME and candidate.is_file() and candidate not in manifests:
            manifests.append(candidate)
    return manifests


def build_metadata_command(
    path: Path | None,
    *,
    manifest_path: Path | None = None,
    cargo_path: Path | None = None,
    filter_platform: str | None = None,
    extra_options: Sequence[str] = (),
) -> MetadataCommand:
    """Return a :class:`MetadataCommand` for a directory or manifest target.

    Args:
        path: Directory to run in, or a manifest file. ``None`` means the
            current working directory.
        manifest_path: Explicit manifest path; takes precedence over ``path``.
        cargo_path: Explicit cargo executable.
        filter_platform: Optional target triple forwarded to cargo.
        extra_options: Additional raw arguments forwarded to cargo.

    Returns:
        MetadataCommand: Configured command builder.
    """

    cwd: Path | None = None
    if manifest_path is None and path is not None:
        if path.is_dir():
            cwd = path
        else:
            manifest_path = path
    return MetadataCommand(
        manifest_path=manifest_path,
        cwd=cwd,
        cargo_path=cargo_path,
        filter_platform=filter_platform,
        other_options=tuple(extra_options),
    )


__all__ = [
    "CargoMetadata",
    "CargoPackage",
    "CommandRunner",
    "MetadataCommand",
    "build_metadata_command",
    "parse_metadata",
]
