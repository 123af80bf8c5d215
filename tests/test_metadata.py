# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ``cargo metadata`` query builder and document model."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cargo_workspace_lints.errors import ManifestParseError, MetadataLoadError, WorkspaceLintsUndefinedError
from cargo_workspace_lints.metadata import MetadataCommand, build_metadata_command, parse_metadata
from cargo_workspace_lints.process_utils import SubprocessExecutionError

from conftest import lints_undefined_stderr, unclosed_table_stderr


def test_command_line_defaults_to_cargo_on_path() -> None:
    command = MetadataCommand(env={})
    assert command.command_line() == ["cargo", "metadata", "--format-version", "1", "--no-deps"]


def test_command_line_prefers_cargo_env_then_explicit_path() -> None:
    assert MetadataCommand(env={"CARGO": "/opt/cargo"}).command_line()[0] == "/opt/cargo"
    explicit = MetadataCommand(env={"CARGO": "/opt/cargo"}, cargo_path=Path("/usr/bin/cargo"))
    assert explicit.command_line()[0] == "/usr/bin/cargo"


def test_command_line_forwards_manifest_and_platform() -> None:
    command = MetadataCommand(
        manifest_path=Path("ws/Cargo.toml"),
        filter_platform="x86_64-unknown-linux-gnu",
        env={},
    )
    args = command.command_line()
    assert args[args.index("--manifest-path") + 1] == str(Path("ws/Cargo.toml"))
    assert args[args.index("--filter-platform") + 1] == "x86_64-unknown-linux-gnu"


def test_build_metadata_command_distinguishes_directories_and_files(tmp_path: Path) -> None:
    manifest = tmp_path / "Cargo.toml"
    manifest.write_text("[workspace]\n", encoding="utf-8")

    from_dir = build_metadata_command(tmp_path)
    assert from_dir.cwd == tmp_path
    assert from_dir.manifest_path is None

    from_file = build_metadata_command(manifest)
    assert from_file.cwd is None
    assert from_file.manifest_path == manifest

    explicit = build_metadata_command(tmp_path, manifest_path=manifest)
    assert explicit.cwd is None
    assert explicit.manifest_path == manifest


def test_members_follow_workspace_member_order_and_drop_others() -> None:
    payload = {
        "packages": [
            {"id": "a", "name": "alpha", "version": "1.0.0", "manifest_path": "/ws/a/Cargo.toml"},
            {"id": "dep", "name": "dep", "version": "0.3.0", "manifest_path": "/reg/dep/Cargo.toml"},
            {"id": "b", "name": "beta", "version": "2.0.0", "manifest_path": "/ws/b/Cargo.toml"},
        ],
        "workspace_members": ["b", "a"],
        "workspace_root": "/ws",
    }
    metadata = parse_metadata(json.dumps(payload))
    assert [package.name for package in metadata.members()] == ["beta", "alpha"]
    assert metadata.workspace_root == Path("/ws")


def test_parse_metadata_rejects_garbage() -> None:
    with pytest.raises(MetadataLoadError):
        parse_metadata("not json")
    with pytest.raises(MetadataLoadError):
        parse_metadata(json.dumps({"packages": []}))


def test_exec_reports_missing_cargo() -> None:
    def runner(args, **_kwargs):
        raise FileNotFoundError("Executable 'cargo' was not found on PATH")

    with pytest.raises(MetadataLoadError, match="Unable to run cargo"):
        MetadataCommand(env={}).exec(runner)


def test_exec_maps_outside_workspace_failure() -> None:
    def runner(args, **_kwargs):
        raise SubprocessExecutionError(
            args,
            101,
            "",
            "error: could not find `Cargo.toml` in `/tmp` or any parent directory",
        )

    with pytest.raises(MetadataLoadError, match="could not find") as excinfo:
        MetadataCommand(env={}).exec(runner)
    assert not isinstance(excinfo.value, ManifestParseError)


def test_exec_maps_manifest_parse_failure() -> None:
    stderr = "error: failed to parse manifest at `/ws/broken/Cargo.toml`\n\nCaused by:\n  invalid TOML"

    def runner(args, **_kwargs):
        raise SubprocessExecutionError(args, 101, "", stderr)

    with pytest.raises(ManifestParseError) as excinfo:
        MetadataCommand(env={}).exec(runner)
    assert excinfo.value.path == Path("/ws/broken/Cargo.toml")


def test_exec_reports_non_executable_cargo() -> None:
    def runner(args, **_kwargs):
        raise PermissionError(13, "Permission denied", args[0])

    with pytest.raises(MetadataLoadError, match="Unable to run cargo") as excinfo:
        MetadataCommand(env={}, cargo_path=Path("/opt/not-executable")).exec(runner)
    assert not isinstance(excinfo.value, ManifestParseError)


def test_exec_maps_span_syntax_error_to_member_manifest(tmp_path: Path) -> None:
    (tmp_path / "Cargo.toml").write_text('[workspace]\nmembers = ["crates/*"]\n', encoding="utf-8")
    broken = tmp_path / "crates" / "broken" / "Cargo.toml"
    broken.parent.mkdir(parents=True)
    broken.write_text("[package\n", encoding="utf-8")
    stderr = unclosed_table_stderr(tmp_path, "crates/broken")

    def runner(args, **_kwargs):
        raise SubprocessExecutionError(args, 101, "", stderr)

    with pytest.raises(ManifestParseError) as excinfo:
        MetadataCommand(cwd=tmp_path, env={}).exec(runner)
    assert excinfo.value.path == broken


def test_exec_flags_undefined_workspace_lints(tmp_path: Path) -> None:
    stderr = lints_undefined_stderr(tmp_path, "first")

    def runner(args, **_kwargs):
        raise SubprocessExecutionError(args, 101, "", stderr)

    with pytest.raises(WorkspaceLintsUndefinedError, match="was not defined"):
        MetadataCommand(cwd=tmp_path, env={}).exec(runner)
