# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

import cargo_workspace_lints.metadata as metadata_module

WORKSPACE_WITH_LINTS = """\
[workspace]
members = ["crates/*"]
resolver = "2"

[workspace.lints.rust]
unsafe_code = "forbid"
"""


@dataclass
class FakeWorkspace:
    """Cargo workspace written to disk plus a stand-in for ``cargo metadata``."""

    root: Path
    members: list[tuple[str, str, Path]] = field(default_factory=list)
    calls: list[list[str]] = field(default_factory=list)

    def write_root(self, text: str) -> Path:
        path = self.root / "Cargo.toml"
        path.write_text(text, encoding="utf-8")
        return path

    def add_member(self, name: str, body: str = "", *, version: str = "0.1.0") -> Path:
        crate_dir = self.root / "crates" / name
        crate_dir.mkdir(parents=True, exist_ok=True)
        manifest = crate_dir / "Cargo.toml"
        header = f'[package]\nname = "{name}"\nversion = "{version}"\nedition = "2021"\n\n'
        manifest.write_text(header + body, encoding="utf-8")
        self.members.append((name, version, manifest))
        return manifest

    def metadata_payload(self) -> dict[str, Any]:
        packages = [
            {
                "id": f"path+file://{manifest.parent}#{name}@{version}",
                "name": name,
                "version": version,
                "manifest_path": str(manifest),
                "dependencies": [],
            }
            for name, version, manifest in self.members
        ]
        return {
            "packages": packages,
            "workspace_members": [package["id"] for package in packages],
            "workspace_default_members": [package["id"] for package in packages],
            "resolve": None,
            "target_directory": str(self.root / "target"),
            "version": 1,
            "workspace_root": str(self.root),
            "metadata": None,
        }

    def runner(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        capture_output: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(args))
        return subprocess.CompletedProcess(
            args=list(args),
            returncode=0,
            stdout=json.dumps(self.metadata_payload()),
            stderr="",
        )


@pytest.fixture
def fake_workspace(tmp_path: Path) -> FakeWorkspace:
    """Return an empty workspace rooted in ``tmp_path``."""
    workspace = FakeWorkspace(root=tmp_path)
    workspace.write_root(WORKSPACE_WITH_LINTS)
    return workspace


@pytest.fixture
def patched_cargo(monkeypatch: pytest.MonkeyPatch, fake_workspace: FakeWorkspace) -> FakeWorkspace:
    """Route ``cargo metadata`` calls to ``fake_workspace``."""
    monkeypatch.setattr(metadata_module, "run_command", fake_workspace.runner)
    return fake_workspace


def lints_undefined_stderr(root: Path, member: str) -> str:
    """Return what cargo prints when a member inherits lints the root never defines."""
    return (
        f"error: failed to load manifest for workspace member `{root / member}`\n"
        f"referenced by workspace at `{root / 'Cargo.toml'}`\n\n"
        "Caused by:\n"
        f"  failed to parse manifest at `{root / member / 'Cargo.toml'}`\n\n"
        "Caused by:\n"
        "  error inheriting `lints` from workspace root manifest's `workspace.lints`\n\n"
        "Caused by:\n"
        "  `workspace.lints` was not defined\n"
    )


def unclosed_table_stderr(root: Path, member: str) -> str:
    """Return a TOML syntax error in the style of cargo 1.90, with a relative span."""
    return (
        "error: unclosed table, expected `]`\n"
        f" --> {member}/Cargo.toml:1:9\n"
        "  |\n"
        "1 | [package\n"
        "  |         ^\n"
        "  |\n"
        f"error: failed to load manifest for workspace member `{root / member}`\n"
        f"referenced by workspace at `{root / 'Cargo.toml'}`\n"
    )


@pytest.fixture(autouse=True)
def reset_verbose_logging() -> Iterator[None]:
    """Detach the ``--verbose`` debug handler so it never outlives a test."""
    yield
    package_logger = logging.getLogger("cargo_workspace_lints")
    handler = getattr(package_logger, "_workspace_lints_handler", None)
    if handler is not None:
        package_logger.removeHandler(handler)
        delattr(package_logger, "_workspace_lints_handler")
        package_logger.propagate = True
        package_logger.setLevel(logging.NOTSET)
