# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end checks against a real ``cargo`` installation."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cargo_workspace_lints.cli.app import app

pytestmark = pytest.mark.skipif(shutil.which("cargo") is None, reason="cargo is not installed")


def _write_workspace(root: Path, *, inherit_second: bool) -> None:
    (root / "Cargo.toml").write_text(
        '[workspace]\nmembers = ["first", "test-crate"]\nresolver = "2"\n\n'
        '[workspace.lints.rust]\nunsafe_code = "forbid"\n',
        encoding="utf-8",
    )
    for name, inherit in (("first", True), ("test-crate", inherit_second)):
        crate = root / name
        (crate / "src").mkdir(parents=True)
        (crate / "src" / "lib.rs").write_text("", encoding="utf-8")
        lints = "\n[lints]\nworkspace = true\n" if inherit else ""
        (crate / "Cargo.toml").write_text(
            f'[package]\nname = "{name}"\nversion = "0.1.0"\nedition = "2021"\n{lints}',
            encoding="utf-8",
        )


def test_passing_workspace(tmp_path: Path) -> None:
    _write_workspace(tmp_path, inherit_second=True)
    result = CliRunner().invoke(app, ["workspace-lints", str(tmp_path / "Cargo.toml")])
    assert result.exit_code == 0, result.output


def test_failing_workspace(tmp_path: Path) -> None:
    _write_workspace(tmp_path, inherit_second=False)
    result = CliRunner().invoke(app, ["workspace-lints", str(tmp_path / "Cargo.toml"), "--no-emoji"])
    assert result.exit_code == 1, result.output
    assert "test-crate" in result.output
    assert "Package first" not in result.output


def test_malformed_member_manifest(tmp_path: Path) -> None:
    _write_workspace(tmp_path, inherit_second=True)
    broken = tmp_path / "test-crate" / "Cargo.toml"
    broken.write_text("[package\nname = \n", encoding="utf-8")

    result = CliRunner().invoke(app, ["workspace-lints", str(tmp_path / "Cargo.toml"), "--no-emoji"])

    assert result.exit_code == 2, result.output
    assert "Error parsing manifest" in result.output
    assert "Failing packages" not in result.output


def test_root_without_workspace_lints(tmp_path: Path) -> None:
    _write_workspace(tmp_path, inherit_second=False)
    (tmp_path / "Cargo.toml").write_text(
        '[workspace]\nmembers = ["first", "test-crate"]\nresolver = "2"\n',
        encoding="utf-8",
    )

    result = CliRunner().invoke(app, ["workspace-lints", str(tmp_path / "Cargo.toml"), "--no-emoji"])

    assert result.exit_code == 1, result.output
    assert result.output.count("no `workspace.lints` table") == 1
    assert "test-crate" not in result.output
