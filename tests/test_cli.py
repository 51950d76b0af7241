# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the lazycheck command line interface."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lazycheck.cli import services
from lazycheck.cli.app import app

runner = CliRunner()


def _fake_tsc(tmp_path: Path) -> str:
    path = tmp_path / "tools" / "tsc"
    path.parent.mkdir(exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    return str(path)


def _runner_returning(stdout: str, returncode: int):
    def _run(args: Sequence[str], **_kwargs: object) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(list(args), returncode, stdout=stdout, stderr="")

    return _run


def test_patch_prints_patched_target(project_root: Path, lazy_module_source: str) -> None:
    result = runner.invoke(app, ["patch", "--root", str(project_root), "--no-emoji", "--no-color"])
    assert result.exit_code == 0
    assert result.stdout.startswith('import { helper } from "./module.js";\n\n/**\n')
    assert result.stdout.endswith(lazy_module_source[lazy_module_source.index("const lazy") :])


def test_patch_show_plan(project_root: Path, lazy_module_source: str) -> None:
    result = runner.invoke(
        app,
        ["patch", "src/index.js", "--root", str(project_root), "--show-plan", "--no-emoji", "--no-color"],
    )
    assert result.exit_code == 0
    offset = lazy_module_source.index("const lazy")
    assert "src/index.js: 1 insertion(s)" in result.stdout
    assert f"lazy @ {offset} (line 3)" in result.stdout


def test_patch_reports_unsupported_syntax(tmp_path: Path) -> None:
    (tmp_path / "bad.js").write_text("const { a } = lib;\n", encoding="utf-8")
    result = runner.invoke(app, ["patch", "bad.js", "--root", str(tmp_path), "--no-emoji", "--no-color"])
    assert result.exit_code == 2
    assert "Attempt to serialize unknown node object_pattern" in result.output


def test_patch_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["patch", "nope.js", "--root", str(tmp_path), "--no-emoji", "--no-color"])
    assert result.exit_code == 2
    assert "not found" in result.output


def test_check_reports_diagnostics(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    stdout = "src/index.js(10,19): error TS2339: Property 'start' does not exist.\n"
    monkeypatch.setattr(services, "run_command", _runner_returning(stdout, 2))
    result = runner.invoke(
        app,
        ["check", "--root", str(project_root), "--tsc", _fake_tsc(project_root), "--no-emoji", "--no-color"],
    )
    assert result.exit_code == 1
    assert "patchFile" in result.output
    assert "src/index.js(10,19): ts(2339): Property 'start' does not exist." in result.output
    assert "1 diagnostic(s) reported by tsc." in result.output


def test_check_clean_run(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(services, "run_command", _runner_returning("", 0))
    result = runner.invoke(
        app,
        ["check", "--root", str(project_root), "--tsc", _fake_tsc(project_root), "--no-emoji", "--no-color"],
    )
    assert result.exit_code == 0
    assert "No diagnostics reported." in result.output


def test_check_warns_about_unresolved_targets(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (project_root / "src" / "index.js").write_text(
        'ChromeUtils.defineESModuleGetters(lazy, { A: "a" });\n',
        encoding="utf-8",
    )
    monkeypatch.setattr(services, "run_command", _runner_returning("", 0))
    result = runner.invoke(
        app,
        [
            "check",
            "--root",
            str(project_root),
            "--entry",
            "src/index.js",
            "--tsc",
            _fake_tsc(project_root),
            "--no-emoji",
            "--no-color",
        ],
    )
    assert result.exit_code == 0
    assert "Unknown lazy object lazy" in result.output


def test_check_invalid_config(project_root: Path) -> None:
    (project_root / ".lazycheck.toml").write_text("bogus = 1\n", encoding="utf-8")
    result = runner.invoke(app, ["check", "--root", str(project_root), "--no-emoji", "--no-color"])
    assert result.exit_code == 2
    assert "Configuration invalid" in result.output
