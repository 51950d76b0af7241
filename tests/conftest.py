# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

LAZY_MODULE = textwrap.dedent(
    """\
    import { helper } from "./module.js";

    const lazy = {};
    ChromeUtils.defineESModuleGetters(lazy, {
      Foo: "resource://mod/Foo.sys.mjs",
      Bar: "resource://mod/Bar.sys.mjs",
    });

    export function run() {
      return lazy.Foo.start(helper());
    }
    """,
)


@pytest.fixture
def lazy_module_source() -> str:
    """Return a module registering two lazy getters on ``lazy``."""

    return LAZY_MODULE


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create a small project with the default entry layout."""

    src = tmp_path / "src"
    src.mkdir()
    (src / "index.js").write_text(LAZY_MODULE, encoding="utf-8")
    (src / "module.js").write_text("export function helper() {\n  return 1;\n}\n", encoding="utf-8")
    (src / "index.d.ts").write_text(
        'declare module "resource://mod/Foo.sys.mjs" {\n  export function start(n: number): void;\n}\n',
        encoding="utf-8",
    )
    return tmp_path
