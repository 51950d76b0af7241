# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the compiler host adapter."""

from __future__ import annotations

from pathlib import Path

from lazycheck.host import CompilerHost, FileSystemHost, PatchingHost, SourceFile
from lazycheck.models import PatchResult
from lazycheck.patcher import ModulePatcher


class RecordingHost(FileSystemHost):
    """File system host remembering every delegated request."""

    def __init__(self, root: Path) -> None:
        super().__init__(root)
        self.calls: list[tuple[str, object, tuple[object, ...], dict[str, object]]] = []

    def get_source_file(
        self,
        file_name: str,
        language_version: object = None,
        *args: object,
        **kwargs: object,
    ) -> SourceFile | None:
        self.calls.append((file_name, language_version, args, kwargs))
        return super().get_source_file(file_name, language_version, *args, **kwargs)


def _host(root: Path, **kwargs: object) -> tuple[RecordingHost, PatchingHost, list[str], list[str]]:
    base = RecordingHost(root)
    infos: list[str] = []
    warnings: list[str] = []
    host = PatchingHost(
        base,
        "src/index.js",
        root=root,
        register_info=infos.append,
        register_warning=warnings.append,
        **kwargs,
    )
    return base, host, infos, warnings


def test_hosts_satisfy_protocol(project_root: Path) -> None:
    base, host, _, _ = _host(project_root)
    assert isinstance(base, CompilerHost)
    assert isinstance(host, CompilerHost)


def test_non_target_files_are_delegated_unchanged(project_root: Path) -> None:
    base, host, infos, _ = _host(project_root)
    source = host.get_source_file("src/module.js", "ES2022", "extra", on_error=None)
    assert source is not None
    assert source.text == (project_root / "src" / "module.js").read_text(encoding="utf-8")
    assert source.set_parent_nodes is False
    assert base.calls == [("src/module.js", "ES2022", ("extra",), {"on_error": None})]
    assert infos == []


def test_target_is_patched(project_root: Path, lazy_module_source: str) -> None:
    patches: list[PatchResult] = []
    base, host, infos, warnings = _host(project_root, register_patch=patches.append)
    source = host.get_source_file("src/index.js", "ES2022")
    assert source is not None
    assert source.file_name == "src/index.js"
    assert source.language_version == "ES2022"
    assert source.set_parent_nodes is True
    assert source.text != lazy_module_source
    assert source.text.endswith(lazy_module_source[lazy_module_source.index("const lazy") :])
    assert "@typedef {Object} LazyImports" in source.text
    assert base.calls == []
    target = project_root / "src" / "index.js"
    assert infos == [f"patchFile {target.resolve()}"]
    assert warnings == []
    assert [patch.file_name for patch in patches] == [str(target.resolve())]
    assert patches[0].text == source.text
    assert not hasattr(host, "last_patch")


def test_target_matches_by_absolute_path(project_root: Path) -> None:
    _, host, _, _ = _host(project_root)
    absolute = str(project_root / "src" / "index.js")
    dotted = str(project_root / "src" / ".." / "src" / "index.js")
    assert host.is_target(absolute)
    assert host.is_target(dotted)
    assert not host.is_target("src/module.js")
    source = host.get_source_file(absolute)
    assert source is not None
    assert source.set_parent_nodes is True


def test_missing_files_load_as_none(tmp_path: Path) -> None:
    _, host, _, _ = _host(tmp_path)
    assert host.get_source_file("src/index.js") is None
    assert host.get_source_file("src/other.js") is None


def test_patcher_configuration_is_used(project_root: Path) -> None:
    (project_root / "src" / "index.js").write_text(
        'const lazy = {};\nXPCOMUtils.defineLazyModuleGetters(lazy, { A: "resource://a.jsm" });\n',
        encoding="utf-8",
    )
    _, host, _, _ = _host(
        project_root,
        patcher=ModulePatcher(define_getters="XPCOMUtils.defineLazyModuleGetters", typedef_name="Modules"),
    )
    source = host.get_source_file("src/index.js")
    assert source is not None
    assert source.text.startswith("/**\n * @typedef {Object} Modules\n")


def test_invalid_utf8_target_loads_with_replacement_characters(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.js").write_bytes(
        b'const s = "\xff";\nconst lazy = {};\nChromeUtils.defineESModuleGetters(lazy, { A: "a" });\n',
    )
    _, host, _, warnings = _host(tmp_path)
    source = host.get_source_file("src/index.js")
    assert source is not None
    assert source.text.startswith('const s = "\ufffd";\n/**\n')
    assert '@property {import("a")} A' in source.text
    assert warnings == []
