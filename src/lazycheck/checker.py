# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the TypeScript compiler over sources loaded through a compiler host.

``tsc`` only reads from disk, so a :class:`Program` loads each entry through
its host, writes the loaded text into a private staging directory mirroring
the project layout and points ``tsc`` at a generated ``tsconfig.json``.
"""

from __future__ import annotations

import json
import re
import shutil
import subprocess
import tempfile
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .errors import CheckerError
from .host import CompilerHost, SourceFile
from .logging import warn
from .models import Diagnostic, DiagnosticCategory, Severity
from .subprocess_utils import resolve_executable, run_command

CommandRunner = Callable[..., subprocess.CompletedProcess[str]]

TSCONFIG_NAME: Final[str] = "tsconfig.json"
MIRRORED_SUFFIXES: Final[frozenset[str]] = frozenset(
    {".js", ".mjs", ".cjs", ".jsx", ".ts", ".mts", ".cts", ".tsx", ".json"},
)
_SKIPPED_DIRS: Final[frozenset[str]] = frozenset({"node_modules"})
_SYNTACTIC_CODES: Final[range] = range(1000, 2000)
_TSC_PATTERN = re.compile(
    r"^(?P<file>[^(\n]+)\((?P<line>\d+),(?P<col>\d+)\):\s*"
    r"(?P<severity>error|warning|message)\s+TS(?P<code>\d+)\s*:\s*(?P<message>.*)$",
)
_TSC_GLOBAL_PATTERN = re.compile(
    r"^(?P<severity>error|warning|message)\s+TS(?P<code>\d+)\s*:\s*(?P<message>.*)$",
)


class CompilerOptions(BaseModel):
    """Compiler options written to the generated ``tsconfig.json``.

    Extra fields are passed through untouched, so any ``tsc`` option can be
    configured by its camelCase name.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    allow_js: bool = True
    check_js: bool = True
    no_emit: bool = True
    target: str | None = None

    def to_tsconfig(self) -> dict[str, Any]:
        """Return the options as a ``compilerOptions`` mapping."""

        return self.model_dump(by_alias=True, exclude_none=True)


def category_for(code: int) -> DiagnosticCategory:
    """Return the stream a TypeScript diagnostic code belongs to."""

    return DiagnosticCategory.SYNTACTIC if code in _SYNTACTIC_CODES else DiagnosticCategory.SEMANTIC


def parse_tsc_output(lines: Iterable[str], *, staging_root: Path | None = None) -> list[Diagnostic]:
    """Parse ``tsc --pretty false`` output into diagnostics.

    Args:
        lines: Output lines from the compiler.
        staging_root: Directory ``tsc`` ran in; absolute paths below it are
            rewritten relative to it.

    Returns:
        list[Diagnostic]: Diagnostics in the order the compiler printed them.
    """

    results: list[Diagnostic] = []
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue
        if line[:1].isspace():
            if results:
                results[-1].message = f"{results[-1].message}\n{line.rstrip()}"
            continue
        if match := _TSC_PATTERN.match(line):
            code = int(match.group("code"))
            results.append(
                Diagnostic(
                    file=_restore_path(match.group("file").strip(), staging_root),
                    line=int(match.group("line")),
                    column=int(match.group("col")),
                    severity=Severity(match.group("severity")),
                    code=code,
                    message=match.group("message").strip(),
                    category=category_for(code),
                ),
            )
        elif match := _TSC_GLOBAL_PATTERN.match(line):
            code = int(match.group("code"))
            results.append(
                Diagnostic(
                    severity=Severity(match.group("severity")),
                    code=code,
                    message=match.group("message").strip(),
                    category=category_for(code),
                ),
            )
    return results


def _restore_path(file_name: str, staging_root: Path | None) -> str:
    if staging_root is None:
        return file_name
    path = Path(file_name)
    if not path.is_absolute():
        return path.as_posix()
    try:
        return path.relative_to(staging_root).as_posix()
    except ValueError:
        return file_name


def _ignore_unmirrored(directory: str, names: list[str]) -> set[str]:
    """Return the entries of ``directory`` that are not copied into the staging tree."""

    ignored: set[str] = set()
    for name in names:
        path = Path(directory) / name
        if name.startswith(".") or name in _SKIPPED_DIRS:
            ignored.add(name)
        elif path.is_dir():
            continue
        elif path.suffix not in MIRRORED_SUFFIXES or name == TSCONFIG_NAME:
            ignored.add(name)
    return ignored


class Program:
    """A fixed set of entry files checked together by ``tsc``."""

    def __init__(
        self,
        root_names: Sequence[str],
        options: CompilerOptions,
        host: CompilerHost,
        *,
        root: Path | None = None,
        tsc: str = "tsc",
        runner: CommandRunner = run_command,
    ) -> None:
        """Initialise the program.

        Args:
            root_names: Entry files, relative to ``root`` or absolute.
            options: Compiler options for the run.
            host: Host every entry is loaded through.
            root: Project root mirrored into the staging directory.
            tsc: Name or path of the TypeScript compiler executable.
            runner: Callable used to execute the compiler.
        """

        self.root_names = list(root_names)
        self.options = options
        self.host = host
        self.root = (root or Path.cwd()).resolve()
        self.tsc = tsc
        self.runner = runner
        self._diagnostics: list[Diagnostic] | None = None

    def get_source_files(self) -> list[tuple[Path, SourceFile]]:
        """Load every entry through the host.

        Returns:
            list[tuple[Path, SourceFile]]: Project-relative path and loaded source per entry.

        Raises:
            CheckerError: If an entry is missing or lies outside the project root.
        """

        loaded: list[tuple[Path, SourceFile]] = []
        for name in self.root_names:
            source = self.host.get_source_file(name, self.options.target)
            if source is None:
                raise CheckerError(f"File '{name}' not found.")
            loaded.append((self._relative(name), source))
        return loaded

    def get_syntactic_diagnostics(self) -> list[Diagnostic]:
        """Return parser-level diagnostics (``TS1xxx``)."""

        return [diag for diag in self._run() if diag.category is DiagnosticCategory.SYNTACTIC]

    def get_semantic_diagnostics(self) -> list[Diagnostic]:
        """Return binder and checker diagnostics."""

        return [diag for diag in self._run() if diag.category is DiagnosticCategory.SEMANTIC]

    def _relative(self, name: str) -> Path:
        path = Path(name)
        if not path.is_absolute():
            path = self.root / path
        try:
            return path.resolve().relative_to(self.root)
        except ValueError as exc:
            raise CheckerError(f"File '{name}' is outside the project root {self.root}.") from exc

    def _resolve_tsc(self) -> str:
        resolved = resolve_executable(self.tsc, search_dirs=(self.root / "node_modules" / ".bin",))
        if resolved is None:
            raise CheckerError(f"TypeScript compiler '{self.tsc}' was not found; install typescript or configure 'tsc'.")
        return resolved

    def _run(self) -> list[Diagnostic]:
        if self._diagnostics is not None:
            return self._diagnostics
        sources = self.get_source_files()
        tsc = self._resolve_tsc()
        with tempfile.TemporaryDirectory(prefix="lazycheck-") as staging_dir:
            staging = Path(staging_dir)
            self._stage(staging, sources)
            completed = self.runner(
                [tsc, "-p", str(staging / TSCONFIG_NAME), "--pretty", "false"],
                cwd=staging,
                check=False,
                capture_output=True,
            )
        output = f"{completed.stdout or ''}\n{completed.stderr or ''}"
        diagnostics = parse_tsc_output(output.splitlines(), staging_root=staging)
        if completed.returncode != 0 and not diagnostics:
            raise CheckerError(f"tsc exited with status {completed.returncode}: {output.strip()}")
        self._diagnostics = diagnostics
        return diagnostics

    def _stage(self, staging: Path, sources: Sequence[tuple[Path, SourceFile]]) -> None:
        """Mirror the project sources into ``staging`` and overlay the host-loaded entries.

        Files the entries import are resolved by ``tsc`` from the mirror, so
        only the entries carry host-provided text.
        """

        shutil.copytree(self.root, staging, ignore=_ignore_unmirrored, dirs_exist_ok=True)
        for relative, source in sources:
            destination = staging / relative
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(source.text.encode("utf-8"))
        node_modules = self.root / "node_modules"
        if node_modules.is_dir():
            try:
                (staging / "node_modules").symlink_to(node_modules, target_is_directory=True)
            except OSError as exc:
                warn(f"Could not link {node_modules} into the staging directory: {exc}", use_emoji=False)
        config = {
            "compilerOptions": self.options.to_tsconfig(),
            "files": [relative.as_posix() for relative, _ in sources],
        }
        (staging / TSCONFIG_NAME).write_text(json.dumps(config, indent=2), encoding="utf-8")


__all__ = [
    "CommandRunner",
    "CompilerOptions",
    "Program",
    "category_for",
    "parse_tsc_output",
]
