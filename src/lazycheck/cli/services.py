# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Services backing the lazycheck CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..checker import Program
from ..config import LazycheckConfig, load_config
from ..errors import LazycheckError
from ..host import FileSystemHost, PatchingHost
from ..models import Diagnostic, PatchResult
from ..patcher import ModulePatcher
from ..reporting import log_diagnostics
from ..subprocess_utils import run_command
from .options import CLIOptions
from .shared import CLIError, CLILogger


@dataclass(slots=True)
class CheckOutcome:
    """Diagnostics collected by one ``check`` run."""

    syntactic: list[Diagnostic] = field(default_factory=list)
    semantic: list[Diagnostic] = field(default_factory=list)
    patch: PatchResult | None = None

    @property
    def total(self) -> int:
        """Return the number of diagnostics across both streams."""

        return len(self.syntactic) + len(self.semantic)


def load_cli_config(options: CLIOptions, *, logger: CLILogger) -> LazycheckConfig:
    """Return the configuration for ``options`` or raise :class:`CLIError`."""

    try:
        config = load_config(options.root, overrides=options.config_overrides())
    except LazycheckError as exc:
        logger.fail(f"Configuration invalid: {exc}")
        raise CLIError(str(exc)) from exc
    logger.debug(f"root={options.root} target={config.target} entries={','.join(config.entries)}")
    return config


def build_patcher(config: LazycheckConfig, options: CLIOptions) -> ModulePatcher:
    """Return the patch pipeline configured for ``config``."""

    return ModulePatcher(
        define_getters=config.define_getters,
        typedef_name=config.typedef_name,
        use_emoji=options.emoji,
    )


def run_check(options: CLIOptions, config: LazycheckConfig, *, logger: CLILogger) -> CheckOutcome:
    """Type-check the configured entries with the target module patched.

    Args:
        options: Normalised CLI options.
        config: Resolved configuration.
        logger: Logger receiving progress, warnings and failures.

    Returns:
        CheckOutcome: Diagnostics reported by the checker.

    Raises:
        CLIError: If patching or the checker aborts the run.
    """

    patches: list[PatchResult] = []
    host = PatchingHost(
        FileSystemHost(options.root),
        config.target,
        root=options.root,
        patcher=build_patcher(config, options),
        register_warning=logger.warn,
        register_info=logger.info,
        register_patch=patches.append,
    )
    program = Program(
        config.entries,
        config.compiler_options,
        host,
        root=options.root,
        tsc=config.tsc,
        runner=run_command,
    )
    try:
        outcome = CheckOutcome(
            syntactic=program.get_syntactic_diagnostics(),
            semantic=program.get_semantic_diagnostics(),
            patch=patches[-1] if patches else None,
        )
    except LazycheckError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    color = None if options.color else False
    log_diagnostics(outcome.syntactic, use_color=color)
    log_diagnostics(outcome.semantic, use_color=color)
    return outcome


def run_patch(options: CLIOptions, config: LazycheckConfig, file_name: str | None, *, logger: CLILogger) -> PatchResult:
    """Patch ``file_name`` (or the configured target) without running the checker."""

    host = FileSystemHost(options.root)
    path = host.resolve(file_name or config.target)
    if not path.is_file():
        logger.fail(f"File '{path}' not found.")
        raise CLIError(f"File '{path}' not found.")
    try:
        return build_patcher(config, options).patch_file(path, register_warning=logger.warn)
    except LazycheckError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc


def describe_insertions(result: PatchResult) -> list[str]:
    """Return one line per insertion naming its key, offset and line."""

    source = result.original_text.encode("utf-8")
    lines: list[str] = []
    for insertion in result.insertions:
        line_number = source.count(b"\n", 0, insertion.offset) + 1
        lines.append(f"{insertion.key} @ {insertion.offset} (line {line_number})")
    return lines


def display_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` when possible."""

    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = [
    "CheckOutcome",
    "build_patcher",
    "describe_insertions",
    "display_path",
    "load_cli_config",
    "run_check",
    "run_patch",
]
