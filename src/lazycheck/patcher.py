# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Patch a module so its lazy getter objects carry JSDoc types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .annotations import DEFAULT_TYPEDEF_NAME, synthesize
from .logging import warn
from .models import PatchResult
from .parsing import parse_module
from .scanner import DEFAULT_DEFINE_GETTERS, PatternScanner
from .splicer import build_plan

WarningCallback = Callable[[str], None]


def read_source(path: Path) -> str:
    """Return the text of ``path`` without newline translation.

    Invalid UTF-8 sequences decode to U+FFFD instead of failing the run.
    """

    return path.read_bytes().decode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class ModulePatcher:
    """Run the parse, scan, synthesise and splice steps for one module."""

    define_getters: str = DEFAULT_DEFINE_GETTERS
    typedef_name: str = DEFAULT_TYPEDEF_NAME
    use_emoji: bool = True

    def patch_source(
        self,
        source: str,
        *,
        file_name: str = "<memory>",
        register_warning: WarningCallback | None = None,
    ) -> PatchResult:
        """Return ``source`` with annotations inserted before lazy object declarations.

        Args:
            source: Original module text.
            file_name: Name used in syntax error messages.
            register_warning: Optional callback receiving warning messages; the
                shared logging helpers are used when omitted.

        Returns:
            PatchResult: Patched text plus the insertions and unresolved keys.

        Raises:
            SourceSyntaxError: If ``source`` does not parse.
            UnsupportedSyntaxError: If a correlated expression cannot be serialised.
        """

        module = parse_module(source, file_name=file_name)
        scan = PatternScanner(self.define_getters).scan(module)
        if not scan.registrations:
            return PatchResult(file_name=file_name, original_text=source, text=source)

        annotations = synthesize(scan.registrations, self.typedef_name)
        plan = build_plan(scan.declarations, annotations)
        for key in plan.unresolved:
            self._emit_warning(register_warning, f"Unknown lazy object {key}")
        text = plan.apply(module.source).decode("utf-8")
        return PatchResult(
            file_name=file_name,
            original_text=source,
            text=text,
            insertions=plan.ordered(),
            unresolved=list(plan.unresolved),
        )

    def patch_file(self, path: Path, *, register_warning: WarningCallback | None = None) -> PatchResult:
        """Read ``path`` and patch its contents."""

        return self.patch_source(read_source(path), file_name=str(path), register_warning=register_warning)

    def _emit_warning(self, register_warning: WarningCallback | None, message: str) -> None:
        if register_warning is not None:
            register_warning(message)
        else:
            warn(message, use_emoji=self.use_emoji)


def patch_source(
    source: str,
    *,
    file_name: str = "<memory>",
    define_getters: str = DEFAULT_DEFINE_GETTERS,
    typedef_name: str = DEFAULT_TYPEDEF_NAME,
    register_warning: WarningCallback | None = None,
) -> PatchResult:
    """Patch ``source`` with a default-configured :class:`ModulePatcher`."""

    patcher = ModulePatcher(define_getters=define_getters, typedef_name=typedef_name)
    return patcher.patch_source(source, file_name=file_name, register_warning=register_warning)


__all__ = ["ModulePatcher", "WarningCallback", "patch_source", "read_source"]
