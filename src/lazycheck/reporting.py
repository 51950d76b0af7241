# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render checker diagnostics for the terminal."""

from __future__ import annotations

from collections.abc import Iterable

from .logging import error_line
from .models import Diagnostic


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Return ``ts(<code>): <message>`` prefixed with the location when known."""

    rendered = f"ts({diagnostic.code}): {diagnostic.message}"
    if diagnostic.file is None:
        return rendered
    if diagnostic.line is None:
        return f"{diagnostic.file}: {rendered}"
    return f"{diagnostic.file}({diagnostic.line},{diagnostic.column or 1}): {rendered}"


def log_diagnostics(diagnostics: Iterable[Diagnostic], *, use_color: bool | None = None) -> int:
    """Write ``diagnostics`` to standard error and return how many were written."""

    count = 0
    for diagnostic in diagnostics:
        error_line(format_diagnostic(diagnostic), use_color=use_color)
        count += 1
    return count


__all__ = ["format_diagnostic", "log_diagnostics"]
