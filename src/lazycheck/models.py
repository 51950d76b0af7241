# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models shared between the patch pipeline and the checker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    """Severity levels reported by the TypeScript compiler."""

    ERROR = "error"
    WARNING = "warning"
    MESSAGE = "message"


class DiagnosticCategory(str, Enum):
    """Stream a diagnostic belongs to."""

    SYNTACTIC = "syntactic"
    SEMANTIC = "semantic"


class Diagnostic(BaseModel):
    """Diagnostic forwarded verbatim from the external checker."""

    model_config = ConfigDict(validate_assignment=True)

    file: str | None = None
    line: int | None = None
    column: int | None = None
    severity: Severity = Severity.ERROR
    code: int
    message: str
    category: DiagnosticCategory = DiagnosticCategory.SEMANTIC


@dataclass(frozen=True, slots=True)
class PropertyBinding:
    """Lazily-loaded property name and the module path that provides it."""

    name: str
    module_path: str


@dataclass(slots=True)
class Registration:
    """A lazy getter registration keyed by its target object."""

    target: str
    bindings: list[PropertyBinding] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Insertion:
    """Text inserted at ``offset`` bytes into the original source."""

    offset: int
    text: str
    key: str = ""


@dataclass(slots=True)
class PatchResult:
    """Outcome of patching one module."""

    file_name: str
    original_text: str
    text: str
    insertions: list[Insertion] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Return ``True`` when at least one annotation was spliced in."""

        return bool(self.insertions)


__all__ = [
    "Diagnostic",
    "DiagnosticCategory",
    "Insertion",
    "PatchResult",
    "PropertyBinding",
    "Registration",
    "Severity",
]
