# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Insert annotation text into the original module source."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .models import Insertion


@dataclass(slots=True)
class InsertionPlan:
    """Insertions computed against one unmodified source text."""

    insertions: list[Insertion] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)

    def add(self, offset: int, text: str, *, key: str = "") -> None:
        """Schedule ``text`` for insertion at byte ``offset`` of the original."""

        if offset < 0:
            raise ValueError(f"insertion offset must be non-negative, got {offset}")
        self.insertions.append(Insertion(offset=offset, text=text, key=key))

    def ordered(self) -> list[Insertion]:
        """Return insertions sorted by offset, keeping plan order for ties."""

        return sorted(self.insertions, key=lambda insertion: insertion.offset)

    def apply(self, source: bytes) -> bytes:
        """Apply every insertion to ``source`` in a single pass.

        Args:
            source: Original UTF-8 bytes the offsets were computed from.

        Returns:
            bytes: Source with all insertions applied.
        """

        chunks: list[bytes] = []
        cursor = 0
        for insertion in self.ordered():
            if insertion.offset > len(source):
                raise ValueError(f"insertion offset {insertion.offset} is past the end of the source")
            chunks.append(source[cursor : insertion.offset])
            chunks.append(insertion.text.encode("utf-8"))
            cursor = insertion.offset
        chunks.append(source[cursor:])
        return b"".join(chunks)


def build_plan(declarations: Mapping[str, int], annotations: Mapping[str, str]) -> InsertionPlan:
    """Pair each annotation with the declaration offset of its target.

    Args:
        declarations: Byte offsets of top-level declarations keyed by name.
        annotations: Annotation text keyed by registration target.

    Returns:
        InsertionPlan: Plan holding resolved insertions and unresolved keys.
    """

    plan = InsertionPlan()
    for key, text in annotations.items():
        offset = declarations.get(key)
        if offset is None:
            plan.unresolved.append(key)
            continue
        plan.add(offset, text, key=key)
    return plan


def splice(source: str, declarations: Mapping[str, int], annotations: Mapping[str, str]) -> str:
    """Return ``source`` with each annotation inserted before its declaration."""

    plan = build_plan(declarations, annotations)
    return plan.apply(source.encode("utf-8")).decode("utf-8")


__all__ = ["InsertionPlan", "build_plan", "splice"]
