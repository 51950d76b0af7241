# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build JSDoc annotation blocks describing lazily-populated objects."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Final

from .models import PropertyBinding, Registration

DEFAULT_TYPEDEF_NAME: Final[str] = "LazyImports"
SUPPRESS_DIRECTIVE: Final[str] = "// @ts-ignore"


def typedef_name_for(base: str, ordinal: int) -> str:
    """Return the typedef name used for the ``ordinal``-th registration of a file.

    Args:
        base: Configured typedef name.
        ordinal: Zero-based index of the registration in scan order.

    Returns:
        str: ``base`` for the first registration, ``base`` plus ``ordinal + 1`` afterwards.
    """

    return base if ordinal == 0 else f"{base}{ordinal + 1}"


def build_annotation(bindings: Iterable[PropertyBinding], typedef_name: str = DEFAULT_TYPEDEF_NAME) -> str:
    """Render the annotation block inserted before a lazy object declaration.

    The block holds a ``@typedef`` with one ``@property`` per binding in
    source order, a ``@type`` assertion for the following declaration and a
    ``@ts-ignore`` directive, since the declaration's initialiser (usually
    ``{}``) never matches the synthesised type.

    Args:
        bindings: Property name and module path pairs of one registration.
        typedef_name: Name given to the synthesised object type.

    Returns:
        str: Annotation text ending with a line break.
    """

    lines = ["/**", f" * @typedef {{Object}} {typedef_name}"]
    lines.extend(f' * @property {{import("{binding.module_path}")}} {binding.name}' for binding in bindings)
    lines.append(" */\n")
    lines.append(f"/** @type {{{typedef_name}}} */")
    lines.append(f"{SUPPRESS_DIRECTIVE}\n")
    return "\n".join(lines)


def synthesize(
    registrations: Mapping[str, Registration],
    typedef_name: str = DEFAULT_TYPEDEF_NAME,
) -> dict[str, str]:
    """Return annotation text keyed by registration target."""

    return {
        key: build_annotation(registration.bindings, typedef_name_for(typedef_name, ordinal))
        for ordinal, (key, registration) in enumerate(registrations.items())
    }


__all__ = [
    "DEFAULT_TYPEDEF_NAME",
    "SUPPRESS_DIRECTIVE",
    "build_annotation",
    "synthesize",
    "typedef_name_for",
]
