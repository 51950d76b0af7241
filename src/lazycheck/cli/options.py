# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option declarations shared by the lazycheck commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ..config import entry_overrides

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root used to resolve entries and configuration."),
]
TARGET_OPTION = Annotated[
    str | None,
    typer.Option("--target", "-t", help="Module whose lazy getters are annotated."),
]
ENTRY_OPTION = Annotated[
    list[str] | None,
    typer.Option("--entry", "-e", help="Entry file passed to the checker (repeatable)."),
]
DEFINE_GETTERS_OPTION = Annotated[
    str | None,
    typer.Option("--define-getters", help="Dotted name of the lazy getter registration call."),
]
TSC_OPTION = Annotated[
    str | None,
    typer.Option("--tsc", help="TypeScript compiler executable."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
COLOR_OPTION = Annotated[
    bool,
    typer.Option("--color/--no-color", help="Toggle ANSI colour output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Print debug details."),
]


@dataclass(slots=True)
class CLIOptions:
    """Capture options common to every command."""

    root: Path
    target: str | None
    entries: tuple[str, ...]
    define_getters: str | None
    tsc: str | None
    emoji: bool
    color: bool
    debug: bool

    def config_overrides(self) -> dict[str, Any]:
        """Return the values that override file-based configuration."""

        return {
            "target": self.target,
            "entries": entry_overrides(self.entries),
            "define_getters": self.define_getters,
            "tsc": self.tsc,
        }


def build_options(
    *,
    root: Path,
    target: str | None = None,
    entries: Sequence[str] | None = None,
    define_getters: str | None = None,
    tsc: str | None = None,
    emoji: bool = True,
    color: bool = True,
    debug: bool = False,
) -> CLIOptions:
    """Normalise raw Typer values into :class:`CLIOptions`."""

    return CLIOptions(
        root=root.resolve(),
        target=target.strip() if target and target.strip() else None,
        entries=tuple(entry.strip() for entry in entries or () if entry.strip()),
        define_getters=define_getters,
        tsc=tsc,
        emoji=emoji,
        color=color,
        debug=debug,
    )


__all__ = [
    "COLOR_OPTION",
    "CLIOptions",
    "DEBUG_OPTION",
    "DEFINE_GETTERS_OPTION",
    "EMOJI_OPTION",
    "ENTRY_OPTION",
    "ROOT_OPTION",
    "TARGET_OPTION",
    "TSC_OPTION",
    "build_options",
]
