# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command type-checking a project with its lazy getters annotated."""

from __future__ import annotations

from pathlib import Path

import typer

from .options import (
    COLOR_OPTION,
    DEBUG_OPTION,
    DEFINE_GETTERS_OPTION,
    EMOJI_OPTION,
    ENTRY_OPTION,
    ROOT_OPTION,
    TARGET_OPTION,
    TSC_OPTION,
    build_options,
)
from .services import load_cli_config, run_check
from .shared import EXIT_DIAGNOSTICS, EXIT_OK, CLIError, build_cli_logger


def check_command(
    root: ROOT_OPTION = Path("."),
    target: TARGET_OPTION = None,
    entry: ENTRY_OPTION = None,
    define_getters: DEFINE_GETTERS_OPTION = None,
    tsc: TSC_OPTION = None,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Patch the target module and report TypeScript diagnostics for the entries."""

    options = build_options(
        root=root,
        target=target,
        entries=entry,
        define_getters=define_getters,
        tsc=tsc,
        emoji=emoji,
        color=color,
        debug=debug,
    )
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug, no_color=not options.color)
    try:
        config = load_cli_config(options, logger=logger)
        outcome = run_check(options, config, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    if outcome.total:
        logger.warn(f"{outcome.total} diagnostic(s) reported by tsc.")
        raise typer.Exit(code=EXIT_DIAGNOSTICS)
    logger.ok("No diagnostics reported.")
    raise typer.Exit(code=EXIT_OK)


__all__ = ["check_command"]
