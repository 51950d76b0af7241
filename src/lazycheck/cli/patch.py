# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command printing the patched text of a module."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .options import (
    COLOR_OPTION,
    DEBUG_OPTION,
    DEFINE_GETTERS_OPTION,
    EMOJI_OPTION,
    ROOT_OPTION,
    build_options,
)
from .services import describe_insertions, display_path, load_cli_config, run_patch
from .shared import EXIT_OK, CLIError, build_cli_logger

FILE_ARGUMENT = Annotated[
    str | None,
    typer.Argument(help="Module to patch; defaults to the configured target."),
]
SHOW_PLAN_OPTION = Annotated[
    bool,
    typer.Option("--show-plan", help="List the planned insertions instead of the patched text."),
]


def patch_command(
    file: FILE_ARGUMENT = None,
    root: ROOT_OPTION = Path("."),
    define_getters: DEFINE_GETTERS_OPTION = None,
    show_plan: SHOW_PLAN_OPTION = False,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Print a module with its lazy getter annotations spliced in."""

    options = build_options(root=root, define_getters=define_getters, emoji=emoji, color=color, debug=debug)
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug, no_color=not options.color)
    try:
        config = load_cli_config(options, logger=logger)
        result = run_patch(options, config, file, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    if show_plan:
        name = display_path(Path(result.file_name), options.root)
        logger.echo(f"{name}: {len(result.insertions)} insertion(s)")
        for line in describe_insertions(result):
            logger.echo(f"  {line}")
    else:
        logger.echo(result.text, newline=False)
    raise typer.Exit(code=EXIT_OK)


__all__ = ["patch_command"]
