# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .check import check_command
from .patch import patch_command

app = typer.Typer(
    name="lazycheck",
    help="Type-check JavaScript modules whose imports are registered as lazy getters.",
    add_completion=False,
    no_args_is_help=True,
)
app.command(name="check")(check_command)
app.command(name="patch")(patch_command)

__all__ = ["app"]
