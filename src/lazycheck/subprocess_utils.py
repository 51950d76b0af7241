# SPDX-License-Identifier: MIT
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path


def resolve_executable(name: str, *, search_dirs: Sequence[Path] = ()) -> str | None:
    """Return an absolute path for ``name`` or ``None`` when it cannot be found.

    Args:
        name: Executable name or path.
        search_dirs: Directories probed before ``PATH``.

    Returns:
        str | None: Resolved executable path.
    """

    path = Path(name)
    if path.is_absolute():
        return str(path) if path.exists() else None
    for directory in search_dirs:
        candidate = directory / name
        if candidate.is_file():
            return str(candidate)
    return shutil.which(name)


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute ``args`` after resolving the executable path."""

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    resolved = resolve_executable(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return subprocess.run(
        [resolved, *rest],
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        check=check,
        capture_output=capture_output,
        text=text,
    )


__all__ = ["resolve_executable", "run_command"]
