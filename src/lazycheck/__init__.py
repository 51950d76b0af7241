# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Annotate lazy getter objects in JavaScript modules before type-checking."""

from __future__ import annotations

from importlib import metadata

from .annotations import build_annotation
from .errors import CheckerError, ConfigError, LazycheckError, SourceSyntaxError, UnsupportedSyntaxError
from .host import FileSystemHost, PatchingHost, SourceFile
from .patcher import ModulePatcher, patch_source

__all__ = [
    "CheckerError",
    "ConfigError",
    "FileSystemHost",
    "LazycheckError",
    "ModulePatcher",
    "PatchingHost",
    "SourceFile",
    "SourceSyntaxError",
    "UnsupportedSyntaxError",
    "__version__",
    "build_annotation",
    "patch_source",
]

try:
    __version__ = metadata.version("lazycheck")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
