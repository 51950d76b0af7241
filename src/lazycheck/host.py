# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compiler hosts that load module sources for the type checker."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from .logging import info
from .models import PatchResult
from .patcher import ModulePatcher, WarningCallback, read_source


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Source object handed to the checker.

    Attributes:
        file_name: Name the checker requested.
        text: Text the checker should analyse.
        language_version: Script target or options forwarded by the caller.
        set_parent_nodes: Whether the checker should treat the text as one
            well-formed module and keep parent links while binding it.
    """

    file_name: str
    text: str
    language_version: object = None
    set_parent_nodes: bool = False


@runtime_checkable
class CompilerHost(Protocol):
    """Capability for loading files on behalf of the checker."""

    def read_file(self, file_name: str) -> str | None:
        """Return the raw text of ``file_name`` or ``None`` when it is missing."""
        ...

    def get_source_file(
        self,
        file_name: str,
        language_version: object = None,
        *args: object,
        **kwargs: object,
    ) -> SourceFile | None:
        """Return a :class:`SourceFile` for ``file_name`` or ``None`` when it is missing."""
        ...


class FileSystemHost:
    """Load sources from disk relative to a project root."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or Path.cwd()).resolve()

    def resolve(self, file_name: str | Path) -> Path:
        """Return the absolute path of ``file_name`` anchored at :attr:`root`."""

        path = Path(file_name)
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    def read_file(self, file_name: str) -> str | None:
        path = self.resolve(file_name)
        if not path.is_file():
            return None
        return read_source(path)

    def get_source_file(
        self,
        file_name: str,
        language_version: object = None,
        *args: object,
        **kwargs: object,
    ) -> SourceFile | None:
        text = self.read_file(file_name)
        if text is None:
            return None
        return SourceFile(file_name=file_name, text=text, language_version=language_version)


class PatchingHost:
    """Wrap a host and substitute patched text for one target module.

    Every request whose absolute path differs from the target is delegated to
    the wrapped host with its original arguments.
    """

    def __init__(
        self,
        base: CompilerHost,
        target: str | Path,
        *,
        root: Path | None = None,
        patcher: ModulePatcher | None = None,
        register_warning: WarningCallback | None = None,
        register_info: Callable[[str], None] | None = None,
        register_patch: Callable[[PatchResult], None] | None = None,
    ) -> None:
        """Initialise the wrapper.

        Args:
            base: Host handling every request other than the target.
            target: Module whose lazy getter objects should be annotated.
            root: Directory relative names are resolved against; defaults to the
                current working directory.
            patcher: Patch pipeline configuration.
            register_warning: Callback receiving unresolved target warnings.
            register_info: Callback announcing patched files.
            register_patch: Callback receiving the result of each patch.
        """

        self.base = base
        self.root = (root or Path.cwd()).resolve()
        self.target = self.resolve(target)
        self.patcher = patcher or ModulePatcher()
        self.register_warning = register_warning
        self.register_info = register_info
        self.register_patch = register_patch

    def resolve(self, file_name: str | Path) -> Path:
        """Return the absolute path of ``file_name`` anchored at :attr:`root`."""

        path = Path(file_name)
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    def is_target(self, file_name: str | Path) -> bool:
        """Return ``True`` when ``file_name`` refers to the patched module."""

        return self.resolve(file_name) == self.target

    def read_file(self, file_name: str) -> str | None:
        return self.base.read_file(file_name)

    def get_source_file(
        self,
        file_name: str,
        language_version: object = None,
        *args: object,
        **kwargs: object,
    ) -> SourceFile | None:
        if not self.is_target(file_name):
            return self.base.get_source_file(file_name, language_version, *args, **kwargs)
        return self.patch(file_name, language_version)

    def patch(self, file_name: str, language_version: object = None) -> SourceFile | None:
        """Load the target module and return its patched source."""

        full_name = str(self.target)
        self._announce(f"patchFile {full_name}")
        source = self.base.read_file(full_name)
        if source is None:
            return None
        result = self.patcher.patch_source(
            source,
            file_name=full_name,
            register_warning=self.register_warning,
        )
        if self.register_patch is not None:
            self.register_patch(result)
        return SourceFile(
            file_name=file_name,
            text=result.text,
            language_version=language_version,
            set_parent_nodes=True,
        )

    def _announce(self, message: str) -> None:
        if self.register_info is not None:
            self.register_info(message)
        else:
            info(message, use_emoji=self.patcher.use_emoji)


__all__ = ["CompilerHost", "FileSystemHost", "PatchingHost", "SourceFile"]
