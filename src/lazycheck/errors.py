# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the patch pipeline, checker and CLI."""

from __future__ import annotations


class LazycheckError(Exception):
    """Base class for failures that abort a lazycheck run."""


class UnsupportedSyntaxError(LazycheckError):
    """Raised when the scanner meets a node shape it cannot serialise.

    The patch for the current file is abandoned because the remaining steps
    assume every correlated expression is an identifier, literal or member
    access.
    """

    def __init__(self, node_type: str, *, line: int, column: int, snippet: str = "", reason: str = "") -> None:
        """Initialise the error with the offending construct and its position.

        Args:
            node_type: Tree-sitter node type that could not be handled.
            line: One-based line where the construct starts.
            column: One-based column where the construct starts.
            snippet: Source text of the construct, truncated for display.
            reason: Optional clarification appended to the message.
        """

        self.node_type = node_type
        self.line = line
        self.column = column
        self.snippet = snippet
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        shown = f": {snippet!r}" if snippet else ""
        super().__init__(f"Attempt to serialize unknown node {node_type} at {line}:{column}{detail}{shown}")


class SourceSyntaxError(LazycheckError):
    """Raised when the target module does not parse as JavaScript."""

    def __init__(self, file_name: str, *, line: int, column: int) -> None:
        self.file_name = file_name
        self.line = line
        self.column = column
        super().__init__(f"{file_name}:{line}:{column}: syntax error in target module")


class ConfigError(LazycheckError):
    """Raised when configuration input is invalid."""


class CheckerError(LazycheckError):
    """Raised when the external TypeScript checker cannot produce diagnostics."""


__all__ = [
    "CheckerError",
    "ConfigError",
    "LazycheckError",
    "SourceSyntaxError",
    "UnsupportedSyntaxError",
]
