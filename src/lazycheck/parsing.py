# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse JavaScript modules with the Tree-sitter grammar."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from functools import cache

import tree_sitter_javascript
from tree_sitter import Language as TSLanguage
from tree_sitter import Node as TSNode
from tree_sitter import Parser as TSParser
from tree_sitter import Tree as TSTree

from .errors import SourceSyntaxError

COMMENT_NODE_TYPES = frozenset({"comment", "hash_bang_line", "html_comment"})


@dataclass(frozen=True, slots=True)
class ParsedModule:
    """Syntax tree for a module together with the bytes it was parsed from."""

    file_name: str
    source: bytes
    tree: TSTree

    @property
    def root(self) -> TSNode:
        """Return the ``program`` node."""

        return self.tree.root_node

    def statements(self) -> Iterator[TSNode]:
        """Yield the top-level statements, skipping comments."""

        for child in self.root.named_children:
            if child.type not in COMMENT_NODE_TYPES:
                yield child


@cache
def javascript_language() -> TSLanguage:
    """Return the compiled JavaScript grammar bundled with ``tree-sitter-javascript``."""

    return TSLanguage(tree_sitter_javascript.language())


@cache
def _parser() -> TSParser:
    return TSParser(javascript_language())


def parse_module(source: str | bytes, *, file_name: str = "<memory>") -> ParsedModule:
    """Parse ``source`` as a JavaScript module.

    Args:
        source: Module text; ``str`` input is encoded as UTF-8.
        file_name: Name used when reporting syntax errors.

    Returns:
        ParsedModule: Parsed tree with byte offsets into the encoded source.

    Raises:
        SourceSyntaxError: If the grammar recovered from an error anywhere in the module.
    """

    data = source.encode("utf-8") if isinstance(source, str) else source
    tree = _parser().parse(data)
    root = tree.root_node
    if root.has_error:
        broken = first_error_node(root) or root
        line, column = broken.start_point
        raise SourceSyntaxError(file_name, line=line + 1, column=column + 1)
    return ParsedModule(file_name=file_name, source=data, tree=tree)


def first_error_node(node: TSNode) -> TSNode | None:
    """Return the first ``ERROR`` or missing node in document order."""

    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def node_text(node: TSNode) -> str:
    """Return the UTF-8 text covered by ``node``."""

    raw = node.text
    return raw.decode("utf-8") if raw is not None else ""


def significant_children(node: TSNode) -> list[TSNode]:
    """Return the named children of ``node`` without comments."""

    return [child for child in node.named_children if child.type not in COMMENT_NODE_TYPES]


__all__ = [
    "COMMENT_NODE_TYPES",
    "ParsedModule",
    "first_error_node",
    "javascript_language",
    "node_text",
    "parse_module",
    "significant_children",
]
