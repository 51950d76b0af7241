# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detect lazy getter registrations and the declarations they target.

Only direct children of the module root are inspected. Two statement shapes
matter:

* a ``const``/``let``/``var`` statement with exactly one declarator, whose
  start offset is recorded under the declarator's name;
* a call statement such as ``ChromeUtils.defineESModuleGetters(lazy, {...})``
  whose first argument names the object being populated and whose second
  argument maps property names to module paths.

Both are correlated through a dotted *name key* produced by
:func:`serialize_node`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from tree_sitter import Node as TSNode

from .errors import UnsupportedSyntaxError
from .models import PropertyBinding, Registration
from .parsing import ParsedModule, node_text, significant_children

DEFAULT_DEFINE_GETTERS: Final[str] = "ChromeUtils.defineESModuleGetters"
_SNIPPET_LIMIT: Final[int] = 60


class NodeKind(Enum):
    """Node shapes the serialiser understands."""

    IDENTIFIER = "identifier"
    LITERAL = "literal"
    MEMBER = "member"
    PARENTHESIZED = "parenthesized"
    UNSUPPORTED = "unsupported"

    @classmethod
    def of(cls, node: TSNode) -> NodeKind:
        """Classify ``node`` into one of the supported shapes."""

        return _NODE_KINDS.get(node.type, cls.UNSUPPORTED)


_NODE_KINDS: Final[dict[str, NodeKind]] = {
    "identifier": NodeKind.IDENTIFIER,
    "property_identifier": NodeKind.IDENTIFIER,
    "shorthand_property_identifier": NodeKind.IDENTIFIER,
    "undefined": NodeKind.IDENTIFIER,
    "string": NodeKind.LITERAL,
    "number": NodeKind.LITERAL,
    "true": NodeKind.LITERAL,
    "false": NodeKind.LITERAL,
    "null": NodeKind.LITERAL,
    "regex": NodeKind.LITERAL,
    "member_expression": NodeKind.MEMBER,
    "subscript_expression": NodeKind.MEMBER,
    "parenthesized_expression": NodeKind.PARENTHESIZED,
}


class StatementKind(Enum):
    """Top-level statement shapes the scanner reacts to."""

    DECLARATION = "declaration"
    EXPRESSION = "expression"
    OTHER = "other"

    @classmethod
    def of(cls, node: TSNode) -> StatementKind:
        """Classify a top-level statement."""

        if node.type in {"lexical_declaration", "variable_declaration"}:
            return cls.DECLARATION
        if node.type == "expression_statement":
            return cls.EXPRESSION
        return cls.OTHER


def unsupported(node: TSNode, reason: str = "") -> UnsupportedSyntaxError:
    """Build an :class:`UnsupportedSyntaxError` describing ``node``."""

    line, column = node.start_point
    snippet = node_text(node)
    if len(snippet) > _SNIPPET_LIMIT:
        snippet = f"{snippet[:_SNIPPET_LIMIT]}..."
    return UnsupportedSyntaxError(node.type, line=line + 1, column=column + 1, snippet=snippet, reason=reason)


def serialize_node(node: TSNode) -> str:
    """Return the dotted name key for an identifier, literal or member access.

    Args:
        node: Expression node to serialise.

    Returns:
        str: ``"lazy"`` for an identifier, the literal value for a literal and
        ``"object.property"`` for member accesses.

    Raises:
        UnsupportedSyntaxError: If ``node`` has any other shape.
    """

    match NodeKind.of(node):
        case NodeKind.IDENTIFIER:
            return node_text(node)
        case NodeKind.LITERAL:
            return literal_value(node)
        case NodeKind.MEMBER:
            if _has_optional_chain(node):
                raise unsupported(node, "optional chaining")
            target = node.child_by_field_name("object")
            member = node.child_by_field_name("property") or node.child_by_field_name("index")
            if target is None or member is None:
                raise unsupported(node)
            return f"{serialize_node(target)}.{serialize_node(member)}"
        case NodeKind.PARENTHESIZED:
            inner = significant_children(node)
            if len(inner) != 1:
                raise unsupported(node)
            return serialize_node(inner[0])
        case NodeKind.UNSUPPORTED:
            raise unsupported(node)


def literal_value(node: TSNode) -> str:
    """Return the value of a literal node rendered the way JavaScript prints it."""

    if node.type == "string":
        return _string_value(node)
    if node.type == "number":
        return _number_value(node_text(node))
    return node_text(node)


_SIMPLE_ESCAPES: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}
_LINE_TERMINATORS: Final[frozenset[str]] = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})


def _string_value(node: TSNode) -> str:
    parts: list[str] = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(_decode_escape(child))
        else:
            parts.append(node_text(child))
    value = "".join(parts)
    try:
        # Combine UTF-16 surrogate pairs; a lone surrogate has no UTF-8 form.
        return value.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError as exc:
        raise unsupported(node, "unpaired surrogate escape") from exc


def _decode_escape(node: TSNode) -> str:
    body = node_text(node)[1:]
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body in _LINE_TERMINATORS:
        return ""
    try:
        if body.startswith("u{") and body.endswith("}"):
            return chr(int(body[2:-1], 16))
        if body[:1] in {"u", "x"} and len(body) > 1:
            return chr(int(body[1:], 16))
        if body.isdigit():
            return chr(int(body, 8))
    except ValueError as exc:
        raise unsupported(node, "malformed escape sequence") from exc
    return body


def _number_value(text: str) -> str:
    cleaned = text.replace("_", "").removesuffix("n")
    try:
        return str(int(cleaned, 0))
    except ValueError:
        value = float(cleaned)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _has_optional_chain(node: TSNode) -> bool:
    return any(child.type == "optional_chain" for child in node.children)


def _in_optional_chain(node: TSNode) -> bool:
    """Return ``True`` when ``node`` is part of an ``a?.b`` chain."""

    current: TSNode | None = node
    while current is not None:
        if _has_optional_chain(current):
            return True
        match current.type:
            case "call_expression":
                current = current.child_by_field_name("function")
            case "member_expression" | "subscript_expression":
                current = current.child_by_field_name("object")
            case _:
                return False
    return False


@dataclass(slots=True)
class ScanResult:
    """Declarations and registrations found at the top level of one module."""

    declarations: dict[str, int] = field(default_factory=dict)
    registrations: dict[str, Registration] = field(default_factory=dict)


class PatternScanner:
    """Classify top-level statements against the declaration and registration shapes."""

    def __init__(self, define_getters: str = DEFAULT_DEFINE_GETTERS) -> None:
        """Initialise the scanner.

        Args:
            define_getters: Dotted callee name of the lazy registration entry point.
        """

        self.define_getters = define_getters

    def scan(self, module: ParsedModule) -> ScanResult:
        """Scan the direct children of the module root.

        Args:
            module: Parsed module to inspect.

        Returns:
            ScanResult: Declaration offsets and registrations keyed by name.

        Raises:
            UnsupportedSyntaxError: If a correlated expression cannot be serialised.
        """

        result = ScanResult()
        for statement in module.statements():
            match StatementKind.of(statement):
                case StatementKind.DECLARATION:
                    self._record_declaration(statement, result)
                case StatementKind.EXPRESSION:
                    self._record_registration(statement, result)
                case StatementKind.OTHER:
                    continue
        return result

    @staticmethod
    def _record_declaration(statement: TSNode, result: ScanResult) -> None:
        declarators = [child for child in significant_children(statement) if child.type == "variable_declarator"]
        if len(declarators) != 1:
            return
        name = declarators[0].child_by_field_name("name")
        if name is None:
            return
        result.declarations[serialize_node(name)] = statement.start_byte

    def _record_registration(self, statement: TSNode, result: ScanResult) -> None:
        expressions = significant_children(statement)
        if not expressions:
            return
        call = expressions[0]
        if call.type != "call_expression" or _in_optional_chain(call):
            return
        callee = call.child_by_field_name("function")
        arguments = call.child_by_field_name("arguments")
        if callee is None or arguments is None or arguments.type != "arguments":
            return
        if serialize_node(callee) != self.define_getters:
            return

        args = significant_children(arguments)
        if len(args) != 2:
            raise unsupported(call, f"{self.define_getters} expects two arguments, got {len(args)}")
        target, properties = args
        while properties.type == "parenthesized_expression" and len(significant_children(properties)) == 1:
            properties = significant_children(properties)[0]
        if properties.type != "object":
            raise unsupported(properties, "expected an object literal of module paths")

        key = serialize_node(target)
        result.registrations[key] = Registration(target=key, bindings=self._bindings(properties))

    @staticmethod
    def _bindings(properties: TSNode) -> list[PropertyBinding]:
        bindings: list[PropertyBinding] = []
        for prop in significant_children(properties):
            match prop.type:
                case "pair":
                    key = prop.child_by_field_name("key")
                    value = prop.child_by_field_name("value")
                    if key is None or value is None:
                        raise unsupported(prop)
                    bindings.append(
                        PropertyBinding(
                            name=_comment_safe(key, serialize_node(key), _NAME_BREAKERS),
                            module_path=_comment_safe(value, serialize_node(value), _PATH_BREAKERS),
                        ),
                    )
                case "shorthand_property_identifier":
                    name = _comment_safe(prop, serialize_node(prop), _NAME_BREAKERS)
                    bindings.append(PropertyBinding(name=name, module_path=name))
                case _:
                    raise unsupported(prop)
        return bindings


_NAME_BREAKERS: Final[tuple[str, ...]] = ("*/", "\n", "\r", "\u2028", "\u2029")
_PATH_BREAKERS: Final[tuple[str, ...]] = (*_NAME_BREAKERS, '"')


def _comment_safe(node: TSNode, value: str, breakers: tuple[str, ...]) -> str:
    """Return ``value`` unless it would end or split the JSDoc block it is written into."""

    if any(breaker in value for breaker in breakers):
        raise unsupported(node, "value cannot be written into a JSDoc annotation")
    return value


def scan_module(module: ParsedModule, *, define_getters: str = DEFAULT_DEFINE_GETTERS) -> ScanResult:
    """Scan ``module`` with a :class:`PatternScanner`."""

    return PatternScanner(define_getters).scan(module)


__all__ = [
    "DEFAULT_DEFINE_GETTERS",
    "NodeKind",
    "PatternScanner",
    "ScanResult",
    "StatementKind",
    "literal_value",
    "scan_module",
    "serialize_node",
]
