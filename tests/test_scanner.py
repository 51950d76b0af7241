# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for top-level pattern scanning and node serialisation."""

from __future__ import annotations

import pytest

from lazycheck.errors import UnsupportedSyntaxError
from lazycheck.models import PropertyBinding
from lazycheck.parsing import parse_module
from lazycheck.scanner import NodeKind, PatternScanner, StatementKind, scan_module, serialize_node


def _scan(source: str, **kwargs: str):
    return scan_module(parse_module(source), **kwargs)


def _first_expression(source: str):
    statement = next(parse_module(source).statements())
    return statement.named_children[0]


def test_records_single_declarator_offsets() -> None:
    source = 'import x from "y";\nconst lazy = {};\nlet other;\nvar third = 3;\n'
    result = _scan(source)
    assert result.declarations == {
        "lazy": source.index("const"),
        "other": source.index("let"),
        "third": source.index("var"),
    }


def test_multi_declarator_statements_are_ignored() -> None:
    result = _scan("const lazy = {}, other = {};\nlet a, b;\n")
    assert result.declarations == {}


def test_later_declaration_of_same_name_wins() -> None:
    source = "var lazy = 1;\nvar lazy = {};\n"
    result = _scan(source)
    assert result.declarations == {"lazy": source.rindex("var")}


def test_registration_bindings_keep_source_order(lazy_module_source: str) -> None:
    result = _scan(lazy_module_source)
    assert list(result.registrations) == ["lazy"]
    assert result.registrations["lazy"].bindings == [
        PropertyBinding(name="Foo", module_path="resource://mod/Foo.sys.mjs"),
        PropertyBinding(name="Bar", module_path="resource://mod/Bar.sys.mjs"),
    ]


def test_registration_with_member_target_and_quoted_keys() -> None:
    source = "ChromeUtils.defineESModuleGetters(this.lazy, {});\n"
    with pytest.raises(UnsupportedSyntaxError):
        _scan(source)

    source = "ChromeUtils.defineESModuleGetters(obj.lazy, { 'Foo': 'resource:\\/\\/a.sys.mjs', 2: \"b\" });\n"
    result = _scan(source)
    assert result.registrations["obj.lazy"].bindings == [
        PropertyBinding(name="Foo", module_path="resource://a.sys.mjs"),
        PropertyBinding(name="2", module_path="b"),
    ]


def test_shorthand_property_serialises_name_twice() -> None:
    result = _scan("ChromeUtils.defineESModuleGetters(lazy, { Foo });\n")
    assert result.registrations["lazy"].bindings == [PropertyBinding(name="Foo", module_path="Foo")]


def test_last_registration_for_a_target_wins() -> None:
    source = (
        'ChromeUtils.defineESModuleGetters(lazy, { A: "a" });\n'
        'ChromeUtils.defineESModuleGetters(lazy, { B: "b" });\n'
    )
    result = _scan(source)
    assert result.registrations["lazy"].bindings == [PropertyBinding(name="B", module_path="b")]


def test_other_calls_and_nested_statements_are_ignored() -> None:
    source = (
        "console.log(lazy);\n"
        "function setup() {\n"
        '  ChromeUtils.defineESModuleGetters(inner, { A: "a" });\n'
        "}\n"
        "if (ready) {\n"
        '  ChromeUtils.defineESModuleGetters(other, { B: "b" });\n'
        "}\n"
        'ChromeUtils?.defineESModuleGetters(lazy, { C: "c" });\n'
    )
    result = _scan(source)
    assert result.registrations == {}


def test_custom_entry_point_name() -> None:
    source = 'XPCOMUtils.defineLazyModuleGetters(lazy, { A: "resource://a.jsm" });\n'
    assert _scan(source).registrations == {}
    result = _scan(source, define_getters="XPCOMUtils.defineLazyModuleGetters")
    assert list(result.registrations) == ["lazy"]


def test_unsupported_callee_aborts() -> None:
    with pytest.raises(UnsupportedSyntaxError) as excinfo:
        _scan("factory()();\n")
    assert excinfo.value.node_type == "call_expression"
    assert "call_expression" in str(excinfo.value)
    assert excinfo.value.line == 1


def test_destructured_declaration_aborts() -> None:
    with pytest.raises(UnsupportedSyntaxError) as excinfo:
        _scan("const { a } = lib;\n")
    assert excinfo.value.node_type == "object_pattern"


def test_spread_in_registration_aborts() -> None:
    with pytest.raises(UnsupportedSyntaxError) as excinfo:
        _scan("ChromeUtils.defineESModuleGetters(lazy, { ...modules });\n")
    assert excinfo.value.node_type == "spread_element"


def test_registration_arity_is_checked() -> None:
    with pytest.raises(UnsupportedSyntaxError, match="expects two arguments"):
        _scan("ChromeUtils.defineESModuleGetters(lazy);\n")


def test_registration_requires_object_literal() -> None:
    with pytest.raises(UnsupportedSyntaxError, match="object literal"):
        _scan("ChromeUtils.defineESModuleGetters(lazy, modules);\n")


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("lazy;", "lazy"),
        ("a.b.c;", "a.b.c"),
        ('a["b"];', "a.b"),
        ("(a.b);", "a.b"),
        ("'x\\ty';", "x\ty"),
        ("0x10;", "16"),
        ("1.5;", "1.5"),
        ("true;", "true"),
        ("'\\uD83D\\uDE00';", "\U0001F600"),
        ("'\\u{1F600}';", "\U0001F600"),
        ("'\\101\\x42';", "AB"),
    ],
)
def test_serialize_node_shapes(source: str, expected: str) -> None:
    assert serialize_node(_first_expression(source)) == expected


@pytest.mark.parametrize("source", ["'\\8';", "'\\u{110000}';", "'\\uD83D';"])
def test_malformed_escapes_are_unsupported(source: str) -> None:
    with pytest.raises(UnsupportedSyntaxError) as excinfo:
        serialize_node(_first_expression(source))
    assert excinfo.value.node_type in {"escape_sequence", "string"}


@pytest.mark.parametrize(
    "properties",
    ['{ A: "a*/b" }', '{ A: \'x"y\' }', '{ "A\\nB": "a" }'],
)
def test_values_that_would_break_the_annotation_abort(properties: str) -> None:
    with pytest.raises(UnsupportedSyntaxError, match="JSDoc annotation"):
        _scan(f"ChromeUtils.defineESModuleGetters(lazy, {properties});\n")


def test_node_and_statement_kinds() -> None:
    module = parse_module("const a = 1;\nfoo();\nclass B {}\n")
    kinds = [StatementKind.of(statement) for statement in module.statements()]
    assert kinds == [StatementKind.DECLARATION, StatementKind.EXPRESSION, StatementKind.OTHER]
    assert NodeKind.of(_first_expression("foo();")) is NodeKind.UNSUPPORTED


def test_scanner_exposes_configured_entry_point() -> None:
    assert PatternScanner().define_getters == "ChromeUtils.defineESModuleGetters"
