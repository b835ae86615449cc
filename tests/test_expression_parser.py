"""Tests for the expression parser and the expression generator."""

from __future__ import annotations

import pytest
from hypothesis import given, settings

from mustachio.environment.exceptions import ErrorCode, TemplateSyntaxError
from mustachio.generator import ExpressionGenerator
from mustachio.nodes import FilterCall, Identifier, ImplicitIterator, Scoped
from mustachio.parser import ExpressionParser, parse_expression

from .strategies import expression_source

f = Identifier("f")
a = Identifier("a")
b = Identifier("b")


class TestParse:
    """Valid expressions."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (".", ImplicitIterator()),
            ("name", Identifier("name")),
            ("  name\t", Identifier("name")),
            ("a.b", Scoped(a, "b")),
            ("a.b.c", Scoped(Scoped(a, "b"), "c")),
            (".a", Scoped(ImplicitIterator(), "a")),
            ("f(a)", FilterCall(f, a)),
            ("f(.)", FilterCall(f, ImplicitIterator())),
            ("f(a,b)", FilterCall(FilterCall(f, a, partial_application=True), b)),
            ("f( a , b )", FilterCall(FilterCall(f, a, partial_application=True), b)),
            ("f(g(a))", FilterCall(f, FilterCall(Identifier("g"), a))),
            ("f(a)(b)", FilterCall(FilterCall(f, a), b)),
            ("f(a).b", Scoped(FilterCall(f, a), "b")),
            ("a.f(b)", FilterCall(Scoped(a, "f"), b)),
            ("f (a)", FilterCall(f, a)),
            ("@index", Identifier("@index")),
        ],
    )
    def test_parse(self, source: str, expected) -> None:
        """Expressions parse into the expected tree."""
        assert parse_expression(source) == expected

    def test_parser_is_reusable(self) -> None:
        """One parser parses many expressions."""
        parser = ExpressionParser()
        assert parser.parse("a") == a
        assert parser.parse("b") == b

    def test_repr_shows_generated_form(self) -> None:
        """repr() of an expression is its source form."""
        assert repr(parse_expression("f(a, b).c")) == "Expression(f(a,b).c)"


class TestParseErrors:
    """Invalid expressions raise TemplateSyntaxError."""

    @pytest.mark.parametrize("source", ["", "   ", "\n"])
    def test_missing_expression(self, source: str) -> None:
        """Blank expressions are reported as missing, with ``empty`` set."""
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse_expression(source)
        assert exc_info.value.message == "Missing expression"
        assert exc_info.value.empty is True
        assert exc_info.value.code is ErrorCode.MISSING_EXPRESSION

    @pytest.mark.parametrize(
        ("source", "description"),
        [
            ("a b", "Unexpected character `b` at index 2"),
            ("a .b", "Unexpected character `.` at index 2"),
            ("a.", "Missing identifier at index 2"),
            ("a..b", "Unexpected character `.` at index 2"),
            ("a. b", "Unexpected white space character at index 2"),
            ("f(a", "Missing `)` character at index 3"),
            ("f(a,", "Missing `)` character at index 4"),
            ("f()", "Unexpected character `)` at index 2"),
            ("a)", "Unexpected character `)` at index 1"),
            ("a,b", "Unexpected character `,` at index 1"),
            ("..", "Unexpected character `.` at index 1"),
            ("#a", "Unexpected character `#` at index 0"),
            ("(a)", "Unexpected character `(` at index 0"),
        ],
    )
    def test_invalid_expression(self, source: str, description: str) -> None:
        """Malformed expressions describe the first problem found."""
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse_expression(source)
        error = exc_info.value
        assert error.message == f"Invalid expression `{source}`: {description}"
        assert error.empty is False
        assert error.code is ErrorCode.INVALID_EXPRESSION


class TestGenerate:
    """ExpressionGenerator writes the canonical source of an expression."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            (ImplicitIterator(), "."),
            (Identifier("name"), "name"),
            (Scoped(ImplicitIterator(), "a"), ".a"),
            (Scoped(Scoped(a, "b"), "c"), "a.b.c"),
            (FilterCall(f, a), "f(a)"),
            (FilterCall(FilterCall(f, a, partial_application=True), b), "f(a,b)"),
            (FilterCall(FilterCall(f, a), b), "f(a)(b)"),
        ],
    )
    def test_generate(self, expression, expected: str) -> None:
        """Each expression kind has one source form."""
        assert ExpressionGenerator().generate(expression) == expected


class TestExpressionProperties:
    """Property-based parser invariants."""

    @given(source=expression_source)
    @settings(max_examples=300)
    def test_generate_parse_roundtrip(self, source: str) -> None:
        """Canonical expressions survive a parse-generate round trip."""
        assert ExpressionGenerator().generate(parse_expression(source)) == source

    @given(source=expression_source)
    @settings(max_examples=200)
    def test_surrounding_whitespace_is_ignored(self, source: str) -> None:
        """Whitespace around an expression does not change it."""
        assert parse_expression(f"  {source}\n") == parse_expression(source)
