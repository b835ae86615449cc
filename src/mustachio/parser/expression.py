"""Expression parser.

Turns the content of a tag into an :class:`~mustachio.nodes.Expression`.

Grammar (informal):
    expression := "." | "." name | name | expression "." name
                | expression "(" arguments ")"
    arguments  := expression ("," expression)*

The parser is an explicit character-by-character state machine with a side
stack of filter callees awaiting their closing parenthesis, which is what
makes ``f(g(x))`` and ``f(a)(b)`` work. A comma closes the current argument
as a partial application and keeps the call open, so ``f(a,b)`` parses as
``FilterCall(FilterCall(f, a, partial_application=True), b)``.

Whitespace may surround an expression and follow any complete
sub-expression, but once it follows a complete expression only ``(``, ``)``,
``,`` or the end of the string may come next: ``"a .b"`` is rejected.

Example:
    >>> parse_expression("user.name")
    Expression(user.name)
    >>> parse_expression("f(a, b)")
    Expression(f(a,b))
"""

from __future__ import annotations

from enum import Enum

from mustachio.environment.exceptions import ErrorCode, TemplateSyntaxError
from mustachio.nodes.expressions import (
    Expression,
    FilterCall,
    Identifier,
    ImplicitIterator,
    Scoped,
)

_WHITESPACE = frozenset(" \r\n\t")

# Characters that can never start an expression.
_FORBIDDEN = frozenset("{}&$#^/<>")
_FORBIDDEN_AT_START = _FORBIDDEN | frozenset("(),")

_IMPLICIT_ITERATOR = ImplicitIterator()


class _State(Enum):
    WAITING_FOR_ANY_EXPRESSION = 0
    LEADING_DOT = 1
    IDENTIFIER = 2
    SCOPING_IDENTIFIER = 3
    WAITING_FOR_SCOPING_IDENTIFIER = 4
    DONE_EXPRESSION = 5
    DONE_EXPRESSION_PLUS_WHITESPACE = 6


class _Invalid(Exception):
    """Internal: aborts the scan with a description of the problem."""


class ExpressionParser:
    """Parse expression strings into Expression trees.

    Parsers hold no state between calls and can be shared.
    """

    __slots__ = ()

    def parse(self, string: str) -> Expression:
        """Parse an expression.

        Raises:
            TemplateSyntaxError: With ``empty=True`` and message "Missing
                expression" for an empty or blank string, otherwise with
                message "Invalid expression `<string>`: <description>".
        """
        try:
            expression = self._scan(string)
        except _Invalid as e:
            raise TemplateSyntaxError(
                f"Invalid expression `{string}`: {e}",
                code=ErrorCode.INVALID_EXPRESSION,
            ) from None
        if expression is None:
            raise TemplateSyntaxError(
                "Missing expression",
                empty=True,
                code=ErrorCode.MISSING_EXPRESSION,
            )
        return expression

    def _scan(self, string: str) -> Expression | None:
        state = _State.WAITING_FOR_ANY_EXPRESSION
        filter_stack: list[Expression] = []
        identifier_start = 0
        base: Expression = _IMPLICIT_ITERATOR
        done: Expression = _IMPLICIT_ITERATOR

        def unexpected(c: str, index: int) -> _Invalid:
            return _Invalid(f"Unexpected character `{c}` at index {index}")

        def close_call(argument: Expression, c: str, index: int) -> Expression:
            if not filter_stack:
                raise unexpected(c, index)
            return FilterCall(filter_stack.pop(), argument)

        def continue_call(argument: Expression, c: str, index: int) -> None:
            if not filter_stack:
                raise unexpected(c, index)
            filter_stack.append(FilterCall(filter_stack.pop(), argument, partial_application=True))

        for i, c in enumerate(string):
            if state is _State.WAITING_FOR_ANY_EXPRESSION:
                if c in _WHITESPACE:
                    pass
                elif c == ".":
                    state = _State.LEADING_DOT
                elif c in _FORBIDDEN_AT_START:
                    raise unexpected(c, i)
                else:
                    state = _State.IDENTIFIER
                    identifier_start = i

            elif state is _State.LEADING_DOT:
                if c in _WHITESPACE:
                    done = _IMPLICIT_ITERATOR
                    state = _State.DONE_EXPRESSION_PLUS_WHITESPACE
                elif c == ".":
                    raise unexpected(c, i)
                elif c == "(":
                    filter_stack.append(_IMPLICIT_ITERATOR)
                    state = _State.WAITING_FOR_ANY_EXPRESSION
                elif c == ")":
                    done = close_call(_IMPLICIT_ITERATOR, c, i)
                    state = _State.DONE_EXPRESSION
                elif c == ",":
                    continue_call(_IMPLICIT_ITERATOR, c, i)
                    state = _State.WAITING_FOR_ANY_EXPRESSION
                elif c in _FORBIDDEN:
                    raise unexpected(c, i)
                else:
                    base = _IMPLICIT_ITERATOR
                    identifier_start = i
                    state = _State.SCOPING_IDENTIFIER

            elif state is _State.IDENTIFIER or state is _State.SCOPING_IDENTIFIER:
                if c not in _WHITESPACE and c not in ".(),":
                    continue
                name = string[identifier_start:i]
                current = Identifier(name) if state is _State.IDENTIFIER else Scoped(base, name)
                if c in _WHITESPACE:
                    done = current
                    state = _State.DONE_EXPRESSION_PLUS_WHITESPACE
                elif c == ".":
                    base = current
                    state = _State.WAITING_FOR_SCOPING_IDENTIFIER
                elif c == "(":
                    filter_stack.append(current)
                    state = _State.WAITING_FOR_ANY_EXPRESSION
                elif c == ")":
                    done = close_call(current, c, i)
                    state = _State.DONE_EXPRESSION
                else:
                    continue_call(current, c, i)
                    state = _State.WAITING_FOR_ANY_EXPRESSION

            elif state is _State.WAITING_FOR_SCOPING_IDENTIFIER:
                if c in _WHITESPACE:
                    raise _Invalid(f"Unexpected white space character at index {i}")
                if c == "." or c in _FORBIDDEN_AT_START:
                    raise unexpected(c, i)
                identifier_start = i
                state = _State.SCOPING_IDENTIFIER

            elif state is _State.DONE_EXPRESSION:
                if c in _WHITESPACE:
                    state = _State.DONE_EXPRESSION_PLUS_WHITESPACE
                elif c == ".":
                    base = done
                    state = _State.WAITING_FOR_SCOPING_IDENTIFIER
                elif c == "(":
                    filter_stack.append(done)
                    state = _State.WAITING_FOR_ANY_EXPRESSION
                elif c == ")":
                    done = close_call(done, c, i)
                elif c == ",":
                    continue_call(done, c, i)
                    state = _State.WAITING_FOR_ANY_EXPRESSION
                else:
                    raise unexpected(c, i)

            else:  # DONE_EXPRESSION_PLUS_WHITESPACE
                if c in _WHITESPACE:
                    pass
                elif c == "(":
                    # "a (b)"
                    filter_stack.append(done)
                    state = _State.WAITING_FOR_ANY_EXPRESSION
                elif c == ")":
                    # "a(b )"
                    done = close_call(done, c, i)
                    state = _State.DONE_EXPRESSION
                elif c == ",":
                    # "a(b ,c)"
                    continue_call(done, c, i)
                    state = _State.WAITING_FOR_ANY_EXPRESSION
                else:
                    # "a .b", "a b"
                    raise unexpected(c, i)

        end = len(string)
        if state is _State.WAITING_FOR_SCOPING_IDENTIFIER:
            raise _Invalid(f"Missing identifier at index {end}")
        if filter_stack:
            raise _Invalid(f"Missing `)` character at index {end}")

        if state is _State.WAITING_FOR_ANY_EXPRESSION:
            return None
        if state is _State.LEADING_DOT:
            return _IMPLICIT_ITERATOR
        if state is _State.IDENTIFIER:
            return Identifier(string[identifier_start:])
        if state is _State.SCOPING_IDENTIFIER:
            return Scoped(base, string[identifier_start:])
        return done


_parser = ExpressionParser()


def parse_expression(string: str) -> Expression:
    """Parse an expression string with a shared :class:`ExpressionParser`."""
    return _parser.parse(string)
