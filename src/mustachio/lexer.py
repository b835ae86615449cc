"""Mustache lexer.

Scans a template string into :class:`~mustachio._types.Token` values. The
lexer is a small character-by-character state machine:

    START ──text──► TEXT ──open──► TAG ──close──► START
      │                 │
      │                 ├──{{{──► UNESCAPED_TAG ──}}}──► START
      │                 └──{{=──► SET_DELIMITERS_TAG ──=}}──► START
      └─────────(same transitions from START)

Triple mustaches (``{{{ }}}``) are only recognized with the standard
``{{ }}`` delimiters. A set-delimiters tag switches the delimiters used for
the rest of the scan; it never affects how a compiled template is
re-serialized.

No whitespace is stripped around standalone tags: text tokens carry the
template text verbatim.

Example:
    >>> [t.type.value for t in tokenize("Hi {{name}}!")]
    ['text', 'escaped_variable', 'text']
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from mustachio._types import DEFAULT_TAG_DELIMITERS, TagDelimiters, Token, TokenType
from mustachio.environment.exceptions import ErrorCode, TemplateSyntaxError

# Tag initial → token type. Anything else is an escaped variable.
_TAG_INITIALS = {
    "!": TokenType.COMMENT,
    "#": TokenType.SECTION,
    "^": TokenType.INVERTED_SECTION,
    "$": TokenType.BLOCK,
    "/": TokenType.CLOSE,
    ">": TokenType.PARTIAL,
    "<": TokenType.PARTIAL_OVERRIDE,
    "&": TokenType.UNESCAPED_VARIABLE,
    "%": TokenType.PRAGMA,
}


class _State(Enum):
    START = 0
    TEXT = 1
    TAG = 2
    UNESCAPED_TAG = 3
    SET_DELIMITERS_TAG = 4


class _Delimiters:
    """Derived delimiter strings for one delimiter pair."""

    __slots__ = ("close", "open", "pair", "set_end", "set_start", "unescaped_end", "unescaped_start")

    def __init__(self, pair: TagDelimiters):
        self.pair = pair
        self.open, self.close = pair
        standard = pair == DEFAULT_TAG_DELIMITERS
        self.unescaped_start = "{{{" if standard else None
        self.unescaped_end = "}}}" if standard else None
        self.set_start = f"{self.open}="
        self.set_end = f"={self.close}"


def tokenize(
    source: str,
    template_id: str | None = None,
    delimiters: TagDelimiters = DEFAULT_TAG_DELIMITERS,
) -> Iterator[Token]:
    """Yield the tokens of a template string.

    Args:
        source: Template source.
        template_id: Identifier attached to tokens and errors.
        delimiters: Initial tag delimiters.

    Raises:
        TemplateSyntaxError: On an unclosed tag or an invalid set-delimiters
            tag. Tokens before the error have already been yielded.
    """
    d = _Delimiters(delimiters)
    state = _State.START
    start = 0
    start_lineno = 1
    lineno = 1
    i = 0
    end = len(source)

    def token(type_: TokenType, content: str, stop: int) -> Token:
        return Token(type_, content, start_lineno, template_id, source, start, stop, d.pair)

    while i < end:
        c = source[i]

        if state is _State.START or state is _State.TEXT:
            if c == "\n":
                if state is _State.START:
                    state, start, start_lineno = _State.TEXT, i, lineno
                lineno += 1
                i += 1
                continue

            opener = None
            if d.unescaped_start and source.startswith(d.unescaped_start, i):
                opener = (_State.UNESCAPED_TAG, d.unescaped_start)
            elif source.startswith(d.set_start, i):
                opener = (_State.SET_DELIMITERS_TAG, d.set_start)
            elif source.startswith(d.open, i):
                opener = (_State.TAG, d.open)

            if opener is None:
                if state is _State.START:
                    state, start, start_lineno = _State.TEXT, i, lineno
                i += 1
                continue

            if state is _State.TEXT and start != i:
                yield token(TokenType.TEXT, source[start:i], i)
            state, start, start_lineno = opener[0], i, lineno
            i += len(opener[1])
            continue

        if c == "\n":
            lineno += 1
            i += 1
            continue

        if state is _State.TAG:
            if source.startswith(d.close, i):
                initial_index = start + len(d.open)
                initial = source[initial_index] if initial_index < i else ""
                stop = i + len(d.close)
                type_ = _TAG_INITIALS.get(initial)
                if type_ is None:
                    yield token(TokenType.ESCAPED_VARIABLE, source[initial_index:i], stop)
                else:
                    yield token(type_, source[initial_index + 1 : i], stop)
                state = _State.START
                i = stop
                continue

        elif state is _State.UNESCAPED_TAG:
            if source.startswith(d.unescaped_end, i):
                stop = i + len(d.unescaped_end)
                content = source[start + len(d.unescaped_start) : i]
                yield token(TokenType.UNESCAPED_VARIABLE, content, stop)
                state = _State.START
                i = stop
                continue

        elif state is _State.SET_DELIMITERS_TAG:
            if source.startswith(d.set_end, i):
                content = source[start + len(d.set_start) : i]
                new_delimiters = content.split()
                if len(new_delimiters) != 2:
                    raise TemplateSyntaxError(
                        "Invalid set delimiters tag",
                        template_id=template_id,
                        lineno=start_lineno,
                        source=source,
                        code=ErrorCode.INVALID_SET_DELIMITERS,
                    )
                stop = i + len(d.set_end)
                yield token(TokenType.SET_DELIMITERS, content, stop)
                d = _Delimiters((new_delimiters[0], new_delimiters[1]))
                state = _State.START
                i = stop
                continue

        i += 1

    if state is _State.TEXT:
        yield token(TokenType.TEXT, source[start:end], end)
    elif state is not _State.START:
        raise TemplateSyntaxError(
            "Unclosed Mustache tag",
            template_id=template_id,
            lineno=start_lineno,
            source=source,
            code=ErrorCode.UNCLOSED_TAG,
        )
