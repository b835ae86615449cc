"""Shared primitive types for mustachio.

Holds the small value types every layer needs: content types, tag types,
lexical token types, tokens, and tag delimiter pairs. Kept dependency-free so the
lexer, compiler and renderer can all import it without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# (open, close) delimiter pair, e.g. ("{{", "}}")
TagDelimiters = tuple[str, str]

DEFAULT_TAG_DELIMITERS: TagDelimiters = ("{{", "}}")


class ContentType(Enum):
    """Content type of a template or of a rendering.

    A TEXT rendering embedded in an HTML template through an escaping
    variable tag is HTML-escaped. An HTML rendering is never escaped.
    """

    TEXT = "text"
    HTML = "html"


class TagType(Enum):
    """Kind of a rendered tag, as seen by render functions and hooks.

    Sections and inverted sections are both SECTION tags.
    """

    VARIABLE = "variable"
    SECTION = "section"


class TokenType(Enum):
    """Lexical token types produced by :func:`mustachio.lexer.tokenize`."""

    TEXT = "text"
    COMMENT = "comment"  # {{! ... }}
    ESCAPED_VARIABLE = "escaped_variable"  # {{ name }}
    UNESCAPED_VARIABLE = "unescaped_variable"  # {{{ name }}}, {{& name }}
    SECTION = "section"  # {{# name }}
    INVERTED_SECTION = "inverted_section"  # {{^ name }}
    CLOSE = "close"  # {{/ name }}
    PARTIAL = "partial"  # {{> name }}
    PARTIAL_OVERRIDE = "partial_override"  # {{< name }}
    BLOCK = "block"  # {{$ name }}
    PRAGMA = "pragma"  # {{% pragma }}
    SET_DELIMITERS = "set_delimiters"  # {{= <% %> =}}


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical token.

    Attributes:
        type: Token type.
        content: Tag content after the tag initial, or the raw text for TEXT.
        lineno: 1-based line of the token start.
        template_id: Identifier of the template the token comes from.
        source: Complete template source.
        start: Offset of the first character of the token in ``source``.
        end: Offset just past the token in ``source``.
        delimiters: Delimiters active when the token was scanned.
    """

    type: TokenType
    content: str
    lineno: int
    template_id: str | None
    source: str
    start: int
    end: int
    delimiters: TagDelimiters = DEFAULT_TAG_DELIMITERS

    @property
    def template_substring(self) -> str:
        """Raw source text of the token, delimiters included."""
        return self.source[self.start : self.end]
