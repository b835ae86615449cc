"""Exceptions for the mustachio template engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Template or partial not resolved by the loader
├── TemplateSyntaxError       # Malformed tag or expression (compile time)
└── TemplateRuntimeError      # Render-time failure
    └── UndefinedError        # Missing identifier in strict mode

Every error carries a kind (see :class:`ErrorKind`), a human-readable
message, and the best-available location: template identifier and line
number. Location is filled in as an error unwinds through tags and partials,
but an inner, more specific location is never overwritten.

Error Messages:
``str(error)`` follows a fixed format so callers can log or compare it:

    ```
    Parse error at line 3 of template page: Unmatched closing tag
    Rendering error at line 1: Could not evaluate {{f(x)}} at line 1: Missing filter
    Template not found: "header"
    ```

``format_compact()`` adds the error code and a source snippet for terminal
display.

Errors raised by user-supplied filters, render functions and hooks that are
not ``TemplateError`` instances pass through the engine unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Kinds and codes
# ---------------------------------------------------------------------------


class ErrorKind(Enum):
    """The three families of template errors."""

    TEMPLATE_NOT_FOUND = "template_not_found"
    PARSE_ERROR = "parse_error"
    RENDER_ERROR = "render_error"


class ErrorCode(Enum):
    """Searchable error codes for mustachio errors.

    Format: M-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (compiler and expression parser),
    RUN (rendering), TPL (template loading)
    """

    # Lexer errors (M-LEX-xxx)
    UNCLOSED_TAG = "M-LEX-001"
    INVALID_SET_DELIMITERS = "M-LEX-002"

    # Parser errors (M-PAR-xxx)
    INVALID_EXPRESSION = "M-PAR-001"
    MISSING_EXPRESSION = "M-PAR-002"
    UNMATCHED_CLOSING_TAG = "M-PAR-003"
    UNCLOSED_SECTION = "M-PAR-004"
    ILLEGAL_TAG = "M-PAR-005"
    LATE_PRAGMA = "M-PAR-006"
    INVALID_NAME = "M-PAR-007"
    CONTENT_TYPE_MISMATCH = "M-PAR-008"

    # Runtime errors (M-RUN-xxx)
    UNDEFINED_VARIABLE = "M-RUN-001"
    MISSING_FILTER = "M-RUN-002"
    NOT_A_FILTER = "M-RUN-003"
    CONTENT_TYPE_MISMATCH_RENDERING = "M-RUN-004"
    FILTER_ERROR = "M-RUN-005"
    RUNTIME_ERROR = "M-RUN-006"

    # Template loading errors (M-TPL-xxx)
    TEMPLATE_NOT_FOUND = "M-TPL-001"
    MISSING_LOADER = "M-TPL-002"
    SYNTAX_ERROR = "M-TPL-003"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int

    def format(self) -> str:
        """Format the snippet with a ``>`` marker on the error line."""
        parts = ["   |"]
        for lineno, content in self.lines:
            marker = ">" if lineno == self.error_line else " "
            parts.append(f"{marker}{lineno:>3} | {content}")
        parts.append("   |")
        return "\n".join(parts)


def build_source_snippet(source: str, error_line: int, *, context_lines: int = 2) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TemplateError(Exception):
    """Base exception for all mustachio template errors.

    All template-related exceptions inherit from this class, enabling
    broad exception handling:

        >>> try:
        ...     template.render(data)
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e)

    Attributes:
        kind: Error family.
        message: Human-readable description, without location.
        template_id: Identifier of the template where the error happened.
        lineno: 1-based line number in that template.
        underlying: Optional wrapped cause.
        source: Template source, when known, for snippets.
        code: Searchable ErrorCode.
    """

    kind: ErrorKind = ErrorKind.RENDER_ERROR
    code: ErrorCode | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        template_id: str | None = None,
        lineno: int | None = None,
        underlying: BaseException | None = None,
        source: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.template_id = template_id
        self.lineno = lineno
        self.underlying = underlying
        self.source = source
        if code is not None:
            self.code = code
        super().__init__(message)

    def locate(
        self,
        template_id: str | None = None,
        lineno: int | None = None,
        source: str | None = None,
    ) -> TemplateError:
        """Attach location metadata that is still missing.

        Location already attached by a deeper failure is kept: a template
        id is only set when none is known, and the line number only along
        with it or when it is missing as well.
        """
        if self.template_id is None and self.lineno is None:
            self.template_id = template_id
            self.lineno = lineno
            if self.source is None:
                self.source = source
        elif self.lineno is None and self.template_id == template_id:
            self.lineno = lineno
        return self

    def with_message(self, message: str) -> TemplateError:
        """Replace the message, keeping kind, location and cause."""
        self.message = message
        self.args = (message,)
        return self

    @property
    def location_description(self) -> str | None:
        if self.template_id is not None:
            if self.lineno is not None:
                return f"line {self.lineno} of template {self.template_id}"
            return f"template {self.template_id}"
        if self.lineno is not None:
            return f"line {self.lineno}"
        return None

    def _prefix(self) -> str:
        location = self.location_description
        label = {
            ErrorKind.PARSE_ERROR: "Parse error",
            ErrorKind.RENDER_ERROR: "Rendering error",
        }.get(self.kind)
        if label is None:
            return ""
        return f"{label} at {location}" if location else label

    def __str__(self) -> str:
        description = self._prefix()
        if self.message:
            description = f"{description}: {self.message}" if description else self.message
        if self.underlying is not None:
            description += f" ({self.underlying})"
        return description

    def format_compact(self) -> str:
        """Format error as a structured, human-readable summary.

        Format::

            M-PAR-003: Parse error at line 2 of template page: Unmatched closing tag
               |
                1 | {{#items}}
            >  2 | {{/item}}
               |

        Returns:
            Multi-line string with error code, message and source snippet.
        """
        header = str(self)
        if self.code:
            header = f"{self.code.value}: {header}"
        parts = [header]
        if self.source and self.lineno:
            parts.append(build_source_snippet(self.source, self.lineno).format())
        return "\n".join(parts)


class TemplateNotFoundError(TemplateError):
    """A template or partial could not be resolved by the loader.

    Example:
        >>> env.get_template("missing")
        TemplateNotFoundError: Template not found: "missing"
    """

    kind = ErrorKind.TEMPLATE_NOT_FOUND
    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Malformed template tag or expression.

    Raised by the lexer, the expression parser and the compiler. The first
    error aborts compilation.

    Attributes:
        empty: True when the offending expression was empty, so callers
            can tell "no expression" from "malformed expression".
    """

    kind = ErrorKind.PARSE_ERROR
    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(self, message: str | None = None, *, empty: bool = False, **kwargs):
        self.empty = empty
        super().__init__(message, **kwargs)


class TemplateRuntimeError(TemplateError):
    """Render-time failure.

    Raised for content-type mismatches in collections, filter misuse, and
    failures reported by the engine's standard library.
    """

    kind = ErrorKind.RENDER_ERROR
    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR


class UndefinedError(TemplateRuntimeError):
    """Missing identifier while the environment runs in strict mode.

    Only raised when ``throw_when_missing`` is enabled; by default missing
    identifiers render as empty.
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE
