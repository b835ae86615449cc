"""Template compiler.

Consumes the token stream of a template and builds a
:class:`~mustachio.nodes.TemplateAST`.

The compiler keeps a stack of open scopes (root, section, inverted section,
partial override, block). Opening tags push a scope; closing tags pop it and
append the finished node to the enclosing scope.

Content Type:
    Compilation starts with the configured content type, *unlocked*. A
    ``{{% CONTENT_TYPE:TEXT }}`` or ``{{% CONTENT_TYPE:HTML }}`` pragma may
    change it until the first variable, section, partial, partial override
    or block tag locks it. A later content-type pragma is a syntax error.
    Other pragmas are ignored.

Partials:
    Partial and partial override tags resolve their template through the
    repository (the Environment) while compiling. The repository hands out
    an undefined placeholder for templates being compiled, which is how a
    partial can include itself.

Errors:
    The first error aborts compilation. Errors are located at the offending
    token.

Example:
    >>> compiler = TemplateCompiler(ContentType.HTML, env)
    >>> ast = compiler.compile("{{#items}}{{.}}{{/items}}")
    >>> ast.nodes[0].expression
    Expression(items)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from mustachio._types import (
    DEFAULT_TAG_DELIMITERS,
    ContentType,
    TagDelimiters,
    Token,
    TokenType,
)
from mustachio.environment.exceptions import (
    ErrorCode,
    TemplateError,
    TemplateSyntaxError,
)
from mustachio.lexer import tokenize
from mustachio.nodes.structure import (
    Block,
    Node,
    Partial,
    PartialOverride,
    Section,
    TemplateAST,
    Text,
    Variable,
)
from mustachio.parser.expression import ExpressionParser
from mustachio.template.tag import SectionTag, VariableTag

if TYPE_CHECKING:
    from mustachio.nodes.expressions import Expression

_CONTENT_TYPE_PRAGMA = re.compile(r"^CONTENT_TYPE\s*:\s*(TEXT|HTML)$")


class TemplateRepository(Protocol):
    """What the compiler needs to resolve partials."""

    def template_ast(self, name: str, relative_to: str | None = None) -> TemplateAST: ...


class _ScopeType(Enum):
    ROOT = "root"
    SECTION = "section"
    INVERTED_SECTION = "inverted_section"
    PARTIAL_OVERRIDE = "partial_override"
    BLOCK = "block"


class _Scope:
    __slots__ = ("expression", "name", "nodes", "token", "type")

    def __init__(
        self,
        type_: _ScopeType,
        token: Token | None = None,
        *,
        expression: Expression | None = None,
        name: str | None = None,
    ):
        self.type = type_
        self.token = token
        self.expression = expression
        self.name = name
        self.nodes: list[Node] = []


class TemplateCompiler:
    """Compile template source into a TemplateAST.

    A compiler compiles one template: create a new one per source.

    Args:
        content_type: Default content type of the template.
        repository: Resolves partial names to template ASTs.
        template_id: Identifier of the compiled template, used to resolve
            relative partial names and to locate errors.
        throw_when_missing: Strict lookups for the tags of the template.
    """

    __slots__ = (
        "_content_type",
        "_locked",
        "_parser",
        "_repository",
        "_scopes",
        "_source",
        "_template_id",
        "_throw_when_missing",
    )

    def __init__(
        self,
        content_type: ContentType,
        repository: TemplateRepository,
        template_id: str | None = None,
        *,
        throw_when_missing: bool = False,
    ):
        self._content_type = content_type
        self._locked = False
        self._repository = repository
        self._template_id = template_id
        self._throw_when_missing = throw_when_missing
        self._parser = ExpressionParser()
        self._scopes = [_Scope(_ScopeType.ROOT)]
        self._source = ""

    def compile(
        self,
        source: str,
        delimiters: TagDelimiters = DEFAULT_TAG_DELIMITERS,
    ) -> TemplateAST:
        """Compile a template string.

        Raises:
            TemplateSyntaxError: On the first malformed tag.
            TemplateNotFoundError: When a partial cannot be resolved.
        """
        self._source = source
        for token in tokenize(source, self._template_id, delimiters):
            self._consume(token)

        scope = self._scopes[-1]
        if scope.type is not _ScopeType.ROOT:
            raise self._error("Unclosed Mustache tag", scope.token, ErrorCode.UNCLOSED_SECTION)
        return TemplateAST(scope.nodes, self._content_type)

    # -- Helpers -------------------------------------------------------------

    def _error(self, message: str, token: Token, code: ErrorCode) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            template_id=token.template_id,
            lineno=token.lineno,
            source=self._source,
            code=code,
        )

    def _parse_expression(self, token: Token, *, allow_empty: bool = False) -> Expression | None:
        try:
            return self._parser.parse(token.content)
        except TemplateSyntaxError as e:
            if allow_empty and e.empty:
                return None
            raise e.locate(token.template_id, token.lineno, self._source) from None

    def _parse_name(self, token: Token, kind: str, *, allow_empty: bool = False) -> str | None:
        name = token.content.strip()
        if not name:
            if allow_empty:
                return None
            raise self._error(f"Missing {kind} name", token, ErrorCode.INVALID_NAME)
        if any(c.isspace() for c in name):
            raise self._error(f"Invalid {kind} name", token, ErrorCode.INVALID_NAME)
        return name

    def _resolve_partial(self, name: str, token: Token) -> TemplateAST:
        try:
            return self._repository.template_ast(name, self._template_id)
        except TemplateError as e:
            raise e.locate(token.template_id, token.lineno, self._source) from None

    def _reject_in_partial_override(self, token: Token) -> None:
        if self._scopes[-1].type is _ScopeType.PARTIAL_OVERRIDE:
            raise self._error(
                "Illegal tag inside a partial override tag",
                token,
                ErrorCode.ILLEGAL_TAG,
            )

    def _close_section_ast(self, scope: _Scope) -> TemplateAST:
        return TemplateAST(scope.nodes, self._content_type)

    # -- Token handling ------------------------------------------------------

    def _consume(self, token: Token) -> None:
        scope = self._scopes[-1]
        type_ = token.type

        if type_ is TokenType.TEXT:
            if scope.type is not _ScopeType.PARTIAL_OVERRIDE:
                scope.nodes.append(Text(token.content))

        elif type_ is TokenType.COMMENT or type_ is TokenType.SET_DELIMITERS:
            pass

        elif type_ is TokenType.PRAGMA:
            self._consume_pragma(token)

        elif type_ is TokenType.ESCAPED_VARIABLE or type_ is TokenType.UNESCAPED_VARIABLE:
            self._reject_in_partial_override(token)
            expression = self._parse_expression(token)
            tag = VariableTag(
                self._content_type,
                token,
                throw_when_missing=self._throw_when_missing,
            )
            escapes_html = type_ is TokenType.ESCAPED_VARIABLE
            scope.nodes.append(Variable(expression, escapes_html, tag))
            self._locked = True

        elif type_ is TokenType.SECTION or type_ is TokenType.INVERTED_SECTION:
            self._reject_in_partial_override(token)
            expression = self._parse_expression(token)
            kind = _ScopeType.SECTION if type_ is TokenType.SECTION else _ScopeType.INVERTED_SECTION
            self._scopes.append(_Scope(kind, token, expression=expression))
            self._locked = True

        elif type_ is TokenType.BLOCK:
            name = self._parse_name(token, "block")
            self._scopes.append(_Scope(_ScopeType.BLOCK, token, name=name))
            self._locked = True

        elif type_ is TokenType.PARTIAL_OVERRIDE:
            name = self._parse_name(token, "template")
            self._scopes.append(_Scope(_ScopeType.PARTIAL_OVERRIDE, token, name=name))
            self._locked = True

        elif type_ is TokenType.PARTIAL:
            name = self._parse_name(token, "template")
            ast = self._resolve_partial(name, token)
            scope.nodes.append(Partial(ast, name))
            self._locked = True

        elif type_ is TokenType.CLOSE:
            self._consume_close(token)

    def _consume_pragma(self, token: Token) -> None:
        match = _CONTENT_TYPE_PRAGMA.match(token.content.strip())
        if match is None:
            return
        name = match.group(1)
        if self._locked:
            raise self._error(
                f"CONTENT_TYPE:{name} pragma tag must prepend any Mustache variable, "
                "section, or partial tag.",
                token,
                ErrorCode.LATE_PRAGMA,
            )
        self._content_type = ContentType.TEXT if name == "TEXT" else ContentType.HTML

    def _consume_close(self, token: Token) -> None:
        scope = self._scopes[-1]

        if scope.type is _ScopeType.ROOT:
            raise self._error("Unmatched closing tag", token, ErrorCode.UNMATCHED_CLOSING_TAG)

        if scope.type is _ScopeType.SECTION or scope.type is _ScopeType.INVERTED_SECTION:
            expression = self._parse_expression(token, allow_empty=True)
            if expression is not None and expression != scope.expression:
                raise self._error("Unmatched closing tag", token, ErrorCode.UNMATCHED_CLOSING_TAG)
            inner_ast = self._close_section_ast(scope)
            tag = SectionTag(
                inner_ast,
                scope.token,
                self._source[scope.token.end : token.start],
                throw_when_missing=self._throw_when_missing,
            )
            node: Node = Section(
                scope.expression,
                scope.type is _ScopeType.INVERTED_SECTION,
                tag,
            )

        elif scope.type is _ScopeType.PARTIAL_OVERRIDE:
            name = self._parse_name(token, "template", allow_empty=True)
            if name is not None and name != scope.name:
                raise self._error("Unmatched closing tag", token, ErrorCode.UNMATCHED_CLOSING_TAG)
            parent_ast = self._resolve_partial(scope.name, token)
            if parent_ast.is_defined and parent_ast.content_type is not self._content_type:
                raise self._error("Content type mismatch", token, ErrorCode.CONTENT_TYPE_MISMATCH)
            node = PartialOverride(
                self._close_section_ast(scope),
                Partial(parent_ast, scope.name),
            )

        else:
            name = self._parse_name(token, "block", allow_empty=True)
            if name is not None and name != scope.name:
                raise self._error("Unmatched closing tag", token, ErrorCode.UNMATCHED_CLOSING_TAG)
            node = Block(self._close_section_ast(scope), scope.name)

        self._scopes.pop()
        self._scopes[-1].nodes.append(node)
