"""Template structure nodes.

A compiled template is a :class:`TemplateAST`: an ordered sequence of nodes
plus the content type the template renders as.

    Text            raw template text
    Variable        {{ name }}, {{{ name }}}, {{& name }}
    Section         {{# name }}...{{/ name }}, {{^ name }}...{{/ name }}
    Partial         {{> name }}
    PartialOverride {{< name }}...{{/ name }}
    Block           {{$ name }}...{{/ name }}

Nodes are immutable and shared by every rendering of a template. The only
mutable piece is the TemplateAST slot itself, which starts *undefined* while
a partial that may include itself is being compiled, and is defined exactly
once when compilation completes.

Thread-Safety:
    A defined TemplateAST never changes. Definition happens under the
    environment's cache lock, before the AST is handed to any renderer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mustachio._types import ContentType
from mustachio.nodes.expressions import Expression

if TYPE_CHECKING:
    from mustachio.template.tag import SectionTag, VariableTag


@dataclass(frozen=True, slots=True)
class Text:
    """Raw template text."""

    text: str


@dataclass(frozen=True, slots=True)
class Variable:
    """Variable tag: ``{{ name }}`` (escaping) or ``{{{ name }}}`` (raw)."""

    expression: Expression
    escapes_html: bool
    tag: VariableTag


@dataclass(frozen=True, slots=True)
class Section:
    """Section tag, possibly inverted. Its inner AST lives on the tag."""

    expression: Expression
    inverted: bool
    tag: SectionTag

    @property
    def inner_ast(self) -> TemplateAST:
        return self.tag.inner_ast


@dataclass(frozen=True, slots=True)
class Partial:
    """Partial inclusion: ``{{> name }}``.

    ``name`` is None for partials that do not come from a tag, such as a
    Template object rendered as a section.
    """

    ast: TemplateAST
    name: str | None = None


@dataclass(frozen=True, slots=True)
class PartialOverride:
    """Partial override: ``{{< parent }}...{{/ parent }}``.

    ``child_ast`` holds the overriding blocks, ``parent`` the partial that
    is actually rendered.
    """

    child_ast: TemplateAST
    parent: Partial


@dataclass(frozen=True, slots=True)
class Block:
    """Overridable block: ``{{$ name }}...{{/ name }}``"""

    inner_ast: TemplateAST
    name: str


Node = Text | Variable | Section | Partial | PartialOverride | Block


class TemplateAST:
    """Compiled template: nodes plus content type, or an undefined slot.

    Equality is identity: two compilations of the same source are distinct
    ASTs. Block resolution depends on that to recognize parent templates it
    has already used.

    Example:
        >>> ast = TemplateAST.undefined()
        >>> ast.is_defined
        False
        >>> ast.define_from(TemplateAST([Text("hi")], ContentType.TEXT))
        >>> ast.nodes
        (Text(text='hi'),)
    """

    __slots__ = ("_content_type", "_nodes")

    def __init__(
        self,
        nodes: Sequence[Node] | None = None,
        content_type: ContentType | None = None,
    ):
        if (nodes is None) != (content_type is None):
            raise ValueError("nodes and content_type must be both set or both None")
        self._nodes = tuple(nodes) if nodes is not None else None
        self._content_type = content_type

    @classmethod
    def undefined(cls) -> TemplateAST:
        """Placeholder for a template whose compilation is in progress."""
        return cls()

    @property
    def is_defined(self) -> bool:
        return self._nodes is not None

    @property
    def nodes(self) -> tuple[Node, ...] | None:
        """Nodes, or None while undefined."""
        return self._nodes

    @property
    def content_type(self) -> ContentType | None:
        """Content type, or None while undefined."""
        return self._content_type

    def define_from(self, other: TemplateAST) -> None:
        """Define this placeholder with the content of a compiled AST.

        Raises:
            RuntimeError: If this AST is already defined, or ``other`` is not.
        """
        if self.is_defined:
            raise RuntimeError("TemplateAST is already defined")
        if not other.is_defined:
            raise RuntimeError("Cannot define a TemplateAST from an undefined one")
        self._nodes = other._nodes
        self._content_type = other._content_type

    def __repr__(self) -> str:
        if not self.is_defined:
            return "TemplateAST(<undefined>)"
        from mustachio.generator import TemplateGenerator

        return f"TemplateAST({TemplateGenerator().generate(self)!r})"
