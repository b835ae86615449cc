"""Tags as seen by render functions and rendering hooks.

Every Variable and Section node of a compiled template owns one tag. Render
functions use the tag to render the section content in a context of their
choice; hooks use it to tell what is being rendered.

Example:
    >>> def twice(info):
    ...     if info.tag.type is TagType.SECTION:
    ...         once = info.tag.render(info.context)
    ...         return Rendering(once.string * 2, once.content_type)
    ...     return Rendering("")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mustachio._types import ContentType, TagDelimiters, TagType, Token
from mustachio.rendering import Rendering

if TYPE_CHECKING:
    from mustachio.context import Context
    from mustachio.nodes.structure import TemplateAST

__all__ = ["SectionTag", "Tag", "TagType", "VariableTag"]


class Tag:
    """Base class for variable and section tags.

    Attributes:
        type: VARIABLE or SECTION.
        token: The opening token of the tag.
        throw_when_missing: Whether missing identifiers in the tag expression
            raise UndefinedError.
    """

    __slots__ = ("throw_when_missing", "token")

    type: TagType

    def __init__(self, token: Token, *, throw_when_missing: bool = False):
        self.token = token
        self.throw_when_missing = throw_when_missing

    @property
    def inner_template_string(self) -> str:
        """Raw template source between the opening and closing tags."""
        return ""

    @property
    def tag_delimiters(self) -> TagDelimiters:
        """Delimiters active where the tag was written."""
        return self.token.delimiters

    @property
    def template_id(self) -> str | None:
        return self.token.template_id

    @property
    def lineno(self) -> int:
        return self.token.lineno

    def render(self, context: Context) -> Rendering:
        """Render the tag content in the given context."""
        raise NotImplementedError

    def __str__(self) -> str:
        substring = self.token.template_substring
        if self.template_id is not None:
            return f"{substring} at line {self.lineno} of template {self.template_id}"
        return f"{substring} at line {self.lineno}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


class VariableTag(Tag):
    """``{{ name }}``, ``{{{ name }}}`` or ``{{& name }}``.

    Variable tags have no content: rendering one yields an empty string of
    the content type of the template that contains it.
    """

    __slots__ = ("content_type",)

    type = TagType.VARIABLE

    def __init__(
        self,
        content_type: ContentType,
        token: Token,
        *,
        throw_when_missing: bool = False,
    ):
        super().__init__(token, throw_when_missing=throw_when_missing)
        self.content_type = content_type

    def render(self, context: Context) -> Rendering:
        return Rendering("", self.content_type)


class SectionTag(Tag):
    """``{{# name }}...{{/ name }}`` or ``{{^ name }}...{{/ name }}``

    Attributes:
        inner_ast: Compiled section content.
    """

    __slots__ = ("_inner_template_string", "inner_ast")

    type = TagType.SECTION

    def __init__(
        self,
        inner_ast: TemplateAST,
        token: Token,
        inner_template_string: str,
        *,
        throw_when_missing: bool = False,
    ):
        super().__init__(token, throw_when_missing=throw_when_missing)
        self.inner_ast = inner_ast
        self._inner_template_string = inner_template_string

    @property
    def inner_template_string(self) -> str:
        return self._inner_template_string

    def render(self, context: Context) -> Rendering:
        from mustachio.template.engine import RenderingEngine

        return RenderingEngine(self.inner_ast, context).render()
