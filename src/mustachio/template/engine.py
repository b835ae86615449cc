"""The rendering engine.

:class:`RenderingEngine` walks a compiled TemplateAST against a Context and
returns a :class:`~mustachio.rendering.Rendering`. One engine renders one
AST once; sections, partials and render functions create their own engines.

Tag Rendering:
    For each variable or section tag the engine:

    1. evaluates the tag expression (errors are prefixed with
       "Could not evaluate <tag>: " and located at the tag);
    2. passes the box through every will-render hook, topmost first;
    3. renders the box: variables always render, sections render when
       truthy, inverted sections render their content when falsey;
    4. HTML-escapes TEXT renderings of escaping tags in HTML templates;
    5. reports the result to every did-render hook, topmost last, or None
       when rendering failed.

Content Types:
    A partial, block or partial override whose content type differs from
    the template being rendered is rendered on its own. A TEXT result landing
    in an HTML template is escaped.

Errors:
    Template errors get the location of the innermost tag they cross.
    Exceptions raised by user filters, render functions and hooks that are
    not template errors propagate unchanged.
"""

from __future__ import annotations

from mustachio._types import ContentType, TagType
from mustachio.box import Box, box
from mustachio.context import Context
from mustachio.environment.exceptions import TemplateError
from mustachio.nodes.expressions import Expression
from mustachio.nodes.structure import (
    Block,
    Partial,
    PartialOverride,
    Section,
    TemplateAST,
    Text,
    Variable,
)
from mustachio.rendering import Rendering, RenderingInfo
from mustachio.template.invocation import ExpressionInvocation
from mustachio.template.tag import Tag
from mustachio.utils.html import html_escape


class RenderingEngine:
    """Render one TemplateAST in one Context.

    Example:
        >>> engine = RenderingEngine(template.ast, Context({"name": "Ann"}))
        >>> engine.render()
        Rendering(string='Hello Ann', content_type=<ContentType.HTML: 'html'>)
    """

    __slots__ = ("_ast", "_buffer", "_context", "_content_type")

    def __init__(self, ast: TemplateAST, context: Context):
        self._ast = ast
        self._context = context
        self._content_type = ast.content_type
        self._buffer: list[str] = []

    def render(self) -> Rendering:
        self._buffer = []
        self._render_ast(self._ast, self._context)
        return Rendering("".join(self._buffer), self._content_type)

    def _render_ast(self, ast: TemplateAST, context: Context) -> None:
        if ast.content_type is self._content_type:
            for node in ast.nodes:
                self._render_node(node, context)
            return

        rendering = RenderingEngine(ast, context).render()
        if self._content_type is ContentType.HTML and rendering.content_type is ContentType.TEXT:
            self._buffer.append(html_escape(rendering.string))
        else:
            self._buffer.append(rendering.string)

    def _render_node(self, node: object, context: Context) -> None:
        if isinstance(node, Text):
            self._buffer.append(node.text)
        elif isinstance(node, Variable):
            self._render_tag(node.tag, node.expression, context, escapes_html=node.escapes_html)
        elif isinstance(node, Section):
            self._render_tag(node.tag, node.expression, context, inverted=node.inverted)
        elif isinstance(node, Partial):
            self._render_ast(node.ast, context)
        elif isinstance(node, PartialOverride):
            self._render_ast(node.parent.ast, context.extended_partial_override(node))
        elif isinstance(node, Block):
            self._render_ast(self._resolve_block(node, context).inner_ast, context)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _render_tag(
        self,
        tag: Tag,
        expression: Expression,
        context: Context,
        *,
        escapes_html: bool = True,
        inverted: bool = False,
    ) -> None:
        invocation = ExpressionInvocation(expression, throw_when_missing=tag.throw_when_missing)
        try:
            value = invocation.invoke(context)
        except TemplateError as e:
            message = f"Could not evaluate {tag}: {e.message}" if e.message else f"Could not evaluate {tag}"
            raise e.with_message(message).locate(tag.template_id, tag.lineno, tag.token.source) from None

        for will_render in context.will_render_stack:
            value = box(will_render(tag, value))

        try:
            rendering = self._render_box(value, tag, context, inverted)
        except Exception as e:
            for did_render in context.did_render_stack:
                did_render(tag, value, None)
            if isinstance(e, TemplateError):
                e.locate(tag.template_id, tag.lineno, tag.token.source)
            raise

        string = rendering.string
        if (
            escapes_html
            and rendering.content_type is ContentType.TEXT
            and self._content_type is ContentType.HTML
        ):
            string = html_escape(string)
        self._buffer.append(string)

        for did_render in context.did_render_stack:
            did_render(tag, value, string)

    def _render_box(self, value: Box, tag: Tag, context: Context, inverted: bool) -> Rendering:
        if tag.type is TagType.VARIABLE:
            return value.render(RenderingInfo(tag, context))
        if not inverted and value.bool_value:
            return value.render(RenderingInfo(tag, context))
        if inverted and not value.bool_value:
            return tag.render(context)
        return Rendering("")

    def _resolve_block(self, block: Block, context: Context) -> Block:
        """Find the overriding content of a block.

        Partial overrides are searched topmost first. Each parent template
        supplies at most one override; the last match wins.
        """
        used_parents: list[TemplateAST] = []
        for partial_override in context.partial_override_stack:
            parent_ast = partial_override.parent.ast
            if any(parent_ast is used for used in used_parents):
                continue
            block, modified = self._resolve_in_child(block, partial_override.child_ast)
            if modified:
                used_parents.append(parent_ast)
        return block

    def _resolve_in_child(self, block: Block, child_ast: TemplateAST) -> tuple[Block, bool]:
        modified = False
        for node in child_ast.nodes or ():
            if isinstance(node, Block):
                if node.name == block.name:
                    block, modified = node, True
            elif isinstance(node, PartialOverride):
                block, in_parent = self._resolve_in_child(block, node.parent.ast)
                block, in_child = self._resolve_in_child(block, node.child_ast)
                modified = modified or in_parent or in_child
            elif isinstance(node, Partial):
                block, in_partial = self._resolve_in_child(block, node.ast)
                modified = modified or in_partial
        return block, modified
