"""mustachio Template: a compiled template ready for rendering.

A Template pairs a compiled :class:`~mustachio.nodes.TemplateAST` with a base
context. Every rendering starts from the base context, with the rendered
value pushed on top.

Templates as Values:
    Templates can be rendered by other templates, picked at runtime:

    - ``{{ tpl }}`` renders like the partial tag ``{{> tpl }}``;
    - ``{{# tpl }}...{{/ tpl }}`` renders like the partial override tag
      ``{{< tpl }}...{{/ tpl }}``: blocks of the section override blocks of
      the template.

    A TEXT template rendered inside an HTML template is escaped as a whole.

Thread-Safety:
    The compiled AST is immutable and ``render()`` only creates local state.
    ``extend_base_context`` and ``register_in_base_context`` replace the base
    context; configure templates before sharing them between threads.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any

from mustachio._types import ContentType, TagType
from mustachio.box import Box
from mustachio.context import Context
from mustachio.generator import TemplateGenerator
from mustachio.nodes.structure import Partial, PartialOverride, TemplateAST
from mustachio.rendering import Rendering, RenderingInfo
from mustachio.template.engine import RenderingEngine

if TYPE_CHECKING:
    from mustachio.environment import Environment


class Template:
    """Compiled template.

    Created by :meth:`Environment.from_string` and
    :meth:`Environment.get_template`.

    Attributes:
        name: Template name for templates loaded by name, else None.
        base_context: Context all renderings start from.

    Example:
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{ name }}!")
            >>> t.render(name="World")
            'Hello, World!'

            >>> t.render({"name": "World"})
            'Hello, World!'
    """

    __slots__ = ("_ast", "_env_ref", "base_context", "name")

    def __init__(
        self,
        env: Environment,
        ast: TemplateAST,
        base_context: Context,
        name: str | None = None,
    ):
        self._env_ref: weakref.ref[Environment] = weakref.ref(env)
        self._ast = ast
        self.base_context = base_context
        self.name = name

    @property
    def environment(self) -> Environment:
        """The Environment that compiled this template."""
        env = self._env_ref()
        if env is None:
            raise RuntimeError(
                f"Environment has been garbage collected (template: {self.name or '(inline)'})"
            )
        return env

    @property
    def ast(self) -> TemplateAST:
        return self._ast

    @property
    def content_type(self) -> ContentType:
        """Content type of the template and of its renderings."""
        return self._ast.content_type

    def render(self, value: Any = None, /, **kwargs: Any) -> str:
        """Render the template.

        ``value`` is pushed on top of the base context, then ``kwargs`` on
        top of it.

        Args:
            value: Any boxable value, typically a dict or an object.
            **kwargs: Values available by name.

        Raises:
            TemplateError: If rendering fails. Exceptions raised by filters,
                render functions and hooks propagate as they are.
        """
        context = self.base_context
        if value is not None:
            context = context.extended(value)
        if kwargs:
            context = context.extended(kwargs)
        return self.render_context(context).string

    def render_context(self, context: Context) -> Rendering:
        """Render in a given context, keeping the content type.

        Render functions use this to embed a template in their output.
        """
        return RenderingEngine(self._ast, context).render()

    def extend_base_context(self, value: Any) -> None:
        """Push ``value`` on the base context of all later renderings."""
        self.base_context = self.base_context.extended(value)

    def register_in_base_context(self, key: str, value: Any) -> None:
        """Make ``key`` resolve to ``value`` in all later renderings.

        Registered keys win over rendered values:

            >>> t = env.from_string("{{foo}}")
            >>> t.register_in_base_context("foo", "bar")
            >>> t.render({"foo": "qux"})
            'bar'
        """
        self.base_context = self.base_context.with_registered_key(key, value)

    @property
    def mustache_box(self) -> Box:
        """Box rendering the template as a partial or a partial override."""
        ast = self._ast

        def render(info: RenderingInfo) -> Rendering:
            if info.tag.type is TagType.SECTION:
                override = PartialOverride(info.tag.inner_ast, Partial(ast))
                return RenderingEngine(TemplateAST([override], ast.content_type), info.context).render()
            return self.render_context(info.context)

        return Box(self, render=render)

    def __repr__(self) -> str:
        return f"Template({TemplateGenerator().generate(self._ast)!r})"
