"""Function wrappers: filters, render functions, hooks and lambdas.

Templates talk to Python code through five kinds of functions. Wrapping a
callable in one of the classes below tells :func:`mustachio.box.box` which
role it plays:

    FilterFunction          {{ f(x) }}              (box, partial_application) -> value
    RenderFunction          {{ f }}, {{# f }}..     (info) -> Rendering
    WillRenderFunction      hook before each tag    (tag, box) -> value
    DidRenderFunction       hook after each tag     (tag, box, string | None) -> None
    KeyedSubscriptFunction  {{ f.key }}             (key) -> value

Bare functions, lambdas, bound methods and ``functools.partial`` objects
are render functions.

Filter helpers cover the common cases:

- :class:`Filter`: one argument, receives the argument Box.
- :class:`ValueFilter`: one argument, receives the argument's host value.
- :class:`VariadicFilter`: any number of arguments, receives a list of Boxes.
- :class:`RenderingFilter`: transforms the rendering of its argument.
- :class:`Lambda`: Mustache lambdas.

Example:
    >>> env = Environment()
    >>> upper = ValueFilter(lambda s: s.upper())
    >>> env.from_string("{{ upper(name) }}").render(upper=upper, name="ann")
    'ANN'
    >>> total = VariadicFilter(lambda boxes: sum(b.value for b in boxes))
    >>> env.from_string("{{ total(a,b,c) }}").render(total=total, a=1, b=2, c=3)
    '6'
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from mustachio._types import ContentType, TagType
from mustachio.environment.exceptions import ErrorCode, TemplateRuntimeError
from mustachio.rendering import Rendering, RenderingInfo

if TYPE_CHECKING:
    from mustachio.box import Box
    from mustachio.template.tag import Tag


class FilterFunction:
    """A filter: ``func(box, partial_application) -> value``.

    ``partial_application`` is True when more arguments follow, as for ``a``
    in ``f(a,b)``. The returned value is boxed; returning another
    FilterFunction is how filters take several arguments.
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[Box, bool], Any]):
        self._func = func

    def __call__(self, box: Box, partial_application: bool = False) -> Any:
        return self._func(box, partial_application)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._func!r})"


class RenderFunction:
    """A render function: ``func(info) -> Rendering``.

    A plain ``str`` result is taken as a TEXT rendering.
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[RenderingInfo], Rendering | str]):
        self._func = func

    def __call__(self, info: RenderingInfo) -> Rendering:
        result = self._func(info)
        if isinstance(result, str):
            return Rendering(result)
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._func!r})"


class WillRenderFunction:
    """Hook called before each tag renders: ``func(tag, box) -> value``.

    The returned value is boxed and rendered instead of the original box.
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[Tag, Box], Any]):
        self._func = func

    def __call__(self, tag: Tag, box: Box) -> Any:
        return self._func(tag, box)


class DidRenderFunction:
    """Hook called after each tag renders: ``func(tag, box, string)``.

    ``string`` is None when rendering the tag failed.
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[Tag, Box, str | None], None]):
        self._func = func

    def __call__(self, tag: Tag, box: Box, string: str | None) -> None:
        self._func(tag, box, string)


class KeyedSubscriptFunction:
    """Key lookup: ``func(key) -> value``, None for missing keys."""

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[str], Any]):
        self._func = func

    def __call__(self, key: str) -> Any:
        return self._func(key)


# ---------------------------------------------------------------------------
# Filter helpers
# ---------------------------------------------------------------------------


def _too_many_arguments() -> TemplateRuntimeError:
    return TemplateRuntimeError("Too many arguments", code=ErrorCode.FILTER_ERROR)


class Filter(FilterFunction):
    """Single-argument filter receiving the argument Box.

    Raises:
        TemplateRuntimeError: "Too many arguments" when given more than one.
    """

    __slots__ = ()

    def __init__(self, func: Callable[[Box], Any]):
        self._func = func

    def __call__(self, box: Box, partial_application: bool = False) -> Any:
        if partial_application:
            raise _too_many_arguments()
        return self._func(box)


class ValueFilter(Filter):
    """Single-argument filter receiving the argument's host value.

    The value is None for missing keys.
    """

    __slots__ = ()

    def __call__(self, box: Box, partial_application: bool = False) -> Any:
        if partial_application:
            raise _too_many_arguments()
        return self._func(box.value)


class VariadicFilter(FilterFunction):
    """Filter accepting any number of arguments.

    ``f(a,b,c)`` calls ``func([box_a, box_b, box_c])``.
    """

    __slots__ = ("_arguments",)

    def __init__(self, func: Callable[[list[Box]], Any], arguments: tuple[Box, ...] = ()):
        self._func = func
        self._arguments = arguments

    def __call__(self, box: Box, partial_application: bool = False) -> Any:
        arguments = (*self._arguments, box)
        if partial_application:
            return VariadicFilter(self._func, arguments)
        return self._func(list(arguments))


class RenderingFilter(Filter):
    """Filter transforming the rendering of its argument.

    ``{{ f(x) }}`` renders ``x`` as if it were in place of the tag, then
    passes the Rendering to ``func``.

    Example:
        >>> reverse = RenderingFilter(lambda r: Rendering(r.string[::-1], r.content_type))
        >>> env.from_string("{{#reverse(.)}}ab{{/}}").render({"reverse": reverse})
        'ba'
    """

    __slots__ = ()

    def __init__(self, func: Callable[[Rendering], Rendering]):
        self._func = func

    def __call__(self, box: Box, partial_application: bool = False) -> RenderFunction:
        if partial_application:
            raise _too_many_arguments()
        func = self._func
        return RenderFunction(lambda info: func(box.render(info)))


# ---------------------------------------------------------------------------
# Lambdas
# ---------------------------------------------------------------------------


def _required_arity(func: Callable[..., str]) -> int:
    parameters = inspect.signature(func).parameters.values()
    return sum(
        1
        for p in parameters
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    )


class Lambda(RenderFunction):
    """Mustache lambda.

    The behavior depends on the number of arguments ``func`` takes:

    ``func(text) -> str``
        As a section, receives the raw section source; the returned string
        is compiled with the section's delimiters and content type and
        rendered in the current context. As a variable, renders ``(Lambda)``.

    ``func() -> str``
        As a variable, the returned string is compiled as a TEXT template
        and rendered in the current context, so it is escaped in HTML
        templates. As a section, the lambda pushes itself on the context
        stack and the section content renders once.

    Partial tags returned by a lambda cannot be resolved: the returned
    template is compiled by an environment without a loader.

    Example:
        >>> bold = Lambda(lambda text: f"<b>{text}</b>")
        >>> env.from_string("{{#bold}}Hi {{name}}{{/bold}}").render(bold=bold, name="Ann")
        '<b>Hi Ann</b>'
    """

    __slots__ = ("_arity",)

    def __init__(self, func: Callable[..., str]):
        self._func = func
        self._arity = _required_arity(func)
        if self._arity > 1:
            raise TypeError("Lambda functions take zero or one argument")

    def __call__(self, info: RenderingInfo) -> Rendering:
        from mustachio.environment.core import Environment

        tag = info.tag
        if self._arity == 1:
            if tag.type is TagType.VARIABLE:
                return Rendering("(Lambda)")
            source = self._func(tag.inner_template_string)
            env = Environment(
                content_type=tag.inner_ast.content_type,
                tag_delimiters=tag.tag_delimiters,
                throw_when_missing=tag.throw_when_missing,
            )
            return env.from_string(source).render_context(info.context)

        if tag.type is TagType.VARIABLE:
            env = Environment(content_type=ContentType.TEXT, throw_when_missing=tag.throw_when_missing)
            return env.from_string(self._func()).render_context(info.context)
        return tag.render(info.context.extended(self))
