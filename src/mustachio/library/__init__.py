"""Standard library of filters and rendering hooks.

``StandardLibrary`` maps Mustache names to ready-made values. Register them
in a base context to make them available in every template:

    >>> env = Environment()
    >>> for key, value in StandardLibrary.items():
    ...     env.configuration = env.configuration.register_in_base_context(key, value)

Escapers:
    ``HTMLEscape``, ``URLEscape`` and ``javascriptEscape`` work two ways.
    As filters they escape the rendering of their argument:

        <a href="/search?q={{ URLEscape(query) }}">

    As sections they escape every variable tag inside them:

        {{# URLEscape }}<a href="/search?q={{ query }}&page={{ page }}">{{/ URLEscape }}

Iteration:
    ``each`` exposes the position of items: ``@index``, ``@indexPlusOne``,
    ``@indexIsEven``, ``@first``, ``@last``, and ``@key`` for mappings:

        {{# each(items) }}{{ @indexPlusOne }}. {{ name }}{{/}}

    ``zip`` iterates several collections in parallel, pushing one item of
    each on the context stack:

        {{# zip(names, ages) }}{{ name }}: {{ age }}{{/}}

Logging:
    :class:`Logger` reports how sections render, indented by nesting level.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import reduce
from typing import Any

from mustachio._types import TagType
from mustachio.box import Box
from mustachio.environment.exceptions import ErrorCode, TemplateRuntimeError
from mustachio.functions import (
    DidRenderFunction,
    Filter,
    RenderFunction,
    RenderingFilter,
    VariadicFilter,
    WillRenderFunction,
)
from mustachio.rendering import Rendering, RenderingInfo
from mustachio.template.tag import Tag
from mustachio.utils.html import html_escape as _escape_html
from mustachio.utils.html import javascript_escape as _escape_javascript
from mustachio.utils.html import url_escape as _escape_url

logger = logging.getLogger(__name__)

__all__ = [
    "EscapeHelper",
    "Logger",
    "StandardLibrary",
    "each",
    "html_escape",
    "javascript_escape",
    "url_escape",
    "zip",
]


# ---------------------------------------------------------------------------
# Escapers
# ---------------------------------------------------------------------------


class EscapeHelper:
    """Filter and will-render hook applying a string escaping function.

    The escaped rendering keeps its content type.
    """

    __slots__ = ("_escape",)

    def __init__(self, escape: Callable[[str], str]):
        self._escape = escape

    def _filter(self, rendering: Rendering) -> Rendering:
        return Rendering(self._escape(rendering.string), rendering.content_type)

    def _will_render(self, tag: Tag, box: Box) -> Any:
        if tag.type is TagType.SECTION:
            return box
        return RenderFunction(lambda info: self._filter(box.render(info)))

    @property
    def mustache_box(self) -> Box:
        return Box(
            self,
            filter=RenderingFilter(self._filter),
            will_render=WillRenderFunction(self._will_render),
        )

    def __repr__(self) -> str:
        return f"EscapeHelper({self._escape.__name__})"


html_escape = EscapeHelper(_escape_html)
url_escape = EscapeHelper(_escape_url)
javascript_escape = EscapeHelper(_escape_javascript)


# ---------------------------------------------------------------------------
# Iteration
# ---------------------------------------------------------------------------


def _positioned(item: Box, index: int, count: int, key: str | None = None) -> RenderFunction:
    position: dict[str, Any] = {
        "@index": index,
        "@indexPlusOne": index + 1,
        "@indexIsEven": index % 2 == 0,
        "@first": index == 0,
        "@last": index == count - 1,
    }
    if key is not None:
        position["@key"] = key

    def render(info: RenderingInfo) -> Rendering:
        return item.render(info.replace(context=info.context.extended(position)))

    return RenderFunction(render)


def _each(box: Box) -> Any:
    if box.is_empty:
        return box

    dictionary = box.dictionary_value
    if dictionary is not None:
        count = len(dictionary)
        return [
            _positioned(item, index, count, key)
            for index, (key, item) in enumerate(dictionary.items())
        ]

    array = box.array_value
    if array is not None:
        count = len(array)
        return [_positioned(item, index, count) for index, item in enumerate(array)]

    raise TemplateRuntimeError(
        f"Non-enumerable argument in each filter: {box.value!r}",
        code=ErrorCode.FILTER_ERROR,
    )


def _zip(boxes: list[Box]) -> list[RenderFunction]:
    iterators = []
    for box in boxes:
        if box.is_empty:
            continue
        array = box.array_value
        if array is None:
            raise TemplateRuntimeError(
                f"Non-enumerable argument in zip filter: `{box.value!r}`",
                code=ErrorCode.FILTER_ERROR,
            )
        iterators.append(iter(array))

    render_functions = []
    while True:
        zipped = []
        for iterator in iterators:
            item = next(iterator, None)
            if item is not None:
                zipped.append(item)
        if not zipped:
            break
        render_functions.append(RenderFunction(_zipped_renderer(zipped)))
    return render_functions


def _zipped_renderer(zipped: list[Box]) -> Callable[[RenderingInfo], Rendering]:
    def render(info: RenderingInfo) -> Rendering:
        context = reduce(lambda context, item: context.extended(item), zipped, info.context)
        return info.tag.render(context)

    return render


each = Filter(_each)
zip = VariadicFilter(_zip)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class Logger:
    """Rendering hooks logging sections as they render.

    Push a Logger on the context stack, or register it in a base context,
    to log every section and the output of every tag:

        >>> template.extend_base_context(Logger())
        >>> template.render(items=[1, 2])
        {{#items}} at line 1 will render [1, 2]
          {{.}} at line 1 did render 1 as '1'
          {{.}} at line 1 did render 2 as '2'
        {{#items}} at line 1 did render [1, 2] as '12'

    Args:
        log: Callable receiving each message. Defaults to the
            ``mustachio.library`` logger at INFO level.

    Thread-Safety:
        The indentation level is per instance: use one Logger per rendering
        thread.
    """

    __slots__ = ("_indentation_level", "_log")

    def __init__(self, log: Callable[[str], None] | None = None):
        self._log = log if log is not None else logger.info
        self._indentation_level = 0

    @property
    def _indentation_prefix(self) -> str:
        return "  " * self._indentation_level

    def _will_render(self, tag: Tag, box: Box) -> Box:
        if tag.type is TagType.SECTION:
            self._log(f"{self._indentation_prefix}{tag} will render {box.value!r}")
            self._indentation_level += 1
        return box

    def _did_render(self, tag: Tag, box: Box, string: str | None) -> None:
        if tag.type is TagType.SECTION:
            self._indentation_level -= 1
        if string is not None:
            self._log(f"{self._indentation_prefix}{tag} did render {box.value!r} as {string!r}")

    @property
    def mustache_box(self) -> Box:
        return Box(
            will_render=WillRenderFunction(self._will_render),
            did_render=DidRenderFunction(self._did_render),
        )


StandardLibrary: dict[str, Any] = {
    "HTMLEscape": html_escape,
    "URLEscape": url_escape,
    "javascriptEscape": javascript_escape,
    "each": each,
    "zip": zip,
}
