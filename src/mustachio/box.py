"""The Box value model.

Every value the engine touches is a :class:`Box`: a single class holding
optional capabilities instead of a class hierarchy.

    value             the host value, if any
    bool_value        truthiness for sections and inverted sections
    keyed_subscript   key lookup: {{ value.key }} and the context stack
    filter            {{ value(argument) }}
    render            how {{ value }} and {{# value }}..{{/ value }} render
    will_render       hook run before every tag while on the context stack
    did_render        hook run after every tag while on the context stack

:func:`box` converts host values with a fixed dispatch order:

1. None is the empty box, a Box is returned unchanged.
2. Objects with a ``mustache_box`` attribute provide their own box.
3. Function wrappers from :mod:`mustachio.functions` fill the matching
   capability; bare functions, bound methods and ``functools.partial``
   objects are render functions.
4. Scalars: bool, numbers, str, and value-like types (bytes, dates, UUIDs,
   paths, enums).
5. Mappings.
6. Sets.
7. Named tuples are objects; other iterables are arrays.
8. Objects with attributes expose their public, non-callable attributes.
9. Anything else is logged and boxed as empty.

Example:
    >>> box({"name": "Ann"}).mustache_box_for_key("name").value
    'Ann'
    >>> box([]).bool_value
    False
    >>> box(None) is EMPTY_BOX
    True

Thread-Safety:
    Boxes are never mutated after construction.
"""

from __future__ import annotations

import datetime
import functools
import inspect
import logging
import numbers
import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence, Set
from enum import Enum
from pathlib import PurePath
from typing import Any, Protocol, runtime_checkable

from mustachio._types import TagType
from mustachio.environment.exceptions import ErrorCode, TemplateRuntimeError
from mustachio.functions import (
    DidRenderFunction,
    FilterFunction,
    KeyedSubscriptFunction,
    RenderFunction,
    WillRenderFunction,
)
from mustachio.rendering import Rendering, RenderingInfo

logger = logging.getLogger(__name__)

# Host values boxed as opaque values: rendered with str(), no keys.
_VALUE_TYPES = (bytes, bytearray, datetime.date, datetime.time, datetime.timedelta, uuid.UUID, PurePath, Enum)


class Box:
    """A boxed value.

    A Box built without value, keyed subscript, filter, render function or
    hooks is empty. Empty boxes are falsey, render as empty strings, and let
    context lookups fall through to the next frame.

    Attributes:
        value: Host value, or None.
        is_empty: True when the box provides nothing.
        bool_value: Truthiness. Defaults to ``not is_empty``.
        keyed_subscript: ``(key) -> value`` or None.
        filter: ``(box, partial_application) -> value`` or None.
        render: ``(info) -> Rendering``. Always set: boxes without a custom
            render function render their value.
        will_render: ``(tag, box) -> value`` or None.
        did_render: ``(tag, box, string | None) -> None`` or None.
    """

    __slots__ = (
        "_array_value",
        "_dictionary_value",
        "bool_value",
        "did_render",
        "filter",
        "is_empty",
        "keyed_subscript",
        "render",
        "value",
        "will_render",
    )

    def __init__(
        self,
        value: Any = None,
        *,
        bool_value: bool | None = None,
        keyed_subscript: Callable[[str], Any] | None = None,
        filter: Callable[[Box, bool], Any] | None = None,
        render: Callable[[RenderingInfo], Rendering] | None = None,
        will_render: Callable[..., Any] | None = None,
        did_render: Callable[..., None] | None = None,
        array_value: Callable[[], list[Box]] | None = None,
        dictionary_value: Callable[[], dict[str, Box]] | None = None,
    ):
        self.value = value
        self.keyed_subscript = keyed_subscript
        self.filter = filter
        self.will_render = will_render
        self.did_render = did_render
        self.is_empty = (
            value is None
            and keyed_subscript is None
            and filter is None
            and render is None
            and will_render is None
            and did_render is None
        )
        self.bool_value = (not self.is_empty) if bool_value is None else bool_value
        self.render = render if render is not None else self._render_value
        self._array_value = array_value
        self._dictionary_value = dictionary_value

    def _render_value(self, info: RenderingInfo) -> Rendering:
        if info.tag.type is TagType.VARIABLE:
            return Rendering("" if self.value is None else str(self.value))
        return info.tag.render(info.context.extended(self))

    def mustache_box_for_key(self, key: str) -> Box:
        """Box for ``key``, or the empty box."""
        if self.keyed_subscript is None:
            return EMPTY_BOX
        return box(self.keyed_subscript(key))

    @property
    def array_value(self) -> list[Box] | None:
        """Boxed items, for boxes of lists, tuples and sets."""
        if self._array_value is None:
            return None
        return self._array_value()

    @property
    def dictionary_value(self) -> dict[str, Box] | None:
        """Boxed items, for boxes of mappings. Non-string keys are dropped."""
        if self._dictionary_value is None:
            return None
        return self._dictionary_value()

    def __repr__(self) -> str:
        if self.is_empty:
            return "Box(<empty>)"
        if self.value is None:
            return "Box(<function>)"
        return f"Box({self.value!r})"


EMPTY_BOX = Box()


@runtime_checkable
class MustacheBoxable(Protocol):
    """Values that know how to box themselves.

    Example:
        >>> class User:
        ...     def __init__(self, name):
        ...         self.name = name
        ...     @property
        ...     def mustache_box(self):
        ...         return box({"name": self.name, "initial": self.name[0]})
    """

    @property
    def mustache_box(self) -> Box: ...


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


def _render_items(items: Iterable[Any], info: RenderingInfo) -> Rendering:
    """Concatenate the renderings of collection items.

    All items must render with the same content type.
    """
    info = info.replace(enumeration_item=True)
    buffer: list[str] = []
    content_type = None
    for item in items:
        rendering = box(item).render(info)
        if content_type is None:
            content_type = rendering.content_type
        elif rendering.content_type is not content_type:
            raise TemplateRuntimeError(
                "Content type mismatch",
                code=ErrorCode.CONTENT_TYPE_MISMATCH_RENDERING,
            )
        buffer.append(rendering.string)

    if content_type is None:
        # Empty collection, rendered by a variable tag.
        return info.tag.render(info.context)
    return Rendering("".join(buffer), content_type)


def _collection_box(items: Sequence[Any] | Set[Any], value: Any, *, ordered: bool) -> Box:
    def keyed_subscript(key: str) -> Any:
        if key == "count":
            return len(items)
        if key == "first":
            return next(iter(items), None)
        if key == "last" and ordered:
            return items[-1] if items else None
        return None

    def render(info: RenderingInfo) -> Rendering:
        if info.enumeration_item:
            # {{# list_of_lists }}..{{/ list_of_lists }}
            return info.tag.render(info.context.extended(collection))
        return _render_items(items, info)

    collection = Box(
        value,
        bool_value=len(items) > 0,
        keyed_subscript=keyed_subscript,
        render=render,
        array_value=lambda: [box(item) for item in items],
    )
    return collection


def _mapping_box(mapping: Mapping[Any, Any]) -> Box:
    def dictionary_value() -> dict[str, Box]:
        result = {}
        for key, item in mapping.items():
            if isinstance(key, str):
                result[key] = box(item)
            else:
                logger.warning("Dropping non-string key %r of a boxed mapping", key)
        return result

    return Box(
        mapping,
        bool_value=True,
        keyed_subscript=mapping.get,
        dictionary_value=dictionary_value,
    )


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def _number_box(number: numbers.Number) -> Box:
    string = ("1" if number else "0") if isinstance(number, bool) else str(number)

    def render(info: RenderingInfo) -> Rendering:
        if info.tag.type is TagType.VARIABLE:
            return Rendering(string)
        if info.enumeration_item:
            return info.tag.render(info.context.extended(number_box))
        # {{# number }}..{{/ number }} is a conditional
        return info.tag.render(info.context)

    number_box = Box(number, bool_value=number != 0, render=render)
    return number_box


def _string_box(string: str) -> Box:
    def keyed_subscript(key: str) -> Any:
        if key == "length":
            return len(string)
        return None

    return Box(string, bool_value=len(string) > 0, keyed_subscript=keyed_subscript)


def _object_box(obj: Any) -> Box:
    def keyed_subscript(key: str) -> Any:
        if key.startswith("_"):
            return None
        try:
            attribute = getattr(obj, key)
        except AttributeError:
            return None
        if inspect.isroutine(attribute):
            return None
        return attribute

    return Box(obj, keyed_subscript=keyed_subscript)


def _is_render_function(value: Any) -> bool:
    return (
        inspect.isfunction(value)
        or inspect.ismethod(value)
        or inspect.isbuiltin(value)
        or isinstance(value, functools.partial)
    )


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def box(value: Any) -> Box:
    """Box a host value.

    See the module documentation for the dispatch order.
    """
    if value is None:
        return EMPTY_BOX
    if isinstance(value, Box):
        return value

    boxable = getattr(value, "mustache_box", None)
    if isinstance(boxable, Box):
        return boxable

    if isinstance(value, FilterFunction):
        return Box(filter=value)
    if isinstance(value, RenderFunction):
        return Box(render=value)
    if isinstance(value, WillRenderFunction):
        return Box(will_render=value)
    if isinstance(value, DidRenderFunction):
        return Box(did_render=value)
    if isinstance(value, KeyedSubscriptFunction):
        return Box(keyed_subscript=value)
    if _is_render_function(value):
        return Box(render=RenderFunction(value))

    # bool before numbers: bool is a subclass of int
    if isinstance(value, (bool, numbers.Number)):
        return _number_box(value)
    if isinstance(value, str):
        return _string_box(value)
    if isinstance(value, _VALUE_TYPES):
        return Box(value, bool_value=bool(value))

    if isinstance(value, Mapping):
        return _mapping_box(value)
    if isinstance(value, Set):
        return _collection_box(value, value, ordered=False)
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return _object_box(value)
    if isinstance(value, Sequence):
        return _collection_box(value, value, ordered=True)
    if isinstance(value, Iterable) and not isinstance(value, type):
        items = list(value)
        return _collection_box(items, items, ordered=True)

    if hasattr(value, "__dict__") or hasattr(value, "__slots__"):
        return _object_box(value)

    logger.warning("Value of type %s cannot be boxed; rendering it as empty", type(value).__name__)
    return EMPTY_BOX
