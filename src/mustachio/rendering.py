"""Rendering values exchanged between the engine and render functions.

A :class:`Rendering` is a piece of output tagged with its content type. A
:class:`RenderingInfo` is what a render function receives: the tag being
rendered, the current context, and whether the value is rendered as one item
of a collection.

Example:
    >>> def shout(info: RenderingInfo) -> Rendering:
    ...     rendering = info.tag.render(info.context)
    ...     return Rendering(rendering.string.upper(), rendering.content_type)
    >>> env.from_string("{{#shout}}hi {{name}}{{/shout}}").render(shout=shout, name="bob")
    'HI BOB'
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mustachio._types import ContentType

if TYPE_CHECKING:
    from mustachio.context import Context
    from mustachio.template.tag import Tag


@dataclass(frozen=True, slots=True)
class Rendering:
    """Rendered text and its content type.

    TEXT renderings are HTML-escaped when they land in an HTML template
    through an escaping tag. HTML renderings are emitted as is.
    """

    string: str
    content_type: ContentType = ContentType.TEXT


@dataclass(frozen=True, slots=True)
class RenderingInfo:
    """Arguments of a render function.

    Attributes:
        tag: The tag being rendered.
        context: The context stack at the tag.
        enumeration_item: True when the value is rendered as an item of a
            collection. Numbers, booleans and collections push themselves on
            the context stack only in that case.
    """

    tag: Tag
    context: Context
    enumeration_item: bool = False

    def replace(self, **changes: Any) -> RenderingInfo:
        """Copy with some fields replaced."""
        return dataclasses.replace(self, **changes)
