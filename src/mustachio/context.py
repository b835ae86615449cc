"""The context stack.

A :class:`Context` is an immutable, persistent stack of boxed values. Sections
push their value; key lookups walk the stack from the top down and return the
first non-empty result:

    >>> context = Context({"name": "parent"}).extended({"age": 3})
    >>> context.mustache_box_for_key("name").value
    'parent'

Pushing returns a new Context and leaves the original untouched, so contexts
can be shared freely between renderings and threads.

Registered Keys:
    A side chain of *registered* values is consulted before the stack.
    Registered keys win over any pushed value, whatever the push order:

    >>> context = Context().with_registered_key("site", "docs").extended({"site": "blog"})
    >>> context.mustache_box_for_key("site").value
    'docs'

Hooks:
    Boxes with a will-render or did-render function hook every tag rendered
    while they sit on the stack. ``will_render_stack`` lists will-render
    hooks topmost first; ``did_render_stack`` lists did-render hooks topmost
    last, so hooks unwind in the reverse order they were entered.

Partial Overrides:
    Rendering a partial override pushes a transparent frame that block tags
    use to find their overriding content. Key lookups and ``top_box`` skip
    these frames.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from mustachio.box import EMPTY_BOX, Box, box

if TYPE_CHECKING:
    from mustachio.nodes.structure import PartialOverride


class Context:
    """Immutable context stack.

    Args:
        value: Optional value for the single frame of the new context.
            ``Context()`` is the empty root context.
    """

    __slots__ = ("_box", "_parent", "_partial_override", "_registered")

    _box: Box | None
    _parent: Context | None
    _partial_override: PartialOverride | None
    _registered: Context | None

    def __init__(self, value: Any = None):
        self._box = None
        self._parent = None
        self._partial_override = None
        self._registered = None
        if value is not None:
            self._box = box(value)
            self._parent = Context()

    @classmethod
    def _frame(
        cls,
        parent: Context | None,
        *,
        box: Box | None = None,
        partial_override: PartialOverride | None = None,
        registered: Context | None = None,
    ) -> Context:
        context = cls.__new__(cls)
        context._box = box
        context._parent = parent
        context._partial_override = partial_override
        context._registered = registered
        return context

    # -- Deriving contexts ---------------------------------------------------

    def extended(self, value: Any) -> Context:
        """New context with ``value`` boxed on top of the stack."""
        return Context._frame(self, box=box(value), registered=self._registered)

    def extended_partial_override(self, partial_override: PartialOverride) -> Context:
        """New context entering a partial override."""
        return Context._frame(
            self,
            partial_override=partial_override,
            registered=self._registered,
        )

    def with_registered_key(self, key: str, value: Any) -> Context:
        """New context where ``key`` resolves to ``value`` before any stack lookup."""
        registered = (self._registered or Context()).extended({key: value})
        return Context._frame(
            self._parent,
            box=self._box,
            partial_override=self._partial_override,
            registered=registered,
        )

    # -- Lookups -------------------------------------------------------------

    def _frames(self):
        context = self
        while context._parent is not None:
            yield context
            context = context._parent

    @property
    def top_box(self) -> Box:
        """The value rendered by ``{{ . }}``."""
        for frame in self._frames():
            if frame._box is not None:
                return frame._box
        return EMPTY_BOX

    def mustache_box_for_key(self, key: str) -> Box:
        """Resolve a key: registered keys first, then the stack top down."""
        if self._registered is not None:
            found = self._registered.mustache_box_for_key(key)
            if not found.is_empty:
                return found
        for frame in self._frames():
            if frame._box is not None:
                found = frame._box.mustache_box_for_key(key)
                if not found.is_empty:
                    return found
        return EMPTY_BOX

    def mustache_box_for_expression(self, string: str) -> Box:
        """Evaluate an expression such as ``user.name`` or ``f(x)``.

        Raises:
            TemplateSyntaxError: If the expression cannot be parsed.
            TemplateRuntimeError: If evaluation fails.
        """
        from mustachio.parser.expression import parse_expression
        from mustachio.template.invocation import ExpressionInvocation

        return ExpressionInvocation(parse_expression(string)).invoke(self)

    # -- Hooks ---------------------------------------------------------------

    @property
    def will_render_stack(self) -> list[Callable[..., Any]]:
        """Will-render hooks, topmost first."""
        return [f._box.will_render for f in self._frames() if f._box is not None and f._box.will_render is not None]

    @property
    def did_render_stack(self) -> list[Callable[..., None]]:
        """Did-render hooks, topmost last."""
        hooks = [f._box.did_render for f in self._frames() if f._box is not None and f._box.did_render is not None]
        hooks.reverse()
        return hooks

    @property
    def partial_override_stack(self) -> list[PartialOverride]:
        """Entered partial overrides, topmost first."""
        return [f._partial_override for f in self._frames() if f._partial_override is not None]

    def __repr__(self) -> str:
        frames = []
        for frame in self._frames():
            frames.append(repr(frame._box) if frame._box is not None else "<partial override>")
        return f"Context({', '.join(frames)})"
