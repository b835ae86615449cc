"""Tests for the context stack."""

from __future__ import annotations

from mustachio import EMPTY_BOX, Box, Context, DidRenderFunction, WillRenderFunction


class TestStack:
    """Pushing values and looking up keys."""

    def test_empty_context(self) -> None:
        """The root context has no top box and no keys."""
        context = Context()
        assert context.top_box is EMPTY_BOX
        assert context.mustache_box_for_key("a") is EMPTY_BOX

    def test_single_frame(self) -> None:
        """Context(value) has one frame."""
        context = Context({"a": 1})
        assert context.mustache_box_for_key("a").value == 1
        assert context.top_box.value == {"a": 1}

    def test_top_wins(self) -> None:
        """Lookups start from the top of the stack."""
        context = Context({"a": "bottom"}).extended({"a": "top"})
        assert context.mustache_box_for_key("a").value == "top"

    def test_lookup_falls_through(self) -> None:
        """Keys missing from the top frame are looked up below."""
        context = Context({"a": 1}).extended({"b": 2})
        assert context.mustache_box_for_key("a").value == 1
        assert context.mustache_box_for_key("b").value == 2

    def test_falsey_values_stop_lookup(self) -> None:
        """A falsey value found in a frame hides the frames below."""
        context = Context({"a": 1}).extended({"a": 0})
        assert context.mustache_box_for_key("a").value == 0

    def test_extended_does_not_mutate(self) -> None:
        """Pushing returns a new context."""
        base = Context({"a": 1})
        derived = base.extended({"a": 2})
        assert base.mustache_box_for_key("a").value == 1
        assert derived.mustache_box_for_key("a").value == 2

    def test_top_box(self) -> None:
        """top_box is the last pushed value."""
        context = Context().extended([1, 2]).extended("x")
        assert context.top_box.value == "x"

    def test_repr(self) -> None:
        """repr() lists frames from the top."""
        assert repr(Context(1).extended("a")) == "Context(Box('a'), Box(1))"


class TestRegisteredKeys:
    """Registered keys resolve before the stack."""

    def test_registered_key_wins(self) -> None:
        """A registered key hides values pushed later."""
        context = Context().with_registered_key("site", "docs").extended({"site": "blog"})
        assert context.mustache_box_for_key("site").value == "docs"

    def test_registered_key_survives_pushes(self) -> None:
        """Derived contexts keep the registered keys."""
        context = Context({"a": 1}).with_registered_key("k", "v").extended({}).extended([])
        assert context.mustache_box_for_key("k").value == "v"
        assert context.mustache_box_for_key("a").value == 1

    def test_later_registration_wins(self) -> None:
        """Registering a key twice keeps the last value."""
        context = Context().with_registered_key("k", 1).with_registered_key("k", 2)
        assert context.mustache_box_for_key("k").value == 2

    def test_registration_keeps_stack(self) -> None:
        """Registering a key does not change the top box."""
        context = Context("top").with_registered_key("k", "v")
        assert context.top_box.value == "top"


class TestExpressions:
    """Evaluating expression strings against a context."""

    def test_scoped_expression(self) -> None:
        """mustache_box_for_expression evaluates dotted paths."""
        context = Context({"user": {"name": "Ann"}})
        assert context.mustache_box_for_expression("user.name").value == "Ann"

    def test_implicit_iterator(self) -> None:
        """``.`` is the top box."""
        assert Context("x").mustache_box_for_expression(".").value == "x"

    def test_missing(self) -> None:
        """Missing keys evaluate to the empty box."""
        assert Context({}).mustache_box_for_expression("a.b").is_empty


class TestHookStacks:
    """Hooks of boxes on the stack."""

    def test_will_render_topmost_first(self) -> None:
        """will_render_stack starts with the topmost hook."""
        bottom = WillRenderFunction(lambda tag, b: b)
        top = WillRenderFunction(lambda tag, b: b)
        context = Context(bottom).extended({"x": 1}).extended(top)
        stack = context.will_render_stack
        assert len(stack) == 2
        assert stack[0] is top
        assert stack[1] is bottom

    def test_did_render_topmost_last(self) -> None:
        """did_render_stack ends with the topmost hook."""
        bottom = DidRenderFunction(lambda tag, b, s: None)
        top = DidRenderFunction(lambda tag, b, s: None)
        context = Context(bottom).extended(top)
        assert context.did_render_stack == [bottom, top]

    def test_box_with_both_hooks(self) -> None:
        """A box can provide both hooks."""
        hooks = Box(will_render=lambda tag, b: b, did_render=lambda tag, b, s: None)
        context = Context(hooks)
        assert context.will_render_stack == [hooks.will_render]
        assert context.did_render_stack == [hooks.did_render]

    def test_no_hooks(self) -> None:
        """Plain values contribute no hooks."""
        context = Context({"a": 1})
        assert context.will_render_stack == []
        assert context.did_render_stack == []
        assert context.partial_override_stack == []
