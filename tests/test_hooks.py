"""Tests for will-render and did-render hooks."""

from __future__ import annotations

import pytest

from mustachio import (
    Box,
    DidRenderFunction,
    Environment,
    Tag,
    TagType,
    WillRenderFunction,
)


class TestWillRender:
    """Will-render hooks replace the value of tags."""

    def test_replace_variables(self, env: Environment) -> None:
        """A hook on the stack sees every tag inside the section."""

        def shout(tag: Tag, box: Box):
            if tag.type is TagType.VARIABLE and isinstance(box.value, str):
                return box.value.upper()
            return box

        t = env.from_string("{{name}} {{#shout}}{{name}} {{#items}}{{.}}{{/items}}{{/shout}}")
        result = t.render(shout=WillRenderFunction(shout), name="ann", items=["x", "y"])
        assert result == "ann ANN XY"

    def test_base_context_hook(self, env: Environment) -> None:
        """Hooks in the base context apply to the whole template."""
        t = env.from_string("{{a}}-{{b}}")
        t.extend_base_context(WillRenderFunction(lambda tag, box: "*" if box.is_empty else box))
        assert t.render(a="A") == "A-*"

    def test_hook_receives_tag(self, env: Environment) -> None:
        """Hooks receive the tag being rendered."""
        seen = []

        def spy(tag: Tag, box: Box) -> Box:
            seen.append(str(tag))
            return box

        t = env.from_string("{{#spy}}\n{{a}}{{#b}}{{/b}}{{/spy}}")
        t.render(spy=WillRenderFunction(spy))
        assert seen == ["{{a}} at line 2", "{{#b}} at line 2"]

    def test_hook_order(self, env: Environment) -> None:
        """Will-render hooks run topmost first, did-render hooks topmost last."""
        calls = []

        def hooks(name: str) -> Box:
            def will_render(tag, box):
                if tag.type is TagType.VARIABLE:
                    calls.append(f"will {name}")
                return box

            def did_render(tag, box, string):
                if tag.type is TagType.VARIABLE:
                    calls.append(f"did {name}")

            return Box(will_render=will_render, did_render=did_render)

        t = env.from_string("{{#outer}}{{#inner}}{{x}}{{/inner}}{{/outer}}")
        t.render(outer=hooks("outer"), inner=hooks("inner"), x=1)
        assert calls == ["will inner", "will outer", "did outer", "did inner"]


class TestDidRender:
    """Did-render hooks observe rendered tags."""

    def test_rendered_strings(self, env: Environment) -> None:
        """Did-render hooks receive the final, escaped string."""
        rendered = []
        t = env.from_string("{{#spy}}{{a}}{{#s}}{{b}}{{/s}}{{/spy}}")
        spy = DidRenderFunction(lambda tag, box, string: rendered.append((tag.type, string)))
        t.render(spy=spy, a="<", s=True, b="2")
        assert rendered == [
            (TagType.VARIABLE, "&lt;"),
            (TagType.VARIABLE, "2"),
            (TagType.SECTION, "2"),
        ]

    def test_failure_reports_none(self, env: Environment) -> None:
        """A failing tag is reported with None before the error propagates."""
        rendered = []

        def boom(info):
            raise RuntimeError("boom")

        t = env.from_string("{{#spy}}{{boom}}{{/spy}}")
        spy = DidRenderFunction(lambda tag, box, string: rendered.append(string))
        with pytest.raises(RuntimeError, match="boom"):
            t.render(spy=spy, boom=boom)
        assert rendered == [None]

    def test_hooks_do_not_apply_to_their_own_tag(self, env: Environment) -> None:
        """A hook is not on the stack while its own tag renders."""
        rendered = []
        spy = DidRenderFunction(lambda tag, box, string: rendered.append(str(tag)))
        env.from_string("{{#spy}}{{/spy}}").render(spy=spy)
        assert rendered == []
