"""Tests for the Template and Environment APIs."""

from __future__ import annotations

import gc

import pytest

from mustachio import (
    Configuration,
    ContentType,
    Context,
    DictLoader,
    Environment,
    Rendering,
    Template,
)


class TestRender:
    """Template.render and Template.render_context."""

    def test_value_and_kwargs(self, env: Environment) -> None:
        """Keyword arguments are pushed above the value."""
        t = env.from_string("{{a}}{{b}}")
        assert t.render({"a": 1, "b": 2}, b=3) == "13"

    def test_object_value(self, env: Environment) -> None:
        """Objects expose their attributes."""

        class User:
            def __init__(self) -> None:
                self.name = "Ann"

        assert env.from_string("{{name}}").render(User()) == "Ann"

    def test_value_as_keyword(self, env: Environment) -> None:
        """A key named value can be passed by keyword."""
        t = env.from_string("{{value}}{{other}}")
        assert t.render(value="a", other="b") == "ab"
        assert t.render({"value": "x"}, value="y") == "y"

    def test_no_value(self, env: Environment) -> None:
        """Templates render without data."""
        assert env.from_string("static").render() == "static"

    def test_render_context(self, env: Environment, text_env: Environment) -> None:
        """render_context keeps the content type."""
        assert env.from_string("<{{x}}>").render_context(Context({"x": "&"})) == Rendering(
            "<&amp;>", ContentType.HTML
        )
        assert text_env.from_string("x").render_context(Context()).content_type is ContentType.TEXT

    def test_content_type(self, env: Environment) -> None:
        """The pragma decides the template content type."""
        assert env.from_string("x").content_type is ContentType.HTML
        assert env.from_string("{{%CONTENT_TYPE:TEXT}}x").content_type is ContentType.TEXT

    def test_name(self, env_with_loader: Environment) -> None:
        """Loaded templates know their name."""
        assert env_with_loader.get_template("greeting").name == "greeting"
        assert env_with_loader.from_string("x").name is None

    def test_renders_are_independent(self, env: Environment) -> None:
        """Renderings do not share state."""
        t = env.from_string("{{#items}}{{.}}{{/items}}")
        assert t.render(items=[1]) == "1"
        assert t.render(items=[2, 3]) == "23"


class TestBaseContext:
    """Base contexts of templates and configurations."""

    def test_extend_base_context(self, env: Environment) -> None:
        """Base context values are visible, rendered values win."""
        t = env.from_string("{{a}}{{b}}")
        t.extend_base_context({"a": "base", "b": "base"})
        assert t.render(b="value") == "basevalue"

    def test_register_in_base_context(self, env: Environment) -> None:
        """Registered keys win over rendered values."""
        t = env.from_string("{{foo}}")
        t.register_in_base_context("foo", "bar")
        assert t.render({"foo": "qux"}) == "bar"

    def test_per_template(self, env: Environment) -> None:
        """Base contexts belong to each template."""
        first = env.from_string("{{a}}")
        second = env.from_string("{{a}}")
        first.extend_base_context({"a": 1})
        assert second.render() == ""

    def test_configuration_base_context(self) -> None:
        """Templates start from the configuration base context."""
        configuration = Configuration().extend_base_context({"a": 1}).register_in_base_context("b", 2)
        env = Environment(configuration=configuration)
        assert env.from_string("{{a}}{{b}}").render(b=3) == "12"


class TestConfiguration:
    """Environment configuration."""

    def test_overrides(self) -> None:
        """Keyword arguments override configuration fields."""
        env = Environment(configuration=Configuration(content_type=ContentType.TEXT), tag_delimiters=("<%", "%>"))
        assert env.from_string("<%x%>").render(x="<") == "<"

    def test_configuration_is_immutable(self) -> None:
        """Configurations are frozen."""
        with pytest.raises(AttributeError):
            Configuration().content_type = ContentType.TEXT  # type: ignore[misc]

    def test_changes_before_first_compilation(self) -> None:
        """The configuration can change until a template compiles."""
        env = Environment()
        env.configuration = Configuration(content_type=ContentType.TEXT)
        assert env.from_string("{{x}}").render(x="<") == "<"

    def test_locked_after_first_compilation(self) -> None:
        """Later configuration changes have no effect."""
        env = Environment()
        env.from_string("x")
        env.configuration = Configuration(content_type=ContentType.TEXT)
        assert env.from_string("{{x}}").render(x="<") == "&lt;"
        assert env.locked_configuration.content_type is ContentType.HTML

    def test_repr(self) -> None:
        """repr() shows the loader and the cache size."""
        env = Environment(loader=DictLoader({"a": "x"}))
        env.get_template("a")
        assert repr(env).endswith("templates=1>")


class TestEnvironmentReference:
    """Templates hold a weak reference to their environment."""

    def test_environment(self, env: Environment) -> None:
        """The environment is reachable while alive."""
        assert env.from_string("x").environment is env

    def test_collected_environment(self) -> None:
        """Accessing a collected environment raises RuntimeError."""
        env = Environment()
        template = env.from_string("x")
        del env
        gc.collect()
        with pytest.raises(RuntimeError, match="garbage collected"):
            template.environment
        assert template.render() == "x"

    def test_template_type(self, env: Environment) -> None:
        """from_string returns a Template."""
        assert isinstance(env.from_string("x"), Template)
