"""Tests for Mustache lambdas."""

from __future__ import annotations

import pytest

from mustachio import Environment, Lambda, UndefinedError


class TestSectionLambdas:
    """Lambdas taking the raw section text."""

    def test_wraps_section(self, env: Environment) -> None:
        """The returned string is rendered as a template."""
        bold = Lambda(lambda text: f"<b>{text}</b>")
        t = env.from_string("{{#bold}}Hi {{name}}{{/bold}}")
        assert t.render(bold=bold, name="Ann") == "<b>Hi Ann</b>"

    def test_receives_raw_text(self, env: Environment) -> None:
        """The text is the unrendered section source."""
        seen = []

        def spy(text: str) -> str:
            seen.append(text)
            return ""

        env.from_string("{{#spy}} a {{b}} {{#c}}{{/c}}{{/spy}}").render(spy=Lambda(spy))
        assert seen == [" a {{b}} {{#c}}{{/c}}"]

    def test_custom_delimiters(self, env: Environment) -> None:
        """The returned template is compiled with the delimiters of the section."""
        same = Lambda(lambda text: text + "<%y%>")
        t = env.from_string("{{=<% %>=}}<%#same%>[<%x%>]<%/same%>")
        assert t.render(same=same, x=1, y=2) == "[1]2"

    def test_as_variable(self, env: Environment) -> None:
        """A one-argument lambda in a variable tag renders a placeholder."""
        assert env.from_string("{{l}}").render(l=Lambda(lambda text: text)) == "(Lambda)"

    def test_default_arguments_are_optional(self, env: Environment) -> None:
        """Only required parameters count."""
        upper = Lambda(lambda text, suffix="!": text.upper() + suffix)
        assert env.from_string("{{#upper}}hi{{/upper}}").render(upper=upper) == "HI!"

    def test_text_template_is_not_escaped(self, text_env: Environment) -> None:
        """The returned template keeps the content type of the section."""
        wrap = Lambda(lambda text: "[" + text + "]")
        t = text_env.from_string("{{#wrap}}{{x}}{{/wrap}}|{{x}}")
        assert t.render(wrap=wrap, x="<&>") == "[<&>]|<&>"

    def test_pragma_content_type(self, env: Environment) -> None:
        """A TEXT pragma applies to the returned template too."""
        wrap = Lambda(lambda text: text)
        t = env.from_string("{{%CONTENT_TYPE:TEXT}}{{#wrap}}{{x}}{{/wrap}}")
        assert t.render(wrap=wrap, x="<") == "<"

    def test_strict_mode(self, strict_env: Environment) -> None:
        """Missing identifiers in the returned template raise in strict mode."""
        wrap = Lambda(lambda text: text)
        with pytest.raises(UndefinedError):
            strict_env.from_string("{{#wrap}}{{missing}}{{/wrap}}").render(wrap=wrap)


class TestVariableLambdas:
    """Lambdas without arguments."""

    def test_rendered_as_text(self, env: Environment) -> None:
        """The returned template renders as TEXT, escaped in HTML templates."""
        echo = Lambda(lambda: "{{x}}&")
        t = env.from_string("{{l}}|{{{l}}}")
        assert t.render(l=echo, x="<") == "&lt;&amp;|<&"

    def test_not_escaped_in_text_templates(self, text_env: Environment) -> None:
        """TEXT templates keep the output as is."""
        assert text_env.from_string("{{l}}").render(l=Lambda(lambda: "<{{x}}>"), x=1) == "<1>"

    def test_strict_mode(self, strict_env: Environment) -> None:
        """Missing identifiers in the returned template raise in strict mode."""
        with pytest.raises(UndefinedError):
            strict_env.from_string("{{l}}").render(l=Lambda(lambda: "{{missing}}"))

    def test_as_section(self, env: Environment) -> None:
        """In a section, the lambda renders the section once."""
        t = env.from_string("{{#l}}content {{x}}{{/l}}")
        assert t.render(l=Lambda(lambda: "ignored"), x=1) == "content 1"


class TestArity:
    """Lambda signatures."""

    def test_too_many_arguments(self) -> None:
        """Lambdas take zero or one argument."""
        with pytest.raises(TypeError, match="zero or one argument"):
            Lambda(lambda a, b: "")
