"""Compilation and rendering throughput.

Run with:
    pytest benchmarks/test_benchmark_render.py -v --benchmark-only
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mustachio import DictLoader, Environment, StandardLibrary
from mustachio.lexer import tokenize

if TYPE_CHECKING:
    from pytest_benchmark.fixture import BenchmarkFixture

# Lots of raw text between tags
DATA_HEAVY = (
    """
This is a large block of static HTML content that doesn't contain any
template tags. It simulates a real-world template where most of the
content is static HTML with occasional dynamic parts.

{{ variable_1 }}

More static content here. The lexer needs to scan through all of this
to find the next tag.

{{ variable_2 }}
"""
    * 10
)

# Many tags, little text
TAG_DENSE = "{{ a }}{{ b }}{{{ c }}}{{# x }}{{ d }}{{/ x }}{{! note }}" * 50


@pytest.mark.benchmark(group="lexer:tokenize")
@pytest.mark.parametrize(
    "template,name",
    [
        ("{{ name }}", "minimal"),
        (DATA_HEAVY, "data-heavy"),
        (TAG_DENSE, "tag-dense"),
    ],
)
def test_tokenize(benchmark: BenchmarkFixture, template: str, name: str) -> None:
    """Full tokenization throughput."""
    result = benchmark(lambda: list(tokenize(template)))
    assert result


@pytest.mark.benchmark(group="compile")
def test_compile_page(benchmark: BenchmarkFixture, page_sources: dict[str, str]) -> None:
    """Cold compilation of a page with its layout and partial."""
    def run() -> None:
        Environment(loader=DictLoader(page_sources)).get_template("page")

    benchmark(run)


@pytest.mark.benchmark(group="render:page")
@pytest.mark.parametrize("size", ["small", "large"])
def test_render_page(
    benchmark: BenchmarkFixture,
    mustachio_env: Environment,
    size: str,
    request: pytest.FixtureRequest,
    environment_metadata: dict[str, object],
) -> None:
    """Render an inherited page with nested sections."""
    context = request.getfixturevalue(f"{size}_context")
    template = mustachio_env.get_template("page")
    output = benchmark(template.render, context)
    assert "&lt;" in output


@pytest.mark.benchmark(group="render:filters")
def test_render_each(benchmark: BenchmarkFixture, mustachio_env: Environment) -> None:
    """each() adds a context frame per item."""
    template = mustachio_env.from_string("{{# each(items) }}{{ @index }}:{{ . }}{{^ @last }},{{/}}{{/}}")
    for key, value in StandardLibrary.items():
        template.register_in_base_context(key, value)
    output = benchmark(template.render, items=list(range(200)))
    assert output.startswith("0:0,1:1")
