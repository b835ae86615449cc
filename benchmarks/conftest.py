from __future__ import annotations

import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
from pathlib import Path

import pytest

from mustachio import DictLoader, Environment

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)

LAYOUT = """\
<!DOCTYPE html>
<html>
<head><title>{{$ title }}{{ site.name }}{{/ title }}</title></head>
<body>
  {{> nav }}
  <main>{{$ content }}{{/ content }}</main>
</body>
</html>
"""

NAV = """\
<nav>{{# site.links }}<a href="{{ url }}">{{ label }}</a>{{/ site.links }}</nav>
"""

PAGE = """\
{{< layout }}
{{$ title }}{{ page.title }} | {{ site.name }}{{/ title }}
{{$ content }}
  <h1>{{ page.title }}</h1>
  {{# posts }}
  <article>
    <h2>{{ title }}</h2>
    <p>{{ summary }}</p>
    {{# tags.count }}<ul>{{# tags }}<li>{{ . }}</li>{{/ tags }}</ul>{{/ tags.count }}
    {{^ published }}<em>draft</em>{{/ published }}
  </article>
  {{/ posts }}
{{/ content }}
{{/ layout }}
"""


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "mustachio": _version("mustachio"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def page_sources() -> dict[str, str]:
    return {"layout": LAYOUT, "nav": NAV, "page": PAGE}


@pytest.fixture(scope="session")
def mustachio_env(page_sources: dict[str, str]) -> Environment:
    return Environment(loader=DictLoader(page_sources))


def _make_context(post_count: int) -> dict[str, object]:
    return {
        "site": {
            "name": "Benchmarks",
            "links": [{"url": f"/{i}", "label": f"Link {i}"} for i in range(5)],
        },
        "page": {"title": "Posts"},
        "posts": [
            {
                "title": f"Post <{i}>",
                "summary": "Lorem ipsum & dolor sit amet " * 3,
                "tags": [f"tag{j}" for j in range(i % 4)],
                "published": i % 3 != 0,
            }
            for i in range(post_count)
        ],
    }


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return _make_context(10)


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return _make_context(500)
