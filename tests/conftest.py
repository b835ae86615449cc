"""Pytest configuration and fixtures for mustachio tests."""

import pytest

from mustachio import ContentType, DictLoader, Environment


@pytest.fixture
def env():
    """Create a basic mustachio Environment (HTML content type)."""
    return Environment()


@pytest.fixture
def text_env():
    """Create a mustachio Environment producing TEXT templates."""
    return Environment(content_type=ContentType.TEXT)


@pytest.fixture
def strict_env():
    """Create a mustachio Environment raising on missing identifiers."""
    return Environment(throw_when_missing=True)


@pytest.fixture
def env_with_loader():
    """Create a mustachio Environment with DictLoader and test templates."""
    loader = DictLoader(
        {
            "layout": "<h1>{{$title}}Default title{{/title}}</h1>{{$body}}{{/body}}",
            "page": "{{<layout}}{{$title}}{{name}}{{/title}}{{/layout}}",
            "greeting": "Hello {{name}}!",
            "text": "{{%CONTENT_TYPE:TEXT}}<{{name}}>",
            "node": "{{name}}{{#children}}({{>node}}){{/children}}",
        }
    )
    return Environment(loader=loader)

