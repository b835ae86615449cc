"""Environment configuration.

A :class:`Configuration` groups the settings that affect how an environment
compiles and renders templates. Configurations are immutable: derive a new
one with :func:`dataclasses.replace` or the helper methods.

Example:
    >>> config = Configuration(content_type=ContentType.TEXT)
    >>> config = config.register_in_base_context("site", {"name": "Docs"})
    >>> env = Environment(DictLoader({"page": "{{site.name}}"}), config)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from mustachio._types import DEFAULT_TAG_DELIMITERS, ContentType, TagDelimiters
from mustachio.context import Context


@dataclass(frozen=True, slots=True)
class Configuration:
    """Settings of an Environment.

    An environment snapshots its configuration when it compiles its first
    template; assigning a new configuration afterwards has no effect on it.

    Attributes:
        content_type: Default content type of templates. HTML templates
            escape the output of ``{{ name }}`` tags; TEXT templates do not.
            Templates can change their own with a CONTENT_TYPE pragma.
        base_context: Context every rendering starts from.
        tag_delimiters: Initial tag delimiters of templates.
        throw_when_missing: Raise UndefinedError for identifiers that cannot
            be resolved, instead of rendering them as empty.
    """

    content_type: ContentType = ContentType.HTML
    base_context: Context = field(default_factory=Context)
    tag_delimiters: TagDelimiters = DEFAULT_TAG_DELIMITERS
    throw_when_missing: bool = False

    def extend_base_context(self, value: Any) -> Configuration:
        """Copy whose base context has ``value`` pushed on top."""
        return dataclasses.replace(self, base_context=self.base_context.extended(value))

    def register_in_base_context(self, key: str, value: Any) -> Configuration:
        """Copy whose base context registers ``key``.

        Registered keys win over the values templates are rendered with.
        """
        return dataclasses.replace(
            self,
            base_context=self.base_context.with_registered_key(key, value),
        )
