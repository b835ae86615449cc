"""The mustachio Environment: configuration, loading and template cache.

An Environment compiles templates from strings or from its loader, and
caches the compiled ASTs of named templates, so each template and partial
is parsed once:

    >>> env = Environment(loader=DictLoader({"hello": "Hello {{name}}!"}))
    >>> env.get_template("hello").render(name="World")
    'Hello World!'

Partials:
    Partial tags are resolved while their template compiles. The cache
    receives an undefined placeholder before a template compiles and the
    placeholder is defined in place when compilation succeeds, so a partial
    that includes itself, directly or not, compiles to a cyclic AST. On
    failure the placeholder is removed, along with every template compiled
    while it was in the cache, since they may refer to it.

Configuration:
    The configuration is snapshotted when the environment compiles its
    first template. Assigning ``env.configuration`` afterwards has no
    effect on that environment.

Thread-Safety:
    Compilation and cache access are serialized by a re-entrant lock
    (partials compile recursively under it). Compiled templates render
    concurrently without locking.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any

from mustachio.compiler.core import TemplateCompiler
from mustachio.environment.config import Configuration
from mustachio.environment.exceptions import ErrorCode, TemplateNotFoundError
from mustachio.environment.loaders import Loader
from mustachio.nodes.structure import TemplateAST
from mustachio.template.core import Template

logger = logging.getLogger(__name__)


class Environment:
    """Template repository: loads, compiles and caches templates.

    Args:
        loader: Source of named templates and partials. Without a loader,
            only ``from_string`` templates without partial tags compile.
        configuration: Compilation and rendering settings.
        **overrides: Configuration fields overriding ``configuration``,
            e.g. ``Environment(content_type=ContentType.TEXT)``.

    Attributes:
        loader: The template loader, or None.
        configuration: Settings for templates compiled from now on, until
            the first compilation locks them.

    Example:
            >>> env = Environment(throw_when_missing=True)
            >>> env.from_string("{{name}}").render()
            UndefinedError: Rendering error at line 1: Could not evaluate {{name}} at line 1: Missing identifier
    """

    def __init__(
        self,
        loader: Loader | None = None,
        configuration: Configuration | None = None,
        **overrides: Any,
    ):
        configuration = configuration or Configuration()
        if overrides:
            configuration = dataclasses.replace(configuration, **overrides)
        self.loader = loader
        self.configuration = configuration
        self._locked_configuration: Configuration | None = None
        self._cache: dict[str, TemplateAST] = {}
        self._lock = threading.RLock()

    @property
    def locked_configuration(self) -> Configuration:
        """The configuration in effect, snapshotted on first use."""
        with self._lock:
            if self._locked_configuration is None:
                self._locked_configuration = self.configuration
            return self._locked_configuration

    # -- Public API ----------------------------------------------------------

    def from_string(self, source: str) -> Template:
        """Compile a template string.

        Partial tags in the string resolve through the loader, relative to
        its root.

        Raises:
            TemplateSyntaxError: If the template is malformed.
            TemplateNotFoundError: If a partial cannot be loaded.
        """
        ast = self.compile(source)
        return Template(self, ast, self.locked_configuration.base_context)

    def get_template(self, name: str) -> Template:
        """Load a template by name.

        Raises:
            TemplateNotFoundError: If the template cannot be loaded.
            TemplateSyntaxError: If the template is malformed.
        """
        ast = self.template_ast(name)
        return Template(self, ast, self.locked_configuration.base_context, name=name)

    def reload_templates(self) -> None:
        """Forget compiled templates: the next loads read fresh sources.

        Templates already returned keep rendering their compiled content.
        """
        with self._lock:
            logger.debug("Clearing %d cached templates", len(self._cache))
            self._cache.clear()

    # -- Repository ----------------------------------------------------------

    def compile(self, source: str, template_id: str | None = None) -> TemplateAST:
        """Compile a template string into a (not cached) TemplateAST."""
        config = self.locked_configuration
        compiler = TemplateCompiler(
            config.content_type,
            self,
            template_id,
            throw_when_missing=config.throw_when_missing,
        )
        with self._lock:
            return compiler.compile(source, config.tag_delimiters)

    def template_ast(self, name: str, relative_to: str | None = None) -> TemplateAST:
        """Compiled AST of a named template, from the cache when possible.

        The returned AST is undefined while the template is compiling, which
        only a partial of that same template can observe.

        Raises:
            TemplateNotFoundError: "Missing loader", or when the loader cannot
                resolve or load the template.
            TemplateSyntaxError: If the template is malformed.
        """
        with self._lock:
            if self.loader is None:
                raise TemplateNotFoundError(
                    "Missing loader",
                    template_id=relative_to,
                    code=ErrorCode.MISSING_LOADER,
                )

            template_id = self.loader.template_id(name, relative_to)
            if template_id is None:
                if relative_to is not None:
                    raise TemplateNotFoundError(
                        f'Template not found: "{name}" from {relative_to}',
                        template_id=relative_to,
                    )
                raise TemplateNotFoundError(f'Template not found: "{name}"')

            ast = self._cache.get(template_id)
            if ast is not None:
                logger.debug("Template cache hit: %s", template_id)
                return ast

            source = self.loader.get_source(template_id)
            ast = TemplateAST.undefined()
            self._cache[template_id] = ast
            logger.debug("Compiling template %s", template_id)
            try:
                ast.define_from(self.compile(source, template_id))
            except Exception:
                self._evict_from(template_id)
                raise
            return ast

    def _evict_from(self, template_id: str) -> None:
        """Remove a failed template and everything cached after it."""
        keys = list(self._cache)
        for key in keys[keys.index(template_id) :]:
            del self._cache[key]

    def __repr__(self) -> str:
        return f"<Environment loader={self.loader!r} templates={len(self._cache)}>"
