"""Template loaders for the mustachio Environment.

Loaders turn template names into template identifiers and identifiers into
source. Partial tags are resolved relative to the template that contains
them, so the loader, not the environment, decides what a name means:

    template_id(name, relative_to) -> str | None
    get_source(template_id) -> str

Built-in Loaders:
- `DictLoader`: Load from an in-memory dictionary (testing/embedded)
- `FileSystemLoader`: Load from a directory tree
- `PackageLoader`: Load from installed Python packages (importlib.resources)
- `FunctionLoader`: Wrap a callable as a loader (quick one-offs)

Naming Rules (file system and package loaders):
    ``{{> card }}`` in ``pages/home`` loads ``pages/card``; ``{{> /card }}``
    loads ``card`` from the root. Names never resolve outside the root.

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def template_id(self, name: str, relative_to: str | None) -> str | None:
            return name

        def get_source(self, template_id: str) -> str:
            row = db.query("SELECT source FROM templates WHERE name = ?", template_id)
            if not row:
                raise TemplateNotFoundError(f'Template not found: "{template_id}"')
            return row.source
    ```

Thread-Safety:
Loaders should be thread-safe for concurrent calls. All built-in loaders
are safe (they hold no mutable state; FunctionLoader delegates to the
user-provided callable).
"""

from __future__ import annotations

import importlib.resources
import os
import posixpath
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol

from mustachio.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    """Source of templates for an Environment."""

    def template_id(self, name: str, relative_to: str | None) -> str | None:
        """Identifier of the template ``name``, referenced from ``relative_to``.

        Returns None when the name does not designate a template.
        """
        ...

    def get_source(self, template_id: str) -> str:
        """Source of a template.

        Raises:
            TemplateNotFoundError: If the template does not exist.
        """
        ...


def _split_name(name: str, relative_to: str | None) -> tuple[str, str | None]:
    """Strip a leading slash, which makes a name absolute."""
    if name.startswith("/"):
        return name[1:], None
    return name, relative_to


class DictLoader:
    """Load templates from an in-memory dictionary.

    Template identifiers are the template names; partial names are never
    relative.

    Example:
            >>> loader = DictLoader({
            ...     "layout": "<main>{{$content}}{{/content}}</main>",
            ...     "page": "{{<layout}}{{$content}}Hi{{/content}}{{/layout}}",
            ... })
            >>> env = Environment(loader=loader)
            >>> env.get_template("page").render()
            '<main>Hi</main>'

    Raises:
        TemplateNotFoundError: If the template name is not in the mapping.
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def template_id(self, name: str, relative_to: str | None) -> str | None:
        return name

    def get_source(self, template_id: str) -> str:
        if template_id not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f'Template not found: "{template_id}"'
            matches = get_close_matches(template_id, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg)
        return self._mapping[template_id]

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class FileSystemLoader:
    """Load templates from a directory tree.

    Template names omit the extension: ``{{> header }}`` loads
    ``header.mustache`` next to the including template. Identifiers are
    absolute file paths.

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> env = Environment(loader=loader)
            >>> env.get_template("pages/about").render(page=page)

    Args:
        path: Root directory. Templates outside it cannot be loaded.
        extension: Template file extension, without the dot. An empty
            extension means names are file names.
        encoding: File encoding (default: utf-8)

    Raises:
        TemplateNotFoundError: If the template file does not exist.
    """

    __slots__ = ("_encoding", "_extension", "_root")

    def __init__(
        self,
        path: str | Path,
        extension: str = "mustache",
        encoding: str = "utf-8",
    ):
        self._root = Path(os.path.abspath(path))
        self._extension = extension
        self._encoding = encoding

    def template_id(self, name: str, relative_to: str | None) -> str | None:
        name, relative_to = _split_name(name, relative_to)
        if not name:
            return relative_to
        filename = f"{name}.{self._extension}" if self._extension else name
        directory = Path(relative_to).parent if relative_to is not None else self._root
        path = Path(os.path.normpath(directory / filename))
        if not path.is_relative_to(self._root):
            return None
        return str(path)

    def get_source(self, template_id: str) -> str:
        """Load template source from the file system."""
        try:
            return Path(template_id).read_text(self._encoding)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise TemplateNotFoundError(f'Template not found: "{template_id}"') from e

    def list_templates(self) -> list[str]:
        """List template names under the root, without extension."""
        pattern = f"*.{self._extension}" if self._extension else "*"
        names = set()
        for path in self._root.rglob(pattern):
            if path.is_file():
                relative = path.relative_to(self._root).as_posix()
                names.add(relative.removesuffix(f".{self._extension}") if self._extension else relative)
        return sorted(names)


class PackageLoader:
    """Load templates from an installed Python package.

    Uses ``importlib.resources`` to locate template files inside a package's
    directory tree, with the same naming rules as FileSystemLoader.
    Identifiers are paths relative to the template directory.

    Example:
            >>> # my_app/
            >>> #   __init__.py
            >>> #   templates/
            >>> #     layout.mustache
            >>> #     pages/
            >>> #       index.mustache
            >>> loader = PackageLoader("my_app", "templates")
            >>> env = Environment(loader=loader)
            >>> env.get_template("pages/index")

    Args:
        package_name: Dotted Python package name (e.g. ``"my_app"``)
        package_path: Subdirectory within the package for templates
            (default: ``"templates"``)
        extension: Template file extension, without the dot.
        encoding: File encoding (default: ``"utf-8"``)

    Raises:
        TemplateNotFoundError: If template not found in package
        ModuleNotFoundError: If ``package_name`` is not installed
    """

    __slots__ = ("_encoding", "_extension", "_package_name", "_package_path")

    def __init__(
        self,
        package_name: str,
        package_path: str = "templates",
        extension: str = "mustache",
        encoding: str = "utf-8",
    ):
        self._package_name = package_name
        self._package_path = package_path
        self._extension = extension
        self._encoding = encoding

    def _get_root(self) -> importlib.resources.abc.Traversable:
        """Get the traversable root for the template directory."""
        root = importlib.resources.files(self._package_name)
        for part in self._package_path.split("/"):
            if part:
                root = root.joinpath(part)
        return root

    def template_id(self, name: str, relative_to: str | None) -> str | None:
        name, relative_to = _split_name(name, relative_to)
        if not name:
            return relative_to
        filename = f"{name}.{self._extension}" if self._extension else name
        directory = posixpath.dirname(relative_to) if relative_to is not None else ""
        template_id = posixpath.normpath(posixpath.join(directory, filename))
        if template_id == ".." or template_id.startswith(("../", "/")):
            return None
        return template_id

    def get_source(self, template_id: str) -> str:
        """Load template source from package resources."""
        resource = self._get_root()
        for part in template_id.split("/"):
            resource = resource.joinpath(part)
        try:
            return resource.read_text(self._encoding)
        except (FileNotFoundError, TypeError, IsADirectoryError) as e:
            raise TemplateNotFoundError(
                f'Template not found: "{template_id}" in package '
                f"'{self._package_name}/{self._package_path}'"
            ) from e


class FunctionLoader:
    """Wrap a callable as a template loader.

    The function takes a template name and returns the source, or ``None``
    if there is no such template. Names are identifiers.

    Example:
            >>> def load(name):
            ...     if name == "greeting":
            ...         return "Hello, {{ name }}!"
            ...     return None
            >>> env = Environment(loader=FunctionLoader(load))
            >>> env.get_template("greeting").render(name="World")
            'Hello, World!'

    Raises:
        TemplateNotFoundError: If ``load_func`` returns ``None``
    """

    __slots__ = ("_load_func",)

    def __init__(self, load_func: Callable[[str], str | None]):
        self._load_func = load_func

    def template_id(self, name: str, relative_to: str | None) -> str | None:
        return name

    def get_source(self, template_id: str) -> str:
        """Call the load function."""
        source = self._load_func(template_id)
        if source is None:
            raise TemplateNotFoundError(f'Template not found: "{template_id}"')
        return source
