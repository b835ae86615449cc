"""mustachio: Mustache templates for Python, with filters and template inheritance.

A pure-Python implementation of the Mustache template language, extended
with filters, template inheritance, rendering hooks, and content types.

Quickstart:
    >>> from mustachio import Environment
    >>> env = Environment()
    >>> template = env.from_string("Hello, {{ name }}!")
    >>> template.render(name="World")
    'Hello, World!'

File-based templates:
    >>> from mustachio import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> template = env.get_template("index")
    >>> template.render(page=page, site=site)

Architecture:
Template Source → Lexer → Compiler → TemplateAST → RenderingEngine → str

Pipeline stages:
1. **Lexer**: Tokenizes template source, following set-delimiters tags
2. **Compiler**: Parses tag expressions and builds the TemplateAST,
   resolving partials through the Environment
3. **RenderingEngine**: Walks the AST against a Context stack of Boxes

Values:
Every value is converted into a :class:`Box`, which tells the engine how to
look up keys, test truthiness, render, and filter. Dicts, lists, strings,
numbers and plain objects box automatically; implement ``mustache_box`` to
customize.

Language:
- ``{{ name }}``, ``{{{ name }}}``, ``{{& name }}``: variables
- ``{{# name }}..{{/ name }}``, ``{{^ name }}..{{/ name }}``: sections
- ``{{> partial }}``: partials, resolved relative to the including template
- ``{{< layout }}{{$ block }}..{{/ block }}{{/ layout }}``: inheritance
- ``{{ f(x, y) }}``: filters
- ``{{% CONTENT_TYPE:TEXT }}``: content-type pragma
- ``{{=<% %>=}}``: set delimiters
- ``{{! comment }}``

Thread-Safety:
Compiled templates are immutable and render with local state only; a single
template renders concurrently from any number of threads. Environments
serialize compilation with a lock.

Strict Mode:
Missing keys render as empty strings. With ``throw_when_missing=True``
missing identifiers raise ``UndefinedError`` instead:

    >>> Environment(throw_when_missing=True).from_string("{{ missing }}").render()
    UndefinedError: Rendering error at line 1: Could not evaluate {{ missing }} at line 1: Missing identifier

"""

# The environment package must load first: it pulls in the value model,
# which imports mustachio.environment.exceptions.
from mustachio.environment import (
    Configuration,
    DictLoader,
    Environment,
    ErrorCode,
    ErrorKind,
    FileSystemLoader,
    FunctionLoader,
    Loader,
    PackageLoader,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
)
from mustachio._types import ContentType, TagDelimiters, TagType, Token, TokenType
from mustachio.box import EMPTY_BOX, Box, MustacheBoxable, box
from mustachio.context import Context
from mustachio.environment.exceptions import SourceSnippet, build_source_snippet
from mustachio.functions import (
    DidRenderFunction,
    Filter,
    FilterFunction,
    KeyedSubscriptFunction,
    Lambda,
    RenderFunction,
    RenderingFilter,
    ValueFilter,
    VariadicFilter,
    WillRenderFunction,
)
from mustachio.library import StandardLibrary
from mustachio.rendering import Rendering, RenderingInfo
from mustachio.template import Tag, Template
from mustachio.utils.html import html_escape

__version__ = "0.1.0"

__all__ = [
    "EMPTY_BOX",
    "Box",
    "Configuration",
    "ContentType",
    "Context",
    "DictLoader",
    "DidRenderFunction",
    "Environment",
    "ErrorCode",
    "ErrorKind",
    "FileSystemLoader",
    "Filter",
    "FilterFunction",
    "FunctionLoader",
    "KeyedSubscriptFunction",
    "Lambda",
    "Loader",
    "MustacheBoxable",
    "PackageLoader",
    "RenderFunction",
    "Rendering",
    "RenderingFilter",
    "RenderingInfo",
    "SourceSnippet",
    "StandardLibrary",
    "Tag",
    "TagDelimiters",
    "TagType",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UndefinedError",
    "ValueFilter",
    "VariadicFilter",
    "WillRenderFunction",
    "__version__",
    "box",
    "build_source_snippet",
    "html_escape",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'mustachio' has no attribute {name!r}")
