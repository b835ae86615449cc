"""mustachio Environment package: configuration, loaders and errors."""

from mustachio.environment.config import Configuration
from mustachio.environment.core import Environment
from mustachio.environment.exceptions import (
    ErrorCode,
    ErrorKind,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
)
from mustachio.environment.loaders import (
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
    Loader,
    PackageLoader,
)

__all__ = [
    "Configuration",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "ErrorKind",
    "FileSystemLoader",
    "FunctionLoader",
    "Loader",
    "PackageLoader",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UndefinedError",
]
