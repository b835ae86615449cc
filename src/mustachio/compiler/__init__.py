"""Template compilation: token stream to TemplateAST."""

from mustachio.compiler.core import TemplateCompiler, TemplateRepository

__all__ = ["TemplateCompiler", "TemplateRepository"]
