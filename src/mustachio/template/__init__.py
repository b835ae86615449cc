"""mustachio Template package: compiled templates and their rendering.

Re-exports the public symbols so that ``from mustachio.template import
Template`` works.
"""

from mustachio.template.core import Template
from mustachio.template.engine import RenderingEngine
from mustachio.template.invocation import ExpressionInvocation
from mustachio.template.tag import SectionTag, Tag, TagType, VariableTag

__all__ = [
    "ExpressionInvocation",
    "RenderingEngine",
    "SectionTag",
    "Tag",
    "TagType",
    "Template",
    "VariableTag",
]
