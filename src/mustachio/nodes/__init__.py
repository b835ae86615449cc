"""AST nodes for mustachio: expressions and template structure."""

from mustachio.nodes.expressions import (
    Expression,
    FilterCall,
    Identifier,
    ImplicitIterator,
    Scoped,
)
from mustachio.nodes.structure import (
    Block,
    Node,
    Partial,
    PartialOverride,
    Section,
    TemplateAST,
    Text,
    Variable,
)

__all__ = [
    "Block",
    "Expression",
    "FilterCall",
    "Identifier",
    "ImplicitIterator",
    "Node",
    "Partial",
    "PartialOverride",
    "Scoped",
    "Section",
    "TemplateAST",
    "Text",
    "Variable",
]
