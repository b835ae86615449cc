"""Re-serialization of expressions and compiled templates.

Generators turn an :class:`~mustachio.nodes.Expression` or a
:class:`~mustachio.nodes.TemplateAST` back into Mustache source. They back
the ``repr()`` of expressions, ASTs and templates, and give tests a readable
view of what the compiler produced.

Set-delimiters tags are not preserved: output always uses the delimiters the
generator was created with.

Example:
    >>> ExpressionGenerator().generate(parse_expression("f(a,b).c"))
    'f(a,b).c'
    >>> TemplateGenerator(("<%", "%>")).generate(ast)
    '<%#items%><%.%><%/items%>'
"""

from __future__ import annotations

from mustachio._types import DEFAULT_TAG_DELIMITERS, TagDelimiters
from mustachio.nodes.expressions import (
    Expression,
    FilterCall,
    Identifier,
    ImplicitIterator,
    Scoped,
)
from mustachio.nodes.structure import (
    Block,
    Partial,
    PartialOverride,
    Section,
    TemplateAST,
    Text,
    Variable,
)


class ExpressionGenerator:
    """Serialize expressions to the text parsed by ExpressionParser.

    ``parse(generate(e)) == e`` for every expression the parser produces:
    partial applications are written with commas, and a key read on the
    implicit iterator is written ``.name``.
    """

    __slots__ = ()

    def generate(self, expression: Expression) -> str:
        if isinstance(expression, ImplicitIterator):
            return "."
        if isinstance(expression, Identifier):
            return expression.name
        if isinstance(expression, Scoped):
            if isinstance(expression.base, ImplicitIterator):
                return f".{expression.name}"
            return f"{self.generate(expression.base)}.{expression.name}"
        if isinstance(expression, FilterCall):
            argument = self.generate(expression.argument)
            callee = expression.callee
            if isinstance(callee, FilterCall) and callee.partial_application:
                # f(a) + b -> f(a,b)
                return f"{self.generate(callee)[:-1]},{argument})"
            return f"{self.generate(callee)}({argument})"
        raise TypeError(f"Unknown expression type: {type(expression).__name__}")


class TemplateGenerator:
    """Serialize a compiled TemplateAST back to Mustache source.

    Args:
        tag_delimiters: Delimiters to write tags with.
    """

    __slots__ = ("_close", "_expressions", "_open")

    def __init__(self, tag_delimiters: TagDelimiters = DEFAULT_TAG_DELIMITERS):
        self._open, self._close = tag_delimiters
        self._expressions = ExpressionGenerator()

    def generate(self, ast: TemplateAST) -> str:
        buffer: list[str] = []
        self._generate_ast(ast, buffer)
        return "".join(buffer)

    def _generate_ast(self, ast: TemplateAST, buffer: list[str]) -> None:
        if not ast.is_defined:
            return
        for node in ast.nodes:
            self._generate_node(node, buffer)

    def _tag(self, content: str) -> str:
        return f"{self._open}{content}{self._close}"

    def _generate_node(self, node: object, buffer: list[str]) -> None:
        if isinstance(node, Text):
            buffer.append(node.text)

        elif isinstance(node, Variable):
            expression = self._expressions.generate(node.expression)
            if node.escapes_html:
                buffer.append(self._tag(expression))
            elif (self._open, self._close) == DEFAULT_TAG_DELIMITERS:
                buffer.append(self._tag(f"{{{expression}}}"))
            else:
                buffer.append(self._tag(f"&{expression}"))

        elif isinstance(node, Section):
            expression = self._expressions.generate(node.expression)
            initial = "^" if node.inverted else "#"
            buffer.append(self._tag(f"{initial}{expression}"))
            self._generate_ast(node.inner_ast, buffer)
            buffer.append(self._tag(f"/{expression}"))

        elif isinstance(node, Partial):
            buffer.append(self._tag(f">{node.name or '<null>'}"))

        elif isinstance(node, PartialOverride):
            name = node.parent.name or "<null>"
            buffer.append(self._tag(f"<{name}"))
            self._generate_ast(node.child_ast, buffer)
            buffer.append(self._tag(f"/{name}"))

        elif isinstance(node, Block):
            buffer.append(self._tag(f"${node.name}"))
            self._generate_ast(node.inner_ast, buffer)
            buffer.append(self._tag(f"/{node.name}"))

        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")
