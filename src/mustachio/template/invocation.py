"""Expression evaluation.

:class:`ExpressionInvocation` evaluates an Expression against a Context:

    .            the top of the context stack
    name         a context stack lookup
    base.name    a key lookup in the value of ``base``
    f(x)         the filter of ``f`` applied to ``x``, result boxed
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mustachio.box import Box, box
from mustachio.environment.exceptions import (
    ErrorCode,
    TemplateRuntimeError,
    UndefinedError,
)
from mustachio.nodes.expressions import (
    Expression,
    FilterCall,
    Identifier,
    ImplicitIterator,
    Scoped,
)

if TYPE_CHECKING:
    from mustachio.context import Context


class ExpressionInvocation:
    """Evaluate one expression.

    Args:
        expression: The expression to evaluate.
        throw_when_missing: Raise UndefinedError instead of returning the
            empty box when an identifier or key cannot be resolved.

    Raises:
        TemplateRuntimeError: "Missing filter" when a filter call targets a
            missing value, "Not a filter" when it targets a value without
            filter capability.
    """

    __slots__ = ("expression", "throw_when_missing")

    def __init__(self, expression: Expression, *, throw_when_missing: bool = False):
        self.expression = expression
        self.throw_when_missing = throw_when_missing

    def invoke(self, context: Context) -> Box:
        return self._evaluate(self.expression, context)

    def _evaluate(self, expression: Expression, context: Context) -> Box:
        if isinstance(expression, ImplicitIterator):
            return context.top_box

        if isinstance(expression, Identifier):
            return self._check(context.mustache_box_for_key(expression.name))

        if isinstance(expression, Scoped):
            base = self._evaluate(expression.base, context)
            return self._check(base.mustache_box_for_key(expression.name))

        if isinstance(expression, FilterCall):
            callee = self._evaluate(expression.callee, context)
            if callee.filter is None:
                if callee.is_empty:
                    raise TemplateRuntimeError("Missing filter", code=ErrorCode.MISSING_FILTER)
                raise TemplateRuntimeError("Not a filter", code=ErrorCode.NOT_A_FILTER)
            argument = self._evaluate(expression.argument, context)
            return box(callee.filter(argument, expression.partial_application))

        raise TypeError(f"Unknown expression type: {type(expression).__name__}")

    def _check(self, result: Box) -> Box:
        if result.is_empty and self.throw_when_missing:
            raise UndefinedError("Missing identifier")
        return result
