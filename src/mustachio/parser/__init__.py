"""Expression parsing for mustachio tags."""

from mustachio.parser.expression import ExpressionParser, parse_expression

__all__ = ["ExpressionParser", "parse_expression"]
