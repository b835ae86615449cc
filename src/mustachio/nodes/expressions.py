"""Expression nodes.

Expressions are the lookup paths found inside tags::

    {{ . }}          ImplicitIterator()
    {{ name }}       Identifier("name")
    {{ a.b }}        Scoped(Identifier("a"), "b")
    {{ f(x) }}       FilterCall(Identifier("f"), Identifier("x"))
    {{ f(x,y) }}     FilterCall(FilterCall(f, x, partial_application=True), y)

Nodes carry no source location, so equality is purely structural: the
compiler relies on it to check that a closing tag matches its opening tag.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, repr=False)
class Expression:
    """Base class for expression nodes."""

    def __repr__(self) -> str:
        from mustachio.generator import ExpressionGenerator

        return f"Expression({ExpressionGenerator().generate(self)})"


@dataclass(frozen=True, slots=True, repr=False)
class ImplicitIterator(Expression):
    """The top of the context stack: ``{{ . }}``"""


@dataclass(frozen=True, slots=True, repr=False)
class Identifier(Expression):
    """Key lookup in the context stack: ``{{ name }}``"""

    name: str


@dataclass(frozen=True, slots=True, repr=False)
class Scoped(Expression):
    """Key lookup in the value of another expression: ``{{ base.name }}``"""

    base: Expression
    name: str


@dataclass(frozen=True, slots=True, repr=False)
class FilterCall(Expression):
    """Filter application: ``{{ callee(argument) }}``

    ``partial_application`` is True for every argument but the last one of a
    multi-argument call, which is parsed as nested single-argument calls.
    """

    callee: Expression
    argument: Expression
    partial_application: bool = False
