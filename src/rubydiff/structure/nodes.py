"""Syntax tree vocabulary consumed by the structure builder.

Parsers (see ``rubydiff.parsing``) lower their concrete trees into these
nodes.  Six kinds are recognized by the builder; every other construct is
a generic ``Node`` the builder only recurses through.

All nodes are frozen: sequences are converted to tuples on construction,
so a subtree can be kept as a body snapshot and compared structurally.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


def _freeze(value: Any) -> Any:
    if isinstance(value, list | tuple):
        return tuple(_freeze(v) for v in value)
    return value


@dataclass(frozen=True, slots=True)
class Node:
    """Any construct without structural meaning (expressions, statements, literals)."""

    kind: str
    children: tuple[SyntaxNode | None, ...] = ()
    value: str | int | float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _freeze(self.children))


@dataclass(frozen=True, slots=True)
class ModuleDecl:
    name: str | None
    body: SyntaxNode | None = None


@dataclass(frozen=True, slots=True)
class ClassDecl:
    name: str | None
    superclass: SyntaxNode | None = None
    body: SyntaxNode | None = None


@dataclass(frozen=True, slots=True)
class MethodDecl:
    """``def name ... end``"""

    name: str | None
    body: SyntaxNode | None = None


@dataclass(frozen=True, slots=True)
class SingletonMethodDecl:
    """``def receiver.name ... end``"""

    receiver: SyntaxNode | None
    name: str | None
    body: SyntaxNode | None = None


@dataclass(frozen=True, slots=True)
class SingletonClass:
    """``class << receiver ... end``"""

    receiver: SyntaxNode | None
    body: SyntaxNode | None = None


@dataclass(frozen=True, slots=True)
class Call:
    """A call without an explicit receiver, e.g. ``attr_reader :name``."""

    name: str
    args: tuple[SyntaxNode, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _freeze(self.args))


@dataclass(frozen=True, slots=True)
class Symbol:
    """A literal symbol, ``:name`` or ``:"name"`` without interpolation."""

    value: str


@dataclass(frozen=True, slots=True)
class String:
    """A string literal without interpolation."""

    value: str


SyntaxNode = (
    Node
    | ModuleDecl
    | ClassDecl
    | MethodDecl
    | SingletonMethodDecl
    | SingletonClass
    | Call
    | Symbol
    | String
)

_CHILD_FIELDS: dict[type, tuple[str, ...]] = {
    ModuleDecl: ("body",),
    ClassDecl: ("superclass", "body"),
    MethodDecl: ("body",),
    SingletonMethodDecl: ("receiver", "body"),
    SingletonClass: ("receiver", "body"),
    Symbol: (),
    String: (),
}


def iter_children(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield the direct child nodes of ``node`` in source order, skipping gaps."""
    if isinstance(node, Node):
        children: tuple[Any, ...] = node.children
    elif isinstance(node, Call):
        children = node.args
    else:
        children = tuple(getattr(node, name) for name in _CHILD_FIELDS[type(node)])
    for child in children:
        if child is not None:
            yield child


def block(*statements: SyntaxNode) -> Node:
    """Build a statement sequence node, the usual shape of a declaration body."""
    return Node("block", statements)
