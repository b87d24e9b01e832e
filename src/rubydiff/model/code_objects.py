"""Logical model of declared Ruby constructs.

A code object is addressed by its signature, derived from its name, its
variant and its parent's signature:

    Foo::Bar            module or class Bar nested in Foo
    Foo#bar             instance method bar of Foo
    Foo.bar             singleton method bar of Foo
    Foo {reader name}   member generated by ``attr_reader :name`` in Foo

Parents are held through a weak reference; ownership lives in the
registry that recorded the object and in the parent's ``children`` list.
A child outliving its whole tree raises instead of changing signature.
"""

from __future__ import annotations

import weakref
from typing import Any

from rubydiff.core.errors import InternalError


class CodeObject:
    """A declared construct with a name, an optional parent and a body snapshot."""

    __slots__ = ("name", "children", "body", "_parent_ref", "__weakref__")

    def __init__(self, name: str, parent: CodeObject | None = None, body: Any = None) -> None:
        self.name = name
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self.children: list[CodeObject] = []
        # Syntax nodes are frozen, so the snapshot cannot drift after creation.
        self.body = body

    @property
    def parent(self) -> CodeObject | None:
        """The enclosing object.

        Raises:
            InternalError: The parent was garbage collected while this object
                is still in use; its signature can no longer be derived.
        """
        if self._parent_ref is None:
            return None
        parent = self._parent_ref()
        if parent is None:
            raise InternalError.unexpected(f"parent of {self.name} was collected", name=self.name)
        return parent

    @property
    def signature(self) -> str:
        return self.name

    def child_signatures(self) -> dict[str, CodeObject]:
        """Children keyed by signature, in declaration order."""
        return {child.signature: child for child in self.children}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodeObject):
            return NotImplemented
        return (
            type(other) is type(self)
            and other.signature == self.signature
            and other.body == self.body
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.signature))

    def __str__(self) -> str:
        return self.signature

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.signature}>"


class ModuleCode(CodeObject):
    __slots__ = ()

    @property
    def signature(self) -> str:
        parent = self.parent
        if parent is None:
            return self.name
        return f"{parent.signature}::{self.name}"


class ClassCode(ModuleCode):
    __slots__ = ()


class MethodCode(CodeObject):
    """A method; ``is_instance`` picks ``#`` over ``.`` in the signature."""

    __slots__ = ("is_instance",)

    def __init__(
        self,
        name: str,
        parent: CodeObject | None = None,
        is_instance: bool = True,
        body: Any = None,
    ) -> None:
        super().__init__(name, parent, body)
        self.is_instance = is_instance

    @property
    def signature(self) -> str:
        parent = self.parent
        parent_signature = parent.signature if parent is not None else ""
        separator = "#" if self.is_instance else "."
        return f"{parent_signature}{separator}{self.name}"


class MetaCode(CodeObject):
    """A member synthesized from a declarative call such as ``attr_accessor``."""

    __slots__ = ("label",)

    def __init__(self, name: str, parent: CodeObject | None, label: str, body: Any = None) -> None:
        super().__init__(name, parent, body)
        self.label = label

    @property
    def signature(self) -> str:
        parent = self.parent
        parent_signature = parent.signature if parent is not None else ""
        return f"{parent_signature} {{{self.label} {self.name}}}"
