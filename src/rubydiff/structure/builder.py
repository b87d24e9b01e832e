"""Structure builder: walks a syntax tree and records a logical code model.

The walk is depth-first.  Module and class declarations open a scope that
nested declarations are parented to; methods, singleton methods and
declaration handler members are recorded at the current scope.  Inside
``class << self`` every plain ``def`` becomes a singleton method; once the
block closes, the rest of the walk is back in instance scope.

It can be fooled by metaprogramming and method redefinition, but in most
cases the model is fairly accurate: a redefinition keeps the first
declaration (see ``SignatureRegistry``).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from rubydiff.core.errors import InternalError, StructureError
from rubydiff.model import ClassCode, CodeObject, MethodCode, ModuleCode
from rubydiff.structure.handlers import make_handlers
from rubydiff.structure.nodes import (
    Call,
    ClassDecl,
    MethodDecl,
    ModuleDecl,
    SingletonClass,
    SingletonMethodDecl,
    SyntaxNode,
    iter_children,
)
from rubydiff.structure.registry import SignatureRegistry

if TYPE_CHECKING:
    from rubydiff.config.models import StructureConfig
    from rubydiff.diff.models import ChangeSet

log = structlog.get_logger(__name__)

_Visitor = Callable[["_BuildState", Any, bool], bool]


class StructureModel:
    """Result of one build: the signature registry of a source version."""

    def __init__(self, name: str, registry: SignatureRegistry) -> None:
        self.name = name
        self.registry = registry

    @property
    def code_objects(self) -> Mapping[str, CodeObject]:
        return self.registry.code_objects

    @property
    def root_objects(self) -> Mapping[str, CodeObject]:
        return self.registry.root_objects

    def diff(self, other: StructureModel) -> ChangeSet:
        """Changes from this model (before) to ``other`` (after)."""
        from rubydiff.diff.engine import diff_roots

        return diff_roots(self.root_objects, other.root_objects)

    def __repr__(self) -> str:
        return f"<StructureModel {self.name!r} objects={len(self.registry)}>"


@dataclass
class _BuildState:
    """Mutable state owned by a single build."""

    registry: SignatureRegistry = field(default_factory=SignatureRegistry)
    scope_stack: list[CodeObject] = field(default_factory=list)

    @property
    def scope(self) -> CodeObject | None:
        return self.scope_stack[-1] if self.scope_stack else None


def _require_name(name: object, kind: str) -> str:
    if not isinstance(name, str) or not name:
        raise StructureError.missing_name(kind)
    return name


class StructureBuilder:
    """Builds ``StructureModel`` instances from syntax trees.

    Holds only immutable configuration, so one builder can serve any
    number of independent builds.

    Usage::

        builder = StructureBuilder()
        before = builder.build(old_tree, name="HEAD~1")
        after = builder.build(new_tree, name="HEAD")
        changes = before.diff(after)
    """

    def __init__(self, declaration_handlers: Mapping[str, str] | None = None) -> None:
        self._handlers = make_handlers(declaration_handlers)
        self._visitors: dict[type, _Visitor] = {
            ModuleDecl: self._visit_module,
            ClassDecl: self._visit_class,
            MethodDecl: self._visit_method,
            SingletonMethodDecl: self._visit_singleton_method,
            SingletonClass: self._visit_singleton_class,
            Call: self._visit_call,
        }

    @classmethod
    def from_config(cls, config: StructureConfig) -> StructureBuilder:
        return cls(config.declaration_handlers)

    @property
    def handler_names(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def build(self, tree: SyntaxNode, name: str = "") -> StructureModel:
        return self.build_many([tree], name=name)

    def build_many(self, trees: Iterable[SyntaxNode], name: str = "") -> StructureModel:
        """Build one model from several trees, e.g. every file of a revision.

        Raises:
            StructureError: A recognized declaration has no name.
            InternalError: The scope stack was left unbalanced.
        """
        state = _BuildState()
        for tree in trees:
            self._visit(state, tree, True)
        if state.scope_stack:
            raise InternalError.scope_imbalance(len(state.scope_stack))

        log.debug(
            "build_complete",
            model=name,
            objects=len(state.registry),
            roots=len(state.registry.root_objects),
        )
        return StructureModel(name, state.registry)

    # =========================================================================
    # Traversal
    #
    # Visitors return the instance-scope flag in effect after the node, so a
    # ``class << self`` hands ``True`` back to every later sibling.
    # =========================================================================

    def _visit(self, state: _BuildState, node: SyntaxNode | None, instance_scope: bool) -> bool:
        if node is None:
            return instance_scope
        visitor = self._visitors.get(type(node), self._visit_children)
        return visitor(state, node, instance_scope)

    def _visit_all(
        self,
        state: _BuildState,
        nodes: Iterable[SyntaxNode | None],
        instance_scope: bool,
    ) -> bool:
        for node in nodes:
            instance_scope = self._visit(state, node, instance_scope)
        return instance_scope

    def _visit_children(self, state: _BuildState, node: SyntaxNode, instance_scope: bool) -> bool:
        return self._visit_all(state, iter_children(node), instance_scope)

    def _visit_module(self, state: _BuildState, node: ModuleDecl, instance_scope: bool) -> bool:
        name = _require_name(node.name, "module")
        with self._recorded(state, ModuleCode(name, state.scope, node.body)):
            return self._visit(state, node.body, instance_scope)

    def _visit_class(self, state: _BuildState, node: ClassDecl, instance_scope: bool) -> bool:
        name = _require_name(node.name, "class")
        with self._recorded(state, ClassCode(name, state.scope, node.body)):
            return self._visit_all(state, (node.superclass, node.body), instance_scope)

    def _visit_method(self, state: _BuildState, node: MethodDecl, instance_scope: bool) -> bool:
        name = _require_name(node.name, "method")
        self._record(state, MethodCode(name, state.scope, instance_scope, node.body))
        return self._visit(state, node.body, instance_scope)

    def _visit_singleton_method(
        self,
        state: _BuildState,
        node: SingletonMethodDecl,
        instance_scope: bool,
    ) -> bool:
        name = _require_name(node.name, "singleton method")
        # The receiver (usually ``self``) never changes where the method is recorded.
        instance_scope = self._visit(state, node.receiver, instance_scope)
        self._record(state, MethodCode(name, state.scope, False, node.body))
        return self._visit(state, node.body, instance_scope)

    def _visit_singleton_class(
        self,
        state: _BuildState,
        node: SingletonClass,
        instance_scope: bool,  # noqa: ARG002
    ) -> bool:
        self._visit_all(state, (node.receiver, node.body), False)
        return True

    def _visit_call(self, state: _BuildState, node: Call, instance_scope: bool) -> bool:
        instance_scope = self._visit_all(state, node.args, instance_scope)

        handler = self._handlers.get(node.name)
        if handler is not None:
            for meta in handler.meta_codes(node.args, state.scope):
                self._record(state, meta)
        return instance_scope

    # =========================================================================
    # Registration
    # =========================================================================

    @contextmanager
    def _recorded(self, state: _BuildState, obj: CodeObject) -> Iterator[CodeObject]:
        """Register ``obj`` and keep the canonical entry as scope for the block.

        The canonical entry is the one held by the registry, which is an
        earlier declaration when the signature was already taken.
        """
        canonical = state.registry.register(obj)
        state.scope_stack.append(canonical)
        try:
            yield canonical
        finally:
            state.scope_stack.pop()

    def _record(self, state: _BuildState, obj: CodeObject) -> CodeObject:
        with self._recorded(state, obj) as canonical:
            return canonical
