"""Declaration handlers for declarative calls such as ``attr_accessor``."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

import structlog

from rubydiff.config.models import DEFAULT_DECLARATION_HANDLERS
from rubydiff.model import CodeObject, MetaCode
from rubydiff.structure.nodes import String, Symbol, SyntaxNode

log = structlog.get_logger(__name__)


class AccessorHandler:
    """Synthesizes one labelled meta member per literal name argument."""

    __slots__ = ("label",)

    def __init__(self, label: str) -> None:
        self.label = label

    def meta_codes(self, args: Iterable[SyntaxNode], scope: CodeObject | None) -> list[MetaCode]:
        codes: list[MetaCode] = []
        for arg in args:
            name = name_for_arg(arg)
            if name is None:
                log.debug("declaration_arg_skipped", label=self.label, arg=type(arg).__name__)
                continue
            codes.append(MetaCode(name, scope, self.label))
        return codes

    def __repr__(self) -> str:
        return f"AccessorHandler({self.label!r})"


def name_for_arg(arg: SyntaxNode) -> str | None:
    """Literal name carried by a declaration argument, or None if it is computed."""
    if isinstance(arg, Symbol | String):
        return arg.value
    return None


def make_handlers(labels: Mapping[str, str] | None = None) -> Mapping[str, AccessorHandler]:
    """Build a read-only call name -> handler map (defaults when ``labels`` is None)."""
    if labels is None:
        labels = DEFAULT_DECLARATION_HANDLERS
    return MappingProxyType({name: AccessorHandler(label) for name, label in labels.items()})


DEFAULT_HANDLERS = make_handlers()
