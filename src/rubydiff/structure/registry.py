"""Signature registry: signature -> canonical code object, first writer wins."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

import structlog

from rubydiff.model import CodeObject

log = structlog.get_logger(__name__)


class SignatureRegistry:
    """Insertion-ordered map of every recorded code object, plus the root subset.

    A signature is never overwritten once recorded.  A later declaration
    with the same signature (a reopened class, a redefined method) is
    absorbed into the existing entry.
    """

    def __init__(self) -> None:
        self._objects: dict[str, CodeObject] = {}
        self._roots: dict[str, CodeObject] = {}

    def register(self, obj: CodeObject) -> CodeObject:
        """Record ``obj`` unless its signature is taken; return the canonical object."""
        signature = obj.signature
        existing = self._objects.get(signature)
        if existing is not None:
            log.debug("duplicate_signature", signature=signature)
            return existing

        self._objects[signature] = obj
        parent = obj.parent
        if parent is None:
            self._roots[signature] = obj
        else:
            parent.children.append(obj)
        return obj

    @property
    def code_objects(self) -> Mapping[str, CodeObject]:
        return MappingProxyType(self._objects)

    @property
    def root_objects(self) -> Mapping[str, CodeObject]:
        return MappingProxyType(self._roots)

    def __getitem__(self, signature: str) -> CodeObject:
        return self._objects[signature]

    def __contains__(self, signature: object) -> bool:
        return signature in self._objects

    def __iter__(self) -> Iterator[str]:
        return iter(self._objects)

    def __len__(self) -> int:
        return len(self._objects)
