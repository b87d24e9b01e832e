"""Data models for structural diff.

Change sets are immutable and ordered: entries appear in the order the
engine reports them, and can also be looked up by signature.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rubydiff.model import CodeObject


class ChangeKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"
    MODIFIED = "modified"


@dataclass(frozen=True, slots=True)
class CodeChange:
    """Classification of one signature across two models."""

    signature: str
    kind: ChangeKind
    before: CodeObject | None
    after: CodeObject | None
    children: ChangeSet = field(default_factory=lambda: ChangeSet())

    @property
    def object_type(self) -> str:
        obj = self.after if self.after is not None else self.before
        return type(obj).__name__ if obj is not None else "unknown"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "signature": self.signature,
            "change": self.kind.value,
            "type": self.object_type,
        }
        if self.children:
            result["children"] = self.children.to_dict()
        return result


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """Ordered, signature-keyed collection of ``CodeChange`` entries."""

    changes: tuple[CodeChange, ...] = ()
    # Root objects of both models; nested entries derive signatures through them.
    _owners: tuple[CodeObject, ...] = field(default=(), repr=False, compare=False)

    def __iter__(self) -> Iterator[CodeChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def __bool__(self) -> bool:
        return bool(self.changes)

    def __getitem__(self, signature: str) -> CodeChange:
        for change in self.changes:
            if change.signature == signature:
                return change
        raise KeyError(signature)

    def __contains__(self, signature: object) -> bool:
        return any(change.signature == signature for change in self.changes)

    @property
    def signatures(self) -> list[str]:
        return [change.signature for change in self.changes]

    def of_kind(self, kind: ChangeKind) -> list[CodeChange]:
        return [change for change in self.changes if change.kind is kind]

    @property
    def added(self) -> list[CodeChange]:
        return self.of_kind(ChangeKind.ADDED)

    @property
    def removed(self) -> list[CodeChange]:
        return self.of_kind(ChangeKind.REMOVED)

    @property
    def modified(self) -> list[CodeChange]:
        return self.of_kind(ChangeKind.MODIFIED)

    @property
    def unchanged(self) -> list[CodeChange]:
        return self.of_kind(ChangeKind.UNCHANGED)

    @property
    def has_changes(self) -> bool:
        return any(change.kind is not ChangeKind.UNCHANGED for change in self.changes)

    def walk(self, depth: int = 0) -> Iterator[tuple[int, CodeChange]]:
        """Depth-first (depth, change) pairs over this set and all nested sets."""
        for change in self.changes:
            yield depth, change
            yield from change.children.walk(depth + 1)

    def to_dict(self) -> list[dict[str, Any]]:
        return [change.to_dict() for change in self.changes]
