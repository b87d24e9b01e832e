"""Tests for change set models."""

from __future__ import annotations

import pytest

from rubydiff.diff.models import ChangeKind, ChangeSet, CodeChange
from rubydiff.model import ClassCode, MethodCode


@pytest.fixture
def change_set() -> ChangeSet:
    foo = ClassCode("Foo")
    bar = MethodCode("bar", foo)
    baz = MethodCode("baz", foo)
    nested = ChangeSet(
        (
            CodeChange("Foo#bar", ChangeKind.UNCHANGED, bar, bar),
            CodeChange("Foo#baz", ChangeKind.ADDED, None, baz),
        )
    )
    gone = ClassCode("Gone")
    return ChangeSet(
        (
            CodeChange("Foo", ChangeKind.MODIFIED, foo, foo, nested),
            CodeChange("Gone", ChangeKind.REMOVED, gone, None),
        )
    )


class TestChangeSet:
    def test_lookup_by_signature(self, change_set: ChangeSet) -> None:
        assert change_set["Gone"].kind is ChangeKind.REMOVED
        assert "Foo" in change_set
        assert "Missing" not in change_set
        with pytest.raises(KeyError):
            change_set["Missing"]

    def test_filters(self, change_set: ChangeSet) -> None:
        assert [c.signature for c in change_set.modified] == ["Foo"]
        assert [c.signature for c in change_set.removed] == ["Gone"]
        assert change_set.added == []
        assert change_set.has_changes

    def test_walk_is_depth_first(self, change_set: ChangeSet) -> None:
        assert [(d, c.signature) for d, c in change_set.walk()] == [
            (0, "Foo"),
            (1, "Foo#bar"),
            (1, "Foo#baz"),
            (0, "Gone"),
        ]

    def test_to_dict(self, change_set: ChangeSet) -> None:
        assert change_set.to_dict() == [
            {
                "signature": "Foo",
                "change": "modified",
                "type": "ClassCode",
                "children": [
                    {"signature": "Foo#bar", "change": "unchanged", "type": "MethodCode"},
                    {"signature": "Foo#baz", "change": "added", "type": "MethodCode"},
                ],
            },
            {"signature": "Gone", "change": "removed", "type": "ClassCode"},
        ]

    def test_default_children_empty(self) -> None:
        change = CodeChange("X", ChangeKind.REMOVED, ClassCode("X"), None)
        assert len(change.children) == 0

    def test_unchanged_only_has_no_changes(self) -> None:
        cls = ClassCode("X")
        assert not ChangeSet((CodeChange("X", ChangeKind.UNCHANGED, cls, cls),)).has_changes
