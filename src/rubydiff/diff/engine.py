"""Pure structural diff engine.

Compares the root objects of two models (before vs after) by exact
signature and classifies each signature:

- added: only in after
- removed: only in before
- unchanged: in both, equal objects, and every child unchanged
- modified: in both, but the body or any child differs; carries the
  nested change set of the children

No similarity matching: a renamed declaration is one removal plus one
addition.  Inputs are never mutated.  Every change set keeps the root
objects of both sides alive, so a nested set detached from its model
still resolves signatures.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from rubydiff.diff.models import ChangeKind, ChangeSet, CodeChange
from rubydiff.model import CodeObject

log = structlog.get_logger(__name__)


def diff_roots(
    before: Mapping[str, CodeObject],
    after: Mapping[str, CodeObject],
) -> ChangeSet:
    """Compute the change set between two root registries.

    Args:
        before: signature -> root object of the old version, in declaration order
        after: signature -> root object of the new version, in declaration order

    Returns:
        ChangeSet ordered by ``before`` (removed/modified/unchanged), then
        the signatures only in ``after`` (added).
    """
    owners = (*before.values(), *after.values())
    changes = _diff_objects(before, after, owners)
    log.debug(
        "diff_complete",
        added=len(changes.added),
        removed=len(changes.removed),
        modified=len(changes.modified),
        unchanged=len(changes.unchanged),
    )
    return changes


def _diff_objects(
    before: Mapping[str, CodeObject],
    after: Mapping[str, CodeObject],
    owners: tuple[CodeObject, ...],
) -> ChangeSet:
    changes: list[CodeChange] = []

    for signature, old in before.items():
        new = after.get(signature)
        if new is None:
            changes.append(CodeChange(signature, ChangeKind.REMOVED, old, None))
        else:
            changes.append(_diff_pair(signature, old, new, owners))

    for signature, new in after.items():
        if signature not in before:
            changes.append(CodeChange(signature, ChangeKind.ADDED, None, new))

    return ChangeSet(tuple(changes), owners)


def _diff_pair(
    signature: str,
    old: CodeObject,
    new: CodeObject,
    owners: tuple[CodeObject, ...],
) -> CodeChange:
    nested = _diff_objects(old.child_signatures(), new.child_signatures(), owners)
    if old == new and not nested.has_changes:
        return CodeChange(signature, ChangeKind.UNCHANGED, old, new)
    return CodeChange(signature, ChangeKind.MODIFIED, old, new, nested)
