"""Structural diff: change sets between two code models."""

from rubydiff.diff.engine import diff_roots
from rubydiff.diff.models import ChangeKind, ChangeSet, CodeChange

__all__ = [
    "ChangeKind",
    "ChangeSet",
    "CodeChange",
    "diff_roots",
]
