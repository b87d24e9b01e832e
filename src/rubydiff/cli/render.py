"""Change set rendering for the terminal and JSON reports."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.markup import escape

from rubydiff.diff.models import ChangeKind, ChangeSet

_MARKERS = {
    ChangeKind.ADDED: "[green]+[/green]",
    ChangeKind.REMOVED: "[red]-[/red]",
    ChangeKind.MODIFIED: "[yellow]~[/yellow]",
    ChangeKind.UNCHANGED: "[dim] [/dim]",
}


def summarize(changes: ChangeSet) -> str:
    """One-line count of changes at every depth, e.g. '2 added, 1 modified'."""
    counts = {kind: 0 for kind in ChangeKind}
    for _, change in changes.walk():
        counts[change.kind] += 1
    parts = [
        f"{counts[kind]} {kind.value}"
        for kind in (ChangeKind.ADDED, ChangeKind.REMOVED, ChangeKind.MODIFIED)
        if counts[kind]
    ]
    return ", ".join(parts) if parts else "no structural changes"


def render_text(changes: ChangeSet, console: Console, *, show_unchanged: bool = False) -> None:
    for depth, change in changes.walk():
        if change.kind is ChangeKind.UNCHANGED and not show_unchanged:
            continue
        indent = "  " * depth
        console.print(f"{indent}{_MARKERS[change.kind]} {escape(change.signature)}")
    console.print(f"\n[bold]{summarize(changes)}[/bold]")


def render_json(changes: ChangeSet, *, show_unchanged: bool = False) -> str:
    entries = changes.to_dict()
    if not show_unchanged:
        entries = _drop_unchanged(entries)
    return json.dumps({"changes": entries, "summary": summarize(changes)}, indent=2)


def _drop_unchanged(entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    kept = []
    for entry in entries:
        if entry["change"] == ChangeKind.UNCHANGED.value:
            continue
        if "children" in entry:
            entry = {**entry, "children": _drop_unchanged(entry["children"])}
        kept.append(entry)
    return kept
