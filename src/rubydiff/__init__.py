"""rubydiff - structural diff of Ruby source code.

Builds a signature-addressed model of modules, classes, methods and
declaratively generated members, and compares two models.
"""

from rubydiff.core.logging import configure_default_logging
from rubydiff.diff import ChangeKind, ChangeSet, CodeChange, diff_roots
from rubydiff.structure import StructureBuilder, StructureModel

__version__ = "0.1.0"

configure_default_logging()

__all__ = [
    "ChangeKind",
    "ChangeSet",
    "CodeChange",
    "StructureBuilder",
    "StructureModel",
    "diff_roots",
]
