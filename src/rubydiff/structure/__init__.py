"""Structure builder: syntax tree -> signature-addressed code model."""

from rubydiff.structure.builder import StructureBuilder, StructureModel
from rubydiff.structure.handlers import DEFAULT_HANDLERS, AccessorHandler, make_handlers
from rubydiff.structure.registry import SignatureRegistry

__all__ = [
    "AccessorHandler",
    "DEFAULT_HANDLERS",
    "SignatureRegistry",
    "StructureBuilder",
    "StructureModel",
    "make_handlers",
]
