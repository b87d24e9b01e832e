"""Code object model: declared constructs and their signatures."""

from rubydiff.model.code_objects import ClassCode, CodeObject, MetaCode, MethodCode, ModuleCode

__all__ = [
    "ClassCode",
    "CodeObject",
    "MetaCode",
    "MethodCode",
    "ModuleCode",
]
