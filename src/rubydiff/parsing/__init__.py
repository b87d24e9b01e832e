"""Source parsing into the structure node vocabulary."""

from rubydiff.parsing.treesitter import RubyParser

__all__ = ["RubyParser"]
