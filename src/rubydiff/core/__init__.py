"""Core module exports."""

from rubydiff.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    ParseError,
    RubyDiffError,
    SourceError,
    StructureError,
)
from rubydiff.core.logging import configure_default_logging, configure_logging, get_log_file_path

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ParseError",
    "RubyDiffError",
    "SourceError",
    "StructureError",
    # Logging
    "configure_default_logging",
    "configure_logging",
    "get_log_file_path",
]
