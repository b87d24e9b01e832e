"""Config module exports."""

from rubydiff.config.loader import load_config
from rubydiff.config.models import (
    DEFAULT_DECLARATION_HANDLERS,
    LoggingConfig,
    LogOutputConfig,
    RubyDiffConfig,
    SourcesConfig,
    StructureConfig,
)

__all__ = [
    "load_config",
    "DEFAULT_DECLARATION_HANDLERS",
    "LoggingConfig",
    "LogOutputConfig",
    "RubyDiffConfig",
    "SourcesConfig",
    "StructureConfig",
]
