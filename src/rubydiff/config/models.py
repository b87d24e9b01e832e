"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (RUBYDIFF__SECTION__KEY)
3. Repo YAML (.rubydiff/config.yaml)
4. Global YAML (~/.config/rubydiff/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    RUBYDIFF__<SECTION>__<KEY>=<VALUE>

Examples:
    RUBYDIFF__LOGGING__LEVEL=DEBUG
    RUBYDIFF__SOURCES__STRICT_PARSE=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_DECLARATION_HANDLERS: dict[str, str] = {
    "attr_accessor": "accessor",
    "attr_writer": "writer",
    "attr_reader": "reader",
}


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        RUBYDIFF__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG reports every absorbed duplicate signature.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class StructureConfig(BaseModel):
    """Structure builder configuration.

    ``declaration_handlers`` maps a receiver-less call name to the label of
    the meta members it synthesizes, e.g. ``attr_reader -> reader`` turns
    ``attr_reader :name`` inside ``Foo`` into ``Foo {reader name}``.
    """

    declaration_handlers: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DECLARATION_HANDLERS),
        description="Call name -> meta member label. Replaces the defaults when set.",
    )

    @field_validator("declaration_handlers")
    @classmethod
    def validate_handlers(cls, v: dict[str, str]) -> dict[str, str]:
        for name, label in v.items():
            if not name.strip():
                raise ValueError("Declaration handler names must be non-empty")
            if not label.strip():
                raise ValueError(f"Declaration handler '{name}' has an empty label")
        return v


class SourcesConfig(BaseModel):
    """Source discovery and parsing configuration.

    Env vars:
        RUBYDIFF__SOURCES__STRICT_PARSE: Fail on syntax errors instead of warning
    """

    extensions: list[str] = Field(
        default_factory=lambda: [".rb", ".rake"],
        description="File extensions collected when a directory or revision is given.",
    )
    strict_parse: bool = Field(
        default=False,
        description="Raise on syntax errors. When false the recovered tree is used.",
    )

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]


class RubyDiffConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    structure: StructureConfig = Field(default_factory=StructureConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
