"""rubydiff error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Structure
- 4xxx: Parse
- 5xxx: Source
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Structure (3xxx)
    STRUCTURE_MISSING_NAME = 3001

    # Parse (4xxx)
    PARSE_SYNTAX_ERROR = 4001
    PARSE_GRAMMAR_UNAVAILABLE = 4002

    # Source (5xxx)
    SOURCE_NOT_FOUND = 5001
    SOURCE_REVISION_NOT_FOUND = 5002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_SCOPE_IMBALANCE = 9002


@dataclass(frozen=True, slots=True)
class RubyDiffError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'STRUCTURE_MISSING_NAME')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON reports."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(RubyDiffError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class StructureError(RubyDiffError):
    """A recognized declaration node is malformed.

    Signatures cannot be derived without a name, so the build aborts.
    """

    @classmethod
    def missing_name(cls, kind: str) -> "StructureError":
        return cls(
            code=ErrorCode.STRUCTURE_MISSING_NAME,
            message=f"{kind} declaration has no name",
            details={"kind": kind},
        )


class ParseError(RubyDiffError):
    """Source text could not be turned into a syntax tree."""

    @classmethod
    def syntax_error(cls, path: str, line: int, column: int) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_SYNTAX_ERROR,
            message=f"Syntax error in {path} at {line}:{column}",
            details={"path": path, "line": line, "column": column},
        )

    @classmethod
    def grammar_unavailable(cls, language: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_GRAMMAR_UNAVAILABLE,
            message=f"Tree-sitter grammar not available: {language}",
            details={"language": language},
        )


class SourceError(RubyDiffError):
    """A requested source path or revision does not exist."""

    @classmethod
    def not_found(cls, path: str) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"Source not found: {path}",
            details={"path": path},
        )

    @classmethod
    def revision_not_found(cls, repo: str, revision: str) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_REVISION_NOT_FOUND,
            message=f"Revision '{revision}' not found in {repo}",
            details={"repo": repo, "revision": revision},
        )


class InternalError(RubyDiffError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def scope_imbalance(cls, depth: int) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_SCOPE_IMBALANCE,
            message=f"Scope stack not empty after build (depth {depth})",
            details={"depth": depth},
        )
