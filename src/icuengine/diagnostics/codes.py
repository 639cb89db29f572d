"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
    "SourceSpan",
]


class ErrorCategory(StrEnum):
    """Error categorization mirroring the exception hierarchy.

    Categories:
        SYNTAX: Malformed template detected at compile time
        EVALUATION: Per-call failure (missing binding, type mismatch, unknown format)
        CONFIGURATION: Malformed format registration or option value
        LOOKUP: Message key absent from the message store
    """

    SYNTAX = "syntax"
    EVALUATION = "evaluation"
    CONFIGURATION = "configuration"
    LOOKUP = "lookup"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Syntax errors (parser failures)
        2000-2999: Evaluation errors (runtime failures)
        3000-3999: Configuration errors (format registration)
        4000-4999: Lookup errors (translator layer)
    """

    # Syntax errors (1000-1999)
    UNTERMINATED_ARGUMENT = 1001
    EMPTY_ARGUMENT = 1002
    INVALID_ARGUMENT_NAME = 1003
    UNKNOWN_ARGUMENT_TYPE = 1004
    EXPECTED_ARGUMENT_STYLE = 1005
    INVALID_SKELETON = 1006
    MISSING_OTHER_BRANCH = 1007
    DUPLICATE_SELECTOR = 1008
    INVALID_SELECTOR = 1009
    EXPECTED_BRANCH_BODY = 1010
    INVALID_OFFSET = 1011
    OFFSET_NOT_ALLOWED = 1012
    UNTERMINATED_TAG = 1013
    MISMATCHED_TAG = 1014
    UNMATCHED_CLOSING_TAG = 1015
    INVALID_TAG = 1016
    NESTING_DEPTH_EXCEEDED = 1017

    # Evaluation errors (2000-2999)
    ARGUMENT_NOT_PROVIDED = 2001
    TYPE_MISMATCH = 2002
    TAG_NOT_PROVIDED = 2003
    TAG_RESULT_INVALID = 2004
    FORMAT_NOT_FOUND = 2005
    FORMATTING_FAILED = 2006
    MAX_DEPTH_EXCEEDED = 2007

    # Configuration errors (3000-3999)
    INVALID_FORMAT_OPTION = 3001
    INVALID_FORMAT_CONFIG = 3002

    # Lookup errors (4000-4999)
    MESSAGE_NOT_FOUND = 4001

    @property
    def category(self) -> ErrorCategory:
        """Category derived from the numeric code range."""
        match self.value // 1000:
            case 1:
                return ErrorCategory.SYNTAX
            case 2:
                return ErrorCategory.EVALUATION
            case 3:
                return ErrorCategory.CONFIGURATION
            case _:
                return ErrorCategory.LOOKUP


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Template location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, line is
                less than 1 (lines are 1-indexed), or column is less than 1
                (columns are 1-indexed).
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Modelled on Rust compiler diagnostics: one object carries everything
    needed to explain a failure without re-deriving engine state.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Template location (syntax errors only)
        hint: Suggestion for fixing the error
        argument_name: Argument that caused the error
        tag_name: Rich-text tag that caused the error
        format_name: Style name or skeleton that failed to resolve
        expected_type: Expected binding type
        received_type: Actual binding type
        message_key: Message store key the template came from
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    argument_name: str | None = None
    tag_name: str | None = None
    format_name: str | None = None
    expected_type: str | None = None
    received_type: str | None = None
    message_key: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[MISSING_OTHER_BRANCH]: Plural argument 'count' has no 'other' branch
              --> line 1, column 10
              = argument: count
              = help: Add an 'other {...}' branch

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
