"""Message formatting exception hierarchy with structured diagnostics.

Integrates with diagnostic codes for Rust/Elm-inspired error messages.
All exceptions store Diagnostic objects for rich error information.

Hierarchy:
    MessageFormatError
    ├── ParseError           (compile time, cached with the template)
    ├── EvaluationError      (per call, never cached)
    │   └── FormattingError  (locale data rejected a value)
    ├── ConfigurationError   (malformed format registration)
    └── MessageNotFoundError (translator lookup miss)

Python 3.13+. Zero external dependencies.
"""

import copy
from dataclasses import replace
from typing import Self

from .codes import Diagnostic

__all__ = [
    "ConfigurationError",
    "EvaluationError",
    "FormattingError",
    "MessageFormatError",
    "MessageNotFoundError",
    "ParseError",
]


class MessageFormatError(Exception):
    """Base exception for all message formatting errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize MessageFormatError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)

    @property
    def message_key(self) -> str | None:
        """Message store key attached by the translator layer, if any."""
        if self.diagnostic is None:
            return None
        return self.diagnostic.message_key

    def with_message_key(self, message_key: str) -> Self:
        """Return a copy of this error annotated with the message key.

        The original exception is left untouched so a cached ParseError
        shared between callers never leaks one caller's key to another.

        Args:
            message_key: Key the failing template was looked up under

        Returns:
            New exception of the same type
        """
        clone = copy.copy(self)
        if self.diagnostic is not None:
            clone.diagnostic = replace(self.diagnostic, message_key=message_key)
            clone.args = (clone.diagnostic.format_error(),)
        else:
            clone.args = (f"[{message_key}] {self.args[0] if self.args else ''}",)
        return clone


class ParseError(MessageFormatError):
    """Malformed template.

    Parsing aborts at the first error; no partial AST is produced.
    The compiled-pattern cache stores this error as the terminal result
    for the template, so every later compile of the same text raises it.

    Attributes:
        source: Template text that failed to parse (for context rendering)
    """

    def __init__(self, message: str | Diagnostic, *, source: str = "") -> None:
        """Initialize ParseError.

        Args:
            message: Error message string OR Diagnostic object
            source: Template text, used by format_with_context()
        """
        super().__init__(message)
        self.source = source

    @property
    def offset(self) -> int:
        """Character offset of the offending position (0-indexed)."""
        if self.diagnostic is None or self.diagnostic.span is None:
            return 0
        return self.diagnostic.span.start

    @property
    def line(self) -> int:
        """Line of the offending position (1-indexed)."""
        if self.diagnostic is None or self.diagnostic.span is None:
            return 1
        return self.diagnostic.span.line

    @property
    def column(self) -> int:
        """Column of the offending position (1-indexed)."""
        if self.diagnostic is None or self.diagnostic.span is None:
            return 1
        return self.diagnostic.span.column

    @property
    def reason(self) -> str:
        """Human-readable reason without location decoration."""
        if self.diagnostic is None:
            return str(self)
        return self.diagnostic.message

    def format_with_context(self, context_lines: int = 2) -> str:
        """Format error with template context and caret pointer.

        Args:
            context_lines: Number of lines to show before/after the error

        Returns:
            Multi-line formatted error

        Example output for the template "Hi {name":
            1:4: Argument 'name' is not closed

               1 | Hi {name
                      ^
        """
        header = f"{self.line}:{self.column}: {self.reason}"
        if not self.source:
            return header

        lines = self.source.split("\n")
        result_lines = [header, ""]

        start_line = max(1, self.line - context_lines)
        end_line = min(len(lines), self.line + context_lines)

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i:4} | "
            result_lines.append(line_num_str + lines[i - 1])
            if i == self.line:
                pointer = " " * (len(line_num_str) + self.column - 1) + "^"
                result_lines.append(pointer)

        return "\n".join(result_lines)


class EvaluationError(MessageFormatError):
    """Per-call failure while evaluating a compiled template.

    Examples:
    - Missing binding for an argument or tag
    - Binding type does not match the formatter kind
    - Style name not registered in the format registry

    Never cached: a different binding set may succeed.
    """


class FormattingError(EvaluationError):
    """Locale-aware primitive formatter rejected a value.

    Wraps Babel failures (overflow, unknown currency, invalid pattern)
    so callers handle a single exception family.
    """


class ConfigurationError(MessageFormatError):
    """Malformed named format registration or option value."""


class MessageNotFoundError(MessageFormatError):
    """Message store has no template for (locale, key)."""
