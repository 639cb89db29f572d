"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


# C0 control characters except tab; rendered as escapes so user-controlled
# argument names or templates cannot forge extra log lines.
_CONTROL_ESCAPES = {i: f"\\x{i:02x}" for i in range(0x20) if i != 0x09}


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Centralizes formatting of Diagnostic objects into human-readable
    or machine-readable output.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate content to prevent information leakage
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum content length when sanitizing

    Example:
        >>> from icuengine.diagnostics import ErrorTemplate
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.argument_not_provided("name")
        >>> print(formatter.format(diagnostic))
        error[ARGUMENT_NOT_PROVIDED]: Argument 'name' not provided
          = argument: name
          = help: Pass 'name' in the arguments mapping

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        ARGUMENT_NOT_PROVIDED: Argument 'name' not provided
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            error[MISMATCHED_TAG]: Closing tag </b> does not match <a>
              --> line 1, column 9
              = tag: a
              = help: Close <a> before closing <b>
        """
        severity = diagnostic.severity if diagnostic.severity == "warning" else "error"

        if self.color:
            if severity == "error":
                severity_str = f"\033[1;31m{severity}\033[0m"  # Bold red
            else:
                severity_str = f"\033[1;33m{severity}\033[0m"  # Bold yellow
        else:
            severity_str = severity

        message = self._clean(diagnostic.message)
        parts = [f"{severity_str}[{diagnostic.code.name}]: {message}"]

        if diagnostic.span:
            parts.append(f"  --> line {diagnostic.span.line}, column {diagnostic.span.column}")

        if diagnostic.message_key:
            parts.append(f"  = message: {self._clean(diagnostic.message_key)}")

        if diagnostic.argument_name:
            parts.append(f"  = argument: {self._clean(diagnostic.argument_name)}")

        if diagnostic.tag_name:
            parts.append(f"  = tag: {self._clean(diagnostic.tag_name)}")

        if diagnostic.format_name:
            parts.append(f"  = format: {self._clean(diagnostic.format_name)}")

        if diagnostic.expected_type:
            parts.append(f"  = expected: {diagnostic.expected_type}")

        if diagnostic.received_type:
            parts.append(f"  = received: {diagnostic.received_type}")

        if diagnostic.hint:
            parts.append(f"  = help: {self._clean(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            ARGUMENT_NOT_PROVIDED: Argument 'name' not provided
        """
        message = self._clean(diagnostic.message)
        if diagnostic.span:
            return (
                f"{diagnostic.code.name} at {diagnostic.span.line}:"
                f"{diagnostic.span.column}: {message}"
            )
        return f"{diagnostic.code.name}: {message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic as JSON.

        Example output:
            {"code": "ARGUMENT_NOT_PROVIDED", "code_value": 2001, "message": "...", ...}
        """
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "category": diagnostic.code.category.value,
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }

        if diagnostic.span:
            data["line"] = diagnostic.span.line
            data["column"] = diagnostic.span.column
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end

        optional_fields = (
            ("message_key", diagnostic.message_key),
            ("argument_name", diagnostic.argument_name),
            ("tag_name", diagnostic.tag_name),
            ("format_name", diagnostic.format_name),
            ("expected_type", diagnostic.expected_type),
            ("received_type", diagnostic.received_type),
        )
        for key, value in optional_fields:
            if value:
                data[key] = value

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _clean(self, text: str) -> str:
        """Escape control characters and apply optional truncation."""
        return self._maybe_sanitize(text.translate(_CONTROL_ESCAPES))

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled.

        Args:
            text: Text to possibly truncate

        Returns:
            Original or truncated text
        """
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
