"""Diagnostic codes, exceptions, and formatting.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorCategory, SourceSpan
from .errors import (
    ConfigurationError,
    EvaluationError,
    FormattingError,
    MessageFormatError,
    MessageNotFoundError,
    ParseError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorCategory",
    "ErrorTemplate",
    "EvaluationError",
    "FormattingError",
    "MessageFormatError",
    "MessageNotFoundError",
    "OutputFormat",
    "ParseError",
    "SourceSpan",
]
