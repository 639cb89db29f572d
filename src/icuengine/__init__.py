"""ICUEngine - ICU MessageFormat compiler and evaluator with Babel locale data.

Compiles ICU message templates (arguments, plural, selectordinal, select,
rich-text tags) into immutable ASTs, caches them, and evaluates them
against per-call bindings to text or to rich content trees.

Public API:
    MessageFormatter - Single-locale formatting (text, rich, primitives)
    Translator - Key-based catalog lookup on top of a formatter
    MappingMessageStore - In-memory catalog for Translator
    FormatRegistry - Named number/date/time/list format configurations
    PatternCache - Thread-safe compiled-template cache
    compile_message - Parse a template to a Message AST
    format_message - One-shot text formatting
    format_rich_message - One-shot rich formatting
    introspect_message - Argument and tag extraction
    serialize_message - AST back to template text

Exceptions:
    MessageFormatError - Base exception class
    ParseError - Malformed template
    EvaluationError - Per-call failure (missing binding, type mismatch)
    ConfigurationError - Malformed format registration
    MessageNotFoundError - Key absent from the message store

Submodules:
    icuengine.syntax.ast - AST node types (Message, Pattern, Plural, Tag, etc.)
    icuengine.syntax - Parser, serializer and skeleton tokenizers
    icuengine.runtime - Evaluation, plural rules, registry and cache
    icuengine.diagnostics - Diagnostic codes, templates and formatting
"""

from .diagnostics import (
    ConfigurationError,
    EvaluationError,
    FormattingError,
    MessageFormatError,
    MessageNotFoundError,
    ParseError,
)
from .introspection import extract_arguments, introspect_message
from .runtime import (
    FormatRegistry,
    MessageFormatter,
    PatternCache,
    compile_message,
    format_message,
    format_rich_message,
)
from .syntax import serialize as serialize_message
from .translator import MappingMessageStore, MessageStore, Translator

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError  # noqa: E402
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("icuengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ConfigurationError",
    "EvaluationError",
    "FormatRegistry",
    "FormattingError",
    "MappingMessageStore",
    "MessageFormatError",
    "MessageFormatter",
    "MessageNotFoundError",
    "MessageStore",
    "ParseError",
    "PatternCache",
    "Translator",
    "__version__",
    "compile_message",
    "extract_arguments",
    "format_message",
    "format_rich_message",
    "introspect_message",
    "serialize_message",
]
