"""Message runtime package.

Provides evaluation, plural rules, format resolution, the compiled-pattern
cache and the MessageFormatter API. Depends on syntax package for parsing.

Python 3.13+.
"""

from .cache import PatternCache
from .format_options import (
    DateTimeFormatOptions,
    FormatOptions,
    ListFormatOptions,
    NumberFormatOptions,
    options_from_mapping,
)
from .format_registry import BUILTIN_FORMATS, FormatRegistry
from .formatter import (
    MessageFormatter,
    compile_message,
    format_message,
    format_rich_message,
)
from .locale_context import LocaleContext
from .plural_rules import select_plural_branch, select_plural_category
from .resolver import MessageResolver, ResolutionContext, RichContent

__all__ = [
    "BUILTIN_FORMATS",
    "DateTimeFormatOptions",
    "FormatOptions",
    "FormatRegistry",
    "ListFormatOptions",
    "LocaleContext",
    "MessageFormatter",
    "MessageResolver",
    "NumberFormatOptions",
    "PatternCache",
    "ResolutionContext",
    "RichContent",
    "compile_message",
    "format_message",
    "format_rich_message",
    "options_from_mapping",
    "select_plural_branch",
    "select_plural_category",
]
