"""Shared constants for ICUEngine.

This module provides centralized configuration constants used across
syntax and runtime packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for parsing/evaluation/serialization
- Cache limits: Memory bounds for caching subsystems
- Input limits: DoS prevention via size constraints
- Number defaults: Default fraction digits for number formatting

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    "DEFAULT_CACHE_SIZE",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Number defaults
    "DEFAULT_MAXIMUM_FRACTION_DIGITS",
    # Fallback strings
    "FALLBACK_LOCALE",
    "FALLBACK_MISSING_MESSAGE",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# One limit is shared by every recursive subsystem:
#
# 1. PARSER (syntax/parser/rules.py):
#    Nesting of arguments and tags, e.g. a plural inside a select inside a tag.
#
# 2. EVALUATOR (runtime/resolver.py):
#    Depth of pattern traversal; hand-built ASTs bypass the parser limit.
#
# 3. SERIALIZER (syntax/serializer.py) and introspection:
#    AST traversal depth.
#
# Python's default recursion limit is 1000; each nesting level costs a few
# frames, so 100 leaves ample margin while exceeding any real message.
#
# ============================================================================

MAX_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached LocaleContext instances.
# 128 covers typical multi-region applications (major locales + variants).
MAX_LOCALE_CACHE_SIZE: int = 128

# Default maximum compiled templates held by a PatternCache.
# Templates are static per application, so the bound is generous.
DEFAULT_CACHE_SIZE: int = 10_000

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum template size in characters (1 MiB).
# A single message template is small; anything larger is malformed input.
MAX_SOURCE_SIZE: int = 1024 * 1024

# ============================================================================
# NUMBER DEFAULTS
# ============================================================================

# Default number formatting shows at most three fraction digits,
# matching Intl.NumberFormat.
DEFAULT_MAXIMUM_FRACTION_DIGITS: int = 3

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Locale used when a requested locale is unknown to CLDR.
FALLBACK_LOCALE: str = "en_US"

# Format string - use .format(key=...)
FALLBACK_MISSING_MESSAGE: str = "{{{key}}}"  # e.g., {greeting.title}
