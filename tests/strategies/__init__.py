"""Hypothesis strategies for ICUEngine property-based testing.

This package provides reusable strategies for generating test data
across multiple test modules. Strategies are organized by domain:

- messages: template text and AST nodes
- values: argument bindings and locale codes

Usage:
    from tests.strategies import message_asts, argument_names
    from tests.strategies.values import numeric_values, supported_locales
"""

from .messages import (
    DATE_SKELETONS,
    NUMBER_SKELETONS,
    PLURAL_CATEGORIES,
    SYNTAX_CHARS,
    argument_names,
    chaos_templates,
    literal_text,
    message_asts,
    plain_text,
    plural_templates,
    tag_names,
)
from .values import (
    PLURAL_LOCALES,
    decimals,
    non_numeric_values,
    numeric_values,
    supported_locales,
    timestamps,
)

__all__ = [
    "DATE_SKELETONS",
    "NUMBER_SKELETONS",
    "PLURAL_CATEGORIES",
    "PLURAL_LOCALES",
    "SYNTAX_CHARS",
    "argument_names",
    "chaos_templates",
    "decimals",
    "literal_text",
    "message_asts",
    "non_numeric_values",
    "numeric_values",
    "plain_text",
    "plural_templates",
    "supported_locales",
    "tag_names",
    "timestamps",
]
