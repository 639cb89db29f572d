"""Enumerations for ICUEngine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum

__all__ = [
    "ArgumentUsage",
    "FormatKind",
    "FormatterKind",
    "ListStyle",
    "ListType",
    "PluralCategory",
    "PluralRuleKind",
]


class PluralRuleKind(StrEnum):
    """Which CLDR rule table a plural construct consults.

    StrEnum provides automatic string conversion: str(PluralRuleKind.CARDINAL) == "cardinal"
    """

    CARDINAL = "cardinal"
    """Counting rules: {count, plural, one {...} other {...}}"""

    ORDINAL = "ordinal"
    """Ranking rules: {place, selectordinal, one {#st} two {#nd} ...}"""


class PluralCategory(StrEnum):
    """CLDR plural category tags."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class FormatterKind(StrEnum):
    """Formatter attached to a formatted argument: {when, date, short}"""

    NUMBER = "number"
    """{amount, number, ::currency/EUR}"""

    DATE = "date"
    """{when, date, medium}"""

    TIME = "time"
    """{when, time, short}"""


class FormatKind(StrEnum):
    """Kinds of named format configuration held by a FormatRegistry.

    Superset of FormatterKind: lists are only reachable through the
    primitive formatter API, never from template syntax.
    """

    NUMBER = "number"
    DATE = "date"
    TIME = "time"
    LIST = "list"


class ListType(StrEnum):
    """List joining semantics (Intl.ListFormat type)."""

    CONJUNCTION = "conjunction"
    """A, B, and C"""

    DISJUNCTION = "disjunction"
    """A, B, or C"""

    UNIT = "unit"
    """A, B, C"""


class ListStyle(StrEnum):
    """List verbosity (Intl.ListFormat style)."""

    LONG = "long"
    SHORT = "short"
    NARROW = "narrow"


class ArgumentUsage(StrEnum):
    """How an argument is consumed inside a message.

    StrEnum provides automatic string conversion: str(ArgumentUsage.PLURAL) == "plural"
    """

    SIMPLE = "simple"
    """Plain interpolation: {name}"""

    NUMBER = "number"
    """{n, number}"""

    DATE = "date"
    """{d, date}"""

    TIME = "time"
    """{t, time}"""

    PLURAL = "plural"
    """{count, plural, ...}"""

    SELECTORDINAL = "selectordinal"
    """{place, selectordinal, ...}"""

    SELECT = "select"
    """{gender, select, ...}"""
