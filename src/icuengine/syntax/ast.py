"""Message AST (Abstract Syntax Tree) node definitions.

A compiled template is a tree of frozen dataclasses. PatternElement is a
closed union: the evaluator, serializer and introspection all dispatch on
it with exhaustive ``match`` statements ending in ``assert_never``.
Includes type guards as static methods (eliminates circular imports).

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import TypeIs

from icuengine.enums import FormatterKind, PluralRuleKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "Span",
    # Top level
    "Message",
    "Pattern",
    # Pattern elements
    "TextElement",
    "Argument",
    "FormattedArgument",
    "Plural",
    "Select",
    "Tag",
    "PoundSign",
    # Branches
    "Branch",
    # Type aliases
    "BranchKey",
    "PatternElement",
    "ASTNode",
    # Constants
    "OTHER_SELECTOR",
]

# Mandatory fallback selector for plural and select constructs.
OTHER_SELECTOR: str = "other"


# ============================================================================
# BASE TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Span:
    """Source position span.

    Tracks character offsets in the template for error reporting and tooling.

    Attributes:
        start: Starting character offset (inclusive)
        end: Ending character offset (exclusive)

    Example:
        Template: "Hi {name}"
        Argument span: Span(start=3, end=9)
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)


# ============================================================================
# PATTERN ELEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class TextElement:
    """Verbatim text with quote escapes already resolved.

    Example:
        "It''s {name}" -> TextElement("It's "), Argument("name")
    """

    value: str


@dataclass(frozen=True, slots=True)
class Argument:
    """Plain interpolation: {name}"""

    name: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class FormattedArgument:
    """Interpolation with an attached formatter.

    Examples:
        {amount, number}                -> style=None, skeleton=None
        {when, date, short}             -> style="short"
        {amount, number, ::currency/EUR} -> skeleton="currency/EUR"

    At most one of ``style`` and ``skeleton`` is set.
    """

    name: str
    kind: FormatterKind
    style: str | None = None
    skeleton: str | None = None
    span: Span | None = None

    def __post_init__(self) -> None:
        """Reject nodes carrying both a style name and a skeleton."""
        if self.style is not None and self.skeleton is not None:
            msg = "FormattedArgument takes a style or a skeleton, not both"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class PoundSign:
    """``#`` inside a plural branch: the offset-adjusted value as a number."""

    span: Span | None = None


def _check_branches(kind: str, name: str, branches: tuple["Branch", ...]) -> None:
    """Enforce exactly one 'other' branch and unique selectors."""
    keys = [branch.key for branch in branches]
    if keys.count(OTHER_SELECTOR) != 1:
        msg = f"{kind} '{name}' must have exactly one 'other' branch"
        raise ValueError(msg)
    if len(set(keys)) != len(keys):
        msg = f"{kind} '{name}' has duplicate selectors"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Plural:
    """Plural or ordinal selection.

    Examples:
        {count, plural, =0 {none} one {# item} other {# items}}
        {place, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}
        {guests, plural, offset:1 =0 {nobody} other {you and # others}}

    Attributes:
        name: Argument supplying the number
        kind: Cardinal (plural) or ordinal (selectordinal) rules
        branches: Branches in template order; exactly one keyed 'other'
        offset: Subtracted before rule lookup, exact matching and '#'
    """

    name: str
    kind: PluralRuleKind
    branches: tuple["Branch", ...]
    offset: int = 0
    span: Span | None = None

    def __post_init__(self) -> None:
        """Validate branch invariants for programmatically built nodes."""
        _check_branches("Plural", self.name, self.branches)


@dataclass(frozen=True, slots=True)
class Select:
    """Enumerated selection: {gender, select, female {She} other {They}}"""

    name: str
    branches: tuple["Branch", ...]
    span: Span | None = None

    def __post_init__(self) -> None:
        """Validate branch invariants for programmatically built nodes."""
        _check_branches("Select", self.name, self.branches)
        if any(branch.is_exact for branch in self.branches):
            msg = f"Select '{self.name}' cannot have exact '=N' selectors"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Tag:
    """Rich-text region: <b>children</b>"""

    name: str
    children: "Pattern"
    span: Span | None = None


# ============================================================================
# BRANCHES AND PATTERNS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Branch:
    """One selector and its sub-pattern.

    An ``int`` key is an exact-value selector written ``=N``;
    a ``str`` key is a plural category or select keyword.
    """

    key: "BranchKey"
    value: "Pattern"

    @property
    def is_exact(self) -> bool:
        """True for ``=N`` selectors."""
        # bool is an int subclass but never a valid selector
        return isinstance(self.key, int) and not isinstance(self.key, bool)

    @property
    def selector(self) -> str:
        """Selector as written in template syntax."""
        return f"={self.key}" if self.is_exact else str(self.key)


@dataclass(frozen=True, slots=True)
class Pattern:
    """Ordered sequence of pattern elements."""

    elements: tuple["PatternElement", ...]

    @staticmethod
    def guard(node: object) -> TypeIs["Pattern"]:
        """Type guard for Pattern."""
        return isinstance(node, Pattern)


@dataclass(frozen=True, slots=True)
class Message:
    """Compiled template.

    Attributes:
        value: Root pattern
        source: Template text the AST was compiled from
    """

    value: Pattern
    source: str = ""

    @staticmethod
    def guard(node: object) -> TypeIs["Message"]:
        """Type guard for Message."""
        return isinstance(node, Message)


# ============================================================================
# TYPE ALIASES
# ============================================================================

type BranchKey = str | int

type PatternElement = (
    TextElement | Argument | FormattedArgument | Plural | Select | Tag | PoundSign
)

type ASTNode = Message | Pattern | Branch | PatternElement
