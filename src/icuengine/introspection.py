"""Message introspection for argument and tag extraction.

Answers "what does this template need?" without evaluating it: which
arguments it reads (and how each is used) and which tag functions rich
mode will call. Useful for validating translations against the source
language and for type-checking bindings in tooling.

Python 3.13+.
"""

from dataclasses import dataclass, field
from typing import assert_never

from icuengine.constants import MAX_DEPTH
from icuengine.core.depth_guard import DepthGuard
from icuengine.enums import ArgumentUsage, FormatterKind, PluralRuleKind
from icuengine.syntax.ast import (
    Argument,
    FormattedArgument,
    Message,
    Pattern,
    Plural,
    PoundSign,
    Select,
    Span,
    Tag,
    TextElement,
)
from icuengine.syntax.parser import MessageParser

__all__ = [
    "ArgumentInfo",
    "MessageIntrospection",
    "TagInfo",
    "extract_arguments",
    "introspect_message",
]

_FORMATTER_USAGE: dict[FormatterKind, ArgumentUsage] = {
    FormatterKind.NUMBER: ArgumentUsage.NUMBER,
    FormatterKind.DATE: ArgumentUsage.DATE,
    FormatterKind.TIME: ArgumentUsage.TIME,
}


@dataclass(frozen=True, slots=True)
class ArgumentInfo:
    """One use of an argument inside a message."""

    name: str
    """Argument name as written in the template."""

    usage: ArgumentUsage
    """How the argument is consumed."""

    span: Span | None = None
    """Source position span for IDE integration."""


@dataclass(frozen=True, slots=True)
class TagInfo:
    """One rich-text tag inside a message."""

    name: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class MessageIntrospection:
    """Complete introspection result for a message.

    All fields are immutable; name sets are computed once at creation.
    """

    arguments: tuple[ArgumentInfo, ...]
    """Every argument use, in template order."""

    tags: tuple[TagInfo, ...]
    """Every tag, in template order (outer before inner)."""

    has_selectors: bool
    """Whether the message uses plural, selectordinal or select."""

    _argument_names: frozenset[str] = field(default=frozenset(), repr=False)
    _tag_names: frozenset[str] = field(default=frozenset(), repr=False)

    def get_argument_names(self) -> frozenset[str]:
        """Names of all arguments the message reads."""
        return self._argument_names

    def get_tag_names(self) -> frozenset[str]:
        """Names of all tag functions rich mode will call."""
        return self._tag_names

    def requires_argument(self, name: str) -> bool:
        """Check if the message reads a specific argument."""
        return name in self._argument_names

    def usages(self, name: str) -> frozenset[ArgumentUsage]:
        """All ways an argument is used, e.g. {PLURAL, NUMBER}."""
        return frozenset(info.usage for info in self.arguments if info.name == name)


class _Collector:
    """Walks a pattern collecting arguments and tags."""

    __slots__ = ("arguments", "guard", "has_selectors", "tags")

    def __init__(self, max_depth: int) -> None:
        self.arguments: list[ArgumentInfo] = []
        self.tags: list[TagInfo] = []
        self.has_selectors = False
        self.guard = DepthGuard(max_depth=max_depth)

    def visit(self, pattern: Pattern) -> None:
        for element in pattern.elements:
            match element:
                case TextElement() | PoundSign():
                    pass
                case Argument(name=name, span=span):
                    self.arguments.append(ArgumentInfo(name, ArgumentUsage.SIMPLE, span))
                case FormattedArgument(name=name, kind=kind, span=span):
                    self.arguments.append(ArgumentInfo(name, _FORMATTER_USAGE[kind], span))
                case Plural(name=name, kind=kind, branches=branches, span=span):
                    usage = (
                        ArgumentUsage.PLURAL
                        if kind is PluralRuleKind.CARDINAL
                        else ArgumentUsage.SELECTORDINAL
                    )
                    self.arguments.append(ArgumentInfo(name, usage, span))
                    self.has_selectors = True
                    for branch in branches:
                        with self.guard:
                            self.visit(branch.value)
                case Select(name=name, branches=branches, span=span):
                    self.arguments.append(ArgumentInfo(name, ArgumentUsage.SELECT, span))
                    self.has_selectors = True
                    for branch in branches:
                        with self.guard:
                            self.visit(branch.value)
                case Tag(name=name, children=children, span=span):
                    self.tags.append(TagInfo(name, span))
                    with self.guard:
                        self.visit(children)
                case _:
                    assert_never(element)


def introspect_message(
    message: Message | Pattern | str,
    *,
    max_depth: int = MAX_DEPTH,
) -> MessageIntrospection:
    """Introspect a compiled message (or template text) and extract metadata.

    Args:
        message: Message, Pattern, or template text to parse first
        max_depth: Traversal depth limit for hand-built ASTs

    Returns:
        Introspection result with arguments, tags and selector presence

    Raises:
        ParseError: If template text is malformed
        TypeError: If message is not a Message, Pattern or str

    Example:
        >>> info = introspect_message("{n, plural, one {<b>#</b> item} other {{n, number} items}}")
        >>> sorted(info.get_argument_names())
        ['n']
        >>> sorted(info.usages("n"))
        [<ArgumentUsage.NUMBER: 'number'>, <ArgumentUsage.PLURAL: 'plural'>]
        >>> info.get_tag_names()
        frozenset({'b'})
    """
    if isinstance(message, str):
        message = MessageParser().parse(message)
    # TypeIs guards narrow the union for the type checker
    if Message.guard(message):
        pattern = message.value
    elif Pattern.guard(message):
        pattern = message
    else:
        kind = type(message).__name__  # type: ignore[unreachable]
        msg = f"Expected Message, Pattern or str, got {kind}"
        raise TypeError(msg)

    collector = _Collector(max_depth)
    collector.visit(pattern)
    return MessageIntrospection(
        arguments=tuple(collector.arguments),
        tags=tuple(collector.tags),
        has_selectors=collector.has_selectors,
        _argument_names=frozenset(info.name for info in collector.arguments),
        _tag_names=frozenset(info.name for info in collector.tags),
    )


def extract_arguments(message: Message | Pattern | str) -> frozenset[str]:
    """Extract argument names from a message (simplified API).

    Example:
        >>> sorted(extract_arguments("Hi {name}, you have {count, number} new messages"))
        ['count', 'name']
    """
    return introspect_message(message).get_argument_names()
