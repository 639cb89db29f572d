"""Message resolver - evaluates a compiled AST against bindings.

One traversal serves both output modes:

    text mode   every node becomes a string; tag functions map the
                concatenated child string to a string
    rich mode   literal text becomes str nodes; tag functions map the
                tuple of child nodes to one opaque node

Python 3.13+. Indirect dependency: Babel (via plural_rules and LocaleContext).

Thread Safety:
    Resolution state is passed explicitly via ResolutionContext, making the
    resolver fully reentrant. Each resolution creates its own context and
    DepthGuard; bindings are never retained after the call.
"""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import assert_never

from icuengine.constants import MAX_DEPTH
from icuengine.core.depth_guard import DepthGuard
from icuengine.diagnostics import ErrorTemplate, EvaluationError
from icuengine.enums import FormatterKind
from icuengine.syntax.ast import (
    OTHER_SELECTOR,
    Argument,
    FormattedArgument,
    Message,
    Pattern,
    Plural,
    PoundSign,
    Select,
    Tag,
    TextElement,
)

from .format_options import DateTimeFormatOptions
from .format_registry import FormatRegistry
from .locale_context import LocaleContext
from .plural_rules import select_plural_branch

__all__ = ["MessageResolver", "ResolutionContext", "RichContent", "is_number"]

type Number = int | float | Decimal
type RichContent = tuple[object, ...]
type Bindings = Mapping[str, object]

_SHORT_DATETIME = DateTimeFormatOptions(date_style="short", time_style="short")
_SHORT_DATE = DateTimeFormatOptions(date_style="short")
_SHORT_TIME = DateTimeFormatOptions(time_style="short")


def is_number(value: object) -> bool:
    """True for int, float and Decimal; bool is excluded."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_finite(value: Number) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    # Arbitrarily large ints overflow math.isfinite
    return isinstance(value, int) or math.isfinite(value)


@dataclass(slots=True)
class ResolutionContext:
    """Explicit per-call state for message resolution.

    Attributes:
        bindings: Argument and tag values for this call
        rich: Rich mode (True) or text mode (False)
        guard: Depth tracking for branch and tag bodies
        plural_value: Offset-adjusted value of the innermost plural, for '#'
    """

    bindings: Bindings
    rich: bool = False
    guard: DepthGuard = field(default_factory=DepthGuard)
    plural_value: Number | None = None


class MessageResolver:
    """Resolves compiled messages to text or rich content.

    Errors are raised, never collected: a missing binding or a type
    mismatch aborts the call with EvaluationError.

    Example:
        >>> from icuengine.syntax import parse
        >>> resolver = MessageResolver(LocaleContext.create("en"), FormatRegistry())
        >>> message = parse("{count, plural, =0 {none} other {# items}}")
        >>> resolver.resolve_text(message, {"count": 3580})
        '3,580 items'
    """

    __slots__ = ("_locale", "_max_depth", "_registry")

    def __init__(
        self,
        locale: LocaleContext,
        registry: FormatRegistry,
        *,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        """Initialize resolver.

        Args:
            locale: Locale context for plural rules and primitive formatters
            registry: Named and skeleton format resolution
            max_depth: Maximum nesting of branch and tag bodies
        """
        self._locale = locale
        self._registry = registry
        self._max_depth = max_depth

    @property
    def locale(self) -> LocaleContext:
        """Locale context used for formatting."""
        return self._locale

    @property
    def registry(self) -> FormatRegistry:
        """Format registry used for style resolution."""
        return self._registry

    def with_registry(self, registry: FormatRegistry) -> "MessageResolver":
        """Return a resolver sharing this locale but using another registry."""
        if registry is self._registry:
            return self
        return MessageResolver(self._locale, registry, max_depth=self._max_depth)

    def resolve_text(self, message: Message | Pattern, bindings: Bindings | None = None) -> str:
        """Evaluate to a single string.

        Raises:
            EvaluationError: Missing binding, type mismatch, unknown style,
                missing tag function or non-string tag result
        """
        context = self._context(bindings, rich=False)
        parts = self._resolve_pattern(self._root(message), context)
        return "".join(str(part) for part in parts)

    def resolve_rich(
        self, message: Message | Pattern, bindings: Bindings | None = None
    ) -> RichContent:
        """Evaluate to a tuple of str and opaque nodes, adjacent text merged."""
        context = self._context(bindings, rich=True)
        return tuple(self._resolve_pattern(self._root(message), context))

    def _context(self, bindings: Bindings | None, *, rich: bool) -> ResolutionContext:
        return ResolutionContext(
            bindings=bindings if bindings is not None else {},
            rich=rich,
            guard=DepthGuard(max_depth=self._max_depth),
        )

    @staticmethod
    def _root(message: Message | Pattern) -> Pattern:
        return message.value if isinstance(message, Message) else message

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def _resolve_pattern(self, pattern: Pattern, context: ResolutionContext) -> list[object]:
        """Resolve a pattern into output parts with adjacent strings merged."""
        parts: list[object] = []
        for element in pattern.elements:
            match element:
                case TextElement(value=value):
                    self._append(parts, value)
                case PoundSign():
                    if context.plural_value is None:
                        self._append(parts, "#")
                    else:
                        self._append(parts, self._locale.format_number(context.plural_value))
                case Argument(name=name):
                    self._append(parts, self._resolve_argument(name, context))
                case FormattedArgument():
                    self._append(parts, self._resolve_formatted(element, context))
                case Plural():
                    for part in self._resolve_plural(element, context):
                        self._append(parts, part)
                case Select():
                    for part in self._resolve_select(element, context):
                        self._append(parts, part)
                case Tag():
                    for part in self._resolve_tag(element, context):
                        self._append(parts, part)
                case _:
                    assert_never(element)
        return parts

    @staticmethod
    def _append(parts: list[object], part: object) -> None:
        if isinstance(part, str):
            if not part:
                return
            if parts and isinstance(parts[-1], str):
                parts[-1] = f"{parts[-1]}{part}"
                return
        parts.append(part)

    @staticmethod
    def _lookup(name: str, context: ResolutionContext) -> object:
        value = context.bindings.get(name)
        if value is None:
            raise EvaluationError(ErrorTemplate.argument_not_provided(name))
        return value

    def _resolve_argument(self, name: str, context: ResolutionContext) -> object:
        """Default stringification for {name}."""
        value = self._lookup(name, context)
        match value:
            case bool():
                return "true" if value else "false"
            case str():
                return value
            case int() | float() | Decimal():
                return self._locale.format_number(value)
            case datetime():
                return self._locale.format_datetime(value, _SHORT_DATETIME)
            case date():
                return self._locale.format_datetime(value, _SHORT_DATE)
            case time():
                return self._locale.format_datetime(value, _SHORT_TIME)
            case _ if callable(value):
                raise EvaluationError(ErrorTemplate.type_mismatch(name, "a value", value))
            case _:
                return value if context.rich else str(value)

    def _resolve_formatted(self, element: FormattedArgument, context: ResolutionContext) -> str:
        value = self._lookup(element.name, context)
        kind = element.kind
        options = self._registry.resolve(kind, element.style, skeleton=element.skeleton)

        if kind is FormatterKind.NUMBER:
            if not is_number(value):
                raise EvaluationError(ErrorTemplate.type_mismatch(element.name, "a number", value))
            return self._locale.format_number(value, options)  # type: ignore[arg-type]

        accepted = (datetime, date) if kind is FormatterKind.DATE else (datetime, time)
        if not (isinstance(value, accepted) or is_number(value)):
            expected = (
                "a date or timestamp" if kind is FormatterKind.DATE else "a time or timestamp"
            )
            raise EvaluationError(ErrorTemplate.type_mismatch(element.name, expected, value))
        return self._locale.format_datetime(value, options)  # type: ignore[arg-type]

    def _resolve_plural(self, element: Plural, context: ResolutionContext) -> list[object]:
        value = self._lookup(element.name, context)
        if not is_number(value):
            raise EvaluationError(ErrorTemplate.type_mismatch(element.name, "a number", value))
        if not _is_finite(value):  # type: ignore[arg-type]
            raise EvaluationError(
                ErrorTemplate.type_mismatch(element.name, "a finite number", value)
            )
        adjusted: Number = value - element.offset  # type: ignore[operator]
        branch = select_plural_branch(
            element.branches, adjusted, self._locale.plural_locale, element.kind
        )

        outer = context.plural_value
        context.plural_value = adjusted
        try:
            with context.guard:
                return self._resolve_pattern(branch.value, context)
        finally:
            context.plural_value = outer

    def _resolve_select(self, element: Select, context: ResolutionContext) -> list[object]:
        value = self._lookup(element.name, context)
        if isinstance(value, bool):
            selector = "true" if value else "false"
        else:
            selector = str(value)

        chosen = next((b for b in element.branches if b.key == selector), None)
        if chosen is None:
            chosen = next(b for b in element.branches if b.key == OTHER_SELECTOR)

        with context.guard:
            return self._resolve_pattern(chosen.value, context)

    def _resolve_tag(self, element: Tag, context: ResolutionContext) -> list[object]:
        function = context.bindings.get(element.name)
        if function is None:
            raise EvaluationError(ErrorTemplate.tag_not_provided(element.name))
        if not callable(function):
            raise EvaluationError(
                ErrorTemplate.type_mismatch(element.name, "a tag function", function)
            )
        render: Callable[..., object] = function

        with context.guard:
            children = self._resolve_pattern(element.children, context)

        if context.rich:
            return [render(tuple(children))]

        result = render("".join(str(child) for child in children))
        if not isinstance(result, str):
            raise EvaluationError(ErrorTemplate.tag_result_invalid(element.name, result))
        return [result]
