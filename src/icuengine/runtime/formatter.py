"""MessageFormatter - main public API for ICU message formatting.

Ties the pieces together: templates are compiled through a PatternCache,
evaluated by a MessageResolver against a LocaleContext, with style names
resolved through a FormatRegistry.

Python 3.13+. Depends on Babel for locale data.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time
from typing import Any

from icuengine.constants import DEFAULT_CACHE_SIZE, FALLBACK_LOCALE, MAX_DEPTH
from icuengine.diagnostics import ErrorTemplate, EvaluationError
from icuengine.enums import FormatKind
from icuengine.locale_utils import get_system_locale, validate_locale_format
from icuengine.syntax.ast import Message
from icuengine.syntax.parser import MessageParser

from .cache import PatternCache
from .format_options import DateTimeFormatOptions, ListFormatOptions, NumberFormatOptions
from .format_registry import FormatRegistry, FormatsConfig
from .locale_context import LocaleContext
from .resolver import MessageResolver, RichContent, is_number

__all__ = [
    "MessageFormatter",
    "compile_message",
    "format_message",
    "format_rich_message",
]

logger = logging.getLogger(__name__)

type Bindings = Mapping[str, object]


class MessageFormatter:
    """ICU message formatter for one locale.

    Formatters are safe to share between threads: the only mutable shared
    state is the PatternCache, which is internally synchronized.

    Examples:
        >>> formatter = MessageFormatter("en")
        >>> formatter.format(
        ...     "You have {count, plural, =0 {no followers yet} =1 {one follower} "
        ...     "other {# followers}}.",
        ...     {"count": 3580},
        ... )
        'You have 3,580 followers.'

        >>> formatter.format_rich(
        ...     "Please refer to <guidelines>the guidelines</guidelines>.",
        ...     {"guidelines": lambda children: ("a", children)},
        ... )
        ('Please refer to ', ('a', ('the guidelines',)), '.')
    """

    __slots__ = ("_cache", "_locale", "_locale_context", "_registry", "_resolver")

    def __init__(
        self,
        locale: str,
        /,
        *,
        formats: FormatsConfig | FormatRegistry | None = None,
        cache: PatternCache | None = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
        ignore_tags: bool = False,
        strict_locale: bool = False,
    ) -> None:
        """Initialize formatter for locale.

        Args:
            locale: Locale code (en, en-US, lv_LV) [positional-only]
            formats: Named format configurations, as a FormatRegistry or an
                intl-messageformat style mapping
            cache: Shared PatternCache; ASTs are locale-independent, so one
                cache can serve formatters for every locale. When given,
                the parser options below are ignored.
            cache_size: Maximum compiled templates when a cache is created
            max_source_size: Maximum template length (default: 1 MiB)
            max_nesting_depth: Maximum nesting of branches and tags (default: 100)
            ignore_tags: Treat '<' as literal text
            strict_locale: Raise ValueError for unknown locales instead of
                falling back to en_US

        Raises:
            ValueError: If locale code is empty or malformed (or unknown, when strict)
            ConfigurationError: If formats contain invalid configurations
        """
        validate_locale_format(locale)
        self._locale = locale
        self._locale_context = (
            LocaleContext.create_or_raise(locale) if strict_locale else LocaleContext.create(locale)
        )

        if isinstance(formats, FormatRegistry):
            self._registry = formats
        else:
            self._registry = FormatRegistry(formats)

        if cache is None:
            parser = MessageParser(
                max_source_size=max_source_size,
                max_nesting_depth=max_nesting_depth,
                ignore_tags=ignore_tags,
            )
            cache = PatternCache(cache_size, parser=parser)
        self._cache = cache

        self._resolver = MessageResolver(
            self._locale_context,
            self._registry,
            max_depth=max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH,
        )

        logger.info(
            "MessageFormatter initialized for locale: %s (formats=%d, cache_size=%d)",
            locale,
            len(self._registry),
            self._cache.maxsize,
        )

    @classmethod
    def for_system_locale(cls, **kwargs: Any) -> "MessageFormatter":
        """Create a formatter using the system locale.

        Detects the locale from locale.getlocale(), LC_ALL, LC_MESSAGES or
        LANG, falling back to en_US.

        Args:
            **kwargs: Forwarded to MessageFormatter()
        """
        return cls(get_system_locale(), **kwargs)

    @property
    def locale(self) -> str:
        """Locale code as given (read-only)."""
        return self._locale

    @property
    def locale_context(self) -> LocaleContext:
        """Locale context used for plural rules and primitive formatters."""
        return self._locale_context

    @property
    def registry(self) -> FormatRegistry:
        """Named format registry."""
        return self._registry

    @property
    def cache(self) -> PatternCache:
        """Compiled-pattern cache."""
        return self._cache

    def register_format(
        self, kind: FormatKind | str, name: str, options: Mapping[str, Any]
    ) -> None:
        """Register a named format on this formatter's registry."""
        self._registry.register(kind, name, options)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def compile(self, template: str) -> Message:
        """Compile a template through the cache.

        Raises:
            ParseError: Template is malformed (cached as terminal failure)
        """
        return self._cache.get_or_compile(template)

    def format(
        self,
        message: str | Message,
        bindings: Bindings | None = None,
        *,
        formats: FormatsConfig | None = None,
    ) -> str:
        """Format a template or compiled message to text.

        Args:
            message: Template text or a Message from compile()
            bindings: Argument values and tag functions
            formats: Extra named formats for this call only

        Raises:
            ParseError: Template is malformed
            EvaluationError: Missing binding, type mismatch or unknown style
        """
        compiled = self.compile(message) if isinstance(message, str) else message
        return self._resolver_for(formats).resolve_text(compiled, bindings)

    def format_rich(
        self,
        message: str | Message,
        bindings: Bindings | None = None,
        *,
        formats: FormatsConfig | None = None,
    ) -> RichContent:
        """Format a template or compiled message to rich content.

        Tag bindings receive a tuple of child nodes and return one node.

        Returns:
            Tuple of str and opaque nodes, adjacent text merged
        """
        compiled = self.compile(message) if isinstance(message, str) else message
        return self._resolver_for(formats).resolve_rich(compiled, bindings)

    def _resolver_for(self, formats: FormatsConfig | None) -> MessageResolver:
        if not formats:
            return self._resolver
        return self._resolver.with_registry(self._registry.overlay(formats))

    # -------------------------------------------------------------------------
    # Primitive formatters
    # -------------------------------------------------------------------------

    def _resolve_options(
        self, kind: FormatKind, style: str | None, options: Mapping[str, Any]
    ) -> Any:
        if style is not None and style.startswith("::"):
            return self._registry.resolve(kind, skeleton=style[2:], overrides=options)
        return self._registry.resolve(kind, style, overrides=options)

    def format_number(self, value: object, style: str | None = None, **options: Any) -> str:
        """Format a number directly.

        Args:
            value: int, float or Decimal
            style: Registered or built-in name, or '::' + number skeleton
            **options: Inline options (highest precedence), camelCase or snake_case

        Example:
            >>> MessageFormatter("en").format_number(0.256, "percent", maximumFractionDigits=1)
            '25.6%'
        """
        if not is_number(value):
            raise EvaluationError(ErrorTemplate.type_mismatch("value", "a number", value))
        resolved: NumberFormatOptions = self._resolve_options(FormatKind.NUMBER, style, options)
        return self._locale_context.format_number(value, resolved)  # type: ignore[arg-type]

    def format_date(self, value: object, style: str | None = None, **options: Any) -> str:
        """Format a date, datetime or timestamp directly."""
        if not (isinstance(value, (datetime, date)) or is_number(value)):
            raise EvaluationError(
                ErrorTemplate.type_mismatch("value", "a date or timestamp", value)
            )
        resolved: DateTimeFormatOptions = self._resolve_options(FormatKind.DATE, style, options)
        return self._locale_context.format_datetime(value, resolved)  # type: ignore[arg-type]

    def format_time(self, value: object, style: str | None = None, **options: Any) -> str:
        """Format a time, datetime or timestamp directly."""
        if not (isinstance(value, (datetime, time)) or is_number(value)):
            raise EvaluationError(
                ErrorTemplate.type_mismatch("value", "a time or timestamp", value)
            )
        resolved: DateTimeFormatOptions = self._resolve_options(FormatKind.TIME, style, options)
        return self._locale_context.format_datetime(value, resolved)  # type: ignore[arg-type]

    def format_list(self, items: Sequence[object], style: str | None = None, **options: Any) -> str:
        """Join items with locale list patterns.

        Example:
            >>> MessageFormatter("en").format_list(["a", "b", "c"], type="disjunction")
            'a, b, or c'
        """
        if isinstance(items, str):
            raise EvaluationError(ErrorTemplate.type_mismatch("items", "a sequence", items))
        resolved: ListFormatOptions = self._resolve_options(FormatKind.LIST, style, options)
        return self._locale_context.format_list(items, resolved)

    def __repr__(self) -> str:
        """Return string representation for debugging.

        Example:
            >>> MessageFormatter("lv_LV")
            MessageFormatter(locale='lv_LV', formats=0, cached=0)
        """
        return (
            f"MessageFormatter(locale={self._locale!r}, "
            f"formats={len(self._registry)}, "
            f"cached={len(self._cache)})"
        )


def compile_message(template: str, *, ignore_tags: bool = False) -> Message:
    """Compile a template without any cache.

    Raises:
        ParseError: Template is malformed
    """
    return MessageParser(ignore_tags=ignore_tags).parse(template)


def format_message(
    template: str | Message,
    bindings: Bindings | None = None,
    *,
    locale: str = FALLBACK_LOCALE,
    formats: FormatsConfig | None = None,
) -> str:
    """Format one template to text with a throwaway formatter.

    Example:
        >>> format_message("{gender, select, female {She} male {He} other {They}} is online.",
        ...                {"gender": "female"})
        'She is online.'
    """
    return MessageFormatter(locale, formats=formats, cache_size=1).format(template, bindings)


def format_rich_message(
    template: str | Message,
    bindings: Bindings | None = None,
    *,
    locale: str = FALLBACK_LOCALE,
    formats: FormatsConfig | None = None,
) -> RichContent:
    """Format one template to rich content with a throwaway formatter."""
    return MessageFormatter(locale, formats=formats, cache_size=1).format_rich(template, bindings)
