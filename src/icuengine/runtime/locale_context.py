"""Locale context for thread-safe, formatter-scoped formatting.

This module provides the locale primitive formatters (number, date/time,
list) without global state mutation. Uses Babel for CLDR-compliant output.

Architecture:
    - LocaleContext: Immutable locale configuration container
    - Formatters take resolved option records from the Format Registry
    - No dependency on Python's locale module (avoids global state)
    - Each MessageFormatter owns its LocaleContext (locale isolation)

Design Principles:
    - Explicit over implicit (locale always visible)
    - Immutable by default (frozen dataclass)
    - CLDR-compliant (matches Intl.NumberFormat / Intl.DateTimeFormat semantics)
    - Every Babel failure surfaces as FormattingError

Python 3.13+. Uses Babel for i18n.
"""

import logging
import re
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, tzinfo
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import lists as babel_lists
from babel import numbers as babel_numbers
from babel.core import get_global

from icuengine.constants import (
    DEFAULT_MAXIMUM_FRACTION_DIGITS,
    FALLBACK_LOCALE,
    MAX_LOCALE_CACHE_SIZE,
)
from icuengine.diagnostics import ErrorTemplate, FormattingError
from icuengine.enums import FormatKind, ListStyle, ListType
from icuengine.locale_utils import normalize_locale

from .format_options import DateTimeFormatOptions, ListFormatOptions, NumberFormatOptions

__all__ = ["LocaleContext"]

logger = logging.getLogger(__name__)

type DateTimeValue = datetime | date | time | int | float | Decimal

_BABEL_ERRORS = (
    ValueError,
    TypeError,
    InvalidOperation,
    OverflowError,
    AttributeError,
    KeyError,
    LookupError,
)

# Field option -> skeleton letters, keyed by option value
_SKELETON_LETTERS: dict[str, dict[str, str]] = {
    "era": {"short": "G", "long": "GGGG", "narrow": "GGGGG"},
    "year": {"numeric": "y", "2-digit": "yy"},
    "month": {"numeric": "M", "2-digit": "MM", "short": "MMM", "long": "MMMM", "narrow": "MMMMM"},
    "weekday": {"short": "E", "long": "EEEE", "narrow": "EEEEE"},
    "day": {"numeric": "d", "2-digit": "dd"},
    "minute": {"numeric": "m", "2-digit": "mm"},
    "second": {"numeric": "s", "2-digit": "ss"},
    "time_zone_name": {"short": "z", "long": "zzzz"},
}
_HOUR_LETTERS: dict[str, str] = {"h11": "K", "h12": "h", "h23": "H", "h24": "k"}

# Pattern symbol -> field, used to carry requested widths onto matched patterns
_FIELD_FAMILIES: dict[str, str] = {
    "G": "era",
    "y": "year",
    "M": "month",
    "L": "month",
    "E": "weekday",
    "e": "weekday",
    "c": "weekday",
    "d": "day",
    "h": "hour",
    "H": "hour",
    "K": "hour",
    "k": "hour",
    "m": "minute",
    "s": "second",
    "z": "zone",
    "v": "zone",
}
_DATE_SYMBOLS = frozenset("GyMEd")
# Locale data rarely carries these alone; they are appended to the rest
_APPENDED_SYMBOLS = frozenset("Gz")
_TWO_DIGIT = 2
_TEXT_WIDTH = 3
_LONG_WIDTH = 4

_LIST_STYLES: dict[ListType, str] = {
    ListType.CONJUNCTION: "standard",
    ListType.DISJUNCTION: "or",
    ListType.UNIT: "unit",
}

_FRACTION_IN_PATTERN = re.compile(r"0\.0+")


def _adjust_field(symbol: str, width: int, wanted: tuple[str, int]) -> tuple[str, int]:
    """Fit one matched pattern field to the requested symbol run."""
    wanted_symbol, wanted_width = wanted
    match _FIELD_FAMILIES[symbol]:
        case "era":
            return symbol, wanted_width
        case "weekday":
            # E through EEE are all abbreviated; c and e need three for text
            return symbol, wanted_width if wanted_width >= _LONG_WIDTH else _TEXT_WIDTH
        case "month":
            if (width >= _TEXT_WIDTH) != (wanted_width >= _TEXT_WIDTH):
                return symbol, width
            if wanted_width >= _TEXT_WIDTH:
                return symbol, wanted_width
            return symbol, max(width, wanted_width)
        case "hour":
            return wanted_symbol, max(width, wanted_width)
        case "zone":
            return wanted_symbol, wanted_width
        case "year":
            return symbol, _TWO_DIGIT if wanted_width == _TWO_DIGIT else width
        case _:
            return symbol, max(width, wanted_width)


def _widen_pattern(pattern: str, skeleton: str) -> str:
    """Apply the skeleton's field widths to a pattern matched from locale data.

    Locale data holds one pattern per skeleton shape, so "EEEE" and "E"
    match the same entry; the requested widths and hour symbol are put back
    afterwards, as ICU's DateTimePatternGenerator does.

    Example:
        >>> _widen_pattern("ccc", "EEEE")
        'cccc'
    """
    wanted: dict[str, tuple[str, int]] = {}
    for kind, value in babel_dates.tokenize_pattern(skeleton):
        if kind == "field" and isinstance(value, tuple):
            wanted[_FIELD_FAMILIES[value[0]]] = value

    tokens: list[tuple[str, str | tuple[str, int]]] = []
    for kind, value in babel_dates.tokenize_pattern(pattern):
        if kind == "field" and isinstance(value, tuple):
            family = _FIELD_FAMILIES.get(value[0])
            if family in wanted:
                value = _adjust_field(value[0], value[1], wanted[family])
        tokens.append((kind, value))
    return babel_dates.untokenize_pattern(tokens)


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Use LocaleContext.create() factory to construct instances with proper validation.
    Direct construction via __init__ is not recommended (bypasses validation).

    Cache Management:
        LocaleContext uses an internal LRU cache for instance reuse:
        - LocaleContext.clear_cache(): Clear all cached instances
        - LocaleContext.cache_size(): Get current cache size
        - LocaleContext.cache_info(): Get detailed cache statistics

    Examples:
        >>> ctx = LocaleContext.create('en-US')
        >>> ctx.format_number(1234.5)
        '1,234.5'

        >>> ctx = LocaleContext.create('de-DE')
        >>> ctx.format_number(1234.5)
        '1.234,5'

        >>> # Invalid locales fall back to en_US with warning logged
        >>> ctx = LocaleContext.create('invalid-locale')
        >>> ctx.locale_code  # Original code preserved
        'invalid-locale'
        >>> ctx.is_fallback
        True

    Thread Safety:
        LocaleContext is immutable and thread-safe. Cache operations are
        protected by RLock.
    """

    _cache: ClassVar[OrderedDict[str, "LocaleContext"]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale_code: str
    _babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the locale context cache."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def cache_info(cls) -> dict[str, int | tuple[str, ...]]:
        """Get detailed cache statistics.

        Returns:
            Dictionary with size, max_size and locales (LRU order)
        """
        with cls._cache_lock:
            return {
                "size": len(cls._cache),
                "max_size": MAX_LOCALE_CACHE_SIZE,
                "locales": tuple(cls._cache.keys()),
            }

    @classmethod
    def create(cls, locale_code: str) -> "LocaleContext":
        """Create LocaleContext with graceful fallback for invalid locales.

        For unknown or invalid locales, logs a warning and falls back to en_US.
        This method always succeeds; use create_or_raise() for strict validation.

        Args:
            locale_code: BCP 47 locale identifier (e.g., 'en-US', 'lv-LV', 'de-DE')

        Returns:
            LocaleContext instance. For unknown/invalid locales, uses en_US
            rules while preserving the original locale_code for debugging.
        """
        cache_key = normalize_locale(locale_code)

        with cls._cache_lock:
            if cache_key in cls._cache:
                cls._cache.move_to_end(cache_key)
                return cls._cache[cache_key]

        used_fallback = False
        try:
            babel_locale = Locale.parse(cache_key)
        except UnknownLocaleError as e:
            logger.warning(
                "Unknown locale '%s': %s. Falling back to %s", locale_code, e, FALLBACK_LOCALE
            )
            babel_locale = Locale.parse(FALLBACK_LOCALE)
            used_fallback = True
        except ValueError as e:
            logger.warning(
                "Invalid locale format '%s': %s. Falling back to %s",
                locale_code,
                e,
                FALLBACK_LOCALE,
            )
            babel_locale = Locale.parse(FALLBACK_LOCALE)
            used_fallback = True

        ctx = cls(locale_code=locale_code, _babel_locale=babel_locale, is_fallback=used_fallback)

        with cls._cache_lock:
            if cache_key in cls._cache:
                return cls._cache[cache_key]
            if len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[cache_key] = ctx
            return ctx

    @classmethod
    def create_or_raise(cls, locale_code: str) -> "LocaleContext":
        """Create LocaleContext or raise on validation failure.

        Raises:
            ValueError: If locale code is invalid or unknown
        """
        try:
            babel_locale = Locale.parse(normalize_locale(locale_code))
        except UnknownLocaleError as e:
            msg = f"Unknown locale identifier '{locale_code}': {e}"
            raise ValueError(msg) from None
        except ValueError as e:
            msg = f"Invalid locale format '{locale_code}': {e}"
            raise ValueError(msg) from None
        return cls(locale_code=locale_code, _babel_locale=babel_locale)

    @property
    def babel_locale(self) -> Locale:
        """Pre-validated Babel Locale object for this context."""
        return self._babel_locale

    @property
    def plural_locale(self) -> str:
        """Locale identifier used for CLDR plural rule lookup."""
        return str(self._babel_locale)

    @property
    def default_currency(self) -> str:
        """ISO 4217 code of the locale's region (via likely subtags), else USD."""
        territory = self._babel_locale.territory
        if territory is None:
            likely = get_global("likely_subtags").get(self._babel_locale.language)
            if likely:
                territory = Locale.parse(likely).territory
        if territory:
            currencies = babel_numbers.get_territory_currencies(territory)
            if currencies:
                return currencies[0]
        return "USD"

    # -------------------------------------------------------------------------
    # Numbers
    # -------------------------------------------------------------------------

    def format_number(
        self,
        value: int | float | Decimal,
        options: NumberFormatOptions | None = None,
    ) -> str:
        """Format number with locale-specific separators.

        Args:
            value: Number to format (int, float, or Decimal)
            options: Resolved options (default: decimal, 0-3 fraction digits, grouping)

        Returns:
            Formatted number string according to locale rules

        Raises:
            FormattingError: If Babel rejects the value or options

        Examples:
            >>> ctx = LocaleContext.create('en-US')
            >>> ctx.format_number(3580)
            '3,580'
            >>> ctx.format_number(0.25, NumberFormatOptions(style="percent"))
            '25%'
            >>> ctx.format_number(12.5, NumberFormatOptions(style="currency", currency="EUR"))
            '€12.50'
        """
        opts = options or NumberFormatOptions()
        try:
            if opts.notation == "compact":
                return str(
                    babel_numbers.format_compact_decimal(
                        value,
                        format_type=opts.compact_display,
                        locale=self._babel_locale,
                        fraction_digits=opts.maximum_fraction_digits or 0,
                    )
                )
            match opts.style:
                case "percent":
                    return self._format_percent(value, opts)
                case "currency":
                    return self._format_currency(value, opts)
                case _:
                    pattern = opts.pattern or self._decimal_pattern(opts)
                    return str(
                        babel_numbers.format_decimal(
                            value, format=pattern, locale=self._babel_locale
                        )
                    )
        except _BABEL_ERRORS as e:
            raise FormattingError(
                ErrorTemplate.formatting_failed(FormatKind.NUMBER, value, str(e))
            ) from e

    @staticmethod
    def _fraction_part(minimum: int, maximum: int) -> str:
        # '#,##0' + '.0##' = 1-3 decimal places
        if maximum == 0:
            return ""
        return "." + "0" * minimum + "#" * (maximum - minimum)

    def _decimal_pattern(self, opts: NumberFormatOptions) -> str:
        integer_part = "#,##0" if opts.use_grouping else "0"
        minimum = opts.minimum_fraction_digits or 0
        maximum = opts.maximum_fraction_digits
        if maximum is None:
            maximum = max(minimum, DEFAULT_MAXIMUM_FRACTION_DIGITS)
        return integer_part + self._fraction_part(minimum, maximum)

    def _format_percent(self, value: int | float | Decimal, opts: NumberFormatOptions) -> str:
        pattern = opts.pattern
        if pattern is None and (
            opts.minimum_fraction_digits is not None or opts.maximum_fraction_digits is not None
        ):
            minimum = opts.minimum_fraction_digits or 0
            maximum = max(minimum, opts.maximum_fraction_digits or 0)
            integer_part = "#,##0" if opts.use_grouping else "0"
            pattern = f"{integer_part}{self._fraction_part(minimum, maximum)}%"
        return str(
            babel_numbers.format_percent(
                value,
                format=pattern,
                locale=self._babel_locale,
                group_separator=opts.use_grouping,
            )
        )

    def _format_currency(self, value: int | float | Decimal, opts: NumberFormatOptions) -> str:
        currency = opts.currency or self.default_currency
        if opts.currency_display == "name" and opts.pattern is None:
            return str(
                babel_numbers.format_currency(
                    value,
                    currency,
                    locale=self._babel_locale,
                    currency_digits=True,
                    format_type="name",
                    group_separator=opts.use_grouping,
                )
            )

        pattern = opts.pattern
        custom_digits = (
            opts.minimum_fraction_digits is not None or opts.maximum_fraction_digits is not None
        )
        if pattern is None and (opts.currency_display == "code" or custom_digits):
            standard = self._babel_locale.currency_formats.get("standard")
            raw_pattern = getattr(standard, "pattern", None)
            if raw_pattern:
                if opts.currency_display == "code" and "\xa4" in raw_pattern:
                    # Double U+00A4 = ISO code per CLDR
                    raw_pattern = raw_pattern.replace("\xa4", "\xa4\xa4")
                if custom_digits:
                    minimum = opts.minimum_fraction_digits or 0
                    maximum = max(minimum, opts.maximum_fraction_digits or 0)
                    replacement = "0" + self._fraction_part(minimum, maximum)
                    raw_pattern = _FRACTION_IN_PATTERN.sub(replacement, raw_pattern)
                pattern = raw_pattern
            else:
                logger.debug("Currency pattern for locale %s unavailable", self.locale_code)

        return str(
            babel_numbers.format_currency(
                value,
                currency,
                format=pattern,
                locale=self._babel_locale,
                currency_digits=not custom_digits,
                group_separator=opts.use_grouping,
            )
        )

    # -------------------------------------------------------------------------
    # Dates and times
    # -------------------------------------------------------------------------

    def format_datetime(
        self,
        value: DateTimeValue,
        options: DateTimeFormatOptions | None = None,
    ) -> str:
        """Format a date, time, datetime or POSIX timestamp.

        Args:
            value: datetime, date, time, or seconds since the epoch.
                Naive datetimes are interpreted as UTC.
            options: Resolved options (default: medium date)

        Returns:
            Formatted string according to locale rules

        Raises:
            FormattingError: If Babel rejects the value or no pattern matches

        Examples:
            >>> ctx = LocaleContext.create('en-US')
            >>> ctx.format_datetime(date(2024, 1, 5), DateTimeFormatOptions(date_style="short"))
            '1/5/24'
            >>> ctx.format_datetime(date(2024, 1, 5), DateTimeFormatOptions(date_style="long"))
            'January 5, 2024'
            >>> ctx.format_datetime(
            ...     date(2024, 1, 5),
            ...     DateTimeFormatOptions(year="numeric", month="numeric", day="numeric"),
            ... )
            '1/5/2024'
        """
        opts = options or DateTimeFormatOptions(date_style="medium")
        try:
            zone: tzinfo | None = (
                babel_dates.get_timezone(opts.time_zone) if opts.time_zone else None
            )
            instant = self._to_instant(value, zone)

            if opts.pattern is not None:
                return str(
                    babel_dates.format_datetime(
                        instant, format=opts.pattern, tzinfo=zone, locale=self._babel_locale
                    )
                )
            if opts.has_fields:
                pattern = self._skeleton_pattern(self._skeleton(opts))
                return str(
                    babel_dates.format_datetime(
                        instant, format=pattern, tzinfo=zone, locale=self._babel_locale
                    )
                )
            if opts.date_style and opts.time_style:
                return self._combine(instant, opts.date_style, opts.time_style, zone)
            if opts.time_style:
                return str(
                    babel_dates.format_time(
                        instant, format=opts.time_style, tzinfo=zone, locale=self._babel_locale
                    )
                )
            return str(
                babel_dates.format_date(
                    instant, format=opts.date_style or "medium", locale=self._babel_locale
                )
            )
        except _BABEL_ERRORS as e:
            raise FormattingError(
                ErrorTemplate.formatting_failed(FormatKind.DATE, value, str(e))
            ) from e

    @staticmethod
    def _to_instant(value: DateTimeValue, zone: tzinfo | None) -> datetime | date | time:
        """Normalize a value to what Babel formats, converted to zone."""
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            value = datetime.fromtimestamp(float(value), tz=UTC)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=UTC)
            if zone is not None:
                value = value.astimezone(zone)
            return value
        if isinstance(value, (date, time)):
            return value
        msg = f"expected a date, time, datetime or timestamp, got {type(value).__name__}"
        raise TypeError(msg)

    def _combine(
        self, instant: datetime | date | time, date_style: str, time_style: str, zone: tzinfo | None
    ) -> str:
        date_str = babel_dates.format_date(instant, format=date_style, locale=self._babel_locale)
        time_str = babel_dates.format_time(
            instant, format=time_style, tzinfo=zone, locale=self._babel_locale
        )
        # CLDR dateTimeFormat: {0} is the time, {1} the date
        datetime_pattern = (
            self._babel_locale.datetime_formats.get(date_style)
            or self._babel_locale.datetime_formats.get("medium")
            or "{1} {0}"
        )
        if hasattr(datetime_pattern, "format"):
            return str(datetime_pattern.format(time_str, date_str))
        return str(datetime_pattern).format(time_str, date_str)

    @staticmethod
    def _skeleton(opts: DateTimeFormatOptions) -> str:
        """Build a CLDR skeleton from individual field options."""
        parts: list[str] = []
        for name in ("era", "year", "month", "weekday", "day"):
            option = getattr(opts, name)
            if option is not None:
                parts.append(_SKELETON_LETTERS[name][option])
        if opts.hour is not None:
            letter = _HOUR_LETTERS[opts.hour_cycle or "h12"]
            parts.append(letter * (2 if opts.hour == "2-digit" else 1))
        for name in ("minute", "second", "time_zone_name"):
            option = getattr(opts, name)
            if option is not None:
                parts.append(_SKELETON_LETTERS[name][option])
        return "".join(parts)

    def _skeleton_pattern(self, skeleton: str) -> str:
        """Resolve a skeleton to a pattern from this locale's data.

        1. Closest locale skeleton, widened to the requested field widths
        2. Otherwise the date and time halves separately, joined with the
           locale's medium date-time glue
        3. Era and zone are matched without and appended; fields with no
           locale match at all are rendered in skeleton order
        """
        date_part = "".join(c for c in skeleton if c in _DATE_SYMBOLS)
        time_part = "".join(c for c in skeleton if c not in _DATE_SYMBOLS)
        if date_part and time_part:
            pattern = self._match_pattern(skeleton)
            if pattern is not None:
                return pattern
            # CLDR dateTimeFormat: {0} is the time, {1} the date
            glue = str(self._babel_locale.datetime_formats.get("medium") or "{1} {0}")
            return glue.format(self._part_pattern(time_part), self._part_pattern(date_part))
        return self._part_pattern(skeleton)

    def _part_pattern(self, skeleton: str) -> str:
        pattern = self._match_pattern(skeleton)
        if pattern is not None:
            return pattern

        core: list[str] = []
        appended: list[str] = []
        for kind, value in babel_dates.tokenize_pattern(skeleton):
            if kind == "field" and isinstance(value, tuple):
                run = value[0] * value[1]
                (appended if value[0] in _APPENDED_SYMBOLS else core).append(run)

        base = ""
        if core:
            base = self._match_pattern("".join(core)) or " ".join(core)
        return " ".join(part for part in (base, *appended) if part)

    def _match_pattern(self, skeleton: str) -> str | None:
        available = self._babel_locale.datetime_skeletons
        match = babel_dates.match_skeleton(skeleton, available)
        if match is None:
            return None
        return _widen_pattern(available[match].pattern, skeleton)

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    def format_list(self, items: Sequence[object], options: ListFormatOptions | None = None) -> str:
        """Join items with locale list patterns.

        Examples:
            >>> ctx = LocaleContext.create('en-US')
            >>> ctx.format_list(["apples", "pears", "plums"])
            'apples, pears, and plums'
            >>> ctx.format_list(["tea", "coffee"], ListFormatOptions(type=ListType.DISJUNCTION))
            'tea or coffee'
        """
        opts = options or ListFormatOptions()
        style = _LIST_STYLES[opts.type]
        if opts.style is not ListStyle.LONG:
            style = f"{style}-{opts.style}"
        try:
            return str(
                babel_lists.format_list(
                    [str(item) for item in items],
                    style=style,  # type: ignore[arg-type]
                    locale=self._babel_locale,
                )
            )
        except _BABEL_ERRORS as e:
            raise FormattingError(
                ErrorTemplate.formatting_failed(FormatKind.LIST, list(items), str(e))
            ) from e

    def __repr__(self) -> str:
        fallback = ", fallback" if self.is_fallback else ""
        return f"LocaleContext({self.locale_code!r}{fallback})"
