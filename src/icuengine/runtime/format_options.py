"""Resolved formatting options for numbers, dates/times and lists.

An options object is what the Format Registry hands to LocaleContext: a
frozen, validated record whose field names follow Intl.NumberFormat,
Intl.DateTimeFormat and Intl.ListFormat in snake_case.

Configuration arrives from three places and all of it funnels through
``options_from_mapping``:

    - registered formats:   {"number": {"money": {"style": "currency", ...}}}
    - inline call options:  formatter.format_number(3, maximumFractionDigits=2)
    - skeleton expansion:   "::percent group-off" -> {"style": "percent", ...}

Keys may be written in camelCase (ICU/JavaScript heritage) or snake_case.

Python 3.13+. Depends on Babel for time zone lookup.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any, Literal, Self

from babel.dates import get_timezone

from icuengine.diagnostics import ConfigurationError, ErrorTemplate
from icuengine.enums import FormatKind, ListStyle, ListType

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Option records
    "NumberFormatOptions",
    "DateTimeFormatOptions",
    "ListFormatOptions",
    "FormatOptions",
    # Construction
    "options_from_mapping",
    "option_name_map",
]

_STYLES: tuple[str, ...] = ("short", "medium", "long", "full")
_NUMERIC: tuple[str, ...] = ("numeric", "2-digit")
_TEXT: tuple[str, ...] = ("short", "long", "narrow")
_MAX_FRACTION_DIGITS: int = 20


def _invalid(kind: FormatKind, option: str, value: object, reason: str) -> ConfigurationError:
    return ConfigurationError(ErrorTemplate.invalid_format_option(kind, option, value, reason))


def _check_choice(kind: FormatKind, option: str, value: object, choices: tuple[str, ...]) -> None:
    if value is not None and value not in choices:
        raise _invalid(kind, option, value, f"expected one of {', '.join(choices)}")


def _check_digits(kind: FormatKind, option: str, value: object) -> None:
    if value is None:
        return
    if not isinstance(value, int) or isinstance(value, bool):
        raise _invalid(kind, option, value, "expected an integer")
    if not 0 <= value <= _MAX_FRACTION_DIGITS:
        raise _invalid(kind, option, value, f"expected 0..{_MAX_FRACTION_DIGITS}")


class _MergeMixin:
    """Shared override logic for the frozen option records."""

    __slots__ = ()

    def merge(self, overrides: Mapping[str, Any]) -> Self:
        """Return a copy with overrides applied (camelCase keys accepted).

        Fields absent from overrides keep their current value. The result
        is validated again, so an override cannot produce an invalid record.
        """
        if not overrides:
            return self
        normalized = _normalize_keys(type(self), overrides)
        return replace(self, **normalized)


@dataclass(frozen=True, slots=True)
class NumberFormatOptions(_MergeMixin):
    """Intl.NumberFormat-style options.

    Attributes:
        style: decimal, percent or currency
        currency: ISO 4217 code; None means the locale's currency
        currency_display: symbol, code or name
        minimum_fraction_digits: None means the style's default
        maximum_fraction_digits: None means the style's default
        use_grouping: Thousands separators on or off
        notation: standard or compact
        compact_display: short ("12K") or long ("12 thousand")
        pattern: Raw CLDR number pattern; overrides every other field except currency
    """

    style: Literal["decimal", "percent", "currency"] = "decimal"
    currency: str | None = None
    currency_display: Literal["symbol", "code", "name"] = "symbol"
    minimum_fraction_digits: int | None = None
    maximum_fraction_digits: int | None = None
    use_grouping: bool = True
    notation: Literal["standard", "compact"] = "standard"
    compact_display: Literal["short", "long"] = "short"
    pattern: str | None = None

    def __post_init__(self) -> None:
        kind = FormatKind.NUMBER
        _check_choice(kind, "style", self.style, ("decimal", "percent", "currency"))
        _check_choice(kind, "currency_display", self.currency_display, ("symbol", "code", "name"))
        _check_choice(kind, "notation", self.notation, ("standard", "compact"))
        _check_choice(kind, "compact_display", self.compact_display, ("short", "long"))
        _check_digits(kind, "minimum_fraction_digits", self.minimum_fraction_digits)
        _check_digits(kind, "maximum_fraction_digits", self.maximum_fraction_digits)
        if not isinstance(self.use_grouping, bool):
            raise _invalid(kind, "use_grouping", self.use_grouping, "expected true or false")
        if (
            self.minimum_fraction_digits is not None
            and self.maximum_fraction_digits is not None
            and self.minimum_fraction_digits > self.maximum_fraction_digits
        ):
            raise _invalid(
                kind,
                "minimum_fraction_digits",
                self.minimum_fraction_digits,
                "must not exceed maximum_fraction_digits",
            )
        if self.currency is not None:
            code = self.currency
            if not (isinstance(code, str) and len(code) == 3 and code.isalpha()):  # noqa: PLR2004
                raise _invalid(kind, "currency", code, "expected a 3-letter ISO 4217 code")
            object.__setattr__(self, "currency", code.upper())


@dataclass(frozen=True, slots=True)
class DateTimeFormatOptions(_MergeMixin):
    """Intl.DateTimeFormat-style options.

    Either a style (date_style/time_style) or individual fields may be
    given, not both. A raw CLDR pattern overrides both.

    Attributes:
        date_style: short, medium, long or full
        time_style: short, medium, long or full
        year, month, day, weekday, era, hour, minute, second: field widths
        hour_cycle: h11, h12, h23 or h24
        time_zone_name: short or long
        time_zone: IANA zone applied to datetimes and timestamps
        pattern: Raw CLDR date pattern, e.g. "yyyy-MM-dd"
    """

    date_style: str | None = None
    time_style: str | None = None
    year: str | None = None
    month: str | None = None
    day: str | None = None
    weekday: str | None = None
    era: str | None = None
    hour: str | None = None
    minute: str | None = None
    second: str | None = None
    hour_cycle: str | None = None
    time_zone_name: str | None = None
    time_zone: str | None = None
    pattern: str | None = None

    def __post_init__(self) -> None:
        kind = FormatKind.DATE
        _check_choice(kind, "date_style", self.date_style, _STYLES)
        _check_choice(kind, "time_style", self.time_style, _STYLES)
        for name in ("year", "day", "hour", "minute", "second"):
            _check_choice(kind, name, getattr(self, name), _NUMERIC)
        _check_choice(kind, "month", self.month, _NUMERIC + _TEXT)
        _check_choice(kind, "weekday", self.weekday, _TEXT)
        _check_choice(kind, "era", self.era, _TEXT)
        _check_choice(kind, "hour_cycle", self.hour_cycle, ("h11", "h12", "h23", "h24"))
        _check_choice(kind, "time_zone_name", self.time_zone_name, ("short", "long"))

        if (self.date_style or self.time_style) and self.has_fields:
            raise _invalid(
                kind, "date_style", self.date_style or self.time_style,
                "date_style/time_style cannot be combined with individual fields",
            )
        if self.time_zone is not None:
            try:
                get_timezone(self.time_zone)
            except LookupError:
                msg = "unknown IANA time zone"
                raise _invalid(kind, "time_zone", self.time_zone, msg) from None

    @property
    def has_fields(self) -> bool:
        """True when any individual date/time field is requested."""
        return any(
            getattr(self, name) is not None
            for name in (
                "year", "month", "day", "weekday", "era",
                "hour", "minute", "second", "time_zone_name",
            )
        )


@dataclass(frozen=True, slots=True)
class ListFormatOptions(_MergeMixin):
    """Intl.ListFormat-style options."""

    type: ListType = ListType.CONJUNCTION
    style: ListStyle = ListStyle.LONG

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "type", ListType(self.type))
        except ValueError:
            raise _invalid(
                FormatKind.LIST, "type", self.type, f"expected one of {', '.join(ListType)}"
            ) from None
        try:
            object.__setattr__(self, "style", ListStyle(self.style))
        except ValueError:
            raise _invalid(
                FormatKind.LIST, "style", self.style, f"expected one of {', '.join(ListStyle)}"
            ) from None


type FormatOptions = NumberFormatOptions | DateTimeFormatOptions | ListFormatOptions

_OPTION_CLASSES: dict[FormatKind, type[FormatOptions]] = {
    FormatKind.NUMBER: NumberFormatOptions,
    FormatKind.DATE: DateTimeFormatOptions,
    FormatKind.TIME: DateTimeFormatOptions,
    FormatKind.LIST: ListFormatOptions,
}

_KIND_OF: dict[type, FormatKind] = {
    NumberFormatOptions: FormatKind.NUMBER,
    DateTimeFormatOptions: FormatKind.DATE,
    ListFormatOptions: FormatKind.LIST,
}


def _to_camel_case(snake_case: str) -> str:
    components = snake_case.split("_")
    return components[0] + "".join(comp.capitalize() for comp in components[1:])


def option_name_map(options_class: type) -> dict[str, str]:
    """Map every accepted option spelling to its field name.

    Example:
        >>> option_name_map(ListFormatOptions)
        {'type': 'type', 'style': 'style'}
        >>> option_name_map(NumberFormatOptions)["maximumFractionDigits"]
        'maximum_fraction_digits'
    """
    mapping: dict[str, str] = {}
    for field in fields(options_class):
        mapping[field.name] = field.name
        mapping[_to_camel_case(field.name)] = field.name
    return mapping


def _normalize_keys(options_class: type, raw: Mapping[str, Any]) -> dict[str, Any]:
    """Convert camelCase keys to field names, rejecting unknown keys."""
    kind = _KIND_OF[options_class]
    names = option_name_map(options_class)
    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        if key in ("hour12", "hour_12") and options_class is DateTimeFormatOptions:
            normalized["hour_cycle"] = "h12" if value else "h23"
            continue
        field_name = names.get(key)
        if field_name is None:
            raise _invalid(kind, key, value, "unknown option")
        normalized[field_name] = value
    return normalized


def options_from_mapping(kind: FormatKind, raw: Mapping[str, Any]) -> FormatOptions:
    """Build a validated options record from a plain mapping.

    Args:
        kind: Which formatter the options configure
        raw: Option values keyed by camelCase or snake_case names

    Returns:
        NumberFormatOptions, DateTimeFormatOptions or ListFormatOptions

    Raises:
        ConfigurationError: Unknown option name or invalid value

    Example:
        >>> options = options_from_mapping(FormatKind.NUMBER, {"maximumFractionDigits": 2})
        >>> options.maximum_fraction_digits
        2
    """
    options_class = _OPTION_CLASSES[FormatKind(kind)]
    if isinstance(raw, options_class):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            ErrorTemplate.invalid_format_config(kind, "<inline>", "options must be a mapping")
        )
    return options_class(**_normalize_keys(options_class, raw))
