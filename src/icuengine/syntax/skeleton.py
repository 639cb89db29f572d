"""Date/time and number skeleton tokenizers.

A skeleton names the fields or features to render and leaves ordering and
punctuation to locale data. Both the parser (which validates skeletons at
compile time) and the format registry (which expands them into option
objects) go through this module, so a skeleton accepted by one is always
accepted by the other.

Date/time skeletons are runs of field symbols:

    Symbol  Field        Max run  Meaning by run length
    G       era          5        1-3 short, 4 long, 5 narrow
    y       year         any      2 two-digit, otherwise numeric
    M       month        5        1 numeric, 2 two-digit, 3 short, 4 long, 5 narrow
    d       day          2        1 numeric, 2 two-digit
    E e c   weekday      5        1-3 short, 4 long, 5 narrow
    a       day period   5        forces a 12-hour clock
    h H K k hour         2        h 1-12, H 0-23, K 0-11, k 1-24
    m       minute       2
    s       second       2
    z       time zone    4        1-3 short, 4 long

Number skeletons are whitespace-separated ICU stems:

    percent | %              percent style (value multiplied by 100)
    currency/XXX             currency style with ISO 4217 code XXX
    precision-integer        no fraction digits
    .00 .0# .##              min fraction = count of 0, max = count of 0 and #
    group-off                disable grouping separators
    compact-short | K        compact notation, short display
    compact-long | KK        compact notation, long display
    unit-width-iso-code      currency as ISO code
    unit-width-short         currency as symbol
    unit-width-full-name     currency as localized name

Python 3.13+. Zero external dependencies.
"""

import re
from dataclasses import dataclass

__all__ = [
    "DATE_SKELETON_SYMBOLS",
    "SkeletonError",
    "SkeletonField",
    "date_skeleton_options",
    "number_skeleton_options",
    "parse_date_skeleton",
]

# symbol -> (field, maximum run length; 0 means unbounded)
DATE_SKELETON_SYMBOLS: dict[str, tuple[str, int]] = {
    "G": ("era", 5),
    "y": ("year", 0),
    "M": ("month", 5),
    "d": ("day", 2),
    "E": ("weekday", 5),
    "e": ("weekday", 5),
    "c": ("weekday", 5),
    "a": ("day_period", 5),
    "h": ("hour", 2),
    "H": ("hour", 2),
    "K": ("hour", 2),
    "k": ("hour", 2),
    "m": ("minute", 2),
    "s": ("second", 2),
    "z": ("time_zone_name", 4),
}

_HOUR_CYCLES: dict[str, str] = {"h": "h12", "H": "h23", "K": "h11", "k": "h24"}
_TEXT_WIDTHS: tuple[str, ...] = ("short", "short", "short", "long", "narrow")
_FRACTION_RE = re.compile(r"\.(0*)(#*)")
_CURRENCY_RE = re.compile(r"[A-Z]{3}")


class SkeletonError(ValueError):
    """Skeleton rejected by a tokenizer.

    Attributes:
        reason: What is wrong
        offset: Character offset inside the skeleton text
    """

    def __init__(self, reason: str, offset: int) -> None:
        super().__init__(reason)
        self.reason = reason
        self.offset = offset


@dataclass(frozen=True, slots=True)
class SkeletonField:
    """One run of identical date/time symbols, e.g. ``MMM``."""

    symbol: str
    count: int
    field: str
    offset: int


def parse_date_skeleton(skeleton: str) -> tuple[SkeletonField, ...]:
    """Split a date/time skeleton into validated symbol runs.

    Args:
        skeleton: Skeleton text without the '::' prefix, e.g. "yMMMd"

    Returns:
        Runs in skeleton order

    Raises:
        SkeletonError: On empty input, unknown symbols, runs longer than the
            symbol allows, a field requested twice, or a day period without
            an hour

    Example:
        >>> [(f.symbol, f.count) for f in parse_date_skeleton("yMMMd")]
        [('y', 1), ('M', 3), ('d', 1)]
    """
    if not skeleton:
        msg = "skeleton is empty"
        raise SkeletonError(msg, 0)

    fields: list[SkeletonField] = []
    seen: dict[str, str] = {}
    pos = 0
    while pos < len(skeleton):
        symbol = skeleton[pos]
        entry = DATE_SKELETON_SYMBOLS.get(symbol)
        if entry is None:
            msg = f"unsupported symbol {symbol!r}"
            raise SkeletonError(msg, pos)

        end = pos
        while end < len(skeleton) and skeleton[end] == symbol:
            end += 1
        count = end - pos

        field, max_count = entry
        if max_count and count > max_count:
            msg = f"symbol {symbol!r} repeated {count} times (maximum {max_count})"
            raise SkeletonError(msg, pos)
        if field in seen:
            msg = f"{field.replace('_', ' ')} requested twice ({seen[field]!r} and {symbol!r})"
            raise SkeletonError(msg, pos)

        seen[field] = symbol
        fields.append(SkeletonField(symbol=symbol, count=count, field=field, offset=pos))
        pos = end

    if "day_period" in seen and "hour" not in seen:
        period = next(run for run in fields if run.field == "day_period")
        msg = "day period requires an hour field"
        raise SkeletonError(msg, period.offset)

    return tuple(fields)


def date_skeleton_options(skeleton: str) -> dict[str, str]:
    """Expand a date/time skeleton into explicit field options.

    Option names and values follow Intl.DateTimeFormat.

    Example:
        >>> date_skeleton_options("yMMMd")
        {'year': 'numeric', 'month': 'short', 'day': 'numeric'}
        >>> date_skeleton_options("Hm")
        {'hour_cycle': 'h23', 'hour': 'numeric', 'minute': 'numeric'}
    """
    options: dict[str, str] = {}
    for run in parse_date_skeleton(skeleton):
        numeric = "2-digit" if run.count == 2 else "numeric"  # noqa: PLR2004
        match run.field:
            case "era" | "weekday":
                options[run.field] = _TEXT_WIDTHS[run.count - 1]
            case "year" | "day" | "minute" | "second":
                options[run.field] = numeric
            case "month":
                if run.count <= 2:  # noqa: PLR2004
                    options["month"] = numeric
                else:
                    options["month"] = _TEXT_WIDTHS[run.count - 1]
            case "day_period":
                options.setdefault("hour_cycle", "h12")
            case "hour":
                options["hour_cycle"] = _HOUR_CYCLES[run.symbol]
                options["hour"] = numeric
            case "time_zone_name":
                options["time_zone_name"] = "long" if run.count == 4 else "short"  # noqa: PLR2004
    return options


def number_skeleton_options(skeleton: str) -> dict[str, str | int | bool]:
    """Expand a number skeleton into explicit options.

    Option names follow NumberFormatOptions field names.

    Raises:
        SkeletonError: On empty input or an unknown or malformed stem

    Example:
        >>> number_skeleton_options("percent group-off")
        {'style': 'percent', 'use_grouping': False}
    """
    options: dict[str, str | int | bool] = {}
    if not skeleton.strip():
        msg = "skeleton is empty"
        raise SkeletonError(msg, 0)

    for match in re.finditer(r"\S+", skeleton):
        stem, offset = match.group(), match.start()
        if stem in ("percent", "%"):
            options["style"] = "percent"
        elif stem.startswith("currency/"):
            code = stem.removeprefix("currency/")
            if not _CURRENCY_RE.fullmatch(code):
                msg = f"currency code {code!r} is not three uppercase letters"
                raise SkeletonError(msg, offset)
            options["style"] = "currency"
            options["currency"] = code
        elif stem == "precision-integer":
            options["minimum_fraction_digits"] = 0
            options["maximum_fraction_digits"] = 0
        elif fraction := _FRACTION_RE.fullmatch(stem):
            required, optional = fraction.groups()
            if not required and not optional:
                msg = "fraction precision '.' needs at least one '0' or '#'"
                raise SkeletonError(msg, offset)
            options["minimum_fraction_digits"] = len(required)
            options["maximum_fraction_digits"] = len(required) + len(optional)
        elif stem == "group-off":
            options["use_grouping"] = False
        elif stem in ("compact-short", "K"):
            options["notation"] = "compact"
            options["compact_display"] = "short"
        elif stem in ("compact-long", "KK"):
            options["notation"] = "compact"
            options["compact_display"] = "long"
        elif stem == "unit-width-iso-code":
            options["currency_display"] = "code"
        elif stem == "unit-width-short":
            options["currency_display"] = "symbol"
        elif stem == "unit-width-full-name":
            options["currency_display"] = "name"
        else:
            msg = f"unsupported stem {stem!r}"
            raise SkeletonError(msg, offset)
    return options
