"""Named and skeleton format resolution.

Resolves the style part of ``{x, number, money}`` or ``{d, date, ::yMMMd}``
into a concrete options record for LocaleContext.

Resolution order (highest precedence first):
    1. Inline options supplied by the caller for this call
    2. Configuration registered under the style name
    3. Skeleton expansion
    4. Built-in style keyword preset
    5. Engine default for the kind

Registration accepts the ``formats`` shape used by intl-messageformat:

    {
        "number": {"money": {"style": "currency", "currency": "EUR"}},
        "dateTime": {"stamp": {"dateStyle": "short", "timeStyle": "short"}},
        "list": {"enumeration": {"type": "conjunction", "style": "short"}},
    }

``dateTime`` entries are registered under both ``date`` and ``time``.

Python 3.13+.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from icuengine.diagnostics import (
    ConfigurationError,
    ErrorTemplate,
    EvaluationError,
)
from icuengine.enums import FormatKind, ListStyle, ListType
from icuengine.syntax.skeleton import (
    SkeletonError,
    date_skeleton_options,
    number_skeleton_options,
)

from .format_options import (
    DateTimeFormatOptions,
    FormatOptions,
    ListFormatOptions,
    NumberFormatOptions,
    options_from_mapping,
)

__all__ = ["BUILTIN_FORMATS", "FormatRegistry", "FormatsConfig"]

type FormatsConfig = Mapping[str, Mapping[str, Mapping[str, Any] | FormatOptions]]

_STYLE_NAMES: tuple[str, ...] = ("short", "medium", "long", "full")

BUILTIN_FORMATS: dict[FormatKind, dict[str, FormatOptions]] = {
    FormatKind.NUMBER: {
        "integer": NumberFormatOptions(maximum_fraction_digits=0),
        "percent": NumberFormatOptions(style="percent"),
        "currency": NumberFormatOptions(style="currency"),
    },
    FormatKind.DATE: {
        style: DateTimeFormatOptions(date_style=style) for style in _STYLE_NAMES
    },
    FormatKind.TIME: {
        style: DateTimeFormatOptions(time_style=style) for style in _STYLE_NAMES
    },
    FormatKind.LIST: {
        "conjunction": ListFormatOptions(type=ListType.CONJUNCTION),
        "disjunction": ListFormatOptions(type=ListType.DISJUNCTION),
        "unit": ListFormatOptions(type=ListType.UNIT, style=ListStyle.NARROW),
    },
}

_DEFAULTS: dict[FormatKind, FormatOptions] = {
    FormatKind.NUMBER: NumberFormatOptions(),
    FormatKind.DATE: DateTimeFormatOptions(year="numeric", month="numeric", day="numeric"),
    FormatKind.TIME: DateTimeFormatOptions(time_style="medium"),
    FormatKind.LIST: ListFormatOptions(),
}

# Section names accepted in a formats mapping
_SECTIONS: dict[str, tuple[FormatKind, ...]] = {
    "number": (FormatKind.NUMBER,),
    "date": (FormatKind.DATE,),
    "time": (FormatKind.TIME,),
    "dateTime": (FormatKind.DATE, FormatKind.TIME),
    "date_time": (FormatKind.DATE, FormatKind.TIME),
    "list": (FormatKind.LIST,),
}


class FormatRegistry:
    """Named format configurations for number, date, time and list.

    Built-in presets are always available; registered names shadow a
    built-in of the same name.

    Supports dict-like introspection:
        - names(kind): Registered and built-in names for a kind
        - __contains__: ``(kind, name) in registry``
        - __iter__ / __len__: Over registered (kind, name) pairs

    Example:
        >>> money = {"style": "currency", "currency": "EUR"}
        >>> registry = FormatRegistry({"number": {"money": money}})
        >>> registry.resolve("number", "money").currency
        'EUR'
        >>> registry.resolve("number", skeleton="percent").style
        'percent'
    """

    __slots__ = ("_formats",)

    def __init__(self, formats: FormatsConfig | None = None) -> None:
        """Initialize registry, optionally registering a formats mapping.

        Raises:
            ConfigurationError: Unknown section, unknown option or invalid value
        """
        self._formats: dict[FormatKind, dict[str, FormatOptions]] = {
            kind: {} for kind in FormatKind
        }
        if formats:
            self.register_all(formats)

    def register(
        self,
        kind: FormatKind | str,
        name: str,
        options: Mapping[str, Any] | FormatOptions,
    ) -> None:
        """Register a named configuration.

        Args:
            kind: number, date, time or list
            name: Style name used in templates, e.g. ``{price, number, money}``
            options: Options record or mapping with camelCase/snake_case keys

        Raises:
            ConfigurationError: Invalid kind, name or options
        """
        format_kind = self._kind(kind, name)
        if not name or not isinstance(name, str):
            raise ConfigurationError(
                ErrorTemplate.invalid_format_config(
                    format_kind, str(name), "name must be a non-empty string"
                )
            )
        try:
            resolved = options_from_mapping(format_kind, options)
        except ConfigurationError as e:
            raise ConfigurationError(
                ErrorTemplate.invalid_format_config(
                    format_kind, name, e.diagnostic.message if e.diagnostic else str(e)
                )
            ) from e
        self._formats[format_kind][name] = resolved

    def register_all(self, formats: FormatsConfig) -> None:
        """Register every entry of an intl-messageformat style formats mapping."""
        for section, entries in formats.items():
            kinds = _SECTIONS.get(section)
            if kinds is None:
                msg = f"unknown formats section {section!r}; expected one of {', '.join(_SECTIONS)}"
                raise ConfigurationError(msg)
            for name, options in entries.items():
                for kind in kinds:
                    self.register(kind, name, options)

    def get(self, kind: FormatKind | str, name: str) -> FormatOptions | None:
        """Look up a name: registered first, then built-in."""
        format_kind = FormatKind(kind)
        found = self._formats[format_kind].get(name)
        if found is None:
            found = BUILTIN_FORMATS[format_kind].get(name)
        return found

    def names(self, kind: FormatKind | str) -> tuple[str, ...]:
        """All resolvable style names for a kind, sorted."""
        format_kind = FormatKind(kind)
        names = self._formats[format_kind].keys() | BUILTIN_FORMATS[format_kind].keys()
        return tuple(sorted(names))

    def resolve(
        self,
        kind: FormatKind | str,
        style: str | None = None,
        *,
        skeleton: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> FormatOptions:
        """Resolve a style name or skeleton into an options record.

        Args:
            kind: number, date, time or list
            style: Style name from the template or call
            skeleton: Skeleton text without '::'
            overrides: Inline options; highest precedence

        Returns:
            Validated options record

        Raises:
            EvaluationError: Style name is neither registered nor built in
            ConfigurationError: Invalid skeleton or override
        """
        format_kind = FormatKind(kind)
        options: FormatOptions
        if style is not None:
            found = self.get(format_kind, style)
            if found is None:
                raise EvaluationError(ErrorTemplate.format_not_found(format_kind, style))
            options = found
        elif skeleton is not None:
            options = self._expand_skeleton(format_kind, skeleton)
        else:
            options = _DEFAULTS[format_kind]
            if overrides and isinstance(options, DateTimeFormatOptions):
                # Explicit fields or styles replace the default entirely
                explicit = DateTimeFormatOptions().merge(overrides)
                if explicit.has_fields or explicit.date_style or explicit.time_style:
                    return explicit

        if overrides:
            options = options.merge(overrides)
        return options

    def overlay(self, formats: "FormatsConfig | FormatRegistry | None") -> "FormatRegistry":
        """Return a new registry with formats layered over this one.

        Used for per-call formats; the receiver is left unchanged.
        """
        if not formats:
            return self
        merged = self.copy()
        if isinstance(formats, FormatRegistry):
            for kind, entries in formats._formats.items():
                merged._formats[kind].update(entries)
        else:
            merged.register_all(formats)
        return merged

    def copy(self) -> "FormatRegistry":
        """Create a shallow copy of this registry."""
        new_registry = FormatRegistry()
        for kind, entries in self._formats.items():
            new_registry._formats[kind] = dict(entries)
        return new_registry

    @staticmethod
    def _expand_skeleton(kind: FormatKind, skeleton: str) -> FormatOptions:
        try:
            if kind is FormatKind.NUMBER:
                number_options = number_skeleton_options(skeleton)
                return NumberFormatOptions(**number_options)  # type: ignore[arg-type]
            if kind is FormatKind.LIST:
                msg = "list formats have no skeleton syntax"
                raise SkeletonError(msg, 0)
            return DateTimeFormatOptions(**date_skeleton_options(skeleton))
        except SkeletonError as e:
            raise ConfigurationError(
                ErrorTemplate.invalid_format_config(kind, f"::{skeleton}", e.reason)
            ) from None

    @staticmethod
    def _kind(kind: FormatKind | str, name: object) -> FormatKind:
        try:
            return FormatKind(kind)
        except ValueError:
            msg = f"unknown format kind {kind!r} for {name!r}"
            raise ConfigurationError(msg) from None

    def __contains__(self, key: object) -> bool:
        """Check ``(kind, name) in registry`` (registered or built in)."""
        if not isinstance(key, tuple) or len(key) != 2:  # noqa: PLR2004
            return False
        kind, name = key
        try:
            return self.get(kind, name) is not None
        except ValueError:
            return False

    def __iter__(self) -> Iterator[tuple[FormatKind, str]]:
        """Iterate over registered (kind, name) pairs, built-ins excluded."""
        for kind, entries in self._formats.items():
            for name in entries:
                yield kind, name

    def __len__(self) -> int:
        """Number of registered configurations, built-ins excluded."""
        return sum(len(entries) for entries in self._formats.values())

    def __repr__(self) -> str:
        return f"FormatRegistry(registered={len(self)})"
