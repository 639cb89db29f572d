"""Tests for MessageFormatter and the module-level convenience functions."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from icuengine.diagnostics import (
    ConfigurationError,
    DiagnosticCode,
    EvaluationError,
    ParseError,
)
from icuengine.runtime import (
    FormatRegistry,
    MessageFormatter,
    PatternCache,
    compile_message,
    format_message,
    format_rich_message,
)
from icuengine.syntax.ast import Message

FOLLOWERS = (
    "You have {count, plural, =0 {no followers yet} =1 {one follower} other {# followers}}."
)


@pytest.fixture
def formatter() -> MessageFormatter:
    """English formatter with one registered number format."""
    return MessageFormatter(
        "en-US", formats={"number": {"money": {"style": "currency", "currency": "EUR"}}}
    )


# ============================================================================
# CONSTRUCTION
# ============================================================================


class TestConstruction:
    """Locale handling, configuration and repr."""

    def test_properties(self, formatter: MessageFormatter) -> None:
        """Locale code is kept as given."""
        assert formatter.locale == "en-US"
        assert formatter.locale_context.plural_locale == "en_US"
        assert ("number", "money") in formatter.registry
        assert len(formatter.cache) == 0

    @pytest.mark.parametrize("locale", ["", "en US", "en@US"])
    def test_malformed_locale(self, locale: str) -> None:
        """Malformed codes raise ValueError."""
        with pytest.raises(ValueError, match="Locale code|Invalid locale"):
            MessageFormatter(locale)

    def test_unknown_locale_falls_back(self) -> None:
        """Unknown locales format with en_US rules."""
        formatter = MessageFormatter("xx_XX")
        assert formatter.locale_context.is_fallback is True
        assert formatter.format(FOLLOWERS, {"count": 1}) == "You have one follower."

    def test_strict_locale(self) -> None:
        """strict_locale turns the fallback into an error."""
        with pytest.raises(ValueError, match="Unknown locale identifier"):
            MessageFormatter("xx_XX", strict_locale=True)

    def test_invalid_formats(self) -> None:
        """Bad registrations fail at construction."""
        with pytest.raises(ConfigurationError):
            MessageFormatter("en", formats={"number": {"x": {"style": "bogus"}}})

    def test_registry_instance_shared(self) -> None:
        """A FormatRegistry is used as-is."""
        registry = FormatRegistry()
        assert MessageFormatter("en", formats=registry).registry is registry

    def test_shared_cache(self) -> None:
        """One cache can serve formatters for several locales."""
        cache = PatternCache()
        en = MessageFormatter("en", cache=cache)
        de = MessageFormatter("de", cache=cache)
        assert en.compile("{n, number}") is de.compile("{n, number}")
        assert en.format("{n, number}", {"n": 1234.5}) == "1,234.5"
        assert de.format("{n, number}", {"n": 1234.5}) == "1.234,5"

    def test_parser_options(self) -> None:
        """Parser options reach the owned cache."""
        formatter = MessageFormatter("en", ignore_tags=True, max_source_size=20)
        assert formatter.format("<b>{x}</b>", {"x": 1}) == "<b>1</b>"
        with pytest.raises(ValueError, match="exceeds maximum"):
            formatter.compile("x" * 21)

    def test_init_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Construction is logged at INFO."""
        with caplog.at_level(logging.INFO, logger="icuengine.runtime.formatter"):
            MessageFormatter("lv_LV")
        assert "MessageFormatter initialized for locale: lv_LV" in caplog.text

    def test_repr(self) -> None:
        """repr shows locale, registered formats and cache size."""
        formatter = MessageFormatter("lv_LV")
        assert repr(formatter) == "MessageFormatter(locale='lv_LV', formats=0, cached=0)"
        formatter.compile("x")
        assert repr(formatter) == "MessageFormatter(locale='lv_LV', formats=0, cached=1)"

    def test_for_system_locale(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The detected system locale is used."""
        monkeypatch.setattr("icuengine.runtime.formatter.get_system_locale", lambda: "lv_LV")
        formatter = MessageFormatter.for_system_locale(cache_size=5)
        assert formatter.locale == "lv_LV"
        assert formatter.cache.maxsize == 5


# ============================================================================
# MESSAGES
# ============================================================================


class TestFormat:
    """compile, format and format_rich."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [
            (0, "You have no followers yet."),
            (1, "You have one follower."),
            (3580, "You have 3,580 followers."),
        ],
    )
    def test_followers(self, formatter: MessageFormatter, count: int, expected: str) -> None:
        """The canonical plural example."""
        assert formatter.format(FOLLOWERS, {"count": count}) == expected

    def test_compile_once(self, formatter: MessageFormatter) -> None:
        """Formatting a template twice hits the cache."""
        formatter.format(FOLLOWERS, {"count": 1})
        formatter.format(FOLLOWERS, {"count": 2})
        stats = formatter.cache.get_stats()
        assert (stats["misses"], stats["hits"]) == (1, 1)

    def test_compiled_message_accepted(self, formatter: MessageFormatter) -> None:
        """format() takes a Message from compile()."""
        message = formatter.compile("Hello, {name}!")
        assert isinstance(message, Message)
        assert formatter.format(message, {"name": "Ada"}) == "Hello, Ada!"

    def test_registered_format(self, formatter: MessageFormatter) -> None:
        """Registered names resolve in templates."""
        assert formatter.format("{p, number, money}", {"p": 12.5}) == "€12.50"

    def test_register_format(self, formatter: MessageFormatter) -> None:
        """Formats can be added after construction."""
        formatter.register_format("date", "iso", {"pattern": "yyyy-MM-dd"})
        assert formatter.format("{d, date, iso}", {"d": date(2024, 1, 5)}) == "2024-01-05"

    def test_per_call_formats(self, formatter: MessageFormatter) -> None:
        """Per-call formats shadow registered ones for that call only."""
        usd = {"number": {"money": {"style": "currency", "currency": "USD"}}}
        assert formatter.format("{p, number, money}", {"p": 1}, formats=usd) == "$1.00"
        assert formatter.format("{p, number, money}", {"p": 1}) == "€1.00"

    def test_parse_error(self, formatter: MessageFormatter) -> None:
        """Malformed templates raise ParseError."""
        with pytest.raises(ParseError) as exc_info:
            formatter.format("{count, plural, one {x}}", {"count": 1})
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.MISSING_OTHER_BRANCH

    def test_evaluation_error(self, formatter: MessageFormatter) -> None:
        """Missing bindings raise EvaluationError."""
        with pytest.raises(EvaluationError, match="Argument 'name' not provided"):
            formatter.format("Hello, {name}!")

    def test_format_rich(self, formatter: MessageFormatter) -> None:
        """Rich mode returns text and tag nodes."""
        result = formatter.format_rich(
            "Please refer to <guidelines>the guidelines</guidelines>.",
            {"guidelines": lambda children: ("a", children)},
        )
        assert result == ("Please refer to ", ("a", ("the guidelines",)), ".")

    def test_format_rich_per_call_formats(self, formatter: MessageFormatter) -> None:
        """Rich mode honours per-call formats too."""
        pct = {"number": {"pct": {"style": "percent"}}}
        assert formatter.format_rich("{p, number, pct}", {"p": 0.5}, formats=pct) == ("50%",)


# ============================================================================
# PRIMITIVE FORMATTERS
# ============================================================================


class TestPrimitives:
    """format_number, format_date, format_time and format_list."""

    def test_format_number(self, formatter: MessageFormatter) -> None:
        """Styles, skeletons and inline options."""
        assert formatter.format_number(3580) == "3,580"
        assert formatter.format_number(Decimal("0.256"), "percent", maximumFractionDigits=1) == (
            "25.6%"
        )
        assert formatter.format_number(12.5, "::currency/EUR") == "€12.50"
        assert formatter.format_number(12.5, "money") == "€12.50"
        assert formatter.format_number(1234567, use_grouping=False) == "1234567"

    def test_format_number_rejects_non_numbers(self, formatter: MessageFormatter) -> None:
        """Strings and bools are not numbers."""
        for value in ("12", True):
            with pytest.raises(EvaluationError) as exc_info:
                formatter.format_number(value)
            assert exc_info.value.diagnostic is not None
            assert exc_info.value.diagnostic.code is DiagnosticCode.TYPE_MISMATCH

    def test_format_number_unknown_style(self, formatter: MessageFormatter) -> None:
        """Unknown style names raise FORMAT_NOT_FOUND."""
        with pytest.raises(EvaluationError, match="Unknown number format 'cash'"):
            formatter.format_number(1, "cash")

    def test_format_date(self, formatter: MessageFormatter) -> None:
        """Date styles, skeletons and the default."""
        jan_5 = date(2024, 1, 5)
        assert formatter.format_date(jan_5) == "1/5/2024"
        assert formatter.format_date(jan_5, "full") == "Friday, January 5, 2024"
        assert formatter.format_date(jan_5, "::yMMMd") == "Jan 5, 2024"
        assert formatter.format_date(0, "short") == "1/1/70"
        with pytest.raises(EvaluationError):
            formatter.format_date("2024-01-05")

    def test_format_time(self, formatter: MessageFormatter) -> None:
        """Time skeletons and type checks."""
        assert formatter.format_time(datetime(2024, 1, 5, 14, 5), "::Hm") == "14:05"
        assert formatter.format_time(datetime(2024, 1, 5, 14, 5), hour12=False, hour="numeric",
                                     minute="2-digit") == "14:05"
        with pytest.raises(EvaluationError):
            formatter.format_time(date(2024, 1, 5))

    def test_format_list(self, formatter: MessageFormatter) -> None:
        """List styles and inline type."""
        assert formatter.format_list(["apples", "pears", "plums"]) == "apples, pears, and plums"
        assert formatter.format_list(["tea", "coffee"], "disjunction") == "tea or coffee"
        assert formatter.format_list(["a", "b", "c"], type="disjunction") == "a, b, or c"

    def test_format_list_rejects_string(self, formatter: MessageFormatter) -> None:
        """A str is a sequence but not a list of items."""
        with pytest.raises(EvaluationError):
            formatter.format_list("abc")

    def test_bad_inline_option(self, formatter: MessageFormatter) -> None:
        """Unknown inline options are configuration errors."""
        with pytest.raises(ConfigurationError, match="unknown option"):
            formatter.format_number(1, roundingMode="ceil")


# ============================================================================
# MODULE-LEVEL FUNCTIONS
# ============================================================================


class TestModuleFunctions:
    """compile_message, format_message and format_rich_message."""

    def test_compile_message(self) -> None:
        """compile_message parses without a cache."""
        message = compile_message("Hi {name}")
        assert message.source == "Hi {name}"
        with pytest.raises(ParseError):
            compile_message("Hi {name")

    def test_compile_message_ignore_tags(self) -> None:
        """Tags can be disabled."""
        element = compile_message("<b>", ignore_tags=True).value.elements[0]
        assert element.value == "<b>"  # type: ignore[union-attr]

    def test_format_message_default_locale(self) -> None:
        """format_message defaults to en_US."""
        template = "{gender, select, female {She} male {He} other {They}} is online."
        assert format_message(template, {"gender": "female"}) == "She is online."

    def test_format_message_locale_and_formats(self) -> None:
        """Locale and formats are forwarded."""
        assert format_message("{n, number}", {"n": 1234.5}, locale="de_DE") == "1.234,5"
        formats = {"number": {"pct": {"style": "percent"}}}
        assert format_message("{n, number, pct}", {"n": 0.25}, formats=formats) == "25%"

    def test_format_rich_message(self) -> None:
        """Rich output through the module-level function."""
        result = format_rich_message("<b>{n, number}</b>", {"n": 5, "b": lambda c: ["b", *c]})
        assert result == (["b", "5"],)
