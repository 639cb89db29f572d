"""Tests for the frozen formatting option records."""

from __future__ import annotations

import dataclasses

import pytest

from icuengine.diagnostics import ConfigurationError, DiagnosticCode
from icuengine.enums import FormatKind, ListStyle, ListType
from icuengine.runtime.format_options import (
    DateTimeFormatOptions,
    ListFormatOptions,
    NumberFormatOptions,
    option_name_map,
    options_from_mapping,
)


def _config_code(exc_info: pytest.ExceptionInfo[ConfigurationError]) -> DiagnosticCode:
    assert exc_info.value.diagnostic is not None
    return exc_info.value.diagnostic.code


# ============================================================================
# NUMBER OPTIONS
# ============================================================================


class TestNumberFormatOptions:
    """Validation of Intl.NumberFormat-style options."""

    def test_defaults(self) -> None:
        """Defaults describe a plain grouped decimal."""
        options = NumberFormatOptions()
        assert options.style == "decimal"
        assert options.use_grouping is True
        assert options.currency is None

    def test_currency_uppercased(self) -> None:
        """Currency codes are normalized to upper case."""
        assert NumberFormatOptions(style="currency", currency="eur").currency == "EUR"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"style": "scientific"},
            {"currency": "EURO"},
            {"currency": "E1R"},
            {"currency_display": "long"},
            {"notation": "engineering"},
            {"minimum_fraction_digits": -1},
            {"maximum_fraction_digits": 21},
            {"maximum_fraction_digits": True},
            {"maximum_fraction_digits": 1.5},
            {"use_grouping": "yes"},
            {"minimum_fraction_digits": 3, "maximum_fraction_digits": 1},
        ],
    )
    def test_invalid(self, kwargs: dict[str, object]) -> None:
        """Out-of-domain values raise INVALID_FORMAT_OPTION."""
        with pytest.raises(ConfigurationError) as exc_info:
            NumberFormatOptions(**kwargs)  # type: ignore[arg-type]
        assert _config_code(exc_info) is DiagnosticCode.INVALID_FORMAT_OPTION

    def test_frozen(self) -> None:
        """Records are immutable."""
        options = NumberFormatOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.style = "percent"  # type: ignore[misc]


# ============================================================================
# DATE/TIME OPTIONS
# ============================================================================


class TestDateTimeFormatOptions:
    """Validation of Intl.DateTimeFormat-style options."""

    def test_style_only(self) -> None:
        """Styles alone are valid and request no fields."""
        options = DateTimeFormatOptions(date_style="long", time_style="short")
        assert options.has_fields is False

    def test_fields(self) -> None:
        """Individual fields set has_fields."""
        assert DateTimeFormatOptions(year="numeric", month="long").has_fields is True

    def test_style_and_fields_exclusive(self) -> None:
        """A style cannot be combined with fields."""
        with pytest.raises(ConfigurationError, match="cannot be combined"):
            DateTimeFormatOptions(date_style="short", year="numeric")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"date_style": "tiny"},
            {"year": "long"},
            {"month": "wide"},
            {"weekday": "numeric"},
            {"hour_cycle": "h25"},
            {"time_zone_name": "full"},
            {"time_zone": "Not/A_Zone"},
        ],
    )
    def test_invalid(self, kwargs: dict[str, str]) -> None:
        """Out-of-domain values raise INVALID_FORMAT_OPTION."""
        with pytest.raises(ConfigurationError) as exc_info:
            DateTimeFormatOptions(**kwargs)
        assert _config_code(exc_info) is DiagnosticCode.INVALID_FORMAT_OPTION

    def test_known_time_zone(self) -> None:
        """IANA zones are accepted."""
        assert DateTimeFormatOptions(time_zone="Europe/Riga").time_zone == "Europe/Riga"


# ============================================================================
# LIST OPTIONS
# ============================================================================


class TestListFormatOptions:
    """Validation of Intl.ListFormat-style options."""

    def test_strings_coerced_to_enums(self) -> None:
        """Plain strings become enum members."""
        options = ListFormatOptions(type="disjunction", style="short")  # type: ignore[arg-type]
        assert options.type is ListType.DISJUNCTION
        assert options.style is ListStyle.SHORT

    @pytest.mark.parametrize("kwargs", [{"type": "either"}, {"style": "wide"}])
    def test_invalid(self, kwargs: dict[str, str]) -> None:
        """Unknown type or style is rejected."""
        with pytest.raises(ConfigurationError):
            ListFormatOptions(**kwargs)  # type: ignore[arg-type]


# ============================================================================
# MAPPING CONSTRUCTION AND MERGE
# ============================================================================


class TestOptionsFromMapping:
    """camelCase/snake_case mappings into records."""

    def test_camel_and_snake_case(self) -> None:
        """Both spellings resolve to the same field."""
        camel = options_from_mapping(FormatKind.NUMBER, {"maximumFractionDigits": 2})
        snake = options_from_mapping(FormatKind.NUMBER, {"maximum_fraction_digits": 2})
        assert camel == snake == NumberFormatOptions(maximum_fraction_digits=2)

    def test_time_kind_builds_datetime_options(self) -> None:
        """Date and time share one record type."""
        options = options_from_mapping(FormatKind.TIME, {"timeStyle": "short"})
        assert isinstance(options, DateTimeFormatOptions)

    def test_hour12_shorthand(self) -> None:
        """hour12 maps onto hour_cycle."""
        options = options_from_mapping(FormatKind.DATE, {"hour": "numeric", "hour12": False})
        assert isinstance(options, DateTimeFormatOptions)
        assert options.hour_cycle == "h23"

    def test_record_passes_through(self) -> None:
        """An existing record is returned unchanged."""
        record = ListFormatOptions()
        assert options_from_mapping(FormatKind.LIST, record) is record

    def test_unknown_option(self) -> None:
        """Unknown keys are rejected by name."""
        with pytest.raises(ConfigurationError, match="unknown option") as exc_info:
            options_from_mapping(FormatKind.NUMBER, {"roundingMode": "ceil"})
        assert _config_code(exc_info) is DiagnosticCode.INVALID_FORMAT_OPTION

    def test_non_mapping(self) -> None:
        """Options must be a mapping."""
        with pytest.raises(ConfigurationError) as exc_info:
            options_from_mapping(FormatKind.NUMBER, ["style"])  # type: ignore[arg-type]
        assert _config_code(exc_info) is DiagnosticCode.INVALID_FORMAT_CONFIG

    def test_option_name_map(self) -> None:
        """Every field has a camelCase alias."""
        names = option_name_map(DateTimeFormatOptions)
        assert names["timeZoneName"] == "time_zone_name"
        assert names["time_zone_name"] == "time_zone_name"


class TestMerge:
    """Overrides on top of a resolved record."""

    def test_merge_overrides(self) -> None:
        """Overrides replace fields and keep the rest."""
        base = NumberFormatOptions(style="percent")
        merged = base.merge({"maximumFractionDigits": 1})
        assert merged.style == "percent"
        assert merged.maximum_fraction_digits == 1
        assert base.maximum_fraction_digits is None

    def test_empty_merge_is_identity(self) -> None:
        """No overrides returns the same object."""
        base = DateTimeFormatOptions(date_style="short")
        assert base.merge({}) is base

    def test_merge_revalidates(self) -> None:
        """A merge cannot produce an invalid record."""
        base = NumberFormatOptions(maximum_fraction_digits=1)
        with pytest.raises(ConfigurationError):
            base.merge({"minimumFractionDigits": 2})
