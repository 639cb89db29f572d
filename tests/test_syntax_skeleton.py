"""Tests for date/time and number skeleton tokenizers."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from icuengine.syntax.skeleton import (
    SkeletonError,
    date_skeleton_options,
    number_skeleton_options,
    parse_date_skeleton,
)
from tests.strategies import DATE_SKELETONS, NUMBER_SKELETONS

# ============================================================================
# DATE SKELETONS
# ============================================================================


class TestParseDateSkeleton:
    """Symbol run tokenization."""

    def test_runs(self) -> None:
        """Runs keep order, length and offset."""
        runs = parse_date_skeleton("yMMMMEEEd")
        assert [(run.symbol, run.count, run.offset) for run in runs] == [
            ("y", 1, 0),
            ("M", 4, 1),
            ("E", 3, 5),
            ("d", 1, 8),
        ]
        assert [run.field for run in runs] == ["year", "month", "weekday", "day"]

    def test_empty(self) -> None:
        """An empty skeleton is an error."""
        with pytest.raises(SkeletonError, match="empty"):
            parse_date_skeleton("")

    def test_unknown_symbol_offset(self) -> None:
        """The offset points at the unsupported symbol."""
        with pytest.raises(SkeletonError) as exc_info:
            parse_date_skeleton("yMMQ")
        assert exc_info.value.offset == 3
        assert "'Q'" in exc_info.value.reason

    def test_run_too_long(self) -> None:
        """Runs longer than the symbol allows are rejected."""
        with pytest.raises(SkeletonError, match="maximum 2"):
            parse_date_skeleton("ddd")

    def test_field_twice(self) -> None:
        """Two symbols for one field are rejected."""
        with pytest.raises(SkeletonError, match="hour requested twice"):
            parse_date_skeleton("Hh")

    @pytest.mark.parametrize("skeleton", ["a", "yMda", "aaaa"])
    def test_day_period_needs_hour(self, skeleton: str) -> None:
        """A day period alone has nothing to qualify."""
        with pytest.raises(SkeletonError, match="day period requires an hour") as exc_info:
            parse_date_skeleton(skeleton)
        assert exc_info.value.offset == skeleton.index("a")

    def test_unbounded_year(self) -> None:
        """Year runs have no maximum."""
        assert parse_date_skeleton("yyyyy")[0].count == 5

    @given(skeleton=st.sampled_from(DATE_SKELETONS))
    def test_known_skeletons_tokenize(self, skeleton: str) -> None:
        """Run lengths add up to the skeleton length."""
        assert sum(run.count for run in parse_date_skeleton(skeleton)) == len(skeleton)


class TestDateSkeletonOptions:
    """Expansion into Intl.DateTimeFormat options."""

    @pytest.mark.parametrize(
        ("skeleton", "expected"),
        [
            ("yMMMd", {"year": "numeric", "month": "short", "day": "numeric"}),
            ("yyMMdd", {"year": "2-digit", "month": "2-digit", "day": "2-digit"}),
            ("EEEEMMMMd", {"weekday": "long", "month": "long", "day": "numeric"}),
            ("MMMMM", {"month": "narrow"}),
            ("GGGGy", {"era": "long", "year": "numeric"}),
            ("Hm", {"hour_cycle": "h23", "hour": "numeric", "minute": "numeric"}),
            ("hmma", {"hour_cycle": "h12", "hour": "numeric", "minute": "2-digit"}),
            ("Kms", {"hour_cycle": "h11", "hour": "numeric", "minute": "numeric",
                     "second": "numeric"}),
            ("zzzz", {"time_zone_name": "long"}),
            ("z", {"time_zone_name": "short"}),
        ],
    )
    def test_expansion(self, skeleton: str, expected: dict[str, str]) -> None:
        """Each symbol run maps to one option."""
        assert date_skeleton_options(skeleton) == expected

    def test_day_period_before_hour(self) -> None:
        """An explicit hour symbol decides the cycle wherever 'a' appears."""
        assert date_skeleton_options("aHm")["hour_cycle"] == "h23"
        assert date_skeleton_options("ahm")["hour_cycle"] == "h12"


# ============================================================================
# NUMBER SKELETONS
# ============================================================================


class TestNumberSkeletonOptions:
    """ICU number skeleton stems."""

    @pytest.mark.parametrize(
        ("skeleton", "expected"),
        [
            ("percent", {"style": "percent"}),
            ("%", {"style": "percent"}),
            ("currency/EUR", {"style": "currency", "currency": "EUR"}),
            ("precision-integer", {"minimum_fraction_digits": 0, "maximum_fraction_digits": 0}),
            (".00", {"minimum_fraction_digits": 2, "maximum_fraction_digits": 2}),
            (".0##", {"minimum_fraction_digits": 1, "maximum_fraction_digits": 3}),
            (".##", {"minimum_fraction_digits": 0, "maximum_fraction_digits": 2}),
            ("group-off", {"use_grouping": False}),
            ("compact-short", {"notation": "compact", "compact_display": "short"}),
            ("KK", {"notation": "compact", "compact_display": "long"}),
            ("currency/JPY unit-width-iso-code", {
                "style": "currency", "currency": "JPY", "currency_display": "code"}),
            ("unit-width-full-name", {"currency_display": "name"}),
            ("percent .0 group-off", {
                "style": "percent",
                "minimum_fraction_digits": 1,
                "maximum_fraction_digits": 1,
                "use_grouping": False,
            }),
        ],
    )
    def test_stems(self, skeleton: str, expected: dict[str, object]) -> None:
        """Stems combine into one options mapping."""
        assert number_skeleton_options(skeleton) == expected

    @pytest.mark.parametrize(
        ("skeleton", "offset"),
        [
            ("", 0),
            ("   ", 0),
            ("percent bogus", 8),
            ("currency/eu", 0),
            (".", 0),
            ("group-off .x", 10),
        ],
    )
    def test_invalid(self, skeleton: str, offset: int) -> None:
        """Unknown or malformed stems report their offset."""
        with pytest.raises(SkeletonError) as exc_info:
            number_skeleton_options(skeleton)
        assert exc_info.value.offset == offset

    @given(skeleton=st.sampled_from(NUMBER_SKELETONS))
    def test_known_skeletons_expand(self, skeleton: str) -> None:
        """Every sample skeleton expands to a non-empty mapping."""
        assert number_skeleton_options(skeleton)
