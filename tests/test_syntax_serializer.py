"""Tests for MessageSerializer and escape_text."""

from __future__ import annotations

import pytest

from icuengine.core.depth_guard import DepthLimitExceededError
from icuengine.enums import FormatterKind, PluralRuleKind
from icuengine.syntax import MessageSerializer, parse, serialize
from icuengine.syntax.ast import (
    Argument,
    Branch,
    FormattedArgument,
    Message,
    Pattern,
    Plural,
    PoundSign,
    Select,
    Tag,
    TextElement,
)
from icuengine.syntax.serializer import escape_text


def _pattern(*elements: object) -> Pattern:
    return Pattern(tuple(elements))  # type: ignore[arg-type]


# ============================================================================
# ESCAPING
# ============================================================================


class TestEscapeText:
    """Minimal apostrophe quoting."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("plain", "plain"),
            ("It's", "It''s"),
            ("{x}", "'{'x'}'"),
            ("{}", "'{}'"),
            ("a < b", "a '<' b"),
            ("{'}", "'{''}'"),
            ("#1", "#1"),
            ("", ""),
        ],
    )
    def test_outside_plural(self, text: str, expected: str) -> None:
        """Syntax characters are quoted, apostrophes doubled."""
        assert escape_text(text) == expected

    def test_pound_in_plural(self) -> None:
        """'#' needs quoting only inside a plural branch."""
        assert escape_text("#1", in_plural=True) == "'#'1"

    def test_quote_spans_apostrophes_between_specials(self) -> None:
        """An apostrophe between syntax characters stays inside one section."""
        escaped = escape_text("<'>")
        assert escaped == "'<''>'"
        assert parse(escaped).value.elements == (TextElement("<'>"),)


# ============================================================================
# SERIALIZATION
# ============================================================================


class TestSerializer:
    """Canonical output for each node type."""

    @pytest.mark.parametrize(
        ("template", "expected"),
        [
            ("Hello, {name}!", "Hello, {name}!"),
            ("{ name }", "{name}"),
            ("{n,number}", "{n, number}"),
            ("{d,date,short}", "{d, date, short}"),
            ("{n, number,  ::percent  }", "{n, number, ::percent}"),
            (
                "{n,plural,offset:1 =0{none}one{# item}other{# items}}",
                "{n, plural, offset:1 =0 {none} one {# item} other {# items}}",
            ),
            (
                "{p,selectordinal,one{#st}other{#th}}",
                "{p, selectordinal, one {#st} other {#th}}",
            ),
            (
                "{g, select,\n  female {She}\n  other {They}\n}",
                "{g, select, female {She} other {They}}",
            ),
            ("<b>bold</b> text", "<b>bold</b> text"),
            ("It''s '{'literal'}'", "It''s '{'literal'}'"),
            ("a}b", "a'}'b"),
            ("{n, plural, other {'#' #}}", "{n, plural, other {'#' #}}"),
        ],
    )
    def test_canonical_form(self, template: str, expected: str) -> None:
        """Parsed templates serialize to canonical text."""
        assert serialize(parse(template)) == expected

    def test_pattern_accepted(self) -> None:
        """A bare Pattern serializes too."""
        assert serialize(_pattern(TextElement("x"), Argument("y"))) == "x{y}"

    def test_hand_built_ast(self) -> None:
        """ASTs built without the parser serialize."""
        message = Message(
            _pattern(
                Plural(
                    "count",
                    PluralRuleKind.CARDINAL,
                    (
                        Branch(0, _pattern(TextElement("none"))),
                        Branch("other", _pattern(PoundSign(), TextElement(" left"))),
                    ),
                ),
                FormattedArgument("when", FormatterKind.DATE, skeleton="yMMMd"),
                Select("g", (Branch("other", _pattern(Tag("b", _pattern(TextElement("#"))))),)),
            )
        )
        assert serialize(message) == (
            "{count, plural, =0 {none} other {# left}}"
            "{when, date, ::yMMMd}"
            "{g, select, other {<b>#</b>}}"
        )

    def test_adjacent_text_escaped_as_one_run(self) -> None:
        """Split text nodes serialize as if they were one."""
        pattern = _pattern(TextElement("{'"), TextElement("}"))
        text = serialize(pattern)
        assert text == "'{''}'"
        assert parse(text).value.elements == (TextElement("{'}"),)

    def test_depth_limit(self) -> None:
        """Hand-built ASTs deeper than max_depth are rejected."""
        inner: Pattern = _pattern(TextElement("x"))
        for _ in range(5):
            inner = _pattern(Tag("b", inner))
        with pytest.raises(DepthLimitExceededError):
            MessageSerializer(max_depth=3).serialize(inner)
        assert MessageSerializer(max_depth=10).serialize(inner).count("<b>") == 5
