"""Hypothesis strategies for message templates and AST nodes.

Two families:
- AST strategies build well-formed Message trees directly (for
  serializer roundtrips and evaluator properties).
- Text strategies build template strings, valid or adversarial, for
  parser robustness tests.

Event-Emitting Strategies (HypoFuzz-Optimized):
    - msg_element: Kind of generated pattern element
    - msg_plural_kind: cardinal|ordinal
    - msg_chaos: Kind of adversarial template
"""

from __future__ import annotations

from hypothesis import event
from hypothesis import strategies as st

from icuengine.enums import FormatterKind, PluralCategory, PluralRuleKind
from icuengine.syntax.ast import (
    OTHER_SELECTOR,
    Argument,
    Branch,
    FormattedArgument,
    Message,
    Pattern,
    PatternElement,
    Plural,
    PoundSign,
    Select,
    Tag,
    TextElement,
)

# Characters exercising every quoting path of the template grammar
SYNTAX_CHARS: str = "{}<>#'"
TEXT_ALPHABET: str = "abcxyz ,.:/=\n" + SYNTAX_CHARS

PLURAL_CATEGORIES: tuple[str, ...] = tuple(
    c.value for c in PluralCategory if c != OTHER_SELECTOR
)

NUMBER_SKELETONS: tuple[str, ...] = (
    "percent",
    "currency/EUR",
    "precision-integer",
    ".00",
    ".0#",
    "group-off",
    "compact-short",
    "percent .0 group-off",
)
DATE_SKELETONS: tuple[str, ...] = ("yMMMd", "yMd", "EEEEMMMMd", "Hm", "hms", "MMMy")
STYLE_NAMES: tuple[str, ...] = ("short", "medium", "long", "full", "integer", "money")


# =============================================================================
# NAMES AND TEXT
# =============================================================================


def argument_names() -> st.SearchStrategy[str]:
    """Argument names: lowercase identifiers, occasionally positional."""
    return st.one_of(
        st.from_regex(r"[a-z][a-z0-9_]{0,8}", fullmatch=True),
        st.integers(min_value=0, max_value=9).map(str),
    )


def tag_names() -> st.SearchStrategy[str]:
    """Tag names: start with a letter."""
    return st.from_regex(r"[a-z][a-z0-9]{0,5}", fullmatch=True)


def literal_text(*, min_size: int = 1) -> st.SearchStrategy[str]:
    """Literal text drawn from an alphabet rich in syntax characters."""
    return st.text(alphabet=TEXT_ALPHABET, min_size=min_size, max_size=12)


def plain_text() -> st.SearchStrategy[str]:
    """Text without any syntax characters."""
    return st.text(alphabet="abcdefghij XYZ.,!?", min_size=1, max_size=20)


# =============================================================================
# AST NODES
# =============================================================================


def _formatted_arguments() -> st.SearchStrategy[FormattedArgument]:
    @st.composite
    def build(draw: st.DrawFn) -> FormattedArgument:
        name = draw(argument_names())
        kind = draw(st.sampled_from(list(FormatterKind)))
        choice = draw(st.sampled_from(["none", "style", "skeleton"]))
        match choice:
            case "style":
                return FormattedArgument(name, kind, style=draw(st.sampled_from(STYLE_NAMES)))
            case "skeleton":
                skeletons = NUMBER_SKELETONS if kind is FormatterKind.NUMBER else DATE_SKELETONS
                return FormattedArgument(name, kind, skeleton=draw(st.sampled_from(skeletons)))
            case _:
                return FormattedArgument(name, kind)

    return build()


@st.composite
def _plural_keys(draw: st.DrawFn, *, plural: bool) -> list[str | int]:
    if plural:
        key = st.one_of(
            st.sampled_from(PLURAL_CATEGORIES),
            st.integers(min_value=0, max_value=20),
        )
    else:
        key = st.from_regex(r"[a-z][a-z0-9]{0,6}", fullmatch=True).filter(
            lambda k: k != OTHER_SELECTOR
        )
    keys: list[str | int] = draw(st.lists(key, max_size=3, unique=True))
    keys.append(OTHER_SELECTOR)
    return keys


def _patterns(depth: int, *, in_plural: bool) -> st.SearchStrategy[Pattern]:
    """Patterns whose elements respect where '#' may appear."""
    leaves: list[st.SearchStrategy[PatternElement]] = [
        literal_text().map(TextElement),
        argument_names().map(Argument),
        _formatted_arguments(),
    ]
    if in_plural:
        leaves.append(st.just(PoundSign()))
    elements: list[st.SearchStrategy[PatternElement]] = list(leaves)
    if depth > 0:
        elements.extend(
            [
                _plurals(depth - 1),
                _selects(depth - 1),
                _tags(depth - 1, in_plural=in_plural),
            ]
        )
    return st.lists(st.one_of(elements), max_size=4).map(lambda items: Pattern(tuple(items)))


def _plurals(depth: int) -> st.SearchStrategy[Plural]:
    @st.composite
    def build(draw: st.DrawFn) -> Plural:
        kind = draw(st.sampled_from(list(PluralRuleKind)))
        event(f"msg_plural_kind={kind}")
        keys = draw(_plural_keys(plural=True))
        branches = tuple(Branch(key, draw(_patterns(depth, in_plural=True))) for key in keys)
        offset = draw(st.sampled_from([0, 0, 1, 2]))
        return Plural(draw(argument_names()), kind, branches, offset=offset)

    return build()


def _selects(depth: int) -> st.SearchStrategy[Select]:
    @st.composite
    def build(draw: st.DrawFn) -> Select:
        keys = draw(_plural_keys(plural=False))
        branches = tuple(Branch(key, draw(_patterns(depth, in_plural=False))) for key in keys)
        return Select(draw(argument_names()), branches)

    return build()


def _tags(depth: int, *, in_plural: bool) -> st.SearchStrategy[Tag]:
    return st.builds(Tag, tag_names(), _patterns(depth, in_plural=in_plural))


@st.composite
def message_asts(draw: st.DrawFn, max_depth: int = 2) -> Message:
    """Well-formed Message ASTs (spans omitted)."""
    pattern = draw(_patterns(max_depth, in_plural=False))
    for element in pattern.elements:
        event(f"msg_element={type(element).__name__}")
    return Message(pattern)


# =============================================================================
# TEMPLATE TEXT
# =============================================================================


@st.composite
def plural_templates(draw: st.DrawFn) -> str:
    """Valid plural templates over the CLDR categories."""
    name = draw(argument_names())
    keyword = draw(st.sampled_from(["plural", "selectordinal"]))
    categories = draw(st.lists(st.sampled_from(PLURAL_CATEGORIES), max_size=3, unique=True))
    exact = draw(st.lists(st.integers(min_value=0, max_value=5), max_size=2, unique=True))
    branches = [f"={n} {{exact {n}}}" for n in exact]
    branches += [f"{category} {{# {category}}}" for category in categories]
    branches.append("other {# other}")
    return f"{{{name}, {keyword}, {' '.join(branches)}}}"


@st.composite
def chaos_templates(draw: st.DrawFn) -> str:
    """Adversarial template text: unbalanced braces, stray quotes, half tags.

    Events emitted:
    - msg_chaos={random|braces|nesting|tags}
    """
    label = draw(st.sampled_from(["random", "braces", "nesting", "tags"]))
    event(f"msg_chaos={label}")
    match label:
        case "random":
            return draw(st.text(alphabet=TEXT_ALPHABET + "pluralsectoffs0123", max_size=60))
        case "braces":
            parts = draw(st.lists(st.sampled_from(["{", "}", "{x}", "{x,", "'", "''", "a"])))
            return "".join(parts)
        case "nesting":
            depth = draw(st.integers(min_value=1, max_value=40))
            return "{n, select, other {" * depth + "x" + "}}" * depth
        case _:
            tokens = ["<a>", "</a>", "<b>", "</b>", "<c/>", "<", "x"]
            parts = draw(st.lists(st.sampled_from(tokens)))
            return "".join(parts)
