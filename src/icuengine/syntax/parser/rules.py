"""Grammar rules for the message template parser.

This module provides all parsing rules for template constructs:
- Patterns (literal text, quoting, '#', nested constructs)
- Arguments ({name}, {name, number|date|time, style})
- Selections ({name, plural|selectordinal|select, branches})
- Tags (<name>children</name>)

All grammar rules are co-located in a single module because patterns,
arguments and tags are mutually recursive.

Lookahead Patterns:
    - `{` starts an argument
    - `}` ends a branch or tag body when nested; literal at top level
    - `#` is a PoundSign directly inside plural branches (and tags within them)
    - `<` followed by a letter starts a tag, `</` a closing tag
    - `'` may start an escape (see primitives.parse_quoted_literal)

Error Model:
    Rules raise ParseError at the first problem. Parsing never recovers,
    so no partial AST can escape.

Security:
    Branch bodies and tag bodies count towards a configurable nesting limit,
    so adversarial templates cannot exhaust the Python stack.
"""

from dataclasses import dataclass

from icuengine.constants import MAX_DEPTH
from icuengine.diagnostics import Diagnostic, ErrorTemplate, ParseError, SourceSpan
from icuengine.enums import FormatterKind, PluralRuleKind
from icuengine.syntax.ast import (
    OTHER_SELECTOR,
    Argument,
    Branch,
    BranchKey,
    FormattedArgument,
    Pattern,
    PatternElement,
    Plural,
    PoundSign,
    Select,
    Span,
    Tag,
    TextElement,
)
from icuengine.syntax.cursor import Cursor, LineOffsetCache, ParseResult
from icuengine.syntax.parser.primitives import (
    is_tag_name_start,
    parse_integer,
    parse_name,
    parse_quoted_literal,
    parse_style_text,
    parse_tag_name,
)
from icuengine.syntax.skeleton import (
    SkeletonError,
    number_skeleton_options,
    parse_date_skeleton,
)

__all__ = ["ParseContext", "parse_argument", "parse_pattern", "parse_tag"]

_FORMATTER_KEYWORDS: dict[str, FormatterKind] = {
    "number": FormatterKind.NUMBER,
    "date": FormatterKind.DATE,
    "time": FormatterKind.TIME,
}

_SELECTION_KEYWORDS: dict[str, PluralRuleKind | None] = {
    "plural": PluralRuleKind.CARDINAL,
    "selectordinal": PluralRuleKind.ORDINAL,
    "select": None,
}

_OFFSET_PREFIX: str = "offset:"


@dataclass(slots=True)
class ParseContext:
    """Explicit context for parsing operations.

    Passed down every rule instead of living in thread-local state, so one
    parser can serve many threads.

    Attributes:
        max_nesting_depth: Maximum allowed nesting of branch and tag bodies
        current_depth: Current nesting depth (0 = top level)
        ignore_tags: Treat '<' as literal text everywhere
        in_plural: Directly inside a plural branch ('#' is a PoundSign)
        in_tag: Inside a tag body ('</' ends the body)
    """

    max_nesting_depth: int = MAX_DEPTH
    current_depth: int = 0
    ignore_tags: bool = False
    in_plural: bool = False
    in_tag: bool = False

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been reached."""
        return self.current_depth >= self.max_nesting_depth

    def enter_branch(self, *, plural: bool) -> "ParseContext":
        """Create context for a plural or select branch body."""
        return ParseContext(
            max_nesting_depth=self.max_nesting_depth,
            current_depth=self.current_depth + 1,
            ignore_tags=self.ignore_tags,
            in_plural=plural,
            in_tag=self.in_tag,
        )

    def enter_tag(self) -> "ParseContext":
        """Create context for a tag body; '#' keeps its meaning."""
        return ParseContext(
            max_nesting_depth=self.max_nesting_depth,
            current_depth=self.current_depth + 1,
            ignore_tags=self.ignore_tags,
            in_plural=self.in_plural,
            in_tag=True,
        )


def _span(cursor: Cursor, start: int, end: int | None = None) -> SourceSpan:
    """Build a SourceSpan for an error; only runs on the failure path."""
    line, column = LineOffsetCache(cursor.source).get_line_col(start)
    return SourceSpan(start=start, end=start if end is None else end, line=line, column=column)


def _error(cursor: Cursor, diagnostic: Diagnostic) -> ParseError:
    return ParseError(diagnostic, source=cursor.source)


def _unterminated(
    cursor: Cursor, name: str | None, start: int, end: int | None = None
) -> ParseError:
    span = _span(cursor, start, cursor.pos if end is None else end)
    return _error(cursor, ErrorTemplate.unterminated_argument(name, span))


# =============================================================================
# Pattern Parsing
# =============================================================================


def parse_pattern(cursor: Cursor, context: ParseContext) -> ParseResult[Pattern]:
    """Parse a sequence of text and constructs.

    Stops at EOF, at a '}' closing the enclosing branch or tag, or at a
    '</' closing the enclosing tag. The caller checks which terminator it got.

    Adjacent literal text (including resolved escapes and self-closing
    tags) is merged into one TextElement.

    Args:
        cursor: Position of the first character of the body
        context: Nesting state

    Returns:
        ParseResult with the Pattern and the cursor at the terminator
    """
    elements: list[PatternElement] = []
    text: list[str] = []

    def flush() -> None:
        if text:
            elements.append(TextElement("".join(text)))
            text.clear()

    nested = context.current_depth > 0
    while not cursor.is_eof:
        char = cursor.current

        if char == "{":
            flush()
            argument = parse_argument(cursor, context)
            elements.append(argument.value)
            cursor = argument.cursor
            continue

        if char == "}" and nested:
            break

        if char == "#" and context.in_plural:
            flush()
            elements.append(PoundSign(span=Span(cursor.pos, cursor.pos + 1)))
            cursor = cursor.advance()
            continue

        if char == "<" and not context.ignore_tags:
            nxt = cursor.peek(1)
            if nxt == "/":
                if context.in_tag:
                    break
                name = parse_tag_name(cursor.advance(2)).value
                raise _error(
                    cursor,
                    ErrorTemplate.unmatched_closing_tag(name, _span(cursor, cursor.pos)),
                )
            if nxt is not None and is_tag_name_start(nxt):
                tag = parse_tag(cursor, context)
                cursor = tag.cursor
                if isinstance(tag.value, str):
                    text.append(tag.value)
                else:
                    flush()
                    elements.append(tag.value)
                continue

        if char == "'":
            quoted = parse_quoted_literal(cursor, in_plural=context.in_plural)
            if quoted is not None:
                text.append(quoted.value)
                cursor = quoted.cursor
                continue

        text.append(char)
        cursor = cursor.advance()

    flush()
    return ParseResult(Pattern(tuple(elements)), cursor)


# =============================================================================
# Argument Parsing
# =============================================================================


def parse_argument(cursor: Cursor, context: ParseContext) -> ParseResult[PatternElement]:
    """Parse any brace construct starting at '{'.

    Examples:
        {name}                            -> Argument
        {n, number, ::percent}            -> FormattedArgument
        {n, plural, one {#} other {#}}    -> Plural
        {g, select, other {x}}            -> Select

    Whitespace is allowed around the name, commas, keyword and style.
    """
    start = cursor.pos
    cursor = cursor.advance().skip_whitespace()
    if cursor.is_eof:
        raise _unterminated(cursor, None, start)
    if cursor.current == "}":
        raise _error(cursor, ErrorTemplate.empty_argument(_span(cursor, start, cursor.pos + 1)))

    name_result = parse_name(cursor)
    name = name_result.value
    if not name:
        raise _error(
            cursor, ErrorTemplate.invalid_argument_name(cursor.current, _span(cursor, cursor.pos))
        )

    cursor = name_result.cursor.skip_whitespace()
    if cursor.is_eof:
        raise _unterminated(cursor, name, start)
    if cursor.current == "}":
        cursor = cursor.advance()
        return ParseResult(Argument(name, span=Span(start, cursor.pos)), cursor)
    if cursor.current != ",":
        raise _error(
            cursor, ErrorTemplate.invalid_argument_name(cursor.current, _span(cursor, cursor.pos))
        )

    cursor = cursor.advance().skip_whitespace()
    keyword_start = cursor.pos
    keyword_result = parse_name(cursor)
    keyword = keyword_result.value
    if cursor.is_eof:
        raise _unterminated(cursor, name, start)

    if keyword in _FORMATTER_KEYWORDS:
        return _parse_formatted_argument(
            keyword_result.cursor, name, _FORMATTER_KEYWORDS[keyword], start
        )
    if keyword in _SELECTION_KEYWORDS:
        return _parse_selection(
            keyword_result.cursor, context, name, _SELECTION_KEYWORDS[keyword], start
        )

    found = keyword or cursor.current
    raise _error(
        cursor,
        ErrorTemplate.unknown_argument_type(
            name, found, _span(cursor, keyword_start, keyword_start + len(found))
        ),
    )


def _parse_formatted_argument(
    cursor: Cursor, name: str, kind: FormatterKind, start: int
) -> ParseResult[PatternElement]:
    """Parse the optional style of a number/date/time argument.

    A style beginning with '::' is a skeleton and is validated here, so an
    invalid skeleton is a compile-time error.
    """
    cursor = cursor.skip_whitespace()
    style: str | None = None
    skeleton: str | None = None

    if not cursor.is_eof and cursor.current == ",":
        cursor = cursor.advance()
        raw_result = parse_style_text(cursor)
        raw = raw_result.value
        text = raw.strip()
        if raw_result.cursor.is_eof:
            raise _unterminated(cursor, name, start, len(cursor.source))
        if not text:
            raise _error(
                cursor, ErrorTemplate.expected_argument_style(name, kind, _span(cursor, cursor.pos))
            )

        style_pos = cursor.pos + len(raw) - len(raw.lstrip())
        if text.startswith("::"):
            skeleton = text[2:]
            _validate_skeleton(cursor, kind, skeleton, style_pos + 2)
        else:
            style = text
        cursor = raw_result.cursor

    if cursor.is_eof or cursor.current != "}":
        raise _unterminated(cursor, name, start)

    cursor = cursor.advance()
    node = FormattedArgument(
        name, kind, style=style, skeleton=skeleton, span=Span(start, cursor.pos)
    )
    return ParseResult(node, cursor)


def _validate_skeleton(cursor: Cursor, kind: FormatterKind, skeleton: str, offset: int) -> None:
    """Raise ParseError(INVALID_SKELETON) unless the skeleton tokenizes."""
    try:
        if kind is FormatterKind.NUMBER:
            number_skeleton_options(skeleton)
        else:
            parse_date_skeleton(skeleton)
    except SkeletonError as e:
        raise _error(
            cursor,
            ErrorTemplate.invalid_skeleton(skeleton, e.reason, _span(cursor, offset + e.offset)),
        ) from None


def _parse_selection(
    cursor: Cursor,
    context: ParseContext,
    name: str,
    rule_kind: PluralRuleKind | None,
    start: int,
) -> ParseResult[PatternElement]:
    """Parse branches of plural/selectordinal (rule_kind set) or select (None).

    Grammar:
        selection ::= ',' ws ('offset:' ws integer)? (ws selector ws '{' pattern '}')+ ws '}'
        selector  ::= '=' integer | name
    """
    is_plural = rule_kind is not None
    cursor = cursor.skip_whitespace()
    if cursor.is_eof:
        raise _unterminated(cursor, name, start)
    if cursor.current == "}":
        raise _error(
            cursor, ErrorTemplate.missing_other_branch(name, _span(cursor, start, start + 1))
        )
    if cursor.current != ",":
        raise _unterminated(cursor, name, start)
    cursor = cursor.advance().skip_whitespace()

    offset = 0
    if cursor.starts_with(_OFFSET_PREFIX):
        if not is_plural:
            raise _error(cursor, ErrorTemplate.offset_not_allowed(name, _span(cursor, cursor.pos)))
        cursor = cursor.advance(len(_OFFSET_PREFIX)).skip_whitespace()
        offset_result = parse_integer(cursor)
        if offset_result is None:
            raise _error(cursor, ErrorTemplate.invalid_offset(name, _span(cursor, cursor.pos)))
        offset = offset_result.value
        cursor = offset_result.cursor

    branches: list[Branch] = []
    seen: set[BranchKey] = set()
    while True:
        cursor = cursor.skip_whitespace()
        if cursor.is_eof:
            raise _unterminated(cursor, name, start)
        if cursor.current == "}":
            break

        selector_start = cursor
        key_result = _parse_selector(cursor, name, is_plural=is_plural)
        key = key_result.value
        cursor = key_result.cursor
        selector = selector_start.slice_to(cursor.pos)
        if key in seen:
            raise _error(
                cursor,
                ErrorTemplate.duplicate_selector(
                    name, selector, _span(cursor, selector_start.pos, cursor.pos)
                ),
            )

        cursor = cursor.skip_whitespace()
        if cursor.is_eof or cursor.current != "{":
            raise _error(
                cursor, ErrorTemplate.expected_branch_body(selector, _span(cursor, cursor.pos))
            )
        if context.is_depth_exceeded():
            raise _error(
                cursor,
                ErrorTemplate.nesting_depth_exceeded(
                    context.max_nesting_depth, _span(cursor, cursor.pos)
                ),
            )

        body = parse_pattern(cursor.advance(), context.enter_branch(plural=is_plural))
        cursor = body.cursor
        if cursor.is_eof or cursor.current != "}":
            raise _unterminated(cursor, name, start)
        cursor = cursor.advance()

        branches.append(Branch(key, body.value))
        seen.add(key)

    if OTHER_SELECTOR not in seen:
        raise _error(
            cursor, ErrorTemplate.missing_other_branch(name, _span(cursor, start, start + 1))
        )

    cursor = cursor.advance()
    span = Span(start, cursor.pos)
    node: PatternElement
    if rule_kind is None:
        node = Select(name, tuple(branches), span=span)
    else:
        node = Plural(name, rule_kind, tuple(branches), offset=offset, span=span)
    return ParseResult(node, cursor)


def _parse_selector(cursor: Cursor, name: str, *, is_plural: bool) -> ParseResult[BranchKey]:
    """Parse '=N' (plural only) or a keyword selector."""
    if cursor.current == "=" and is_plural:
        exact = parse_integer(cursor.advance())
        if exact is not None:
            return ParseResult(exact.value, exact.cursor)
    else:
        keyword = parse_name(cursor)
        if keyword.value:
            return ParseResult(keyword.value, keyword.cursor)

    raise _error(
        cursor,
        ErrorTemplate.invalid_selector(name, _word_at(cursor), _span(cursor, cursor.pos)),
    )


def _word_at(cursor: Cursor) -> str:
    """Text up to the next whitespace or brace, for error messages."""
    end = cursor.pos
    while end < len(cursor.source) and cursor.source[end] not in " \t\r\n{}":
        end += 1
    return cursor.slice_to(max(end, cursor.pos + 1))


# =============================================================================
# Tag Parsing
# =============================================================================


def parse_tag(cursor: Cursor, context: ParseContext) -> ParseResult[Tag | str]:
    """Parse <name>children</name> starting at '<'.

    A self-closing tag (<br/>) is not a rich-text region; it comes back as
    its literal text so the caller merges it into the surrounding text.

    Errors:
        INVALID_TAG: attributes, a missing '>' or a nameless closing tag
        UNTERMINATED_TAG: input ends (or a branch closes) before </name>
        MISMATCHED_TAG: closing name differs from the opening name
    """
    start = cursor.pos
    name_result = parse_tag_name(cursor.advance())
    name = name_result.value
    cursor = name_result.cursor.skip_whitespace()

    if cursor.starts_with("/>"):
        return ParseResult(f"<{name}/>", cursor.advance(2))
    if cursor.is_eof or cursor.current != ">":
        raise _error(
            cursor,
            ErrorTemplate.invalid_tag(f"expected '>' after <{name}", _span(cursor, cursor.pos)),
        )
    if context.is_depth_exceeded():
        raise _error(
            cursor,
            ErrorTemplate.nesting_depth_exceeded(context.max_nesting_depth, _span(cursor, start)),
        )

    children = parse_pattern(cursor.advance(), context.enter_tag())
    cursor = children.cursor
    if not cursor.starts_with("</"):
        raise _error(cursor, ErrorTemplate.unterminated_tag(name, _span(cursor, start, cursor.pos)))

    close_start = cursor.pos
    cursor = cursor.advance(2)
    if cursor.is_eof or not is_tag_name_start(cursor.current):
        raise _error(
            cursor,
            ErrorTemplate.invalid_tag("expected a tag name after '</'", _span(cursor, close_start)),
        )
    close_result = parse_tag_name(cursor)
    if close_result.value != name:
        raise _error(
            cursor,
            ErrorTemplate.mismatched_tag(
                name, close_result.value, _span(cursor, close_start, close_result.cursor.pos)
            ),
        )

    cursor = close_result.cursor.skip_whitespace()
    if cursor.is_eof or cursor.current != ">":
        raise _error(
            cursor,
            ErrorTemplate.invalid_tag(f"expected '>' after </{name}", _span(cursor, cursor.pos)),
        )
    cursor = cursor.advance()
    return ParseResult(Tag(name, children.value, span=Span(start, cursor.pos)), cursor)
