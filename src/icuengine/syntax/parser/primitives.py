"""Primitive lexical parsers for the message template grammar.

This module provides low-level scanners for names, integers, quoted
literals and raw style text. They never raise: a scanner that finds
nothing returns None (or an empty value) and the grammar rule that called
it decides which ParseError to report.
"""

from icuengine.syntax.cursor import Cursor, ParseResult

__all__ = [
    "is_name_char",
    "is_tag_name_char",
    "is_tag_name_start",
    "parse_integer",
    "parse_name",
    "parse_quoted_literal",
    "parse_style_text",
    "parse_tag_name",
]

# ASCII digits only: str.isdigit() accepts superscripts which int() rejects.
_ASCII_DIGITS: str = "0123456789"

# Characters an apostrophe can quote. '#' is added inside plural branches.
_QUOTABLE: frozenset[str] = frozenset("{}<>")


def is_name_char(char: str) -> bool:
    """Check whether char may appear in an argument name, keyword or selector.

    Names use letters, digits, '_', '-' and '.', so positional names
    ({0}) and dotted names ({user.name}) are both valid.
    """
    return char.isalnum() or char in "_-."


def is_tag_name_start(char: str) -> bool:
    """Tag names start with a letter; '<' before anything else is literal."""
    return char.isalpha()


def is_tag_name_char(char: str) -> bool:
    """Check whether char may continue a tag name."""
    return char.isalnum() or char in "_-."


def parse_name(cursor: Cursor) -> ParseResult[str]:
    """Scan a run of name characters.

    Returns:
        ParseResult with the (possibly empty) name and the cursor after it

    Example:
        >>> result = parse_name(Cursor("count, plural", 0))
        >>> result.value, result.cursor.pos
        ('count', 5)
    """
    start = cursor
    while not cursor.is_eof and is_name_char(cursor.current):
        cursor = cursor.advance()
    return ParseResult(start.slice_to(cursor.pos), cursor)


def parse_tag_name(cursor: Cursor) -> ParseResult[str]:
    """Scan a tag name; the caller has checked the first character."""
    start = cursor
    while not cursor.is_eof and is_tag_name_char(cursor.current):
        cursor = cursor.advance()
    return ParseResult(start.slice_to(cursor.pos), cursor)


def parse_integer(cursor: Cursor) -> ParseResult[int] | None:
    """Parse an optionally negative decimal integer: -?[0-9]+

    Returns:
        ParseResult with the integer, or None if no digits follow

    Example:
        >>> parse_integer(Cursor("-12 {", 0)).value
        -12
        >>> parse_integer(Cursor("one", 0)) is None
        True
    """
    start = cursor
    if not cursor.is_eof and cursor.current == "-":
        cursor = cursor.advance()
    digits_start = cursor.pos
    while not cursor.is_eof and cursor.current in _ASCII_DIGITS:
        cursor = cursor.advance()
    if cursor.pos == digits_start:
        return None
    return ParseResult(int(start.slice_to(cursor.pos)), cursor)


def parse_quoted_literal(cursor: Cursor, *, in_plural: bool) -> ParseResult[str] | None:
    """Parse an apostrophe escape starting at the current "'".

    Quoting rules:
        ''            -> a single literal apostrophe, anywhere
        '{...'        -> quoted section starting with a special character,
                         running to the next lone apostrophe (or EOF);
                         '' inside it is still one apostrophe
        'x            -> not an escape; caller treats "'" as literal text

    Special characters are '{', '}', '<', '>' and, inside plural branches, '#'.

    Returns:
        ParseResult with the unescaped text, or None if the apostrophe
        does not start an escape

    Example:
        >>> parse_quoted_literal(Cursor("'{name'}", 0), in_plural=False).value
        '{name}'
        >>> parse_quoted_literal(Cursor("''", 0), in_plural=False).value
        "'"
        >>> parse_quoted_literal(Cursor("'s", 0), in_plural=False) is None
        True
    """
    nxt = cursor.peek(1)
    if nxt == "'":
        return ParseResult("'", cursor.advance(2))
    if nxt is None or not (nxt in _QUOTABLE or (in_plural and nxt == "#")):
        return None

    # Skip the opening apostrophe; the special character is taken verbatim.
    cursor = cursor.advance()
    chars = [cursor.current]
    cursor = cursor.advance()
    while not cursor.is_eof:
        char = cursor.current
        if char == "'":
            if cursor.peek(1) == "'":
                chars.append("'")
                cursor = cursor.advance(2)
                continue
            cursor = cursor.advance()
            break
        chars.append(char)
        cursor = cursor.advance()
    return ParseResult("".join(chars), cursor)


def parse_style_text(cursor: Cursor) -> ParseResult[str]:
    """Scan raw style text up to the '}' that closes the argument.

    Balanced braces and apostrophe-quoted sections are kept verbatim, so
    styles such as ``::currency/EUR`` or ``'{'#`` survive untouched.

    Returns:
        ParseResult with the raw (unstripped) style; the cursor is at the
        closing '}' or at EOF when the argument is unterminated
    """
    start = cursor
    depth = 0
    while not cursor.is_eof:
        char = cursor.current
        if char == "'":
            cursor = cursor.advance()
            while not cursor.is_eof and cursor.current != "'":
                cursor = cursor.advance()
        elif char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                break
            depth -= 1
        cursor = cursor.advance()
    return ParseResult(start.slice_to(cursor.pos), cursor)
