"""Immutable cursor infrastructure for type-safe parsing.

Implements the immutable cursor pattern for zero-`None` parsing.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)
    - Line:column computed on-demand via LineOffsetCache (only for errors)

Line Ending Support:
    \\n is the line delimiter. CRLF templates work because the \\n is still
    present; CR-only line endings report every error on line 1.
"""

from dataclasses import dataclass

__all__ = ["Cursor", "LineOffsetCache", "ParseResult"]

# Whitespace accepted between tokens inside braces.
_WHITESPACE: frozenset[str] = frozenset(" \t\n\r")


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("hello", 0)
        >>> cursor.current
        'h'
        >>> cursor.advance().current
        'e'
        >>> cursor.current  # Original unchanged (immutability)
        'h'
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input

        Check is_eof first; mypy then knows current is always str.
        """
        if self.is_eof:
            msg = f"Unexpected end of template at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Peek at character with offset without advancing.

        Returns:
            Character at position + offset, or None if beyond EOF
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (clamped to EOF)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos (exclusive).

        Store the start cursor before scanning, then slice from it:

            >>> start = Cursor("hello world", 0)
            >>> cursor = start
            >>> while not cursor.is_eof and cursor.current != " ":
            ...     cursor = cursor.advance()
            >>> start.slice_to(cursor.pos)
            'hello'
        """
        return self.source[self.pos : end_pos]

    def starts_with(self, text: str) -> bool:
        """Check whether the remaining input begins with text."""
        return self.source.startswith(text, self.pos)

    def skip_whitespace(self) -> "Cursor":
        """Skip spaces, tabs, and line endings.

        Example:
            >>> Cursor("  \\n\\t x", 0).skip_whitespace().current
            'x'
        """
        c = self
        while not c.is_eof and c.current in _WHITESPACE:
            c = c.advance()
        return c


class LineOffsetCache:
    """Precomputed line start offsets for O(log n) position lookup.

    Built once per failing template; successful parses never pay for it.

    Example:
        >>> cache = LineOffsetCache("abc\\ndef")
        >>> cache.get_line_col(0)
        (1, 1)
        >>> cache.get_line_col(5)   # 'e' in "def"
        (2, 2)

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        """Build line offset cache from source. O(n) in source length."""
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get 1-indexed (line, column) for a character position.

        Positions outside the source are clamped to its bounds.
        """
        pos = max(0, min(pos, self._source_len))

        # Line index = index of largest offset <= pos
        left, right = 0, len(self._offsets) - 1
        while left < right:
            mid = (left + right + 1) // 2
            if self._offsets[mid] <= pos:
                left = mid
            else:
                right = mid - 1

        return (left + 1, pos - self._offsets[left] + 1)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result containing parsed value and new cursor position.

    Type Parameters:
        T: The type of the parsed value

    Every grammar rule has signature:
        def parse_foo(cursor: Cursor, context: ParseContext) -> ParseResult[Foo]

    and raises ParseError instead of returning a failure value.

    Example:
        >>> cursor = Cursor("hello", 0)
        >>> result = ParseResult("h", cursor.advance())
        >>> result.value
        'h'
        >>> result.cursor.pos
        1
    """

    value: T
    cursor: Cursor
