"""Core message template parser.

This module provides the MessageParser class that turns template text into
the AST defined in :mod:`icuengine.syntax.ast`.

Architecture:
    The parser uses an immutable cursor pattern (:class:`~icuengine.syntax.cursor.Cursor`).
    Each rule in :mod:`~icuengine.syntax.parser.rules` takes a cursor and a
    :class:`~icuengine.syntax.parser.rules.ParseContext` and returns a
    :class:`~icuengine.syntax.cursor.ParseResult` with the node and the
    advanced cursor.

Error Model:
    Unlike a resource parser, a template is all-or-nothing: the first
    problem raises :class:`~icuengine.diagnostics.ParseError` carrying a
    structured diagnostic with line and column.

Security:
    Includes configurable input size and nesting limits so untrusted
    templates cannot exhaust memory or the Python stack.
"""

from icuengine.constants import MAX_DEPTH, MAX_SOURCE_SIZE
from icuengine.core.depth_guard import depth_clamp
from icuengine.syntax.ast import Message
from icuengine.syntax.cursor import Cursor
from icuengine.syntax.parser.rules import ParseContext, parse_pattern

__all__ = ["MessageParser"]


class MessageParser:
    """ICU MessageFormat template parser using immutable cursor pattern.

    Parsers are stateless after construction and safe to share between
    threads.

    Attributes:
        max_source_size: Maximum template length in characters (default: 1 MiB)
        max_nesting_depth: Maximum nesting of branch and tag bodies (default: 100)
        ignore_tags: Whether '<' is plain text
    """

    __slots__ = ("_ignore_tags", "_max_nesting_depth", "_max_source_size")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
        ignore_tags: bool = False,
    ) -> None:
        """Initialize parser with optional limits.

        Args:
            max_source_size: Maximum template length (default: 1 MiB).
                            Set to 0 to disable the limit.
            max_nesting_depth: Maximum branch/tag nesting depth (default: 100).
                              Clamped to what the Python stack can hold.
            ignore_tags: Treat every '<' as literal text
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = depth_clamp(
            max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH
        )
        self._ignore_tags = ignore_tags

    @property
    def max_source_size(self) -> int:
        """Maximum allowed template length."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed nesting depth."""
        return self._max_nesting_depth

    @property
    def ignore_tags(self) -> bool:
        """Whether tag syntax is disabled."""
        return self._ignore_tags

    def parse(self, template: str) -> Message:
        """Parse template text into a Message.

        Args:
            template: Template text

        Returns:
            :class:`~icuengine.syntax.ast.Message` whose value is the root pattern

        Raises:
            ValueError: If template exceeds max_source_size
            ParseError: On the first syntax error

        Example:
            >>> message = MessageParser().parse("Hello, {name}!")
            >>> [type(e).__name__ for e in message.value.elements]
            ['TextElement', 'Argument', 'TextElement']
        """
        if self._max_source_size > 0 and len(template) > self._max_source_size:
            msg = (
                f"Template size ({len(template):,} characters) exceeds maximum "
                f"({self._max_source_size:,}). "
                "Configure max_source_size in MessageParser constructor to increase limit."
            )
            raise ValueError(msg)

        context = ParseContext(
            max_nesting_depth=self._max_nesting_depth,
            ignore_tags=self._ignore_tags,
        )
        result = parse_pattern(Cursor(template, 0), context)
        return Message(result.value, source=template)

    def __repr__(self) -> str:
        return (
            f"MessageParser(max_source_size={self._max_source_size}, "
            f"max_nesting_depth={self._max_nesting_depth}, "
            f"ignore_tags={self._ignore_tags})"
        )
