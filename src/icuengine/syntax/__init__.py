"""Message template syntax package.

Provides the parser, AST definitions, skeleton tokenizers and serialization.
Separate from runtime so tooling (linters, extractors, editors) can work
with templates without loading locale data.

Python 3.13+.
"""

from .ast import (
    OTHER_SELECTOR,
    Argument,
    ASTNode,
    Branch,
    BranchKey,
    FormattedArgument,
    Message,
    Pattern,
    PatternElement,
    Plural,
    PoundSign,
    Select,
    Span,
    Tag,
    TextElement,
)
from .cursor import Cursor, LineOffsetCache, ParseResult
from .parser import MessageParser, ParseContext
from .serializer import MessageSerializer, escape_text, serialize
from .skeleton import SkeletonError, parse_date_skeleton

__all__ = [
    "ASTNode",
    "Argument",
    "Branch",
    "BranchKey",
    "Cursor",
    "FormattedArgument",
    "LineOffsetCache",
    "Message",
    "MessageParser",
    "MessageSerializer",
    "OTHER_SELECTOR",
    "ParseContext",
    "ParseResult",
    "Pattern",
    "PatternElement",
    "Plural",
    "PoundSign",
    "Select",
    "SkeletonError",
    "Span",
    "Tag",
    "TextElement",
    "escape_text",
    "parse",
    "parse_date_skeleton",
    "serialize",
]


def parse(template: str, *, ignore_tags: bool = False) -> Message:
    """Parse template text into an AST.

    Convenience function for MessageParser.parse().

    Args:
        template: Template text
        ignore_tags: Treat '<' as literal text

    Returns:
        Message whose value is the root pattern

    Raises:
        ParseError: On the first syntax error

    Example:
        >>> from icuengine.syntax import parse
        >>> message = parse("Hello, {name}!")
        >>> message.value.elements[1].name
        'name'
    """
    parser = MessageParser(ignore_tags=ignore_tags)
    return parser.parse(template)
