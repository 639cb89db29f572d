"""Serialize message AST back to template syntax.

Converts AST nodes to template text. Useful for:
- Normalizing templates written by translators
- Tooling that rewrites messages programmatically
- Property-based testing (roundtrip: parse -> serialize -> parse)

Output is canonical: one space after each comma, one space between
branches, and the minimum apostrophe quoting needed for literal text to
read back unchanged.

Python 3.13+.
"""

from typing import assert_never

from icuengine.core.depth_guard import DepthGuard
from icuengine.enums import PluralRuleKind

from .ast import (
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

__all__ = ["MessageSerializer", "escape_text", "serialize"]

_SPECIAL: frozenset[str] = frozenset("{}<>")
_SPECIAL_IN_PLURAL: frozenset[str] = _SPECIAL | {"#"}


def escape_text(text: str, *, in_plural: bool = False) -> str:
    """Quote literal text so the parser reads it back unchanged.

    Apostrophes are doubled. A quoted section opens at a syntax character
    and stays open across further syntax characters and apostrophes, so a
    closing quote is never followed by a doubled apostrophe.

    Example:
        >>> escape_text("It's {free}")
        "It''s '{'free'}'"
        >>> escape_text("{'}")
        "'{''}'"
        >>> escape_text("#1", in_plural=True)
        "'#'1"
    """
    special = _SPECIAL_IN_PLURAL if in_plural else _SPECIAL
    output: list[str] = []
    quoting = False
    for char in text:
        if char in special:
            if not quoting:
                output.append("'")
                quoting = True
        elif quoting and char != "'":
            output.append("'")
            quoting = False
        output.append("''" if char == "'" else char)
    if quoting:
        output.append("'")
    return "".join(output)


class MessageSerializer:
    """Converts AST back to template text.

    Thread-safe serializer with no mutable instance state.
    All serialization state is local to the serialize() call.

    Usage:
        >>> from icuengine.syntax import parse
        >>> MessageSerializer().serialize(parse("{n,plural,one{# item}other{# items}}"))
        '{n, plural, one {# item} other {# items}}'
    """

    __slots__ = ("_max_depth",)

    def __init__(self, *, max_depth: int | None = None) -> None:
        self._max_depth = max_depth

    def serialize(self, node: Message | Pattern) -> str:
        """Serialize a Message or Pattern to template text.

        Raises:
            DepthLimitExceededError: If a hand-built AST nests deeper than max_depth
        """
        guard = DepthGuard() if self._max_depth is None else DepthGuard(self._max_depth)
        pattern = node.value if isinstance(node, Message) else node
        output: list[str] = []
        self._serialize_pattern(pattern, output, guard, in_plural=False)
        return "".join(output)

    def _serialize_pattern(
        self, pattern: Pattern, output: list[str], guard: DepthGuard, *, in_plural: bool
    ) -> None:
        # Adjacent text is escaped as one run; quoting is not compositional
        text: list[str] = []
        for element in pattern.elements:
            if isinstance(element, TextElement):
                text.append(element.value)
                continue
            if text:
                output.append(escape_text("".join(text), in_plural=in_plural))
                text.clear()
            match element:
                case TextElement():
                    pass
                case Argument(name=name):
                    output.append(f"{{{name}}}")
                case FormattedArgument():
                    output.append(self._serialize_formatted(element))
                case PoundSign():
                    output.append("#")
                case Plural():
                    cardinal = element.kind is PluralRuleKind.CARDINAL
                    keyword = "plural" if cardinal else "selectordinal"
                    output.append(f"{{{element.name}, {keyword}, ")
                    if element.offset:
                        output.append(f"offset:{element.offset} ")
                    self._serialize_branches(element.branches, output, guard, in_plural=True)
                    output.append("}")
                case Select():
                    output.append(f"{{{element.name}, select, ")
                    self._serialize_branches(element.branches, output, guard, in_plural=False)
                    output.append("}")
                case Tag(name=name, children=children):
                    output.append(f"<{name}>")
                    with guard:
                        self._serialize_pattern(children, output, guard, in_plural=in_plural)
                    output.append(f"</{name}>")
                case _:
                    assert_never(element)
        if text:
            output.append(escape_text("".join(text), in_plural=in_plural))

    def _serialize_branches(
        self,
        branches: tuple[Branch, ...],
        output: list[str],
        guard: DepthGuard,
        *,
        in_plural: bool,
    ) -> None:
        for index, branch in enumerate(branches):
            if index:
                output.append(" ")
            output.append(f"{branch.selector} {{")
            with guard:
                self._serialize_pattern(branch.value, output, guard, in_plural=in_plural)
            output.append("}")

    @staticmethod
    def _serialize_formatted(element: FormattedArgument) -> str:
        head = f"{{{element.name}, {element.kind}"
        if element.skeleton is not None:
            return f"{head}, ::{element.skeleton}}}"
        if element.style is not None:
            return f"{head}, {element.style}}}"
        return f"{head}}}"


def serialize(node: Message | Pattern) -> str:
    """Serialize a Message or Pattern to template text.

    Convenience function for MessageSerializer.serialize().

    Example:
        >>> from icuengine.syntax import parse
        >>> serialize(parse("Hi '{'{name}'}'"))
        "Hi '{'{name}'}'"
    """
    return MessageSerializer().serialize(node)
