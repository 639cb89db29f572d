"""Message template parser module.

Module Organization:
- core.py: MessageParser class and parse() entry point
- primitives.py: Names, integers, quoting and raw style text
- rules.py: Grammar rules (patterns, arguments, selections, tags)

Public API:
    MessageParser: Main parser class
    ParseContext: Parse context for depth tracking (advanced usage)
"""

from icuengine.syntax.parser.core import MessageParser
from icuengine.syntax.parser.rules import ParseContext

__all__ = ["MessageParser", "ParseContext"]
