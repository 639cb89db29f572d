"""Thread-safe compiled-pattern cache.

Memoizes MessageParser output keyed by template text. Templates are static
per application while bindings change on every call, so parsing once and
evaluating many times is the normal path.

Architecture:
    - LRU bookkeeping via OrderedDict under one RLock
    - Parsing itself runs OUTSIDE the lock
    - Per-key in-flight records: the first caller for a template compiles,
      concurrent callers for the same template wait on that record and get
      the identical result; callers for other templates never wait
    - ParseError is cached as the terminal result for its template; every
      raise is a fresh copy sharing the cached diagnostic

Eviction only drops the cache's reference; an AST already handed to an
evaluation stays alive for as long as that evaluation holds it.

Python 3.13+.
"""

import copy
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from threading import Event, RLock

from icuengine.constants import DEFAULT_CACHE_SIZE
from icuengine.diagnostics import ParseError
from icuengine.syntax.ast import Message
from icuengine.syntax.parser import MessageParser

__all__ = ["PatternCache"]

logger = logging.getLogger(__name__)

type _CacheValue = Message | ParseError


@dataclass(slots=True)
class _Compilation:
    """In-flight compilation of one template."""

    done: Event = field(default_factory=Event)
    result: Message | None = None
    error: BaseException | None = None


class PatternCache:
    """Thread-safe LRU cache of compiled templates.

    Example:
        >>> cache = PatternCache(maxsize=100)
        >>> message = cache.get_or_compile("Hello, {name}!")
        >>> cache.get_or_compile("Hello, {name}!") is message
        True
        >>> cache.get_stats()["hits"]
        1

    Attributes:
        maxsize: Maximum number of cached templates
        parser: Parser used for cache misses
    """

    __slots__ = (
        "_compile_errors",
        "_entries",
        "_hits",
        "_inflight",
        "_lock",
        "_maxsize",
        "_misses",
        "_parser",
    )

    def __init__(
        self, maxsize: int = DEFAULT_CACHE_SIZE, *, parser: MessageParser | None = None
    ) -> None:
        """Initialize pattern cache.

        Args:
            maxsize: Maximum number of entries (default: 10,000)
            parser: Parser for cache misses (default: MessageParser())
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._entries: OrderedDict[str, _CacheValue] = OrderedDict()
        self._inflight: dict[str, _Compilation] = {}
        self._maxsize = maxsize
        self._parser = parser if parser is not None else MessageParser()
        self._lock = RLock()
        self._hits = 0
        self._misses = 0
        self._compile_errors = 0

    def get_or_compile(self, template: str) -> Message:
        """Return the compiled AST for template, parsing it at most once.

        Args:
            template: Template text

        Returns:
            Compiled Message (the same object for every caller while cached)

        Raises:
            ParseError: Template is malformed (cached; a copy is raised on every call)
            ValueError: Template exceeds the parser's size limit (not cached)
        """
        with self._lock:
            cached = self._entries.get(template)
            if cached is not None:
                self._entries.move_to_end(template)
                self._hits += 1
                return self._unwrap(cached)

            compilation = self._inflight.get(template)
            owner = compilation is None
            if compilation is None:
                compilation = _Compilation()
                self._inflight[template] = compilation
                self._misses += 1
            else:
                self._hits += 1

        if owner:
            self._compile(template, compilation)
        else:
            compilation.done.wait()

        if compilation.error is not None:
            if isinstance(compilation.error, ParseError):
                raise copy.copy(compilation.error)
            raise compilation.error
        if compilation.result is None:
            msg = "Compilation finished without a result"
            raise RuntimeError(msg)
        return compilation.result

    def _compile(self, template: str, compilation: _Compilation) -> None:
        logger.debug("Compiling template (%d chars)", len(template))
        value: _CacheValue | None = None
        try:
            value = self._parser.parse(template)
            compilation.result = value
        except ParseError as e:
            logger.debug("Template failed to compile: %s", e.reason)
            # Cached errors carry no traceback
            value = e.with_traceback(None)
            compilation.error = value
        except BaseException as e:
            compilation.error = e
            raise
        finally:
            with self._lock:
                if value is not None:
                    if isinstance(value, ParseError):
                        self._compile_errors += 1
                    self._store(template, value)
                del self._inflight[template]
            compilation.done.set()

    def _store(self, template: str, value: _CacheValue) -> None:
        # Caller holds the lock
        if template in self._entries:
            self._entries.move_to_end(template)
        elif len(self._entries) >= self._maxsize:
            self._entries.popitem(last=False)
        self._entries[template] = value

    @staticmethod
    def _unwrap(value: _CacheValue) -> Message:
        # Raise a copy so the cached error never collects caller frames
        if isinstance(value, ParseError):
            raise copy.copy(value)
        return value

    def clear(self) -> None:
        """Clear all cached entries and reset metrics.

        In-flight compilations finish normally for their waiting callers.
        """
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._compile_errors = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Current number of cached templates
            - maxsize (int): Maximum cache capacity
            - hits (int): Lookups served without parsing
            - misses (int): Lookups that parsed
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
            - compile_errors (int): Templates cached as ParseError
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._entries),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "compile_errors": self._compile_errors,
            }

    @property
    def maxsize(self) -> int:
        """Maximum cache size."""
        return self._maxsize

    @property
    def parser(self) -> MessageParser:
        """Parser used for cache misses."""
        return self._parser

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, template: object) -> bool:
        with self._lock:
            return template in self._entries

    def __repr__(self) -> str:
        return f"PatternCache(size={len(self)}, maxsize={self._maxsize})"
