"""Translator - key-based message lookup on top of MessageFormatter.

The engine itself formats template text; applications usually hold their
templates in a catalog keyed by message id. A Translator pairs one
MessageFormatter with a MessageStore and adds:

- Lookup by key for the formatter's locale
- Message keys attached to every error raised through it
- Optional error callback with a fallback string instead of raising

Python 3.13+.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Protocol

from icuengine.constants import FALLBACK_MISSING_MESSAGE
from icuengine.diagnostics import ErrorTemplate, MessageFormatError, MessageNotFoundError
from icuengine.locale_utils import normalize_locale
from icuengine.runtime.formatter import MessageFormatter
from icuengine.runtime.resolver import RichContent

__all__ = [
    "MappingMessageStore",
    "MessageStore",
    "Translator",
]

logger = logging.getLogger(__name__)

type Bindings = Mapping[str, object]
type ErrorHandler = Callable[[MessageFormatError], None]
type FallbackFactory = Callable[[str, MessageFormatError], str]
type Catalog = Mapping[str, str | Catalog]


class MessageStore(Protocol):
    """Protocol for template lookup by locale and key.

    This is a Protocol (structural typing) rather than ABC so any object
    with a matching lookup() method works: a dict wrapper, a database
    table, a gettext catalog adapter.

    Example:
        >>> class UpperStore:
        ...     def lookup(self, locale: str, key: str) -> str | None:
        ...         return key.upper()
    """

    def lookup(self, locale: str, key: str) -> str | None:
        """Return the template for key in locale, or None when absent."""


class MappingMessageStore:
    """In-memory message store backed by nested mappings.

    Catalogs may nest namespaces; nested keys are joined with dots, so
    ``{"auth": {"title": "Sign in"}}`` is looked up as ``auth.title``.
    Locale codes are normalized (en-US == en_US), and a lookup for a
    regional locale falls back to its language (en_US -> en).

    Example:
        >>> store = MappingMessageStore({"en": {"greeting": "Hello, {name}!"}})
        >>> store.lookup("en-US", "greeting")
        'Hello, {name}!'
        >>> store.lookup("en", "missing") is None
        True
    """

    __slots__ = ("_catalogs",)

    def __init__(self, catalogs: Mapping[str, Catalog]) -> None:
        """Initialize store.

        Args:
            catalogs: Mapping of locale code to (possibly nested) catalog

        Raises:
            TypeError: If a catalog leaf is not a string
        """
        self._catalogs: dict[str, dict[str, str]] = {
            normalize_locale(locale): self._flatten(catalog, "")
            for locale, catalog in catalogs.items()
        }

    @classmethod
    def _flatten(cls, catalog: Catalog, prefix: str) -> dict[str, str]:
        flat: dict[str, str] = {}
        for key, value in catalog.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, str):
                flat[full_key] = value
            elif isinstance(value, Mapping):
                flat.update(cls._flatten(value, f"{full_key}."))
            else:
                kind = type(value).__name__
                msg = f"Catalog entry '{full_key}' must be a string or mapping, got {kind}"
                raise TypeError(msg)
        return flat

    def lookup(self, locale: str, key: str) -> str | None:
        normalized = normalize_locale(locale)
        catalog = self._catalogs.get(normalized)
        if catalog is not None and key in catalog:
            return catalog[key]
        language = normalized.split("_", 1)[0]
        if language != normalized:
            return self._catalogs.get(language, {}).get(key)
        return None

    @property
    def locales(self) -> tuple[str, ...]:
        """Normalized locale codes with a catalog."""
        return tuple(self._catalogs)

    def __len__(self) -> int:
        return sum(len(catalog) for catalog in self._catalogs.values())

    def __repr__(self) -> str:
        return f"MappingMessageStore(locales={list(self._catalogs)!r}, messages={len(self)})"


class Translator:
    """Formats catalog messages by key for one locale.

    Without an error handler every failure propagates, annotated with the
    message key. With one, the handler receives the error and the call
    returns a fallback string (``{key}`` unless get_message_fallback says
    otherwise).

    Example:
        >>> store = MappingMessageStore({"en": {
        ...     "inbox": "{count, plural, =0 {No messages} one {# message} other {# messages}}",
        ... }})
        >>> t = Translator(MessageFormatter("en"), store)
        >>> t("inbox", {"count": 1200})
        '1,200 messages'
        >>> errors = []
        >>> lenient = Translator(MessageFormatter("en"), store, on_error=errors.append)
        >>> lenient("nav.home")
        '{nav.home}'
        >>> errors[0].message_key
        'nav.home'
    """

    __slots__ = ("_fallback", "_formatter", "_on_error", "_store")

    def __init__(
        self,
        formatter: MessageFormatter,
        store: MessageStore,
        *,
        on_error: ErrorHandler | None = None,
        get_message_fallback: FallbackFactory | None = None,
    ) -> None:
        """Initialize translator.

        Args:
            formatter: Formatter for the target locale
            store: Template source
            on_error: Receives errors instead of raising them
            get_message_fallback: Builds the string returned after an error
                (only used together with on_error)
        """
        self._formatter = formatter
        self._store = store
        self._on_error = on_error
        self._fallback = get_message_fallback

    @property
    def locale(self) -> str:
        """Locale of the underlying formatter."""
        return self._formatter.locale

    @property
    def formatter(self) -> MessageFormatter:
        """Underlying formatter."""
        return self._formatter

    def has(self, key: str) -> bool:
        """Check if the store has a template for key."""
        return self._store.lookup(self._formatter.locale, key) is not None

    def raw(self, key: str) -> str:
        """Return the unformatted template for key.

        Raises:
            MessageNotFoundError: Key is absent for this locale
        """
        template = self._store.lookup(self._formatter.locale, key)
        if template is None:
            raise MessageNotFoundError(ErrorTemplate.message_not_found(key, self._formatter.locale))
        return template

    def translate(self, key: str, bindings: Bindings | None = None) -> str:
        """Format the message stored under key to text.

        Raises:
            MessageNotFoundError: Key is absent (without on_error)
            MessageFormatError: Parse or evaluation failure, carrying the key
                (without on_error)
        """
        try:
            return self._formatter.format(self.raw(key), bindings)
        except MessageFormatError as e:
            return self._handle(key, e)

    __call__ = translate

    def rich(self, key: str, bindings: Bindings | None = None) -> RichContent:
        """Format the message stored under key to rich content.

        After an error handled by on_error, the fallback string is returned
        as a one-element tuple.
        """
        try:
            return self._formatter.format_rich(self.raw(key), bindings)
        except MessageFormatError as e:
            return (self._handle(key, e),)

    def _handle(self, key: str, error: MessageFormatError) -> str:
        keyed = error if error.message_key == key else error.with_message_key(key)
        if self._on_error is None:
            if keyed is error:
                raise error
            raise keyed from error

        self._on_error(keyed)
        fallback = (
            self._fallback(key, keyed)
            if self._fallback is not None
            else FALLBACK_MISSING_MESSAGE.format(key=key)
        )
        logger.debug("Message '%s' failed, using fallback: %s", key, keyed)
        return fallback

    def __repr__(self) -> str:
        return f"Translator(locale={self._formatter.locale!r}, store={self._store!r})"
