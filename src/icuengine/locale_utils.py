"""Locale utilities for BCP-47 to POSIX conversion.

Centralizes locale format normalization used throughout the codebase.
Locales are normalized once at the system boundary so cache keys and
Babel lookups agree regardless of the spelling callers use.

Python 3.13+.
"""

from __future__ import annotations

import functools
import locale as locale_module
import os

from babel import Locale

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
    "validate_locale_format",
]


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


def validate_locale_format(locale_code: str) -> None:
    """Validate locale code shape before any lookup.

    Checks that the code is non-empty and contains only alphanumeric
    characters with optional underscore or hyphen separators.

    Raises:
        ValueError: If locale code is empty or has invalid format
    """
    if not locale_code:
        msg = "Locale code cannot be empty"
        raise ValueError(msg)

    if not locale_code.replace("_", "").replace("-", "").isalnum():
        msg = f"Invalid locale code format: '{locale_code}'"
        raise ValueError(msg)


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result. Plural selection
    runs on every plural evaluation, so repeated Locale.parse() calls
    would dominate its cost.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    return Locale.parse(normalize_locale(locale_code))


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Filters out "C" and "POSIX" pseudo-locales.

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return "en_US" as fallback.

    Returns:
        Detected locale code in POSIX format.

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.
    """
    try:
        system_locale, _ = locale_module.getlocale()
    except ValueError:
        system_locale = None

    if system_locale and system_locale not in ("C", "POSIX"):
        return normalize_locale(system_locale.split(".")[0])

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        # Strip encoding suffix (e.g., ".UTF-8")
        code = os.environ.get(var, "").split(".")[0]
        if code and code not in ("C", "POSIX"):
            return normalize_locale(code)

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return "en_US"
