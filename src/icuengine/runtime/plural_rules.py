"""CLDR plural rules and plural branch selection using Babel.

Category resolution is delegated to Babel's CLDR data; this module only
adds the selector-matching policy on top:

1. An exact selector (=N) equal to the offset-adjusted value wins.
2. Otherwise the CLDR category picks the branch.
3. Otherwise 'other'.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

from decimal import Decimal

from babel.core import UnknownLocaleError

from icuengine.enums import PluralRuleKind
from icuengine.locale_utils import get_babel_locale
from icuengine.syntax.ast import OTHER_SELECTOR, Branch

__all__ = ["select_plural_branch", "select_plural_category"]


def select_plural_category(
    n: int | float | Decimal,
    locale: str,
    kind: PluralRuleKind = PluralRuleKind.CARDINAL,
) -> str:
    """Select CLDR plural category for number using Babel's CLDR data.

    Args:
        n: Number to categorize
        locale: Locale code (e.g., "lv_LV", "en_US", "ar-SA")
        kind: Cardinal (plural) or ordinal (selectordinal) rules

    Returns:
        Plural category: "zero", "one", "two", "few", "many", or "other"

    Examples:
        >>> select_plural_category(0, "lv_LV")
        'zero'
        >>> select_plural_category(1, "en_US")
        'one'
        >>> select_plural_category(5, "ru_RU")
        'many'
        >>> select_plural_category(2, "en", PluralRuleKind.ORDINAL)
        'two'
        >>> select_plural_category(23, "en", PluralRuleKind.ORDINAL)
        'few'

    If locale parsing fails, falls back to a one/other cardinal rule and
    an all-'other' ordinal rule.
    """
    try:
        locale_obj = get_babel_locale(locale)
    except (UnknownLocaleError, ValueError):
        if kind is PluralRuleKind.ORDINAL:
            return OTHER_SELECTOR
        return "one" if abs(n) == 1 else OTHER_SELECTOR

    if kind is PluralRuleKind.ORDINAL:
        return locale_obj.ordinal_form(n)
    return locale_obj.plural_form(n)


def select_plural_branch(
    branches: tuple[Branch, ...],
    n: int | float | Decimal,
    locale: str,
    kind: PluralRuleKind = PluralRuleKind.CARDINAL,
) -> Branch:
    """Pick the branch for an already offset-adjusted value.

    Args:
        branches: Branches of a Plural node (always contains 'other')
        n: Value after subtracting the plural offset
        locale: Locale code
        kind: Cardinal or ordinal rules

    Returns:
        The selected Branch

    Example:
        >>> from icuengine.syntax import parse
        >>> plural = parse("{n, plural, =0 {none} one {one} other {many}}").value.elements[0]
        >>> select_plural_branch(plural.branches, 0, "en").selector
        '=0'
        >>> select_plural_branch(plural.branches, 1, "en").selector
        'one'
    """
    other: Branch | None = None
    for branch in branches:
        if branch.is_exact and branch.key == n:
            return branch
        if branch.key == OTHER_SELECTOR:
            other = branch

    category = select_plural_category(n, locale, kind)
    for branch in branches:
        if not branch.is_exact and branch.key == category:
            return branch

    if other is None:
        msg = "Plural branches must include 'other'"
        raise ValueError(msg)
    return other
