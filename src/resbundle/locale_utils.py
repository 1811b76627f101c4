"""Locale utilities and the default bundle-name mangling rule.

Centralizes locale normalization and the conversion of (base name, locale)
pairs into bundle names. Concrete providers typically implement their
name-mangling hook by calling to_bundle_name().

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "ROOT_LOCALE_CODES",
    "clear_locale_cache",
    "get_babel_locale",
    "normalize_locale",
    "to_bundle_name",
]

# Locale codes that denote the root (language-neutral) bundle.
ROOT_LOCALE_CODES: frozenset[str] = frozenset({"", "root", "und"})


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("zh-Hans-CN")
        'zh_Hans_CN'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def clear_locale_cache() -> None:
    """Clear the get_babel_locale() cache."""
    get_babel_locale.cache_clear()


def to_bundle_name(base_name: str, locale: Locale | str) -> str:
    """Combine a base name and a locale into a bundle name.

    The root locale maps to the base name itself. Otherwise the language,
    script, territory and variant are appended with "_" separators; empty
    components are kept as empty segments only where a later component
    needs them, so "de" + variant "POSIX" yields "base_de__POSIX".

    Args:
        base_name: Base bundle name (e.g., "l10n.Messages")
        locale: Babel Locale or locale code string

    Returns:
        Mangled bundle name

    Example:
        >>> to_bundle_name("l10n.Messages", "fr")
        'l10n.Messages_fr'
        >>> to_bundle_name("l10n.Messages", "sr-Latn-RS")
        'l10n.Messages_sr_Latn_RS'
        >>> to_bundle_name("l10n.Messages", "")
        'l10n.Messages'
    """
    if isinstance(locale, str):
        if locale in ROOT_LOCALE_CODES:
            return base_name
        locale = get_babel_locale(locale)

    language = locale.language or ""
    if language in ROOT_LOCALE_CODES:
        language = ""
    script = locale.script or ""
    territory = locale.territory or ""
    variant = locale.variant or ""

    if not (language or territory or variant):
        return base_name

    parts = [base_name, language]
    if script:
        if variant:
            parts += [script, territory, variant]
        elif territory:
            parts += [script, territory]
        else:
            parts.append(script)
    elif variant:
        parts += [territory, variant]
    elif territory:
        parts.append(territory)
    return "_".join(parts)
