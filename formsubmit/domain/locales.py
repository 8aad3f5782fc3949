from __future__ import annotations

import re

DEFAULT_LOCALE = "en"

_SUBTAG_SEPARATOR_RE = re.compile(r"[-_]")


def language_subtag(locale: str | None) -> str:
    """Return the two-character language subtag of a locale string.

    "fr-CA", "fr_ca" and "FR" all give "fr"; blank input gives "".
    """
    value = (locale or "").strip()
    if not value:
        return ""
    primary = _SUBTAG_SEPARATOR_RE.split(value, maxsplit=1)[0]
    return primary[:2].lower()


def localize_template_ref(*, template_ref: str, base_locale: str, locale: str | None) -> str:
    language = language_subtag(locale)
    if not language:
        return template_ref
    return template_ref.replace(f"_{base_locale}", f"_{language}")
