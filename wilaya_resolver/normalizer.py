"""Comparison keys for bilingual (French/Arabic) place names.

Every name comparison in the package goes through :func:`normalize`. Raw
strings are never compared directly: order sheets carry names typed by hand in
either script, with or without accents, Arabic vowel marks, hamza variants or
tatweel, so ``"Béjaïa"``, ``"bejaia"`` and ``"BEJAIA"`` must collapse to the same
key, just like ``"الأغواط"`` and ``"الاغواط"``.
"""
from __future__ import annotations

import logging
import re
import unicodedata

logger = logging.getLogger(__name__)

# Latin combining accents, Arabic harakat/hamza marks and tatweel.
_MARKS_RE = re.compile(r"[\u0300-\u036f\u064b-\u065f\u0640]")
# Letter variants folded to one representative, applied in this order.
_ARABIC_FOLDS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[ءآأإ]"), "ا"),
    (re.compile(r"ؤ"), "و"),
    (re.compile(r"ئ"), "ي"),
    (re.compile(r"ة"), "ه"),
    (re.compile(r"ى"), "ي"),
)
_QUOTES_RE = re.compile(r"['\"`\u2018-\u201f]")
_SEPARATORS_RE = re.compile(r"[-_.]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: object) -> str:
    """Return the canonical comparison key for ``text``.

    1. NFKD decomposition, so accents and Arabic marks become separate
       combining characters (``"é"`` -> ``"e"`` + U+0301, ``"أ"`` -> ``"ا"`` +
       U+0654).
    2. Drop Latin combining accents, Arabic diacritics and tatweel.
    3. Fold Arabic letter variants: hamza/alef forms to bare alef, waw and yeh
       hamza carriers to their base letter, teh marbuta to heh, alef maksura to
       yeh.
    4. Remove straight and curly quotes (``"M'Sila"`` -> ``"msila"``).
    5. Hyphen, underscore and period become spaces.
    6. Collapse whitespace and trim.
    7. Lowercase.

    ``None`` and empty values give ``""``; non-string values are stringified.
    The function is idempotent.
    """

    if text is None:
        return ""
    raw = str(text)
    if not raw:
        return ""

    value = unicodedata.normalize("NFKD", raw)
    value = _MARKS_RE.sub("", value)
    for pattern, replacement in _ARABIC_FOLDS:
        value = pattern.sub(replacement, value)
    value = _QUOTES_RE.sub("", value)
    value = _SEPARATORS_RE.sub(" ", value)
    value = _WHITESPACE_RE.sub(" ", value).strip()
    normalized = value.lower()
    logger.debug("normalize raw=%r normalized=%r", raw, normalized)
    return normalized


def composite_key(name: object, wilaya_name: object) -> str:
    """Key used by the name+wilaya maps: ``normalize(name) || normalize(wilaya)``."""

    return f"{normalize(name)}||{normalize(wilaya_name)}"
