"""WinAnsi-safe text for document fields."""

from __future__ import annotations

import re
import unicodedata

_REPLACEMENTS: dict[str, str] = {
    "œ": "oe",
    "Œ": "OE",
    "æ": "ae",
    "Æ": "AE",
    "«": '"',
    "»": '"',
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
    "–": "-",
    "—": "-",
    "…": "...",
    "\u00a0": " ",
    "\u202f": " ",
}
_UNPRINTABLE_RE = re.compile(r"[^\n\x20-\x7E\u00A0-\u00FF]")


def normalize_for_winansi(text: str) -> str:
    """Strip accents, replace typographic punctuation, drop the rest.

    Line breaks are kept so multi-line fields survive.
    """
    if not text:
        return text
    decomposed = unicodedata.normalize("NFD", text)
    normalized = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    for source, target in _REPLACEMENTS.items():
        normalized = normalized.replace(source, target)
    normalized = normalized.replace("\r\n", "\n")
    return _UNPRINTABLE_RE.sub("", normalized)
