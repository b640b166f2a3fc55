"""Sequela row encodings.

Rows arrive either as one combined string per export
(``"Code: x | Description: y | %: z"``, rows separated by newlines or by
nothing at all) or as individual per-row keys. Both are parsed into
canonical rows and merged once.
"""

from __future__ import annotations

from collections.abc import Iterable
import re

from ....constants import InterchangeKeys
from ...entities.sequela import (
    CombinedEncoding,
    IndividualEncoding,
    SequelaEncoding,
    SequelaFields,
    SequelaRow,
)
from ..resolution.utils import strip_accents

_CODE_LABEL_RE = re.compile(r"Code\s*:")
_INDIVIDUAL_KEY_RE = re.compile(
    r"^(s[ée]quel\w*?)(code|description|percentage|pourcentage)(\d*)$",
    re.IGNORECASE,
)
_LABELS: dict[str, str] = {
    "code": "code",
    "description": "description",
    "desc": "description",
    "%": "percentage",
    "pct": "percentage",
    "pourcentage": "percentage",
    "percentage": "percentage",
    "taux": "percentage",
}


def parse_combined(text: str) -> list[SequelaFields]:
    """Parse a combined string into non-empty rows.

    Malformed chunks yield whatever labelled parts they contain; missing
    parts stay blank.
    """
    rows: list[SequelaFields] = []
    for chunk in _split_rows(text):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts: dict[str, str] = {}
        for part in chunk.split("|"):
            label, sep, value = part.partition(":")
            if not sep:
                continue
            name = _LABELS.get(label.strip().lower())
            if name is not None and name not in parts:
                parts[name] = value.strip()
        row = SequelaFields(**parts)
        if not row.is_empty():
            rows.append(row)
    return rows


def _split_rows(text: str) -> list[str]:
    """Cut ``text`` where a ``Code:`` label opens a new row.

    A label opens a row at the start of a line or right after the previous
    row's percentage value; anywhere else it belongs to a field value.
    """
    starts = [0]
    for match in _CODE_LABEL_RE.finditer(text):
        before = text[starts[-1] : match.start()]
        if not before.strip():
            continue
        if before.rstrip(" \t").endswith("\n") or _open_label(before) == "percentage":
            starts.append(match.start())
    ends = [*starts[1:], len(text)]
    return [text[start:end] for start, end in zip(starts, ends, strict=True)]


def _open_label(chunk: str) -> str | None:
    label, sep, _ = chunk.rsplit("|", 1)[-1].partition(":")
    return _LABELS.get(label.strip().lower()) if sep else None


def parse_individual_key(key: str) -> tuple[int, str] | None:
    """Return ``(row, field)`` for keys like ``sequelaCode2``.

    A key without a row number addresses row 1.
    """
    match = _INDIVIDUAL_KEY_RE.match(key)
    if match is None:
        return None
    label = strip_accents(match.group(2)).lower()
    field_name = "percentage" if label == "pourcentage" else label
    row = int(match.group(3)) if match.group(3) else 1
    if row < 1:
        return None
    return row, field_name


def individual_from_fields(fields: dict[int, dict[str, str]]) -> IndividualEncoding:
    """Build an individual encoding, ordered by row number, empty rows dropped."""
    rows = [
        SequelaFields(
            code=values.get("code", ""),
            description=values.get("description", ""),
            percentage=values.get("percentage", ""),
        )
        for _, values in sorted(fields.items())
    ]
    return IndividualEncoding(rows=tuple(row for row in rows if not row.is_empty()))


def decode(encoding: SequelaEncoding) -> list[SequelaFields]:
    if isinstance(encoding, CombinedEncoding):
        return parse_combined(encoding.text)
    if isinstance(encoding, IndividualEncoding):
        return [row for row in encoding.rows if not row.is_empty()]
    raise TypeError(f"Unsupported sequela encoding: {type(encoding).__name__}")


def merge_encodings(encodings: Iterable[SequelaEncoding]) -> list[SequelaRow]:
    """Merge combined and individual encodings position by position.

    Non-empty combined values win; an empty combined value never replaces
    a non-empty individual one.
    """
    combined: list[SequelaFields] = []
    individual: list[SequelaFields] = []
    for encoding in encodings:
        decoded = decode(encoding)
        if isinstance(encoding, CombinedEncoding):
            combined.extend(decoded)
        elif not individual:
            individual = decoded
    merged: list[SequelaRow] = []
    for index in range(max(len(combined), len(individual))):
        c = combined[index] if index < len(combined) else SequelaFields()
        i = individual[index] if index < len(individual) else SequelaFields()
        row = SequelaRow(
            id=len(merged) + 1,
            code=c.code or i.code,
            description=c.description or i.description,
            percentage=c.percentage or i.percentage,
        )
        if not row.is_empty():
            merged.append(row)
    return merged


def encode_combined(rows: Iterable[SequelaRow]) -> str:
    return "\n".join(row.combined() for row in rows if not row.is_empty())


def individual_keys(row: int) -> dict[str, str]:
    return {
        field_name: f"{InterchangeKeys.SEQUELA_PREFIX}{field_name.capitalize()}{row}"
        for field_name in InterchangeKeys.SEQUELA_FIELDS
    }
