"""Lightweight value checks for imported fields.

Failures are reported as messages and never block an import.
"""

from __future__ import annotations

from collections.abc import Mapping
import re

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PHONE_RE = re.compile(r"^[\d\s\-\(\)]+$")


def validate_values(values: Mapping[str, str]) -> list[str]:
    errors: list[str] = []
    for key, value in values.items():
        if not value:
            continue
        lowered = key.lower()
        if "date" in lowered and not _DATE_RE.match(value):
            errors.append(f"{key}: Invalid date format (expected YYYY-MM-DD)")
        if ("telephone" in lowered or "phone" in lowered) and not _PHONE_RE.match(
            value
        ):
            errors.append(f"{key}: Invalid phone number format")
    return errors


def humanize_key(key: str) -> str:
    """``workerName`` -> ``Worker Name``; ``claim_number`` -> ``Claim Number``."""
    spaced = re.sub(r"([A-Z])", r" \1", key).replace("_", " ").replace(".", " ")
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())
