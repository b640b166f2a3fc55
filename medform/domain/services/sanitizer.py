"""Contamination check for high-collision fields.

Some destination names are short generic abbreviations that can be
mis-targeted by resolution. A value of such a field is contaminated when
it is longer than the threshold and mentions vocabulary that belongs to an
unrelated field. Contaminated values are cleared.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
import re

from ...constants import Defaults, Sanitization
from .resolution.utils import strip_accents


class SanitizeStage(StrEnum):
    READ = "read"
    EXPORT = "export"
    IMPORT = "import"


@dataclass(frozen=True, slots=True)
class ContaminationFinding:
    key: str
    value_length: int
    keyword: str
    stage: SanitizeStage


class Sanitizer:
    def __init__(
        self,
        *,
        threshold: int = Defaults.CONTAMINATION_THRESHOLD,
        flagged_keys: Iterable[str] = Sanitization.FLAGGED_KEYS,
        keywords: Iterable[str] = Sanitization.FOREIGN_KEYWORDS,
    ) -> None:
        self.threshold = threshold
        self.flagged_keys = frozenset(flagged_keys)
        self.keywords = tuple(keywords)
        self._patterns = tuple(
            (keyword, re.compile(rf"\b{re.escape(strip_accents(keyword).lower())}\b"))
            for keyword in self.keywords
        )

    def is_flagged(self, key: str) -> bool:
        return key in self.flagged_keys

    def find_keyword(self, value: str) -> str | None:
        text = strip_accents(value).lower()
        for keyword, pattern in self._patterns:
            if pattern.search(text):
                return keyword
        return None

    def is_contaminated(self, key: str, value: str) -> bool:
        return self.inspect(key, value) is not None

    def inspect(
        self, key: str, value: str, stage: SanitizeStage = SanitizeStage.READ
    ) -> ContaminationFinding | None:
        if not self.is_flagged(key) or len(value) <= self.threshold:
            return None
        keyword = self.find_keyword(value)
        if keyword is None:
            return None
        return ContaminationFinding(
            key=key, value_length=len(value), keyword=keyword, stage=stage
        )

    def check(self, key: str, value: str) -> str:
        """Return ``value`` unchanged, or an empty string when contaminated."""
        return "" if self.is_contaminated(key, value) else value

    def scrub(
        self,
        values: Mapping[str, str],
        stage: SanitizeStage,
        *,
        key_of: Mapping[str, str] | None = None,
    ) -> tuple[dict[str, str], list[ContaminationFinding]]:
        """Clear contaminated entries of a map.

        ``key_of`` translates map keys (destination names) back to semantic
        keys; keys absent from it are checked as they are.
        """
        cleaned: dict[str, str] = {}
        findings: list[ContaminationFinding] = []
        for name, value in values.items():
            semantic = key_of.get(name, name) if key_of is not None else name
            finding = self.inspect(semantic, value, stage)
            if finding is not None:
                findings.append(finding)
                cleaned[name] = ""
            else:
                cleaned[name] = value
        return cleaned, findings
