"""Typed fill instructions for the document-fill collaborator.

Each destination key is matched to a catalog field by exact name, then
case-insensitively, then by normalized name, then by fuzzy similarity.
Values are converted to what the widget type accepts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from rapidfuzz import fuzz

from ....constants import Defaults, FillValues
from ...entities.catalog import FieldType
from ..resolution.utils import compact, fold
from .text_encoding import normalize_for_winansi

if TYPE_CHECKING:
    from ...entities.catalog import DestinationCatalog, DestinationEntry

MIN_FUZZY_KEY_LENGTH = Defaults.MIN_FUZZY_KEY_LENGTH


class MatchKind(StrEnum):
    EXACT = "exact"
    CASE_INSENSITIVE = "case_insensitive"
    NORMALIZED = "normalized"
    FUZZY = "fuzzy"


class FillAction(StrEnum):
    SET_TEXT = "set_text"
    CHECK = "check"
    UNCHECK = "uncheck"
    SELECT = "select"


@dataclass(frozen=True, slots=True)
class FillInstruction:
    source_key: str
    field_name: str
    field_type: FieldType
    action: FillAction
    value: str
    match: MatchKind
    score: float = 1.0


@dataclass(slots=True)
class FillPlan:
    instructions: list[FillInstruction] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def filled_count(self) -> int:
        return len(self.instructions)

    @property
    def attempted_count(self) -> int:
        return len(self.instructions) + len(self.failed)


class FillPlanner:
    def __init__(
        self,
        *,
        fuzzy_threshold: float = Defaults.FUZZY_MATCH_THRESHOLD,
    ) -> None:
        self.fuzzy_threshold = fuzzy_threshold

    def plan(
        self, values: Mapping[str, str], catalog: DestinationCatalog
    ) -> FillPlan:
        result = FillPlan()
        used: set[str] = set()
        for key, value in values.items():
            if not value:
                continue
            match = self.match_field(key, catalog, exclude=used)
            if match is None:
                result.failed.append((key, "field not found"))
                continue
            entry, kind, score = match
            instruction = self._instruction(key, value, entry, kind, score)
            if instruction is None:
                result.failed.append((key, f"unsupported field type {entry.type}"))
                continue
            used.add(entry.name)
            result.instructions.append(instruction)
        return result

    def match_field(
        self,
        key: str,
        catalog: DestinationCatalog,
        *,
        exclude: set[str] | None = None,
    ) -> tuple[DestinationEntry, MatchKind, float] | None:
        """Find the catalog field for ``key``.

        Args:
            key: Destination key from the export map
            catalog: Fields of the loaded document
            exclude: Field names already filled by an earlier key

        Returns:
            ``(entry, match kind, score)`` or None when nothing qualifies
        """
        taken = exclude or set()
        candidates = [entry for entry in catalog if entry.name not in taken]
        exact = catalog.get(key)
        if exact is not None and exact.name not in taken:
            return exact, MatchKind.EXACT, 1.0
        lowered = key.lower()
        for entry in candidates:
            if entry.name.lower() == lowered:
                return entry, MatchKind.CASE_INSENSITIVE, 1.0
        normalized = compact(key)
        if not normalized:
            return None
        for entry in candidates:
            if compact(entry.name) == normalized:
                return entry, MatchKind.NORMALIZED, 1.0
        if len(normalized) < MIN_FUZZY_KEY_LENGTH:
            return None
        return self._best_fuzzy(key, candidates)

    def _best_fuzzy(
        self, key: str, candidates: list[DestinationEntry]
    ) -> tuple[DestinationEntry, MatchKind, float] | None:
        folded_key = fold(key)
        best: tuple[DestinationEntry, MatchKind, float] | None = None
        for entry in candidates:
            folded_name = fold(entry.name)
            if len(folded_name) < MIN_FUZZY_KEY_LENGTH:
                continue
            score_partial = fuzz.partial_ratio(folded_key, folded_name)
            score_tokens = fuzz.token_set_ratio(folded_key, folded_name)
            score = max(score_partial, score_tokens) / 100
            if score < self.fuzzy_threshold:
                continue
            if best is None or score > best[2]:
                best = (entry, MatchKind.FUZZY, score)
        return best

    def _instruction(
        self,
        key: str,
        value: str,
        entry: DestinationEntry,
        kind: MatchKind,
        score: float,
    ) -> FillInstruction | None:
        if entry.type == FieldType.TEXT:
            action = FillAction.SET_TEXT
            converted = normalize_for_winansi(value)
        elif entry.type == FieldType.CHECKBOX:
            checked = value.strip().lower() in FillValues.CHECKBOX_TRUE
            action = FillAction.CHECK if checked else FillAction.UNCHECK
            converted = "Yes" if checked else "Off"
        elif entry.type in (FieldType.RADIO, FieldType.DROPDOWN):
            action = FillAction.SELECT
            converted = normalize_for_winansi(value)
        else:
            return None
        return FillInstruction(
            source_key=key,
            field_name=entry.name,
            field_type=entry.type,
            action=action,
            value=converted,
            match=kind,
            score=score,
        )
