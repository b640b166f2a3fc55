from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

import pandas as pd


class RuleKind(StrEnum):
    ALIAS = "alias"
    PATTERN = "pattern"
    ROW = "row"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class MappingEntry:
    key: str
    destination: str | None
    rule: RuleKind | None = None
    alternatives: tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.destination is not None

    @property
    def ambiguous(self) -> bool:
        return bool(self.alternatives)


@dataclass(slots=True)
class MappingTable:
    """Semantic key to destination name, one entry per requested key."""

    entries: dict[str, MappingEntry] = field(default_factory=dict)

    def add(self, entry: MappingEntry) -> None:
        self.entries[entry.key] = entry

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def entry(self, key: str) -> MappingEntry | None:
        return self.entries.get(key)

    def get(self, key: str) -> str | None:
        entry = self.entries.get(key)
        return entry.destination if entry is not None else None

    def inverse(self) -> dict[str, str]:
        """Destination name to semantic key for every resolved entry."""
        return {
            entry.destination: entry.key
            for entry in self.entries.values()
            if entry.destination is not None
        }

    def resolved(self) -> list[MappingEntry]:
        return [entry for entry in self.entries.values() if entry.resolved]

    def unresolved(self) -> list[str]:
        return [entry.key for entry in self.entries.values() if not entry.resolved]

    def ambiguous(self) -> list[MappingEntry]:
        return [entry for entry in self.entries.values() if entry.ambiguous]

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "semantic_key": entry.key,
                "destination": entry.destination or "",
                "rule": entry.rule.value if entry.rule else "",
                "alternatives": "; ".join(entry.alternatives),
            }
            for entry in self.entries.values()
        ]
        return pd.DataFrame(
            rows, columns=["semantic_key", "destination", "rule", "alternatives"]
        )
