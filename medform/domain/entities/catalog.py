"""Destination catalog entities.

The catalog is the ordered list of fillable slots discovered in the loaded
document. Resolution breaks ties by catalog order, so the order given by the
discovery collaborator is preserved exactly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class FieldType(StrEnum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"
    OPTION_LIST = "option_list"
    BUTTON = "button"
    SIGNATURE = "signature"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: object) -> FieldType:
        if isinstance(raw, FieldType):
            return raw
        if raw is None:
            return cls.TEXT
        key = str(raw).strip().lower()
        return _TYPE_ALIASES.get(key, cls.UNKNOWN)


_TYPE_ALIASES: dict[str, FieldType] = {
    "": FieldType.TEXT,
    "text": FieldType.TEXT,
    "textfield": FieldType.TEXT,
    "pdftextfield": FieldType.TEXT,
    "tx": FieldType.TEXT,
    "/tx": FieldType.TEXT,
    "checkbox": FieldType.CHECKBOX,
    "pdfcheckbox": FieldType.CHECKBOX,
    "btn": FieldType.CHECKBOX,
    "/btn": FieldType.CHECKBOX,
    "radio": FieldType.RADIO,
    "radiogroup": FieldType.RADIO,
    "pdfradiogroup": FieldType.RADIO,
    "dropdown": FieldType.DROPDOWN,
    "combo": FieldType.DROPDOWN,
    "pdfdropdown": FieldType.DROPDOWN,
    "ch": FieldType.DROPDOWN,
    "/ch": FieldType.DROPDOWN,
    "optionlist": FieldType.OPTION_LIST,
    "option_list": FieldType.OPTION_LIST,
    "pdfoptionlist": FieldType.OPTION_LIST,
    "listbox": FieldType.OPTION_LIST,
    "button": FieldType.BUTTON,
    "pdfbutton": FieldType.BUTTON,
    "signature": FieldType.SIGNATURE,
    "pdfsignature": FieldType.SIGNATURE,
    "sig": FieldType.SIGNATURE,
    "/sig": FieldType.SIGNATURE,
}


class FieldPosition(BaseModel):
    page: int = Field(default=1, ge=1)
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=0.0, ge=0.0)
    height: float = Field(default=0.0, ge=0.0)

    model_config = {"frozen": True}


class DestinationEntry(BaseModel):
    name: str = Field(min_length=1)
    type: FieldType = FieldType.TEXT
    position: FieldPosition | None = None

    model_config = {"frozen": True}

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: object) -> FieldType:
        return FieldType.parse(value)

    @property
    def is_text(self) -> bool:
        return self.type == FieldType.TEXT


def _empty_entries() -> tuple[DestinationEntry, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class DestinationCatalog:
    entries: tuple[DestinationEntry, ...] = field(default_factory=_empty_entries)

    @classmethod
    def from_entries(cls, entries: Iterable[DestinationEntry]) -> DestinationCatalog:
        """Build a catalog keeping the first occurrence of every name."""
        seen: set[str] = set()
        unique: list[DestinationEntry] = []
        for entry in entries:
            if entry.name in seen:
                continue
            seen.add(entry.name)
            unique.append(entry)
        return cls(entries=tuple(unique))

    @classmethod
    def from_names(
        cls, names: Iterable[str], field_type: FieldType = FieldType.TEXT
    ) -> DestinationCatalog:
        return cls.from_entries(
            DestinationEntry(name=name, type=field_type) for name in names
        )

    def __iter__(self) -> Iterator[DestinationEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.entries)

    def get(self, name: str) -> DestinationEntry | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def type_of(self, name: str) -> FieldType | None:
        entry = self.get(name)
        return entry.type if entry is not None else None

    def text_names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.entries if entry.is_text)
