from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from pydantic import BaseModel, Field


class SequelaRow(BaseModel):
    id: int = Field(ge=1)
    code: str = ""
    description: str = ""
    percentage: str = ""

    def is_empty(self) -> bool:
        return not (
            self.code.strip() or self.description.strip() or self.percentage.strip()
        )

    def combined(self) -> str:
        return (
            f"Code: {self.code} | Description: {self.description} | %: {self.percentage}"
        )


@dataclass(frozen=True, slots=True)
class SequelaFields:
    code: str = ""
    description: str = ""
    percentage: str = ""

    def is_empty(self) -> bool:
        return not (
            self.code.strip() or self.description.strip() or self.percentage.strip()
        )


@dataclass(frozen=True, slots=True)
class CombinedEncoding:
    text: str


@dataclass(frozen=True, slots=True)
class IndividualEncoding:
    rows: tuple[SequelaFields, ...]


SequelaEncoding: TypeAlias = CombinedEncoding | IndividualEncoding
