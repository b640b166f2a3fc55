from __future__ import annotations

from dataclasses import dataclass, replace


def join_text(*parts: str) -> str:
    return " ".join(part for part in parts if part)


@dataclass(frozen=True, slots=True)
class OverflowPair:
    primary_key: str
    continuation_key: str


@dataclass(frozen=True, slots=True)
class OverflowState:
    """Content of one primary/continuation slot pair.

    ``manual`` is continuation text the user edited directly; ``overflow`` is
    the remainder produced by the last split. Only ``overflow`` is ever
    recomputed.
    """

    primary: str = ""
    manual: str = ""
    overflow: str = ""

    @property
    def continuation(self) -> str:
        return join_text(self.manual, self.overflow)

    @property
    def text(self) -> str:
        return join_text(self.primary, self.overflow)

    def is_empty(self) -> bool:
        return not (self.primary or self.manual or self.overflow)

    def with_primary(self, primary: str) -> OverflowState:
        return replace(self, primary=primary)
