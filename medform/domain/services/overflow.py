"""Overflow splitting for primary/continuation slot pairs.

A long-text field is written to a primary slot of fixed budget; text past
the budget moves to a continuation slot. Splits happen at the last space
at or before the budget, or exactly at the budget when the head holds no
space.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...constants import Defaults
from ..entities.overflow import OverflowState, join_text


def split_at_budget(text: str, budget: int) -> tuple[str, str]:
    """Split ``text`` into a head of at most ``budget`` characters and the rest.

    Args:
        text: Text to split
        budget: Maximum head length

    Returns:
        ``(head, rest)``; the space at the split point belongs to neither.
    """
    if budget < 1:
        raise ValueError(f"budget must be positive, got {budget}")
    if len(text) <= budget:
        return text, ""
    cut = text.rfind(" ", 0, budget + 1)
    if cut > 0:
        return text[:cut], text[cut + 1 :]
    return text[:budget], text[budget:]


@dataclass(frozen=True, slots=True)
class SpeechSegment:
    text: str
    confidence: float = 1.0


@dataclass(slots=True)
class SpeechAccumulator:
    """Text present when dictation started plus every accepted segment."""

    base_text: str = ""
    min_confidence: float = Defaults.MIN_SEGMENT_CONFIDENCE
    segments: list[str] = field(default_factory=list)

    def accept(self, segment: SpeechSegment) -> bool:
        text = segment.text.strip()
        if not text or segment.confidence < self.min_confidence:
            return False
        self.segments.append(text)
        return True

    @property
    def text(self) -> str:
        return join_text(self.base_text, *self.segments)


class OverflowSplitter:
    """Apply the split rule to one overflow pair.

    Every method takes the current state and returns a new one; nothing is
    mutated in place.
    """

    def __init__(self, budget: int = Defaults.OVERFLOW_BUDGET) -> None:
        if budget < 1:
            raise ValueError(f"budget must be positive, got {budget}")
        self.budget = budget

    def split(self, text: str) -> tuple[str, str]:
        return split_at_budget(text, self.budget)

    def write(self, state: OverflowState, text: str) -> OverflowState:
        """Store ``text`` across the pair.

        Overflow from a previous split is replaced; continuation text the
        user edited directly is kept ahead of any new remainder.
        """
        head, rest = self.split(text)
        return OverflowState(primary=head, manual=state.manual, overflow=rest)

    def edit_primary(self, state: OverflowState, text: str) -> OverflowState:
        if len(text) < len(state.primary):
            merged = join_text(text, state.continuation)
            if len(merged) <= self.budget:
                return OverflowState(primary=merged)
        if len(text) > self.budget:
            return self.write(state, join_text(text, state.overflow))
        return state.with_primary(text)

    def edit_continuation(self, state: OverflowState, text: str) -> OverflowState:
        return OverflowState(primary=state.primary, manual=text)

    def start_dictation(
        self,
        state: OverflowState,
        min_confidence: float = Defaults.MIN_SEGMENT_CONFIDENCE,
    ) -> SpeechAccumulator:
        return SpeechAccumulator(base_text=state.text, min_confidence=min_confidence)

    def apply_segment(
        self,
        state: OverflowState,
        accumulator: SpeechAccumulator,
        segment: SpeechSegment,
    ) -> OverflowState:
        """Append one streamed segment and re-split the accumulated text."""
        if not accumulator.accept(segment):
            return state
        return self.write(state, accumulator.text)
