"""Declarative resolution rules.

Every rule is a pure predicate over one catalog entry. A semantic key owns
an ordered tuple of rules; the resolver tries them in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from ...entities.mapping import RuleKind
from .utils import compile_pattern, numbers_in


@dataclass(frozen=True, slots=True)
class AliasRule:
    """Exact match against known historical or alternate names."""

    names: tuple[str, ...]

    @property
    def kind(self) -> RuleKind:
        return RuleKind.ALIAS

    def matches(self, name: str, folded: str) -> bool:
        return name in self.names


@dataclass(frozen=True, slots=True)
class PatternRule:
    """All of ``all_of`` and none of ``none_of`` must match the folded name."""

    all_of: tuple[str, ...]
    none_of: tuple[str, ...] = ()

    @property
    def kind(self) -> RuleKind:
        return RuleKind.PATTERN

    def matches(self, name: str, folded: str) -> bool:
        if not all(compile_pattern(p).search(folded) for p in self.all_of):
            return False
        return not any(compile_pattern(p).search(folded) for p in self.none_of)


@dataclass(frozen=True, slots=True)
class RowRule:
    """Keyword pattern qualified by a row number found in the name.

    Row 1 also accepts a name carrying no number at all when
    ``allow_unnumbered`` is set.
    """

    row: int
    pattern: PatternRule
    allow_unnumbered: bool = False

    @property
    def kind(self) -> RuleKind:
        return RuleKind.ROW

    def matches(self, name: str, folded: str) -> bool:
        if not self.pattern.matches(name, folded):
            return False
        numbers = numbers_in(folded)
        if not numbers:
            return self.allow_unnumbered
        return numbers[-1] == self.row


Rule: TypeAlias = AliasRule | PatternRule | RowRule


@dataclass(frozen=True, slots=True)
class FieldRules:
    key: str
    rules: tuple[Rule, ...]
    fallback: str | None = None

    def alias_rules(self) -> tuple[AliasRule, ...]:
        return tuple(rule for rule in self.rules if isinstance(rule, AliasRule))

    def search_rules(self) -> tuple[PatternRule | RowRule, ...]:
        return tuple(rule for rule in self.rules if not isinstance(rule, AliasRule))
