"""Field resolver.

Maps semantic keys onto the destination names of a runtime-discovered
catalog. The whole mapping is one fold over the ordered rule table:

1. alias rules for every key, in table order;
2. keyword, row and side-qualified pattern rules, in table order;
3. fallback literals, only when the catalog is empty.

A destination claimed by an earlier key is never offered to a later one,
so two keys cannot share a destination within a table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ....constants import Defaults, InterchangeKeys
from ...entities.mapping import MappingEntry, MappingTable, RuleKind
from ...entities.modules import split_leaf_key
from .rule_table import SCALAR_KEYS, build_rule_table
from .utils import fold

if TYPE_CHECKING:
    from ...entities.catalog import DestinationCatalog
    from ...entities.semantic_model import ModelSnapshot
    from .rules import FieldRules


class FieldResolver:
    """Resolve semantic keys against a destination catalog.

    Example:
        >>> resolver = FieldResolver()
        >>> table = resolver.mapping_table(catalog)
        >>> table.get("workerName")
        'Nom du travailleur'
    """

    def __init__(self, *, max_sequela_rows: int = Defaults.MAX_SEQUELA_ROWS) -> None:
        self.max_sequela_rows = max_sequela_rows
        self._rules: tuple[FieldRules, ...] = build_rule_table(max_sequela_rows)
        self._rules_by_key: dict[str, FieldRules] = {
            rules.key: rules for rules in self._rules
        }
        self._cache: tuple[DestinationCatalog, MappingTable] | None = None

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(rules.key for rules in self._rules)

    def rules_for(self, key: str) -> FieldRules | None:
        return self._rules_by_key.get(key)

    def fallback_for(self, key: str) -> str | None:
        rules = self._rules_by_key.get(key)
        return rules.fallback if rules is not None else None

    def mapping_table(self, catalog: DestinationCatalog) -> MappingTable:
        """Resolve the full key vocabulary against ``catalog``.

        The result depends only on the catalog, so the last table is reused
        while the catalog is unchanged.
        """
        if self._cache is not None and self._cache[0] == catalog:
            return self._cache[1]
        table = self._build(catalog)
        self._cache = (catalog, table)
        return table

    def scoped_table(
        self, catalog: DestinationCatalog, snapshot: ModelSnapshot
    ) -> MappingTable:
        """The entries of the full table that the snapshot emits."""
        full = self.mapping_table(catalog)
        scoped = MappingTable()
        for entry in full:
            if self.in_scope(entry.key, snapshot):
                scoped.add(entry)
        return scoped

    def resolve(
        self, key: str, catalog: DestinationCatalog, snapshot: ModelSnapshot
    ) -> str | None:
        """Destination name for ``key`` or None. Never raises."""
        if key not in self._rules_by_key or not self.in_scope(key, snapshot):
            return None
        return self.mapping_table(catalog).get(key)

    def in_scope(self, key: str, snapshot: ModelSnapshot) -> bool:
        leaf = split_leaf_key(key)
        if leaf is not None:
            return leaf[0] in snapshot.modules
        row = sequela_row_of(key)
        if row is not None:
            return row <= snapshot.sequela_rows
        return True

    def _build(self, catalog: DestinationCatalog) -> MappingTable:
        folded = [(entry.name, fold(entry.name)) for entry in catalog]
        claimed: set[str] = set()
        found: dict[str, MappingEntry] = {}

        for rules in self._rules:
            for rule in rules.alias_rules():
                name = next(
                    (
                        name
                        for name, folded_name in folded
                        if name not in claimed and rule.matches(name, folded_name)
                    ),
                    None,
                )
                if name is not None:
                    claimed.add(name)
                    found[rules.key] = MappingEntry(
                        key=rules.key, destination=name, rule=RuleKind.ALIAS
                    )
                    break

        for rules in self._rules:
            if rules.key in found:
                continue
            for rule in rules.search_rules():
                candidates = [
                    name
                    for name, folded_name in folded
                    if name not in claimed and rule.matches(name, folded_name)
                ]
                if candidates:
                    claimed.add(candidates[0])
                    found[rules.key] = MappingEntry(
                        key=rules.key,
                        destination=candidates[0],
                        rule=rule.kind,
                        alternatives=tuple(candidates[1:]),
                    )
                    break

        table = MappingTable()
        for rules in self._rules:
            entry = found.get(rules.key)
            if entry is None:
                if catalog.is_empty and rules.fallback:
                    entry = MappingEntry(
                        key=rules.key,
                        destination=rules.fallback,
                        rule=RuleKind.FALLBACK,
                    )
                else:
                    entry = MappingEntry(key=rules.key, destination=None)
            table.add(entry)
        return table


def sequela_row_of(key: str) -> int | None:
    """Row number of an individual sequela key such as ``sequelaCode2``."""
    prefix = InterchangeKeys.SEQUELA_PREFIX
    if not key.startswith(prefix):
        return None
    for field_name in InterchangeKeys.SEQUELA_FIELDS:
        stem = f"{prefix}{field_name.capitalize()}"
        if key.startswith(stem) and key[len(stem) :].isdigit():
            return int(key[len(stem) :])
    return None


def is_scalar_key(key: str) -> bool:
    return key in SCALAR_KEYS
