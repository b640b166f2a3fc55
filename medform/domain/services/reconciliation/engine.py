"""Reconciliation of external data into the semantic model.

External maps may be keyed by destination names, semantic keys, fallback
literals, flattened module paths or nested objects. Every recognized value
is routed to its semantic slot; everything else is reported and dropped.
A new model is built on every call; nothing outside it is touched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from rapidfuzz import fuzz

from ....constants import Defaults, InterchangeKeys, ModuleImport
from ...entities.modules import is_leaf_key, leaf_key, split_leaf_key
from ...entities.overflow import OverflowState, join_text
from ...entities.semantic_model import SemanticModel
from ...entities.sequela import CombinedEncoding, SequelaEncoding
from ..overflow import OverflowSplitter
from ..resolution.utils import compact
from ..sanitizer import ContaminationFinding, Sanitizer, SanitizeStage
from ..validation import validate_values
from .flatten import flatten_external, to_text
from .module_paths import ModulePathParser
from .sequela_parser import (
    individual_from_fields,
    merge_encodings,
    parse_individual_key,
)

if TYPE_CHECKING:
    from ...entities.catalog import DestinationCatalog
    from ..resolution.resolver import FieldResolver


@dataclass(slots=True)
class ReconciliationResult:
    model: SemanticModel
    diagnostics: list[str] = field(default_factory=list)
    findings: list[ContaminationFinding] = field(default_factory=list)
    unmapped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def mapped_count(self) -> int:
        model = self.model
        count = len(model.scalars()) + len(model.filled_sequelae())
        for module in model.active_modules():
            count += len(model.module_leaves(module))
        return count


class ReconciliationEngine:
    """Parse an external flat map into a fresh semantic model.

    Example:
        >>> engine = ReconciliationEngine(FieldResolver(), Sanitizer())
        >>> result = engine.reconcile({"Nom du travailleur": "Tremblay"}, catalog)
        >>> result.model.get("workerName")
        'Tremblay'
    """

    def __init__(
        self,
        resolver: FieldResolver,
        sanitizer: Sanitizer,
        *,
        splitter: OverflowSplitter | None = None,
        max_sequela_rows: int | None = None,
        fuzzy_threshold: float = Defaults.FUZZY_MATCH_THRESHOLD,
    ) -> None:
        self.resolver = resolver
        self.sanitizer = sanitizer
        self.splitter = splitter or OverflowSplitter()
        self.max_sequela_rows = max_sequela_rows or resolver.max_sequela_rows
        self.fuzzy_threshold = fuzzy_threshold
        self._paths = ModulePathParser()

    def reconcile(
        self, data: Mapping[str, Any], catalog: DestinationCatalog
    ) -> ReconciliationResult:
        flat = flatten_external(data)
        lookup = self._lookup(catalog)
        result = ReconciliationResult(
            model=SemanticModel(max_sequela_rows=self.max_sequela_rows)
        )

        scalars: dict[str, str] = {}
        module_values: dict[str, str] = {}
        row_fields: dict[int, dict[str, str]] = {}
        combined: list[SequelaEncoding] = []

        for raw_key, value in flat.values.items():
            if not value.strip():
                continue
            key = self._semantic_key(raw_key, lookup)
            excluded = compact(raw_key) in ModuleImport.EXCLUDED_KEYS
            if key is None:
                if excluded:
                    result.diagnostics.append(
                        f"{raw_key}: excluded key, not read as module data"
                    )
                    result.unmapped.append(raw_key)
                    continue
                parsed = self._paths.parse(raw_key)
                if parsed is None:
                    key = self._partial_match(raw_key, lookup)
                    if key is None:
                        result.unmapped.append(raw_key)
                        continue
                    result.diagnostics.append(f"{raw_key}: partial match for {key}")
                elif parsed.path is None:
                    result.diagnostics.append(f"{raw_key}: {parsed.reason}")
                    result.unmapped.append(raw_key)
                    continue
                else:
                    key = leaf_key(parsed.module, parsed.path)
            elif excluded and split_leaf_key(key) is not None:
                result.diagnostics.append(
                    f"{raw_key}: excluded key resolved to {key}, ignored"
                )
                result.unmapped.append(raw_key)
                continue

            if is_leaf_key(key):
                module_values[key] = value
            elif key == InterchangeKeys.CURRENT_SEQUELAE:
                combined.append(CombinedEncoding(text=value))
            elif (row_field := parse_individual_key(key)) is not None:
                row, field_name = row_field
                row_fields.setdefault(row, {})[field_name] = value
            else:
                scalars[key] = value

        for module, tree in flat.module_trees.items():
            for path, value in _tree_leaves(tree):
                if value.strip():
                    module_values[leaf_key(module, path)] = value

        cleaned, findings = self.sanitizer.scrub(scalars, SanitizeStage.IMPORT)
        result.findings.extend(findings)
        result.warnings.extend(validate_values(cleaned))

        model = result.model
        for key, value in cleaned.items():
            model.set(key, value)
        for pair in model.overflow_pairs:
            state = model.overflow_state(pair.primary_key)
            model.set_overflow_state(pair.primary_key, self._restore_split(state))
        for key, value in module_values.items():
            module, _, path = key.partition(".")
            try:
                model.set_module_value(module, path, value)
            except KeyError as exc:
                result.diagnostics.append(f"{key}: {exc.args[0]}")

        encodings: list[SequelaEncoding] = list(combined)
        individual = individual_from_fields(row_fields)
        if individual.rows:
            encodings.append(individual)
        elif flat.sequela_list is not None:
            encodings.append(flat.sequela_list)
        rows = merge_encodings(encodings)
        if len(rows) > self.max_sequela_rows:
            result.diagnostics.append(
                f"{len(rows) - self.max_sequela_rows} sequela rows dropped "
                f"(limit {self.max_sequela_rows})"
            )
        model.replace_sequelae(rows)
        return result

    def _lookup(self, catalog: DestinationCatalog) -> _KeyLookup:
        """Every accepted external name mapped to its semantic key.

        Catalog names win over semantic keys, which win over fallback
        literals.
        """
        ordered: list[tuple[str, str]] = list(
            self.resolver.mapping_table(catalog).inverse().items()
        )
        ordered.extend((key, key) for key in self.resolver.keys)
        for key in self.resolver.keys:
            fallback = self.resolver.fallback_for(key)
            if fallback:
                ordered.append((fallback, key))
        exact: dict[str, str] = {}
        normalized: dict[str, str] = {}
        for name, key in ordered:
            exact.setdefault(name, key)
            if folded := compact(name):
                normalized.setdefault(folded, key)
        return _KeyLookup(exact=exact, normalized=normalized)

    def _semantic_key(self, raw_key: str, lookup: _KeyLookup) -> str | None:
        if raw_key in lookup.exact:
            return lookup.exact[raw_key]
        row_field = parse_individual_key(raw_key) or parse_individual_key(
            compact(raw_key)
        )
        if row_field is not None:
            row, field_name = row_field
            return f"{InterchangeKeys.SEQUELA_PREFIX}{field_name.capitalize()}{row}"
        folded = compact(raw_key)
        return lookup.normalized.get(folded) if folded else None

    def _partial_match(self, raw_key: str, lookup: _KeyLookup) -> str | None:
        """Best key whose normalized name overlaps ``raw_key``.

        Names shorter than the fuzzy minimum are skipped on both sides;
        ties go to the earlier name in lookup order.
        """
        folded = compact(raw_key)
        if len(folded) < Defaults.MIN_FUZZY_KEY_LENGTH:
            return None
        best_key: str | None = None
        best_score = 0.0
        for name, key in lookup.normalized.items():
            if len(name) < Defaults.MIN_FUZZY_KEY_LENGTH:
                continue
            score = fuzz.partial_ratio(folded, name) / 100
            if score >= self.fuzzy_threshold and score > best_score:
                best_key, best_score = key, score
        return best_key

    def _restore_split(self, state: OverflowState) -> OverflowState:
        """Give back to the splitter a continuation it would have produced.

        Imported continuation text is kept as user-owned unless re-splitting
        the joined pair reproduces both slots exactly.
        """
        if not state.manual or state.overflow:
            return state
        resplit = self.splitter.write(
            OverflowState(), join_text(state.primary, state.manual)
        )
        if resplit.primary == state.primary and resplit.overflow == state.manual:
            return resplit
        return state


@dataclass(frozen=True, slots=True)
class _KeyLookup:
    exact: dict[str, str]
    normalized: dict[str, str]


def _tree_leaves(tree: Any, prefix: str = "") -> list[tuple[str, str]]:
    if not isinstance(tree, Mapping):
        return [(prefix, to_text(tree))] if prefix else []
    leaves: list[tuple[str, str]] = []
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        leaves.extend(_tree_leaves(value, path))
    return leaves
