"""Canonical in-memory clinical data.

The model is independent of any document's slot naming. It holds flat
scalar fields, one tree per body-region module, the sequela rows and the
state of every overflow pair. Empty values are never stored.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from ...constants import Defaults, OverflowPairs
from .modules import MODULES, get_module
from .overflow import OverflowPair, OverflowState
from .sequela import SequelaRow

ModuleTree = dict[str, Any]

DEFAULT_OVERFLOW_PAIRS: tuple[OverflowPair, ...] = tuple(
    OverflowPair(primary_key=primary, continuation_key=continuation)
    for primary, continuation in OverflowPairs.PAIRS
)


@dataclass(frozen=True, slots=True)
class ModelSnapshot:
    """The parts of the model that influence resolution."""

    sequela_rows: int = Defaults.MIN_SEQUELA_ROWS
    modules: frozenset[str] = frozenset()


class SemanticModel:
    def __init__(
        self,
        *,
        max_sequela_rows: int = Defaults.MAX_SEQUELA_ROWS,
        overflow_pairs: tuple[OverflowPair, ...] = DEFAULT_OVERFLOW_PAIRS,
    ) -> None:
        if max_sequela_rows < Defaults.MIN_SEQUELA_ROWS:
            raise ValueError(
                f"max_sequela_rows must be at least {Defaults.MIN_SEQUELA_ROWS}"
            )
        self.max_sequela_rows = max_sequela_rows
        self.overflow_pairs = overflow_pairs
        self._scalars: dict[str, str] = {}
        self._modules: dict[str, ModuleTree] = {}
        self._selected: set[str] = set()
        self._overflow: dict[str, OverflowState] = {}
        self._sequelae: list[SequelaRow] = []
        self._ensure_sequela_floor()

    # ------------------------------------------------------------------
    # Scalars and overflow pairs
    # ------------------------------------------------------------------

    def pair_for(self, key: str) -> OverflowPair | None:
        for pair in self.overflow_pairs:
            if key in (pair.primary_key, pair.continuation_key):
                return pair
        return None

    def get(self, key: str) -> str:
        pair = self.pair_for(key)
        if pair is not None:
            state = self.overflow_state(pair.primary_key)
            if key == pair.primary_key:
                return state.primary
            return state.continuation
        return self._scalars.get(key, "")

    def set(self, key: str, value: str) -> None:
        """Store a scalar value; an empty value removes the field.

        Writes to an overflow pair key are stored verbatim. Splitting is the
        job of the overflow splitter.
        """
        pair = self.pair_for(key)
        if pair is not None:
            state = self.overflow_state(pair.primary_key)
            if key == pair.primary_key:
                state = state.with_primary(value)
            else:
                state = OverflowState(primary=state.primary, manual=value)
            self.set_overflow_state(pair.primary_key, state)
            return
        if value:
            self._scalars[key] = value
        else:
            self._scalars.pop(key, None)

    def overflow_state(self, primary_key: str) -> OverflowState:
        return self._overflow.get(primary_key, OverflowState())

    def set_overflow_state(self, primary_key: str, state: OverflowState) -> None:
        if state.is_empty():
            self._overflow.pop(primary_key, None)
        else:
            self._overflow[primary_key] = state

    def scalars(self) -> dict[str, str]:
        """Every non-empty scalar, overflow pair slots included."""
        values = dict(self._scalars)
        for pair in self.overflow_pairs:
            state = self.overflow_state(pair.primary_key)
            if state.primary:
                values[pair.primary_key] = state.primary
            if state.continuation:
                values[pair.continuation_key] = state.continuation
        return values

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def select_module(self, module: str, selected: bool = True) -> None:
        get_module(module)
        if selected:
            self._selected.add(module)
        else:
            self._selected.discard(module)

    @property
    def selected_modules(self) -> frozenset[str]:
        return frozenset(self._selected)

    def active_modules(self) -> list[str]:
        """Modules that are selected or hold data, in registry order."""
        return [
            name
            for name in MODULES
            if name in self._selected or self._modules.get(name)
        ]

    def get_module_value(self, module: str, path: str) -> str:
        node: Any = self._modules.get(module, {})
        for segment in path.split("."):
            if not isinstance(node, dict):
                return ""
            node = node.get(segment)
            if node is None:
                return ""
        return node if isinstance(node, str) else ""

    def set_module_value(self, module: str, path: str, value: str) -> None:
        schema = get_module(module)
        if not schema.has_path(path):
            raise KeyError(f"Unknown path {path!r} for module {module}")
        segments = path.split(".")
        if value:
            node = self._modules.setdefault(module, {})
            for segment in segments[:-1]:
                node = node.setdefault(segment, {})
            node[segments[-1]] = value
            self._selected.add(module)
            return
        self._prune(self._modules.get(module), segments)
        if not self._modules.get(module):
            self._modules.pop(module, None)

    @staticmethod
    def _prune(node: ModuleTree | None, segments: list[str]) -> None:
        if node is None:
            return
        head, rest = segments[0], segments[1:]
        if not rest:
            node.pop(head, None)
            return
        child = node.get(head)
        if isinstance(child, dict):
            SemanticModel._prune(child, rest)
            if not child:
                node.pop(head, None)

    def module_tree(self, module: str) -> ModuleTree:
        return copy.deepcopy(self._modules.get(module, {}))

    def module_leaves(self, module: str) -> dict[str, str]:
        """Non-empty leaves of a module keyed by path, in schema order."""
        schema = get_module(module)
        leaves: dict[str, str] = {}
        for path in schema.leaf_paths():
            value = self.get_module_value(module, path)
            if value:
                leaves[path] = value
        return leaves

    # ------------------------------------------------------------------
    # Sequelae
    # ------------------------------------------------------------------

    @property
    def sequelae(self) -> list[SequelaRow]:
        return [row.model_copy() for row in self._sequelae]

    def add_sequela(self) -> SequelaRow:
        if len(self._sequelae) >= self.max_sequela_rows:
            raise ValueError(
                f"Cannot add more than {self.max_sequela_rows} sequela rows"
            )
        row = SequelaRow(id=len(self._sequelae) + 1)
        self._sequelae.append(row)
        return row.model_copy()

    def delete_sequela(self, row_id: int) -> None:
        self._sequelae = [row for row in self._sequelae if row.id != row_id]
        self._renumber()
        self._ensure_sequela_floor()

    def update_sequela(
        self,
        row_id: int,
        *,
        code: str | None = None,
        description: str | None = None,
        percentage: str | None = None,
    ) -> SequelaRow:
        for index, row in enumerate(self._sequelae):
            if row.id != row_id:
                continue
            changes = {
                name: value
                for name, value in (
                    ("code", code),
                    ("description", description),
                    ("percentage", percentage),
                )
                if value is not None
            }
            updated = row.model_copy(update=changes)
            self._sequelae[index] = updated
            return updated.model_copy()
        raise KeyError(f"No sequela row with id {row_id}")

    def replace_sequelae(self, rows: list[SequelaRow]) -> None:
        self._sequelae = [row.model_copy() for row in rows[: self.max_sequela_rows]]
        self._renumber()
        self._ensure_sequela_floor()

    def filled_sequelae(self) -> list[SequelaRow]:
        return [row.model_copy() for row in self._sequelae if not row.is_empty()]

    def _renumber(self) -> None:
        self._sequelae = [
            row.model_copy(update={"id": position})
            for position, row in enumerate(self._sequelae, start=1)
        ]

    def _ensure_sequela_floor(self) -> None:
        while len(self._sequelae) < Defaults.MIN_SEQUELA_ROWS:
            self._sequelae.append(SequelaRow(id=len(self._sequelae) + 1))

    # ------------------------------------------------------------------
    # Snapshots and serialization
    # ------------------------------------------------------------------

    def snapshot(self) -> ModelSnapshot:
        return ModelSnapshot(
            sequela_rows=len(self._sequelae),
            modules=frozenset(self.active_modules()),
        )

    def copy(self) -> SemanticModel:
        clone = SemanticModel(
            max_sequela_rows=self.max_sequela_rows,
            overflow_pairs=self.overflow_pairs,
        )
        clone._scalars = dict(self._scalars)
        clone._modules = copy.deepcopy(self._modules)
        clone._selected = set(self._selected)
        clone._overflow = dict(self._overflow)
        clone._sequelae = [row.model_copy() for row in self._sequelae]
        return clone

    def to_dict(self) -> dict[str, Any]:
        return {
            "fields": dict(sorted(self._scalars.items())),
            "overflow": {
                key: {
                    "primary": state.primary,
                    "manual": state.manual,
                    "overflow": state.overflow,
                }
                for key, state in sorted(self._overflow.items())
            },
            "modules": copy.deepcopy(self._modules),
            "selectedModules": sorted(self._selected),
            "sequelae": [row.model_dump() for row in self._sequelae],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        max_sequela_rows: int = Defaults.MAX_SEQUELA_ROWS,
    ) -> SemanticModel:
        model = cls(max_sequela_rows=max_sequela_rows)
        for key, value in (data.get("fields") or {}).items():
            model.set(str(key), str(value))
        for key, state in (data.get("overflow") or {}).items():
            model.set_overflow_state(
                str(key),
                OverflowState(
                    primary=str(state.get("primary", "")),
                    manual=str(state.get("manual", "")),
                    overflow=str(state.get("overflow", "")),
                ),
            )
        for module, tree in (data.get("modules") or {}).items():
            for path, value in _walk_tree(tree):
                model.set_module_value(str(module), path, value)
        for module in data.get("selectedModules") or []:
            model.select_module(str(module))
        rows = [SequelaRow.model_validate(row) for row in data.get("sequelae") or []]
        model.replace_sequelae(rows)
        return model

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticModel):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"SemanticModel(fields={len(self._scalars)}, "
            f"modules={self.active_modules()}, sequelae={len(self._sequelae)})"
        )


def _walk_tree(tree: Any, prefix: str = "") -> list[tuple[str, str]]:
    if not isinstance(tree, dict):
        return [(prefix, str(tree))] if prefix and tree not in (None, "") else []
    leaves: list[tuple[str, str]] = []
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        leaves.extend(_walk_tree(value, path))
    return leaves
