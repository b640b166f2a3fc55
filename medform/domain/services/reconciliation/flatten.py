from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ....constants import InterchangeKeys
from ...entities.modules import MODULES
from ...entities.sequela import IndividualEncoding, SequelaFields


@dataclass(slots=True)
class FlatInput:
    """External data split into flat values, module trees and row lists."""

    values: dict[str, str] = field(default_factory=dict)
    module_trees: dict[str, Mapping[str, Any]] = field(default_factory=dict)
    sequela_list: IndividualEncoding | None = None


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else ""
    if isinstance(value, (list, tuple)):
        return ", ".join(to_text(item) for item in value if to_text(item))
    return str(value)


def flatten_external(data: Mapping[str, Any]) -> FlatInput:
    """Flatten a possibly nested external map.

    Nested objects are joined with ``_``. Objects under a module name, or
    under ``modules``, are kept as module trees. A ``sequelae`` list of row
    objects becomes an individual row encoding.
    """
    result = FlatInput()
    for key, value in data.items():
        key = str(key)
        if key == InterchangeKeys.MODULES and isinstance(value, Mapping):
            for module, tree in value.items():
                if isinstance(tree, Mapping):
                    result.module_trees[str(module)] = tree
            continue
        if key in MODULES and isinstance(value, Mapping):
            result.module_trees[key] = value
            continue
        if key == InterchangeKeys.SEQUELAE_LIST and isinstance(value, list):
            result.sequela_list = _sequela_list(value)
            continue
        if isinstance(value, Mapping):
            result.values.update(_flatten(value, key))
            continue
        result.values[key] = to_text(value)
    return result


def _flatten(obj: Mapping[str, Any], prefix: str) -> dict[str, str]:
    flattened: dict[str, str] = {}
    for key, value in obj.items():
        new_key = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flattened.update(_flatten(value, new_key))
        else:
            flattened[new_key] = to_text(value)
    return flattened


def _sequela_list(items: list[Any]) -> IndividualEncoding:
    rows: list[SequelaFields] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        rows.append(
            SequelaFields(
                code=to_text(item.get("code")),
                description=to_text(item.get("description")),
                percentage=to_text(
                    item.get("percentage", item.get("pourcentage", ""))
                ),
            )
        )
    return IndividualEncoding(rows=tuple(row for row in rows if not row.is_empty()))
