"""Reconstruction of module leaf paths from separator-free keys.

``hipsSpecializedTestsTrendelenburgRight`` is read as: module prefix
``hips``, segment ``specializedTests``, item ``trendelenburg``, side
``right``. Matching is case-insensitive and ignores separators, so
``hips_specializedTests_trendelenburg_right`` reads the same way.
"""

from __future__ import annotations

from dataclasses import dataclass

from ....constants import ModuleImport
from ...entities.modules import (
    FREE_TEXT_SEGMENTS,
    GRID_COLUMNS,
    MODULES,
    RANGE_OF_MOTION,
    LeafShape,
    ModuleSchema,
)
from ..resolution.utils import compact


@dataclass(frozen=True, slots=True)
class PathResolution:
    module: str
    path: str | None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.path is not None


class ModulePathParser:
    def __init__(self) -> None:
        prefixes: list[tuple[str, str]] = []
        for name, schema in MODULES.items():
            prefixes.append((compact(name), name))
            prefixes.extend((compact(alias), name) for alias in schema.aliases)
        self._prefixes = sorted(set(prefixes), key=lambda p: (-len(p[0]), p[0]))

    def match_module(self, key: str) -> tuple[str, str] | None:
        """Return ``(module, remainder)`` for the longest matching prefix."""
        folded = compact(key)
        for prefix, module in self._prefixes:
            if folded.startswith(prefix):
                return module, folded[len(prefix) :]
        return None

    def parse(self, key: str) -> PathResolution | None:
        """Reconstruct the leaf path for ``key``.

        Returns None when the key does not start with a module name, and a
        resolution without a path when the remainder is not recognized.
        """
        matched = self.match_module(key)
        if matched is None:
            return None
        module, remainder = matched
        schema = MODULES[module]
        segment, rest = self._match_segment(schema, remainder)
        if segment is None:
            return PathResolution(module, None, f"unknown segment in {remainder!r}")
        if segment in FREE_TEXT_SEGMENTS:
            if rest:
                return PathResolution(module, None, f"unexpected {rest!r} after {segment}")
            return PathResolution(module, segment)
        if segment == RANGE_OF_MOTION:
            return self._parse_motion(schema, rest)
        return self._parse_group(schema, segment, rest)

    def _match_segment(
        self, schema: ModuleSchema, remainder: str
    ) -> tuple[str | None, str]:
        candidates = {compact(name): name for name in schema.segment_names()}
        for alias, segment in ModuleImport.SEGMENT_ALIASES.items():
            if segment in schema.segment_names():
                candidates.setdefault(alias, segment)
        for token in sorted(candidates, key=len, reverse=True):
            if remainder.startswith(token):
                return candidates[token], remainder[len(token) :]
        return None, remainder

    def _parse_motion(self, schema: ModuleSchema, rest: str) -> PathResolution:
        items = {compact(item.name): item.name for item in schema.movements}
        if schema.motion_shape != LeafShape.QUAD:
            if rest in items:
                return PathResolution(schema.name, f"{RANGE_OF_MOTION}.{items[rest]}")
            return PathResolution(schema.name, None, f"unknown movement {rest!r}")
        stem, side = _strip_side(rest)
        if side is None or stem not in items:
            return PathResolution(schema.name, None, f"unknown movement {rest!r}")
        if side in ("right", "left"):
            side = f"{side}Active"
        return PathResolution(
            schema.name, f"{RANGE_OF_MOTION}.{items[stem]}.{side}"
        )

    def _parse_group(
        self, schema: ModuleSchema, segment: str, rest: str
    ) -> PathResolution:
        group = schema.get_group(segment)
        if group is None:
            return PathResolution(schema.name, None, f"unknown group {segment!r}")
        stem, side = _strip_side(rest)
        if side not in ("right", "left"):
            return PathResolution(schema.name, None, f"missing side in {rest!r}")
        items = {compact(name): name for name in group.item_names()}
        if group.shape == LeafShape.GRID:
            for column in GRID_COLUMNS:
                if stem.endswith(column) and stem[: -len(column)] in items:
                    item = items[stem[: -len(column)]]
                    return PathResolution(
                        schema.name, f"{segment}.{item}.{column}.{side}"
                    )
            return PathResolution(schema.name, None, f"unknown grid cell {rest!r}")
        if stem in items:
            return PathResolution(schema.name, f"{segment}.{items[stem]}.{side}")
        return PathResolution(schema.name, None, f"unknown test {rest!r}")


def _strip_side(rest: str) -> tuple[str, str | None]:
    for suffix, canonical in ModuleImport.SIDE_SUFFIXES:
        if rest.endswith(suffix) and len(rest) > len(suffix):
            return rest[: -len(suffix)], canonical
    return rest, None
