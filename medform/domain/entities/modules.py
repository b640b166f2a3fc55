"""Body-region examination modules.

Each module is a fixed tree of examination leaves for one body region.
Leaves are addressed by dot-separated paths relative to the module
(``specializedTests.trendelenburg.right``); the semantic key of a leaf is
``<module>.<path>``.

Keyword patterns on the vocabulary are regular expressions applied to
folded destination names (lowercase, accents stripped, words separated by
single spaces).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

SIDES: tuple[str, ...] = ("right", "left")
QUAD_KEYS: tuple[str, ...] = ("rightActive", "rightPassive", "leftActive", "leftPassive")
GRID_COLUMNS: tuple[str, ...] = ("force", "sensation", "reflex")
FREE_TEXT_SEGMENTS: tuple[str, ...] = ("palpation", "inspection")
RANGE_OF_MOTION = "rangeOfMotion"

SIDE_PATTERNS: dict[str, str] = {
    "right": r"\b(droite?|right|dte)\b|\bd$",
    "left": r"\b(gauche|left|gche)\b|\bg$",
}
MOTION_PATTERNS: dict[str, str] = {
    "active": r"\b(actif|active|act)\b",
    "passive": r"\b(passif|passive|pass)\b",
}
GRID_COLUMN_PATTERNS: dict[str, str] = {
    "force": r"\b(force|moteur|motor)\b",
    "sensation": r"\b(sensation|sensibilite|sensitif|sensory)\b",
    "reflex": r"\b(reflexes?|reflex|rot)\b",
}
SEGMENT_PATTERNS: dict[str, str] = {
    "palpation": r"\bpalpation\b",
    "inspection": r"\b(inspection|observation)\b",
}


class LeafShape(StrEnum):
    SCALAR = "scalar"
    SIDED = "sided"
    QUAD = "quad"
    GRID = "grid"


@dataclass(frozen=True, slots=True)
class ModuleItem:
    name: str
    all_of: tuple[str, ...]
    none_of: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ExamGroup:
    name: str
    shape: LeafShape
    items: tuple[ModuleItem, ...]

    def item_names(self) -> tuple[str, ...]:
        return tuple(item.name for item in self.items)

    def get_item(self, name: str) -> ModuleItem | None:
        for item in self.items:
            if item.name == name:
                return item
        return None


@dataclass(frozen=True, slots=True)
class ModuleSchema:
    name: str
    label: str
    keyword: str
    motion_shape: LeafShape
    movements: tuple[ModuleItem, ...]
    groups: tuple[ExamGroup, ...] = field(default_factory=tuple)
    aliases: tuple[str, ...] = ()

    def segment_names(self) -> tuple[str, ...]:
        return (
            *FREE_TEXT_SEGMENTS,
            RANGE_OF_MOTION,
            *(group.name for group in self.groups),
        )

    def get_group(self, name: str) -> ExamGroup | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def leaf_paths(self) -> tuple[str, ...]:
        paths: list[str] = list(FREE_TEXT_SEGMENTS)
        for movement in self.movements:
            base = f"{RANGE_OF_MOTION}.{movement.name}"
            if self.motion_shape == LeafShape.QUAD:
                paths.extend(f"{base}.{quad}" for quad in QUAD_KEYS)
            else:
                paths.append(base)
        for group in self.groups:
            for item in group.items:
                base = f"{group.name}.{item.name}"
                if group.shape == LeafShape.GRID:
                    paths.extend(
                        f"{base}.{column}.{side}"
                        for column in GRID_COLUMNS
                        for side in SIDES
                    )
                elif group.shape == LeafShape.SIDED:
                    paths.extend(f"{base}.{side}" for side in SIDES)
                else:
                    paths.append(base)
        return tuple(paths)

    def has_path(self, path: str) -> bool:
        return path in _leaf_index(self.name)


def flat_key(module: str, path: str) -> str:
    """Synthesize the separator-free key for a module leaf.

    ``flat_key("hips", "specializedTests.trendelenburg.right")`` gives
    ``hipsSpecializedTestsTrendelenburgRight``.
    """
    parts = [segment for segment in path.split(".") if segment]
    return module + "".join(part[:1].upper() + part[1:] for part in parts)


def leaf_key(module: str, path: str) -> str:
    return f"{module}.{path}"


def split_leaf_key(key: str) -> tuple[str, str] | None:
    """Split ``<module>.<path>`` into its parts when the module is known."""
    module, sep, path = key.partition(".")
    if not sep or module not in MODULES or not path:
        return None
    return module, path


def _item(name: str, *all_of: str, none_of: tuple[str, ...] = ()) -> ModuleItem:
    return ModuleItem(name=name, all_of=all_of, none_of=none_of)


_LATERAL = r"\blaterale?s?\b|\blateral\b|\binclinaison\b"
_ROTATION = r"\brotations?\b"
_INTERNAL = r"\b(interne|internal|int)\b"
_EXTERNAL = r"\b(externe|external|ext)\b"
_FLEXION = r"\bflexion\b"
_EXTENSION = r"\bextension\b"
_RIGHT = SIDE_PATTERNS["right"]
_LEFT = SIDE_PATTERNS["left"]

_SPINE_MOVEMENTS: tuple[ModuleItem, ...] = (
    _item("flexion", _FLEXION, none_of=(_LATERAL,)),
    _item("extension", _EXTENSION),
    _item("lateralFlexionRight", _LATERAL, _RIGHT, none_of=(_LEFT,)),
    _item("lateralFlexionLeft", _LATERAL, _LEFT, none_of=(_RIGHT,)),
    _item("rotationRight", _ROTATION, _RIGHT, none_of=(_LEFT, _LATERAL)),
    _item("rotationLeft", _ROTATION, _LEFT, none_of=(_RIGHT, _LATERAL)),
)

_LIMB_ROTATIONS: tuple[ModuleItem, ...] = (
    _item("internalRotation", _ROTATION, _INTERNAL),
    _item("externalRotation", _ROTATION, _EXTERNAL),
)


def _roots(*levels: str) -> tuple[ModuleItem, ...]:
    items: list[ModuleItem] = []
    for level in levels:
        letter, number = level[0], level[1:]
        items.append(_item(level.lower(), rf"\b{letter.lower()} ?{number}\b"))
    return tuple(items)


MODULES: dict[str, ModuleSchema] = {
    schema.name: schema
    for schema in (
        ModuleSchema(
            name="cervicalSpine",
            label="Colonne cervicale",
            keyword=r"\b(cervicales?|cervical|cou|neck)\b",
            motion_shape=LeafShape.SCALAR,
            movements=_SPINE_MOVEMENTS,
            groups=(
                ExamGroup(
                    name="neurologicalExam",
                    shape=LeafShape.GRID,
                    items=_roots("C5", "C6", "C7", "C8", "T1"),
                ),
                ExamGroup(
                    name="specializedTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("spurling", r"\bspurling\b"),
                        _item("distraction", r"\bdistraction\b"),
                    ),
                ),
            ),
            aliases=("cervical", "cervicale", "cou", "neck"),
        ),
        ModuleSchema(
            name="shoulders",
            label="Epaules",
            keyword=r"\b(epaules?|shoulders?)\b",
            motion_shape=LeafShape.QUAD,
            movements=(
                _item("flexion", _FLEXION),
                _item("extension", _EXTENSION),
                _item("abduction", r"\babduction\b"),
                _item("adduction", r"\badduction\b"),
                *_LIMB_ROTATIONS,
            ),
            groups=(
                ExamGroup(
                    name="specializedTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("jobe", r"\bjobe\b"),
                        _item("neer", r"\bneer\b"),
                        _item("hawkins", r"\bhawkins\b"),
                        _item("speed", r"\bspeed\b"),
                        _item("yergason", r"\byergason\b"),
                        _item("dropArm", r"\bdrop ?arm\b|\bbras tombant\b"),
                        _item("apprehension", r"\bapprehension\b"),
                    ),
                ),
            ),
            aliases=("epaule", "epaules", "shoulder"),
        ),
        ModuleSchema(
            name="elbows",
            label="Coudes",
            keyword=r"\b(coudes?|elbows?)\b",
            motion_shape=LeafShape.QUAD,
            movements=(
                _item("flexion", _FLEXION),
                _item("extension", _EXTENSION),
                _item("pronation", r"\bpronation\b"),
                _item("supination", r"\bsupination\b"),
            ),
            groups=(
                ExamGroup(
                    name="specializedTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("cozen", r"\bcozen\b"),
                        _item("mill", r"\bmills?\b"),
                        _item("tinel", r"\btinel\b"),
                        _item("varusStress", r"\bvarus\b"),
                        _item("valgusStress", r"\bvalgus\b"),
                    ),
                ),
            ),
            aliases=("coude", "coudes", "elbow"),
        ),
        ModuleSchema(
            name="wristsHands",
            label="Poignets et mains",
            keyword=r"\b(poignets?|mains?|wrists?|hands?)\b",
            motion_shape=LeafShape.QUAD,
            movements=(
                _item("flexion", _FLEXION),
                _item("extension", _EXTENSION),
                _item("radialDeviation", r"\bradiale?\b"),
                _item("ulnarDeviation", r"\b(cubitale?|ulnaire|ulnar)\b"),
            ),
            groups=(
                ExamGroup(
                    name="handTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("phalen", r"\bphalen\b"),
                        _item("tinel", r"\btinel\b"),
                        _item("finkelstein", r"\bfinkelstein\b"),
                        _item("gripStrength", r"\b(grip|prehension|jamar)\b"),
                    ),
                ),
            ),
            aliases=("poignet", "poignets", "mains", "wrist", "wrists", "hands"),
        ),
        ModuleSchema(
            name="lumbarSpine",
            label="Colonne dorsolombaire",
            keyword=r"\b(lombaires?|dorsolombaires?|dorso lombaires?|lumbar|lombo)\b",
            motion_shape=LeafShape.SCALAR,
            movements=_SPINE_MOVEMENTS,
            groups=(
                ExamGroup(
                    name="neurologicalExam",
                    shape=LeafShape.GRID,
                    items=_roots("L3", "L4", "L5", "S1"),
                ),
                ExamGroup(
                    name="specializedTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("lasegue", r"\blasegue\b"),
                        _item("tripod", r"\btripod\b|\btrepied\b"),
                    ),
                ),
            ),
            aliases=("lombaire", "dorsolombaire", "lumbar"),
        ),
        ModuleSchema(
            name="hips",
            label="Hanches",
            keyword=r"\b(hanches?|hips?)\b",
            motion_shape=LeafShape.QUAD,
            movements=(
                _item("flexion", _FLEXION),
                _item("extension", _EXTENSION),
                _item("abduction", r"\babduction\b"),
                _item("adduction", r"\badduction\b"),
                *_LIMB_ROTATIONS,
            ),
            groups=(
                ExamGroup(
                    name="specializedTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("trendelenburg", r"\btrendelenburg\b"),
                        _item("fabere", r"\b(fabere|faber|patrick)\b"),
                        _item("thomas", r"\bthomas\b"),
                        _item("ober", r"\bober\b"),
                        _item("logRoll", r"\blog ?roll\b"),
                    ),
                ),
            ),
            aliases=("hanche", "hanches", "hip"),
        ),
        ModuleSchema(
            name="knees",
            label="Genoux",
            keyword=r"\b(genoux|genou|knees?)\b",
            motion_shape=LeafShape.QUAD,
            movements=(
                _item("flexion", _FLEXION),
                _item("extension", _EXTENSION),
            ),
            groups=(
                ExamGroup(
                    name="specializedTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("lachman", r"\blachman\b"),
                        _item(
                            "anteriorDrawer",
                            r"\b(tiroir|drawer)\b",
                            r"\b(anterieur|anterior|ant)\b",
                        ),
                        _item(
                            "posteriorDrawer",
                            r"\b(tiroir|drawer)\b",
                            r"\b(posterieur|posterior|post)\b",
                        ),
                        _item("mcmurray", r"\bmc ?murray\b"),
                        _item("valgusStress", r"\bvalgus\b"),
                        _item("varusStress", r"\bvarus\b"),
                        _item("patellarGrind", r"\b(grind|clarke|rotulien|patellar)\b"),
                    ),
                ),
            ),
            aliases=("genou", "genoux", "knee"),
        ),
        ModuleSchema(
            name="ankles",
            label="Chevilles",
            keyword=r"\b(chevilles?|ankles?)\b",
            motion_shape=LeafShape.QUAD,
            movements=(
                _item("dorsiflexion", r"\bdorsi ?flexion\b"),
                _item("plantarFlexion", r"\b(plantaire|plantar)\b", _FLEXION),
                _item("inversion", r"\binversion\b"),
                _item("eversion", r"\beversion\b"),
            ),
            groups=(
                ExamGroup(
                    name="specializedTests",
                    shape=LeafShape.SIDED,
                    items=(
                        _item("anteriorDrawer", r"\b(tiroir|drawer)\b"),
                        _item("talarTilt", r"\b(talar|talienne|bascule)\b"),
                        _item("thompson", r"\bthompson\b"),
                    ),
                ),
            ),
            aliases=("cheville", "chevilles", "ankle"),
        ),
    )
}

_LEAF_INDEX: dict[str, frozenset[str]] = {
    name: frozenset(schema.leaf_paths()) for name, schema in MODULES.items()
}


def _leaf_index(module: str) -> frozenset[str]:
    return _LEAF_INDEX.get(module, frozenset())


def get_module(name: str) -> ModuleSchema:
    try:
        return MODULES[name]
    except KeyError as exc:
        raise KeyError(f"Unknown module: {name}") from exc


def list_modules() -> list[str]:
    return list(MODULES)


def is_leaf_key(key: str) -> bool:
    parts = split_leaf_key(key)
    if parts is None:
        return False
    module, path = parts
    return path in _leaf_index(module)
