"""Hand-ordered resolution rules for every semantic key.

Order matters: within the scalar table the more specific patterns come
first (physician name before worker name, the continuation slot before
the clinical history slot). The full table places module leaves first,
then sequela rows, then the combined sequela slot, then scalars.
"""

from __future__ import annotations

from functools import lru_cache

from ....constants import InterchangeKeys
from ...entities.modules import (
    GRID_COLUMN_PATTERNS,
    MODULES,
    MOTION_PATTERNS,
    RANGE_OF_MOTION,
    SEGMENT_PATTERNS,
    SIDE_PATTERNS,
    LeafShape,
    ModuleSchema,
    flat_key,
    leaf_key,
)
from .rules import AliasRule, FieldRules, PatternRule, Rule, RowRule

_SEQUEL = r"\bsequel\w*"


def _scalar(
    key: str,
    fallback: str,
    *patterns: PatternRule,
    aliases: tuple[str, ...] = (),
) -> FieldRules:
    rules: list[Rule] = [AliasRule(names=(key, *aliases))]
    rules.extend(patterns)
    return FieldRules(key=key, rules=tuple(rules), fallback=fallback)


def _p(*all_of: str, none_of: tuple[str, ...] = ()) -> PatternRule:
    return PatternRule(all_of=all_of, none_of=none_of)


SCALAR_RULES: tuple[FieldRules, ...] = (
    _scalar(
        "physicianName",
        "Nom du médecin",
        _p(r"\bnom\b", r"\bmedecin\b", none_of=(r"\bprenom\b",)),
        _p(r"\bphysician\b", r"\bname\b", none_of=(r"\bfirst\b",)),
        aliases=("Nom du médecin", "Nom medecin"),
    ),
    _scalar(
        "physicianFirstName",
        "Prénom du médecin",
        _p(r"\bprenom\b", r"\bmedecin\b"),
        _p(r"\bphysician\b", r"\bfirst\b"),
        aliases=("Prénom du médecin",),
    ),
    _scalar(
        "physicianLicense",
        "No de permis",
        _p(r"\b(permis|licence|license)\b"),
        aliases=("No de permis", "Numéro de permis"),
    ),
    _scalar(
        "employer",
        "Nom de l'employeur",
        _p(r"\b(employeur|employer)\b"),
        aliases=("Nom de l'employeur", "Employeur"),
    ),
    _scalar(
        "workerName",
        "Nom du travailleur",
        _p(r"\bnom\b", none_of=(r"\bmedecin\b", r"\bemployeur\b", r"\bprenom\b")),
        _p(r"\bworker\b", r"\bname\b", none_of=(r"\bfirst\b",)),
        aliases=("Nom du travailleur", "Nom", "Nom de famille"),
    ),
    _scalar(
        "workerFirstName",
        "Prénom du travailleur",
        _p(r"\bprenom\b", none_of=(r"\bmedecin\b",)),
        _p(r"\bfirst\b", r"\bname\b", none_of=(r"\bphysician\b",)),
        aliases=("Prénom du travailleur", "Prénom"),
    ),
    _scalar(
        "healthInsuranceNumber",
        "NAM",
        _p(r"\bnam\b|\bassurance maladie\b|\bhealth insurance\b"),
        aliases=("NAM", "No d'assurance maladie"),
    ),
    _scalar(
        "claimNumber",
        "No de dossier",
        _p(r"\b(dossier|reclamation|claim)\b"),
        aliases=("No de dossier", "Numéro de dossier CNESST"),
    ),
    _scalar(
        "dateOfBirth",
        "Date de naissance",
        _p(r"\b(naissance|birth|dob|ddn)\b"),
        aliases=("Date de naissance",),
    ),
    _scalar(
        "age",
        "Âge",
        _p(r"\bage\b", none_of=(r"\bdate\b",)),
        aliases=("Âge", "Age"),
    ),
    _scalar(
        "sex",
        "Sexe",
        _p(r"\b(sexe|sex|genre)\b"),
        aliases=("Sexe",),
    ),
    _scalar(
        "occupation",
        "Emploi",
        _p(r"\b(emploi|occupation|metier|profession|poste)\b"),
        aliases=("Emploi", "Titre d'emploi"),
    ),
    _scalar(
        "dominantHand",
        "Main dominante",
        _p(r"\b(dominance|dominante?)\b"),
        aliases=("Main dominante", "Dominance"),
    ),
    _scalar(
        "signatureDate",
        "Date de signature",
        _p(r"\bdate\b", r"\bsignature\b"),
        aliases=("Date de signature",),
    ),
    _scalar(
        "consolidationDate",
        "Date de consolidation",
        _p(r"\bconsolidation\b"),
        aliases=("Date de consolidation",),
    ),
    _scalar(
        "eventDate",
        "Date de l'événement",
        _p(r"\bdate\b", r"\b(evenement|event|accident|lesion)\b"),
        aliases=("Date de l'événement", "Date de l'evenement"),
    ),
    _scalar(
        "evaluationDate",
        "Date de l'évaluation",
        _p(r"\bdate\b", r"\b(evaluation|examen|exam)\b"),
        aliases=("Date de l'évaluation", "Date de l'examen"),
    ),
    _scalar(
        "diagnosis",
        "Diagnostic",
        _p(r"\b(diagnostics?|diagnosis)\b"),
        aliases=("Diagnostic", "Diagnostics"),
    ),
    _scalar(
        "clinicalHistoryContinued",
        "Historique (suite)",
        _p(
            r"\b(historique|antecedents?|history)\b",
            r"\b(suite|continued|cont|continuation)\b",
        ),
        aliases=("Historique (suite)", "Historique suite"),
    ),
    _scalar(
        "clinicalHistory",
        "Historique",
        _p(
            r"\b(historique|antecedents?|history)\b",
            none_of=(r"\b(suite|continued|cont|continuation)\b",),
        ),
        aliases=("Historique", "Historique clinique"),
    ),
    _scalar(
        "currentComplaints",
        "Plaintes actuelles",
        _p(r"\b(plaintes?|complaints?|symptomes?)\b"),
        aliases=("Plaintes actuelles", "Plaintes et problèmes"),
    ),
    _scalar(
        "medication",
        "Médication",
        _p(r"\b(medication|medicaments?|medications?)\b"),
        aliases=("Médication", "Médication actuelle"),
    ),
    _scalar(
        "treatments",
        "Traitements",
        _p(r"\b(traitements?|treatments?)\b"),
        aliases=("Traitements",),
    ),
    _scalar(
        "smokingStatus",
        "Tabac",
        _p(r"\b(tabac|tabagisme|smoking|cigarettes?)\b"),
        aliases=("Tabac", "Tabagisme"),
    ),
    _scalar(
        "cannabisStatus",
        "Cannabis",
        _p(r"\bcannabis\b"),
        aliases=("Cannabis",),
    ),
    _scalar(
        "alcoholStatus",
        "Alcool",
        _p(r"\b(alcool|alcohol)\b"),
        aliases=("Alcool",),
    ),
    _scalar(
        "functionalLimitations",
        "Limitations fonctionnelles",
        _p(r"\blimitations?\b"),
        aliases=("Limitations fonctionnelles",),
    ),
    _scalar(
        "permanentImpairment",
        "Atteinte permanente",
        _p(r"\b(atteinte|impairment|apipp)\b"),
        aliases=("Atteinte permanente", "APIPP"),
    ),
    _scalar(
        "conclusion",
        "Conclusion",
        _p(r"\bconclusions?\b"),
        aliases=("Conclusion", "Conclusions"),
    ),
    _scalar(
        "noteBene",
        "NB",
        _p(r"^(nb|n b)$|\bnot[ae]? bene\b"),
        aliases=("NB", "N.B.", "N.B", "Nota bene"),
    ),
)

SCALAR_KEYS: tuple[str, ...] = tuple(rules.key for rules in SCALAR_RULES)

SEQUELA_FIELD_PATTERNS: dict[str, str] = {
    "code": r"\bcode\b",
    "description": r"\b(description|desc)\b",
    "percentage": r"\b(pourcentage|percentage|pct|taux)\b",
}
SEQUELA_BARE_PATTERNS: dict[str, str] = {
    "code": r"^code( \d+)?$",
    "description": r"^(description|desc)( \d+)?$",
    "percentage": r"^(pourcentage|percentage|pct|taux)( \d+)?$",
}

COMBINED_SEQUELAE_RULES = FieldRules(
    key=InterchangeKeys.CURRENT_SEQUELAE,
    rules=(
        AliasRule(
            names=(
                InterchangeKeys.CURRENT_SEQUELAE,
                "Séquelles actuelles",
                "Sequelles actuelles",
            )
        ),
        _p(
            _SEQUEL,
            r"\b(actuelles?|current|actuel)\b",
            none_of=tuple(SEQUELA_FIELD_PATTERNS.values()),
        ),
    ),
    fallback="Séquelles actuelles",
)


def sequela_key(field_name: str, row: int) -> str:
    return f"{InterchangeKeys.SEQUELA_PREFIX}{field_name.capitalize()}{row}"


def sequela_rules(row: int) -> tuple[FieldRules, ...]:
    result: list[FieldRules] = []
    for field_name, pattern in SEQUELA_FIELD_PATTERNS.items():
        key = sequela_key(field_name, row)
        aliases: tuple[str, ...] = (key,)
        if row == 1:
            unnumbered = f"{InterchangeKeys.SEQUELA_PREFIX}{field_name.capitalize()}"
            aliases = (key, unnumbered)
        others = tuple(
            other for name, other in SEQUELA_FIELD_PATTERNS.items() if name != field_name
        )
        result.append(
            FieldRules(
                key=key,
                rules=(
                    AliasRule(names=aliases),
                    RowRule(
                        row=row,
                        pattern=_p(_SEQUEL, pattern, none_of=others),
                        allow_unnumbered=row == 1,
                    ),
                    RowRule(
                        row=row,
                        pattern=_p(SEQUELA_BARE_PATTERNS[field_name]),
                        allow_unnumbered=row == 1,
                    ),
                ),
                fallback=key,
            )
        )
    return tuple(result)


def _opposite(value: str, pair: tuple[str, str]) -> str:
    return pair[1] if value == pair[0] else pair[0]


def _leaf_rules(schema: ModuleSchema, path: str) -> FieldRules:
    module_kw = schema.keyword
    key = leaf_key(schema.name, path)
    synthesized = flat_key(schema.name, path)
    aliases = AliasRule(names=(synthesized, key))
    segments = path.split(".")
    head = segments[0]
    patterns: list[Rule] = []

    if head in SEGMENT_PATTERNS:
        patterns.append(_p(module_kw, SEGMENT_PATTERNS[head]))
    elif head == RANGE_OF_MOTION:
        movement = next(m for m in schema.movements if m.name == segments[1])
        if schema.motion_shape == LeafShape.QUAD:
            quad = segments[2]
            side = "right" if quad.startswith("right") else "left"
            motion = "active" if quad.endswith("Active") else "passive"
            other_side = SIDE_PATTERNS[_opposite(side, ("right", "left"))]
            other_motion = MOTION_PATTERNS[_opposite(motion, ("active", "passive"))]
            patterns.append(
                _p(
                    module_kw,
                    *movement.all_of,
                    SIDE_PATTERNS[side],
                    MOTION_PATTERNS[motion],
                    none_of=(*movement.none_of, other_side, other_motion),
                )
            )
            if motion == "active":
                patterns.append(
                    _p(
                        module_kw,
                        *movement.all_of,
                        SIDE_PATTERNS[side],
                        none_of=(*movement.none_of, other_side, other_motion),
                    )
                )
        else:
            patterns.append(_p(module_kw, *movement.all_of, none_of=movement.none_of))
    else:
        group = schema.get_group(head)
        if group is None:
            raise KeyError(f"Unknown segment {head!r} in module {schema.name}")
        item = group.get_item(segments[1])
        if item is None:
            raise KeyError(f"Unknown item {segments[1]!r} in {schema.name}.{head}")
        side = segments[-1]
        other_side = SIDE_PATTERNS[_opposite(side, ("right", "left"))]
        extra: tuple[str, ...] = ()
        if group.shape == LeafShape.GRID:
            extra = (GRID_COLUMN_PATTERNS[segments[2]],)
        patterns.append(
            _p(
                module_kw,
                *item.all_of,
                *extra,
                SIDE_PATTERNS[side],
                none_of=(*item.none_of, other_side),
            )
        )

    return FieldRules(key=key, rules=(aliases, *patterns), fallback=synthesized)


@lru_cache(maxsize=16)
def module_rules(module: str) -> tuple[FieldRules, ...]:
    schema = MODULES[module]
    return tuple(_leaf_rules(schema, path) for path in schema.leaf_paths())


@lru_cache(maxsize=8)
def build_rule_table(max_sequela_rows: int) -> tuple[FieldRules, ...]:
    """Every semantic key in fold order."""
    table: list[FieldRules] = []
    for module in MODULES:
        table.extend(module_rules(module))
    for row in range(1, max_sequela_rows + 1):
        table.extend(sequela_rules(row))
    table.append(COMBINED_SEQUELAE_RULES)
    table.extend(SCALAR_RULES)
    return tuple(table)