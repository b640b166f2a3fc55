from typing import ClassVar


class Defaults:
    OVERFLOW_BUDGET = 1800
    CONTAMINATION_THRESHOLD = 100
    MIN_SEGMENT_CONFIDENCE = 0.0
    FUZZY_MATCH_THRESHOLD = 0.85
    MIN_FUZZY_KEY_LENGTH = 4
    MAX_SEQUELA_ROWS = 10
    MIN_SEQUELA_ROWS = 2
    CONFIG_FILE = "medform.toml"


class InterchangeKeys:
    CURRENT_SEQUELAE = "currentSequelae"
    SEQUELA_PREFIX = "sequela"
    SEQUELA_FIELDS: ClassVar[tuple[str, ...]] = ("code", "description", "percentage")
    MODULES = "modules"
    SEQUELAE_LIST = "sequelae"


class OverflowPairs:
    PAIRS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("clinicalHistory", "clinicalHistoryContinued"),
    )


class EssentialFields:
    KEYS: ClassVar[tuple[str, ...]] = (
        "age",
        "smokingStatus",
        "cannabisStatus",
        "alcoholStatus",
        "noteBene",
    )


class Sanitization:
    FLAGGED_KEYS: ClassVar[frozenset[str]] = frozenset({"noteBene"})
    # Hip-test vocabulary that keeps leaking into the "NB" slot.
    FOREIGN_KEYWORDS: ClassVar[tuple[str, ...]] = (
        "trendelenburg",
        "fabere",
        "faber",
        "patrick",
        "thomas",
        "ober",
        "ely",
        "log roll",
        "hanche",
        "hanches",
        "hip",
        "hips",
        "rotation interne",
        "rotation externe",
        "abduction",
        "adduction",
    )


class ModuleImport:
    # Collision-prone abbreviations that must never be read as module paths.
    EXCLUDED_KEYS: ClassVar[frozenset[str]] = frozenset(
        {
            "nb",
            "notebene",
            "hipsnb",
            "hipsnotebene",
            "hanchenb",
            "hanchesnb",
            "nbhanche",
            "nbhanches",
        }
    )
    SIDE_SUFFIXES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("rightactive", "rightActive"),
        ("rightpassive", "rightPassive"),
        ("leftactive", "leftActive"),
        ("leftpassive", "leftPassive"),
        ("droitactif", "rightActive"),
        ("droitpassif", "rightPassive"),
        ("gaucheactif", "leftActive"),
        ("gauchepassif", "leftPassive"),
        ("right", "right"),
        ("left", "left"),
        ("droite", "right"),
        ("droit", "right"),
        ("gauche", "left"),
    )
    SEGMENT_ALIASES: ClassVar[dict[str, str]] = {
        "amplitudes": "rangeOfMotion",
        "amplitude": "rangeOfMotion",
        "rom": "rangeOfMotion",
        "testsspecialises": "specializedTests",
        "examenneurologique": "neurologicalExam",
        "neuro": "neurologicalExam",
        "testsmains": "handTests",
    }


class FillValues:
    CHECKBOX_TRUE: ClassVar[frozenset[str]] = frozenset(
        {"yes", "oui", "true", "1", "x", "on", "checked"}
    )


class LogLevels:
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2
