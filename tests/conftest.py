from __future__ import annotations

import pytest

from medform.application.session import FormSession
from medform.domain.entities.catalog import (
    DestinationCatalog,
    DestinationEntry,
    FieldType,
)
from medform.domain.entities.semantic_model import SemanticModel
from medform.domain.services.export.serializer import ExportSerializer
from medform.domain.services.overflow import OverflowSplitter
from medform.domain.services.reconciliation.engine import ReconciliationEngine
from medform.domain.services.resolution.resolver import FieldResolver
from medform.domain.services.sanitizer import Sanitizer
from medform.infrastructure.logging import NullLogger

SAMPLE_FIELD_NAMES: tuple[str, ...] = (
    "Nom du travailleur",
    "Prénom du travailleur",
    "Date de naissance",
    "Âge",
    "Date de l'évaluation",
    "Diagnostic",
    "Historique",
    "Historique (suite)",
    "Tabac",
    "Cannabis",
    "Alcool",
    "NB",
    "Séquelles actuelles",
    "Séquelle code 1",
    "Séquelle description 1",
    "Séquelle % 1",
    "Séquelle code 2",
    "Séquelle description 2",
    "Séquelle % 2",
    "Épaule flexion droite active",
    "Épaule flexion gauche active",
    "Hanche Trendelenburg droite",
)


@pytest.fixture(autouse=True)
def _clear_medform_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep configuration tests independent of the caller's environment."""
    for name in (
        "OVERFLOW_BUDGET",
        "CONTAMINATION_THRESHOLD",
        "MIN_SEGMENT_CONFIDENCE",
        "FUZZY_MATCH_THRESHOLD",
        "MAX_SEQUELA_ROWS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def catalog() -> DestinationCatalog:
    """The sample form: text fields in document order plus one checkbox."""
    entries = [DestinationEntry(name=name) for name in SAMPLE_FIELD_NAMES]
    entries.append(
        DestinationEntry(name="Accident du travail", type=FieldType.CHECKBOX)
    )
    return DestinationCatalog.from_entries(entries)


@pytest.fixture
def resolver() -> FieldResolver:
    return FieldResolver()


@pytest.fixture
def sanitizer() -> Sanitizer:
    return Sanitizer()


@pytest.fixture
def splitter() -> OverflowSplitter:
    return OverflowSplitter(budget=20)


@pytest.fixture
def engine(
    resolver: FieldResolver, sanitizer: Sanitizer, splitter: OverflowSplitter
) -> ReconciliationEngine:
    return ReconciliationEngine(resolver, sanitizer, splitter=splitter)


@pytest.fixture
def serializer(
    resolver: FieldResolver, splitter: OverflowSplitter, sanitizer: Sanitizer
) -> ExportSerializer:
    return ExportSerializer(resolver, splitter, sanitizer)


@pytest.fixture
def session(
    resolver: FieldResolver,
    splitter: OverflowSplitter,
    sanitizer: Sanitizer,
    engine: ReconciliationEngine,
    serializer: ExportSerializer,
) -> FormSession:
    return FormSession(
        resolver=resolver,
        splitter=splitter,
        sanitizer=sanitizer,
        engine=engine,
        serializer=serializer,
        logger=NullLogger(),
    )


@pytest.fixture
def populated_model() -> SemanticModel:
    """A filled-in evaluation that survives an export/import round trip."""
    model = SemanticModel()
    model.set("workerName", "Tremblay")
    model.set("workerFirstName", "Julie")
    model.set("dateOfBirth", "1980-05-12")
    model.set("age", "44")
    model.set("evaluationDate", "2024-11-02")
    model.set("diagnosis", "Tendinopathie de la coiffe")
    model.set("clinicalHistory", "Chute au travail")
    model.set("smokingStatus", "Non-fumeur")
    model.set("noteBene", "Revoir dans 6 semaines")
    model.update_sequela(
        1, code="102383", description="Atteinte des tissus mous", percentage="2"
    )
    model.set_module_value("shoulders", "rangeOfMotion.flexion.rightActive", "160")
    model.set_module_value("hips", "specializedTests.trendelenburg.right", "Négatif")
    return model
