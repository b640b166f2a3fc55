"""Tests for export serialization."""

from __future__ import annotations

from medform.domain.entities.catalog import (
    DestinationCatalog,
    DestinationEntry,
    FieldType,
)
from medform.domain.entities.overflow import OverflowState
from medform.domain.entities.semantic_model import SemanticModel
from medform.domain.services.export.serializer import derive_age, parse_date
from medform.domain.services.sanitizer import SanitizeStage

CONTAMINATED_NB = "Trendelenburg positif a droite, " + "x" * 120


class TestSerialize:
    def test_interchange_keyed_by_destination(self, serializer, catalog, populated_model):
        result = serializer.serialize(populated_model, catalog)

        assert result.interchange == {
            "Nom du travailleur": "Tremblay",
            "Prénom du travailleur": "Julie",
            "Date de naissance": "1980-05-12",
            "Âge": "44",
            "Date de l'évaluation": "2024-11-02",
            "Diagnostic": "Tendinopathie de la coiffe",
            "Historique": "Chute au travail",
            "Tabac": "Non-fumeur",
            "NB": "Revoir dans 6 semaines",
            "Épaule flexion droite active": "160",
            "Hanche Trendelenburg droite": "Négatif",
            "Séquelle code 1": "102383",
            "Séquelle description 1": "Atteinte des tissus mous",
            "Séquelle % 1": "2",
            "Séquelles actuelles": (
                "Code: 102383 | Description: Atteinte des tissus mous | %: 2"
            ),
        }

    def test_essentials_force_written_when_empty(self, serializer, catalog, populated_model):
        result = serializer.serialize(populated_model, catalog)

        assert result.document_values["Cannabis"] == ""
        assert result.document_values["Alcool"] == ""
        assert "Cannabis" not in result.interchange

    def test_age_derived_when_missing(self, serializer, catalog):
        model = SemanticModel()
        model.set("dateOfBirth", "1980-05-12")
        model.set("evaluationDate", "2024-11-02")

        result = serializer.serialize(model, catalog)

        assert result.document_values["Âge"] == "44"

    def test_model_not_modified(self, serializer, catalog, populated_model):
        before = populated_model.to_dict()

        serializer.serialize(populated_model, catalog)

        assert populated_model.to_dict() == before

    def test_overflow_pair_resplit(self, serializer, catalog):
        model = SemanticModel()
        model.set_overflow_state(
            "clinicalHistory", OverflowState(primary="one two three four five")
        )

        result = serializer.serialize(model, catalog)

        assert result.document_values["Historique"] == "one two three four"
        assert result.document_values["Historique (suite)"] == "five"

    def test_manual_continuation_exported(self, serializer, catalog):
        model = SemanticModel()
        model.set("clinicalHistory", "Chute")
        model.set("clinicalHistoryContinued", "Voir note")

        result = serializer.serialize(model, catalog)

        assert result.document_values["Historique (suite)"] == "Voir note"

    def test_sequela_rows_compacted(self, serializer, catalog):
        model = SemanticModel()
        model.update_sequela(2, code="B2")

        result = serializer.serialize(model, catalog)

        assert result.document_values["Séquelle code 1"] == "B2"
        assert "Séquelle code 2" not in result.document_values
        assert result.document_values["Séquelles actuelles"].startswith("Code: B2 |")

    def test_contaminated_nb_cleared(self, serializer, catalog):
        model = SemanticModel()
        model.set("noteBene", CONTAMINATED_NB)

        result = serializer.serialize(model, catalog)

        assert result.document_values["NB"] == ""
        assert "NB" not in result.interchange
        assert len(result.findings) == 1
        assert result.findings[0].stage is SanitizeStage.EXPORT

    def test_module_leaves_without_destination_use_flat_key(
        self, serializer, catalog
    ):
        model = SemanticModel()
        model.set_module_value("knees", "specializedTests.lachman.right", "Positif")

        result = serializer.serialize(model, catalog)

        assert result.interchange["kneesSpecializedTestsLachmanRight"] == "Positif"
        assert result.module_data == {
            "knees": {"specializedTests": {"lachman": {"right": "Positif"}}}
        }

    def test_inactive_modules_not_emitted(self, serializer, catalog):
        result = serializer.serialize(SemanticModel(), catalog)

        assert "Hanche Trendelenburg droite" not in result.document_values
        assert result.module_data == {}
        assert not any(result.selected_modules.values())

    def test_selected_modules_flags(self, serializer, catalog, populated_model):
        result = serializer.serialize(populated_model, catalog)

        assert result.selected_modules["hips"] is True
        assert result.selected_modules["shoulders"] is True
        assert result.selected_modules["knees"] is False

    def test_unresolved_scalars_reported(self, serializer, catalog):
        model = SemanticModel()
        model.set("employer", "Construction ABC")

        result = serializer.serialize(model, catalog)

        assert result.unresolved == ["employer"]
        assert "Construction ABC" not in result.document_values.values()

    def test_interchange_excludes_widgets(self, serializer):
        catalog = DestinationCatalog.from_entries(
            [
                DestinationEntry(name="Tabac", type=FieldType.CHECKBOX),
                DestinationEntry(name="Nom du travailleur"),
            ]
        )
        model = SemanticModel()
        model.set("smokingStatus", "Oui")
        model.set("workerName", "Tremblay")

        result = serializer.serialize(model, catalog)

        assert result.document_values["Tabac"] == "Oui"
        assert result.interchange == {"Nom du travailleur": "Tremblay"}


class TestDates:
    def test_parse_date_formats(self):
        assert parse_date("2024-11-02") == parse_date("02/11/2024")
        assert parse_date("not a date") is None

    def test_derive_age(self):
        assert derive_age("1980-05-12", "2024-05-11") == "43"
        assert derive_age("1980-05-12", "2024-05-12") == "44"
        assert derive_age("1980-05-12", "") == ""
        assert derive_age("2030-01-01", "2024-01-01") == ""
