"""Tests for reconciliation of external data into the semantic model."""

from __future__ import annotations

from medform.domain.entities.catalog import DestinationCatalog
from medform.domain.services.reconciliation.engine import ReconciliationEngine
from medform.domain.services.sanitizer import SanitizeStage

CONTAMINATED_NB = "Trendelenburg positif a droite, " + "x" * 120


class TestKeyRecognition:
    def test_destination_names(self, engine, catalog):
        result = engine.reconcile(
            {"Nom du travailleur": "Tremblay", "Diagnostic": "Entorse"}, catalog
        )

        assert result.model.get("workerName") == "Tremblay"
        assert result.model.get("diagnosis") == "Entorse"
        assert result.unmapped == []

    def test_semantic_keys(self, engine, catalog):
        result = engine.reconcile({"workerName": "Tremblay"}, catalog)

        assert result.model.get("workerName") == "Tremblay"

    def test_fallback_literals_accepted_with_any_catalog(self, engine):
        catalog = DestinationCatalog.from_names(["Champ 1"])

        result = engine.reconcile({"Prénom du travailleur": "Julie"}, catalog)

        assert result.model.get("workerFirstName") == "Julie"

    def test_separator_and_case_insensitive_names(self, engine, catalog):
        result = engine.reconcile({"worker_name": "Tremblay"}, catalog)

        assert result.model.get("workerName") == "Tremblay"

    def test_nested_objects_are_flattened(self, engine, catalog):
        result = engine.reconcile({"worker": {"name": "Tremblay"}}, catalog)

        assert result.model.get("workerName") == "Tremblay"

    def test_unknown_keys_reported(self, engine, catalog):
        result = engine.reconcile(
            {"Accident du travail": True, "Couleur preferee": "bleu"}, catalog
        )

        assert result.unmapped == ["Accident du travail", "Couleur preferee"]
        assert result.mapped_count == 0

    def test_partial_names(self, engine, catalog):
        result = engine.reconcile(
            {"workerNameValue": "Tremblay", "diagnosticPrincipal": "Entorse"}, catalog
        )

        assert result.model.get("workerName") == "Tremblay"
        assert result.model.get("diagnosis") == "Entorse"
        assert result.unmapped == []
        assert "workerNameValue: partial match for workerName" in result.diagnostics

    def test_partial_destination_name(self, engine, catalog):
        result = engine.reconcile({"nomDuTravailleurComplet": "Tremblay"}, catalog)

        assert result.model.get("workerName") == "Tremblay"

    def test_partial_match_threshold(self, resolver, sanitizer, catalog):
        strict = ReconciliationEngine(resolver, sanitizer, fuzzy_threshold=1.0)

        result = strict.reconcile({"workerNam3Value": "Tremblay"}, catalog)

        assert result.unmapped == ["workerNam3Value"]

    def test_module_keys_never_partially_matched(self, engine, catalog):
        result = engine.reconcile({"hipsNomDuTravailleur": "x"}, catalog)

        assert result.model.scalars() == {}
        assert result.unmapped == ["hipsNomDuTravailleur"]

    def test_blank_values_skipped(self, engine, catalog):
        result = engine.reconcile({"Nom du travailleur": "  ", "Tabac": None}, catalog)

        assert result.model.scalars() == {}
        assert result.unmapped == []


class TestModules:
    def test_flattened_module_keys(self, engine, catalog):
        result = engine.reconcile(
            {"hipsSpecializedTestsTrendelenburgLeft": "Positif"}, catalog
        )

        model = result.model
        assert model.get_module_value("hips", "specializedTests.trendelenburg.left") == (
            "Positif"
        )
        assert "hips" in model.selected_modules

    def test_destination_names_of_module_leaves(self, engine, catalog):
        result = engine.reconcile({"Hanche Trendelenburg droite": "Négatif"}, catalog)

        assert (
            result.model.get_module_value("hips", "specializedTests.trendelenburg.right")
            == "Négatif"
        )

    def test_reconstructed_paths(self, engine, catalog):
        result = engine.reconcile(
            {"hanche_testsSpecialises_trendelenburg_droite": "+"}, catalog
        )

        assert (
            result.model.get_module_value("hips", "specializedTests.trendelenburg.right")
            == "+"
        )

    def test_nested_module_objects(self, engine, catalog):
        data = {
            "modules": {
                "shoulders": {"rangeOfMotion": {"flexion": {"rightActive": "150"}}}
            },
            "knees": {"specializedTests": {"lachman": {"left": "Positif"}}},
        }

        model = engine.reconcile(data, catalog).model

        assert model.get_module_value("shoulders", "rangeOfMotion.flexion.rightActive") == "150"
        assert model.get_module_value("knees", "specializedTests.lachman.left") == "Positif"

    def test_unknown_segment_diagnosed(self, engine, catalog):
        result = engine.reconcile({"hipsFooBar": "x"}, catalog)

        assert result.unmapped == ["hipsFooBar"]
        assert result.diagnostics == ["hipsFooBar: unknown segment in 'foobar'"]

    def test_invalid_tree_path_diagnosed(self, engine, catalog):
        result = engine.reconcile({"modules": {"hips": {"bogus": "x"}}}, catalog)

        assert result.diagnostics == ["hips.bogus: Unknown path 'bogus' for module hips"]
        assert result.model.active_modules() == []

    def test_unknown_module_tree_diagnosed(self, engine, catalog):
        result = engine.reconcile({"modules": {"spleen": {"a": "b"}}}, catalog)

        assert result.diagnostics == ["spleen.a: Unknown module: spleen"]

    def test_excluded_keys_never_read_as_module_data(self, engine, catalog):
        result = engine.reconcile({"hipsNB": "Revoir la hanche"}, catalog)

        assert result.unmapped == ["hipsNB"]
        assert "excluded" in result.diagnostics[0]
        assert result.model.active_modules() == []
        assert result.model.get("noteBene") == ""


class TestSequelae:
    def test_individual_rows(self, engine, catalog):
        result = engine.reconcile(
            {
                "Séquelle code 1": "102383",
                "Séquelle description 1": "Atteinte des tissus mous",
                "Séquelle % 1": "2",
                "sequelaCode3": "B3",
            },
            catalog,
        )

        rows = result.model.filled_sequelae()
        assert [(row.id, row.code) for row in rows] == [(1, "102383"), (2, "B3")]
        assert rows[0].percentage == "2"

    def test_combined_wins_over_individual(self, engine, catalog):
        result = engine.reconcile(
            {
                "Séquelle code 1": "X",
                "Séquelles actuelles": "Code:  | Description: D | %: 7",
            },
            catalog,
        )

        row = result.model.sequelae[0]
        assert (row.code, row.description, row.percentage) == ("X", "D", "7")

    def test_malformed_combined_string(self, engine, catalog):
        result = engine.reconcile(
            {"Séquelles actuelles": "Code: A1 | Description: Épaule | %: 5Code: B2 | %: 3"},
            catalog,
        )

        rows = result.model.filled_sequelae()
        assert [(row.code, row.description, row.percentage) for row in rows] == [
            ("A1", "Épaule", "5"),
            ("B2", "", "3"),
        ]

    def test_row_list(self, engine, catalog):
        data = {"sequelae": [{"code": "A", "description": "B", "pourcentage": 1}]}

        rows = engine.reconcile(data, catalog).model.filled_sequelae()

        assert [(row.code, row.description, row.percentage) for row in rows] == [
            ("A", "B", "1")
        ]

    def test_rows_beyond_maximum_dropped(self, engine, catalog):
        text = "\n".join(f"Code: C{index}" for index in range(1, 12))

        result = engine.reconcile({"Séquelles actuelles": text}, catalog)

        assert len(result.model.sequelae) == 10
        assert result.diagnostics == ["1 sequela rows dropped (limit 10)"]

    def test_floor_after_import(self, engine, catalog):
        result = engine.reconcile({}, catalog)

        assert len(result.model.sequelae) == 2


class TestSanitizeAndValidate:
    def test_contaminated_nb_cleared(self, engine, catalog):
        result = engine.reconcile({"NB": CONTAMINATED_NB}, catalog)

        assert result.model.get("noteBene") == ""
        assert len(result.findings) == 1
        assert result.findings[0].stage is SanitizeStage.IMPORT

    def test_validation_warnings_do_not_block(self, engine, catalog):
        result = engine.reconcile({"Date de naissance": "12/05/1980"}, catalog)

        assert result.warnings == [
            "dateOfBirth: Invalid date format (expected YYYY-MM-DD)"
        ]
        assert result.model.get("dateOfBirth") == "12/05/1980"

    def test_fresh_model_every_call(self, engine, catalog):
        first = engine.reconcile({"workerName": "A"}, catalog)
        second = engine.reconcile({"employer": "B"}, catalog)

        assert first.model is not second.model
        assert second.model.get("workerName") == ""

    def test_row_limit_follows_resolver(self, resolver, sanitizer, catalog):
        engine = ReconciliationEngine(resolver, sanitizer, max_sequela_rows=3)
        text = "\n".join(f"Code: C{index}" for index in range(1, 6))

        result = engine.reconcile({"Séquelles actuelles": text}, catalog)

        assert len(result.model.sequelae) == 3
