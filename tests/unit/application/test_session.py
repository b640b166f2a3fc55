"""Tests for the form session."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from medform.application.session import FormSession
from medform.domain.entities.overflow import OverflowState
from medform.domain.services.overflow import SpeechSegment

CONTAMINATED_NB = "Trendelenburg positif a droite, " + "x" * 120


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def recorded_session(resolver, splitter, sanitizer, engine, serializer, logger):
    """A session whose logger records every call."""
    return FormSession(
        resolver=resolver,
        splitter=splitter,
        sanitizer=sanitizer,
        engine=engine,
        serializer=serializer,
        logger=logger,
        min_segment_confidence=0.5,
    )


class TestCatalogAndMapping:
    def test_set_catalog_returns_full_table(self, session, catalog):
        table = session.set_catalog(catalog)

        assert session.catalog == catalog
        assert table.get("hips.specializedTests.trendelenburg.right") == (
            "Hanche Trendelenburg droite"
        )
        assert session.revision == 1

    def test_set_catalog_logs_summary(self, recorded_session, logger, catalog):
        recorded_session.set_catalog(catalog)

        logger.log_mapping_summary.assert_called_once()
        kwargs = logger.log_mapping_summary.call_args.kwargs
        assert kwargs["ambiguous"] == 0
        assert kwargs["resolved"] == len(catalog) - 1

    def test_mapping_scoped_to_model(self, session, catalog):
        session.set_catalog(catalog)
        key = "hips.specializedTests.trendelenburg.right"

        assert key not in session.mapping()

        session.select_module("hips")

        assert session.mapping().get(key) == "Hanche Trendelenburg droite"

    def test_mapping_cached_until_snapshot_changes(self, session, catalog):
        session.set_catalog(catalog)

        first = session.mapping()
        assert session.mapping() is first

        session.add_sequela()
        second = session.mapping()
        assert second is not first
        assert "sequelaCode3" in second


class TestEdits:
    def test_set_value(self, session):
        session.set_value("workerName", "Tremblay")

        assert session.read("workerName") == "Tremblay"

    def test_set_value_on_primary_resplits(self, session):
        session.set_value("clinicalHistory", "one two three four five")

        state = session.model.overflow_state("clinicalHistory")
        assert state.primary == "one two three four"
        assert session.read("clinicalHistoryContinued") == "five"

    def test_set_value_on_continuation_is_manual(self, session):
        session.write_long_text("clinicalHistory", "one two three four five")
        session.set_value("clinicalHistoryContinued", "cinq")

        assert session.model.overflow_state("clinicalHistory") == OverflowState(
            primary="one two three four", manual="cinq"
        )

    def test_write_long_text_requires_pair(self, session):
        with pytest.raises(KeyError, match="not a long-text field"):
            session.write_long_text("workerName", "text")

    def test_update(self, session):
        session.update({"workerName": "Tremblay", "employer": "ABC"})

        assert session.model.scalars() == {"workerName": "Tremblay", "employer": "ABC"}

    def test_contaminated_read_is_empty(self, recorded_session, logger):
        recorded_session.set_value("noteBene", CONTAMINATED_NB)

        assert recorded_session.read("noteBene") == ""
        assert recorded_session.model.get("noteBene") == CONTAMINATED_NB
        logger.warning.assert_called_once()

    def test_sequela_operations(self, session):
        row = session.add_sequela()
        session.update_sequela(row.id, code="C3")
        session.delete_sequela(1)

        assert [r.code for r in session.model.sequelae] == ["", "C3"]

    def test_module_values(self, session):
        session.set_module_value("hips", "palpation", "Sensible")

        assert session.model.active_modules() == ["hips"]


class TestDictation:
    def test_dictate(self, session):
        state = session.dictate(
            "clinicalHistory",
            [SpeechSegment("Patient reports pain"), SpeechSegment("in the left shoulder")],
        )

        assert state.primary == "Patient reports pain"
        assert state.continuation == "in the left shoulder"
        assert not session.dictating

    def test_low_confidence_segments_skipped(self, recorded_session, logger):
        recorded_session.start_dictation("clinicalHistoryContinued")
        recorded_session.apply_segment(SpeechSegment("bonjour", 0.9))
        recorded_session.apply_segment(SpeechSegment("euh", 0.1))
        recorded_session.stop_dictation()

        assert recorded_session.model.get("clinicalHistory") == "bonjour"
        logger.debug.assert_called_once()

    def test_segment_without_dictation(self, session):
        with pytest.raises(RuntimeError, match="No dictation in progress"):
            session.apply_segment(SpeechSegment("texte"))

    def test_dictation_requires_pair(self, session):
        with pytest.raises(KeyError):
            session.start_dictation("workerName")


class TestImportExport:
    def test_import_swaps_model(self, session, catalog):
        session.set_catalog(catalog)
        previous = session.model

        result = session.import_data({"Nom du travailleur": "Tremblay"})

        assert session.model is result.model
        assert session.model is not previous
        assert session.read("workerName") == "Tremblay"

    def test_failed_import_keeps_model(self, session, catalog):
        session.set_catalog(catalog)
        session.set_value("workerName", "Tremblay")
        previous = session.model
        session.engine = MagicMock()
        session.engine.reconcile.side_effect = ValueError("boom")

        with pytest.raises(ValueError):
            session.import_data({"Nom du travailleur": "Gagnon"})

        assert session.model is previous
        assert session.read("workerName") == "Tremblay"

    def test_import_logs_findings(self, recorded_session, logger, catalog):
        recorded_session.set_catalog(catalog)

        recorded_session.import_data({"NB": CONTAMINATED_NB, "inconnu": "x"})

        logger.warning.assert_called_once()
        logger.verbose.assert_called_once_with("Unmapped keys: inconnu")
        logger.log_import_complete.assert_called_once_with(
            mapped=0, unmapped=1, findings=1
        )

    def test_export(self, recorded_session, logger, catalog):
        recorded_session.set_catalog(catalog)
        recorded_session.set_value("workerName", "Tremblay")

        result = recorded_session.export()

        assert result.interchange == {"Nom du travailleur": "Tremblay"}
        logger.log_export_complete.assert_called_once()

    def test_restore(self, session, populated_model):
        session.restore(populated_model)

        assert session.model is populated_model
