"""Tests for the import and export use cases."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from medform.application.export_use_case import ExportDependencies, ExportUseCase
from medform.application.import_use_case import ImportDependencies, ImportUseCase
from medform.application.models import ExportRequest, ImportRequest
from medform.domain.services.export.fill_plan import FillPlanner
from medform.infrastructure.io.exceptions import InterchangeLoadError
from medform.infrastructure.logging import NullLogger


class InMemoryInterchangeRepository:
    """Interchange repository backed by a dict of path to payload."""

    def __init__(self, files: dict[Path, dict[str, Any]] | None = None) -> None:
        self.files = dict(files or {})
        self.written: dict[Path, dict[str, str]] = {}

    def read(self, path: Path) -> dict[str, Any]:
        if path not in self.files:
            raise InterchangeLoadError(f"File not found: {path}")
        return self.files[path]

    def write(self, path: Path, values) -> Path:
        self.written[path] = dict(values)
        return path


@pytest.fixture
def source_path() -> Path:
    return Path("old-form.json")


@pytest.fixture
def repository(source_path) -> InMemoryInterchangeRepository:
    return InMemoryInterchangeRepository(
        {
            source_path: {
                "Nom du travailleur": "Tremblay",
                "Date de naissance": "12/05/1980",
                "inconnu": "x",
            }
        }
    )


def _import_use_case(session, repository) -> ImportUseCase:
    return ImportUseCase(
        ImportDependencies(
            logger=NullLogger(), session=session, interchange_repository=repository
        )
    )


def _export_use_case(session, repository, document_filler=None) -> ExportUseCase:
    return ExportUseCase(
        ExportDependencies(
            logger=NullLogger(),
            session=session,
            interchange_repository=repository,
            fill_planner=FillPlanner(),
            document_filler=document_filler,
        )
    )


class TestImportUseCase:
    def test_import(self, session, repository, catalog, source_path):
        response = _import_use_case(session, repository).execute(
            ImportRequest(source=source_path, catalog=catalog)
        )

        assert response.success
        assert response.error is None
        assert response.mapped_count == 2
        assert response.unmapped == ["inconnu"]
        assert response.warnings == [
            "dateOfBirth: Invalid date format (expected YYYY-MM-DD)"
        ]
        assert session.catalog == catalog
        assert session.model.get("workerName") == "Tremblay"

    def test_missing_file_leaves_model_untouched(self, session, repository, catalog):
        session.set_value("workerName", "Gagnon")
        previous = session.model

        response = _import_use_case(session, repository).execute(
            ImportRequest(source=Path("missing.json"), catalog=catalog)
        )

        assert not response.success
        assert "File not found" in response.error
        assert session.model is previous
        assert session.model.get("workerName") == "Gagnon"

    def test_failed_reconciliation_keeps_catalog(
        self, session, repository, catalog, source_path
    ):
        previous_catalog = session.catalog
        previous_model = session.model
        session.engine = MagicMock()
        session.engine.reconcile.side_effect = ValueError("unreadable payload")

        response = _import_use_case(session, repository).execute(
            ImportRequest(source=source_path, catalog=catalog)
        )

        assert not response.success
        assert response.error == "unreadable payload"
        session.engine.reconcile.assert_called_once()
        assert session.engine.reconcile.call_args.args[1] == catalog
        assert session.catalog is previous_catalog
        assert session.revision == 0
        assert session.model is previous_model

    def test_same_catalog_not_reloaded(self, session, repository, catalog, source_path):
        session.set_catalog(catalog)

        _import_use_case(session, repository).execute(
            ImportRequest(source=source_path, catalog=catalog)
        )

        assert session.revision == 1


class TestExportUseCase:
    def test_export_writes_interchange(self, session, repository, catalog):
        session.set_catalog(catalog)
        session.set_value("workerName", "Tremblay")
        output = Path("out.json")

        response = _export_use_case(session, repository).execute(
            ExportRequest(catalog=catalog, output=output)
        )

        assert response.success
        assert response.interchange_path == output
        assert repository.written[output] == {"Nom du travailleur": "Tremblay"}
        assert response.unresolved == []
        assert response.fill_plan is not None
        assert response.filled_document is None

    def test_fill_plan_covers_document_values(self, session, repository, catalog):
        session.set_value("workerName", "Tremblay")

        response = _export_use_case(session, repository).execute(
            ExportRequest(catalog=catalog)
        )

        assert response.interchange_path is None
        fields = [item.field_name for item in response.fill_plan.instructions]
        assert fields == ["Nom du travailleur"]

    def test_document_filled(self, session, repository, catalog):
        filler = MagicMock()
        filler.fill.return_value = b"%PDF-filled"
        session.set_value("workerName", "Tremblay")

        response = _export_use_case(session, repository, filler).execute(
            ExportRequest(catalog=catalog, document=b"%PDF", flatten=True)
        )

        assert response.success
        assert response.filled_document == b"%PDF-filled"
        args, kwargs = filler.fill.call_args
        assert args[0] == b"%PDF"
        assert args[1]["Nom du travailleur"] == "Tremblay"
        assert kwargs == {"flatten": True}

    def test_fill_failure_reported(self, session, repository, catalog):
        filler = MagicMock()
        filler.fill.side_effect = RuntimeError("corrupt document")
        session.set_value("workerName", "Tremblay")
        before = session.model.to_dict()

        response = _export_use_case(session, repository, filler).execute(
            ExportRequest(catalog=catalog, document=b"%PDF")
        )

        assert not response.success
        assert response.error == "Document fill failed: corrupt document"
        assert response.export is not None
        assert session.model.to_dict() == before

    def test_document_without_filler(self, session, repository, catalog):
        response = _export_use_case(session, repository).execute(
            ExportRequest(catalog=catalog, document=b"%PDF")
        )

        assert response.success
        assert response.filled_document is None

    def test_unresolved_keys_surface(self, session, repository, catalog):
        session.set_value("employer", "ABC")

        response = _export_use_case(session, repository).execute(
            ExportRequest(catalog=catalog)
        )

        assert response.unresolved == ["employer"]
