"""Import of a JSON interchange file into the form session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import ImportResponse

if TYPE_CHECKING:
    from .models import ImportRequest
    from .ports.repositories import InterchangeRepositoryPort
    from .ports.services import LoggerPort
    from .session import FormSession


@dataclass(slots=True)
class ImportDependencies:
    logger: LoggerPort
    session: FormSession
    interchange_repository: InterchangeRepositoryPort


class ImportUseCase:
    """Read an interchange file and swap the reconciled model into the session.

    A read or parse failure aborts the whole import and leaves the session
    model untouched.
    """

    def __init__(self, dependencies: ImportDependencies) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._session = dependencies.session
        self._interchange_repository = dependencies.interchange_repository

    def execute(self, request: ImportRequest) -> ImportResponse:
        response = ImportResponse()
        try:
            data = self._interchange_repository.read(request.source)
            result = self._session.import_data(data, request.catalog)
            response.mapped_count = result.mapped_count
            response.unmapped = list(result.unmapped)
            response.diagnostics = list(result.diagnostics)
            response.warnings = list(result.warnings)
            response.findings = list(result.findings)
        except Exception as exc:
            response.success = False
            response.error = str(exc)
            self.logger.error(f"Import from {request.source} failed: {exc}")
        return response
