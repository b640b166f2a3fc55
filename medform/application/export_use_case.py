"""Export of the form session to an interchange file and a filled document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import ExportResponse

if TYPE_CHECKING:
    from ..domain.services.export.fill_plan import FillPlanner
    from .models import ExportRequest
    from .ports.repositories import InterchangeRepositoryPort
    from .ports.services import DocumentFillPort, LoggerPort
    from .session import FormSession


@dataclass(slots=True)
class ExportDependencies:
    logger: LoggerPort
    session: FormSession
    interchange_repository: InterchangeRepositoryPort
    fill_planner: FillPlanner
    document_filler: DocumentFillPort | None = None


class ExportUseCase:
    pass

    def __init__(self, dependencies: ExportDependencies) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._session = dependencies.session
        self._interchange_repository = dependencies.interchange_repository
        self._fill_planner = dependencies.fill_planner
        self._document_filler = dependencies.document_filler

    def execute(self, request: ExportRequest) -> ExportResponse:
        """Serialize the session model.

        The interchange map is written when ``request.output`` is set. The
        destination map is planned against the catalog and, when a document
        and a filler are available, handed to the filler. A fill failure is
        reported in the response; the model is never affected.
        """
        response = ExportResponse()
        try:
            if request.catalog != self._session.catalog:
                self._session.set_catalog(request.catalog)
            result = self._session.export()
            response.export = result
            response.fill_plan = self._fill_planner.plan(
                result.document_values, request.catalog
            )
            for key, reason in response.fill_plan.failed:
                self.logger.verbose(f"{key}: not filled ({reason})")
            if request.output is not None:
                response.interchange_path = self._interchange_repository.write(
                    request.output, result.interchange
                )
                self.logger.success(f"Interchange written to {response.interchange_path}")
        except Exception as exc:
            response.success = False
            response.error = str(exc)
            self.logger.error(f"Export failed: {exc}")
            return response

        if request.document is None:
            return response
        if self._document_filler is None:
            self.logger.warning("No document filler configured; document not filled")
            return response
        try:
            response.filled_document = self._document_filler.fill(
                request.document,
                result.document_values,
                result.module_data,
                result.selected_modules,
                flatten=request.flatten,
            )
        except Exception as exc:
            response.success = False
            response.error = f"Document fill failed: {exc}"
            self.logger.error(response.error)
        return response
