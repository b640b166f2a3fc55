from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from ..application.export_use_case import ExportDependencies, ExportUseCase
from ..application.import_use_case import ImportDependencies, ImportUseCase
from ..application.session import FormSession
from ..config import MedformConfig
from ..domain.services.export.fill_plan import FillPlanner
from ..domain.services.export.serializer import ExportSerializer
from ..domain.services.overflow import OverflowSplitter
from ..domain.services.reconciliation.engine import ReconciliationEngine
from ..domain.services.resolution.resolver import FieldResolver
from ..domain.services.sanitizer import Sanitizer
from .io.catalog_loader import CatalogLoader
from .io.interchange_json import JsonInterchangeRepository, JsonModelSnapshotRepository
from .logging.console_logger import ConsoleLogger
from .logging.null_logger import NullLogger

if TYPE_CHECKING:
    from ..application.ports.repositories import (
        CatalogRepositoryPort,
        InterchangeRepositoryPort,
        ModelSnapshotRepositoryPort,
    )
    from ..application.ports.services import DocumentFillPort, LoggerPort


class DependencyContainer:
    pass

    def __init__(
        self,
        verbose: int = 0,
        console: Console | None = None,
        use_null_logger: bool = False,
        config: MedformConfig | None = None,
        document_filler: DocumentFillPort | None = None,
    ) -> None:
        super().__init__()
        self.verbose = verbose
        self.console = console or Console()
        self.use_null_logger = use_null_logger
        self.config = config or MedformConfig()
        self.document_filler = document_filler
        self._logger_instance: LoggerPort | None = None
        self._catalog_repository_instance: CatalogRepositoryPort | None = None
        self._interchange_repository_instance: InterchangeRepositoryPort | None = None
        self._snapshot_repository_instance: ModelSnapshotRepositoryPort | None = None
        self._resolver_instance: FieldResolver | None = None
        self._sanitizer_instance: Sanitizer | None = None
        self._splitter_instance: OverflowSplitter | None = None
        self._engine_instance: ReconciliationEngine | None = None
        self._serializer_instance: ExportSerializer | None = None
        self._fill_planner_instance: FillPlanner | None = None
        self._session_instance: FormSession | None = None

    def create_logger(self) -> LoggerPort:
        if self._logger_instance is None:
            if self.use_null_logger:
                self._logger_instance = NullLogger()
            else:
                self._logger_instance = ConsoleLogger(
                    console=self.console, verbosity=self.verbose
                )
        return self._logger_instance

    def create_catalog_repository(self) -> CatalogRepositoryPort:
        if self._catalog_repository_instance is None:
            self._catalog_repository_instance = CatalogLoader()
        return self._catalog_repository_instance

    def create_interchange_repository(self) -> InterchangeRepositoryPort:
        if self._interchange_repository_instance is None:
            self._interchange_repository_instance = JsonInterchangeRepository()
        return self._interchange_repository_instance

    def create_snapshot_repository(self) -> ModelSnapshotRepositoryPort:
        if self._snapshot_repository_instance is None:
            self._snapshot_repository_instance = JsonModelSnapshotRepository(
                max_sequela_rows=self.config.max_sequela_rows
            )
        return self._snapshot_repository_instance

    def create_resolver(self) -> FieldResolver:
        if self._resolver_instance is None:
            self._resolver_instance = FieldResolver(
                max_sequela_rows=self.config.max_sequela_rows
            )
        return self._resolver_instance

    def create_sanitizer(self) -> Sanitizer:
        if self._sanitizer_instance is None:
            self._sanitizer_instance = Sanitizer(
                threshold=self.config.contamination_threshold
            )
        return self._sanitizer_instance

    def create_splitter(self) -> OverflowSplitter:
        if self._splitter_instance is None:
            self._splitter_instance = OverflowSplitter(self.config.overflow_budget)
        return self._splitter_instance

    def create_reconciliation_engine(self) -> ReconciliationEngine:
        if self._engine_instance is None:
            self._engine_instance = ReconciliationEngine(
                self.create_resolver(),
                self.create_sanitizer(),
                splitter=self.create_splitter(),
                max_sequela_rows=self.config.max_sequela_rows,
                fuzzy_threshold=self.config.fuzzy_match_threshold,
            )
        return self._engine_instance

    def create_serializer(self) -> ExportSerializer:
        if self._serializer_instance is None:
            self._serializer_instance = ExportSerializer(
                self.create_resolver(),
                self.create_splitter(),
                self.create_sanitizer(),
            )
        return self._serializer_instance

    def create_fill_planner(self) -> FillPlanner:
        if self._fill_planner_instance is None:
            self._fill_planner_instance = FillPlanner(
                fuzzy_threshold=self.config.fuzzy_match_threshold
            )
        return self._fill_planner_instance

    def create_session(self) -> FormSession:
        if self._session_instance is None:
            self._session_instance = FormSession(
                resolver=self.create_resolver(),
                splitter=self.create_splitter(),
                sanitizer=self.create_sanitizer(),
                engine=self.create_reconciliation_engine(),
                serializer=self.create_serializer(),
                logger=self.create_logger(),
                min_segment_confidence=self.config.min_segment_confidence,
            )
        return self._session_instance

    def create_import_use_case(self) -> ImportUseCase:
        dependencies = ImportDependencies(
            logger=self.create_logger(),
            session=self.create_session(),
            interchange_repository=self.create_interchange_repository(),
        )
        return ImportUseCase(dependencies)

    def create_export_use_case(self) -> ExportUseCase:
        dependencies = ExportDependencies(
            logger=self.create_logger(),
            session=self.create_session(),
            interchange_repository=self.create_interchange_repository(),
            fill_planner=self.create_fill_planner(),
            document_filler=self.document_filler,
        )
        return ExportUseCase(dependencies)

    def reset(self) -> None:
        self._logger_instance = None
        self._catalog_repository_instance = None
        self._interchange_repository_instance = None
        self._snapshot_repository_instance = None
        self._resolver_instance = None
        self._sanitizer_instance = None
        self._splitter_instance = None
        self._engine_instance = None
        self._serializer_instance = None
        self._fill_planner_instance = None
        self._session_instance = None

    def override_logger(self, logger: LoggerPort) -> None:
        self._logger_instance = logger

    def override_interchange_repository(
        self, repository: InterchangeRepositoryPort
    ) -> None:
        self._interchange_repository_instance = repository

    def override_document_filler(self, document_filler: DocumentFillPort) -> None:
        self.document_filler = document_filler


def create_default_container(verbose: int = 0) -> DependencyContainer:
    return DependencyContainer(verbose=verbose)
