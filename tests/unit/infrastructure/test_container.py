"""Tests for dependency injection container.

These tests verify the container wires configuration into the domain
services, keeps singletons, and honours testing overrides.
"""

from unittest.mock import MagicMock

from rich.console import Console

from medform.application.export_use_case import ExportUseCase
from medform.application.import_use_case import ImportUseCase
from medform.config import MedformConfig
from medform.infrastructure.container import (
    DependencyContainer,
    create_default_container,
)
from medform.infrastructure.io import CatalogLoader, JsonInterchangeRepository
from medform.infrastructure.logging import ConsoleLogger, NullLogger


class MockLogger:
    """Mock logger for testing overrides."""

    def __init__(self):
        self.messages = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def verbose(self, message: str) -> None:
        self.messages.append(("verbose", message))


class TestDependencyContainer:
    """Tests for DependencyContainer class."""

    def test_create_container_with_defaults(self):
        """Test creating container with default configuration."""
        container = DependencyContainer()

        assert container.verbose == 0
        assert container.console is not None
        assert container.use_null_logger is False
        assert container.config == MedformConfig()

    def test_logger_selection(self):
        assert isinstance(DependencyContainer().create_logger(), ConsoleLogger)
        assert isinstance(
            DependencyContainer(use_null_logger=True).create_logger(), NullLogger
        )

    def test_console_passed_to_logger(self):
        console = Console()
        logger = DependencyContainer(console=console, verbose=2).create_logger()

        assert logger.console is console
        assert logger.verbosity == 2

    def test_singletons(self):
        container = DependencyContainer(use_null_logger=True)

        assert container.create_logger() is container.create_logger()
        assert container.create_resolver() is container.create_resolver()
        assert container.create_session() is container.create_session()
        assert isinstance(container.create_catalog_repository(), CatalogLoader)
        assert isinstance(
            container.create_interchange_repository(), JsonInterchangeRepository
        )

    def test_session_shares_services(self):
        container = DependencyContainer(use_null_logger=True)
        session = container.create_session()

        assert session.resolver is container.create_resolver()
        assert session.engine is container.create_reconciliation_engine()
        assert session.serializer is container.create_serializer()
        assert session.engine.resolver is session.resolver

    def test_config_propagates(self):
        config = MedformConfig(
            overflow_budget=300,
            contamination_threshold=50,
            min_segment_confidence=0.4,
            fuzzy_match_threshold=0.7,
            max_sequela_rows=4,
        )
        container = DependencyContainer(use_null_logger=True, config=config)

        assert container.create_splitter().budget == 300
        assert container.create_sanitizer().threshold == 50
        assert container.create_fill_planner().fuzzy_threshold == 0.7
        assert container.create_resolver().max_sequela_rows == 4
        assert container.create_reconciliation_engine().max_sequela_rows == 4
        assert container.create_reconciliation_engine().fuzzy_threshold == 0.7
        assert container.create_reconciliation_engine().splitter.budget == 300
        assert container.create_snapshot_repository().max_sequela_rows == 4
        session = container.create_session()
        assert session.min_segment_confidence == 0.4
        assert session.model.max_sequela_rows == 4

    def test_use_cases_are_transient(self):
        container = DependencyContainer(use_null_logger=True)

        first = container.create_import_use_case()
        assert isinstance(first, ImportUseCase)
        assert container.create_import_use_case() is not first
        assert isinstance(container.create_export_use_case(), ExportUseCase)

    def test_reset(self):
        container = DependencyContainer(use_null_logger=True)
        session = container.create_session()

        container.reset()

        assert container.create_session() is not session

    def test_override_logger(self):
        container = DependencyContainer()
        mock_logger = MockLogger()

        container.override_logger(mock_logger)

        assert container.create_logger() is mock_logger

    def test_override_interchange_repository(self):
        container = DependencyContainer(use_null_logger=True)
        repository = MagicMock()

        container.override_interchange_repository(repository)

        assert container.create_interchange_repository() is repository

    def test_override_document_filler(self):
        container = DependencyContainer(use_null_logger=True)
        filler = MagicMock()
        filler.fill.return_value = b"filled"

        container.override_document_filler(filler)
        use_case = container.create_export_use_case()

        assert use_case._document_filler is filler


class TestCreateDefaultContainer:
    def test_default(self):
        container = create_default_container(verbose=1)

        assert isinstance(container, DependencyContainer)
        assert container.verbose == 1
