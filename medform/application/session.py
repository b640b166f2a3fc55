"""In-memory form session.

The session is the only writer of the semantic model. Edits, speech
segments and imports go through it; the mapping table is re-derived
whenever the catalog or the resolution-relevant part of the model changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..constants import Defaults
from ..domain.entities.catalog import DestinationCatalog
from ..domain.entities.semantic_model import ModelSnapshot, SemanticModel
from ..domain.services.sanitizer import SanitizeStage

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..domain.entities.mapping import MappingTable
    from ..domain.entities.overflow import OverflowState
    from ..domain.entities.sequela import SequelaRow
    from ..domain.services.export.serializer import ExportResult, ExportSerializer
    from ..domain.services.overflow import (
        OverflowSplitter,
        SpeechAccumulator,
        SpeechSegment,
    )
    from ..domain.services.reconciliation.engine import (
        ReconciliationEngine,
        ReconciliationResult,
    )
    from ..domain.services.resolution.resolver import FieldResolver
    from ..domain.services.sanitizer import Sanitizer
    from .ports.services import LoggerPort


class FormSession:
    """Single-writer holder of the semantic model and the active catalog."""

    def __init__(
        self,
        *,
        resolver: FieldResolver,
        splitter: OverflowSplitter,
        sanitizer: Sanitizer,
        engine: ReconciliationEngine,
        serializer: ExportSerializer,
        logger: LoggerPort,
        min_segment_confidence: float = Defaults.MIN_SEGMENT_CONFIDENCE,
        model: SemanticModel | None = None,
    ) -> None:
        self.resolver = resolver
        self.splitter = splitter
        self.sanitizer = sanitizer
        self.engine = engine
        self.serializer = serializer
        self.logger = logger
        self.min_segment_confidence = min_segment_confidence
        self._model = (
            model
            if model is not None
            else SemanticModel(max_sequela_rows=resolver.max_sequela_rows)
        )
        self._catalog = DestinationCatalog()
        self._revision = 0
        self._mapping_cache: tuple[int, ModelSnapshot, MappingTable] | None = None
        self._dictation: tuple[str, SpeechAccumulator] | None = None

    @property
    def model(self) -> SemanticModel:
        """The live model. Callers read it; every write goes through the session."""
        return self._model

    @property
    def catalog(self) -> DestinationCatalog:
        return self._catalog

    @property
    def revision(self) -> int:
        return self._revision

    def set_catalog(self, catalog: DestinationCatalog) -> MappingTable:
        self._catalog = catalog
        self._revision += 1
        self._mapping_cache = None
        table = self.resolver.mapping_table(catalog)
        ambiguous = table.ambiguous()
        for entry in ambiguous:
            self.logger.debug(
                f"{entry.key}: matched {entry.destination!r}, "
                f"also matches {', '.join(entry.alternatives)}"
            )
        self.logger.log_mapping_summary(
            resolved=len(table.resolved()),
            unresolved=len(table.unresolved()),
            ambiguous=len(ambiguous),
        )
        return table

    def mapping(self) -> MappingTable:
        """Mapping table for the current catalog and model snapshot."""
        snapshot = self._model.snapshot()
        cached = self._mapping_cache
        if cached is not None and cached[0] == self._revision and cached[1] == snapshot:
            return cached[2]
        table = self.resolver.scoped_table(self._catalog, snapshot)
        self._mapping_cache = (self._revision, snapshot, table)
        return table

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def read(self, key: str) -> str:
        """Value of ``key`` as shown to the user; contaminated values read as empty."""
        value = self._model.get(key)
        finding = self.sanitizer.inspect(key, value, SanitizeStage.READ)
        if finding is None:
            return value
        self.logger.warning(
            f"{key}: cleared {finding.value_length} characters mentioning "
            f"{finding.keyword!r}"
        )
        return ""

    def set_value(self, key: str, value: str) -> None:
        pair = self._model.pair_for(key)
        if pair is None:
            self._model.set(key, value)
            return
        state = self._model.overflow_state(pair.primary_key)
        if key == pair.primary_key:
            state = self.splitter.edit_primary(state, value)
        else:
            state = self.splitter.edit_continuation(state, value)
        self._model.set_overflow_state(pair.primary_key, state)

    def write_long_text(self, key: str, text: str) -> OverflowState:
        """Store ``text`` across the overflow pair whose primary slot is ``key``."""
        primary_key = self._primary_key(key)
        state = self.splitter.write(self._model.overflow_state(primary_key), text)
        self._model.set_overflow_state(primary_key, state)
        return state

    def update(self, values: Mapping[str, str]) -> None:
        for key, value in values.items():
            self.set_value(key, value)

    # ------------------------------------------------------------------
    # Modules and sequelae
    # ------------------------------------------------------------------

    def select_module(self, module: str, selected: bool = True) -> None:
        self._model.select_module(module, selected)

    def set_module_value(self, module: str, path: str, value: str) -> None:
        self._model.set_module_value(module, path, value)

    def add_sequela(self) -> SequelaRow:
        return self._model.add_sequela()

    def delete_sequela(self, row_id: int) -> None:
        self._model.delete_sequela(row_id)

    def update_sequela(
        self,
        row_id: int,
        *,
        code: str | None = None,
        description: str | None = None,
        percentage: str | None = None,
    ) -> SequelaRow:
        return self._model.update_sequela(
            row_id, code=code, description=description, percentage=percentage
        )

    # ------------------------------------------------------------------
    # Dictation
    # ------------------------------------------------------------------

    @property
    def dictating(self) -> bool:
        return self._dictation is not None

    def start_dictation(self, key: str) -> None:
        primary_key = self._primary_key(key)
        accumulator = self.splitter.start_dictation(
            self._model.overflow_state(primary_key),
            min_confidence=self.min_segment_confidence,
        )
        self._dictation = (primary_key, accumulator)

    def apply_segment(self, segment: SpeechSegment) -> OverflowState:
        """Apply one streamed segment to the field being dictated.

        Raises:
            RuntimeError: If no dictation is in progress
        """
        if self._dictation is None:
            raise RuntimeError("No dictation in progress")
        primary_key, accumulator = self._dictation
        current = self._model.overflow_state(primary_key)
        state = self.splitter.apply_segment(current, accumulator, segment)
        if state is current:
            self.logger.debug(
                f"Speech segment ignored (confidence {segment.confidence:.2f})"
            )
            return state
        self._model.set_overflow_state(primary_key, state)
        return state

    def dictate(self, key: str, segments: Iterable[SpeechSegment]) -> OverflowState:
        self.start_dictation(key)
        try:
            for segment in segments:
                self.apply_segment(segment)
        finally:
            self.stop_dictation()
        return self._model.overflow_state(self._primary_key(key))

    def stop_dictation(self) -> None:
        self._dictation = None

    # ------------------------------------------------------------------
    # Import and export
    # ------------------------------------------------------------------

    def import_data(
        self,
        data: Mapping[str, Any],
        catalog: DestinationCatalog | None = None,
    ) -> ReconciliationResult:
        """Reconcile ``data`` into a new model and swap it in.

        With ``catalog``, reconciliation runs against it and the session
        adopts it together with the new model. Neither the model nor the
        catalog changes unless reconciliation succeeds.
        """
        target = self._catalog if catalog is None else catalog
        result = self.engine.reconcile(data, target)
        if target != self._catalog:
            self.set_catalog(target)
        self._dictation = None
        self._model = result.model
        for message in result.diagnostics:
            self.logger.debug(message)
        for message in result.warnings:
            self.logger.warning(message)
        for finding in result.findings:
            self.logger.warning(
                f"{finding.key}: contaminated value cleared on import "
                f"({finding.value_length} characters, {finding.keyword!r})"
            )
        if result.unmapped:
            self.logger.verbose(f"Unmapped keys: {', '.join(result.unmapped)}")
        self.logger.log_import_complete(
            mapped=result.mapped_count,
            unmapped=len(result.unmapped),
            findings=len(result.findings),
        )
        return result

    def restore(self, model: SemanticModel) -> None:
        """Swap in a previously saved model."""
        self._dictation = None
        self._model = model

    def export(self) -> ExportResult:
        result = self.serializer.serialize(self._model, self._catalog)
        for finding in result.findings:
            self.logger.warning(
                f"{finding.key}: contaminated value cleared on export "
                f"({finding.value_length} characters, {finding.keyword!r})"
            )
        for key in result.unresolved:
            self.logger.debug(f"{key}: no destination, omitted")
        self.logger.log_export_complete(
            destinations=len(result.document_values),
            interchange=len(result.interchange),
            unresolved=len(result.unresolved),
        )
        return result

    def _primary_key(self, key: str) -> str:
        pair = self._model.pair_for(key)
        if pair is None:
            raise KeyError(f"{key} is not a long-text field")
        return pair.primary_key
