"""Export of the semantic model to destination-keyed maps.

The serializer only reads the model. It resolves every populated key,
re-splits overflow pairs, walks active modules, emits sequela rows in
both encodings, scrubs contaminated values and finally force-writes the
essential fields from their authoritative model values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from ....constants import EssentialFields, InterchangeKeys
from ...entities.catalog import FieldType
from ...entities.mapping import MappingTable
from ...entities.modules import MODULES, flat_key, leaf_key
from ..reconciliation.sequela_parser import encode_combined, individual_keys
from ..sanitizer import ContaminationFinding, SanitizeStage

if TYPE_CHECKING:
    from ...entities.catalog import DestinationCatalog
    from ...entities.semantic_model import SemanticModel
    from ..overflow import OverflowSplitter
    from ..resolution.resolver import FieldResolver
    from ..sanitizer import Sanitizer

_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%Y/%m/%d", "%d-%m-%Y")


@dataclass(slots=True)
class ExportResult:
    document_values: dict[str, str] = field(default_factory=dict)
    interchange: dict[str, str] = field(default_factory=dict)
    module_data: dict[str, dict[str, Any]] = field(default_factory=dict)
    selected_modules: dict[str, bool] = field(default_factory=dict)
    unresolved: list[str] = field(default_factory=list)
    findings: list[ContaminationFinding] = field(default_factory=list)
    mapping: MappingTable = field(default_factory=MappingTable)


class ExportSerializer:
    def __init__(
        self,
        resolver: FieldResolver,
        splitter: OverflowSplitter,
        sanitizer: Sanitizer,
    ) -> None:
        self.resolver = resolver
        self.splitter = splitter
        self.sanitizer = sanitizer

    def serialize(
        self, model: SemanticModel, catalog: DestinationCatalog
    ) -> ExportResult:
        """Build the destination-keyed maps for ``model``.

        Args:
            model: Model to export; never modified
            catalog: Destination catalog of the target document

        Returns:
            ExportResult with the full document map, the text-only
            interchange map and the module data for the fill call.
        """
        table = self.resolver.scoped_table(catalog, model.snapshot())
        result = ExportResult(mapping=table)
        values: dict[str, str] = {}
        key_of: dict[str, str] = {}

        def emit(key: str, value: str, fallback: str | None = None) -> None:
            if not value:
                return
            destination = table.get(key) or fallback
            if destination is None:
                result.unresolved.append(key)
                return
            values[destination] = value
            key_of[destination] = key

        for key, value in model.scalars().items():
            if model.pair_for(key) is None:
                emit(key, value)

        for pair in model.overflow_pairs:
            state = model.overflow_state(pair.primary_key)
            state = self.splitter.write(state, state.text)
            emit(pair.primary_key, state.primary)
            emit(pair.continuation_key, state.continuation)

        for module in model.active_modules():
            for path, value in model.module_leaves(module).items():
                emit(leaf_key(module, path), value, fallback=flat_key(module, path))

        filled = model.filled_sequelae()
        for position, row in enumerate(filled, start=1):
            for field_name, key in individual_keys(position).items():
                emit(key, getattr(row, field_name), fallback=key)
        emit(
            InterchangeKeys.CURRENT_SEQUELAE,
            encode_combined(filled),
            fallback=InterchangeKeys.CURRENT_SEQUELAE,
        )

        values, findings = self.sanitizer.scrub(
            values, SanitizeStage.EXPORT, key_of=key_of
        )
        result.findings.extend(findings)

        for key in EssentialFields.KEYS:
            destination = table.get(key)
            if destination is None:
                continue
            values[destination] = self._authoritative(model, key)
            key_of[destination] = key

        result.document_values = values
        result.interchange = {
            name: value
            for name, value in values.items()
            if value and catalog.type_of(name) in (None, FieldType.TEXT)
        }
        result.module_data = {
            module: model.module_tree(module) for module in model.active_modules()
        }
        result.selected_modules = {
            module: module in model.selected_modules for module in MODULES
        }
        return result

    def _authoritative(self, model: SemanticModel, key: str) -> str:
        value = model.get(key)
        if key == "age" and not value:
            value = derive_age(model.get("dateOfBirth"), model.get("evaluationDate"))
        return self.sanitizer.check(key, value)


def parse_date(value: str) -> date | None:
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def derive_age(date_of_birth: str, on_date: str) -> str:
    """Age in whole years at ``on_date``, or an empty string."""
    born = parse_date(date_of_birth) if date_of_birth else None
    when = parse_date(on_date) if on_date else None
    if born is None or when is None or when < born:
        return ""
    years = when.year - born.year - ((when.month, when.day) < (born.month, born.day))
    return str(years)
