from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from ..domain.entities.catalog import DestinationCatalog
    from ..domain.services.export.fill_plan import FillPlan
    from ..domain.services.export.serializer import ExportResult
    from ..domain.services.sanitizer import ContaminationFinding


def _empty_str_list() -> list[str]:
    return []


def _empty_findings() -> list[ContaminationFinding]:
    return []


@dataclass(slots=True)
class ImportRequest:
    source: Path
    catalog: DestinationCatalog


@dataclass(slots=True)
class ImportResponse:
    success: bool = True
    mapped_count: int = 0
    unmapped: list[str] = field(default_factory=_empty_str_list)
    diagnostics: list[str] = field(default_factory=_empty_str_list)
    warnings: list[str] = field(default_factory=_empty_str_list)
    findings: list[ContaminationFinding] = field(default_factory=_empty_findings)
    error: str | None = None


@dataclass(slots=True)
class ExportRequest:
    catalog: DestinationCatalog
    output: Path | None = None
    document: bytes | None = None
    flatten: bool = False


@dataclass(slots=True)
class ExportResponse:
    success: bool = True
    interchange_path: Path | None = None
    filled_document: bytes | None = None
    export: ExportResult | None = None
    fill_plan: FillPlan | None = None
    error: str | None = None

    @property
    def unresolved(self) -> list[str]:
        return list(self.export.unresolved) if self.export is not None else []
