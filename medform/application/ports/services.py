from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from typing import Any

    from ...domain.entities.catalog import DestinationCatalog
    from ...domain.services.overflow import SpeechSegment


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_catalog_loaded(
        self, source: str, *, field_count: int, text_field_count: int
    ) -> None: ...

    def log_mapping_summary(
        self, *, resolved: int, unresolved: int, ambiguous: int
    ) -> None: ...

    def log_import_complete(
        self, *, mapped: int, unmapped: int, findings: int
    ) -> None: ...

    def log_export_complete(
        self, *, destinations: int, interchange: int, unresolved: int
    ) -> None: ...

    def log_final_stats(self) -> None: ...


@runtime_checkable
class CatalogDiscoveryPort(Protocol):
    pass

    def discover(self, document: bytes) -> DestinationCatalog: ...


@runtime_checkable
class DocumentFillPort(Protocol):
    pass

    def fill(
        self,
        document: bytes,
        values: Mapping[str, str],
        module_data: Mapping[str, Mapping[str, Any]],
        selected_modules: Mapping[str, bool],
        *,
        flatten: bool = False,
    ) -> bytes: ...


@runtime_checkable
class SpeechSourcePort(Protocol):
    pass

    def segments(self) -> Iterable[SpeechSegment]: ...
