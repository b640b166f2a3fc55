from __future__ import annotations

from typing_extensions import override

from ...application.ports.services import LoggerPort


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_catalog_loaded(
        self, source: str, *, field_count: int, text_field_count: int
    ) -> None:
        return None

    @override
    def log_mapping_summary(
        self, *, resolved: int, unresolved: int, ambiguous: int
    ) -> None:
        return None

    @override
    def log_import_complete(
        self, *, mapped: int, unmapped: int, findings: int
    ) -> None:
        return None

    @override
    def log_export_complete(
        self, *, destinations: int, interchange: int, unresolved: int
    ) -> None:
        return None

    @override
    def log_final_stats(self) -> None:
        return None
