from __future__ import annotations

from enum import IntEnum
from typing_extensions import override

from rich.console import Console

from ...application.ports.services import LoggerPort
from ...constants import LogLevels


class LogLevel(IntEnum):
    NORMAL = LogLevels.NORMAL
    VERBOSE = LogLevels.VERBOSE
    DEBUG = LogLevels.DEBUG


class ConsoleLogger(LoggerPort):
    pass

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._stats: dict[str, int] = {
            "catalogs_loaded": 0,
            "imports": 0,
            "exports": 0,
            "fields_mapped": 0,
            "findings": 0,
            "warnings": 0,
            "errors": 0,
        }

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            self.console.print(message)

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print(f"[dim]{message}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            self.console.print(f"[dim cyan]{message}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {message}")

    @override
    def log_catalog_loaded(
        self, source: str, *, field_count: int, text_field_count: int
    ) -> None:
        self._stats["catalogs_loaded"] += 1
        self.verbose(
            f"Loaded {field_count} fields ({text_field_count} text) from {source}"
        )

    @override
    def log_mapping_summary(
        self, *, resolved: int, unresolved: int, ambiguous: int
    ) -> None:
        self.verbose(
            f"Mapping: {resolved} resolved, {unresolved} unresolved, "
            f"{ambiguous} ambiguous"
        )

    @override
    def log_import_complete(
        self, *, mapped: int, unmapped: int, findings: int
    ) -> None:
        self._stats["imports"] += 1
        self._stats["fields_mapped"] += mapped
        self._stats["findings"] += findings
        message = f"Imported {mapped} values"
        if unmapped:
            message += f" ({unmapped} unmapped)"
        self.success(message)

    @override
    def log_export_complete(
        self, *, destinations: int, interchange: int, unresolved: int
    ) -> None:
        self._stats["exports"] += 1
        self.success(
            f"Exported {destinations} destination values "
            f"({interchange} in interchange)"
        )
        if unresolved and self.verbosity >= LogLevel.VERBOSE:
            self.verbose(f"{unresolved} populated keys have no destination")

    @override
    def log_final_stats(self) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print()
            self.console.print("[dim]Session Statistics:[/dim]")
            self.console.print(
                f"[dim]  Catalogs loaded: {self._stats['catalogs_loaded']}[/dim]"
            )
            self.console.print(
                f"[dim]  Imports: {self._stats['imports']} "
                f"({self._stats['fields_mapped']} values)[/dim]"
            )
            self.console.print(f"[dim]  Exports: {self._stats['exports']}[/dim]")
            if self._stats["findings"] > 0:
                self.console.print(
                    f"[dim yellow]  Contaminated values: {self._stats['findings']}[/dim yellow]"
                )
            if self._stats["warnings"] > 0:
                self.console.print(
                    f"[dim yellow]  Warnings: {self._stats['warnings']}[/dim yellow]"
                )
            if self._stats["errors"] > 0:
                self.console.print(
                    f"[dim red]  Errors: {self._stats['errors']}[/dim red]"
                )

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()
