from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from ...domain.services.validation import humanize_key

if TYPE_CHECKING:
    from rich.console import Console

    from ...domain.entities.catalog import DestinationCatalog
    from ...domain.entities.mapping import MappingTable
    from ...domain.services.export.fill_plan import FillPlan


class CatalogPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, catalog: DestinationCatalog, *, title: str) -> None:
        table = Table(title=title)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Page", justify="right")
        for index, entry in enumerate(catalog, start=1):
            page = str(entry.position.page) if entry.position is not None else ""
            table.add_row(str(index), entry.name, entry.type.value, page)
        self.console.print(table)
        self.console.print(
            f"[bold]{len(catalog)}[/bold] fields, "
            f"[bold]{len(catalog.text_names())}[/bold] text"
        )


class MappingPresenter:
    """Render a mapping table, unresolved keys last."""

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, mapping: MappingTable, *, show_unresolved: bool = False) -> None:
        table = Table(title="Field Mapping")
        table.add_column("Semantic key", style="cyan")
        table.add_column("Label")
        table.add_column("Destination")
        table.add_column("Rule", style="dim")
        table.add_column("Also matched", style="yellow")
        for entry in mapping.resolved():
            table.add_row(
                entry.key,
                humanize_key(entry.key),
                entry.destination or "",
                entry.rule.value if entry.rule else "",
                ", ".join(entry.alternatives),
            )
        unresolved = mapping.unresolved()
        if show_unresolved:
            for key in unresolved:
                table.add_row(key, humanize_key(key), "[dim]-[/dim]", "", "")
        self.console.print(table)
        self.console.print(
            f"[green]{len(mapping.resolved())}[/green] resolved, "
            f"[yellow]{len(unresolved)}[/yellow] unresolved, "
            f"{len(mapping.ambiguous())} ambiguous"
        )


class FillPlanPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, plan: FillPlan) -> None:
        table = Table(title="Fill Plan")
        table.add_column("Field", style="cyan")
        table.add_column("Action")
        table.add_column("Value", overflow="fold")
        table.add_column("Match", style="dim")
        for instruction in plan.instructions:
            match = instruction.match.value
            if instruction.score < 1.0:
                match += f" ({instruction.score:.0%})"
            table.add_row(
                instruction.field_name,
                instruction.action.value,
                instruction.value,
                match,
            )
        self.console.print(table)
        for key, reason in plan.failed:
            self.console.print(f"[yellow]⚠[/yellow] {key}: {reason}")
        self.console.print(
            f"[bold]{plan.filled_count}[/bold] of {plan.attempted_count} values planned"
        )
