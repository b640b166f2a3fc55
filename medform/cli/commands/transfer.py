"""Import and export commands.

Thin adapters between click and the import/export use cases. The model
travels between commands as a JSON snapshot file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console

from ...application.models import ExportRequest, ImportRequest
from ..helpers import build_container, load_catalog, restore_snapshot, save_snapshot
from ..presenters.mapping_table import FillPlanPresenter

if TYPE_CHECKING:
    from ...domain.entities.catalog import DestinationCatalog
    from ...infrastructure.container import DependencyContainer

console = Console()

_config_option = click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a medform.toml config file (default: ./medform.toml)",
)
_verbose_option = click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)


@click.command()
@click.argument("catalog_file", type=click.Path(exists=True, path_type=Path))
@click.argument("source_file", type=click.Path(path_type=Path))
@click.option(
    "--snapshot",
    "snapshot_file",
    type=click.Path(path_type=Path),
    help="Write the reconciled model to this JSON file",
)
@_config_option
@_verbose_option
def import_command(
    catalog_file: Path,
    source_file: Path,
    snapshot_file: Path | None,
    config_file: Path | None,
    verbose: int,
) -> None:
    """Reconcile an external JSON map into the semantic model.

    SOURCE_FILE may be keyed by destination names, semantic keys, flattened
    module paths or nested module objects.
    """
    container = build_container(console, verbose=verbose, config_file=config_file)
    catalog = load_catalog(container, catalog_file)
    response = container.create_import_use_case().execute(
        ImportRequest(source=source_file, catalog=catalog)
    )
    if not response.success:
        raise click.ClickException(response.error or "Import failed")
    for message in response.diagnostics:
        console.print(f"[dim]{message}[/dim]")
    if snapshot_file is not None:
        path = save_snapshot(container, snapshot_file)
        console.print(f"[green]✓[/green] Model saved to {path}")
    container.create_logger().log_final_stats()


@click.command()
@click.argument("catalog_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--snapshot",
    "snapshot_file",
    type=click.Path(exists=True, path_type=Path),
    help="Saved model to export",
)
@click.option(
    "--source",
    "source_file",
    type=click.Path(exists=True, path_type=Path),
    help="Interchange file to import before exporting",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(path_type=Path),
    required=True,
    help="Where to write the interchange JSON",
)
@_config_option
@_verbose_option
def export_command(
    catalog_file: Path,
    snapshot_file: Path | None,
    source_file: Path | None,
    output_file: Path,
    config_file: Path | None,
    verbose: int,
) -> None:
    """Export a model as a flat interchange map keyed by destination names.

    Examples:

    \b
        medform export catalog.json --snapshot model.json --output out.json
        medform export new-catalog.json --source old.json --output out.json
    """
    container = build_container(console, verbose=verbose, config_file=config_file)
    catalog = load_catalog(container, catalog_file)
    _prepare_session(container, catalog, snapshot_file, source_file)
    response = container.create_export_use_case().execute(
        ExportRequest(catalog=catalog, output=output_file)
    )
    if not response.success:
        raise click.ClickException(response.error or "Export failed")
    container.create_logger().log_final_stats()


@click.command()
@click.argument("catalog_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--snapshot",
    "snapshot_file",
    type=click.Path(exists=True, path_type=Path),
    help="Saved model to plan",
)
@click.option(
    "--source",
    "source_file",
    type=click.Path(exists=True, path_type=Path),
    help="Interchange file to import before planning",
)
@_config_option
@_verbose_option
def fill_plan_command(
    catalog_file: Path,
    snapshot_file: Path | None,
    source_file: Path | None,
    config_file: Path | None,
    verbose: int,
) -> None:
    """Show how each exported value would be written into the document."""
    container = build_container(console, verbose=verbose, config_file=config_file)
    catalog = load_catalog(container, catalog_file)
    _prepare_session(container, catalog, snapshot_file, source_file)
    response = container.create_export_use_case().execute(
        ExportRequest(catalog=catalog)
    )
    if not response.success or response.fill_plan is None:
        raise click.ClickException(response.error or "Fill planning failed")
    FillPlanPresenter(console).present(response.fill_plan)


def _prepare_session(
    container: DependencyContainer,
    catalog: DestinationCatalog,
    snapshot_file: Path | None,
    source_file: Path | None,
) -> None:
    if snapshot_file is None and source_file is None:
        raise click.UsageError("Provide --snapshot or --source")
    if snapshot_file is not None and source_file is not None:
        raise click.UsageError("--snapshot and --source are mutually exclusive")
    container.create_session().set_catalog(catalog)
    if snapshot_file is not None:
        restore_snapshot(container, snapshot_file)
        return
    response = container.create_import_use_case().execute(
        ImportRequest(source=source_file, catalog=catalog)
    )
    if not response.success:
        raise click.ClickException(response.error or "Import failed")
