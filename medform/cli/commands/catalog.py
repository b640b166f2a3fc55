from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from ...domain.entities.catalog import DestinationCatalog
from ..helpers import build_container, load_catalog, restore_snapshot
from ..presenters.mapping_table import CatalogPresenter, MappingPresenter

console = Console()


@click.command()
@click.argument("catalog_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--text-only", is_flag=True, help="List only fields that accept free text"
)
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def catalog_command(catalog_file: Path, text_only: bool, verbose: int) -> None:
    """List the fields of a destination catalog in document order."""
    container = build_container(console, verbose=verbose)
    catalog = load_catalog(container, catalog_file)
    if text_only:
        catalog = DestinationCatalog.from_entries(
            entry for entry in catalog if entry.is_text
        )
    CatalogPresenter(console).present(catalog, title=f"Catalog: {catalog_file.name}")


@click.command()
@click.argument("catalog_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--snapshot",
    "snapshot_file",
    type=click.Path(exists=True, path_type=Path),
    help="Scope the table to the modules and sequela rows of a saved model",
)
@click.option(
    "--csv",
    "csv_file",
    type=click.Path(path_type=Path),
    help="Also write the mapping table to a CSV file",
)
@click.option(
    "--show-unresolved", is_flag=True, help="List keys with no destination field"
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a medform.toml config file (default: ./medform.toml)",
)
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
def mapping_command(
    catalog_file: Path,
    snapshot_file: Path | None,
    csv_file: Path | None,
    show_unresolved: bool,
    config_file: Path | None,
    verbose: int,
) -> None:
    """Resolve every semantic key against a destination catalog.

    Without a snapshot the full vocabulary is shown: every module leaf and
    every sequela row up to the configured maximum.

    Examples:

    \b
        medform mapping catalog.json
        medform mapping catalog.json --snapshot model.json --csv mapping.csv
    """
    container = build_container(console, verbose=verbose, config_file=config_file)
    catalog = load_catalog(container, catalog_file)
    session = container.create_session()
    table = session.set_catalog(catalog)
    if snapshot_file is not None:
        restore_snapshot(container, snapshot_file)
        table = session.mapping()
    MappingPresenter(console).present(table, show_unresolved=show_unresolved)
    if csv_file is not None:
        csv_file.parent.mkdir(parents=True, exist_ok=True)
        table.to_frame().to_csv(csv_file, index=False)
        console.print(f"[green]✓[/green] Mapping written to {csv_file}")
