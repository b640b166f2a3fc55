"""Shared plumbing for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ..config import ConfigLoader
from ..infrastructure.container import DependencyContainer
from ..infrastructure.io.exceptions import MedformInfrastructureError

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from ..domain.entities.catalog import DestinationCatalog


def build_container(
    console: Console, *, verbose: int = 0, config_file: Path | None = None
) -> DependencyContainer:
    config = ConfigLoader.load(config_file=config_file)
    return DependencyContainer(verbose=verbose, console=console, config=config)


def load_catalog(container: DependencyContainer, path: Path) -> DestinationCatalog:
    try:
        catalog = container.create_catalog_repository().load(path)
    except MedformInfrastructureError as exc:
        raise click.ClickException(str(exc)) from exc
    container.create_logger().log_catalog_loaded(
        str(path),
        field_count=len(catalog),
        text_field_count=len(catalog.text_names()),
    )
    return catalog


def restore_snapshot(container: DependencyContainer, path: Path) -> None:
    """Load a saved model into the container's session."""
    try:
        model = container.create_snapshot_repository().load(path)
    except MedformInfrastructureError as exc:
        raise click.ClickException(str(exc)) from exc
    container.create_session().restore(model)


def save_snapshot(container: DependencyContainer, path: Path) -> Path:
    try:
        return container.create_snapshot_repository().save(
            container.create_session().model, path
        )
    except MedformInfrastructureError as exc:
        raise click.ClickException(str(exc)) from exc
