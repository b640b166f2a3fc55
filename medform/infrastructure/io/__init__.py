"""File adapters for catalogs, interchange maps and model snapshots."""

from .catalog_loader import CatalogLoader
from .exceptions import (
    DataParseError,
    DataSourceError,
    DataSourceNotFoundError,
    DataValidationError,
    InterchangeLoadError,
    MedformInfrastructureError,
)
from .interchange_json import JsonInterchangeRepository, JsonModelSnapshotRepository

__all__ = [
    "CatalogLoader",
    "DataParseError",
    "DataSourceError",
    "DataSourceNotFoundError",
    "DataValidationError",
    "InterchangeLoadError",
    "JsonInterchangeRepository",
    "JsonModelSnapshotRepository",
    "MedformInfrastructureError",
]
