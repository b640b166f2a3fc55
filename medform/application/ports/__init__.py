"""Port interfaces for external dependencies.

This module defines abstract interfaces (protocols) that external
adapters must implement. This enables dependency injection and testing.
"""

from .repositories import (
    CatalogRepositoryPort,
    InterchangeRepositoryPort,
    ModelSnapshotRepositoryPort,
)
from .services import (
    CatalogDiscoveryPort,
    DocumentFillPort,
    LoggerPort,
    SpeechSourcePort,
)

__all__ = [
    "CatalogDiscoveryPort",
    "CatalogRepositoryPort",
    "DocumentFillPort",
    "InterchangeRepositoryPort",
    "LoggerPort",
    "ModelSnapshotRepositoryPort",
    "SpeechSourcePort",
]
