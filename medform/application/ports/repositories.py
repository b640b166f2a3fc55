from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path
    from typing import Any

    from ...domain.entities.catalog import DestinationCatalog
    from ...domain.entities.semantic_model import SemanticModel


@runtime_checkable
class CatalogRepositoryPort(Protocol):
    pass

    def load(self, path: Path) -> DestinationCatalog: ...


@runtime_checkable
class InterchangeRepositoryPort(Protocol):
    pass

    def read(self, path: Path) -> dict[str, Any]: ...

    def write(self, path: Path, values: Mapping[str, str]) -> Path: ...


@runtime_checkable
class ModelSnapshotRepositoryPort(Protocol):
    pass

    def load(self, path: Path) -> SemanticModel: ...

    def save(self, model: SemanticModel, path: Path) -> Path: ...
