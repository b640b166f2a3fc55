"""medform package.

Field resolution and data reconciliation for medical report forms whose
fields are discovered at runtime.

Features:
- Declarative resolution of semantic keys to discovered field names
- Overflow splitting of long text across primary and continuation slots
- Reconciliation of external JSON maps into the semantic model
- Export of the model to destination-keyed maps and fill plans
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("medform")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Core exports
from medform.domain.entities.catalog import DestinationCatalog, DestinationEntry
from medform.domain.entities.semantic_model import SemanticModel
from medform.domain.services.export.serializer import ExportSerializer
from medform.domain.services.reconciliation.engine import ReconciliationEngine
from medform.domain.services.resolution.resolver import FieldResolver

__all__ = [
    "__version__",
    # Catalog
    "DestinationCatalog",
    "DestinationEntry",
    # Model
    "SemanticModel",
    # Services
    "ExportSerializer",
    "FieldResolver",
    "ReconciliationEngine",
]
